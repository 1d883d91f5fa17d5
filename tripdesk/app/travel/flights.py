"""Mocked flight tables: durations, haul-band prices and airlines per region."""

import hashlib
from dataclasses import dataclass

DEFAULT_DURATION_HOURS = 2.5

# Symmetric: a missing (a, b) entry is looked up as (b, a)
DURATION_HOURS: dict[str, dict[str, float]] = {
    "ATH": {"CDG": 3.5, "LHR": 3.8, "FCO": 2.0, "BCN": 3.0, "MAD": 3.5, "AMS": 3.5, "BER": 2.8, "DXB": 4.5, "JFK": 11.0},
    "CDG": {"ATH": 3.5, "LHR": 1.2, "FCO": 2.0, "BCN": 2.0, "MAD": 2.0, "AMS": 1.0, "BER": 1.8, "DXB": 6.5, "JFK": 8.5},
    "LHR": {"ATH": 3.8, "CDG": 1.2, "FCO": 2.5, "BCN": 2.2, "MAD": 2.5, "AMS": 1.0, "BER": 2.0, "DXB": 7.0, "JFK": 8.0},
}

# (base fare EUR, spread EUR) per haul band
SHORT_HAUL = (80.0, 40.0)
MEDIUM_HAUL = (150.0, 100.0)
LONG_HAUL = (400.0, 200.0)


@dataclass(frozen=True)
class Airline:
    """Operating carrier."""

    code: str
    name: str


EUROPEAN_AIRLINES = [
    Airline("A3", "Aegean Airlines"),
    Airline("AF", "Air France"),
    Airline("BA", "British Airways"),
    Airline("LH", "Lufthansa"),
    Airline("KL", "KLM"),
    Airline("IB", "Iberia"),
    Airline("AZ", "ITA Airways"),
    Airline("FR", "Ryanair"),
    Airline("U2", "easyJet"),
]
MIDDLE_EAST_AIRLINES = [
    Airline("EK", "Emirates"),
    Airline("QR", "Qatar Airways"),
    Airline("EY", "Etihad Airways"),
    Airline("TK", "Turkish Airlines"),
]
US_AIRLINES = [
    Airline("AA", "American Airlines"),
    Airline("DL", "Delta Air Lines"),
    Airline("UA", "United Airlines"),
]
ASIAN_AIRLINES = [
    Airline("SQ", "Singapore Airlines"),
    Airline("NH", "All Nippon Airways"),
    Airline("CX", "Cathay Pacific"),
    Airline("TG", "Thai Airways"),
]

EUROPEAN_CODES = frozenset(
    ["ATH", "CDG", "LHR", "FCO", "BCN", "MAD", "AMS", "BER", "MUC", "FRA", "VIE", "ZRH",
     "BRU", "LIS", "DUB", "CPH", "ARN", "OSL", "HEL", "MXP", "VCE", "PRG", "BUD", "WAW"]
)
MIDDLE_EAST_CODES = frozenset(["DXB", "DOH", "AUH", "RUH", "JED", "CAI", "TLV", "IST"])
US_CODES = frozenset(["JFK", "LAX", "ORD", "MIA", "SFO", "BOS", "IAD"])
ASIAN_CODES = frozenset(
    ["NRT", "SIN", "HKG", "PEK", "PVG", "ICN", "BKK", "KUL", "CGK", "MNL", "DEL", "BOM", "SYD", "MEL"]
)


def flight_duration_hours(origin: str, dest: str) -> float:
    """Block time between two airports."""
    duration = DURATION_HOURS.get(origin, {}).get(dest) or DURATION_HOURS.get(dest, {}).get(origin)
    return duration if duration else DEFAULT_DURATION_HOURS


def _route_fraction(origin: str, dest: str) -> float:
    """Stable value in [0, 1) for a route."""
    digest = hashlib.sha256(f"{origin}-{dest}".encode()).digest()
    return int.from_bytes(digest[:4], "big") / 2**32


def flight_price(origin: str, dest: str) -> float:
    """Deterministic one-way fare in EUR from the route's haul band."""
    duration = flight_duration_hours(origin, dest)
    if duration < 2:
        base, spread = SHORT_HAUL
    elif duration < 5:
        base, spread = MEDIUM_HAUL
    else:
        base, spread = LONG_HAUL
    return round(base + spread * _route_fraction(origin, dest), 2)


def airlines_for_route(origin: str, dest: str) -> list[Airline]:
    """Carriers plausibly serving a route, by region."""
    if origin in EUROPEAN_CODES and dest in EUROPEAN_CODES:
        return EUROPEAN_AIRLINES
    if origin in MIDDLE_EAST_CODES or dest in MIDDLE_EAST_CODES:
        return MIDDLE_EAST_AIRLINES
    if origin in US_CODES or dest in US_CODES:
        return US_AIRLINES
    if origin in ASIAN_CODES or dest in ASIAN_CODES:
        return ASIAN_AIRLINES
    return EUROPEAN_AIRLINES


def format_duration(hours: float) -> str:
    """Render 3.5 as '3h 30m'."""
    total_minutes = round(hours * 60)
    h, m = divmod(total_minutes, 60)
    return f"{h}h {m:02d}m" if m else f"{h}h"
