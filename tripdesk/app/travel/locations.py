"""Destination lookups: IATA airport codes and fallback coordinates."""

from collections.abc import Mapping

from tripdesk.app.models.common import Geo

DEFAULT_AIRPORT = "ATH"

CITY_TO_AIRPORT: dict[str, str] = {
    "london": "LHR", "paris": "CDG", "rome": "FCO", "barcelona": "BCN",
    "madrid": "MAD", "amsterdam": "AMS", "berlin": "BER", "athens": "ATH",
    "lisbon": "LIS", "dublin": "DUB", "vienna": "VIE", "prague": "PRG",
    "budapest": "BUD", "warsaw": "WAW", "copenhagen": "CPH", "stockholm": "ARN",
    "oslo": "OSL", "helsinki": "HEL", "zurich": "ZRH", "geneva": "GVA",
    "brussels": "BRU", "milan": "MXP", "venice": "VCE", "florence": "FLR",
    "munich": "MUC", "frankfurt": "FRA", "dubai": "DXB", "doha": "DOH",
    "abu dhabi": "AUH", "istanbul": "IST", "cairo": "CAI", "tel aviv": "TLV",
    "new york": "JFK", "los angeles": "LAX", "chicago": "ORD", "miami": "MIA",
    "san francisco": "SFO", "boston": "BOS", "washington": "IAD",
    "tokyo": "NRT", "singapore": "SIN", "hong kong": "HKG", "beijing": "PEK",
    "shanghai": "PVG", "seoul": "ICN", "bangkok": "BKK", "kuala lumpur": "KUL",
    "sydney": "SYD", "melbourne": "MEL", "auckland": "AKL",
    "santorini": "JTR", "mykonos": "JMK", "crete": "HER", "rhodes": "RHO",
    "corfu": "CFU", "thessaloniki": "SKG", "nice": "NCE", "marseille": "MRS",
    "lyon": "LYS", "bordeaux": "BOD", "toulouse": "TLS", "naples": "NAP",
    "palermo": "PMO", "malaga": "AGP", "seville": "SVQ", "valencia": "VLC",
    "bilbao": "BIO", "porto": "OPO", "edinburgh": "EDI", "manchester": "MAN",
    "birmingham": "BHX", "glasgow": "GLA", "belfast": "BFS",
}

CITY_COORDINATES: dict[str, Geo] = {
    "paris": Geo(lat=48.8566, lon=2.3522),
    "london": Geo(lat=51.5074, lon=-0.1278),
    "rome": Geo(lat=41.9028, lon=12.4964),
    "barcelona": Geo(lat=41.3851, lon=2.1734),
    "amsterdam": Geo(lat=52.3676, lon=4.9041),
    "athens": Geo(lat=37.9838, lon=23.7275),
    "berlin": Geo(lat=52.5200, lon=13.4050),
    "madrid": Geo(lat=40.4168, lon=-3.7038),
    "dubai": Geo(lat=25.2048, lon=55.2708),
    "new york": Geo(lat=40.7128, lon=-74.0060),
    "tokyo": Geo(lat=35.6762, lon=139.6503),
    "singapore": Geo(lat=1.3521, lon=103.8198),
    "lisbon": Geo(lat=38.7223, lon=-9.1393),
    "prague": Geo(lat=50.0755, lon=14.4378),
    "vienna": Geo(lat=48.2082, lon=16.3738),
}


def match_city(destination: str, table: Mapping[str, object]) -> str | None:
    """Return the first known city name contained in ``destination``."""
    lower = destination.lower()
    for city in table:
        if city in lower:
            return city
    return None


def airport_code_for(destination: str) -> str:
    """Resolve a free-text destination to an IATA airport code.

    Known city names are matched as substrings ("Paris, France" -> CDG). A
    bare three-letter upper-case string is taken as a code already. Anything
    else falls back to ``DEFAULT_AIRPORT``.
    """
    city = match_city(destination, CITY_TO_AIRPORT)
    if city is not None:
        return CITY_TO_AIRPORT[city]

    stripped = destination.strip()
    if len(stripped) == 3 and stripped.isalpha() and stripped.isupper():
        return stripped

    return DEFAULT_AIRPORT


def coordinates_for(destination: str) -> Geo:
    """Approximate city-centre coordinates, defaulting to Athens."""
    city = match_city(destination, CITY_COORDINATES)
    return CITY_COORDINATES[city or "athens"]
