"""Unit tests for the travel lookup tables."""

import pytest

from tripdesk.app.models.common import BudgetTier
from tripdesk.app.travel.fallback import activities_for, hotels_for, restaurants_for
from tripdesk.app.travel.flights import (
    ASIAN_AIRLINES,
    DEFAULT_DURATION_HOURS,
    EUROPEAN_AIRLINES,
    MIDDLE_EAST_AIRLINES,
    US_AIRLINES,
    airlines_for_route,
    flight_duration_hours,
    flight_price,
    format_duration,
)
from tripdesk.app.travel.locations import airport_code_for, coordinates_for
from tripdesk.app.travel.styles import styles_for_interests


@pytest.mark.parametrize(
    ("destination", "code"),
    [
        ("Paris", "CDG"),
        ("Paris, France", "CDG"),
        ("NEW YORK", "JFK"),
        ("Santorini island", "JTR"),
        ("MUC", "MUC"),
        ("Nowhere", "ATH"),
        ("abc", "ATH"),
    ],
)
def test_airport_code_for(destination: str, code: str) -> None:
    """Test known cities, literal codes and the fallback."""
    assert airport_code_for(destination) == code


def test_coordinates_for_known_and_unknown() -> None:
    """Test coordinates lookup with the Athens fallback."""
    assert coordinates_for("Rome, Italy").lat == pytest.approx(41.9028)
    assert coordinates_for("Atlantis") == coordinates_for("Athens")


def test_flight_duration_is_symmetric() -> None:
    """Test a route missing one direction falls back to the other."""
    assert flight_duration_hours("FCO", "ATH") == flight_duration_hours("ATH", "FCO") == 2.0
    assert flight_duration_hours("XXX", "YYY") == DEFAULT_DURATION_HOURS


def test_flight_price_is_deterministic_and_banded() -> None:
    """Test prices are stable and fall inside their haul band."""
    assert flight_price("ATH", "CDG") == flight_price("ATH", "CDG")
    assert 80 <= flight_price("CDG", "AMS") < 120
    assert 150 <= flight_price("ATH", "CDG") < 250
    assert 400 <= flight_price("CDG", "JFK") < 600


@pytest.mark.parametrize(
    ("origin", "dest", "airlines"),
    [
        ("ATH", "CDG", EUROPEAN_AIRLINES),
        ("ATH", "DXB", MIDDLE_EAST_AIRLINES),
        ("LHR", "JFK", US_AIRLINES),
        ("CDG", "NRT", ASIAN_AIRLINES),
        ("XXX", "YYY", EUROPEAN_AIRLINES),
    ],
)
def test_airlines_for_route(origin: str, dest: str, airlines: list) -> None:
    """Test carriers are chosen by region."""
    assert airlines_for_route(origin, dest) == airlines


@pytest.mark.parametrize(("hours", "text"), [(3.5, "3h 30m"), (2.0, "2h"), (1.25, "1h 15m")])
def test_format_duration(hours: float, text: str) -> None:
    assert format_duration(hours) == text


@pytest.mark.parametrize(
    ("budget", "tier"),
    [
        ("budget", BudgetTier.budget),
        (" Cheap ", BudgetTier.budget),
        ("premium", BudgetTier.luxury),
        ("moderate", BudgetTier.mid),
        (999.0, BudgetTier.budget),
        (1000.0, BudgetTier.mid),
        (4000, BudgetTier.luxury),
    ],
)
def test_budget_tier_parse(budget: str | float, tier: BudgetTier) -> None:
    """Test words and amounts map onto budget tiers."""
    assert BudgetTier.parse(budget) == tier


def test_styles_for_interests_dedupes_in_order() -> None:
    """Test unknown interests are ignored and known ones deduped."""
    styles = styles_for_interests(["Nightlife", "basket weaving", "nightlife", "nature"])

    assert [style.key for style in styles] == ["nightlife", "nature"]


def test_hotels_sorted_cheapest_first() -> None:
    """Test hotel lists are ordered by price."""
    prices = [hotel["price"] for hotel in hotels_for("Barcelona")]
    assert prices == sorted(prices)


def test_fallback_lists_are_copies() -> None:
    """Test callers cannot mutate the shared templates."""
    hotels_for("Athens")[0]["price"] = 0
    activities_for("Athens").clear()

    assert hotels_for("Athens")[0]["price"] > 0
    assert activities_for("Athens")
    assert restaurants_for("Athens")
