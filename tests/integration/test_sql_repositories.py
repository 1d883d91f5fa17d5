"""Integration tests for SQL repositories on SQLite."""

from datetime import datetime, timezone

import pytest
from sqlalchemy.orm import Session, sessionmaker

from tripdesk.app.config import Settings
from tripdesk.app.db.sql_repositories import SqlCartRepository, SqlTripRepository
from tripdesk.app.db.store import build_record_store
from tripdesk.app.errors import ConflictError
from tripdesk.app.jobs.scheduler import RecordingScheduler
from tripdesk.app.models.cart import Cart, CartItem, CartStatus
from tripdesk.app.models.trip import Trip, TripStatus
from tripdesk.app.services.cart import CartService
from tripdesk.app.services.generation import ItineraryGenerator, MockItinerarySupplier
from tripdesk.app.services.trips import TripService

NOW = datetime(2025, 6, 1, tzinfo=timezone.utc)


def _trip(trip_id: str, owner_id: str = "owner-a", budget: str | float = "mid") -> Trip:
    return Trip(
        trip_id=trip_id,
        owner_id=owner_id,
        destination="Barcelona",
        origin="Paris",
        start_date=NOW,
        end_date=NOW,
        budget=budget,
        travelers=3,
        interests=["food"],
        created_at=NOW,
        updated_at=NOW,
    )


def _cart(cart_id: str = "c1", version: int = 1, quantity: int = 1) -> Cart:
    items = [CartItem(name="Sagrada Familia", price=26.0, quantity=quantity, details={"slot": "am"})]
    return Cart(
        cart_id=cart_id,
        owner_id="owner-a",
        trip_id="t1",
        items=items,
        total_amount=26.0 * quantity,
        currency="EUR",
        version=version,
        created_at=NOW,
        updated_at=NOW,
    )


@pytest.fixture
def trips(sqlite_session_factory: sessionmaker[Session]) -> SqlTripRepository:
    return SqlTripRepository(sqlite_session_factory)


@pytest.fixture
def carts(sqlite_session_factory: sessionmaker[Session]) -> SqlCartRepository:
    return SqlCartRepository(sqlite_session_factory)


class TestSqlTripRepository:
    """Test trip persistence."""

    def test_insert_and_get(self, trips: SqlTripRepository) -> None:
        """Test a trip survives a round trip through the database."""
        trips.insert(_trip("t1", budget=2500.0))

        trip = trips.get("t1")

        assert trip is not None
        assert trip.destination == "Barcelona"
        assert trip.origin == "Paris"
        assert trip.budget == 2500.0
        assert trip.interests == ["food"]
        assert trip.status == TripStatus.generating
        assert trip.itinerary is None

    def test_get_missing(self, trips: SqlTripRepository) -> None:
        assert trips.get("missing") is None

    def test_update_if_status(self, trips: SqlTripRepository) -> None:
        """Test the conditional update applies once."""
        trips.insert(_trip("t1"))
        completed = _trip("t1").model_copy(
            update={"status": TripStatus.completed, "itinerary": {"dailyPlan": [{"day": 1}]}}
        )

        assert trips.update_if_status(completed, TripStatus.generating) is True
        assert trips.update_if_status(completed, TripStatus.generating) is False

        trip = trips.get("t1")
        assert trip is not None
        assert trip.status == TripStatus.completed
        assert trip.itinerary == {"dailyPlan": [{"day": 1}]}

    def test_update_if_status_missing_trip(self, trips: SqlTripRepository) -> None:
        assert trips.update_if_status(_trip("ghost"), TripStatus.generating) is False
        assert trips.get("ghost") is None

    def test_delete(self, trips: SqlTripRepository) -> None:
        trips.insert(_trip("t1"))

        assert trips.delete("t1") is True
        assert trips.delete("t1") is False

    def test_list_by_owner_newest_first(self, trips: SqlTripRepository) -> None:
        trips.insert(_trip("t1"))
        trips.insert(_trip("t2", owner_id="owner-b"))
        trips.insert(_trip("t3"))

        assert [trip.trip_id for trip in trips.list_by_owner("owner-a")] == ["t3", "t1"]


class TestSqlCartRepository:
    """Test cart persistence."""

    def test_insert_and_get(self, carts: SqlCartRepository) -> None:
        """Test items, including pass-through details, round-trip as JSON."""
        carts.insert(_cart(quantity=2))

        cart = carts.get_for_trip("owner-a", "t1")

        assert cart is not None
        assert cart.items[0].quantity == 2
        assert cart.items[0].details == {"slot": "am"}
        assert cart.total_amount == 52.0
        assert cart.status == CartStatus.pending

    def test_unique_per_owner_trip(self, carts: SqlCartRepository) -> None:
        carts.insert(_cart("c1"))

        with pytest.raises(ConflictError):
            carts.insert(_cart("c2"))

    def test_compare_and_swap(self, carts: SqlCartRepository) -> None:
        """Test a stale version is refused."""
        carts.insert(_cart())
        carts.update(_cart(version=2, quantity=3), expected_version=1)

        with pytest.raises(ConflictError):
            carts.update(_cart(version=3, quantity=9), expected_version=1)

        cart = carts.get_for_trip("owner-a", "t1")
        assert cart is not None
        assert cart.version == 2
        assert cart.items[0].quantity == 3

    def test_guarded_delete(self, carts: SqlCartRepository) -> None:
        carts.insert(_cart())
        carts.update(_cart(version=2), expected_version=1)

        with pytest.raises(ConflictError):
            carts.delete("c1", expected_version=1)

        assert carts.delete("c1", expected_version=2) is True
        assert carts.delete("c1") is False


@pytest.mark.asyncio
async def test_services_on_sqlite_store() -> None:
    """Test the full trip and cart flow against a SQLite-backed store."""
    settings = Settings(_env_file=None, database_url="sqlite:///:memory:", redis_url=None)
    store = build_record_store(settings)
    scheduler = RecordingScheduler()
    trip_service = TripService(store.trips, scheduler, settings)
    scheduler.register(
        "generate_itinerary",
        ItineraryGenerator(trip_service, MockItinerarySupplier(), settings).run,
    )
    cart_service = CartService(store.carts, settings)

    trip_id = trip_service.create_trip(
        owner_id="owner-a",
        destination="Athens",
        start_date=datetime(2025, 6, 10, tzinfo=timezone.utc),
        end_date=datetime(2025, 6, 11, tzinfo=timezone.utc),
        budget=800.0,
        travelers=1,
        interests=["nightlife"],
    )
    await scheduler.run_pending()

    trip = trip_service.get_trip(trip_id)
    assert trip is not None
    assert trip.status == TripStatus.completed
    assert trip.itinerary is not None
    assert trip.itinerary["recommendedHotel"] == "Monastiraki Square Inn"

    cart_service.add_item("owner-a", trip_id, CartItem(name="Acropolis Tour", price=30.0, quantity=2))
    cart_service.add_item("owner-a", trip_id, CartItem(name="Acropolis Tour", price=30.0))
    assert cart_service.item_count("owner-a", trip_id) == 3

    result = cart_service.checkout("owner-a", trip_id)
    assert result.success is True
    assert result.message == "Ready to checkout 1 item(s) for 90.00 EUR"
