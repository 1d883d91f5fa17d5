"""SQL implementations of repository interfaces."""

from typing import Any

from sqlalchemy import delete, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from tripdesk.app.db.models import CartRow, TripRow
from tripdesk.app.db.queries import query_cart_for_trip, query_trips_for_owner
from tripdesk.app.errors import ConflictError
from tripdesk.app.models.cart import Cart, CartItem, CartStatus
from tripdesk.app.models.trip import Trip, TripStatus


def _trip_values(trip: Trip) -> dict[str, Any]:
    return {
        "owner_id": trip.owner_id,
        "destination": trip.destination,
        "origin": trip.origin,
        "start_date": trip.start_date,
        "end_date": trip.end_date,
        "budget": trip.budget,
        "travelers": trip.travelers,
        "interests": list(trip.interests),
        "status": trip.status.value,
        "itinerary": trip.itinerary,
        "error_message": trip.error_message,
        "created_at": trip.created_at,
        "updated_at": trip.updated_at,
    }


def _to_trip(row: TripRow) -> Trip:
    return Trip(
        trip_id=row.trip_id,
        owner_id=row.owner_id,
        destination=row.destination,
        origin=row.origin,
        start_date=row.start_date,
        end_date=row.end_date,
        budget=row.budget,
        travelers=row.travelers,
        interests=list(row.interests or []),
        status=TripStatus(row.status),
        itinerary=row.itinerary,
        error_message=row.error_message,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _cart_values(cart: Cart) -> dict[str, Any]:
    return {
        "owner_id": cart.owner_id,
        "trip_id": cart.trip_id,
        "items": [item.model_dump(mode="json") for item in cart.items],
        "total_amount": cart.total_amount,
        "currency": cart.currency,
        "status": cart.status.value,
        "version": cart.version,
        "created_at": cart.created_at,
        "updated_at": cart.updated_at,
    }


def _to_cart(row: CartRow) -> Cart:
    return Cart(
        cart_id=row.cart_id,
        owner_id=row.owner_id,
        trip_id=row.trip_id,
        items=[CartItem.model_validate(item) for item in row.items],
        total_amount=row.total_amount,
        currency=row.currency,
        status=CartStatus(row.status),
        version=row.version,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class SqlTripRepository:
    """SQL implementation of TripRepository.

    Opens one session per operation so the repository can be shared between
    request handlers and background jobs.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def insert(self, trip: Trip) -> str:
        """Insert a new trip."""
        with self._session_factory() as session:
            session.add(TripRow(trip_id=trip.trip_id, **_trip_values(trip)))
            session.commit()

        return trip.trip_id

    def get(self, trip_id: str) -> Trip | None:
        """Get trip by ID."""
        with self._session_factory() as session:
            row = session.query(TripRow).filter(TripRow.trip_id == trip_id).first()
            return _to_trip(row) if row is not None else None

    def update_if_status(self, trip: Trip, expected_status: TripStatus) -> bool:
        """Overwrite a trip only while its stored status matches."""
        with self._session_factory() as session:
            result = session.execute(
                update(TripRow)
                .where(TripRow.trip_id == trip.trip_id)
                .where(TripRow.status == expected_status.value)
                .values(**_trip_values(trip))
            )
            session.commit()

        return result.rowcount == 1

    def delete(self, trip_id: str) -> bool:
        """Delete a trip."""
        with self._session_factory() as session:
            result = session.execute(delete(TripRow).where(TripRow.trip_id == trip_id))
            session.commit()

        return result.rowcount > 0

    def list_by_owner(self, owner_id: str) -> list[Trip]:
        """List an owner's trips, newest first."""
        with self._session_factory() as session:
            return [_to_trip(row) for row in query_trips_for_owner(session, owner_id).all()]


class SqlCartRepository:
    """SQL implementation of CartRepository."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def get_for_trip(self, owner_id: str, trip_id: str) -> Cart | None:
        """Get the cart for an (owner, trip) pair."""
        with self._session_factory() as session:
            row = query_cart_for_trip(session, owner_id, trip_id).first()
            return _to_cart(row) if row is not None else None

    def insert(self, cart: Cart) -> str:
        """Insert a new cart."""
        with self._session_factory() as session:
            session.add(CartRow(cart_id=cart.cart_id, **_cart_values(cart)))
            try:
                session.commit()
            except IntegrityError as e:
                session.rollback()
                raise ConflictError(f"Cart already exists for trip {cart.trip_id}") from e

        return cart.cart_id

    def update(self, cart: Cart, expected_version: int) -> None:
        """Compare-and-swap update on the version column."""
        with self._session_factory() as session:
            result = session.execute(
                update(CartRow)
                .where(CartRow.cart_id == cart.cart_id)
                .where(CartRow.version == expected_version)
                .values(**_cart_values(cart))
            )
            session.commit()

        if result.rowcount != 1:
            raise ConflictError(f"Cart {cart.cart_id} changed or was removed concurrently")

    def delete(self, cart_id: str, expected_version: int | None = None) -> bool:
        """Delete a cart, optionally guarded by version."""
        with self._session_factory() as session:
            stmt = delete(CartRow).where(CartRow.cart_id == cart_id)
            if expected_version is not None:
                stmt = stmt.where(CartRow.version == expected_version)

            result = session.execute(stmt)
            session.commit()

            if result.rowcount > 0:
                return True

            if expected_version is not None and session.get(CartRow, cart_id) is not None:
                raise ConflictError(f"Cart {cart_id} changed concurrently")

        return False
