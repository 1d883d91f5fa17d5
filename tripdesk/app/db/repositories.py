"""Repository protocol interfaces for data access."""

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from tripdesk.app.models.cart import Cart
from tripdesk.app.models.trip import Trip, TripStatus


class TripRepository(Protocol):
    """Repository for trip records."""

    def insert(self, trip: Trip) -> str:
        """Insert a new trip.

        Args:
            trip: Trip to store

        Returns:
            Trip ID
        """
        ...

    def get(self, trip_id: str) -> Trip | None:
        """Get trip by ID.

        Args:
            trip_id: Trip ID

        Returns:
            Trip or None if not found
        """
        ...

    def update_if_status(self, trip: Trip, expected_status: TripStatus) -> bool:
        """Overwrite a trip only while its stored status is ``expected_status``.

        Args:
            trip: New trip state
            expected_status: Status the stored record must still have

        Returns:
            True if the write was applied, False if the trip is missing or
            its status has moved on
        """
        ...

    def delete(self, trip_id: str) -> bool:
        """Delete a trip.

        Args:
            trip_id: Trip ID

        Returns:
            True if a record was deleted
        """
        ...

    def list_by_owner(self, owner_id: str) -> list[Trip]:
        """List an owner's trips, newest first by creation order.

        Args:
            owner_id: Owner identity

        Returns:
            Trips (possibly empty)
        """
        ...


class CartRepository(Protocol):
    """Repository for cart records, one per (owner, trip)."""

    def get_for_trip(self, owner_id: str, trip_id: str) -> Cart | None:
        """Get the cart for an (owner, trip) pair."""
        ...

    def insert(self, cart: Cart) -> str:
        """Insert a new cart.

        Raises:
            ConflictError: If a cart already exists for the (owner, trip) pair
        """
        ...

    def update(self, cart: Cart, expected_version: int) -> None:
        """Compare-and-swap update.

        The stored cart is replaced by ``cart`` only if its version still
        equals ``expected_version``.

        Raises:
            ConflictError: If the cart is missing or the version moved on
        """
        ...

    def delete(self, cart_id: str, expected_version: int | None = None) -> bool:
        """Delete a cart, optionally guarded by version.

        Raises:
            ConflictError: If ``expected_version`` is given and does not match

        Returns:
            True if a record was deleted
        """
        ...


@dataclass
class RetryAfter:
    """Rate limit retry-after information."""

    seconds: int


class RateLimiter(Protocol):
    """Rate limiter interface."""

    def check_quota(self, key: str, now: datetime) -> RetryAfter | None:
        """Check if quota is available.

        Args:
            key: Rate limit key
            now: Current timestamp

        Returns:
            RetryAfter if over quota, None if allowed
        """
        ...
