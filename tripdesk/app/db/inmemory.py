"""In-memory implementations of repository interfaces."""

import threading
from datetime import datetime, timedelta

from tripdesk.app.db.repositories import RetryAfter
from tripdesk.app.errors import ConflictError
from tripdesk.app.models.cart import Cart
from tripdesk.app.models.trip import Trip, TripStatus


class InMemoryTripRepository:
    """In-memory implementation of TripRepository."""

    def __init__(self) -> None:
        # Insertion order doubles as creation order
        self._trips: dict[str, Trip] = {}
        self._lock = threading.Lock()

    def insert(self, trip: Trip) -> str:
        """Insert a new trip."""
        with self._lock:
            self._trips[trip.trip_id] = trip.model_copy(deep=True)
        return trip.trip_id

    def get(self, trip_id: str) -> Trip | None:
        """Get trip by ID."""
        with self._lock:
            record = self._trips.get(trip_id)

            if record is None:
                return None

            return record.model_copy(deep=True)

    def update_if_status(self, trip: Trip, expected_status: TripStatus) -> bool:
        """Overwrite a trip only while its stored status matches."""
        with self._lock:
            record = self._trips.get(trip.trip_id)

            if record is None or record.status != expected_status:
                return False

            self._trips[trip.trip_id] = trip.model_copy(deep=True)
            return True

    def delete(self, trip_id: str) -> bool:
        """Delete a trip."""
        with self._lock:
            return self._trips.pop(trip_id, None) is not None

    def list_by_owner(self, owner_id: str) -> list[Trip]:
        """List an owner's trips, newest first."""
        with self._lock:
            results = [
                trip.model_copy(deep=True)
                for trip in self._trips.values()
                if trip.owner_id == owner_id
            ]
        results.reverse()
        return results


class InMemoryCartRepository:
    """In-memory implementation of CartRepository."""

    def __init__(self) -> None:
        self._carts: dict[str, Cart] = {}
        self._by_trip: dict[tuple[str, str], str] = {}
        self._lock = threading.Lock()

    def get_for_trip(self, owner_id: str, trip_id: str) -> Cart | None:
        """Get the cart for an (owner, trip) pair."""
        with self._lock:
            cart_id = self._by_trip.get((owner_id, trip_id))

            if cart_id is None:
                return None

            record = self._carts.get(cart_id)
            return record.model_copy(deep=True) if record is not None else None

    def insert(self, cart: Cart) -> str:
        """Insert a new cart."""
        key = (cart.owner_id, cart.trip_id)

        with self._lock:
            if key in self._by_trip:
                raise ConflictError(f"Cart already exists for trip {cart.trip_id}")

            self._carts[cart.cart_id] = cart.model_copy(deep=True)
            self._by_trip[key] = cart.cart_id

        return cart.cart_id

    def update(self, cart: Cart, expected_version: int) -> None:
        """Compare-and-swap update."""
        with self._lock:
            record = self._carts.get(cart.cart_id)

            if record is None:
                raise ConflictError(f"Cart {cart.cart_id} no longer exists")

            if record.version != expected_version:
                raise ConflictError(
                    f"Cart {cart.cart_id} version {record.version} != {expected_version}"
                )

            self._carts[cart.cart_id] = cart.model_copy(deep=True)

    def delete(self, cart_id: str, expected_version: int | None = None) -> bool:
        """Delete a cart, optionally guarded by version."""
        with self._lock:
            record = self._carts.get(cart_id)

            if record is None:
                return False

            if expected_version is not None and record.version != expected_version:
                raise ConflictError(
                    f"Cart {cart_id} version {record.version} != {expected_version}"
                )

            del self._carts[cart_id]
            self._by_trip.pop((record.owner_id, record.trip_id), None)
            return True


class InMemoryRateLimiter:
    """In-memory implementation of RateLimiter using fixed window."""

    def __init__(self, max_requests: int, window_seconds: int = 60) -> None:
        """Initialize rate limiter.

        Args:
            max_requests: Maximum requests per window
            window_seconds: Window size in seconds (default 60)
        """
        self._max_requests = max_requests
        self._window_seconds = window_seconds
        self._windows: dict[str, tuple[datetime, int]] = {}

    def check_quota(self, key: str, now: datetime) -> RetryAfter | None:
        """Check if quota is available."""
        window = self._windows.get(key)

        if window is None or now >= window[0] + timedelta(seconds=self._window_seconds):
            self._windows[key] = (now, 1)
            return None

        window_start, count = window

        if count >= self._max_requests:
            seconds_remaining = int(
                (window_start + timedelta(seconds=self._window_seconds) - now).total_seconds()
            )
            return RetryAfter(seconds=max(1, seconds_remaining))

        self._windows[key] = (window_start, count + 1)
        return None
