"""Trip entity manager: creation, polling, deletion and terminal writes."""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any

from tripdesk.app.config import Settings, get_settings
from tripdesk.app.db.repositories import TripRepository
from tripdesk.app.errors import AuthorizationError, ValidationError
from tripdesk.app.jobs.scheduler import GENERATE_ITINERARY_JOB, JobScheduler
from tripdesk.app.models.trip import TERMINAL_STATUSES, Trip, TripStatus, TripStatusView
from tripdesk.app.utils.logging import StructuredLifecycleLogger
from tripdesk.app.utils.metrics import PrometheusTripMetrics

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    """Treat naive timestamps as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def normalize_interests(interests: list[str]) -> list[str]:
    """Drop blanks and case-insensitive duplicates, keeping first spelling and order."""
    seen: set[str] = set()
    result = []
    for interest in interests:
        tag = interest.strip()
        if tag and tag.casefold() not in seen:
            seen.add(tag.casefold())
            result.append(tag)
    return result


class TripService:
    """Owns trip creation, status transitions and deletion."""

    def __init__(
        self,
        trips: TripRepository,
        scheduler: JobScheduler,
        settings: Settings | None = None,
        lifecycle_logger: StructuredLifecycleLogger | None = None,
        metrics: PrometheusTripMetrics | None = None,
    ) -> None:
        self._trips = trips
        self._scheduler = scheduler
        self._settings = settings or get_settings()
        self._lifecycle = lifecycle_logger or StructuredLifecycleLogger()
        self._metrics = metrics or PrometheusTripMetrics()

    def create_trip(
        self,
        owner_id: str,
        destination: str,
        start_date: datetime,
        end_date: datetime,
        budget: str | float,
        travelers: int,
        interests: list[str],
        origin: str | None = None,
    ) -> str:
        """Create a trip in ``generating`` state and schedule its generation.

        Returns immediately; generation runs as a deferred job keyed by the
        new trip id.

        Raises:
            ValidationError: If destination is blank, end_date precedes
                start_date, travelers < 1 or a numeric budget is negative
        """
        destination = destination.strip()
        if not destination:
            raise ValidationError("Destination must not be empty")

        start = _as_utc(start_date)
        end = _as_utc(end_date)
        if end < start:
            raise ValidationError("End date must not be before start date")

        if travelers < 1:
            raise ValidationError("Traveler count must be at least 1")

        if isinstance(budget, (int, float)) and budget < 0:
            raise ValidationError("Budget must not be negative")

        now = _utcnow()
        trip = Trip(
            trip_id=uuid.uuid4().hex,
            owner_id=owner_id,
            destination=destination,
            origin=origin.strip() if origin and origin.strip() else None,
            start_date=start,
            end_date=end,
            budget=budget,
            travelers=travelers,
            interests=normalize_interests(interests),
            status=TripStatus.generating,
            itinerary=None,
            created_at=now,
            updated_at=now,
        )

        trip_id = self._trips.insert(trip)

        try:
            self._scheduler.schedule(
                self._settings.generation_delay_seconds, GENERATE_ITINERARY_JOB, trip_id
            )
        except Exception:
            # No job will ever finish this trip
            self._trips.delete(trip_id)
            logger.exception(
                "Generation scheduling failed; trip discarded",
                extra={"structured": {"trip_id": trip_id}},
            )
            raise

        self._metrics.inc_trip_created()
        self._lifecycle.log_transition(trip_id, None, TripStatus.generating.value)
        return trip_id

    def list_trips(self, owner_id: str) -> list[Trip]:
        """List an owner's trips, newest first."""
        return self._trips.list_by_owner(owner_id)

    def get_trip(self, trip_id: str) -> Trip | None:
        """Get a trip by ID. Ownership is not checked here."""
        return self._trips.get(trip_id)

    def get_trip_status(self, trip_id: str) -> TripStatusView:
        """Status snapshot; safe to call for ids that do not exist (yet)."""
        trip = self._trips.get(trip_id)

        if trip is None:
            return TripStatusView(exists=False)

        return TripStatusView(
            exists=True,
            status=trip.status,
            has_itinerary=trip.itinerary is not None,
        )

    def delete_trip(self, trip_id: str, requesting_owner: str) -> None:
        """Delete a trip record. Carts are left in place.

        Raises:
            AuthorizationError: If the requester does not own the trip
        """
        trip = self._trips.get(trip_id)

        if trip is None:
            return

        if trip.owner_id != requesting_owner:
            raise AuthorizationError("Only the trip owner can delete this trip")

        self._trips.delete(trip_id)
        logger.info("Trip deleted", extra={"structured": {"trip_id": trip_id}})

    def update_itinerary(
        self,
        trip_id: str,
        itinerary: dict[str, Any] | None,
        status: TripStatus,
        error_message: str | None = None,
    ) -> bool:
        """Write the terminal outcome of generation.

        Only a trip still in ``generating`` accepts the write. A trip that was
        deleted or already reached a terminal status is left untouched.

        Raises:
            ValidationError: If ``status`` is not terminal, or the payload
                does not fit it (completed needs an itinerary, failed must
                have none)

        Returns:
            True if the write was applied
        """
        if status not in TERMINAL_STATUSES:
            raise ValidationError(f"Cannot move a trip to {status.value}")
        if status == TripStatus.completed and itinerary is None:
            raise ValidationError("A completed trip requires an itinerary")
        if status == TripStatus.failed and itinerary is not None:
            raise ValidationError("A failed trip cannot carry an itinerary")

        trip = self._trips.get(trip_id)

        if trip is None:
            self._lifecycle.log_transition(
                trip_id, None, status.value, applied=False, reason="trip_missing"
            )
            return False

        if trip.is_terminal:
            self._lifecycle.log_transition(
                trip_id, trip.status.value, status.value, applied=False, reason="already_terminal"
            )
            return False

        updated = trip.model_copy(
            update={
                "status": status,
                "itinerary": itinerary,
                "error_message": error_message if status == TripStatus.failed else None,
                "updated_at": _utcnow(),
            }
        )
        applied = self._trips.update_if_status(updated, TripStatus.generating)

        self._lifecycle.log_transition(
            trip_id,
            TripStatus.generating.value,
            status.value,
            applied=applied,
            reason=None if applied else "concurrent_update",
        )
        return applied
