"""Trip models."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class TripStatus(str, Enum):
    """Trip lifecycle status. ``completed`` and ``failed`` are terminal."""

    generating = "generating"
    completed = "completed"
    failed = "failed"


TERMINAL_STATUSES = frozenset({TripStatus.completed, TripStatus.failed})


class Trip(BaseModel):
    """Persisted trip record."""

    trip_id: str
    owner_id: str
    destination: str
    origin: str | None = None
    start_date: datetime
    end_date: datetime
    budget: str | float
    travelers: int = Field(..., ge=1)
    interests: list[str] = Field(default_factory=list)
    status: TripStatus = TripStatus.generating
    itinerary: dict[str, Any] | None = None
    error_message: str | None = None
    created_at: datetime
    updated_at: datetime

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES


class TripStatusView(BaseModel):
    """Non-blocking status snapshot for polling callers."""

    exists: bool
    status: TripStatus | None = None
    has_itinerary: bool | None = None


class TripParams(BaseModel):
    """Inputs handed to an itinerary supplier."""

    trip_id: str
    destination: str
    origin: str | None
    start_date: datetime
    end_date: datetime
    budget: str | float
    travelers: int
    interests: list[str]

    @classmethod
    def from_trip(cls, trip: Trip) -> "TripParams":
        return cls(
            trip_id=trip.trip_id,
            destination=trip.destination,
            origin=trip.origin,
            start_date=trip.start_date,
            end_date=trip.end_date,
            budget=trip.budget,
            travelers=trip.travelers,
            interests=list(trip.interests),
        )
