"""Trip endpoints - create, list, poll and delete."""

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, Field

from tripdesk.app.api.auth import get_current_context
from tripdesk.app.api.deps import enforce_trip_creation_quota, get_trip_service
from tripdesk.app.db.context import RequestContext
from tripdesk.app.errors import NotFoundError
from tripdesk.app.models.trip import Trip, TripStatus, TripStatusView
from tripdesk.app.services.trips import TripService

router = APIRouter(prefix="/trips", tags=["trips"])


class CreateTripRequest(BaseModel):
    """Request body for POST /trips."""

    destination: str = Field(..., min_length=1, description="Destination city or region")
    origin: str | None = Field(None, description="Departure city")
    start_date: datetime
    end_date: datetime
    budget: str | float = Field(..., description="Budget tier word or amount")
    travelers: int = Field(..., ge=1, description="Number of travelers")
    interests: list[str] = Field(default_factory=list)


class CreateTripResponse(BaseModel):
    """Response for POST /trips."""

    trip_id: str
    status: TripStatus


@router.post(
    "",
    response_model=CreateTripResponse,
    status_code=status.HTTP_202_ACCEPTED,
    dependencies=[Depends(enforce_trip_creation_quota)],
)
async def create_trip(
    request: CreateTripRequest,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    trips: Annotated[TripService, Depends(get_trip_service)],
) -> CreateTripResponse:
    """Create a trip and schedule itinerary generation.

    Returns as soon as the trip is stored; poll ``/trips/{id}/status`` for
    the outcome.
    """
    trip_id = trips.create_trip(
        owner_id=ctx.owner_id,
        destination=request.destination,
        start_date=request.start_date,
        end_date=request.end_date,
        budget=request.budget,
        travelers=request.travelers,
        interests=request.interests,
        origin=request.origin,
    )
    return CreateTripResponse(trip_id=trip_id, status=TripStatus.generating)


@router.get("", response_model=list[Trip])
async def list_trips(
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    trips: Annotated[TripService, Depends(get_trip_service)],
) -> list[Trip]:
    """List the caller's trips, newest first."""
    return trips.list_trips(ctx.owner_id)


@router.get("/{trip_id}", response_model=Trip)
async def get_trip(
    trip_id: str,
    trips: Annotated[TripService, Depends(get_trip_service)],
) -> Trip:
    """Get a trip by ID."""
    trip = trips.get_trip(trip_id)

    if trip is None:
        raise NotFoundError("Trip not found")

    return trip


@router.get("/{trip_id}/status", response_model=TripStatusView)
async def get_trip_status(
    trip_id: str,
    trips: Annotated[TripService, Depends(get_trip_service)],
) -> TripStatusView:
    """Poll generation status; unknown ids report ``exists=false``."""
    return trips.get_trip_status(trip_id)


@router.delete("/{trip_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_trip(
    trip_id: str,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    trips: Annotated[TripService, Depends(get_trip_service)],
) -> Response:
    """Delete a trip owned by the caller. The trip's cart is kept."""
    trips.delete_trip(trip_id, ctx.owner_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
