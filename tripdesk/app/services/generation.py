"""Itinerary generation orchestrator and the mock supplier.

A trip moves ``generating -> completed`` or ``generating -> failed`` exactly
once. The job runs detached from the request that created the trip, so
supplier failures are recorded on the trip instead of being raised.
"""

import asyncio
import logging
import time
from datetime import timedelta
from typing import Any, Protocol

from tripdesk.app.config import Settings, get_settings
from tripdesk.app.errors import SupplierError
from tripdesk.app.models.common import BudgetTier
from tripdesk.app.models.trip import TripParams, TripStatus
from tripdesk.app.services.trips import TripService
from tripdesk.app.travel.fallback import activities_for, hotels_for, restaurants_for
from tripdesk.app.travel.flights import (
    airlines_for_route,
    flight_duration_hours,
    flight_price,
    format_duration,
)
from tripdesk.app.travel.locations import DEFAULT_AIRPORT, airport_code_for, coordinates_for
from tripdesk.app.travel.styles import styles_for_interests
from tripdesk.app.utils.metrics import PrometheusTripMetrics

logger = logging.getLogger(__name__)

HOTEL_INDEX_BY_TIER = {BudgetTier.budget: 0, BudgetTier.mid: 1, BudgetTier.luxury: -1}


class ItinerarySupplier(Protocol):
    """External collaborator producing an itinerary payload."""

    async def generate(self, params: TripParams) -> dict[str, Any]:
        """Produce an itinerary for a trip.

        Raises:
            SupplierError: If no itinerary could be produced
        """
        ...


def _flight(airline_index: int, origin: str, dest: str, day: str, is_return: bool) -> dict[str, Any]:
    airlines = airlines_for_route(origin, dest)
    airline = airlines[airline_index % len(airlines)]
    return {
        "airline": airline.name,
        "airlineCode": airline.code,
        "from": origin,
        "to": dest,
        "date": day,
        "duration": format_duration(flight_duration_hours(origin, dest)),
        "price": flight_price(origin, dest),
        "currency": "EUR",
        "isReturn": is_return,
    }


def build_mock_itinerary(params: TripParams) -> dict[str, Any]:
    """Assemble a deterministic itinerary from the fixed travel tables.

    The daily plan has one entry per calendar day from start to end,
    inclusive.
    """
    dest_code = airport_code_for(params.destination)
    origin_code = airport_code_for(params.origin) if params.origin else DEFAULT_AIRPORT

    first_day = params.start_date.date()
    last_day = params.end_date.date()
    day_count = (last_day - first_day).days + 1
    nights = max(1, day_count - 1)

    flights = [
        _flight(0, origin_code, dest_code, first_day.isoformat(), is_return=False),
        _flight(1, dest_code, origin_code, last_day.isoformat(), is_return=True),
    ]

    hotels = hotels_for(params.destination)
    tier = BudgetTier.parse(params.budget)
    chosen_hotel = hotels[HOTEL_INDEX_BY_TIER[tier]]

    activities = activities_for(params.destination)
    restaurants = restaurants_for(params.destination)
    styles = styles_for_interests(params.interests)

    daily_plan = []
    for index in range(day_count):
        if index == 0:
            title = "Arrival & Exploration"
        elif index == day_count - 1:
            title = "Last Day & Departure"
        elif styles:
            title = f"{styles[index % len(styles)].label} Day"
        else:
            title = f"Discover {params.destination}"

        morning = activities[index % len(activities)]
        if styles:
            style = styles[index % len(styles)]
            afternoon_title = style.activity_ideas[index % len(style.activity_ideas)]
        else:
            afternoon_title = activities[(index + 1) % len(activities)]["title"]
        dinner = restaurants[index % len(restaurants)]

        daily_plan.append(
            {
                "day": index + 1,
                "date": (first_day + timedelta(days=index)).isoformat(),
                "title": title,
                "activities": [
                    {"time": "09:30", "title": morning["title"], "description": morning["description"]},
                    {"time": "14:00", "title": afternoon_title, "description": ""},
                    {"time": "19:30", "title": f"Dinner at {dinner['name']}", "description": dinner["cuisine"]},
                ],
            }
        )

    flight_total = sum(f["price"] for f in flights) * params.travelers
    estimated_total = round(flight_total + chosen_hotel["price"] * nights, 2)
    geo = coordinates_for(params.destination)

    return {
        "overview": f"{day_count}-day trip to {params.destination} for {params.travelers} traveler(s)",
        "destinationCode": dest_code,
        "originCode": origin_code,
        "coordinates": {"latitude": geo.lat, "longitude": geo.lon},
        "budgetTier": tier.value,
        "travelStyles": [style.key for style in styles],
        "flights": flights,
        "hotels": hotels,
        "recommendedHotel": chosen_hotel["name"],
        "activities": activities,
        "restaurants": restaurants,
        "dailyPlan": daily_plan,
        "estimatedTotal": estimated_total,
        "currency": "EUR",
    }


class MockItinerarySupplier:
    """Deterministic supplier built on fixed templates, behind a timed delay."""

    def __init__(self, delay_seconds: float = 0.0) -> None:
        self._delay_seconds = delay_seconds

    async def generate(self, params: TripParams) -> dict[str, Any]:
        """Return the template itinerary after the configured delay."""
        if self._delay_seconds > 0:
            await asyncio.sleep(self._delay_seconds)
        return build_mock_itinerary(params)


class ItineraryGenerator:
    """Runs one generation job and writes its terminal outcome."""

    def __init__(
        self,
        trip_service: TripService,
        supplier: ItinerarySupplier,
        settings: Settings | None = None,
        metrics: PrometheusTripMetrics | None = None,
    ) -> None:
        self._trip_service = trip_service
        self._supplier = supplier
        self._settings = settings or get_settings()
        self._metrics = metrics or PrometheusTripMetrics()

    async def run(self, trip_id: str) -> TripStatus | None:
        """Generate and store the itinerary for ``trip_id``.

        A missing trip, or one no longer ``generating``, is left alone.

        Returns:
            The trip's status after the run, or None if the trip is gone
        """
        trip = self._trip_service.get_trip(trip_id)

        if trip is None:
            logger.info("Generation skipped: trip missing", extra={"structured": {"trip_id": trip_id}})
            return None

        if trip.status != TripStatus.generating:
            logger.info(
                "Generation skipped: trip already terminal",
                extra={"structured": {"trip_id": trip_id, "status": trip.status.value}},
            )
            return trip.status

        started = time.perf_counter()
        try:
            payload = await asyncio.wait_for(
                self._supplier.generate(TripParams.from_trip(trip)),
                timeout=self._settings.generation_timeout_seconds,
            )
            if not isinstance(payload, dict) or not payload:
                raise SupplierError("Supplier returned an empty itinerary")
        except asyncio.CancelledError:
            self._fail(trip_id, "Itinerary generation cancelled", started)
            raise
        except asyncio.TimeoutError:
            return self._fail(trip_id, "Itinerary generation timed out", started)
        except SupplierError as e:
            return self._fail(trip_id, str(e) or "Itinerary supplier failed", started)
        except Exception as e:
            logger.exception("Unexpected supplier error", extra={"structured": {"trip_id": trip_id}})
            return self._fail(trip_id, f"Itinerary supplier failed: {type(e).__name__}", started)

        applied = self._trip_service.update_itinerary(trip_id, payload, TripStatus.completed)
        self._metrics.record_generation(
            "completed" if applied else "skipped", time.perf_counter() - started
        )
        return self._status_after(trip_id)

    def cancel(self, trip_id: str) -> TripStatus | None:
        """Fail a trip whose generation job was dropped before it started."""
        logger.warning("Generation cancelled before start", extra={"structured": {"trip_id": trip_id}})
        self._trip_service.update_itinerary(
            trip_id, None, TripStatus.failed, error_message="Itinerary generation cancelled"
        )
        return self._status_after(trip_id)

    def _fail(self, trip_id: str, reason: str, started: float) -> TripStatus | None:
        logger.warning(
            f"Generation failed: {reason}", extra={"structured": {"trip_id": trip_id}}
        )
        applied = self._trip_service.update_itinerary(
            trip_id, None, TripStatus.failed, error_message=reason
        )
        self._metrics.record_generation(
            "failed" if applied else "skipped", time.perf_counter() - started
        )
        return self._status_after(trip_id)

    def _status_after(self, trip_id: str) -> TripStatus | None:
        trip = self._trip_service.get_trip(trip_id)
        return trip.status if trip is not None else None
