"""Service wiring and FastAPI dependencies."""

from dataclasses import dataclass
from datetime import datetime
from typing import Annotated

from fastapi import Depends, HTTPException, status

from tripdesk.app.api.auth import get_current_context
from tripdesk.app.config import Settings, get_settings
from tripdesk.app.db.context import RequestContext
from tripdesk.app.db.repositories import RateLimiter
from tripdesk.app.db.store import RecordStore, build_record_store
from tripdesk.app.jobs.scheduler import (
    GENERATE_ITINERARY_JOB,
    AsyncioJobScheduler,
    JobScheduler,
)
from tripdesk.app.ratelimit import TRIP_CREATION_BUCKET, build_rate_limiter, make_rate_limit_key
from tripdesk.app.services.cart import CartService
from tripdesk.app.services.generation import (
    ItineraryGenerator,
    ItinerarySupplier,
    MockItinerarySupplier,
)
from tripdesk.app.services.trips import TripService


@dataclass
class ServiceContainer:
    """Everything a request handler needs, built once per process."""

    store: RecordStore
    scheduler: JobScheduler
    trips: TripService
    carts: CartService
    generator: ItineraryGenerator
    rate_limiter: RateLimiter


def build_container(
    settings: Settings,
    store: RecordStore | None = None,
    scheduler: JobScheduler | None = None,
    supplier: ItinerarySupplier | None = None,
    rate_limiter: RateLimiter | None = None,
) -> ServiceContainer:
    """Wire services together and register the generation job handler."""
    store = store or build_record_store(settings)
    scheduler = scheduler or AsyncioJobScheduler()
    supplier = supplier or MockItinerarySupplier(settings.mock_supplier_delay_seconds)

    trips = TripService(store.trips, scheduler, settings)
    generator = ItineraryGenerator(trips, supplier, settings)
    scheduler.register(GENERATE_ITINERARY_JOB, generator.run, on_cancel=generator.cancel)

    return ServiceContainer(
        store=store,
        scheduler=scheduler,
        trips=trips,
        carts=CartService(store.carts, settings),
        generator=generator,
        rate_limiter=rate_limiter or build_rate_limiter(settings),
    )


# Global container, built lazily from settings
_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    """Get global service container."""
    global _container
    if _container is None:
        _container = build_container(get_settings())
    return _container


def get_trip_service(
    container: Annotated[ServiceContainer, Depends(get_container)],
) -> TripService:
    return container.trips


def get_cart_service(
    container: Annotated[ServiceContainer, Depends(get_container)],
) -> CartService:
    return container.carts


async def enforce_trip_creation_quota(
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    container: Annotated[ServiceContainer, Depends(get_container)],
) -> None:
    """Reject trip creation over the per-owner rate limit with 429."""
    key = make_rate_limit_key(ctx, TRIP_CREATION_BUCKET)
    retry_after = container.rate_limiter.check_quota(key, datetime.now())

    if retry_after is not None:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Trip creation rate limit exceeded",
            headers={"Retry-After": str(retry_after.seconds)},
        )


async def shutdown_container() -> None:
    """Cancel outstanding jobs and drop the global container."""
    global _container
    if _container is not None and isinstance(_container.scheduler, AsyncioJobScheduler):
        await _container.scheduler.shutdown()
    _container = None
