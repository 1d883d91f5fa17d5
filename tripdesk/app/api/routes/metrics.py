"""Prometheus metrics endpoint."""

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

router = APIRouter()


@router.get("/metrics")
async def metrics() -> Response:
    """Expose registered Prometheus metrics.

    Includes trips_created_total, itinerary_generation_total{outcome},
    itinerary_generation_seconds{outcome}, cart_write_conflicts_total and
    checkouts_total{outcome}.
    """
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
