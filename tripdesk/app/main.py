"""FastAPI application."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from tripdesk.app.api.deps import shutdown_container
from tripdesk.app.api.routes.cart import router as cart_router
from tripdesk.app.api.routes.health import router as health_router
from tripdesk.app.api.routes.metrics import router as metrics_router
from tripdesk.app.api.routes.trips import router as trips_router
from tripdesk.app.errors import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    SupplierError,
    TripdeskError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Most specific first; the first isinstance match wins
ERROR_STATUS_CODES: list[tuple[type[TripdeskError], int]] = [
    (ValidationError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (AuthorizationError, status.HTTP_403_FORBIDDEN),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
    (SupplierError, status.HTTP_502_BAD_GATEWAY),
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    yield
    await shutdown_container()


app = FastAPI(title="Tripdesk API", version="0.1.0", lifespan=lifespan)

# Register routes
app.include_router(health_router, tags=["health"])
app.include_router(metrics_router, tags=["metrics"])
app.include_router(trips_router)
app.include_router(cart_router)


@app.exception_handler(TripdeskError)
async def handle_domain_error(request: Request, exc: TripdeskError) -> JSONResponse:
    """Translate domain errors into JSON error responses."""
    status_code = status.HTTP_400_BAD_REQUEST
    for error_type, code in ERROR_STATUS_CODES:
        if isinstance(exc, error_type):
            status_code = code
            break

    if status_code >= 500:
        logger.error(
            f"Request failed: {exc}",
            extra={"structured": {"path": request.url.path, "error": type(exc).__name__}},
        )

    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {"message": "Tripdesk API", "version": "0.1.0"}
