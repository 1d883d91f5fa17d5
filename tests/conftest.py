"""Shared pytest fixtures for all test suites."""

import os
from collections.abc import Generator
from datetime import datetime, timezone

import pytest
from sqlalchemy.orm import Session, sessionmaker

from tripdesk.app.config import Settings
from tripdesk.app.db.engine import create_engine_from_settings, create_session_factory
from tripdesk.app.db.inmemory import InMemoryCartRepository, InMemoryTripRepository
from tripdesk.app.db.models import Base
from tripdesk.app.jobs.scheduler import RecordingScheduler
from tripdesk.app.services.cart import CartService
from tripdesk.app.services.trips import TripService


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the environment and any .env file."""
    return Settings(_env_file=None, database_url=None, redis_url=None)


@pytest.fixture
def scheduler() -> RecordingScheduler:
    return RecordingScheduler()


@pytest.fixture
def trip_repo() -> InMemoryTripRepository:
    return InMemoryTripRepository()


@pytest.fixture
def cart_repo() -> InMemoryCartRepository:
    return InMemoryCartRepository()


@pytest.fixture
def trip_service(
    trip_repo: InMemoryTripRepository, scheduler: RecordingScheduler, settings: Settings
) -> TripService:
    return TripService(trip_repo, scheduler, settings)


@pytest.fixture
def cart_service(cart_repo: InMemoryCartRepository, settings: Settings) -> CartService:
    return CartService(cart_repo, settings)


@pytest.fixture
def trip_dates() -> tuple[datetime, datetime]:
    """A four-day trip: 10-13 June."""
    return (
        datetime(2025, 6, 10, tzinfo=timezone.utc),
        datetime(2025, 6, 13, tzinfo=timezone.utc),
    )


@pytest.fixture
def sqlite_session_factory() -> Generator[sessionmaker[Session], None, None]:
    """Session factory over a fresh in-memory SQLite schema."""
    engine = create_engine_from_settings(
        Settings(_env_file=None, database_url="sqlite:///:memory:")
    )
    Base.metadata.create_all(engine)

    yield create_session_factory(engine)

    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def postgres_session_factory() -> Generator[sessionmaker[Session], None, None]:
    """Session factory for PostgreSQL integration tests.

    Requires POSTGRES_TEST_URL to point at a disposable PostgreSQL database.
    Tests using this fixture should be marked with @pytest.mark.postgres.
    """
    database_url = os.getenv("POSTGRES_TEST_URL")
    if not database_url:
        pytest.skip("POSTGRES_TEST_URL not set - skipping postgres test")

    if not database_url.startswith(("postgresql://", "postgresql+asyncpg://", "postgresql+psycopg2://")):
        pytest.skip(f"POSTGRES_TEST_URL is not PostgreSQL: {database_url}")

    engine = create_engine_from_settings(Settings(_env_file=None, database_url=database_url))
    Base.metadata.create_all(engine)

    yield create_session_factory(engine)

    Base.metadata.drop_all(engine)
    engine.dispose()
