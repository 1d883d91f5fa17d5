"""Record store wiring: picks in-memory or SQL repositories from settings."""

import logging
from dataclasses import dataclass

from tripdesk.app.config import Settings
from tripdesk.app.db.engine import create_engine_from_settings, create_session_factory
from tripdesk.app.db.inmemory import InMemoryCartRepository, InMemoryTripRepository
from tripdesk.app.db.models import Base
from tripdesk.app.db.repositories import CartRepository, TripRepository
from tripdesk.app.db.sql_repositories import SqlCartRepository, SqlTripRepository

logger = logging.getLogger(__name__)


@dataclass
class RecordStore:
    """Bundle of repositories sharing one backing store."""

    trips: TripRepository
    carts: CartRepository


def build_record_store(settings: Settings) -> RecordStore:
    """Build repositories for the configured backend.

    Without ``database_url`` the store lives in process memory.
    """
    if not settings.database_url:
        logger.info("Using in-memory record store")
        return RecordStore(trips=InMemoryTripRepository(), carts=InMemoryCartRepository())

    engine = create_engine_from_settings(settings)
    if engine.dialect.name == "sqlite":
        # Migrations target Postgres; SQLite gets the schema directly
        Base.metadata.create_all(engine)

    session_factory = create_session_factory(engine)
    logger.info("Using SQL record store", extra={"structured": {"dialect": engine.dialect.name}})
    return RecordStore(
        trips=SqlTripRepository(session_factory),
        carts=SqlCartRepository(session_factory),
    )
