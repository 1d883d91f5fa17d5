"""Owner-scoped query helpers."""

from sqlalchemy.orm import Query, Session

from tripdesk.app.db.models import CartRow, TripRow


def query_trips_for_owner(session: Session, owner_id: str) -> Query:
    """Query trip table scoped to one owner, newest first.

    Args:
        session: SQLAlchemy session
        owner_id: Owner identity

    Returns:
        Query filtered by owner_id and ordered by creation, descending
    """
    return (
        session.query(TripRow).filter(TripRow.owner_id == owner_id).order_by(TripRow.id.desc())
    )


def query_cart_for_trip(session: Session, owner_id: str, trip_id: str) -> Query:
    """Query cart table for one (owner, trip) pair."""
    return session.query(CartRow).filter(
        CartRow.owner_id == owner_id, CartRow.trip_id == trip_id
    )
