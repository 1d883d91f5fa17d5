"""Models package - re-exports for convenience."""

from tripdesk.app.models.cart import Cart, CartItem, CartStatus, CheckoutResult, MergeKey
from tripdesk.app.models.common import BudgetTier, Geo
from tripdesk.app.models.trip import (
    TERMINAL_STATUSES,
    Trip,
    TripParams,
    TripStatus,
    TripStatusView,
)

__all__ = [
    "BudgetTier",
    "Geo",
    "Cart",
    "CartItem",
    "CartStatus",
    "CheckoutResult",
    "MergeKey",
    "TERMINAL_STATUSES",
    "Trip",
    "TripParams",
    "TripStatus",
    "TripStatusView",
]
