"""Cart models."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class CartStatus(str, Enum):
    """Cart status. ``completed`` is set by the payment collaborator only."""

    pending = "pending"
    checkout = "checkout"
    completed = "completed"


MergeKey = tuple[str, int | None, bool | None]


class CartItem(BaseModel):
    """One purchasable line item.

    Two items are the same line when ``(name, day, skip_the_line)`` match,
    regardless of type or price.
    """

    type: str = "activity"
    name: str = Field(..., min_length=1)
    price: float = Field(..., ge=0)
    currency: str = "EUR"
    quantity: int = Field(1, ge=1)
    day: int | None = None
    booking_url: str | None = None
    product_code: str | None = None
    skip_the_line: bool | None = None
    image: str | None = None
    # Passed through untouched
    details: Any = None

    @property
    def merge_key(self) -> MergeKey:
        return (self.name, self.day, self.skip_the_line)

    @property
    def line_total(self) -> float:
        return self.price * self.quantity


class Cart(BaseModel):
    """Persisted cart for one (owner, trip) pair."""

    cart_id: str
    owner_id: str
    trip_id: str
    items: list[CartItem]
    total_amount: float
    currency: str
    status: CartStatus = CartStatus.pending
    version: int = 1
    created_at: datetime
    updated_at: datetime


class CheckoutResult(BaseModel):
    """Outcome of a checkout attempt; failures are reported, not raised."""

    success: bool
    message: str
    booking_references: list[str] | None = None
    checkout_url: str | None = None
