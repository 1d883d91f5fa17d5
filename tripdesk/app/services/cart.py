"""Cart manager: per-trip line items, merge/removal rules and checkout.

Every write is a compare-and-swap on the cart version. A lost race re-reads
the cart and re-applies the operation, up to ``cart_write_retries`` times.
"""

import logging
import uuid
from collections.abc import Callable
from datetime import datetime, timezone
from typing import TypeVar

from tripdesk.app.config import Settings, get_settings
from tripdesk.app.db.repositories import CartRepository
from tripdesk.app.errors import ConflictError
from tripdesk.app.models.cart import Cart, CartItem, CartStatus, CheckoutResult
from tripdesk.app.utils.logging import StructuredLifecycleLogger
from tripdesk.app.utils.metrics import PrometheusTripMetrics

logger = logging.getLogger(__name__)

T = TypeVar("T")

EMPTY_CART_MESSAGE = "Your cart is empty"


def compute_total(items: list[CartItem]) -> float:
    """Sum of price x quantity over all items."""
    return sum(item.line_total for item in items)


def booking_references(cart: Cart) -> list[str]:
    """Placeholder booking references, one per line item."""
    prefix = cart.cart_id[:8].upper()
    return [f"BK-{prefix}-{index:02d}" for index in range(1, len(cart.items) + 1)]


class CartService:
    """Owns cart contents and the pending -> checkout transition."""

    def __init__(
        self,
        carts: CartRepository,
        settings: Settings | None = None,
        lifecycle_logger: StructuredLifecycleLogger | None = None,
        metrics: PrometheusTripMetrics | None = None,
    ) -> None:
        self._carts = carts
        self._settings = settings or get_settings()
        self._lifecycle = lifecycle_logger or StructuredLifecycleLogger()
        self._metrics = metrics or PrometheusTripMetrics()

    def get_cart(self, owner_id: str, trip_id: str) -> Cart | None:
        """Get the cart for a trip, or None."""
        return self._carts.get_for_trip(owner_id, trip_id)

    def add_item(self, owner_id: str, trip_id: str, item: CartItem) -> str:
        """Add an item, merging into an existing line with the same merge key.

        On merge only the quantity changes; the existing line keeps its price
        and other fields.

        Returns:
            Cart ID
        """

        def attempt(n: int) -> str:
            cart = self._carts.get_for_trip(owner_id, trip_id)
            now = datetime.now(timezone.utc)

            if cart is None:
                new_cart = Cart(
                    cart_id=uuid.uuid4().hex,
                    owner_id=owner_id,
                    trip_id=trip_id,
                    items=[item],
                    total_amount=compute_total([item]),
                    currency=item.currency,
                    status=CartStatus.pending,
                    version=1,
                    created_at=now,
                    updated_at=now,
                )
                self._carts.insert(new_cart)
                self._lifecycle.log_cart_op("add", owner_id, trip_id, 1, new_cart.total_amount, n)
                return new_cart.cart_id

            items = list(cart.items)
            for index, existing in enumerate(items):
                if existing.merge_key == item.merge_key:
                    items[index] = existing.model_copy(
                        update={"quantity": existing.quantity + item.quantity}
                    )
                    break
            else:
                items.append(item)

            self._save(cart, items, "add", n)
            return cart.cart_id

        return self._with_retry(attempt)

    def remove_item(
        self,
        owner_id: str,
        trip_id: str,
        name: str,
        day: int | None = None,
        skip_the_line: bool | None = None,
    ) -> None:
        """Remove every line matching ``(name, day, skip_the_line)``.

        Deletes the cart when it becomes empty. No-op without a cart or match.
        """
        key = (name, day, skip_the_line)

        def attempt(n: int) -> None:
            cart = self._carts.get_for_trip(owner_id, trip_id)
            if cart is None:
                return

            items = [item for item in cart.items if item.merge_key != key]
            if len(items) == len(cart.items):
                return

            self._save(cart, items, "remove", n)

        self._with_retry(attempt)

    def set_item_quantity(
        self,
        owner_id: str,
        trip_id: str,
        name: str,
        item_type: str,
        day: int | None,
        quantity: int,
    ) -> None:
        """Replace the quantity of lines matching ``(name, type, day)``.

        A quantity of zero or less removes them. No-op without a cart or match.
        """

        def matches(item: CartItem) -> bool:
            return item.name == name and item.type == item_type and item.day == day

        def attempt(n: int) -> None:
            cart = self._carts.get_for_trip(owner_id, trip_id)
            if cart is None or not any(matches(item) for item in cart.items):
                return

            if quantity <= 0:
                items = [item for item in cart.items if not matches(item)]
            else:
                items = [
                    item.model_copy(update={"quantity": quantity}) if matches(item) else item
                    for item in cart.items
                ]

            self._save(cart, items, "set_quantity", n)

        self._with_retry(attempt)

    def clear_cart(self, owner_id: str, trip_id: str) -> None:
        """Delete the cart if present."""
        cart = self._carts.get_for_trip(owner_id, trip_id)
        if cart is not None:
            self._carts.delete(cart.cart_id)
            self._lifecycle.log_cart_op("clear", owner_id, trip_id, 0, 0.0)

    def item_count(self, owner_id: str, trip_id: str) -> int:
        """Sum of quantities across all lines; 0 without a cart."""
        cart = self._carts.get_for_trip(owner_id, trip_id)
        if cart is None:
            return 0
        return sum(item.quantity for item in cart.items)

    def checkout(self, owner_id: str, trip_id: str) -> CheckoutResult:
        """Move a pending cart to checkout.

        An absent, empty or already checked-out cart is reported with
        ``success=False``; this never raises for those cases. Payment and
        supplier booking happen outside this service.
        """

        def attempt(n: int) -> CheckoutResult:
            cart = self._carts.get_for_trip(owner_id, trip_id)

            if cart is None or not cart.items:
                self._metrics.inc_checkout("empty")
                return CheckoutResult(success=False, message=EMPTY_CART_MESSAGE)

            if cart.status != CartStatus.pending:
                self._metrics.inc_checkout("not_pending")
                return CheckoutResult(
                    success=False,
                    message=f"Cart is already in {cart.status.value}",
                )

            updated = cart.model_copy(
                update={
                    "status": CartStatus.checkout,
                    "version": cart.version + 1,
                    "updated_at": datetime.now(timezone.utc),
                }
            )
            self._carts.update(updated, expected_version=cart.version)
            self._metrics.inc_checkout("success")
            self._lifecycle.log_cart_op(
                "checkout", owner_id, trip_id, len(cart.items), cart.total_amount, n
            )

            return CheckoutResult(
                success=True,
                message=(
                    f"Ready to checkout {len(cart.items)} item(s) for "
                    f"{cart.total_amount:.2f} {cart.currency}"
                ),
                booking_references=booking_references(cart),
                checkout_url=f"{self._settings.checkout_base_url}/{cart.cart_id}",
            )

        return self._with_retry(attempt)

    def _save(self, cart: Cart, items: list[CartItem], op: str, attempt: int) -> None:
        """Persist new items, or delete the cart when none are left."""
        if not items:
            self._carts.delete(cart.cart_id, expected_version=cart.version)
            self._lifecycle.log_cart_op(op, cart.owner_id, cart.trip_id, 0, 0.0, attempt)
            return

        updated = cart.model_copy(
            update={
                "items": items,
                "total_amount": compute_total(items),
                "version": cart.version + 1,
                "updated_at": datetime.now(timezone.utc),
            }
        )
        self._carts.update(updated, expected_version=cart.version)
        self._lifecycle.log_cart_op(
            op, cart.owner_id, cart.trip_id, len(items), updated.total_amount, attempt
        )

    def _with_retry(self, attempt: Callable[[int], T]) -> T:
        retries = self._settings.cart_write_retries
        n = 1
        while True:
            try:
                return attempt(n)
            except ConflictError:
                self._metrics.inc_cart_conflict()
                if n > retries:
                    raise
                logger.info("Cart write conflict, retrying", extra={"structured": {"attempt": n}})
                n += 1
