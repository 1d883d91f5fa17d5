"""Unit tests for CartService."""

import pytest

from tripdesk.app.config import Settings
from tripdesk.app.db.inmemory import InMemoryCartRepository
from tripdesk.app.errors import ConflictError
from tripdesk.app.models.cart import Cart, CartItem, CartStatus
from tripdesk.app.services.cart import (
    EMPTY_CART_MESSAGE,
    CartService,
    booking_references,
    compute_total,
)

OWNER = "owner-a"
TRIP = "trip-1"


def _item(name: str = "Louvre Tour", price: float = 20.0, **kwargs: object) -> CartItem:
    return CartItem(name=name, price=price, **kwargs)  # type: ignore[arg-type]


def _assert_total_consistent(cart: Cart) -> None:
    assert cart.total_amount == pytest.approx(sum(i.price * i.quantity for i in cart.items))


class FlakyCartRepository(InMemoryCartRepository):
    """Loses the first ``failures`` compare-and-swap updates."""

    def __init__(self, failures: int) -> None:
        super().__init__()
        self.failures = failures
        self.update_calls = 0

    def update(self, cart: Cart, expected_version: int) -> None:
        self.update_calls += 1
        if self.failures > 0:
            self.failures -= 1
            raise ConflictError("simulated concurrent write")
        super().update(cart, expected_version)


class TestAddItem:
    """Test adding items."""

    def test_first_add_creates_pending_cart(self, cart_service: CartService) -> None:
        """Test the first item creates a pending cart with version 1."""
        cart_id = cart_service.add_item(OWNER, TRIP, _item(price=25.0, quantity=2))

        cart = cart_service.get_cart(OWNER, TRIP)
        assert cart is not None
        assert cart.cart_id == cart_id
        assert cart.status == CartStatus.pending
        assert cart.version == 1
        assert cart.currency == "EUR"
        assert cart.total_amount == 50.0

    def test_same_key_merges_quantity(self, cart_service: CartService) -> None:
        """Test adding the same (name, day, skip_the_line) sums quantities."""
        cart_service.add_item(OWNER, TRIP, _item(quantity=2, day=1))
        cart_service.add_item(OWNER, TRIP, _item(quantity=3, day=1))

        cart = cart_service.get_cart(OWNER, TRIP)
        assert cart is not None
        assert len(cart.items) == 1
        assert cart.items[0].quantity == 5
        assert cart.total_amount == 100.0

    def test_merge_keeps_first_price(self, cart_service: CartService) -> None:
        """Test a merge only changes quantity, not the stored price."""
        cart_service.add_item(OWNER, TRIP, _item(price=20.0))
        cart_service.add_item(OWNER, TRIP, _item(price=99.0, type="tour"))

        cart = cart_service.get_cart(OWNER, TRIP)
        assert cart is not None
        assert len(cart.items) == 1
        assert cart.items[0].price == 20.0
        assert cart.items[0].type == "activity"
        assert cart.items[0].quantity == 2
        _assert_total_consistent(cart)

    @pytest.mark.parametrize(
        "other",
        [
            {"day": 2},
            {"skip_the_line": True},
            {"name": "Orsay Museum"},
        ],
    )
    def test_different_key_appends(self, cart_service: CartService, other: dict) -> None:
        """Test items differing in any merge key field become separate lines."""
        cart_service.add_item(OWNER, TRIP, _item(day=1))
        cart_service.add_item(OWNER, TRIP, _item(**{"day": 1, **other}))

        cart = cart_service.get_cart(OWNER, TRIP)
        assert cart is not None
        assert len(cart.items) == 2
        _assert_total_consistent(cart)

    def test_writes_bump_version(self, cart_service: CartService) -> None:
        """Test every successful write increments the version."""
        cart_service.add_item(OWNER, TRIP, _item("A"))
        cart_service.add_item(OWNER, TRIP, _item("B"))
        cart_service.add_item(OWNER, TRIP, _item("A"))

        cart = cart_service.get_cart(OWNER, TRIP)
        assert cart is not None
        assert cart.version == 3

    def test_carts_are_scoped_per_owner_and_trip(self, cart_service: CartService) -> None:
        """Test different owners and trips get independent carts."""
        cart_service.add_item(OWNER, TRIP, _item())
        cart_service.add_item("owner-b", TRIP, _item())
        cart_service.add_item(OWNER, "trip-2", _item())

        assert cart_service.item_count(OWNER, TRIP) == 1
        assert cart_service.item_count("owner-b", TRIP) == 1
        assert cart_service.item_count(OWNER, "trip-2") == 1


class TestRemoveItem:
    """Test removing items."""

    def test_remove_matching_line(self, cart_service: CartService) -> None:
        """Test only the matching line is removed and the total follows."""
        cart_service.add_item(OWNER, TRIP, _item("A", price=10.0, day=1))
        cart_service.add_item(OWNER, TRIP, _item("B", price=5.0, day=1))

        cart_service.remove_item(OWNER, TRIP, "A", day=1)

        cart = cart_service.get_cart(OWNER, TRIP)
        assert cart is not None
        assert [i.name for i in cart.items] == ["B"]
        assert cart.total_amount == 5.0

    def test_remove_requires_exact_key(self, cart_service: CartService) -> None:
        """Test a different day does not match."""
        cart_service.add_item(OWNER, TRIP, _item("A", day=1))

        cart_service.remove_item(OWNER, TRIP, "A", day=2)

        assert cart_service.item_count(OWNER, TRIP) == 1

    def test_remove_last_item_deletes_cart(self, cart_service: CartService) -> None:
        """Test removing the last line deletes the cart."""
        cart_service.add_item(OWNER, TRIP, _item("A"))

        cart_service.remove_item(OWNER, TRIP, "A")

        assert cart_service.get_cart(OWNER, TRIP) is None

    def test_remove_is_idempotent(self, cart_service: CartService) -> None:
        """Test removing twice, or without a cart, is a no-op."""
        cart_service.remove_item(OWNER, TRIP, "A")

        cart_service.add_item(OWNER, TRIP, _item("A"))
        cart_service.add_item(OWNER, TRIP, _item("B"))
        cart_service.remove_item(OWNER, TRIP, "A")
        cart_service.remove_item(OWNER, TRIP, "A")

        cart = cart_service.get_cart(OWNER, TRIP)
        assert cart is not None
        assert [i.name for i in cart.items] == ["B"]


class TestSetItemQuantity:
    """Test quantity updates."""

    def test_set_quantity_replaces(self, cart_service: CartService) -> None:
        """Test quantity is replaced, not added."""
        cart_service.add_item(OWNER, TRIP, _item("A", price=10.0, quantity=2, day=1))

        cart_service.set_item_quantity(OWNER, TRIP, "A", "activity", 1, 7)

        cart = cart_service.get_cart(OWNER, TRIP)
        assert cart is not None
        assert cart.items[0].quantity == 7
        assert cart.total_amount == 70.0

    def test_zero_quantity_removes(self, cart_service: CartService) -> None:
        """Test quantity <= 0 removes the line, and the cart when empty."""
        cart_service.add_item(OWNER, TRIP, _item("A", day=1))

        cart_service.set_item_quantity(OWNER, TRIP, "A", "activity", 1, 0)

        assert cart_service.get_cart(OWNER, TRIP) is None

    def test_type_must_match(self, cart_service: CartService) -> None:
        """Test a different type leaves the line untouched."""
        cart_service.add_item(OWNER, TRIP, _item("A", day=1))

        cart_service.set_item_quantity(OWNER, TRIP, "A", "hotel", 1, 4)

        assert cart_service.item_count(OWNER, TRIP) == 1

    def test_without_cart_is_noop(self, cart_service: CartService) -> None:
        """Test setting quantity without a cart creates nothing."""
        cart_service.set_item_quantity(OWNER, TRIP, "A", "activity", None, 3)

        assert cart_service.get_cart(OWNER, TRIP) is None


class TestClearAndCount:
    """Test clearing and counting."""

    def test_item_count_sums_quantities(self, cart_service: CartService) -> None:
        """Test the count is total quantity, not line count."""
        cart_service.add_item(OWNER, TRIP, _item("A", quantity=2))
        cart_service.add_item(OWNER, TRIP, _item("B", quantity=3))

        assert cart_service.item_count(OWNER, TRIP) == 5

    def test_item_count_without_cart(self, cart_service: CartService) -> None:
        """Test the count is zero without a cart."""
        assert cart_service.item_count(OWNER, TRIP) == 0

    def test_clear_cart(self, cart_service: CartService) -> None:
        """Test clearing deletes the cart; clearing again is harmless."""
        cart_service.add_item(OWNER, TRIP, _item())

        cart_service.clear_cart(OWNER, TRIP)
        cart_service.clear_cart(OWNER, TRIP)

        assert cart_service.get_cart(OWNER, TRIP) is None


class TestCheckout:
    """Test checkout."""

    def test_checkout_without_cart(self, cart_service: CartService) -> None:
        """Test checkout of a missing cart reports failure without raising."""
        result = cart_service.checkout(OWNER, TRIP)

        assert result.success is False
        assert result.message == EMPTY_CART_MESSAGE
        assert result.booking_references is None

    def test_checkout_success(self, cart_service: CartService, settings: Settings) -> None:
        """Test a pending cart moves to checkout with one reference per line."""
        cart_id = cart_service.add_item(OWNER, TRIP, _item("A", price=10.0, quantity=2))
        cart_service.add_item(OWNER, TRIP, _item("B", price=5.5))

        result = cart_service.checkout(OWNER, TRIP)

        assert result.success is True
        assert result.message == "Ready to checkout 2 item(s) for 25.50 EUR"
        assert result.booking_references == [
            f"BK-{cart_id[:8].upper()}-01",
            f"BK-{cart_id[:8].upper()}-02",
        ]
        assert result.checkout_url == f"{settings.checkout_base_url}/{cart_id}"

        cart = cart_service.get_cart(OWNER, TRIP)
        assert cart is not None
        assert cart.status == CartStatus.checkout

    def test_second_checkout_reports_status(self, cart_service: CartService) -> None:
        """Test a cart already in checkout is not checked out again."""
        cart_service.add_item(OWNER, TRIP, _item())
        cart_service.checkout(OWNER, TRIP)

        result = cart_service.checkout(OWNER, TRIP)

        assert result.success is False
        assert result.message == "Cart is already in checkout"


class TestConcurrentWrites:
    """Test compare-and-swap retry behavior."""

    def test_conflict_is_retried(self, settings: Settings) -> None:
        """Test a lost race re-reads and re-applies the operation."""
        repo = FlakyCartRepository(failures=0)
        service = CartService(repo, settings)
        service.add_item(OWNER, TRIP, _item(quantity=2))

        repo.failures = 2
        service.add_item(OWNER, TRIP, _item(quantity=3))

        cart = service.get_cart(OWNER, TRIP)
        assert cart is not None
        assert cart.items[0].quantity == 5
        assert repo.update_calls == 3

    def test_conflict_gives_up_after_retries(self) -> None:
        """Test ConflictError surfaces once retries are exhausted."""
        settings = Settings(_env_file=None, cart_write_retries=1)
        repo = FlakyCartRepository(failures=0)
        service = CartService(repo, settings)
        service.add_item(OWNER, TRIP, _item())

        repo.failures = 10
        with pytest.raises(ConflictError):
            service.add_item(OWNER, TRIP, _item())

        assert repo.update_calls == 2

    def test_stale_version_is_rejected_by_repository(self, cart_repo: InMemoryCartRepository) -> None:
        """Test the repository refuses a write based on an old version."""
        service = CartService(cart_repo, Settings(_env_file=None))
        service.add_item(OWNER, TRIP, _item("A"))
        stale = cart_repo.get_for_trip(OWNER, TRIP)
        assert stale is not None

        service.add_item(OWNER, TRIP, _item("B"))

        with pytest.raises(ConflictError):
            cart_repo.update(stale.model_copy(update={"version": 2}), expected_version=stale.version)


def test_compute_total() -> None:
    """Test total is the sum of price x quantity."""
    items = [_item("A", price=12.5, quantity=2), _item("B", price=3.0)]
    assert compute_total(items) == 28.0
    assert compute_total([]) == 0


def test_booking_references_are_numbered_per_line(cart_service: CartService) -> None:
    """Test references are derived from the cart id and line position."""
    cart_service.add_item(OWNER, TRIP, _item("A"))
    cart = cart_service.get_cart(OWNER, TRIP)
    assert cart is not None

    assert booking_references(cart) == [f"BK-{cart.cart_id[:8].upper()}-01"]
