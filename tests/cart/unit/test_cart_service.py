"""
Unit Tests: CartService

Tests for services/cart.py covering:
- add() / remove() / clear() with persistence after every mutation
- increment() / decrement() / set_quantity() stock ceiling and floor
- load() restore, corrupt snapshot handling
- degradation to in-memory storage when the backend fails
- notifications and listeners
"""

from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from enums.notification_kind import NotificationKind
from exceptions import InsufficientStockException, OutOfStockException, StorageUnavailableException
from models.cart import CartSnapshotDTO
from services.cart import CartService
from services.cart_storage import MemoryCartStorage


@pytest.fixture
def storage():
    return MemoryCartStorage()


@pytest.fixture
def cart(storage, notifier):
    return CartService(storage=storage, notifier=notifier, storage_key="cart")


async def stored_items(storage, key="cart"):
    data = await storage.load(key)
    return CartSnapshotDTO.from_bytes(data).items


class TestAdd:

    @pytest.mark.asyncio
    async def test_add_twice_merges_and_totals(self, cart, make_product):
        """Empty cart, p1 (price 10, stock 5) added twice -> one line, qty 2, total 20."""
        product = make_product(price="10", stock=5)

        await cart.add(product)
        await cart.add(product)

        assert len(cart.items) == 1
        assert cart.items[0].quantity == 2
        assert cart.total() == Decimal("20")

    @pytest.mark.asyncio
    async def test_add_is_persisted(self, cart, storage, make_product):
        await cart.add(make_product(), 2)

        items = await stored_items(storage)
        assert [(i.product_id, i.quantity) for i in items] == [("p1", 2)]

    @pytest.mark.asyncio
    async def test_add_notifies_success(self, cart, notifier, make_product):
        await cart.add(make_product(name="Áo thun"))

        current = notifier.current()
        assert current.kind == NotificationKind.SUCCESS
        assert "Áo thun" in current.message

    @pytest.mark.asyncio
    async def test_add_past_stock_rejected(self, cart, notifier, make_product):
        """Stock 3: add 2 then add 2 -> InsufficientStock, quantity stays 2, error notified."""
        product = make_product(stock=3)
        await cart.add(product, 2)

        with pytest.raises(InsufficientStockException):
            await cart.add(product, 2)

        assert cart.items[0].quantity == 2
        assert notifier.current().kind == NotificationKind.ERROR

    @pytest.mark.asyncio
    async def test_out_of_stock_not_added(self, cart, storage, make_product):
        with pytest.raises(OutOfStockException):
            await cart.add(make_product(stock=0))

        assert cart.items == []
        assert await storage.load("cart") is None

    @pytest.mark.asyncio
    async def test_clamped_new_line_is_persisted(self, cart, storage, make_product):
        with pytest.raises(InsufficientStockException):
            await cart.add(make_product(stock=2), 5)

        items = await stored_items(storage)
        assert items[0].quantity == 2


class TestQuantity:

    @pytest.mark.asyncio
    async def test_increment_up_to_stock(self, cart, make_product):
        await cart.add(make_product(stock=2))

        item = await cart.increment("p1")
        assert item.quantity == 2

        with pytest.raises(InsufficientStockException):
            await cart.increment("p1")
        assert cart.find("p1").quantity == 2

    @pytest.mark.asyncio
    async def test_decrement_floor_is_one(self, cart, make_product):
        await cart.add(make_product())

        item = await cart.decrement("p1")

        assert item.quantity == 1

    @pytest.mark.asyncio
    async def test_unknown_product_is_noop(self, cart):
        assert await cart.increment("ghost") is None
        assert await cart.decrement("ghost") is None
        assert await cart.set_quantity("ghost", 3) is None

    @pytest.mark.asyncio
    async def test_set_quantity_clamps_and_persists(self, cart, storage, make_product):
        await cart.add(make_product(stock=4))

        with pytest.raises(InsufficientStockException) as exc_info:
            await cart.set_quantity("p1", 9)

        assert exc_info.value.clamped_to == 4
        assert (await stored_items(storage))[0].quantity == 4


class TestRemoveClear:

    @pytest.mark.asyncio
    async def test_remove(self, cart, storage, make_product):
        await cart.add(make_product(product_id="p1"))
        await cart.add(make_product(product_id="p2"))

        await cart.remove("p1")

        assert cart.product_ids() == ["p2"]
        assert [i.product_id for i in await stored_items(storage)] == ["p2"]

    @pytest.mark.asyncio
    async def test_remove_unknown_product_is_noop(self, cart, storage, notifier, make_product):
        await cart.add(make_product(product_id="p1", name="Áo thun"))
        storage.save = AsyncMock(wraps=storage.save)

        await cart.remove("missing")

        assert cart.product_ids() == ["p1"]
        storage.save.assert_not_awaited()
        assert "Áo thun" in notifier.current().message

    @pytest.mark.asyncio
    async def test_clear(self, cart, storage, make_product):
        await cart.add(make_product())

        await cart.clear()

        assert cart.items == []
        assert await stored_items(storage) == []


class TestLoad:

    @pytest.mark.asyncio
    async def test_three_line_round_trip(self, storage, notifier, make_product):
        """A 3-line cart written by one session is restored identically by the next."""
        first = CartService(storage=storage, notifier=notifier)
        await first.add(make_product(product_id="p1", price="10000"), 1)
        await first.add(make_product(product_id="p2", price="25000"), 3)
        await first.add(make_product(product_id="p3", price="99000", stock=9), 2)

        second = CartService(storage=storage, notifier=notifier)
        await second.load()

        assert second.items == first.items
        assert second.total() == Decimal("283000")

    @pytest.mark.asyncio
    async def test_nothing_stored_starts_empty(self, cart):
        assert await cart.load() == []

    @pytest.mark.asyncio
    async def test_corrupt_snapshot_discarded(self, cart, storage):
        await storage.save("cart", b'{"items": [{"line_id": 1}]}')

        assert await cart.load() == []


class TestDegradation:

    @pytest.mark.asyncio
    async def test_save_failure_keeps_cart_in_memory(self, notifier, make_product):
        failing = MemoryCartStorage()
        failing.save = AsyncMock(side_effect=StorageUnavailableException("cart", "disk full"))
        cart = CartService(storage=failing, notifier=notifier)

        await cart.add(make_product())
        await cart.add(make_product(product_id="p2"))

        assert cart.degraded is True
        assert isinstance(cart.storage, MemoryCartStorage)
        assert cart.storage is not failing
        assert len(cart.items) == 2
        errors = [n for n in notifier.history if n.kind == NotificationKind.ERROR]
        assert len(errors) == 1

    @pytest.mark.asyncio
    async def test_load_failure_starts_empty(self, notifier):
        failing = MemoryCartStorage()
        failing.load = AsyncMock(side_effect=StorageUnavailableException("cart", "unreachable"))
        cart = CartService(storage=failing, notifier=notifier)

        assert await cart.load() == []
        assert cart.degraded is True


class TestListeners:

    @pytest.mark.asyncio
    async def test_listener_called_after_mutation(self, cart, make_product):
        seen = []
        cart.subscribe(lambda c: seen.append(len(c.items)))

        await cart.add(make_product())
        await cart.clear()

        assert seen == [1, 0]

    @pytest.mark.asyncio
    async def test_unsubscribe(self, cart, make_product):
        seen = []
        unsubscribe = cart.subscribe(lambda c: seen.append(1))
        unsubscribe()

        await cart.add(make_product())

        assert seen == []

    @pytest.mark.asyncio
    async def test_failing_listener_does_not_break_mutation(self, cart, make_product):
        def broken(_):
            raise RuntimeError("render failed")
        cart.subscribe(broken)

        await cart.add(make_product())

        assert len(cart.items) == 1
