# The cart is a container for products the shopper intends to buy. Only a
# snapshot of each product is stored (name, price, image, stock at the time it
# was added); nothing is reserved, so availability is checked again by the
# order placement backend at checkout.
#
# The cart never talks to the catalog: a stock change on the server is only
# seen when the product is added again.
import logging
from decimal import Decimal
from typing import Callable

from pydantic import ValidationError

import config
from enums.notification_kind import NotificationKind
from enums.store_entity import StoreEntity
from exceptions import (
    StorefrontException,
    InsufficientStockException,
    StorageUnavailableException,
)
from models.cart import CartSnapshotDTO
from models.lineItem import LineItemDTO
from models.product import ProductDTO
from services.cart_storage import CartStorage, MemoryCartStorage
from services.line_items import LineItemStore
from services.notification import NotificationService
from services.pricing import PricingService

logger = logging.getLogger(__name__)

CartListener = Callable[["CartService"], None]


class CartService:
    """
    The shopping session's cart.

    One instance per session, owned by whatever composes the UI. Every
    mutation is applied to the in-memory lines first, then the full cart is
    written to storage under a fixed key, then listeners are told.
    """

    def __init__(self, storage: CartStorage | None = None, notifier: NotificationService | None = None,
                 storage_key: str | None = None):
        self.storage = storage or MemoryCartStorage()
        self.notifier = notifier or NotificationService()
        self.storage_key = storage_key or config.CART_STORAGE_KEY
        self.degraded = False
        self._store = LineItemStore()
        self._listeners: list[CartListener] = []

    @property
    def items(self) -> list[LineItemDTO]:
        return self._store.items

    def find(self, product_id: str) -> LineItemDTO | None:
        return self._store.find_by_product(product_id)

    def product_ids(self) -> list[str]:
        return [item.product_id for item in self._store]

    def total(self) -> Decimal:
        return PricingService.calculate_total(self._store)

    def subscribe(self, listener: CartListener) -> Callable[[], None]:
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener) if listener in self._listeners else None

    async def load(self) -> list[LineItemDTO]:
        """Restore the cart from storage; start empty when nothing (usable) is stored."""
        try:
            data = await self.storage.load(self.storage_key)
        except StorageUnavailableException as e:
            self._degrade(e)
            data = None

        snapshot = CartSnapshotDTO()
        if data:
            try:
                snapshot = CartSnapshotDTO.from_bytes(data)
            except ValidationError as e:
                logger.warning(f"Discarding unreadable cart snapshot '{self.storage_key}': {e.error_count()} errors")
        self._store.restore(snapshot.items)

        logger.info(f"Cart '{self.storage_key}' loaded with {len(self._store)} items")
        self._notify_listeners()
        return self.items

    async def add(self, product: ProductDTO, quantity: int = 1) -> LineItemDTO:
        try:
            item = self._store.add_or_increment(product, quantity)
        except StorefrontException as e:
            await self._fail(e)
            raise
        await self._commit()
        self.notifier.localized(StoreEntity.CUSTOMER, "cart_item_added", product_name=product.name)
        return item

    async def remove(self, product_id: str) -> None:
        item = self._store.find_by_product(product_id)
        if item is None:
            return
        self._store.remove(item.line_id)
        await self._commit()
        self.notifier.localized(StoreEntity.CUSTOMER, "cart_item_removed")

    async def clear(self) -> None:
        self._store.clear()
        await self._commit()
        self.notifier.localized(StoreEntity.CUSTOMER, "cart_cleared", kind=NotificationKind.INFO)

    async def increment(self, product_id: str) -> LineItemDTO | None:
        item = self._store.find_by_product(product_id)
        if item is None:
            return None
        if item.quantity + 1 > item.known_stock:
            e = InsufficientStockException(item.product_id, item.product_name, item.quantity + 1, item.known_stock)
            await self._fail(e)
            raise e
        return await self._update_quantity(item, item.quantity + 1)

    async def decrement(self, product_id: str) -> LineItemDTO | None:
        """Lower the quantity by one; a line never drops below 1 this way."""
        item = self._store.find_by_product(product_id)
        if item is None or item.quantity <= 1:
            return item
        return await self._update_quantity(item, item.quantity - 1)

    async def set_quantity(self, product_id: str, quantity: int) -> LineItemDTO | None:
        item = self._store.find_by_product(product_id)
        if item is None:
            return None
        return await self._update_quantity(item, quantity)

    def to_bytes(self) -> bytes:
        return CartSnapshotDTO(items=self.items).to_bytes()

    async def _update_quantity(self, item: LineItemDTO, quantity: int) -> LineItemDTO:
        try:
            updated = self._store.set_quantity(item.line_id, quantity)
        except StorefrontException as e:
            await self._fail(e)
            raise
        await self._commit()
        self.notifier.localized(StoreEntity.CUSTOMER, "cart_quantity_updated",
                                product_name=updated.product_name, quantity=updated.quantity)
        return updated

    async def _fail(self, exception: StorefrontException) -> None:
        # A clamp is a partial success: the stored quantity changed
        if isinstance(exception, InsufficientStockException) and exception.clamped_to is not None:
            await self._commit()
        self.notifier.error(exception, StoreEntity.CUSTOMER)

    async def _commit(self) -> None:
        await self._persist()
        self._notify_listeners()

    async def _persist(self) -> None:
        data = self.to_bytes()
        try:
            await self.storage.save(self.storage_key, data)
        except StorageUnavailableException as e:
            self._degrade(e)
            await self.storage.save(self.storage_key, data)

    def _degrade(self, exception: StorageUnavailableException) -> None:
        if self.degraded:
            return
        logger.warning(f"Cart storage unavailable, keeping cart in memory for this session: {exception.reason}")
        self.degraded = True
        self.storage = MemoryCartStorage()
        self.notifier.error(exception, StoreEntity.CUSTOMER)

    def _notify_listeners(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception as e:
                logger.error(f"Cart listener failed: {e}")
