import logging
from dataclasses import dataclass, field

import config
from db import create_tables
from services.cart import CartService
from services.cart_storage import create_cart_storage
from services.catalog import CatalogService
from services.checkout import CheckoutService
from services.draft_manager import OrderDraftManager
from services.notification import NotificationService
from services.order_placement import EdgeFunctionOrderPlacer, OrderPlacer, StoredProcedureOrderPlacer
from services.selection import SelectionOverlay
from services.user import UserService
from utils.logging_config import setup_logging

logger = logging.getLogger(__name__)


def create_order_placer() -> OrderPlacer:
    """The hosted place-order function when its URL is configured, the database procedure otherwise."""
    if config.PLACE_ORDER_FUNCTION_URL:
        return EdgeFunctionOrderPlacer()
    return StoredProcedureOrderPlacer()


@dataclass
class Storefront:
    """Everything one UI session needs, wired to a single notification sink."""
    notifier: NotificationService
    cart: CartService
    selection: SelectionOverlay
    drafts: OrderDraftManager
    checkout: CheckoutService
    catalog: CatalogService
    users: UserService = field(default_factory=UserService)

    def close(self) -> None:
        self.selection.close()


async def create_storefront(order_placer: OrderPlacer | None = None, with_logging: bool = True) -> Storefront:
    if with_logging:
        setup_logging()

    await create_tables()

    notifier = NotificationService()
    catalog = CatalogService()
    cart = CartService(storage=create_cart_storage(), notifier=notifier)
    await cart.load()

    storefront = Storefront(
        notifier=notifier,
        cart=cart,
        selection=SelectionOverlay(cart),
        drafts=OrderDraftManager(notifier=notifier,
                                 product_lookup=catalog.search_products,
                                 customer_lookup=catalog.search_customers),
        checkout=CheckoutService(order_placer or create_order_placer(), notifier),
        catalog=catalog,
    )
    logger.info(f"Storefront ready ({config.RUNTIME_ENVIRONMENT.value}, cart storage "
                f"{config.CART_STORAGE_BACKEND.value}, {len(cart.items)} items in cart)")
    return storefront
