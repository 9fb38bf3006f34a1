import logging
from decimal import Decimal
from typing import Callable

from enums.draft_status import DraftStatus
from exceptions import CartItemNotFoundException
from models.lineItem import LineItemDTO
from services.cart import CartService
from services.pricing import PricingService
from utils.draft_state_machine import DraftStateMachine

logger = logging.getLogger(__name__)


class SelectionOverlay:
    """
    The cart lines ticked for the next checkout.

    Lives only as long as the UI session. It listens to the cart and drops
    any product id whose line has been removed, so it never points at lines
    that no longer exist.
    """

    def __init__(self, cart: CartService):
        self.cart = cart
        self.status = DraftStatus.OPEN
        self._selected: set[str] = set()
        self._unsubscribe: Callable[[], None] = cart.subscribe(lambda _: self.reconcile())

    @property
    def selected_ids(self) -> set[str]:
        return set(self._selected)

    def __len__(self) -> int:
        return len(self._selected)

    def __contains__(self, product_id: str) -> bool:
        return product_id in self._selected

    def select(self, product_id: str) -> None:
        if self.cart.find(product_id) is None:
            raise CartItemNotFoundException(product_id)
        self._selected.add(product_id)

    def deselect(self, product_id: str) -> None:
        self._selected.discard(product_id)

    def select_all(self) -> None:
        self._selected = set(self.cart.product_ids())

    def deselect_all(self) -> None:
        self._selected.clear()

    def selected_items(self) -> list[LineItemDTO]:
        """Selected lines in cart order."""
        return [item for item in self.cart.items if item.product_id in self._selected]

    def selected_total(self) -> Decimal:
        return PricingService.calculate_total(self.selected_items())

    def reconcile(self) -> None:
        in_cart = set(self.cart.product_ids())
        dangling = self._selected - in_cart
        if dangling:
            logger.debug(f"Dropping {len(dangling)} selected ids no longer in the cart")
            self._selected &= in_cart

    def set_status(self, status: DraftStatus) -> None:
        self.status = DraftStateMachine.transition("cart-selection", self.status, status)

    def close(self) -> None:
        """Stop listening to the cart."""
        self._unsubscribe()
