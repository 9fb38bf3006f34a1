"""
Point-of-sale order tabs.

Staff can keep several orders open at once (one customer on the phone, one at
the counter, ...). Each tab is an OrderDraftDTO owned exclusively by the
OrderDraftManager: nothing else edits a draft's customer fields or line items.

Invariants:
- there is always at least one open draft
- exactly one draft is active
- an edit of the active draft never touches another draft
"""

import logging
from decimal import Decimal
from typing import Awaitable, Callable

import config
from enums.draft_status import DraftStatus
from enums.notification_kind import NotificationKind
from enums.store_entity import StoreEntity
from exceptions import (
    StorefrontException,
    DraftNotFoundException,
    InvalidDraftFieldException,
    QueryException,
    ValidationException,
)
from models.customer import CustomerDTO
from models.draft import OrderDraftDTO, CustomerInfoDTO
from models.lineItem import LineItemDTO
from models.product import ProductDTO
from services.line_items import LineItemStore
from services.notification import NotificationService
from services.pricing import PricingService
from utils.draft_state_machine import DraftStateMachine
from utils.identifiers import new_draft_id

logger = logging.getLogger(__name__)

ProductLookup = Callable[[str, int], Awaitable[list[ProductDTO]]]
CustomerLookup = Callable[[str, int], Awaitable[list[CustomerDTO]]]
DraftListener = Callable[["OrderDraftManager"], None]

# Fields a caller may change through update_active_draft / create_draft
EDITABLE_FIELDS = frozenset({
    "customer",
    "selected_customer_id",
    "payment_method",
    "order_source",
    "channel_url",
    "branch_id",
    "price_policy",
    "delivery_date",
    "delivery_time",
    "reference",
    "product_search_term",
    "customer_search_term",
})


class OrderDraftManager:

    def __init__(self, notifier: NotificationService | None = None,
                 product_lookup: ProductLookup | None = None,
                 customer_lookup: CustomerLookup | None = None,
                 search_limit: int | None = None):
        self.notifier = notifier or NotificationService()
        self.product_lookup = product_lookup
        self.customer_lookup = customer_lookup
        self.search_limit = search_limit or config.SEARCH_RESULT_LIMIT
        self._drafts: list[OrderDraftDTO] = []
        self._active_id: str | None = None
        self._search_generation: dict[tuple[str, str], int] = {}
        self._listeners: list[DraftListener] = []
        self.create_draft()

    # ------------------------------------------------------------------
    # Tabs
    # ------------------------------------------------------------------

    @property
    def drafts(self) -> list[OrderDraftDTO]:
        return list(self._drafts)

    @property
    def active_draft_id(self) -> str:
        return self._active_id

    @property
    def active_draft(self) -> OrderDraftDTO:
        return self.get_draft(self._active_id)

    def get_draft(self, draft_id: str) -> OrderDraftDTO:
        draft = self._find(draft_id)
        if draft is None:
            raise DraftNotFoundException(draft_id)
        return draft

    def subscribe(self, listener: DraftListener) -> Callable[[], None]:
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener) if listener in self._listeners else None

    def create_draft(self, **defaults) -> OrderDraftDTO:
        self._check_editable(defaults)
        taken = {draft.draft_id for draft in self._drafts}
        draft_id = new_draft_id()
        while draft_id in taken:
            draft_id = new_draft_id()

        draft = OrderDraftDTO.model_validate({**defaults, "draft_id": draft_id})
        self._drafts.append(draft)
        self._active_id = draft_id
        logger.info(f"Draft {draft_id} opened ({len(self._drafts)} open)")
        self._changed()
        return draft

    def close_draft(self, draft_id: str) -> None:
        draft = self.get_draft(draft_id)
        draft.status = DraftStateMachine.transition(draft_id, draft.status, DraftStatus.CLOSED)
        self._drafts.remove(draft)
        self._search_generation = {k: v for k, v in self._search_generation.items() if k[0] != draft_id}
        logger.info(f"Draft {draft_id} closed ({len(self._drafts)} open)")

        if not self._drafts:
            self.create_draft()
            return
        if self._active_id == draft_id:
            self._active_id = self._drafts[0].draft_id
        self._changed()

    def set_active(self, draft_id: str) -> None:
        self.get_draft(draft_id)
        self._active_id = draft_id
        self._changed()

    def update_active_draft(self, **patch) -> OrderDraftDTO:
        """
        Apply a partial update to the active draft only.

        `customer` may be a CustomerInfoDTO or a dict of the customer fields
        to change; other customer fields keep their values.
        """
        self._check_editable(patch)
        draft = self.active_draft
        if isinstance(patch.get("customer"), dict):
            unknown = sorted(set(patch["customer"]) - set(CustomerInfoDTO.model_fields))
            if unknown:
                raise InvalidDraftFieldException([f"customer.{field}" for field in unknown])
            patch["customer"] = draft.customer.model_copy(update=patch["customer"])
        updated = OrderDraftDTO.model_validate({**draft.model_dump(), **patch})
        self._drafts[self._drafts.index(draft)] = updated
        self._changed()
        return updated

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    async def search_products(self, term: str | None = None) -> list[ProductDTO]:
        """
        Search the catalog for the active draft.

        The results land on the draft that started the search, even if staff
        switched tabs meanwhile. An older response arriving after a newer
        search was started is dropped.
        """
        draft = self.active_draft
        if term is not None:
            draft.product_search_term = term
        term = draft.product_search_term.strip()
        if not term:
            draft.product_results = []
            self._changed()
            return []

        draft_id = draft.draft_id
        generation = self._next_generation(draft_id, "product")
        try:
            results = await self.product_lookup(term, self.search_limit)
        except QueryException as e:
            if self._is_current(draft_id, "product", generation):
                self._find(draft_id).product_results = []
                self._changed()
            self.notifier.error(e, StoreEntity.STAFF)
            raise

        if not self._is_current(draft_id, "product", generation):
            logger.debug(f"Discarding stale product results for draft {draft_id}")
            return results
        # the draft may have been replaced by an edit while the lookup ran
        self._find(draft_id).product_results = list(results)
        self._changed()
        return results

    async def search_customers(self, term: str | None = None) -> list[CustomerDTO]:
        draft = self.active_draft
        if term is not None:
            draft.customer_search_term = term
        term = draft.customer_search_term.strip()
        if not term:
            draft.customer_results = []
            self._changed()
            self.notifier.localized(StoreEntity.STAFF, "customer_search_term_required", kind=NotificationKind.INFO)
            return []

        draft_id = draft.draft_id
        generation = self._next_generation(draft_id, "customer")
        try:
            results = await self.customer_lookup(term, self.search_limit)
        except QueryException as e:
            if self._is_current(draft_id, "customer", generation):
                self._find(draft_id).customer_results = []
                self._changed()
            self.notifier.error(e, StoreEntity.STAFF)
            raise

        if not self._is_current(draft_id, "customer", generation):
            logger.debug(f"Discarding stale customer results for draft {draft_id}")
            return results
        self._find(draft_id).customer_results = list(results)
        self._changed()
        if results:
            self.notifier.localized(StoreEntity.STAFF, "customers_found", count=len(results))
        else:
            self.notifier.localized(StoreEntity.STAFF, "customers_not_found", kind=NotificationKind.INFO)
        return results

    def select_customer(self, customer: CustomerDTO) -> OrderDraftDTO:
        draft = self.update_active_draft(
            customer=CustomerInfoDTO(
                full_name=customer.full_name or "",
                phone=customer.phone or "",
                email=customer.email or "",
                address=customer.address or "",
            ),
            selected_customer_id=customer.id,
            customer_search_term="",
        )
        draft.customer_results = []
        self.notifier.localized(StoreEntity.STAFF, "customer_selected", name=customer.full_name or customer.phone)
        return draft

    def set_guest_customer(self) -> OrderDraftDTO:
        """Fill the walk-in customer placeholder for a counter sale."""
        draft = self.update_active_draft(
            customer=CustomerInfoDTO(
                full_name=config.GUEST_CUSTOMER_NAME,
                phone=config.GUEST_PLACEHOLDER,
                email=config.GUEST_PLACEHOLDER,
                address=config.GUEST_PLACEHOLDER,
            ),
            selected_customer_id=None,
            customer_search_term="",
        )
        draft.customer_results = []
        self.notifier.localized(StoreEntity.STAFF, "guest_customer_set", kind=NotificationKind.INFO)
        return draft

    # ------------------------------------------------------------------
    # Line items of the active draft
    # ------------------------------------------------------------------

    def add_product(self, product: ProductDTO, quantity: int = 1) -> LineItemDTO:
        draft = self.active_draft
        try:
            item = LineItemStore(draft.items).add_or_increment(product, quantity)
        except StorefrontException as e:
            self._changed()
            self.notifier.error(e, StoreEntity.STAFF)
            raise
        draft.product_search_term = ""
        draft.product_results = []
        self._changed()
        self.notifier.localized(StoreEntity.STAFF, "draft_item_added", product_name=product.name)
        return item

    def set_quantity(self, line_id: str, quantity: int) -> LineItemDTO:
        """
        Change a line's quantity in the active draft.

        When the product is among the draft's current search results, that
        fresher stock figure is the ceiling; otherwise the stock captured when
        the line was added.
        """
        draft = self.active_draft
        store = LineItemStore(draft.items)
        try:
            item = store.get(line_id)
            fresh = next((p for p in draft.product_results if p.id == item.product_id), None)
            updated = store.set_quantity(line_id, quantity, fresh.stock if fresh else None)
        except StorefrontException as e:
            self._changed()
            self.notifier.error(e, StoreEntity.STAFF)
            raise
        self._changed()
        self.notifier.localized(StoreEntity.STAFF, "draft_quantity_updated",
                                product_name=updated.product_name, quantity=updated.quantity)
        return updated

    def remove_item(self, line_id: str) -> None:
        LineItemStore(self.active_draft.items).remove(line_id)
        self._changed()
        self.notifier.localized(StoreEntity.STAFF, "draft_item_removed")

    # ------------------------------------------------------------------
    # Submission support
    # ------------------------------------------------------------------

    def total(self, draft_id: str | None = None) -> Decimal:
        draft = self.get_draft(draft_id or self._active_id)
        return PricingService.calculate_total(draft.items)

    def validate(self, draft_id: str | None = None) -> OrderDraftDTO:
        """
        Check the draft is ready to submit.

        The walk-in guest needs no contact details.

        Raises:
            ValidationException: customer name or phone blank, or no line items
        """
        draft = self.get_draft(draft_id or self._active_id)
        missing = []
        if not draft.is_guest:
            if not draft.customer.full_name.strip():
                missing.append("customer_name")
            if not draft.customer.phone.strip():
                missing.append("customer_phone")
        if not draft.items:
            missing.append("items")
        if missing:
            raise ValidationException(missing)
        return draft

    def begin_submission(self, draft_id: str) -> OrderDraftDTO:
        draft = self.get_draft(draft_id)
        draft.status = DraftStateMachine.transition(draft_id, draft.status, DraftStatus.SUBMITTING)
        self._changed()
        return draft

    def fail_submission(self, draft_id: str) -> None:
        draft = self._find(draft_id)
        if draft is None:
            return
        draft.status = DraftStateMachine.transition(draft_id, draft.status, DraftStatus.OPEN)
        self._changed()

    def complete_submission(self, draft_id: str) -> None:
        """Retire a submitted draft; a fresh one is opened if it was the last."""
        if self._find(draft_id) is None:
            logger.warning(f"Draft {draft_id} was already closed when its order was placed")
            return
        self.close_draft(draft_id)

    # ------------------------------------------------------------------

    def _find(self, draft_id: str | None) -> OrderDraftDTO | None:
        return next((draft for draft in self._drafts if draft.draft_id == draft_id), None)

    @staticmethod
    def _check_editable(fields: dict) -> None:
        forbidden = sorted(set(fields) - EDITABLE_FIELDS)
        if forbidden:
            raise InvalidDraftFieldException(forbidden)

    def _next_generation(self, draft_id: str, kind: str) -> int:
        key = (draft_id, kind)
        self._search_generation[key] = self._search_generation.get(key, 0) + 1
        return self._search_generation[key]

    def _is_current(self, draft_id: str, kind: str, generation: int) -> bool:
        return self._find(draft_id) is not None and self._search_generation.get((draft_id, kind)) == generation

    def _changed(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception as e:
                logger.error(f"Draft listener failed: {e}")
