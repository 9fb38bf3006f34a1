import logging

import config
from enums.draft_status import DraftStatus
from enums.order_source import OrderSource
from enums.payment_method import PaymentMethod
from enums.store_entity import StoreEntity
from exceptions import (
    BusinessException,
    PermissionDeniedException,
    StorefrontException,
    ValidationException,
)
from models.checkout import CheckoutCustomerDTO, CheckoutItemDTO, CheckoutPayloadDTO, OrderResultDTO
from models.draft import CustomerInfoDTO, OrderDraftDTO
from models.lineItem import LineItemDTO
from models.user import ProfileDTO, UserDTO
from services.cart import CartService
from services.draft_manager import OrderDraftManager
from services.notification import NotificationService
from services.order_placement import OrderPlacer
from services.pricing import PricingService
from services.selection import SelectionOverlay

logger = logging.getLogger(__name__)


class CheckoutService:
    """
    Turns a draft or a cart selection into one call to the order placer.

    Validation happens before anything leaves the process. The placer is
    called exactly once per submit; there is no retry and no deduplication
    of a double submit. On success the submitted state is retired, on
    failure it is left as it was so the user can fix it and try again.
    """

    def __init__(self, order_placer: OrderPlacer, notifier: NotificationService | None = None):
        self.order_placer = order_placer
        self.notifier = notifier or NotificationService()

    # ------------------------------------------------------------------
    # Payload shaping
    # ------------------------------------------------------------------

    @staticmethod
    def normalize_customer(customer: CustomerInfoDTO) -> CheckoutCustomerDTO:
        """
        Trim the contact fields and translate guest placeholders.

        "N/A" (or blank) email/address become None; an "N/A" phone becomes the
        placeholder phone number the backend accepts.
        """
        def optional(value: str) -> str | None:
            value = value.strip()
            return None if not value or value == config.GUEST_PLACEHOLDER else value

        phone = customer.phone.strip()
        if phone == config.GUEST_PLACEHOLDER:
            phone = config.GUEST_PHONE_PLACEHOLDER

        return CheckoutCustomerDTO(
            full_name=customer.full_name.strip(),
            phone=phone,
            email=optional(customer.email),
            address=optional(customer.address),
        )

    @staticmethod
    def build_items(items: list[LineItemDTO]) -> tuple[CheckoutItemDTO, ...]:
        return tuple(
            CheckoutItemDTO(
                product_id=item.product_id,
                product_name=item.product_name,
                quantity=item.quantity,
                unit_price=item.unit_price,
                image=item.image,
            )
            for item in items
        )

    @staticmethod
    def build_draft_payload(draft: OrderDraftDTO, actor: UserDTO) -> CheckoutPayloadDTO:
        return CheckoutPayloadDTO(
            customer=CheckoutService.normalize_customer(draft.customer),
            selected_customer_id=draft.selected_customer_id,
            items=CheckoutService.build_items(draft.items),
            payment_method=draft.payment_method,
            total_amount=PricingService.calculate_total(draft.items),
            order_source=draft.order_source,
            creator_id=actor.id,
        )

    @staticmethod
    def build_cart_payload(items: list[LineItemDTO], actor: UserDTO, profile: ProfileDTO,
                           payment_method: PaymentMethod) -> CheckoutPayloadDTO:
        customer = CustomerInfoDTO(
            full_name=profile.full_name or "",
            phone=profile.phone or "",
            email=profile.email or actor.email or "",
            address=profile.address or "",
        )
        return CheckoutPayloadDTO(
            customer=CheckoutService.normalize_customer(customer),
            selected_customer_id=None,
            items=CheckoutService.build_items(items),
            payment_method=payment_method,
            total_amount=PricingService.calculate_total(items),
            order_source=OrderSource.WEB,
            creator_id=actor.id,
        )

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    async def submit_draft(self, manager: OrderDraftManager, actor: UserDTO | None,
                           draft_id: str | None = None) -> OrderResultDTO:
        """
        Place the order for a draft (the active one by default).

        Raises:
            ValidationException: draft incomplete, nothing was sent
            PermissionDeniedException: actor is not staff or admin
            BusinessException: the backend rejected the order, draft left open
        """
        draft_id = draft_id or manager.active_draft_id
        try:
            draft = manager.validate(draft_id)
            if actor is None or not actor.role.can_use_pos():
                raise PermissionDeniedException(actor.id if actor else None, "create POS orders")
            payload = self.build_draft_payload(draft, actor)
            manager.begin_submission(draft_id)
        except StorefrontException as e:
            self.notifier.error(e, StoreEntity.STAFF)
            raise

        logger.info(f"Submitting draft {draft_id}: {len(payload.items)} items, total {payload.total_amount}")
        try:
            result = await self.order_placer.place_order(payload)
        except BusinessException as e:
            manager.fail_submission(draft_id)
            self.notifier.error(e, StoreEntity.STAFF)
            raise
        except Exception as e:
            manager.fail_submission(draft_id)
            self.notifier.unexpected(e, StoreEntity.STAFF)
            raise

        manager.complete_submission(draft_id)
        self.notifier.localized(StoreEntity.STAFF, "order_created", order_id=result.short_id)
        return result

    async def submit_cart_selection(self, cart: CartService, selection: SelectionOverlay, actor: UserDTO | None,
                                    profile: ProfileDTO | None,
                                    payment_method: PaymentMethod = PaymentMethod.COD) -> OrderResultDTO:
        """
        Place an order for the selected cart lines of a signed-in shopper.

        Only the selection is cleared on success; the cart lines themselves
        stay until the shopper removes them.
        """
        try:
            if actor is None:
                raise PermissionDeniedException(None, "check out")
            items = [item for item in cart.items if item.product_id in selection]
            missing = []
            if profile is None or not (profile.full_name or "").strip():
                missing.append("customer_name")
            if profile is None or not (profile.phone or "").strip():
                missing.append("customer_phone")
            if not items:
                missing.append("items")
            if missing:
                raise ValidationException(missing)
            payload = self.build_cart_payload(items, actor, profile, payment_method)
            selection.set_status(DraftStatus.SUBMITTING)
        except StorefrontException as e:
            self.notifier.error(e, StoreEntity.CUSTOMER)
            raise

        logger.info(f"Submitting cart selection for user {actor.id}: {len(payload.items)} items")
        try:
            result = await self.order_placer.place_order(payload)
        except BusinessException as e:
            selection.set_status(DraftStatus.OPEN)
            self.notifier.error(e, StoreEntity.CUSTOMER)
            raise
        except Exception as e:
            selection.set_status(DraftStatus.OPEN)
            self.notifier.unexpected(e, StoreEntity.CUSTOMER)
            raise

        selection.set_status(DraftStatus.OPEN)
        selection.deselect_all()
        self.notifier.localized(StoreEntity.CUSTOMER, "checkout_success", order_id=result.short_id)
        return result
