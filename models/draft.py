from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

import config
from enums.draft_status import DraftStatus
from enums.order_source import OrderSource
from enums.payment_method import PaymentMethod
from models.customer import CustomerDTO
from models.lineItem import LineItemDTO
from models.product import ProductDTO


class CustomerInfoDTO(BaseModel):
    full_name: str = ""
    phone: str = ""
    email: str = ""
    address: str = ""


class OrderDraftDTO(BaseModel):
    """
    One open POS order tab.

    Everything below `items` is transient lookup state owned by the tab:
    it is never part of the checkout payload.
    """
    draft_id: str
    status: DraftStatus = DraftStatus.OPEN
    created_at: datetime = Field(default_factory=datetime.now)

    customer: CustomerInfoDTO = Field(default_factory=CustomerInfoDTO)
    selected_customer_id: str | None = None
    payment_method: PaymentMethod = Field(default_factory=lambda: config.DEFAULT_POS_PAYMENT_METHOD)

    # Channel metadata
    order_source: OrderSource = Field(default_factory=lambda: config.DEFAULT_ORDER_SOURCE)
    channel_url: str = ""
    branch_id: str = Field(default_factory=lambda: config.DEFAULT_BRANCH_ID)
    price_policy: str = Field(default_factory=lambda: config.DEFAULT_PRICE_POLICY)
    delivery_date: str = ""
    delivery_time: str = ""
    reference: str = ""

    items: list[LineItemDTO] = Field(default_factory=list)

    product_search_term: str = ""
    product_results: list[ProductDTO] = Field(default_factory=list)
    customer_search_term: str = ""
    customer_results: list[CustomerDTO] = Field(default_factory=list)

    @property
    def total(self) -> Decimal:
        return sum((item.line_total for item in self.items), Decimal("0"))

    @property
    def is_guest(self) -> bool:
        return self.customer.full_name.strip() == config.GUEST_CUSTOMER_NAME
