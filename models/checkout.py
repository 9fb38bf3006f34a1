from decimal import Decimal

from pydantic import BaseModel, ConfigDict

from enums.order_source import OrderSource
from enums.payment_method import PaymentMethod


class CheckoutCustomerDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    full_name: str
    phone: str
    email: str | None = None
    address: str | None = None


class CheckoutItemDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    product_id: str
    product_name: str
    quantity: int
    unit_price: Decimal
    image: str | None = None


class CheckoutPayloadDTO(BaseModel):
    """Immutable snapshot sent to the order placement backend. Built fresh for every submit."""
    model_config = ConfigDict(frozen=True)

    customer: CheckoutCustomerDTO
    selected_customer_id: str | None = None
    items: tuple[CheckoutItemDTO, ...]
    payment_method: PaymentMethod
    total_amount: Decimal
    order_source: OrderSource
    creator_id: str | None = None


class OrderResultDTO(BaseModel):
    order_id: str

    @property
    def short_id(self) -> str:
        return self.order_id[:8]
