from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, model_validator


class LineItemDTO(BaseModel):
    """
    One product entry inside the cart or a POS draft.

    unit_price, product_name and image are copied from the product when the
    line is created. known_stock is the stock reported by the most recent
    lookup of the product and is the ceiling for quantity.
    """
    model_config = ConfigDict(validate_assignment=True)

    line_id: str
    product_id: str
    product_name: str
    unit_price: Decimal = Field(ge=0)
    quantity: int = Field(ge=1)
    known_stock: int = Field(ge=0)
    image: str | None = None
    slug: str | None = None

    @model_validator(mode='after')
    def check_stock_ceiling(self):
        if self.quantity > self.known_stock:
            raise ValueError(f"quantity {self.quantity} exceeds known stock {self.known_stock}")
        return self

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity
