# A product row from the hosted catalog. The cart and the POS drafts never keep
# a reference to the row itself, only a ProductDTO snapshot taken at lookup
# time, so price or stock changes on the server do not alter lines that were
# already added.
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, AliasChoices, field_validator
from sqlalchemy import Column, String, Integer, Numeric, JSON, CheckConstraint

from models.base import Base


class Product(Base):
    __tablename__ = "products"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    slug = Column(String, unique=True, nullable=True)
    price = Column(Numeric(14, 2), nullable=False)
    stock_quantity = Column(Integer, nullable=False, default=0)
    image = Column(String, nullable=True)
    images = Column(JSON, nullable=True)

    __table_args__ = (
        CheckConstraint('price >= 0', name='check_product_price_non_negative'),
    )


class ProductDTO(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    name: str
    price: Decimal = Field(ge=0)
    stock: int = Field(default=0, validation_alias=AliasChoices('stock', 'stock_quantity'))
    image: str | None = None
    images: list[str] | None = None
    slug: str | None = None

    @field_validator('id', mode='before')
    @classmethod
    def coerce_id(cls, value):
        return str(value)

    @property
    def image_ref(self) -> str | None:
        """First usable image: the single image column, else the first gallery entry."""
        if self.image:
            return self.image
        if self.images:
            return self.images[0]
        return None
