from pydantic import BaseModel, field_validator
from sqlalchemy import Column, String

from models.base import Base


class Customer(Base):
    __tablename__ = "customers"

    id = Column(String, primary_key=True)
    full_name = Column(String, nullable=True)
    phone = Column(String, nullable=False)
    email = Column(String, nullable=True)
    address = Column(String, nullable=True)


class CustomerDTO(BaseModel):
    id: str | None = None
    full_name: str | None = None
    phone: str = ""
    email: str | None = None
    address: str | None = None

    @field_validator('id', mode='before')
    @classmethod
    def coerce_id(cls, value):
        return None if value is None else str(value)
