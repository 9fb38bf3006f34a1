# The cart snapshot is the durable form of a shopping session's cart. It is
# written after every cart mutation under a fixed key and read back once
# when the session starts.
from pydantic import BaseModel
from sqlalchemy import Column, String, LargeBinary, DateTime, func

from models.base import Base
from models.lineItem import LineItemDTO


class CartSnapshot(Base):
    __tablename__ = "cart_snapshots"

    key = Column(String, primary_key=True)
    payload = Column(LargeBinary, nullable=False)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())


class CartSnapshotDTO(BaseModel):
    items: list[LineItemDTO] = []

    def to_bytes(self) -> bytes:
        return self.model_dump_json().encode("utf-8")

    @classmethod
    def from_bytes(cls, data: bytes) -> "CartSnapshotDTO":
        return cls.model_validate_json(data)
