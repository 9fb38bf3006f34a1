"""
Stock-related exceptions.
"""

from .base import StorefrontException


class StockException(StorefrontException):
    """Base exception for stock ceiling violations."""
    pass


class OutOfStockException(StockException):
    """Raised when a product with no available stock is added."""

    def __init__(self, product_id: str, product_name: str):
        super().__init__(
            f"Product {product_name} is out of stock",
            details={'product_id': product_id}
        )
        self.product_id = product_id
        self.product_name = product_name


class InsufficientStockException(StockException):
    """
    Raised when a requested quantity exceeds the known stock.

    clamped_to is set when the stored quantity was lowered to the stock
    ceiling instead of leaving the previous quantity in place.
    """

    def __init__(self, product_id: str, product_name: str, requested: int, available: int,
                 clamped_to: int | None = None):
        super().__init__(
            f"Insufficient stock for {product_name}: requested {requested}, available {available}",
            details={'product_id': product_id, 'requested': requested, 'available': available}
        )
        self.product_id = product_id
        self.product_name = product_name
        self.requested = requested
        self.available = available
        self.clamped_to = clamped_to
