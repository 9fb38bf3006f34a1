"""
Cart-related exceptions.
"""

from .base import StorefrontException


class CartException(StorefrontException):
    """Base exception for cart-related errors."""
    pass


class CartItemNotFoundException(CartException):
    """Raised when a line item is not part of the cart or draft."""

    def __init__(self, item_id: str):
        super().__init__(
            f"Line item {item_id} not found",
            details={'item_id': item_id}
        )
        self.item_id = item_id


class StorageUnavailableException(CartException):
    """Raised by cart storage backends when the durable store cannot be reached."""

    def __init__(self, key: str, reason: str):
        super().__init__(
            f"Cart storage unavailable for key '{key}': {reason}",
            details={'key': key, 'reason': reason}
        )
        self.key = key
        self.reason = reason
