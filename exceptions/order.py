"""
Order draft and checkout exceptions.
"""

from .base import StorefrontException


class OrderException(StorefrontException):
    """Base exception for draft and checkout errors."""
    pass


class ValidationException(OrderException):
    """Raised before submission when required customer fields or line items are missing."""

    def __init__(self, missing_fields: list[str]):
        super().__init__(
            f"Order is incomplete, missing: {', '.join(missing_fields)}",
            details={'missing_fields': missing_fields}
        )
        self.missing_fields = missing_fields


class BusinessException(OrderException):
    """
    Raised when the order placement backend rejects an order.

    The message is the backend's own text and is shown to the user as-is.
    """

    def __init__(self, message: str, order_id: str | None = None):
        super().__init__(message, details={'order_id': order_id} if order_id else None)
        self.order_id = order_id


class DraftNotFoundException(OrderException):
    """Raised when a draft id does not belong to an open draft."""

    def __init__(self, draft_id: str):
        super().__init__(
            f"Draft {draft_id} not found",
            details={'draft_id': draft_id}
        )
        self.draft_id = draft_id


class InvalidDraftStateException(OrderException):
    """Raised when a draft is in the wrong state for the requested transition."""

    def __init__(self, draft_id: str, current_state: str, required_state: str):
        super().__init__(
            f"Draft {draft_id} is in state {current_state}, required: {required_state}",
            details={'draft_id': draft_id, 'current_state': current_state, 'required_state': required_state}
        )
        self.draft_id = draft_id
        self.current_state = current_state
        self.required_state = required_state


class InvalidDraftFieldException(OrderException):
    """Raised when a draft update touches fields that are not editable."""

    def __init__(self, fields: list[str]):
        super().__init__(
            f"Draft fields cannot be updated directly: {', '.join(fields)}",
            details={'fields': fields}
        )
        self.fields = fields
