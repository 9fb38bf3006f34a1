"""
User-related exceptions.
"""

from .base import StorefrontException


class UserException(StorefrontException):
    """Base exception for user-related errors."""
    pass


class UserNotFoundException(UserException):
    """Raised when no profile exists for a user id."""

    def __init__(self, user_id: str | None = None):
        if user_id:
            message = f"User with ID {user_id} not found"
            details = {'user_id': user_id}
        else:
            message = "User not found"
            details = {}

        super().__init__(message, details)
        self.user_id = user_id


class PermissionDeniedException(UserException):
    """Raised when a user lacks the role required for an action."""

    def __init__(self, user_id: str | None, action: str):
        super().__init__(
            f"User {user_id or '(anonymous)'} is not allowed to {action}",
            details={'user_id': user_id, 'action': action}
        )
        self.user_id = user_id
        self.action = action
