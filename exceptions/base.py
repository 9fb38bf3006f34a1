"""
Base exception classes for the storefront engine.
"""


class StorefrontException(Exception):
    """
    Base exception for all storefront errors.

    All custom exceptions raised by the cart, draft and checkout services
    inherit from this class, so a UI layer can catch every expected failure
    with a single handler.

    Attributes:
        message: Human-readable error message
        details: Optional dict with additional context (product ids, draft ids, ...)
    """

    def __init__(self, message: str, details: dict | None = None):
        """
        Initialize base exception.

        Args:
            message: Human-readable error message
            details: Optional dict with additional context
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return the error message."""
        return self.message

    def __repr__(self) -> str:
        """Return detailed representation with context."""
        if self.details:
            details_str = ', '.join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.__class__.__name__}('{self.message}', {details_str})"
        return f"{self.__class__.__name__}('{self.message}')"
