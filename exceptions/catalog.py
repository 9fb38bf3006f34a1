"""
Catalog and customer lookup exceptions.
"""

from .base import StorefrontException


class QueryException(StorefrontException):
    """Raised when a product or customer search fails in the backend."""

    def __init__(self, entity: str, term: str, reason: str):
        super().__init__(
            f"Search for {entity} '{term}' failed: {reason}",
            details={'entity': entity, 'term': term}
        )
        self.entity = entity
        self.term = term
        self.reason = reason
