"""
Error Handler Utility

Converts service exceptions into localized, user-facing notification texts.

Usage in a UI layer:
    from utils.error_handler import handle_service_error

    try:
        await cart.add(product)
    except StorefrontException as e:
        toast(handle_service_error(e, StoreEntity.CUSTOMER))
"""

import logging

from enums.store_entity import StoreEntity
from exceptions import (
    StorefrontException,
    OutOfStockException,
    InsufficientStockException,
    CartItemNotFoundException,
    StorageUnavailableException,
    ValidationException,
    BusinessException,
    DraftNotFoundException,
    InvalidDraftStateException,
    InvalidDraftFieldException,
    QueryException,
    UserNotFoundException,
    PermissionDeniedException,
)
from utils.localizator import Localizator

ERROR_MAPPING = {
    # Stock exceptions
    OutOfStockException: "error_out_of_stock",
    InsufficientStockException: "error_insufficient_stock",

    # Cart exceptions
    CartItemNotFoundException: "error_item_not_found",
    StorageUnavailableException: "error_storage_unavailable",

    # Order exceptions
    ValidationException: "error_validation",
    BusinessException: "error_order_rejected",
    DraftNotFoundException: "error_draft_not_found",
    InvalidDraftStateException: "error_draft_invalid_state",
    InvalidDraftFieldException: "error_draft_invalid_field",

    # Lookup exceptions
    QueryException: "error_search_failed",

    # User exceptions
    UserNotFoundException: "error_user_not_found",
    PermissionDeniedException: "error_permission_denied",
}


def handle_service_error(exception: StorefrontException, entity: StoreEntity = StoreEntity.COMMON) -> str:
    """
    Convert service exception to localized user-friendly error message.

    Args:
        exception: The custom exception raised by a service
        entity: Store entity for localization (CUSTOMER, STAFF or COMMON)

    Returns:
        Localized error message string
    """
    logging.warning(f"Service error handled: {type(exception).__name__} - {str(exception)}")

    localization_key = ERROR_MAPPING.get(type(exception))

    if not localization_key:
        logging.error(f"Unmapped exception type: {type(exception).__name__}")
        return Localizator.get_text(StoreEntity.COMMON, "error_unexpected")

    exception_data = {'message': exception.message}
    for attribute in ('product_name', 'requested', 'available', 'clamped_to', 'draft_id',
                      'current_state', 'required_state', 'reason', 'term', 'action'):
        if hasattr(exception, attribute):
            exception_data[attribute] = getattr(exception, attribute)
    if hasattr(exception, 'missing_fields'):
        exception_data['missing_fields'] = ", ".join(exception.missing_fields)
    if hasattr(exception, 'fields'):
        exception_data['fields'] = ", ".join(exception.fields)

    try:
        return _get_text(entity, localization_key).format(**exception_data)
    except KeyError as e:
        logging.error(f"Missing format parameter in error message: {e}")
        return _get_text(entity, localization_key)


def handle_unexpected_error(exception: Exception, entity: StoreEntity = StoreEntity.COMMON) -> str:
    """
    Handle unexpected exceptions (non-StorefrontException).

    Note:
        Also logs the full exception for debugging
    """
    logging.error(f"Unexpected error: {type(exception).__name__} - {str(exception)}", exc_info=True)
    return Localizator.get_text(StoreEntity.COMMON, "error_unexpected")


def _get_text(entity: StoreEntity, key: str) -> str:
    # Entity-specific wording first, shared wording otherwise
    try:
        return Localizator.get_text(entity, key)
    except KeyError:
        return Localizator.get_text(StoreEntity.COMMON, key)
