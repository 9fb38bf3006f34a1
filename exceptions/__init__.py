"""
Custom exceptions for the storefront engine.

Exception Hierarchy:
--------------------
StorefrontException (base)
├── StockException
│   ├── OutOfStockException
│   └── InsufficientStockException
├── CartException
│   ├── CartItemNotFoundException
│   └── StorageUnavailableException
├── OrderException
│   ├── ValidationException
│   ├── BusinessException
│   ├── DraftNotFoundException
│   ├── InvalidDraftStateException
│   └── InvalidDraftFieldException
├── QueryException
└── UserException
    ├── UserNotFoundException
    └── PermissionDeniedException

Usage:
------
Services raise specific exceptions:
    raise OutOfStockException(product_id="p1", product_name="Áo thun")

UI layers catch and display the localized message:
    try:
        await cart.add(product)
    except StorefrontException as e:
        show_toast(handle_service_error(e))
"""

from .base import StorefrontException
from .stock import StockException, OutOfStockException, InsufficientStockException
from .cart import CartException, CartItemNotFoundException, StorageUnavailableException
from .order import (
    OrderException,
    ValidationException,
    BusinessException,
    DraftNotFoundException,
    InvalidDraftStateException,
    InvalidDraftFieldException
)
from .catalog import QueryException
from .user import UserException, UserNotFoundException, PermissionDeniedException

__all__ = [
    # Base
    'StorefrontException',

    # Stock
    'StockException',
    'OutOfStockException',
    'InsufficientStockException',

    # Cart
    'CartException',
    'CartItemNotFoundException',
    'StorageUnavailableException',

    # Order
    'OrderException',
    'ValidationException',
    'BusinessException',
    'DraftNotFoundException',
    'InvalidDraftStateException',
    'InvalidDraftFieldException',

    # Catalog
    'QueryException',

    # User
    'UserException',
    'UserNotFoundException',
    'PermissionDeniedException',
]
