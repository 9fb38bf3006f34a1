"""
Models Package

This file ensures all SQLAlchemy models are imported and registered,
so Base.metadata knows every table.
"""

from models.base import Base
from models.product import Product
from models.customer import Customer
from models.user import Profile
from models.cart import CartSnapshot

__all__ = [
    'Base',
    'Product',
    'Customer',
    'Profile',
    'CartSnapshot',
]
