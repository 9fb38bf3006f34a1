"""
Pytest configuration and fixtures for tests.

This file is automatically loaded by pytest and provides shared fixtures
and configuration for all tests.
"""

import os
import sys
from contextlib import asynccontextmanager
from datetime import datetime, timedelta
from decimal import Decimal

import pytest
import pytest_asyncio
from fakeredis import FakeAsyncRedis
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

# Add parent directory to Python path so tests can import modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

# Set environment before config.py is imported anywhere
os.environ.setdefault('RUNTIME_ENVIRONMENT', 'TEST')
os.environ.setdefault('STORE_LANGUAGE', 'vi')
os.environ.setdefault('CURRENCY', 'VND')
os.environ.setdefault('CART_STORAGE_BACKEND', 'memory')
os.environ.setdefault('DB_URL', 'sqlite+aiosqlite:///:memory:')
os.environ.setdefault('CATALOG_DB_URL', 'sqlite+aiosqlite:///:memory:')
os.environ.setdefault('PLACE_ORDER_FUNCTION_URL', 'https://backend.test/functions/v1/place-order')
os.environ.setdefault('BACKEND_ANON_KEY', 'test-anon-key')

from enums.user_role import UserRole  # noqa: E402
from models.product import ProductDTO  # noqa: E402
from models.user import UserDTO, ProfileDTO  # noqa: E402
from services.notification import NotificationService  # noqa: E402


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest_asyncio.fixture
async def test_engine():
    """Create test database engine (in-memory SQLite)."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False
    )

    # Import and create all tables
    from db import Base
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    # Cleanup
    await engine.dispose()


@pytest_asyncio.fixture
async def test_session(test_engine):
    """Create test database session."""
    async_session_maker = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False
    )

    async with async_session_maker() as session:
        yield session
        await session.rollback()


@pytest.fixture
def session_factory(test_engine):
    """Drop-in replacement for db.get_db_session bound to the test engine."""
    async_session_maker = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False
    )

    @asynccontextmanager
    async def factory():
        async with async_session_maker() as session:
            yield session

    return factory


# ============================================================================
# Redis Fixtures
# ============================================================================

@pytest_asyncio.fixture
async def redis_client():
    """Create fake Redis client for testing (no real Redis server needed)."""
    client = FakeAsyncRedis()
    yield client
    await client.aclose()


# ============================================================================
# Domain Fixtures
# ============================================================================

class FakeClock:
    """Manually advanced clock for notification expiry."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2024, 1, 1, 12, 0, 0)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def notifier(clock):
    return NotificationService(ttl_seconds=3, clock=clock)


@pytest.fixture
def make_product():
    """Factory for catalog product snapshots."""
    def _make(product_id="p1", name="Áo thun", price="50000", stock=5, image=None, slug=None):
        return ProductDTO(id=product_id, name=name, price=Decimal(price), stock=stock, image=image, slug=slug)
    return _make


@pytest.fixture
def staff_user():
    return UserDTO(id="staff-1", email="staff@shop.vn", role=UserRole.STAFF)


@pytest.fixture
def admin_user():
    return UserDTO(id="admin-1", email="admin@shop.vn", role=UserRole.ADMIN)


@pytest.fixture
def customer_user():
    return UserDTO(id="user-1", email="khach@shop.vn", role=UserRole.USER)


@pytest.fixture
def customer_profile():
    return ProfileDTO(id="user-1", role=UserRole.USER, full_name="Tran Thi B", phone="0911111111",
                      address="12 Le Loi, Q1")
