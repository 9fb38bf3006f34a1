"""
Durable storage for the shopping cart snapshot.

Every backend exposes the same two coroutines:
    load(key) -> bytes | None
    save(key, data) -> None

and raises StorageUnavailableException when the underlying store cannot be
reached, so CartService can fall back to keeping the cart in memory.
"""

import logging
from contextlib import AbstractAsyncContextManager
from typing import Callable

from redis.asyncio import Redis
from redis.exceptions import RedisError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

import config
from db import get_db_session, session_commit
from enums.storage_backend import StorageBackend
from exceptions import StorageUnavailableException
from repositories.cart_snapshot import CartSnapshotRepository

logger = logging.getLogger(__name__)


class CartStorage:
    """Interface of a cart storage backend."""

    async def load(self, key: str) -> bytes | None:
        raise NotImplementedError

    async def save(self, key: str, data: bytes) -> None:
        raise NotImplementedError


class MemoryCartStorage(CartStorage):
    """Process-local storage. Also what a cart degrades to when its real backend fails."""

    def __init__(self):
        self._data: dict[str, bytes] = {}

    async def load(self, key: str) -> bytes | None:
        return self._data.get(key)

    async def save(self, key: str, data: bytes) -> None:
        self._data[key] = data


class RedisCartStorage(CartStorage):

    def __init__(self, redis: Redis, prefix: str = "storefront:"):
        self.redis = redis
        self.prefix = prefix

    async def load(self, key: str) -> bytes | None:
        try:
            return await self.redis.get(f"{self.prefix}{key}")
        except RedisError as e:
            raise StorageUnavailableException(key, str(e)) from e

    async def save(self, key: str, data: bytes) -> None:
        try:
            await self.redis.set(f"{self.prefix}{key}", data)
        except RedisError as e:
            raise StorageUnavailableException(key, str(e)) from e


class SqlCartStorage(CartStorage):
    """Keeps the snapshot in the cart_snapshots table of the local database."""

    def __init__(self, session_factory: Callable[[], AbstractAsyncContextManager[AsyncSession]] = get_db_session):
        self.session_factory = session_factory

    async def load(self, key: str) -> bytes | None:
        try:
            async with self.session_factory() as session:
                return await CartSnapshotRepository.get_payload(key, session)
        except SQLAlchemyError as e:
            raise StorageUnavailableException(key, str(e)) from e

    async def save(self, key: str, data: bytes) -> None:
        try:
            async with self.session_factory() as session:
                await CartSnapshotRepository.save_payload(key, data, session)
                await session_commit(session)
        except SQLAlchemyError as e:
            raise StorageUnavailableException(key, str(e)) from e


def create_cart_storage(backend: StorageBackend | None = None) -> CartStorage:
    """Build the storage backend selected by config.CART_STORAGE_BACKEND."""
    backend = backend or config.CART_STORAGE_BACKEND
    logger.info(f"Cart storage backend: {backend.value}")
    match backend:
        case StorageBackend.REDIS:
            redis = Redis(host=config.REDIS_HOST, port=config.REDIS_PORT, password=config.REDIS_PASSWORD)
            return RedisCartStorage(redis)
        case StorageBackend.SQL:
            return SqlCartStorage()
        case _:
            return MemoryCartStorage()
