from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any
import logging

from sqlalchemy import Result, CursorResult
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession, AsyncEngine

import config
from models.base import Base

# Import models so every table is registered on Base.metadata
import models  # noqa: F401

# SQL echo stays off; statements are not useful in the application log
sql_echo = False


def _ensure_sqlite_folder(url: str) -> None:
    parsed = make_url(url)
    if parsed.get_backend_name() == "sqlite" and parsed.database and parsed.database != ":memory:":
        Path(parsed.database).parent.mkdir(parents=True, exist_ok=True)


def create_engine_for(url: str) -> AsyncEngine:
    _ensure_sqlite_folder(url)
    return create_async_engine(url, echo=sql_echo)


engine = create_engine_for(config.DB_URL)
session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

if config.CATALOG_DB_URL == config.DB_URL:
    catalog_engine = engine
    catalog_session_maker = session_maker
else:
    catalog_engine = create_engine_for(config.CATALOG_DB_URL)
    catalog_session_maker = async_sessionmaker(catalog_engine, class_=AsyncSession, expire_on_commit=False)


@asynccontextmanager
async def get_db_session() -> AsyncSession:
    """Session on the local database (cart snapshots)."""
    async with session_maker() as session:
        yield session


@asynccontextmanager
async def get_catalog_session() -> AsyncSession:
    """Session on the hosted catalog database (products, customers, profiles)."""
    async with catalog_session_maker() as session:
        yield session


async def create_tables(target: AsyncEngine | None = None) -> None:
    target = target or engine
    async with target.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logging.info(f"Database tables ensured on {target.url.render_as_string(hide_password=True)}")


async def session_execute(stmt, session: AsyncSession) -> Result[Any] | CursorResult[Any]:
    return await session.execute(stmt)


async def session_flush(session: AsyncSession) -> None:
    await session.flush()


async def session_commit(session: AsyncSession) -> None:
    await session.commit()
