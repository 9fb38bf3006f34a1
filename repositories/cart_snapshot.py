from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from db import session_execute, session_flush
from models.cart import CartSnapshot


class CartSnapshotRepository:

    @staticmethod
    async def get_payload(key: str, session: AsyncSession) -> bytes | None:
        stmt = select(CartSnapshot.payload).where(CartSnapshot.key == key)
        result = await session_execute(stmt, session)
        return result.scalar_one_or_none()

    @staticmethod
    async def save_payload(key: str, payload: bytes, session: AsyncSession) -> None:
        stmt = select(CartSnapshot).where(CartSnapshot.key == key)
        result = await session_execute(stmt, session)
        snapshot = result.scalar_one_or_none()
        if snapshot is None:
            session.add(CartSnapshot(key=key, payload=payload))
        else:
            snapshot.payload = payload
        await session_flush(session)

