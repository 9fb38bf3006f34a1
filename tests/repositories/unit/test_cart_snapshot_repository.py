"""
Unit tests for repositories/cart_snapshot.py against in-memory SQLite.
"""

import pytest

from repositories.cart_snapshot import CartSnapshotRepository


class TestCartSnapshotRepository:

    @pytest.mark.asyncio
    async def test_missing_key(self, test_session):
        assert await CartSnapshotRepository.get_payload("cart", test_session) is None

    @pytest.mark.asyncio
    async def test_upsert(self, test_session):
        await CartSnapshotRepository.save_payload("cart", b"v1", test_session)
        await CartSnapshotRepository.save_payload("cart", b"v2", test_session)
        await CartSnapshotRepository.save_payload("other", b"x", test_session)

        assert await CartSnapshotRepository.get_payload("cart", test_session) == b"v2"
        assert await CartSnapshotRepository.get_payload("other", test_session) == b"x"
