"""Tests for the asyncpg Database wrapper."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from src.storage.database import Database


@pytest.fixture
def mock_conn():
    conn = AsyncMock()
    conn.fetchval = AsyncMock(return_value=1)
    conn.fetchrow = AsyncMock(return_value={"id": "src-1"})
    conn.fetch = AsyncMock(return_value=[{"id": "src-1"}])
    conn.execute = AsyncMock(return_value="INSERT 0 1")
    return conn


@pytest.fixture
def mock_pool(mock_conn):
    pool = MagicMock()
    pool.acquire.return_value.__aenter__.return_value = mock_conn
    pool.close = AsyncMock()
    return pool


class TestDatabase:
    def test_pool_requires_connect(self):
        with pytest.raises(RuntimeError, match="not connected"):
            _ = Database("postgresql://localhost/test").pool

    @pytest.mark.asyncio
    async def test_context_manager_connects_and_closes(self, mock_pool):
        with patch(
            "src.storage.database.asyncpg.create_pool",
            AsyncMock(return_value=mock_pool),
        ) as create_pool:
            async with Database("postgresql://localhost/test", min_size=1, max_size=3) as db:
                assert db.pool is mock_pool

        create_pool.assert_awaited_once()
        assert create_pool.call_args.kwargs["max_size"] == 3
        mock_pool.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_query_helpers(self, mock_pool, mock_conn):
        with patch(
            "src.storage.database.asyncpg.create_pool",
            AsyncMock(return_value=mock_pool),
        ):
            async with Database("postgresql://localhost/test") as db:
                assert await db.execute("INSERT ...") == "INSERT 0 1"
                assert await db.fetchrow("SELECT ...", "src-1") == {"id": "src-1"}
                assert await db.fetch("SELECT ...") == [{"id": "src-1"}]

        mock_conn.fetchrow.assert_awaited_once_with("SELECT ...", "src-1")

    @pytest.mark.asyncio
    async def test_health_check(self, mock_pool, mock_conn):
        with patch(
            "src.storage.database.asyncpg.create_pool",
            AsyncMock(return_value=mock_pool),
        ):
            async with Database("postgresql://localhost/test") as db:
                assert await db.health_check() is True

                mock_conn.fetchval.side_effect = ConnectionError("gone")
                assert await db.health_check() is False

    @pytest.mark.asyncio
    async def test_first_query_connects_lazily(self, mock_pool, mock_conn):
        with patch(
            "src.storage.database.asyncpg.create_pool",
            AsyncMock(return_value=mock_pool),
        ) as create_pool:
            db = Database("postgresql://localhost/test")
            create_pool.assert_not_awaited()

            await db.fetch("SELECT 1")
            await db.fetch("SELECT 2")

        create_pool.assert_awaited_once()
        assert mock_conn.fetch.await_count == 2
