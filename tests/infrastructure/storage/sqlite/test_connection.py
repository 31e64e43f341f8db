"""Tests for the SQLite connection pool."""

import aiosqlite
import pytest

from stockledger.core.exceptions import DatabaseError
from stockledger.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_pool,
)


class TestConnectionPool:
    async def test_connections_enforce_foreign_keys(self, pool):
        async with pool.acquire() as conn:
            cursor = await conn.execute("PRAGMA foreign_keys")
            assert (await cursor.fetchone())[0] == 1
            cursor = await conn.execute("PRAGMA journal_mode")
            assert (await cursor.fetchone())[0] == "wal"

    async def test_transaction_commits(self, pool):
        async with pool.transaction() as conn:
            await conn.execute("INSERT INTO branches (name) VALUES ('Downtown')")

        async with pool.acquire() as conn:
            cursor = await conn.execute("SELECT COUNT(*) FROM branches")
            assert (await cursor.fetchone())[0] == 1

    async def test_transaction_rolls_back_on_error(self, pool):
        with pytest.raises(RuntimeError):
            async with pool.transaction() as conn:
                await conn.execute("INSERT INTO branches (name) VALUES ('Downtown')")
                raise RuntimeError("boom")

        async with pool.acquire() as conn:
            cursor = await conn.execute("SELECT COUNT(*) FROM branches")
            assert (await cursor.fetchone())[0] == 0

    async def test_operational_failure_is_database_error(self, pool):
        with pytest.raises(DatabaseError) as exc:
            async with pool.transaction() as conn:
                await conn.execute("INSERT INTO branches (name) VALUES ('Downtown')")
                await conn.execute("SELECT * FROM no_such_table")

        assert exc.value.details["operation"] == "transaction"
        async with pool.acquire() as conn:
            cursor = await conn.execute("SELECT COUNT(*) FROM branches")
            assert (await cursor.fetchone())[0] == 0

    async def test_lock_held_past_busy_timeout(self, pool, db_path):
        impatient = ConnectionPool(db_path, pool_size=1, busy_timeout=50)
        await impatient.initialize()
        async with aiosqlite.connect(db_path, isolation_level=None) as holder:
            await holder.execute("BEGIN IMMEDIATE")
            try:
                with pytest.raises(DatabaseError) as exc:
                    async with impatient.transaction():
                        pass
            finally:
                await holder.rollback()
                await impatient.close()

        assert "locked" in exc.value.details["error"]

    async def test_lazy_initialize_and_reopen(self, db_path):
        pool = ConnectionPool(db_path, pool_size=1)
        async with pool.acquire() as conn:
            await conn.execute("SELECT 1")
        await pool.close()

        async with pool.acquire() as conn:
            cursor = await conn.execute("SELECT 1")
            assert (await cursor.fetchone())[0] == 1
        await pool.close()


class TestGlobalPool:
    async def test_singleton_uses_settings_path(self, tmp_path):
        pool = await get_pool()
        try:
            assert pool is await get_pool()
            assert pool.db_path.is_relative_to(tmp_path)
        finally:
            await close_pool()
