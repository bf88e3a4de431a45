"""Tests for the SQLAlchemy role/claim store and the Redis cache adapter.

The store is exercised against a mocked AsyncSession: statements are
captured from `db.execute` and compiled for PostgreSQL.
"""

from __future__ import annotations

import uuid
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.dialects import postgresql

from src.authorization.store import InsertOutcome, SqlAlchemyRoleClaimStore
from src.db.cache import RedisCache

# ── Helpers ──────────────────────────────────────────────────────────


def _make_db(returned_id: uuid.UUID | None = None) -> AsyncMock:
    """AsyncSession mock whose execute() result yields `returned_id`."""
    result = MagicMock()
    result.scalar_one_or_none.return_value = returned_id
    result.scalars.return_value.all.return_value = []
    db = AsyncMock()
    db.execute.return_value = result
    return db


def _executed_sql(db: AsyncMock) -> str:
    stmt = db.execute.await_args.args[0]
    return str(stmt.compile(dialect=postgresql.dialect()))


# ── Conditional inserts ──────────────────────────────────────────────


class TestInsertRoleClaimIfAbsent:
    @pytest.mark.asyncio()
    async def test_statement_is_insert_on_conflict_returning(self):
        db = _make_db(uuid.uuid4())

        await SqlAlchemyRoleClaimStore(db).insert_role_claim_if_absent(uuid.uuid4(), "TENANT_READ")

        sql = _executed_sql(db)
        assert sql.startswith("INSERT INTO role_claims")
        assert "ON CONFLICT (role_id, claim_value) DO NOTHING RETURNING role_claims.id" in sql

    @pytest.mark.asyncio()
    async def test_returned_row_means_inserted(self):
        db = _make_db(uuid.uuid4())
        outcome = await SqlAlchemyRoleClaimStore(db).insert_role_claim_if_absent(uuid.uuid4(), "TENANT_READ")
        assert outcome is InsertOutcome.INSERTED

    @pytest.mark.asyncio()
    async def test_no_row_means_already_exists(self):
        db = _make_db(None)
        outcome = await SqlAlchemyRoleClaimStore(db).insert_role_claim_if_absent(uuid.uuid4(), "TENANT_READ")
        assert outcome is InsertOutcome.ALREADY_EXISTS

    @pytest.mark.asyncio()
    async def test_does_not_commit(self):
        db = _make_db(uuid.uuid4())
        await SqlAlchemyRoleClaimStore(db).insert_role_claim_if_absent(uuid.uuid4(), "TENANT_READ")
        db.commit.assert_not_awaited()


class TestInsertRoleIfAbsent:
    @pytest.mark.asyncio()
    async def test_statement_is_insert_on_conflict_returning(self):
        db = _make_db(uuid.uuid4())

        await SqlAlchemyRoleClaimStore(db).insert_role_if_absent("Admin", "Practice administrator")

        sql = _executed_sql(db)
        assert sql.startswith("INSERT INTO roles")
        assert "ON CONFLICT (name) DO NOTHING RETURNING roles.id" in sql

    @pytest.mark.asyncio()
    async def test_outcomes(self):
        store_inserted = SqlAlchemyRoleClaimStore(_make_db(uuid.uuid4()))
        store_existing = SqlAlchemyRoleClaimStore(_make_db(None))

        assert await store_inserted.insert_role_if_absent("Admin", "") is InsertOutcome.INSERTED
        assert await store_existing.insert_role_if_absent("Admin", "") is InsertOutcome.ALREADY_EXISTS


# ── Lookups ──────────────────────────────────────────────────────────


class TestLookups:
    @pytest.mark.asyncio()
    async def test_find_role_by_name(self):
        db = _make_db(None)

        assert await SqlAlchemyRoleClaimStore(db).find_role_by_name("Janitor") is None
        assert "WHERE roles.name = " in _executed_sql(db)

    @pytest.mark.asyncio()
    async def test_list_role_claim_values(self):
        db = _make_db()
        db.execute.return_value.scalars.return_value.all.return_value = ["TENANT_READ", "AUDIT_READ"]

        values = await SqlAlchemyRoleClaimStore(db).list_role_claim_values(uuid.uuid4())

        assert values == ["TENANT_READ", "AUDIT_READ"]
        assert "SELECT role_claims.claim_value" in _executed_sql(db)

    @pytest.mark.asyncio()
    async def test_commit(self):
        db = _make_db()
        await SqlAlchemyRoleClaimStore(db).commit()
        db.commit.assert_awaited_once()


# ── Redis cache ──────────────────────────────────────────────────────


class TestRedisCache:
    @pytest.mark.asyncio()
    async def test_set_uses_setex(self):
        redis = AsyncMock()

        await RedisCache(redis).set("role_claims:Admin", '["TENANT_READ"]', 3600)

        redis.setex.assert_awaited_once_with("role_claims:Admin", 3600, '["TENANT_READ"]')

    @pytest.mark.asyncio()
    async def test_get_decodes_bytes(self):
        redis = AsyncMock()
        redis.get.return_value = b'["TENANT_READ"]'

        assert await RedisCache(redis).get("role_claims:Admin") == '["TENANT_READ"]'

    @pytest.mark.asyncio()
    async def test_get_passes_through_str_and_none(self):
        redis = AsyncMock()
        redis.get.side_effect = ["[]", None]
        cache = RedisCache(redis)

        assert await cache.get("role_claims:Dentist") == "[]"
        assert await cache.get("role_claims:Janitor") is None

    @pytest.mark.asyncio()
    async def test_delete(self):
        redis = AsyncMock()
        await RedisCache(redis).delete("role_claims:Admin")
        redis.delete.assert_awaited_once_with("role_claims:Admin")

    @pytest.mark.asyncio()
    async def test_errors_propagate(self):
        redis = AsyncMock()
        redis.setex.side_effect = ConnectionError("redis down")

        with pytest.raises(ConnectionError):
            await RedisCache(redis).set("role_claims:Admin", "[]", 60)
