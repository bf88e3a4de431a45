"""Role / RoleClaim persistence used by the claims service and the seeder.

`RoleClaimStore` is the narrow query surface the authorization core needs.
`SqlAlchemyRoleClaimStore` implements it on an AsyncSession; the conditional
inserts use PostgreSQL `ON CONFLICT DO NOTHING` so a seeder racing another
process learns "already exists" from the result instead of from an
IntegrityError.
"""

from __future__ import annotations

import uuid
from enum import Enum
from typing import Protocol

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from src.models.role import PERMISSION_CLAIM_TYPE, Role, RoleClaim


class InsertOutcome(str, Enum):
    """Result of a conditional insert."""

    INSERTED = "inserted"
    ALREADY_EXISTS = "already_exists"


class RoleClaimStore(Protocol):
    async def find_role_by_name(self, name: str) -> Role | None: ...

    async def list_role_claim_values(self, role_id: uuid.UUID) -> list[str]: ...

    async def find_role_claim(self, role_id: uuid.UUID, claim_value: str) -> RoleClaim | None: ...

    async def insert_role_claim_if_absent(self, role_id: uuid.UUID, claim_value: str) -> InsertOutcome: ...

    async def insert_role_if_absent(self, name: str, description: str) -> InsertOutcome: ...

    async def commit(self) -> None: ...


class SqlAlchemyRoleClaimStore:
    """RoleClaimStore over a SQLAlchemy AsyncSession (PostgreSQL)."""

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def find_role_by_name(self, name: str) -> Role | None:
        result = await self._db.execute(select(Role).where(Role.name == name))
        return result.scalar_one_or_none()

    async def list_role_claim_values(self, role_id: uuid.UUID) -> list[str]:
        result = await self._db.execute(
            select(RoleClaim.claim_value)
            .where(RoleClaim.role_id == role_id)
            .order_by(RoleClaim.created_at, RoleClaim.claim_value)
        )
        return list(result.scalars().all())

    async def find_role_claim(self, role_id: uuid.UUID, claim_value: str) -> RoleClaim | None:
        result = await self._db.execute(
            select(RoleClaim).where(
                RoleClaim.role_id == role_id,
                RoleClaim.claim_value == claim_value,
            )
        )
        return result.scalar_one_or_none()

    async def insert_role_claim_if_absent(self, role_id: uuid.UUID, claim_value: str) -> InsertOutcome:
        stmt = (
            insert(RoleClaim)
            .values(
                id=uuid.uuid4(),
                role_id=role_id,
                claim_type=PERMISSION_CLAIM_TYPE,
                claim_value=claim_value,
            )
            .on_conflict_do_nothing(index_elements=[RoleClaim.role_id, RoleClaim.claim_value])
            .returning(RoleClaim.id)
        )
        result = await self._db.execute(stmt)
        if result.scalar_one_or_none() is None:
            return InsertOutcome.ALREADY_EXISTS
        return InsertOutcome.INSERTED

    async def insert_role_if_absent(self, name: str, description: str) -> InsertOutcome:
        stmt = (
            insert(Role)
            .values(id=uuid.uuid4(), name=name, description=description)
            .on_conflict_do_nothing(index_elements=[Role.name])
            .returning(Role.id)
        )
        result = await self._db.execute(stmt)
        if result.scalar_one_or_none() is None:
            return InsertOutcome.ALREADY_EXISTS
        return InsertOutcome.INSERTED

    async def commit(self) -> None:
        await self._db.commit()
