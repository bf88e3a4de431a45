"""Shared fakes: an in-memory role/claim store and cache."""

from __future__ import annotations

import asyncio
import uuid
from datetime import UTC, date, datetime

import pytest

from src.authorization.catalog import ROLES
from src.authorization.store import InsertOutcome
from src.models.patient import Patient
from src.models.role import PERMISSION_CLAIM_TYPE, Role, RoleClaim

# ── Fake store ───────────────────────────────────────────────────────


class FakeRoleClaimStore:
    """RoleClaimStore over dicts; the (role_id, claim) set plays the unique index."""

    def __init__(self, role_names: tuple[str, ...] | None = None) -> None:
        names = role_names if role_names is not None else tuple(r.name for r in ROLES)
        self.roles: dict[str, Role] = {}
        self.claims: list[tuple[uuid.UUID, str]] = []
        self.commits = 0
        self.claim_queries = 0
        for name in names:
            self.add_role(name)

    def add_role(self, name: str) -> Role:
        role = Role(id=uuid.uuid4(), name=name, description="")
        self.roles[name] = role
        return role

    def rows_for(self, role_name: str, claim_value: str) -> int:
        role_id = self.roles[role_name].id
        return sum(1 for row in self.claims if row == (role_id, claim_value))

    async def find_role_by_name(self, name: str) -> Role | None:
        return self.roles.get(name)

    async def list_role_claim_values(self, role_id: uuid.UUID) -> list[str]:
        self.claim_queries += 1
        return [value for rid, value in self.claims if rid == role_id]

    async def find_role_claim(self, role_id: uuid.UUID, claim_value: str) -> RoleClaim | None:
        if (role_id, claim_value) not in self.claims:
            return None
        return RoleClaim(role_id=role_id, claim_type=PERMISSION_CLAIM_TYPE, claim_value=claim_value)

    async def insert_role_claim_if_absent(self, role_id: uuid.UUID, claim_value: str) -> InsertOutcome:
        if (role_id, claim_value) in self.claims:
            return InsertOutcome.ALREADY_EXISTS
        self.claims.append((role_id, claim_value))
        return InsertOutcome.INSERTED

    async def insert_role_if_absent(self, name: str, description: str) -> InsertOutcome:
        if name in self.roles:
            return InsertOutcome.ALREADY_EXISTS
        self.add_role(name)
        return InsertOutcome.INSERTED

    async def commit(self) -> None:
        self.commits += 1


class RacingRoleClaimStore(FakeRoleClaimStore):
    """Existence checks always miss, as when another process inserts in between."""

    async def find_role_claim(self, role_id: uuid.UUID, claim_value: str) -> RoleClaim | None:
        await asyncio.sleep(0)
        return None


# ── Fake cache ───────────────────────────────────────────────────────


class FakeCache:
    def __init__(self) -> None:
        self.data: dict[str, str] = {}
        self.ttls: dict[str, int] = {}

    async def get(self, key: str) -> str | None:
        return self.data.get(key)

    async def set(self, key: str, value: str, ttl: int) -> None:
        self.data[key] = value
        self.ttls[key] = ttl

    async def delete(self, key: str) -> None:
        self.data.pop(key, None)
        self.ttls.pop(key, None)


@pytest.fixture
def store() -> FakeRoleClaimStore:
    return FakeRoleClaimStore()


@pytest.fixture
def cache() -> FakeCache:
    return FakeCache()


# ── Entities ─────────────────────────────────────────────────────────


def make_patient(**overrides) -> Patient:
    """A Patient with every column set, so detached copies never need a lazy load."""
    fields = {
        "id": uuid.UUID("7b0d1a52-3a4f-4f4e-9f7e-0c1c2b3d4e5f"),
        "tenant_id": uuid.UUID("0f8e2c1d-9b7a-4c3e-8d6f-5a4b3c2d1e0f"),
        "first_name": "Anna",
        "last_name": "Rossi",
        "date_of_birth": date(1990, 5, 17),
        "gender": "Female",
        "phone_number": "+39 333 1234567",
        "email": "anna.rossi@example.it",
        "street": "Via Roma 1",
        "city": "Roma",
        "zip_code": "00184",
        "country": "IT",
        "insurance_provider": None,
        "insurance_policy_number": None,
        "allergies": ["penicillin"],
        "medical_conditions": [],
        "current_medications": [],
        "emergency_contact_name": None,
        "emergency_contact_number": None,
        "emergency_contact_relationship": None,
        "notes": None,
        "is_archived": False,
        "archived_at": None,
        "archive_reason": None,
        "created_at": datetime(2026, 1, 10, 8, 0, tzinfo=UTC),
        "updated_at": None,
    }
    fields.update(overrides)
    return Patient(**fields)
