"""SQLAlchemy declarative base and shared mixins.

Every table gets `id`, `created_at`, and `updated_at` via the TimestampMixin.
Entities whose create/update/delete must leave an audit trail also inherit
the Auditable mixin.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""

    pass


class TimestampMixin:
    """Mixin adding id (UUID), created_at, and updated_at to every model.

    Uses server-side defaults so timestamps are set by PostgreSQL.
    """

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        server_default=func.gen_random_uuid(),
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        onupdate=func.now(),
    )


class Auditable:
    """Capability mixin for entities recorded by the audit interceptor.

    Subclasses list the properties that take part in before/after diffing by
    overriding `get_auditable_properties`. Keys are mapped attribute names.
    """

    def audit_entity_id(self) -> str:
        return str(getattr(self, "id", None) or "")

    def audit_entity_type(self) -> str:
        return type(self).__name__

    def get_auditable_properties(self) -> dict[str, Any]:
        raise NotImplementedError(f"{type(self).__name__} must declare its auditable properties")
