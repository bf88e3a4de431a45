"""Role and RoleClaim models — the persistent side of the permission model.

Roles are created once at bootstrap and never renamed. RoleClaim rows are the
source of truth for the cached role -> claims lists; the (role_id, claim_value)
pair is unique so concurrent seeders cannot create duplicates.
"""

from __future__ import annotations

import uuid

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.models.base import Base, TimestampMixin

PERMISSION_CLAIM_TYPE = "permission"


class Role(TimestampMixin, Base):
    """A named group of claims assigned to a principal."""

    __tablename__ = "roles"

    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True, index=True)
    description: Mapped[str] = mapped_column(String(500), default="")

    # Relationships
    claims: Mapped[list[RoleClaim]] = relationship(
        "RoleClaim", back_populates="role", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Role name={self.name}>"


class RoleClaim(TimestampMixin, Base):
    """One permission granted to a role."""

    __tablename__ = "role_claims"
    __table_args__ = (UniqueConstraint("role_id", "claim_value", name="uq_role_claims_role_value"),)

    role_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("roles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    claim_type: Mapped[str] = mapped_column(String(50), nullable=False, default=PERMISSION_CLAIM_TYPE)
    claim_value: Mapped[str] = mapped_column(String(100), nullable=False, comment="Claim name, e.g. TENANT_READ")

    # Relationships
    role: Mapped[Role] = relationship("Role", back_populates="claims")

    def __repr__(self) -> str:
        return f"<RoleClaim role={self.role_id} value={self.claim_value}>"
