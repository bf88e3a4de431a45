"""Tenant and TenantSettings models — one dental practice and its preferences."""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import Boolean, ForeignKey, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.models.base import Auditable, Base, TimestampMixin


class Tenant(Auditable, TimestampMixin, Base):
    """A practice using the platform."""

    __tablename__ = "tenants"

    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    country: Mapped[str] = mapped_column(String(100), nullable=False)
    timezone: Mapped[str] = mapped_column(String(100), nullable=False)
    slug: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    logo_url: Mapped[str | None] = mapped_column(String(500))
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, index=True)

    # Relationships
    settings: Mapped[TenantSettings | None] = relationship(
        "TenantSettings", back_populates="tenant", uselist=False, cascade="all, delete-orphan"
    )

    def get_auditable_properties(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "country": self.country,
            "timezone": self.timezone,
            "slug": self.slug,
            "logo_url": self.logo_url,
            "is_active": self.is_active,
        }

    def __repr__(self) -> str:
        return f"<Tenant slug={self.slug} active={self.is_active}>"


class TenantSettings(Auditable, TimestampMixin, Base):
    """Locale and formatting preferences of a tenant (one-to-one)."""

    __tablename__ = "tenant_settings"

    tenant_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    language: Mapped[str] = mapped_column(String(10), nullable=False)
    currency: Mapped[str] = mapped_column(String(10), nullable=False)
    date_format: Mapped[str] = mapped_column(String(20), nullable=False)
    time_format: Mapped[str] = mapped_column(String(20), nullable=False)

    # Relationships
    tenant: Mapped[Tenant] = relationship("Tenant", back_populates="settings")

    def get_auditable_properties(self) -> dict[str, Any]:
        return {
            "language": self.language,
            "currency": self.currency,
            "date_format": self.date_format,
            "time_format": self.time_format,
        }

    def __repr__(self) -> str:
        return f"<TenantSettings tenant={self.tenant_id} lang={self.language}>"
