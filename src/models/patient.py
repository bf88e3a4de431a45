"""Patient model — a person treated at a tenant's practice.

Archiving is a soft delete; the archive flag and reason are audited like
any other clinical field.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Any

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Index, String, Text
from sqlalchemy.dialects.postgresql import ARRAY, UUID
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Auditable, Base, TimestampMixin
from src.models.enums import Gender

# Order matters: it is the key order of CREATE/DELETE snapshots.
AUDITED_PATIENT_FIELDS: tuple[str, ...] = (
    "first_name",
    "last_name",
    "date_of_birth",
    "gender",
    "phone_number",
    "email",
    "street",
    "city",
    "zip_code",
    "country",
    "insurance_provider",
    "insurance_policy_number",
    "allergies",
    "medical_conditions",
    "current_medications",
    "emergency_contact_name",
    "emergency_contact_number",
    "emergency_contact_relationship",
    "notes",
    "is_archived",
    "archive_reason",
)


class Patient(Auditable, TimestampMixin, Base):
    """A patient record owned by one tenant."""

    __tablename__ = "patients"
    __table_args__ = (Index("ix_patients_name", "first_name", "last_name"),)

    tenant_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("tenants.id", ondelete="RESTRICT"), nullable=False, index=True
    )

    # Personal information
    first_name: Mapped[str] = mapped_column(String(50), nullable=False)
    last_name: Mapped[str] = mapped_column(String(50), nullable=False)
    date_of_birth: Mapped[date] = mapped_column(Date, nullable=False)
    gender: Mapped[str] = mapped_column(String(20), default=Gender.OTHER.value)
    phone_number: Mapped[str] = mapped_column(String(20), nullable=False, index=True)

    # Contact
    email: Mapped[str | None] = mapped_column(String(255), index=True)
    street: Mapped[str | None] = mapped_column(String(255))
    city: Mapped[str | None] = mapped_column(String(100))
    zip_code: Mapped[str | None] = mapped_column(String(20))
    country: Mapped[str | None] = mapped_column(String(100))

    # Insurance
    insurance_provider: Mapped[str | None] = mapped_column(String(255))
    insurance_policy_number: Mapped[str | None] = mapped_column(String(100))

    # Medical
    allergies: Mapped[list[str]] = mapped_column(ARRAY(String(100)), default=list)
    medical_conditions: Mapped[list[str]] = mapped_column(ARRAY(String(100)), default=list)
    current_medications: Mapped[list[str]] = mapped_column(ARRAY(String(100)), default=list)

    # Emergency contact
    emergency_contact_name: Mapped[str | None] = mapped_column(String(100))
    emergency_contact_number: Mapped[str | None] = mapped_column(String(20))
    emergency_contact_relationship: Mapped[str | None] = mapped_column(String(50))

    notes: Mapped[str | None] = mapped_column(Text)

    # Soft delete
    is_archived: Mapped[bool] = mapped_column(Boolean, default=False, index=True)
    archived_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    archive_reason: Mapped[str | None] = mapped_column(String(255))

    def get_auditable_properties(self) -> dict[str, Any]:
        return {name: getattr(self, name) for name in AUDITED_PATIENT_FIELDS}

    def __repr__(self) -> str:
        return f"<Patient id={self.id} archived={self.is_archived}>"
