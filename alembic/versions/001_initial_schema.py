"""Initial schema — roles, role claims, tenants, patients, audit logs.

Revision ID: 001
Revises: None
Create Date: 2025-06-10
"""
from __future__ import annotations

from typing import Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, tuple[str, ...], None] = None
depends_on: Union[str, tuple[str, ...], None] = None


def _base_columns() -> list[sa.Column]:
    return [
        sa.Column("id", postgresql.UUID(as_uuid=True), server_default=sa.text("gen_random_uuid()"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
    ]


def upgrade() -> None:
    # ── Permission model ───────────────────────────────────────────────

    op.create_table(
        "roles",
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.String(500), nullable=False, server_default=""),
        *_base_columns(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_roles_name", "roles", ["name"], unique=True)

    op.create_table(
        "role_claims",
        sa.Column("role_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("claim_type", sa.String(50), nullable=False, server_default="permission"),
        sa.Column("claim_value", sa.String(100), nullable=False, comment="Claim name, e.g. TENANT_READ"),
        *_base_columns(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["role_id"], ["roles.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("role_id", "claim_value", name="uq_role_claims_role_value"),
    )
    op.create_index("ix_role_claims_role_id", "role_claims", ["role_id"])

    # ── Audit trail ────────────────────────────────────────────────────

    op.create_table(
        "audit_logs",
        sa.Column("user_id", sa.String(50), nullable=False),
        sa.Column("action", sa.String(100), nullable=False, comment="AuditAction enum value"),
        sa.Column("entity_type", sa.String(100), nullable=False),
        sa.Column("entity_id", sa.String(50), nullable=False),
        sa.Column("old_values", postgresql.JSONB(astext_type=sa.Text())),
        sa.Column("new_values", postgresql.JSONB(astext_type=sa.Text())),
        sa.Column("ip_address", sa.String(255)),
        sa.Column("user_agent", sa.String(500)),
        *_base_columns(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_audit_logs_user_id", "audit_logs", ["user_id"])
    op.create_index("ix_audit_logs_entity", "audit_logs", ["entity_type", "entity_id"])

    # ── Tenants ────────────────────────────────────────────────────────

    op.create_table(
        "tenants",
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("country", sa.String(100), nullable=False),
        sa.Column("timezone", sa.String(100), nullable=False),
        sa.Column("slug", sa.String(50), nullable=False),
        sa.Column("logo_url", sa.String(500)),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_base_columns(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
        sa.UniqueConstraint("slug"),
    )
    op.create_index("ix_tenants_is_active", "tenants", ["is_active"])

    op.create_table(
        "tenant_settings",
        sa.Column("tenant_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("language", sa.String(10), nullable=False),
        sa.Column("currency", sa.String(10), nullable=False),
        sa.Column("date_format", sa.String(20), nullable=False),
        sa.Column("time_format", sa.String(20), nullable=False),
        *_base_columns(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["tenant_id"], ["tenants.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("tenant_id"),
    )

    # ── Patients ───────────────────────────────────────────────────────

    op.create_table(
        "patients",
        sa.Column("tenant_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("first_name", sa.String(50), nullable=False),
        sa.Column("last_name", sa.String(50), nullable=False),
        sa.Column("date_of_birth", sa.Date(), nullable=False),
        sa.Column("gender", sa.String(20), nullable=False),
        sa.Column("phone_number", sa.String(20), nullable=False),
        sa.Column("email", sa.String(255)),
        sa.Column("street", sa.String(255)),
        sa.Column("city", sa.String(100)),
        sa.Column("zip_code", sa.String(20)),
        sa.Column("country", sa.String(100)),
        sa.Column("insurance_provider", sa.String(255)),
        sa.Column("insurance_policy_number", sa.String(100)),
        sa.Column("allergies", postgresql.ARRAY(sa.String(100)), nullable=False),
        sa.Column("medical_conditions", postgresql.ARRAY(sa.String(100)), nullable=False),
        sa.Column("current_medications", postgresql.ARRAY(sa.String(100)), nullable=False),
        sa.Column("emergency_contact_name", sa.String(100)),
        sa.Column("emergency_contact_number", sa.String(20)),
        sa.Column("emergency_contact_relationship", sa.String(50)),
        sa.Column("notes", sa.Text()),
        sa.Column("is_archived", sa.Boolean(), nullable=False),
        sa.Column("archived_at", sa.DateTime(timezone=True)),
        sa.Column("archive_reason", sa.String(255)),
        *_base_columns(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["tenant_id"], ["tenants.id"], ondelete="RESTRICT"),
    )
    op.create_index("ix_patients_tenant_id", "patients", ["tenant_id"])
    op.create_index("ix_patients_phone_number", "patients", ["phone_number"])
    op.create_index("ix_patients_email", "patients", ["email"])
    op.create_index("ix_patients_name", "patients", ["first_name", "last_name"])
    op.create_index("ix_patients_is_archived", "patients", ["is_archived"])


def downgrade() -> None:
    # Drop in reverse dependency order
    op.drop_table("patients")
    op.drop_table("tenant_settings")
    op.drop_table("tenants")
    op.drop_table("audit_logs")
    op.drop_table("role_claims")
    op.drop_table("roles")
