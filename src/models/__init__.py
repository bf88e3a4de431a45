"""SQLAlchemy ORM models for the Odary API.

Import all models here so Alembic and Base.metadata.create_all() discover them.
"""

from __future__ import annotations

from src.models.audit import AuditLog
from src.models.base import Auditable, Base
from src.models.enums import AuditAction, Gender
from src.models.patient import Patient
from src.models.role import PERMISSION_CLAIM_TYPE, Role, RoleClaim
from src.models.tenant import Tenant, TenantSettings

__all__ = [
    # Base
    "Base",
    "Auditable",
    # Models
    "Role",
    "RoleClaim",
    "AuditLog",
    "Tenant",
    "TenantSettings",
    "Patient",
    # Enums & constants
    "AuditAction",
    "Gender",
    "PERMISSION_CLAIM_TYPE",
]
