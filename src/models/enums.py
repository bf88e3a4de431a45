"""Domain enums used across SQLAlchemy models and Pydantic schemas.

All enums use str mixin for JSON serialization.
"""

from __future__ import annotations

from enum import Enum


class AuditAction(str, Enum):
    """What happened to an audited entity."""

    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


class Gender(str, Enum):
    """Patient gender as captured at registration."""

    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"
