"""Pydantic response schemas for audit logs and role claims."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class AuditLogOut(BaseModel):
    """One audit record as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: str
    action: str
    entity_type: str
    entity_id: str
    old_values: dict[str, Any] | None = None
    new_values: dict[str, Any] | None = None
    ip_address: str | None = None
    user_agent: str | None = None
    created_at: datetime | None = Field(default=None, description="Commit timestamp")


class AuditLogPage(BaseModel):
    items: list[AuditLogOut]
    total: int
    page: int
    per_page: int


class RoleClaimsOut(BaseModel):
    role: str
    claims: list[str]


class CurrentUserOut(BaseModel):
    """The caller as seen by the API, with the claims of their role."""

    user_id: str
    role: str
    tenant_id: str | None = None
    email: str | None = None
    is_super_admin: bool = False
    is_admin: bool = False
    claims: list[str] = Field(default_factory=list)
