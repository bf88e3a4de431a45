"""API v1 routes for the authorization and audit modules.

Each route declares the single claim it requires through `require_claim`.
"""
# ruff: noqa: B008  — Depends() in function defaults is standard FastAPI

from __future__ import annotations

import logging
import uuid
from datetime import datetime

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.deps import (
    get_claims_service,
    get_current_identity,
    get_session,
    require_claim,
    require_super_admin,
)
from src.audit.queries import (
    AuditLogFilter,
    export_audit_logs,
    get_audit_log,
    get_audit_logs_paginated,
)
from src.authorization.catalog import AuditClaims
from src.authorization.claims import ClaimsService
from src.authorization.context import Identity
from src.schemas.audit import AuditLogOut, AuditLogPage, CurrentUserOut, RoleClaimsOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1")


# ── Identity & roles ─────────────────────────────────────────────────


@router.get("/me", response_model=CurrentUserOut, tags=["auth"])
async def current_user(
    identity: Identity = Depends(get_current_identity),
    claims: ClaimsService = Depends(get_claims_service),
) -> CurrentUserOut:
    """The caller and the claims granted by their role."""
    return CurrentUserOut(
        user_id=identity.user_id,
        role=identity.role,
        tenant_id=identity.tenant_id,
        email=identity.email,
        is_super_admin=identity.is_super_admin,
        is_admin=identity.is_admin,
        claims=await claims.get_role_claims(identity.role),
    )


@router.get("/roles/{role}/claims", response_model=RoleClaimsOut, tags=["roles"])
async def role_claims(
    role: str,
    claims: ClaimsService = Depends(get_claims_service),
    _: Identity = Depends(require_super_admin),
) -> RoleClaimsOut:
    """Claims currently granted to `role` (empty for unknown roles)."""
    return RoleClaimsOut(role=role, claims=await claims.get_role_claims(role))


# ── Audit logs ───────────────────────────────────────────────────────


@router.get("/audit-logs", response_model=AuditLogPage, tags=["audit"])
async def list_audit_logs(
    page: int = Query(1, ge=1),
    per_page: int = Query(50, ge=1, le=200),
    db: AsyncSession = Depends(get_session),
    _: Identity = Depends(require_claim(AuditClaims.READ)),
) -> AuditLogPage:
    """Newest audit records first."""
    logs, total = await get_audit_logs_paginated(db, page=page, per_page=per_page)
    return AuditLogPage(
        items=[AuditLogOut.model_validate(log) for log in logs],
        total=total,
        page=page,
        per_page=per_page,
    )


@router.get("/audit-logs/search", response_model=AuditLogPage, tags=["audit"])
async def search_audit_logs(
    user_id: str | None = Query(None),
    action: str | None = Query(None),
    entity_type: str | None = Query(None),
    entity_id: str | None = Query(None),
    date_from: datetime | None = Query(None),
    date_to: datetime | None = Query(None),
    page: int = Query(1, ge=1),
    per_page: int = Query(50, ge=1, le=200),
    db: AsyncSession = Depends(get_session),
    _: Identity = Depends(require_claim(AuditClaims.SEARCH)),
) -> AuditLogPage:
    criteria = AuditLogFilter(
        user_id=user_id,
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        date_from=date_from,
        date_to=date_to,
    )
    logs, total = await get_audit_logs_paginated(db, page=page, per_page=per_page, criteria=criteria)
    return AuditLogPage(
        items=[AuditLogOut.model_validate(log) for log in logs],
        total=total,
        page=page,
        per_page=per_page,
    )


@router.get("/audit-logs/export", tags=["audit"])
async def export_audit_log(
    entity_type: str | None = Query(None),
    date_from: datetime | None = Query(None),
    date_to: datetime | None = Query(None),
    db: AsyncSession = Depends(get_session),
    identity: Identity = Depends(require_claim(AuditClaims.EXPORT)),
) -> JSONResponse:
    """Download matching records as a JSON attachment."""
    criteria = AuditLogFilter(entity_type=entity_type, date_from=date_from, date_to=date_to)
    logs = await export_audit_logs(db, criteria)
    logger.info("User %s exported %d audit records", identity.user_id, len(logs))
    return JSONResponse(
        content=[AuditLogOut.model_validate(log).model_dump(mode="json") for log in logs],
        headers={"Content-Disposition": 'attachment; filename="audit-logs.json"'},
    )


@router.get("/audit-logs/{log_id}", response_model=AuditLogOut, tags=["audit"])
async def audit_log_detail(
    log_id: uuid.UUID,
    db: AsyncSession = Depends(get_session),
    _: Identity = Depends(require_claim(AuditClaims.READ)),
) -> AuditLogOut:
    return AuditLogOut.model_validate(await get_audit_log(db, log_id))
