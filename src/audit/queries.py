"""Read-side queries over the audit trail."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.errors import BusinessRuleError, NotFoundError
from src.models.audit import AuditLog


@dataclass(frozen=True)
class AuditLogFilter:
    """Optional criteria; unset fields do not restrict the result."""

    user_id: str | None = None
    action: str | None = None
    entity_type: str | None = None
    entity_id: str | None = None
    date_from: datetime | None = None
    date_to: datetime | None = None

    def apply(self, query: Select) -> Select:
        if self.date_from and self.date_to and self.date_from > self.date_to:
            raise BusinessRuleError(
                "date_from must not be after date_to",
                details={"date_from": self.date_from.isoformat(), "date_to": self.date_to.isoformat()},
            )
        if self.user_id:
            query = query.where(AuditLog.user_id == self.user_id)
        if self.action:
            query = query.where(AuditLog.action == self.action.upper())
        if self.entity_type:
            query = query.where(AuditLog.entity_type == self.entity_type)
        if self.entity_id:
            query = query.where(AuditLog.entity_id == self.entity_id)
        if self.date_from:
            query = query.where(AuditLog.created_at >= self.date_from)
        if self.date_to:
            query = query.where(AuditLog.created_at <= self.date_to)
        return query


async def get_audit_logs_paginated(
    db: AsyncSession,
    page: int = 1,
    per_page: int = 50,
    criteria: AuditLogFilter | None = None,
) -> tuple[list[AuditLog], int]:
    """Get a page of audit records, newest first, plus the total match count."""
    criteria = criteria or AuditLogFilter()
    query = criteria.apply(select(AuditLog))
    count_query = criteria.apply(select(func.count(AuditLog.id)))

    result = await db.execute(count_query)
    total = result.scalar() or 0

    offset = (page - 1) * per_page
    result = await db.execute(
        query.order_by(AuditLog.created_at.desc()).offset(offset).limit(per_page)
    )
    logs = list(result.scalars().all())

    return logs, total


async def export_audit_logs(
    db: AsyncSession,
    criteria: AuditLogFilter | None = None,
    limit: int = 10_000,
) -> list[AuditLog]:
    """All matching records in chronological order, capped at `limit`."""
    query = (criteria or AuditLogFilter()).apply(select(AuditLog))
    result = await db.execute(query.order_by(AuditLog.created_at.asc()).limit(limit))
    return list(result.scalars().all())


async def get_audit_log(db: AsyncSession, log_id: uuid.UUID) -> AuditLog:
    log = await db.get(AuditLog, log_id)
    if log is None:
        raise NotFoundError(f"Audit log {log_id} not found")
    return log
