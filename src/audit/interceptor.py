"""Audit interceptor — turns pending entity changes into AuditLog records.

Called once per flush with every pending change. Only entities that inherit
the Auditable mixin are recorded, and only when the change can be
attributed to a user: background work (seeding, jobs) runs without an actor
and leaves no audit trail.

    INSERT -> CREATE, new_values = full auditable snapshot
    UPDATE -> UPDATE, only the auditable properties whose value changed;
              nothing is recorded if none did
    DELETE -> DELETE, old_values = full auditable snapshot

Never raises: a failing entry is logged and skipped, and request origin
fields that cannot be read are stored as NULL.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TypeVar

from pydantic_core import to_jsonable_python

from src.authorization.context import RequestContext
from src.models.audit import AuditLog
from src.models.base import Auditable
from src.models.enums import AuditAction

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ChangeKind(str, Enum):
    """Unit-of-work state of a pending entity."""

    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"
    UNCHANGED = "unchanged"


@dataclass
class EntityChange:
    """One pending entity plus, for updates, its modified attributes.

    `modified` maps attribute name -> (original value, current value).
    """

    entity: object
    kind: ChangeKind
    modified: dict[str, tuple[Any, Any]] = field(default_factory=dict)


def _jsonable(values: dict[str, Any]) -> dict[str, Any]:
    return to_jsonable_python(values, fallback=str)


def _safe_read(read: Callable[[], T], what: str) -> T | None:
    try:
        return read()
    except Exception:
        logger.debug("Could not read %s for audit", what, exc_info=True)
        return None


class AuditInterceptor:
    """Builds AuditLog rows; persisting them is the caller's job."""

    def create_audit_logs(
        self,
        changes: Iterable[EntityChange],
        context: RequestContext | None,
    ) -> list[AuditLog]:
        auditable = [c for c in changes if isinstance(c.entity, Auditable)]
        if not auditable:
            return []

        user_id = _safe_read(lambda: context.user_id, "user id") if context else None
        if not user_id:
            logger.debug("No actor in context — skipping audit of %d change(s)", len(auditable))
            return []

        ip_address = _safe_read(lambda: context.ip_address, "ip address")
        user_agent = _safe_read(lambda: context.user_agent, "user agent")

        logs: list[AuditLog] = []
        for change in auditable:
            try:
                log = self._build_audit_log(change, user_id, ip_address, user_agent)
            except Exception:
                logger.exception(
                    "Failed to build audit record for %s (%s)",
                    type(change.entity).__name__,
                    change.kind.value,
                )
                continue
            if log is not None:
                logs.append(log)
        return logs

    def _build_audit_log(
        self,
        change: EntityChange,
        user_id: str,
        ip_address: str | None,
        user_agent: str | None,
    ) -> AuditLog | None:
        entity: Auditable = change.entity  # type: ignore[assignment]
        old_values: dict[str, Any] | None = None
        new_values: dict[str, Any] | None = None

        if change.kind is ChangeKind.INSERT:
            action = AuditAction.CREATE
            new_values = _jsonable(entity.get_auditable_properties())

        elif change.kind is ChangeKind.UPDATE:
            action = AuditAction.UPDATE
            audited = entity.get_auditable_properties()
            before: dict[str, Any] = {}
            after: dict[str, Any] = {}
            for name, (original, current) in change.modified.items():
                if name not in audited or original == current:
                    continue
                before[name] = original
                after[name] = current
            if not before:
                return None
            old_values = _jsonable(before)
            new_values = _jsonable(after)

        elif change.kind is ChangeKind.DELETE:
            action = AuditAction.DELETE
            old_values = _jsonable(entity.get_auditable_properties())

        else:
            return None

        return AuditLog(
            user_id=user_id,
            action=action.value,
            entity_type=entity.audit_entity_type(),
            entity_id=entity.audit_entity_id(),
            old_values=old_values,
            new_values=new_values,
            ip_address=ip_address,
            user_agent=user_agent,
        )


# Module-level singleton
audit_interceptor = AuditInterceptor()
