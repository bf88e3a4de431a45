"""SQLAlchemy hook that feeds the audit interceptor on every flush.

The request context travels with the session (`session.info`), attached by
the request dependency. Nothing here reads global "current user" state.
Audit rows are added inside `before_flush`, so they are written in the same
flush, and therefore the same transaction, as the changes they describe.

Usage:
    register_audit_listener()                      # once, at startup
    attach_request_context(db, request_context)    # per request session
"""

from __future__ import annotations

import logging
import uuid
from typing import Any

from sqlalchemy import event, inspect
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from src.audit.interceptor import ChangeKind, EntityChange, audit_interceptor
from src.authorization.context import RequestContext
from src.models.base import Auditable

logger = logging.getLogger(__name__)

REQUEST_CONTEXT_KEY = "request_context"


def attach_request_context(session: Session | AsyncSession, context: RequestContext) -> None:
    session.info[REQUEST_CONTEXT_KEY] = context


def get_request_context(session: Session) -> RequestContext | None:
    context = session.info.get(REQUEST_CONTEXT_KEY)
    return context if isinstance(context, RequestContext) else None


def _modified_attributes(entity: object) -> dict[str, tuple[Any, Any]]:
    """Column attributes with pending changes -> (original, current).

    The original is only known when the attribute was loaded before it was
    set. Assigning to an expired or never-loaded attribute does not fetch the
    old value (that would need a lazy load, which an AsyncSession cannot do
    from plain attribute access), so such changes report an original of None.
    """
    state = inspect(entity)
    modified: dict[str, tuple[Any, Any]] = {}
    for attr in state.mapper.column_attrs:
        history = state.attrs[attr.key].history
        if not history.has_changes():
            continue
        original = history.deleted[0] if history.deleted else None
        current = history.added[0] if history.added else None
        modified[attr.key] = (original, current)
    return modified


def collect_entity_changes(session: Session) -> list[EntityChange]:
    """Snapshot the session's pending inserts, updates and deletes."""
    changes = [EntityChange(entity, ChangeKind.INSERT) for entity in session.new]
    for entity in session.dirty:
        if not session.is_modified(entity, include_collections=False):
            continue
        changes.append(EntityChange(entity, ChangeKind.UPDATE, _modified_attributes(entity)))
    changes.extend(EntityChange(entity, ChangeKind.DELETE) for entity in session.deleted)
    return changes


def _apply_pending_defaults(session: Session) -> None:
    """Fill unset Python-side column defaults (and the id) of pending auditable rows.

    SQLAlchemy applies `default=` values during the INSERT, after the CREATE
    snapshot is taken, so they are applied here instead. SQL expression and
    server-side defaults are left to the database.
    """
    for entity in session.new:
        if not isinstance(entity, Auditable):
            continue
        state = inspect(entity)
        for attr in state.mapper.column_attrs:
            if attr.key in state.dict:
                continue
            default = attr.columns[0].default
            if default is None:
                continue
            if default.is_callable:
                setattr(entity, attr.key, default.arg(None))
            elif default.is_scalar:
                setattr(entity, attr.key, default.arg)
        if getattr(entity, "id", None) is None:
            entity.id = uuid.uuid4()  # type: ignore[attr-defined]


def audit_before_flush(session: Session, flush_context: object, instances: object) -> None:
    """`before_flush` listener. Never raises, so auditing cannot block the flush."""
    try:
        _apply_pending_defaults(session)
        changes = collect_entity_changes(session)
        logs = audit_interceptor.create_audit_logs(changes, get_request_context(session))
    except Exception:
        logger.exception("Audit interception failed — flushing without audit records")
        return

    if logs:
        session.add_all(logs)
        logger.debug("Queued %d audit record(s)", len(logs))


def register_audit_listener(session_class: type[Session] = Session) -> None:
    """Install the audit hook on `session_class` (idempotent)."""
    if not event.contains(session_class, "before_flush", audit_before_flush):
        event.listen(session_class, "before_flush", audit_before_flush)
        logger.info("Audit listener registered on %s", session_class.__name__)
