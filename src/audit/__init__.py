"""Entity-change audit trail — interceptor and SQLAlchemy flush hook."""

from src.audit.interceptor import audit_interceptor
from src.audit.tracking import register_audit_listener

__all__ = ["audit_interceptor", "register_audit_listener"]
