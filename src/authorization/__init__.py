"""Role/claim authorization — catalog, cached claim resolution, request gate."""

from src.authorization.claims import ClaimsService
from src.authorization.gate import AuthorizationDecision, authorize

__all__ = ["ClaimsService", "AuthorizationDecision", "authorize"]
