"""Authorization gate — decides whether a caller may run a protected operation.

The decision is fail-closed: if anything goes wrong while resolving the
caller's claims the request is refused, never let through.
"""

from __future__ import annotations

import logging
from enum import Enum

from src.authorization.claims import ClaimsService
from src.authorization.context import Identity

logger = logging.getLogger(__name__)


class AuthorizationDecision(str, Enum):
    ALLOWED = "allowed"
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"


async def authorize(
    identity: Identity | None,
    required_claim: str,
    claims: ClaimsService,
) -> AuthorizationDecision:
    """Check that `identity` holds `required_claim` through its role."""
    if identity is None:
        return AuthorizationDecision.UNAUTHENTICATED

    try:
        allowed = await claims.has_claim(identity.role, required_claim)
    except Exception:
        logger.exception(
            "Claim resolution failed for user %s (role=%s, claim=%s) — denying",
            identity.user_id,
            identity.role,
            required_claim,
        )
        return AuthorizationDecision.FORBIDDEN

    if not allowed:
        logger.info(
            "User %s (role=%s) lacks claim %s",
            identity.user_id,
            identity.role,
            required_claim,
        )
        return AuthorizationDecision.FORBIDDEN

    return AuthorizationDecision.ALLOWED
