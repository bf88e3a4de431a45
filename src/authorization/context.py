"""Caller identity and per-request context.

Access tokens are issued elsewhere; this module only verifies them (HS256
shared secret) and exposes the caller as an `Identity`. A `RequestContext`
bundles the identity with the request origin and is passed explicitly to
whatever needs to know who is calling, e.g. attached to the DB session so
the audit interceptor can stamp records.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import jwt
from fastapi import Request

from src.authorization.catalog import Roles
from src.config import settings

logger = logging.getLogger(__name__)

# Token claim names
USER_ID_CLAIM = "user_id"
ROLE_CLAIM = "role"
TENANT_ID_CLAIM = "tenant_id"
EMAIL_CLAIM = "email"


@dataclass(frozen=True)
class Identity:
    """An authenticated principal. Each principal holds exactly one role."""

    user_id: str
    role: str
    tenant_id: str | None = None
    email: str | None = None

    @property
    def is_super_admin(self) -> bool:
        return self.role == Roles.SUPER_ADMIN

    @property
    def is_admin(self) -> bool:
        return self.role == Roles.ADMIN

    @classmethod
    def from_claims(cls, claims: dict[str, Any]) -> Identity | None:
        user_id = claims.get(USER_ID_CLAIM)
        role = claims.get(ROLE_CLAIM)
        if not user_id or not role:
            return None
        tenant_id = claims.get(TENANT_ID_CLAIM)
        email = claims.get(EMAIL_CLAIM)
        return cls(
            user_id=str(user_id),
            role=str(role),
            tenant_id=str(tenant_id) if tenant_id else None,
            email=str(email) if email else None,
        )


@dataclass(frozen=True)
class RequestContext:
    """Who is calling and from where. Every field is optional."""

    identity: Identity | None = None
    ip_address: str | None = None
    user_agent: str | None = None

    @property
    def user_id(self) -> str | None:
        return self.identity.user_id if self.identity else None

    @property
    def is_authenticated(self) -> bool:
        return self.identity is not None


SYSTEM_CONTEXT = RequestContext()


def decode_access_token(token: str) -> Identity | None:
    """Verify a bearer token and return its identity, or None if it is unusable."""
    secret = settings.security.jwt_secret
    if not secret:
        logger.error("JWT_SECRET not configured — rejecting bearer token")
        return None
    try:
        claims = jwt.decode(token, secret, algorithms=[settings.security.jwt_algorithm])
    except jwt.ExpiredSignatureError:
        logger.info("Expired access token")
        return None
    except jwt.InvalidTokenError:
        logger.info("Invalid access token")
        return None
    return Identity.from_claims(claims)


def identity_from_request(request: Request) -> Identity | None:
    auth = request.headers.get("Authorization")
    if not auth or not auth.startswith("Bearer "):
        return None
    return decode_access_token(auth[7:])


def _client_ip(request: Request) -> str | None:
    try:
        return request.client.host if request.client else None
    except Exception:
        logger.debug("Could not read client address", exc_info=True)
        return None


def _user_agent(request: Request) -> str | None:
    try:
        return request.headers.get("User-Agent") or None
    except Exception:
        logger.debug("Could not read User-Agent header", exc_info=True)
        return None


def request_context_from(request: Request) -> RequestContext:
    """Build the context for `request`; origin lookups degrade to None."""
    return RequestContext(
        identity=identity_from_request(request),
        ip_address=_client_ip(request),
        user_agent=_user_agent(request),
    )
