"""FastAPI dependencies — request context, DB session, claims and the claim gate.

Usage:
    @router.get("/tenants")
    async def list_tenants(identity: Identity = Depends(require_claim(TenantClaims.READ))):
        ...
"""
# ruff: noqa: B008  — Depends() in function defaults is standard FastAPI

from __future__ import annotations

from collections.abc import AsyncGenerator, Awaitable, Callable

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.authorization.catalog import SUPER_ADMIN_CLAIM
from src.authorization.claims import ClaimsService
from src.authorization.context import Identity, RequestContext, request_context_from
from src.authorization.gate import AuthorizationDecision, authorize
from src.authorization.store import SqlAlchemyRoleClaimStore
from src.db.cache import Cache, RedisCache
from src.db.engine import redis_client, session_scope


async def get_request_context(request: Request) -> RequestContext:
    return request_context_from(request)


async def get_session(
    context: RequestContext = Depends(get_request_context),
) -> AsyncGenerator[AsyncSession, None]:
    """Yield a DB session bound to the caller, so its writes are audited."""
    async with session_scope(context) as session:
        yield session


def get_cache() -> Cache:
    return RedisCache(redis_client)


async def get_claims_service(
    db: AsyncSession = Depends(get_session),
    cache: Cache = Depends(get_cache),
) -> ClaimsService:
    return ClaimsService(SqlAlchemyRoleClaimStore(db), cache)


async def get_current_identity(
    context: RequestContext = Depends(get_request_context),
) -> Identity:
    """Any authenticated caller; 401 otherwise."""
    if context.identity is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return context.identity


def require_claim(claim: str) -> Callable[..., Awaitable[Identity]]:
    """Dependency factory: the caller's role must hold `claim`.

    401 without a valid identity, 403 when the claim is missing or cannot be
    resolved. Returns the caller's identity on success.
    """

    async def dependency(
        context: RequestContext = Depends(get_request_context),
        claims: ClaimsService = Depends(get_claims_service),
    ) -> Identity:
        identity = context.identity
        decision = await authorize(identity, claim, claims)
        if decision is AuthorizationDecision.UNAUTHENTICATED or identity is None:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Authentication required",
                headers={"WWW-Authenticate": "Bearer"},
            )
        if decision is AuthorizationDecision.FORBIDDEN:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Missing required claim {claim}",
            )
        return identity

    dependency.__name__ = f"require_{claim.lower()}"
    return dependency


# Only platform administrators can create tenants, so that claim doubles as
# the "super admin" check.
require_super_admin = require_claim(SUPER_ADMIN_CLAIM)
