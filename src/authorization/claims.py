"""Claims service — resolves "does role R hold claim C" through a read-through cache.

Role claims change rarely (seed time), while every protected request asks for
them, so the role -> claims list is cached under "role_claims:<role>" for
an hour and dropped explicitly whenever a RoleClaim row for that role is
written.

Cache trouble is never fatal: a failed read falls back to the database and a
failed write or delete is logged and ignored.

Usage:
    service = ClaimsService(SqlAlchemyRoleClaimStore(db), RedisCache(redis_client))
    if await service.has_claim("Admin", TenantClaims.READ):
        ...
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field

from src.authorization.catalog import ALL_CLAIMS, ClaimDefinition
from src.authorization.store import InsertOutcome, RoleClaimStore
from src.config import settings
from src.db.cache import Cache

logger = logging.getLogger(__name__)

CACHE_KEY_PREFIX = "role_claims:"


def role_cache_key(role: str) -> str:
    return f"{CACHE_KEY_PREFIX}{role}"


@dataclass
class SeedReport:
    """What a seeding run did, as (role, claim) pairs."""

    assigned: list[tuple[str, str]] = field(default_factory=list)
    already_present: list[tuple[str, str]] = field(default_factory=list)
    missing_roles: set[str] = field(default_factory=set)


class ClaimsService:
    """Role -> claims resolution, cache invalidation and default-claim seeding."""

    def __init__(
        self,
        store: RoleClaimStore,
        cache: Cache,
        ttl_seconds: int | None = None,
    ) -> None:
        self._store = store
        self._cache = cache
        self._ttl = ttl_seconds if ttl_seconds is not None else settings.cache.role_claims_ttl_seconds

    async def get_role_claims(self, role: str) -> list[str]:
        """Return the claim names held by `role`; unknown roles hold none."""
        cached = await self._read_cache(role)
        if cached is not None:
            logger.debug("Retrieved %d claims for role %s from cache", len(cached), role)
            return cached

        role_entity = await self._store.find_role_by_name(role)
        if role_entity is None:
            logger.warning("Role %s not found", role)
            return []

        claims = await self._store.list_role_claim_values(role_entity.id)

        try:
            await self._cache.set(role_cache_key(role), json.dumps(claims), self._ttl)
        except Exception:
            logger.warning("Failed to cache claims for role %s", role, exc_info=True)

        logger.debug("Retrieved %d claims for role %s from database", len(claims), role)
        return claims

    async def has_claim(self, role: str, claim: str) -> bool:
        claims = await self.get_role_claims(role)
        return claim in claims

    async def invalidate_role_cache(self, role: str) -> None:
        """Drop the cached claims of `role`. Never raises."""
        try:
            await self._cache.delete(role_cache_key(role))
            logger.debug("Invalidated cache for role %s", role)
        except Exception:
            logger.warning(
                "Failed to invalidate cache for role %s - continuing without cache invalidation",
                role,
                exc_info=True,
            )

    async def seed_claims(self, definitions: tuple[ClaimDefinition, ...] = ALL_CLAIMS) -> SeedReport:
        """Assign every catalog claim to its default roles.

        Safe to re-run and to run from several processes at once: existing
        assignments are left alone and a lost insert race counts as success.
        """
        logger.info("Starting claim seeding process")
        report = SeedReport()

        for definition in definitions:
            await self._seed_claim_definition(definition, report)

        logger.info(
            "Completed seeding %d claims (%d assigned, %d already present)",
            len(definitions),
            len(report.assigned),
            len(report.already_present),
        )
        return report

    # ── Internals ────────────────────────────────────────────────────

    async def _read_cache(self, role: str) -> list[str] | None:
        try:
            raw = await self._cache.get(role_cache_key(role))
        except Exception:
            logger.warning("Cache read failed for role %s, falling back to database", role, exc_info=True)
            return None

        if not raw:
            return None

        try:
            claims = json.loads(raw)
        except ValueError:
            logger.warning("Failed to deserialize cached claims for role %s, re-fetching", role)
            return None

        if not isinstance(claims, list) or not all(isinstance(c, str) for c in claims):
            logger.warning("Unexpected cached claims payload for role %s, re-fetching", role)
            return None
        return claims

    async def _seed_claim_definition(self, definition: ClaimDefinition, report: SeedReport) -> None:
        claim = definition.name

        for role_name in definition.default_assignments:
            role = await self._store.find_role_by_name(role_name)
            if role is None:
                logger.warning("Role %s not found for claim %s", role_name, claim)
                report.missing_roles.add(role_name)
                continue

            if await self._store.find_role_claim(role.id, claim) is not None:
                report.already_present.append((role_name, claim))
                continue

            outcome = await self._store.insert_role_claim_if_absent(role.id, claim)
            await self._store.commit()

            if outcome is InsertOutcome.ALREADY_EXISTS:
                logger.debug("Claim %s was assigned to role %s concurrently", claim, role_name)
                report.already_present.append((role_name, claim))
                continue

            logger.info("Assigned claim %s to role %s", claim, role_name)
            report.assigned.append((role_name, claim))
            await self.invalidate_role_cache(role_name)
