"""Bootstrap data: the fixed roles and their default claims.

Runs at startup (when `SEED_ON_STARTUP` is set) and is safe to run from
every replica at once: role creation and claim assignment are both
insert-if-absent.
"""

from __future__ import annotations

import logging

from src.authorization.catalog import ROLES, RoleDefinition
from src.authorization.claims import ClaimsService, SeedReport
from src.authorization.store import InsertOutcome, RoleClaimStore

logger = logging.getLogger(__name__)


class DatabaseSeeder:
    """Creates missing roles, then seeds default role claims."""

    def __init__(self, store: RoleClaimStore, claims: ClaimsService) -> None:
        self._store = store
        self._claims = claims

    async def seed(self) -> SeedReport:
        await self.seed_roles()
        return await self._claims.seed_claims()

    async def seed_roles(self, roles: tuple[RoleDefinition, ...] = ROLES) -> list[str]:
        """Create the roles that do not exist yet; returns the names created."""
        created: list[str] = []
        for role in roles:
            if await self._store.find_role_by_name(role.name) is not None:
                continue
            outcome = await self._store.insert_role_if_absent(role.name, role.description)
            await self._store.commit()
            if outcome is InsertOutcome.INSERTED:
                logger.info("Created role: %s", role.name)
                created.append(role.name)
        return created
