"""Claim catalog — every permission the API knows about.

Claims are plain strings composed as "<MODULE>_<ACTION>". Adding a permission
means adding an entry here; which roles hold it is data (RoleClaim rows),
seeded from each definition's default assignments.

Usage:
    from src.authorization.catalog import TenantClaims

    Depends(require_claim(TenantClaims.READ))
"""

from __future__ import annotations

from dataclasses import dataclass


class Modules:
    TENANT = "TENANT"
    USER = "USER"
    AUDIT = "AUDIT"


class Actions:
    CREATE = "CREATE"
    READ = "READ"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    INVITE = "INVITE"
    EXPORT = "EXPORT"
    SEARCH = "SEARCH"


class Roles:
    SUPER_ADMIN = "SuperAdmin"
    ADMIN = "Admin"
    DENTIST = "Dentist"
    ASSISTANT = "Assistant"


def claim_name(module: str, action: str) -> str:
    """Compose a claim name, e.g. claim_name("tenant", "read") -> "TENANT_READ"."""
    return f"{module.upper()}_{action.upper()}"


@dataclass(frozen=True)
class ClaimDefinition:
    """A permission plus the roles that receive it when claims are seeded."""

    name: str
    description: str
    default_assignments: tuple[str, ...] = ()


@dataclass(frozen=True)
class RoleDefinition:
    name: str
    description: str


ROLES: tuple[RoleDefinition, ...] = (
    RoleDefinition(Roles.SUPER_ADMIN, "Platform administrator who manages tenants and system-wide operations"),
    RoleDefinition(Roles.ADMIN, "Practice administrator with full access within their tenant"),
    RoleDefinition(Roles.DENTIST, "Licensed dentist with clinical and administrative access within their practice"),
    RoleDefinition(Roles.ASSISTANT, "Dental assistant with limited clinical access within their practice"),
)

_ADMINS = (Roles.SUPER_ADMIN, Roles.ADMIN)


class TenantClaims:
    CREATE = claim_name(Modules.TENANT, Actions.CREATE)
    READ = claim_name(Modules.TENANT, Actions.READ)
    UPDATE = claim_name(Modules.TENANT, Actions.UPDATE)
    DELETE = claim_name(Modules.TENANT, Actions.DELETE)

    ALL: tuple[ClaimDefinition, ...] = (
        ClaimDefinition(CREATE, "Create new tenants", (Roles.SUPER_ADMIN,)),
        ClaimDefinition(READ, "View tenant information", _ADMINS),
        ClaimDefinition(UPDATE, "Update tenant settings", _ADMINS),
        ClaimDefinition(DELETE, "Delete tenants", (Roles.SUPER_ADMIN,)),
    )


class UserClaims:
    CREATE = claim_name(Modules.USER, Actions.CREATE)
    INVITE = claim_name(Modules.USER, Actions.INVITE)
    READ = claim_name(Modules.USER, Actions.READ)
    UPDATE = claim_name(Modules.USER, Actions.UPDATE)
    DELETE = claim_name(Modules.USER, Actions.DELETE)

    ALL: tuple[ClaimDefinition, ...] = (
        ClaimDefinition(CREATE, "Create new users", (Roles.SUPER_ADMIN,)),
        ClaimDefinition(INVITE, "Invite new users", _ADMINS),
        ClaimDefinition(READ, "View user information", _ADMINS),
        ClaimDefinition(UPDATE, "Update user information", _ADMINS),
        ClaimDefinition(DELETE, "Delete users", _ADMINS),
    )


class AuditClaims:
    READ = claim_name(Modules.AUDIT, Actions.READ)
    EXPORT = claim_name(Modules.AUDIT, Actions.EXPORT)
    SEARCH = claim_name(Modules.AUDIT, Actions.SEARCH)

    ALL: tuple[ClaimDefinition, ...] = (
        ClaimDefinition(READ, "View audit logs and system activity", _ADMINS),
        ClaimDefinition(EXPORT, "Export audit logs for compliance", _ADMINS),
        ClaimDefinition(SEARCH, "Search and filter audit logs", _ADMINS),
    )


ALL_CLAIMS: tuple[ClaimDefinition, ...] = TenantClaims.ALL + UserClaims.ALL + AuditClaims.ALL

# Holding this claim is what makes a caller a platform-level administrator.
SUPER_ADMIN_CLAIM = TenantClaims.CREATE
