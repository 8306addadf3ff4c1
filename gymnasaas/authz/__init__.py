"""Tenant authorization: gate, roles and errors."""

from gymnasaas.authz.errors import (
    AuthzError,
    Forbidden,
    LoginDisabled,
    ProfileNotFound,
    SuperAdminRequired,
    TenantMissing,
    Unauthenticated,
)
from gymnasaas.authz.gate import (
    TenantContext,
    TenantGate,
    lookup_profile,
    require_coach,
    require_owner,
    require_super_admin,
    require_tenant,
)

__all__ = [
    "AuthzError",
    "Forbidden",
    "LoginDisabled",
    "ProfileNotFound",
    "SuperAdminRequired",
    "TenantMissing",
    "Unauthenticated",
    "TenantContext",
    "TenantGate",
    "lookup_profile",
    "require_coach",
    "require_owner",
    "require_super_admin",
    "require_tenant",
]
