"""Tenant authorization gate.

A ``TenantGate`` instance is a FastAPI dependency. It resolves the acting
user, loads their profile and tenant, and either returns a
``TenantContext`` for the route handler or raises an ``AuthzError``.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Annotated, Optional

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from gymnasaas.auth.utils import resolve_user_id
from gymnasaas.authz.endpoints import extract_academy_id, is_tenant_optional
from gymnasaas.authz.errors import (
    Forbidden,
    LoginDisabled,
    ProfileNotFound,
    SuperAdminRequired,
    TenantMissing,
    Unauthenticated,
)
from gymnasaas.authz.roles import is_admin_capable, is_super_admin, satisfies
from gymnasaas.authz.tenant_resolver import backfill_profile_tenant, resolve_tenant
from gymnasaas.db.database import get_db
from gymnasaas.db.models import Profile, UserRole

logger = logging.getLogger(__name__)

UserResolver = Callable[[Request], Optional[str]]
ProfileLookup = Callable[[Session, str], Optional[Profile]]


@dataclass
class TenantContext:
    """What a gated handler knows about its caller."""

    user_id: str
    tenant_id: Optional[str]
    profile: Profile
    academy_id: Optional[str] = None

    @property
    def role(self) -> UserRole:
        return self.profile.role


def lookup_profile(db: Session, user_id: str) -> Optional[Profile]:
    """Default profile lookup: one row by external user id."""
    return db.query(Profile).filter(Profile.user_id == user_id).first()


class TenantGate:
    """Guard for routes that act on behalf of a tenant.

    Args:
        required_role: Minimum role the caller must hold, None for any role.
        require_tenant: Reject callers without a resolvable tenant, unless the
            route is public, creates an academy, or is tenant-flexible.
        user_resolver: Maps a request to an external user id.
        profile_lookup: Loads the profile for a user id.
    """

    def __init__(
        self,
        *,
        required_role: Optional[UserRole] = None,
        require_tenant: bool = True,
        user_resolver: UserResolver = resolve_user_id,
        profile_lookup: ProfileLookup = lookup_profile,
    ):
        self.required_role = required_role
        self.require_tenant = require_tenant
        self.user_resolver = user_resolver
        self.profile_lookup = profile_lookup

    def __call__(
        self, request: Request, db: Annotated[Session, Depends(get_db)]
    ) -> TenantContext:
        return self.authorize(request, db)

    def authorize(self, request: Request, db: Session) -> TenantContext:
        user_id = self.user_resolver(request)
        if not user_id:
            raise Unauthenticated()

        profile = self.profile_lookup(db, user_id)
        if profile is None:
            raise ProfileNotFound()

        if not profile.can_login and not is_super_admin(profile.role):
            raise LoginDisabled()

        if not satisfies(profile.role, self.required_role):
            logger.warning(
                "Profile %s (%s) denied %s %s: requires %s",
                profile.id,
                profile.role.value,
                request.method,
                request.url.path,
                self.required_role.value,
            )
            if self.required_role == UserRole.SUPER_ADMIN:
                raise SuperAdminRequired()
            raise Forbidden()

        academy_id = extract_academy_id(request)
        resolution = resolve_tenant(db, profile, academy_id)
        if resolution.should_update_profile:
            backfill_profile_tenant(db, profile, resolution)

        tenant_id = resolution.tenant_id
        if (
            self.require_tenant
            and not tenant_id
            and not is_admin_capable(profile.role)
            and not is_tenant_optional(request.url.path, request.method)
        ):
            raise TenantMissing()

        return TenantContext(
            user_id=user_id,
            tenant_id=tenant_id,
            profile=profile,
            academy_id=academy_id,
        )


require_tenant = TenantGate()
require_coach = TenantGate(required_role=UserRole.COACH)
require_owner = TenantGate(required_role=UserRole.OWNER)
require_super_admin = TenantGate(required_role=UserRole.SUPER_ADMIN, require_tenant=False)
