"""Resolve the tenant a request acts on."""

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.orm import Session

from gymnasaas.authz.roles import is_admin_capable
from gymnasaas.db.models import Academy, Profile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TenantResolution:
    tenant_id: Optional[str]
    should_update_profile: bool = False
    new_tenant_id: Optional[str] = None
    new_active_academy_id: Optional[str] = None


def resolve_tenant(db: Session, profile: Profile, academy_id: Optional[str]) -> TenantResolution:
    """Pick the tenant for ``profile``, preferring the targeted academy's tenant.

    The academy's tenant is used only when the profile owns the academy or
    is admin-capable. Otherwise the profile's own tenant applies.
    """
    if not academy_id:
        return TenantResolution(tenant_id=profile.tenant_id)

    academy = db.get(Academy, academy_id)
    if academy is None:
        return TenantResolution(tenant_id=profile.tenant_id)

    if not (is_admin_capable(profile.role) or academy.owner_id == profile.id):
        return TenantResolution(tenant_id=profile.tenant_id)

    should_update = profile.tenant_id is None and academy.tenant_id is not None
    return TenantResolution(
        tenant_id=academy.tenant_id or profile.tenant_id,
        should_update_profile=should_update,
        new_tenant_id=academy.tenant_id,
        new_active_academy_id=academy_id,
    )


def backfill_profile_tenant(db: Session, profile: Profile, resolution: TenantResolution) -> None:
    """Persist a tenant discovered through an owned academy onto the profile."""
    if not resolution.should_update_profile or not resolution.new_tenant_id:
        return
    profile.tenant_id = resolution.new_tenant_id
    if resolution.new_active_academy_id:
        profile.active_academy_id = resolution.new_active_academy_id
    db.commit()
    logger.info(
        "Profile %s linked to tenant %s via academy %s",
        profile.id,
        resolution.new_tenant_id,
        resolution.new_active_academy_id,
    )
