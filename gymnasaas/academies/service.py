"""Academy service."""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from gymnasaas.authz.gate import TenantContext
from gymnasaas.billing.limits import get_plan_limit_service
from gymnasaas.db.models import Academy, Profile, Tenant
from gymnasaas.academies.schemas import AcademyCreate
from gymnasaas.security import escape_like

logger = logging.getLogger(__name__)


class AcademyService:
    """Create and list the academies of the caller's tenant.

    Args:
        db: Database session.
        ctx: Gate context of the caller.
    """

    def __init__(self, db: Session, ctx: TenantContext):
        self.db = db
        self.ctx = ctx

    def list_academies(self) -> list[Academy]:
        if not self.ctx.tenant_id:
            return []
        return (
            self.db.query(Academy)
            .filter(Academy.tenant_id == self.ctx.tenant_id)
            .order_by(Academy.created_at)
            .all()
        )

    def create_academy(self, data: AcademyCreate) -> Academy:
        """Create an academy owned by the caller.

        A caller without a tenant gets a new tenant named after the academy.
        Otherwise the tenant's academy limit is enforced first.

        Raises:
            AcademyLimitReached: If the tenant's plan allows no more academies.
        """
        profile: Profile = self.ctx.profile
        tenant_id = self.ctx.tenant_id

        if tenant_id:
            get_plan_limit_service(self.db, tenant_id).assert_academy_limit()
        else:
            tenant = Tenant(name=data.name)
            self.db.add(tenant)
            self.db.flush()
            tenant_id = tenant.id
            profile.tenant_id = tenant_id
            logger.info("Created tenant %s for profile %s", tenant_id, profile.id)

        academy = Academy(
            tenant_id=tenant_id,
            owner_id=profile.id,
            **data.model_dump(),
        )
        self.db.add(academy)
        self.db.flush()
        profile.active_academy_id = academy.id
        self.db.commit()
        self.db.refresh(academy)
        return academy


def list_public_academies(
    db: Session,
    q: Optional[str] = None,
    country: Optional[str] = None,
    limit: int = 50,
) -> list[Academy]:
    """Public directory: visible, non-suspended academies."""
    query = db.query(Academy).filter(Academy.is_public.is_(True), Academy.is_suspended.is_(False))
    if q:
        query = query.filter(Academy.name.ilike(f"%{escape_like(q)}%", escape="\\"))
    if country:
        query = query.filter(Academy.country == country)
    return query.order_by(Academy.name).limit(limit).all()


def get_academy_service(db: Session, ctx: TenantContext) -> AcademyService:
    """Factory for AcademyService."""
    return AcademyService(db, ctx)
