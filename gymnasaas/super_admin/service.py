"""Cross-tenant administration for super admins."""

import logging
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from gymnasaas.db.models import (
    Academy,
    Athlete,
    AuditLog,
    Plan,
    PlanCode,
    Profile,
    Subscription,
    Tenant,
)
from gymnasaas.super_admin.schemas import (
    AcademyDetailResponse,
    OverviewResponse,
    OwnerInfo,
    PlanCount,
    SubscriptionInfo,
)

logger = logging.getLogger(__name__)


class SuperAdminService:
    """Platform-wide reads and interventions.

    Args:
        db: Database session.
        actor_user_id: User id of the acting super admin, recorded in audit logs.
    """

    def __init__(self, db: Session, actor_user_id: str):
        self.db = db
        self.actor_user_id = actor_user_id

    def log_action(self, action: str, meta: Optional[dict[str, Any]] = None) -> None:
        self.db.add(AuditLog(user_id=self.actor_user_id, action=action, meta=meta))

    def get_overview(self) -> OverviewResponse:
        """Total counts for KPI cards and tenants per plan."""
        tenants_total = self.db.query(func.count(Tenant.id)).scalar() or 0
        academies_total = self.db.query(func.count(Academy.id)).scalar() or 0
        academies_suspended = (
            self.db.query(func.count(Academy.id)).filter(Academy.is_suspended.is_(True)).scalar()
            or 0
        )
        profiles_total = self.db.query(func.count(Profile.id)).scalar() or 0
        athletes_total = self.db.query(func.count(Athlete.id)).scalar() or 0

        rows = (
            self.db.query(Plan.code, func.count(Subscription.id).label("count"))
            .join(Subscription, Subscription.plan_id == Plan.id)
            .group_by(Plan.code)
            .all()
        )
        counts = {r.code: r.count for r in rows}
        # Tenants without a subscription (or plan) are on free
        counts[PlanCode.FREE] = counts.get(PlanCode.FREE, 0) + max(
            0, tenants_total - sum(counts.values())
        )

        return OverviewResponse(
            tenants_total=tenants_total,
            academies_total=academies_total,
            academies_suspended=academies_suspended,
            profiles_total=profiles_total,
            athletes_total=athletes_total,
            plan_distribution=[
                PlanCount(plan=code.value, count=counts.get(code, 0)) for code in PlanCode
            ],
        )

    def get_academy_detail(self, academy_id: str) -> Optional[AcademyDetailResponse]:
        academy = self.db.get(Academy, academy_id)
        if academy is None:
            return None

        subscription = (
            self.db.query(Subscription).filter(Subscription.tenant_id == academy.tenant_id).first()
        )
        subscription_info = None
        if subscription is not None:
            subscription_info = SubscriptionInfo(
                id=subscription.id,
                status=subscription.status,
                plan_code=subscription.plan.code if subscription.plan else None,
                plan_price=subscription.plan.price_eur if subscription.plan else None,
                cancel_at_period_end=subscription.cancel_at_period_end,
                current_period_end=subscription.current_period_end,
            )

        athlete_count = (
            self.db.query(func.count(Athlete.id)).filter(Athlete.academy_id == academy.id).scalar()
            or 0
        )

        return AcademyDetailResponse(
            id=academy.id,
            name=academy.name,
            tenant_id=academy.tenant_id,
            academy_type=academy.academy_type,
            country=academy.country,
            region=academy.region,
            is_suspended=academy.is_suspended,
            suspended_at=academy.suspended_at,
            created_at=academy.created_at,
            owner=OwnerInfo.model_validate(academy.owner) if academy.owner else None,
            subscription=subscription_info,
            athlete_count=athlete_count,
        )

    def set_suspended(self, academy_id: str, suspended: bool) -> Optional[Academy]:
        academy = self.db.get(Academy, academy_id)
        if academy is None:
            return None

        academy.is_suspended = suspended
        academy.suspended_at = datetime.utcnow() if suspended else None
        self.log_action(
            "academy.suspend" if suspended else "academy.unsuspend",
            {"academy_id": academy_id},
        )
        self.db.commit()
        logger.info(
            "Academy %s %s by %s",
            academy_id,
            "suspended" if suspended else "reactivated",
            self.actor_user_id,
        )
        return academy

    def activate_access(self, profile_id: str) -> Optional[Profile]:
        """Allow a profile (typically an athlete) to log in."""
        profile = self.db.get(Profile, profile_id)
        if profile is None:
            return None

        profile.can_login = True
        self.log_action("profile.activate_access", {"profile_id": profile_id})
        self.db.commit()
        logger.info("Login enabled for profile %s by %s", profile_id, self.actor_user_id)
        return profile
