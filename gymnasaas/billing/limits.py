"""Plan limit enforcement against the database.

A tenant's plan is read from its single subscription row; tenants without
a subscription are on the free plan.
"""

import logging
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from gymnasaas.billing.errors import AcademyLimitReached, AcademyNotFound, PlanLimitReached
from gymnasaas.billing.plans import evaluate_limit, get_plan_limit
from gymnasaas.billing.schemas import (
    ActiveSubscription,
    LimitViolation,
    RemainingLimits,
    ViolatingItem,
    ViolationReport,
)
from gymnasaas.db.models import (
    Academy,
    Athlete,
    Group,
    Plan,
    PlanCode,
    Subscription,
    TrainingClass,
)

logger = logging.getLogger(__name__)

# Resources counted per academy
ACADEMY_SCOPED_MODELS = {
    "athletes": Athlete,
    "classes": TrainingClass,
    "groups": Group,
}


def limits_for_plan(plan_code: PlanCode, plan: Optional[Plan] = None) -> ActiveSubscription:
    """Effective limits of ``plan_code``, honouring overrides on the plan row.

    Premium is always unlimited regardless of overrides.
    """
    athlete_limit = get_plan_limit(plan_code, "athletes")
    academy_limit = get_plan_limit(plan_code, "academies")
    if plan is not None and plan_code != PlanCode.PREMIUM:
        if plan.athlete_limit is not None:
            athlete_limit = plan.athlete_limit
        if plan.academy_limit is not None:
            academy_limit = plan.academy_limit

    return ActiveSubscription(
        plan_code=plan_code,
        athlete_limit=athlete_limit,
        class_limit=get_plan_limit(plan_code, "classes"),
        group_limit=get_plan_limit(plan_code, "groups"),
        academy_limit=academy_limit,
    )


class PlanLimitService:
    """Counts tenant resources and checks them against the tenant's plan.

    Args:
        db: Database session.
        tenant_id: Tenant whose plan applies.
    """

    def __init__(self, db: Session, tenant_id: str):
        self.db = db
        self.tenant_id = tenant_id

    def get_subscription(self) -> Optional[Subscription]:
        return (
            self.db.query(Subscription).filter(Subscription.tenant_id == self.tenant_id).first()
        )

    def get_active_subscription(self) -> ActiveSubscription:
        """Return the limits of the tenant's current plan."""
        subscription = self.get_subscription()
        plan = subscription.plan if subscription else None
        plan_code = plan.code if plan else PlanCode.FREE
        return limits_for_plan(plan_code, plan)

    def get_academy(self, academy_id: str) -> Academy:
        """Return the academy if it belongs to the tenant.

        Raises:
            AcademyNotFound: If the academy does not exist in this tenant.
        """
        academy = (
            self.db.query(Academy)
            .filter(Academy.id == academy_id, Academy.tenant_id == self.tenant_id)
            .first()
        )
        if academy is None:
            raise AcademyNotFound()
        return academy

    def count(self, resource: str, academy_id: Optional[str] = None) -> int:
        """Current number of ``resource`` rows (per academy, or per tenant for academies)."""
        if resource == "academies":
            total = (
                self.db.query(func.count(Academy.id))
                .filter(Academy.tenant_id == self.tenant_id)
                .scalar()
            )
            return total or 0

        model = ACADEMY_SCOPED_MODELS[resource]
        total = (
            self.db.query(func.count(model.id))
            .filter(model.tenant_id == self.tenant_id, model.academy_id == academy_id)
            .scalar()
        )
        return total or 0

    def assert_within_plan_limits(self, academy_id: str, resource: str) -> None:
        """Raise if creating one more ``resource`` in the academy would exceed the plan.

        Raises:
            AcademyNotFound: If the academy is not in this tenant.
            PlanLimitReached: If the plan limit has been reached.
        """
        self.get_academy(academy_id)
        subscription = self.get_active_subscription()
        limit = subscription.limit_for(resource)
        if limit is None:
            return

        current = self.count(resource, academy_id)
        evaluation = evaluate_limit(subscription.plan_code, limit, current, resource)
        if evaluation.exceeded:
            logger.info(
                "Tenant %s hit %s limit (%d/%d) on plan %s",
                self.tenant_id,
                resource,
                current,
                limit,
                subscription.plan_code.value,
            )
            raise PlanLimitReached(
                details={
                    "code": PlanLimitReached.code,
                    "resource": resource,
                    "limit": limit,
                    "current": current,
                    "upgrade_to": evaluation.upgrade_to.value if evaluation.upgrade_to else None,
                }
            )

    def assert_academy_limit(self) -> None:
        """Raise if the tenant cannot create another academy.

        Raises:
            AcademyLimitReached: If the academy limit has been reached.
        """
        subscription = self.get_active_subscription()
        limit = subscription.academy_limit
        if limit is None:
            return

        current = self.count("academies")
        evaluation = evaluate_limit(subscription.plan_code, limit, current, "academies")
        if evaluation.exceeded:
            raise AcademyLimitReached(
                details={
                    "code": AcademyLimitReached.code,
                    "resource": "academies",
                    "limit": limit,
                    "current": current,
                    "upgrade_to": evaluation.upgrade_to.value if evaluation.upgrade_to else None,
                }
            )

    def get_remaining_limits(self, academy_id: str, resource: str) -> RemainingLimits:
        """Report usage, limit and headroom of ``resource`` for an academy."""
        self.get_academy(academy_id)
        subscription = self.get_active_subscription()
        limit = subscription.limit_for(resource)
        current = self.count(resource, academy_id)

        evaluation = evaluate_limit(subscription.plan_code, limit, current, resource)
        return RemainingLimits(
            resource=resource,
            current=current,
            limit=limit,
            remaining=None if limit is None else max(0, limit - current),
            plan_code=subscription.plan_code,
            upgrade_to=evaluation.upgrade_to,
        )

    def check_plan_limit_violations(self, new_plan_code: PlanCode) -> ViolationReport:
        """List resources that already exceed the limits of ``new_plan_code``.

        Unlike creation checks, being exactly at the limit is not a violation.
        """
        plan = self.db.query(Plan).filter(Plan.code == new_plan_code).first()
        limits = limits_for_plan(new_plan_code, plan)
        violations: list[LimitViolation] = []

        academies = (
            self.db.query(Academy)
            .filter(Academy.tenant_id == self.tenant_id)
            .order_by(Academy.created_at)
            .all()
        )

        if limits.academy_limit is not None and len(academies) > limits.academy_limit:
            violations.append(
                LimitViolation(
                    resource="academies",
                    current_count=len(academies),
                    limit=limits.academy_limit,
                    items=[ViolatingItem(id=a.id, name=a.name) for a in academies],
                )
            )

        for academy in academies:
            for resource, model in ACADEMY_SCOPED_MODELS.items():
                limit = limits.limit_for(resource)
                if limit is None:
                    continue
                rows = (
                    self.db.query(model.id, model.name)
                    .filter(model.academy_id == academy.id)
                    .order_by(model.created_at)
                    .all()
                )
                if len(rows) > limit:
                    violations.append(
                        LimitViolation(
                            resource=resource,
                            current_count=len(rows),
                            limit=limit,
                            items=[ViolatingItem(id=r.id, name=r.name) for r in rows],
                            academy_id=academy.id,
                            academy_name=academy.name,
                        )
                    )

        return ViolationReport(violations=violations, requires_action=bool(violations))


def get_plan_limit_service(db: Session, tenant_id: str) -> PlanLimitService:
    """Factory for PlanLimitService."""
    return PlanLimitService(db, tenant_id)
