"""Tests for plan limit enforcement against the database."""

import pytest
from sqlalchemy.orm import Session

from gymnasaas.billing.errors import AcademyLimitReached, AcademyNotFound, PlanLimitReached
from gymnasaas.billing.limits import PlanLimitService, limits_for_plan
from gymnasaas.db.models import Academy, Athlete, Group, PlanCode, Tenant, TrainingClass


def add_groups(db: Session, academy: Academy, count: int) -> None:
    for i in range(count):
        db.add(Group(tenant_id=academy.tenant_id, academy_id=academy.id, name=f"Grupo {i}"))
    db.commit()


class TestLimitsForPlan:
    def test_built_in_limits_without_row(self):
        limits = limits_for_plan(PlanCode.FREE)
        assert limits.athlete_limit == 50
        assert limits.class_limit == 10
        assert limits.group_limit == 3
        assert limits.academy_limit == 1

    def test_row_overrides_athlete_and_academy_limits(self, plans):
        plan = plans[PlanCode.PRO]
        plan.athlete_limit = 150
        plan.academy_limit = 5
        limits = limits_for_plan(PlanCode.PRO, plan)
        assert limits.athlete_limit == 150
        assert limits.academy_limit == 5

    def test_premium_ignores_overrides(self, plans):
        plan = plans[PlanCode.PREMIUM]
        plan.athlete_limit = 10
        limits = limits_for_plan(PlanCode.PREMIUM, plan)
        assert limits.athlete_limit is None


class TestPlanLimitService:
    def test_no_subscription_means_free(self, db, test_tenant):
        service = PlanLimitService(db, test_tenant.id)
        assert service.get_active_subscription().plan_code == PlanCode.FREE

    def test_subscription_plan_is_used(self, db, test_tenant, plans, subscribe):
        subscribe(test_tenant, plans[PlanCode.PRO])
        service = PlanLimitService(db, test_tenant.id)
        assert service.get_active_subscription().plan_code == PlanCode.PRO

    def test_allows_creation_below_limit(self, db, test_tenant, test_academy):
        add_groups(db, test_academy, 2)
        PlanLimitService(db, test_tenant.id).assert_within_plan_limits(test_academy.id, "groups")

    def test_blocks_creation_at_limit(self, db, test_tenant, test_academy):
        add_groups(db, test_academy, 3)

        with pytest.raises(PlanLimitReached) as exc_info:
            PlanLimitService(db, test_tenant.id).assert_within_plan_limits(
                test_academy.id, "groups"
            )

        body = exc_info.value.to_dict()
        assert exc_info.value.status_code == 402
        assert body["error"] == "LIMIT_REACHED"
        assert body["resource"] == "groups"
        assert body["limit"] == 3
        assert body["current"] == 3
        assert body["upgrade_to"] == "pro"

    def test_premium_is_unlimited(self, db, test_tenant, test_academy, plans, subscribe):
        subscribe(test_tenant, plans[PlanCode.PREMIUM])
        add_groups(db, test_academy, 25)
        PlanLimitService(db, test_tenant.id).assert_within_plan_limits(test_academy.id, "groups")

    def test_other_tenant_academy_is_not_found(self, db, test_tenant, test_academy):
        other = Tenant(name="Otro club")
        db.add(other)
        db.commit()

        with pytest.raises(AcademyNotFound):
            PlanLimitService(db, other.id).assert_within_plan_limits(test_academy.id, "athletes")

    def test_counts_are_per_academy(self, db, test_tenant, test_academy):
        second = Academy(tenant_id=test_tenant.id, name="Olimpia Sur")
        db.add(second)
        db.commit()
        add_groups(db, test_academy, 3)

        service = PlanLimitService(db, test_tenant.id)
        assert service.count("groups", test_academy.id) == 3
        assert service.count("groups", second.id) == 0
        assert service.count("academies") == 2

    def test_academy_limit_on_free(self, db, test_tenant, test_academy):
        with pytest.raises(AcademyLimitReached) as exc_info:
            PlanLimitService(db, test_tenant.id).assert_academy_limit()
        assert exc_info.value.to_dict()["error"] == "ACADEMY_LIMIT_REACHED"

    def test_academy_limit_on_pro(self, db, test_tenant, test_academy, plans, subscribe):
        subscribe(test_tenant, plans[PlanCode.PRO])
        PlanLimitService(db, test_tenant.id).assert_academy_limit()

    def test_remaining_limits(self, db, test_tenant, test_academy):
        db.add(TrainingClass(tenant_id=test_tenant.id, academy_id=test_academy.id, name="Suelo"))
        db.commit()

        remaining = PlanLimitService(db, test_tenant.id).get_remaining_limits(
            test_academy.id, "classes"
        )
        assert remaining.current == 1
        assert remaining.limit == 10
        assert remaining.remaining == 9
        assert remaining.upgrade_to is None


class TestPlanLimitViolations:
    def test_no_violations_at_exact_limit(self, db, test_tenant, test_academy):
        add_groups(db, test_academy, 3)
        report = PlanLimitService(db, test_tenant.id).check_plan_limit_violations(PlanCode.FREE)
        assert report.requires_action is False
        assert report.violations == []

    def test_downgrade_reports_excess(self, db, test_tenant, test_academy):
        add_groups(db, test_academy, 4)
        second = Academy(tenant_id=test_tenant.id, name="Olimpia Sur")
        db.add(second)
        db.commit()

        report = PlanLimitService(db, test_tenant.id).check_plan_limit_violations(PlanCode.FREE)

        assert report.requires_action is True
        by_resource = {v.resource: v for v in report.violations}
        assert by_resource["academies"].current_count == 2
        assert by_resource["academies"].limit == 1
        assert by_resource["groups"].current_count == 4
        assert by_resource["groups"].academy_id == test_academy.id
        assert len(by_resource["groups"].items) == 4

    def test_premium_never_violates(self, db, test_tenant, test_academy):
        for i in range(60):
            db.add(Athlete(tenant_id=test_tenant.id, academy_id=test_academy.id, name=f"A{i}"))
        db.commit()

        report = PlanLimitService(db, test_tenant.id).check_plan_limit_violations(
            PlanCode.PREMIUM
        )
        assert report.requires_action is False
