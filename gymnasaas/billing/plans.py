"""Subscription plan catalogue and limit evaluation."""

from dataclasses import dataclass
from typing import Optional

from gymnasaas.db.models import PlanCode

# Upgrade ladder, lowest tier first
PLAN_LADDER: tuple[PlanCode, ...] = (PlanCode.FREE, PlanCode.PRO, PlanCode.PREMIUM)

RESOURCES = ("athletes", "classes", "groups", "academies")

PLAN_DISPLAY_NAMES: dict[PlanCode, str] = {
    PlanCode.FREE: "Free",
    PlanCode.PRO: "Pro",
    PlanCode.PREMIUM: "Premium",
}

# Monthly price in EUR
PLAN_PRICES: dict[PlanCode, int] = {
    PlanCode.FREE: 0,
    PlanCode.PRO: 19,
    PlanCode.PREMIUM: 49,
}

# Per-resource limits (None = unlimited). Athletes, classes and groups are
# counted per academy; academies are counted per tenant.
PLAN_LIMITS: dict[str, dict[PlanCode, Optional[int]]] = {
    "athletes": {PlanCode.FREE: 50, PlanCode.PRO: 200, PlanCode.PREMIUM: None},
    "classes": {PlanCode.FREE: 10, PlanCode.PRO: 40, PlanCode.PREMIUM: None},
    "groups": {PlanCode.FREE: 3, PlanCode.PRO: 10, PlanCode.PREMIUM: None},
    "academies": {PlanCode.FREE: 1, PlanCode.PRO: None, PlanCode.PREMIUM: None},
}

UPGRADE_BENEFITS: dict[PlanCode, list[str]] = {
    PlanCode.PRO: ["Academias ilimitadas", "Hasta 200 atletas", "10 grupos", "40 clases"],
    PlanCode.PREMIUM: ["Todo ilimitado", "API extendida", "Soporte prioritario"],
}


@dataclass(frozen=True)
class LimitEvaluation:
    exceeded: bool
    upgrade_to: Optional[PlanCode] = None


@dataclass(frozen=True)
class UpgradeInfo:
    next_plan: PlanCode
    price: str
    benefits: list[str]


def parse_plan_code(value: "str | PlanCode | None") -> Optional[PlanCode]:
    """Return the PlanCode for ``value``, or None when it is not a known plan."""
    if isinstance(value, PlanCode):
        return value
    try:
        return PlanCode((value or "").strip().lower())
    except ValueError:
        return None


def next_plan(plan_code: "str | PlanCode") -> Optional[PlanCode]:
    """Return the tier above ``plan_code``, or None at the top of the ladder."""
    plan = parse_plan_code(plan_code)
    if plan is None:
        return None
    index = PLAN_LADDER.index(plan)
    if index + 1 < len(PLAN_LADDER):
        return PLAN_LADDER[index + 1]
    return None


def plan_price(plan_code: "str | PlanCode") -> int:
    """Monthly price of a plan in EUR. Unknown plans cost nothing."""
    plan = parse_plan_code(plan_code)
    return PLAN_PRICES.get(plan, 0) if plan else 0


def get_plan_limit(plan_code: "str | PlanCode", resource: str) -> Optional[int]:
    """Return the built-in limit of ``resource`` for a plan (None = unlimited).

    Unknown plans and unknown resources are unlimited.
    """
    plan = parse_plan_code(plan_code)
    if plan is None:
        return None
    return PLAN_LIMITS.get(resource, {}).get(plan)


def evaluate_limit(
    plan_code: "str | PlanCode",
    limit: Optional[int],
    current_usage: int,
    resource: str,
) -> LimitEvaluation:
    """Decide whether one more ``resource`` may be created.

    Being at capacity blocks the next creation: a plan allowing N items
    rejects the (N+1)th. When blocked, ``upgrade_to`` names the next tier
    up, or None if the plan is already the top tier.

    Args:
        plan_code: The tenant's plan.
        limit: Configured limit for the resource, None for unlimited.
        current_usage: Number of items that already exist.
        resource: Resource being created (informational).

    Returns:
        LimitEvaluation: Whether the limit is exceeded and the suggested upgrade.
    """
    if limit is None:
        return LimitEvaluation(exceeded=False)

    if current_usage < limit:
        return LimitEvaluation(exceeded=False)

    return LimitEvaluation(exceeded=True, upgrade_to=next_plan(plan_code))


def get_upgrade_info(plan_code: "str | PlanCode") -> UpgradeInfo:
    """Return the next plan up with its price label and benefits."""
    target = next_plan(plan_code) or PlanCode.PREMIUM
    benefits = UPGRADE_BENEFITS[target] if target != parse_plan_code(plan_code) else []
    return UpgradeInfo(
        next_plan=target,
        price=f"{PLAN_PRICES[target]}€/mes",
        benefits=list(benefits),
    )
