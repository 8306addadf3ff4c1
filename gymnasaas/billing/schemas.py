"""Pydantic schemas for billing and plan limits."""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from gymnasaas.db.models import PlanCode

LimitResource = Literal["athletes", "classes", "groups", "academies"]


class ActiveSubscription(BaseModel):
    """Effective limits of a tenant's plan (None = unlimited)."""

    plan_code: PlanCode
    athlete_limit: Optional[int] = None
    class_limit: Optional[int] = None
    group_limit: Optional[int] = None
    academy_limit: Optional[int] = None

    def limit_for(self, resource: str) -> Optional[int]:
        return {
            "athletes": self.athlete_limit,
            "classes": self.class_limit,
            "groups": self.group_limit,
            "academies": self.academy_limit,
        }.get(resource)


class RemainingLimits(BaseModel):
    resource: LimitResource
    current: int
    limit: Optional[int] = None
    # None = unlimited
    remaining: Optional[int] = None
    plan_code: PlanCode
    upgrade_to: Optional[PlanCode] = None


class ViolatingItem(BaseModel):
    id: str
    name: Optional[str] = None


class LimitViolation(BaseModel):
    resource: LimitResource
    current_count: int
    limit: Optional[int] = None
    items: list[ViolatingItem] = Field(default_factory=list)
    academy_id: Optional[str] = None
    academy_name: Optional[str] = None


class ViolationReport(BaseModel):
    violations: list[LimitViolation] = Field(default_factory=list)
    requires_action: bool = False


class ProrationResponse(BaseModel):
    amount_due: float
    credit: float
    days_remaining: int
    total_days: int
    proration_date: datetime

    model_config = ConfigDict(from_attributes=True)


class PlanChangeRequest(BaseModel):
    target_plan: PlanCode


class UpgradeResponse(BaseModel):
    success: bool = True
    message: str
    proration: ProrationResponse


class DowngradeResponse(BaseModel):
    success: bool = True
    message: str
    cancel_at_period_end: bool = False
    violations: ViolationReport


class CheckoutRequest(BaseModel):
    academy_id: str = Field(..., min_length=1)
    plan_code: PlanCode


class CheckoutResponse(BaseModel):
    checkout_url: str


class UpgradeInfoResponse(BaseModel):
    next_plan: PlanCode
    price: str
    benefits: list[str]
