"""Pydantic schemas for the super admin console."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from gymnasaas.db.models import PlanCode, SubscriptionStatus, UserRole


class PlanCount(BaseModel):
    plan: str
    count: int


class OverviewResponse(BaseModel):
    tenants_total: int
    academies_total: int
    academies_suspended: int
    profiles_total: int
    athletes_total: int
    plan_distribution: list[PlanCount]


class OwnerInfo(BaseModel):
    id: str
    name: Optional[str] = None
    user_id: str

    model_config = ConfigDict(from_attributes=True)


class SubscriptionInfo(BaseModel):
    id: str
    status: SubscriptionStatus
    plan_code: Optional[PlanCode] = None
    plan_price: Optional[int] = None
    cancel_at_period_end: bool = False
    current_period_end: Optional[datetime] = None


class AcademyDetailResponse(BaseModel):
    id: str
    name: str
    tenant_id: str
    academy_type: Optional[str] = None
    country: Optional[str] = None
    region: Optional[str] = None
    is_suspended: bool
    suspended_at: Optional[datetime] = None
    created_at: datetime
    owner: Optional[OwnerInfo] = None
    subscription: Optional[SubscriptionInfo] = None
    athlete_count: int = 0


class ProfileAccessResponse(BaseModel):
    id: str
    user_id: str
    role: UserRole
    can_login: bool

    model_config = ConfigDict(from_attributes=True)
