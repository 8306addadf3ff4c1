"""Mid-cycle plan change proration."""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from gymnasaas.billing.plans import plan_price

ONE_DAY = timedelta(days=1)


@dataclass(frozen=True)
class Proration:
    amount_due: float
    credit: float
    days_remaining: int
    total_days: int
    proration_date: datetime


def _whole_days(delta: timedelta) -> int:
    return math.ceil(delta / ONE_DAY)


def calculate_proration(
    current_plan: str,
    new_plan: str,
    cycle_start: datetime,
    cycle_end: datetime,
    now: Optional[datetime] = None,
) -> Proration:
    """Compute what a plan change costs for the rest of the billing cycle.

    The unused value of the current plan is credited against the value of
    the new plan over the remaining days. Only one of ``amount_due`` and
    ``credit`` is ever positive. Unknown plan codes are priced at zero.

    Args:
        current_plan: Plan code the tenant is leaving.
        new_plan: Plan code the tenant is moving to.
        cycle_start: Start of the current billing cycle.
        cycle_end: End of the current billing cycle.
        now: Moment of the change, defaults to the current UTC time. A change
            before ``cycle_start`` is charged as a full cycle.

    Returns:
        Proration: Amounts rounded to cents plus the day counts used.
    """
    now = now or datetime.utcnow()

    total_days = max(0, _whole_days(cycle_end - cycle_start))
    days_remaining = min(total_days, max(0, _whole_days(cycle_end - now)))

    if total_days == 0 or days_remaining == 0:
        return Proration(
            amount_due=0.0,
            credit=0.0,
            days_remaining=days_remaining,
            total_days=total_days,
            proration_date=now,
        )

    current_daily = plan_price(current_plan) / total_days
    new_daily = plan_price(new_plan) / total_days

    unused_credit = current_daily * days_remaining
    cost = new_daily * days_remaining

    return Proration(
        amount_due=round(max(0.0, cost - unused_credit), 2),
        credit=round(max(0.0, unused_credit - cost), 2),
        days_remaining=days_remaining,
        total_days=total_days,
        proration_date=now,
    )
