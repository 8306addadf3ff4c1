"""Billing router: plan limits, plan changes, checkout and the Stripe webhook."""

import logging
from datetime import datetime, timedelta
from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

from gymnasaas.authz.roles import is_admin_capable
from gymnasaas.billing import stripe_service
from gymnasaas.billing.limits import get_plan_limit_service
from gymnasaas.billing.plans import PLAN_DISPLAY_NAMES, get_upgrade_info
from gymnasaas.billing.proration import calculate_proration
from gymnasaas.billing.schemas import (
    CheckoutRequest,
    CheckoutResponse,
    DowngradeResponse,
    LimitResource,
    PlanChangeRequest,
    ProrationResponse,
    RemainingLimits,
    UpgradeInfoResponse,
    UpgradeResponse,
    ViolationReport,
)
from gymnasaas.billing.webhook_handler import dispatch_event
from gymnasaas.config import get_settings
from gymnasaas.db.models import Academy, Plan, PlanCode, Subscription, SubscriptionStatus
from gymnasaas.dependencies import CurrentOwner, CurrentTenant, DbSession
from gymnasaas.email import EmailService, get_email_service

logger = logging.getLogger(__name__)

DEFAULT_CYCLE = timedelta(days=30)

router = APIRouter()


def _error(status_code: int, code: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": code})


def _current_subscription(db, tenant_id: str) -> Subscription | None:
    return db.query(Subscription).filter(Subscription.tenant_id == tenant_id).first()


@router.get("/limits/{academy_id}/{resource}", response_model=RemainingLimits)
async def remaining_limits(
    academy_id: str,
    resource: LimitResource,
    ctx: CurrentTenant,
    db: DbSession,
):
    """Usage and headroom of one resource in an academy."""
    return get_plan_limit_service(db, ctx.tenant_id).get_remaining_limits(academy_id, resource)


@router.get("/upgrade-info", response_model=UpgradeInfoResponse)
async def upgrade_info(ctx: CurrentTenant, db: DbSession):
    subscription = get_plan_limit_service(db, ctx.tenant_id).get_active_subscription()
    info = get_upgrade_info(subscription.plan_code)
    return UpgradeInfoResponse(next_plan=info.next_plan, price=info.price, benefits=info.benefits)


@router.get("/check-limits", response_model=ViolationReport)
async def check_limits(
    ctx: CurrentTenant,
    db: DbSession,
    email_service: Annotated[EmailService, Depends(get_email_service)],
):
    """Report resources over the current plan's limits and notify the caller by email."""
    if not ctx.tenant_id:
        return ViolationReport()

    service = get_plan_limit_service(db, ctx.tenant_id)
    plan_code = service.get_active_subscription().plan_code
    report = service.check_plan_limit_violations(plan_code)

    if report.requires_action and ctx.profile.email:
        sent = await email_service.send_plan_violation_notice(
            ctx.profile.email, ctx.profile.name, plan_code, report
        )
        if not sent:
            logger.warning("Could not send plan violation notice to profile %s", ctx.profile.id)

    return report


@router.post("/upgrade", response_model=UpgradeResponse)
async def upgrade_plan(data: PlanChangeRequest, ctx: CurrentOwner, db: DbSession):
    """Switch to a higher plan, returning the prorated charge for the current cycle."""
    if not ctx.tenant_id:
        return _error(403, "TENANT_MISSING")

    target = db.query(Plan).filter(Plan.code == data.target_plan).first()
    if target is None:
        return _error(404, "PLAN_NOT_FOUND")

    subscription = _current_subscription(db, ctx.tenant_id)
    now = datetime.utcnow()
    current_code = PlanCode.FREE
    cycle_start = now
    cycle_end = now + DEFAULT_CYCLE
    if subscription is not None:
        if subscription.plan is not None:
            current_code = subscription.plan.code
        cycle_end = subscription.current_period_end or cycle_end
        cycle_start = subscription.current_period_start or now

    proration = calculate_proration(current_code, target.code, cycle_start, cycle_end, now=now)

    if subscription is None:
        subscription = Subscription(
            tenant_id=ctx.tenant_id,
            current_period_start=now,
            current_period_end=now + DEFAULT_CYCLE,
        )
        db.add(subscription)
    subscription.plan_id = target.id
    subscription.status = SubscriptionStatus.ACTIVE
    subscription.cancel_at_period_end = False
    db.commit()

    logger.info(
        "Tenant %s upgraded %s -> %s (due %.2f)",
        ctx.tenant_id,
        current_code.value,
        target.code.value,
        proration.amount_due,
    )
    return UpgradeResponse(
        message=f"Plan upgraded to {PLAN_DISPLAY_NAMES[target.code]}",
        proration=ProrationResponse.model_validate(proration),
    )


@router.post("/downgrade", response_model=DowngradeResponse)
async def downgrade_plan(data: PlanChangeRequest, ctx: CurrentOwner, db: DbSession):
    """Move to a lower plan.

    Downgrading to Free cancels at the end of the period; other downgrades
    apply immediately. The response lists resources the tenant must trim.
    """
    if not ctx.tenant_id:
        return _error(403, "TENANT_MISSING")

    subscription = _current_subscription(db, ctx.tenant_id)
    if subscription is None:
        return _error(404, "SUBSCRIPTION_NOT_FOUND")

    target = db.query(Plan).filter(Plan.code == data.target_plan).first()
    if target is None:
        return _error(404, "PLAN_NOT_FOUND")

    report = get_plan_limit_service(db, ctx.tenant_id).check_plan_limit_violations(target.code)

    if target.code == PlanCode.FREE:
        subscription.cancel_at_period_end = True
    else:
        subscription.plan_id = target.id
    db.commit()

    logger.info("Tenant %s downgrade to %s processed", ctx.tenant_id, target.code.value)
    return DowngradeResponse(
        message=f"Plan downgrade to {PLAN_DISPLAY_NAMES[target.code]} processed",
        cancel_at_period_end=subscription.cancel_at_period_end,
        violations=report,
    )


@router.post("/checkout", response_model=CheckoutResponse)
async def checkout(data: CheckoutRequest, ctx: CurrentOwner, db: DbSession):
    """Create a Stripe Checkout session for an academy's tenant."""
    settings = get_settings()
    if not settings.stripe_secret_key:
        return _error(500, "STRIPE_NOT_CONFIGURED")

    academy = db.get(Academy, data.academy_id)
    if academy is None:
        return _error(404, "ACADEMY_NOT_FOUND")

    if not is_admin_capable(ctx.role) and academy.tenant_id != ctx.tenant_id:
        return _error(403, "FORBIDDEN")

    plan = db.query(Plan).filter(Plan.code == data.plan_code).first()
    if plan is None or not plan.stripe_price_id:
        return _error(400, "PLAN_NOT_AVAILABLE")

    subscription = _current_subscription(db, academy.tenant_id)
    if subscription is None:
        subscription = Subscription(tenant_id=academy.tenant_id)
        db.add(subscription)

    metadata = {
        "academy_id": academy.id,
        "tenant_id": academy.tenant_id,
        "plan_code": plan.code.value,
    }
    try:
        if not subscription.stripe_customer_id:
            subscription.stripe_customer_id = await stripe_service.create_customer(
                academy.name, metadata
            )
            db.commit()

        checkout_url = await stripe_service.create_checkout_session(
            customer_id=subscription.stripe_customer_id,
            price_id=plan.stripe_price_id,
            metadata=metadata,
            success_url=f"{settings.app_url}/billing/success?academy={academy.id}",
            cancel_url=f"{settings.app_url}/billing",
        )
    except stripe_service.StripeError:
        return _error(502, "STRIPE_ERROR")

    return CheckoutResponse(checkout_url=checkout_url)


@router.post("/webhook")
async def stripe_webhook(request: Request, db: DbSession):
    """Receive and process Stripe webhook events.

    This endpoint is public but protected by signature verification.
    """
    raw_body = await request.body()
    signature = request.headers.get("Stripe-Signature", "")

    if not stripe_service.verify_webhook_signature(raw_body, signature):
        logger.warning("Stripe webhook signature verification failed")
        return Response(status_code=400)

    try:
        payload = await request.json()
    except ValueError:
        logger.warning("Stripe webhook body is not valid JSON")
        return Response(status_code=400)
    if not isinstance(payload, dict):
        return Response(status_code=400)
    event_type = payload.get("type", "")
    event_object = (payload.get("data") or {}).get("object") or {}

    logger.info("Stripe webhook received: %s", event_type)
    dispatch_event(db, event_type, event_object)

    return Response(status_code=200)
