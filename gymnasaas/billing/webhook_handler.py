"""Stripe webhook event handlers: update tenant subscriptions in the DB."""

import logging
from datetime import datetime
from typing import Any, Optional

from sqlalchemy.orm import Session

from gymnasaas.billing.plans import parse_plan_code
from gymnasaas.db.models import Plan, PlanCode, Subscription, SubscriptionStatus

logger = logging.getLogger(__name__)

STATUS_MAP = {
    "active": SubscriptionStatus.ACTIVE,
    "trialing": SubscriptionStatus.TRIALING,
    "past_due": SubscriptionStatus.PAST_DUE,
    "unpaid": SubscriptionStatus.PAST_DUE,
    "canceled": SubscriptionStatus.CANCELLED,
    "incomplete_expired": SubscriptionStatus.CANCELLED,
}


def _timestamp(value: Any) -> Optional[datetime]:
    if value is None:
        return None
    try:
        return datetime.utcfromtimestamp(int(value))
    except (TypeError, ValueError):
        return None


def _find_subscription(db: Session, event_object: dict[str, Any]) -> Optional[Subscription]:
    """Locate the subscription row an event refers to.

    Subscription events carry the Stripe subscription id; checkout and
    invoice events reference it under ``subscription``. New subscriptions
    are matched through ``metadata.tenant_id``.
    """
    stripe_sub_id = event_object.get("subscription")
    if not stripe_sub_id and event_object.get("object") == "subscription":
        stripe_sub_id = event_object.get("id")
    if stripe_sub_id:
        subscription = (
            db.query(Subscription)
            .filter(Subscription.stripe_subscription_id == stripe_sub_id)
            .first()
        )
        if subscription:
            return subscription

    metadata = event_object.get("metadata") or {}
    tenant_id = metadata.get("tenant_id")
    if tenant_id:
        subscription = db.query(Subscription).filter(Subscription.tenant_id == tenant_id).first()
        if subscription is None:
            subscription = Subscription(tenant_id=tenant_id)
            db.add(subscription)
        return subscription

    return None


def _plan_for_event(db: Session, event_object: dict[str, Any]) -> Optional[Plan]:
    """Resolve the plan from metadata, falling back to the first item's price."""
    metadata = event_object.get("metadata") or {}
    plan_code = parse_plan_code(metadata.get("plan_code"))
    if plan_code:
        return db.query(Plan).filter(Plan.code == plan_code).first()

    items = (event_object.get("items") or {}).get("data") or []
    if items:
        price_id = (items[0].get("price") or {}).get("id")
        if price_id:
            return db.query(Plan).filter(Plan.stripe_price_id == price_id).first()
    return None


def handle_checkout_completed(db: Session, event_object: dict[str, Any]) -> None:
    """checkout.session.completed: the tenant paid for a plan."""
    subscription = _find_subscription(db, event_object)
    if subscription is None:
        logger.warning("checkout.session.completed: no tenant for session %s", event_object.get("id"))
        return

    plan = _plan_for_event(db, event_object)
    if plan:
        subscription.plan_id = plan.id

    subscription.stripe_customer_id = event_object.get("customer") or subscription.stripe_customer_id
    subscription.stripe_subscription_id = (
        event_object.get("subscription") or subscription.stripe_subscription_id
    )
    subscription.status = SubscriptionStatus.ACTIVE
    subscription.cancel_at_period_end = False

    db.commit()
    logger.info(
        "checkout.session.completed: tenant %s -> plan=%s",
        subscription.tenant_id,
        plan.code.value if plan else "unchanged",
    )


def handle_subscription_updated(db: Session, event_object: dict[str, Any]) -> None:
    """customer.subscription.updated: plan, status or period changed."""
    subscription = _find_subscription(db, event_object)
    if subscription is None:
        logger.warning("customer.subscription.updated: unknown sub %s", event_object.get("id"))
        return

    plan = _plan_for_event(db, event_object)
    if plan:
        subscription.plan_id = plan.id

    stripe_status = event_object.get("status")
    if stripe_status in STATUS_MAP:
        subscription.status = STATUS_MAP[stripe_status]

    period_start = _timestamp(event_object.get("current_period_start"))
    period_end = _timestamp(event_object.get("current_period_end"))
    if period_start:
        subscription.current_period_start = period_start
    if period_end:
        subscription.current_period_end = period_end
    subscription.cancel_at_period_end = bool(event_object.get("cancel_at_period_end"))

    db.commit()
    logger.info(
        "customer.subscription.updated: tenant %s -> status=%s",
        subscription.tenant_id,
        subscription.status.value,
    )


def handle_subscription_deleted(db: Session, event_object: dict[str, Any]) -> None:
    """customer.subscription.deleted: subscription ended, downgrade to Free."""
    subscription = _find_subscription(db, event_object)
    if subscription is None:
        logger.warning("customer.subscription.deleted: unknown sub %s", event_object.get("id"))
        return

    free_plan = db.query(Plan).filter(Plan.code == PlanCode.FREE).first()
    subscription.plan_id = free_plan.id if free_plan else None
    subscription.status = SubscriptionStatus.CANCELLED
    subscription.cancel_at_period_end = False

    db.commit()
    logger.info("customer.subscription.deleted: tenant %s downgraded to free", subscription.tenant_id)


def handle_payment_failed(db: Session, event_object: dict[str, Any]) -> None:
    """invoice.payment_failed: mark the subscription past due."""
    subscription = _find_subscription(db, event_object)
    if subscription is None:
        logger.warning("invoice.payment_failed: unknown sub %s", event_object.get("subscription"))
        return

    subscription.status = SubscriptionStatus.PAST_DUE
    db.commit()
    logger.info("invoice.payment_failed: tenant %s", subscription.tenant_id)


EVENT_HANDLERS: dict[str, Any] = {
    "checkout.session.completed": handle_checkout_completed,
    "customer.subscription.updated": handle_subscription_updated,
    "customer.subscription.deleted": handle_subscription_deleted,
    "invoice.payment_failed": handle_payment_failed,
}


def dispatch_event(db: Session, event_type: str, event_object: dict[str, Any]) -> bool:
    """Dispatch a Stripe event to its handler.

    Returns True if the event was handled, False if ignored.
    """
    handler = EVENT_HANDLERS.get(event_type)
    if handler:
        handler(db, event_object)
        return True
    logger.debug("Ignoring unhandled Stripe event: %s", event_type)
    return False
