"""Tests for Stripe webhook verification and event handling."""

import json
import time

import pytest

from gymnasaas.billing.stripe_service import compute_signature, verify_webhook_signature
from gymnasaas.billing.webhook_handler import dispatch_event
from gymnasaas.config import get_settings
from gymnasaas.db.models import PlanCode, Subscription, SubscriptionStatus

SECRET = "whsec_test"


@pytest.fixture
def webhook_secret(monkeypatch):
    monkeypatch.setattr(get_settings(), "stripe_webhook_secret", SECRET)
    return SECRET


def signed_header(body: bytes, timestamp: int | None = None, secret: str = SECRET) -> str:
    ts = str(timestamp if timestamp is not None else int(time.time()))
    return f"t={ts},v1={compute_signature(secret, ts, body)}"


class TestSignatureVerification:
    def test_valid_signature(self, webhook_secret):
        body = b'{"type": "ping"}'
        assert verify_webhook_signature(body, signed_header(body)) is True

    def test_tampered_body(self, webhook_secret):
        header = signed_header(b'{"type": "ping"}')
        assert verify_webhook_signature(b'{"type": "pong"}', header) is False

    def test_wrong_secret(self, webhook_secret):
        body = b"{}"
        assert verify_webhook_signature(body, signed_header(body, secret="other")) is False

    def test_stale_timestamp(self, webhook_secret):
        body = b"{}"
        header = signed_header(body, timestamp=1_000_000)
        assert verify_webhook_signature(body, header, now=1_000_000 + 301) is False

    def test_malformed_header(self, webhook_secret):
        assert verify_webhook_signature(b"{}", "garbage") is False
        assert verify_webhook_signature(b"{}", "t=abc,v1=00") is False

    def test_rejected_without_secret(self):
        body = b"{}"
        assert verify_webhook_signature(body, signed_header(body)) is False


class TestEventHandlers:
    def test_checkout_completed_activates_plan(self, db, test_tenant, plans):
        handled = dispatch_event(
            db,
            "checkout.session.completed",
            {
                "id": "cs_1",
                "customer": "cus_1",
                "subscription": "sub_1",
                "metadata": {"tenant_id": test_tenant.id, "plan_code": "pro"},
            },
        )

        assert handled is True
        subscription = db.query(Subscription).filter_by(tenant_id=test_tenant.id).one()
        assert subscription.plan.code == PlanCode.PRO
        assert subscription.status == SubscriptionStatus.ACTIVE
        assert subscription.stripe_subscription_id == "sub_1"
        assert subscription.stripe_customer_id == "cus_1"

    def test_subscription_updated_by_price(self, db, test_tenant, plans, subscribe):
        subscribe(test_tenant, plans[PlanCode.PRO], stripe_subscription_id="sub_1")

        dispatch_event(
            db,
            "customer.subscription.updated",
            {
                "object": "subscription",
                "id": "sub_1",
                "status": "past_due",
                "cancel_at_period_end": True,
                "current_period_end": 1_790_000_000,
                "items": {"data": [{"price": {"id": "price_premium"}}]},
            },
        )

        subscription = db.query(Subscription).filter_by(tenant_id=test_tenant.id).one()
        assert subscription.plan.code == PlanCode.PREMIUM
        assert subscription.status == SubscriptionStatus.PAST_DUE
        assert subscription.cancel_at_period_end is True
        assert subscription.current_period_end is not None

    def test_subscription_deleted_falls_back_to_free(self, db, test_tenant, plans, subscribe):
        subscribe(test_tenant, plans[PlanCode.PREMIUM], stripe_subscription_id="sub_1")

        dispatch_event(db, "customer.subscription.deleted", {"object": "subscription", "id": "sub_1"})

        subscription = db.query(Subscription).filter_by(tenant_id=test_tenant.id).one()
        assert subscription.plan.code == PlanCode.FREE
        assert subscription.status == SubscriptionStatus.CANCELLED

    def test_payment_failed(self, db, test_tenant, plans, subscribe):
        subscribe(test_tenant, plans[PlanCode.PRO], stripe_subscription_id="sub_1")

        dispatch_event(db, "invoice.payment_failed", {"object": "invoice", "subscription": "sub_1"})

        subscription = db.query(Subscription).filter_by(tenant_id=test_tenant.id).one()
        assert subscription.status == SubscriptionStatus.PAST_DUE

    def test_unknown_event_is_ignored(self, db):
        assert dispatch_event(db, "customer.created", {}) is False


class TestWebhookEndpoint:
    def test_invalid_signature_is_rejected(self, client, webhook_secret):
        response = client.post(
            "/api/billing/webhook",
            content=b"{}",
            headers={"Stripe-Signature": "t=1,v1=bad"},
        )
        assert response.status_code == 400

    def test_signed_body_that_is_not_json(self, client, webhook_secret):
        body = b"not json"
        response = client.post(
            "/api/billing/webhook",
            content=body,
            headers={"Stripe-Signature": signed_header(body)},
        )
        assert response.status_code == 400

    def test_signed_body_that_is_not_an_object(self, client, webhook_secret):
        body = b"[1, 2]"
        response = client.post(
            "/api/billing/webhook",
            content=body,
            headers={"Stripe-Signature": signed_header(body)},
        )
        assert response.status_code == 400

    def test_signed_event_is_processed(self, client, db, test_tenant, plans, webhook_secret):
        body = json.dumps(
            {
                "type": "checkout.session.completed",
                "data": {
                    "object": {
                        "id": "cs_1",
                        "customer": "cus_1",
                        "subscription": "sub_1",
                        "metadata": {"tenant_id": test_tenant.id, "plan_code": "premium"},
                    }
                },
            }
        ).encode()

        response = client.post(
            "/api/billing/webhook",
            content=body,
            headers={"Stripe-Signature": signed_header(body), "Content-Type": "application/json"},
        )

        assert response.status_code == 200
        subscription = db.query(Subscription).filter_by(tenant_id=test_tenant.id).one()
        assert subscription.plan.code == PlanCode.PREMIUM
