"""Stripe service: REST API helpers and webhook verification."""

import hashlib
import hmac
import logging
import time
from typing import Any, Optional

import httpx

from gymnasaas.config import get_settings

logger = logging.getLogger(__name__)

# Reject signed payloads older than this many seconds
SIGNATURE_TOLERANCE = 300


class StripeError(Exception):
    """Raised when a Stripe API call fails."""


# ---------------------------------------------------------------------------
# Webhook signature verification
# ---------------------------------------------------------------------------


def compute_signature(secret: str, timestamp: str, raw_body: bytes) -> str:
    signed_payload = timestamp.encode() + b"." + raw_body
    return hmac.new(secret.encode(), signed_payload, hashlib.sha256).hexdigest()


def verify_webhook_signature(
    raw_body: bytes,
    signature_header: str,
    now: Optional[float] = None,
) -> bool:
    """Verify the Stripe-Signature header.

    Header format: ``t=<timestamp>,v1=<hex_hmac>[,v1=...]``. The signed
    payload is ``<timestamp>.<raw_body>``, signed with HMAC-SHA256.
    """
    secret = get_settings().stripe_webhook_secret
    if not secret:
        logger.warning("STRIPE_WEBHOOK_SECRET not configured, rejecting webhook")
        return False

    timestamp = None
    candidates = []
    for part in signature_header.split(","):
        key, sep, value = part.strip().partition("=")
        if not sep:
            continue
        if key == "t":
            timestamp = value
        elif key == "v1":
            candidates.append(value)

    if not timestamp or not candidates:
        logger.warning("Malformed Stripe-Signature header")
        return False

    try:
        age = (now if now is not None else time.time()) - int(timestamp)
    except ValueError:
        logger.warning("Malformed Stripe-Signature timestamp")
        return False
    if age > SIGNATURE_TOLERANCE:
        logger.warning("Stripe webhook timestamp outside tolerance (%ss old)", int(age))
        return False

    expected = compute_signature(secret, timestamp, raw_body)
    return any(hmac.compare_digest(expected, candidate) for candidate in candidates)


# ---------------------------------------------------------------------------
# Stripe API calls
# ---------------------------------------------------------------------------


def _headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {get_settings().stripe_secret_key}"}


async def _post(path: str, data: dict[str, Any]) -> dict[str, Any]:
    settings = get_settings()
    async with httpx.AsyncClient() as client:
        resp = await client.post(f"{settings.stripe_api_base}{path}", headers=_headers(), data=data)
    if resp.status_code not in (200, 201):
        logger.error("Stripe API error on %s: %s", path, resp.text)
        raise StripeError(f"Stripe API error on {path}: {resp.status_code}")
    return resp.json()


async def create_customer(name: str, metadata: dict[str, str]) -> str:
    """Create a Stripe customer and return its id."""
    data: dict[str, Any] = {"name": name}
    for key, value in metadata.items():
        data[f"metadata[{key}]"] = value
    customer = await _post("/customers", data)
    return customer["id"]


async def create_checkout_session(
    customer_id: str,
    price_id: str,
    metadata: dict[str, str],
    success_url: str,
    cancel_url: str,
) -> str:
    """Create a subscription Checkout session and return its URL."""
    data: dict[str, Any] = {
        "mode": "subscription",
        "customer": customer_id,
        "allow_promotion_codes": "false",
        "payment_method_types[0]": "card",
        "line_items[0][price]": price_id,
        "line_items[0][quantity]": "1",
        "success_url": success_url,
        "cancel_url": cancel_url,
    }
    for key, value in metadata.items():
        data[f"metadata[{key}]"] = value
        data[f"subscription_data[metadata][{key}]"] = value
    session = await _post("/checkout/sessions", data)
    return session["url"]
