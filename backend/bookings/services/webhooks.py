"""Verification and parsing of Stripe webhook deliveries."""

from __future__ import annotations

import json
from dataclasses import dataclass, field

import stripe

from core.exceptions import SignatureVerificationError

CHECKOUT_COMPLETED_TYPES = frozenset({"checkout.session.completed", "checkout.session.complete"})


@dataclass(frozen=True)
class CheckoutSessionCompleted:
    event_id: str
    type: str
    session_id: str
    client_reference_id: str | None
    customer_email: str | None
    amount_total: int | None


@dataclass(frozen=True)
class UnhandledEvent:
    event_id: str
    type: str
    payload: dict = field(default_factory=dict, compare=False)


def parse_event(payload: dict) -> CheckoutSessionCompleted | UnhandledEvent:
    event_type = payload.get("type") or ""
    event_id = payload.get("id") or ""
    data = payload.get("data")
    data_object = data.get("object") if isinstance(data, dict) else None
    if not isinstance(data_object, dict):
        data_object = {}
    if event_type not in CHECKOUT_COMPLETED_TYPES:
        return UnhandledEvent(event_id=event_id, type=event_type, payload=data_object)

    customer_details = data_object.get("customer_details")
    customer_email = data_object.get("customer_email")
    if not customer_email and isinstance(customer_details, dict):
        customer_email = customer_details.get("email")
    return CheckoutSessionCompleted(
        event_id=event_id,
        type=event_type,
        session_id=data_object.get("id") or "",
        client_reference_id=data_object.get("client_reference_id"),
        customer_email=customer_email,
        amount_total=data_object.get("amount_total"),
    )


def verify_event(raw_body: bytes, signature_header: str | None, signing_secret: str, *, tolerance: int = 300):
    """
    Authenticate ``raw_body`` against the ``Stripe-Signature`` header and parse it.

    The signature is computed over the exact request bytes, so the body must not
    be re-serialized before it gets here.
    """
    if not signature_header:
        raise SignatureVerificationError("Webhook error: missing Stripe-Signature header")
    try:
        payload = raw_body.decode("utf-8")
        stripe.WebhookSignature.verify_header(payload, signature_header, signing_secret, tolerance)
        data = json.loads(payload)
    except stripe.SignatureVerificationError as exc:
        raise SignatureVerificationError(f"Webhook error: {exc}") from exc
    except (UnicodeDecodeError, ValueError) as exc:
        raise SignatureVerificationError("Webhook error: invalid payload") from exc
    if not isinstance(data, dict):
        raise SignatureVerificationError("Webhook error: invalid payload")
    return parse_event(data)
