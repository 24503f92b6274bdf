import hashlib
import hmac
import json
import time


def sign_payload(payload: str, secret: str, timestamp: int | None = None) -> str:
    """Build a ``Stripe-Signature`` header the way Stripe signs webhook deliveries."""
    timestamp = int(time.time()) if timestamp is None else timestamp
    signature = hmac.new(secret.encode("utf-8"), f"{timestamp}.{payload}".encode("utf-8"), hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={signature}"


def checkout_completed_payload(*, tour_id, email, amount_total, session_id="cs_test_123", event_type="checkout.session.completed"):
    return json.dumps(
        {
            "id": "evt_test_123",
            "object": "event",
            "type": event_type,
            "data": {
                "object": {
                    "id": session_id,
                    "object": "checkout.session",
                    "client_reference_id": str(tour_id),
                    "customer_email": email,
                    "amount_total": amount_total,
                    "currency": "usd",
                }
            },
        }
    )
