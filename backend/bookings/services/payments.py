"""Payment provider adapters for hosted checkout sessions."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from uuid import uuid4

import stripe
from django.conf import settings

from core.exceptions import PaymentProviderError

logger = logging.getLogger(__name__)


@dataclass
class CheckoutSession:
    """The subset of a provider checkout session the booking flow relies on."""

    id: str
    url: str
    client_reference_id: str
    customer_email: str
    amount_total: int
    currency: str
    mode: str = "payment"
    payment_status: str = "unpaid"
    line_items: list[dict] = field(default_factory=list)

    def as_dict(self) -> dict:
        return asdict(self)


def _amount_total(line_items: list[dict]) -> int:
    return sum(item["price_data"]["unit_amount"] * item["quantity"] for item in line_items)


class StubCheckoutProvider:
    """
    Stand-in for Stripe when running in stub mode.

    Tests and local development do not hit Stripe; sessions get predictable
    identifiers and a URL that simply sends the customer to the success page.
    """

    def create_checkout_session(self, params: dict) -> CheckoutSession:
        session_id = f"cs_test_{uuid4().hex}"
        return CheckoutSession(
            id=session_id,
            url=params["success_url"],
            client_reference_id=params["client_reference_id"],
            customer_email=params["customer_email"],
            amount_total=_amount_total(params["line_items"]),
            currency=params["line_items"][0]["price_data"]["currency"],
            mode=params["mode"],
            line_items=params["line_items"],
        )


class StripeCheckoutProvider:
    """Creates sessions through Stripe Checkout with its own explicitly configured client."""

    def __init__(self, api_key: str, *, timeout: int = 10, client=None):
        if not api_key:
            raise ValueError("Stripe secret key is required")
        # Bounded and never retried.
        self.client = client or stripe.StripeClient(
            api_key,
            http_client=stripe.RequestsClient(timeout=timeout),
            max_network_retries=0,
        )

    def create_checkout_session(self, params: dict) -> CheckoutSession:
        try:
            session = self.client.checkout.sessions.create(params=params)
        except stripe.StripeError as exc:
            logger.error(
                "Stripe rejected checkout session for tour %s: %s",
                params.get("client_reference_id"),
                exc.user_message or exc.__class__.__name__,
            )
            raise PaymentProviderError() from exc

        return CheckoutSession(
            id=session.id,
            url=session.url,
            client_reference_id=session.client_reference_id or params["client_reference_id"],
            customer_email=session.customer_email or params["customer_email"],
            amount_total=session.amount_total or _amount_total(params["line_items"]),
            currency=session.currency or params["line_items"][0]["price_data"]["currency"],
            mode=session.mode or params["mode"],
            payment_status=session.payment_status or "unpaid",
            line_items=params["line_items"],
        )


def build_payment_provider():
    """Return the provider configured by ``STRIPE_USE_STUB`` and ``STRIPE_SECRET_KEY``."""
    api_key = getattr(settings, "STRIPE_SECRET_KEY", "")
    if getattr(settings, "STRIPE_USE_STUB", False) or not api_key:
        return StubCheckoutProvider()
    return StripeCheckoutProvider(api_key, timeout=settings.STRIPE_TIMEOUT_SECONDS)
