from __future__ import annotations

import logging

from django.conf import settings

from core.exceptions import NotFoundError, ValidationError
from tours.models import Tour

from .line_items import build_line_item
from .payments import CheckoutSession

logger = logging.getLogger(__name__)


def build_redirect_urls(*, base_url: str, tour: Tour) -> tuple[str, str]:
    """Success and cancel URLs. Neither carries price or user data."""
    base = base_url.rstrip("/")
    return f"{base}/my-tours/?alert=booking", f"{base}/tour/{tour.slug}"


def create_checkout_session(
    *,
    tour_id,
    user,
    base_url: str,
    provider,
    image_base_url: str | None = None,
    currency: str | None = None,
) -> CheckoutSession:
    """
    Ask the payment provider for a hosted checkout session for one place on a tour.

    The tour and the customer email travel with the session as
    ``client_reference_id`` and ``customer_email``; the booking itself is only
    created once the provider reports the session as completed.
    """
    try:
        tour = Tour.objects.filter(pk=int(tour_id)).first()
    except (TypeError, ValueError, OverflowError):
        tour = None
    if tour is None:
        raise NotFoundError("No tour found with that ID")
    if not getattr(user, "email", ""):
        raise ValidationError("A valid email address is required to check out")

    if image_base_url is None:
        image_base_url = settings.TOUR_IMAGE_BASE_URL or f"{base_url.rstrip('/')}/img/tours"
    line_item = build_line_item(
        tour,
        image_base_url=image_base_url,
        currency=currency or settings.CHECKOUT_CURRENCY,
    )
    success_url, cancel_url = build_redirect_urls(base_url=base_url, tour=tour)

    session = provider.create_checkout_session(
        {
            "mode": "payment",
            "payment_method_types": ["card"],
            "success_url": success_url,
            "cancel_url": cancel_url,
            "customer_email": user.email,
            "client_reference_id": str(tour.pk),
            "line_items": [line_item.as_stripe_params()],
        }
    )
    logger.info("Checkout session %s created for tour %s by user %s", session.id, tour.pk, user.pk)
    return session
