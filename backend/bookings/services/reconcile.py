"""Turn a verified checkout-completed event into a booking."""

from __future__ import annotations

import logging

from django.db import DatabaseError

from accounts.models import User
from core.exceptions import ReconciliationError, UserResolutionError
from tours.models import Tour

from .line_items import to_major_units
from .store import create_booking
from .webhooks import CheckoutSessionCompleted

logger = logging.getLogger(__name__)


def reconcile(event: CheckoutSessionCompleted):
    """
    Create exactly one booking for a completed checkout session.

    The tour comes from ``client_reference_id``, the user from
    ``customer_email`` and the price from the provider's ``amount_total``;
    nothing supplied by the browser is trusted.
    """
    tour_id = event.client_reference_id
    if not isinstance(tour_id, str) or not tour_id.isascii() or not tour_id.isdecimal():
        raise ReconciliationError(f"Session {event.session_id} has no usable client_reference_id")
    if not isinstance(event.customer_email, str) or not event.customer_email.strip():
        raise UserResolutionError(f"Session {event.session_id} has no usable customer_email")
    amount_total = event.amount_total
    if isinstance(amount_total, bool) or not isinstance(amount_total, int):
        raise ReconciliationError(f"Session {event.session_id} has no usable amount_total")

    try:
        tour = Tour.all_objects.filter(pk=int(tour_id)).first()
        user = User.objects.get_active_by_email(event.customer_email)
    except (DatabaseError, OverflowError) as exc:
        raise ReconciliationError(f"Could not look up tour or user for session {event.session_id}") from exc

    if tour is None:
        raise ReconciliationError(f"Session {event.session_id} refers to unknown tour {tour_id}")
    if user is None:
        raise UserResolutionError(f"Session {event.session_id} has no matching active user")

    try:
        booking = create_booking(
            tour=tour,
            user=user,
            price=to_major_units(amount_total),
            checkout_session_id=event.session_id,
        )
    except DatabaseError as exc:
        raise ReconciliationError(f"Could not store booking for session {event.session_id}") from exc

    logger.info("Booking %s created from checkout session %s", booking.pk, event.session_id)
    return booking
