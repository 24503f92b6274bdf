from __future__ import annotations

from decimal import Decimal

from django.db import transaction

from bookings.models import Booking


@transaction.atomic
def create_booking(*, tour, user, price: Decimal, checkout_session_id: str = "", paid: bool = True) -> Booking:
    return Booking.objects.create(
        tour=tour,
        user=user,
        price=price,
        paid=paid,
        checkout_session_id=checkout_session_id,
    )


def list_bookings(**filters):
    """Bookings with ``user`` and ``tour`` joined in, newest first."""
    return Booking.objects.filter(**filters).select_related("user", "tour")
