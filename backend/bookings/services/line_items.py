"""Translate a tour into the payment provider's single line item."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from core.exceptions import InvalidTourError

MINOR_UNITS_PER_MAJOR = 100
CENT = Decimal("0.01")


def to_minor_units(amount) -> int:
    """``round(amount * 100)`` with half-up rounding, e.g. 19.995 -> 2000."""
    value = Decimal(str(amount)) * MINOR_UNITS_PER_MAJOR
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def to_major_units(amount_minor: int) -> Decimal:
    return (Decimal(int(amount_minor)) / MINOR_UNITS_PER_MAJOR).quantize(CENT)


def join_image_url(base_url: str, image: str) -> str:
    if not image:
        return ""
    if image.startswith(("http://", "https://")) or not base_url:
        return image
    return f"{base_url.rstrip('/')}/{image.lstrip('/')}"


@dataclass(frozen=True)
class LineItem:
    name: str
    description: str
    images: tuple[str, ...]
    unit_amount: int
    currency: str
    quantity: int = 1

    def as_stripe_params(self) -> dict:
        return {
            "quantity": self.quantity,
            "price_data": {
                "currency": self.currency,
                "unit_amount": self.unit_amount,
                "product_data": {
                    "name": self.name,
                    "description": self.description,
                    "images": list(self.images),
                },
            },
        }


def build_line_item(tour, *, image_base_url: str = "", currency: str = "usd") -> LineItem:
    """
    Build the line item charged for ``tour``.

    Raises ``InvalidTourError`` when the tour has no price or a non-positive one;
    such a tour can never be checked out.
    """
    price = getattr(tour, "price", None)
    try:
        positive = price is not None and Decimal(str(price)) > 0
    except InvalidOperation:
        positive = False
    if not positive:
        raise InvalidTourError(f"Tour {getattr(tour, 'pk', None)} has no positive price and cannot be booked.")

    image_url = join_image_url(image_base_url, tour.image_cover)
    return LineItem(
        name=f"{tour.name} Tour",
        description=tour.summary,
        images=(image_url,) if image_url else (),
        unit_amount=to_minor_units(price),
        currency=currency.lower(),
    )
