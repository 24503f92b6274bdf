import types
from decimal import Decimal

import pytest

from bookings.services.line_items import build_line_item, join_image_url, to_major_units, to_minor_units
from core.exceptions import InvalidTourError


def _tour(price, **extra):
    values = {"pk": 1, "name": "Glacier Trek", "summary": "Ice and rope", "image_cover": "glacier.jpg", "price": price}
    values.update(extra)
    return types.SimpleNamespace(**values)


def test_line_item_for_tour():
    item = build_line_item(_tour(Decimal("250")), image_base_url="https://site.test/img/tours/", currency="USD")

    assert item.name == "Glacier Trek Tour"
    assert item.description == "Ice and rope"
    assert item.images == ("https://site.test/img/tours/glacier.jpg",)
    assert item.unit_amount == 25000
    assert item.currency == "usd"
    assert item.quantity == 1


@pytest.mark.parametrize(
    "price, minor",
    [("250", 25000), ("19.99", 1999), ("0.01", 1), ("19.995", 2000), (397, 39700)],
)
def test_unit_amount_is_rounded_minor_units(price, minor):
    item = build_line_item(_tour(Decimal(str(price))))

    assert item.unit_amount == minor
    assert to_major_units(item.unit_amount) == (Decimal(minor) / 100).quantize(Decimal("0.01"))


@pytest.mark.parametrize("price", [None, Decimal("0"), Decimal("-5"), "not-a-number"])
def test_non_positive_price_is_rejected(price):
    with pytest.raises(InvalidTourError):
        build_line_item(_tour(price))


def test_stripe_params_shape():
    params = build_line_item(_tour(Decimal("99.50"))).as_stripe_params()

    assert params == {
        "quantity": 1,
        "price_data": {
            "currency": "usd",
            "unit_amount": 9950,
            "product_data": {"name": "Glacier Trek Tour", "description": "Ice and rope", "images": ["glacier.jpg"]},
        },
    }


def test_join_image_url_keeps_absolute_urls():
    assert join_image_url("https://cdn.test", "https://other.test/a.jpg") == "https://other.test/a.jpg"
    assert join_image_url("https://cdn.test/", "/a.jpg") == "https://cdn.test/a.jpg"
    assert join_image_url("https://cdn.test", "") == ""


def test_minor_unit_helpers():
    assert to_minor_units(Decimal("1.005")) == 101
    assert to_major_units(25000) == Decimal("250.00")
