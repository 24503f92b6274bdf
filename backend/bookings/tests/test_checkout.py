import types
from decimal import Decimal
from urllib.parse import parse_qs, urlparse

import pytest
import stripe
from django.contrib.auth import get_user_model

from bookings.models import Booking
from bookings.services import payments
from bookings.services.checkout import create_checkout_session
from core.exceptions import NotFoundError, PaymentProviderError
from tours.models import Tour

User = get_user_model()


@pytest.fixture
def tour(db):
    return Tour.objects.create(
        name="Glacier Trek",
        duration=3,
        max_group_size=10,
        difficulty=Tour.DIFFICULT,
        price=Decimal("250"),
        summary="Ice and rope",
        image_cover="glacier.jpg",
    )


@pytest.fixture
def hiker(make_user):
    return make_user(email="a@example.com")


class RecordingProvider:
    def __init__(self):
        self.calls = []

    def create_checkout_session(self, params):
        self.calls.append(params)
        return payments.StubCheckoutProvider().create_checkout_session(params)


def test_session_carries_tour_and_email_but_creates_no_booking(tour, hiker):
    provider = RecordingProvider()

    session = create_checkout_session(tour_id=tour.pk, user=hiker, base_url="https://site", provider=provider)

    params = provider.calls[0]
    assert params["mode"] == "payment"
    assert params["client_reference_id"] == str(tour.pk)
    assert params["customer_email"] == "a@example.com"
    assert params["line_items"][0]["price_data"]["unit_amount"] == 25000
    assert params["line_items"][0]["price_data"]["product_data"]["images"] == ["https://site/img/tours/glacier.jpg"]
    assert params["cancel_url"] == "https://site/tour/glacier-trek"
    assert session.client_reference_id == str(tour.pk)
    assert session.amount_total == 25000
    assert Booking.objects.count() == 0


def test_redirect_urls_carry_no_price_or_user(tour, hiker):
    provider = RecordingProvider()

    create_checkout_session(tour_id=tour.pk, user=hiker, base_url="https://site/", provider=provider)

    params = provider.calls[0]
    for url in (params["success_url"], params["cancel_url"]):
        query = parse_qs(urlparse(url).query)
        assert not {"tour", "user", "price"} & set(query)
        assert hiker.email not in url
        assert "250" not in url


def test_unknown_tour_is_not_found(db, hiker):
    with pytest.raises(NotFoundError):
        create_checkout_session(tour_id=404, user=hiker, base_url="https://site", provider=RecordingProvider())

    with pytest.raises(NotFoundError):
        create_checkout_session(tour_id="not-an-id", user=hiker, base_url="https://site", provider=RecordingProvider())

    with pytest.raises(NotFoundError):
        create_checkout_session(tour_id="²", user=hiker, base_url="https://site", provider=RecordingProvider())


def test_checkout_endpoint_unknown_tour_id_is_404(api_client, tour, hiker):
    api_client.force_authenticate(hiker)

    response = api_client.get("/api/v1/bookings/checkout-session/²/")

    assert response.status_code == 404
    assert response.json()["status"] == "fail"


def test_build_payment_provider_uses_stub_without_key(settings):
    settings.STRIPE_USE_STUB = False
    settings.STRIPE_SECRET_KEY = ""

    assert isinstance(payments.build_payment_provider(), payments.StubCheckoutProvider)


def test_build_payment_provider_uses_stripe_when_configured(settings):
    settings.STRIPE_USE_STUB = False
    settings.STRIPE_SECRET_KEY = "sk_test_123"

    assert isinstance(payments.build_payment_provider(), payments.StripeCheckoutProvider)


def _fake_client(create):
    return types.SimpleNamespace(checkout=types.SimpleNamespace(sessions=types.SimpleNamespace(create=create)))


def test_stripe_provider_passes_params_through(tour, hiker):
    captured = {}

    def fake_create(params):
        captured["params"] = params
        return types.SimpleNamespace(
            id="cs_real_123",
            url="https://checkout.stripe.test/c/cs_real_123",
            client_reference_id=params["client_reference_id"],
            customer_email=params["customer_email"],
            amount_total=25000,
            currency="usd",
            mode="payment",
            payment_status="unpaid",
        )

    provider = payments.StripeCheckoutProvider("sk_test_123", client=_fake_client(fake_create))

    session = create_checkout_session(tour_id=tour.pk, user=hiker, base_url="https://site", provider=provider)

    assert session.id == "cs_real_123"
    assert session.url.startswith("https://checkout.stripe.test/")
    assert captured["params"]["client_reference_id"] == str(tour.pk)


def test_stripe_failure_becomes_payment_provider_error(tour, hiker):
    def fake_create(params):
        raise stripe.APIConnectionError("Network down")

    provider = payments.StripeCheckoutProvider("sk_test_123", client=_fake_client(fake_create))

    with pytest.raises(PaymentProviderError):
        create_checkout_session(tour_id=tour.pk, user=hiker, base_url="https://site", provider=provider)
    assert Booking.objects.count() == 0


def test_checkout_endpoint_requires_login(api_client, tour):
    response = api_client.get(f"/api/v1/bookings/checkout-session/{tour.pk}/")

    assert response.status_code == 401


def test_checkout_endpoint_returns_session(api_client, tour, hiker):
    api_client.force_authenticate(hiker)

    response = api_client.get(f"/api/v1/bookings/checkout-session/{tour.pk}/")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "success"
    assert body["session"]["id"].startswith("cs_test_")
    assert body["session"]["client_reference_id"] == str(tour.pk)
    assert body["session"]["url"] == "http://testserver/my-tours/?alert=booking"


def test_checkout_endpoint_surfaces_provider_failure(api_client, monkeypatch, tour, hiker):
    class FailingProvider:
        def create_checkout_session(self, params):
            raise PaymentProviderError()

    monkeypatch.setattr("bookings.api.CheckoutSessionView.provider_factory", staticmethod(FailingProvider))
    api_client.force_authenticate(hiker)

    response = api_client.get(f"/api/v1/bookings/checkout-session/{tour.pk}/")

    assert response.status_code == 502
    assert response.json()["status"] == "error"
