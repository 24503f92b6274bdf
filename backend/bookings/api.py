import logging

from django.conf import settings
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.models import User
from accounts.permissions import restrict_to
from core.exceptions import AppError, ReconciliationError
from core.views import EnvelopeModelViewSet, envelope

from .serializers import BookingSerializer, BookingWriteSerializer
from .services.checkout import create_checkout_session
from .services.payments import build_payment_provider
from .services.reconcile import reconcile
from .services.store import list_bookings
from .services.webhooks import CheckoutSessionCompleted, verify_event

logger = logging.getLogger(__name__)


class CheckoutSessionView(APIView):
    """Start a hosted checkout for the current user. No booking is created here."""

    provider_factory = staticmethod(build_payment_provider)

    def get(self, request, tour_id, *args, **kwargs):
        session = create_checkout_session(
            tour_id=tour_id,
            user=request.user,
            base_url=request.build_absolute_uri("/"),
            provider=self.provider_factory(),
        )
        return Response({"status": "success", "session": session.as_dict()})


class StripeWebhookView(APIView):
    """
    Receive Stripe checkout events.

    Anything that passes signature verification is acknowledged with
    ``{"received": true}``; reconciliation failures are logged for manual
    replay rather than reported back to Stripe.
    """

    permission_classes: list = []
    authentication_classes: list = []

    def post(self, request, *args, **kwargs):
        signing_secret = settings.STRIPE_WEBHOOK_SECRET
        if not signing_secret:
            logger.error("Stripe webhook secret not configured.")
            raise AppError("Webhook endpoint is not configured.")

        try:
            event = verify_event(
                request.body,
                request.META.get("HTTP_STRIPE_SIGNATURE"),
                signing_secret,
                tolerance=settings.STRIPE_WEBHOOK_TOLERANCE,
            )
        except AppError as exc:
            logger.warning("Rejected Stripe webhook: %s", exc.message)
            raise

        if isinstance(event, CheckoutSessionCompleted):
            try:
                reconcile(event)
            except ReconciliationError:
                logger.exception(
                    "Could not reconcile %s event %s for session %s",
                    event.type,
                    event.event_id,
                    event.session_id,
                )
        else:
            logger.info("Ignoring Stripe event %s of type %s", event.event_id, event.type)

        return Response({"received": True})


class MyBookingsView(APIView):
    def get(self, request, *args, **kwargs):
        bookings = list_bookings(user=request.user)
        data = BookingSerializer(bookings, many=True, context={"request": request}).data
        return Response(envelope(data, results=len(data)))


class BookingViewSet(EnvelopeModelViewSet):
    """Administrative booking management for admins and lead guides."""

    permission_classes = [restrict_to(User.ADMIN, User.LEAD_GUIDE)]
    filterset_fields = ["tour", "user", "paid"]
    ordering_fields = ["created_at", "price"]
    ordering = ["-created_at"]

    def get_queryset(self):
        return list_bookings()

    def get_serializer_class(self):
        if self.action in {"create", "update", "partial_update"}:
            return BookingWriteSerializer
        return BookingSerializer
