from django.urls import path
from rest_framework.routers import SimpleRouter

from .api import BookingViewSet, CheckoutSessionView, MyBookingsView

router = SimpleRouter()
router.register(r"", BookingViewSet, basename="booking")

urlpatterns = [
    path("checkout-session/<str:tour_id>/", CheckoutSessionView.as_view(), name="checkout-session"),
    path("mine/", MyBookingsView.as_view(), name="my-bookings"),
] + router.urls
