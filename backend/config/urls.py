from django.contrib import admin
from django.urls import include, path, re_path

from bookings.api import StripeWebhookView
from core.views import RouteNotFoundView
from reviews.api import ReviewViewSet

tour_reviews = ReviewViewSet.as_view({"get": "list", "post": "create"})

urlpatterns = [
    path("admin/", admin.site.urls),
    path("webhook-checkout", StripeWebhookView.as_view(), name="webhook-checkout"),
    path("api/v1/users/", include("accounts.urls")),
    path("api/v1/tours/<int:tour_pk>/reviews/", tour_reviews, name="tour-reviews"),
    path("api/v1/tours/", include("tours.urls")),
    path("api/v1/reviews/", include("reviews.urls")),
    path("api/v1/bookings/", include("bookings.urls")),
    re_path(r"^api/.*$", RouteNotFoundView.as_view()),
]
