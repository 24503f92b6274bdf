import logging

from django.db.models import Prefetch
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from accounts.models import User
from accounts.permissions import restrict_to
from core.exceptions import ValidationError
from core.filters import RANGE_LOOKUPS
from core.views import EnvelopeModelViewSet, envelope
from reviews.models import Review

from .geo import earth_radius, haversine, parse_lat_lng
from .models import Tour
from .reports import monthly_plan, tour_stats
from .serializers import TourDetailSerializer, TourSerializer

logger = logging.getLogger(__name__)

PUBLIC_ACTIONS = {"list", "retrieve", "top_5_cheap", "tour_stats", "tours_within", "distances"}


class TourViewSet(EnvelopeModelViewSet):
    serializer_class = TourSerializer
    filterset_fields = {
        "price": RANGE_LOOKUPS,
        "duration": RANGE_LOOKUPS,
        "max_group_size": RANGE_LOOKUPS,
        "ratings_average": RANGE_LOOKUPS,
        "difficulty": ["exact"],
    }
    ordering_fields = ["price", "ratings_average", "ratings_quantity", "duration", "name", "created_at"]
    ordering = ["-created_at"]

    def get_queryset(self):
        queryset = Tour.objects.prefetch_related("guides", "locations", "start_dates")
        if self.action == "retrieve":
            queryset = queryset.prefetch_related(
                Prefetch("reviews", queryset=Review.objects.select_related("user"))
            )
        return queryset

    def get_serializer_class(self):
        if self.action == "retrieve":
            return TourDetailSerializer
        return super().get_serializer_class()

    def get_permissions(self):
        if self.action in PUBLIC_ACTIONS:
            return [AllowAny()]
        if self.action == "monthly_plan":
            return [restrict_to(User.ADMIN, User.LEAD_GUIDE, User.GUIDE)()]
        return [restrict_to(User.ADMIN, User.LEAD_GUIDE)()]

    def perform_create(self, serializer):
        tour = serializer.save()
        logger.info("Tour %s created by user %s", tour.pk, self.request.user.pk)

    @action(detail=False, methods=["get"], url_path="top-5-cheap")
    def top_5_cheap(self, request):
        self.apply_query_alias(
            request,
            limit="5",
            sort="-ratings_average,price",
            fields="name,price,ratings_average,summary,difficulty",
        )
        return self.list(request)

    @action(detail=False, methods=["get"], url_path="tour-stats")
    def tour_stats(self, request):
        return Response({"status": "success", "data": {"stats": tour_stats()}})

    @action(detail=False, methods=["get"], url_path=r"monthly-plan/(?P<year>\d{4})")
    def monthly_plan(self, request, year=None):
        year = int(year)
        if not 1 <= year < 9999:
            raise ValidationError("Please provide a year between 0001 and 9998")
        return Response({"status": "success", "data": {"plan": monthly_plan(year)}})

    @action(
        detail=False,
        methods=["get"],
        url_path=r"tours-within/(?P<distance>[^/]+)/center/(?P<latlng>[^/]+)/unit/(?P<unit>[^/]+)",
    )
    def tours_within(self, request, distance=None, latlng=None, unit=None):
        lat, lng = parse_lat_lng(latlng)
        earth_radius(unit)
        try:
            radius = float(distance)
        except ValueError as exc:
            raise ValidationError("Distance must be a number") from exc

        tours = [
            tour
            for tour in self.get_queryset().filter(start_latitude__isnull=False, start_longitude__isnull=False)
            if haversine(lat, lng, tour.start_latitude, tour.start_longitude, unit=unit) <= radius
        ]
        data = self.get_serializer(tours, many=True).data
        return Response(envelope(data, results=len(data)))

    @action(detail=False, methods=["get"], url_path=r"distances/(?P<latlng>[^/]+)/unit/(?P<unit>[^/]+)")
    def distances(self, request, latlng=None, unit=None):
        lat, lng = parse_lat_lng(latlng)
        earth_radius(unit)
        rows = [
            {
                "id": tour.pk,
                "name": tour.name,
                "distance": round(
                    haversine(lat, lng, tour.start_latitude, tour.start_longitude, unit=unit), 3
                ),
            }
            for tour in Tour.objects.filter(start_latitude__isnull=False, start_longitude__isnull=False)
        ]
        rows.sort(key=lambda row: row["distance"])
        return Response(envelope(rows))
