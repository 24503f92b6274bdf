from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounts.models import User
from accounts.permissions import restrict_to
from core.views import EnvelopeModelViewSet, envelope

from .models import Review
from .permissions import IsReviewAuthorOrAdmin
from .serializers import ReviewSerializer, ReviewUpdateSerializer
from .services import create_review, delete_review, update_review


class ReviewViewSet(EnvelopeModelViewSet):
    """Reviews, either globally or nested under ``/tours/<tour_pk>/reviews/``."""

    serializer_class = ReviewSerializer
    filterset_fields = ["rating", "tour", "user"]
    ordering_fields = ["created_at", "rating"]
    ordering = ["-created_at"]

    def get_queryset(self):
        queryset = Review.objects.select_related("user")
        tour_pk = self.kwargs.get("tour_pk")
        if tour_pk is not None:
            queryset = queryset.filter(tour_id=tour_pk)
        return queryset

    def get_serializer_class(self):
        if self.action in {"update", "partial_update"}:
            return ReviewUpdateSerializer
        return super().get_serializer_class()

    def get_permissions(self):
        if self.action in {"list", "retrieve"}:
            return [IsAuthenticated()]
        if self.action == "create":
            return [restrict_to(User.USER)()]
        return [IsAuthenticated(), restrict_to(User.USER, User.ADMIN)(), IsReviewAuthorOrAdmin()]

    def create(self, request, *args, **kwargs):
        data = request.data.copy()
        tour_pk = self.kwargs.get("tour_pk")
        if tour_pk is not None:
            data["tour"] = tour_pk
        serializer = self.get_serializer(data=data)
        serializer.is_valid(raise_exception=True)

        review = create_review(
            tour=serializer.validated_data["tour"],
            user=request.user,
            review=serializer.validated_data["review"],
            rating=serializer.validated_data["rating"],
        )
        output = self.get_serializer(review)
        return Response(envelope(output.data), status=status.HTTP_201_CREATED)

    def perform_update(self, serializer):
        serializer.instance = update_review(serializer.instance, **serializer.validated_data)

    def perform_destroy(self, instance):
        delete_review(instance)
