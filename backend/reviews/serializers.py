from rest_framework import serializers

from accounts.serializers import UserSummarySerializer
from core.serializers import DynamicFieldsMixin

from .models import Review


class ReviewSerializer(DynamicFieldsMixin, serializers.ModelSerializer):
    user = UserSummarySerializer(read_only=True)

    class Meta:
        model = Review
        fields = ["id", "review", "rating", "created_at", "tour", "user"]
        read_only_fields = ["id", "created_at", "user"]
        # Duplicate reviews are rejected in reviews.services.
        validators = []


class ReviewUpdateSerializer(ReviewSerializer):
    class Meta(ReviewSerializer.Meta):
        read_only_fields = ["id", "created_at", "user", "tour"]
