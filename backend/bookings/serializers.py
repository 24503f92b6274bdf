from rest_framework import serializers

from accounts.models import User
from accounts.serializers import UserSerializer
from core.serializers import DynamicFieldsMixin
from tours.models import Tour

from .models import Booking


class BookedTourSerializer(serializers.ModelSerializer):
    class Meta:
        model = Tour
        fields = ["id", "name"]
        read_only_fields = fields


class BookingSerializer(DynamicFieldsMixin, serializers.ModelSerializer):
    """Read shape: the full user and the tour by name."""

    user = UserSerializer(read_only=True)
    tour = BookedTourSerializer(read_only=True)

    class Meta:
        model = Booking
        fields = ["id", "tour", "user", "price", "paid", "created_at", "checkout_session_id"]
        read_only_fields = fields


class BookingWriteSerializer(serializers.ModelSerializer):
    tour = serializers.PrimaryKeyRelatedField(queryset=Tour.all_objects.all())
    user = serializers.PrimaryKeyRelatedField(queryset=User.objects.all())

    class Meta:
        model = Booking
        fields = ["id", "tour", "user", "price", "paid", "created_at", "checkout_session_id"]
        read_only_fields = ["id", "created_at"]

    def to_representation(self, instance):
        return BookingSerializer(instance, context=self.context).data
