from django.db import transaction
from rest_framework import serializers

from accounts.models import User
from accounts.serializers import UserSummarySerializer
from core.serializers import DynamicFieldsMixin
from reviews.serializers import ReviewSerializer

from .models import Tour, TourLocation, TourStartDate


class StartLocationSerializer(serializers.Serializer):
    """GeoJSON-style point stored on the tour's flat ``start_*`` columns."""

    type = serializers.ChoiceField(choices=["Point"], default="Point")
    coordinates = serializers.ListField(child=serializers.FloatField(), min_length=2, max_length=2)
    address = serializers.CharField(required=False, allow_blank=True)
    description = serializers.CharField(required=False, allow_blank=True)

    def to_representation(self, instance):
        if instance.start_latitude is None or instance.start_longitude is None:
            return None
        return {
            "type": "Point",
            "coordinates": [instance.start_longitude, instance.start_latitude],
            "address": instance.start_address,
            "description": instance.start_description,
        }

    def to_internal_value(self, data):
        value = super().to_internal_value(data)
        longitude, latitude = value["coordinates"]
        return {
            "start_latitude": latitude,
            "start_longitude": longitude,
            "start_address": value.get("address", ""),
            "start_description": value.get("description", ""),
        }


class TourLocationSerializer(serializers.ModelSerializer):
    class Meta:
        model = TourLocation
        fields = ["id", "latitude", "longitude", "address", "description", "day"]
        read_only_fields = ["id"]


class StartDatesField(serializers.ListField):
    child = serializers.DateTimeField()

    def get_attribute(self, instance):
        return [start_date.starts_at for start_date in instance.start_dates.all()]


class TourSerializer(DynamicFieldsMixin, serializers.ModelSerializer):
    start_location = StartLocationSerializer(source="*", required=False)
    locations = TourLocationSerializer(many=True, required=False)
    start_dates = StartDatesField(required=False)
    guides = UserSummarySerializer(many=True, read_only=True)
    guide_ids = serializers.PrimaryKeyRelatedField(
        source="guides",
        many=True,
        write_only=True,
        required=False,
        queryset=User.objects.active().filter(role__in=[User.GUIDE, User.LEAD_GUIDE]),
    )
    duration_weeks = serializers.FloatField(read_only=True)

    class Meta:
        model = Tour
        fields = [
            "id",
            "name",
            "slug",
            "duration",
            "duration_weeks",
            "max_group_size",
            "difficulty",
            "ratings_average",
            "ratings_quantity",
            "price",
            "price_discount",
            "summary",
            "description",
            "image_cover",
            "images",
            "created_at",
            "secret_tour",
            "start_location",
            "locations",
            "start_dates",
            "guides",
            "guide_ids",
        ]
        read_only_fields = ["id", "slug", "ratings_average", "ratings_quantity", "created_at"]

    def validate(self, attrs):
        price = attrs.get("price", getattr(self.instance, "price", None))
        discount = attrs.get("price_discount", getattr(self.instance, "price_discount", None))
        if discount is not None and price is not None and discount >= price:
            raise serializers.ValidationError(
                {"price_discount": f"Discount price ({discount}) should be below regular price"}
            )
        return attrs

    def _write_children(self, tour, locations, start_dates):
        if locations is not None:
            tour.locations.all().delete()
            TourLocation.objects.bulk_create(TourLocation(tour=tour, **loc) for loc in locations)
        if start_dates is not None:
            tour.start_dates.all().delete()
            TourStartDate.objects.bulk_create(
                TourStartDate(tour=tour, starts_at=starts_at) for starts_at in start_dates
            )

    @transaction.atomic
    def create(self, validated_data):
        locations = validated_data.pop("locations", None)
        start_dates = validated_data.pop("start_dates", None)
        guides = validated_data.pop("guides", None)
        tour = Tour.objects.create(**validated_data)
        if guides is not None:
            tour.guides.set(guides)
        self._write_children(tour, locations, start_dates)
        return tour

    @transaction.atomic
    def update(self, instance, validated_data):
        locations = validated_data.pop("locations", None)
        start_dates = validated_data.pop("start_dates", None)
        guides = validated_data.pop("guides", None)
        tour = super().update(instance, validated_data)
        if guides is not None:
            tour.guides.set(guides)
        self._write_children(tour, locations, start_dates)
        return tour


class TourDetailSerializer(TourSerializer):
    reviews = ReviewSerializer(many=True, read_only=True)

    class Meta(TourSerializer.Meta):
        fields = TourSerializer.Meta.fields + ["reviews"]


class TourSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Tour
        fields = ["id", "name", "slug"]
        read_only_fields = fields
