from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinLengthValidator, MinValueValidator
from django.db import models
from django.utils.text import slugify


class TourManager(models.Manager):
    """Default manager: secret tours never show up in regular queries."""

    def get_queryset(self):
        return super().get_queryset().filter(secret_tour=False)


class Tour(models.Model):
    EASY = "easy"
    MEDIUM = "medium"
    DIFFICULT = "difficult"
    DIFFICULTIES = [
        (EASY, "Easy"),
        (MEDIUM, "Medium"),
        (DIFFICULT, "Difficult"),
    ]

    name = models.CharField(max_length=50, unique=True, validators=[MinLengthValidator(5)])
    slug = models.SlugField(max_length=60, blank=True)
    duration = models.PositiveIntegerField(help_text="Length of the tour in days.")
    max_group_size = models.PositiveIntegerField()
    difficulty = models.CharField(max_length=20, choices=DIFFICULTIES)
    ratings_average = models.FloatField(
        default=4.5,
        validators=[MinValueValidator(1.0), MaxValueValidator(5.0)],
    )
    ratings_quantity = models.PositiveIntegerField(default=0)
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
    )
    price_discount = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    summary = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    image_cover = models.CharField(max_length=255)
    images = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    secret_tour = models.BooleanField(default=False)
    start_latitude = models.FloatField(null=True, blank=True)
    start_longitude = models.FloatField(null=True, blank=True)
    start_address = models.CharField(max_length=255, blank=True)
    start_description = models.CharField(max_length=255, blank=True)
    guides = models.ManyToManyField(settings.AUTH_USER_MODEL, blank=True, related_name="guided_tours")

    objects = TourManager()
    all_objects = models.Manager()

    class Meta:
        base_manager_name = "all_objects"
        indexes = [
            models.Index(fields=["price", "-ratings_average"], name="tours_price_rating_idx"),
            models.Index(fields=["slug"], name="tours_slug_idx"),
        ]

    def __str__(self):
        return self.name

    @property
    def duration_weeks(self) -> float:
        return round(self.duration / 7, 2)

    def clean(self):
        super().clean()
        if self.price_discount is not None and self.price is not None and self.price_discount >= self.price:
            raise ValidationError(
                {"price_discount": f"Discount price ({self.price_discount}) should be below regular price"}
            )

    def save(self, *args, **kwargs):
        self.slug = slugify(self.name)
        if self.ratings_average is not None:
            self.ratings_average = round(self.ratings_average, 1)
        self.full_clean()
        return super().save(*args, **kwargs)


class TourLocation(models.Model):
    tour = models.ForeignKey(Tour, on_delete=models.CASCADE, related_name="locations")
    latitude = models.FloatField()
    longitude = models.FloatField()
    address = models.CharField(max_length=255, blank=True)
    description = models.CharField(max_length=255, blank=True)
    day = models.PositiveIntegerField(default=1)

    class Meta:
        ordering = ("day", "id")

    def __str__(self):
        return f"{self.tour.name}: day {self.day}"


class TourStartDate(models.Model):
    tour = models.ForeignKey(Tour, on_delete=models.CASCADE, related_name="start_dates")
    starts_at = models.DateTimeField()

    class Meta:
        ordering = ("starts_at",)

    def __str__(self):
        return f"{self.tour.name} @ {self.starts_at:%Y-%m-%d}"
