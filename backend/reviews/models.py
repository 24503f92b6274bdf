from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models


class Review(models.Model):
    review = models.TextField()
    rating = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(5)])
    created_at = models.DateTimeField(auto_now_add=True)
    tour = models.ForeignKey("tours.Tour", on_delete=models.CASCADE, related_name="reviews")
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="reviews")

    class Meta:
        ordering = ("-created_at", "-id")
        unique_together = ("tour", "user")

    def __str__(self):
        return f"{self.user} on {self.tour}: {self.rating}"
