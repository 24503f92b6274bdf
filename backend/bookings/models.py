from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models


class Booking(models.Model):
    """A paid place on a tour, created once the payment provider confirms checkout."""

    tour = models.ForeignKey("tours.Tour", on_delete=models.CASCADE, related_name="bookings")
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="bookings")
    price = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])
    created_at = models.DateTimeField(auto_now_add=True)
    paid = models.BooleanField(default=True)
    # Not unique: a redelivered webhook currently produces a second booking.
    checkout_session_id = models.CharField(max_length=255, blank=True, db_index=True)

    class Meta:
        ordering = ("-created_at", "-id")

    def __str__(self):
        return f"{self.user} booked {self.tour} for {self.price}"
