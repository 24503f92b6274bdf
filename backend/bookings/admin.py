from django.contrib import admin

from .models import Booking


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = ("tour", "user", "price", "paid", "created_at")
    list_filter = ("paid",)
    search_fields = ("user__email", "tour__name", "checkout_session_id")
    raw_id_fields = ("tour", "user")
    readonly_fields = ("created_at",)
