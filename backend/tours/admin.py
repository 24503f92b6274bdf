from django.contrib import admin

from .models import Tour, TourLocation, TourStartDate


class TourLocationInline(admin.TabularInline):
    model = TourLocation
    extra = 0


class TourStartDateInline(admin.TabularInline):
    model = TourStartDate
    extra = 0


@admin.register(Tour)
class TourAdmin(admin.ModelAdmin):
    list_display = ("name", "difficulty", "price", "ratings_average", "secret_tour")
    list_filter = ("difficulty", "secret_tour")
    search_fields = ("name",)
    filter_horizontal = ("guides",)
    inlines = [TourLocationInline, TourStartDateInline]

    def get_queryset(self, request):
        return Tour.all_objects.all()
