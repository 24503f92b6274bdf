"""Aggregate reports over tours: difficulty stats and the monthly start plan."""

from __future__ import annotations

from datetime import datetime, timezone as dt_timezone

from django.db.models import Avg, Count, Max, Min, Sum
from django.db.models.functions import ExtractMonth, Upper

from .models import Tour, TourStartDate


def tour_stats():
    """Per-difficulty statistics for tours rated 4.5 or better, cheapest first."""
    rows = (
        Tour.objects.filter(ratings_average__gte=4.5)
        .annotate(difficulty_label=Upper("difficulty"))
        .values("difficulty_label")
        .annotate(
            num_tours=Count("id"),
            num_ratings=Sum("ratings_quantity"),
            avg_rating=Avg("ratings_average"),
            avg_price=Avg("price"),
            min_price=Min("price"),
            max_price=Max("price"),
        )
        .order_by("avg_price")
    )
    return [
        {
            "difficulty": row["difficulty_label"],
            "num_tours": row["num_tours"],
            "num_ratings": row["num_ratings"] or 0,
            "avg_rating": round(row["avg_rating"], 2),
            "avg_price": round(float(row["avg_price"]), 2),
            "min_price": float(row["min_price"]),
            "max_price": float(row["max_price"]),
        }
        for row in rows
    ]


def monthly_plan(year: int, *, limit: int = 12):
    """Tours starting each month of ``year`` (UTC calendar), busiest month first."""
    start_dates = (
        TourStartDate.objects.filter(
            starts_at__gte=datetime(year, 1, 1, tzinfo=dt_timezone.utc),
            starts_at__lt=datetime(year + 1, 1, 1, tzinfo=dt_timezone.utc),
            tour__secret_tour=False,
        )
        .annotate(month=ExtractMonth("starts_at", tzinfo=dt_timezone.utc))
        .select_related("tour")
        .order_by("starts_at")
    )
    months: dict[int, list[str]] = {}
    for start_date in start_dates:
        months.setdefault(start_date.month, []).append(start_date.tour.name)

    plan = [
        {"month": month, "num_tour_starts": len(names), "tours": names}
        for month, names in months.items()
    ]
    plan.sort(key=lambda entry: (-entry["num_tour_starts"], entry["month"]))
    return plan[:limit]
