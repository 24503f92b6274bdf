from datetime import datetime, timezone as dt_timezone
from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model

from tours.models import Tour, TourStartDate

User = get_user_model()


def _make_tour(name, price, **extra):
    defaults = {
        "duration": 5,
        "max_group_size": 10,
        "difficulty": Tour.EASY,
        "summary": f"{name} summary",
        "image_cover": "cover.jpg",
    }
    defaults.update(extra)
    return Tour.objects.create(name=name, price=Decimal(price), **defaults)


@pytest.fixture
def tours(db):
    return [
        _make_tour("The Forest Hiker", "397", ratings_average=4.7, duration=5),
        _make_tour("The Sea Explorer", "497", ratings_average=4.8, difficulty=Tour.MEDIUM, duration=7),
        _make_tour("The Snow Adventurer", "997", ratings_average=4.5, difficulty=Tour.DIFFICULT, duration=4),
        _make_tour("The City Wanderer", "1197", ratings_average=4.2, duration=9),
    ]


@pytest.fixture
def lead_guide(make_user):
    return make_user(role=User.LEAD_GUIDE, email="lead@example.com")


def _names(response):
    return [row["name"] for row in response.json()["data"]["data"]]


def test_tour_list_is_public_and_enveloped(api_client, tours):
    response = api_client.get("/api/v1/tours/")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "success"
    assert body["results"] == 4


def test_secret_tours_are_hidden(api_client, tours):
    _make_tour("The Secret Summit", "2000", secret_tour=True)

    response = api_client.get("/api/v1/tours/")

    assert "The Secret Summit" not in _names(response)
    assert Tour.all_objects.filter(name="The Secret Summit").exists()


def test_bracket_filters_and_sort(api_client, tours):
    response = api_client.get("/api/v1/tours/", {"price[lt]": "1000", "duration[gte]": "5", "sort": "price"})

    assert _names(response) == ["The Forest Hiker", "The Sea Explorer"]


def test_exact_filter_ignores_paging_params(api_client, tours):
    response = api_client.get("/api/v1/tours/", {"difficulty": "easy", "page": "1", "limit": "10"})

    assert sorted(_names(response)) == ["The City Wanderer", "The Forest Hiker"]


def test_pagination_and_field_selection(api_client, tours):
    response = api_client.get("/api/v1/tours/", {"sort": "price", "page": "2", "limit": "2", "fields": "name,price"})

    rows = response.json()["data"]["data"]
    assert [row["name"] for row in rows] == ["The Snow Adventurer", "The City Wanderer"]
    assert set(rows[0]) == {"id", "name", "price"}


def test_top_5_cheap_alias(api_client, tours):
    response = api_client.get("/api/v1/tours/top-5-cheap/")

    assert response.status_code == 200
    rows = response.json()["data"]["data"]
    assert [row["name"] for row in rows][:2] == ["The Sea Explorer", "The Forest Hiker"]
    assert set(rows[0]) == {"id", "name", "price", "ratings_average", "summary", "difficulty"}


def test_retrieve_includes_reviews_and_duration_weeks(api_client, tours):
    response = api_client.get(f"/api/v1/tours/{tours[1].pk}/")

    data = response.json()["data"]["data"]
    assert data["reviews"] == []
    assert data["duration_weeks"] == 1.0
    assert data["slug"] == "the-sea-explorer"


def test_missing_tour_returns_404(api_client, db):
    response = api_client.get("/api/v1/tours/999/")

    assert response.status_code == 404
    assert response.json()["status"] == "fail"


def test_create_requires_lead_guide_or_admin(api_client, make_user):
    api_client.force_authenticate(make_user())

    response = api_client.post("/api/v1/tours/", {"name": "Nope Tour"}, format="json")

    assert response.status_code == 403


def test_lead_guide_creates_tour_with_nested_data(api_client, lead_guide, make_user):
    guide = make_user(role=User.GUIDE, email="guide@example.com")
    api_client.force_authenticate(lead_guide)
    payload = {
        "name": "The Park Camper",
        "duration": 10,
        "max_group_size": 15,
        "difficulty": "medium",
        "price": "1497.00",
        "summary": "Breathing in nature in America's most spectacular parks",
        "image_cover": "tour-5-cover.jpg",
        "start_location": {"coordinates": [-115.570154, 36.120696], "address": "Las Vegas, USA"},
        "locations": [{"latitude": 36.1, "longitude": -112.1, "description": "Grand Canyon", "day": 1}],
        "start_dates": ["2031-08-05T09:00:00Z", "2031-03-20T09:00:00Z"],
        "guide_ids": [guide.pk],
    }

    response = api_client.post("/api/v1/tours/", payload, format="json")

    assert response.status_code == 201, response.json()
    data = response.json()["data"]["data"]
    assert data["slug"] == "the-park-camper"
    assert data["start_location"]["coordinates"] == [-115.570154, 36.120696]
    assert [g["id"] for g in data["guides"]] == [guide.pk]
    tour = Tour.objects.get(name="The Park Camper")
    assert tour.start_latitude == 36.120696
    assert tour.start_dates.count() == 2


def test_discount_must_be_below_price(api_client, lead_guide, tours):
    api_client.force_authenticate(lead_guide)

    response = api_client.patch(f"/api/v1/tours/{tours[0].pk}/", {"price_discount": "500"}, format="json")

    assert response.status_code == 400
    assert "price_discount" in response.json()["errors"]


def test_short_name_is_rejected(api_client, lead_guide):
    api_client.force_authenticate(lead_guide)

    response = api_client.post(
        "/api/v1/tours/",
        {"name": "Hike", "duration": 1, "max_group_size": 1, "difficulty": "easy", "price": "10", "summary": "s", "image_cover": "c.jpg"},
        format="json",
    )

    assert response.status_code == 400
    assert "name" in response.json()["errors"]


def test_delete_tour(api_client, admin_user, tours):
    api_client.force_authenticate(admin_user)

    response = api_client.delete(f"/api/v1/tours/{tours[0].pk}/")

    assert response.status_code == 204
    assert not Tour.all_objects.filter(pk=tours[0].pk).exists()


def test_tour_stats_groups_by_difficulty(api_client, tours):
    response = api_client.get("/api/v1/tours/tour-stats/")

    stats = response.json()["data"]["stats"]
    assert [row["difficulty"] for row in stats] == ["EASY", "MEDIUM", "DIFFICULT"]
    assert stats[0]["num_tours"] == 1
    assert stats[0]["avg_price"] == 397.0


def test_monthly_plan_orders_busiest_month_first(api_client, make_user, tours):
    api_client.force_authenticate(make_user(role=User.GUIDE))
    for tour, month, day in [(tours[0], 7, 1), (tours[1], 7, 15), (tours[2], 3, 1)]:
        TourStartDate.objects.create(tour=tour, starts_at=datetime(2031, month, day, tzinfo=dt_timezone.utc))
    TourStartDate.objects.create(tour=tours[3], starts_at=datetime(2030, 7, 1, tzinfo=dt_timezone.utc))

    response = api_client.get("/api/v1/tours/monthly-plan/2031/")

    plan = response.json()["data"]["plan"]
    assert plan[0] == {"month": 7, "num_tour_starts": 2, "tours": ["The Forest Hiker", "The Sea Explorer"]}
    assert plan[1]["month"] == 3


def test_monthly_plan_groups_by_utc_calendar(api_client, make_user, settings, tours):
    settings.TIME_ZONE = "America/Chicago"
    api_client.force_authenticate(make_user(role=User.GUIDE))
    TourStartDate.objects.create(tour=tours[0], starts_at=datetime(2031, 3, 1, tzinfo=dt_timezone.utc))
    TourStartDate.objects.create(tour=tours[1], starts_at=datetime(2031, 1, 1, tzinfo=dt_timezone.utc))
    TourStartDate.objects.create(tour=tours[2], starts_at=datetime(2032, 1, 1, tzinfo=dt_timezone.utc))

    response = api_client.get("/api/v1/tours/monthly-plan/2031/")

    plan = response.json()["data"]["plan"]
    assert sorted(entry["month"] for entry in plan) == [1, 3]
    assert sum(entry["num_tour_starts"] for entry in plan) == 2


def test_monthly_plan_rejects_out_of_range_year(api_client, make_user, tours):
    api_client.force_authenticate(make_user(role=User.GUIDE))

    response = api_client.get("/api/v1/tours/monthly-plan/9999/")

    assert response.status_code == 400


def test_monthly_plan_is_restricted(api_client, make_user, tours):
    api_client.force_authenticate(make_user())

    response = api_client.get("/api/v1/tours/monthly-plan/2031/")

    assert response.status_code == 403
