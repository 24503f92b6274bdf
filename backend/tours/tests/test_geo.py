import pytest

from core.exceptions import ValidationError
from tours.geo import haversine, parse_lat_lng
from tours.models import Tour


@pytest.fixture
def located_tours(db):
    common = {"duration": 3, "max_group_size": 8, "difficulty": Tour.EASY, "summary": "s", "image_cover": "c.jpg", "price": "100"}
    los_angeles = Tour.objects.create(name="Los Angeles Loop", start_latitude=34.0522, start_longitude=-118.2437, **common)
    san_diego = Tour.objects.create(name="San Diego Stroll", start_latitude=32.7157, start_longitude=-117.1611, **common)
    new_york = Tour.objects.create(name="New York Ramble", start_latitude=40.7128, start_longitude=-74.0060, **common)
    return los_angeles, san_diego, new_york


def test_haversine_known_distance():
    # Los Angeles to New York is roughly 2450 miles.
    assert haversine(34.0522, -118.2437, 40.7128, -74.0060, unit="mi") == pytest.approx(2448, rel=0.01)
    assert haversine(1, 1, 1, 1) == 0


@pytest.mark.parametrize("value", ["34.1", "abc,def", "95,10", ""])
def test_parse_lat_lng_rejects_bad_input(value):
    with pytest.raises(ValidationError):
        parse_lat_lng(value)


def test_tours_within_radius(api_client, located_tours):
    response = api_client.get("/api/v1/tours/tours-within/200/center/34.0,-118.0/unit/mi/")

    assert response.status_code == 200
    names = sorted(row["name"] for row in response.json()["data"]["data"])
    assert names == ["Los Angeles Loop", "San Diego Stroll"]


def test_tours_within_rejects_bad_coordinates(api_client, located_tours):
    response = api_client.get("/api/v1/tours/tours-within/200/center/nowhere/unit/mi/")

    assert response.status_code == 400
    assert response.json()["message"] == "Please provide latitude and longitude in the format lat,lng"


def test_tours_within_rejects_unknown_unit(api_client, located_tours):
    response = api_client.get("/api/v1/tours/tours-within/200/center/34.0,-118.0/unit/parsecs/")

    assert response.status_code == 400


def test_distances_sorted_nearest_first(api_client, located_tours):
    response = api_client.get("/api/v1/tours/distances/34.0522,-118.2437/unit/km/")

    rows = response.json()["data"]["data"]
    assert [row["name"] for row in rows] == ["Los Angeles Loop", "San Diego Stroll", "New York Ramble"]
    assert rows[0]["distance"] == 0
    assert rows[1]["distance"] == pytest.approx(180, rel=0.05)
