"""Great-circle helpers for the tours-within and distances endpoints."""

from __future__ import annotations

import math

from core.exceptions import ValidationError

EARTH_RADIUS = {"mi": 3963.2, "km": 6378.1}

COORDINATE_FORMAT_MESSAGE = "Please provide latitude and longitude in the format lat,lng"


def parse_lat_lng(value: str) -> tuple[float, float]:
    try:
        lat_text, lng_text = value.split(",")
        lat, lng = float(lat_text), float(lng_text)
    except (AttributeError, ValueError) as exc:
        raise ValidationError(COORDINATE_FORMAT_MESSAGE) from exc
    if not (-90 <= lat <= 90 and -180 <= lng <= 180):
        raise ValidationError(COORDINATE_FORMAT_MESSAGE)
    return lat, lng


def earth_radius(unit: str) -> float:
    try:
        return EARTH_RADIUS[unit]
    except KeyError as exc:
        raise ValidationError("Unit must be either mi or km") from exc


def haversine(lat1: float, lng1: float, lat2: float, lng2: float, *, unit: str = "km") -> float:
    """Distance between two points along the earth's surface, in ``unit``."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lng2 - lng1)
    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return 2 * earth_radius(unit) * math.asin(math.sqrt(a))
