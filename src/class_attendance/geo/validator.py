"""Geofence checks (haversine great-circle distance)."""

from __future__ import annotations

import math
from typing import Any, Optional

from ..common.validators import coerce_coordinate
from ..core.constants import EARTH_RADIUS_METERS
from .model import GeoCheck, Geofence


def distance_meters(lat1: Any, lng1: Any, lat2: Any, lng2: Any) -> float:
    """Calculate distance between two GPS points in meters."""
    lat1, lng1 = coerce_coordinate(lat1), coerce_coordinate(lng1)
    lat2, lng2 = coerce_coordinate(lat2), coerce_coordinate(lng2)

    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    delta_lat = math.radians(lat2 - lat1)
    delta_lng = math.radians(lng2 - lng1)

    a = (math.sin(delta_lat / 2) ** 2
         + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(delta_lng / 2) ** 2)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_METERS * c


def is_within_radius(student_lat: Any, student_lng: Any, session_lat: Any, session_lng: Any, radius_meters: float) -> bool:
    return distance_meters(student_lat, student_lng, session_lat, session_lng) <= float(radius_meters)


def check_location(geofence: Optional[Geofence], student_lat: Any, student_lng: Any) -> GeoCheck:
    """Verify a student position against a session's geofence.

    Sessions without a geofence accept any position.
    """

    if geofence is None:
        return GeoCheck(inside=True)

    distance = distance_meters(student_lat, student_lng, geofence.center.latitude, geofence.center.longitude)
    return GeoCheck(
        inside=distance <= float(geofence.radius_meters),
        distance_meters=distance,
        radius_meters=float(geofence.radius_meters),
    )
