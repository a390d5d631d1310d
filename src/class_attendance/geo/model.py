from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class GeoPoint:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class Geofence:
    """Circular check-in area around a session's location."""

    center: GeoPoint
    radius_meters: float


@dataclass(frozen=True)
class GeoCheck:
    inside: bool
    distance_meters: Optional[float] = None
    radius_meters: Optional[float] = None
