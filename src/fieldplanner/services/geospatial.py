"""Geospatial helper functions."""

from __future__ import annotations

import math

from ..config import settings
from ..models.domain import GeoPoint

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute distance between two coordinates using the Haversine formula."""

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def travel_minutes(origin: GeoPoint, destination: GeoPoint, speed_kmh: float | None = None) -> float:
    """Estimate driving time between two points at a fixed average speed.

    This is a straight-line approximation, not a road network lookup.
    """

    speed = speed_kmh or settings.average_speed_kmh
    distance_km = haversine_km(origin.lat, origin.lng, destination.lat, destination.lng)
    return distance_km / speed * 60.0


def planar_angle(origin: GeoPoint, point: GeoPoint) -> float:
    """Flat-earth angle of ``point`` around ``origin`` in radians (-pi..pi]."""

    return math.atan2(point.lat - origin.lat, point.lng - origin.lng)
