"""Shared geodesic distance utilities.

Haversine distances and display helpers used by the HTTP and CLI layers to
describe a route. The risk engine itself does not depend on distance.
"""
from __future__ import annotations

import math
from typing import Iterable

_EARTH_RADIUS_NM: float = 3440.065   # Earth mean radius in nautical miles
_EARTH_RADIUS_KM: float = 6371.0     # Earth mean radius in kilometres
_NM_PER_KM: float = 0.539957


def _central_angle(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlam = math.radians(lon2 - lon1)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlam / 2) ** 2
    a = min(1.0, max(0.0, a))  # float error near antipodes
    return 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in kilometres between two WGS-84 coordinates."""
    return _EARTH_RADIUS_KM * _central_angle(lat1, lon1, lat2, lon2)


def haversine_nm(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in nautical miles between two WGS-84 coordinates."""
    return _EARTH_RADIUS_NM * _central_angle(lat1, lon1, lat2, lon2)


def route_distance_km(points: Iterable[tuple[float, float]]) -> float:
    """Sum of leg distances along an ordered sequence of (lat, lon) points.

    Fewer than two points is a zero-length route.
    """
    pts = list(points)
    total = 0.0
    for (lat1, lon1), (lat2, lon2) in zip(pts, pts[1:]):
        total += haversine_km(lat1, lon1, lat2, lon2)
    return total


def km_to_nautical_miles(km: float) -> float:
    return km * _NM_PER_KM


def format_distance(km: float) -> str:
    """Human-readable distance: metres below 1 km, one decimal below 10 km."""
    if km < 1:
        return f"{round(km * 1000)} m"
    if km < 10:
        return f"{km:.1f} km"
    return f"{round(km):,} km"


def format_nautical_miles(km: float) -> str:
    nm = km_to_nautical_miles(km)
    if nm < 10:
        return f"{nm:.1f} nm"
    return f"{round(nm):,} nm"
