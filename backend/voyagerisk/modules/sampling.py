"""Waypoint sampling — caps the number of external calls per route.

Keeps every k-th waypoint, k = max(1, N // target), always starting at
index 0. A 100-point route with target 5 yields indices 0, 20, 40, 60, 80.
"""
from __future__ import annotations

from typing import Sequence, TypeVar

T = TypeVar("T")


def sample_waypoints(waypoints: Sequence[T], target_count: int) -> list[T]:
    """Return a bounded, order-preserving subset of *waypoints*.

    The result may exceed *target_count* by the remainder of the stride
    (e.g. 7 points with target 5 gives stride 1 and all 7 points).
    A non-positive target is treated as 1.
    """
    n = len(waypoints)
    if n <= 1:
        return list(waypoints)
    stride = max(1, n // max(1, target_count))
    return [wp for i, wp in enumerate(waypoints) if i % stride == 0]
