"""Simulated factor estimator — zone membership plus bounded jitter.

Used for piracy and claims (no live source exists) and as the fallback for
weather and traffic when their live providers are unavailable.

Each waypoint inside a zone contributes 2 points; each waypoint outside every
zone contributes a random 0–0.5 so that open ocean never reads as a perfectly
flat zero. The sum is normalised by the maximum (2 per waypoint) and scaled
to 0–100. Results vary run-to-run unless a deterministic *rng* is injected.
"""
from __future__ import annotations

import random
from typing import Iterable, Protocol, Sequence

from voyagerisk.modules.risk_zones import RiskZone, in_any_zone
from voyagerisk.modules.route import Waypoint

_IN_ZONE_POINTS = 2.0
_MAX_JITTER = 0.5


class RandomSource(Protocol):
    def random(self) -> float: ...


def simulated_risk(
    waypoints: Sequence[Waypoint],
    zones: Iterable[RiskZone],
    rng: RandomSource | None = None,
) -> int:
    """Estimate a 0–100 factor score from zone membership along the route."""
    if not waypoints:
        return 0
    source = rng if rng is not None else random
    zone_list = tuple(zones)

    risk_points = 0.0
    for wp in waypoints:
        if in_any_zone(wp.latitude, wp.longitude, zone_list):
            risk_points += _IN_ZONE_POINTS
        else:
            risk_points += source.random() * _MAX_JITTER

    avg_risk = risk_points / (len(waypoints) * _IN_ZONE_POINTS) * 100
    return min(round(avg_risk), 100)
