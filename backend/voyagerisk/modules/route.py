"""Route value types shared by the risk engine and its providers.

A voyage is an ordered sequence of waypoints; the order is the path index and
is preserved everywhere. Nothing here validates coordinate ranges; request
validation lives in voyagerisk.schemas.route and the core stays liberal.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Iterable, Mapping

# Fixed weighting policy for the overall score (sums to 1.0)
RISK_WEIGHTS: dict[str, float] = {
    "weather": 0.25,
    "piracy": 0.35,
    "traffic": 0.20,
    "claims": 0.20,
}


@dataclass(frozen=True)
class Waypoint:
    latitude: float
    longitude: float


def clamp_score(value: float) -> int:
    """Round to the nearest int and clamp to [0, 100]."""
    return max(0, min(100, int(round(value))))


@dataclass(frozen=True)
class RiskScores:
    overall: int
    weather: int
    piracy: int
    traffic: int
    claims: int

    @classmethod
    def zero(cls) -> "RiskScores":
        return cls(overall=0, weather=0, piracy=0, traffic=0, claims=0)

    def as_dict(self) -> dict[str, int]:
        return asdict(self)


def combine_scores(weather: float, piracy: float, traffic: float, claims: float) -> RiskScores:
    """Build a RiskScores record from four factor scores.

    Factors are clamped first; ``overall`` is the weighted sum of the clamped
    values so the weighting invariant holds on the returned record.
    """
    w, p, t, c = (clamp_score(v) for v in (weather, piracy, traffic, claims))
    overall = clamp_score(
        w * RISK_WEIGHTS["weather"]
        + p * RISK_WEIGHTS["piracy"]
        + t * RISK_WEIGHTS["traffic"]
        + c * RISK_WEIGHTS["claims"]
    )
    return RiskScores(overall=overall, weather=w, piracy=p, traffic=t, claims=c)


def _to_waypoint(item: Any) -> Waypoint:
    if isinstance(item, Waypoint):
        return item
    if isinstance(item, Mapping):
        # "sequence" from the caller's envelope is accepted and ignored
        return Waypoint(float(item["latitude"]), float(item["longitude"]))
    lat, lon = item
    return Waypoint(float(lat), float(lon))


def coerce_waypoints(items: Iterable[Any]) -> tuple[Waypoint, ...]:
    """Normalise Waypoints, ``{latitude, longitude}`` mappings or ``(lat, lon)``
    pairs into a tuple of Waypoint, preserving input order.

    Objects exposing ``latitude``/``longitude`` attributes (e.g. pydantic
    request models) are accepted as well.
    """
    result: list[Waypoint] = []
    for item in items:
        if not isinstance(item, (Waypoint, Mapping, tuple, list)) and hasattr(item, "latitude"):
            result.append(Waypoint(float(item.latitude), float(item.longitude)))
        else:
            result.append(_to_waypoint(item))
    return tuple(result)
