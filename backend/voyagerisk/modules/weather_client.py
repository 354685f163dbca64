"""Marine weather risk from the Open-Meteo Marine API (free, no API key needed).

Provides:
  - fetch_marine_conditions() — current sea state at one coordinate
  - score_marine_conditions() — 0-100 risk from wave, wind-wave, swell, current
  - get_point_weather_risk()  — fetch + score for one coordinate
  - get_route_weather_risk()  — sampled, averaged risk for a whole route

Graceful degradation: a failed point is dropped from the average, and a route
where every point failed returns None so the caller can fall back to the
simulated estimator. Nothing in this module raises on network or payload
errors.
"""
from __future__ import annotations

import asyncio
import logging
import math
from dataclasses import dataclass, field
from typing import Any, Sequence

import httpx

from voyagerisk.config import settings
from voyagerisk.modules.route import Waypoint
from voyagerisk.modules.sampling import sample_waypoints

logger = logging.getLogger(__name__)

_CURRENT_FIELDS = (
    "wave_height",
    "wind_wave_height",
    "swell_wave_height",
    "ocean_current_velocity",
)

# Risk thresholds based on maritime practice
WAVE_HEIGHT_THRESHOLD_M = 4.0     # significant wave height
WIND_WAVE_THRESHOLD_M = 3.0
CURRENT_THRESHOLD_KMH = 15.0      # strong surface current
SWELL_THRESHOLD_M = 2.0
SWELL_MULTIPLIER = 1.2


@dataclass(frozen=True)
class MarineConditions:
    wave_height: float
    wind_wave_height: float
    swell_wave_height: float
    ocean_current_velocity: float


@dataclass(frozen=True)
class WeatherRiskResult:
    risk_score: int
    factors: dict[str, float] = field(default_factory=dict)


def _parse_conditions(data: Any) -> MarineConditions | None:
    """Extract the four required readings; any missing or non-numeric field fails the point."""
    if not isinstance(data, dict):
        return None
    current = data.get("current")
    if not isinstance(current, dict):
        return None
    values: dict[str, float] = {}
    for name in _CURRENT_FIELDS:
        raw = current.get(name)
        if isinstance(raw, bool) or not isinstance(raw, (int, float)):
            return None
        value = float(raw)
        if not math.isfinite(value):
            return None
        values[name] = value
    return MarineConditions(**values)


async def fetch_marine_conditions(
    client: httpx.AsyncClient,
    latitude: float,
    longitude: float,
) -> MarineConditions | None:
    """Fetch current marine conditions for one coordinate.

    Returns None on non-2xx, transport error, timeout, or malformed payload.
    """
    params = {
        "latitude": str(latitude),
        "longitude": str(longitude),
        "current": ",".join(_CURRENT_FIELDS),
        "length_unit": "metric",
        "cell_selection": "sea",
    }
    try:
        resp = await client.get(settings.OPEN_METEO_MARINE_URL, params=params)
    except httpx.HTTPError as exc:
        logger.warning("Open-Meteo fetch failed for %s/%s: %s", latitude, longitude, exc)
        return None

    if not resp.is_success:
        logger.warning("Open-Meteo API error %d for %s/%s", resp.status_code, latitude, longitude)
        return None

    try:
        data = resp.json()
    except ValueError as exc:
        logger.warning("Open-Meteo returned invalid JSON for %s/%s: %s", latitude, longitude, exc)
        return None

    conditions = _parse_conditions(data)
    if conditions is None:
        logger.debug("Open-Meteo payload missing marine fields for %s/%s", latitude, longitude)
    return conditions


def score_marine_conditions(conditions: MarineConditions) -> WeatherRiskResult:
    """Weighted sea-state risk: 40% waves, 40% wind waves, 20% current.

    Heavy swell (> 2 m) amplifies the combined score by 1.2, capped at 100.
    """
    wave_risk = min(conditions.wave_height / WAVE_HEIGHT_THRESHOLD_M, 1.0) * 100
    wind_wave_risk = min(conditions.wind_wave_height / WIND_WAVE_THRESHOLD_M, 1.0) * 100
    current_risk = min(conditions.ocean_current_velocity / CURRENT_THRESHOLD_KMH, 1.0) * 100

    swell_multiplier = SWELL_MULTIPLIER if conditions.swell_wave_height > SWELL_THRESHOLD_M else 1.0
    overall = min(
        (wave_risk * 0.4 + wind_wave_risk * 0.4 + current_risk * 0.2) * swell_multiplier,
        100.0,
    )
    return WeatherRiskResult(
        risk_score=max(0, round(overall)),
        factors={
            "wave_height": conditions.wave_height,
            "wind_wave_height": conditions.wind_wave_height,
            "swell_wave_height": conditions.swell_wave_height,
            "current_velocity": conditions.ocean_current_velocity,
        },
    )


async def get_point_weather_risk(
    client: httpx.AsyncClient,
    latitude: float,
    longitude: float,
) -> WeatherRiskResult | None:
    conditions = await fetch_marine_conditions(client, latitude, longitude)
    if conditions is None:
        return None
    return score_marine_conditions(conditions)


async def get_route_weather_risk(
    waypoints: Sequence[Waypoint],
    client: httpx.AsyncClient | None = None,
    sample_target: int | None = None,
) -> int | None:
    """Average weather risk over sampled waypoints, or None if no point succeeded.

    Sampled points are fetched concurrently over a single client. When no
    *client* is given one is created (and closed) for this call.
    """
    if not waypoints:
        return None

    target = sample_target if sample_target is not None else settings.WEATHER_SAMPLE_TARGET
    sampled = sample_waypoints(waypoints, target)

    async def _gather(c: httpx.AsyncClient) -> list[WeatherRiskResult | None]:
        return await asyncio.gather(
            *(get_point_weather_risk(c, wp.latitude, wp.longitude) for wp in sampled)
        )

    try:
        if client is not None:
            results = await _gather(client)
        else:
            async with httpx.AsyncClient(timeout=settings.WEATHER_TIMEOUT) as own_client:
                results = await _gather(own_client)
    except Exception as exc:
        logger.error("Weather risk lookup failed: %s", exc)
        return None

    valid = [r for r in results if r is not None]
    if not valid:
        logger.info("Open-Meteo: 0/%d sampled points succeeded", len(sampled))
        return None

    logger.debug("Open-Meteo: %d/%d sampled points succeeded", len(valid), len(sampled))
    avg_risk = sum(r.risk_score for r in valid) / len(valid)
    return round(avg_risk)
