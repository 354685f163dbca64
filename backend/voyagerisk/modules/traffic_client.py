"""aisstream.io WebSocket client — vessel traffic density around route points.

For each sampled waypoint a short-lived session subscribes to PositionReport
messages inside a ~55 km box, counts distinct vessels for a fixed window and
closes. Density (vessels/km²) maps to a 0-100 score via a piecewise-linear
curve.

A point whose session could not be opened, or that was closed/errored before
its window elapsed, is *unavailable* (None) and is excluded from the route
average. A session that ran its full window and saw no vessels is a valid
density of 0. The two are never conflated.

Usage:
    from voyagerisk.modules.traffic_client import get_route_traffic_risk
    score = asyncio.run(get_route_traffic_risk(waypoints, api_key))
"""
from __future__ import annotations

import asyncio
import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Sequence

import websockets

from voyagerisk.config import settings
from voyagerisk.modules.route import Waypoint
from voyagerisk.modules.sampling import sample_waypoints

logger = logging.getLogger(__name__)

_KM_PER_DEGREE = 111.0

_SESSION_ERRORS = (websockets.WebSocketException, OSError, asyncio.TimeoutError)


@dataclass(frozen=True)
class TrafficSample:
    vessel_count: int
    vessel_density: float  # vessels per km²
    risk_score: int


def bounding_box(latitude: float, longitude: float, radius_deg: float = 0.5) -> list[list[float]]:
    """Return [[lat_min, lon_min], [lat_max, lon_max]] around a point."""
    return [
        [latitude - radius_deg, longitude - radius_deg],
        [latitude + radius_deg, longitude + radius_deg],
    ]


def bbox_area_km2(radius_deg: float) -> float:
    """Approximate box area, treating 1° as 111 km on both axes."""
    side = 2 * radius_deg * _KM_PER_DEGREE
    return side * side


def density_to_score(density: float) -> int:
    """Map vessel density to 0-100.

    Thresholds: <0.01 low, 0.01-0.05 medium, 0.05-0.1 high, >=0.1 critical.
    """
    if density < 0.01:
        score = min(density * 1000, 20.0)
    elif density < 0.05:
        score = 20 + (density - 0.01) / 0.04 * 30
    elif density < 0.1:
        score = 50 + (density - 0.05) / 0.05 * 30
    else:
        score = min(80 + (density - 0.1) * 200, 100.0)
    return max(0, round(score))


def _extract_vessel_id(raw_msg: Any) -> str | None:
    """Return the vessel identifier of a PositionReport message, else None."""
    try:
        msg = json.loads(raw_msg)
    except (TypeError, ValueError):
        logger.debug("Skipping unparseable AIS message")
        return None
    if not isinstance(msg, dict):
        return None
    if "error" in msg:
        logger.warning("aisstream.io error message: %s", msg["error"])
        return None
    if msg.get("MessageType") != "PositionReport":
        return None

    body = msg.get("Message")
    report = body.get("PositionReport") if isinstance(body, dict) else None
    meta = msg.get("MetaData")
    vessel_id = report.get("UserID") if isinstance(report, dict) else None
    if not vessel_id and isinstance(meta, dict):
        vessel_id = meta.get("MMSI")
    if not vessel_id or not isinstance(vessel_id, (int, str)):
        logger.debug("Skipping malformed PositionReport")
        return None
    return str(vessel_id)


async def _collect_vessels(ws: Any, window_seconds: float) -> set[str]:
    """Read messages until the window elapses; returns distinct vessel ids.

    Raises websockets.ConnectionClosed if the feed closes early.
    """
    vessels: set[str] = set()
    deadline = time.monotonic() + window_seconds
    while True:
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            break
        try:
            raw_msg = await asyncio.wait_for(ws.recv(), timeout=remaining)
        except asyncio.TimeoutError:
            break
        vessel_id = _extract_vessel_id(raw_msg)
        if vessel_id:
            vessels.add(vessel_id)
    return vessels


async def get_vessel_density(
    latitude: float,
    longitude: float,
    api_key: str | None,
    session_seconds: float = 10.0,
    radius_deg: float | None = None,
) -> TrafficSample | None:
    """Measure vessel density around one point.

    Returns None without connecting if *api_key* is empty, and None if the
    session fails at any stage before its window completes.
    """
    if not api_key:
        logger.debug("aisstream.io API key not configured — skipping traffic query")
        return None

    radius = radius_deg if radius_deg is not None else settings.TRAFFIC_BBOX_RADIUS_DEG
    subscription = {
        "APIKey": api_key,
        "BoundingBoxes": [bounding_box(latitude, longitude, radius)],
        "FilterMessageTypes": ["PositionReport"],
    }

    try:
        async with websockets.connect(
            settings.AISSTREAM_WS_URL,
            open_timeout=settings.AISSTREAM_OPEN_TIMEOUT,
        ) as ws:
            await ws.send(json.dumps(subscription))
            vessels = await _collect_vessels(ws, session_seconds)
    except websockets.ConnectionClosed as exc:
        logger.warning(
            "aisstream.io session closed early for %s/%s: %s", latitude, longitude, exc
        )
        return None
    except _SESSION_ERRORS as exc:
        logger.warning(
            "aisstream.io session failed for %s/%s: %s", latitude, longitude, exc
        )
        return None

    vessel_count = len(vessels)
    density = vessel_count / bbox_area_km2(radius)
    sample = TrafficSample(
        vessel_count=vessel_count,
        vessel_density=density,
        risk_score=density_to_score(density),
    )
    logger.debug(
        "aisstream.io %s/%s: %d vessels, density %.4f/km², score %d",
        latitude, longitude, vessel_count, density, sample.risk_score,
    )
    return sample


async def get_route_traffic_risk(
    waypoints: Sequence[Waypoint],
    api_key: str | None,
    session_seconds: float | None = None,
    sample_target: int | None = None,
) -> int | None:
    """Average traffic risk over sampled waypoints, or None if unavailable.

    Sessions run one at a time so the upstream feed sees at most one
    subscription from us.
    """
    if not waypoints or not api_key:
        return None

    window = session_seconds if session_seconds is not None else settings.TRAFFIC_SESSION_SECONDS
    target = sample_target if sample_target is not None else settings.TRAFFIC_SAMPLE_TARGET
    sampled = sample_waypoints(waypoints, target)

    results: list[TrafficSample] = []
    for wp in sampled:
        sample = await get_vessel_density(wp.latitude, wp.longitude, api_key, window)
        if sample is not None:
            results.append(sample)

    if not results:
        logger.info("aisstream.io: 0/%d sampled points succeeded", len(sampled))
        return None

    avg_risk = sum(r.risk_score for r in results) / len(results)
    return round(avg_risk)
