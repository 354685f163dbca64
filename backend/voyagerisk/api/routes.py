from __future__ import annotations

import logging

from fastapi import APIRouter

from voyagerisk.modules.risk_engine import RouteRiskEngine
from voyagerisk.modules.risk_zones import load_risk_zones
from voyagerisk.schemas.error import ErrorResponse
from voyagerisk.schemas.route import (
    RiskDetailResponse,
    RiskScoresResponse,
    RiskZoneOut,
    RouteDistanceResponse,
    RouteRiskRequest,
)
from voyagerisk.utils.geo import (
    format_distance,
    format_nautical_miles,
    km_to_nautical_miles,
    route_distance_km,
)

logger = logging.getLogger(__name__)

router = APIRouter()

_ERROR_RESPONSES = {500: {"model": ErrorResponse}}


# ---------------------------------------------------------------------------
# Risk
# ---------------------------------------------------------------------------

@router.post("/risk", response_model=RiskScoresResponse, tags=["risk"], responses=_ERROR_RESPONSES)
async def calculate_risk(body: RouteRiskRequest):
    """Composite voyage risk (overall + weather/piracy/traffic/claims)."""
    scores = await RouteRiskEngine().calculate(body.waypoints)
    return scores.as_dict()


@router.post("/risk/detailed", response_model=RiskDetailResponse, tags=["risk"], responses=_ERROR_RESPONSES)
async def calculate_risk_detailed(body: RouteRiskRequest):
    """Composite risk plus the data source (live/simulated) used per factor."""
    result = await RouteRiskEngine().calculate_detailed(body.waypoints)
    return result.as_dict()


@router.get("/risk/zones", response_model=list[RiskZoneOut], tags=["risk"])
def list_risk_zones():
    """Active static risk zones used by the simulated estimator."""
    table = load_risk_zones()
    return [
        {
            "name": z.name,
            "factor": z.factor.value,
            "min_lat": z.min_lat,
            "max_lat": z.max_lat,
            "min_lng": z.min_lng,
            "max_lng": z.max_lng,
        }
        for zones in table.values()
        for z in zones
    ]


# ---------------------------------------------------------------------------
# Route geometry
# ---------------------------------------------------------------------------

@router.post("/route/distance", response_model=RouteDistanceResponse, tags=["route"])
def route_distance(body: RouteRiskRequest):
    """Great-circle length of the route, summed leg by leg."""
    km = route_distance_km((wp.latitude, wp.longitude) for wp in body.waypoints)
    return {
        "waypoint_count": len(body.waypoints),
        "distance_km": round(km, 3),
        "distance_nm": round(km_to_nautical_miles(km), 3),
        "formatted_km": format_distance(km),
        "formatted_nm": format_nautical_miles(km),
    }
