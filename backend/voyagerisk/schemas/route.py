"""Pydantic schemas for route risk requests and responses."""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class WaypointIn(BaseModel):
    latitude: float = Field(..., ge=-90.0, le=90.0, allow_inf_nan=False)
    longitude: float = Field(..., ge=-180.0, le=180.0, allow_inf_nan=False)
    # Accepted from the client envelope; array order is authoritative
    sequence: Optional[int] = None


class RouteRiskRequest(BaseModel):
    waypoints: list[WaypointIn]


class RiskScoresResponse(BaseModel):
    overall: int = Field(..., ge=0, le=100)
    weather: int = Field(..., ge=0, le=100)
    piracy: int = Field(..., ge=0, le=100)
    traffic: int = Field(..., ge=0, le=100)
    claims: int = Field(..., ge=0, le=100)


class RiskDetailResponse(RiskScoresResponse):
    sources: dict[str, str] = Field(default_factory=dict)


class RouteDistanceResponse(BaseModel):
    waypoint_count: int
    distance_km: float
    distance_nm: float
    formatted_km: str
    formatted_nm: str


class RiskZoneOut(BaseModel):
    name: str
    factor: str
    min_lat: float
    max_lat: float
    min_lng: float
    max_lng: float
