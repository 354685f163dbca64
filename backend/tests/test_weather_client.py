"""Tests for the Open-Meteo marine weather provider (weather_client.py).

Uses httpx.MockTransport so no request leaves the process.
"""
from __future__ import annotations

import asyncio

import httpx
import pytest

from voyagerisk.modules.route import Waypoint
from voyagerisk.modules.weather_client import (
    MarineConditions,
    fetch_marine_conditions,
    get_point_weather_risk,
    get_route_weather_risk,
    score_marine_conditions,
)


def _current(wave=2.0, wind_wave=1.5, swell=1.0, current=7.5) -> dict:
    return {
        "current": {
            "time": "2026-10-19T12:00",
            "wave_height": wave,
            "wind_wave_height": wind_wave,
            "swell_wave_height": swell,
            "ocean_current_velocity": current,
        }
    }


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def _run_with_client(handler, coro_fn):
    async def _main():
        async with _client(handler) as client:
            return await coro_fn(client)
    return asyncio.run(_main())


class TestScoreMarineConditions:
    def test_calm_sea_is_zero(self):
        assert score_marine_conditions(MarineConditions(0, 0, 0, 0)).risk_score == 0

    def test_half_thresholds(self):
        result = score_marine_conditions(MarineConditions(2.0, 1.5, 1.0, 7.5))
        assert result.risk_score == 50
        assert result.factors["wave_height"] == 2.0
        assert result.factors["current_velocity"] == 7.5

    def test_heavy_swell_multiplier(self):
        assert score_marine_conditions(MarineConditions(2.0, 1.5, 2.5, 7.5)).risk_score == 60

    def test_swell_exactly_two_is_not_heavy(self):
        assert score_marine_conditions(MarineConditions(2.0, 1.5, 2.0, 7.5)).risk_score == 50

    def test_capped_at_100(self):
        assert score_marine_conditions(MarineConditions(8.0, 6.0, 3.0, 30.0)).risk_score == 100

    def test_individual_risks_saturate(self):
        # Waves far above threshold count as 100, not more: 0.4*100 = 40
        assert score_marine_conditions(MarineConditions(40.0, 0, 0, 0)).risk_score == 40


class TestFetchMarineConditions:
    def test_success_and_request_params(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen.update(request.url.params)
            return httpx.Response(200, json=_current())

        cond = _run_with_client(handler, lambda c: fetch_marine_conditions(c, 12.5, 45.0))
        assert cond == MarineConditions(2.0, 1.5, 1.0, 7.5)
        assert seen["latitude"] == "12.5"
        assert seen["longitude"] == "45.0"
        assert seen["length_unit"] == "metric"
        assert "ocean_current_velocity" in seen["current"]
        assert "swell_wave_height" in seen["current"]

    @pytest.mark.parametrize("status", [400, 404, 429, 500, 503])
    def test_non_2xx_is_none(self, status):
        handler = lambda request: httpx.Response(status, json={"error": True, "reason": "nope"})
        assert _run_with_client(handler, lambda c: fetch_marine_conditions(c, 0, 0)) is None

    def test_transport_error_is_none(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        assert _run_with_client(handler, lambda c: fetch_marine_conditions(c, 0, 0)) is None

    def test_timeout_is_none(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        assert _run_with_client(handler, lambda c: fetch_marine_conditions(c, 0, 0)) is None

    def test_invalid_json_is_none(self):
        handler = lambda request: httpx.Response(200, content=b"<html>oops</html>")
        assert _run_with_client(handler, lambda c: fetch_marine_conditions(c, 0, 0)) is None

    def test_missing_current_block_is_none(self):
        handler = lambda request: httpx.Response(200, json={"latitude": 0})
        assert _run_with_client(handler, lambda c: fetch_marine_conditions(c, 0, 0)) is None

    def test_missing_field_is_none(self):
        payload = _current()
        del payload["current"]["ocean_current_velocity"]
        handler = lambda request: httpx.Response(200, json=payload)
        assert _run_with_client(handler, lambda c: fetch_marine_conditions(c, 0, 0)) is None

    def test_null_field_is_none(self):
        handler = lambda request: httpx.Response(200, json=_current(wave=None))
        assert _run_with_client(handler, lambda c: fetch_marine_conditions(c, 0, 0)) is None

    def test_string_field_is_none(self):
        handler = lambda request: httpx.Response(200, json=_current(swell="high"))
        assert _run_with_client(handler, lambda c: fetch_marine_conditions(c, 0, 0)) is None


class TestRouteWeatherRisk:
    def test_empty_route_is_none(self):
        assert asyncio.run(get_route_weather_risk([])) is None

    def test_average_of_successful_points(self):
        def handler(request):
            lat = float(request.url.params["latitude"])
            if lat == 1.0:
                return httpx.Response(200, json=_current(0, 0, 0, 0))        # 0
            if lat == 2.0:
                return httpx.Response(500)                                   # dropped
            return httpx.Response(200, json=_current(2.0, 1.5, 1.0, 7.5))   # 50

        route = [Waypoint(1.0, 0.0), Waypoint(2.0, 0.0), Waypoint(3.0, 0.0)]
        assert _run_with_client(handler, lambda c: get_route_weather_risk(route, client=c)) == 25

    def test_all_points_failed_is_none(self):
        handler = lambda request: httpx.Response(503)
        route = [Waypoint(float(i), 0.0) for i in range(4)]
        assert _run_with_client(handler, lambda c: get_route_weather_risk(route, client=c)) is None

    def test_sampling_bounds_request_count(self):
        calls = []

        def handler(request):
            calls.append(float(request.url.params["latitude"]))
            return httpx.Response(200, json=_current())

        route = [Waypoint(float(i), 0.0) for i in range(10)]
        result = _run_with_client(handler, lambda c: get_route_weather_risk(route, client=c, sample_target=5))
        assert result == 50
        assert sorted(calls) == [0.0, 2.0, 4.0, 6.0, 8.0]


class TestPointWeatherRisk:
    def test_scored_point(self):
        handler = lambda request: httpx.Response(200, json=_current(2.0, 1.5, 2.5, 7.5))
        result = _run_with_client(handler, lambda c: get_point_weather_risk(c, 12.5, 45.0))
        assert result.risk_score == 60
        assert result.factors["swell_wave_height"] == 2.5

    def test_failed_point_is_none(self):
        handler = lambda request: httpx.Response(502)
        assert _run_with_client(handler, lambda c: get_point_weather_risk(c, 12.5, 45.0)) is None
