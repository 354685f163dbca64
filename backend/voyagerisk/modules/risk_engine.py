"""Route risk engine — composite voyage risk from four independent factors.

Factors and sources:
  weather  — Open-Meteo Marine (live), falls back to simulated weather zones
  piracy   — simulated piracy zones (no live source)
  traffic  — aisstream.io vessel density (live, needs API key), falls back to
             simulated traffic zones
  claims   — simulated claims zones (no live source)

The four factors resolve concurrently. Each resolution always yields a score:
a live provider answering None (or blowing up) is replaced by the simulated
estimator inside that factor, so the engine as a whole cannot fail.

overall = round(weather×0.25 + piracy×0.35 + traffic×0.20 + claims×0.20)
"""
from __future__ import annotations

import asyncio
import logging
import math
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Iterable, Optional, Sequence

from voyagerisk.config import settings
from voyagerisk.modules.risk_zones import RiskFactor, ZoneTable, load_risk_zones
from voyagerisk.modules.route import RiskScores, Waypoint, clamp_score, coerce_waypoints, combine_scores
from voyagerisk.modules.simulated_risk import RandomSource, simulated_risk
from voyagerisk.modules.traffic_client import get_route_traffic_risk
from voyagerisk.modules.weather_client import get_route_weather_risk

logger = logging.getLogger(__name__)

SOURCE_LIVE = "live"
SOURCE_SIMULATED = "simulated"

WeatherProvider = Callable[[Sequence[Waypoint]], Awaitable[Optional[int]]]
TrafficProvider = Callable[[Sequence[Waypoint], Optional[str]], Awaitable[Optional[int]]]


@dataclass(frozen=True)
class FactorResolution:
    factor: RiskFactor
    score: int
    source: str  # SOURCE_LIVE or SOURCE_SIMULATED


@dataclass(frozen=True)
class RouteRiskResult:
    scores: RiskScores
    factors: tuple[FactorResolution, ...]

    def as_dict(self) -> dict[str, Any]:
        return {
            **self.scores.as_dict(),
            "sources": {r.factor.value: r.source for r in self.factors},
        }


async def resolve_with_fallback(
    factor: RiskFactor,
    external: Callable[[], Awaitable[int | None]] | None,
    simulated: Callable[[], int],
) -> FactorResolution:
    """Try the live provider, then the simulated estimator.

    *simulated* is only evaluated when *external* is missing, answers None
    or a non-numeric/non-finite value, or raises.
    """
    if external is not None:
        try:
            raw = await external()
            score = None if raw is None else float(raw)
        except Exception as exc:
            logger.error("%s provider raised, using simulated data: %s", factor.value, exc)
            score = None
        if score is not None and not math.isfinite(score):
            logger.error("%s provider returned non-finite score %r", factor.value, raw)
            score = None
        if score is not None:
            logger.info("Live %s risk: %d", factor.value, score)
            return FactorResolution(factor, clamp_score(score), SOURCE_LIVE)
        logger.warning("Live %s source unavailable, using simulated data", factor.value)

    return FactorResolution(factor, simulated(), SOURCE_SIMULATED)


class RouteRiskEngine:
    """Composite risk calculator with injected zones, credentials and providers.

    Args:
        zones: Zone table for the simulated estimator. Defaults to load_risk_zones().
        api_key: aisstream.io key. Defaults to settings.AISSTREAM_API_KEY; an
            empty key means traffic never touches the network.
        rng: Random source for simulated jitter (inject a zero source for
            deterministic output).
        weather_provider: async (waypoints) -> int | None.
        traffic_provider: async (waypoints, api_key) -> int | None.
        live: False disables both live providers (offline mode).
    """

    def __init__(
        self,
        zones: ZoneTable | None = None,
        api_key: str | None = None,
        rng: RandomSource | None = None,
        weather_provider: WeatherProvider | None = None,
        traffic_provider: TrafficProvider | None = None,
        live: bool = True,
    ) -> None:
        self.zones = zones if zones is not None else load_risk_zones()
        self.api_key = api_key if api_key is not None else settings.AISSTREAM_API_KEY
        self.rng = rng
        self.weather_provider = weather_provider or get_route_weather_risk
        self.traffic_provider = traffic_provider or get_route_traffic_risk
        self.live = live

    def _simulated(self, factor: RiskFactor, waypoints: Sequence[Waypoint]) -> Callable[[], int]:
        def _run() -> int:
            return simulated_risk(waypoints, self.zones.get(factor, ()), self.rng)
        return _run

    async def _weather(self, waypoints: Sequence[Waypoint]) -> FactorResolution:
        external = None
        if self.live:
            external = lambda: self.weather_provider(waypoints)  # noqa: E731
        return await resolve_with_fallback(
            RiskFactor.WEATHER, external, self._simulated(RiskFactor.WEATHER, waypoints)
        )

    async def _traffic(self, waypoints: Sequence[Waypoint]) -> FactorResolution:
        external = None
        if self.live and self.api_key:
            external = lambda: self.traffic_provider(waypoints, self.api_key)  # noqa: E731
        elif self.live:
            logger.info("aisstream.io API key not configured, using simulated traffic data")
        return await resolve_with_fallback(
            RiskFactor.TRAFFIC, external, self._simulated(RiskFactor.TRAFFIC, waypoints)
        )

    async def _simulated_only(self, factor: RiskFactor, waypoints: Sequence[Waypoint]) -> FactorResolution:
        return await resolve_with_fallback(factor, None, self._simulated(factor, waypoints))

    async def calculate_detailed(self, waypoints: Iterable[Any]) -> RouteRiskResult:
        """Scores plus the source used for each factor."""
        route = coerce_waypoints(waypoints)
        if not route:
            return RouteRiskResult(scores=RiskScores.zero(), factors=())

        logger.info("Calculating risk for route with %d waypoints", len(route))
        weather, piracy, traffic, claims = await asyncio.gather(
            self._weather(route),
            self._simulated_only(RiskFactor.PIRACY, route),
            self._traffic(route),
            self._simulated_only(RiskFactor.CLAIMS, route),
        )
        scores = combine_scores(weather.score, piracy.score, traffic.score, claims.score)
        logger.info(
            "Risk calculation complete: overall=%d weather=%d piracy=%d traffic=%d claims=%d",
            scores.overall, scores.weather, scores.piracy, scores.traffic, scores.claims,
        )
        return RouteRiskResult(scores=scores, factors=(weather, piracy, traffic, claims))

    async def calculate(self, waypoints: Iterable[Any]) -> RiskScores:
        result = await self.calculate_detailed(waypoints)
        return result.scores


async def calculate_route_risk(waypoints: Iterable[Any], **engine_kwargs: Any) -> RiskScores:
    """Composite risk for an ordered list of waypoints.

    Empty input returns all zeros without consulting any provider.
    """
    return await RouteRiskEngine(**engine_kwargs).calculate(waypoints)


def calculate_route_risk_sync(waypoints: Iterable[Any], **engine_kwargs: Any) -> RiskScores:
    """Blocking wrapper for callers without a running event loop (CLI, scripts)."""
    return asyncio.run(calculate_route_risk(waypoints, **engine_kwargs))
