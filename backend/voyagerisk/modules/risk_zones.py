"""Geographic risk zones — coarse rectangular classification per risk factor.

Zones are static, axis-aligned lat/lng rectangles tagged with exactly one
factor. A point is "in" a factor's hazard area if it falls inside at least one
of that factor's zones; overlaps need no resolution.

The zone table is loaded from risk_zones.yaml when present, otherwise the
compiled-in defaults below are used. Tables are immutable once built and are
handed to the engine at construction time.
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterable, Mapping

import yaml

from voyagerisk.config import settings

logger = logging.getLogger(__name__)


class RiskFactor(str, enum.Enum):
    WEATHER = "weather"
    PIRACY = "piracy"
    TRAFFIC = "traffic"
    CLAIMS = "claims"


@dataclass(frozen=True)
class RiskZone:
    name: str
    factor: RiskFactor
    min_lat: float
    max_lat: float
    min_lng: float
    max_lng: float


ZoneTable = Mapping[RiskFactor, tuple[RiskZone, ...]]


_DEFAULT_ZONES: tuple[RiskZone, ...] = (
    RiskZone("Gulf of Aden", RiskFactor.PIRACY, 0, 15, 40, 60),
    RiskZone("Southeast Asia", RiskFactor.PIRACY, -5, 10, 90, 110),
    RiskZone("Monsoon region", RiskFactor.WEATHER, 10, 30, 40, 80),
    RiskZone("Pacific typhoon belt", RiskFactor.WEATHER, 20, 40, 120, 160),
    RiskZone("Malacca Strait", RiskFactor.TRAFFIC, 1, 5, 100, 106),
    RiskZone("Gibraltar Strait", RiskFactor.TRAFFIC, 30, 40, -10, 10),
    RiskZone("Arabian Sea", RiskFactor.CLAIMS, 5, 20, 65, 85),
    RiskZone("Mediterranean", RiskFactor.CLAIMS, 35, 45, 10, 30),
)


def point_in_zone(lat: float, lng: float, zone: RiskZone) -> bool:
    """Inclusive rectangle test. Out-of-range coordinates simply don't match."""
    return zone.min_lat <= lat <= zone.max_lat and zone.min_lng <= lng <= zone.max_lng


def in_any_zone(lat: float, lng: float, zones: Iterable[RiskZone]) -> bool:
    return any(point_in_zone(lat, lng, z) for z in zones)


def build_zone_table(zones: Iterable[RiskZone]) -> ZoneTable:
    """Group zones by factor into a read-only mapping.

    Every factor is present in the result, possibly with an empty tuple.
    """
    grouped: dict[RiskFactor, list[RiskZone]] = {f: [] for f in RiskFactor}
    for zone in zones:
        grouped[zone.factor].append(zone)
    return MappingProxyType({f: tuple(zs) for f, zs in grouped.items()})


def default_zone_table() -> ZoneTable:
    return build_zone_table(_DEFAULT_ZONES)


def _parse_zone(factor_name: str, entry: Any) -> RiskZone | None:
    """Parse one YAML zone entry; returns None (with a warning) if malformed."""
    try:
        factor = RiskFactor(factor_name)
    except ValueError:
        logger.warning("risk_zones.yaml: unknown factor '%s' — skipping", factor_name)
        return None
    if not isinstance(entry, dict):
        logger.warning("risk_zones.yaml: %s entry is not a mapping — skipping", factor_name)
        return None
    try:
        zone = RiskZone(
            name=str(entry.get("name") or f"{factor_name} zone"),
            factor=factor,
            min_lat=float(entry["min_lat"]),
            max_lat=float(entry["max_lat"]),
            min_lng=float(entry["min_lng"]),
            max_lng=float(entry["max_lng"]),
        )
    except (KeyError, TypeError, ValueError) as exc:
        logger.warning("risk_zones.yaml: malformed %s zone %r: %s", factor_name, entry, exc)
        return None
    if zone.min_lat > zone.max_lat or zone.min_lng > zone.max_lng:
        logger.warning("risk_zones.yaml: %s zone '%s' has min > max — skipping", factor_name, zone.name)
        return None
    return zone


def parse_zone_config(config: Mapping[str, Any]) -> ZoneTable:
    """Build a zone table from the parsed YAML document ``{factor: [zone, ...]}``."""
    zones: list[RiskZone] = []
    for factor_name, entries in config.items():
        if not isinstance(entries, list):
            logger.warning("risk_zones.yaml: section '%s' is not a list — skipping", factor_name)
            continue
        for entry in entries:
            zone = _parse_zone(str(factor_name), entry)
            if zone is not None:
                zones.append(zone)
    return build_zone_table(zones)


_ZONE_TABLE: ZoneTable | None = None


def load_risk_zones(path: str | Path | None = None) -> ZoneTable:
    """Lazy-load and cache the zone table.

    Passing an explicit *path* bypasses the cache.
    """
    global _ZONE_TABLE
    if path is None and _ZONE_TABLE is not None:
        return _ZONE_TABLE

    config_path = Path(path or settings.RISK_ZONES_CONFIG)
    if path is None and not config_path.is_absolute() and not config_path.exists():
        # config/ is at repo root (one level above backend/)
        config_path = Path(__file__).resolve().parents[3] / config_path
    if not config_path.exists():
        logger.warning("risk_zones.yaml not found at %s — using built-in zones", config_path)
        table = default_zone_table()
    else:
        try:
            with open(config_path) as f:
                config = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as exc:
            logger.warning("risk_zones.yaml at %s could not be read (%s) — using built-in zones", config_path, exc)
            config = None
        if config is None:
            table = default_zone_table()
        elif not isinstance(config, dict):
            logger.warning("risk_zones.yaml at %s is not a mapping — using built-in zones", config_path)
            table = default_zone_table()
        else:
            table = parse_zone_config(config)
            missing = [f.value for f in RiskFactor if not table[f]]
            if missing:
                logger.warning("risk_zones.yaml has no zones for: %s", ", ".join(missing))

    if path is None:
        _ZONE_TABLE = table
    return table


def reload_risk_zones() -> ZoneTable:
    """Force-reload the zone table from disk (e.g. after YAML edits)."""
    global _ZONE_TABLE
    _ZONE_TABLE = None
    return load_risk_zones()
