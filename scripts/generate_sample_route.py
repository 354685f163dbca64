#!/usr/bin/env python3
"""Generate sample route JSON files for the VoyageRisk CLI.

Each route is a list of {latitude, longitude, sequence} waypoints, densified
by linear interpolation between a few anchor points so the sampling policy
has something to thin out:
  suez-singapore   — Red Sea, Gulf of Aden, Arabian Sea, Malacca (high piracy/claims)
  med-transit      — Gibraltar to Piraeus (traffic + Mediterranean claims)
  south-pacific    — far from every zone (low baseline)

Usage:
    python scripts/generate_sample_route.py suez-singapore -o route.json
    voyagerisk score --file route.json
"""
from __future__ import annotations

import json
import sys
from pathlib import Path

import typer

# Ensure the backend package is importable when running from repo root.
_backend_dir = Path(__file__).resolve().parent.parent / "backend"
if str(_backend_dir) not in sys.path:
    sys.path.insert(0, str(_backend_dir))

from voyagerisk.utils.geo import format_distance, route_distance_km

cli = typer.Typer(help="Generate sample routes for VoyageRisk development/testing.")

# ---------------------------------------------------------------------------
# Route definitions (anchor points, lat/lon)
# ---------------------------------------------------------------------------

ROUTES: dict[str, list[tuple[float, float]]] = {
    "suez-singapore": [
        (29.9, 32.6),    # Suez
        (20.0, 38.5),    # Red Sea
        (12.5, 45.0),    # Gulf of Aden
        (12.0, 55.0),
        (10.0, 72.0),    # Arabian Sea
        (6.0, 90.0),
        (3.0, 100.5),    # Malacca Strait
        (1.3, 103.8),    # Singapore
    ],
    "med-transit": [
        (36.0, -5.6),    # Gibraltar
        (37.5, 2.0),
        (38.0, 10.0),
        (36.5, 15.5),
        (37.9, 23.6),    # Piraeus
    ],
    "south-pacific": [
        (-45.0, -170.0),
        (-50.0, -150.0),
        (-55.0, -130.0),
        (-60.0, -110.0),
    ],
}


def densify(anchors: list[tuple[float, float]], steps_per_leg: int) -> list[tuple[float, float]]:
    """Insert *steps_per_leg* - 1 evenly spaced points between consecutive anchors."""
    if len(anchors) < 2 or steps_per_leg <= 1:
        return list(anchors)
    points: list[tuple[float, float]] = []
    for (lat1, lon1), (lat2, lon2) in zip(anchors, anchors[1:]):
        for i in range(steps_per_leg):
            t = i / steps_per_leg
            points.append((round(lat1 + (lat2 - lat1) * t, 4), round(lon1 + (lon2 - lon1) * t, 4)))
    points.append(anchors[-1])
    return points


@cli.command()
def generate(
    route: str = typer.Argument("suez-singapore", help=f"One of: {', '.join(ROUTES)}"),
    output: Path = typer.Option(Path("route.json"), "--output", "-o", help="Output JSON path"),
    steps: int = typer.Option(5, "--steps", help="Points per leg after densifying"),
) -> None:
    """Write a sample route to OUTPUT."""
    if route not in ROUTES:
        typer.echo(f"Error: unknown route '{route}'", err=True)
        raise typer.Exit(1)

    points = densify(ROUTES[route], steps)
    waypoints = [
        {"latitude": lat, "longitude": lon, "sequence": i}
        for i, (lat, lon) in enumerate(points)
    ]
    output.write_text(json.dumps({"waypoints": waypoints}, indent=2))

    km = route_distance_km(points)
    typer.echo(f"Wrote {len(waypoints)} waypoints ({format_distance(km)}) to {output}")


if __name__ == "__main__":
    cli()
