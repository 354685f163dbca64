"""VoyageRisk CLI — composite maritime voyage risk from the command line.

Commands:
  score     — risk scores for a route (points or JSON file)
  zones     — list the static risk zones
  distance  — great-circle length of a route
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from voyagerisk.modules.route import Waypoint, coerce_waypoints

app = typer.Typer(
    name="voyagerisk",
    help="Composite maritime voyage risk scoring.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)
console = Console()


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command("score")
def score(
    point: Optional[List[str]] = typer.Option(None, "--point", "-p", help="Waypoint as LAT,LON (repeatable, in route order)"),
    file: Optional[Path] = typer.Option(None, "--file", "-f", help="JSON route file"),
    offline: bool = typer.Option(False, "--offline", help="Skip live weather/traffic sources"),
    as_json: bool = typer.Option(False, "--json", help="Print raw JSON instead of a table"),
):
    """Calculate composite risk for a route."""
    waypoints = _load_waypoints(point, file)

    from voyagerisk.config import settings
    logging.basicConfig(level=settings.LOG_LEVEL)

    try:
        import asyncio
        from voyagerisk.modules.risk_engine import RouteRiskEngine

        engine = RouteRiskEngine(live=not offline)
        with console.status("[bold]Calculating route risk..."):
            result = asyncio.run(engine.calculate_detailed(waypoints))
    except Exception as e:
        console.print(f"[red]Risk calculation failed: {e}[/red]")
        raise typer.Exit(1)

    if as_json:
        console.print_json(json.dumps(result.as_dict()))
        return
    _print_scores(console, result)


@app.command("zones")
def zones():
    """List the static risk zones used by the simulated estimator."""
    from voyagerisk.modules.risk_zones import load_risk_zones

    table = Table(title="Risk zones")
    table.add_column("Factor", style="cyan")
    table.add_column("Zone")
    table.add_column("Latitude", justify="right")
    table.add_column("Longitude", justify="right")
    for factor, zone_list in load_risk_zones().items():
        for z in zone_list:
            table.add_row(
                factor.value,
                z.name,
                f"{z.min_lat:g} to {z.max_lat:g}",
                f"{z.min_lng:g} to {z.max_lng:g}",
            )
    console.print(table)


@app.command("distance")
def distance(
    point: Optional[List[str]] = typer.Option(None, "--point", "-p", help="Waypoint as LAT,LON (repeatable)"),
    file: Optional[Path] = typer.Option(None, "--file", "-f", help="JSON route file"),
):
    """Print the great-circle length of a route."""
    from voyagerisk.utils.geo import format_distance, format_nautical_miles, route_distance_km

    waypoints = _load_waypoints(point, file)
    km = route_distance_km((wp.latitude, wp.longitude) for wp in waypoints)
    console.print(
        f"{len(waypoints)} waypoints, [bold]{format_distance(km)}[/bold] "
        f"({format_nautical_miles(km)})"
    )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _parse_point(s: str) -> Waypoint:
    """Parse 'LAT,LON' into a Waypoint."""
    parts = [p.strip() for p in s.split(",")]
    if len(parts) != 2:
        raise ValueError(f"expected LAT,LON, got '{s}'")
    return Waypoint(float(parts[0]), float(parts[1]))


def _read_route_file(path: Path) -> tuple[Waypoint, ...]:
    """Read a route JSON: a list of waypoints or {"waypoints": [...]}."""
    with open(path) as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get("waypoints")
    if not isinstance(data, list):
        raise ValueError("route file must contain a list of waypoints")
    return coerce_waypoints(data)


def _load_waypoints(points: Optional[List[str]], file: Optional[Path]) -> tuple[Waypoint, ...]:
    if not points and file is None:
        console.print("[red]Provide waypoints with --point or --file[/red]")
        raise typer.Exit(2)
    try:
        if file is not None:
            return _read_route_file(file)
        return tuple(_parse_point(p) for p in points or [])
    except (OSError, ValueError, KeyError, TypeError) as e:
        console.print(f"[red]Invalid route: {e}[/red]")
        raise typer.Exit(2)


def _print_scores(con: Console, result) -> None:
    sources = {r.factor.value: r.source for r in result.factors}
    scores = result.scores.as_dict()

    table = Table(title="Route risk")
    table.add_column("Factor", style="cyan")
    table.add_column("Score", justify="right")
    table.add_column("Source")
    for name in ("weather", "piracy", "traffic", "claims"):
        table.add_row(name, str(scores[name]), sources.get(name, "-"))
    table.add_row("[bold]overall[/bold]", f"[bold]{scores['overall']}[/bold]", "")
    con.print(table)
