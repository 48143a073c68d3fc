from __future__ import annotations

from typing import Any, Dict, Iterable

import typer

from models.records import VALUE_FIELDS


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def render_reading(reading: Dict[str, Any]) -> None:
    pairs = [("id", reading.get("id"))]
    pairs.extend((name, reading.get(name)) for name in VALUE_FIELDS)
    pairs.append(("timestamp", reading.get("timestamp")))
    pairs.append(("createdAt", reading.get("createdAt")))
    echo_key_values(pairs)


def render_single(payload: Dict[str, Any]) -> None:
    echo_heading(payload.get("message") or "Reading")
    reading = payload.get("data")
    if reading:
        render_reading(reading)
    else:
        typer.echo("No reading available.")


def render_listing(payload: Dict[str, Any]) -> None:
    echo_heading(payload.get("message") or "Readings")
    date_range = payload.get("range")
    if date_range:
        typer.echo(f"range: {date_range.get('startDate')} .. {date_range.get('endDate')}")
    typer.echo(f"count: {payload.get('count', 0)}")
    for reading in payload.get("data") or []:
        typer.echo()
        render_reading(reading)


def render_routes(payload: Dict[str, Any]) -> None:
    echo_heading(payload.get("message") or "Routes")
    typer.echo(f"baseUrl: {payload.get('baseUrl')}")
    for route in payload.get("routes") or []:
        typer.echo(f"  {route.get('method'):<6} {route.get('path'):<12} {route.get('description')}")
