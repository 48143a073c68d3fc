from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, List, Optional

import typer

from cli.client import ApiClient
from cli.config import CLIConfig, load_config
from cli.render import echo_key_values, render_listing, render_routes, render_single
from models.records import VALUE_FIELDS


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Utilities for interacting with the sensor readings service.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        typer.secho("CLI state is uninitialized.", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    return state


def parse_value(raw: str) -> Any:
    """Interpret a value as JSON when possible, otherwise keep the string."""
    try:
        return json.loads(raw)
    except ValueError:
        return raw


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="Readings API base URL (defaults to API_BASE_URL env or http://localhost:3001).",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Seconds to wait for each HTTP request.",
    ),
) -> None:
    """Entry point for the CLI."""
    config = load_config(base_url=base_url, timeout=timeout)
    client = ApiClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


@app.command("health")
def health_command(ctx: typer.Context) -> None:
    """Check that the service is up."""
    state = _get_state(ctx)
    payload = state.client.health()
    typer.secho(f"{payload.get('status')}: {payload.get('message')}", fg=typer.colors.GREEN)


@app.command("routes")
def routes_command(ctx: typer.Context) -> None:
    """Show the route catalog published by the service."""
    state = _get_state(ctx)
    render_routes(state.client.routes())


@app.command("save")
def save_command(
    ctx: typer.Context,
    values: List[str] = typer.Argument(..., help="Exactly five values: value1 .. value5."),
) -> None:
    """Save a reading made of five values."""
    if len(values) != len(VALUE_FIELDS):
        raise typer.BadParameter(f"Expected {len(VALUE_FIELDS)} values, got {len(values)}.")
    state = _get_state(ctx)
    body = {name: parse_value(raw) for name, raw in zip(VALUE_FIELDS, values)}
    payload = state.client.save(body)
    typer.secho(f"{payload.get('message')}. id={payload['id']}", fg=typer.colors.GREEN)
    echo_key_values([("timestamp", payload.get("timestamp"))])


@app.command("list")
def list_command(
    ctx: typer.Context,
    limit: Optional[int] = typer.Option(None, "--limit", "-n", help="Maximum readings to return."),
    order_by: Optional[str] = typer.Option(None, "--order-by", help="Field to order by."),
    order: Optional[str] = typer.Option(None, "--order", help="asc or desc."),
) -> None:
    """List stored readings."""
    state = _get_state(ctx)
    render_listing(state.client.list_readings(limit=limit, order_by=order_by, order=order))


@app.command("get")
def get_command(
    ctx: typer.Context,
    reading_id: str = typer.Argument(..., help="Identifier returned from the save command."),
) -> None:
    """Fetch a single reading."""
    state = _get_state(ctx)
    render_single(state.client.get_reading(reading_id))


@app.command("latest")
def latest_command(ctx: typer.Context) -> None:
    """Fetch the most recent reading."""
    state = _get_state(ctx)
    render_single(state.client.latest())


@app.command("range")
def range_command(
    ctx: typer.Context,
    start_date: str = typer.Argument(..., help="First day, YYYY-MM-DD."),
    end_date: str = typer.Argument(..., help="Last day (inclusive), YYYY-MM-DD."),
    limit: Optional[int] = typer.Option(None, "--limit", "-n", help="Maximum readings to return."),
) -> None:
    """List readings created between two dates."""
    state = _get_state(ctx)
    render_listing(state.client.range(start_date, end_date, limit=limit))


@app.command("delete")
def delete_command(
    ctx: typer.Context,
    reading_id: str = typer.Argument(..., help="Reading to delete."),
) -> None:
    """Delete a reading."""
    state = _get_state(ctx)
    payload = state.client.delete(reading_id)
    typer.secho(f"{payload.get('message')}. id={payload.get('id')}", fg=typer.colors.GREEN)
