from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

import typer

from cli.client import ApiClient
from cli.config import CLIConfig, load_config
from cli.render import render_heatmap, render_palettes
from services.sample_reader import read_samples


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Render hourly sensor statistics as a day-by-hour heatmap.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=1, message="CLI state is uninitialized.")
    return state


def _parse_bound(value: Optional[str], name: str) -> Union[float, str, None]:
    if value is None or value == "auto":
        return value
    try:
        return float(value)
    except ValueError as exc:
        raise typer.BadParameter(f"`{name}` needs to be either `auto` or a number.") from exc


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="Heatmap API base URL (defaults to API_BASE_URL env or http://localhost:8000).",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Request timeout in seconds.",
    ),
) -> None:
    """Entry point for the CLI."""
    config = load_config(base_url=base_url, timeout=timeout)
    client = ApiClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


@app.command("render")
def render_command(
    ctx: typer.Context,
    file: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="CSV with start,sum,mean columns."),
    state_class: str = typer.Option(
        "measurement",
        "--state-class",
        "-s",
        help="`measurement` for instantaneous values, `total_increasing` for running totals.",
    ),
    scale: Optional[str] = typer.Option(None, "--scale", help="Built-in palette name."),
    device_class: Optional[str] = typer.Option(
        None, "--device-class", help="Picks the default palette when --scale is omitted."
    ),
    minimum: Optional[str] = typer.Option(None, "--min", help="Range minimum: a number or `auto`."),
    maximum: Optional[str] = typer.Option(None, "--max", help="Range maximum: a number or `auto`."),
    unit_system: Optional[str] = typer.Option(None, "--unit-system", help="Temperature unit, `°C` or `°F`."),
    locale: Optional[str] = typer.Option(None, "--locale", help="Locale for day labels, e.g. `en` or `de`."),
    unit: str = typer.Option("", "--unit", help="Unit shown next to legend values."),
    show_values: bool = typer.Option(False, "--values/--blocks", help="Print numbers instead of color blocks."),
) -> None:
    """Render a CSV of hourly statistics as a heatmap."""
    state = _get_state(ctx)
    try:
        batch = read_samples(file.read_text(encoding="utf-8"))
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc

    for error in batch.errors:
        typer.secho(f"Skipped row {error.row_number}: {error.reason}", fg=typer.colors.YELLOW, err=True)

    payload: Dict[str, Any] = {
        "samples": [
            {"start": sample.start.isoformat(), "sum": sample.sum, "mean": sample.mean}
            for sample in batch.samples
        ],
        "state_class": state_class,
        "device_class": device_class,
        "scale": scale,
        "data": {"min": _parse_bound(minimum, "min"), "max": _parse_bound(maximum, "max")},
        "unit_system": unit_system,
        "locale": locale,
    }
    result = state.client.assemble(payload)
    render_heatmap(result, unit=unit, show_values=show_values)


@app.command("palettes")
def palettes_command(ctx: typer.Context) -> None:
    """List the built-in palettes."""
    state = _get_state(ctx)
    render_palettes(state.client.palettes())
