from __future__ import annotations

from typing import Any, Dict, Iterable, Optional, Tuple

import typer
from coloraide import Color

_EMPTY_CELL = "··"
_FILLED_CELL = "██"


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def css_to_rgb(color: Optional[str]) -> Optional[Tuple[int, int, int]]:
    """Any CSS color coloraide understands, as 8-bit sRGB; ``None`` if unparsable."""
    if not color:
        return None
    try:
        srgb = Color(color).convert("srgb").normalize()
    except ValueError:
        return None
    channels = (srgb.get(name) for name in ("red", "green", "blue"))
    return tuple(round(min(max(value, 0.0), 1.0) * 255) for value in channels)  # type: ignore[return-value]


def _cell(value: Optional[float], color: Optional[str], show_values: bool) -> str:
    if value is None:
        return _EMPTY_CELL if not show_values else f"{'-':>7}"
    text = f"{value:>7.2f}" if show_values else _FILLED_CELL
    rgb = css_to_rgb(color)
    if rgb is None:
        return text
    return typer.style(text, fg=rgb)


def render_heatmap(payload: Dict[str, Any], unit: str = "", show_values: bool = False) -> None:
    scale = payload.get("scale") or {}
    value_range = payload.get("range") or {}
    echo_heading("Heatmap")
    echo_key_values(
        [
            ("scale", scale.get("name") or "custom"),
            ("type", scale.get("type")),
            ("range", f"{value_range.get('min')} – {value_range.get('max')}"),
        ]
    )

    rows = payload.get("rows") or []
    typer.echo()
    if not rows:
        typer.echo("No rows to display.")
    for row in rows:
        values = row.get("values") or []
        colors = row.get("colors") or [None] * len(values)
        cells = "".join(_cell(value, color, show_values) for value, color in zip(values, colors))
        typer.echo(f"{row.get('date_label', ''):<8} {cells}")

    typer.echo()
    echo_heading("Legend")
    for tick in payload.get("legend") or []:
        suffix = f" {unit}" if unit else ""
        typer.echo(f"  {tick.get('position'):>6.1f}%  {tick.get('value')}{suffix}")


def render_palettes(palettes: Iterable[Dict[str, Any]]) -> None:
    echo_heading("Built-in palettes")
    for palette in palettes:
        unit = f" ({palette['unit']})" if palette.get("unit") else ""
        swatch = "".join(
            _cell(0.0, step.get("color"), show_values=False) for step in palette.get("steps") or []
        )
        typer.echo(f"  - {palette.get('key')}: {palette.get('type')}{unit} {swatch}")
