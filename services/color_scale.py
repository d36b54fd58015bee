"""Gradient construction for heatmap palettes.

Colors between two palette stops are mixed in Oklab, so that a gradient
between two saturated hues does not pass through a muddy grey the way a
channel-wise RGB blend does. The CSS representation is a fixed sampling of
21 stops (every 5%), which the legend renders as a ``linear-gradient``.
"""

from __future__ import annotations

import logging
import math
from bisect import bisect_right
from dataclasses import dataclass, replace
from typing import Callable, List, Optional, Sequence, Union

from coloraide import Color

from models.palettes import BUILTIN_PALETTES
from models.records import ResolvedScale, ScaleDefinition, ScaleType
from services.errors import InvalidPaletteError, UnknownPaletteError

logger = logging.getLogger(__name__)

CSS_STOP_COUNT = 21
INTERPOLATION_SPACE = "oklab"

CELSIUS = "°C"
_FAHRENHEIT_UNITS = {"°F", "F"}


@dataclass(frozen=True)
class PaletteLookup:
    """Outcome of resolving a palette name: a definition or the reason there is none."""

    name: str
    definition: Optional[ScaleDefinition] = None
    error: Optional[UnknownPaletteError] = None

    @property
    def found(self) -> bool:
        return self.definition is not None

    def unwrap(self) -> ScaleDefinition:
        if self.definition is None:
            raise self.error or UnknownPaletteError(self.name)
        return self.definition


def lookup_palette(name: str) -> PaletteLookup:
    definition = BUILTIN_PALETTES.get(name.strip().lower())
    if definition is None:
        return PaletteLookup(name=name, error=UnknownPaletteError(name))
    return PaletteLookup(name=name, definition=definition)


def celsius_to_fahrenheit(value: float) -> int:
    # Half-up rounding, not Python's round-half-to-even.
    return math.floor(value * 1.8 + 32 + 0.5)


def _convert_units(definition: ScaleDefinition, target_unit_system: Optional[str]) -> ScaleDefinition:
    if definition.unit != CELSIUS or target_unit_system not in _FAHRENHEIT_UNITS:
        return definition
    steps = tuple(
        step if step.value is None else replace(step, value=celsius_to_fahrenheit(step.value))
        for step in definition.steps
    )
    return replace(definition, steps=steps, unit=target_unit_system)


def _anchor_positions(definition: ScaleDefinition) -> List[float]:
    steps = definition.steps
    if all(step.value is not None for step in steps):
        return [float(step.value) for step in steps]
    if ScaleType(definition.type) is ScaleType.absolute:
        raise InvalidPaletteError(
            f"Absolute palette {definition.name or ''!r} needs a value on every step."
        )
    if len(steps) == 1:
        return [0.0]
    return [index / (len(steps) - 1) for index in range(len(steps))]


def _make_sampler(positions: Sequence[float], tokens: Sequence[str]) -> Callable[[float], str]:
    try:
        colors = [Color(token) for token in tokens]
    except ValueError as exc:
        raise InvalidPaletteError(f"Palette contains an invalid color: {exc}") from exc

    def sample(position: float) -> str:
        if position <= positions[0]:
            return tokens[0]
        if position >= positions[-1]:
            return tokens[-1]
        upper = bisect_right(positions, position)
        lower = upper - 1
        if position == positions[lower]:
            return tokens[lower]
        ratio = (position - positions[lower]) / (positions[upper] - positions[lower])
        mixed = colors[lower].mix(colors[upper], ratio, space=INTERPOLATION_SPACE)
        return mixed.to_string(hex=True)

    return sample


def css_stops(sample: Callable[[float], str], low: float, high: float) -> str:
    intervals = CSS_STOP_COUNT - 1
    fragments = []
    for index in range(CSS_STOP_COUNT):
        position = low + (high - low) * index / intervals
        fragments.append(f"{sample(position)} {index * 100 // intervals}%")
    return ", ".join(fragments)


class ColorScaleBuilder:
    """Resolves palette definitions into sampled gradients."""

    def build(
        self,
        definition: Union[ScaleDefinition, str],
        target_unit_system: Optional[str] = None,
    ) -> ResolvedScale:
        if isinstance(definition, str):
            definition = lookup_palette(definition).unwrap()
        if not definition.steps:
            raise InvalidPaletteError("Palette needs at least one color step.")

        converted = _convert_units(definition, target_unit_system)
        scale_type = ScaleType(converted.type)
        positions = _anchor_positions(converted)
        tokens = [step.color for step in converted.steps]
        sampler = _make_sampler(positions, tokens)

        logger.debug(
            "Built color scale",
            extra={"scale": converted.name, "reason": scale_type.value},
        )
        return ResolvedScale(
            name=converted.name,
            type=scale_type,
            steps=converted.steps,
            css_stops=css_stops(sampler, positions[0], positions[-1]),
            _sampler=sampler,
        )
