"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable, Optional, Tuple

HOURS_PER_DAY = 24


class SensorMode(str, Enum):
    """How consecutive samples of a sensor relate to each other."""

    measurement = "measurement"
    accumulator = "accumulator"


class ScaleType(str, Enum):
    relative = "relative"
    absolute = "absolute"


@dataclass(frozen=True, slots=True)
class StatisticSample:
    """One hour of recorded statistics for a single sensor."""

    start: datetime
    sum: Optional[float] = None
    mean: Optional[float] = None


@dataclass(frozen=True, slots=True)
class GridRow:
    """A calendar day of hourly values; ``None`` marks an hour without data."""

    date_label: str
    native_date: datetime
    values: Tuple[Optional[float], ...]


@dataclass(frozen=True, slots=True)
class ValueRange:
    min: float
    max: float

    def __post_init__(self) -> None:
        if self.min > self.max:
            raise ValueError(f"Range minimum {self.min} exceeds maximum {self.max}.")

    @property
    def is_degenerate(self) -> bool:
        return self.min == self.max

    @property
    def span(self) -> float:
        return self.max - self.min


@dataclass(frozen=True, slots=True)
class PaletteStep:
    color: str
    value: Optional[float] = None
    legend: Optional[str] = None


@dataclass(frozen=True, slots=True)
class ScaleDefinition:
    """A palette: ordered color steps, optionally pinned to data values."""

    steps: Tuple[PaletteStep, ...]
    type: ScaleType = ScaleType.relative
    unit: Optional[str] = None
    name: Optional[str] = None


@dataclass(frozen=True, slots=True)
class LegendTick:
    position_percent: float
    display_value: float


@dataclass(frozen=True)
class ResolvedScale:
    """A built gradient, ready to be sampled for every cell of a grid."""

    name: Optional[str]
    type: ScaleType
    steps: Tuple[PaletteStep, ...]
    css_stops: str
    _sampler: Callable[[float], str] = field(repr=False, compare=False)

    def sample(self, position: float) -> str:
        """Color at ``position``: normalized for relative scales, raw data for absolute ones."""
        return self._sampler(position)

    def color_for(self, value: Optional[float], value_range: ValueRange) -> Optional[str]:
        """Map a raw cell value onto the gradient; empty cells have no color."""
        if value is None:
            return None
        if self.type is ScaleType.absolute:
            return self.sample(value)
        if value_range.is_degenerate:
            return self.sample(0.5)
        ratio = (value - value_range.min) / value_range.span
        return self.sample(min(max(ratio, 0.0), 1.0))
