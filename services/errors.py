"""Exceptions raised by the heatmap pipeline."""

from __future__ import annotations


class HeatmapError(ValueError):
    """Base class for pipeline failures the caller has to handle."""


class UnknownSensorModeError(HeatmapError):
    def __init__(self, mode: object) -> None:
        super().__init__(f"Unknown sensor state class {mode!r}.")
        self.mode = mode


class UnknownPaletteError(HeatmapError, KeyError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown palette {name!r}.")
        self.name = name

    def __str__(self) -> str:
        return str(self.args[0])


class IndeterminateRangeError(HeatmapError):
    """Raised when an ``auto`` bound is requested but the grid holds no values."""


class RangeConfigurationError(HeatmapError):
    """Raised for range settings that cannot produce a usable domain."""


class InvalidPaletteError(HeatmapError):
    """Raised for palette definitions that cannot be turned into a gradient."""
