"""Built-in named palettes and the defaults picked per device class."""

from __future__ import annotations

from typing import Dict

from models.records import PaletteStep, ScaleDefinition, ScaleType

DEFAULT_PALETTE = "iron red"

BUILTIN_PALETTES: Dict[str, ScaleDefinition] = {
    "black hot": ScaleDefinition(
        name="Black hot",
        type=ScaleType.relative,
        steps=(
            PaletteStep(value=0, color="#F5F5F5"),
            PaletteStep(value=1, color="#242124"),
        ),
    ),
    "carbon dioxide": ScaleDefinition(
        name="CO₂",
        type=ScaleType.absolute,
        steps=(
            PaletteStep(value=520, color="#6d9b17"),
            PaletteStep(value=1000, color="#FFBF00"),
            PaletteStep(value=1400, color="#cf0000"),
            PaletteStep(value=3000, color="#5b0f8c"),
        ),
    ),
    "indoor temperature": ScaleDefinition(
        name="Indoor temperature",
        type=ScaleType.absolute,
        unit="°C",
        steps=(
            PaletteStep(value=12, color="#0f3489", legend="Freezing"),
            PaletteStep(value=16, color="#595ea3", legend="Very low"),
            PaletteStep(value=18, color="#7374b0"),
            PaletteStep(value=20, color="#F5F5F5"),
            PaletteStep(value=22, color="#F5F5F5"),
            PaletteStep(value=24, color="#ea755a", legend="High"),
            PaletteStep(value=28, color="#cf0000", legend="Very high"),
        ),
    ),
    "iron red": ScaleDefinition(
        name="Iron red",
        type=ScaleType.relative,
        steps=(
            PaletteStep(value=0, color="#230382"),
            PaletteStep(value=0.1, color="#921C96"),
            PaletteStep(value=0.25, color="#C93F55"),
            PaletteStep(value=0.4, color="#DF6D2D"),
            PaletteStep(value=0.6, color="#EFB03D"),
            PaletteStep(value=0.75, color="#F9DE52"),
            PaletteStep(value=1, color="#F5F5D4"),
        ),
    ),
    "stoplight": ScaleDefinition(
        name="Stoplight",
        type=ScaleType.relative,
        steps=(
            PaletteStep(value=0, color="#6d9b17"),
            PaletteStep(value=0.5, color="#fde74c"),
            PaletteStep(value=1, color="#cf0000"),
        ),
    ),
    "white hot": ScaleDefinition(
        name="White hot",
        type=ScaleType.relative,
        steps=(
            PaletteStep(value=0, color="#242124"),
            PaletteStep(value=1, color="#F5F5F5"),
        ),
    ),
}

DEVICE_CLASS_DEFAULTS: Dict[str, str] = {
    "carbon_dioxide": "carbon dioxide",
    "energy": "iron red",
    "temperature": "indoor temperature",
}


def default_palette_for(device_class: str | None) -> str:
    """Name of the palette used when a card does not configure one."""
    if device_class is None:
        return DEFAULT_PALETTE
    return DEVICE_CLASS_DEFAULTS.get(device_class, DEFAULT_PALETTE)
