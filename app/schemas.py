"""Pydantic schemas for card configuration and the HTTP API layer."""

from __future__ import annotations

from datetime import datetime
from typing import Any, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator

from models.records import PaletteStep, ScaleDefinition, ScaleType, StatisticSample
from settings import get_settings

RangeBoundValue = Optional[Union[float, Literal["auto"]]]


class PaletteStepModel(BaseModel):
    model_config = ConfigDict(frozen=True)

    color: str = Field(..., min_length=1)
    value: Optional[float] = None
    legend: Optional[str] = None

    def to_step(self) -> PaletteStep:
        return PaletteStep(color=self.color, value=self.value, legend=self.legend)


class ScaleDefinitionModel(BaseModel):
    """A custom palette supplied inline instead of a built-in name."""

    model_config = ConfigDict(frozen=True)

    name: Optional[str] = None
    type: ScaleType = ScaleType.relative
    unit: Optional[str] = None
    steps: List[PaletteStepModel] = Field(..., min_length=1)

    def to_definition(self) -> ScaleDefinition:
        return ScaleDefinition(
            name=self.name,
            type=self.type,
            unit=self.unit,
            steps=tuple(step.to_step() for step in self.steps),
        )


class DataRange(BaseModel):
    """Configured bounds: a number, ``auto`` to derive from the data, or unset."""

    model_config = ConfigDict(frozen=True)

    min: RangeBoundValue = None
    max: RangeBoundValue = None

    @field_validator("min", "max", mode="before")
    @classmethod
    def _number_or_auto(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None or value == "auto":
            return value
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"`data.{info.field_name}` need to be either `auto` or a number")
        return value


class HeatmapConfig(BaseModel):
    """User supplied card configuration."""

    model_config = ConfigDict(frozen=True)

    entity: str = Field(..., min_length=1)
    title: Optional[str] = None
    days: int = Field(default_factory=lambda: get_settings().default_days, ge=1)
    scale: Optional[Union[str, ScaleDefinitionModel]] = None
    data: DataRange = Field(default_factory=DataRange)

    def scale_definition(self) -> Optional[Union[str, ScaleDefinition]]:
        if isinstance(self.scale, ScaleDefinitionModel):
            return self.scale.to_definition()
        return self.scale


class StatisticSampleModel(BaseModel):
    start: datetime
    sum: Optional[float] = None
    mean: Optional[float] = None

    def to_sample(self) -> StatisticSample:
        return StatisticSample(start=self.start, sum=self.sum, mean=self.mean)


class HeatmapRequest(BaseModel):
    """Everything needed to assemble one heatmap without server-side state.

    The sensor kind comes from exactly one of ``state_class`` (as reported by
    the host) or ``mode`` (``measurement`` / ``accumulator``).
    """

    samples: List[StatisticSampleModel] = Field(default_factory=list)
    state_class: Optional[str] = Field(
        default=None,
        description="Sensor state class: `measurement` or `total_increasing`.",
    )
    mode: Optional[str] = Field(
        default=None,
        description="Sensor mode: `measurement` or `accumulator`.",
    )
    device_class: Optional[str] = None
    scale: Optional[Union[str, ScaleDefinitionModel]] = None
    data: DataRange = Field(default_factory=DataRange)
    unit_system: Optional[str] = Field(
        default=None, description="Temperature unit of the consumer, e.g. `°C` or `°F`."
    )
    locale: Optional[str] = None

    @model_validator(mode="after")
    def _one_sensor_kind(self) -> "HeatmapRequest":
        if (self.state_class is None) == (self.mode is None):
            raise ValueError("Provide exactly one of `state_class` or `mode`.")
        return self

    @property
    def sensor_kind(self) -> str:
        return self.state_class if self.state_class is not None else self.mode


class GridRowModel(BaseModel):
    date_label: str
    native_date: datetime
    values: List[Optional[float]]
    colors: List[Optional[str]]


class ScaleModel(BaseModel):
    name: Optional[str] = None
    type: ScaleType
    css: str = Field(..., description="Stops for a CSS `linear-gradient`.")
    steps: List[PaletteStepModel]


class LegendTickModel(BaseModel):
    position: float = Field(..., ge=0, le=100)
    value: float


class ValueRangeModel(BaseModel):
    min: float
    max: float


class HeatmapResponse(BaseModel):
    rows: List[GridRowModel]
    scale: ScaleModel
    legend: List[LegendTickModel]
    range: ValueRangeModel


class PaletteSummary(BaseModel):
    key: str
    name: Optional[str] = None
    type: ScaleType
    unit: Optional[str] = None
    steps: List[PaletteStepModel]
