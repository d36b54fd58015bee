"""Stateful heatmap lifecycle for hosts that embed the pipeline in a card."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Callable, Dict, Optional, Protocol, Sequence

from app.schemas import HeatmapConfig
from models.palettes import default_palette_for
from models.records import SensorMode, StatisticSample
from services.assembler import HeatmapAssembler, HeatmapResult
from services.errors import RangeConfigurationError, UnknownSensorModeError

logger = logging.getLogger(__name__)

_STATE_CLASS_MODES: Dict[str, SensorMode] = {
    "measurement": SensorMode.measurement,
    "total_increasing": SensorMode.accumulator,
    "accumulator": SensorMode.accumulator,
}

STATISTICS_UNITS = {"energy": "kWh"}


class HeatmapState(str, Enum):
    uninitialized = "uninitialized"
    ready = "ready"


@dataclass(frozen=True)
class EntityContext:
    """What the host knows about the configured entity and the viewing user."""

    entity_id: str
    state_class: Optional[str]
    device_class: Optional[str] = None
    unit_of_measurement: Optional[str] = None
    friendly_name: Optional[str] = None
    language: str = "en"
    temperature_unit: str = "°C"


class StatisticsSource(Protocol):
    def fetch(
        self, entity_id: str, start_time: datetime, units: Dict[str, str]
    ) -> Sequence[StatisticSample]:
        ...


def resolve_sensor_mode(state_class: Optional[str]) -> SensorMode:
    try:
        return _STATE_CLASS_MODES[state_class]
    except KeyError as exc:
        raise UnknownSensorModeError(state_class) from exc


def require_accumulator_max(mode: SensorMode, configured_max: Optional[object]) -> None:
    """Consumption data never gets an implicit max; colors would re-scale every day."""
    if mode is SensorMode.accumulator and configured_max is None:
        raise RangeConfigurationError(
            "Consumption data needs `data.max` set to a number or `auto`; "
            "otherwise colors re-scale with whatever is currently shown."
        )


def statistics_window_start(now: datetime, days: int) -> datetime:
    """First hour to request: ``days`` days back, at 23:00 of that day."""
    start = now - timedelta(days=days)
    return start.replace(hour=23, minute=0, second=0, microsecond=0)


class HeatmapController:
    """Recomputes a heatmap only when its inputs change.

    ``configure`` moves the controller back to ``uninitialized`` whenever the
    configuration differs from the current one; ``refresh`` fetches and
    assembles in that state and then serves the cached result while ``ready``.
    """

    def __init__(
        self,
        source: StatisticsSource,
        assembler: Optional[HeatmapAssembler] = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.source = source
        self.assembler = assembler or HeatmapAssembler()
        self._clock = clock
        self._config: Optional[HeatmapConfig] = None
        self._entity: Optional[EntityContext] = None
        self._result: Optional[HeatmapResult] = None
        self._state = HeatmapState.uninitialized

    @property
    def state(self) -> HeatmapState:
        return self._state

    @property
    def config(self) -> Optional[HeatmapConfig]:
        return self._config

    @property
    def result(self) -> Optional[HeatmapResult]:
        return self._result

    def configure(self, config: HeatmapConfig) -> None:
        unchanged = config == self._config
        # Equal configs may differ in `model_fields_set`; keep the latest.
        self._config = config
        if not unchanged:
            self._reset()

    def title(self, entity: EntityContext) -> Optional[str]:
        """Configured title; an explicit ``title: null`` hides it instead of
        falling back to the friendly name."""
        config = self._require_config()
        if config.title is not None or "title" in config.model_fields_set:
            return config.title
        return entity.friendly_name

    def refresh(self, entity: EntityContext) -> HeatmapResult:
        config = self._require_config()
        if entity != self._entity:
            self._entity = entity
            self._reset()
        if self._state is HeatmapState.ready and self._result is not None:
            return self._result

        mode = resolve_sensor_mode(entity.state_class)
        require_accumulator_max(mode, config.data.max)

        scale = config.scale_definition() or default_palette_for(entity.device_class)
        start_time = statistics_window_start(self._clock(), config.days)
        units = dict(STATISTICS_UNITS, temperature=entity.temperature_unit)
        samples = self.source.fetch(entity.entity_id, start_time, units)

        result = self.assembler.assemble(
            samples,
            mode,
            scale,
            (config.data.min, config.data.max),
            unit_system=entity.temperature_unit,
            locale=entity.language,
        )
        self._result = result
        self._state = HeatmapState.ready
        logger.info(
            "Heatmap ready",
            extra={"entity_id": entity.entity_id, "state": self._state.value},
        )
        return result

    def _reset(self) -> None:
        self._result = None
        self._state = HeatmapState.uninitialized

    def _require_config(self) -> HeatmapConfig:
        if self._config is None:
            raise RuntimeError("HeatmapController.configure() must be called before use.")
        return self._config
