from __future__ import annotations

from datetime import datetime, timedelta
from typing import Dict, List, Sequence, Tuple

import pytest
from pydantic import ValidationError

from app.schemas import HeatmapConfig
from models.records import SensorMode, StatisticSample
from services.controller import (
    EntityContext,
    HeatmapController,
    HeatmapState,
    resolve_sensor_mode,
    statistics_window_start,
)
from services.errors import RangeConfigurationError, UnknownSensorModeError

NOW = datetime(2024, 1, 10, 14, 37, 12)


class RecordingSource:
    def __init__(self, samples: Sequence[StatisticSample]) -> None:
        self.samples = list(samples)
        self.calls: List[Tuple[str, datetime, Dict[str, str]]] = []

    def fetch(
        self, entity_id: str, start_time: datetime, units: Dict[str, str]
    ) -> Sequence[StatisticSample]:
        self.calls.append((entity_id, start_time, units))
        return self.samples


def _temperatures() -> list[StatisticSample]:
    start = datetime(2024, 1, 9, 0)
    return [
        StatisticSample(start=start + timedelta(hours=offset), mean=18.0 + offset % 5)
        for offset in range(30)
    ]


def _entity(**overrides) -> EntityContext:
    values = dict(
        entity_id="sensor.living_room",
        state_class="measurement",
        device_class="temperature",
        friendly_name="Living room",
    )
    values.update(overrides)
    return EntityContext(**values)


def _controller(source: RecordingSource) -> HeatmapController:
    return HeatmapController(source=source, clock=lambda: NOW)


def test_statistics_window_starts_at_2300_days_back() -> None:
    assert statistics_window_start(NOW, 7) == datetime(2024, 1, 3, 23, 0, 0)


@pytest.mark.parametrize(
    ("state_class", "expected"),
    [("measurement", SensorMode.measurement), ("total_increasing", SensorMode.accumulator)],
)
def test_resolve_sensor_mode(state_class: str, expected: SensorMode) -> None:
    assert resolve_sensor_mode(state_class) is expected


@pytest.mark.parametrize("state_class", [None, "total"])
def test_unknown_state_class_is_fatal(state_class) -> None:
    with pytest.raises(UnknownSensorModeError):
        resolve_sensor_mode(state_class)


def test_refresh_moves_to_ready_and_uses_device_class_default() -> None:
    source = RecordingSource(_temperatures())
    controller = _controller(source)
    controller.configure(HeatmapConfig(entity="sensor.living_room", days=7))

    assert controller.state is HeatmapState.uninitialized
    result = controller.refresh(_entity())

    assert controller.state is HeatmapState.ready
    assert result.scale.name == "Indoor temperature"
    assert source.calls == [
        ("sensor.living_room", datetime(2024, 1, 3, 23), {"energy": "kWh", "temperature": "°C"})
    ]


def test_ready_controller_serves_cached_result() -> None:
    source = RecordingSource(_temperatures())
    controller = _controller(source)
    controller.configure(HeatmapConfig(entity="sensor.living_room", data={"max": 30}))

    first = controller.refresh(_entity())
    second = controller.refresh(_entity())

    assert first is second
    assert len(source.calls) == 1


def test_config_change_returns_to_uninitialized() -> None:
    source = RecordingSource(_temperatures())
    controller = _controller(source)
    controller.configure(HeatmapConfig(entity="sensor.living_room", data={"max": 30}))
    controller.refresh(_entity())

    controller.configure(HeatmapConfig(entity="sensor.living_room", data={"max": 30}))
    assert controller.state is HeatmapState.ready

    controller.configure(
        HeatmapConfig(entity="sensor.living_room", scale="stoplight", data={"max": "auto"})
    )
    assert controller.state is HeatmapState.uninitialized
    assert controller.result is None

    result = controller.refresh(_entity())
    assert result.scale.name == "Stoplight"
    assert len(source.calls) == 2


def test_entity_change_triggers_recompute() -> None:
    source = RecordingSource(_temperatures())
    controller = _controller(source)
    controller.configure(HeatmapConfig(entity="sensor.living_room", data={"max": 30}))
    controller.refresh(_entity())

    result = controller.refresh(_entity(temperature_unit="°F"))

    assert len(source.calls) == 2
    assert result.scale.steps[3].value == 68


def test_accumulator_without_max_is_rejected() -> None:
    controller = _controller(RecordingSource([]))
    controller.configure(HeatmapConfig(entity="sensor.energy"))

    with pytest.raises(RangeConfigurationError):
        controller.refresh(_entity(state_class="total_increasing", device_class="energy"))
    assert controller.state is HeatmapState.uninitialized


def test_temperature_entity_without_data_section_renders() -> None:
    source = RecordingSource(_temperatures())
    controller = _controller(source)
    controller.configure(HeatmapConfig(entity="sensor.living_room"))

    result = controller.refresh(_entity())

    assert controller.state is HeatmapState.ready
    assert result.scale.name == "Indoor temperature"
    assert (result.value_range.min, result.value_range.max) == (0, 22.0)
    assert [tick.display_value for tick in result.legend][:2] == [12, 16]
    assert result.cell_colors(result.rows[0])[0] is not None


def test_title_falls_back_to_friendly_name() -> None:
    controller = _controller(RecordingSource([]))
    controller.configure(HeatmapConfig(entity="sensor.living_room"))
    assert controller.title(_entity()) == "Living room"

    controller.configure(HeatmapConfig(entity="sensor.living_room", title="Heat"))
    assert controller.title(_entity()) == "Heat"

    controller.configure(HeatmapConfig(entity="sensor.living_room", title=None))
    assert controller.title(_entity()) is None

    controller.configure(HeatmapConfig(entity="sensor.living_room"))
    assert controller.title(_entity()) == "Living room"


def test_refresh_requires_configuration() -> None:
    with pytest.raises(RuntimeError):
        _controller(RecordingSource([])).refresh(_entity())


@pytest.mark.parametrize(
    "payload",
    [
        {"entity": ""},
        {"entity": "sensor.x", "days": 0},
        {"entity": "sensor.x", "data": {"max": "lots"}},
        {"entity": "sensor.x", "data": {"min": True}},
    ],
)
def test_invalid_config_is_rejected(payload) -> None:
    with pytest.raises(ValidationError):
        HeatmapConfig(**payload)


def test_config_defaults() -> None:
    config = HeatmapConfig(entity="sensor.x")

    assert config.days == 21
    assert config.data.min is None
    assert config.data.max is None
    assert config.scale_definition() is None
