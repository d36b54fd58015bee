"""Tests for the end-to-end assembly of grid, scale and legend."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

import pytest

from models.records import PaletteStep, ScaleDefinition, SensorMode, StatisticSample
from services.assembler import HeatmapAssembler
from services.errors import IndeterminateRangeError, UnknownPaletteError, UnknownSensorModeError


def _energy_samples(days: int = 2) -> list[StatisticSample]:
    start = datetime(2024, 1, 1, 23)
    return [
        StatisticSample(start=start + timedelta(hours=offset), sum=offset * 0.5)
        for offset in range(days * 24 + 1)
    ]


def test_assemble_accumulator_with_auto_max() -> None:
    result = HeatmapAssembler().assemble(
        _energy_samples(),
        SensorMode.accumulator,
        "iron red",
        (0, "auto"),
        unit_system="°C",
        locale="en",
    )

    assert [row.date_label for row in result.rows] == ["Jan 03", "Jan 02"]
    assert result.value_range.min == 0
    assert result.value_range.max == 0.5
    assert len(result.legend) == 6
    assert result.legend[-1].display_value == 0.5
    assert result.scale.name == "Iron red"
    # Every delta is at the top of the range.
    assert set(result.cell_colors(result.rows[0])) == {"#F5F5D4"}


def test_assemble_measurement_with_absolute_palette() -> None:
    samples = [
        StatisticSample(start=datetime(2024, 1, 1, hour), mean=value)
        for hour, value in ((0, 520.0), (1, 3000.0), (2, 1000.0))
    ]

    result = HeatmapAssembler().assemble(
        samples, "measurement", "carbon dioxide", (None, 3000)
    )

    colors = result.cell_colors(result.rows[0])
    assert colors[:3] == ["#6d9b17", "#5b0f8c", "#FFBF00"]
    assert colors[3] is None
    assert [tick.display_value for tick in result.legend] == [520, 1000, 1400, 3000]


def test_assemble_with_custom_definition() -> None:
    definition = ScaleDefinition(
        name="Mono",
        steps=(PaletteStep(color="#000000", value=0), PaletteStep(color="#ffffff", value=1)),
    )
    samples = [StatisticSample(start=datetime(2024, 1, 1, 0), mean=5.0)]

    result = HeatmapAssembler().assemble(samples, "measurement", definition, (0, 10))

    assert result.scale.name == "Mono"
    assert result.cell_colors(result.rows[0])[0] == result.scale.sample(0.5)


def test_assemble_propagates_unknown_mode() -> None:
    with pytest.raises(UnknownSensorModeError):
        HeatmapAssembler().assemble(_energy_samples(), "total", "iron red", (0, 10))


def test_assemble_propagates_unknown_palette() -> None:
    with pytest.raises(UnknownPaletteError):
        HeatmapAssembler().assemble(_energy_samples(), "accumulator", "sepia", (0, 10))


def test_assemble_auto_range_without_data_is_indeterminate() -> None:
    with pytest.raises(IndeterminateRangeError):
        HeatmapAssembler().assemble([], "measurement", "iron red", ("auto", "auto"))


def test_assemble_is_repeatable() -> None:
    assembler = HeatmapAssembler()
    samples = _energy_samples()

    first = assembler.assemble(samples, "accumulator", "stoplight", (0, "auto"))
    second = assembler.assemble(samples, "accumulator", "stoplight", (0, "auto"))

    assert first.rows == second.rows
    assert first.legend == second.legend
    assert first.scale.css_stops == second.scale.css_stops


def test_assemble_logs_summary(caplog) -> None:
    with caplog.at_level(logging.INFO, logger="services.assembler"):
        HeatmapAssembler().assemble(_energy_samples(1), "accumulator", "iron red", (0, "auto"))

    records = [record for record in caplog.records if record.name == "services.assembler"]
    assert records
    assert records[0].row_count == 1
    assert records[0].sample_count == 25
