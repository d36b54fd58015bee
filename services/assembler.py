"""Single entry point for turning statistics into a colored grid and legend."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import tzinfo
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from models.records import (
    GridRow,
    LegendTick,
    ResolvedScale,
    ScaleDefinition,
    SensorMode,
    StatisticSample,
    ValueRange,
)
from services.color_scale import ColorScaleBuilder
from services.grid_builder import GridBuilder
from services.legend import LegendTickGenerator
from services.range_resolver import RangeBound, RangeResolver

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HeatmapResult:
    rows: List[GridRow]
    scale: ResolvedScale
    legend: List[LegendTick]
    value_range: ValueRange

    def cell_colors(self, row: GridRow) -> List[Optional[str]]:
        return [self.scale.color_for(value, self.value_range) for value in row.values]


class HeatmapAssembler:
    """Pure orchestration of grid, range, scale and legend construction.

    Holds no per-call state, so one instance can serve any number of
    independent invocations.
    """

    def __init__(
        self,
        grid_builder: Optional[GridBuilder] = None,
        range_resolver: Optional[RangeResolver] = None,
        scale_builder: Optional[ColorScaleBuilder] = None,
        legend_generator: Optional[LegendTickGenerator] = None,
        tz: Optional[tzinfo] = None,
    ) -> None:
        self.grid_builder = grid_builder or GridBuilder(tz=tz)
        self.range_resolver = range_resolver or RangeResolver()
        self.scale_builder = scale_builder or ColorScaleBuilder()
        self.legend_generator = legend_generator or LegendTickGenerator()

    def assemble(
        self,
        samples: Iterable[StatisticSample],
        mode: Union[SensorMode, str],
        scale_definition: Union[ScaleDefinition, str],
        configured_range: Tuple[RangeBound, RangeBound],
        unit_system: Optional[str] = None,
        locale: str = "en",
    ) -> HeatmapResult:
        sample_list: Sequence[StatisticSample] = list(samples)
        rows = self.grid_builder.build(sample_list, mode, locale)
        configured_min, configured_max = configured_range
        value_range = self.range_resolver.resolve(configured_min, configured_max, rows)
        scale = self.scale_builder.build(scale_definition, unit_system)
        legend = self.legend_generator.ticks(scale, value_range)

        logger.info(
            "Assembled heatmap",
            extra={
                "mode": getattr(mode, "value", mode),
                "scale": scale.name,
                "sample_count": len(sample_list),
                "row_count": len(rows),
                "range_min": value_range.min,
                "range_max": value_range.max,
            },
        )
        return HeatmapResult(rows=rows, scale=scale, legend=legend, value_range=value_range)
