"""Placement of legend ticks along a resolved gradient."""

from __future__ import annotations

from typing import List

from models.records import LegendTick, ResolvedScale, ScaleType, ValueRange

RELATIVE_TICK_INTERVALS = 5
_CENTER = 50.0


class LegendTickGenerator:
    def ticks(self, scale: ResolvedScale, value_range: ValueRange) -> List[LegendTick]:
        if scale.type is ScaleType.relative:
            return self._relative_ticks(value_range)
        return self._absolute_ticks(scale)

    @staticmethod
    def _relative_ticks(value_range: ValueRange) -> List[LegendTick]:
        if value_range.is_degenerate:
            return [LegendTick(position_percent=_CENTER, display_value=value_range.min)]
        return [
            LegendTick(
                position_percent=index * 100 / RELATIVE_TICK_INTERVALS,
                display_value=round(
                    value_range.min + value_range.span * index / RELATIVE_TICK_INTERVALS, 2
                ),
            )
            for index in range(RELATIVE_TICK_INTERVALS + 1)
        ]

    @staticmethod
    def _absolute_ticks(scale: ResolvedScale) -> List[LegendTick]:
        first = scale.steps[0].value
        last = scale.steps[-1].value
        span = last - first
        if span == 0:
            return [LegendTick(position_percent=_CENTER, display_value=first)]
        return [
            LegendTick(
                position_percent=(step.value - first) / span * 100,
                display_value=step.value,
            )
            for step in scale.steps
        ]
