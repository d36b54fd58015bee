"""Resolution of the numeric domain a heatmap is colored against."""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, Literal, Optional, Union

from models.records import GridRow, ValueRange
from services.errors import IndeterminateRangeError, RangeConfigurationError

logger = logging.getLogger(__name__)

AUTO = "auto"

RangeBound = Optional[Union[float, int, Literal["auto"]]]


def _observed_values(grid: Iterable[GridRow]) -> Iterator[float]:
    for row in grid:
        for value in row.values:
            if value is not None:
                yield value


class RangeResolver:
    """Combines configured bounds with the values present in a grid."""

    default_min: float = 0

    def resolve(
        self,
        configured_min: RangeBound,
        configured_max: RangeBound,
        grid: Iterable[GridRow],
    ) -> ValueRange:
        values = list(_observed_values(grid))
        observed: Optional[tuple[float, float]] = (min(values), max(values)) if values else None
        if observed is None and AUTO in (configured_min, configured_max):
            raise IndeterminateRangeError(
                "Cannot derive an automatic range from a grid without values."
            )

        if configured_min is None:
            low = self.default_min
        elif configured_min == AUTO:
            low = observed[0]
        else:
            low = self._literal(configured_min, "min")

        if configured_max is None:
            # Unset max follows the data; an empty grid collapses to ``min``.
            high = observed[1] if observed is not None else low
            if configured_min is None and high < low:
                low = observed[0]
        elif configured_max == AUTO:
            high = observed[1]
        else:
            high = self._literal(configured_max, "max")

        if low > high:
            raise RangeConfigurationError(
                f"Resolved range minimum {low} exceeds maximum {high}."
            )

        logger.debug(
            "Resolved value range",
            extra={"range_min": low, "range_max": high},
        )
        return ValueRange(min=low, max=high)

    @staticmethod
    def _literal(bound: object, name: str) -> float:
        if isinstance(bound, bool) or not isinstance(bound, (int, float)):
            raise RangeConfigurationError(
                f"`data.{name}` must be either `auto` or a number, got {bound!r}."
            )
        return bound
