"""Bucketing of hourly statistics into calendar-day rows."""

from __future__ import annotations

import logging
from datetime import date, datetime, tzinfo
from functools import lru_cache
from typing import Iterable, List, Optional

from babel import Locale, UnknownLocaleError
from babel.dates import format_date

from models.records import HOURS_PER_DAY, GridRow, SensorMode, StatisticSample
from services.errors import UnknownSensorModeError

logger = logging.getLogger(__name__)

_FALLBACK_LOCALE = "en"
_DATE_LABEL_PATTERN = "MMM dd"


@lru_cache(maxsize=32)
def _resolve_locale(identifier: str) -> Locale:
    try:
        return Locale.parse(identifier.replace("-", "_"))
    except (UnknownLocaleError, ValueError):
        logger.warning(
            "Unknown locale, falling back to %s",
            _FALLBACK_LOCALE,
            extra={"reason": identifier},
        )
        return Locale.parse(_FALLBACK_LOCALE)


def format_day_label(day: date, locale: str) -> str:
    """Short month and two-digit day, e.g. ``Jan 01``."""
    return format_date(day, format=_DATE_LABEL_PATTERN, locale=_resolve_locale(locale))


class GridBuilder:
    """Turns an ascending series of samples into rows, most recent day first."""

    def __init__(self, tz: Optional[tzinfo] = None) -> None:
        self.tz = tz

    def build(
        self,
        samples: Iterable[StatisticSample],
        mode: SensorMode | str,
        locale: str = _FALLBACK_LOCALE,
    ) -> List[GridRow]:
        try:
            resolved = SensorMode(mode)
        except ValueError as exc:
            raise UnknownSensorModeError(mode) from exc

        if resolved is SensorMode.measurement:
            rows = self._measurement_rows(samples, locale)
        else:
            rows = self._accumulator_rows(samples, locale)

        rows.reverse()
        return rows

    def _localize(self, moment: datetime) -> datetime:
        if self.tz is not None and moment.tzinfo is not None:
            return moment.astimezone(self.tz)
        return moment

    def _measurement_rows(
        self, samples: Iterable[StatisticSample], locale: str
    ) -> List[GridRow]:
        rows: List[GridRow] = []
        current: Optional[List[Optional[float]]] = None
        current_day: Optional[date] = None
        opened_at: Optional[datetime] = None

        for sample in samples:
            start = self._localize(sample.start)
            # Local midnight always lands on a new date, so gaps across midnight still split rows.
            if current is None or start.date() != current_day:
                if current is not None:
                    rows.append(self._row(opened_at, current, locale))
                current = [None] * HOURS_PER_DAY
                current_day = start.date()
                opened_at = start
            current[start.hour] = sample.mean

        if current is not None:
            rows.append(self._row(opened_at, current, locale))
        return rows

    def _accumulator_rows(
        self, samples: Iterable[StatisticSample], locale: str
    ) -> List[GridRow]:
        # Rows stay mutable lists until the final truncation.
        days: List[tuple[datetime, List[Optional[float]]]] = []
        current: Optional[List[Optional[float]]] = None
        previous_sum: Optional[float] = None
        previous_label: Optional[str] = None
        baseline: Optional[datetime] = None
        last_hour = 0

        for sample in samples:
            if sample.sum is None:
                logger.debug("Skipping sample without sum", extra={"reason": sample.start})
                continue
            start = self._localize(sample.start)
            label = format_day_label(start.date(), locale)

            if previous_sum is None:
                baseline = start
            else:
                if current is None or label != previous_label:
                    current = [0.0] * HOURS_PER_DAY
                    if baseline is not None and baseline.date() == start.date():
                        # No predecessor for these hours, so there is no delta to show.
                        for hour in range(baseline.hour + 1):
                            current[hour] = None
                    days.append((start, current))
                current[start.hour] = round(sample.sum - previous_sum, 2)

            previous_sum = sample.sum
            previous_label = label
            last_hour = start.hour

        if current is not None:
            # Hours after the last reported sample have not happened yet.
            del current[last_hour + 1 :]

        return [self._row(opened_at, values, locale) for opened_at, values in days]

    @staticmethod
    def _row(opened_at: datetime, values: List[Optional[float]], locale: str) -> GridRow:
        return GridRow(
            date_label=format_day_label(opened_at.date(), locale),
            native_date=opened_at,
            values=tuple(values),
        )
