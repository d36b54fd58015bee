"""CSV parsing of hourly statistics exported from a recorder."""

from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from models.records import StatisticSample

logger = logging.getLogger(__name__)

_START_COLUMN = "start"
_VALUE_COLUMNS = ("sum", "mean")


@dataclass(frozen=True, slots=True)
class SampleError:
    row_number: int
    reason: str


@dataclass
class SampleBatch:
    samples: List[StatisticSample] = field(default_factory=list)
    errors: List[SampleError] = field(default_factory=list)


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp; naive values are kept as local wall time."""
    candidate = value.strip()
    if not candidate:
        raise ValueError("Timestamp is empty.")

    if candidate.endswith("Z"):
        candidate = candidate[:-1] + "+00:00"

    try:
        return datetime.fromisoformat(candidate)
    except ValueError as exc:
        raise ValueError("Invalid timestamp format") from exc


def _parse_number(raw: Optional[str]) -> Optional[float]:
    candidate = (raw or "").strip()
    if not candidate:
        return None
    return float(candidate)


def read_samples(text: str) -> SampleBatch:
    """Read ``start,sum,mean`` rows, collecting rejected rows instead of failing."""
    reader = csv.DictReader(io.StringIO(text))
    if not reader.fieldnames:
        raise ValueError("CSV file is missing a header row.")

    normalized = {name.lower().strip(): name for name in reader.fieldnames if name}
    if _START_COLUMN not in normalized:
        raise ValueError("CSV missing required column: start")
    value_columns = [normalized[name] for name in _VALUE_COLUMNS if name in normalized]
    if not value_columns:
        raise ValueError("CSV needs a `sum` or `mean` column.")

    start_col = normalized[_START_COLUMN]
    sum_col = normalized.get("sum")
    mean_col = normalized.get("mean")

    batch = SampleBatch()
    for row_number, row in enumerate(reader, start=2):
        reason: Optional[str] = None
        start_raw = (row.get(start_col) or "").strip()
        if not start_raw:
            reason = "missing start"
        else:
            try:
                start = parse_timestamp(start_raw)
            except ValueError:
                reason = "invalid timestamp"

        if reason is None:
            try:
                total = _parse_number(row.get(sum_col)) if sum_col else None
                mean = _parse_number(row.get(mean_col)) if mean_col else None
            except ValueError:
                reason = "invalid numeric value"
            else:
                if total is None and mean is None:
                    reason = "missing value"

        if reason is not None:
            logger.warning(
                "Skipping row",
                extra={"row_number": row_number, "reason": reason},
            )
            batch.errors.append(SampleError(row_number=row_number, reason=reason))
            continue

        batch.samples.append(StatisticSample(start=start, sum=total, mean=mean))

    try:
        batch.samples.sort(key=lambda sample: sample.start)
    except TypeError as exc:
        raise ValueError("CSV mixes timestamps with and without a UTC offset.") from exc
    return batch
