from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


_LOCALE_ENV = "HEATMAP_LOCALE"
_UNIT_SYSTEM_ENV = "HEATMAP_UNIT_SYSTEM"
_TIMEZONE_ENV = "HEATMAP_TIMEZONE"
_DEFAULT_DAYS_ENV = "HEATMAP_DEFAULT_DAYS"
_LOG_LEVEL_ENV = "LOG_LEVEL"


@dataclass(frozen=True)
class Settings:
    locale: str
    unit_system: str
    timezone: Optional[str]
    default_days: int
    log_level: str

    def tzinfo(self) -> Optional[ZoneInfo]:
        if self.timezone is None:
            return None
        return ZoneInfo(self.timezone)


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_timezone(default: Optional[str]) -> Optional[str]:
    value = os.getenv(_TIMEZONE_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        ZoneInfo(candidate)
    except (ZoneInfoNotFoundError, ValueError):
        return default
    return candidate


def _read_day_count(default: int) -> int:
    value = os.getenv(_DEFAULT_DAYS_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        locale=_read_str_env(_LOCALE_ENV, "en"),
        unit_system=_read_str_env(_UNIT_SYSTEM_ENV, "°C"),
        timezone=_read_timezone(None),
        default_days=_read_day_count(21),
        log_level=_read_log_level("INFO"),
    )
