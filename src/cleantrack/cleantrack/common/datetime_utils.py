from __future__ import annotations

import math
import time as _time
from datetime import date, datetime, time, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime((value or "").strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Invalid date (expected YYYY-MM-DD): {value!r}")


def now_millis() -> int:
    """Current epoch time in milliseconds.

    Note: Wrapped so tests can patch it.
    """
    return int(_time.time() * 1000)


def to_millis(dt: datetime) -> int:
    return int(dt.timestamp() * 1000)


def start_of_day_ms(day: date, tz: Optional[tzinfo] = None) -> int:
    """First millisecond of ``day``; naive (server-local) when tz is None."""
    return to_millis(datetime.combine(day, time.min, tzinfo=tz))


def end_of_day_ms(day: date, tz: Optional[tzinfo] = None) -> int:
    """Last millisecond of ``day`` (23:59:59.999)."""
    return to_millis(datetime.combine(day, time.max, tzinfo=tz))


def round_half_up(value: float) -> int:
    # Python's round() is banker's rounding; reports use half-up.
    return int(math.floor(value + 0.5))


def load_timezone(name: Optional[str]) -> Optional[tzinfo]:
    name = (name or "").strip()
    if not name:
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValidationError(f"Unknown timezone: {name}")
