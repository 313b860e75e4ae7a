from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Any, Optional

from ..core.enums import WEEKDAYS
from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(str(value).strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Invalid date {value!r}, expected YYYY-MM-DD")


def parse_optional_date(value: Optional[str]) -> Optional[date]:
    if value is None or not str(value).strip():
        return None
    return parse_iso_date(value)


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def weekday_name(value: date) -> str:
    return WEEKDAYS[value.weekday()]


def hhmm(value: datetime) -> str:
    return value.strftime("%H:%M")


def normalize_hhmm(value: Any) -> str:
    """Normalize a clock value to a zero-padded "HH:MM" string.

    Accepts:
    - datetime.time
    - datetime.timedelta (how mysql-connector returns TIME columns)
    - string such as '9:00', '09:00' or '09:00:00'

    The padded form keeps values lexically comparable.
    """

    if isinstance(value, time):
        return value.strftime("%H:%M")

    if isinstance(value, timedelta):
        total_seconds = int(value.total_seconds()) % 86400
        return f"{total_seconds // 3600:02d}:{(total_seconds % 3600) // 60:02d}"

    if isinstance(value, str):
        parts = value.strip().split(":")
        if len(parts) < 2 or not parts[0].isdigit() or not parts[1].isdigit():
            raise ValidationError(f"Invalid time {value!r}, expected HH:MM")
        hours, minutes = int(parts[0]), int(parts[1])
        if hours > 23 or minutes > 59:
            raise ValidationError(f"Invalid time {value!r}, expected HH:MM")
        return f"{hours:02d}:{minutes:02d}"

    raise ValidationError(f"Unsupported time value: {value!r}")
