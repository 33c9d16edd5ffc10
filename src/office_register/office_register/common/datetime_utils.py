from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def start_of_day(value: datetime) -> datetime:
    return value.replace(hour=0, minute=0, second=0, microsecond=0)


def format_duration(value: Optional[timedelta]) -> str:
    """Render a duration as ``"2h 05m"``; sub-hour values as ``"45m"``."""
    if value is None:
        return "-"
    total_minutes = max(int(value.total_seconds()) // 60, 0)
    hours, minutes = divmod(total_minutes, 60)
    if hours:
        return f"{hours}h {minutes:02d}m"
    return f"{minutes}m"


def to_iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat(timespec="seconds") if value else None
