"""Date helpers for default values and submission timestamps."""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Union

DATE_FORMAT = "%Y-%m-%d"


def format_date(value: Union[date, datetime]) -> str:
    """Format a date the way date fields store it (``YYYY-MM-DD``)."""
    if isinstance(value, datetime):
        value = value.date()
    return value.strftime(DATE_FORMAT)


def today_label(now: Optional[datetime] = None) -> str:
    """Return the current local date formatted for a date field."""
    current = now or datetime.now().astimezone()
    return format_date(current)


def submission_timestamp(now: Optional[datetime] = None) -> str:
    """Timezone-aware ISO timestamp prefixed to every submitted row."""
    current = now or datetime.now().astimezone()
    if current.tzinfo is None or current.tzinfo.utcoffset(current) is None:
        current = current.astimezone()
    return current.isoformat(timespec="milliseconds")


__all__ = ["DATE_FORMAT", "format_date", "submission_timestamp", "today_label"]
