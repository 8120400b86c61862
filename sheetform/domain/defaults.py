from __future__ import annotations

import math
from datetime import datetime
from typing import Any, Optional

from .schema import FieldType
from .time_utils import today_label

TODAY_TOKEN = "today"


def parse_default(value: Any, field_type: Any, *, now: Optional[datetime] = None) -> Any:
    """
    Map a raw default (or a loaded cell value) to the typed value of a field.

    ``None`` stays ``None``; numbers are coerced numerically; a date field whose
    value is the ``"today"`` token becomes today's date label. Anything else is
    returned unchanged, including values for unknown field types.
    """
    if value is None:
        return None
    kind = FieldType.coerce(field_type)
    if kind is FieldType.NUMBER:
        return to_number(value)
    if kind is FieldType.DATE and value == TODAY_TOKEN:
        return today_label(now)
    return value


def to_number(value: Any) -> Any:
    """Numeric coercion that never raises; non-numeric input yields ``nan``."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return value
    text = str(value).strip()
    if not text:
        return 0
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return float(text)
    except ValueError:
        return math.nan


__all__ = ["TODAY_TOKEN", "parse_default", "to_number"]
