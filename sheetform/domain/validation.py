from __future__ import annotations

import math
import re
from datetime import datetime
from typing import Any, Callable, List, Optional

from .schema import Field, FieldType
from .time_utils import DATE_FORMAT

FieldValidator = Callable[[Field, Any], List[str]]


def validate(field: Field, value: Any) -> List[str]:
    """Default rule set: type check plus ``required``/bounds/length/pattern rules.

    Returns the ordered error messages for ``value``; an empty list means valid.
    Empty values only ever fail ``required``.
    """
    rules = field.config.rules or {}
    if is_empty(value):
        if _truthy(rules.get("required")):
            return ["This field is required."]
        return []

    errors: List[str] = []
    type_error = _check_type(field.kind, value)
    if type_error:
        return [type_error]

    for name, check in _RULES:
        if name not in rules or rules[name] is None:
            continue
        message = check(value, rules[name])
        if message:
            errors.append(message)
    return errors


def is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, dict, set)):
        return not value
    return False


def _check_type(kind: FieldType, value: Any) -> Optional[str]:
    if kind is FieldType.NUMBER:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            try:
                value = float(str(value).strip())
            except ValueError:
                return "Must be a number."
        if isinstance(value, float) and math.isnan(value):
            return "Must be a number."
    if kind is FieldType.DATE:
        try:
            datetime.strptime(str(value), DATE_FORMAT)
        except ValueError:
            return "Must be a date (YYYY-MM-DD)."
    return None


def _min_value(value: Any, bound: Any) -> Optional[str]:
    number = _as_float(value)
    if number is not None and number < float(bound):
        return f"Must be at least {bound}."
    return None


def _max_value(value: Any, bound: Any) -> Optional[str]:
    number = _as_float(value)
    if number is not None and number > float(bound):
        return f"Must be at most {bound}."
    return None


def _min_length(value: Any, length: Any) -> Optional[str]:
    if len(str(value)) < int(length):
        return f"Must be at least {length} characters long."
    return None


def _max_length(value: Any, length: Any) -> Optional[str]:
    if len(str(value)) > int(length):
        return f"Must be at most {length} characters long."
    return None


def _pattern(value: Any, pattern: Any) -> Optional[str]:
    if not re.fullmatch(str(pattern), str(value)):
        return "Invalid format."
    return None


_RULES = (
    ("min", _min_value),
    ("max", _max_value),
    ("minLength", _min_length),
    ("maxLength", _max_length),
    ("pattern", _pattern),
)


def _as_float(value: Any) -> Optional[float]:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _truthy(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


__all__ = ["FieldValidator", "is_empty", "validate"]
