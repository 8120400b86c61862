"""Request targets on the remote data service.

Pure helpers; identifiers and ranges are inserted verbatim into the path and
query values are form-encoded.
"""

from __future__ import annotations

from typing import Any, Optional
from urllib.parse import urlencode

API_PREFIX = "/api"


def schema_url(form_id: str) -> str:
    return f"{API_PREFIX}/{form_id}/schema"


def options_url(
    form_id: str,
    sheet_range: str,
    *,
    requires: Optional[str] = None,
    require_value: Any = None,
) -> str:
    """Options list at ``sheet_range``, filtered by ``requires=require_value`` when set."""
    base = f"{API_PREFIX}/{form_id}/sheet/{sheet_range}"
    if not requires:
        return base
    return f"{base}?{urlencode({requires: _query_value(require_value)})}"


def load_index_url(form_id: str, index: str) -> str:
    return f"{API_PREFIX}/{form_id}/current?{urlencode({'index': index})}"


def submit_url(form_id: str, sheet_range: Optional[str] = None) -> str:
    """Append target; ``sheet_range`` redirects the row away from the entry sheet."""
    base = f"{API_PREFIX}/{form_id}/entry"
    if not sheet_range:
        return base
    return f"{base}?{urlencode({'range': sheet_range})}"


def _query_value(value: Any) -> str:
    # The data service expects a missing filter value as the literal "null".
    if value is None:
        return "null"
    return str(value)


__all__ = ["API_PREFIX", "load_index_url", "options_url", "schema_url", "submit_url"]
