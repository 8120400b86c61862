from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import parse_qs, unquote, urlsplit

from sheetform.domain.ports import FormDataPort, Row

from .api_errors import ApiClientError, ApiError


@dataclass
class SheetServiceMock(FormDataPort):
    """Offline substitute for ``SheetRestAdapter`` backed by in-memory sheets.

    Option sheets hold rows as mappings with at least a ``value`` key; extra
    keys act as filter columns for ``?<requires>=<value>`` queries.
    """

    schemas: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    sheets: Dict[Tuple[str, str], List[Dict[str, Any]]] = field(default_factory=dict)
    records: Dict[str, Dict[str, Dict[str, Any]]] = field(default_factory=dict)
    entries: Dict[str, List[Row]] = field(default_factory=dict)
    appended: Dict[Tuple[str, str], List[Row]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.calls: List[Tuple[str, str, Any]] = []
        self._failures: Dict[str, ApiError] = {}

    # ---------- FormDataPort ----------

    def fetch(self, url: str) -> Any:
        self.calls.append(("GET", url, None))
        self._raise_if_failing(url)
        form_id, endpoint, rest, query = self._route(url)
        if endpoint == "schema":
            schema = self.schemas.get(form_id)
            if schema is None:
                raise self._not_found(f"Unknown form '{form_id}'", url)
            return copy.deepcopy(schema)
        if endpoint == "sheet" and rest:
            rows = self.sheets.get((form_id, rest))
            if rows is None:
                raise self._not_found(f"Unknown range '{rest}'", url)
            return [row.get("value") for row in rows if self._matches(row, query)]
        if endpoint == "current":
            index = (query.get("index") or [""])[0]
            record = self.records.get(form_id, {}).get(index)
            rows = [copy.deepcopy(record)] if record is not None else []
            return {"current": {"rows": rows}}
        raise self._not_found(f"No route for {url}", url)

    def append(self, url: str, rows: List[Row]) -> Any:
        self.calls.append(("POST", url, copy.deepcopy(rows)))
        self._raise_if_failing(url)
        form_id, endpoint, _, query = self._route(url)
        if endpoint != "entry":
            raise self._not_found(f"No route for {url}", url)
        if not isinstance(rows, list) or not all(isinstance(r, list) for r in rows):
            raise ApiClientError(
                "append: body must be a list of rows", status=400, context=f"POST {url}"
            )
        target = (query.get("range") or [None])[0]
        if target:
            self.appended.setdefault((form_id, target), []).extend(rows)
            sheet = self.sheets.setdefault((form_id, target), [])
            for row in rows:
                sheet.extend({"value": value} for value in row)
        else:
            self.entries.setdefault(form_id, []).extend(rows)
        return {"updates": {"updatedRows": len(rows)}}

    # ---------- Test helpers ----------

    def fail_on(self, fragment: str, error: Optional[ApiError] = None) -> None:
        """Make every request whose URL contains ``fragment`` raise ``error``."""
        self._failures[fragment] = error or ApiError(f"Simulated failure for {fragment}")

    def requests_to(self, fragment: str) -> List[Tuple[str, str, Any]]:
        return [call for call in self.calls if fragment in call[1]]

    # ---------- Internals ----------

    def _raise_if_failing(self, url: str) -> None:
        for fragment, error in self._failures.items():
            if fragment in url:
                raise error

    @staticmethod
    def _route(url: str) -> Tuple[str, str, str, Dict[str, List[str]]]:
        parts = urlsplit(url)
        segments = [unquote(seg) for seg in parts.path.split("/") if seg]
        if len(segments) < 3 or segments[0] != "api":
            return "", "", "", {}
        form_id, endpoint = segments[1], segments[2]
        rest = "/".join(segments[3:])
        return form_id, endpoint, rest, parse_qs(parts.query, keep_blank_values=True)

    @staticmethod
    def _matches(row: Dict[str, Any], query: Dict[str, List[str]]) -> bool:
        for key, values in query.items():
            if str(row.get(key)) != values[0]:
                return False
        return True

    @staticmethod
    def _not_found(message: str, url: str) -> ApiClientError:
        return ApiClientError(message, status=404, hint=message, context=url)


__all__ = ["SheetServiceMock"]
