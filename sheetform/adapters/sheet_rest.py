from __future__ import annotations

import logging
from typing import Any, List, Optional

import requests

from sheetform.domain.ports import FormDataPort, Row

from .api_errors import (
    ApiClientError,
    ApiDecodeError,
    ApiError,
    ApiServerError,
    build_error_message,
    extract_error_code,
    extract_error_hint,
    parse_error_payload,
)
from .http_client import HttpConfig, RetryingSession

_log = logging.getLogger(__name__)


class SheetRestAdapter(FormDataPort):
    """REST adapter for the spreadsheet-backed form data service."""

    def __init__(
        self,
        base_url: str,
        *,
        api_key: Optional[str] = None,
        request_timeout_s: int = 10,
        retries: int = 2,
    ) -> None:
        if not base_url or not str(base_url).strip():
            raise ValueError("SheetRestAdapter requires a base URL")
        self.base_url = str(base_url).strip().rstrip("/")
        self.cfg = HttpConfig(request_timeout_s=request_timeout_s, retries=retries)
        self.session = RetryingSession(api_key or None, self.cfg)

    def fetch(self, url: str) -> Any:
        full = self._make_url(url)
        _log.debug("GET %s", full)
        resp = self.session.get(full)
        self._ensure_ok(resp, f"GET {url}")
        return self._json_any(resp, f"GET {url}")

    def append(self, url: str, rows: List[Row]) -> Any:
        full = self._make_url(url)
        _log.debug("POST %s (%d row(s))", full, len(rows))
        resp = self.session.post(full, json_body=rows)
        self._ensure_ok(resp, f"POST {url}")
        if not getattr(resp, "text", ""):
            return None
        return self._json_any(resp, f"POST {url}")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _make_url(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        if not path.startswith("/"):
            path = f"/{path}"
        return f"{self.base_url}{path}"

    @staticmethod
    def _ensure_ok(resp: requests.Response, ctx: str) -> None:
        status = resp.status_code
        if 200 <= status < 300:
            return
        payload = parse_error_payload(resp)
        message = build_error_message(ctx, status, payload)
        if 400 <= status < 500:
            raise ApiClientError(
                message,
                status=status,
                code=extract_error_code(payload),
                hint=extract_error_hint(payload),
                payload=payload,
                context=ctx,
            )
        if 500 <= status < 600:
            raise ApiServerError(message, status=status, payload=payload, context=ctx)
        raise ApiError(message, status=status, payload=payload, context=ctx)

    @staticmethod
    def _json_any(resp: requests.Response, ctx: str) -> Any:
        try:
            return resp.json()
        except ValueError as exc:
            snippet = (getattr(resp, "text", "") or "")[:400]
            raise ApiDecodeError(
                f"{ctx}: invalid JSON response: {snippet}",
                status=resp.status_code,
                context=ctx,
            ) from exc


__all__ = ["SheetRestAdapter"]
