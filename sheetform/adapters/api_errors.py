"""Typed failures raised by data-service adapters plus payload helpers."""

from __future__ import annotations

from typing import Any, Optional


class ApiError(RuntimeError):
    """Base class for data-service adapter failures."""

    def __init__(
        self,
        message: str,
        *,
        status: Optional[int] = None,
        code: Optional[str] = None,
        hint: Optional[str] = None,
        payload: Any = None,
        context: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status = status
        self.code = code
        self.hint = hint
        self.payload = payload
        self.context = context


class ApiClientError(ApiError):
    """HTTP 4xx from the data service (unknown form, bad range, bad row)."""


class ApiServerError(ApiError):
    """HTTP 5xx from the data service."""


class ApiTimeoutError(ApiError):
    """Transport level timeout or connectivity failure."""

    def __init__(self, message: str, *, context: Optional[str] = None) -> None:
        super().__init__(message, context=context)


class ApiDecodeError(ApiError):
    """2xx response whose body is not the JSON the endpoint promises."""


def parse_error_payload(resp: Any) -> Any:
    """Best-effort extraction of an error body without raising."""
    try:
        return resp.json()
    except Exception:
        snippet = getattr(resp, "text", "") or ""
        return snippet[:400] or None


def build_error_message(ctx: str, status: int, payload: Any) -> str:
    detail = first_string(payload)
    if detail:
        return f"{ctx}: {detail} (HTTP {status})"
    return f"{ctx}: HTTP {status}"


def extract_error_code(payload: Any) -> Optional[str]:
    if not isinstance(payload, dict):
        return None
    for key in ("code", "error_code", "status"):
        value = payload.get(key)
        if value is not None and value != "":
            return str(value)
    return None


def extract_error_hint(payload: Any) -> Optional[str]:
    if isinstance(payload, dict):
        for key in ("hint", "details", "errors"):
            text = stringify(payload.get(key))
            if text:
                return text
        return None
    return stringify(payload)


def first_string(payload: Any) -> Optional[str]:
    """First non-blank human readable message nested anywhere in ``payload``."""
    if isinstance(payload, str):
        return payload.strip() or None
    if isinstance(payload, dict):
        for key in ("message", "detail", "error", "title"):
            candidate = first_string(payload.get(key))
            if candidate:
                return candidate
        return None
    if isinstance(payload, list):
        for item in payload:
            candidate = first_string(item)
            if candidate:
                return candidate
    return None


def stringify(data: Any, *, limit: int = 200) -> Optional[str]:
    if data is None:
        return None
    if isinstance(data, str):
        text = data.strip()
    elif isinstance(data, list):
        parts = [part for part in (stringify(item, limit=limit) for item in data[:3]) if part]
        text = "; ".join(parts)
    elif isinstance(data, dict):
        pairs = []
        for key, value in list(data.items())[:4]:
            value_text = stringify(value, limit=limit)
            if value_text:
                pairs.append(f"{key}={value_text}")
        text = ", ".join(pairs)
    else:
        text = str(data).strip()
    return text[:limit] if text else None


__all__ = [
    "ApiClientError",
    "ApiDecodeError",
    "ApiError",
    "ApiServerError",
    "ApiTimeoutError",
    "build_error_message",
    "extract_error_code",
    "extract_error_hint",
    "first_string",
    "parse_error_payload",
    "stringify",
]
