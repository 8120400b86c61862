"""Shared HTTP transport for the data-service adapter.

This module provides a thin wrapper around ``requests.Session`` so the REST
adapter shares timeout policy, retry behavior, and API-key headers.

Dependencies:
    - ``requests`` for network I/O.
    - ``sheetform.adapters.api_errors.ApiTimeoutError`` for typed transport
      failures.

Call context:
    - Constructed by ``sheetform.adapters.sheet_rest.SheetRestAdapter``.
    - Used only inside the adapter layer; use cases talk to ``FormDataPort``.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests
from requests import exceptions as req_exc

from sheetform.adapters.api_errors import ApiError, ApiTimeoutError


@dataclass
class HttpConfig:
    """Timeout and retry configuration for adapter HTTP calls.

    Attributes:
        request_timeout_s: Timeout in seconds for each JSON API call.
        retries: Number of retry attempts after the initial request.
    """
    request_timeout_s: int = 10
    retries: int = 2


class RetryingSession:
    """Requests wrapper adding ``X-API-Key`` headers and transport retries.

    Only timeouts and connection failures are retried. Callers decide how to
    map non-2xx responses.
    """

    def __init__(self, api_key: Optional[str], cfg: HttpConfig) -> None:
        """Create a retry-enabled session.

        Args:
            api_key: Value for the ``X-API-Key`` header, or ``None``.
            cfg: Shared timeout and retry settings.
        """
        self.session = requests.Session()
        self.api_key = api_key
        self.cfg = cfg

    def _headers(self, json_body: bool = False) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers["X-API-Key"] = self.api_key
        if json_body:
            headers["Content-Type"] = "application/json"
        return headers

    def get(self, url: str, *, timeout: Optional[int] = None) -> requests.Response:
        """Send a GET request, retrying on timeout/connectivity failures.

        Raises:
            ApiTimeoutError: If every attempt fails at the transport level.
            ApiError: For other ``requests`` failures (invalid URL, etc.).
        """
        return self._send("GET", url, data=None, json_body=False, timeout=timeout)

    def post(
        self,
        url: str,
        *,
        json_body: Any = None,
        timeout: Optional[int] = None,
    ) -> requests.Response:
        """Send a JSON POST request, retrying on transport failures.

        ``json_body`` is serialized with ``json.dumps``; rows may therefore
        contain any JSON-compatible cell values.
        """
        data = None if json_body is None else json.dumps(json_body)
        return self._send(
            "POST", url, data=data, json_body=json_body is not None, timeout=timeout
        )

    def _send(
        self,
        method: str,
        url: str,
        *,
        data: Optional[str],
        json_body: bool,
        timeout: Optional[int],
    ) -> requests.Response:
        context = f"{method} {url}"
        last_err: ApiError | None = None
        for _ in range(self.cfg.retries + 1):
            try:
                return self.session.request(
                    method,
                    url,
                    data=data,
                    headers=self._headers(json_body=json_body),
                    timeout=timeout or self.cfg.request_timeout_s,
                )
            except (req_exc.Timeout, req_exc.ConnectionError):
                last_err = ApiTimeoutError(f"Timeout contacting {url}", context=context)
            except req_exc.RequestException as exc:
                raise ApiError(str(exc), context=context) from exc
        raise last_err


__all__ = ["HttpConfig", "RetryingSession"]
