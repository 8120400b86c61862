from __future__ import annotations

import pytest

from sheetform.adapters.api_errors import (
    ApiClientError,
    ApiDecodeError,
    ApiError,
    ApiServerError,
    ApiTimeoutError,
)
from sheetform.domain.ports import UseCaseError
from sheetform.usecases.error_mapping import map_api_error


@pytest.mark.parametrize(
    "exc, code, message",
    [
        (ApiTimeoutError("t"), "REQUEST_TIMEOUT", "Request timed out. Check connection."),
        (ApiClientError("x", status=422, hint="bad row"), "INVALID_PARAMS", "Invalid request: bad row"),
        (ApiClientError("x", status=400), "INVALID_PARAMS", "Invalid request."),
        (ApiClientError("x", status=404, payload={"hint": "no form"}), "NOT_FOUND", "Not found: no form"),
        (ApiClientError("x", status=401), "AUTH_FAILED", "Auth failed / API key invalid."),
        (ApiClientError("x", status=409), "REQUEST_FAILED", "Request failed (HTTP 409)."),
        (ApiServerError("x", status=500), "SERVER_ERROR", "Data service error, try again."),
        (ApiDecodeError("x"), "BAD_RESPONSE", "Data service returned an unreadable response."),
        (ApiError("weird"), "API_ERROR", "weird"),
    ],
)
def test_adapter_errors_map_to_stable_codes(exc, code, message) -> None:
    err = map_api_error(exc, default_code="X")
    assert (err.code, err.message) == (code, message)


def test_foreign_exceptions_use_default_code() -> None:
    err = map_api_error(RuntimeError("kaput"), default_code="REQUEST_FAILED")
    assert (err.code, err.message) == ("REQUEST_FAILED", "kaput")

    err = map_api_error(RuntimeError(), default_code="REQUEST_FAILED", default_message="fallback")
    assert err.message == "fallback"


def test_use_case_errors_pass_through() -> None:
    original = UseCaseError("CUSTOM", "already mapped")
    assert map_api_error(original, default_code="X") is original
