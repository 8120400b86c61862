from __future__ import annotations

from sheetform.adapters.api_errors import (
    build_error_message,
    extract_error_code,
    extract_error_hint,
    first_string,
    stringify,
)


def test_first_string_walks_nested_payloads() -> None:
    assert first_string({"error": {"message": "  nope "}}) == "nope"
    assert first_string([{}, "second"]) == "second"
    assert first_string({"other": "x"}) is None


def test_build_error_message_with_and_without_detail() -> None:
    assert build_error_message("GET /x", 400, {"detail": "bad"}) == "GET /x: bad (HTTP 400)"
    assert build_error_message("GET /x", 500, None) == "GET /x: HTTP 500"


def test_code_and_hint_extraction() -> None:
    assert extract_error_code({"code": 7}) == "7"
    assert extract_error_code("text") is None
    assert extract_error_hint({"errors": ["a", "b"]}) == "a; b"
    assert extract_error_hint("plain") == "plain"


def test_stringify_limits_length() -> None:
    assert stringify("x" * 300, limit=5) == "xxxxx"
    assert stringify({"a": 1, "b": None}) == "a=1"
