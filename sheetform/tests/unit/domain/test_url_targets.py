from __future__ import annotations

from sheetform.domain.urls import load_index_url, options_url, schema_url, submit_url


def test_schema_url() -> None:
    assert schema_url("visits") == "/api/visits/schema"


def test_options_url_without_requirement_has_no_query_string() -> None:
    url = options_url("visits", "Sites!A:A")
    assert url == "/api/visits/sheet/Sites!A:A"
    assert "?" not in url


def test_options_url_with_requirement_has_single_pair() -> None:
    url = options_url("visits", "Rooms", requires="k", require_value="v")
    assert url == "/api/visits/sheet/Rooms?k=v"


def test_options_url_sends_missing_value_as_null() -> None:
    assert options_url("f", "Rooms", requires="site").endswith("?site=null")


def test_options_url_ignores_value_without_requirement() -> None:
    assert options_url("f", "Rooms", require_value="v") == "/api/f/sheet/Rooms"


def test_load_index_url_encodes_composite_value() -> None:
    assert load_index_url("visits", "x--y") == "/api/visits/current?index=x--y"
    assert load_index_url("visits", "a b") == "/api/visits/current?index=a+b"


def test_submit_url_primary_and_range_targets() -> None:
    assert submit_url("visits") == "/api/visits/entry"
    assert submit_url("visits", "Sites") == "/api/visits/entry?range=Sites"
