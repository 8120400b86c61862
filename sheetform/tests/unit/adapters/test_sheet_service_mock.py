from __future__ import annotations

import pytest

from sheetform.adapters.api_errors import ApiClientError, ApiServerError
from sheetform.adapters.sheet_mock import SheetServiceMock


def _mock() -> SheetServiceMock:
    return SheetServiceMock(
        schemas={"f": {"columns": [{"id": "a"}]}},
        sheets={
            ("f", "Rooms"): [
                {"value": "R1", "site": "Lab"},
                {"value": "R2", "site": "Annex"},
            ]
        },
        records={"f": {"x--y": {"a": "1"}}},
    )


def test_schema_and_filtered_sheet() -> None:
    mock = _mock()

    assert mock.fetch("/api/f/schema") == {"columns": [{"id": "a"}]}
    assert mock.fetch("/api/f/sheet/Rooms") == ["R1", "R2"]
    assert mock.fetch("/api/f/sheet/Rooms?site=Annex") == ["R2"]


def test_current_returns_rows_envelope() -> None:
    mock = _mock()
    assert mock.fetch("/api/f/current?index=x--y") == {"current": {"rows": [{"a": "1"}]}}
    assert mock.fetch("/api/f/current?index=none") == {"current": {"rows": []}}


def test_append_to_entry_and_range() -> None:
    mock = _mock()

    mock.append("/api/f/entry", [["ts", 1]])
    mock.append("/api/f/entry?range=Rooms", [["R3"]])

    assert mock.entries["f"] == [["ts", 1]]
    assert mock.appended[("f", "Rooms")] == [["R3"]]
    assert "R3" in mock.fetch("/api/f/sheet/Rooms")
    assert len(mock.requests_to("/entry")) == 2


def test_unknown_routes_are_not_found() -> None:
    mock = _mock()
    with pytest.raises(ApiClientError) as info:
        mock.fetch("/api/zzz/schema")
    assert info.value.status == 404


def test_fail_on_injects_errors() -> None:
    mock = _mock()
    mock.fail_on("/schema", ApiServerError("down", status=503))
    with pytest.raises(ApiServerError):
        mock.fetch("/api/f/schema")
