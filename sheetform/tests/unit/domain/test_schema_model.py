from __future__ import annotations

import pytest

from sheetform.domain.schema import Field, FieldType, Schema


def _doc() -> dict:
    return {
        "index": "site+room",
        "columns": [
            {"id": "site", "type": "text", "config": {"key": "site", "options": {"range": "Sites"}}},
            {"id": "room", "type": "text", "config": {"key": "room", "requires": "site"}},
            {"id": "device", "type": "text", "config": {"requires": "site", "required": True}},
            {"id": "count", "type": "number", "label": "Count", "config": {"default": "0", "min": 0}},
        ],
    }


def test_from_payload_parses_columns_in_order() -> None:
    schema = Schema.from_payload(_doc())

    assert schema.field_ids() == ["site", "room", "device", "count"]
    count = schema.column("count")
    assert count.kind is FieldType.NUMBER
    assert count.label == "Count"
    assert count.config.default == "0"
    assert count.config.rules == {"min": 0}
    assert schema.column("site").label == "site"
    assert schema.column("site").config.options.range == "Sites"


def test_dependents_and_publishers_are_precomputed() -> None:
    schema = Schema.from_payload(_doc())

    assert schema.dependents_of("site") == ("room", "device")
    assert schema.dependents_of("room") == ()
    assert schema.dependents_of(None) == ()
    assert schema.publisher_of("room").id == "room"
    assert schema.publisher_of("missing") is None


def test_index_keys_split_on_plus() -> None:
    assert Schema.from_payload(_doc()).index_keys() == ["site", "room"]
    assert Schema.from_payload({"columns": []}).index_keys() == []


def test_unknown_type_is_other() -> None:
    assert Field(id="x", type="checkbox").kind is FieldType.OTHER


def test_column_lookup_raises_for_unknown_field() -> None:
    with pytest.raises(KeyError):
        Schema.from_payload(_doc()).column("nope")


@pytest.mark.parametrize(
    "payload",
    [
        None,
        [],
        {"columns": "date"},
        {"columns": [{"type": "text"}]},
        {"columns": [{"id": "a"}, {"id": "a"}]},
        {"columns": [{"id": "a", "config": "bad"}]},
    ],
)
def test_malformed_documents_raise_value_error(payload) -> None:
    with pytest.raises(ValueError):
        Schema.from_payload(payload)
