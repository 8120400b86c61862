"""Schema model shared by the orchestrator, reducer, and validators.

A schema document arrives from ``GET /api/{id}/schema`` as
``{"columns": [...], "index": "a+b"}``. ``Schema.from_payload`` turns it into
frozen value objects and precomputes the dependency lookups used on every
field mutation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

INDEX_KEY_SEPARATOR = "+"

FieldId = str
DependencyKey = str


class FieldType(str, Enum):
    """Declared input type of a column."""

    TEXT = "text"
    NUMBER = "number"
    DATE = "date"
    OTHER = "other"

    @classmethod
    def coerce(cls, raw: Any) -> "FieldType":
        text = str(raw or "").strip().lower()
        for member in cls:
            if member.value == text:
                return member
        return cls.OTHER


@dataclass(frozen=True)
class OptionsConfig:
    """Where option rows created for a field are stored."""

    range: Optional[str] = None


@dataclass(frozen=True)
class FieldConfig:
    """Recognized ``config`` keys of a column plus free-form validation rules."""

    default: Any = None
    key: Optional[DependencyKey] = None
    requires: Optional[DependencyKey] = None
    require_value: Any = None
    options: OptionsConfig = field(default_factory=OptionsConfig)
    rules: Mapping[str, Any] = field(default_factory=dict)

    _KNOWN_KEYS = ("default", "key", "requires", "requireValue", "options")

    @classmethod
    def from_payload(cls, payload: Any) -> "FieldConfig":
        if payload is None:
            return cls()
        if not isinstance(payload, Mapping):
            raise ValueError("Column config must be a mapping.")
        options_raw = payload.get("options")
        if isinstance(options_raw, Mapping):
            options = OptionsConfig(range=_optional_str(options_raw.get("range")))
        else:
            options = OptionsConfig()
        rules = {k: v for k, v in payload.items() if k not in cls._KNOWN_KEYS}
        return cls(
            default=payload.get("default"),
            key=_optional_str(payload.get("key")),
            requires=_optional_str(payload.get("requires")),
            require_value=payload.get("requireValue"),
            options=options,
            rules=rules,
        )


@dataclass(frozen=True)
class Field:
    """One typed column of a form."""

    id: FieldId
    type: str = FieldType.TEXT.value
    label: str = ""
    config: FieldConfig = field(default_factory=FieldConfig)

    def __post_init__(self) -> None:
        if not isinstance(self.id, str) or not self.id.strip():
            raise ValueError("Field id must be a non-empty string.")
        if not self.label:
            object.__setattr__(self, "label", self.id)

    @property
    def kind(self) -> FieldType:
        return FieldType.coerce(self.type)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "Field":
        if not isinstance(payload, Mapping):
            raise ValueError("Column entries must be mappings.")
        raw_id = payload.get("id")
        if not isinstance(raw_id, str) or not raw_id.strip():
            raise ValueError("Column is missing an 'id'.")
        return cls(
            id=raw_id,
            type=str(payload.get("type") or FieldType.TEXT.value),
            label=str(payload.get("label") or ""),
            config=FieldConfig.from_payload(payload.get("config")),
        )


@dataclass(frozen=True)
class Schema:
    """Ordered columns plus the composite index used to load a record."""

    columns: Tuple[Field, ...]
    index: str = ""
    _by_id: Dict[FieldId, Field] = field(init=False, repr=False, compare=False)
    _dependents: Dict[DependencyKey, Tuple[FieldId, ...]] = field(
        init=False, repr=False, compare=False
    )
    _publishers: Dict[DependencyKey, FieldId] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        by_id: Dict[FieldId, Field] = {}
        dependents: Dict[DependencyKey, List[FieldId]] = {}
        publishers: Dict[DependencyKey, FieldId] = {}
        for col in self.columns:
            if col.id in by_id:
                raise ValueError(f"Duplicate column id '{col.id}'.")
            by_id[col.id] = col
            if col.config.key and col.config.key not in publishers:
                publishers[col.config.key] = col.id
            if col.config.requires:
                dependents.setdefault(col.config.requires, []).append(col.id)
        object.__setattr__(self, "_by_id", by_id)
        object.__setattr__(
            self, "_dependents", {k: tuple(v) for k, v in dependents.items()}
        )
        object.__setattr__(self, "_publishers", publishers)

    @classmethod
    def from_payload(cls, payload: Any) -> "Schema":
        """Parse a schema document returned by the data service."""
        if isinstance(payload, Schema):
            return payload
        if not isinstance(payload, Mapping):
            raise ValueError("Schema payload must be a mapping.")
        columns = payload.get("columns")
        if not isinstance(columns, list):
            raise ValueError("Schema payload is missing a 'columns' list.")
        return cls(
            columns=tuple(Field.from_payload(col) for col in columns),
            index=str(payload.get("index") or ""),
        )

    def field_ids(self) -> List[FieldId]:
        return [col.id for col in self.columns]

    def has_field(self, field_id: FieldId) -> bool:
        return field_id in self._by_id

    def column(self, field_id: FieldId) -> Field:
        try:
            return self._by_id[field_id]
        except KeyError as exc:
            raise KeyError(f"Unknown field '{field_id}'") from exc

    def dependents_of(self, key: Optional[DependencyKey]) -> Tuple[FieldId, ...]:
        """Field ids whose ``requires`` equals ``key``."""
        if not key:
            return ()
        return self._dependents.get(key, ())

    def publisher_of(self, key: Optional[DependencyKey]) -> Optional[Field]:
        """Column publishing ``key`` via ``config.key``, if any."""
        if not key:
            return None
        field_id = self._publishers.get(key)
        return self._by_id[field_id] if field_id else None

    def index_keys(self) -> List[DependencyKey]:
        if not self.index:
            return []
        return [k for k in self.index.split(INDEX_KEY_SEPARATOR) if k]


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


__all__ = [
    "DependencyKey",
    "Field",
    "FieldConfig",
    "FieldId",
    "FieldType",
    "INDEX_KEY_SEPARATOR",
    "OptionsConfig",
    "Schema",
]
