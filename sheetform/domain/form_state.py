"""Live snapshot of one form editing session."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .actions import SetNotification
from .schema import FieldId, Schema

OptionList = Tuple[Any, ...]


@dataclass(frozen=True)
class FormState:
    """Immutable form snapshot; the reducer returns a new instance per change."""

    id: Optional[str] = None
    schema: Optional[Schema] = None
    fields: Dict[FieldId, Any] = field(default_factory=dict)
    errors: Dict[FieldId, Tuple[str, ...]] = field(default_factory=dict)
    options: Dict[FieldId, OptionList] = field(default_factory=dict)
    created: Dict[FieldId, OptionList] = field(default_factory=dict)
    loader: bool = False
    dirty: bool = False
    index_loaded: bool = False
    notifications: Tuple[SetNotification, ...] = ()

    @property
    def loaded(self) -> bool:
        return self.schema is not None

    def value_of(self, field_id: FieldId) -> Any:
        return self.fields.get(field_id)

    def errors_for(self, field_id: FieldId) -> Tuple[str, ...]:
        return self.errors.get(field_id, ())

    def has_errors(self) -> bool:
        return any(len(errs) for errs in self.errors.values())

    def invalid_fields(self) -> List[FieldId]:
        return [fid for fid, errs in self.errors.items() if errs]

    def created_values(self, field_id: FieldId) -> List[Any]:
        return [_option_value(opt) for opt in self.created.get(field_id, ())]


def _option_value(option: Any) -> Any:
    if isinstance(option, dict):
        return option.get("value")
    return option


__all__ = ["FormState", "OptionList"]
