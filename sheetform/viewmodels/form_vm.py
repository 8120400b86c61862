from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..domain.actions import (
    FORM,
    Action,
    Clear,
    CreateOption,
    InputField,
    RequestLoadIndex,
    RequestOptions,
    RequestSchema,
    SetField,
    SetLoader,
    SetNotification,
    Submit,
    ValidateField,
    ValidateForm,
)
from ..domain.form_state import FormState
from ..domain.schema import Field
from ..usecases.form_store import FormStore


@dataclass
class FormVM:
    """Command surface and read-only form state for a host UI.

    Every command becomes exactly one dispatched action. Host callbacks receive
    notifications and loader toggles for the ``form`` feature only.
    """

    store: FormStore
    on_notification: Optional[Callable[[str], None]] = None
    on_loader: Optional[Callable[[bool], None]] = None
    on_change: Optional[Callable[[FormState], None]] = None

    messages: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self._unsubscribe = self.store.subscribe(self._on_action)

    # ---------- Commands ----------
    def load(self, form_id: str) -> None:
        self.store.dispatch(RequestSchema(form_id=form_id))

    def reload(self) -> None:
        if self.state.id:
            self.load(self.state.id)

    def input(self, field_id: str, value: Any) -> None:
        self.store.dispatch(InputField(field_id=field_id, value=value))

    def set_field(self, field_id: str, value: Any) -> None:
        self.store.dispatch(SetField(field_id=field_id, value=value))

    def request_options(self, field_id: str, **overrides: Any) -> None:
        self.store.dispatch(RequestOptions(field_id=field_id, **overrides))

    def create_option(self, field_id: str, value: Any, label: Optional[str] = None) -> None:
        self.store.dispatch(CreateOption(field_id=field_id, value=value, label=label))

    def validate_field(self, field_id: str) -> None:
        self.store.dispatch(ValidateField(field_id=field_id))

    def validate_form(self) -> None:
        self.store.dispatch(ValidateForm())

    def load_index(self) -> None:
        self.store.dispatch(RequestLoadIndex())

    def submit(self) -> None:
        self.store.dispatch(Submit())

    def clear(self) -> None:
        """Drop all entered values and reload the schema defaults."""
        self.store.dispatch(Clear())
        self.reload()

    def dispose(self) -> None:
        self._unsubscribe()

    # ---------- State ----------
    @property
    def state(self) -> FormState:
        return self.store.state

    @property
    def columns(self) -> Tuple[Field, ...]:
        schema = self.state.schema
        return schema.columns if schema else ()

    @property
    def fields(self) -> Dict[str, Any]:
        return dict(self.state.fields)

    @property
    def errors(self) -> Dict[str, Tuple[str, ...]]:
        return {fid: errs for fid, errs in self.state.errors.items() if errs}

    @property
    def options(self) -> Dict[str, Tuple[Any, ...]]:
        return dict(self.state.options)

    @property
    def loading(self) -> bool:
        return self.state.loader

    @property
    def dirty(self) -> bool:
        return self.state.dirty

    @property
    def index_loaded(self) -> bool:
        return self.state.index_loaded

    @property
    def can_submit(self) -> bool:
        return self.state.loaded and not self.state.loader and not self.state.has_errors()

    def error_for(self, field_id: str) -> Optional[str]:
        errors = self.state.errors_for(field_id)
        return errors[0] if errors else None

    # ---------- Internals ----------
    def _on_action(self, action: Action, state: FormState) -> None:
        if isinstance(action, SetNotification) and action.feature == FORM:
            self.messages.append(action.message)
            if self.on_notification:
                self.on_notification(action.message)
        elif isinstance(action, SetLoader) and action.feature == FORM:
            if self.on_loader:
                self.on_loader(action.state)
        if self.on_change:
            self.on_change(state)


__all__ = ["FormVM"]
