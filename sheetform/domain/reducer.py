"""
Form reducer.

Pure function: (FormState, action) -> FormState. No I/O; the input state is
never modified. Actions without a handler leave the state untouched, which is
how commands such as ``Submit`` pass through on their way to the orchestrator.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, Dict, Type

from .actions import (
    Action,
    Clear,
    CreateOption,
    RequestSchema,
    SetError,
    SetField,
    SetFormDirty,
    SetIndexLoaded,
    SetLoader,
    SetNotification,
    SetOptions,
    SetSchema,
)
from .form_state import FormState

_log = logging.getLogger(__name__)

Reducer = Callable[[FormState, Action], FormState]


def empty_state(form_id: str | None = None) -> FormState:
    return FormState(id=form_id)


def reduce_form(state: FormState, action: Action) -> FormState:
    handler = _HANDLERS.get(type(action))
    if handler is None:
        return state
    return handler(state, action)


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


def _request_schema(state: FormState, action: RequestSchema) -> FormState:
    return replace(state, id=action.form_id)


def _set_schema(state: FormState, action: SetSchema) -> FormState:
    return replace(state, schema=action.schema, fields={}, errors={}, options={}, created={})


def _set_field(state: FormState, action: SetField) -> FormState:
    if state.schema is not None and not state.schema.has_field(action.field_id):
        _log.warning("Ignoring value for unknown field '%s'", action.field_id)
        return state
    fields = dict(state.fields)
    fields[action.field_id] = action.value
    return replace(state, fields=fields)


def _set_error(state: FormState, action: SetError) -> FormState:
    errors = dict(state.errors)
    errors[action.field_id] = tuple(action.errors)
    return replace(state, errors=errors)


def _set_options(state: FormState, action: SetOptions) -> FormState:
    options = dict(state.options)
    options[action.field_id] = tuple(action.options)
    return replace(state, options=options)


def _create_option(state: FormState, action: CreateOption) -> FormState:
    label = action.label if action.label is not None else str(action.value)
    option = {"value": action.value, "label": label}
    options = dict(state.options)
    options[action.field_id] = options.get(action.field_id, ()) + (option,)
    created = dict(state.created)
    created[action.field_id] = created.get(action.field_id, ()) + (option,)
    return replace(state, options=options, created=created)


def _set_loader(state: FormState, action: SetLoader) -> FormState:
    return replace(state, loader=bool(action.state))


def _set_dirty(state: FormState, action: SetFormDirty) -> FormState:
    return replace(state, dirty=bool(action.state))


def _set_index_loaded(state: FormState, action: SetIndexLoaded) -> FormState:
    return replace(state, index_loaded=bool(action.state))


def _set_notification(state: FormState, action: SetNotification) -> FormState:
    return replace(state, notifications=state.notifications + (action,))


def _clear(state: FormState, action: Clear) -> FormState:
    # The form id and the notification log survive so a reload can follow.
    return FormState(id=state.id, notifications=state.notifications)


_HANDLERS: Dict[Type[Action], Callable[[FormState, Action], FormState]] = {
    RequestSchema: _request_schema,
    SetSchema: _set_schema,
    SetField: _set_field,
    SetError: _set_error,
    SetOptions: _set_options,
    CreateOption: _create_option,
    SetLoader: _set_loader,
    SetFormDirty: _set_dirty,
    SetIndexLoaded: _set_index_loaded,
    SetNotification: _set_notification,
    Clear: _clear,
}


__all__ = ["Reducer", "empty_state", "reduce_form"]
