"""Transition table that drives a schema-based form.

The orchestrator is installed as the store's middleware. Every dispatched
action is first applied unchanged (so subscribers observe it), then the
handler registered for its class runs with a ``FormContext``:

- ``ctx.next(...)`` applies follow-up actions without re-entering the table,
- ``ctx.dispatch(...)`` re-enters the table (used for fan-out and cascades),
- ``ctx.request(...)`` emits an ``ApiRequest`` effect tagged with its referrer.

Responses are correlated through ``PendingRequests``: the request id carried
by ``ApiSucceeded``/``ApiFailed`` resolves to the originating action, and the
success route is picked from the referrer's class. Two requests for the same
field are not fenced against each other; the last response to arrive wins.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Iterator, Optional, Type

from sheetform.domain.actions import (
    Action,
    ApiFailed,
    ApiRequest,
    ApiSucceeded,
    Clear,
    HttpMethod,
    InputField,
    RequestLoadIndex,
    RequestOptions,
    RequestSchema,
    SetError,
    SetField,
    SetFormDirty,
    SetIndexLoaded,
    SetLoader,
    SetNotification,
    SetOptions,
    SetSchema,
    Submit,
    ValidateField,
    ValidateForm,
)
from sheetform.domain.defaults import parse_default
from sheetform.domain.form_state import FormState
from sheetform.domain.schema import Schema
from sheetform.domain.time_utils import submission_timestamp
from sheetform.domain.urls import load_index_url, options_url, schema_url, submit_url
from sheetform.domain.validation import FieldValidator, validate
from sheetform.usecases.form_store import FormStore
from sheetform.usecases.request_runner import RequestRunner

INDEX_VALUE_SEPARATOR = "--"

MSG_SUBMIT_OK = "Form submission successful"
MSG_CORRECT_ERRORS = "Correct errors before submission"
MSG_NO_RECORD = "No record found for the current index"
MSG_BAD_SCHEMA = "Form schema could not be read"

_log = logging.getLogger(__name__)


class PendingRequests:
    """Outstanding requests keyed by request id, mapped to their referrer."""

    def __init__(self) -> None:
        self._ids: Iterator[int] = itertools.count(1)
        self._entries: Dict[str, Action] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def register(self, referrer: Action) -> str:
        request_id = f"req-{next(self._ids)}"
        self._entries[request_id] = referrer
        return request_id

    def resolve(self, request_id: str) -> Optional[Action]:
        return self._entries.pop(request_id, None)


@dataclass
class FormContext:
    """Explicit handler context: current state plus the emission channels."""

    store: FormStore
    orchestrator: "FormOrchestrator"

    @property
    def state(self) -> FormState:
        return self.store.state

    @property
    def pending(self) -> PendingRequests:
        return self.orchestrator.pending

    def now(self) -> datetime:
        return self.orchestrator.clock()

    def validate(self, field, value) -> list:
        return list(self.orchestrator.validator(field, value))

    def next(self, *actions: Action) -> None:
        for action in actions:
            self.store.apply(action)

    def dispatch(self, action: Action) -> None:
        self.store.dispatch(action)

    def notify(self, message: str) -> None:
        self.next(SetNotification(message=message))

    def request(
        self,
        method: HttpMethod,
        url: str,
        *,
        referrer: Action,
        body: Any = None,
    ) -> ApiRequest:
        request = ApiRequest(
            request_id=self.pending.register(referrer),
            method=method,
            url=url,
            body=body,
        )
        self.next(request)
        self.orchestrator.runner.submit(request, self.store.dispatch)
        return request


Handler = Callable[[FormContext, Any], None]
SuccessRoute = Callable[[FormContext, ApiSucceeded, Any], None]


class FormOrchestrator:
    """Store middleware executing the form transition table."""

    def __init__(
        self,
        runner: RequestRunner,
        *,
        validator: FieldValidator = validate,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.runner = runner
        self.validator = validator
        self.clock = clock or (lambda: datetime.now().astimezone())
        self.pending = PendingRequests()

    def attach(self, store: FormStore) -> FormStore:
        store.use(self)
        return store

    def __call__(self, store: FormStore, action: Action) -> None:
        store.apply(action)
        handler = _TRANSITIONS.get(type(action))
        if handler is None:
            return
        _log.debug("transition %s", type(action).__name__)
        handler(FormContext(store=store, orchestrator=self), action)


# ---------------------------------------------------------------------------
# Network completions
# ---------------------------------------------------------------------------


def _on_api_succeeded(ctx: FormContext, action: ApiSucceeded) -> None:
    referrer = ctx.pending.resolve(action.request_id)
    if referrer is None:
        _log.warning("Dropping response for unknown request %s", action.request_id)
        return
    route = _SUCCESS_ROUTES.get(type(referrer))
    if route is None:
        _log.warning("No success route for %s", type(referrer).__name__)
        return
    route(ctx, action, referrer)


def _on_api_failed(ctx: FormContext, action: ApiFailed) -> None:
    referrer = ctx.pending.resolve(action.request_id)
    if referrer is None:
        _log.warning("Failure for unknown request %s: %s", action.request_id, action.message)
    ctx.next(SetNotification(message=action.message), SetLoader(state=False))


def _schema_loaded(ctx: FormContext, action: ApiSucceeded, referrer: RequestSchema) -> None:
    try:
        schema = Schema.from_payload(action.payload)
    except ValueError as exc:
        _log.error("Schema for form '%s' rejected: %s", referrer.form_id, exc)
        ctx.next(SetNotification(message=f"{MSG_BAD_SCHEMA}: {exc}"), SetLoader(state=False))
        return
    today = ctx.now()
    ctx.next(SetSchema(schema=schema), SetLoader(state=False))
    for col in schema.columns:
        value = parse_default(col.config.default, col.type, now=today)
        ctx.next(SetField(field_id=col.id, value=value))


def _options_loaded(ctx: FormContext, action: ApiSucceeded, referrer: RequestOptions) -> None:
    payload = action.payload
    options = tuple(payload) if isinstance(payload, (list, tuple)) else ()
    ctx.next(SetOptions(field_id=referrer.field_id, options=options))


def _submit_done(ctx: FormContext, action: ApiSucceeded, referrer: Submit) -> None:
    ctx.dispatch(Clear())
    ctx.notify(MSG_SUBMIT_OK)
    form_id = ctx.state.id
    if form_id:
        ctx.dispatch(RequestSchema(form_id=form_id))


def _index_loaded(ctx: FormContext, action: ApiSucceeded, referrer: RequestLoadIndex) -> None:
    payload = action.payload if isinstance(action.payload, dict) else {}
    rows = (payload.get("current") or {}).get("rows") or []
    if not rows:
        ctx.next(SetNotification(message=MSG_NO_RECORD), SetLoader(state=False))
        return
    for field_id, value in rows[0].items():
        schema = ctx.state.schema
        if schema is None or not schema.has_field(field_id):
            _log.warning("Loaded record has unknown field '%s'; skipped", field_id)
            continue
        column = schema.column(field_id)
        typed = parse_default(value, column.type, now=ctx.now())
        ctx.dispatch(SetField(field_id=field_id, value=typed))
    ctx.next(SetIndexLoaded(state=True), SetLoader(state=False))


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def _request_schema(ctx: FormContext, action: RequestSchema) -> None:
    ctx.next(SetLoader(state=True))
    ctx.request("GET", schema_url(action.form_id), referrer=action)


def _input_field(ctx: FormContext, action: InputField) -> None:
    ctx.dispatch(SetField(field_id=action.field_id, value=action.value))
    ctx.next(SetFormDirty(state=True))


def _set_field(ctx: FormContext, action: SetField) -> None:
    schema = ctx.state.schema
    if schema is None or not schema.has_field(action.field_id):
        return
    key = schema.column(action.field_id).config.key
    for dependent in schema.dependents_of(key):
        if dependent != action.field_id:
            ctx.next(SetField(field_id=dependent, value=None))


def _request_options(ctx: FormContext, action: RequestOptions) -> None:
    state = ctx.state
    if state.schema is None or not state.id:
        _log.warning("Options for '%s' requested before the schema loaded", action.field_id)
        return
    column = state.schema.column(action.field_id)
    sheet_range = action.sheet_range or column.config.options.range
    if not sheet_range:
        _log.warning("Field '%s' has no options range", action.field_id)
        return
    requires = action.requires or column.config.requires
    require_value = action.require_value
    if requires and require_value is None:
        publisher = state.schema.publisher_of(requires)
        if publisher is not None:
            require_value = state.value_of(publisher.id)
        else:
            require_value = column.config.require_value
        if require_value is None:
            _log.debug("Options for '%s' wait for '%s'", action.field_id, requires)
            return
    url = options_url(state.id, sheet_range, requires=requires, require_value=require_value)
    ctx.request("GET", url, referrer=action)


def _validate_field(ctx: FormContext, action: ValidateField) -> None:
    schema = ctx.state.schema
    if schema is None:
        return
    column = schema.column(action.field_id)
    errors = ctx.validate(column, ctx.state.value_of(action.field_id))
    ctx.next(SetError(field_id=action.field_id, errors=tuple(errors)))


def _validate_form(ctx: FormContext, action: ValidateForm) -> None:
    schema = ctx.state.schema
    if schema is None:
        return
    for field_id in schema.field_ids():
        ctx.dispatch(ValidateField(field_id=field_id))


def _request_load_index(ctx: FormContext, action: RequestLoadIndex) -> None:
    state = ctx.state
    schema = state.schema
    if schema is None or not state.id:
        _log.warning("Index load requested before the schema loaded")
        return
    parts = []
    for key in schema.index_keys():
        publisher = schema.publisher_of(key)
        if publisher is None:
            raise KeyError(f"No field publishes index key '{key}'")
        value = state.value_of(publisher.id)
        parts.append("" if value is None else str(value))
    index_value = INDEX_VALUE_SEPARATOR.join(parts)
    ctx.next(SetLoader(state=True))
    ctx.request("GET", load_index_url(state.id, index_value), referrer=action)


def _submit(ctx: FormContext, action: Submit) -> None:
    ctx.dispatch(ValidateForm())
    state = ctx.state
    if state.schema is None or not state.id:
        _log.warning("Submit requested before the schema loaded")
        return
    if state.has_errors():
        _log.info("Submit blocked; invalid fields: %s", ", ".join(state.invalid_fields()))
        ctx.notify(MSG_CORRECT_ERRORS)
        return

    for field_id, created in state.created.items():
        if not created:
            continue
        target = state.schema.column(field_id).config.options.range
        ctx.request(
            "POST",
            submit_url(state.id, target),
            referrer=action,
            body=[state.created_values(field_id)],
        )

    row = [state.value_of(field_id) for field_id in sorted(state.schema.field_ids())]
    stamp = submission_timestamp(ctx.now())
    ctx.request("POST", submit_url(state.id), referrer=action, body=[[stamp, *row]])


def _clear(ctx: FormContext, action: Clear) -> None:
    ctx.next(SetFormDirty(state=False))


_TRANSITIONS: Dict[Type[Action], Handler] = {
    RequestSchema: _request_schema,
    ApiSucceeded: _on_api_succeeded,
    ApiFailed: _on_api_failed,
    InputField: _input_field,
    SetField: _set_field,
    RequestOptions: _request_options,
    ValidateField: _validate_field,
    ValidateForm: _validate_form,
    RequestLoadIndex: _request_load_index,
    Submit: _submit,
    Clear: _clear,
}

_SUCCESS_ROUTES: Dict[Type[Action], SuccessRoute] = {
    RequestSchema: _schema_loaded,
    RequestOptions: _options_loaded,
    Submit: _submit_done,
    RequestLoadIndex: _index_loaded,
}


__all__ = [
    "FormContext",
    "FormOrchestrator",
    "INDEX_VALUE_SEPARATOR",
    "MSG_CORRECT_ERRORS",
    "MSG_NO_RECORD",
    "MSG_SUBMIT_OK",
    "PendingRequests",
]
