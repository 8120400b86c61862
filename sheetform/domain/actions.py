"""Actions flowing through the form store.

Every transition kind is its own frozen dataclass carrying a typed payload, so
handlers are selected by class instead of by string tag. Three groups exist:

- commands the orchestrator reacts to (``RequestSchema``, ``InputField`` ...),
- document actions the reducer applies (``SetSchema``, ``SetError`` ...),
- the network effect ``ApiRequest`` and its completions ``ApiSucceeded`` /
  ``ApiFailed``, correlated by ``request_id``.

UI toggles and notifications carry a ``feature`` tag so a host can filter by
subsystem; everything emitted here uses ``FORM``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Optional, Tuple, Union

from .schema import FieldId, Schema

FORM = "form"

HttpMethod = Literal["GET", "POST"]


@dataclass(frozen=True)
class Action:
    """Marker base class for everything dispatched through the store."""


# ---- Commands ----
@dataclass(frozen=True)
class RequestSchema(Action):
    form_id: str


@dataclass(frozen=True)
class RequestOptions(Action):
    """Fetch the option list of ``field_id``.

    ``sheet_range`` and ``requires`` fall back to the field's config; the
    filter value falls back to the current value of the publishing field.
    """

    field_id: FieldId
    sheet_range: Optional[str] = None
    requires: Optional[str] = None
    require_value: Any = None


@dataclass(frozen=True)
class RequestLoadIndex(Action):
    pass


@dataclass(frozen=True)
class Submit(Action):
    pass


@dataclass(frozen=True)
class InputField(Action):
    """Raw user input for one field."""

    field_id: FieldId
    value: Any


@dataclass(frozen=True)
class SetField(Action):
    """Programmatic write of one field value."""

    field_id: FieldId
    value: Any


@dataclass(frozen=True)
class ValidateField(Action):
    field_id: FieldId


@dataclass(frozen=True)
class ValidateForm(Action):
    pass


@dataclass(frozen=True)
class Clear(Action):
    pass


@dataclass(frozen=True)
class CreateOption(Action):
    """A choice typed by the user that does not exist in the option list yet."""

    field_id: FieldId
    value: Any
    label: Optional[str] = None


# ---- Document actions ----
@dataclass(frozen=True)
class SetSchema(Action):
    schema: Schema


@dataclass(frozen=True)
class SetError(Action):
    field_id: FieldId
    errors: Tuple[str, ...] = ()


@dataclass(frozen=True)
class SetOptions(Action):
    field_id: FieldId
    options: Tuple[Any, ...] = ()


@dataclass(frozen=True)
class SetLoader(Action):
    state: bool
    feature: str = FORM


@dataclass(frozen=True)
class SetFormDirty(Action):
    state: bool
    feature: str = FORM


@dataclass(frozen=True)
class SetIndexLoaded(Action):
    state: bool
    feature: str = FORM


@dataclass(frozen=True)
class SetNotification(Action):
    message: str
    feature: str = FORM


# ---- Network ----
@dataclass(frozen=True)
class ApiRequest(Action):
    """Fire-and-forget request effect; completes as ``ApiSucceeded``/``ApiFailed``."""

    request_id: str
    method: HttpMethod
    url: str
    body: Any = None
    feature: str = FORM


@dataclass(frozen=True)
class ApiSucceeded(Action):
    request_id: str
    payload: Any = None
    feature: str = FORM


@dataclass(frozen=True)
class ApiFailed(Action):
    request_id: str
    message: str
    code: Optional[str] = None
    feature: str = FORM


Command = Union[
    RequestSchema,
    RequestOptions,
    RequestLoadIndex,
    Submit,
    InputField,
    SetField,
    ValidateField,
    ValidateForm,
    Clear,
    CreateOption,
]


__all__ = [
    "Action",
    "ApiFailed",
    "ApiRequest",
    "ApiSucceeded",
    "Clear",
    "Command",
    "CreateOption",
    "FORM",
    "HttpMethod",
    "InputField",
    "RequestLoadIndex",
    "RequestOptions",
    "RequestSchema",
    "SetError",
    "SetField",
    "SetFormDirty",
    "SetIndexLoaded",
    "SetLoader",
    "SetNotification",
    "SetOptions",
    "SetSchema",
    "Submit",
    "ValidateField",
    "ValidateForm",
]
