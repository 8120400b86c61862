"""Domain package exports for the schema model, form state, and actions."""

from .actions import FORM, Action
from .defaults import parse_default
from .form_state import FormState
from .reducer import empty_state, reduce_form
from .schema import Field, FieldConfig, FieldType, OptionsConfig, Schema
from .urls import load_index_url, options_url, schema_url, submit_url

__all__ = [
    "Action",
    "FORM",
    "Field",
    "FieldConfig",
    "FieldType",
    "FormState",
    "OptionsConfig",
    "Schema",
    "empty_state",
    "load_index_url",
    "options_url",
    "parse_default",
    "reduce_form",
    "schema_url",
    "submit_url",
]
