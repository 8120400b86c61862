"""Command line host for a single form session.

Example::

    sheetform --base-url https://sheets.example --form visits \\
        --set date=2024-05-01 --set count=3 --submit
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from typing import Any, List, Optional, Sequence, Tuple

from ..adapters.storage_local import StorageLocal
from ..domain.actions import Action, ApiFailed, SetNotification
from ..domain.form_state import FormState
from ..usecases.form_orchestrator import MSG_CORRECT_ERRORS, MSG_NO_RECORD
from ..utils import logging as logging_utils
from ..viewmodels.settings_vm import BASE_URL_ENV, SettingsVM
from .controller import AppController

_log = logging.getLogger("sheetform.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="sheetform", description="Fill and submit a sheet-backed form.")
    parser.add_argument("--settings", help="Path to a user_settings.json file.")
    parser.add_argument("--base-url", help="Data service base URL (overrides settings).")
    parser.add_argument("--form", help="Form id (overrides settings).")
    parser.add_argument(
        "--set",
        dest="assignments",
        action="append",
        default=[],
        metavar="FIELD=VALUE",
        help="Enter a field value; JSON literals are decoded. Repeatable.",
    )
    parser.add_argument("--load-index", action="store_true", help="Load the record matching the index fields.")
    parser.add_argument("--submit", action="store_true", help="Validate and submit the form.")
    parser.add_argument("--debug", action="store_true", help="Enable DEBUG logging.")
    return parser


def parse_assignment(text: str) -> Tuple[str, Any]:
    """Split ``field=value``; the value is decoded as JSON when possible."""
    field_id, sep, raw = text.partition("=")
    field_id = field_id.strip()
    if not sep or not field_id:
        raise ValueError(f"Expected FIELD=VALUE, got {text!r}")
    try:
        value = json.loads(raw)
    except ValueError:
        value = raw
    return field_id, value


def load_settings(args: argparse.Namespace) -> SettingsVM:
    settings = SettingsVM()
    if args.settings:
        root, filename = os.path.split(os.path.abspath(args.settings))
        payload = StorageLocal(root, filename=filename).load_user_settings()
        if payload is None:
            raise FileNotFoundError(args.settings)
        settings.apply_dict(payload)
    settings.apply_env()
    if args.base_url:
        settings.api_base_url = args.base_url
    if args.form:
        settings.form_id = args.form
    if args.debug:
        settings.debug_logging = True
    return settings


def snapshot(state: FormState) -> dict:
    return {
        "form": state.id,
        "fields": state.fields,
        "errors": {fid: list(errs) for fid, errs in state.errors.items() if errs},
        "notifications": [note.message for note in state.notifications],
    }


def main(argv: Optional[Sequence[str]] = None, *, controller: Optional[AppController] = None) -> int:
    args = build_parser().parse_args(argv)
    logging_utils.configure_root()

    try:
        if controller is None:
            settings = load_settings(args)
            controller = AppController(settings)
        else:
            settings = controller.settings_vm
            if args.form:
                settings.form_id = args.form
        assignments = [parse_assignment(item) for item in args.assignments]
    except (OSError, ValueError) as exc:
        _log.error("Invalid configuration: %s", exc)
        return 2

    logging_utils.apply_debug_preference(settings.debug_logging)
    if not settings.form_id:
        _log.error("No form id given; use --form or set form_id in the settings file")
        return 2
    if not controller.ensure_ready():
        _log.error("No data service configured; use --base-url or %s", BASE_URL_ENV)
        return 2

    vm = controller.form_vm
    failures: List[Action] = []

    def _track(action: Action, _state: FormState) -> None:
        if isinstance(action, ApiFailed):
            failures.append(action)
        elif isinstance(action, SetNotification) and action.message in (MSG_CORRECT_ERRORS, MSG_NO_RECORD):
            failures.append(action)

    controller.store.subscribe(_track)

    vm.load(settings.form_id)
    controller.drain()
    if vm.state.loaded:
        for field_id, value in assignments:
            vm.input(field_id, value)
        if args.load_index:
            vm.load_index()
            controller.drain()
        if args.submit:
            vm.submit()
            controller.drain()

    json.dump(snapshot(vm.state), sys.stdout, indent=2, default=str)
    sys.stdout.write("\n")

    if failures or not vm.state.loaded:
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
