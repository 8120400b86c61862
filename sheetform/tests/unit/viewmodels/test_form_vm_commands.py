from __future__ import annotations

from typing import List

from sheetform.adapters.sheet_mock import SheetServiceMock
from sheetform.domain.actions import SetLoader
from sheetform.usecases.form_orchestrator import MSG_CORRECT_ERRORS, FormOrchestrator
from sheetform.usecases.form_store import FormStore
from sheetform.usecases.request_runner import RequestRunner
from sheetform.viewmodels.form_vm import FormVM

SCHEMA = {
    "columns": [
        {"id": "site", "type": "text", "config": {"key": "site", "options": {"range": "Sites"}}},
        {"id": "room", "type": "text", "config": {"requires": "site", "required": True}},
    ]
}


def _vm(**callbacks):
    port = SheetServiceMock(
        schemas={"f": SCHEMA},
        sheets={("f", "Sites"): [{"value": "Lab"}, {"value": "Annex"}]},
    )
    runner = RequestRunner(port)
    store = FormOrchestrator(runner).attach(FormStore())
    return FormVM(store, **callbacks), runner, port


def test_load_exposes_columns_and_loader_callbacks() -> None:
    loader_states: List[bool] = []
    vm, runner, _ = _vm(on_loader=loader_states.append)

    vm.load("f")
    assert vm.loading is True
    runner.drain()

    assert [c.id for c in vm.columns] == ["site", "room"]
    assert vm.fields == {"site": None, "room": None}
    assert loader_states == [True, False]
    assert vm.loading is False


def test_input_and_options() -> None:
    vm, runner, _ = _vm()
    vm.load("f")
    runner.drain()

    vm.input("site", "Lab")
    vm.request_options("site")
    runner.drain()

    assert vm.dirty is True
    assert vm.options["site"] == ("Lab", "Annex")


def test_submit_blocked_reports_through_callback() -> None:
    messages: List[str] = []
    vm, runner, port = _vm(on_notification=messages.append)
    vm.load("f")
    runner.drain()

    vm.submit()
    runner.drain()

    assert messages == [MSG_CORRECT_ERRORS]
    assert vm.messages == [MSG_CORRECT_ERRORS]
    assert vm.errors == {"room": ("This field is required.",)}
    assert vm.error_for("room") == "This field is required."
    assert vm.error_for("site") is None
    assert vm.can_submit is False
    assert port.requests_to("/entry") == []


def test_create_option_and_clear_reload() -> None:
    vm, runner, port = _vm()
    vm.load("f")
    runner.drain()
    vm.create_option("site", "Depot")
    assert vm.state.created_values("site") == ["Depot"]

    vm.clear()
    runner.drain()

    assert vm.state.created == {}
    assert vm.fields == {"site": None, "room": None}
    assert len(port.requests_to("/schema")) == 2


def test_dispose_detaches_callbacks() -> None:
    changes: List[object] = []
    vm, _, _ = _vm(on_change=changes.append)

    vm.dispose()
    vm.store.dispatch(SetLoader(state=True))

    assert changes == []
