from __future__ import annotations

from typing import Any, List

from sheetform.domain.actions import SetField, SetLoader
from sheetform.usecases.form_store import FormStore


def test_dispatch_without_middleware_applies_and_notifies() -> None:
    store = FormStore(form_id="f")
    seen: List[Any] = []
    store.subscribe(lambda action, state: seen.append((action, state.loader)))

    store.dispatch(SetLoader(state=True))

    assert store.get_state().loader is True
    assert store.state.id == "f"
    assert seen == [(SetLoader(state=True), True)]


def test_middleware_intercepts_dispatch() -> None:
    intercepted: List[Any] = []
    store = FormStore(middleware=lambda s, action: intercepted.append(action))

    store.dispatch(SetField(field_id="a", value=1))

    assert intercepted == [SetField(field_id="a", value=1)]
    assert store.state.fields == {}


def test_unsubscribe_stops_notifications() -> None:
    store = FormStore()
    seen: List[Any] = []
    remove = store.subscribe(lambda action, state: seen.append(action))

    assert remove() is True
    assert remove() is False
    store.dispatch(SetLoader(state=True))
    assert seen == []
