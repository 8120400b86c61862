"""State container with a single middleware seam.

``dispatch`` hands an action to the middleware (the orchestrator), which may
react to it; ``apply`` runs the reducer and notifies subscribers without any
orchestration. Both run synchronously on the caller's thread.
"""

from __future__ import annotations

from typing import Callable, List, Optional

from sheetform.domain.actions import Action
from sheetform.domain.form_state import FormState
from sheetform.domain.reducer import Reducer, empty_state, reduce_form

Listener = Callable[[Action, FormState], None]
Middleware = Callable[["FormStore", Action], None]


class FormStore:
    """Holds the current ``FormState`` and fans actions out to subscribers."""

    def __init__(
        self,
        *,
        form_id: Optional[str] = None,
        reducer: Reducer = reduce_form,
        middleware: Optional[Middleware] = None,
    ) -> None:
        self._state = empty_state(form_id)
        self._reducer = reducer
        self._middleware = middleware
        self._listeners: List[Listener] = []

    @property
    def state(self) -> FormState:
        return self._state

    def get_state(self) -> FormState:
        return self._state

    def use(self, middleware: Optional[Middleware]) -> None:
        self._middleware = middleware

    def subscribe(self, listener: Listener) -> Callable[[], bool]:
        """Register ``listener(action, state)``; returns a remover."""
        self._listeners.append(listener)

        def _remove() -> bool:
            if listener in self._listeners:
                self._listeners.remove(listener)
                return True
            return False

        return _remove

    def dispatch(self, action: Action) -> None:
        if self._middleware is None:
            self.apply(action)
            return
        self._middleware(self, action)

    def apply(self, action: Action) -> None:
        """Reduce ``action`` into the state and notify subscribers."""
        self._state = self._reducer(self._state, action)
        for listener in list(self._listeners):
            listener(action, self._state)


__all__ = ["FormStore", "Listener", "Middleware"]
