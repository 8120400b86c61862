"""Executor for ``ApiRequest`` effects emitted by the orchestrator.

Requests never block the transition that issued them. The runner hands each
one to an ``after(delay_ms, callback)`` compatible scheduler (a Tk root's
``after`` works as-is); when the callback runs, the port is called and the
outcome is delivered back to the store as ``ApiSucceeded`` or ``ApiFailed``.
Without an injected scheduler a cooperative ``DeferredQueue`` is used and the
host pumps it with ``drain``.
"""

from __future__ import annotations

import itertools
import logging
from collections import deque
from typing import Any, Callable, Deque, Optional, Tuple

from sheetform.domain.actions import Action, ApiFailed, ApiRequest, ApiSucceeded
from sheetform.domain.ports import FormDataPort
from sheetform.usecases.error_mapping import map_api_error

ScheduleFn = Callable[[int, Callable[[], None]], Any]
Deliver = Callable[[Action], None]

_log = logging.getLogger(__name__)


class DeferredQueue:
    """Single-threaded FIFO of pending callbacks.

    ``delay_ms`` is accepted for signature compatibility only; callbacks run in
    the order they were scheduled.
    """

    def __init__(self) -> None:
        self._pending: Deque[Tuple[str, Callable[[], None]]] = deque()
        self._tokens = itertools.count(1)

    def __len__(self) -> int:
        return len(self._pending)

    def after(self, delay_ms: int, callback: Callable[[], None]) -> str:
        token = f"deferred-{next(self._tokens)}"
        self._pending.append((token, callback))
        return token

    def cancel(self, token: str) -> None:
        self._pending = deque(item for item in self._pending if item[0] != token)

    def run_next(self) -> bool:
        if not self._pending:
            return False
        _, callback = self._pending.popleft()
        callback()
        return True

    def drain(self, max_steps: Optional[int] = None) -> int:
        """Run callbacks, including ones scheduled meanwhile, until idle."""
        steps = 0
        while self._pending and (max_steps is None or steps < max_steps):
            self.run_next()
            steps += 1
        return steps


class RequestRunner:
    """Run request effects against a ``FormDataPort`` on a cooperative scheduler."""

    def __init__(self, port: FormDataPort, *, schedule: Optional[ScheduleFn] = None) -> None:
        self.port = port
        self.queue: Optional[DeferredQueue] = None
        if schedule is None:
            self.queue = DeferredQueue()
            schedule = self.queue.after
        self._schedule = schedule

    def submit(self, request: ApiRequest, deliver: Deliver) -> None:
        """Schedule ``request``; ``deliver`` later receives its completion action."""
        self._schedule(0, lambda: deliver(self.execute(request)))

    def execute(self, request: ApiRequest) -> Action:
        """Perform ``request`` now and return the completion action."""
        try:
            if request.method == "GET":
                payload = self.port.fetch(request.url)
            else:
                payload = self.port.append(request.url, request.body)
        except Exception as exc:
            err = map_api_error(exc, default_code="REQUEST_FAILED")
            _log.warning("%s %s failed [%s]: %s", request.method, request.url, err.code, err.message)
            return ApiFailed(request_id=request.request_id, message=err.message, code=err.code)
        return ApiSucceeded(request_id=request.request_id, payload=payload)

    def drain(self, max_steps: Optional[int] = None) -> int:
        """Pump the built-in queue; a no-op when an external scheduler is used."""
        if self.queue is None:
            return 0
        return self.queue.drain(max_steps)


__all__ = ["DeferredQueue", "Deliver", "RequestRunner", "ScheduleFn"]
