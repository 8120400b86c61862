"""Adapter and use-case wiring for the form runtime.

This module owns lazy construction of the REST adapter, the request runner,
the orchestrated store and the form view-model from values held in
:class:`sheetform.viewmodels.settings_vm.SettingsVM`.
"""

from __future__ import annotations

import logging
from typing import Optional

from ..adapters.sheet_rest import SheetRestAdapter
from ..domain.ports import FormDataPort
from ..usecases.form_orchestrator import FormOrchestrator
from ..usecases.form_store import FormStore
from ..usecases.request_runner import RequestRunner, ScheduleFn
from ..viewmodels.form_vm import FormVM
from ..viewmodels.settings_vm import SettingsVM

_log = logging.getLogger(__name__)


class AppController:
    """Create and cache the runtime stack from settings state.

    Call chain:
        ``sheetform.app.main`` creates one instance and calls ``ensure_ready``
        before any form command. A pre-built ``port`` (for example
        ``SheetServiceMock``) bypasses the REST adapter.
    """

    def __init__(
        self,
        settings_vm: SettingsVM,
        *,
        port: Optional[FormDataPort] = None,
        schedule: Optional[ScheduleFn] = None,
    ) -> None:
        """Initialize controller with settings-backed lazy dependencies.

        Args:
            settings_vm: Settings holding base URL, API key and timeouts.
            port: Optional data port used instead of ``SheetRestAdapter``.
            schedule: Optional ``after(delay_ms, cb)`` scheduler for requests.
        """
        self.settings_vm = settings_vm
        self._port_override = port
        self._schedule = schedule
        self._port: Optional[FormDataPort] = None
        self.runner: Optional[RequestRunner] = None
        self.orchestrator: Optional[FormOrchestrator] = None
        self.store: Optional[FormStore] = None
        self.form_vm: Optional[FormVM] = None

    @property
    def port(self) -> Optional[FormDataPort]:
        return self._port

    def reset(self) -> None:
        """Drop cached objects so the next ``ensure_ready`` rebuilds them."""
        if self.form_vm is not None:
            self.form_vm.dispose()
        self._port = None
        self.runner = None
        self.orchestrator = None
        self.store = None
        self.form_vm = None

    def ensure_ready(self) -> bool:
        """Ensure the form stack is available.

        Returns:
            ``True`` when the stack exists, ``False`` when no base URL is
            configured and no port was injected.
        """
        if self.form_vm is not None:
            return True

        port = self._port_override
        if port is None:
            if not self.settings_vm.api_base_url:
                _log.info("No data service URL configured")
                return False
            port = SheetRestAdapter(
                self.settings_vm.api_base_url,
                api_key=self.settings_vm.api_key or None,
                request_timeout_s=self.settings_vm.request_timeout_s,
                retries=self.settings_vm.retries,
            )

        self._port = port
        self.runner = RequestRunner(port, schedule=self._schedule)
        self.orchestrator = FormOrchestrator(self.runner)
        self.store = self.orchestrator.attach(FormStore(form_id=self.settings_vm.form_id or None))
        self.form_vm = FormVM(self.store)
        return True

    def drain(self) -> int:
        """Run queued requests until the runner is idle."""
        if self.runner is None:
            return 0
        return self.runner.drain()
