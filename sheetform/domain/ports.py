from __future__ import annotations

from typing import Any, List, Optional, Protocol

FormId = str
Row = List[Any]


# ---- Error model ----
class UseCaseError(Exception):
    """Base class for use case level errors (user-presentable)."""

    def __init__(self, code: str, message: str, *, meta: Optional[dict] = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.meta = meta or {}


# ---- Ports (Hexagonal boundaries) ----
class FormDataPort(Protocol):
    """Remote key/value data service reached through the URL resolver targets.

    URLs are service-relative paths such as ``/api/{id}/schema``.
    """

    def fetch(self, url: str) -> Any: ...  # decoded JSON body
    def append(self, url: str, rows: List[Row]) -> Any: ...  # append acknowledgement


class SettingsStoragePort(Protocol):
    """Persistence for runtime settings."""

    def save_user_settings(self, payload: dict) -> None: ...
    def load_user_settings(self) -> Optional[dict]: ...
