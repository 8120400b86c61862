from __future__ import annotations

import os
from dataclasses import asdict, dataclass, replace
from typing import Any, Callable, Mapping, Optional

from ..utils.logging import env_forces_debug

BASE_URL_ENV = "SHEETFORM_API_BASE_URL"


@dataclass
class SettingsConfig:
    """Typed runtime settings that persist via StorageLocal."""

    api_base_url: str = ""
    request_timeout_s: int = 10
    retries: int = 2


class SettingsVM:
    """Keeps app settings state and validation, no I/O here."""

    def __init__(
        self,
        *,
        config: Optional[SettingsConfig] = None,
        on_save: Optional[Callable[[dict], None]] = None,
    ) -> None:
        self.config = config or SettingsConfig()
        self.on_save = on_save

        self.api_key: str = ""
        self.form_id: str = ""
        self.debug_logging: bool = env_forces_debug()

    # ------------------------------------------------------------------
    # Properties bridging to the typed config
    # ------------------------------------------------------------------
    @property
    def api_base_url(self) -> str:
        return self.config.api_base_url

    @api_base_url.setter
    def api_base_url(self, value: Any) -> None:
        self.config = replace(self.config, api_base_url=self._coerce_url(value))

    @property
    def request_timeout_s(self) -> int:
        return self.config.request_timeout_s

    @request_timeout_s.setter
    def request_timeout_s(self, value: Any) -> None:
        coerced = self._coerce_int("request_timeout_s", value, minimum=1)
        self.config = replace(self.config, request_timeout_s=coerced)

    @property
    def retries(self) -> int:
        return self.config.retries

    @retries.setter
    def retries(self, value: Any) -> None:
        self.config = replace(self.config, retries=self._coerce_int("retries", value, minimum=0))

    # ------------------------------------------------------------------
    def is_valid(self) -> bool:
        return bool(self.api_base_url) and self.request_timeout_s > 0 and self.retries >= 0

    def apply_env(self, environ: Optional[Mapping[str, str]] = None) -> None:
        env = os.environ if environ is None else environ
        base_url = env.get(BASE_URL_ENV)
        if base_url:
            self.api_base_url = base_url

    def apply_dict(self, payload: Mapping[str, Any]) -> None:
        """Apply persisted settings to the view-model."""

        if not isinstance(payload, Mapping):
            raise ValueError("Settings payload must be a mapping of flat keys.")

        allowed = {*SettingsConfig.__annotations__.keys(), "api_key", "form_id", "debug_logging"}
        unknown = set(payload.keys()) - allowed
        if unknown:
            raise ValueError(f"Unsupported settings keys: {', '.join(sorted(str(k) for k in unknown))}")

        if "api_base_url" in payload:
            self.api_base_url = payload["api_base_url"]
        if "request_timeout_s" in payload:
            self.request_timeout_s = payload["request_timeout_s"]
        if "retries" in payload:
            self.retries = payload["retries"]
        if "api_key" in payload:
            self.api_key = self._coerce_optional_str(payload["api_key"])
        if "form_id" in payload:
            self.form_id = self._coerce_optional_str(payload["form_id"])
        if "debug_logging" in payload:
            self.debug_logging = self._coerce_bool(payload["debug_logging"])

    def to_dict(self) -> dict:
        snapshot = asdict(self.config)
        snapshot.update(
            {
                "api_key": self.api_key,
                "form_id": self.form_id,
                "debug_logging": bool(self.debug_logging),
            }
        )
        return snapshot

    def cmd_save(self) -> None:
        if not self.is_valid():
            raise ValueError("Settings invalid")
        if self.on_save:
            self.on_save(self.to_dict())

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _coerce_url(value: Any) -> str:
        if value is None:
            return ""
        if not isinstance(value, str):
            raise ValueError("api_base_url must be a string.")
        text = value.strip().rstrip("/")
        if text and not text.startswith(("http://", "https://")):
            raise ValueError("api_base_url must start with http:// or https://.")
        return text

    @staticmethod
    def _coerce_optional_str(value: Any) -> str:
        if value is None:
            return ""
        return str(value).strip()

    @staticmethod
    def _coerce_bool(value: Any) -> bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, (int, float)):
            return bool(value)
        if isinstance(value, str):
            return value.strip().lower() in {"1", "true", "yes", "on"}
        return bool(value)

    @staticmethod
    def _coerce_int(name: str, value: Any, *, minimum: Optional[int] = None) -> int:
        if isinstance(value, bool):
            raise ValueError(f"{name} must be an integer.")
        if isinstance(value, (int, float)):
            coerced = int(value)
        elif isinstance(value, str):
            try:
                coerced = int(value.strip())
            except ValueError as exc:
                raise ValueError(f"{name} must be an integer.") from exc
        else:
            raise ValueError(f"{name} must be an integer.")
        if minimum is not None and coerced < minimum:
            raise ValueError(f"{name} must be at least {minimum}.")
        return coerced


def default_settings_payload() -> dict:
    """Return a fresh snapshot containing the default settings payload."""
    return SettingsVM().to_dict()
