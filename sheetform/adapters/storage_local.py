from __future__ import annotations

import json
import os
from typing import Any, Dict, Optional

from sheetform.domain.ports import SettingsStoragePort


class StorageLocal(SettingsStoragePort):
    """Local filesystem storage for runtime settings (JSON)."""

    SETTINGS_FILE = "user_settings.json"

    def __init__(self, root_dir: str = ".", *, filename: Optional[str] = None) -> None:
        self.root = root_dir
        self.filename = filename or self.SETTINGS_FILE

    @property
    def settings_path(self) -> str:
        return os.path.join(self.root, self.filename)

    def save_user_settings(self, payload: Dict[str, Any]) -> None:
        os.makedirs(self.root, exist_ok=True)
        with open(self.settings_path, "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=2, sort_keys=True)

    def load_user_settings(self) -> Optional[Dict[str, Any]]:
        path = self.settings_path
        if not os.path.exists(path):
            return None
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"{path}: settings file must contain a JSON object.")
        return data
