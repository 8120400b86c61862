from __future__ import annotations

from pathlib import Path

import pytest

from sheetform.adapters.storage_local import StorageLocal


def test_missing_settings_file_returns_none(tmp_path: Path) -> None:
    assert StorageLocal(root_dir=str(tmp_path)).load_user_settings() is None


def test_settings_roundtrip(tmp_path: Path) -> None:
    storage = StorageLocal(root_dir=str(tmp_path / "cfg"))
    payload = {"api_base_url": "https://sheets.example", "retries": 3}

    storage.save_user_settings(payload)

    assert (tmp_path / "cfg" / "user_settings.json").exists()
    assert storage.load_user_settings() == payload


def test_non_object_settings_file_is_rejected(tmp_path: Path) -> None:
    (tmp_path / "custom.json").write_text("[1, 2]", encoding="utf-8")
    storage = StorageLocal(root_dir=str(tmp_path), filename="custom.json")

    with pytest.raises(ValueError):
        storage.load_user_settings()
