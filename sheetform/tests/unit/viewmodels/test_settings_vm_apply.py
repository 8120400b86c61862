from __future__ import annotations

from pathlib import Path

import pytest

from sheetform.adapters.storage_local import StorageLocal
from sheetform.viewmodels.settings_vm import SettingsVM, default_settings_payload


def test_apply_dict_updates_flat_keys() -> None:
    vm = SettingsVM()
    vm.apply_dict(
        {
            "api_base_url": "https://sheets.example/",
            "request_timeout_s": "12",
            "retries": 0,
            "api_key": " secret ",
            "form_id": "visits",
            "debug_logging": "yes",
        }
    )

    assert vm.api_base_url == "https://sheets.example"
    assert vm.request_timeout_s == 12
    assert vm.retries == 0
    assert vm.api_key == "secret"
    assert vm.form_id == "visits"
    assert vm.debug_logging is True
    assert vm.is_valid()


@pytest.mark.parametrize(
    "payload",
    [
        {"unknown": 1},
        {"request_timeout_s": 0},
        {"retries": True},
        {"api_base_url": "ftp://host"},
        {"request_timeout_s": "soon"},
    ],
)
def test_apply_dict_rejects_bad_values(payload) -> None:
    with pytest.raises(ValueError):
        SettingsVM().apply_dict(payload)


def test_env_overrides_base_url() -> None:
    vm = SettingsVM()
    vm.apply_env({"SHEETFORM_API_BASE_URL": "http://localhost:3000"})
    assert vm.api_base_url == "http://localhost:3000"


def test_defaults_are_invalid_until_url_set() -> None:
    payload = default_settings_payload()
    assert payload["api_base_url"] == ""
    assert payload["request_timeout_s"] == 10
    assert payload["retries"] == 2
    with pytest.raises(ValueError):
        SettingsVM().cmd_save()


def test_save_roundtrip_through_storage(tmp_path: Path) -> None:
    storage = StorageLocal(root_dir=str(tmp_path))
    vm = SettingsVM(on_save=storage.save_user_settings)
    vm.apply_dict({"api_base_url": "https://sheets.example", "form_id": "visits"})

    vm.cmd_save()

    restored = SettingsVM()
    restored.apply_dict(storage.load_user_settings())
    assert restored.to_dict() == vm.to_dict()
