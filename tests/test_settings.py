"""Tests for settings parsing, validation and clamping."""

from __future__ import annotations

import json

import pytest

from client_lifecycle.settings import ClientSettings, ClientSettingsManager
from shared.settings_schema import (
    SettingsValidationError,
    dump_settings,
    load_and_validate_settings,
    validate_settings,
)


def write(path, document) -> None:
    path.write_text(json.dumps(document), encoding="utf-8")


def test_missing_file_gives_defaults(tmp_path):
    manager = ClientSettingsManager(tmp_path / "absent.json")

    settings = manager.read_settings()

    assert settings == ClientSettings()
    assert settings.auto_lock_enabled is False
    assert settings.lock_timeout_minutes == 30
    assert settings.session_timeout_minutes == 1440
    assert settings.refresh_interval_seconds == 60


def test_nested_document_is_flattened(tmp_path):
    path = tmp_path / "settings.json"
    write(
        path,
        {
            "theme": "dark",
            "security": {"autoLock": True, "lockTimeout": 5, "sessionTimeout": 60, "requirePassword": True},
            "display": {"autoRefresh": False, "refreshInterval": 30, "fontSize": 14},
            "notifications": {"enabled": False, "pollingInterval": 30},
        },
    )

    settings = ClientSettingsManager(path).read_settings()

    assert settings == ClientSettings(
        auto_lock_enabled=True,
        lock_timeout_minutes=5,
        session_timeout_enabled=True,
        session_timeout_minutes=60,
        refresh_enabled=False,
        refresh_interval_seconds=30,
        show_refresh_indicator=True,
        notifications_enabled=False,
    )


def test_zero_session_timeout_means_disabled():
    values = validate_settings({"security": {"sessionTimeout": 0}})

    assert values["session_timeout_enabled"] is False


def test_explicit_session_flag_wins():
    values = validate_settings({"security": {"sessionTimeout": 15, "sessionTimeoutEnabled": False}})

    assert values["session_timeout_enabled"] is False
    assert values["session_timeout_minutes"] == 15


@pytest.mark.parametrize(
    "document",
    [
        [],
        {"security": "on"},
        {"security": {"autoLock": "yes"}},
        {"display": {"refreshInterval": "60"}},
        {"display": {"refreshInterval": True}},
    ],
)
def test_invalid_documents_are_rejected(document):
    with pytest.raises(SettingsValidationError):
        validate_settings(document)


def test_invalid_json_is_rejected(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(SettingsValidationError):
        load_and_validate_settings(path)


def test_manager_falls_back_to_defaults_on_invalid_file(tmp_path):
    path = tmp_path / "settings.json"
    write(path, {"security": {"autoLock": "sometimes"}})

    assert ClientSettingsManager(path).read_settings() == ClientSettings()


def test_refresh_interval_is_clamped(tmp_path):
    path = tmp_path / "settings.json"
    write(path, {"display": {"refreshInterval": 1}})
    assert ClientSettingsManager(path).read_settings().refresh_interval_seconds == 5

    write(path, {"display": {"refreshInterval": 100000}})
    assert ClientSettingsManager(path).read_settings().refresh_interval_seconds == 3600


def test_negative_timeouts_are_clamped_to_zero(tmp_path):
    path = tmp_path / "settings.json"
    write(path, {"security": {"autoLock": True, "lockTimeout": -5}})

    settings = ClientSettingsManager(path).read_settings()

    assert settings.lock_timeout_minutes == 0


def test_dump_writes_a_document_the_manager_reads_back(tmp_path):
    path = tmp_path / "nested" / "settings.json"
    original = ClientSettings(auto_lock_enabled=True, lock_timeout_minutes=10, refresh_interval_seconds=120)

    dump_settings(original.to_dict(), path)

    assert ClientSettingsManager(path).read_settings() == original


def test_change_keys_track_the_relevant_fields():
    base = ClientSettings()

    assert base.session_key() != ClientSettings(lock_timeout_minutes=5).session_key()
    assert base.refresh_key() == ClientSettings(lock_timeout_minutes=5).refresh_key()
    assert base.refresh_key() != ClientSettings(refresh_interval_seconds=10).refresh_key()
    assert ClientSettings(auto_lock_enabled=False, session_timeout_enabled=False).monitoring_enabled is False
