"""
Settings document validation shared by the client runtime and its tests.

The document mirrors the settings JSON persisted by the admin client, for
example::

    {
        "security": {"autoLock": true, "lockTimeout": 30, "sessionTimeout": 1440},
        "display": {"autoRefresh": true, "refreshInterval": 60},
        "notifications": {"enabled": true}
    }
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional


class SettingsValidationError(ValueError):
    """Raised when a settings file is unreadable or holds values of the wrong type."""


@dataclass(frozen=True)
class SettingsDefaults:
    """Defaults applied for any key missing from the document."""

    auto_lock: bool = False
    lock_timeout_minutes: float = 30
    session_timeout_minutes: float = 1440
    auto_refresh: bool = True
    refresh_interval_seconds: float = 60
    show_refresh_indicator: bool = True
    notifications_enabled: bool = True


def load_and_validate_settings(path: Path) -> Dict[str, Any]:
    """
    Load a settings JSON file and validate it.

    Returns a flat, normalized dictionary keyed by the runtime field names.
    Missing sections and keys fall back to ``SettingsDefaults``.
    """
    try:
        contents = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise SettingsValidationError(f"Settings file not found: {path}") from exc
    except OSError as exc:
        raise SettingsValidationError(f"Unable to read settings: {path}") from exc

    try:
        raw_settings = json.loads(contents)
    except json.JSONDecodeError as exc:
        raise SettingsValidationError(f"Settings file is not valid JSON: {exc}") from exc

    return validate_settings(raw_settings)


def validate_settings(raw_settings: Any) -> Dict[str, Any]:
    """Validate an already-decoded settings document."""
    if not isinstance(raw_settings, dict):
        raise SettingsValidationError("Settings root must be a JSON object.")

    defaults = SettingsDefaults()
    security = _section(raw_settings, "security")
    display = _section(raw_settings, "display")
    notifications = _section(raw_settings, "notifications")

    session_timeout = _require_number(
        security.get("sessionTimeout"),
        field="security.sessionTimeout",
        default=defaults.session_timeout_minutes,
    )
    # Older documents only carry the magnitude; zero meant "off".
    session_enabled = _require_bool(
        security.get("sessionTimeoutEnabled"),
        field="security.sessionTimeoutEnabled",
        default=session_timeout > 0,
    )

    return {
        "auto_lock_enabled": _require_bool(
            security.get("autoLock"), field="security.autoLock", default=defaults.auto_lock
        ),
        "lock_timeout_minutes": _require_number(
            security.get("lockTimeout"),
            field="security.lockTimeout",
            default=defaults.lock_timeout_minutes,
        ),
        "session_timeout_enabled": session_enabled,
        "session_timeout_minutes": session_timeout,
        "refresh_enabled": _require_bool(
            display.get("autoRefresh"), field="display.autoRefresh", default=defaults.auto_refresh
        ),
        "refresh_interval_seconds": _require_number(
            display.get("refreshInterval"),
            field="display.refreshInterval",
            default=defaults.refresh_interval_seconds,
        ),
        "show_refresh_indicator": _require_bool(
            display.get("showRefreshIndicator"),
            field="display.showRefreshIndicator",
            default=defaults.show_refresh_indicator,
        ),
        "notifications_enabled": _require_bool(
            notifications.get("enabled"),
            field="notifications.enabled",
            default=defaults.notifications_enabled,
        ),
    }


def _section(raw_settings: Dict[str, Any], name: str) -> Dict[str, Any]:
    value = raw_settings.get(name)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise SettingsValidationError(f"{name} must be a JSON object.")
    return value


def _require_bool(value: Any, *, field: str, default: bool) -> bool:
    if value is None:
        return default
    if not isinstance(value, bool):
        raise SettingsValidationError(f"{field} must be true or false.")
    return value


def _require_number(value: Any, *, field: str, default: float) -> float:
    if value is None:
        return default
    # bool is an int subclass; reject it explicitly.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SettingsValidationError(f"{field} must be a number.")
    return value


def dump_settings(values: Dict[str, Any], path: Optional[Path] = None) -> str:
    """
    Serialize runtime field values back into the nested document layout.

    Writes the document to ``path`` when given and returns the JSON text.
    """
    document = {
        "security": {
            "autoLock": values["auto_lock_enabled"],
            "lockTimeout": values["lock_timeout_minutes"],
            "sessionTimeoutEnabled": values["session_timeout_enabled"],
            "sessionTimeout": values["session_timeout_minutes"],
        },
        "display": {
            "autoRefresh": values["refresh_enabled"],
            "refreshInterval": values["refresh_interval_seconds"],
            "showRefreshIndicator": values["show_refresh_indicator"],
        },
        "notifications": {"enabled": values["notifications_enabled"]},
    }
    text = json.dumps(document, indent=2)
    if path is not None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    return text
