"""
File-backed configuration for the client background mechanisms.
"""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Optional

from shared.settings_schema import SettingsValidationError, load_and_validate_settings
from client_lifecycle import logger as app_logger

_LOGGER = app_logger.get_logger()

DEFAULT_SETTINGS_PATH = Path(
    os.environ.get(
        "ADMIN_CLIENT_SETTINGS",
        str(Path.home() / ".admin-client" / "settings.json"),
    )
)
_MIN_REFRESH_INTERVAL = 5
_MAX_REFRESH_INTERVAL = 3600
_MAX_TIMEOUT_MINUTES = 10080


@dataclass(frozen=True, eq=True)
class ClientSettings:
    auto_lock_enabled: bool = False
    lock_timeout_minutes: float = 30
    session_timeout_enabled: bool = True
    session_timeout_minutes: float = 1440
    refresh_enabled: bool = True
    refresh_interval_seconds: float = 60
    show_refresh_indicator: bool = True
    notifications_enabled: bool = True

    @property
    def monitoring_enabled(self) -> bool:
        return self.auto_lock_enabled or self.session_timeout_enabled

    def session_key(self) -> tuple:
        """Fields whose change requires the inactivity monitor to be re-evaluated."""
        return (
            self.auto_lock_enabled,
            self.lock_timeout_minutes,
            self.session_timeout_enabled,
            self.session_timeout_minutes,
        )

    def refresh_key(self) -> tuple:
        """Fields whose change requires the refresh poller to be re-evaluated."""
        return (self.refresh_enabled, self.refresh_interval_seconds)

    def to_dict(self) -> dict:
        return asdict(self)


class ClientSettingsManager:
    """Loads persisted settings from a JSON file and clamps invalid data."""

    def __init__(self, path: Optional[Path] = None) -> None:
        self.path = Path(path) if path is not None else DEFAULT_SETTINGS_PATH

    def read_settings(self) -> ClientSettings:
        if not self.path.exists():
            return ClientSettings()

        try:
            values = load_and_validate_settings(self.path)
        except SettingsValidationError as exc:
            _LOGGER.warning("Ignoring invalid settings file {}: {}", self.path, exc)
            return ClientSettings()

        values["refresh_interval_seconds"] = self._clamp(
            values["refresh_interval_seconds"],
            name="refresh interval",
            lower=_MIN_REFRESH_INTERVAL,
            upper=_MAX_REFRESH_INTERVAL,
        )
        for field_name in ("lock_timeout_minutes", "session_timeout_minutes"):
            values[field_name] = self._clamp(
                values[field_name],
                name=field_name.replace("_", " "),
                lower=0,
                upper=_MAX_TIMEOUT_MINUTES,
            )
        return ClientSettings(**values)

    def _clamp(self, raw: float, *, name: str, lower: float, upper: float) -> float:
        if raw < lower or raw > upper:
            _LOGGER.warning(
                "Invalid {} {} found in settings. Clamping to safe bounds.",
                name,
                raw,
            )
        return max(lower, min(upper, raw))
