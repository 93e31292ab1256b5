"""
Periodic data refresh with per-tick failure isolation.
"""

from __future__ import annotations

from typing import Callable, Optional

from PySide6.QtCore import QObject, Signal

from client_lifecycle.lifecycle_task import LifecycleTask
from client_lifecycle.settings import ClientSettings


class RefreshPoller(LifecycleTask):
    """
    Invokes ``on_refresh`` every ``refresh_interval_seconds``.

    A failing refresh is logged and reported through ``refreshFailed``; the
    timer keeps its schedule. Successful refreshes emit ``refreshed``.
    """

    refreshed = Signal()
    refreshFailed = Signal(str)

    def __init__(
        self,
        on_refresh: Callable[[], object],
        settings_provider: Callable[[], ClientSettings],
        *,
        enabled: bool = True,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__("Refresh poller", parent)
        self._on_refresh = on_refresh
        self._settings_provider = settings_provider
        self._enabled = enabled

    @property
    def enabled(self) -> bool:
        return self._enabled

    def set_enabled(self, enabled: bool) -> None:
        if enabled == self._enabled:
            return
        self._enabled = enabled
        self.reconfigure()

    def should_run(self) -> bool:
        return self._enabled and self._settings_provider().refresh_enabled

    def desired_interval_ms(self) -> int:
        return int(self._settings_provider().refresh_interval_seconds * 1000)

    def tick(self) -> None:
        self._refresh(source="Auto-refresh")

    def manual_refresh(self) -> bool:
        """Refresh now without touching the timer. Returns True on success."""
        return self._refresh(source="Manual refresh")

    def _refresh(self, *, source: str) -> bool:
        try:
            self._on_refresh()
        except Exception as exc:
            self._logger.exception("{} failed.", source)
            self.refreshFailed.emit(str(exc) or type(exc).__name__)
            return False
        self._logger.debug("{} completed.", source)
        self.refreshed.emit()
        return True
