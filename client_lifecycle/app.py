"""
Application coordinator wiring settings to the background mechanisms.
"""

from __future__ import annotations

import time
from typing import Callable, Optional

from PySide6.QtCore import QObject, QTimer
from PySide6.QtGui import QAction
from PySide6.QtWidgets import QApplication, QMenu, QStyle, QSystemTrayIcon

from client_lifecycle import logger as app_logger
from client_lifecycle.activity_tracker import ActivityRecord, ActivityTracker
from client_lifecycle.delivery_queue import DeliveryQueue, get_delivery_queue
from client_lifecycle.inactivity_monitor import CHECK_INTERVAL_MS, InactivityMonitor
from client_lifecycle.refresh_indicator import RefreshIndicator
from client_lifecycle.refresh_poller import RefreshPoller
from client_lifecycle.settings import ClientSettings, ClientSettingsManager
from shared.notification_item import NotificationItem

APP_NAME = "Admin Client"
APP_VERSION = "1.0.0"
SETTINGS_REFRESH_INTERVAL_MS = 15000
DRAIN_BEFORE_EXIT_CAP_MS = 5000


class ClientCoordinator(QObject):
    """
    Owns the activity tracker, inactivity monitor, refresh poller and
    notification queue, and keeps them in step with the settings file.
    """

    def __init__(
        self,
        *,
        on_refresh: Callable[[], object],
        logout: Callable[[], None],
        on_lock: Optional[Callable[[], None]] = None,
        settings_manager: Optional[ClientSettingsManager] = None,
        delivery_queue: Optional[DeliveryQueue] = None,
        clock: Callable[[], float] = time.time,
        check_interval_ms: int = CHECK_INTERVAL_MS,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._logger = app_logger.get_logger()
        self.settings_manager = settings_manager or ClientSettingsManager()
        self._user_on_lock = on_lock
        self._manual_shutdown_requested = False
        self._started = False
        self._exit_after_drain = False
        self._lock_announced_for: Optional[float] = None

        self._settings = ClientSettings()
        self._initial_settings = self.settings_manager.read_settings()

        self.activity = ActivityRecord(clock)
        self.tracker = ActivityTracker(self.activity, self)
        self.monitor = InactivityMonitor(
            self.activity,
            self.current_settings,
            logout=logout,
            on_lock=self._on_lock,
            on_timeout=self._on_timeout,
            check_interval_ms=check_interval_ms,
            parent=self,
        )
        self.poller = RefreshPoller(on_refresh, self.current_settings, parent=self)
        self.queue = delivery_queue if delivery_queue is not None else get_delivery_queue()
        self.indicator = RefreshIndicator()

        self.poller.refreshed.connect(self._on_refreshed)
        self.poller.refreshFailed.connect(self._on_refresh_failed)
        self.queue.drained.connect(self._on_queue_drained)

        self._tray = QSystemTrayIcon(self)
        tray_icon = QApplication.style().standardIcon(QStyle.StandardPixmap.SP_ComputerIcon)
        self._tray.setIcon(tray_icon)
        self._tray.setToolTip(f"{APP_NAME} v{APP_VERSION}")

        self._menu = QMenu()
        refresh_action = QAction("Refresh Now", self._menu)
        exit_action = QAction("Exit", self._menu)
        self._menu.addAction(refresh_action)
        self._menu.addSeparator()
        self._menu.addAction(exit_action)
        self._tray.setContextMenu(self._menu)

        refresh_action.triggered.connect(self.manual_refresh)
        exit_action.triggered.connect(self.shutdown)

        self._settings_timer = QTimer(self)
        self._settings_timer.setInterval(SETTINGS_REFRESH_INTERVAL_MS)
        self._settings_timer.timeout.connect(self._reload_settings)

        self._exit_cap_timer = QTimer(self)
        self._exit_cap_timer.setSingleShot(True)
        self._exit_cap_timer.timeout.connect(self._finish_deferred_shutdown)

    def current_settings(self) -> ClientSettings:
        return self._settings

    @property
    def manual_shutdown_requested(self) -> bool:
        return self._manual_shutdown_requested

    def start(self) -> None:
        self._logger.info("Starting client coordinator with settings from {}", self.settings_manager.path)
        self._started = True
        self.tracker.attach()
        self._apply_settings(self._initial_settings, initial=True)
        if QSystemTrayIcon.isSystemTrayAvailable():
            self._tray.show()
        self._settings_timer.start()

    def shutdown_when_drained(self, cap_ms: int = DRAIN_BEFORE_EXIT_CAP_MS) -> None:
        """
        Stop background work now, but let queued notices go out before the
        full shutdown. Gives up waiting after ``cap_ms``.
        """
        self._settings_timer.stop()
        self.monitor.stop()
        self.poller.stop()
        if not self.queue.processing:
            self.shutdown()
            return
        self._logger.info(
            "Waiting up to {} ms for {} pending notification(s) before shutdown.",
            cap_ms,
            self.queue.pending_count,
        )
        self._exit_after_drain = True
        self._exit_cap_timer.start(cap_ms)

    def shutdown(self) -> None:
        self._logger.info("Shutting down client background work.")
        self._exit_after_drain = False
        self._exit_cap_timer.stop()
        self._manual_shutdown_requested = True
        self._started = False
        self._settings_timer.stop()
        self.monitor.stop()
        self.poller.stop()
        self.tracker.detach()
        self.queue.shutdown()
        self.indicator.dismiss()
        self._tray.hide()
        app = QApplication.instance()
        if app is not None:
            app.quit()

    def notify(self, title: str, body: str, icon: Optional[str] = None) -> bool:
        """Queue a desktop notification unless notifications are switched off."""
        if not self._settings.notifications_enabled:
            self._logger.debug("Notification '{}' suppressed by settings.", title)
            return False
        self.queue.enqueue(NotificationItem(title=title, body=body, icon=icon))
        return True

    def manual_refresh(self) -> bool:
        if not self._started:
            self._logger.debug("Manual refresh ignored because the coordinator is not running.")
            return False
        self._logger.info("Manual refresh triggered from tray menu.")
        return self.poller.manual_refresh()

    def _reload_settings(self) -> None:
        new_settings = self.settings_manager.read_settings()
        if new_settings != self._settings:
            self._logger.info("Detected settings change. Applying updates.")
            self._apply_settings(new_settings)

    def _apply_settings(self, settings: ClientSettings, *, initial: bool = False) -> None:
        previous = self._settings
        self._settings = settings

        if initial or previous.session_key() != settings.session_key():
            self.monitor.reconfigure()
        if initial or previous.refresh_key() != settings.refresh_key():
            self.poller.reconfigure()
            if self.poller.running and not initial:
                self._logger.info(
                    "Refresh interval updated to {} seconds.",
                    settings.refresh_interval_seconds,
                )

        if not settings.show_refresh_indicator:
            self.indicator.dismiss()
        if previous.notifications_enabled and not settings.notifications_enabled:
            self.queue.clear()

    def _on_refreshed(self) -> None:
        if self._settings.show_refresh_indicator:
            self.indicator.flash()

    def _on_refresh_failed(self, message: str) -> None:
        self._logger.warning("Refresh failed: {}", message)

    def _on_queue_drained(self) -> None:
        if self._exit_after_drain:
            self.shutdown()

    def _finish_deferred_shutdown(self) -> None:
        if not self._exit_after_drain:
            return
        self._logger.warning("Notification queue still busy; shutting down anyway.")
        self.shutdown()

    def _on_lock(self) -> None:
        # One notice per idle period; the check itself repeats every tick.
        if self._lock_announced_for != self.activity.last_activity_at:
            self._lock_announced_for = self.activity.last_activity_at
            self.notify("Session locked", "Your session was locked after a period of inactivity.", "info")
        if self._user_on_lock is not None:
            self._user_on_lock()

    def _on_timeout(self) -> None:
        self.notify("Session expired", "You were signed out after a period of inactivity.", "warning")

