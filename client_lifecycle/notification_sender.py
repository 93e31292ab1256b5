"""
Notification senders used by the delivery queue.
"""

from __future__ import annotations

from typing import Optional, Protocol

from PySide6.QtWidgets import QApplication, QStyle, QSystemTrayIcon

from client_lifecycle import logger as app_logger
from client_lifecycle.errors import DeliveryError, PermissionDeniedError
from shared.notification_item import NotificationItem

_LOGGER = app_logger.get_logger()
MESSAGE_TIMEOUT_MS = 8000


class NotificationSender(Protocol):
    def send(self, item: NotificationItem) -> None: ...


class NotificationBackend(Protocol):
    def is_permission_granted(self) -> bool: ...

    def request_permission(self) -> bool: ...

    def send_notification(self, item: NotificationItem) -> None: ...


class PermissionGuardedSender:
    """
    Checks notification permission before the first send of the process.

    When permission is missing it is requested once per item; a refusal drops
    that item with PermissionDeniedError. After a granted check, later sends
    skip the permission round-trip.
    """

    def __init__(self, backend: NotificationBackend) -> None:
        self._backend = backend
        self._permission_confirmed = False

    @property
    def permission_confirmed(self) -> bool:
        return self._permission_confirmed

    def send(self, item: NotificationItem) -> None:
        if not self._permission_confirmed:
            self._ensure_permission(item)
        self._backend.send_notification(item)

    def _ensure_permission(self, item: NotificationItem) -> None:
        if self._backend.is_permission_granted():
            self._permission_confirmed = True
            return
        _LOGGER.debug("Notification permission missing; requesting it.")
        if not self._backend.request_permission():
            raise PermissionDeniedError(f"Notification permission denied; dropped '{item.describe()}'.")
        _LOGGER.info("Notification permission granted.")
        self._permission_confirmed = True


class TrayNotificationBackend:
    """Delivers notifications as system tray balloon messages."""

    def __init__(self, tray: Optional[QSystemTrayIcon] = None) -> None:
        self._tray = tray

    def _ensure_tray(self) -> QSystemTrayIcon:
        if self._tray is None:
            self._tray = QSystemTrayIcon()
            icon = QApplication.style().standardIcon(QStyle.StandardPixmap.SP_MessageBoxInformation)
            self._tray.setIcon(icon)
        return self._tray

    def is_permission_granted(self) -> bool:
        return QSystemTrayIcon.isSystemTrayAvailable() and QSystemTrayIcon.supportsMessages()

    def request_permission(self) -> bool:
        # Tray messages cannot be granted interactively; re-probe the platform.
        return self.is_permission_granted()

    def send_notification(self, item: NotificationItem) -> None:
        tray = self._ensure_tray()
        if not tray.isVisible():
            tray.show()
        try:
            tray.showMessage(
                item.title,
                item.body,
                self._resolve_icon(item),
                MESSAGE_TIMEOUT_MS,
            )
        except RuntimeError as exc:
            raise DeliveryError(f"Tray refused notification '{item.describe()}': {exc}") from exc

    def _resolve_icon(self, item: NotificationItem) -> QSystemTrayIcon.MessageIcon:
        preset_map = {
            "info": QSystemTrayIcon.MessageIcon.Information,
            "warning": QSystemTrayIcon.MessageIcon.Warning,
            "error": QSystemTrayIcon.MessageIcon.Critical,
        }
        if not item.icon:
            return QSystemTrayIcon.MessageIcon.Information
        return preset_map.get(item.icon, QSystemTrayIcon.MessageIcon.Information)
