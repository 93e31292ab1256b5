"""
Serialized notification delivery with fixed pacing between items.
"""

from __future__ import annotations

from collections import deque
from enum import Enum
from typing import Deque, Optional

from PySide6.QtCore import QObject, QTimer, Signal

from client_lifecycle import logger as app_logger
from client_lifecycle.errors import PermissionDeniedError
from client_lifecycle.notification_sender import (
    NotificationSender,
    PermissionGuardedSender,
    TrayNotificationBackend,
)
from shared.notification_item import NotificationItem

PACING_MS = 1000

_SHARED_QUEUE: Optional["DeliveryQueue"] = None


class DrainState(Enum):
    IDLE = "Idle"
    DRAINING = "Draining"


class DeliveryQueue(QObject):
    """
    FIFO queue drained by a single loop, one item per step.

    Producers call ``enqueue`` as often as they like; only the first call
    while idle starts a drain. Each step hands one item to the sender, then
    waits ``pacing_ms`` on the event loop before looking at the queue again.
    The loop returns to idle only after it finds the queue empty, so items
    added during a pacing wait are picked up by the same drain.
    """

    drainStarted = Signal()
    drained = Signal()
    itemDelivered = Signal(object)
    itemFailed = Signal(object, str)

    def __init__(
        self,
        sender: NotificationSender,
        *,
        pacing_ms: int = PACING_MS,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._logger = app_logger.get_logger()
        self._sender = sender
        self._pacing_ms = pacing_ms
        self._pending: Deque[NotificationItem] = deque()
        self._state = DrainState.IDLE

        self._step_timer = QTimer(self)
        self._step_timer.setSingleShot(True)
        self._step_timer.timeout.connect(self._deliver_next)  # type: ignore[arg-type]

    @property
    def sender(self) -> NotificationSender:
        return self._sender

    @property
    def processing(self) -> bool:
        return self._state is DrainState.DRAINING

    @property
    def state(self) -> DrainState:
        return self._state

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def enqueue(self, item: NotificationItem) -> None:
        """Append ``item`` and make sure a drain is under way. Never waits for delivery."""
        self._pending.append(item)
        self._logger.debug("Queued notification '{}' ({} pending).", item.describe(), len(self._pending))
        self._drain()

    def clear(self) -> int:
        """Drop every pending item. An in-flight drain winds down on its next step."""
        dropped = len(self._pending)
        self._pending.clear()
        if dropped:
            self._logger.info("Dropped {} pending notification(s).", dropped)
        return dropped

    def shutdown(self) -> None:
        self.clear()
        self._step_timer.stop()
        self._state = DrainState.IDLE

    def _drain(self) -> None:
        if self._state is DrainState.DRAINING:
            return
        self._state = DrainState.DRAINING
        self.drainStarted.emit()
        # First delivery runs on the next loop turn so enqueue returns immediately.
        self._step_timer.start(0)

    def _deliver_next(self) -> None:
        if not self._pending:
            self._state = DrainState.IDLE
            self._logger.debug("Notification queue drained.")
            self.drained.emit()
            return

        item = self._pending.popleft()
        error: Optional[str] = None
        try:
            self._sender.send(item)
        except PermissionDeniedError as exc:
            error = str(exc)
            self._logger.error("{}", exc)
        except Exception as exc:
            error = str(exc) or type(exc).__name__
            self._logger.exception("Failed to send queued notification '{}'.", item.describe())

        self._step_timer.start(self._pacing_ms)

        if error is None:
            self.itemDelivered.emit(item)
        else:
            self.itemFailed.emit(item, error)


def get_delivery_queue(sender: Optional[NotificationSender] = None) -> DeliveryQueue:
    """
    Return the process-wide delivery queue, creating it on first use.

    ``sender`` only applies to that first call; notification delivery is a
    single channel, so every producer shares the same queue.
    """
    global _SHARED_QUEUE
    if _SHARED_QUEUE is None:
        _SHARED_QUEUE = DeliveryQueue(sender or PermissionGuardedSender(TrayNotificationBackend()))
    elif sender is not None and sender is not _SHARED_QUEUE.sender:
        app_logger.get_logger().warning(
            "Shared delivery queue already exists; ignored sender {!r}.", sender
        )
    return _SHARED_QUEUE
