"""
User activity tracking through a Qt application-wide event filter.
"""

from __future__ import annotations

import time
from enum import Enum
from typing import Callable, Optional

from PySide6.QtCore import QCoreApplication, QEvent, QObject


class ActivitySignal(Enum):
    POINTER_DOWN = QEvent.Type.MouseButtonPress
    POINTER_MOVE = QEvent.Type.MouseMove
    KEY_PRESS = QEvent.Type.KeyPress
    SCROLL = QEvent.Type.Wheel
    TOUCH_START = QEvent.Type.TouchBegin
    CLICK = QEvent.Type.MouseButtonRelease


ACTIVITY_EVENT_TYPES = frozenset(signal.value for signal in ActivitySignal)


class ActivityRecord:
    """
    Timestamp of the most recent user interaction.

    One record is shared between the tracker that writes it and the monitor
    that reads it. The value never moves backwards.
    """

    __slots__ = ("clock", "last_activity_at")

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self.clock = clock
        self.last_activity_at = clock()

    def touch(self) -> None:
        now = self.clock()
        if now > self.last_activity_at:
            self.last_activity_at = now

    def elapsed(self) -> float:
        """Seconds since the last recorded interaction."""
        return max(0.0, self.clock() - self.last_activity_at)


class ActivityTracker(QObject):
    """Records user interaction into an ActivityRecord without consuming events."""

    def __init__(self, record: ActivityRecord, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self.record = record
        self._target: Optional[QObject] = None

    @property
    def attached(self) -> bool:
        return self._target is not None

    def attach(self, target: Optional[QObject] = None) -> None:
        """Start listening on ``target`` (the running application by default)."""
        if self._target is not None:
            return
        if target is None:
            target = QCoreApplication.instance()
        if target is None:
            raise RuntimeError("ActivityTracker.attach requires a running QCoreApplication.")
        target.installEventFilter(self)
        self._target = target

    def detach(self) -> None:
        target, self._target = self._target, None
        if target is None:
            return
        target.removeEventFilter(self)

    def record_activity(self) -> None:
        self.record.touch()

    def eventFilter(self, watched: QObject, event: QEvent) -> bool:  # noqa: N802
        if event.type() in ACTIVITY_EVENT_TYPES:
            self.record.touch()
        return False
