"""
Shared start/stop control for recurring background work driven by a QTimer.
"""

from __future__ import annotations

import time
from typing import Optional

from PySide6.QtCore import QObject, QTimer, Signal

from client_lifecycle import logger as app_logger


class LifecycleTask(QObject):
    """
    A unit of recurring work owning at most one armed timer.

    Subclasses decide whether they should run (``should_run``), how often
    (``desired_interval_ms``) and what a tick does (``tick``). Timer-driven
    ticks run inside a boundary that logs failures and keeps the timer armed.
    """

    tickFailed = Signal(str)

    def __init__(self, name: str, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self.name = name
        self._logger = app_logger.get_logger()
        # Owned timer handle; None means stopped.
        self._timer: Optional[QTimer] = None
        self.last_tick_at: Optional[float] = None

    @property
    def running(self) -> bool:
        return self._timer is not None

    @property
    def interval_ms(self) -> Optional[int]:
        """Interval of the armed timer, or None when stopped."""
        if self._timer is None:
            return None
        return self._timer.interval()

    def should_run(self) -> bool:
        raise NotImplementedError

    def desired_interval_ms(self) -> int:
        raise NotImplementedError

    def tick(self) -> None:
        raise NotImplementedError

    def start(self) -> bool:
        """Arm the recurring timer. Returns True only when a new timer was armed."""
        if self._timer is not None:
            return False
        if not self.should_run():
            self._logger.debug("{} not started; disabled by configuration.", self.name)
            return False

        interval = self.desired_interval_ms()
        if interval <= 0:
            self._logger.debug("{} not started; interval {} ms is not positive.", self.name, interval)
            return False

        timer = QTimer(self)
        timer.setInterval(interval)
        timer.timeout.connect(self._on_timer)  # type: ignore[arg-type]
        timer.start()
        self._timer = timer
        self._logger.info("{} started with a {} ms interval.", self.name, interval)
        return True

    def stop(self) -> None:
        """Cancel the timer if armed. Safe when never started."""
        timer, self._timer = self._timer, None
        if timer is None:
            return
        timer.stop()
        timer.deleteLater()
        self._logger.info("{} stopped.", self.name)

    def reconfigure(self) -> bool:
        """Drop any armed timer and start again against the current configuration."""
        self.stop()
        return self.start()

    def _on_timer(self) -> None:
        self.last_tick_at = time.time()
        try:
            self.tick()
        except Exception as exc:
            self._logger.exception("{} tick failed; next tick stays scheduled.", self.name)
            self.tickFailed.emit(str(exc))
