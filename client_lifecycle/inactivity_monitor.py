"""
Inactivity monitoring for the auto-lock and session-timeout flows.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from PySide6.QtCore import QObject

from client_lifecycle.activity_tracker import ActivityRecord
from client_lifecycle.lifecycle_task import LifecycleTask
from client_lifecycle.settings import ClientSettings

CHECK_INTERVAL_MS = 60_000


@dataclass(frozen=True, slots=True)
class InactivityVerdict:
    lock: bool
    timeout: bool
    idle_seconds: float


def threshold_seconds(enabled: bool, minutes: float) -> Optional[float]:
    """Convert a minute threshold to seconds; None when the check is switched off."""
    if not enabled or minutes <= 0:
        return None
    return minutes * 60


class InactivityMonitor(LifecycleTask):
    """
    Polls an ActivityRecord and fires the lock and session-timeout callbacks.

    Every check re-reads the settings provider and recomputes elapsed time
    from scratch. Firing does not stop the monitor or reset the record, so a
    crossed threshold fires again on each check until activity resumes.
    """

    def __init__(
        self,
        record: ActivityRecord,
        settings_provider: Callable[[], ClientSettings],
        *,
        logout: Callable[[], None],
        on_lock: Optional[Callable[[], None]] = None,
        on_timeout: Optional[Callable[[], None]] = None,
        check_interval_ms: int = CHECK_INTERVAL_MS,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__("Inactivity monitor", parent)
        self.record = record
        self._settings_provider = settings_provider
        self._logout = logout
        self._on_lock = on_lock
        self._on_timeout = on_timeout
        self._check_interval_ms = check_interval_ms

    def should_run(self) -> bool:
        return self._settings_provider().monitoring_enabled

    def desired_interval_ms(self) -> int:
        return self._check_interval_ms

    def tick(self) -> None:
        self.check_now()

    def evaluate(self, settings: ClientSettings) -> InactivityVerdict:
        """Compare elapsed idle time against both thresholds without side effects."""
        try:
            idle_seconds = self.record.elapsed()
            lock_after = threshold_seconds(settings.auto_lock_enabled, settings.lock_timeout_minutes)
            timeout_after = threshold_seconds(
                settings.session_timeout_enabled, settings.session_timeout_minutes
            )
        except (TypeError, ValueError) as exc:
            self._logger.error("Inactivity check skipped; unusable configuration: {}", exc)
            return InactivityVerdict(lock=False, timeout=False, idle_seconds=0.0)

        return InactivityVerdict(
            lock=lock_after is not None and idle_seconds >= lock_after,
            timeout=timeout_after is not None and idle_seconds >= timeout_after,
            idle_seconds=idle_seconds,
        )

    def check_now(self) -> InactivityVerdict:
        """
        Run one check. The lock callback runs before the timeout callbacks
        when both thresholds are crossed in the same check. A failing lock
        callback does not skip the timeout check; its error is raised after.
        """
        verdict = self.evaluate(self._settings_provider())
        lock_error: Optional[Exception] = None

        if verdict.lock:
            self._logger.info(
                "Session auto-locked after {:.0f} seconds of inactivity.", verdict.idle_seconds
            )
            if self._on_lock is not None:
                try:
                    self._on_lock()
                except Exception as exc:
                    # Re-raised once the timeout check has had its turn.
                    lock_error = exc

        if verdict.timeout:
            self._logger.info(
                "Session timed out after {:.0f} seconds of inactivity.", verdict.idle_seconds
            )
            if self._on_timeout is not None:
                self._on_timeout()
            self._logout()

        if lock_error is not None:
            raise lock_error
        return verdict
