"""Test configuration for the client background runtime."""

from __future__ import annotations

import os
import tempfile
import time

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
os.environ.setdefault("ADMIN_CLIENT_LOG_DIR", tempfile.mkdtemp(prefix="admin-client-logs-"))

import pytest  # noqa: E402
from PySide6.QtTest import QTest  # noqa: E402
from PySide6.QtWidgets import QApplication  # noqa: E402

from client_lifecycle.settings import ClientSettings  # noqa: E402


class FakeClock:
    """Manually advanced time source."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class SettingsBox:
    """Mutable settings provider standing in for the settings collaborator."""

    def __init__(self, settings: ClientSettings | None = None) -> None:
        self.value = settings or ClientSettings()

    def __call__(self) -> ClientSettings:
        return self.value


@pytest.fixture(scope="session", autouse=True)
def qapp():
    """One QApplication for the whole session; widgets need it."""
    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def settings_box():
    return SettingsBox()


@pytest.fixture
def wait_until():
    """Spin the Qt event loop until ``predicate`` holds or the timeout expires."""

    def _wait(predicate, timeout_ms: int = 3000) -> bool:
        deadline = time.monotonic() + timeout_ms / 1000
        while time.monotonic() < deadline:
            if predicate():
                return True
            QTest.qWait(5)
        return predicate()

    return _wait
