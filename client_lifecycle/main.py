"""
Entry point for the admin client background runtime.
"""

from __future__ import annotations

import sys
import time
from typing import Iterable, Tuple

from PySide6.QtWidgets import QApplication

from client_lifecycle import logger as app_logger
from client_lifecycle.app import APP_NAME, ClientCoordinator

_LOGGER = app_logger.get_logger()


def _log_refresh() -> None:
    _LOGGER.debug("Refresh requested; no data views are attached to this host.")


def _run_application_once(argv: Iterable[str]) -> Tuple[int, bool]:
    """Start the Qt application once and report whether shutdown was intentional."""
    app = QApplication(list(argv))
    app.setApplicationName(APP_NAME)
    app.setQuitOnLastWindowClosed(False)

    coordinator: ClientCoordinator

    def _logout() -> None:
        _LOGGER.info("Session ended by inactivity; closing the client.")
        coordinator.shutdown_when_drained()

    coordinator = ClientCoordinator(on_refresh=_log_refresh, logout=_logout)
    coordinator.start()
    exit_code = app.exec()
    return exit_code, coordinator.manual_shutdown_requested


def main() -> int:
    """Launch the application, restarting it with backoff after unexpected exits."""
    backoff_seconds = 2
    max_backoff = 30

    while True:
        try:
            exit_code, manual = _run_application_once(sys.argv)
        except Exception:  # pragma: no cover - crash guard around the Qt loop
            _LOGGER.exception("Client crashed; attempting automatic recovery.")
            exit_code = 1
            manual = False

        if manual:
            return exit_code

        _LOGGER.warning(
            "Client exited unexpectedly (code={}). Restarting in {} seconds.",
            exit_code,
            backoff_seconds,
        )
        time.sleep(backoff_seconds)
        backoff_seconds = min(backoff_seconds * 2, max_backoff)


if __name__ == "__main__":
    raise SystemExit(main())
