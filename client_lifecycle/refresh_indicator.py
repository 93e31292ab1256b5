"""
Transient "Auto-refreshing..." badge shown in the bottom-right corner.
"""

from __future__ import annotations

from PySide6.QtCore import QPoint, Qt, QTimer
from PySide6.QtGui import QColor
from PySide6.QtWidgets import QApplication, QGraphicsDropShadowEffect, QHBoxLayout, QLabel, QWidget

CLEAR_AFTER_MS = 2000


class RefreshIndicator(QWidget):
    """Flashes after each successful refresh and hides itself after a fixed delay."""

    def __init__(self, parent: QWidget | None = None, *, clear_after_ms: int = CLEAR_AFTER_MS) -> None:
        flags = Qt.WindowType.Tool | Qt.WindowType.FramelessWindowHint | Qt.WindowType.WindowStaysOnTopHint
        super().__init__(parent)
        self.setWindowFlags(flags)
        self.setObjectName("RefreshIndicator")
        self.setAttribute(Qt.WidgetAttribute.WA_TranslucentBackground, True)
        self.setAttribute(Qt.WidgetAttribute.WA_ShowWithoutActivating, True)

        self._label = QLabel("Auto-refreshing...")
        self._label.setObjectName("RefreshIndicatorLabel")
        shadow = QGraphicsDropShadowEffect(self._label)
        shadow.setBlurRadius(16)
        shadow.setColor(QColor(0, 0, 0, 120))
        shadow.setOffset(0, 4)
        self._label.setGraphicsEffect(shadow)

        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self._label)

        self.setStyleSheet(
            """
            QLabel#RefreshIndicatorLabel {
                background-color: rgba(24, 24, 28, 0.78);
                color: white;
                border-radius: 10px;
                padding: 6px 12px;
            }
            """
        )

        self._clear_timer = QTimer(self)
        self._clear_timer.setSingleShot(True)
        self._clear_timer.setInterval(clear_after_ms)
        self._clear_timer.timeout.connect(self.hide)  # type: ignore[arg-type]

    @property
    def visible(self) -> bool:
        return self.isVisible()

    def flash(self) -> None:
        """Show the badge; a flash during a pending clear restarts the delay."""
        self.adjustSize()
        self._position_bottom_right()
        self.show()
        self._clear_timer.start()

    def dismiss(self) -> None:
        self._clear_timer.stop()
        self.hide()

    def _position_bottom_right(self) -> None:
        screen = QApplication.primaryScreen()
        if screen is None:
            return
        geometry = screen.availableGeometry()
        x = geometry.right() - self.width() - 20
        y = geometry.bottom() - self.height() - 20
        self.move(QPoint(x, y))
