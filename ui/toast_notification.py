"""Lightweight non-blocking toast notification widget.

Shows a short confirmation (optionally with a bold title) over the bottom of
the parent widget and fades it out after a configurable duration.
"""

from typing import Optional

from PyQt6.QtCore import Qt, QTimer, QPropertyAnimation, QEasingCurve
from PyQt6.QtWidgets import QLabel, QWidget, QVBoxLayout, QGraphicsOpacityEffect

from config.constants import UIConstants
from utils import common

logger = common.get_logger('toast_notification')


class ToastNotification(QWidget):
    """Non-blocking toast notification overlay.

    Usage:
        toast = ToastNotification(parent=self)
        toast.show_toast("Logs have been copied to clipboard.", title="Logs Copied")
    """

    STYLE_INFO = "info"
    STYLE_ERROR = "error"
    STYLE_SUCCESS = "success"

    _COLORS = {
        STYLE_INFO: ("#FFFFFF", "rgba(28, 28, 30, 0.92)"),
        STYLE_ERROR: ("#FFFFFF", "rgba(255, 59, 48, 0.92)"),
        STYLE_SUCCESS: ("#FFFFFF", "rgba(52, 199, 89, 0.92)"),
    }

    FADE_DURATION_MS = 300

    def __init__(
        self,
        parent: Optional[QWidget] = None,
        duration_ms: int = UIConstants.TOAST_DURATION_MS,
    ) -> None:
        super().__init__(parent)
        self._duration_ms = duration_ms
        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.timeout.connect(self._fade_out)
        self._anim: Optional[QPropertyAnimation] = None
        self._init_ui()

    def _init_ui(self) -> None:
        self.setAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self._label = QLabel()
        self._label.setWordWrap(True)
        self._label.setTextFormat(Qt.TextFormat.RichText)
        self._label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._label.setMinimumWidth(200)
        self._label.setMaximumWidth(420)
        layout.addWidget(self._label)

        self._opacity = QGraphicsOpacityEffect(self)
        self.setGraphicsEffect(self._opacity)

        self.hide()

    @property
    def text(self) -> str:
        return self._label.text()

    def show_toast(
        self,
        message: str,
        title: Optional[str] = None,
        style: str = STYLE_INFO,
        duration_ms: Optional[int] = None,
    ) -> None:
        """Display the toast.

        Args:
            message: Body text
            title: Optional bold first line
            style: STYLE_INFO, STYLE_ERROR or STYLE_SUCCESS
            duration_ms: Override default duration, or None for default
        """
        if self._anim is not None:
            self._anim.stop()
            self._anim = None

        self._timer.stop()
        self._apply_style(style)
        if title:
            self._label.setText(f"<b>{title}</b><br>{message}")
        else:
            self._label.setText(message)
        self._position_toast()

        self._opacity.setOpacity(1.0)
        self.show()
        self.raise_()
        logger.debug('Toast shown: %s', title or message)

        timeout = duration_ms if duration_ms is not None else self._duration_ms
        self._timer.start(timeout)

    def _apply_style(self, style: str) -> None:
        fg, bg = self._COLORS.get(style, self._COLORS[self.STYLE_INFO])
        self._label.setStyleSheet(f"""
            QLabel {{
                background-color: {bg};
                color: {fg};
                padding: 12px 20px;
                border-radius: 10px;
                font-size: 13px;
            }}
        """)

    def _position_toast(self) -> None:
        """Center the toast horizontally near the bottom of the parent."""
        parent = self.parentWidget()
        if parent is None:
            return

        self.adjustSize()
        parent_rect = parent.rect()
        x = (parent_rect.width() - self.width()) // 2
        y = parent_rect.height() - self.height() - 90
        self.move(max(10, x), max(10, y))

    def _fade_out(self) -> None:
        self._anim = QPropertyAnimation(self._opacity, b"opacity")
        self._anim.setDuration(self.FADE_DURATION_MS)
        self._anim.setStartValue(1.0)
        self._anim.setEndValue(0.0)
        self._anim.setEasingCurve(QEasingCurve.Type.OutQuad)
        self._anim.finished.connect(self._on_fade_complete)
        self._anim.start()

    def _on_fade_complete(self) -> None:
        self.hide()
        self._anim = None

    def dismiss(self) -> None:
        """Immediately dismiss the toast."""
        self._timer.stop()
        if self._anim is not None:
            self._anim.stop()
            self._anim = None
        self.hide()
