"""Console screen: device header, live log list, error badge and actions."""

from __future__ import annotations

import platform
from typing import Callable, Optional, TYPE_CHECKING

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QCloseEvent, QFont, QHideEvent, QShowEvent
from PyQt6.QtWidgets import (
    QAbstractItemView,
    QDialog,
    QHBoxLayout,
    QLabel,
    QListView,
    QPushButton,
    QToolButton,
    QVBoxLayout,
    QWidget,
)

from config.constants import ConsoleConstants, MessageConstants, PanelText, UIConstants
from ui.console.log_list_model import LogLineDelegate, LogListModel
from ui.console_manager import ConsoleManager
from ui.style_manager import StyleManager
from ui.toast_notification import ToastNotification
from utils import common
from utils.console_models import DeviceInfo
from utils.device_info import collect_device_info
from utils.log_store import LogStore
from utils.log_tail_poller import LogTailPoller

if TYPE_CHECKING:  # pragma: no cover
    from config.config_manager import ConfigManager


logger = common.get_logger('console_window')


def _monospace_font(point_size: int) -> QFont:
    font = QFont()
    font.setFamily(
        'Menlo'
        if platform.system() == 'Darwin'
        else 'Consolas'
        if platform.system() == 'Windows'
        else 'monospace'
    )
    font.setStyleHint(QFont.StyleHint.Monospace)
    font.setPointSize(point_size)
    return font


class ConsoleWindow(QDialog):
    """Live view of the device log with copy and clear actions.

    Polling runs only while the window is visible: showing it reloads the
    file and starts the periodic check, hiding or closing it stops the check.
    """

    def __init__(
        self,
        store: LogStore,
        poller: LogTailPoller,
        config_manager: Optional['ConfigManager'] = None,
        device_info: Optional[DeviceInfo] = None,
        parent=None,
        *,
        console_manager: Optional[ConsoleManager] = None,
    ):
        super().__init__(parent)
        self.setWindowFlag(Qt.WindowType.WindowContextHelpButtonHint, False)
        self.setWindowFlag(Qt.WindowType.WindowMinMaxButtonsHint, True)
        self.setWindowModality(Qt.WindowModality.NonModal)
        self.setSizeGripEnabled(True)

        self.store = store
        self.poller = poller
        self._config_manager = config_manager
        self.device_info = device_info or collect_device_info()
        self.console_manager = console_manager or ConsoleManager(
            store, device_info_provider=lambda: self.device_info
        )

        # Auto scroll state: the persisted preference plus whether the view
        # currently sits at the bottom
        self._auto_scroll_enabled = True
        self._is_at_bottom = True
        self._suppress_scroll_signal = False
        self._is_active = False

        self._toast: Optional[ToastNotification] = None
        self._unsubscribe: Optional[Callable[[], None]] = None

        font_size = UIConstants.CONSOLE_FONT_SIZE
        if self._config_manager is not None:
            console_settings = self._config_manager.get_console_settings()
            self._auto_scroll_enabled = bool(console_settings.auto_scroll)
            font_size = self._config_manager.get_ui_settings().font_size

        StyleManager.sync_with_palette(self.palette())
        self.log_model = LogListModel(store, self)
        self.init_ui(font_size)
        self._restore_geometry()

        self.log_model.rowsInserted.connect(self._on_rows_changed)
        self.log_model.modelReset.connect(self._on_model_reset)
        self._update_error_badge()

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------
    def init_ui(self, font_size: int) -> None:
        self.setWindowTitle(PanelText.WINDOW_TITLE)
        self.setMinimumSize(UIConstants.WINDOW_MIN_WIDTH, UIConstants.WINDOW_MIN_HEIGHT)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 8, 12, 12)
        layout.setSpacing(8)

        layout.addLayout(self._create_toolbar())
        layout.addWidget(self._create_header(font_size))

        self.log_display = QListView()
        self.log_display.setModel(self.log_model)
        self.log_display.setItemDelegate(LogLineDelegate(self.log_display))
        self.log_display.setUniformItemSizes(True)
        self.log_display.setVerticalScrollMode(QAbstractItemView.ScrollMode.ScrollPerPixel)
        self.log_display.setHorizontalScrollMode(QAbstractItemView.ScrollMode.ScrollPerPixel)
        self.log_display.setSelectionMode(QAbstractItemView.SelectionMode.ExtendedSelection)
        self.log_display.setHorizontalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAsNeeded)
        self.log_display.setFont(_monospace_font(font_size))
        self.log_display.setStyleSheet(StyleManager.get_console_style())
        self.log_display.verticalScrollBar().valueChanged.connect(self._on_log_view_scrolled)
        self.log_display.verticalScrollBar().rangeChanged.connect(self._on_scroll_range_changed)
        layout.addWidget(self.log_display, 1)

        layout.addLayout(self._create_footer())

    def _create_toolbar(self) -> QHBoxLayout:
        toolbar = QHBoxLayout()
        toolbar_style = StyleManager.get_toolbar_button_style()

        self.done_button = QPushButton(PanelText.BUTTON_DONE)
        self.done_button.setStyleSheet(toolbar_style)
        self.done_button.clicked.connect(self.close)
        toolbar.addWidget(self.done_button)

        toolbar.addStretch(1)
        title = QLabel(PanelText.WINDOW_TITLE)
        title_font = title.font()
        title_font.setBold(True)
        title.setFont(title_font)
        toolbar.addWidget(title)
        toolbar.addStretch(1)

        self.refresh_button = QPushButton(PanelText.BUTTON_REFRESH)
        self.refresh_button.setToolTip(PanelText.TOOLTIP_REFRESH)
        self.refresh_button.setStyleSheet(toolbar_style)
        self.refresh_button.clicked.connect(self.refresh)
        toolbar.addWidget(self.refresh_button)

        self.clear_button = QPushButton(PanelText.BUTTON_CLEAR)
        self.clear_button.setStyleSheet(toolbar_style)
        self.clear_button.clicked.connect(self.clear_logs)
        toolbar.addWidget(self.clear_button)
        return toolbar

    def _create_header(self, font_size: int) -> QWidget:
        header = QWidget()
        header_layout = QVBoxLayout(header)
        header_layout.setContentsMargins(0, 0, 0, 0)
        header_layout.setSpacing(2)

        lines = (
            ConsoleConstants.DEVICE_INFO_HEADER,
            f'Version: {self.device_info.system_version}',
            f'Name: {self.device_info.name}',
            f'Model: {self.device_info.model}',
            '',
            ConsoleConstants.LOG_ENTRIES_HEADER,
        )
        self.header_labels = []
        for text in lines:
            label = QLabel(text)
            label.setFont(_monospace_font(font_size))
            label.setStyleSheet(StyleManager.get_header_style())
            label.setTextInteractionFlags(Qt.TextInteractionFlag.TextSelectableByMouse)
            header_layout.addWidget(label)
            self.header_labels.append(label)
        return header

    def _create_footer(self) -> QHBoxLayout:
        footer = QHBoxLayout()
        footer.setSpacing(12)

        badge_font = QFont()
        badge_font.setPointSize(UIConstants.BADGE_FONT_SIZE)
        badge_font.setBold(True)

        self.error_badge = QLabel()
        self.error_badge.setFont(badge_font)
        self.error_badge.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.error_badge.setStyleSheet(StyleManager.get_error_badge_style())
        footer.addWidget(self.error_badge, 1)

        self.menu_button = QToolButton()
        self.menu_button.setText(PanelText.BUTTON_MENU)
        self.menu_button.setFont(badge_font)
        self.menu_button.setPopupMode(QToolButton.ToolButtonPopupMode.InstantPopup)
        self.menu_button.setStyleSheet(StyleManager.get_menu_button_style())
        self.console_menu = self.console_manager.create_console_menu(
            self,
            auto_scroll_enabled=self._auto_scroll_enabled,
            on_auto_scroll_toggled=self.set_auto_scroll_enabled,
            on_copy=self.copy_all_logs,
        )
        self.menu_button.setMenu(self.console_menu)
        footer.addWidget(self.menu_button, 1)
        return footer

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def is_active(self) -> bool:
        return self._is_active

    def activate(self) -> None:
        """Start tailing; safe to call repeatedly."""
        if self._is_active:
            return
        self._is_active = True
        self._is_at_bottom = True
        if self._unsubscribe is None:
            self._unsubscribe = self.store.subscribe(self._update_error_badge)
        self._update_error_badge()
        self.poller.activate()

    def deactivate(self) -> None:
        if not self._is_active:
            return
        self._is_active = False
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self.poller.deactivate()

    def showEvent(self, event: QShowEvent) -> None:  # type: ignore[override]
        super().showEvent(event)
        self.activate()

    def hideEvent(self, event: QHideEvent) -> None:  # type: ignore[override]
        self.deactivate()
        super().hideEvent(event)

    def closeEvent(self, event: QCloseEvent) -> None:  # type: ignore[override]
        """Stop polling and persist the window geometry."""
        self.deactivate()
        self._save_geometry()
        if self._toast is not None:
            self._toast.dismiss()
        super().closeEvent(event)

    def _restore_geometry(self) -> None:
        width, height = UIConstants.WINDOW_WIDTH, UIConstants.WINDOW_HEIGHT
        position = None
        if self._config_manager is not None:
            ui_settings = self._config_manager.get_ui_settings()
            width, height = ui_settings.window_width, ui_settings.window_height
            if ui_settings.window_x >= 0 and ui_settings.window_y >= 0:
                position = (ui_settings.window_x, ui_settings.window_y)
        self.resize(width, height)
        if position is not None:
            self.move(*position)

    def _save_geometry(self) -> None:
        if self._config_manager is None:
            return
        geometry = self.geometry()
        self._config_manager.update_ui_settings(
            window_width=geometry.width(),
            window_height=geometry.height(),
            window_x=geometry.x(),
            window_y=geometry.y(),
        )

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------
    def refresh(self) -> bool:
        """Reload the last lines of the file from scratch."""
        return self.poller.load_initial()

    def clear_logs(self) -> None:
        self.console_manager.clear_all()

    def copy_all_logs(self) -> str:
        text = self.console_manager.copy_all()
        self._show_toast(MessageConstants.SUCCESS_LOGS_COPIED, MessageConstants.TITLE_LOGS_COPIED)
        return text

    def _show_toast(self, message: str, title: Optional[str] = None) -> None:
        if self._toast is None:
            self._toast = ToastNotification(self)
        self._toast.show_toast(message, title=title, style=ToastNotification.STYLE_SUCCESS)

    def _update_error_badge(self) -> None:
        self.error_badge.setText(MessageConstants.LABEL_ERROR_COUNT.format(count=self.store.error_count))

    # ------------------------------------------------------------------
    # Auto scroll
    # ------------------------------------------------------------------
    def is_auto_scroll_enabled(self) -> bool:
        return self._auto_scroll_enabled

    def is_at_bottom(self) -> bool:
        return self._is_at_bottom

    def should_follow_newest(self) -> bool:
        return self._auto_scroll_enabled and self._is_at_bottom

    def set_auto_scroll_enabled(self, enabled: bool) -> None:
        """Turn following the newest entry on or off and persist the choice."""
        enabled = bool(enabled)
        if enabled == self._auto_scroll_enabled:
            return

        self._auto_scroll_enabled = enabled
        for action in self.console_menu.actions():
            if action.isCheckable():
                action.blockSignals(True)
                action.setChecked(enabled)
                action.blockSignals(False)

        if self._config_manager is not None:
            self._config_manager.update_console_settings(auto_scroll=enabled)
        logger.debug('Auto scroll %s', 'enabled' if enabled else 'disabled')

        if enabled:
            self._is_at_bottom = True
            self._scroll_to_bottom()

    def _on_log_view_scrolled(self, value: int) -> None:
        """Track whether the user has scrolled away from the newest entry."""
        if self._suppress_scroll_signal:
            return
        scroll_bar = self.log_display.verticalScrollBar()
        if scroll_bar is None:
            return
        self._is_at_bottom = self._is_near_bottom(value, scroll_bar.maximum())

    def _on_scroll_range_changed(self, _minimum: int, _maximum: int) -> None:
        if self.should_follow_newest():
            self._scroll_to_bottom()

    @staticmethod
    def _is_near_bottom(value: int, maximum: int) -> bool:
        return maximum - value <= UIConstants.SCROLL_BOTTOM_THRESHOLD_PX

    def _on_rows_changed(self, *_args) -> None:
        if self.should_follow_newest():
            self._scroll_to_bottom()

    def _on_model_reset(self) -> None:
        # A reload or clear starts over at the newest entry
        self._is_at_bottom = True
        self._on_rows_changed()

    def _scroll_to_bottom(self) -> None:
        if self.log_model.rowCount() == 0:
            return
        scroll_bar = self.log_display.verticalScrollBar()
        self._suppress_scroll_signal = True
        try:
            self.log_display.scrollToBottom()
            if scroll_bar is not None:
                scroll_bar.setValue(scroll_bar.maximum())
        finally:
            self._suppress_scroll_signal = False


__all__ = ['ConsoleWindow']
