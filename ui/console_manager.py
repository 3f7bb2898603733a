"""Clear, copy and menu actions for the console screen."""

from __future__ import annotations

from typing import Callable, Optional

from PyQt6.QtWidgets import QApplication, QMenu

from config.constants import PanelText
from utils import common
from utils.console_models import DeviceInfo
from utils.device_info import collect_device_info
from utils.log_formatting import build_copy_text
from utils.log_store import LogStore


logger = common.get_logger("console_manager")

ClipboardProvider = Callable[[], object]
MenuFactory = Callable[[object], QMenu]
DeviceInfoProvider = Callable[[], DeviceInfo]


class ConsoleManager:
    """Encapsulate the user actions that operate on the console store."""

    def __init__(
        self,
        store: LogStore,
        device_info_provider: Optional[DeviceInfoProvider] = None,
        clipboard_provider: Optional[ClipboardProvider] = None,
        menu_factory: Optional[MenuFactory] = None,
    ) -> None:
        self.store = store
        self._device_info_provider = device_info_provider or collect_device_info
        self._clipboard_provider = clipboard_provider
        self._menu_factory = menu_factory

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------
    def clear_all(self) -> None:
        """Remove every entry from the store; the file is left untouched."""
        self.store.clear()
        logger.info("Console cleared")

    def copy_all(self) -> str:
        """Put the device header and every entry on the clipboard and return the text."""
        text = build_copy_text(self._device_info_provider(), self.store.entries())
        self._clipboard().setText(text)
        logger.info("Copied %d console entries to clipboard", len(self.store))
        return text

    def create_console_menu(
        self,
        parent,
        auto_scroll_enabled: bool,
        on_auto_scroll_toggled: Callable[[bool], None],
        on_copy: Optional[Callable[[], None]] = None,
    ) -> QMenu:
        """Build the footer menu: an "Auto Scroll" toggle and "Copy Logs"."""
        menu = self._get_menu(parent)

        auto_scroll_action = menu.addAction(PanelText.ACTION_AUTO_SCROLL)
        auto_scroll_action.setCheckable(True)
        auto_scroll_action.setChecked(auto_scroll_enabled)
        auto_scroll_action.toggled.connect(on_auto_scroll_toggled)

        copy_action = menu.addAction(PanelText.ACTION_COPY_LOGS)
        copy_action.triggered.connect(on_copy or self.copy_all)
        return menu

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _clipboard(self):
        provider = self._clipboard_provider or QApplication.clipboard
        return provider()

    def _get_menu(self, parent) -> QMenu:
        if self._menu_factory is None:
            return QMenu(parent)
        return self._menu_factory(parent)


__all__ = ["ConsoleManager"]
