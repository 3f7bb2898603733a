#!/usr/bin/env python3
"""Tests for the console window: lifecycle, badge, actions and auto scroll."""

import os
import shutil
import sys
import tempfile
import unittest
from datetime import datetime
from pathlib import Path
from unittest.mock import patch

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from PyQt6.QtTest import QTest
from PyQt6.QtWidgets import QApplication

from config.config_manager import ConfigManager
from ui.console.console_window import ConsoleWindow
from ui.console_manager import ConsoleManager
from utils.console_models import DeviceInfo, LogSeverity
from utils.log_store import LogStore
from utils.log_tail_poller import LogTailPoller


DEVICE = DeviceInfo(system_version="14.5", name="test-host", model="arm64")


class DummyClipboard:
    def __init__(self):
        self.text = ""

    def setText(self, text):
        self.text = text


class ConsoleWindowTest(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        os.environ.setdefault('QT_QPA_PLATFORM', 'offscreen')
        cls._app = QApplication.instance() or QApplication([])

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.log_path = Path(self.temp_dir) / "idevice_log.txt"
        self.log_path.write_text("hello\nError: first failure\n", encoding="utf-8")
        self.config_manager = ConfigManager(str(Path(self.temp_dir) / "config.json"))

        self.store = LogStore(max_entries=500, clock=lambda: datetime(2024, 2, 3, 4, 5, 6))
        self.poller = LogTailPoller(self.store, self.log_path, poll_interval_ms=60_000)
        self.clipboard = DummyClipboard()
        self.manager = ConsoleManager(
            self.store,
            device_info_provider=lambda: DEVICE,
            clipboard_provider=lambda: self.clipboard,
        )
        self.window = ConsoleWindow(
            self.store,
            self.poller,
            config_manager=self.config_manager,
            device_info=DEVICE,
            console_manager=self.manager,
        )

    def tearDown(self):
        self.window.deactivate()
        self.window.deleteLater()
        if Path(self.temp_dir).exists():
            shutil.rmtree(self.temp_dir)

    def test_header_shows_device_information(self):
        texts = [label.text() for label in self.window.header_labels]
        self.assertEqual(texts[0], "=== DEVICE INFORMATION ===")
        self.assertIn("Version: 14.5", texts)
        self.assertIn("Name: test-host", texts)
        self.assertIn("Model: arm64", texts)
        self.assertEqual(texts[-1], "=== LOG ENTRIES ===")

    def test_activate_loads_file_and_starts_polling(self):
        self.window.activate()

        self.assertTrue(self.window.is_active())
        self.assertTrue(self.poller.is_active())
        self.assertEqual(self.window.log_model.rowCount(), 2)

        self.window.deactivate()
        self.assertFalse(self.window.is_active())
        self.assertFalse(self.poller.is_active())

    def test_show_and_hide_drive_lifecycle(self):
        self.window.show()
        QApplication.processEvents()
        self.assertTrue(self.poller.is_active())

        self.window.hide()
        QApplication.processEvents()
        self.assertFalse(self.poller.is_active())

    def test_error_badge_counts_errors(self):
        self.window.activate()
        self.assertEqual(self.window.error_badge.text(), "1 Errors")

        self.store.add_error("another")
        self.assertEqual(self.window.error_badge.text(), "2 Errors")

        self.window.clear_logs()
        self.assertEqual(self.window.error_badge.text(), "0 Errors")

    def test_clear_empties_list(self):
        self.window.activate()
        self.window.clear_logs()
        self.assertEqual(self.window.log_model.rowCount(), 0)
        self.assertEqual(len(self.store), 0)

    def test_refresh_reloads_file(self):
        self.window.activate()
        self.window.clear_logs()

        self.window.refresh()

        self.assertEqual([entry.message for entry in self.store.entries()], ["hello", "Error: first failure"])

    def test_copy_all_logs_uses_clipboard_and_shows_toast(self):
        self.window.activate()

        text = self.window.copy_all_logs()

        self.assertEqual(self.clipboard.text, text)
        self.assertTrue(text.endswith("[04:05:06] [ERROR] Error: first failure"))
        self.assertIsNotNone(self.window._toast)
        self.assertIn("Logs have been copied to clipboard.", self.window._toast.text)

    def test_auto_scroll_preference_is_persisted(self):
        self.window.set_auto_scroll_enabled(False)

        self.assertFalse(self.window.is_auto_scroll_enabled())
        self.assertFalse(ConfigManager(str(Path(self.temp_dir) / "config.json")).load_config().console.auto_scroll)
        auto_scroll_action = self.window.console_menu.actions()[0]
        self.assertFalse(auto_scroll_action.isChecked())

    def test_menu_toggle_changes_auto_scroll(self):
        auto_scroll_action = self.window.console_menu.actions()[0]
        self.assertEqual(auto_scroll_action.text(), "Auto Scroll")

        auto_scroll_action.setChecked(False)

        self.assertFalse(self.window.is_auto_scroll_enabled())

    def test_auto_scroll_follows_new_entries_at_bottom(self):
        self.window.activate()
        with patch.object(self.window, '_scroll_to_bottom') as scroll:
            self.store.add_info("new line")
        scroll.assert_called()

    def test_auto_scroll_suppressed_when_scrolled_away(self):
        self.window.resize(600, 400)
        self.window.show()
        self.store.extend((LogSeverity.INFO, f"filler {i}") for i in range(300))
        QTest.qWait(50)

        scroll_bar = self.window.log_display.verticalScrollBar()
        self.assertGreater(scroll_bar.maximum(), 0)
        self.assertEqual(scroll_bar.value(), scroll_bar.maximum())

        scroll_bar.setValue(0)
        self.assertFalse(self.window.is_at_bottom())

        self.store.extend((LogSeverity.INFO, f"while away {i}") for i in range(50))
        QTest.qWait(50)

        self.assertEqual(scroll_bar.value(), 0)
        self.assertGreater(scroll_bar.maximum() - scroll_bar.value(), 20)
        self.assertFalse(self.window.should_follow_newest())

        scroll_bar.setValue(scroll_bar.maximum())
        self.assertTrue(self.window.is_at_bottom())

        self.store.extend((LogSeverity.INFO, f"back at bottom {i}") for i in range(50))
        QTest.qWait(50)

        self.assertEqual(scroll_bar.value(), scroll_bar.maximum())
        self.assertTrue(self.window.should_follow_newest())

    def test_auto_scroll_disabled_never_follows(self):
        self.window.set_auto_scroll_enabled(False)

        with patch.object(self.window, '_scroll_to_bottom') as scroll:
            self.store.add_info("new line")
        scroll.assert_not_called()

    def test_scroll_position_threshold(self):
        self.assertTrue(ConsoleWindow._is_near_bottom(990, 1000))
        self.assertTrue(ConsoleWindow._is_near_bottom(980, 1000))
        self.assertFalse(ConsoleWindow._is_near_bottom(979, 1000))

    def test_saved_preference_is_applied_on_creation(self):
        self.config_manager.update_console_settings(auto_scroll=False)

        window = ConsoleWindow(
            self.store,
            self.poller,
            config_manager=self.config_manager,
            device_info=DEVICE,
            console_manager=self.manager,
        )

        self.assertFalse(window.is_auto_scroll_enabled())
        self.assertFalse(window.console_menu.actions()[0].isChecked())
        window.deleteLater()

    def test_close_saves_geometry(self):
        self.window.show()
        self.window.resize(640, 700)
        QApplication.processEvents()
        self.window.close()

        ui_settings = ConfigManager(str(Path(self.temp_dir) / "config.json")).get_ui_settings()
        self.assertEqual(ui_settings.window_width, 640)
        self.assertEqual(ui_settings.window_height, 700)

    def test_store_entries_render_with_severity(self):
        self.store.add_warning("Warning: slow")
        index = self.window.log_model.index(len(self.store) - 1, 0)
        self.assertEqual(self.window.log_model.data(index), "[04:05:06] [WARNING] Warning: slow")
        self.assertEqual(self.window.log_model.get_entry(index.row()).severity, LogSeverity.WARNING)


if __name__ == "__main__":
    unittest.main()
