"""Unit tests for ConfigManager."""

import os
import sys
import unittest
import tempfile
import json
from pathlib import Path

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config.config_manager import ConfigManager, AppConfig, UISettings, ConsoleSettings


class TestConfigManager(unittest.TestCase):
    """Test cases for ConfigManager."""

    def setUp(self):
        """Set up test environment."""
        self.temp_dir = tempfile.mkdtemp()
        self.config_path = Path(self.temp_dir) / "test_config.json"
        self.config_manager = ConfigManager(str(self.config_path))

    def tearDown(self):
        """Clean up test environment."""
        import shutil
        if Path(self.temp_dir).exists():
            shutil.rmtree(self.temp_dir)

    def test_create_default_config(self):
        """Test default configuration creation."""
        config = self.config_manager.load_config()

        self.assertIsInstance(config, AppConfig)
        self.assertIsInstance(config.ui, UISettings)
        self.assertIsInstance(config.console, ConsoleSettings)

        # Check default values
        self.assertEqual(config.ui.window_width, 720)
        self.assertEqual(config.ui.window_height, 900)
        self.assertTrue(config.console.auto_scroll)
        self.assertEqual(config.console.poll_interval_ms, 3000)
        self.assertEqual(config.console.max_lines, 500)
        self.assertEqual(config.logging.log_level, "INFO")

    def test_save_and_load_config(self):
        """Test configuration saving and loading."""
        config = self.config_manager.load_config()
        config.ui.window_width = 1000
        config.console.auto_scroll = False
        config.console.max_lines = 200

        self.config_manager.save_config(config)

        new_manager = ConfigManager(str(self.config_path))
        loaded_config = new_manager.load_config()

        self.assertEqual(loaded_config.ui.window_width, 1000)
        self.assertFalse(loaded_config.console.auto_scroll)
        self.assertEqual(loaded_config.console.max_lines, 200)

    def test_config_validation(self):
        """Test configuration validation."""
        invalid_config = {
            "console": {
                "auto_scroll": "yes",
                "poll_interval_ms": 10,
                "max_lines": 3,
            },
            "logging": {
                "log_level": "chatty"
            },
            "unknown_section": {"ignored": True},
        }

        with open(self.config_path, 'w') as f:
            json.dump(invalid_config, f)

        config = self.config_manager.load_config()
        self.assertTrue(config.console.auto_scroll)
        self.assertEqual(config.console.poll_interval_ms, 3000)
        self.assertEqual(config.console.max_lines, 500)
        self.assertEqual(config.logging.log_level, "INFO")

    def test_log_level_is_normalised_to_upper_case(self):
        with open(self.config_path, 'w') as f:
            json.dump({"logging": {"log_level": "debug"}}, f)

        self.assertEqual(self.config_manager.load_config().logging.log_level, "DEBUG")

    def test_legacy_auto_scroll_key_is_migrated(self):
        with open(self.config_path, 'w') as f:
            json.dump({"autoScroll": False}, f)

        self.assertFalse(self.config_manager.load_config().console.auto_scroll)

    def test_corrupt_config_falls_back_to_backup(self):
        self.config_manager.update_console_settings(max_lines=300)
        # Second save copies the first file to the backup location
        self.config_manager.update_console_settings(auto_scroll=False)
        self.assertTrue(self.config_manager.backup_path.exists())

        self.config_path.write_text("{ not json", encoding="utf-8")

        reloaded = ConfigManager(str(self.config_path)).load_config()
        self.assertEqual(reloaded.console.max_lines, 300)

    def test_corrupt_config_without_backup_uses_defaults(self):
        self.config_path.write_text("[1, 2, 3]", encoding="utf-8")

        config = self.config_manager.load_config()
        self.assertEqual(config.console.max_lines, 500)

    def test_update_settings(self):
        """Test settings update methods."""
        self.config_manager.update_ui_settings(window_width=800, window_x=40)

        config = self.config_manager.load_config()
        self.assertEqual(config.ui.window_width, 800)
        self.assertEqual(config.ui.window_x, 40)

        self.config_manager.update_console_settings(auto_scroll=False, not_a_field=1)

        config = ConfigManager(str(self.config_path)).load_config()
        self.assertFalse(config.console.auto_scroll)
        self.assertFalse(hasattr(config.console, "not_a_field"))

    def test_resolve_log_file_path(self):
        default_path = self.config_manager.resolve_log_file_path()
        self.assertEqual(default_path.name, "idevice_log.txt")
        self.assertEqual(default_path.parent, Path(os.path.expanduser("~/Documents")))

        custom = Path(self.temp_dir) / "custom.log"
        self.config_manager.update_console_settings(log_file_path=str(custom))
        self.assertEqual(self.config_manager.resolve_log_file_path(), custom)

    def test_reset_to_defaults(self):
        self.config_manager.update_console_settings(max_lines=100)

        self.config_manager.reset_to_defaults()

        reloaded = ConfigManager(str(self.config_path)).load_config()
        self.assertEqual(reloaded.console.max_lines, 500)


if __name__ == '__main__':
    unittest.main()
