"""Configuration management module for application settings."""

import json
import shutil
from typing import Dict, Any, Optional
from dataclasses import dataclass, asdict
from pathlib import Path

from config.constants import ApplicationConstants, ConsoleConstants, LoggingConstants, UIConstants
from utils import common

logger = common.get_logger('config_manager')


@dataclass
class UISettings:
    """UI configuration settings."""
    window_width: int = UIConstants.WINDOW_WIDTH
    window_height: int = UIConstants.WINDOW_HEIGHT
    window_x: int = 100
    window_y: int = 100
    font_size: int = UIConstants.CONSOLE_FONT_SIZE


@dataclass
class ConsoleSettings:
    """Console tailing settings."""
    auto_scroll: bool = True
    poll_interval_ms: int = ConsoleConstants.POLL_INTERVAL_MS
    max_lines: int = ConsoleConstants.MAX_LINES
    log_file_path: str = ''


@dataclass
class LoggingSettings:
    """Logging configuration."""
    log_level: str = LoggingConstants.DEFAULT_LOG_LEVEL


@dataclass
class AppConfig:
    """Main application configuration."""
    ui: UISettings
    console: ConsoleSettings
    logging: LoggingSettings
    version: str = ApplicationConstants.APP_VERSION


class ConfigManager:
    """Manages application configuration persistence and validation."""

    DEFAULT_CONFIG_PATH = '~/.device_console_config.json'
    BACKUP_CONFIG_PATH = '~/.device_console_config.backup.json'

    def __init__(self, config_path: Optional[str] = None, backup_path: Optional[str] = None):
        self.config_path = Path(config_path or self.DEFAULT_CONFIG_PATH).expanduser()
        if backup_path:
            self.backup_path = Path(backup_path).expanduser()
        elif config_path:
            self.backup_path = self.config_path.with_name(f'{self.config_path.stem}.backup.json')
        else:
            self.backup_path = Path(self.BACKUP_CONFIG_PATH).expanduser()
        self._config: Optional[AppConfig] = None
        self._ensure_config_dir()

    def _ensure_config_dir(self):
        """Ensure configuration directory exists."""
        self.config_path.parent.mkdir(parents=True, exist_ok=True)

    def _create_default_config(self) -> AppConfig:
        """Create default configuration."""
        return AppConfig(
            ui=UISettings(),
            console=ConsoleSettings(),
            logging=LoggingSettings(),
        )

    def _validate_config(self, config_dict: Dict[str, Any]) -> Dict[str, Any]:
        """Validate and clean configuration dictionary."""
        # Legacy flat key written by early builds
        normalized: Dict[str, Any] = dict(config_dict)
        legacy_auto_scroll = normalized.pop('autoScroll', None)
        if isinstance(legacy_auto_scroll, bool):
            normalized.setdefault('console', {})['auto_scroll'] = legacy_auto_scroll

        default_config = asdict(self._create_default_config())

        def merge_dict(default: Dict, user: Dict) -> Dict:
            result = default.copy()
            for key, value in user.items():
                if key in result:
                    if isinstance(value, dict) and isinstance(result[key], dict):
                        result[key] = merge_dict(result[key], value)
                    else:
                        result[key] = value
            return result

        validated = merge_dict(default_config, normalized)

        console_settings = validated.get('console', {})
        if not isinstance(console_settings.get('auto_scroll', True), bool):
            console_settings['auto_scroll'] = True
            logger.warning('Console auto_scroll invalid, reset to True')
        if not _is_int(console_settings.get('poll_interval_ms')) or \
                console_settings['poll_interval_ms'] < ConsoleConstants.MIN_POLL_INTERVAL_MS:
            console_settings['poll_interval_ms'] = ConsoleConstants.POLL_INTERVAL_MS
            logger.warning('Console poll interval too low, reset to %s ms', ConsoleConstants.POLL_INTERVAL_MS)
        if not _is_int(console_settings.get('max_lines')) or \
                console_settings['max_lines'] < ConsoleConstants.MIN_MAX_LINES:
            console_settings['max_lines'] = ConsoleConstants.MAX_LINES
            logger.warning('Console max_lines too low, reset to %s', ConsoleConstants.MAX_LINES)
        if not isinstance(console_settings.get('log_file_path'), str):
            console_settings['log_file_path'] = ''
            logger.warning('Console log_file_path invalid, reset to default location')

        logging_settings = validated.get('logging', {})
        level = str(logging_settings.get('log_level', '')).upper()
        if level not in LoggingConstants.VALID_LOG_LEVELS:
            logging_settings['log_level'] = LoggingConstants.DEFAULT_LOG_LEVEL
            logger.warning('Log level invalid, reset to %s', LoggingConstants.DEFAULT_LOG_LEVEL)
        else:
            logging_settings['log_level'] = level

        return validated

    def _build_config(self, validated_dict: Dict[str, Any]) -> AppConfig:
        return AppConfig(
            ui=UISettings(**validated_dict['ui']),
            console=ConsoleSettings(**validated_dict['console']),
            logging=LoggingSettings(**validated_dict['logging']),
            version=validated_dict.get('version', ApplicationConstants.APP_VERSION),
        )

    def _read_config_file(self, path: Path) -> AppConfig:
        with open(path, 'r', encoding='utf-8') as f:
            config_dict = json.load(f)
        if not isinstance(config_dict, dict):
            raise ValueError(f'Configuration root must be an object, got {type(config_dict).__name__}')
        return self._build_config(self._validate_config(config_dict))

    def load_config(self) -> AppConfig:
        """Load configuration from file."""
        if self._config is not None:
            return self._config

        try:
            if self.config_path.exists():
                self._config = self._read_config_file(self.config_path)
                logger.info(f'Configuration loaded from {self.config_path}')
            else:
                self._config = self._create_default_config()
                logger.info('Created default configuration')

        except (OSError, ValueError, TypeError) as e:
            logger.error(f'Failed to load config: {e}')
            if self.backup_path.exists():
                try:
                    logger.info('Attempting to load from backup')
                    self._config = self._read_config_file(self.backup_path)
                    logger.info('Configuration loaded from backup')
                except (OSError, ValueError, TypeError) as backup_error:
                    logger.error(f'Backup config also failed: {backup_error}')
                    self._config = self._create_default_config()
            else:
                self._config = self._create_default_config()

        return self._config

    def save_config(self, config: Optional[AppConfig] = None):
        """Save configuration to file."""
        if config is None:
            config = self._config

        if config is None:
            logger.warning('No configuration to save')
            return

        try:
            if self.config_path.exists():
                try:
                    shutil.copy2(self.config_path, self.backup_path)
                except OSError as e:
                    logger.warning(f'Failed to create config backup: {e}')

            with open(self.config_path, 'w', encoding='utf-8') as f:
                json.dump(asdict(config), f, indent=4, ensure_ascii=False)

            self._config = config
            logger.info(f'Configuration saved to {self.config_path}')

        except OSError as e:
            logger.error(f'Failed to save config: {e}')
            raise

    def get_ui_settings(self) -> UISettings:
        """Get UI settings."""
        return self.load_config().ui

    def get_console_settings(self) -> ConsoleSettings:
        """Get console tailing settings."""
        return self.load_config().console

    def get_logging_settings(self) -> LoggingSettings:
        """Get logging settings."""
        return self.load_config().logging

    def update_ui_settings(self, **kwargs):
        """Update UI settings."""
        config = self.load_config()
        for key, value in kwargs.items():
            if hasattr(config.ui, key):
                setattr(config.ui, key, value)
        self.save_config(config)

    def update_console_settings(self, **kwargs):
        """Update console tailing settings."""
        config = self.load_config()
        for key, value in kwargs.items():
            if hasattr(config.console, key):
                setattr(config.console, key, value)
        self.save_config(config)

    def resolve_log_file_path(self) -> Path:
        """Return the configured source file, or the default Documents location."""
        configured = self.get_console_settings().log_file_path.strip()
        if configured:
            return Path(common.get_full_path(configured))
        return Path(common.get_full_path(ConsoleConstants.DEFAULT_LOG_DIR)) / ConsoleConstants.LOG_FILE_NAME

    def reset_to_defaults(self):
        """Reset configuration to defaults."""
        self._config = self._create_default_config()
        self.save_config()
        logger.info('Configuration reset to defaults')


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
