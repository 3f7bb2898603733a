"""Application constants and configuration values."""


class UIConstants:
    """UI-related constants."""

    # Window dimensions
    WINDOW_WIDTH = 720
    WINDOW_HEIGHT = 900
    WINDOW_MIN_WIDTH = 420
    WINDOW_MIN_HEIGHT = 480

    # Font sizes
    CONSOLE_FONT_SIZE = 11
    BADGE_FONT_SIZE = 13

    # Distance (pixels) from the bottom still treated as "at bottom"
    SCROLL_BOTTOM_THRESHOLD_PX = 20

    TOAST_DURATION_MS = 2500


class ConsoleConstants:
    """Console tailing defaults."""

    LOG_FILE_NAME = 'idevice_log.txt'
    DEFAULT_LOG_DIR = '~/Documents'

    # Maximum entries retained in the store and lines read on initial load
    MAX_LINES = 500
    MIN_MAX_LINES = 50

    # Poll cadence (milliseconds)
    POLL_INTERVAL_MS = 3000
    MIN_POLL_INTERVAL_MS = 500

    # Lines carrying any of these markers are header lines written by the
    # log producer and never shown as entries.
    HEADER_MARKERS = (
        '=== DEVICE INFORMATION ===',
        'Version:',
        'Name:',
        'Model:',
        '=== LOG ENTRIES ===',
    )

    DEVICE_INFO_HEADER = '=== DEVICE INFORMATION ==='
    LOG_ENTRIES_HEADER = '=== LOG ENTRIES ==='


class MessageConstants:
    """User-facing message constants."""

    INFO_NO_LOG_FILE = 'No idevice logs found (Restart the app to continue reading)'
    ERROR_INITIAL_READ_FAILED = 'Failed to read idevice logs: {reason}'
    ERROR_NEW_LINES_READ_FAILED = 'Failed to read new logs: {reason}'

    TITLE_LOGS_COPIED = 'Logs Copied'
    SUCCESS_LOGS_COPIED = 'Logs have been copied to clipboard.'

    LABEL_ERROR_COUNT = '{count} Errors'


class LoggingConstants:
    """Logging configuration constants."""

    DEFAULT_LOG_LEVEL = 'INFO'
    VALID_LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


class ApplicationConstants:
    """General application constants."""

    APP_NAME = "Device Console"
    APP_VERSION = "1.0.0"
    APP_DESCRIPTION = "A PyQt6 console that tails and color-codes a device log file"


class PanelText:
    """Shared labels and titles for the console screen."""

    WINDOW_TITLE = 'Console'
    BUTTON_DONE = 'Done'
    BUTTON_CLEAR = 'Clear'
    BUTTON_REFRESH = '⟳'
    BUTTON_MENU = 'Menu'
    ACTION_AUTO_SCROLL = 'Auto Scroll'
    ACTION_COPY_LOGS = 'Copy Logs'
    TOOLTIP_REFRESH = 'Reload the log file'
