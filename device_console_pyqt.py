"""Entry point for the Device Console PyQt application."""

import argparse
import sys
from typing import List, Optional

from PyQt6.QtWidgets import QApplication

from config.config_manager import ConfigManager
from config.constants import ApplicationConstants
from ui.console.console_window import ConsoleWindow
from utils import common
from utils.log_store import init_log_store
from utils.log_tail_poller import LogTailPoller
from utils.task_dispatcher import get_task_dispatcher

__all__ = [
    "ConsoleWindow",
    "build_console_window",
    "parse_args",
    "main",
]


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=ApplicationConstants.APP_DESCRIPTION)
    parser.add_argument(
        "--log-file",
        help="Path of the log file to tail (overrides the configured location)",
    )
    parser.add_argument(
        "--config",
        help="Path of the JSON configuration file",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"{ApplicationConstants.APP_NAME} {ApplicationConstants.APP_VERSION}",
    )
    return parser.parse_args(argv)


def build_console_window(
    config_manager: ConfigManager,
    log_file: Optional[str] = None,
) -> ConsoleWindow:
    """Wire the shared store, the file poller and the console screen together."""
    config = config_manager.load_config()
    common.set_log_level(config.logging.log_level)

    store = init_log_store(config.console.max_lines)
    source_path = common.get_full_path(log_file) if log_file else config_manager.resolve_log_file_path()
    poller = LogTailPoller(
        store,
        source_path,
        max_lines=config.console.max_lines,
        dispatcher=get_task_dispatcher(),
        poll_interval_ms=config.console.poll_interval_ms,
    )
    window = ConsoleWindow(store, poller, config_manager=config_manager)
    poller.setParent(window)
    return window


def main(argv: Optional[List[str]] = None) -> None:
    """Main application entry point."""
    args = parse_args(argv)
    logger = common.get_logger("device_console")

    app = QApplication(sys.argv[:1])
    app.setApplicationName(ApplicationConstants.APP_NAME)
    app.setApplicationVersion(ApplicationConstants.APP_VERSION)

    config_manager = ConfigManager(config_path=args.config)
    window = build_console_window(config_manager, log_file=args.log_file)
    window.finished.connect(app.quit)
    logger.info("Tailing %s", window.poller.source_path)
    window.show()

    exit_code = app.exec()
    get_task_dispatcher().wait_for_done(2000)
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
