"""Text rendering for console entries and the copy-all payload."""

from __future__ import annotations

from typing import Iterable, List

from config.constants import ApplicationConstants, ConsoleConstants
from utils.console_models import DeviceInfo, LogEntry
from utils.time_formatting import format_clock_time


def format_timestamp(entry: LogEntry) -> str:
    """Return the bracketed ``[HH:MM:SS]`` prefix for ``entry``."""
    return f'[{format_clock_time(entry.timestamp)}]'


def format_log_line(entry: LogEntry) -> str:
    """Render ``entry`` as ``[HH:MM:SS] [SEVERITY] message``."""
    return f'{format_timestamp(entry)} {entry.severity.tag} {entry.message}'


def build_device_header(device_info: DeviceInfo) -> List[str]:
    """Return the device information block that precedes copied entries."""
    return [
        ConsoleConstants.DEVICE_INFO_HEADER,
        f'Version: {device_info.system_version}',
        f'Name: {device_info.name}',
        f'Model: {device_info.model}',
        f'{ApplicationConstants.APP_NAME} Version: App Version: {ApplicationConstants.APP_VERSION}',
    ]


def build_copy_text(device_info: DeviceInfo, entries: Iterable[LogEntry]) -> str:
    """Return the clipboard text: header block, blank line, then one line per entry."""
    header = '\n'.join(build_device_header(device_info))
    body = '\n'.join(format_log_line(entry) for entry in entries)
    return f'{header}\n\n{ConsoleConstants.LOG_ENTRIES_HEADER}\n{body}'


__all__ = ['build_copy_text', 'build_device_header', 'format_log_line', 'format_timestamp']
