"""Severity classification for raw device log lines."""

from __future__ import annotations

from typing import Iterable, List, Tuple

from config.constants import ConsoleConstants
from utils.console_models import LogSeverity

# Checked in order; the first keyword found wins.
_SEVERITY_KEYWORDS: Tuple[Tuple[str, LogSeverity], ...] = (
    ('error', LogSeverity.ERROR),
    ('warning', LogSeverity.WARNING),
    ('debug', LogSeverity.DEBUG),
)


def classify_line(line: str) -> LogSeverity:
    """Return the severity of ``line`` using a case-insensitive keyword match."""
    lowered = line.lower()
    for keyword, severity in _SEVERITY_KEYWORDS:
        if keyword in lowered:
            return severity
    return LogSeverity.INFO


def is_header_line(line: str) -> bool:
    """Return True when ``line`` carries one of the producer's header markers."""
    return any(marker in line for marker in ConsoleConstants.HEADER_MARKERS)


def should_skip_line(line: str) -> bool:
    """Return True for blank lines and header lines."""
    if not line.strip():
        return True
    return is_header_line(line)


def classify_lines(lines: Iterable[str]) -> List[Tuple[LogSeverity, str]]:
    """Classify every displayable line, preserving order."""
    return [(classify_line(line), line) for line in lines if not should_skip_line(line)]


__all__ = ['classify_line', 'classify_lines', 'is_header_line', 'should_skip_line']
