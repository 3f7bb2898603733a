"""Shared, capped, in-memory store of console entries."""

from __future__ import annotations

import itertools
from datetime import datetime
from typing import Callable, Iterable, List, Optional, Tuple

from PyQt6.QtCore import QObject, pyqtSignal

from config.constants import ConsoleConstants
from utils import common
from utils.console_models import LogEntry, LogSeverity


logger = common.get_logger('log_store')

EntrySpec = Tuple[LogSeverity, str]
Subscriber = Callable[[], None]
Clock = Callable[[], datetime]


class LogStore(QObject):
    """Insertion-ordered entries capped at ``max_entries``; oldest evicted first.

    Observers either connect to the fine-grained signals (list models) or
    register a plain callback through :meth:`subscribe`, which fires once per
    mutation.
    """

    entries_appended = pyqtSignal(list)  # List[LogEntry]
    entries_evicted = pyqtSignal(int)    # number removed from the front
    entries_reset = pyqtSignal()
    changed = pyqtSignal()

    def __init__(
        self,
        max_entries: int = ConsoleConstants.MAX_LINES,
        parent: Optional[QObject] = None,
        *,
        clock: Optional[Clock] = None,
    ) -> None:
        super().__init__(parent)
        if max_entries < 1:
            raise ValueError(f'max_entries must be positive, got {max_entries}')
        self._max_entries = max_entries
        self._entries: List[LogEntry] = []
        self._error_count = 0
        self._ids = itertools.count(1)
        self._clock: Clock = clock or datetime.now

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def max_entries(self) -> int:
        return self._max_entries

    @property
    def error_count(self) -> int:
        return self._error_count

    def entries(self) -> List[LogEntry]:
        return list(self._entries)

    def entry_at(self, row: int) -> Optional[LogEntry]:
        if 0 <= row < len(self._entries):
            return self._entries[row]
        return None

    def last_entry(self) -> Optional[LogEntry]:
        return self._entries[-1] if self._entries else None

    def __len__(self) -> int:
        return len(self._entries)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def append(self, severity: LogSeverity, message: str) -> LogEntry:
        """Append a single entry and return it."""
        return self.extend([(severity, message)])[-1]

    def add_info(self, message: str) -> LogEntry:
        return self.append(LogSeverity.INFO, message)

    def add_warning(self, message: str) -> LogEntry:
        return self.append(LogSeverity.WARNING, message)

    def add_error(self, message: str) -> LogEntry:
        return self.append(LogSeverity.ERROR, message)

    def add_debug(self, message: str) -> LogEntry:
        return self.append(LogSeverity.DEBUG, message)

    def extend(self, specs: Iterable[EntrySpec]) -> List[LogEntry]:
        """Append entries in order, then evict the oldest beyond the cap."""
        new_entries = self._build_entries(specs)
        if not new_entries:
            return []

        self._entries.extend(new_entries)
        self._error_count += _count_errors(new_entries)
        self.entries_appended.emit(list(new_entries))
        self._evict_overflow()
        self.changed.emit()
        return new_entries

    def replace_all(self, specs: Iterable[EntrySpec]) -> List[LogEntry]:
        """Reset the store to exactly ``specs`` (bounded by the cap)."""
        new_entries = self._build_entries(specs)
        if len(new_entries) > self._max_entries:
            new_entries = new_entries[-self._max_entries:]
        self._entries = list(new_entries)
        self._error_count = _count_errors(new_entries)
        self.entries_reset.emit()
        self.changed.emit()
        logger.debug('Store reset with %d entries', len(new_entries))
        return new_entries

    def remove_oldest(self, count: int) -> int:
        """Remove up to ``count`` entries from the front; return how many went."""
        removed = self._remove_front(count)
        if removed:
            self.changed.emit()
        return removed

    def truncate(self, max_count: Optional[int] = None) -> int:
        """Evict the oldest entries so at most ``max_count`` (default: the cap) remain."""
        limit = self._max_entries if max_count is None else max(0, min(max_count, self._max_entries))
        return self.remove_oldest(len(self._entries) - limit)

    def set_max_entries(self, max_entries: int) -> None:
        if max_entries < 1:
            raise ValueError(f'max_entries must be positive, got {max_entries}')
        self._max_entries = max_entries
        self.truncate()

    def clear(self) -> None:
        """Drop every entry. Entry ids keep increasing afterwards."""
        if not self._entries:
            return
        self._entries.clear()
        self._error_count = 0
        self.entries_reset.emit()
        self.changed.emit()
        logger.info('Console store cleared')

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------
    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Call ``callback`` after every mutation; return an unsubscribe function."""
        self.changed.connect(callback)

        def _unsubscribe() -> None:
            try:
                self.changed.disconnect(callback)
            except (TypeError, RuntimeError) as exc:
                logger.debug('Subscriber already disconnected: %s', exc)

        return _unsubscribe

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _build_entries(self, specs: Iterable[EntrySpec]) -> List[LogEntry]:
        return [
            LogEntry(id=next(self._ids), timestamp=self._clock(), severity=severity, message=message)
            for severity, message in specs
        ]

    def _evict_overflow(self) -> None:
        overflow = len(self._entries) - self._max_entries
        if overflow > 0:
            self._remove_front(overflow)

    def _remove_front(self, count: int) -> int:
        if count <= 0 or not self._entries:
            return 0
        actual = min(count, len(self._entries))
        self._error_count -= _count_errors(self._entries[:actual])
        del self._entries[:actual]
        self.entries_evicted.emit(actual)
        return actual


def _count_errors(entries: Iterable[LogEntry]) -> int:
    return sum(1 for entry in entries if entry.is_error)


_store: Optional[LogStore] = None


def init_log_store(max_entries: int = ConsoleConstants.MAX_LINES) -> LogStore:
    """Create (or resize) the shared LogStore and return it."""
    global _store
    if _store is None:
        _store = LogStore(max_entries)
        logger.info('Console store initialised (cap=%d)', max_entries)
    elif _store.max_entries != max_entries:
        _store.set_max_entries(max_entries)
    return _store


def get_log_store() -> LogStore:
    """Return the shared LogStore instance, creating it with defaults if needed."""
    return _store if _store is not None else init_log_store()


def reset_log_store() -> None:
    """Clear and release the shared instance; the next access builds a fresh one."""
    global _store
    if _store is not None:
        _store.clear()
    _store = None


__all__ = ['LogStore', 'get_log_store', 'init_log_store', 'reset_log_store']
