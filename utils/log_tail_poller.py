"""Incremental tailing of the device log file into the console store."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from PyQt6.QtCore import QObject, pyqtSignal

from config.constants import ConsoleConstants, MessageConstants
from utils import common
from utils.log_classifier import classify_lines
from utils.log_store import LogStore
from utils.periodic_task import PeriodicTask
from utils.task_dispatcher import TaskContext, TaskDispatcher


logger = common.get_logger('log_tail_poller')

PathLike = Union[str, Path]

MODE_INITIAL = 'initial'
MODE_INCREMENTAL = 'incremental'


@dataclass(frozen=True)
class TailSnapshot:
    """Result of reading the source file once."""

    exists: bool
    lines: List[str] = field(default_factory=list)
    error: Optional[str] = None
    pending: str = ''  # trailing text not yet terminated by a newline


def read_tail_snapshot(path: PathLike) -> TailSnapshot:
    """Read every complete line of ``path``.

    A final line without a newline is still being written, so it is held back
    in ``pending`` and left out of ``lines`` until a later read sees it
    terminated. Missing files and I/O errors are reported, not raised.
    """
    source = Path(path)
    try:
        with source.open('r', encoding='utf-8', errors='replace', newline=None) as handle:
            content = handle.read()
    except FileNotFoundError:
        return TailSnapshot(exists=False)
    except OSError as exc:
        logger.warning('Failed to read %s: %s', source, exc)
        return TailSnapshot(exists=True, error=str(exc))
    lines = content.splitlines()
    pending = ''
    if lines and not content.endswith(('\n', '\r')):
        pending = lines.pop()
    return TailSnapshot(exists=True, lines=lines, pending=pending)


class LogTailPoller(QObject):
    """Feed new lines of a growing text file into a :class:`LogStore`.

    A line-count high-water mark remembers how much of the file has already
    been consumed. Only one read is in flight at a time; polls requested
    while busy are dropped.
    """

    loading_changed = pyqtSignal(bool)
    high_water_mark_changed = pyqtSignal(int)
    poll_finished = pyqtSignal(str)  # MODE_INITIAL / MODE_INCREMENTAL

    def __init__(
        self,
        store: LogStore,
        source_path: PathLike,
        max_lines: int = ConsoleConstants.MAX_LINES,
        dispatcher: Optional[TaskDispatcher] = None,
        poll_interval_ms: int = ConsoleConstants.POLL_INTERVAL_MS,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        if max_lines < 1:
            raise ValueError(f'max_lines must be positive, got {max_lines}')
        self._store = store
        self._source_path = Path(source_path)
        self._max_lines = max_lines
        self._dispatcher = dispatcher
        self._high_water_mark = 0
        self._is_loading = False
        self._pending_mode: Optional[str] = None

        self._periodic = PeriodicTask(
            self.check_for_new_lines,
            poll_interval_ms,
            busy_check=self.is_loading,
            parent=self,
            name='log_tail_poll',
        )

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------
    @property
    def source_path(self) -> Path:
        return self._source_path

    @property
    def high_water_mark(self) -> int:
        return self._high_water_mark

    @property
    def max_lines(self) -> int:
        return self._max_lines

    @property
    def periodic_task(self) -> PeriodicTask:
        return self._periodic

    def is_loading(self) -> bool:
        return self._is_loading

    def is_active(self) -> bool:
        return self._periodic.is_active()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def activate(self) -> None:
        """Load the file from scratch and start periodic polling."""
        logger.info('Console tailing activated for %s', self._source_path)
        self.load_initial()
        self._periodic.start()

    def deactivate(self) -> None:
        """Stop periodic polling; an in-flight read still completes."""
        self._periodic.stop()
        logger.info('Console tailing deactivated for %s', self._source_path)

    # ------------------------------------------------------------------
    # Polling
    # ------------------------------------------------------------------
    def load_initial(self) -> bool:
        """Reset the store from the last ``max_lines`` lines of the file."""
        return self._start_poll(MODE_INITIAL)

    def check_for_new_lines(self) -> bool:
        """Append lines written since the previous poll."""
        return self._start_poll(MODE_INCREMENTAL)

    def _start_poll(self, mode: str) -> bool:
        if self._is_loading:
            logger.debug('Skipping %s poll: previous read still in progress', mode)
            return False

        self._set_loading(True)
        self._pending_mode = mode

        if self._dispatcher is None:
            self._on_read_completed(read_tail_snapshot(self._source_path))
            return True

        context = TaskContext(name=f'tail_{mode}', source=str(self._source_path), category='console')
        self._dispatcher.submit(
            read_tail_snapshot,
            self._source_path,
            context=context,
            on_completed=self._on_read_completed,
            on_failed=self._on_read_failed,
        )
        return True

    def _on_read_completed(self, snapshot: object) -> None:
        mode = self._pending_mode or MODE_INCREMENTAL
        try:
            if not isinstance(snapshot, TailSnapshot):
                logger.error('Unexpected read result for %s: %r', self._source_path, snapshot)
                self._store.add_error(self._read_error_message(mode, f'unexpected result {snapshot!r}'))
            elif mode == MODE_INITIAL:
                self._apply_initial(snapshot)
            else:
                self._apply_incremental(snapshot)
        finally:
            self._finish_poll(mode)

    def _on_read_failed(self, exc: Exception) -> None:
        mode = self._pending_mode or MODE_INCREMENTAL
        try:
            self._store.add_error(self._read_error_message(mode, str(exc)))
        finally:
            self._finish_poll(mode)

    def _finish_poll(self, mode: str) -> None:
        self._pending_mode = None
        self._set_loading(False)
        self.poll_finished.emit(mode)

    # ------------------------------------------------------------------
    # Applying snapshots (always on the poller's thread)
    # ------------------------------------------------------------------
    def _apply_initial(self, snapshot: TailSnapshot) -> None:
        if not snapshot.exists:
            logger.info('Log source %s not found', self._source_path)
            self._store.add_info(MessageConstants.INFO_NO_LOG_FILE)
            return

        if snapshot.error is not None:
            self._store.add_error(self._read_error_message(MODE_INITIAL, snapshot.error))
            return

        lines = snapshot.lines
        recent_lines = lines[-self._max_lines:]
        self._set_high_water_mark(len(lines))
        entries = self._store.replace_all(classify_lines(recent_lines))
        logger.info(
            'Loaded %d entries from %s (%d lines total)',
            len(entries),
            self._source_path,
            len(lines),
        )

    def _apply_incremental(self, snapshot: TailSnapshot) -> None:
        if not snapshot.exists:
            return

        if snapshot.error is not None:
            self._store.add_error(self._read_error_message(MODE_INCREMENTAL, snapshot.error))
            return

        lines = snapshot.lines
        line_count = len(lines)

        if line_count < self._high_water_mark:
            logger.info(
                'Log source %s shrank from %d to %d lines; reading it from the start',
                self._source_path,
                self._high_water_mark,
                line_count,
            )
            self._set_high_water_mark(0)

        if line_count <= self._high_water_mark:
            return

        new_lines = lines[self._high_water_mark:][-self._max_lines:]
        self._set_high_water_mark(line_count)

        specs = classify_lines(new_lines)
        if specs:
            self._store.extend(specs)
        self._store.truncate(self._max_lines)
        logger.debug('Appended %d new entries from %s', len(specs), self._source_path)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _read_error_message(mode: str, reason: str) -> str:
        template = (
            MessageConstants.ERROR_INITIAL_READ_FAILED
            if mode == MODE_INITIAL
            else MessageConstants.ERROR_NEW_LINES_READ_FAILED
        )
        return template.format(reason=reason)

    def _set_loading(self, loading: bool) -> None:
        if loading == self._is_loading:
            return
        self._is_loading = loading
        self.loading_changed.emit(loading)

    def _set_high_water_mark(self, value: int) -> None:
        if value == self._high_water_mark:
            return
        self._high_water_mark = value
        self.high_water_mark_changed.emit(value)


__all__ = ['LogTailPoller', 'TailSnapshot', 'read_tail_snapshot', 'MODE_INITIAL', 'MODE_INCREMENTAL']
