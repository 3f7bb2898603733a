"""Repeating timer task with a no-overlap guard."""

from typing import Callable, Optional

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from utils import common


class PeriodicTask(QObject):
    """Run ``callback`` every ``interval_ms`` while started.

    When ``busy_check`` reports that the previous run is still in progress the
    tick is skipped, never queued.
    """

    # Emitted after each tick that actually ran the callback
    tick_executed = pyqtSignal()
    tick_skipped = pyqtSignal()

    def __init__(
        self,
        callback: Callable[[], None],
        interval_ms: int,
        busy_check: Optional[Callable[[], bool]] = None,
        parent: Optional[QObject] = None,
        name: str = 'periodic_task',
    ):
        """Initialize the periodic task.

        Args:
            callback: Function to call on every tick
            interval_ms: Delay in milliseconds between ticks
            busy_check: Returns True while a previous run is still in flight
            parent: Parent QObject
            name: Label used in log messages
        """
        super().__init__(parent)
        if interval_ms <= 0:
            raise ValueError(f'interval_ms must be positive, got {interval_ms}')
        self.callback = callback
        self.busy_check = busy_check
        self.name = name
        self.logger = common.get_logger('periodic_task')

        self.timer = QTimer(self)
        self.timer.setSingleShot(False)
        self.timer.setInterval(interval_ms)
        self.timer.timeout.connect(self._on_tick)

        self.executed_count = 0
        self.skipped_count = 0

    @property
    def interval_ms(self) -> int:
        return self.timer.interval()

    def set_interval(self, interval_ms: int) -> None:
        if interval_ms <= 0:
            raise ValueError(f'interval_ms must be positive, got {interval_ms}')
        self.timer.setInterval(interval_ms)

    def start(self) -> None:
        """Start ticking. Calling start on a running task restarts its interval."""
        self.timer.start()
        self.logger.debug('%s started (every %d ms)', self.name, self.timer.interval())

    def stop(self) -> None:
        if self.timer.isActive():
            self.timer.stop()
            self.logger.debug('%s stopped', self.name)

    def is_active(self) -> bool:
        return self.timer.isActive()

    def trigger_now(self) -> bool:
        """Run one tick immediately; return False when it was skipped as busy."""
        return self._on_tick()

    def _on_tick(self) -> bool:
        if self.busy_check is not None and self.busy_check():
            self.skipped_count += 1
            self.logger.debug('%s tick skipped, previous run still busy', self.name)
            self.tick_skipped.emit()
            return False

        try:
            self.executed_count += 1
            self.callback()
            self.tick_executed.emit()
        except Exception as e:
            self.logger.error(f'Error during {self.name} tick: {e}', exc_info=True)
        return True
