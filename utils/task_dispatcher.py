"""Background task dispatcher built on QThreadPool.

Results are delivered through :class:`TaskHandle` signals. The handle lives in
the submitting thread, so connected slots run there (queued connection) even
though the work itself runs on a pool thread.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Tuple

from PyQt6 import sip
from PyQt6.QtCore import QObject, QRunnable, QThreadPool, pyqtSignal

from utils import common


logger = common.get_logger('task_dispatcher')


TaskCallable = Callable[..., Any]


@dataclass(frozen=True)
class TaskContext:
    """Metadata describing the submitted task."""

    name: str
    source: Optional[str] = None
    category: Optional[str] = None
    trace_id: str = field(default_factory=common.generate_trace_id)

    def __post_init__(self) -> None:
        if not self.trace_id or not str(self.trace_id).strip():
            object.__setattr__(self, "trace_id", common.generate_trace_id())


class TaskHandle(QObject):
    """Result signals for one submitted task."""

    completed = pyqtSignal(object)
    failed = pyqtSignal(Exception)
    finished = pyqtSignal()

    def __init__(self, context: TaskContext, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._context = context

    @property
    def context(self) -> TaskContext:
        return self._context

    @property
    def trace_id(self) -> str:
        return self._context.trace_id


class _TaskRunnable(QRunnable):
    """Internal runnable executing one task on the pool."""

    def __init__(
        self,
        fn: TaskCallable,
        args: Tuple[Any, ...],
        kwargs: Dict[str, Any],
        handle: TaskHandle,
    ):
        super().__init__()
        self.fn = fn
        self.args = args
        self.kwargs = kwargs
        self.handle = handle
        self._context = handle.context
        self._trace_id = handle.trace_id

    @staticmethod
    def _is_deleted_error(exc: Exception) -> bool:
        return isinstance(exc, RuntimeError) and 'has been deleted' in str(exc)

    def _handle_is_deleted(self) -> bool:
        try:
            return sip.isdeleted(self.handle)
        except TypeError:
            # Not a wrapped Qt object, so it cannot have been deleted
            return False
        except RuntimeError:
            return True

    def _safe_emit(self, signal_name: str, *args: Any) -> None:
        if self._handle_is_deleted():
            logger.debug('Skipping %s emit because TaskHandle is gone for %s', signal_name, self._context)
            return
        try:
            getattr(self.handle, signal_name).emit(*args)
        except RuntimeError as exc:
            if self._is_deleted_error(exc):
                logger.debug('Suppressed %s emit after TaskHandle destruction for %s', signal_name, self._context)
                return
            raise

    def run(self) -> None:  # pragma: no cover - executed in thread pool
        with common.trace_id_scope(self._trace_id):
            try:
                result = self.fn(*self.args, **self.kwargs)
            except Exception as exc:
                logger.exception('Task %s failed: %s', self._context, exc)
                self._safe_emit('failed', exc)
            else:
                self._safe_emit('completed', result)
            finally:
                self._safe_emit('finished')


class TaskDispatcher(QObject):
    """Submit IO bound work to a QThreadPool and report back via signals."""

    def __init__(self, max_thread_count: Optional[int] = None, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._pool = QThreadPool(self)
        if max_thread_count:
            logger.info('Configuring task dispatcher max thread count to %s', max_thread_count)
            self._pool.setMaxThreadCount(max_thread_count)

    def submit(
        self,
        fn: TaskCallable,
        *args: Any,
        context: Optional[TaskContext] = None,
        on_completed: Optional[Callable[[Any], None]] = None,
        on_failed: Optional[Callable[[Exception], None]] = None,
        **kwargs: Any,
    ) -> TaskHandle:
        """Submit a function to the pool and return a handle for observation.

        ``on_completed``/``on_failed`` are connected before the task starts, so
        a task finishing immediately cannot outrun its listeners.
        """

        if context is None:
            context = TaskContext(name=getattr(fn, '__name__', 'task'))

        handle = TaskHandle(context, parent=self)
        if on_completed is not None:
            handle.completed.connect(on_completed)
        if on_failed is not None:
            handle.failed.connect(on_failed)
        handle.finished.connect(handle.deleteLater)

        logger.debug('Submitting task %s', context)
        self._pool.start(_TaskRunnable(fn, args, kwargs, handle))
        return handle

    def wait_for_done(self, timeout_ms: int = -1) -> bool:
        """Block until queued tasks finish; used on shutdown and in tests."""
        return self._pool.waitForDone(timeout_ms)


_dispatcher: Optional[TaskDispatcher] = None


def get_task_dispatcher() -> TaskDispatcher:
    """Return the shared TaskDispatcher instance (single worker for file reads)."""

    global _dispatcher
    if _dispatcher is None:
        _dispatcher = TaskDispatcher(max_thread_count=1)
    return _dispatcher


__all__ = ['TaskDispatcher', 'TaskHandle', 'TaskContext', 'get_task_dispatcher']
