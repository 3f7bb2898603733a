#!/usr/bin/env python3
"""Task dispatcher safety tests."""

import sys
import os
import unittest

# Ensure project root on path
PROJECT_ROOT = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, os.path.dirname(PROJECT_ROOT))

from PyQt6.QtCore import QCoreApplication, QObject, QEvent
from PyQt6.QtTest import QTest
from PyQt6 import sip

from utils.task_dispatcher import TaskContext, TaskDispatcher, TaskHandle, _TaskRunnable


def _wait_until(predicate, timeout_ms=2000, step_ms=20):
    waited = 0
    while not predicate() and waited < timeout_ms:
        QTest.qWait(step_ms)
        waited += step_ms
    return predicate()


class TaskDispatcherSafetyTest(unittest.TestCase):
    """Validate TaskDispatcher behaviour under edge cases."""

    @classmethod
    def setUpClass(cls) -> None:
        cls._app = QCoreApplication.instance() or QCoreApplication([])

    def test_runnable_survives_deleted_task_handle(self) -> None:
        """Running a task after TaskHandle destruction must not crash."""

        context = TaskContext(name="test")
        parent = QObject()
        handle = TaskHandle(context, parent=parent)
        runnable = _TaskRunnable(lambda: "result", tuple(), {}, handle)

        parent.deleteLater()
        QCoreApplication.sendPostedEvents(None, int(QEvent.Type.DeferredDelete))
        QCoreApplication.processEvents()

        self.assertTrue(sip.isdeleted(handle))

        try:
            runnable.run()
        except RuntimeError as exc:  # pragma: no cover - expectation fail path
            self.fail(f"_TaskRunnable should ignore deleted handles, but raised: {exc}")

    def test_blank_trace_id_is_regenerated(self) -> None:
        context = TaskContext(name="trace", trace_id="  ")
        self.assertTrue(context.trace_id.strip())


class TaskDispatcherDeliveryTest(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        cls._app = QCoreApplication.instance() or QCoreApplication([])

    def test_result_is_delivered_to_callback(self) -> None:
        dispatcher = TaskDispatcher(max_thread_count=1)
        results = []

        dispatcher.submit(lambda a, b: a + b, 2, 3, on_completed=results.append)
        dispatcher.wait_for_done(2000)

        self.assertTrue(_wait_until(lambda: results == [5]))

    def test_exception_is_delivered_to_failure_callback(self) -> None:
        dispatcher = TaskDispatcher(max_thread_count=1)
        errors = []

        def boom():
            raise ValueError("bad input")

        dispatcher.submit(boom, on_failed=errors.append)
        dispatcher.wait_for_done(2000)

        self.assertTrue(_wait_until(lambda: len(errors) == 1))
        self.assertIsInstance(errors[0], ValueError)


if __name__ == "__main__":
    unittest.main()
