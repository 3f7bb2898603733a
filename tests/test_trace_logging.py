import logging
import os
import sys
import unittest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from utils import common
from utils.task_dispatcher import TaskContext, _TaskRunnable


class DummySignal:
    def __init__(self):
        self.emissions = []

    def emit(self, *args, **kwargs):
        self.emissions.append((args, kwargs))


class DummyHandle:
    def __init__(self, context):
        self.context = context
        self.completed = DummySignal()
        self.failed = DummySignal()
        self.finished = DummySignal()
        self.trace_id = context.trace_id


class TraceIdLoggingTests(unittest.TestCase):
    def test_task_context_has_trace_id(self):
        context = TaskContext(name='unit-test-task')
        self.assertTrue(hasattr(context, 'trace_id'))
        trace_id = getattr(context, 'trace_id')
        self.assertIsNotNone(trace_id)
        self.assertNotEqual(str(trace_id).strip(), '')

    def test_task_runnable_sets_trace_id_for_execution(self):
        context = TaskContext(name='unit-test-task', trace_id='trace-xyz')
        handle = DummyHandle(context)
        observed = {}

        def worker():
            observed['trace_id'] = common.get_trace_id()
            return 'done'

        runnable = _TaskRunnable(worker, tuple(), {}, handle)
        runnable.run()

        self.assertEqual(observed.get('trace_id'), 'trace-xyz')
        self.assertEqual(handle.completed.emissions, [(('done',), {})])
        self.assertEqual(len(handle.finished.emissions), 1)

    def test_failed_task_emits_failed_and_finished(self):
        handle = DummyHandle(TaskContext(name='failing'))
        error = OSError('disk gone')

        def worker():
            raise error

        _TaskRunnable(worker, tuple(), {}, handle).run()

        self.assertEqual(handle.failed.emissions, [((error,), {})])
        self.assertEqual(handle.completed.emissions, [])
        self.assertEqual(len(handle.finished.emissions), 1)

    def test_trace_id_scope_restores_previous_value(self):
        before = common.get_trace_id()
        with common.trace_id_scope('scoped'):
            self.assertEqual(common.get_trace_id(), 'scoped')
        self.assertEqual(common.get_trace_id(), before)

    def test_records_carry_trace_id(self):
        record = logging.LogRecord('x', logging.INFO, __file__, 1, 'msg', None, None)
        with common.trace_id_scope('abc'):
            common.TraceIdFilter().filter(record)
        self.assertEqual(record.trace_id, 'abc')


class LogLevelTests(unittest.TestCase):
    def tearDown(self):
        common.set_log_level('INFO')

    def test_set_log_level_applies_to_project_loggers(self):
        logger = common.get_logger('trace_logging_test')

        common.set_log_level('debug')

        self.assertEqual(logger.level, logging.DEBUG)

    def test_unknown_level_is_ignored(self):
        logger = common.get_logger('trace_logging_test')
        common.set_log_level('WARNING')

        common.set_log_level('chatty')

        self.assertEqual(logger.level, logging.WARNING)


if __name__ == '__main__':
    unittest.main()
