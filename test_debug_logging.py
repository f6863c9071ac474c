#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Tests for SubnetCalc debug mode, logging and call independence.
"""
import logging
import os
import subprocess
import sys
import threading
import unittest

from subnetcalc import core


class _ListHandler(logging.Handler):
    def __init__(self):
        super().__init__(level=logging.DEBUG)
        self.records = []

    def emit(self, record):
        self.records.append(record)


class TestDebugLogging(unittest.TestCase):
    """Test cases for the debug logging layer."""

    def setUp(self):
        """Set up test environment."""
        self.core_logger = logging.getLogger(core.__name__)
        self.saved_level = self.core_logger.level

    def tearDown(self):
        core.setup_logging(debug=False)
        self.core_logger.setLevel(self.saved_level)

    def test_setup_logging_toggles_debug_mode(self):
        core.setup_logging(debug=True)
        self.assertTrue(core.DEBUG_MODE)
        self.assertEqual(logging.getLogger().level, logging.DEBUG)

        core.setup_logging(debug=False)
        self.assertFalse(core.DEBUG_MODE)
        self.assertEqual(logging.getLogger().level, logging.WARNING)

    def test_debug_logging(self):
        """Debug mode traces entry, exit and timing of core calls."""
        core.setup_logging(debug=True)

        with self.assertLogs(core.__name__, level="DEBUG") as captured:
            result = core.calculate("192.168.1.1", 24)

        self.assertEqual(str(result.network), "192.168.1.0")
        messages = "\n".join(captured.output)
        self.assertIn("Entering calculate", messages)
        self.assertIn("Exiting calculate", messages)
        self.assertIn("Calculating subnet 192.168.1.1/24", messages)

    def test_debug_logging_records_exceptions(self):
        core.setup_logging(debug=True)

        with self.assertLogs(core.__name__, level="DEBUG") as captured:
            with self.assertRaises(core.PrefixOutOfRange):
                core.calculate("192.168.1.1", 33)

        self.assertTrue(any("Exception in parse_prefix" in line for line in captured.output))

    def test_quiet_without_debug(self):
        core.setup_logging(debug=False)
        handler = _ListHandler()
        self.core_logger.addHandler(handler)
        self.core_logger.setLevel(logging.DEBUG)
        try:
            core.calculate("10.0.0.1", 8)
        finally:
            self.core_logger.removeHandler(handler)

        self.assertEqual(handler.records, [])

    def test_debug_env_variable(self):
        """SUBNETCALC_DEBUG enables debug mode at import time."""
        env = dict(os.environ, SUBNETCALC_DEBUG="true")
        result = subprocess.run(
            [sys.executable, "-c", "from subnetcalc import core; print(core.DEBUG_MODE)"],
            capture_output=True,
            text=True,
            env=env,
            cwd=os.path.dirname(os.path.abspath(__file__))
        )

        self.assertEqual(result.returncode, 0)
        self.assertEqual(result.stdout.strip(), "True")

    def test_error_handling(self):
        """Validation errors are ValueErrors and carry a reason."""
        with self.assertRaises(ValueError):
            core.calculate("invalid.ip", 24)

        with self.assertRaises(ValueError):
            core.calculate("192.168.1.1", 33)

        with self.assertRaises(ValueError) as ctx:
            core.calculate_cidr("invalid")
        self.assertIn("Missing '/' separator", str(ctx.exception))


class TestIndependentCalls(unittest.TestCase):
    """Calls share no state and can run in parallel."""

    def test_repeated_calls_are_identical(self):
        first = core.calculate("172.16.5.4", 20)
        second = core.calculate("172.16.5.4", 20)
        self.assertEqual(first, second)

    def test_concurrent_access(self):
        results = {}
        errors = []

        def compute_task(i):
            try:
                results[i] = core.calculate(f"192.168.{i}.1", 24)
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=compute_task, args=(i,)) for i in range(10)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(errors, [])
        self.assertEqual(len(results), 10)
        for i, result in results.items():
            self.assertEqual(str(result.network), f"192.168.{i}.0")
            self.assertEqual(str(result.broadcast), f"192.168.{i}.255")


if __name__ == "__main__":
    unittest.main(verbosity=2)
