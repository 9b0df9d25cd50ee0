"""
Tests for the periodic sync trigger.
"""

import threading
import unittest

from nostrsync.models import SyncResult
from nostrsync.sync import SyncScheduler


class CountingOrchestrator:
    """Stand-in orchestrator that counts cycles."""

    def __init__(self, target=2, error=None):
        self.count = 0
        self.target = target
        self.error = error
        self.reached = threading.Event()

    def run_sync_cycle(self):
        self.count += 1
        if self.count >= self.target:
            self.reached.set()
        if self.error:
            raise self.error
        return SyncResult()


# 6 ms between ticks
TICK_MINUTES = 0.0001


class TestSyncScheduler(unittest.TestCase):
    """Test timer start, stop and restart."""

    def test_runs_repeatedly(self):
        """Test that the timer keeps triggering cycles."""
        orchestrator = CountingOrchestrator(target=3)
        scheduler = SyncScheduler(orchestrator, TICK_MINUTES)

        scheduler.start()
        try:
            self.assertTrue(orchestrator.reached.wait(5))
        finally:
            scheduler.stop(timeout=5)

        self.assertFalse(scheduler.is_running)

    def test_run_immediately(self):
        """Test that the first cycle can run without waiting an interval."""
        orchestrator = CountingOrchestrator(target=1)
        scheduler = SyncScheduler(orchestrator, 60)

        scheduler.start(run_immediately=True)
        try:
            self.assertTrue(orchestrator.reached.wait(5))
        finally:
            scheduler.stop(timeout=5)

        self.assertEqual(orchestrator.count, 1)

    def test_stop_prevents_further_cycles(self):
        """Test that no cycle runs after stop."""
        orchestrator = CountingOrchestrator(target=1)
        scheduler = SyncScheduler(orchestrator, 60)

        scheduler.start()
        scheduler.stop(timeout=5)

        self.assertEqual(orchestrator.count, 0)

    def test_restart_changes_interval(self):
        """Test that restart applies a new interval."""
        orchestrator = CountingOrchestrator(target=2)
        scheduler = SyncScheduler(orchestrator, 60)
        scheduler.start()

        scheduler.restart(TICK_MINUTES)
        try:
            self.assertTrue(orchestrator.reached.wait(5))
        finally:
            scheduler.stop(timeout=5)

        self.assertEqual(scheduler.interval_minutes, TICK_MINUTES)

    def test_unexpected_error_keeps_timer_alive(self):
        """Test that a crashing cycle does not stop the timer."""
        orchestrator = CountingOrchestrator(target=2, error=RuntimeError("boom"))
        scheduler = SyncScheduler(orchestrator, TICK_MINUTES)

        scheduler.start()
        try:
            with self.assertLogs(level="ERROR"):
                self.assertTrue(orchestrator.reached.wait(5))
        finally:
            scheduler.stop(timeout=5)

    def test_invalid_interval(self):
        """Test that a non-positive interval is rejected."""
        with self.assertRaises(ValueError):
            SyncScheduler(CountingOrchestrator(), 0)


if __name__ == '__main__':
    unittest.main()
