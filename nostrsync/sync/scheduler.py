"""
Periodic trigger for sync cycles.
"""

import logging
import threading
from typing import Optional


class SyncScheduler:
    """
    Runs ``orchestrator.run_sync_cycle()`` on a background thread every
    ``interval_minutes``. Manual triggers call the orchestrator directly; its
    own lock keeps timer and manual cycles from overlapping.
    """

    def __init__(self, orchestrator, interval_minutes: float):
        if interval_minutes <= 0:
            raise ValueError("interval_minutes must be positive")
        self.orchestrator = orchestrator
        self.interval_minutes = interval_minutes
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self, run_immediately: bool = False) -> None:
        """Start the timer thread; a no-op if it is already running."""
        if self.is_running:
            return

        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._run,
            args=(self._stop_event, run_immediately),
            name="nostrsync-timer",
            daemon=True,
        )
        self._thread.start()
        logging.info(f"Automatic sync every {self.interval_minutes} minute(s)")

    def stop(self, timeout: Optional[float] = None) -> None:
        """Stop the timer and wait for an in-flight cycle to finish."""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
        self._thread = None

    def restart(self, interval_minutes: Optional[float] = None) -> None:
        """Restart the timer, optionally with a new interval."""
        if interval_minutes is not None:
            if interval_minutes <= 0:
                raise ValueError("interval_minutes must be positive")
            self.interval_minutes = interval_minutes
        self.stop()
        self.start()

    def _run(self, stop_event: threading.Event, run_immediately: bool) -> None:
        if run_immediately:
            self._tick()
        while not stop_event.wait(self.interval_minutes * 60):
            self._tick()

    def _tick(self) -> None:
        try:
            self.orchestrator.run_sync_cycle()
        except Exception:
            # Keep the timer alive; the next tick retries
            logging.exception("Unexpected error during scheduled sync")
