"""
Interval scheduler for artwork synchronization.

Runs the sync task on a background daemon thread every ``interval_hours``
(default 24). The last run time lives in memory only: a restarted process
runs immediately, then keeps the interval.

Stopping the scheduler sets the same event the task receives as its cancel
event, so a running sync stops between collection folders.
"""

import threading
import time
from typing import Callable, Optional

from reconciliation.errors import ConfigurationError, RunInProgressError

from shared.log import create_logger
_, log_debug, log_info, log_warn, log_error = create_logger("Scheduler")

DEFAULT_INTERVAL_HOURS = 24.0


class SyncScheduler:
    """Fixed-interval trigger for the artwork sync task.

    Args:
        task: Callable receiving the cancel event; one sync run per call
        interval_hours: Hours between run starts
        poll_interval: Seconds between due checks while idle
    """

    def __init__(
        self,
        task: Callable[[threading.Event], object],
        interval_hours: float = DEFAULT_INTERVAL_HOURS,
        poll_interval: float = 60.0,
    ):
        self.task = task
        self.interval_seconds = interval_hours * 3600
        self.poll_interval = poll_interval
        self.last_run_time: Optional[float] = None
        self.run_count = 0
        self._stop_event = threading.Event()
        self.thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self.thread is not None and self.thread.is_alive()

    def is_due(self, now: Optional[float] = None) -> bool:
        """Check if a run is due.

        Args:
            now: Current time (default: time.time()). For testing.
        """
        if self.last_run_time is None:
            return True
        if now is None:
            now = time.time()
        return now - self.last_run_time >= self.interval_seconds

    def run_pending(self, now: Optional[float] = None) -> bool:
        """Run the task if due.

        Returns:
            True if the task ran (successfully or not).
        """
        if not self.is_due(now):
            return False
        self.last_run_time = now if now is not None else time.time()
        self.run_count += 1
        try:
            self.task(self._stop_event)
        except RunInProgressError as e:
            log_warn(f"Skipping scheduled run: {e}")
        except ConfigurationError as e:
            log_error(f"Scheduled run aborted, configuration error: {e}")
        except Exception as e:
            log_error(f"Scheduled run failed: {e}")
        return True

    def start(self) -> None:
        """Start the scheduler thread."""
        if self.running:
            log_debug("Scheduler already running")
            return
        self._stop_event.clear()
        self.thread = threading.Thread(target=self._loop, name="artwork-sync-scheduler", daemon=True)
        self.thread.start()
        log_info(f"Scheduler started (every {self.interval_seconds / 3600:g}h)")

    def stop(self, timeout: Optional[float] = None) -> None:
        """Stop the scheduler and cancel a run in progress."""
        self._stop_event.set()
        if self.thread is not None:
            self.thread.join(timeout)
        log_info("Scheduler stopped")

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until stop() is called. Returns True if stopped."""
        return self._stop_event.wait(timeout)

    def _loop(self) -> None:
        while not self._stop_event.is_set():
            self.run_pending()
            self._stop_event.wait(self.poll_interval)
