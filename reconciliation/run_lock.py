"""
Run lock preventing overlapping reconciliation runs.

Two layers:
- threading.Lock for runs started from threads of the same process
  (scheduler thread plus a manual trigger)
- fcntl.flock on a lock file for separate processes (cron plus a manual
  invocation)

Both are non-blocking: a second run fails fast with RunInProgressError
instead of queueing behind the first.
"""

import fcntl
import os
import threading

from reconciliation.errors import RunInProgressError

from shared.log import create_logger
log_trace, log_debug, _, _, _ = create_logger("RunLock")

# One process-local lock per lock file path
_thread_locks: dict[str, threading.Lock] = {}
_thread_locks_guard = threading.Lock()


def _thread_lock_for(path: str) -> threading.Lock:
    with _thread_locks_guard:
        lock = _thread_locks.get(path)
        if lock is None:
            lock = threading.Lock()
            _thread_locks[path] = lock
        return lock


class RunLock:
    """Exclusive, non-blocking lease for one reconciliation run.

    Usage:
        with RunLock(data_dir):
            ...  # run

    Raises:
        RunInProgressError: On enter, if another run holds the lock.
    """

    LOCK_FILE = 'artwork_sync.lock'

    def __init__(self, data_dir: str):
        self.path = os.path.abspath(os.path.join(data_dir, self.LOCK_FILE))
        self._thread_lock = _thread_lock_for(self.path)
        self._file = None

    @property
    def held(self) -> bool:
        return self._file is not None

    def acquire(self) -> None:
        if not self._thread_lock.acquire(blocking=False):
            raise RunInProgressError(f"Artwork sync already running in this process ({self.path})")

        lock_file = None
        try:
            os.makedirs(os.path.dirname(self.path), exist_ok=True)
            lock_file = open(self.path, 'w')
            fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
        except BlockingIOError:
            lock_file.close()
            self._thread_lock.release()
            raise RunInProgressError(f"Artwork sync already running in another process ({self.path})")
        except OSError:
            if lock_file is not None:
                lock_file.close()
            self._thread_lock.release()
            raise

        self._file = lock_file
        log_trace(f"Acquired run lock {self.path}")

    def release(self) -> None:
        if self._file is None:
            return
        try:
            fcntl.flock(self._file.fileno(), fcntl.LOCK_UN)
        except OSError as e:
            log_debug(f"Failed to unlock {self.path}: {e}")
        finally:
            # flock is also released when the file closes
            self._file.close()
            self._file = None
            self._thread_lock.release()
        log_trace(f"Released run lock {self.path}")

    def __enter__(self) -> "RunLock":
        self.acquire()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()
