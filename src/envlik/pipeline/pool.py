"""Scoped worker pool and bounded reference fetches."""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Optional

import pandas as pd

from envlik.contracts import DataUnavailable, DayFailure

__all__ = ['DayWorkerPool', 'fetch_with_timeout']

logger = logging.getLogger(__name__)


class DayWorkerPool:
    """Fixed-size thread pool used as a context manager.

    The pool exists only inside the ``with`` block. On normal exit it waits
    for submitted tasks; on an exception it cancels tasks that have not
    started and returns without waiting.

    Example usage::

        with DayWorkerPool(4) as pool:
            futures = {day: pool.submit(worker.process, day) for day in days}
    """

    def __init__(self, max_workers: int, name: str = "envlik-day"):
        self.max_workers = max_workers
        self.name = name
        self._executor: Optional[ThreadPoolExecutor] = None

    @property
    def closed(self) -> bool:
        return self._executor is None

    def __enter__(self) -> "DayWorkerPool":
        self._executor = ThreadPoolExecutor(max_workers=self.max_workers,
                                            thread_name_prefix=self.name)
        logger.debug("Worker pool started: %d workers", self.max_workers)
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        failed = exc_type is not None
        self._executor.shutdown(wait=not failed, cancel_futures=failed)
        self._executor = None
        logger.debug("Worker pool shut down%s", " after error" if failed else "")
        return False

    def submit(self, fn, *args, **kwargs) -> Future:
        if self._executor is None:
            raise RuntimeError("DayWorkerPool used outside its 'with' block")
        return self._executor.submit(fn, *args, **kwargs)


def fetch_with_timeout(accessor, date: pd.Timestamp, timeout: float):
    """Fetch one day's reference grid, giving up after ``timeout`` seconds.

    The fetch runs on a daemon thread so a stuck read cannot hold up the
    pool or interpreter exit.

    Raises
    ------
    DataUnavailable
        On timeout, or wrapping any non-DayFailure error from the accessor.
    DayFailure
        Re-raised unchanged if the accessor raised one.
    """
    result = {}

    def _target():
        try:
            result["field"] = accessor.fetch(date)
        except Exception as e:
            result["error"] = e

    thread = threading.Thread(target=_target, name=f"fetch-{date:%Y-%m-%d}", daemon=True)
    thread.start()
    thread.join(timeout)

    if thread.is_alive():
        raise DataUnavailable(f"Fetch for {date.date()} timed out after {timeout:.0f}s")
    if "error" in result:
        error = result["error"]
        if isinstance(error, DayFailure):
            raise error
        raise DataUnavailable(f"Fetch for {date.date()} failed: {error}") from error
    return result["field"]
