"""Tests for the scoped worker pool and bounded fetches."""

import threading

import pandas as pd
import pytest

from envlik.contracts import DataUnavailable, FitFailure
from envlik.pipeline import DayWorkerPool
from envlik.pipeline.pool import fetch_with_timeout
from tests.helpers.fake_field import FailingAccessor, SlowAccessor, make_surface_field

pytestmark = pytest.mark.unit

DAY = pd.Timestamp("2024-06-01")


class TestDayWorkerPool:

    def test_runs_tasks_and_closes(self):
        with DayWorkerPool(2) as pool:
            assert not pool.closed
            futures = [pool.submit(pow, 2, k) for k in range(4)]
        assert pool.closed
        assert [f.result() for f in futures] == [1, 2, 4, 8]

    def test_threads_are_named(self):
        with DayWorkerPool(1, name="unit-pool") as pool:
            name = pool.submit(lambda: threading.current_thread().name).result()
        assert name.startswith("unit-pool")

    def test_submit_outside_block(self):
        pool = DayWorkerPool(1)
        with pytest.raises(RuntimeError, match="outside"):
            pool.submit(print)

    def test_closed_after_error(self):
        pool = DayWorkerPool(2)
        with pytest.raises(ValueError):
            with pool:
                pool.submit(pow, 2, 2)
                raise ValueError("orchestrator failure")
        assert pool.closed


class TestFetchWithTimeout:

    def test_returns_field(self):
        field = make_surface_field()
        accessor = FailingAccessor({DAY: field})
        assert fetch_with_timeout(accessor, DAY, 5.0) is field

    def test_timeout(self):
        accessor = SlowAccessor({DAY: make_surface_field()}, slow_dates=[DAY], delay=5.0)
        try:
            with pytest.raises(DataUnavailable, match="timed out"):
                fetch_with_timeout(accessor, DAY, 0.05)
        finally:
            accessor.release.set()

    def test_day_failure_passes_through(self):
        error = FitFailure("bad day")
        accessor = FailingAccessor({DAY: make_surface_field()}, fail_dates=[DAY], error=error)
        with pytest.raises(FitFailure) as info:
            fetch_with_timeout(accessor, DAY, 5.0)
        assert info.value is error

    def test_other_errors_wrapped(self):
        accessor = FailingAccessor({DAY: make_surface_field()}, fail_dates=[DAY],
                                   error=OSError("disk gone"))
        with pytest.raises(DataUnavailable, match="disk gone") as info:
            fetch_with_timeout(accessor, DAY, 5.0)
        assert isinstance(info.value.__cause__, OSError)
