"""Tests for run contracts.

These tests verify that contracts are enforced at stage boundaries.
"""

import numpy as np
import pandas as pd
import pytest

from envlik.contracts import (
    ContractViolation,
    DataUnavailable,
    DayFailure,
    DimensionMismatch,
    FailurePolicy,
    FitFailure,
    assert_grid_field,
    assert_likelihood_grid,
    assert_master_dates,
    assert_output_stack,
    require,
)
from envlik.data import GridField

pytestmark = pytest.mark.unit


class TestRequire:

    def test_require_passes_on_true(self):
        require(True, "never raised")

    def test_require_raises_with_message(self):
        with pytest.raises(ContractViolation, match="broken invariant"):
            require(False, "broken invariant")

    def test_require_raises_given_error_class(self):
        with pytest.raises(DimensionMismatch, match="depth axis"):
            require(False, "depth axis missing", error=DimensionMismatch)


class TestFailureKinds:

    def test_day_failures_share_base(self):
        for cls in (DataUnavailable, FitFailure, DimensionMismatch):
            assert issubclass(cls, DayFailure)
            assert not issubclass(cls, ContractViolation)

    def test_policy_values(self):
        assert FailurePolicy("degrade") is FailurePolicy.DEGRADE
        assert FailurePolicy("fail_fast") is FailurePolicy.FAIL_FAST


class TestMasterDatesContract:

    def test_valid_dates_pass(self):
        assert_master_dates(pd.date_range("2024-06-01", periods=3))

    def test_empty_fails(self):
        with pytest.raises(ContractViolation, match="empty"):
            assert_master_dates(pd.DatetimeIndex([]))

    def test_unsorted_fails(self):
        dates = pd.DatetimeIndex(["2024-06-02", "2024-06-01"])
        with pytest.raises(ContractViolation, match="ascending"):
            assert_master_dates(dates)

    def test_duplicates_fail(self):
        dates = pd.DatetimeIndex(["2024-06-01", "2024-06-01", "2024-06-02"])
        with pytest.raises(ContractViolation, match="unique"):
            assert_master_dates(dates)


class TestGridFieldContract:

    def test_surface_field_passes(self):
        field = GridField(np.zeros((3, 2)), lon=[0, 1, 2], lat=[0, 1])
        assert_grid_field(field)

    def test_axis_mismatch_fails(self):
        field = GridField(np.zeros((3, 2)), lon=[0, 1], lat=[0, 1])
        with pytest.raises(ContractViolation, match="does not match"):
            assert_grid_field(field)

    def test_depth_required(self):
        field = GridField(np.zeros((3, 2)), lon=[0, 1, 2], lat=[0, 1])
        with pytest.raises(ContractViolation, match="depth-layered"):
            assert_grid_field(field, require_depth=True)

    def test_depth_axis_length_checked(self):
        field = GridField(np.zeros((3, 2, 4)), lon=[0, 1, 2], lat=[0, 1], depth=[0, 10])
        with pytest.raises(ContractViolation, match="depth axis"):
            assert_grid_field(field)

    def test_per_day_error_class(self):
        field = GridField(np.zeros((3, 2, 4)), lon=[0, 1, 2], lat=[0, 1], depth=[0, 10])
        with pytest.raises(DimensionMismatch, match="depth axis"):
            assert_grid_field(field, error=DimensionMismatch)


class TestLikelihoodContract:

    def test_normalized_grid_passes(self):
        assert_likelihood_grid(np.array([[0.0, 0.5], [1.0, 0.2]]), (2, 2))

    def test_wrong_shape_fails(self):
        with pytest.raises(ContractViolation, match="shape"):
            assert_likelihood_grid(np.zeros((2, 3)), (2, 2))

    def test_nan_fails(self):
        with pytest.raises(ContractViolation, match="non-finite"):
            assert_likelihood_grid(np.array([[np.nan, 1.0]]), (1, 2))

    def test_out_of_range_fails(self):
        with pytest.raises(ContractViolation, match=r"\[0, 1\]"):
            assert_likelihood_grid(np.array([[1.5, 0.0]]), (1, 2))


class TestStackContract:

    def test_stack_passes(self):
        assert_output_stack(np.zeros((4, 3, 5)), (4, 3), 5)

    def test_stack_wrong_slots(self):
        with pytest.raises(ContractViolation, match="stack shape"):
            assert_output_stack(np.zeros((4, 3, 5)), (4, 3), 6)
