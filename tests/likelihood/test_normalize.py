"""Tests for per-day normalization and stack assembly."""

import numpy as np
import pytest

from envlik.likelihood import assemble_stack, normalize_day

pytestmark = pytest.mark.unit


def test_normalize_peak_is_one():
    out = normalize_day(np.array([[0.1, 0.4], [0.2, np.nan]]))
    assert out.max() == 1.0
    assert out[1, 1] == 0.0
    assert out[0, 0] == pytest.approx(0.25)


def test_normalize_all_zero_stays_zero():
    out = normalize_day(np.zeros((2, 3)))
    np.testing.assert_array_equal(out, np.zeros((2, 3)))


def test_normalize_all_missing_is_zero():
    out = normalize_day(np.full((2, 2), np.nan))
    np.testing.assert_array_equal(out, np.zeros((2, 2)))


def test_assemble_stack_places_by_slot():
    a = np.full((2, 2), 0.5)
    b = np.ones((2, 2))

    stack = assemble_stack((2, 2), 4, {3: b, 1: a})

    assert stack.shape == (2, 2, 4)
    np.testing.assert_array_equal(stack[:, :, 1], a)
    np.testing.assert_array_equal(stack[:, :, 3], b)
    assert not stack[:, :, 0].any()
    assert not stack[:, :, 2].any()


def test_assemble_stack_empty_mapping():
    stack = assemble_stack((3, 2), 2, {})
    assert stack.shape == (3, 2, 2)
    assert not stack.any()
