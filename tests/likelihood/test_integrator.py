"""Tests for the interval-matching likelihood primitive."""

import numpy as np
import pytest
from scipy.stats import norm

from envlik.likelihood import match_likelihood
from envlik.likelihood.normalize import normalize_day

pytestmark = pytest.mark.unit


def test_value_inside_interval_is_positive():
    out = match_likelihood(10.0, 0.5, 9.0, 11.0)

    expected = norm.cdf(10.5, 10.0, 1.0) - norm.cdf(9.5, 10.0, 1.0)
    assert float(out) > 0
    assert float(out) == pytest.approx(expected)


def test_value_outside_interval_is_zero():
    assert float(match_likelihood(15.0, 0.5, 9.0, 11.0)) == 0.0


def test_uniform_layer_normalizes_to_ones():
    w = np.full((3, 3), 10.0)
    wsd = np.full((3, 3), np.sqrt(0.2))

    raw = match_likelihood(w, wsd, 9.0, 11.0)

    assert raw.shape == (3, 3)
    assert np.all(raw > 0)
    assert np.allclose(raw, raw[0, 0])
    np.testing.assert_array_equal(normalize_day(raw), np.ones((3, 3)))


def test_interval_edges_are_inclusive():
    out = match_likelihood(np.array([9.0, 11.0, 8.999]), 0.1, 9.0, 11.0)
    assert out[0] > 0 and out[1] > 0
    assert out[2] == 0.0


def test_missing_cells_are_zero():
    out = match_likelihood(np.array([np.nan, 10.0]), np.array([0.3, 0.3]), 9.0, 11.0)
    assert out[0] == 0.0
    assert out[1] > 0


def test_zero_sd_window_holds_no_mass():
    out = match_likelihood(np.array([10.0, 10.5]), np.array([0.0, np.nan]), 9.0, 11.0)
    np.testing.assert_array_equal(out, [0.0, 0.0])


def test_zero_sd_never_outranks_window_with_mass():
    out = match_likelihood(np.array([10.0, 10.5]), np.array([0.05, 0.0]), 9.0, 11.0)
    assert out[0] > out[1]


def test_zero_width_interval():
    out = match_likelihood(np.array([20.0, 20.1]), 0.2, 20.0, 20.0)
    np.testing.assert_array_equal(out, [1.0, 0.0])


def test_closer_to_midpoint_scores_higher():
    out = match_likelihood(np.array([10.0, 10.8]), 0.2, 9.0, 11.0)
    assert out[0] > out[1] > 0


def test_values_bounded():
    rng = np.random.default_rng(3)
    w = rng.uniform(5, 15, size=(20, 20))
    wsd = rng.uniform(0, 5, size=(20, 20))
    out = match_likelihood(w, wsd, 9.0, 11.0)
    assert out.min() >= 0.0
    assert out.max() <= 1.0
