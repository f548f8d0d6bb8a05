"""Tests for the tag observation wrapper."""

import numpy as np
import pandas as pd
import pytest

from envlik.data import TagObservations

pytestmark = pytest.mark.unit


@pytest.fixture
def obs():
    return TagObservations.from_records([
        ("2024-06-02 03:00", 50.0, 14.0, 15.0),
        ("2024-06-01 10:00", 10.0, 18.2, 19.0),
        ("2024-06-01 10:05", 50.0, 14.1, 15.3),
        ("2024-06-04 23:59", 100.0, 12.0, 12.5),
    ])


def test_samples_sorted_and_dated(obs):
    frame = obs.frame
    assert list(frame["timestamp"]) == sorted(frame["timestamp"])
    assert frame["date"].iloc[0] == pd.Timestamp("2024-06-01")
    assert len(obs) == 4


def test_days_are_unique_and_ascending(obs):
    assert list(obs.days()) == [
        pd.Timestamp("2024-06-01"), pd.Timestamp("2024-06-02"), pd.Timestamp("2024-06-04")
    ]


def test_for_day_selects_one_calendar_day(obs):
    day = obs.for_day("2024-06-01")
    assert len(day) == 2
    assert list(day.columns) == ["date", "depth", "min_value", "max_value"]
    assert day["depth"].tolist() == [10.0, 50.0]


def test_for_day_without_samples_is_empty(obs):
    assert obs.for_day("2024-06-03").empty


def test_truncate_drops_later_days(obs):
    kept = obs.truncate(pd.Timestamp("2024-06-02 12:00"))
    assert len(kept) == 3
    assert kept.days()[-1] == pd.Timestamp("2024-06-02")


def test_daily_extremes(obs):
    extremes = obs.daily_extremes()
    assert extremes.loc[pd.Timestamp("2024-06-01"), "min_value"] == 14.1
    assert extremes.loc[pd.Timestamp("2024-06-01"), "max_value"] == 19.0


def test_from_frame_with_sst_columns():
    raw = pd.DataFrame({
        "Date": ["2024-06-01 01:00", "2024-06-01 05:00"],
        "Temperature": [20.5, 21.0],
    })
    obs = TagObservations.from_frame(raw, depth=None, min_value="Temperature",
                                     max_value="Temperature")

    assert np.isnan(obs.frame["depth"]).all()
    assert obs.frame["min_value"].tolist() == [20.5, 21.0]


def test_from_frame_with_profile_columns():
    raw = pd.DataFrame({
        "Date": ["2024-06-01 01:00"],
        "Depth": [24],
        "MinTemp": [17],
        "MaxTemp": [18],
    })
    obs = TagObservations.from_frame(raw)
    assert obs.frame["depth"].dtype == np.float64
    assert obs.frame["max_value"].iloc[0] == 18.0
