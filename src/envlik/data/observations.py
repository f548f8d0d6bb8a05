"""Tag observation series.

A thin pandas wrapper around pre-parsed tag samples. Each sample is
``(timestamp, depth, min_value, max_value)``; depth is NaN for surface
(SST) readings. Samples are grouped by calendar day before use.
"""

import logging
from typing import Iterable, Optional

import numpy as np
import pandas as pd

__all__ = ['TagObservations']

logger = logging.getLogger(__name__)

COLUMNS = ["date", "depth", "min_value", "max_value"]


class TagObservations:
    """Ordered, read-only collection of tag samples.

    Parameters
    ----------
    frame : pd.DataFrame
        Columns ``timestamp``, ``depth``, ``min_value``, ``max_value``.
        A ``date`` column (timestamp floored to midnight) is derived.

    Examples
    --------
    >>> obs = TagObservations.from_records([
    ...     ("2024-06-01 10:00", 10.0, 18.2, 19.0),
    ...     ("2024-06-01 10:05", 50.0, 14.1, 15.3),
    ... ])
    >>> obs.days()
    DatetimeIndex(['2024-06-01'], dtype='datetime64[ns]', freq=None)
    """

    def __init__(self, frame: pd.DataFrame):
        df = frame.copy()
        df["timestamp"] = pd.to_datetime(df["timestamp"])
        df["date"] = df["timestamp"].dt.normalize()
        if "depth" not in df.columns:
            df["depth"] = np.nan
        df["depth"] = df["depth"].astype(float)
        df["min_value"] = df["min_value"].astype(float)
        df["max_value"] = df["max_value"].astype(float)
        self._df = df.sort_values("timestamp", kind="stable").reset_index(drop=True)

    @classmethod
    def from_records(cls, records: Iterable[tuple]) -> "TagObservations":
        """Build from ``(timestamp, depth, min_value, max_value)`` tuples."""
        df = pd.DataFrame(list(records), columns=["timestamp", "depth", "min_value", "max_value"])
        return cls(df)

    @classmethod
    def from_frame(cls, df: pd.DataFrame, timestamp: str = "Date", depth: Optional[str] = "Depth",
                   min_value: str = "MinTemp", max_value: str = "MaxTemp") -> "TagObservations":
        """Build from a frame with arbitrary column names.

        Defaults match the usual PDT (profile) export columns. For SST
        exports with a single ``Temperature`` column pass it as both
        ``min_value`` and ``max_value`` and ``depth=None``.
        """
        out = pd.DataFrame({
            "timestamp": df[timestamp],
            "depth": df[depth] if depth is not None else np.nan,
            "min_value": df[min_value],
            "max_value": df[max_value],
        })
        return cls(out)

    @property
    def frame(self) -> pd.DataFrame:
        return self._df

    def __len__(self) -> int:
        return len(self._df)

    def days(self) -> pd.DatetimeIndex:
        """Unique calendar days with at least one sample, ascending."""
        return pd.DatetimeIndex(self._df["date"].unique()).sort_values()

    def truncate(self, last_date: pd.Timestamp) -> "TagObservations":
        """Drop samples whose calendar day is after ``last_date``."""
        keep = self._df["date"] <= pd.Timestamp(last_date).normalize()
        return TagObservations(self._df.loc[keep, ["timestamp", "depth", "min_value", "max_value"]])

    def for_day(self, day: pd.Timestamp) -> pd.DataFrame:
        """Samples recorded on one calendar day."""
        return self._df.loc[self._df["date"] == pd.Timestamp(day).normalize(), COLUMNS]

    def daily_extremes(self) -> pd.DataFrame:
        """Per-day minimum of ``min_value`` and maximum of ``max_value``.

        Used in SST mode, where the tag's surface readings for one day are
        collapsed into a single plausible interval.
        """
        grouped = self._df.groupby("date", sort=True)
        return pd.DataFrame({
            "min_value": grouped["min_value"].min(),
            "max_value": grouped["max_value"].max(),
        })
