"""Run output: likelihood stack plus per-day status log."""

from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np
import pandas as pd
import xarray as xr

__all__ = ['DayStatus', 'LikelihoodResult']

STATUS_OK = "ok"
STATUS_EMPTY = "empty"        # computed, but no positive finite likelihood
STATUS_FAILED = "failed"
STATUS_DROPPED = "dropped"    # observed day outside the master date vector


@dataclass
class DayStatus:
    """One line of the per-day status log."""
    date: pd.Timestamp
    slot: Optional[int]
    status: str
    reason: Optional[str] = None
    elapsed: float = 0.0


@dataclass
class LikelihoodResult:
    """Time-ordered likelihood stack and everything needed to georeference it.

    Attributes
    ----------
    stack : np.ndarray
        ``(lon, lat, slot)`` array, one slot per entry of ``dates``.
    dates : pd.DatetimeIndex
        Truncated master date vector.
    lon, lat : np.ndarray
        Output axes (after any coarsening).
    statuses : list of DayStatus
        Per-day diagnostics for processing and dropped days.
    """

    stack: np.ndarray
    dates: pd.DatetimeIndex
    lon: np.ndarray
    lat: np.ndarray
    statuses: List[DayStatus] = field(default_factory=list)

    def status_frame(self) -> pd.DataFrame:
        """Per-day status log as a DataFrame indexed by date."""
        rows = [
            {"date": s.date, "slot": s.slot, "status": s.status,
             "reason": s.reason, "elapsed_sec": round(s.elapsed, 3)}
            for s in self.statuses
        ]
        df = pd.DataFrame(rows, columns=["date", "slot", "status", "reason", "elapsed_sec"])
        return df.set_index("date").sort_index()

    def to_dataarray(self, name: str = "likelihood") -> xr.DataArray:
        """Stack as a labelled ``(lon, lat, date)`` DataArray (no CRS attached)."""
        return xr.DataArray(
            self.stack,
            dims=("lon", "lat", "date"),
            coords={"lon": self.lon, "lat": self.lat, "date": self.dates},
            name=name,
        )
