"""Master date vector contract.

The master date vector defines the output stack length and slot order, so
it must be non-empty, strictly ascending and free of duplicates.
"""

import numpy as np
import pandas as pd

from envlik.contracts.base import require


def assert_master_dates(dates: pd.DatetimeIndex) -> None:
    """Enforce the master date vector contract.

    Parameters
    ----------
    dates : pd.DatetimeIndex
        Normalized (midnight) dates supplied by the caller.

    Raises
    ------
    ContractViolation
        If the vector is empty, unsorted or contains duplicates.
    """
    require(
        len(dates) > 0,
        "Date contract violated: master date vector is empty"
    )
    require(
        not dates.hasnans,
        "Date contract violated: master date vector contains NaT"
    )
    steps = np.diff(dates.values.astype("datetime64[ns]").astype(np.int64))
    require(
        bool(np.all(steps > 0)),
        "Date contract violated: master date vector must be strictly ascending and unique"
    )
