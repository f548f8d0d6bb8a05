"""Reference grid field container."""

from dataclasses import dataclass
from typing import Optional

import numpy as np
import pandas as pd

__all__ = ['GridField']


@dataclass
class GridField:
    """Environmental values for one date over a fixed spatial domain.

    Attributes
    ----------
    values : np.ndarray
        Shape ``(lon, lat)`` for surface products or ``(lon, lat, depth)``
        for depth-layered reanalysis products. Missing cells are NaN.
    lon, lat : np.ndarray
        1-D coordinate axes matching the first two dimensions.
    depth : np.ndarray, optional
        Depth levels (positive down, metres) matching the third dimension.
    date : pd.Timestamp, optional
        Calendar date the field describes.
    """

    values: np.ndarray
    lon: np.ndarray
    lat: np.ndarray
    depth: Optional[np.ndarray] = None
    date: Optional[pd.Timestamp] = None

    def __post_init__(self):
        self.values = np.asarray(self.values, dtype=np.float64)
        self.lon = np.asarray(self.lon, dtype=np.float64)
        self.lat = np.asarray(self.lat, dtype=np.float64)
        if self.depth is not None:
            self.depth = np.asarray(self.depth, dtype=np.float64)

    @property
    def spatial_shape(self) -> tuple:
        return tuple(self.values.shape[:2])

    @property
    def is_layered(self) -> bool:
        return self.values.ndim == 3
