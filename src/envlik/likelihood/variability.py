"""Spatial variability of reference fields.

Local spatial noise is estimated as the sample standard deviation of the
defined cells inside a square window centered on each cell. Windows are
truncated at the grid edges and missing cells are left out of the count.
"""

import logging

import numpy as np
from scipy.ndimage import uniform_filter

__all__ = ['window_size', 'focal_sd', 'focal_sd_layers']

logger = logging.getLogger(__name__)


def window_size(resolution_deg: float, extent_deg: float = 0.25, min_size: int = 3) -> int:
    """Odd window edge length covering roughly ``extent_deg``.

    >>> window_size(0.08)
    3
    >>> window_size(0.01)
    25
    """
    size = int(round(extent_deg / resolution_deg))
    if size % 2 == 0:
        size -= 1
    return max(size, min_size)


def focal_sd(layer: np.ndarray, size: int) -> np.ndarray:
    """Neighbourhood standard deviation of a 2-D layer.

    Parameters
    ----------
    layer : np.ndarray
        2-D values, NaN for missing cells.
    size : int
        Window edge length (odd).

    Returns
    -------
    np.ndarray
        Same shape as ``layer``. Cells whose window holds fewer than two
        defined values are NaN.
    """
    layer = np.asarray(layer, dtype=np.float64)
    valid = np.isfinite(layer)
    if not valid.any():
        return np.full(layer.shape, np.nan)

    # center first: keeps the sum-of-squares form well conditioned
    centered = np.where(valid, layer - layer[valid].mean(), 0.0)
    area = float(size * size)

    count = np.rint(uniform_filter(valid.astype(np.float64), size=size, mode="constant", cval=0.0) * area)
    s1 = uniform_filter(centered, size=size, mode="constant", cval=0.0) * area
    s2 = uniform_filter(centered * centered, size=size, mode="constant", cval=0.0) * area

    out = np.full(layer.shape, np.nan)
    enough = count >= 2
    n = count[enough]
    var = (s2[enough] - s1[enough] ** 2 / n) / (n - 1)
    out[enough] = np.sqrt(np.clip(var, 0.0, None))
    return out


def focal_sd_layers(values: np.ndarray, size: int) -> np.ndarray:
    """Apply ``focal_sd`` to a 2-D grid or to each layer of a 3-D stack."""
    values = np.asarray(values, dtype=np.float64)
    if values.ndim == 2:
        return focal_sd(values, size)
    out = np.empty_like(values)
    for k in range(values.shape[2]):
        out[:, :, k] = focal_sd(values[:, :, k], size)
    return out
