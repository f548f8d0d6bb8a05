"""Daily depth profile reconstruction.

Tag depth/temperature samples for one day are sparse and irregular. Two
local polynomial regressions (``min_value ~ depth`` and ``max_value ~
depth``) are evaluated at the reference depth levels nearest to the
samples, and each estimate is widened by ``se * sqrt(n)`` where ``n`` is the
number of levels used that day.
"""

import logging
from dataclasses import dataclass
from typing import Tuple

import numpy as np
import pandas as pd

from envlik.contracts import FitFailure

__all__ = ['ProfileBounds', 'snap_to_levels', 'local_regression', 'reconstruct_profile']

logger = logging.getLogger(__name__)


@dataclass
class ProfileBounds:
    """Low/high temperature bounds at the reference levels used for one day.

    Attributes
    ----------
    level_index : np.ndarray
        Indices into the reference depth axis, ascending and unique.
    depth : np.ndarray
        Reference depths at ``level_index``.
    low, high : np.ndarray
        Bounds at each depth.
    """

    level_index: np.ndarray
    depth: np.ndarray
    low: np.ndarray
    high: np.ndarray

    def __len__(self) -> int:
        return len(self.level_index)


def snap_to_levels(sample_depths: np.ndarray, levels: np.ndarray) -> np.ndarray:
    """Unique indices of the reference levels nearest to each sample depth."""
    sample_depths = np.asarray(sample_depths, dtype=np.float64)
    sample_depths = sample_depths[np.isfinite(sample_depths)]
    levels = np.asarray(levels, dtype=np.float64)
    if sample_depths.size == 0 or levels.size == 0:
        return np.array([], dtype=int)
    nearest = np.argmin((sample_depths[:, None] - levels[None, :]) ** 2, axis=1)
    return np.unique(nearest)


def _tricube(u: np.ndarray) -> np.ndarray:
    u = np.clip(np.abs(u), 0.0, 1.0)
    return (1.0 - u ** 3) ** 3


def _smoother_rows(x: np.ndarray, at: np.ndarray, span: float, degree: int) -> np.ndarray:
    """Rows of the local polynomial smoother matrix evaluated at ``at``.

    Row ``j`` holds the weights ``l_j`` such that the fit at ``at[j]`` is
    ``l_j @ y``.
    """
    n = len(x)
    distinct = np.unique(x)
    k = min(n, max(int(np.floor(span * n)), degree + 1))

    rows = np.empty((len(at), n))
    for j, x0 in enumerate(at):
        dist = np.abs(x - x0)
        h = np.sort(dist)[k - 1]
        # bandwidth must cover degree + 1 distinct depths for a solvable fit
        h_min = np.sort(np.abs(distinct - x0))[degree]
        h = max(h, h_min) * (1.0 + 1e-6) + 1e-12
        weights = _tricube(dist / h)

        design = np.vander(x - x0, degree + 1, increasing=True)
        xtw = design.T * weights
        rows[j] = np.linalg.pinv(xtw @ design)[0] @ xtw
    return rows


def local_regression(x, y, at, span: float = 0.7, degree: int = 2) -> Tuple[np.ndarray, np.ndarray]:
    """Local polynomial regression with pointwise standard errors.

    Tricube-weighted least squares on the ``span`` fraction of nearest
    samples, in the manner of loess/locfit. The residual variance uses the
    ``n - 2*tr(L) + tr(L'L)`` degrees of freedom of the smoother matrix.

    Parameters
    ----------
    x, y : array_like
        Sample predictors and responses (non-finite pairs are dropped).
    at : array_like
        Points at which to evaluate the fit.
    span : float
        Fraction of samples in each local neighbourhood.
    degree : int
        Local polynomial degree; reduced when fewer distinct ``x`` exist.

    Returns
    -------
    fit, se : np.ndarray
        Fitted values and their standard errors at ``at``.

    Raises
    ------
    FitFailure
        If fewer than two distinct ``x`` values are available.
    """
    x = np.asarray(x, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)
    at = np.atleast_1d(np.asarray(at, dtype=np.float64))

    ok = np.isfinite(x) & np.isfinite(y)
    x, y = x[ok], y[ok]
    n_distinct = len(np.unique(x))
    if n_distinct < 2:
        raise FitFailure(f"Need at least 2 distinct depths, got {n_distinct}")
    degree = min(degree, n_distinct - 1)

    rows = _smoother_rows(x, at, span, degree)
    fit = rows @ y

    hat = _smoother_rows(x, x, span, degree)
    resid = y - hat @ y
    rss = float(resid @ resid)
    n = len(x)
    nu1 = float(np.trace(hat))
    nu2 = float(np.sum(hat * hat))
    dof = n - 2.0 * nu1 + nu2
    if rss <= 0.0:
        sigma2 = 0.0
    elif dof > 0:
        sigma2 = rss / dof
    else:
        sigma2 = rss / n

    se = np.sqrt(sigma2) * np.sqrt(np.sum(rows * rows, axis=1))
    if not (np.all(np.isfinite(fit)) and np.all(np.isfinite(se))):
        raise FitFailure("Local regression produced non-finite estimates")
    return fit, se


def reconstruct_profile(samples: pd.DataFrame, levels: np.ndarray,
                        span: float = 0.7, degree: int = 2) -> ProfileBounds:
    """Reconstruct one day's temperature bounds at reference depth levels.

    Parameters
    ----------
    samples : pd.DataFrame
        One day's samples with ``depth``, ``min_value`` and ``max_value``.
    levels : np.ndarray
        Depth axis of the reference grid.
    span, degree : float, int
        Local regression settings.

    Returns
    -------
    ProfileBounds

    Raises
    ------
    FitFailure
        If the day has no usable depth samples or either regression fails.
    """
    samples = samples[np.isfinite(samples["depth"].to_numpy(dtype=float))]
    depth = np.clip(samples["depth"].to_numpy(dtype=float), 0.0, None)

    level_index = snap_to_levels(depth, levels)
    if level_index.size == 0:
        raise FitFailure("No depth samples to reconstruct a profile from")
    level_depth = np.asarray(levels, dtype=np.float64)[level_index]

    fit_low, se_low = local_regression(depth, samples["min_value"].to_numpy(dtype=float),
                                       level_depth, span, degree)
    fit_high, se_high = local_regression(depth, samples["max_value"].to_numpy(dtype=float),
                                         level_depth, span, degree)

    widen = np.sqrt(len(level_index))
    bounds = ProfileBounds(
        level_index=level_index,
        depth=level_depth,
        low=fit_low - se_low * widen,
        high=fit_high + se_high * widen,
    )
    logger.debug("Profile: %d levels, depths=%s", len(bounds), level_depth.tolist())
    return bounds
