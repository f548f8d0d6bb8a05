"""Probabilistic interval matching.

``match_likelihood`` is the single numeric primitive shared by every mode
and every worker. It is a pure function of its inputs: no configuration,
no logging, no state.
"""

import numpy as np
from scipy.stats import norm

__all__ = ['match_likelihood']


def match_likelihood(w, wsd, min_t: float, max_t: float) -> np.ndarray:
    """Likelihood that grid values match a tag-observed interval.

    The tag measurement is modelled as a Gaussian with mean
    ``(min_t + max_t) / 2`` and standard deviation ``(max_t - min_t) / 2``.
    For each cell the density is integrated over ``[w - wsd, w + wsd]``.
    Cells whose value is missing or outside ``[min_t, max_t]`` get exactly 0.

    Parameters
    ----------
    w : array_like
        Reference grid values (any shape). NaN marks missing cells.
    wsd : array_like
        Local uncertainty of ``w`` (same shape, or broadcastable). NaN is
        treated as 0.
    min_t, max_t : float
        Plausible interval derived from the tag observation.

    Returns
    -------
    np.ndarray
        Same shape as ``w``, values in [0, 1].

    Notes
    -----
    - Where ``wsd == 0`` (including NaN) the window has no width and holds
      no probability mass: the cell scores 0.
    - A zero-width tag interval (``min_t == max_t``) gives 1 to cells equal
      to it and 0 elsewhere.

    Examples
    --------
    >>> float(match_likelihood(10.0, 0.5, 9.0, 11.0)) > 0
    True
    >>> float(match_likelihood(15.0, 0.5, 9.0, 11.0))
    0.0
    """
    w = np.asarray(w, dtype=np.float64)
    wsd = np.broadcast_to(np.nan_to_num(np.asarray(wsd, dtype=np.float64), nan=0.0), w.shape)

    out = np.zeros(w.shape, dtype=np.float64)
    with np.errstate(invalid="ignore"):
        inside = np.isfinite(w) & (w >= min_t) & (w <= max_t)
    if not np.any(inside):
        return out

    mid = (min_t + max_t) / 2.0
    spread = (max_t - min_t) / 4.0
    scale = 2.0 * spread
    if scale <= 0:
        out[inside] = 1.0
        return out

    wi = w[inside]
    si = np.abs(wsd[inside])
    mass = norm.cdf(wi + si, loc=mid, scale=scale) - norm.cdf(wi - si, loc=mid, scale=scale)

    out[inside] = np.clip(mass, 0.0, 1.0)
    return out
