"""Combine per-layer matches into one daily likelihood grid.

Three mutually exclusive modes:

- surface (SST): one 2-D field against one widened interval
- profile: one match per matched depth layer, multiplied across layers
- heat content (OHC): tag and reference profiles are each reduced to a
  heat content above an isotherm, then matched once
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from envlik.likelihood.integrator import match_likelihood
from envlik.likelihood.profile import ProfileBounds
from envlik.likelihood.variability import focal_sd

__all__ = [
    'HeatContentParams',
    'sensor_interval',
    'apply_mask',
    'bathymetry_mask',
    'combine_surface',
    'combine_profile',
    'resolve_isotherm',
    'heat_content_interval',
    'heat_content_grid',
    'combine_heat_content',
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HeatContentParams:
    """Constants of the heat content reduction."""
    heat_capacity: float = 3.993
    density: float = 1025.0
    scale: float = 10000.0
    bias: float = 0.2

    @property
    def factor(self) -> float:
        return self.heat_capacity * self.density / self.scale


def sensor_interval(min_value: float, max_value: float, error_pct: float) -> Tuple[float, float]:
    """Widen a tag interval by the sensor error percentage."""
    return min_value * (1 - error_pct / 100.0), max_value * (1 + error_pct / 100.0)


def apply_mask(values: np.ndarray, mask: Optional[np.ndarray]) -> np.ndarray:
    """Set cells where ``mask`` is False or NaN to NaN across all depths.

    ``mask`` is 2-D over the spatial domain; truthy finite cells are kept.
    """
    if mask is None:
        return values
    mask = np.asarray(mask, dtype=np.float64)
    keep = np.isfinite(mask) & (mask != 0)
    out = np.array(values, dtype=np.float64, copy=True)
    if out.ndim == 3:
        out[~keep, :] = np.nan
    else:
        out[~keep] = np.nan
    return out


def bathymetry_mask(values: np.ndarray, level_index: np.ndarray) -> np.ndarray:
    """Cells defined at the deepest matched level.

    Cells that are undefined there (land, or shallower than the tag went)
    cannot have produced the observed profile.
    """
    return np.isfinite(values[:, :, int(np.max(level_index))])


def combine_surface(layer: np.ndarray, interval: Tuple[float, float], window: int) -> np.ndarray:
    """Match a single 2-D field against one interval."""
    sd = focal_sd(layer, window)
    return match_likelihood(layer, sd, interval[0], interval[1])


def combine_profile(values: np.ndarray, bounds: ProfileBounds, window: int) -> np.ndarray:
    """Product of per-layer matches over the day's matched depth levels.

    Parameters
    ----------
    values : np.ndarray
        Reference values ``(lon, lat, depth)``.
    bounds : ProfileBounds
        Reconstructed tag profile; ``bounds.level_index`` selects layers.
    window : int
        Neighbourhood window for the per-layer standard deviation.
    """
    combined = np.ones(values.shape[:2], dtype=np.float64)
    for b, level in enumerate(bounds.level_index):
        layer = values[:, :, level]
        lik = match_likelihood(layer, focal_sd(layer, window), bounds.low[b], bounds.high[b])
        combined *= lik
    return combined


def resolve_isotherm(bounds: ProfileBounds, isotherm: Optional[float]) -> float:
    """Configured isotherm, or the day's minimum low bound when unset."""
    if isotherm is not None:
        return float(isotherm)
    return float(np.nanmin(bounds.low))


def heat_content_interval(bounds: ProfileBounds, isotherm: float,
                          params: HeatContentParams) -> Tuple[float, float]:
    """Tag-side heat content interval above ``isotherm``."""
    low = params.factor * np.nansum(bounds.low - isotherm)
    high = params.factor * np.nansum(bounds.high - isotherm)
    return float(low), float(high)


def heat_content_grid(values: np.ndarray, level_index: np.ndarray, isotherm: float,
                      params: HeatContentParams) -> np.ndarray:
    """Reference-side heat content above ``isotherm`` per cell.

    Values colder than the isotherm are dropped, the isotherm is
    subtracted, and the remainder summed over the matched levels. Cells
    with no heat content are NaN.
    """
    layers = np.array(values[:, :, level_index], dtype=np.float64, copy=True)
    with np.errstate(invalid="ignore"):
        layers[layers < isotherm] = np.nan
    layers -= isotherm
    ohc = params.factor * np.nansum(layers, axis=2)
    ohc[ohc == 0] = np.nan
    return ohc


def combine_heat_content(values: np.ndarray, bounds: ProfileBounds, window: int,
                         params: HeatContentParams,
                         isotherm: Optional[float] = None) -> np.ndarray:
    """Heat content likelihood with the calibration bias applied.

    The raw match is scaled to its maximum, reduced by ``params.bias`` and
    clipped at zero. Final per-day normalization happens downstream.
    """
    iso = resolve_isotherm(bounds, isotherm)
    min_ohc, max_ohc = heat_content_interval(bounds, iso, params)
    ohc = heat_content_grid(values, bounds.level_index, iso, params)

    raw = match_likelihood(ohc, focal_sd(ohc, window), min_ohc, max_ohc)
    logger.debug("OHC: isotherm=%.3f, interval=(%.3f, %.3f)", iso, min_ohc, max_ohc)

    peak = np.nanmax(raw) if raw.size else 0.0
    if not np.isfinite(peak) or peak <= 0:
        return np.zeros_like(raw)
    return np.clip(raw / peak - params.bias, 0.0, None)
