"""Run-wide grid geometry.

The output spatial shape, coarsening factor and neighbourhood window are
fixed once, before any day is processed, either from an explicit
``GridGeometry`` or by probing one reference grid. Every day's grid is
then coarsened by the same factor and checked against the fixed shape.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, TYPE_CHECKING

import numpy as np
import pandas as pd
import xarray as xr

from envlik.contracts import (
    ContractViolation,
    DayFailure,
    DimensionMismatch,
    assert_grid_field,
    require,
)
from envlik.data.field import GridField
from envlik.likelihood.variability import window_size
from envlik.pipeline.pool import fetch_with_timeout

if TYPE_CHECKING:
    from envlik.schemas import InternalConfig

__all__ = ['GridGeometry', 'coarsen_factor', 'coarsen_field', 'check_structure', 'check_field',
           'prescan_geometry']

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GridGeometry:
    """Spatial layout shared by every slot of the output stack.

    Attributes
    ----------
    shape : tuple
        ``(n_lon, n_lat)`` after coarsening.
    lon, lat : np.ndarray
        Output axes after coarsening.
    depth : np.ndarray or None
        Reference depth levels (not coarsened).
    factor : int
        Block size applied to every fetched grid (1 = untouched).
    window : int
        Neighbourhood window edge length for the spatial standard deviation.
    """

    shape: tuple
    lon: np.ndarray
    lat: np.ndarray
    depth: Optional[np.ndarray]
    factor: int
    window: int


def _resolution(axis: np.ndarray) -> float:
    if len(axis) < 2:
        return float("nan")
    return float(np.abs(axis[1] - axis[0]))


def coarsen_factor(resolution: float, target: float) -> int:
    """Block size bringing ``resolution`` up to roughly ``target`` degrees."""
    if not np.isfinite(resolution) or resolution <= 0:
        return 1
    rounded = round(resolution, 2) or resolution
    if rounded >= target:
        return 1
    return max(int(round(target / rounded)), 1)


def coarsen_field(field: GridField, factor: int) -> GridField:
    """Block-average a field over ``factor x factor`` cells (NaN skipped).

    Incomplete blocks at the upper edges are trimmed.
    """
    if factor <= 1:
        return field

    dims = ["lon", "lat"] + (["depth"] if field.is_layered else [])
    coords = {"lon": field.lon, "lat": field.lat}
    if field.is_layered:
        coords["depth"] = field.depth
    da = xr.DataArray(field.values, dims=dims, coords=coords)
    coarse = da.coarsen(lon=factor, lat=factor, boundary="trim").mean(skipna=True)

    return GridField(
        values=coarse.values,
        lon=coarse["lon"].values,
        lat=coarse["lat"].values,
        depth=field.depth,
        date=field.date,
    )


def check_structure(field: GridField, layered: bool) -> None:
    """Raise DimensionMismatch if a fetched field is internally inconsistent.

    Covers axes that disagree with the value shape, a depth axis that does
    not match the third dimension, and 2-D values where layers are needed.
    """
    if layered and not field.is_layered:
        raise DimensionMismatch("Depth-layered field expected, got 2-D values")
    assert_grid_field(field, require_depth=layered, error=DimensionMismatch)


def check_field(field: GridField, geometry: GridGeometry, layered: bool) -> None:
    """Raise DimensionMismatch if a (coarsened) field does not fit the run."""
    check_structure(field, layered)
    if field.spatial_shape != tuple(geometry.shape):
        raise DimensionMismatch(
            f"Grid shape {field.spatial_shape} differs from run shape {tuple(geometry.shape)}"
        )


def prescan_geometry(accessor, probe_dates: Iterable[pd.Timestamp],
                     config: "InternalConfig") -> GridGeometry:
    """Fix the run geometry from the first reference grid that can be fetched.

    Parameters
    ----------
    accessor : ReferenceAccessor
        Reference data source.
    probe_dates : iterable of pd.Timestamp
        Candidate dates, tried in order. Dates whose fetch fails or whose
        grid is malformed are skipped.
    config : InternalConfig
        Uses ``grid``, ``window`` and ``workers.fetch_timeout_sec``.

    Raises
    ------
    ContractViolation
        If no probe date yields a grid (output shape cannot be determined).
    """
    layered = config.mode in ("profile", "ohc")
    for date in probe_dates:
        try:
            field = fetch_with_timeout(accessor, pd.Timestamp(date), config.workers.fetch_timeout_sec)
            check_structure(field, layered)
        except DayFailure as e:
            logger.warning("Pre-scan: %s unusable (%s), trying next date", pd.Timestamp(date).date(), e)
            continue

        resolution = _resolution(field.lon)
        factor = coarsen_factor(resolution, config.grid.target_resolution_deg) if config.grid.auto_coarsen else 1
        if factor > 1:
            logger.info("Reference grid resolution %.4f deg is finer than %.2f deg: coarsening by %d",
                        resolution, config.grid.target_resolution_deg, factor)
            field = coarsen_field(field, factor)

        if config.window.size is not None:
            window = config.window.size
        else:
            require(np.isfinite(resolution), "Grid contract violated: cannot infer resolution from a single-cell axis")
            window = window_size(resolution * factor, config.window.extent_deg, config.window.min_size)

        geometry = GridGeometry(
            shape=field.spatial_shape,
            lon=field.lon,
            lat=field.lat,
            depth=field.depth,
            factor=factor,
            window=window,
        )
        logger.info("Pre-scan from %s: shape=%s, factor=%d, window=%d",
                    pd.Timestamp(date).date(), geometry.shape, factor, window)
        return geometry

    raise ContractViolation("Output shape cannot be determined: no reference grid could be fetched")
