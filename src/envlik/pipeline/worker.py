"""Per-day likelihood computation.

A DayWorker turns one processing day into one combined (not yet
normalized) likelihood grid. Workers share no mutable state: the config,
geometry, accessor and optional mask are read-only, so a single instance
serves every thread of the pool.
"""

import logging
import time
from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING

import numpy as np
import pandas as pd

from envlik.contracts import ContractViolation, DayFailure, DataUnavailable
from envlik.likelihood.combiner import (
    HeatContentParams,
    apply_mask,
    bathymetry_mask,
    combine_heat_content,
    combine_profile,
    combine_surface,
    sensor_interval,
)
from envlik.likelihood.profile import reconstruct_profile
from envlik.pipeline.geometry import GridGeometry, check_field, check_structure, coarsen_field
from envlik.pipeline.pool import fetch_with_timeout

if TYPE_CHECKING:
    from envlik.schemas import InternalConfig

__all__ = ['DayOutcome', 'DayWorker']

logger = logging.getLogger(__name__)


@dataclass
class DayOutcome:
    """Result of one day's task.

    ``grid`` is None when the day failed; ``error`` then holds the exception.
    """

    day: pd.Timestamp
    slot: int
    grid: Optional[np.ndarray] = None
    error: Optional[Exception] = None
    elapsed: float = 0.0

    @property
    def ok(self) -> bool:
        return self.error is None


class DayWorker:
    """Compute one day's combined likelihood grid.

    Pipeline per day:

    1. Fetch the reference grid (bounded by ``fetch_timeout_sec``)
    2. Check the grid structure, coarsen by the run factor and check it
       against the run geometry
    3. Apply the caller mask (and, in OHC mode, the bathymetry mask)
    4. Mode-specific match:
       - ``sst``: daily [min, max] widened by sensor error vs. the surface layer
       - ``profile``: reconstructed profile bounds vs. each matched layer, product
       - ``ohc``: heat content interval vs. heat content grid, bias applied

    Parameters
    ----------
    config : InternalConfig
        Fully validated runtime configuration.
    geometry : GridGeometry
        Run-wide geometry fixed before any day runs.
    accessor : ReferenceAccessor
        Read-only reference data source.
    mask : np.ndarray, optional
        2-D mask over the output grid; cells where it is 0/False/NaN are
        excluded at every depth.
    """

    def __init__(self, config: "InternalConfig", geometry: GridGeometry, accessor,
                 mask: Optional[np.ndarray] = None):
        self.config = config
        self.geometry = geometry
        self.accessor = accessor
        self.mask = mask
        self.mode = config.mode
        self.layered = config.mode in ("profile", "ohc")
        self.heat_params = HeatContentParams(
            heat_capacity=config.heat_content.heat_capacity,
            density=config.heat_content.density,
            scale=config.heat_content.scale,
            bias=config.heat_content.bias,
        )

        if mask is not None and np.shape(mask) != tuple(geometry.shape):
            raise ContractViolation(
                f"Mask shape {np.shape(mask)} differs from run shape {tuple(geometry.shape)}"
            )

    def process(self, day: pd.Timestamp, slot: int, samples: pd.DataFrame) -> DayOutcome:
        """Run the full day pipeline, converting day-local failures to an outcome.

        ContractViolation is not caught: it signals a bug, not bad data.
        """
        start = time.time()
        outcome = DayOutcome(day=day, slot=slot)
        try:
            outcome.grid = self.compute(day, samples)
        except ContractViolation:
            raise
        except DayFailure as e:
            logger.warning("Day %s failed (%s): %s", day.date(), type(e).__name__, e)
            outcome.error = e
        except Exception as e:
            logger.exception("Unexpected error processing %s", day.date())
            outcome.error = e
        outcome.elapsed = time.time() - start
        return outcome

    def compute(self, day: pd.Timestamp, samples: pd.DataFrame) -> np.ndarray:
        """Combined likelihood grid for one day; raises DayFailure on bad data."""
        if samples.empty:
            raise DataUnavailable(f"No tag samples for {day.date()}")

        field = fetch_with_timeout(self.accessor, day, self.config.workers.fetch_timeout_sec)
        check_structure(field, self.layered)
        field = coarsen_field(field, self.geometry.factor)
        check_field(field, self.geometry, self.layered)
        values = apply_mask(field.values, self.mask)
        window = self.geometry.window

        if self.mode == "sst":
            surface = values[:, :, 0] if values.ndim == 3 else values
            interval = sensor_interval(float(samples["min_value"].min()),
                                       float(samples["max_value"].max()),
                                       self.config.sensor.error_pct)
            logger.debug("%s SST interval: (%.3f, %.3f)", day.date(), *interval)
            return combine_surface(surface, interval, window)

        bounds = reconstruct_profile(samples, field.depth,
                                     span=self.config.profile.span,
                                     degree=self.config.profile.degree)

        if self.mode == "profile":
            return combine_profile(values, bounds, window)

        if self.config.heat_content.bathymetry_mask:
            values = apply_mask(values, bathymetry_mask(values, bounds.level_index))
        return combine_heat_content(values, bounds, window, self.heat_params,
                                    isotherm=self.config.heat_content.isotherm)
