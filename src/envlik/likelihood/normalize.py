"""Per-day normalization and assembly of the output stack."""

import logging
from typing import Mapping

import numpy as np

__all__ = ['normalize_day', 'assemble_stack']

logger = logging.getLogger(__name__)


def normalize_day(grid: np.ndarray) -> np.ndarray:
    """Scale a day's grid so its largest finite value is 1.

    NaN cells become 0. A grid without a positive finite maximum is
    returned as all-zero.
    """
    grid = np.asarray(grid, dtype=np.float64)
    finite = np.isfinite(grid)
    if not finite.any():
        return np.zeros(grid.shape)
    peak = grid[finite].max()
    if peak <= 0:
        return np.zeros(grid.shape)
    return np.where(finite, grid / peak, 0.0)


def assemble_stack(shape: tuple, n_slots: int, day_grids: Mapping[int, np.ndarray]) -> np.ndarray:
    """Scatter normalized day grids into a pre-allocated ``(lon, lat, slot)`` stack.

    Slots are filled in ascending slot order regardless of the order the
    grids were produced in; slots without a grid stay zero.
    """
    stack = np.zeros((*tuple(shape), n_slots), dtype=np.float64)
    for slot in sorted(day_grids):
        stack[:, :, slot] = day_grids[slot]
    logger.debug("Assembled %d/%d slots", len(day_grids), n_slots)
    return stack
