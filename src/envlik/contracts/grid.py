"""Grid stage contracts.

Enforce the structural guarantees of reference fields entering the day
pipeline and of the likelihood grids and stack leaving it.
"""

from typing import Type

import numpy as np

from envlik.contracts.base import require
from envlik.contracts.failure import ContractViolation


def assert_grid_field(field, require_depth: bool = False,
                      error: Type[Exception] = ContractViolation) -> None:
    """Enforce the reference field contract.

    Parameters
    ----------
    field : GridField
        Field returned by a reference accessor (after coarsening).

    require_depth : bool, optional
        If True the field must be depth-layered (profile and OHC modes).

    error : type, optional
        Exception raised on violation. The day pipeline and the pre-scan
        pass DimensionMismatch so one malformed day does not end the run.

    Raises
    ------
    ContractViolation
        If axes and values disagree or the dimensionality is wrong.
    """
    values = field.values
    require(
        values.ndim in (2, 3),
        f"Grid contract violated: values have {values.ndim} dims, expected 2 or 3",
        error,
    )
    require(
        values.shape[0] == len(field.lon) and values.shape[1] == len(field.lat),
        f"Grid contract violated: values shape {values.shape[:2]} does not match "
        f"axes ({len(field.lon)}, {len(field.lat)})",
        error,
    )
    if require_depth:
        require(
            values.ndim == 3 and field.depth is not None,
            "Grid contract violated: depth-layered field required for this mode",
            error,
        )
    if values.ndim == 3:
        require(
            field.depth is not None and values.shape[2] == len(field.depth),
            "Grid contract violated: depth axis does not match third dimension",
            error,
        )


def assert_likelihood_grid(grid: np.ndarray, shape: tuple) -> None:
    """Enforce the normalized daily likelihood contract.

    Parameters
    ----------
    grid : np.ndarray
        Normalized daily likelihood grid.

    shape : tuple
        Spatial shape fixed for the run.

    Raises
    ------
    ContractViolation
        If the shape is wrong or any value lies outside [0, 1].
    """
    require(
        grid.shape == tuple(shape),
        f"Likelihood contract violated: grid shape {grid.shape}, expected {tuple(shape)}"
    )
    require(
        bool(np.all(np.isfinite(grid))),
        "Likelihood contract violated: normalized grid contains non-finite values"
    )
    require(
        bool(np.all((grid >= 0.0) & (grid <= 1.0 + 1e-9))),
        "Likelihood contract violated: values outside [0, 1]"
    )


def assert_output_stack(stack: np.ndarray, shape: tuple, n_slots: int) -> None:
    """Enforce the output stack contract (fixed shape, one slot per date)."""
    require(
        stack.ndim == 3,
        f"Stack contract violated: stack has {stack.ndim} dims, expected 3"
    )
    require(
        stack.shape == (*tuple(shape), n_slots),
        f"Stack contract violated: stack shape {stack.shape}, expected {(*tuple(shape), n_slots)}"
    )
