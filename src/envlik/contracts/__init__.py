"""Pipeline contracts and failure kinds.

Contracts fail immediately and loudly when a run cannot produce a
well-formed output. Per-day failures are a separate family that the
orchestrator degrades to all-zero slots.

Key principle:
- Pydantic validates config correctness
- Contracts validate run correctness
- DayFailure covers recoverable, day-local data problems
"""

from envlik.contracts.failure import (
    ContractViolation,
    FailurePolicy,
    DayFailure,
    DataUnavailable,
    FitFailure,
    DimensionMismatch,
)
from envlik.contracts.base import require
from envlik.contracts.dates import assert_master_dates
from envlik.contracts.grid import (
    assert_grid_field,
    assert_likelihood_grid,
    assert_output_stack,
)

__all__ = [
    "ContractViolation",
    "FailurePolicy",
    "DayFailure",
    "DataUnavailable",
    "FitFailure",
    "DimensionMismatch",
    "require",
    "assert_master_dates",
    "assert_grid_field",
    "assert_likelihood_grid",
    "assert_output_stack",
]
