"""Centralized failure policy and error kinds.

Two families of errors exist in ``envlik``:

- ``ContractViolation`` is fatal. It means the run cannot produce a
  well-formed output stack (no reference dates, bad master date vector,
  undeterminable grid shape) or that a stage broke its promised invariant.
- ``DayFailure`` subclasses are local to one processing day. Under the
  default policy the day is degraded to an all-zero slot and the batch
  continues.
"""

from enum import Enum


class FailurePolicy(str, Enum):
    """How per-day failures are treated by the orchestrator.

    DEGRADE (default): Log the failure, record it in the status log and
        leave the day's slot all-zero.
    FAIL_FAST: Re-raise the first per-day failure after the pool is torn down.
    """
    DEGRADE = "degrade"
    FAIL_FAST = "fail_fast"


class ContractViolation(RuntimeError):
    """Raised when a run-level invariant is violated.

    Key distinction:
    - ValueError / ValidationError: User/config error (handled by Pydantic)
    - ContractViolation: The run cannot proceed or a stage produced bad output
    - DayFailure: One day cannot be computed; the run goes on
    """
    pass


class DayFailure(Exception):
    """Base class for failures confined to a single processing day."""
    pass


class DataUnavailable(DayFailure):
    """No reference grid exists (or could be fetched in time) for a date."""
    pass


class FitFailure(DayFailure):
    """The depth profile regression could not be computed for a day."""
    pass


class DimensionMismatch(DayFailure):
    """A fetched grid disagrees with the spatial shape fixed for the run."""
    pass
