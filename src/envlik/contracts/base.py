"""Base contract enforcement utilities.

The require() function is the single enforcement mechanism for all contracts.
Run-level invariants raise ContractViolation; the same checks applied to one
day's fetched data raise a DayFailure subclass instead, so the day degrades
to an empty slot rather than aborting the run.
"""

from typing import Type

from envlik.contracts.failure import ContractViolation


def require(condition: bool, message: str,
            error: Type[Exception] = ContractViolation) -> None:
    """Enforce a pipeline contract.

    Called at stage boundaries to verify the preceding stage produced the
    guaranteed invariants.

    Parameters
    ----------
    condition : bool
        The invariant that must be true.

    message : str
        Error message explaining the contract violation.

    error : type, optional
        Exception class raised when ``condition`` is False. Defaults to
        ContractViolation; per-day checks pass DimensionMismatch.

    Raises
    ------
    ContractViolation
        If condition is False (or ``error`` when given).

    Examples
    --------
    >>> require(len(dates) > 0, "Date contract violated: master date vector is empty")
    >>> require(field.depth is not None, "depth axis missing", error=DimensionMismatch)
    """
    if not condition:
        raise error(message)
