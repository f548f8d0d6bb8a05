"""Temporal alignment of tag days, reference availability and master dates."""

import logging
from dataclasses import dataclass, field
from typing import Dict

import pandas as pd

from envlik.contracts import DataUnavailable, assert_master_dates, require
from envlik.data.observations import TagObservations

__all__ = ['Alignment', 'align_dates']

logger = logging.getLogger(__name__)


@dataclass
class Alignment:
    """Authoritative per-run date bookkeeping.

    Attributes
    ----------
    master_dates : pd.DatetimeIndex
        Master date vector truncated at the last available reference date.
        Its length is the number of output slots.
    observations : TagObservations
        Tag series truncated at the same bound.
    processing_days : pd.DatetimeIndex
        Days with at least one observation and an output slot, ascending.
    slots : dict
        Processing day -> index into ``master_dates``.
    dropped_days : pd.DatetimeIndex
        Observed days (within the bound) absent from the master vector.
    """

    master_dates: pd.DatetimeIndex
    observations: TagObservations
    processing_days: pd.DatetimeIndex
    slots: Dict[pd.Timestamp, int] = field(default_factory=dict)
    dropped_days: pd.DatetimeIndex = field(default_factory=lambda: pd.DatetimeIndex([]))


def align_dates(observations: TagObservations, master_dates, reference_dates) -> Alignment:
    """Reconcile tag days, master dates and reference availability.

    Parameters
    ----------
    observations : TagObservations
        Pre-parsed tag series.
    master_dates : sequence of date-like
        Complete, ascending, unique dates spanning the deployment.
    reference_dates : sequence of date-like
        Dates for which a reference grid exists.

    Returns
    -------
    Alignment

    Raises
    ------
    DataUnavailable
        If no reference dates exist at all.
    ContractViolation
        If the master date vector is empty or unsorted, before or after
        truncation.
    """
    master = pd.DatetimeIndex(pd.to_datetime(master_dates)).normalize()
    assert_master_dates(master)

    reference = pd.DatetimeIndex(pd.to_datetime(reference_dates)).normalize()
    if len(reference) == 0:
        raise DataUnavailable("No reference dates available")
    last = reference.max()

    truncated = master[master <= last]
    require(
        len(truncated) > 0,
        f"Date contract violated: no master dates on or before last reference date {last.date()}"
    )
    if len(truncated) < len(master):
        logger.info("Master dates truncated at %s: %d -> %d slots",
                    last.date(), len(master), len(truncated))

    obs = observations.truncate(last)
    slot_of = {day: i for i, day in enumerate(truncated)}

    kept, dropped = [], []
    for day in obs.days():
        (kept if day in slot_of else dropped).append(day)

    if dropped:
        logger.warning("%d observed day(s) outside the master date vector are not assigned a slot: %s",
                       len(dropped), ", ".join(str(d.date()) for d in dropped))

    processing = pd.DatetimeIndex(kept)
    return Alignment(
        master_dates=truncated,
        observations=obs,
        processing_days=processing,
        slots={day: slot_of[day] for day in processing},
        dropped_days=pd.DatetimeIndex(dropped),
    )
