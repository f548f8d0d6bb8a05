"""Day-parallel likelihood orchestration.

Coordinates alignment, the geometry pre-scan, the day-worker pool and the
sequential normalization/assembly of the output stack.
"""

import logging
import time
from concurrent.futures import as_completed
from pathlib import Path
from typing import Dict, Optional, TYPE_CHECKING

import numpy as np
import pandas as pd

from envlik.contracts import (
    FailurePolicy,
    assert_likelihood_grid,
    assert_output_stack,
)
from envlik.data.observations import TagObservations
from envlik.likelihood.normalize import assemble_stack, normalize_day
from envlik.pipeline.alignment import align_dates
from envlik.pipeline.geometry import GridGeometry, prescan_geometry
from envlik.pipeline.pool import DayWorkerPool
from envlik.pipeline.result import (
    STATUS_DROPPED,
    STATUS_EMPTY,
    STATUS_FAILED,
    STATUS_OK,
    DayStatus,
    LikelihoodResult,
)
from envlik.pipeline.worker import DayOutcome, DayWorker

if TYPE_CHECKING:
    from envlik.schemas import InternalConfig

__all__ = ['LikelihoodOrchestrator', 'setup_logging']

logger = logging.getLogger(__name__)


def setup_logging(config: "InternalConfig") -> None:
    """Configure root logging from ``config.logging``.

    Console output always; a file handler too when ``log_file`` is set.
    """
    log_level = getattr(logging, config.logging.level.upper(), logging.INFO)

    formatter = logging.Formatter(
        fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    root = logging.getLogger()
    root.setLevel(log_level)
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    ch = logging.StreamHandler()
    ch.setLevel(log_level)
    ch.setFormatter(formatter)
    root.addHandler(ch)

    if config.logging.log_file:
        log_path = Path(config.logging.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(log_path)
        fh.setLevel(log_level)
        fh.setFormatter(formatter)
        root.addHandler(fh)

    logger.info("Logging: level=%s, file=%s", config.logging.level, config.logging.log_file)


class LikelihoodOrchestrator:
    """Run the environmental likelihood engine over a whole deployment.

    **Run stages:**

    1. **Alignment**: truncate the master dates and tag series at the last
       available reference date; map each observed day to its slot.
    2. **Pre-scan**: fix output shape, coarsening factor and window once
       (skipped when an explicit ``GridGeometry`` is passed).
    3. **Day workers**: one task per processing day in a scoped thread
       pool. Day-local failures become all-zero slots.
    4. **Assembly**: sequentially normalize each day and scatter it into
       the pre-allocated stack by slot index, independent of completion
       order.

    Example usage::

        config = resolve_config(ParamConfig(), UserConfig(mode="sst"))
        orch = LikelihoodOrchestrator(config, accessor)
        result = orch.run(observations, master_dates)
        result.stack.shape        # (n_lon, n_lat, len(result.dates))
        result.status_frame()     # per-day diagnostics
    """

    def __init__(self, config: "InternalConfig", accessor, mask: Optional[np.ndarray] = None):
        self.config = config
        self.accessor = accessor
        self.mask = mask
        self.policy = FailurePolicy(config.workers.failure_policy)

    def run(self, observations: TagObservations, master_dates,
            geometry: Optional[GridGeometry] = None) -> LikelihoodResult:
        """Compute the full likelihood stack.

        Parameters
        ----------
        observations : TagObservations
            Tag series (profile samples with depth, or SST readings).
        master_dates : sequence of date-like
            Complete ascending date vector spanning the deployment.
        geometry : GridGeometry, optional
            Explicit run geometry; if None it is fixed by a pre-scan.

        Returns
        -------
        LikelihoodResult

        Raises
        ------
        DataUnavailable
            No reference dates at all.
        ContractViolation
            Bad master dates, undeterminable shape, or a stage invariant broken.
        DayFailure
            Only under the ``fail_fast`` policy: the first day to fail aborts
            the run and days not yet started are cancelled.
        """
        start = time.time()
        logger.info("=" * 60)
        logger.info("Starting %s likelihood run", self.config.mode.upper())
        logger.info("=" * 60)

        alignment = align_dates(observations, master_dates, self.accessor.available_dates())
        days = alignment.processing_days
        if len(days):
            logger.info("Processing %d day(s): %s through %s", len(days), days[0].date(), days[-1].date())
        else:
            logger.info("No observed days within the master date vector")

        if geometry is None:
            reference = self.accessor.available_dates()
            probes = list(days) + [d for d in reference
                                   if d <= alignment.master_dates[-1] and d not in alignment.slots]
            geometry = prescan_geometry(self.accessor, probes, self.config)

        worker = DayWorker(self.config, geometry, self.accessor, self.mask)
        outcomes: Dict[pd.Timestamp, DayOutcome] = {}

        with DayWorkerPool(self.config.workers.pool_size) as pool:
            futures = {
                pool.submit(worker.process, day, alignment.slots[day],
                            alignment.observations.for_day(day)): day
                for day in days
            }
            for future in as_completed(futures):
                outcome = future.result()
                outcomes[outcome.day] = outcome
                logger.debug("Finished %s in %.2fs", outcome.day.date(), outcome.elapsed)
                if self.policy == FailurePolicy.FAIL_FAST and not outcome.ok:
                    logger.error("Day %s failed under fail_fast policy, cancelling remaining days",
                                 outcome.day.date())
                    raise outcome.error

        day_grids, statuses = self._assemble_days(days, outcomes, geometry)
        for day in alignment.dropped_days:
            statuses.append(DayStatus(date=day, slot=None, status=STATUS_DROPPED,
                                      reason="date not in master date vector"))

        n_slots = len(alignment.master_dates)
        stack = assemble_stack(geometry.shape, n_slots, day_grids)
        assert_output_stack(stack, geometry.shape, n_slots)

        result = LikelihoodResult(
            stack=stack,
            dates=alignment.master_dates,
            lon=geometry.lon,
            lat=geometry.lat,
            statuses=sorted(statuses, key=lambda s: s.date),
        )
        self._log_summary(result, time.time() - start)
        return result

    def _assemble_days(self, days: pd.DatetimeIndex, outcomes: Dict[pd.Timestamp, DayOutcome],
                       geometry: GridGeometry):
        """Normalize successful days in date order; build their status records."""
        day_grids: Dict[int, np.ndarray] = {}
        statuses = []
        for day in days:
            outcome = outcomes[day]
            if not outcome.ok:
                statuses.append(DayStatus(day, outcome.slot, STATUS_FAILED,
                                          f"{type(outcome.error).__name__}: {outcome.error}",
                                          outcome.elapsed))
                continue

            normalized = normalize_day(outcome.grid)
            assert_likelihood_grid(normalized, geometry.shape)
            day_grids[outcome.slot] = normalized
            if normalized.max() > 0:
                statuses.append(DayStatus(day, outcome.slot, STATUS_OK, None, outcome.elapsed))
            else:
                statuses.append(DayStatus(day, outcome.slot, STATUS_EMPTY,
                                          "no positive finite likelihood", outcome.elapsed))
        return day_grids, statuses

    def _log_summary(self, result: LikelihoodResult, elapsed: float) -> None:
        counts = pd.Series([s.status for s in result.statuses], dtype=object).value_counts()
        logger.info("=" * 60)
        logger.info("Run complete in %.1f seconds: %d slots, %s",
                    elapsed, len(result.dates),
                    ", ".join(f"{k}={v}" for k, v in counts.items()) or "no days processed")
        logger.info("=" * 60)
