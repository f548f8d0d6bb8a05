"""Pipeline modules.

- alignment: date bookkeeping and day -> slot mapping
- geometry: run-wide grid geometry pre-scan
- pool: scoped worker pool and bounded fetches
- worker: per-day likelihood computation
- orchestrator: run controller and assembly
"""

from envlik.pipeline.alignment import Alignment, align_dates
from envlik.pipeline.geometry import GridGeometry, prescan_geometry
from envlik.pipeline.pool import DayWorkerPool
from envlik.pipeline.worker import DayWorker
from envlik.pipeline.result import DayStatus, LikelihoodResult
from envlik.pipeline.orchestrator import LikelihoodOrchestrator, setup_logging

__all__ = [
    "Alignment",
    "align_dates",
    "GridGeometry",
    "prescan_geometry",
    "DayWorkerPool",
    "DayWorker",
    "DayStatus",
    "LikelihoodResult",
    "LikelihoodOrchestrator",
    "setup_logging",
]
