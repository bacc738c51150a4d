"""
wip_batch -- Batch snapshot runs and snapshot scheduling.

Takes a point-in-time financial snapshot of every active job for a
company, isolating per-job failures, and hands the successful snapshots
to a sink in one call. Also evaluates when the next scheduled run is due.

Architecture:
    wip_batch/ is a top-level package. Nothing in wip_kernel, wip_engines
    or wip_config imports from wip_batch.

Invariants:
    - One failing job never aborts the run; its error is recorded.
    - Every snapshot in a run shares one ``snapshot_date`` from the Clock.
    - Schedule evaluation is pure (no clock reads, no I/O).
"""

from wip_batch.domain.schedule import compute_next_snapshot_run, is_snapshot_due
from wip_batch.domain.types import (
    SnapshotFrequency,
    SnapshotItemResult,
    SnapshotItemStatus,
    SnapshotRunResult,
    SnapshotRunStatus,
    SnapshotSchedule,
    WeekDay,
)
from wip_batch.services.runner import SnapshotRunner
from wip_batch.services.sinks import InMemorySnapshotSink, SnapshotSink

__all__ = [
    "InMemorySnapshotSink",
    "SnapshotFrequency",
    "SnapshotItemResult",
    "SnapshotItemStatus",
    "SnapshotRunResult",
    "SnapshotRunStatus",
    "SnapshotRunner",
    "SnapshotSchedule",
    "SnapshotSink",
    "WeekDay",
    "compute_next_snapshot_run",
    "is_snapshot_due",
]
