"""
wip_batch.domain -- Pure types and schedule evaluation for snapshot runs.

ZERO I/O. All types are frozen dataclasses.
"""

from wip_batch.domain.types import (
    SnapshotFrequency,
    SnapshotItemResult,
    SnapshotItemStatus,
    SnapshotRunResult,
    SnapshotRunStatus,
    SnapshotSchedule,
    WeekDay,
)

__all__ = [
    "SnapshotFrequency",
    "SnapshotItemResult",
    "SnapshotItemStatus",
    "SnapshotRunResult",
    "SnapshotRunStatus",
    "SnapshotSchedule",
    "WeekDay",
]
