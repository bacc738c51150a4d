"""
wip_batch.domain.types -- Pure frozen dataclasses for snapshot runs.

ZERO I/O. Frozen dataclasses with enum status fields and tuples for
immutable collections.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from wip_engines.snapshot import JobFinancialSnapshot


# =============================================================================
# Status enums
# =============================================================================


class SnapshotRunStatus(str, Enum):
    """Run-level outcome."""

    COMPLETED = "completed"  # Every active job snapshotted
    PARTIALLY_COMPLETED = "partially_completed"  # Some jobs failed
    FAILED = "failed"  # Jobs were attempted and none succeeded
    NO_JOBS = "no_jobs"  # Nothing active to snapshot


class SnapshotItemStatus(str, Enum):
    """Per-job outcome within a run."""

    SUCCEEDED = "succeeded"
    FAILED = "failed"


class SnapshotFrequency(str, Enum):
    """How often a company's snapshots are taken."""

    DAILY = "daily"
    WEEKLY = "weekly"  # On the company's week-end day
    ON_DEMAND = "on_demand"  # Manual trigger only


class WeekDay(str, Enum):
    """Company WIP week-end day. Order matches ``datetime.weekday()``."""

    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"
    SUNDAY = "Sunday"

    @property
    def index(self) -> int:
        return list(WeekDay).index(self)


# =============================================================================
# Run DTOs
# =============================================================================


@dataclass(frozen=True)
class SnapshotItemResult:
    """Outcome of snapshotting a single job."""

    item_index: int  # 0-indexed position among the active jobs
    job_no: str
    status: SnapshotItemStatus
    error_code: str | None = None
    error_message: str | None = None


@dataclass(frozen=True)
class SnapshotRunResult:
    """
    Result of one snapshot run.

    ``success`` is True whenever the run itself completed, including runs
    with per-job errors; those are reported in ``errors``.
    """

    snapshot_date: datetime
    count: int
    status: SnapshotRunStatus
    message: str
    snapshots: tuple[JobFinancialSnapshot, ...] = ()
    errors: tuple[str, ...] = ()
    item_results: tuple[SnapshotItemResult, ...] = ()
    run_id: str | None = None

    @property
    def success(self) -> bool:
        # A run that returns has completed; a sink failure raises instead.
        return True


# =============================================================================
# Schedule DTOs
# =============================================================================


@dataclass(frozen=True)
class SnapshotSchedule:
    """A company's snapshot cadence and run history."""

    frequency: SnapshotFrequency
    week_end_day: WeekDay = WeekDay.FRIDAY
    company_id: str | None = None
    last_run_at: datetime | None = None
    next_run_at: datetime | None = None
    is_active: bool = True
