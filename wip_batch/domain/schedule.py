"""
Pure snapshot schedule evaluation.

Contract:
    ``is_snapshot_due(schedule, as_of)`` and ``compute_next_snapshot_run()``
    are PURE: no I/O, no side effects. All timestamps come from the caller.
"""

from __future__ import annotations

from datetime import datetime, timedelta

from wip_batch.domain.types import SnapshotFrequency, SnapshotSchedule, WeekDay


def _next_week_end(after: datetime, week_end_day: WeekDay) -> datetime:
    """First ``week_end_day`` strictly after ``after``'s date, same time of day."""
    days_ahead = (week_end_day.index - after.weekday()) % 7 or 7
    return after + timedelta(days=days_ahead)


def compute_next_snapshot_run(
    frequency: SnapshotFrequency,
    last_run_at: datetime | None,
    week_end_day: WeekDay = WeekDay.FRIDAY,
) -> datetime | None:
    """Compute the next run time for a snapshot schedule.

    Args:
        frequency: The schedule frequency.
        last_run_at: When the schedule last ran (None if never).
        week_end_day: The company's WIP week-end day; weekly runs land on it.

    Returns:
        Next run datetime, or None for ON_DEMAND and never-run schedules.
    """
    if frequency == SnapshotFrequency.ON_DEMAND or last_run_at is None:
        return None

    if frequency == SnapshotFrequency.DAILY:
        return last_run_at + timedelta(days=1)

    if frequency == SnapshotFrequency.WEEKLY:
        return _next_week_end(last_run_at, WeekDay(week_end_day))

    return None


def is_snapshot_due(schedule: SnapshotSchedule, as_of: datetime) -> bool:
    """Determine whether a scheduled snapshot run should fire at ``as_of``.

    Rules:
        - Inactive schedules never fire.
        - ON_DEMAND never fires automatically.
        - A schedule that has never run fires immediately.
        - Otherwise fires once ``as_of >= next_run_at`` (stored or computed).
    """
    if not schedule.is_active:
        return False

    if schedule.frequency == SnapshotFrequency.ON_DEMAND:
        return False

    next_run_at = schedule.next_run_at or compute_next_snapshot_run(
        schedule.frequency, schedule.last_run_at, schedule.week_end_day,
    )
    if next_run_at is None:
        return schedule.last_run_at is None

    return as_of >= next_run_at
