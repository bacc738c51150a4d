"""
Snapshot sinks -- where a run's snapshots are handed off.

``SnapshotSink`` is the persistence port: the runner calls ``persist``
exactly once per run with every successful snapshot. Storage adapters
implement it outside this package; ``InMemorySnapshotSink`` serves
tests, development and history comparisons.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from wip_engines.snapshot import JobFinancialSnapshot


@runtime_checkable
class SnapshotSink(Protocol):
    """Persistence port for job financial snapshots."""

    def persist(self, snapshots: Sequence[JobFinancialSnapshot]) -> None:
        """Store all snapshots of one run, or raise."""
        ...


class InMemorySnapshotSink:
    """Keeps snapshots in memory, in persistence order."""

    def __init__(self) -> None:
        self._snapshots: list[JobFinancialSnapshot] = []
        self.persist_calls = 0

    def persist(self, snapshots: Sequence[JobFinancialSnapshot]) -> None:
        self.persist_calls += 1
        self._snapshots.extend(snapshots)

    @property
    def snapshots(self) -> tuple[JobFinancialSnapshot, ...]:
        return tuple(self._snapshots)

    def history_for(self, job_id: str, limit: int = 10) -> list[JobFinancialSnapshot]:
        """Most recent snapshots for a job, newest first."""
        matching = [s for s in self._snapshots if s.job_id == job_id]
        matching.sort(key=lambda s: s.snapshot_date, reverse=True)
        return matching[:limit]

    def latest_for(self, job_id: str) -> JobFinancialSnapshot | None:
        history = self.history_for(job_id, limit=1)
        return history[0] if history else None
