"""
SnapshotRunner -- per-company batch snapshot run.

Contract:
    ``run(jobs, company_id=None)`` snapshots every active job, isolating
    failures per job, and hands all successful snapshots to the sink in a
    single ``persist`` call.

Invariants enforced:
    - Per-job isolation: one job's exception is recorded as
      ``"Job <job_no>: <message>"`` and the run continues.
    - One ``snapshot_date`` per run, read once from the injected Clock.
    - A sink failure fails the whole run with ``SnapshotPersistenceError``.
"""

from __future__ import annotations

import time
from collections.abc import Iterable, Mapping
from typing import Any, Union
from uuid import uuid4

from wip_batch.domain.types import (
    SnapshotItemResult,
    SnapshotItemStatus,
    SnapshotRunResult,
    SnapshotRunStatus,
)
from wip_batch.services.sinks import SnapshotSink
from wip_config.schema import DEFAULT_THRESHOLDS, AnalyzerThresholds
from wip_engines.snapshot import JobFinancialSnapshot, build_job_financial_snapshot
from wip_kernel.domain.clock import Clock, SystemClock
from wip_kernel.domain.job import Job, JobStatus
from wip_kernel.domain.records import job_from_record
from wip_kernel.exceptions import SnapshotPersistenceError
from wip_kernel.logging_config import LogContext, get_logger

logger = get_logger("batch.runner")

JobInput = Union[Job, Mapping[str, Any]]

NO_ACTIVE_JOBS_MESSAGE = "No active jobs found"


def _raw_status(job: JobInput) -> str:
    if isinstance(job, Job):
        return job.status
    # A record without a status is parsed as Active. A JobStatus member and
    # its plain string value compare equal.
    return job.get("status") or JobStatus.ACTIVE


def _raw_company_id(job: JobInput) -> str | None:
    if isinstance(job, Job):
        return job.company_id
    return job.get("companyId")


def _job_label(job: JobInput, index: int) -> str:
    if isinstance(job, Job):
        return job.job_no or job.id
    return str(job.get("jobNo") or job.get("id") or f"#{index + 1}")


class SnapshotRunner:
    """Batch snapshot runner with per-job failure isolation.

    Non-goals:
        - Does NOT fetch jobs; the caller supplies them.
        - Does NOT schedule itself; see ``wip_batch.domain.schedule``.
    """

    def __init__(
        self,
        sink: SnapshotSink,
        clock: Clock | None = None,
        thresholds: AnalyzerThresholds = DEFAULT_THRESHOLDS,
    ):
        self._sink = sink
        self._clock = clock or SystemClock()
        self._thresholds = thresholds

    def select_active(
        self,
        jobs: Iterable[JobInput],
        company_id: str | None = None,
    ) -> list[JobInput]:
        """Active jobs, restricted to ``company_id`` when given."""
        return [
            job for job in jobs
            if _raw_status(job) == JobStatus.ACTIVE
            and (company_id is None or _raw_company_id(job) == company_id)
        ]

    def run(
        self,
        jobs: Iterable[JobInput],
        company_id: str | None = None,
        correlation_id: str | None = None,
    ) -> SnapshotRunResult:
        """Snapshot every active job and persist the successes.

        ``correlation_id`` ties the run's log records to the caller's
        request; it defaults to the run id.

        Raises:
            SnapshotPersistenceError: If the sink rejects the batch.
        """
        run_id = str(uuid4())
        snapshot_date = self._clock.now()

        with LogContext.bind(
            correlation_id=correlation_id or run_id,
            run_id=run_id,
            company_id=company_id,
        ):
            active = self.select_active(jobs, company_id)
            if not active:
                logger.info("snapshot_run_no_jobs")
                return SnapshotRunResult(
                    snapshot_date=snapshot_date,
                    count=0,
                    status=SnapshotRunStatus.NO_JOBS,
                    message=NO_ACTIVE_JOBS_MESSAGE,
                    run_id=run_id,
                )

            start_time = time.monotonic()
            logger.info("snapshot_run_started", extra={"job_count": len(active)})

            snapshots: list[JobFinancialSnapshot] = []
            errors: list[str] = []
            item_results: list[SnapshotItemResult] = []

            for index, raw_job in enumerate(active):
                label = _job_label(raw_job, index)
                try:
                    job = raw_job if isinstance(raw_job, Job) else job_from_record(raw_job)
                    with LogContext.bind(job_id=job.id or None):
                        snapshot = build_job_financial_snapshot(
                            job, snapshot_date, self._thresholds,
                        )
                except Exception as exc:
                    errors.append(f"Job {label}: {exc}")
                    item_results.append(SnapshotItemResult(
                        item_index=index,
                        job_no=label,
                        status=SnapshotItemStatus.FAILED,
                        error_code=getattr(exc, "code", "UNHANDLED_EXCEPTION"),
                        error_message=str(exc),
                    ))
                    logger.warning(
                        "snapshot_job_failed",
                        extra={"job_no": label, "error": str(exc)},
                    )
                    continue

                snapshots.append(snapshot)
                item_results.append(SnapshotItemResult(
                    item_index=index,
                    job_no=label,
                    status=SnapshotItemStatus.SUCCEEDED,
                ))

            if snapshots:
                try:
                    self._sink.persist(tuple(snapshots))
                except Exception as exc:
                    logger.error(
                        "snapshot_persist_failed",
                        extra={"snapshot_count": len(snapshots), "error": str(exc)},
                    )
                    raise SnapshotPersistenceError(len(snapshots), str(exc)) from exc

            if not errors:
                status = SnapshotRunStatus.COMPLETED
            elif not snapshots:
                status = SnapshotRunStatus.FAILED
            else:
                status = SnapshotRunStatus.PARTIALLY_COMPLETED

            message = f"Created {len(snapshots)} snapshot(s)"
            if errors:
                message += f", {len(errors)} job(s) failed"

            logger.info(
                "snapshot_run_completed",
                extra={
                    "status": status.value,
                    "succeeded": len(snapshots),
                    "failed": len(errors),
                    "duration_ms": int((time.monotonic() - start_time) * 1000),
                },
            )

            return SnapshotRunResult(
                snapshot_date=snapshot_date,
                count=len(snapshots),
                status=status,
                message=message,
                snapshots=tuple(snapshots),
                errors=tuple(errors),
                item_results=tuple(item_results),
                run_id=run_id,
            )
