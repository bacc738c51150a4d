"""
wip_engines.schedule -- Schedule warnings.

Responsibility:
    Compare a job's mobilization phases and forecast end date against its
    contract end date and target end date, producing ephemeral
    ``ScheduleWarning`` records for display and alerting.

Rules:
    - TBD dates (``None``) are never compared; a job whose end date is TBD
      gets no mobilization warnings at all.
    - Disabled phases are ignored.
    - Demobilization after contract end: ``warning``, escalating to
      ``critical`` once the overrun exceeds the demobilization cut-off
      (14 days by default).
    - Mobilization after contract end: always ``critical``.
    - Forecast end after target end: ``behind-target``, ``critical`` once
      the delay exceeds the behind-target cut-off (30 days by default).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from wip_config.schema import DEFAULT_THRESHOLDS, AnalyzerThresholds
from wip_kernel.domain.job import Job, MobilizationPhase
from wip_kernel.logging_config import get_logger

logger = get_logger("engines.schedule")


class ScheduleWarningType(str, Enum):
    MOBILIZATION_PAST_CONTRACT = "mobilization-past-contract"
    BEHIND_TARGET = "behind-target"
    PHASE_OVERLAP = "phase-overlap"  # reserved; no rule emits it yet


class WarningSeverity(str, Enum):
    WARNING = "warning"
    CRITICAL = "critical"


@dataclass(frozen=True)
class ScheduleWarning:
    type: ScheduleWarningType
    message: str
    severity: WarningSeverity
    phase_id: int | None = None


def _days(count: int) -> str:
    return f"{count} day{'' if count == 1 else 's'}"


def _phase_label(phase: MobilizationPhase) -> str:
    if phase.description:
        return f"Phase {phase.id} ({phase.description})"
    return f"Phase {phase.id}"


def get_mobilization_warnings(
    job: Job,
    thresholds: AnalyzerThresholds = DEFAULT_THRESHOLDS,
) -> list[ScheduleWarning]:
    """Warnings for enabled phases that run past the contract end date."""
    if job.end_date is None:
        return []

    critical_days = thresholds.schedule.demobilization_critical_days
    warnings: list[ScheduleWarning] = []
    for phase in job.mobilizations:
        if not phase.enabled:
            continue

        if phase.demobilize_date is not None and phase.demobilize_date > job.end_date:
            days_over = (phase.demobilize_date - job.end_date).days
            warnings.append(ScheduleWarning(
                type=ScheduleWarningType.MOBILIZATION_PAST_CONTRACT,
                phase_id=phase.id,
                message=f"{_phase_label(phase)} demob is {_days(days_over)} past contract end",
                severity=(
                    WarningSeverity.CRITICAL if days_over > critical_days
                    else WarningSeverity.WARNING
                ),
            ))

        if phase.mobilize_date is not None and phase.mobilize_date > job.end_date:
            warnings.append(ScheduleWarning(
                type=ScheduleWarningType.MOBILIZATION_PAST_CONTRACT,
                phase_id=phase.id,
                message=f"{_phase_label(phase)} mobilization starts after contract end",
                severity=WarningSeverity.CRITICAL,
            ))

    if warnings:
        logger.debug("mobilization_warnings", extra={
            "job_no": job.job_no,
            "warning_count": len(warnings),
        })
    return warnings


def is_job_behind_target_date(job: Job) -> bool:
    """True when both dates are set and the end date is after the target."""
    if job.target_end_date is None or job.end_date is None:
        return False
    return job.end_date > job.target_end_date


def has_schedule_warnings(
    job: Job,
    thresholds: AnalyzerThresholds = DEFAULT_THRESHOLDS,
) -> bool:
    """Whether the job belongs in a "behind schedule" filter."""
    return bool(get_mobilization_warnings(job, thresholds)) or is_job_behind_target_date(job)


def get_all_schedule_warnings(
    job: Job,
    thresholds: AnalyzerThresholds = DEFAULT_THRESHOLDS,
) -> list[ScheduleWarning]:
    """Mobilization warnings followed by the behind-target warning, if any."""
    warnings = get_mobilization_warnings(job, thresholds)

    if is_job_behind_target_date(job):
        days_late = (job.end_date - job.target_end_date).days
        critical_days = thresholds.schedule.behind_target_critical_days
        warnings.append(ScheduleWarning(
            type=ScheduleWarningType.BEHIND_TARGET,
            message=f"Job is {_days(days_late)} behind target completion",
            severity=(
                WarningSeverity.CRITICAL if days_late > critical_days
                else WarningSeverity.WARNING
            ),
        ))

    return warnings
