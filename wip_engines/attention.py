"""
wip_engines.attention -- Needs-attention triage across a portfolio.

Scans Active and On Hold jobs for three warning signs and returns the
jobs that show at least one, most urgent first:

    underbilling    underbilled amount as a percent of earned revenue
    margin-fade     margin points lost since the original estimate
    schedule-drift  weeks behind, from time elapsed vs money spent

Ordering: jobs with any high-severity reason first, then by number of
reasons (descending). Ties keep input order.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from wip_config.schema import DEFAULT_THRESHOLDS, AnalyzerThresholds
from wip_engines.breakdown import sum_breakdown
from wip_engines.earned_revenue import calculate_earned_revenue
from wip_engines.risk import calculate_margin_fade, calculate_schedule_drift
from wip_kernel.domain.job import Job, JobStatus, JobType
from wip_kernel.domain.values import HUNDRED, ZERO
from wip_kernel.logging_config import get_logger

logger = get_logger("engines.attention")

_TRIAGED_STATUSES = (JobStatus.ACTIVE, JobStatus.ON_HOLD)


class AttentionReasonType(str, Enum):
    UNDERBILLING = "underbilling"
    MARGIN_FADE = "margin-fade"
    SCHEDULE_DRIFT = "schedule-drift"


class AttentionSeverity(str, Enum):
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class AttentionReason:
    type: AttentionReasonType
    message: str
    severity: AttentionSeverity


@dataclass(frozen=True)
class AttentionItem:
    job: Job
    reasons: tuple[AttentionReason, ...]
    profit_variance: Decimal

    @property
    def has_high_severity(self) -> bool:
        return any(r.severity is AttentionSeverity.HIGH for r in self.reasons)


def calculate_underbilling_percent(job: Job) -> Decimal:
    """Underbilled amount as a percent of earned revenue; 0 if not underbilled."""
    earned_total = calculate_earned_revenue(job).total
    if earned_total == ZERO:
        return ZERO
    billing_position = sum_breakdown(job.invoiced) - earned_total
    if billing_position >= ZERO:
        return ZERO
    return abs(billing_position / earned_total) * HUNDRED


def calculate_profit_variance(job: Job) -> Decimal:
    """
    Forecasted minus original profit for fixed-price jobs.

    T&M jobs have no meaningful original profit, so the forecasted profit
    itself is returned.
    """
    contract_total = sum_breakdown(job.contract)
    forecasted_profit = contract_total - (
        sum_breakdown(job.costs) + sum_breakdown(job.cost_to_complete)
    )
    if job.job_type == JobType.TIME_MATERIAL:
        return forecasted_profit
    return forecasted_profit - (contract_total - sum_breakdown(job.budget))


def _severity(value: Decimal | int, high_cutoff: Decimal | int) -> AttentionSeverity:
    return AttentionSeverity.HIGH if value > high_cutoff else AttentionSeverity.MEDIUM


def _attention_reasons(
    job: Job,
    as_of: date | datetime,
    thresholds: AnalyzerThresholds,
) -> list[AttentionReason]:
    limits = thresholds.attention
    reasons: list[AttentionReason] = []

    underbilling = calculate_underbilling_percent(job)
    if underbilling > limits.underbilling_percent:
        reasons.append(AttentionReason(
            type=AttentionReasonType.UNDERBILLING,
            message=f"Underbilled {underbilling:.0f}%",
            severity=_severity(underbilling, limits.underbilling_percent_high),
        ))

    fade = calculate_margin_fade(job, thresholds).fade_percent
    if fade > limits.margin_fade_points:
        reasons.append(AttentionReason(
            type=AttentionReasonType.MARGIN_FADE,
            message=f"Margin fading: -{fade:.1f} pts",
            severity=_severity(fade, limits.margin_fade_points_high),
        ))

    drift = calculate_schedule_drift(job, as_of, thresholds)
    if drift > limits.schedule_drift_weeks:
        reasons.append(AttentionReason(
            type=AttentionReasonType.SCHEDULE_DRIFT,
            message=f"{drift} weeks behind schedule",
            severity=_severity(drift, limits.schedule_drift_weeks_high),
        ))

    return reasons


def find_jobs_needing_attention(
    jobs: Iterable[Job],
    as_of: date | datetime,
    thresholds: AnalyzerThresholds = DEFAULT_THRESHOLDS,
) -> list[AttentionItem]:
    """Jobs showing at least one warning sign, most urgent first."""
    items: list[AttentionItem] = []
    for job in jobs:
        if job.status not in _TRIAGED_STATUSES:
            continue
        reasons = _attention_reasons(job, as_of, thresholds)
        if reasons:
            items.append(AttentionItem(
                job=job,
                reasons=tuple(reasons),
                profit_variance=calculate_profit_variance(job),
            ))

    # sorted() is stable, so ties keep input order
    items = sorted(items, key=lambda item: (not item.has_high_severity, -len(item.reasons)))
    logger.debug("attention_queue_built", extra={"item_count": len(items)})
    return items
