"""
wip_engines.risk -- Smart risk analysis: underbilling, schedule drift, margin fade.

Responsibility:
    Classify a job's financial risk from its budget/cost/contract/invoiced
    figures and schedule, and compose the results into a
    ``SmartRiskAnalysis`` for dashboards and alerting.

Formulas:
    Underbilling (cost-to-cost against budget):
        pct       = min(sum(costs) / sum(budget), 1)        (0 if budget is 0)
        earned    = contract x pct
        ratio     = (invoiced - earned) / contract
        High if ratio < -high_ratio, Medium if ratio < -medium_ratio, else Low.
        Contract 0 -> RiskLevel.NONE (undefined, not Low).
    Schedule drift:
        drift = time_elapsed_fraction - sum(costs) / sum(budget)
        below the noise ratio -> 0 weeks; else round(drift x duration) in weeks.
    Margin fade:
        original  = (contract - budget) / contract
        forecast  = (contract - (costs + cost_to_complete)) / contract
        fade_pts  = (original - forecast) x 100, reported to one decimal.

Invariants enforced:
    - Every ratio guards its zero denominator.
    - ``as_of`` is always passed in; this module never reads the clock.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from decimal import ROUND_HALF_UP, Decimal, localcontext
from enum import Enum

from wip_config.schema import DEFAULT_THRESHOLDS, AnalyzerThresholds
from wip_engines.breakdown import sum_breakdown
from wip_engines.tracer import traced_engine
from wip_kernel.domain.job import Job
from wip_kernel.domain.values import HUNDRED, ONE, ZERO
from wip_kernel.logging_config import get_logger

logger = get_logger("engines.risk")

_ONE_DECIMAL = Decimal("0.1")
_WEEK = timedelta(weeks=1)
_MICROSECOND = timedelta(microseconds=1)


class RiskLevel(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    NONE = "None"


@dataclass(frozen=True)
class MarginFade:
    is_fading: bool
    fade_percent: Decimal  # margin points lost, one decimal place


@dataclass(frozen=True)
class SmartRiskAnalysis:
    underbilling_risk: RiskLevel
    schedule_drift_weeks: int
    margin_fade_percent: Decimal
    is_margin_fading: bool


def _as_utc_datetime(value: date | datetime) -> datetime:
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value
    return datetime.combine(value, time.min, tzinfo=timezone.utc)


def _micros(delta: timedelta) -> Decimal:
    return Decimal(delta // _MICROSECOND)


def _round_half_up(value: Decimal, exponent: Decimal) -> Decimal:
    # quantize needs every digit of the result to fit the context precision
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() - exponent.as_tuple().exponent + 2)
        return value.quantize(exponent, rounding=ROUND_HALF_UP)


def calculate_underbilling_risk(
    job: Job,
    thresholds: AnalyzerThresholds = DEFAULT_THRESHOLDS,
) -> RiskLevel:
    """Underbilling risk tier relative to contract value."""
    contract_value = sum_breakdown(job.contract)
    if contract_value == ZERO:
        return RiskLevel.NONE

    budget_total = sum_breakdown(job.budget)
    percent_complete = sum_breakdown(job.costs) / budget_total if budget_total > ZERO else ZERO
    earned = contract_value * min(percent_complete, ONE)

    billing_position = sum_breakdown(job.invoiced) - earned
    ratio = billing_position / contract_value

    risk = thresholds.risk
    if ratio < -risk.underbilling_high_ratio:
        return RiskLevel.HIGH
    if ratio < -risk.underbilling_medium_ratio:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def calculate_schedule_drift(
    job: Job,
    as_of: date | datetime,
    thresholds: AnalyzerThresholds = DEFAULT_THRESHOLDS,
) -> int:
    """
    Estimated weeks behind schedule, from time elapsed vs money spent.

    Returns 0 when start or end date is TBD, the job has not started,
    the duration is not positive, the budget is zero, or the drift is
    within the noise ratio.
    """
    if job.start_date is None or job.end_date is None:
        return 0

    start = _as_utc_datetime(job.start_date)
    end = _as_utc_datetime(job.end_date)
    now = _as_utc_datetime(as_of)
    total_duration = end - start
    if now < start or total_duration <= timedelta(0):
        return 0

    budget_total = sum_breakdown(job.budget)
    if budget_total == ZERO:
        return 0

    duration_us = _micros(total_duration)
    time_elapsed = _micros(now - start) / duration_us
    financial = sum_breakdown(job.costs) / budget_total
    drift_ratio = time_elapsed - financial

    if drift_ratio < thresholds.risk.drift_noise_ratio:
        return 0

    drift_weeks = _round_half_up(drift_ratio * duration_us / _micros(_WEEK), ONE)
    return max(0, int(drift_weeks))


def calculate_margin_fade(
    job: Job,
    thresholds: AnalyzerThresholds = DEFAULT_THRESHOLDS,
) -> MarginFade:
    """Margin points lost between the original budget and current forecast."""
    contract_total = sum_breakdown(job.contract)
    if contract_total == ZERO:
        return MarginFade(is_fading=False, fade_percent=ZERO)

    original_margin = (contract_total - sum_breakdown(job.budget)) / contract_total
    forecasted_cost = sum_breakdown(job.costs) + sum_breakdown(job.cost_to_complete)
    forecasted_margin = (contract_total - forecasted_cost) / contract_total

    fade_points = (original_margin - forecasted_margin) * HUNDRED
    return MarginFade(
        is_fading=fade_points > thresholds.risk.margin_fade_points,
        fade_percent=_round_half_up(fade_points, _ONE_DECIMAL),
    )


@traced_engine("risk", "1.0", fingerprint_fields=("job", "as_of"))
def analyze_job_risk(
    job: Job,
    as_of: date | datetime,
    thresholds: AnalyzerThresholds = DEFAULT_THRESHOLDS,
) -> SmartRiskAnalysis:
    """Compose underbilling risk, schedule drift and margin fade."""
    fade = calculate_margin_fade(job, thresholds)
    analysis = SmartRiskAnalysis(
        underbilling_risk=calculate_underbilling_risk(job, thresholds),
        schedule_drift_weeks=calculate_schedule_drift(job, as_of, thresholds),
        margin_fade_percent=fade.fade_percent,
        is_margin_fading=fade.is_fading,
    )
    logger.debug("job_risk_analyzed", extra={
        "job_no": job.job_no,
        "underbilling_risk": analysis.underbilling_risk.value,
        "schedule_drift_weeks": analysis.schedule_drift_weeks,
        "margin_fade_percent": str(analysis.margin_fade_percent),
    })
    return analysis
