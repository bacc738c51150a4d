"""
wip_engines.snapshot -- Point-in-time job financial snapshots.

Responsibility:
    Capture a job's derived WIP metrics at one timestamp so history can be
    trended and compared. Snapshots are immutable once built; persistence
    belongs to the caller (see ``wip_batch``).

Formulas (snapshot basis, cost-to-cost against budget):
    earned_to_date      = contract x min(costs / budget, 1)     (0 if budget is 0)
    forecasted_cost     = costs + cost_to_complete
    forecasted_revenue  = contract
    forecasted_margin   = forecasted_profit / forecasted_revenue (0 if revenue <= 0)
    original_profit     = target_profit, else contract - budget
    original_margin     = target_margin, else original_profit / contract (0 if contract <= 0)
    billing_position    = invoiced - earned_to_date
        label: over-billed above +band, under-billed below -band, else on-track
    at_risk_margin      = forecasted_margin < original_margin x at_risk_margin_factor
    behind_schedule     = end date and target end date set and end > target
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum

from wip_config.schema import DEFAULT_THRESHOLDS, AnalyzerThresholds
from wip_engines.breakdown import sum_breakdown
from wip_engines.schedule import is_job_behind_target_date
from wip_engines.tracer import traced_engine
from wip_kernel.domain.job import Job
from wip_kernel.domain.values import ONE, ZERO


class BillingPositionLabel(str, Enum):
    OVER_BILLED = "over-billed"
    UNDER_BILLED = "under-billed"
    ON_TRACK = "on-track"


@dataclass(frozen=True)
class JobFinancialSnapshot:
    """Immutable, timestamped capture of a job's derived metrics."""

    job_id: str
    job_no: str
    company_id: str | None
    snapshot_date: datetime
    # Contract / budget
    contract_amount: Decimal
    original_budget_total: Decimal
    original_profit_target: Decimal
    original_margin_target: Decimal
    # Actuals
    earned_to_date: Decimal
    invoiced_to_date: Decimal
    cost_labor_to_date: Decimal
    cost_material_to_date: Decimal
    cost_other_to_date: Decimal
    total_cost_to_date: Decimal
    # Forecasts (EAC)
    forecasted_cost_final: Decimal
    forecasted_revenue_final: Decimal
    forecasted_profit_final: Decimal
    forecasted_margin_final: Decimal
    # Billing / WIP
    billing_position_numeric: Decimal
    billing_position_label: BillingPositionLabel
    # Health flags
    at_risk_margin: bool
    behind_schedule: bool


def classify_billing_position(
    billing_position: Decimal,
    band: Decimal = DEFAULT_THRESHOLDS.snapshot.billing_position_band,
) -> BillingPositionLabel:
    """Label a billing position, treating anything within +/- band as on track."""
    if billing_position > band:
        return BillingPositionLabel.OVER_BILLED
    if billing_position < -band:
        return BillingPositionLabel.UNDER_BILLED
    return BillingPositionLabel.ON_TRACK


@traced_engine("snapshot", "1.0", fingerprint_fields=("job", "snapshot_date"))
def build_job_financial_snapshot(
    job: Job,
    snapshot_date: datetime,
    thresholds: AnalyzerThresholds = DEFAULT_THRESHOLDS,
) -> JobFinancialSnapshot:
    """
    Build a snapshot of ``job`` at ``snapshot_date``.

    Preconditions:
        ``snapshot_date`` is supplied by the caller (one value per run).
    Postconditions:
        All ratios are defined; no division by zero.
    """
    contract_total = sum_breakdown(job.contract)
    budget_total = sum_breakdown(job.budget)
    costs_total = sum_breakdown(job.costs)
    invoiced_total = sum_breakdown(job.invoiced)
    ctc_total = sum_breakdown(job.cost_to_complete)

    percent_complete = costs_total / budget_total if budget_total > ZERO else ZERO
    earned = contract_total * min(percent_complete, ONE)

    forecasted_cost = costs_total + ctc_total
    forecasted_revenue = contract_total
    forecasted_profit = forecasted_revenue - forecasted_cost
    forecasted_margin = (
        forecasted_profit / forecasted_revenue if forecasted_revenue > ZERO else ZERO
    )

    if job.target_profit is not None:
        original_profit = job.target_profit
    else:
        original_profit = contract_total - budget_total
    if job.target_margin is not None:
        original_margin = job.target_margin
    else:
        original_margin = original_profit / contract_total if contract_total > ZERO else ZERO

    billing_position = invoiced_total - earned
    snapshot_thresholds = thresholds.snapshot

    return JobFinancialSnapshot(
        job_id=job.id,
        job_no=job.job_no,
        company_id=job.company_id,
        snapshot_date=snapshot_date,
        contract_amount=contract_total,
        original_budget_total=budget_total,
        original_profit_target=original_profit,
        original_margin_target=original_margin,
        earned_to_date=earned,
        invoiced_to_date=invoiced_total,
        cost_labor_to_date=job.costs.labor,
        cost_material_to_date=job.costs.material,
        cost_other_to_date=job.costs.other,
        total_cost_to_date=costs_total,
        forecasted_cost_final=forecasted_cost,
        forecasted_revenue_final=forecasted_revenue,
        forecasted_profit_final=forecasted_profit,
        forecasted_margin_final=forecasted_margin,
        billing_position_numeric=billing_position,
        billing_position_label=classify_billing_position(
            billing_position, snapshot_thresholds.billing_position_band
        ),
        at_risk_margin=(
            forecasted_margin < original_margin * snapshot_thresholds.at_risk_margin_factor
        ),
        behind_schedule=is_job_behind_target_date(job),
    )


# ============================================================================
# Comparison
# ============================================================================


@dataclass(frozen=True)
class SnapshotComparisonRow:
    """
    One metric compared across two snapshots.

    ``is_improvement`` is None when the delta is zero. For rows where lower
    is better (``lower_is_better``) a negative delta is an improvement.
    """

    label: str
    previous: Decimal
    current: Decimal
    lower_is_better: bool = False

    @property
    def delta(self) -> Decimal:
        return self.current - self.previous

    @property
    def is_improvement(self) -> bool | None:
        delta = -self.delta if self.lower_is_better else self.delta
        if delta == ZERO:
            return None
        return delta > ZERO


@dataclass(frozen=True)
class SnapshotComparison:
    current: JobFinancialSnapshot
    previous: JobFinancialSnapshot | None
    rows: tuple[SnapshotComparisonRow, ...]

    @property
    def has_previous(self) -> bool:
        return self.previous is not None


def compare_snapshots(
    previous: JobFinancialSnapshot | None,
    current: JobFinancialSnapshot,
) -> SnapshotComparison:
    """Prev / now / delta rows for the headline metrics; no previous counts as 0."""

    def prev(attr: str) -> Decimal:
        return getattr(previous, attr) if previous is not None else ZERO

    rows = (
        SnapshotComparisonRow(
            "Forecasted Profit",
            prev("forecasted_profit_final"),
            current.forecasted_profit_final,
        ),
        SnapshotComparisonRow(
            "Cost to Date",
            prev("total_cost_to_date"),
            current.total_cost_to_date,
            lower_is_better=True,
        ),
        SnapshotComparisonRow(
            "Earned",
            prev("earned_to_date"),
            current.earned_to_date,
        ),
        SnapshotComparisonRow(
            "Billing Position",
            prev("billing_position_numeric"),
            current.billing_position_numeric,
            lower_is_better=True,
        ),
    )
    return SnapshotComparison(current=current, previous=previous, rows=rows)
