"""
Module: wip_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure WIP
    calculation engines. This is the canonical import surface for
    ``wip_batch`` and any reporting layer.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import wip_kernel, wip_config.schema and sibling engine modules.
    MUST NOT import wip_batch.

Invariants enforced:
    - Purity: engines NEVER read the system clock. ``as_of`` and
      ``snapshot_date`` are explicit parameters supplied by the caller.
    - Decimal-only arithmetic: every amount is a ``Decimal``.
    - Determinism: identical inputs always produce identical outputs.

Audit relevance:
    The top-level calculators are wrapped in ``@traced_engine`` (see
    ``wip_engines.tracer``), emitting WIP_ENGINE_TRACE log records with
    engine name, version, input fingerprint and duration.

Usage:
    from wip_engines import calculate_earned_revenue, analyze_job_risk
    from wip_engines.snapshot import build_job_financial_snapshot
"""

from wip_kernel.logging_config import get_logger

logger = get_logger("engines")

from wip_engines.attention import (
    AttentionItem,
    AttentionReason,
    AttentionReasonType,
    AttentionSeverity,
    calculate_profit_variance,
    calculate_underbilling_percent,
    find_jobs_needing_attention,
)
from wip_engines.billing import (
    BillingDifference,
    BillingLabel,
    calculate_billing_difference,
)
from wip_engines.breakdown import add_breakdowns, fold_breakdowns, sum_breakdown
from wip_engines.change_orders import (
    JobTotalsWithCOs,
    approved_change_orders,
    get_job_totals_with_cos,
    is_counted_change_order,
    sum_approved_co_budgets,
    sum_approved_co_contracts,
    sum_approved_co_cost_to_complete,
    sum_approved_co_costs,
    sum_approved_co_invoiced,
)
from wip_engines.earned_revenue import (
    EarnedRevenue,
    FixedPriceBasis,
    ResolvedTMSettings,
    RevenueBasis,
    TimeMaterialBasis,
    calculate_earned_revenue,
    component_percent_complete,
    resolve_revenue_basis,
    resolve_tm_settings,
)
from wip_engines.forecast import (
    calculate_forecasted_profit,
    calculate_forecasted_profit_with_cos,
    calculate_percent_complete,
    get_default_tm_settings,
)
from wip_engines.risk import (
    MarginFade,
    RiskLevel,
    SmartRiskAnalysis,
    analyze_job_risk,
    calculate_margin_fade,
    calculate_schedule_drift,
    calculate_underbilling_risk,
)
from wip_engines.schedule import (
    ScheduleWarning,
    ScheduleWarningType,
    WarningSeverity,
    get_all_schedule_warnings,
    get_mobilization_warnings,
    has_schedule_warnings,
    is_job_behind_target_date,
)
from wip_engines.snapshot import (
    BillingPositionLabel,
    JobFinancialSnapshot,
    SnapshotComparison,
    SnapshotComparisonRow,
    build_job_financial_snapshot,
    classify_billing_position,
    compare_snapshots,
)

__all__ = [
    # Breakdown arithmetic
    "add_breakdowns",
    "fold_breakdowns",
    "sum_breakdown",
    # Change orders
    "JobTotalsWithCOs",
    "approved_change_orders",
    "get_job_totals_with_cos",
    "is_counted_change_order",
    "sum_approved_co_budgets",
    "sum_approved_co_contracts",
    "sum_approved_co_cost_to_complete",
    "sum_approved_co_costs",
    "sum_approved_co_invoiced",
    # Earned revenue
    "EarnedRevenue",
    "FixedPriceBasis",
    "ResolvedTMSettings",
    "RevenueBasis",
    "TimeMaterialBasis",
    "calculate_earned_revenue",
    "component_percent_complete",
    "resolve_revenue_basis",
    "resolve_tm_settings",
    # Billing
    "BillingDifference",
    "BillingLabel",
    "calculate_billing_difference",
    # Forecast
    "calculate_forecasted_profit",
    "calculate_forecasted_profit_with_cos",
    "calculate_percent_complete",
    "get_default_tm_settings",
    # Schedule
    "ScheduleWarning",
    "ScheduleWarningType",
    "WarningSeverity",
    "get_all_schedule_warnings",
    "get_mobilization_warnings",
    "has_schedule_warnings",
    "is_job_behind_target_date",
    # Risk
    "MarginFade",
    "RiskLevel",
    "SmartRiskAnalysis",
    "analyze_job_risk",
    "calculate_margin_fade",
    "calculate_schedule_drift",
    "calculate_underbilling_risk",
    # Snapshot
    "BillingPositionLabel",
    "JobFinancialSnapshot",
    "SnapshotComparison",
    "SnapshotComparisonRow",
    "build_job_financial_snapshot",
    "classify_billing_position",
    "compare_snapshots",
    # Attention
    "AttentionItem",
    "AttentionReason",
    "AttentionReasonType",
    "AttentionSeverity",
    "calculate_profit_variance",
    "calculate_underbilling_percent",
    "find_jobs_needing_attention",
]
