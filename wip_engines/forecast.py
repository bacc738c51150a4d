"""
wip_engines.forecast -- Forecasted profit and percent complete.

Responsibility:
    Forecast final profit (with and without approved change orders) and
    the job-level cost-to-cost percent complete.

Formulas:
    Time & material:  profit = earned.total - sum(costs)
    Fixed price:      profit = sum(contract) - (sum(costs) + sum(cost_to_complete))
    Percent complete: sum(costs) / (sum(costs) + sum(cost_to_complete)) x 100

Known limitation:
    ``calculate_forecasted_profit_with_cos`` for T&M jobs adds the change
    orders as ``sum(co_contract) - sum(co_costs)`` to the base T&M profit.
    It does not recompute T&M earned revenue with change-order markups.
"""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal

from wip_engines.breakdown import sum_breakdown
from wip_engines.change_orders import get_job_totals_with_cos
from wip_engines.earned_revenue import (
    FixedPriceBasis,
    TimeMaterialBasis,
    calculate_earned_revenue,
    resolve_revenue_basis,
)
from wip_kernel.domain.job import ChangeOrder, Job, LaborBillingType, TMSettings
from wip_kernel.domain.values import HUNDRED, ZERO
from wip_kernel.exceptions import UnsupportedJobTypeError


def _fixed_price_profit(contract_total: Decimal, costs_total: Decimal, ctc_total: Decimal) -> Decimal:
    return contract_total - (costs_total + ctc_total)


def calculate_forecasted_profit(job: Job) -> Decimal:
    """Forecasted final profit for the job on its own figures."""
    basis = resolve_revenue_basis(job)
    if isinstance(basis, TimeMaterialBasis):
        return calculate_earned_revenue(job).total - sum_breakdown(job.costs)
    if isinstance(basis, FixedPriceBasis):
        return _fixed_price_profit(
            sum_breakdown(job.contract),
            sum_breakdown(job.costs),
            sum_breakdown(job.cost_to_complete),
        )
    raise UnsupportedJobTypeError(basis)


def calculate_forecasted_profit_with_cos(
    job: Job,
    change_orders: Sequence[ChangeOrder] = (),
) -> Decimal:
    """
    Forecasted final profit including approved/completed change orders.

    For T&M jobs the change-order contribution is approximated as
    ``sum(co_contract) - sum(co_costs)``.
    """
    totals = get_job_totals_with_cos(job, change_orders)
    basis = resolve_revenue_basis(job)
    if isinstance(basis, TimeMaterialBasis):
        base_profit = calculate_earned_revenue(job).total - sum_breakdown(job.costs)
        co_profit = sum_breakdown(totals.co_contract) - sum_breakdown(totals.co_costs)
        return base_profit + co_profit
    if isinstance(basis, FixedPriceBasis):
        return _fixed_price_profit(
            sum_breakdown(totals.contract),
            sum_breakdown(totals.costs),
            sum_breakdown(totals.cost_to_complete),
        )
    raise UnsupportedJobTypeError(basis)


def calculate_percent_complete(job: Job) -> Decimal:
    """
    Job-level percent complete (0-100) by the cost-to-cost method.

    Meaningful for fixed-price jobs; computable but not authoritative for
    T&M jobs. Returns 0 when no cost is forecast.
    """
    costs_total = sum_breakdown(job.costs)
    forecast_total = costs_total + sum_breakdown(job.cost_to_complete)
    if forecast_total == ZERO:
        return ZERO
    return costs_total / forecast_total * HUNDRED


def get_default_tm_settings() -> TMSettings:
    """Starting T&M settings for a new time & material job."""
    return TMSettings(
        labor_billing_type=LaborBillingType.MARKUP,
        labor_markup=Decimal("1.5"),  # 50% markup
        material_markup=Decimal("1.15"),
        other_markup=Decimal("1.10"),
    )
