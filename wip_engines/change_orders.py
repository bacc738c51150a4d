"""
wip_engines.change_orders -- Change-order aggregation.

Responsibility:
    Fold approved change orders into effective job totals. One reducer per
    breakdown field (contract, costs, budget, invoiced, cost-to-complete),
    all sharing the same inclusion predicate, and
    ``get_job_totals_with_cos`` combining them with the job's own figures.

Invariants enforced:
    - Only ``approved`` and ``completed`` change orders contribute
      (``ChangeOrderStatus.counts_toward_totals``). The predicate is fixed,
      not configurable, and applied identically by every reducer.
    - An empty or pending/rejected-only list leaves the job's totals
      unchanged and ``has_approved_cos`` False.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from wip_engines.breakdown import add_breakdowns, fold_breakdowns
from wip_kernel.domain.job import ChangeOrder, Job
from wip_kernel.domain.values import CostBreakdown
from wip_kernel.logging_config import get_logger

logger = get_logger("engines.change_orders")


def is_counted_change_order(change_order: ChangeOrder) -> bool:
    """True for change orders that affect job totals."""
    return change_order.status.counts_toward_totals


def approved_change_orders(change_orders: Iterable[ChangeOrder]) -> list[ChangeOrder]:
    return [co for co in change_orders if is_counted_change_order(co)]


def _sum_approved(change_orders: Iterable[ChangeOrder], attr: str) -> CostBreakdown:
    return fold_breakdowns(getattr(co, attr) for co in approved_change_orders(change_orders))


def sum_approved_co_contracts(change_orders: Iterable[ChangeOrder]) -> CostBreakdown:
    """Sum approved/completed change-order contract values."""
    return _sum_approved(change_orders, "contract")


def sum_approved_co_costs(change_orders: Iterable[ChangeOrder]) -> CostBreakdown:
    """Sum approved/completed change-order costs."""
    return _sum_approved(change_orders, "costs")


def sum_approved_co_budgets(change_orders: Iterable[ChangeOrder]) -> CostBreakdown:
    """Sum approved/completed change-order budgets."""
    return _sum_approved(change_orders, "budget")


def sum_approved_co_invoiced(change_orders: Iterable[ChangeOrder]) -> CostBreakdown:
    """Sum approved/completed change-order invoiced values."""
    return _sum_approved(change_orders, "invoiced")


def sum_approved_co_cost_to_complete(change_orders: Iterable[ChangeOrder]) -> CostBreakdown:
    """Sum approved/completed change-order cost-to-complete values."""
    return _sum_approved(change_orders, "cost_to_complete")


@dataclass(frozen=True)
class JobTotalsWithCOs:
    """Effective job totals plus the change-order portions alone."""

    contract: CostBreakdown
    costs: CostBreakdown
    budget: CostBreakdown
    invoiced: CostBreakdown
    cost_to_complete: CostBreakdown
    co_contract: CostBreakdown
    co_costs: CostBreakdown
    co_budget: CostBreakdown
    co_invoiced: CostBreakdown
    co_cost_to_complete: CostBreakdown
    has_approved_cos: bool


def get_job_totals_with_cos(
    job: Job,
    change_orders: Sequence[ChangeOrder] = (),
) -> JobTotalsWithCOs:
    """
    Add the job's own breakdowns to its approved change-order aggregates.

    Postconditions:
        - ``contract == add(job.contract, co_contract)`` and likewise for
          costs, budget, invoiced and cost-to-complete.
        - ``has_approved_cos`` is True iff at least one change order is
          approved or completed.
    """
    change_orders = tuple(change_orders)
    co_contract = sum_approved_co_contracts(change_orders)
    co_costs = sum_approved_co_costs(change_orders)
    co_budget = sum_approved_co_budgets(change_orders)
    co_invoiced = sum_approved_co_invoiced(change_orders)
    co_cost_to_complete = sum_approved_co_cost_to_complete(change_orders)
    has_approved = any(is_counted_change_order(co) for co in change_orders)

    logger.debug("job_totals_with_cos", extra={
        "job_no": job.job_no,
        "change_order_count": len(change_orders),
        "has_approved_cos": has_approved,
    })

    return JobTotalsWithCOs(
        contract=add_breakdowns(job.contract, co_contract),
        costs=add_breakdowns(job.costs, co_costs),
        budget=add_breakdowns(job.budget, co_budget),
        invoiced=add_breakdowns(job.invoiced, co_invoiced),
        cost_to_complete=add_breakdowns(job.cost_to_complete, co_cost_to_complete),
        co_contract=co_contract,
        co_costs=co_costs,
        co_budget=co_budget,
        co_invoiced=co_invoiced,
        co_cost_to_complete=co_cost_to_complete,
        has_approved_cos=has_approved,
    )
