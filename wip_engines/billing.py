"""
wip_engines.billing -- Over/under billing position.

Positive difference = over billed (collected ahead of work performed);
negative = under billed (work performed but not yet invoiced). An exact
zero is reported as "Under Billed": the label test is ``difference > 0``
and downstream reporting relies on that boundary.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from wip_engines.breakdown import sum_breakdown
from wip_engines.earned_revenue import calculate_earned_revenue
from wip_kernel.domain.job import Job
from wip_kernel.domain.values import ZERO


class BillingLabel(str, Enum):
    OVER_BILLED = "Over Billed"
    UNDER_BILLED = "Under Billed"


@dataclass(frozen=True)
class BillingDifference:
    difference: Decimal
    is_over_billed: bool
    label: BillingLabel


def calculate_billing_difference(job: Job) -> BillingDifference:
    """invoiced total minus earned revenue, with its label."""
    earned = calculate_earned_revenue(job)
    difference = sum_breakdown(job.invoiced) - earned.total
    is_over = difference > ZERO
    return BillingDifference(
        difference=difference,
        is_over_billed=is_over,
        label=BillingLabel.OVER_BILLED if is_over else BillingLabel.UNDER_BILLED,
    )
