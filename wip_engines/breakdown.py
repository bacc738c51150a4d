"""
wip_engines.breakdown -- CostBreakdown arithmetic.

The foundation every other engine builds on: ``sum_breakdown`` collapses
a {labor, material, other} triple to a total and ``add_breakdowns`` adds
two triples component-wise. Addition is commutative and associative and
``sum_breakdown(add_breakdowns(a, b)) == sum_breakdown(a) + sum_breakdown(b)``.
Decimal arithmetic makes these identities exact.
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal

from wip_kernel.domain.values import CostBreakdown


def sum_breakdown(breakdown: CostBreakdown) -> Decimal:
    """labor + material + other."""
    return breakdown.labor + breakdown.material + breakdown.other


def add_breakdowns(a: CostBreakdown, b: CostBreakdown) -> CostBreakdown:
    """Component-wise addition of two breakdowns."""
    return CostBreakdown(
        labor=a.labor + b.labor,
        material=a.material + b.material,
        other=a.other + b.other,
    )


def fold_breakdowns(breakdowns: Iterable[CostBreakdown]) -> CostBreakdown:
    """Add any number of breakdowns, starting from zero."""
    total = CostBreakdown.zero()
    for breakdown in breakdowns:
        total = add_breakdowns(total, breakdown)
    return total
