"""
wip_engines.earned_revenue -- Earned revenue recognition per job type.

Responsibility:
    Compute revenue earned to date, independent of what has been invoiced.
    The job's revenue model is resolved once into a tagged variant
    (``FixedPriceBasis`` or ``TimeMaterialBasis``) and every calculator
    dispatches over that variant, so a new job type fails loudly in each
    calculator instead of silently falling through to fixed-price.

Formulas:
    Time & material:
        labor    = bill_rate x hours          (fixed-rate billing)
                 = costs.labor x labor_markup (markup billing)
        material = costs.material x material_markup
        other    = costs.other x other_markup
    Fixed price, per component c in {labor, material, other}:
        pct[c]    = costs[c] / (costs[c] + cost_to_complete[c])   (0 if denominator <= 0)
        earned[c] = contract[c] x pct[c]

    Fixed-price revenue is computed per component, never as one blended
    percent complete times total contract: markups differ between labor,
    material and other, so a blended figure skews earned revenue whenever
    the cost mix drifts from the estimate.

Invariants enforced:
    - Defaults for T&M settings are applied only in ``resolve_tm_settings``:
      markups default to 1, rate and hours to 0. Absent and zero values
      both take the default.
    - Zero-denominator components are 0% complete, never NaN.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from wip_engines.breakdown import sum_breakdown
from wip_engines.tracer import traced_engine
from wip_kernel.domain.job import Job, JobType, LaborBillingType, TMSettings
from wip_kernel.domain.values import ONE, ZERO
from wip_kernel.exceptions import UnsupportedJobTypeError
from wip_kernel.logging_config import get_logger

logger = get_logger("engines.earned_revenue")


# ============================================================================
# Revenue basis (tagged variant)
# ============================================================================


@dataclass(frozen=True)
class ResolvedTMSettings:
    """T&M settings with every default applied."""

    labor_billing_type: LaborBillingType
    labor_bill_rate: Decimal
    labor_hours: Decimal
    labor_markup: Decimal
    material_markup: Decimal
    other_markup: Decimal


@dataclass(frozen=True)
class FixedPriceBasis:
    """Revenue recognized by component-level percent complete."""


@dataclass(frozen=True)
class TimeMaterialBasis:
    """Revenue recognized as cost plus markup (or bill rate x hours)."""

    settings: ResolvedTMSettings


RevenueBasis = FixedPriceBasis | TimeMaterialBasis


def _or_default(value: Decimal | None, default: Decimal) -> Decimal:
    # Zero is treated as "not set", matching how the settings are entered.
    return value if value else default


def resolve_tm_settings(settings: TMSettings) -> ResolvedTMSettings:
    """Apply defaults: markups 1 (no markup), rate and hours 0."""
    return ResolvedTMSettings(
        labor_billing_type=settings.labor_billing_type,
        labor_bill_rate=_or_default(settings.labor_bill_rate, ZERO),
        labor_hours=_or_default(settings.labor_hours, ZERO),
        labor_markup=_or_default(settings.labor_markup, ONE),
        material_markup=_or_default(settings.material_markup, ONE),
        other_markup=_or_default(settings.other_markup, ONE),
    )


def resolve_revenue_basis(job: Job) -> RevenueBasis:
    """
    Resolve the job's revenue model.

    A time-material job without T&M settings is recognized as fixed price;
    there is nothing to mark up without them.

    Raises:
        UnsupportedJobTypeError: for a job type no basis exists for.
    """
    if job.job_type == JobType.TIME_MATERIAL:
        if job.tm_settings is None:
            return FixedPriceBasis()
        return TimeMaterialBasis(resolve_tm_settings(job.tm_settings))
    if job.job_type == JobType.FIXED_PRICE:
        return FixedPriceBasis()
    raise UnsupportedJobTypeError(job.job_type)


# ============================================================================
# Earned revenue
# ============================================================================


@dataclass(frozen=True)
class EarnedRevenue:
    """Earned revenue by component, in currency units."""

    labor: Decimal
    material: Decimal
    other: Decimal

    @property
    def total(self) -> Decimal:
        return self.labor + self.material + self.other


def component_percent_complete(cost: Decimal, cost_to_complete: Decimal) -> Decimal:
    """cost / (cost + ctc) as a fraction; 0 when nothing is forecast."""
    forecast = cost + cost_to_complete
    if forecast > ZERO:
        return cost / forecast
    return ZERO


def _time_material_earned(job: Job, settings: ResolvedTMSettings) -> EarnedRevenue:
    if settings.labor_billing_type == LaborBillingType.FIXED_RATE:
        labor = settings.labor_bill_rate * settings.labor_hours
    else:
        labor = job.costs.labor * settings.labor_markup
    return EarnedRevenue(
        labor=labor,
        material=job.costs.material * settings.material_markup,
        other=job.costs.other * settings.other_markup,
    )


def _fixed_price_earned(job: Job) -> EarnedRevenue:
    costs, ctc, contract = job.costs, job.cost_to_complete, job.contract
    return EarnedRevenue(
        labor=contract.labor * component_percent_complete(costs.labor, ctc.labor),
        material=contract.material * component_percent_complete(costs.material, ctc.material),
        other=contract.other * component_percent_complete(costs.other, ctc.other),
    )


@traced_engine("earned_revenue", "1.0", fingerprint_fields=("job",))
def calculate_earned_revenue(job: Job) -> EarnedRevenue:
    """
    Calculate earned revenue for a job based on its revenue basis.

    Preconditions:
        All breakdown components are finite Decimals.
    Postconditions:
        ``result.total == labor + material + other``.
    Raises:
        UnsupportedJobTypeError: if the job type has no revenue basis.
    """
    basis = resolve_revenue_basis(job)
    if isinstance(basis, TimeMaterialBasis):
        earned = _time_material_earned(job, basis.settings)
    elif isinstance(basis, FixedPriceBasis):
        earned = _fixed_price_earned(job)
    else:
        raise UnsupportedJobTypeError(basis)

    logger.debug("earned_revenue_calculated", extra={
        "job_no": job.job_no,
        "basis": type(basis).__name__,
        "earned_total": str(earned.total),
        "invoiced_total": str(sum_breakdown(job.invoiced)),
    })
    return earned
