"""
Job and change-order domain objects.

All objects are frozen: a job is immutable for the duration of a
calculation call, and engines never mutate their inputs. Schedule dates
are ``date | None`` where ``None`` stands for the ``'TBD'`` sentinel, so
no date-dependent calculation can mistake "not set" for a real date.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from wip_kernel.domain.values import CostBreakdown


class JobType(str, Enum):
    """Revenue-recognition model of a job."""

    FIXED_PRICE = "fixed-price"
    TIME_MATERIAL = "time-material"


class LaborBillingType(str, Enum):
    """How labor is billed on a time & material job."""

    MARKUP = "markup"  # labor cost x markup
    FIXED_RATE = "fixed-rate"  # bill rate x hours


def _as_date(value: date | None) -> date | None:
    # datetime is a date subclass but does not compare with one
    if isinstance(value, datetime):
        return value.date()
    return value


class JobStatus(str, Enum):
    FUTURE = "Future"
    ACTIVE = "Active"
    ON_HOLD = "On Hold"
    COMPLETED = "Completed"
    ARCHIVED = "Archived"


class ChangeOrderStatus(str, Enum):
    """Lifecycle status of a change order."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    COMPLETED = "completed"

    @property
    def counts_toward_totals(self) -> bool:
        """Only approved or completed change orders affect job totals."""
        return self in (ChangeOrderStatus.APPROVED, ChangeOrderStatus.COMPLETED)


@dataclass(frozen=True)
class TMSettings:
    """
    Time & material billing settings as supplied by the caller.

    Markups are multiplicative factors (1.5 = 50% markup). Any field may be
    absent; defaults are applied in one place by
    ``wip_engines.earned_revenue.resolve_tm_settings``.
    """

    labor_billing_type: LaborBillingType = LaborBillingType.MARKUP
    labor_bill_rate: Decimal | None = None
    labor_hours: Decimal | None = None
    labor_markup: Decimal | None = None
    material_markup: Decimal | None = None
    other_markup: Decimal | None = None


@dataclass(frozen=True)
class MobilizationPhase:
    """One mobilize/demobilize window of a job. ``None`` dates are TBD."""

    id: int
    enabled: bool
    mobilize_date: date | None = None
    demobilize_date: date | None = None
    description: str = ""

    def __post_init__(self) -> None:
        for attr in ("mobilize_date", "demobilize_date"):
            object.__setattr__(self, attr, _as_date(getattr(self, attr)))


@dataclass(frozen=True)
class Job:
    """
    The subset of a job record the calculation engines consume.

    ``tm_settings`` is only meaningful when ``job_type`` is time-material.
    ``target_profit`` / ``target_margin`` override the contract-minus-budget
    original targets when present.
    """

    contract: CostBreakdown
    budget: CostBreakdown
    costs: CostBreakdown
    cost_to_complete: CostBreakdown
    invoiced: CostBreakdown
    job_type: JobType = JobType.FIXED_PRICE
    tm_settings: TMSettings | None = None
    start_date: date | None = None
    end_date: date | None = None
    target_end_date: date | None = None
    mobilizations: tuple[MobilizationPhase, ...] = ()
    target_profit: Decimal | None = None
    target_margin: Decimal | None = None
    id: str = ""
    job_no: str = ""
    job_name: str = ""
    company_id: str | None = None
    status: JobStatus = JobStatus.ACTIVE

    def __post_init__(self) -> None:
        for attr in ("start_date", "end_date", "target_end_date"):
            object.__setattr__(self, attr, _as_date(getattr(self, attr)))


@dataclass(frozen=True)
class ChangeOrder:
    """A contract modification; only approved/completed ones count."""

    status: ChangeOrderStatus
    contract: CostBreakdown = field(default_factory=CostBreakdown.zero)
    costs: CostBreakdown = field(default_factory=CostBreakdown.zero)
    budget: CostBreakdown = field(default_factory=CostBreakdown.zero)
    invoiced: CostBreakdown = field(default_factory=CostBreakdown.zero)
    cost_to_complete: CostBreakdown = field(default_factory=CostBreakdown.zero)
    id: str = ""
    job_id: str = ""
    co_number: int | None = None
    description: str = ""
