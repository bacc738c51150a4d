"""
Pure domain layer.

Immutable value objects and record parsing with NO dependencies on
storage, network or the system clock (``SystemClock`` aside).
"""

from wip_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from wip_kernel.domain.job import (
    ChangeOrder,
    ChangeOrderStatus,
    Job,
    JobStatus,
    JobType,
    LaborBillingType,
    MobilizationPhase,
    TMSettings,
)
from wip_kernel.domain.records import (
    change_order_from_record,
    job_from_record,
    parse_schedule_date,
)
from wip_kernel.domain.values import CostBreakdown, to_decimal

__all__ = [
    # Clock
    "Clock",
    "DeterministicClock",
    "SystemClock",
    # Values
    "CostBreakdown",
    "to_decimal",
    # Job model
    "ChangeOrder",
    "ChangeOrderStatus",
    "Job",
    "JobStatus",
    "JobType",
    "LaborBillingType",
    "MobilizationPhase",
    "TMSettings",
    # Records
    "change_order_from_record",
    "job_from_record",
    "parse_schedule_date",
]
