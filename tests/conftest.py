"""
Pytest fixtures for the WIP job engine test suite.

Provides:
- Structured logging configuration and log capture
- Job / change-order / record factories
- A deterministic clock
"""

import json
import logging
from collections.abc import Callable
from datetime import date, datetime, timezone
from decimal import Decimal
from io import StringIO
from typing import Any

import pytest

from wip_config.schema import DEFAULT_THRESHOLDS, AnalyzerThresholds
from wip_kernel.domain.clock import DeterministicClock
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
from wip_kernel.domain.values import CostBreakdown
from wip_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)

# Fixed "now" used wherever a test needs an as-of date
AS_OF = datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture wip_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            calculate_earned_revenue(job)
            logs = captured_logs()
            assert any(r["message"] == "WIP_ENGINE_TRACE" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("wip_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Domain factories
# =============================================================================


def bd(labor: Any = 0, material: Any = 0, other: Any = 0) -> CostBreakdown:
    """Shorthand CostBreakdown constructor for tests."""
    return CostBreakdown.of(labor, material, other)


def make_job(**overrides: Any) -> Job:
    """
    Build a fixed-price job with sensible defaults.

    Default figures: contract 500k, budget 400k, costs 200k, CTC 200k,
    invoiced 250k, split 50/30/20 across labor/material/other.
    """
    fields: dict[str, Any] = {
        "contract": bd(250_000, 150_000, 100_000),
        "budget": bd(200_000, 120_000, 80_000),
        "costs": bd(100_000, 60_000, 40_000),
        "cost_to_complete": bd(100_000, 60_000, 40_000),
        "invoiced": bd(125_000, 75_000, 50_000),
        "id": "job-1",
        "job_no": "J-001",
        "job_name": "Test Job",
        "company_id": "co-1",
    }
    fields.update(overrides)
    return Job(**fields)


def make_tm_job(tm_settings: TMSettings | None = None, **overrides: Any) -> Job:
    """Build a time & material job (markup billing by default)."""
    settings = tm_settings or TMSettings(
        labor_billing_type=LaborBillingType.MARKUP,
        labor_markup=Decimal("1.5"),
        material_markup=Decimal("1.15"),
        other_markup=Decimal("1.10"),
    )
    overrides.setdefault("job_type", JobType.TIME_MATERIAL)
    return make_job(tm_settings=settings, **overrides)


def make_change_order(
    status: ChangeOrderStatus = ChangeOrderStatus.APPROVED,
    **overrides: Any,
) -> ChangeOrder:
    fields: dict[str, Any] = {
        "contract": bd(10_000, 5_000, 0),
        "costs": bd(2_000, 1_000, 0),
        "budget": bd(8_000, 4_000, 0),
        "invoiced": bd(5_000, 0, 0),
        "cost_to_complete": bd(6_000, 3_000, 0),
        "id": "co-1",
        "job_id": "job-1",
        "co_number": 1,
    }
    fields.update(overrides)
    return ChangeOrder(status=status, **fields)


def breakdown_record(labor: Any = 0, material: Any = 0, other: Any = 0) -> dict[str, Any]:
    return {"labor": labor, "material": material, "other": other}


def make_job_record(**overrides: Any) -> dict[str, Any]:
    """Plain camelCase job record, as received from storage or JSON."""
    record: dict[str, Any] = {
        "id": "job-1",
        "jobNo": "J-001",
        "jobName": "Test Job",
        "companyId": "co-1",
        "status": "Active",
        "jobType": "fixed-price",
        "contract": breakdown_record(250_000, 150_000, 100_000),
        "budget": breakdown_record(200_000, 120_000, 80_000),
        "costs": breakdown_record(100_000, 60_000, 40_000),
        "costToComplete": breakdown_record(100_000, 60_000, 40_000),
        "invoiced": breakdown_record(125_000, 75_000, 50_000),
        "startDate": "2024-01-01",
        "endDate": "2024-12-31",
        "targetEndDate": "2024-12-31",
    }
    record.update(overrides)
    return record


@pytest.fixture
def job_factory() -> Callable[..., Job]:
    return make_job


@pytest.fixture
def tm_job_factory() -> Callable[..., Job]:
    return make_tm_job


@pytest.fixture
def change_order_factory() -> Callable[..., ChangeOrder]:
    return make_change_order


@pytest.fixture
def job_record_factory() -> Callable[..., dict[str, Any]]:
    return make_job_record


@pytest.fixture
def phase_factory() -> Callable[..., MobilizationPhase]:
    def _make(
        phase_id: int = 1,
        enabled: bool = True,
        mobilize: date | None = None,
        demobilize: date | None = None,
        description: str = "",
    ) -> MobilizationPhase:
        return MobilizationPhase(
            id=phase_id,
            enabled=enabled,
            mobilize_date=mobilize,
            demobilize_date=demobilize,
            description=description,
        )

    return _make


# =============================================================================
# Clock / thresholds
# =============================================================================


@pytest.fixture
def deterministic_clock() -> DeterministicClock:
    return DeterministicClock(AS_OF)


@pytest.fixture
def thresholds() -> AnalyzerThresholds:
    return DEFAULT_THRESHOLDS


@pytest.fixture
def inactive_statuses() -> tuple[JobStatus, ...]:
    return (JobStatus.FUTURE, JobStatus.COMPLETED, JobStatus.ARCHIVED)
