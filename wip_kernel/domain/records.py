"""
Plain-record parsing (``wip_kernel.domain.records``).

Responsibility:
    Turns the plain-data input contract (mappings with camelCase keys, as
    produced by the persistence layer or a JSON payload) into the frozen
    domain objects the engines consume. This is the only place where input
    is validated; engines assume well-formed ``Job`` / ``ChangeOrder``
    objects.

Failure modes:
    - Missing breakdown or breakdown component -> ``MissingJobFieldError``.
    - Non-numeric / non-finite amount, unparseable date ->
      ``InvalidJobFieldError``.
    - Unknown ``jobType`` / ``status`` -> ``UnsupportedJobTypeError`` /
      ``InvalidJobFieldError``.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

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
from wip_kernel.domain.values import CostBreakdown, to_decimal
from wip_kernel.exceptions import (
    InvalidJobFieldError,
    MissingJobFieldError,
    UnsupportedJobTypeError,
)

TBD = "TBD"

_BREAKDOWN_COMPONENTS = ("labor", "material", "other")
_JOB_BREAKDOWNS = (
    ("contract", "contract"),
    ("budget", "budget"),
    ("costs", "costs"),
    ("costToComplete", "cost_to_complete"),
    ("invoiced", "invoiced"),
)


def parse_schedule_date(value: Any, field_name: str = "date") -> date | None:
    """
    Parse a schedule date, treating ``'TBD'`` as "not set".

    Accepts ``date`` / ``datetime`` objects and ISO-8601 strings (a full
    timestamp is truncated to its calendar date). ``None``, ``''`` and
    ``'TBD'`` return ``None``.

    Raises:
        InvalidJobFieldError: if a string is not a valid ISO date.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text or text.upper() == TBD:
            return None
        try:
            return date.fromisoformat(text)
        except ValueError:
            pass
        try:
            return datetime.fromisoformat(text).date()
        except ValueError:
            raise InvalidJobFieldError(field_name, value, "not an ISO date") from None
    raise InvalidJobFieldError(field_name, value, "not a date")


def parse_amount(value: Any, field_name: str) -> Decimal:
    """Parse a finite monetary amount or factor."""
    try:
        amount = to_decimal(value)
    except (TypeError, InvalidOperation):
        raise InvalidJobFieldError(field_name, value, "not a number") from None
    if not amount.is_finite():
        raise InvalidJobFieldError(field_name, value, "not finite")
    return amount


def _parse_optional_amount(data: Mapping[str, Any], key: str, field_name: str) -> Decimal | None:
    value = data.get(key)
    if value is None:
        return None
    return parse_amount(value, field_name)


def parse_breakdown(
    data: Mapping[str, Any],
    key: str,
    record_key: str | None = None,
) -> CostBreakdown:
    """
    Parse the ``{labor, material, other}`` mapping stored under ``key``.

    Raises:
        MissingJobFieldError: if the breakdown or one of its components is
            absent.
    """
    raw = data.get(key)
    if raw is None:
        raise MissingJobFieldError(key, record_key)
    if isinstance(raw, CostBreakdown):
        return raw
    if not isinstance(raw, Mapping):
        raise InvalidJobFieldError(key, raw, "expected a mapping of labor/material/other")

    components: dict[str, Decimal] = {}
    for component in _BREAKDOWN_COMPONENTS:
        name = f"{key}.{component}"
        if raw.get(component) is None:
            raise MissingJobFieldError(name, record_key)
        components[component] = parse_amount(raw[component], name)
    return CostBreakdown(**components)


def parse_job_type(value: Any) -> JobType:
    """Parse a job type; an absent value means fixed-price."""
    if value is None or value == "":
        return JobType.FIXED_PRICE
    try:
        return JobType(value)
    except ValueError:
        raise UnsupportedJobTypeError(value) from None


def parse_tm_settings(data: Mapping[str, Any] | None) -> TMSettings | None:
    """Parse ``tmSettings``; returns ``None`` when the mapping is absent."""
    if data is None:
        return None
    if isinstance(data, TMSettings):
        return data

    billing_raw = data.get("laborBillingType") or LaborBillingType.MARKUP.value
    try:
        billing_type = LaborBillingType(billing_raw)
    except ValueError:
        raise InvalidJobFieldError(
            "tmSettings.laborBillingType", billing_raw, "expected 'markup' or 'fixed-rate'"
        ) from None

    return TMSettings(
        labor_billing_type=billing_type,
        labor_bill_rate=_parse_optional_amount(data, "laborBillRate", "tmSettings.laborBillRate"),
        labor_hours=_parse_optional_amount(data, "laborHours", "tmSettings.laborHours"),
        labor_markup=_parse_optional_amount(data, "laborMarkup", "tmSettings.laborMarkup"),
        material_markup=_parse_optional_amount(data, "materialMarkup", "tmSettings.materialMarkup"),
        other_markup=_parse_optional_amount(data, "otherMarkup", "tmSettings.otherMarkup"),
    )


def parse_mobilization(data: Mapping[str, Any], index: int) -> MobilizationPhase:
    """Parse one mobilization phase; ``id`` defaults to its 1-based position."""
    prefix = f"mobilizations[{index}]"
    raw_id = data.get("id", index + 1)
    try:
        phase_id = int(raw_id)
    except (TypeError, ValueError):
        raise InvalidJobFieldError(f"{prefix}.id", raw_id, "not an integer") from None

    return MobilizationPhase(
        id=phase_id,
        enabled=bool(data.get("enabled", False)),
        mobilize_date=parse_schedule_date(data.get("mobilizeDate"), f"{prefix}.mobilizeDate"),
        demobilize_date=parse_schedule_date(data.get("demobilizeDate"), f"{prefix}.demobilizeDate"),
        description=data.get("description") or "",
    )


def job_from_record(record: Mapping[str, Any]) -> Job:
    """
    Build a ``Job`` from a plain record.

    Preconditions:
        - ``record`` carries the five breakdowns ``contract``, ``budget``,
          ``costs``, ``costToComplete`` and ``invoiced``.
    Postconditions:
        - Returns a frozen ``Job`` with Decimal amounts and TBD dates
          normalized to ``None``.
    Raises:
        MissingJobFieldError, InvalidJobFieldError, UnsupportedJobTypeError.
    """
    record_key = _record_key(record)
    breakdowns = {
        attr: parse_breakdown(record, key, record_key) for key, attr in _JOB_BREAKDOWNS
    }

    status_raw = record.get("status") or JobStatus.ACTIVE.value
    try:
        status = JobStatus(status_raw)
    except ValueError:
        raise InvalidJobFieldError("status", status_raw, "unknown job status") from None

    mobilizations = tuple(
        parse_mobilization(phase, i)
        for i, phase in enumerate(record.get("mobilizations") or ())
    )

    return Job(
        job_type=parse_job_type(record.get("jobType")),
        tm_settings=parse_tm_settings(record.get("tmSettings")),
        start_date=parse_schedule_date(record.get("startDate"), "startDate"),
        end_date=parse_schedule_date(record.get("endDate"), "endDate"),
        target_end_date=parse_schedule_date(record.get("targetEndDate"), "targetEndDate"),
        mobilizations=mobilizations,
        target_profit=_parse_optional_amount(record, "targetProfit", "targetProfit"),
        target_margin=_parse_optional_amount(record, "targetMargin", "targetMargin"),
        id=str(record.get("id") or ""),
        job_no=str(record.get("jobNo") or ""),
        job_name=str(record.get("jobName") or ""),
        company_id=record.get("companyId"),
        status=status,
        **breakdowns,
    )


def change_order_from_record(record: Mapping[str, Any]) -> ChangeOrder:
    """Build a ``ChangeOrder`` from a plain record (all breakdowns required)."""
    record_key = str(record.get("id") or "") or None
    status_raw = record.get("status")
    if status_raw is None:
        raise MissingJobFieldError("status", record_key)
    try:
        status = ChangeOrderStatus(status_raw)
    except ValueError:
        raise InvalidJobFieldError("status", status_raw, "unknown change order status") from None

    breakdowns = {
        attr: parse_breakdown(record, key, record_key) for key, attr in _JOB_BREAKDOWNS
    }
    co_number = record.get("coNumber")
    if co_number is not None:
        try:
            co_number = int(co_number)
        except (TypeError, ValueError):
            raise InvalidJobFieldError("coNumber", co_number, "not an integer") from None
    return ChangeOrder(
        status=status,
        id=str(record.get("id") or ""),
        job_id=str(record.get("jobId") or ""),
        co_number=co_number,
        description=record.get("description") or "",
        **breakdowns,
    )


def _record_key(record: Mapping[str, Any]) -> str | None:
    key = record.get("jobNo") or record.get("id")
    return str(key) if key else None
