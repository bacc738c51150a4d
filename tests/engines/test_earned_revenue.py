"""
Tests for earned revenue recognition (wip_engines.earned_revenue).

Covers:
- Fixed price: component-level percent complete
- Time & material: markup and fixed-rate labor billing
- T&M settings defaults
- Revenue basis resolution and unsupported types
"""

from decimal import Decimal

import pytest

from tests.conftest import bd, make_job, make_tm_job
from wip_engines.earned_revenue import (
    FixedPriceBasis,
    TimeMaterialBasis,
    calculate_earned_revenue,
    component_percent_complete,
    resolve_revenue_basis,
    resolve_tm_settings,
)
from wip_engines.forecast import calculate_percent_complete
from wip_kernel.domain.job import JobType, LaborBillingType, TMSettings
from wip_kernel.exceptions import UnsupportedJobTypeError


class TestFixedPriceEarnedRevenue:
    """Per-component cost-to-cost recognition."""

    def test_half_complete_labor(self):
        job = make_job(
            contract=bd(100_000, 0, 0),
            costs=bd(50_000, 0, 0),
            cost_to_complete=bd(50_000, 0, 0),
        )
        earned = calculate_earned_revenue(job)
        assert earned.labor == Decimal("50000")

    def test_zero_forecast_component_earns_nothing(self):
        job = make_job(
            contract=bd(100_000, 40_000, 10_000),
            costs=bd(0, 20_000, 0),
            cost_to_complete=bd(0, 20_000, 0),
        )
        earned = calculate_earned_revenue(job)
        assert earned.labor == Decimal("0")
        assert earned.material == Decimal("20000")
        assert earned.other == Decimal("0")

    def test_total_is_sum_of_components(self):
        earned = calculate_earned_revenue(make_job())
        assert earned.total == earned.labor + earned.material + earned.other
        # default factory job is exactly 50% complete on every component
        assert earned.total == Decimal("250000")

    def test_component_level_differs_from_blended(self):
        """Mixed completion across components must not be blended."""
        job = make_job(
            contract=bd(100_000, 100_000, 0),
            costs=bd(10_000, 90_000, 0),
            cost_to_complete=bd(10_000, 10_000, 0),
        )
        component_level = calculate_earned_revenue(job).total
        blended = calculate_percent_complete(job) / 100 * (job.contract.total)

        assert component_level == Decimal("140000")
        assert blended.quantize(Decimal("0.01")) == Decimal("166666.67")
        assert component_level != blended

    def test_overrun_can_exceed_contract_share(self):
        # negative CTC (credit) pushes a component past 100%
        job = make_job(
            contract=bd(100_000, 0, 0),
            costs=bd(60_000, 0, 0),
            cost_to_complete=bd(-10_000, 0, 0),
        )
        assert calculate_earned_revenue(job).labor == Decimal("120000")


class TestComponentPercentComplete:
    @pytest.mark.parametrize("cost,ctc,expected", [
        ("50", "50", "0.5"),
        ("0", "0", "0"),
        ("10", "-10", "0"),
        ("30", "0", "1"),
    ])
    def test_fraction(self, cost, ctc, expected):
        assert component_percent_complete(Decimal(cost), Decimal(ctc)) == Decimal(expected)


class TestTimeMaterialEarnedRevenue:
    def test_markup_billing(self):
        job = make_tm_job(costs=bd(10_000, 20_000, 1_000))
        earned = calculate_earned_revenue(job)
        assert earned.labor == Decimal("15000.0")
        assert earned.material == Decimal("23000.00")
        assert earned.other == Decimal("1100.00")

    def test_fixed_rate_labor(self):
        job = make_tm_job(
            tm_settings=TMSettings(
                labor_billing_type=LaborBillingType.FIXED_RATE,
                labor_bill_rate=Decimal("75"),
                labor_hours=Decimal("40"),
            ),
            costs=bd(99_999, 0, 0),
        )
        assert calculate_earned_revenue(job).labor == Decimal("3000")

    def test_fixed_rate_without_hours_is_zero(self):
        job = make_tm_job(
            tm_settings=TMSettings(
                labor_billing_type=LaborBillingType.FIXED_RATE,
                labor_bill_rate=Decimal("75"),
            ),
        )
        assert calculate_earned_revenue(job).labor == Decimal("0")

    def test_missing_markups_default_to_cost(self):
        job = make_tm_job(tm_settings=TMSettings(), costs=bd(1_000, 2_000, 3_000))
        earned = calculate_earned_revenue(job)
        assert earned.total == Decimal("6000")

    def test_tm_ignores_cost_to_complete(self):
        a = make_tm_job(cost_to_complete=bd(0, 0, 0))
        b = make_tm_job(cost_to_complete=bd(500_000, 0, 0))
        assert calculate_earned_revenue(a) == calculate_earned_revenue(b)


class TestRevenueBasis:
    def test_fixed_price(self):
        assert isinstance(resolve_revenue_basis(make_job()), FixedPriceBasis)

    def test_time_material(self):
        basis = resolve_revenue_basis(make_tm_job())
        assert isinstance(basis, TimeMaterialBasis)
        assert basis.settings.labor_markup == Decimal("1.5")

    def test_time_material_without_settings_is_fixed_price(self):
        job = make_job(job_type=JobType.TIME_MATERIAL, tm_settings=None)
        assert isinstance(resolve_revenue_basis(job), FixedPriceBasis)

    def test_unknown_job_type_raises(self):
        job = make_job(job_type="cost-plus")
        with pytest.raises(UnsupportedJobTypeError):
            calculate_earned_revenue(job)

    def test_zero_settings_take_defaults(self):
        resolved = resolve_tm_settings(TMSettings(
            labor_markup=Decimal("0"), labor_hours=Decimal("0"),
        ))
        assert resolved.labor_markup == Decimal("1")
        assert resolved.labor_hours == Decimal("0")
        assert resolved.labor_billing_type == LaborBillingType.MARKUP


class TestEarnedRevenueTrace:
    def test_emits_engine_trace(self, captured_logs):
        calculate_earned_revenue(make_job())
        traces = [r for r in captured_logs() if r["message"] == "WIP_ENGINE_TRACE"]
        assert traces
        assert traces[-1]["engine_name"] == "earned_revenue"
        assert len(traces[-1]["input_fingerprint"]) == 16
