"""
Tests for the smart risk analyzer (wip_engines.risk).

Covers:
- Underbilling tiers relative to contract value
- Schedule drift from time elapsed vs money spent
- Margin fade in points
- Zero-denominator guards
"""

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from tests.conftest import bd, make_job
from wip_config.schema import AnalyzerThresholds, RiskThresholds
from wip_engines.risk import (
    RiskLevel,
    analyze_job_risk,
    calculate_margin_fade,
    calculate_schedule_drift,
    calculate_underbilling_risk,
)


def _underbilling_job(invoiced_total: int):
    # contract 100k, budget 80k, costs 40k -> 50% complete, earned 50k
    return make_job(
        contract=bd(100_000, 0, 0),
        budget=bd(80_000, 0, 0),
        costs=bd(40_000, 0, 0),
        cost_to_complete=bd(40_000, 0, 0),
        invoiced=bd(invoiced_total, 0, 0),
    )


class TestUnderbillingRisk:
    def test_high_when_underbilled_by_12_percent(self):
        assert calculate_underbilling_risk(_underbilling_job(38_000)) == RiskLevel.HIGH

    def test_low_when_underbilled_by_3_percent(self):
        assert calculate_underbilling_risk(_underbilling_job(47_000)) == RiskLevel.LOW

    def test_medium_band(self):
        assert calculate_underbilling_risk(_underbilling_job(43_000)) == RiskLevel.MEDIUM

    def test_exact_boundaries_fall_to_lower_tier(self):
        # ratio -0.10 is not < -0.10
        assert calculate_underbilling_risk(_underbilling_job(40_000)) == RiskLevel.MEDIUM
        # ratio -0.05 is not < -0.05
        assert calculate_underbilling_risk(_underbilling_job(45_000)) == RiskLevel.LOW

    def test_over_billed_is_low(self):
        assert calculate_underbilling_risk(_underbilling_job(90_000)) == RiskLevel.LOW

    def test_zero_contract_is_none_not_low(self):
        job = make_job(contract=bd(0, 0, 0))
        assert calculate_underbilling_risk(job) == RiskLevel.NONE

    def test_zero_budget_means_nothing_earned(self):
        job = make_job(budget=bd(0, 0, 0), invoiced=bd(0, 0, 0))
        assert calculate_underbilling_risk(job) == RiskLevel.LOW

    def test_percent_complete_capped_at_one(self):
        # costs 2x budget still earns at most the full contract
        job = _underbilling_job(100_000)
        job = make_job(
            contract=job.contract, budget=job.budget,
            costs=bd(160_000, 0, 0), cost_to_complete=bd(0, 0, 0),
            invoiced=bd(100_000, 0, 0),
        )
        assert calculate_underbilling_risk(job) == RiskLevel.LOW

    def test_thresholds_configurable(self):
        strict = AnalyzerThresholds(risk=RiskThresholds(
            underbilling_high_ratio=Decimal("0.02"),
            underbilling_medium_ratio=Decimal("0.01"),
        ))
        assert calculate_underbilling_risk(_underbilling_job(47_000), strict) == RiskLevel.HIGH


class TestScheduleDrift:
    START = date(2024, 1, 1)
    END = date(2024, 12, 30)  # 364 days = 52 weeks

    def _job(self, cost_fraction: str, **overrides):
        budget = Decimal("100000")
        fields = {
            "start_date": self.START,
            "end_date": self.END,
            "budget": bd(budget, 0, 0),
            "costs": bd(budget * Decimal(cost_fraction), 0, 0),
        }
        fields.update(overrides)
        return make_job(**fields)

    def test_half_time_quarter_spend_is_13_weeks(self):
        as_of = date(2024, 7, 1)  # 182 days in = 50% elapsed
        assert calculate_schedule_drift(self._job("0.25"), as_of) == 13

    def test_within_noise_is_zero(self):
        as_of = date(2024, 7, 1)
        assert calculate_schedule_drift(self._job("0.45"), as_of) == 0

    def test_ahead_of_schedule_is_zero(self):
        assert calculate_schedule_drift(self._job("0.90"), date(2024, 7, 1)) == 0

    def test_tbd_dates_are_zero(self):
        assert calculate_schedule_drift(self._job("0", start_date=None), date(2024, 7, 1)) == 0
        assert calculate_schedule_drift(self._job("0", end_date=None), date(2024, 7, 1)) == 0

    def test_not_started_is_zero(self):
        assert calculate_schedule_drift(self._job("0"), date(2023, 12, 1)) == 0

    def test_non_positive_duration_is_zero(self):
        job = self._job("0", end_date=self.START)
        assert calculate_schedule_drift(job, date(2024, 7, 1)) == 0

    def test_drift_wider_than_default_precision(self):
        job = self._job(
            "0",
            budget=bd(Decimal("0.01"), 0, 0),
            costs=bd(Decimal("-1E27"), 0, 0),
        )
        assert calculate_schedule_drift(job, date(2024, 7, 1)) > 10**30

    def test_zero_budget_is_zero(self):
        job = self._job("0", budget=bd(0, 0, 0), costs=bd(0, 0, 0))
        assert calculate_schedule_drift(job, date(2024, 7, 1)) == 0

    def test_accepts_aware_datetime(self):
        as_of = datetime(2024, 7, 1, tzinfo=timezone.utc)
        assert calculate_schedule_drift(self._job("0.25"), as_of) == 13

    def test_result_is_non_negative_int(self):
        drift = calculate_schedule_drift(self._job("0"), date(2025, 6, 1))
        assert isinstance(drift, int)
        assert drift >= 0


class TestMarginFade:
    def test_ten_point_fade(self):
        job = make_job(
            contract=bd(500_000, 0, 0),
            budget=bd(400_000, 0, 0),
            costs=bd(300_000, 0, 0),
            cost_to_complete=bd(150_000, 0, 0),
        )
        fade = calculate_margin_fade(job)
        assert fade.fade_percent == Decimal("10.0")
        assert fade.is_fading is True

    def test_on_budget_is_not_fading(self):
        fade = calculate_margin_fade(make_job())
        assert fade.fade_percent == Decimal("0.0")
        assert fade.is_fading is False

    def test_two_points_is_not_fading(self):
        job = make_job(
            contract=bd(100_000, 0, 0),
            budget=bd(80_000, 0, 0),
            costs=bd(40_000, 0, 0),
            cost_to_complete=bd(42_000, 0, 0),
        )
        fade = calculate_margin_fade(job)
        assert fade.fade_percent == Decimal("2.0")
        assert fade.is_fading is False

    def test_improving_margin_is_negative(self):
        job = make_job(
            contract=bd(100_000, 0, 0),
            budget=bd(80_000, 0, 0),
            costs=bd(40_000, 0, 0),
            cost_to_complete=bd(30_000, 0, 0),
        )
        assert calculate_margin_fade(job).fade_percent == Decimal("-10.0")

    def test_zero_contract(self):
        fade = calculate_margin_fade(make_job(contract=bd(0, 0, 0)))
        assert fade.fade_percent == Decimal("0")
        assert fade.is_fading is False

    def test_fade_wider_than_default_precision(self):
        # 29 integer digits plus one decimal place
        job = make_job(contract=bd(1, 0, 0), budget=bd(Decimal("1E27"), 0, 0))
        fade = calculate_margin_fade(job)
        assert fade.fade_percent == (Decimal("400000") - Decimal("1E27")) * 100
        assert fade.is_fading is False


class TestAnalyzeJobRisk:
    def test_composes_all_three(self):
        job = make_job(
            contract=bd(500_000, 0, 0),
            budget=bd(400_000, 0, 0),
            costs=bd(300_000, 0, 0),
            cost_to_complete=bd(150_000, 0, 0),
            invoiced=bd(500_000, 0, 0),
            start_date=date(2024, 1, 1),
            end_date=date(2024, 12, 30),
        )
        analysis = analyze_job_risk(job, date(2024, 7, 1))
        assert analysis.underbilling_risk == RiskLevel.LOW
        assert analysis.schedule_drift_weeks == 0
        assert analysis.margin_fade_percent == Decimal("10.0")
        assert analysis.is_margin_fading is True

    @pytest.mark.parametrize("level", list(RiskLevel))
    def test_risk_level_values_are_display_strings(self, level):
        assert level.value in {"Low", "Medium", "High", "None"}
