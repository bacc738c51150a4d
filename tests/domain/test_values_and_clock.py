"""Tests for CostBreakdown, to_decimal and the injectable clocks."""

from dataclasses import FrozenInstanceError
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal, InvalidOperation

import pytest

from wip_kernel.domain.clock import DeterministicClock, SystemClock
from wip_kernel.domain.values import CostBreakdown, to_decimal


class TestToDecimal:
    def test_float_goes_through_str(self):
        assert to_decimal(0.1) == Decimal("0.1")

    def test_int_and_string(self):
        assert to_decimal(5) == Decimal("5")
        assert to_decimal(" 12.50 ") == Decimal("12.50")

    def test_bool_rejected(self):
        with pytest.raises(TypeError):
            to_decimal(True)

    def test_unsupported_type_rejected(self):
        with pytest.raises(TypeError):
            to_decimal([1])

    def test_bad_string_raises_invalid_operation(self):
        with pytest.raises(InvalidOperation):
            to_decimal("twelve")


class TestCostBreakdown:
    def test_components_coerced_to_decimal(self):
        breakdown = CostBreakdown(1, 2.5, "3")
        assert breakdown.labor == Decimal("1")
        assert breakdown.material == Decimal("2.5")
        assert breakdown.other == Decimal("3")

    def test_total(self):
        assert CostBreakdown.of(100, 200, 300).total == Decimal("600")

    def test_zero(self):
        assert CostBreakdown.zero().total == Decimal("0")

    def test_negative_components_allowed(self):
        assert CostBreakdown.of(-50, 0, 0).total == Decimal("-50")

    def test_frozen(self):
        breakdown = CostBreakdown.zero()
        with pytest.raises(FrozenInstanceError):
            breakdown.labor = Decimal("1")  # type: ignore[misc]

    def test_hashable_and_equal(self):
        assert CostBreakdown.of(1, 2, 3) == CostBreakdown(Decimal(1), Decimal(2), Decimal(3))
        assert len({CostBreakdown.of(1, 2, 3), CostBreakdown.of(1, 2, 3)}) == 1

    def test_as_dict(self):
        assert CostBreakdown.of(1, 2, 3).as_dict() == {
            "labor": Decimal("1"), "material": Decimal("2"), "other": Decimal("3"),
        }


class TestClocks:
    def test_deterministic_clock_is_stable(self):
        clock = DeterministicClock(datetime(2024, 6, 1, 12, tzinfo=timezone.utc))
        assert clock.now() == clock.now()

    def test_advance_and_set_time(self):
        start = datetime(2024, 6, 1, 12, tzinfo=timezone.utc)
        clock = DeterministicClock(start)
        clock.advance(90)
        assert clock.now() == start + timedelta(seconds=90)
        clock.set_time(start)
        assert clock.now() == start

    def test_today_is_utc_date(self):
        clock = DeterministicClock(datetime(2024, 6, 1, 23, 30, tzinfo=timezone.utc))
        assert clock.today() == date(2024, 6, 1)

    def test_system_clock_is_timezone_aware(self):
        assert SystemClock().now().tzinfo is not None
