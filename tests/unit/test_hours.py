"""Unit tests for hour arithmetic helpers."""

from decimal import Decimal

import pytest

from src.tb_common.hours import calculate_cost, hours_to_display, to_hours, validate_hours


class TestToHours:
    def test_int(self) -> None:
        assert to_hours(2) == Decimal("2.00")

    def test_float_goes_through_str(self) -> None:
        assert to_hours(1.1) == Decimal("1.10")
        assert str(to_hours(1.5)) == "1.50"

    def test_string(self) -> None:
        assert to_hours("0.333") == Decimal("0.33")

    def test_rounds_half_up(self) -> None:
        assert to_hours("0.125") == Decimal("0.13")

    def test_garbage_raises_value_error(self) -> None:
        with pytest.raises(ValueError):
            to_hours("two hours")


class TestValidateHours:
    def test_positive_ok(self) -> None:
        validate_hours(Decimal("0.01"))

    @pytest.mark.parametrize("value", ["0", "-1"])
    def test_non_positive_raises(self, value: str) -> None:
        with pytest.raises(ValueError):
            validate_hours(Decimal(value))


class TestHoursToDisplay:
    def test_whole(self) -> None:
        assert hours_to_display(Decimal("15.00")) == "15h"

    def test_fraction(self) -> None:
        assert hours_to_display(Decimal("1.50")) == "1.5h"

    def test_negative(self) -> None:
        assert hours_to_display(Decimal("-2.25")) == "-2.25h"

    def test_ten_does_not_become_exponent(self) -> None:
        assert hours_to_display(Decimal("10")) == "10h"


class TestCalculateCost:
    def test_rate_one(self) -> None:
        assert calculate_cost(Decimal("3"), Decimal("1")) == Decimal("3.00")

    def test_fractional_rate(self) -> None:
        assert calculate_cost(Decimal("1.5"), Decimal("1.5")) == Decimal("2.25")
