"""Tests for time-value primitives and rounding helpers."""

import pytest
from retirement_diag_kr.tvm import (
    annuity_payment,
    compound_future_value,
    future_value_with_contribution,
    growing_contribution_future_value,
    percent_breakdown,
    round_half_up,
    safe_ratio,
)


class TestRoundHalfUp:
    def test_halves_round_up(self):
        assert round_half_up(0.5) == 1
        assert round_half_up(1.5) == 2
        assert round_half_up(2.5) == 3

    def test_negative_half_rounds_toward_positive(self):
        assert round_half_up(-0.5) == 0
        assert round_half_up(-1.5) == -1

    def test_returns_int_without_digits(self):
        assert isinstance(round_half_up(83.33), int)

    def test_with_digits(self):
        assert round_half_up(2.25, 1) == pytest.approx(2.3)


class TestSafeRatio:
    def test_normal(self):
        assert safe_ratio(3, 4) == 0.75

    def test_zero_denominator(self):
        assert safe_ratio(1, 0) == 0

    def test_infinite_denominator(self):
        assert safe_ratio(1, float("inf")) == 0


class TestPercentBreakdown:
    def test_residual_goes_to_last_key(self):
        result = percent_breakdown({"a": 1, "b": 1, "c": 1})
        assert result == {"a": 33, "b": 33, "c": 34}

    def test_sums_to_100(self):
        result = percent_breakdown({"a": 2, "b": 1})
        assert result == {"a": 67, "b": 33}
        assert sum(result.values()) == 100

    def test_all_zero_when_total_zero(self):
        assert percent_breakdown({"a": 0, "b": 0}) == {"a": 0, "b": 0}

    def test_empty(self):
        assert percent_breakdown({}) == {}


class TestCompoundFutureValue:
    def test_two_years(self):
        assert compound_future_value(100, 0.05, 2) == pytest.approx(110.25)

    def test_negative_horizon_is_zero(self):
        assert compound_future_value(100, 0.05, -3) == 100


class TestFutureValueWithContribution:
    def test_deposit_then_grow(self):
        """(0 + 120) × 1.1 = 132 → (132 + 120) × 1.1 = 277.2"""
        assert future_value_with_contribution(0, 10, 1, 0.1) == pytest.approx(132)
        assert future_value_with_contribution(0, 10, 2, 0.1) == pytest.approx(277.2)

    def test_zero_years_returns_balance(self):
        assert future_value_with_contribution(500, 10, 0, 0.05) == 500

    def test_negative_years_returns_balance(self):
        assert future_value_with_contribution(500, 10, -2, 0.05) == 500


class TestAnnuityPayment:
    def test_zero_rate(self):
        assert annuity_payment(1200, 20, 0) == 60

    def test_zero_present_value(self):
        assert annuity_payment(0, 20, 0.05) == 0

    def test_zero_years(self):
        assert annuity_payment(1000, 0, 0.05) == 0

    def test_exhausts_balance(self):
        """Balance keeps earning the rate and reaches zero after the last withdrawal."""
        pmt = annuity_payment(1000, 10, 0.05)
        balance = 1000.0
        for _ in range(10):
            balance = balance * 1.05 - pmt
        assert balance == pytest.approx(0, abs=1e-9)


class TestGrowingContribution:
    def test_matches_year_by_year(self):
        expected = 0.0
        for k in range(15):
            expected = expected * 1.05 + 1200 * 1.02 ** k
        assert growing_contribution_future_value(1200, 15, 0.05, 0.02) == pytest.approx(expected)

    def test_equal_rates_use_limit(self):
        result = growing_contribution_future_value(100, 10, 0.05, 0.05)
        assert result == pytest.approx(100 * 10 * 1.05 ** 9)

    def test_near_equal_rates_stay_finite(self):
        result = growing_contribution_future_value(100, 10, 0.05, 0.0499)
        assert result == pytest.approx(100 * 10 * 1.05 ** 9)

    def test_zero_years(self):
        assert growing_contribution_future_value(1200, 0, 0.05, 0.02) == 0

    def test_no_contribution(self):
        assert growing_contribution_future_value(0, 10, 0.05, 0.02) == 0
        assert growing_contribution_future_value(-100, 10, 0.05, 0.02) == 0
