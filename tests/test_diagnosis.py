"""Tests for the retirement diagnosis calculator."""

from datetime import date
from typing import get_type_hints

import pytest
from retirement_diag_kr.diagnosis import DiagnosisMetrics, Verdict, diagnose, outlasts_life_expectancy
from retirement_diag_kr.household import ExpenseCategory, NationalPension, Owner
from retirement_diag_kr.params import Assumptions, InvalidAssumption
from retirement_diag_kr.position import FinancialPosition, PersonProfile
from retirement_diag_kr.scenarios import RetirementScenario


def _position(age: int = 40, retirement_age: int = 60, **overrides) -> FinancialPosition:
    """Reference household: income 500, expense 300, national pension 100."""
    base = dict(
        as_of=date(2026, 1, 1),
        people=(PersonProfile(Owner.SELF, age, retirement_age),),
        life_expectancy=90,
        monthly_income=500,
        living_expense_breakdown={ExpenseCategory.FOOD: 300.0},
        real_estate_asset=5,
        cash_asset=1,
        pension_asset=0.3,
        national_pensions=(NationalPension(Owner.SELF, 100),),
    )
    base.update(overrides)
    return FinancialPosition(**base)


class TestReferenceHousehold:
    """Golden expectations for the reference household."""

    def setup_method(self):
        self.m = diagnose(_position())

    def test_horizon(self):
        assert self.m.years_to_retirement == 20
        assert self.m.retirement_years == 30
        assert self.m.effective_retirement_age == 60

    def test_current_gap(self):
        assert self.m.current_monthly_expense == 300
        assert self.m.current_monthly_gap == 200
        assert self.m.savings_rate == pytest.approx(0.4)

    def test_pension_income(self):
        assert self.m.pension_income == pytest.approx(100 * 1.02 ** 25)
        assert self.m.national_pension_monthly == pytest.approx(100 * 1.02 ** 25)

    def test_projected_expense(self):
        assert self.m.projected_expense == pytest.approx(300 * 1.02 ** 20 * 0.7)

    def test_coverage(self):
        expected_gap = 100 * 1.02 ** 25 - 300 * 1.02 ** 20 * 0.7
        assert self.m.coverage_gap == pytest.approx(expected_gap)
        assert self.m.coverage_rate == pytest.approx(100 * 1.02 ** 25 / (300 * 1.02 ** 20 * 0.7))

    def test_liquid_asset(self):
        surplus_stream = 2400 * (1.05 ** 20 - 1.02 ** 20) / 0.03
        expected = 1 * 1.05 ** 20 + surplus_stream + 0.3 * 1.04 ** 20
        assert self.m.liquid_asset_at_retirement == pytest.approx(expected)

    def test_verdict(self):
        assert self.m.verdict == Verdict.CONDITIONAL
        assert self.m.verdict_label == "조건부 가능"
        assert self.m.is_asset_sustainable

    def test_depletion(self):
        assert self.m.raw_depletion_age == 112
        assert self.m.depletion_age == 91

    def test_demand_supply(self):
        assert self.m.total_demand == pytest.approx(30 * self.m.projected_expense * 12)
        expected_supply = 30 * self.m.pension_income * 12 + self.m.liquid_asset_at_retirement
        assert self.m.total_supply == pytest.approx(expected_supply)
        assert self.m.supply_ratio == pytest.approx(expected_supply / self.m.total_demand * 100)

    def test_ratios_sum_to_100(self):
        for ratios in (self.m.asset_ratios, self.m.expense_ratios, self.m.retirement_asset_ratios):
            assert sum(ratios.values()) == 100
        assert self.m.expense_ratios == {"fixed": 0, "variable": 100}

    def test_debt_ratios_all_zero_without_debt(self):
        assert set(self.m.debt_ratios.values()) == {0}

    def test_living_cost_benchmarks(self):
        assert self.m.min_living_cost == pytest.approx(248 * 1.03 ** 20)
        assert self.m.adequate_living_cost == pytest.approx(350 * 1.03 ** 20)

    def test_idempotent(self):
        assert diagnose(_position()) == self.m


class TestVerdicts:
    def test_possible_when_pension_covers_expense(self):
        m = diagnose(_position(national_pensions=(NationalPension(Owner.SELF, 1000),)))
        assert m.verdict == Verdict.POSSIBLE
        assert m.annual_shortfall == 0
        assert m.years_of_withdrawal == 999
        assert m.depletion_age == 91

    def test_difficult_without_assets(self):
        pos = _position(
            monthly_income=300, real_estate_asset=0, cash_asset=0, pension_asset=0,
            national_pensions=(),
        )
        m = diagnose(pos)
        assert m.verdict == Verdict.DIFFICULT
        assert m.liquid_asset_at_retirement == 0
        assert m.years_of_withdrawal == 0
        assert m.depletion_age == 60
        assert not m.is_asset_sustainable

    def test_depletion_never_exceeds_life_plus_one(self):
        for offset in (-10, 0, 10):
            m = diagnose(_position(), {"retirement_age_offset": offset})
            assert m.depletion_age <= m.life_expectancy + 1


class TestOutlastsLifeExpectancy:
    def test_strictly_past_life(self):
        assert outlasts_life_expectancy(91, 90)
        assert not outlasts_life_expectancy(90, 90)

    def test_no_shortfall_sentinel(self):
        assert outlasts_life_expectancy(60 + 999, 90)


class TestHalfYearBoundary:
    """Retire at 60 with life 90, expense 70 at retirement, no pension or income."""

    def _household(self, cash):
        return _position(
            age=60, monthly_income=0, living_expense_breakdown={ExpenseCategory.FOOD: 100.0},
            real_estate_asset=0, cash_asset=cash, pension_asset=0, national_pensions=(),
        )

    def test_thirty_and_a_half_years_is_not_enough(self):
        m = diagnose(self._household(70 * 12 * 30.5))
        assert m.years_of_withdrawal == pytest.approx(30.5)
        assert m.raw_depletion_age == 90
        assert m.depletion_age == 90
        assert not m.is_asset_sustainable
        assert m.verdict == Verdict.DIFFICULT

    def test_thirty_one_and_a_half_years_is_enough(self):
        m = diagnose(self._household(70 * 12 * 31.5))
        assert m.raw_depletion_age == 91
        assert m.is_asset_sustainable
        assert m.verdict == Verdict.CONDITIONAL

    def test_scenario_flag_agrees(self):
        m = diagnose(self._household(70 * 12 * 30.5), with_scenarios=True)
        assert m.scenarios[1].sustainable is False


class TestBoundaries:
    def test_already_past_retirement(self):
        m = diagnose(_position(age=65))
        assert m.years_to_retirement == 0
        assert m.retirement_years == 30
        assert m.projected_expense == pytest.approx(300 * 0.7)
        assert m.liquid_asset_at_retirement == pytest.approx(1 + 0.3)

    def test_zero_income(self):
        m = diagnose(_position(monthly_income=0))
        assert m.savings_rate == 0
        assert m.interest_to_income == 0

    def test_zero_expense(self):
        m = diagnose(_position(living_expense_breakdown={}))
        assert m.coverage_rate == 0
        assert m.verdict == Verdict.POSSIBLE

    def test_life_expectancy_override(self):
        m = diagnose(_position(), {"life_expectancy": 100})
        assert m.life_expectancy == 100
        assert m.retirement_years == 40


class TestDebt:
    def test_interest_and_debt_at_retirement(self):
        pos = _position(mortgage_amount=12000, mortgage_rate=0.04, credit_amount=1200, credit_rate=0.08)
        m = diagnose(pos)
        assert m.monthly_interest == pytest.approx((12000 * 0.04 + 1200 * 0.08) / 12)
        assert m.current_monthly_expense == pytest.approx(300 + m.monthly_interest)
        assert m.debt_at_retirement == pytest.approx(13200 * 0.5)
        assert m.debt_ratios == {"mortgage": 91, "credit": 9, "other": 0}
        assert m.mortgage_rate_ok
        assert m.credit_rate_ok is False

    def test_interest_counts_as_fixed_expense(self):
        pos = _position(
            monthly_fixed_expense=100, living_expense_breakdown={ExpenseCategory.FOOD: 100.0},
            other_debt_amount=12000, other_debt_rate=0.05,
        )
        m = diagnose(pos)
        assert m.monthly_interest == pytest.approx(50)
        assert m.expense_ratios == {"fixed": 60, "variable": 40}

    def test_interest_to_income_whole_percent(self):
        m = diagnose(_position(monthly_income=400, other_debt_amount=12000, other_debt_rate=0.05))
        assert m.interest_to_income == 13  # 12.5% 반올림


class TestAssumptions:
    def test_higher_return_never_lowers_liquid_asset(self):
        low = diagnose(_position(), {"investment_return_rate": 0.03})
        high = diagnose(_position(), {"investment_return_rate": 0.07})
        assert high.liquid_asset_at_retirement > low.liquid_asset_at_retirement

    def test_assumptions_object(self):
        m = diagnose(_position(), Assumptions(living_expense_ratio=1.0))
        assert m.projected_expense == pytest.approx(300 * 1.02 ** 20)

    def test_invalid_rate(self):
        with pytest.raises(InvalidAssumption):
            diagnose(_position(), {"inflation_rate": 1.5})

    def test_rate_at_minus_one(self):
        with pytest.raises(InvalidAssumption):
            diagnose(_position(), {"investment_return_rate": -1.0})

    def test_non_finite_rate(self):
        with pytest.raises(InvalidAssumption):
            diagnose(_position(), {"income_growth_rate": float("nan")})

    def test_non_positive_living_ratio(self):
        with pytest.raises(InvalidAssumption):
            diagnose(_position(), {"living_expense_ratio": 0})

    def test_life_expectancy_not_above_age(self):
        with pytest.raises(InvalidAssumption):
            diagnose(_position(), {"life_expectancy": 40})

    def test_negative_retirement_age(self):
        with pytest.raises(InvalidAssumption):
            diagnose(_position(), {"retirement_age_offset": -61})

    def test_unknown_key(self):
        with pytest.raises(InvalidAssumption):
            diagnose(_position(), {"return": 0.05})


class TestScenarioAttachment:
    def test_without_scenarios(self):
        assert diagnose(_position()).scenarios == ()

    def test_with_scenarios(self):
        m = diagnose(_position(), with_scenarios=True)
        assert [s.retire_age for s in m.scenarios] == [55, 60, 65]

    def test_scenarios_field_type(self):
        hints = get_type_hints(DiagnosisMetrics, localns={"RetirementScenario": RetirementScenario})
        assert hints["scenarios"] == tuple[RetirementScenario, ...]
        m = diagnose(_position(), with_scenarios=True)
        assert all(isinstance(s, RetirementScenario) for s in m.scenarios)
