"""Tests for the yearly liquid-asset trajectory."""

from datetime import date

import pytest
from retirement_diag_kr.household import ExpenseCategory, NationalPension, Owner
from retirement_diag_kr.pension import (
    TIER_NATIONAL,
    TIER_PERSONAL,
    PensionProjection,
    ProductProjection,
)
from retirement_diag_kr.position import FinancialPosition, PersonProfile
from retirement_diag_kr.trajectory import (
    pension_income_at,
    project_trajectory,
    trajectory_depletion_age,
)


def _position(**overrides) -> FinancialPosition:
    base = dict(
        as_of=date(2026, 1, 1),
        people=(PersonProfile(Owner.SELF, 40, 60),),
        life_expectancy=90,
        monthly_income=500,
        living_expense_breakdown={ExpenseCategory.FOOD: 300.0},
        cash_asset=1,
        pension_asset=0.3,
        national_pensions=(NationalPension(Owner.SELF, 100),),
    )
    base.update(overrides)
    return FinancialPosition(**base)


class TestPensionIncomeAt:
    def setup_method(self):
        self.pensions = PensionProjection((
            ProductProjection(Owner.SELF, TIER_NATIONAL, "national", start_age=65, monthly_payment=150),
            ProductProjection(Owner.SELF, TIER_PERSONAL, "irp", start_age=56, payout_years=10, monthly_payment=40),
        ))

    def test_before_any_start(self):
        assert pension_income_at(self.pensions, 55) == 0

    def test_personal_window(self):
        assert pension_income_at(self.pensions, 56) == 40
        assert pension_income_at(self.pensions, 65) == 40 + 150
        assert pension_income_at(self.pensions, 66) == 150

    def test_national_for_life(self):
        assert pension_income_at(self.pensions, 100) == 150


class TestProjectTrajectory:
    def setup_method(self):
        self.points = project_trajectory(_position())

    def test_runs_to_life_expectancy(self):
        assert self.points[0].age == 40
        assert self.points[-1].age == 90
        assert len(self.points) == 51
        assert self.points[-1].year == 2076

    def test_first_year(self):
        first = self.points[0]
        assert first.income == 6000
        assert first.expense == 3600
        assert first.assets == round(1.3 * 1.05 + 2400)

    def test_expense_drops_at_retirement(self):
        by_age = {p.age: p for p in self.points}
        assert by_age[60].expense == round(3600 * 1.02 ** 20 * 0.7)
        assert by_age[59].income > by_age[60].income

    def test_no_depletion(self):
        assert trajectory_depletion_age(self.points) is None


class TestDepletion:
    def test_stops_when_assets_run_out(self):
        """5000 in cash, no income, 100/month expense growing 2%/yr."""
        pos = _position(
            monthly_income=0, cash_asset=5000, pension_asset=0, national_pensions=(),
            living_expense_breakdown={ExpenseCategory.FOOD: 100.0},
        )
        points = project_trajectory(pos)
        assert [p.age for p in points] == [40, 41, 42, 43, 44]
        assert points[-1].assets == 0
        assert points[1].assets == pytest.approx(3029, abs=1)
        assert trajectory_depletion_age(points) == 44

    def test_retire_age_override(self):
        points = project_trajectory(_position(), retire_age=50)
        by_age = {p.age: p for p in points}
        assert by_age[50].expense == round(3600 * 1.02 ** 10 * 0.7)
