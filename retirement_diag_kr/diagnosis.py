"""Retirement diagnosis: present-state aggregates, at-retirement projection and verdict.

project_retirement() is the single projection routine (horizon, pension income,
expense, assets at retirement, depletion). diagnose() wraps it with the
present-state figures and the verdict; the scenario engine calls it directly.
"""

import math
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from retirement_diag_kr.household import ExpenseCategory
from retirement_diag_kr.params import (
    ADEQUATE_LIVING_COST_MONTHLY,
    MIN_LIVING_COST_MONTHLY,
    Assumptions,
    resolve_assumptions,
    validate_assumptions,
)
from retirement_diag_kr.pension import PensionProjection, project_pensions
from retirement_diag_kr.position import FinancialPosition
from retirement_diag_kr.tvm import (
    compound_future_value,
    growing_contribution_future_value,
    percent_breakdown,
    round_half_up,
    safe_ratio,
)

if TYPE_CHECKING:
    from retirement_diag_kr.scenarios import RetirementScenario


class Verdict(StrEnum):
    POSSIBLE = "possible"
    CONDITIONAL = "conditional"
    DIFFICULT = "difficult"

    @property
    def label(self) -> str:
        return _VERDICT_LABELS[self]

    @property
    def message(self) -> str:
        return _VERDICT_MESSAGES[self]


_VERDICT_LABELS = {
    Verdict.POSSIBLE: "은퇴 가능",
    Verdict.CONDITIONAL: "조건부 가능",
    Verdict.DIFFICULT: "은퇴 어려움",
}
_VERDICT_MESSAGES = {
    Verdict.POSSIBLE: "연금 소득만으로 은퇴 후 생활비를 충당할 수 있습니다.",
    Verdict.CONDITIONAL: "연금이 부족하지만 모아둔 자산으로 기대수명까지 부족분을 메울 수 있습니다.",
    Verdict.DIFFICULT: "연금과 자산을 합쳐도 기대수명 전에 생활비가 부족해집니다. 은퇴 시기나 저축 계획을 조정하세요.",
}


@dataclass(frozen=True)
class RetirementProjection:
    """Everything that depends on the retirement age, in monthly/total 만원."""

    retire_age: int
    life_expectancy: int
    years_to_retirement: int
    retirement_years: int

    pensions: PensionProjection
    pension_income: float       # 월, 은퇴 시점 명목
    projected_expense: float    # 월, 은퇴 시점 명목
    coverage_gap: float
    coverage_rate: float

    real_estate: float
    deposit: float
    pension_asset: float
    financial: float
    debt: float

    annual_shortfall: float
    required_asset: float
    years_of_withdrawal: float
    depletion_age: int
    raw_depletion_age: int

    @property
    def liquid_asset(self) -> float:
        return self.financial + self.deposit + self.pension_asset

    @property
    def total_asset(self) -> float:
        return self.real_estate + self.liquid_asset

    @property
    def net_worth(self) -> float:
        return self.total_asset - self.debt

    @property
    def sustainable(self) -> bool:
        return outlasts_life_expectancy(self.raw_depletion_age, self.life_expectancy)


def outlasts_life_expectancy(raw_depletion_age: int, life_expectancy: int) -> bool:
    """Whether liquid assets last beyond life expectancy (unclamped depletion age).

    With no shortfall the depletion age is far past any life expectancy. Used
    for the CONDITIONAL verdict and for every sustainability flag.
    """
    return raw_depletion_age > life_expectancy


def monthly_interest(position: FinancialPosition) -> float:
    return (
        position.mortgage_amount * position.mortgage_rate
        + position.credit_amount * position.credit_rate
        + position.other_debt_amount * position.other_debt_rate
    ) / 12


def current_monthly_expense(position: FinancialPosition) -> float:
    """Fixed + living expense + monthly debt interest."""
    return position.monthly_fixed_expense + position.living_expense + monthly_interest(position)


def project_retirement(
    position: FinancialPosition,
    assumptions: Assumptions,
    retire_age: int,
    life_expectancy: int,
) -> RetirementProjection:
    """Project the household to retire_age and through to life_expectancy."""
    a = assumptions
    h = a.heuristics
    years_to_retirement = max(0, retire_age - position.current_age)
    retirement_years = max(0, life_expectancy - retire_age)

    pensions = project_pensions(position, a, retire_age)
    pension_income = pensions.total_monthly

    expense_now = current_monthly_expense(position)
    projected_expense = (
        compound_future_value(expense_now, a.inflation_rate, years_to_retirement)
        * a.living_expense_ratio
    )
    coverage_gap = pension_income - projected_expense
    coverage_rate = safe_ratio(pension_income, projected_expense)

    # 월 잉여자금은 매년 적립되며 소득상승률만큼 늘어난다
    monthly_surplus = max(0.0, position.monthly_income - expense_now)
    financial = compound_future_value(
        position.financial_asset, a.investment_return_rate, years_to_retirement,
    ) + growing_contribution_future_value(
        monthly_surplus * 12, years_to_retirement, a.investment_return_rate, a.income_growth_rate,
    )
    real_estate = compound_future_value(
        position.real_estate_asset, h.real_estate_growth, years_to_retirement,
    )
    deposit = compound_future_value(position.deposit_asset, h.deposit_growth, years_to_retirement)
    pension_asset = compound_future_value(
        position.pension_asset, h.pension_asset_growth, years_to_retirement,
    )
    debt = position.total_debt * h.debt_survival_ratio
    liquid = financial + deposit + pension_asset

    annual_shortfall = -coverage_gap * 12 if coverage_gap < 0 else 0.0
    if annual_shortfall == 0:
        years_of_withdrawal = h.no_shortfall_years
    elif liquid <= 0:
        years_of_withdrawal = 0.0
    else:
        years_of_withdrawal = liquid / annual_shortfall
    raw_depletion_age = retire_age + math.floor(years_of_withdrawal)

    return RetirementProjection(
        retire_age=retire_age,
        life_expectancy=life_expectancy,
        years_to_retirement=years_to_retirement,
        retirement_years=retirement_years,
        pensions=pensions,
        pension_income=pension_income,
        projected_expense=projected_expense,
        coverage_gap=coverage_gap,
        coverage_rate=coverage_rate,
        real_estate=real_estate,
        deposit=deposit,
        pension_asset=pension_asset,
        financial=financial,
        debt=debt,
        annual_shortfall=annual_shortfall,
        required_asset=annual_shortfall * retirement_years,
        years_of_withdrawal=years_of_withdrawal,
        depletion_age=min(raw_depletion_age, life_expectancy + 1),
        raw_depletion_age=raw_depletion_age,
    )


def classify(projection: RetirementProjection) -> Verdict:
    if projection.coverage_gap >= 0:
        return Verdict.POSSIBLE
    if projection.sustainable:
        return Verdict.CONDITIONAL
    return Verdict.DIFFICULT


@dataclass(frozen=True)
class DiagnosisMetrics:
    # 기간
    current_age: int
    target_retirement_age: int
    effective_retirement_age: int
    life_expectancy: int
    years_to_retirement: int
    retirement_years: int

    # 현재 현금흐름（월）
    monthly_income: float
    monthly_fixed_expense: float
    living_expense: float
    monthly_interest: float
    annual_interest: float
    current_monthly_expense: float
    current_monthly_gap: float
    savings_rate: float
    interest_to_income: int     # %

    # 현재 자산/부채
    real_estate_asset: float
    cash_asset: float
    deposit_asset: float
    investment_asset: float
    pension_asset: float
    financial_asset: float
    total_asset: float
    total_debt: float
    net_worth: float
    current_liquid_asset: float
    mortgage_rate: float
    credit_rate: float
    mortgage_rate_ok: bool
    credit_rate_ok: bool

    asset_ratios: dict[str, int]
    debt_ratios: dict[str, int]
    expense_ratios: dict[str, int]
    living_expense_ratios: dict[str, int]

    # 은퇴 시점
    national_pension_monthly: float
    occupational_pension_monthly: float
    personal_pension_monthly: float
    pension_income: float
    projected_expense: float
    coverage_gap: float
    coverage_rate: float
    total_asset_at_retirement: float
    debt_at_retirement: float
    net_worth_at_retirement: float
    liquid_asset_at_retirement: float
    retirement_asset_ratios: dict[str, int]

    annual_shortfall: float
    required_asset: float
    years_of_withdrawal: float
    depletion_age: int
    raw_depletion_age: int
    is_asset_sustainable: bool

    total_demand: float
    total_supply: float
    supply_ratio: float         # %
    supply_deficit: float

    min_living_cost: float      # 은퇴 시점 명목, 월
    adequate_living_cost: float

    verdict: Verdict
    projection: RetirementProjection
    scenarios: "tuple[RetirementScenario, ...]" = ()

    @property
    def verdict_label(self) -> str:
        return self.verdict.label

    @property
    def verdict_message(self) -> str:
        return self.verdict.message


def diagnose(
    position: FinancialPosition,
    assumptions: "Assumptions | dict | None" = None,
    *,
    with_scenarios: bool = False,
) -> DiagnosisMetrics:
    """Full retirement diagnosis of a position.

    assumptions may be an Assumptions, a partial dict merged onto the defaults,
    or None. Raises InvalidAssumption before any computation.
    """
    a = resolve_assumptions(assumptions)
    validate_assumptions(
        a, position.current_age, position.target_retirement_age, position.life_expectancy,
    )
    h = a.heuristics
    retire_age = position.target_retirement_age + a.retirement_age_offset
    life = a.life_expectancy if a.life_expectancy is not None else position.life_expectancy
    proj = project_retirement(position, a, retire_age, life)

    interest = monthly_interest(position)
    expense_now = current_monthly_expense(position)
    income = position.monthly_income
    total_asset = (
        position.real_estate_asset + position.cash_asset + position.investment_asset
        + position.deposit_asset + position.pension_asset
    )

    total_demand = proj.retirement_years * proj.projected_expense * 12
    total_supply = proj.retirement_years * proj.pension_income * 12 + max(0.0, proj.liquid_asset)
    benchmark_growth = (1 + h.living_cost_benchmark_growth) ** proj.years_to_retirement

    scenarios = ()
    if with_scenarios:
        from retirement_diag_kr.scenarios import compare_retirement_ages
        scenarios = compare_retirement_ages(position, a)

    return DiagnosisMetrics(
        current_age=position.current_age,
        target_retirement_age=position.target_retirement_age,
        effective_retirement_age=retire_age,
        life_expectancy=life,
        years_to_retirement=proj.years_to_retirement,
        retirement_years=proj.retirement_years,
        monthly_income=income,
        monthly_fixed_expense=position.monthly_fixed_expense,
        living_expense=position.living_expense,
        monthly_interest=interest,
        annual_interest=interest * 12,
        current_monthly_expense=expense_now,
        current_monthly_gap=income - expense_now,
        savings_rate=safe_ratio(income - expense_now, income),
        interest_to_income=round_half_up(safe_ratio(interest, income) * 100),
        real_estate_asset=position.real_estate_asset,
        cash_asset=position.cash_asset,
        deposit_asset=position.deposit_asset,
        investment_asset=position.investment_asset,
        pension_asset=position.pension_asset,
        financial_asset=position.financial_asset,
        total_asset=total_asset,
        total_debt=position.total_debt,
        net_worth=total_asset - position.total_debt,
        current_liquid_asset=position.financial_asset + position.deposit_asset + position.pension_asset,
        mortgage_rate=position.mortgage_rate,
        credit_rate=position.credit_rate,
        mortgage_rate_ok=position.mortgage_rate <= h.good_mortgage_rate,
        credit_rate_ok=position.credit_rate <= h.good_credit_rate,
        asset_ratios=percent_breakdown({
            "real_estate": position.real_estate_asset,
            "cash": position.cash_asset,
            "investment": position.investment_asset,
            "deposit": position.deposit_asset,
            "pension": position.pension_asset,
        }),
        debt_ratios=percent_breakdown({
            "mortgage": position.mortgage_amount,
            "credit": position.credit_amount,
            "other": position.other_debt_amount,
        }),
        expense_ratios=percent_breakdown({
            # 대출 이자는 고정비로 본다
            "fixed": position.monthly_fixed_expense + interest,
            "variable": position.living_expense,
        }),
        living_expense_ratios=percent_breakdown({
            str(c): position.living_expense_breakdown.get(c, 0.0)
            for c in ExpenseCategory if not c.is_fixed
        }),
        national_pension_monthly=proj.pensions.national_monthly,
        occupational_pension_monthly=proj.pensions.occupational_monthly,
        personal_pension_monthly=proj.pensions.personal_monthly,
        pension_income=proj.pension_income,
        projected_expense=proj.projected_expense,
        coverage_gap=proj.coverage_gap,
        coverage_rate=proj.coverage_rate,
        total_asset_at_retirement=proj.total_asset,
        debt_at_retirement=proj.debt,
        net_worth_at_retirement=proj.net_worth,
        liquid_asset_at_retirement=proj.liquid_asset,
        retirement_asset_ratios=percent_breakdown({
            "real_estate": proj.real_estate,
            "financial": proj.financial,
            "deposit": proj.deposit,
            "pension": proj.pension_asset,
        }),
        annual_shortfall=proj.annual_shortfall,
        required_asset=proj.required_asset,
        years_of_withdrawal=proj.years_of_withdrawal,
        depletion_age=proj.depletion_age,
        raw_depletion_age=proj.raw_depletion_age,
        is_asset_sustainable=proj.sustainable,
        total_demand=total_demand,
        total_supply=total_supply,
        supply_ratio=safe_ratio(total_supply, total_demand) * 100,
        supply_deficit=total_demand - total_supply,
        min_living_cost=MIN_LIVING_COST_MONTHLY * benchmark_growth,
        adequate_living_cost=ADEQUATE_LIVING_COST_MONTHLY * benchmark_growth,
        verdict=classify(proj),
        projection=proj,
        scenarios=scenarios,
    )
