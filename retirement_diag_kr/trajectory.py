"""Year-by-year liquid asset path from the current age to life expectancy."""

from dataclasses import dataclass

from retirement_diag_kr.diagnosis import current_monthly_expense
from retirement_diag_kr.params import Assumptions, resolve_assumptions, validate_assumptions
from retirement_diag_kr.pension import TIER_NATIONAL, PensionProjection, project_pensions
from retirement_diag_kr.position import FinancialPosition
from retirement_diag_kr.tvm import round_half_up


@dataclass(frozen=True)
class TrajectoryPoint:
    age: int
    year: int
    assets: int     # 연말 유동자산（0 하한）
    income: int     # 연간
    expense: int    # 연간


def pension_income_at(pensions: PensionProjection, age: int) -> float:
    """Monthly pension paid at `age`. National pension is paid for life."""
    total = 0.0
    for p in pensions.products:
        if p.monthly_payment <= 0 or age < p.start_age:
            continue
        if p.tier == TIER_NATIONAL or age < p.start_age + p.payout_years:
            total += p.monthly_payment
    return total


def project_trajectory(
    position: FinancialPosition,
    assumptions: "Assumptions | dict | None" = None,
    retire_age: int | None = None,
) -> list[TrajectoryPoint]:
    """Simulate liquid assets yearly; stops at the first year they reach zero.

    Before retirement the household earns its (growing) income; after it, only
    pensions. Expense grows with inflation and is scaled by the living-expense
    ratio once retired.
    """
    a = resolve_assumptions(assumptions)
    validate_assumptions(
        a, position.current_age, position.target_retirement_age, position.life_expectancy,
    )
    if retire_age is None:
        retire_age = position.target_retirement_age + a.retirement_age_offset
    life = a.life_expectancy if a.life_expectancy is not None else position.life_expectancy
    pensions = project_pensions(position, a, retire_age)
    expense_now = current_monthly_expense(position)

    assets = position.financial_asset + position.deposit_asset + position.pension_asset
    points = []
    for age in range(position.current_age, life + 1):
        elapsed = age - position.current_age
        retired = age >= retire_age
        annual_income = pension_income_at(pensions, age) * 12
        if not retired:
            annual_income += position.monthly_income * 12 * (1 + a.income_growth_rate) ** elapsed
        annual_expense = expense_now * 12 * (1 + a.inflation_rate) ** elapsed
        if retired:
            annual_expense *= a.living_expense_ratio

        assets = assets * (1 + a.investment_return_rate) + annual_income - annual_expense
        points.append(TrajectoryPoint(
            age=age,
            year=position.as_of.year + elapsed,
            assets=max(0, round_half_up(assets)),
            income=round_half_up(annual_income),
            expense=round_half_up(annual_expense),
        ))
        if assets <= 0:
            break
    return points


def trajectory_depletion_age(points: list[TrajectoryPoint]) -> int | None:
    """First age after the start at which assets are exhausted, or None."""
    for point in points[1:]:
        if point.assets <= 0:
            return point.age
    return None
