"""Diagnosis assumptions, named heuristics and entry validation."""

import dataclasses
import math
from dataclasses import dataclass, field

# 노후생활비 기준（월, 만원, 현재가치）
MIN_LIVING_COST_MONTHLY = 248.0
ADEQUATE_LIVING_COST_MONTHLY = 350.0


class InvalidAssumption(ValueError):
    """An assumption is out of range for the position it is applied to."""


@dataclass(frozen=True)
class Heuristics:
    """Fixed growth rates and policy constants used by the projections."""

    real_estate_growth: float = 0.02
    deposit_growth: float = 0.0       # 전세/월세 보증금: 회수 가능, 성장 없음
    pension_asset_growth: float = 0.04
    debt_survival_ratio: float = 0.5  # 은퇴 시점 잔존 부채 비율
    # 퇴직연금 DC 적립률: 연 1개월분 급여 ≈ 월급의 8.33%
    dc_contribution_rate: float = 0.0833

    # Pension payout rules
    min_payout_start_age: int = 56
    national_pension_start_age: int = 65
    occupational_payout_start_age: int = 56
    occupational_payout_years: int = 10
    personal_payout_start_age: int = 56
    personal_payout_years: int = 20
    isa_default_maturity_years: int = 3

    # Representative debt rates when a category is empty
    default_mortgage_rate: float = 0.045
    default_credit_rate: float = 0.068
    default_other_debt_rate: float = 0.05
    good_mortgage_rate: float = 0.045
    good_credit_rate: float = 0.07

    # Retirement living-cost benchmark growth (KB 노후생활비 기준)
    living_cost_benchmark_growth: float = 0.03

    # years_of_withdrawal when there is no shortfall
    no_shortfall_years: float = 999.0


@dataclass(frozen=True)
class Assumptions:

    retirement_age_offset: int = 0
    living_expense_ratio: float = 0.7   # 은퇴 후 생활비 / 현재 생활비
    inflation_rate: float = 0.02
    income_growth_rate: float = 0.02
    investment_return_rate: float = 0.05
    life_expectancy: int | None = None  # None → position default
    heuristics: Heuristics = field(default_factory=Heuristics)


DEFAULT_ASSUMPTIONS = Assumptions()


def resolve_assumptions(overrides: "Assumptions | dict | None" = None) -> Assumptions:
    """Merge a partial override dict onto the defaults. None → defaults."""
    if overrides is None:
        return DEFAULT_ASSUMPTIONS
    if isinstance(overrides, Assumptions):
        return overrides
    known = {f.name for f in dataclasses.fields(Assumptions)}
    unknown = set(overrides) - known
    if unknown:
        raise InvalidAssumption(f"알 수 없는 가정 항목: {', '.join(sorted(unknown))}")
    values = {k: v for k, v in overrides.items() if v is not None or k == "life_expectancy"}
    return dataclasses.replace(DEFAULT_ASSUMPTIONS, **values)


def validate_assumptions(
    assumptions: Assumptions, current_age: int, target_retirement_age: int, life_expectancy: int,
) -> None:
    """Validate assumptions against a position. Raises InvalidAssumption."""
    rates = {
        "inflation_rate": assumptions.inflation_rate,
        "income_growth_rate": assumptions.income_growth_rate,
        "investment_return_rate": assumptions.investment_return_rate,
    }
    for name, rate in rates.items():
        if not math.isfinite(rate) or rate <= -1 or rate > 1:
            raise InvalidAssumption(f"{name}={rate}는 허용 범위(-100%, 100%]를 벗어났습니다")
    ratio = assumptions.living_expense_ratio
    if not math.isfinite(ratio) or ratio <= 0:
        raise InvalidAssumption(f"living_expense_ratio={ratio}는 0보다 커야 합니다")

    effective_retirement_age = target_retirement_age + assumptions.retirement_age_offset
    if effective_retirement_age < 0:
        raise InvalidAssumption(f"은퇴 나이 {effective_retirement_age}세는 음수일 수 없습니다")
    effective_life = (
        assumptions.life_expectancy if assumptions.life_expectancy is not None else life_expectancy
    )
    if effective_life <= 0 or effective_life <= current_age:
        raise InvalidAssumption(
            f"기대수명 {effective_life}세는 현재 나이 {current_age}세보다 커야 합니다"
        )
