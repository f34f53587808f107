"""Retirement-age scenarios: the same projection rerun at earlier and later ages."""

from dataclasses import dataclass

from retirement_diag_kr.diagnosis import project_retirement
from retirement_diag_kr.params import (
    Assumptions,
    InvalidAssumption,
    resolve_assumptions,
    validate_assumptions,
)
from retirement_diag_kr.position import FinancialPosition

SCENARIO_AGE_STEP = 5


@dataclass(frozen=True)
class RetirementScenario:
    retire_age: int
    projected_liquid_asset: float
    depletion_age: int
    sustainable: bool
    pension_income: float = 0.0
    projected_expense: float = 0.0


def scenario_ages(base_age: int, step: int = SCENARIO_AGE_STEP) -> list[int]:
    """base−step, base, base+step."""
    return [base_age - step, base_age, base_age + step]


def compare_retirement_ages(
    position: FinancialPosition,
    assumptions: "Assumptions | dict | None" = None,
) -> tuple[RetirementScenario, ...]:
    """Rerun the retirement projection at effective age −5, ±0 and +5.

    Assumptions are held fixed; only the retirement age moves.
    """
    a = resolve_assumptions(assumptions)
    validate_assumptions(
        a, position.current_age, position.target_retirement_age, position.life_expectancy,
    )
    base_age = position.target_retirement_age + a.retirement_age_offset
    if base_age < SCENARIO_AGE_STEP:
        raise InvalidAssumption(
            f"비교 은퇴 나이가 음수가 됩니다: 적용 은퇴 나이 {base_age}세 (최소 {SCENARIO_AGE_STEP}세)"
        )
    life = a.life_expectancy if a.life_expectancy is not None else position.life_expectancy

    results = []
    for age in scenario_ages(base_age):
        proj = project_retirement(position, a, age, life)
        results.append(RetirementScenario(
            retire_age=age,
            projected_liquid_asset=proj.liquid_asset,
            depletion_age=proj.depletion_age,
            sustainable=proj.sustainable,
            pension_income=proj.pension_income,
            projected_expense=proj.projected_expense,
        ))
    return tuple(results)
