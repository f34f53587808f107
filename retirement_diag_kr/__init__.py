"""Household Retirement Diagnosis Package."""

from retirement_diag_kr.household import (
    Household,
    Person,
    FamilyMember,
    IncomeStream,
    ExpenseItem,
    HousingPosition,
    Account,
    DebtItem,
    NationalPension,
    OccupationalPension,
    PersonalPension,
    Owner,
    InvalidHousehold,
    parse_tag,
)
from retirement_diag_kr.params import (
    Assumptions,
    Heuristics,
    DEFAULT_ASSUMPTIONS,
    InvalidAssumption,
    resolve_assumptions,
    validate_assumptions,
)
from retirement_diag_kr.position import FinancialPosition, aggregate_position
from retirement_diag_kr.pension import PensionProjection, ProductProjection, project_pensions
from retirement_diag_kr.diagnosis import (
    DiagnosisMetrics,
    RetirementProjection,
    Verdict,
    diagnose,
    project_retirement,
    outlasts_life_expectancy,
)
from retirement_diag_kr.scenarios import RetirementScenario, compare_retirement_ages
from retirement_diag_kr.scoring import Scores, calculate_scores, score_grade
from retirement_diag_kr.trajectory import TrajectoryPoint, project_trajectory

__all__ = [
    "Household",
    "Person",
    "FamilyMember",
    "IncomeStream",
    "ExpenseItem",
    "HousingPosition",
    "Account",
    "DebtItem",
    "NationalPension",
    "OccupationalPension",
    "PersonalPension",
    "Owner",
    "InvalidHousehold",
    "parse_tag",
    "Assumptions",
    "Heuristics",
    "DEFAULT_ASSUMPTIONS",
    "InvalidAssumption",
    "resolve_assumptions",
    "validate_assumptions",
    "FinancialPosition",
    "aggregate_position",
    "PensionProjection",
    "ProductProjection",
    "project_pensions",
    "DiagnosisMetrics",
    "RetirementProjection",
    "Verdict",
    "diagnose",
    "project_retirement",
    "outlasts_life_expectancy",
    "RetirementScenario",
    "compare_retirement_ages",
    "Scores",
    "calculate_scores",
    "score_grade",
    "TrajectoryPoint",
    "project_trajectory",
]
