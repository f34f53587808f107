"""Retirement readiness scores (0-100 per category, weighted overall)."""

from dataclasses import dataclass

from retirement_diag_kr.tvm import round_half_up, safe_ratio

SCORE_WEIGHTS = {
    "income": 0.20,
    "expense": 0.15,
    "asset": 0.35,
    "debt": 0.15,
    "pension": 0.15,
}
CAREER_START_AGE = 25  # 자산 형성 시작 가정

# (하한 점수, 등급, 설명)
GRADES = [
    (90, "A+", "매우 우수"),
    (80, "A", "우수"),
    (70, "B+", "양호"),
    (60, "B", "보통"),
    (50, "C+", "주의"),
    (40, "C", "개선 필요"),
    (30, "D", "위험"),
]
LOWEST_GRADE = ("F", "매우 위험")


@dataclass(frozen=True)
class Scores:
    overall: int
    income: float
    expense: float
    asset: float
    debt: float
    pension: float


def _clamp(score: float) -> float:
    return min(100.0, max(0.0, score))


def income_score(savings_rate: float) -> float:
    """Savings rate of 30% or more scores 100."""
    if savings_rate >= 0.3:
        return 100.0
    if savings_rate >= 0.2:
        return 80 + (savings_rate - 0.2) * 200
    if savings_rate >= 0.1:
        return 60 + (savings_rate - 0.1) * 200
    if savings_rate >= 0:
        return savings_rate * 600
    return 0.0


def expense_score(expense_ratio: float) -> float:
    """Expense at or below 70% of income scores 100."""
    if expense_ratio <= 0.7:
        return 100.0
    if expense_ratio <= 0.8:
        return 80 + (0.8 - expense_ratio) * 200
    if expense_ratio <= 0.9:
        return 60 + (0.9 - expense_ratio) * 200
    if expense_ratio <= 1:
        return 40 + (1 - expense_ratio) * 200
    return max(0.0, 40 - (expense_ratio - 1) * 100)


def asset_score(progress_rate: float, current_age: int, retirement_age: int) -> float:
    """Net worth progress relative to where someone of this age is expected to be."""
    years_to_retirement = retirement_age - current_age
    expected = (
        1 - safe_ratio(years_to_retirement, retirement_age - CAREER_START_AGE)
        if years_to_retirement > 0 else 1.0
    )
    relative = progress_rate / expected if expected > 0 else progress_rate
    if relative >= 1:
        return 100.0
    if relative >= 0.8:
        return 80 + (relative - 0.8) * 100
    if relative >= 0.5:
        return 50 + (relative - 0.5) * 100
    return relative * 100


def debt_score(debt_ratio: float) -> float:
    """Debt at or below 20% of assets scores 100."""
    if debt_ratio <= 0.2:
        return 100.0
    if debt_ratio <= 0.4:
        return 80 + (0.4 - debt_ratio) * 100
    if debt_ratio <= 0.6:
        return 60 + (0.6 - debt_ratio) * 100
    if debt_ratio <= 0.8:
        return 40 + (0.8 - debt_ratio) * 100
    if debt_ratio <= 1:
        return 20 + (1 - debt_ratio) * 100
    return max(0.0, 20 - (debt_ratio - 1) * 50)


def pension_score(coverage: float) -> float:
    """Pension covering 50% or more of expense scores 100."""
    if coverage >= 0.5:
        return 100.0
    if coverage >= 0.4:
        return 80 + (coverage - 0.4) * 200
    if coverage >= 0.3:
        return 60 + (coverage - 0.3) * 200
    if coverage >= 0.2:
        return 40 + (coverage - 0.2) * 200
    return coverage * 200


def calculate_scores(
    monthly_income: float,
    monthly_expense: float,
    total_asset: float,
    total_debt: float,
    net_worth: float,
    target_fund: float,
    current_age: int,
    retirement_age: int,
    monthly_pension: float,
    pension_base_expense: float | None = None,
) -> Scores:
    """Score each category and combine them with SCORE_WEIGHTS.

    pension_base_expense is the expense the pension is measured against
    (defaults to monthly_expense).
    """
    savings_rate = safe_ratio(monthly_income - monthly_expense, monthly_income)
    expense_ratio = monthly_expense / monthly_income if monthly_income > 0 else 1.0
    if total_asset > 0:
        debt_ratio = total_debt / total_asset
    else:
        debt_ratio = 1.0 if total_debt > 0 else 0.0
    base = monthly_expense if pension_base_expense is None else pension_base_expense

    raw = {
        "income": income_score(savings_rate),
        "expense": expense_score(expense_ratio),
        "asset": asset_score(safe_ratio(net_worth, target_fund), current_age, retirement_age),
        "debt": debt_score(debt_ratio),
        "pension": pension_score(safe_ratio(monthly_pension, base)),
    }
    # 가중합은 클램프 전 점수로, 클램프는 종합 점수에만
    overall = round_half_up(sum(raw[k] * w for k, w in SCORE_WEIGHTS.items()))
    return Scores(
        overall=int(min(100, max(0, overall))),
        **{k: _clamp(v) for k, v in raw.items()},
    )


def scores_from_diagnosis(metrics) -> Scores:
    """Scores of a DiagnosisMetrics; the target fund is the total retirement demand."""
    return calculate_scores(
        monthly_income=metrics.monthly_income,
        monthly_expense=metrics.current_monthly_expense,
        total_asset=metrics.total_asset,
        total_debt=metrics.total_debt,
        net_worth=metrics.net_worth,
        target_fund=metrics.total_demand,
        current_age=metrics.current_age,
        retirement_age=metrics.effective_retirement_age,
        monthly_pension=metrics.pension_income,
        pension_base_expense=metrics.projected_expense,
    )


def score_grade(score: float) -> tuple[str, str]:
    """(grade, description) for an overall score."""
    for floor, grade, description in GRADES:
        if score >= floor:
            return grade, description
    return LOWEST_GRADE
