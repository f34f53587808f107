"""Time-value-of-money primitives and rounding helpers."""

import math

# r ≈ g threshold for the growing-contribution closed form
GROWTH_RATE_TOLERANCE = 0.001


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round halves toward +inf (0.5 → 1, -0.5 → 0).

    Python's round() is banker's rounding; every rounding step of the engine
    goes through this helper so results never depend on ties-to-even.
    """
    scale = 10 ** ndigits
    rounded = math.floor(value * scale + 0.5) / scale
    return int(rounded) if ndigits == 0 else rounded


def safe_ratio(numerator: float, denominator: float) -> float:
    """numerator / denominator, or 0 when the denominator is zero or not finite."""
    if denominator == 0 or not math.isfinite(denominator):
        return 0.0
    result = numerator / denominator
    return result if math.isfinite(result) else 0.0


def percent_breakdown(values: dict[str, float]) -> dict[str, int]:
    """Integer percent per key; the last key absorbs the residual so the sum is 100.

    Returns all zeros when the total is not positive.
    """
    keys = list(values)
    total = sum(values.values())
    if not keys or total <= 0:
        return {k: 0 for k in keys}
    result = {k: round_half_up(values[k] / total * 100) for k in keys[:-1]}
    result[keys[-1]] = 100 - sum(result.values())
    return result


def compound_future_value(principal: float, rate: float, years: float) -> float:
    """principal · (1 + rate) ** years, with negative horizons treated as 0."""
    return principal * (1 + rate) ** max(0, years)


def future_value_with_contribution(
    balance: float, monthly_contribution: float, years: int, rate: float,
) -> float:
    """Accumulate a balance with a yearly deposit of 12 × monthly_contribution.

    Each annual step deposits first, then grows: (balance + 12·c) · (1 + rate).
    """
    value = balance
    for _ in range(max(0, int(years))):
        value = (value + monthly_contribution * 12) * (1 + rate)
    return value


def annuity_payment(present_value: float, years: float, rate: float) -> float:
    """Annual withdrawal (PMT) that exhausts present_value over `years` periods.

    The remaining balance keeps earning `rate` while it is drawn down.
    """
    if years <= 0 or present_value <= 0:
        return 0.0
    if rate == 0:
        return present_value / years
    factor = (1 + rate) ** years
    return present_value * rate * factor / (factor - 1)


def growing_contribution_future_value(
    initial_annual_amount: float, years: float, return_rate: float, growth_rate: float,
) -> float:
    """Future value of an annual contribution that itself grows at growth_rate.

    FV = A·((1+r)^n − (1+g)^n) / (r − g); when r ≈ g the limit A·n·(1+r)^(n−1)
    is used instead of dividing by ~0.
    """
    if years <= 0 or initial_annual_amount <= 0:
        return 0.0
    if abs(return_rate - growth_rate) < GROWTH_RATE_TOLERANCE:
        return initial_annual_amount * years * (1 + return_rate) ** (years - 1)
    return (
        initial_annual_amount
        * ((1 + return_rate) ** years - (1 + growth_rate) ** years)
        / (return_rate - growth_rate)
    )
