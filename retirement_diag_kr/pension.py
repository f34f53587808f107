"""Pension projection: accumulation and monthly payout per product and owner.

Three tiers are projected for each owner by the same per-person routine:
national pension (inflation-indexed, no accumulation), occupational pension
(DB from final salary × service years, DC from an invested balance) and
personal pension products (연금저축, IRP, ISA rolled into one of them at maturity).
"""

from dataclasses import dataclass

from retirement_diag_kr.household import (
    OccupationalPension,
    OccupationalScheme,
    Owner,
    PayoutMode,
    PersonalPension,
    PersonalProduct,
    RolloverTarget,
)
from retirement_diag_kr.params import Assumptions, Heuristics, resolve_assumptions
from retirement_diag_kr.position import FinancialPosition, PersonProfile
from retirement_diag_kr.tvm import (
    annuity_payment,
    compound_future_value,
    future_value_with_contribution,
)

TIER_NATIONAL = "national"
TIER_OCCUPATIONAL = "occupational"
TIER_PERSONAL = "personal"


@dataclass(frozen=True)
class ProductProjection:
    """One pension product of one owner, valued at its payout start."""

    owner: Owner
    tier: str
    product: str
    start_age: int
    payout_years: int = 0
    accumulation: float = 0.0   # value at payout start
    annual_payment: float = 0.0
    monthly_payment: float = 0.0
    lump_sum: float = 0.0       # 일시금 수령분（연금 흐름에서 제외）
    rolled_into: str | None = None


@dataclass(frozen=True)
class PensionProjection:
    products: tuple[ProductProjection, ...] = ()

    def _monthly(self, tier: str) -> float:
        return sum(p.monthly_payment for p in self.products if p.tier == tier)

    @property
    def national_monthly(self) -> float:
        return self._monthly(TIER_NATIONAL)

    @property
    def occupational_monthly(self) -> float:
        return self._monthly(TIER_OCCUPATIONAL)

    @property
    def personal_monthly(self) -> float:
        return self._monthly(TIER_PERSONAL)

    @property
    def total_monthly(self) -> float:
        return self.national_monthly + self.occupational_monthly + self.personal_monthly

    @property
    def lump_sum_total(self) -> float:
        return sum(p.lump_sum for p in self.products)

    def for_owner(self, owner: Owner) -> tuple[ProductProjection, ...]:
        return tuple(p for p in self.products if p.owner == owner)


def payout_start_age(requested: int | None, default: int, heuristics: Heuristics) -> int:
    """Requested start age (or default), never earlier than the statutory minimum."""
    age = requested if requested is not None else default
    return max(heuristics.min_payout_start_age, age)


def _project_national(
    person: PersonProfile, amount: float, start_age: int | None, a: Assumptions,
) -> ProductProjection:
    h = a.heuristics
    start = payout_start_age(start_age, h.national_pension_start_age, h)
    monthly = compound_future_value(amount, a.inflation_rate, start - person.current_age)
    return ProductProjection(
        owner=person.role, tier=TIER_NATIONAL, product="national",
        start_age=start, monthly_payment=monthly,
    )


def occupational_accumulation(
    person: PersonProfile, pension: OccupationalPension, retirement_age: int, a: Assumptions,
) -> float:
    """Occupational pension value at the owner's retirement age."""
    years = max(0, retirement_age - person.current_age)
    if pension.scheme == OccupationalScheme.DB:
        final_monthly_salary = compound_future_value(
            person.monthly_labor_income, a.income_growth_rate, years,
        )
        return final_monthly_salary * (pension.years_of_service + years)
    if pension.scheme == OccupationalScheme.DC:
        contribution = person.monthly_labor_income * a.heuristics.dc_contribution_rate
        return future_value_with_contribution(
            pension.balance, contribution, years, a.investment_return_rate,
        )
    return 0.0


def _project_occupational(
    person: PersonProfile, pension: OccupationalPension, retirement_age: int, a: Assumptions,
) -> ProductProjection:
    h = a.heuristics
    start = payout_start_age(pension.start_age, h.occupational_payout_start_age, h)
    payout_years = pension.payout_years or h.occupational_payout_years
    accumulation = occupational_accumulation(person, pension, retirement_age, a)
    if pension.payout_mode == PayoutMode.LUMP_SUM:
        return ProductProjection(
            owner=person.role, tier=TIER_OCCUPATIONAL, product=str(pension.scheme),
            start_age=start, payout_years=0, accumulation=accumulation, lump_sum=accumulation,
        )
    # 은퇴 후 수령 개시까지 운용
    value_at_start = compound_future_value(
        accumulation, a.investment_return_rate, start - retirement_age,
    )
    annual = annuity_payment(value_at_start, payout_years, a.investment_return_rate)
    return ProductProjection(
        owner=person.role, tier=TIER_OCCUPATIONAL, product=str(pension.scheme),
        start_age=start, payout_years=payout_years, accumulation=value_at_start,
        annual_payment=annual, monthly_payment=annual / 12,
    )


def _project_personal(
    person: PersonProfile,
    products: list[PersonalPension],
    as_of_year: int,
    a: Assumptions,
) -> list[ProductProjection]:
    h = a.heuristics
    r = a.investment_return_rate
    isas = [p for p in products if p.product == PersonalProduct.ISA]
    accounts = [p for p in products if p.product != PersonalProduct.ISA]

    def start_of(p: PersonalPension) -> int:
        return payout_start_age(p.start_age, h.personal_payout_start_age, h)

    def horizon_of(p: PersonalPension) -> int:
        return max(0, start_of(p) - person.current_age)

    rows: list[ProductProjection] = []
    rollover: dict[int, float] = {}
    for isa in isas:
        maturity_year = (
            isa.maturity_year if isa.maturity_year is not None
            else as_of_year + h.isa_default_maturity_years
        )
        years_to_maturity = max(0, maturity_year - as_of_year)
        at_maturity = future_value_with_contribution(
            isa.balance, isa.monthly_contribution, years_to_maturity, r,
        )
        if isa.rollover_target == RolloverTarget.CASH:
            rows.append(ProductProjection(
                owner=person.role, tier=TIER_PERSONAL, product=str(isa.product),
                start_age=person.current_age + years_to_maturity,
                accumulation=at_maturity, lump_sum=at_maturity, rolled_into="cash",
            ))
            continue
        target_product = PersonalProduct(str(isa.rollover_target))
        target = next((p for p in accounts if p.product == target_product), None)
        if target is None:
            target = PersonalPension(owner=person.role, product=target_product)
            accounts.append(target)
        target_horizon = horizon_of(target)
        # 만기 후 이전 대상 상품의 수령 개시까지 운용（개시가 만기보다 빠르면 그대로 합산）
        transferred = compound_future_value(at_maturity, r, target_horizon - years_to_maturity)
        rollover[id(target)] = rollover.get(id(target), 0.0) + transferred
        rows.append(ProductProjection(
            owner=person.role, tier=TIER_PERSONAL, product=str(isa.product),
            start_age=person.current_age + years_to_maturity,
            accumulation=at_maturity, rolled_into=str(target_product),
        ))

    for p in accounts:
        payout_years = p.payout_years or h.personal_payout_years
        accumulation = future_value_with_contribution(
            p.balance, p.monthly_contribution, horizon_of(p), r,
        ) + rollover.get(id(p), 0.0)
        annual = annuity_payment(accumulation, payout_years, r)
        rows.append(ProductProjection(
            owner=person.role, tier=TIER_PERSONAL, product=str(p.product),
            start_age=start_of(p), payout_years=payout_years, accumulation=accumulation,
            annual_payment=annual, monthly_payment=annual / 12,
        ))
    return rows


def _project_person(
    person: PersonProfile,
    retirement_age: int,
    position: FinancialPosition,
    a: Assumptions,
) -> list[ProductProjection]:
    """All pension tiers of one owner."""
    owner = person.role
    rows = [
        _project_national(person, np_.monthly_amount, np_.start_age, a)
        for np_ in position.national_pensions if np_.owner == owner
    ]
    rows += [
        _project_occupational(person, op, retirement_age, a)
        for op in position.occupational_pensions
        if op.owner == owner and op.scheme != OccupationalScheme.NONE
    ]
    rows += _project_personal(
        person, [p for p in position.personal_pensions if p.owner == owner],
        position.as_of.year, a,
    )
    return rows


def project_pensions(
    position: FinancialPosition,
    assumptions: "Assumptions | dict | None" = None,
    retirement_age: int | None = None,
) -> PensionProjection:
    """Project every pension product of the household.

    retirement_age is the primary's retirement age (default: the position's
    target); the spouse's retirement age moves by the same number of years.
    Records of an owner without a profile are projected on the primary's.
    """
    a = resolve_assumptions(assumptions)
    primary = position.primary
    if retirement_age is None:
        retirement_age = primary.retirement_age
    shift = retirement_age - primary.retirement_age

    rows: list[ProductProjection] = []
    for owner in Owner:
        person = position.person(owner)
        if person is None:
            person = PersonProfile(owner, primary.current_age, primary.retirement_age)
        rows += _project_person(person, person.retirement_age + shift, position, a)
    return PensionProjection(tuple(rows))
