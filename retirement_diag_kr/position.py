"""Position aggregation: raw household records → one FinancialPosition."""

import math
from dataclasses import dataclass, field
from datetime import date

from retirement_diag_kr.household import (
    VARIABLE_EXPENSE_CATEGORIES,
    DebtType,
    ExpenseCategory,
    Frequency,
    Household,
    IncomeCategory,
    InvalidHousehold,
    NationalPension,
    OccupationalPension,
    OccupationalScheme,
    Owner,
    Person,
    PersonalPension,
    Tenure,
)
from retirement_diag_kr.params import Heuristics
from retirement_diag_kr.tvm import round_half_up

DEFAULT_CURRENT_AGE = 40  # 생년월일 미입력 시

# 생활비 총액만 있을 때의 항목별 배분 비율（기타 = 잔여）
LIVING_EXPENSE_SPLIT: tuple[tuple[ExpenseCategory, float], ...] = (
    (ExpenseCategory.FOOD, 0.35),
    (ExpenseCategory.TRANSPORT, 0.15),
    (ExpenseCategory.SHOPPING, 0.20),
    (ExpenseCategory.LEISURE, 0.15),
)


@dataclass(frozen=True)
class PersonProfile:
    role: Owner
    current_age: int
    retirement_age: int
    monthly_labor_income: float = 0.0

    @property
    def years_to_retirement(self) -> int:
        return max(0, self.retirement_age - self.current_age)


@dataclass(frozen=True)
class ChildInfo:
    name: str
    age: int
    gender: str | None = None


@dataclass(frozen=True)
class FinancialPosition:
    """Canonical household snapshot in one money unit (만원)."""

    as_of: date
    people: tuple[PersonProfile, ...]
    life_expectancy: int

    # 현금흐름（월）
    monthly_income: float = 0.0
    monthly_fixed_expense: float = 0.0
    living_expense_breakdown: dict[ExpenseCategory, float] = field(default_factory=dict)

    # 자산
    real_estate_asset: float = 0.0
    cash_asset: float = 0.0
    deposit_asset: float = 0.0  # 전세/월세 보증금
    investment_asset: float = 0.0
    pension_asset: float = 0.0

    # 부채（대표 금리는 연율）
    mortgage_amount: float = 0.0
    mortgage_rate: float = 0.045
    credit_amount: float = 0.0
    credit_rate: float = 0.068
    other_debt_amount: float = 0.0
    other_debt_rate: float = 0.05

    national_pensions: tuple[NationalPension, ...] = ()
    occupational_pensions: tuple[OccupationalPension, ...] = ()
    personal_pensions: tuple[PersonalPension, ...] = ()

    children: tuple[ChildInfo, ...] = ()

    def person(self, role: Owner) -> PersonProfile | None:
        for p in self.people:
            if p.role == role:
                return p
        return None

    @property
    def primary(self) -> PersonProfile:
        primary = self.person(Owner.SELF)
        return primary if primary is not None else self.people[0]

    @property
    def current_age(self) -> int:
        return self.primary.current_age

    @property
    def target_retirement_age(self) -> int:
        return self.primary.retirement_age

    @property
    def spouse_age(self) -> int | None:
        spouse = self.person(Owner.SPOUSE)
        return spouse.current_age if spouse is not None else None

    @property
    def living_expense(self) -> float:
        return sum(self.living_expense_breakdown.values())

    @property
    def financial_asset(self) -> float:
        return self.cash_asset + self.investment_asset

    @property
    def total_debt(self) -> float:
        return self.mortgage_amount + self.credit_amount + self.other_debt_amount


def to_monthly(amount: float, frequency: Frequency) -> float:
    """Convert an amount to its monthly figure. Yearly amounts are divided by 12 and rounded."""
    if frequency == Frequency.YEARLY:
        return round_half_up(amount / 12)
    return amount


def age_on(birth_date: date, as_of: date) -> int:
    """Completed years of age (만 나이) on as_of."""
    before_birthday = (as_of.month, as_of.day) < (birth_date.month, birth_date.day)
    return as_of.year - birth_date.year - int(before_birthday)


def _check_amount(label: str, value: float | None) -> None:
    if value is None:
        return
    if not math.isfinite(value) or value < 0:
        raise InvalidHousehold(f"{label}: 금액은 0 이상이어야 합니다（입력값 {value}）")


def _check_payout_years(label: str, years: int | None) -> None:
    if years is not None and years <= 0:
        raise InvalidHousehold(f"{label}: 수령 기간은 양수여야 합니다（입력값 {years}）")


def validate_household(household: Household) -> None:
    """Reject records the engine cannot interpret. Raises InvalidHousehold."""
    for item in household.incomes:
        _check_amount(f"소득({item.category})", item.amount)
    for item in household.expenses:
        _check_amount(f"지출({item.category})", item.amount)
    _check_amount("생활비", household.living_expense)
    if household.housing is not None:
        h = household.housing
        for label, value in [
            ("주택 시세", h.market_value), ("보증금", h.deposit), ("월세", h.monthly_rent),
            ("관리비", h.maintenance_fee), ("주택담보대출", h.loan_amount),
        ]:
            _check_amount(label, value)
    for account in household.accounts:
        _check_amount(f"계좌({account.kind})", account.balance)
    for debt in household.debts:
        _check_amount(f"부채({debt.type})", debt.principal)
        _check_amount(f"부채({debt.type}) 잔액", debt.current_balance)
    for np_ in household.national_pensions:
        _check_amount("국민연금", np_.monthly_amount)
    for op in household.occupational_pensions:
        _check_amount("퇴직연금 잔액", op.balance)
        _check_amount("퇴직연금 근속연수", op.years_of_service)
        _check_payout_years(f"퇴직연금({op.owner})", op.payout_years)
    for pp in household.personal_pensions:
        _check_amount(f"개인연금({pp.product}) 잔액", pp.balance)
        _check_amount(f"개인연금({pp.product}) 월납입", pp.monthly_contribution)
        _check_payout_years(f"개인연금({pp.product})", pp.payout_years)


def _resolve_age(person: Person | None, as_of: date) -> int | None:
    if person is None:
        return None
    if person.age is not None:
        return person.age
    if person.birth_date is not None:
        return age_on(person.birth_date, as_of)
    return None


def _owners_in_records(household: Household) -> set[Owner]:
    owners = {i.owner for i in household.incomes}
    owners |= {a.owner for a in household.accounts}
    owners |= {p.owner for p in household.national_pensions}
    owners |= {p.owner for p in household.occupational_pensions}
    owners |= {p.owner for p in household.personal_pensions}
    return owners


def _build_profiles(household: Household, as_of: date) -> tuple[PersonProfile, ...]:
    """Self is always present; spouse when declared or owning any record.

    A spouse without a known age or retirement age borrows the primary's.
    """
    labor = {Owner.SELF: 0.0, Owner.SPOUSE: 0.0}
    for item in household.incomes:
        if item.category == IncomeCategory.LABOR:
            labor[item.owner] += to_monthly(item.amount, item.frequency)

    me = household.person(Owner.SELF)
    my_age = _resolve_age(me, as_of)
    if my_age is None:
        my_age = DEFAULT_CURRENT_AGE
    my_retirement = me.retirement_age if me is not None else Person(Owner.SELF).retirement_age
    profiles = [PersonProfile(Owner.SELF, my_age, my_retirement, labor[Owner.SELF])]

    spouse = household.person(Owner.SPOUSE)
    if spouse is not None or Owner.SPOUSE in _owners_in_records(household):
        spouse_age = _resolve_age(spouse, as_of)
        profiles.append(PersonProfile(
            Owner.SPOUSE,
            spouse_age if spouse_age is not None else my_age,
            spouse.retirement_age if spouse is not None else my_retirement,
            labor[Owner.SPOUSE],
        ))
    return tuple(profiles)


def _living_expense_breakdown(household: Household) -> dict[ExpenseCategory, float]:
    breakdown = {c: 0.0 for c in VARIABLE_EXPENSE_CATEGORIES}
    variable_items = [e for e in household.expenses if not e.category.is_fixed]
    if variable_items:
        for item in variable_items:
            breakdown[item.category] += to_monthly(item.amount, item.frequency)
    elif household.living_expense:
        total = household.living_expense
        for category, share in LIVING_EXPENSE_SPLIT:
            breakdown[category] = round_half_up(total * share)
        breakdown[ExpenseCategory.OTHER_VARIABLE] = total - sum(breakdown.values())
    return breakdown


def _representative_rate(rates: list[float], default: float) -> float:
    return rates[0] if rates else default


def aggregate_position(
    household: Household, as_of: date, heuristics: Heuristics | None = None,
) -> FinancialPosition:
    """Normalize raw household records into one FinancialPosition as of a date.

    Missing sections (no housing, no debts, ...) contribute zero.
    """
    validate_household(household)
    h = heuristics or Heuristics()
    people = _build_profiles(household, as_of)
    me = household.person(Owner.SELF)
    life_expectancy = me.life_expectancy if me is not None else Person(Owner.SELF).life_expectancy

    monthly_income = sum(to_monthly(i.amount, i.frequency) for i in household.incomes)

    housing = household.housing
    monthly_fixed = 0.0
    if housing is not None:
        monthly_fixed += housing.monthly_rent + housing.maintenance_fee
    monthly_fixed += sum(
        to_monthly(e.amount, e.frequency) for e in household.expenses if e.category.is_fixed
    )

    real_estate = 0.0
    deposit = 0.0
    if housing is not None:
        if housing.tenure == Tenure.OWNED:
            real_estate = housing.market_value
        elif housing.tenure in (Tenure.JEONSE, Tenure.MONTHLY_RENT):
            deposit = housing.deposit

    cash = sum(a.balance for a in household.accounts if a.kind.is_cash)
    investment = sum(a.balance for a in household.accounts if not a.kind.is_cash)
    pension_asset = (
        sum(p.balance for p in household.occupational_pensions if p.scheme != OccupationalScheme.NONE)
        + sum(p.balance for p in household.personal_pensions)
    )

    mortgage_amounts: list[float] = []
    mortgage_rates: list[float] = []
    if housing is not None and housing.has_loan:
        mortgage_amounts.append(housing.loan_amount)
        mortgage_rates.append(
            housing.loan_rate if housing.loan_rate is not None else h.default_mortgage_rate
        )
    mortgages = [d for d in household.debts if d.type == DebtType.MORTGAGE]
    credits = [d for d in household.debts if d.type in (DebtType.CREDIT, DebtType.CREDIT_LINE)]
    others = [d for d in household.debts if d.type == DebtType.OTHER]
    mortgage_amounts += [d.outstanding for d in mortgages]
    mortgage_rates += [d.rate for d in mortgages]

    children = sorted(
        (
            ChildInfo(
                name=m.name or f"자녀{i + 1}",
                age=age_on(m.birth_date, as_of) if m.birth_date else 0,
                gender=m.gender if m.gender in ("male", "female") else None,
            )
            for i, m in enumerate(x for x in household.family if x.relationship == "child")
        ),
        key=lambda c: -c.age,
    )

    return FinancialPosition(
        as_of=as_of,
        people=people,
        life_expectancy=life_expectancy,
        monthly_income=monthly_income,
        monthly_fixed_expense=monthly_fixed,
        living_expense_breakdown=_living_expense_breakdown(household),
        real_estate_asset=real_estate,
        cash_asset=cash,
        deposit_asset=deposit,
        investment_asset=investment,
        pension_asset=pension_asset,
        mortgage_amount=sum(mortgage_amounts),
        mortgage_rate=_representative_rate(mortgage_rates, h.default_mortgage_rate),
        credit_amount=sum(d.outstanding for d in credits),
        credit_rate=_representative_rate([d.rate for d in credits], h.default_credit_rate),
        other_debt_amount=sum(d.outstanding for d in others),
        other_debt_rate=_representative_rate([d.rate for d in others], h.default_other_debt_rate),
        national_pensions=household.national_pensions,
        occupational_pensions=household.occupational_pensions,
        personal_pensions=household.personal_pensions,
        children=tuple(children),
    )
