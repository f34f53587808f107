"""Raw household records as supplied by the data-entry layer.

Category tags are closed StrEnums. Free-form strings from storage or TOML
are converted with parse_tag(), which rejects anything outside the enum.
"""

from dataclasses import dataclass
from datetime import date
from enum import StrEnum
from typing import TypeVar


E = TypeVar("E", bound=StrEnum)


class InvalidHousehold(ValueError):
    """A raw household record cannot be aggregated."""


class Owner(StrEnum):
    SELF = "self"
    SPOUSE = "spouse"


class Frequency(StrEnum):
    MONTHLY = "monthly"
    YEARLY = "yearly"


class IncomeCategory(StrEnum):
    LABOR = "labor"
    BUSINESS = "business"
    PENSION = "pension"
    RENTAL = "rental"
    FINANCIAL = "financial"
    OTHER = "other"


class ExpenseCategory(StrEnum):
    # 고정비
    HOUSING = "housing"
    EDUCATION = "education"
    INSURANCE = "insurance"
    LOAN = "loan"
    OTHER_FIXED = "other_fixed"
    # 변동 생활비
    FOOD = "food"
    TRANSPORT = "transport"
    SHOPPING = "shopping"
    LEISURE = "leisure"
    OTHER_VARIABLE = "other_variable"

    @property
    def is_fixed(self) -> bool:
        return self in FIXED_EXPENSE_CATEGORIES


FIXED_EXPENSE_CATEGORIES = frozenset({
    ExpenseCategory.HOUSING,
    ExpenseCategory.EDUCATION,
    ExpenseCategory.INSURANCE,
    ExpenseCategory.LOAN,
    ExpenseCategory.OTHER_FIXED,
})
VARIABLE_EXPENSE_CATEGORIES = (
    ExpenseCategory.FOOD,
    ExpenseCategory.TRANSPORT,
    ExpenseCategory.SHOPPING,
    ExpenseCategory.LEISURE,
    ExpenseCategory.OTHER_VARIABLE,
)


class Tenure(StrEnum):
    OWNED = "owned"             # 자가
    JEONSE = "jeonse"           # 전세
    MONTHLY_RENT = "monthly_rent"  # 월세
    FREE = "free"               # 무상


class AccountKind(StrEnum):
    # cash-like
    CHECKING = "checking"
    SAVINGS = "savings"
    TIME_DEPOSIT = "time_deposit"
    # investment-like
    DOMESTIC_STOCK = "domestic_stock"
    FOREIGN_STOCK = "foreign_stock"
    FUND = "fund"
    BOND = "bond"
    CRYPTO = "crypto"
    GOLD = "gold"
    OTHER = "other"

    @property
    def is_cash(self) -> bool:
        return self in CASH_ACCOUNT_KINDS


CASH_ACCOUNT_KINDS = frozenset({
    AccountKind.CHECKING,
    AccountKind.SAVINGS,
    AccountKind.TIME_DEPOSIT,
})


class DebtType(StrEnum):
    MORTGAGE = "mortgage"
    CREDIT = "credit"
    CREDIT_LINE = "credit_line"  # 마이너스통장
    OTHER = "other"


class OccupationalScheme(StrEnum):
    DB = "db"
    DC = "dc"
    NONE = "none"


class PayoutMode(StrEnum):
    LUMP_SUM = "lump_sum"
    ANNUITY = "annuity"


class PersonalProduct(StrEnum):
    PENSION_SAVINGS = "pension_savings"  # 연금저축
    IRP = "irp"
    ISA = "isa"


class RolloverTarget(StrEnum):
    PENSION_SAVINGS = "pension_savings"
    IRP = "irp"
    CASH = "cash"


# Legacy tags written by older data-entry forms
_TAG_ALIASES: dict[type, dict[str, str]] = {
    OccupationalScheme: {"severance": "db", "corporate_irp": "dc"},
    AccountKind: {"deposit": "time_deposit"},
    Tenure: {"자가": "owned", "전세": "jeonse", "월세": "monthly_rent", "무상": "free"},
}


def parse_tag(enum_cls: type[E], value: "str | E") -> E:
    """Convert a stored tag to its enum member. Raises InvalidHousehold."""
    if isinstance(value, enum_cls):
        return value
    raw = str(value).strip().lower()
    raw = _TAG_ALIASES.get(enum_cls, {}).get(raw, raw)
    try:
        return enum_cls(raw)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise InvalidHousehold(
            f"{enum_cls.__name__}: 알 수 없는 값 '{value}'（허용: {allowed}）"
        ) from None


@dataclass(frozen=True)
class Person:
    role: Owner
    age: int | None = None
    birth_date: date | None = None
    retirement_age: int = 60
    life_expectancy: int = 90


@dataclass(frozen=True)
class FamilyMember:
    relationship: str
    name: str = ""
    birth_date: date | None = None
    gender: str | None = None


@dataclass(frozen=True)
class IncomeStream:
    owner: Owner
    category: IncomeCategory
    amount: float
    frequency: Frequency = Frequency.MONTHLY


@dataclass(frozen=True)
class ExpenseItem:
    category: ExpenseCategory
    amount: float
    frequency: Frequency = Frequency.MONTHLY
    title: str = ""


@dataclass(frozen=True)
class HousingPosition:
    tenure: Tenure
    market_value: float = 0.0
    deposit: float = 0.0
    monthly_rent: float = 0.0
    maintenance_fee: float = 0.0
    loan_amount: float = 0.0
    loan_rate: float | None = None

    @property
    def has_loan(self) -> bool:
        return self.loan_amount > 0


@dataclass(frozen=True)
class Account:
    kind: AccountKind
    balance: float
    owner: Owner = Owner.SELF
    title: str = ""


@dataclass(frozen=True)
class DebtItem:
    type: DebtType
    principal: float
    rate: float
    current_balance: float | None = None

    @property
    def outstanding(self) -> float:
        """Current balance, falling back to principal when unknown."""
        return self.current_balance or self.principal


@dataclass(frozen=True)
class NationalPension:
    owner: Owner
    monthly_amount: float
    start_age: int | None = None


@dataclass(frozen=True)
class OccupationalPension:
    owner: Owner
    scheme: OccupationalScheme
    years_of_service: float = 0.0
    balance: float = 0.0
    payout_mode: PayoutMode = PayoutMode.ANNUITY
    start_age: int | None = None
    payout_years: int | None = None


@dataclass(frozen=True)
class PersonalPension:
    owner: Owner
    product: PersonalProduct
    balance: float = 0.0
    monthly_contribution: float = 0.0
    start_age: int | None = None
    payout_years: int | None = None
    # ISA only
    maturity_year: int | None = None
    rollover_target: RolloverTarget = RolloverTarget.PENSION_SAVINGS


@dataclass(frozen=True)
class Household:
    """Everything the data layer knows about a household. Any section may be empty."""

    people: tuple[Person, ...] = ()
    family: tuple[FamilyMember, ...] = ()
    incomes: tuple[IncomeStream, ...] = ()
    expenses: tuple[ExpenseItem, ...] = ()
    # 항목별 입력 없이 총액만 있는 경우의 월 생활비
    living_expense: float | None = None
    housing: HousingPosition | None = None
    accounts: tuple[Account, ...] = ()
    debts: tuple[DebtItem, ...] = ()
    national_pensions: tuple[NationalPension, ...] = ()
    occupational_pensions: tuple[OccupationalPension, ...] = ()
    personal_pensions: tuple[PersonalPension, ...] = ()

    def person(self, role: Owner) -> Person | None:
        for p in self.people:
            if p.role == role:
                return p
        return None
