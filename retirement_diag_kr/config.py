"""TOML household loader with CLI > config > default resolution."""

import argparse
import dataclasses
import sys
import tomllib
from collections.abc import Callable
from datetime import date
from pathlib import Path

from retirement_diag_kr.household import (
    Account,
    AccountKind,
    DebtItem,
    DebtType,
    ExpenseCategory,
    ExpenseItem,
    FamilyMember,
    Frequency,
    Household,
    HousingPosition,
    IncomeCategory,
    IncomeStream,
    InvalidHousehold,
    NationalPension,
    OccupationalPension,
    OccupationalScheme,
    Owner,
    PayoutMode,
    Person,
    PersonalPension,
    PersonalProduct,
    RolloverTarget,
    Tenure,
    parse_tag,
)
from retirement_diag_kr.params import DEFAULT_ASSUMPTIONS, Assumptions

DEFAULT_CONFIG_PATH = Path("household.toml")

DEFAULTS = {
    "as_of": "",  # "" → 오늘
    "retirement_age_offset": DEFAULT_ASSUMPTIONS.retirement_age_offset,
    "living_expense_ratio": DEFAULT_ASSUMPTIONS.living_expense_ratio,
    "inflation_rate": DEFAULT_ASSUMPTIONS.inflation_rate,
    "income_growth_rate": DEFAULT_ASSUMPTIONS.income_growth_rate,
    "investment_return_rate": DEFAULT_ASSUMPTIONS.investment_return_rate,
    "life_expectancy": None,
}

# table name → (record class, {field: tag enum})
RECORD_TABLES: dict[str, tuple[type, dict[str, type]]] = {
    "people": (Person, {"role": Owner}),
    "family": (FamilyMember, {}),
    "incomes": (IncomeStream, {"owner": Owner, "category": IncomeCategory, "frequency": Frequency}),
    "expenses": (ExpenseItem, {"category": ExpenseCategory, "frequency": Frequency}),
    "accounts": (Account, {"kind": AccountKind, "owner": Owner}),
    "debts": (DebtItem, {"type": DebtType}),
    "national_pensions": (NationalPension, {"owner": Owner}),
    "occupational_pensions": (
        OccupationalPension,
        {"owner": Owner, "scheme": OccupationalScheme, "payout_mode": PayoutMode},
    ),
    "personal_pensions": (
        PersonalPension,
        {"owner": Owner, "product": PersonalProduct, "rollover_target": RolloverTarget},
    ),
}
DATE_FIELDS = {"birth_date"}


def load_config(path: Path | None = None) -> dict:
    """Load TOML household file. Returns empty dict if file doesn't exist.

    The [assumptions] table is flattened into the top level so resolve()
    sees assumption keys the same way as CLI flags.
    """
    if path is None:
        path = DEFAULT_CONFIG_PATH
    if not path.exists():
        return {}
    try:
        with open(path, "rb") as f:
            raw = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        print(f"설정 파일을 읽을 수 없습니다: {path}: {e}", file=sys.stderr)
        raise SystemExit(1)
    assumptions = raw.pop("assumptions", {})
    for key, value in assumptions.items():
        raw.setdefault(key, value)
    # TOML date literal → ISO string（CLI 값과 같은 형식）
    if isinstance(raw.get("as_of"), date):
        raw["as_of"] = raw["as_of"].isoformat()
    return raw


def _to_date(value) -> date | None:
    if value is None or isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        raise InvalidHousehold(f"날짜 형식이 잘못되었습니다: {value}") from None


def _record(table: str, cls: type, tags: dict[str, type], raw: dict):
    known = {f.name for f in dataclasses.fields(cls)}
    unknown = set(raw) - known
    if unknown:
        raise InvalidHousehold(f"[{table}] 알 수 없는 항목: {', '.join(sorted(unknown))}")
    values = {}
    for key, value in raw.items():
        if key in tags:
            value = parse_tag(tags[key], value)
        elif key in DATE_FIELDS:
            value = _to_date(value)
        values[key] = value
    try:
        return cls(**values)
    except TypeError as e:
        raise InvalidHousehold(f"[{table}] 필수 항목이 없습니다: {e}") from None


def build_household(config: dict) -> Household:
    """Build a Household from the TOML tables. Raises InvalidHousehold."""
    sections = {}
    for table, (cls, tags) in RECORD_TABLES.items():
        rows = config.get(table, [])
        sections[table] = tuple(_record(table, cls, tags, row) for row in rows)
    housing = None
    if "housing" in config:
        housing = _record("housing", HousingPosition, {"tenure": Tenure}, config["housing"])
    return Household(
        housing=housing,
        living_expense=config.get("living_expense"),
        **sections,
    )


def create_parser(description: str) -> argparse.ArgumentParser:
    """Create argparse parser with shared diagnosis flags."""
    d = DEFAULTS
    parser = argparse.ArgumentParser(description=description)
    parser.add_argument("--config", type=Path, default=None, help="가구 정보 파일 경로 (default: household.toml)")
    parser.add_argument("--as-of", dest="as_of", type=str, default=None, help="기준일 YYYY-MM-DD (default: 오늘)")
    parser.add_argument("--offset", dest="retirement_age_offset", type=int, default=None, help=f"목표 은퇴 나이 조정（년）(default: {d['retirement_age_offset']})")
    parser.add_argument("--living-ratio", dest="living_expense_ratio", type=float, default=None, help=f"은퇴 후 생활비 비율 (default: {d['living_expense_ratio']})")
    parser.add_argument("--inflation", dest="inflation_rate", type=float, default=None, help=f"물가상승률 (default: {d['inflation_rate']})")
    parser.add_argument("--income-growth", dest="income_growth_rate", type=float, default=None, help=f"소득상승률 (default: {d['income_growth_rate']})")
    parser.add_argument("--return", dest="investment_return_rate", type=float, default=None, help=f"투자수익률 (default: {d['investment_return_rate']})")
    parser.add_argument("--life-expectancy", type=int, default=None, help="기대수명（생략 시 본인 정보의 기대수명）")
    return parser


def resolve(args: argparse.Namespace, config: dict) -> dict:
    """Resolve values with priority: CLI flag > household.toml > hardcoded default."""
    resolved = {}
    for key, default in DEFAULTS.items():
        cli_val = getattr(args, key, None)
        resolved[key] = cli_val if cli_val is not None else config.get(key, default)
    return resolved


def build_assumptions(r: dict) -> Assumptions:
    """Build Assumptions from a resolved dict."""
    return dataclasses.replace(
        DEFAULT_ASSUMPTIONS,
        retirement_age_offset=int(r["retirement_age_offset"]),
        living_expense_ratio=float(r["living_expense_ratio"]),
        inflation_rate=float(r["inflation_rate"]),
        income_growth_rate=float(r["income_growth_rate"]),
        investment_return_rate=float(r["investment_return_rate"]),
        life_expectancy=r["life_expectancy"],
    )


def resolve_as_of(r: dict, today: date | None = None) -> date:
    if not r["as_of"]:
        return today or date.today()
    return date.fromisoformat(r["as_of"])


def parse_args(
    description: str,
    add_args_fn: "Callable[[argparse.ArgumentParser], None] | None" = None,
    argv: list[str] | None = None,
) -> tuple[dict, Household, argparse.Namespace]:
    """Parse CLI args, load the household file, resolve values.

    Returns (resolved_dict, household, namespace).
    """
    parser = create_parser(description)
    if add_args_fn:
        add_args_fn(parser)
    args = parser.parse_args(argv)
    config = load_config(args.config)
    r = resolve(args, config)
    try:
        household = build_household(config)
    except InvalidHousehold as e:
        print(f"가구 정보 오류: {e}", file=sys.stderr)
        raise SystemExit(1)
    return r, household, args
