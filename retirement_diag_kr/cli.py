"""CLI entry point for a single household retirement diagnosis."""

import sys

from retirement_diag_kr.config import build_assumptions, parse_args, resolve_as_of
from retirement_diag_kr.diagnosis import DiagnosisMetrics, diagnose
from retirement_diag_kr.pension import PensionProjection
from retirement_diag_kr.position import FinancialPosition, aggregate_position
from retirement_diag_kr.scoring import score_grade, scores_from_diagnosis

OWNER_LABELS = {"self": "본인", "spouse": "배우자"}
PRODUCT_LABELS = {
    "national": "국민연금",
    "db": "퇴직연금(DB)",
    "dc": "퇴직연금(DC)",
    "pension_savings": "연금저축",
    "irp": "IRP",
    "isa": "ISA",
}
ASSET_LABELS = {
    "real_estate": "부동산",
    "cash": "현금성",
    "investment": "투자",
    "deposit": "보증금",
    "pension": "연금",
    "financial": "금융",
}


def _print_header(position: FinancialPosition, m: DiagnosisMetrics):
    print("=" * 72)
    print(f"은퇴 진단（기준일 {position.as_of.isoformat()}, 단위: 만원）")
    spouse = f" / 배우자 {position.spouse_age}세" if position.spouse_age is not None else ""
    print(f"  본인 {m.current_age}세{spouse} / 목표 은퇴 {m.target_retirement_age}세"
          f"（적용 {m.effective_retirement_age}세）/ 기대수명 {m.life_expectancy}세")
    print(f"  은퇴까지 {m.years_to_retirement}년 / 은퇴 후 {m.retirement_years}년")
    if position.children:
        parts = [f"{c.name} {c.age}세" for c in position.children]
        print(f"  자녀: {', '.join(parts)}")
    print("=" * 72)


def _print_ratios(label: str, ratios: dict[str, int]):
    parts = [f"{ASSET_LABELS.get(k, k)} {v}%" for k, v in ratios.items() if v]
    print(f"  {label:<12} {' / '.join(parts) if parts else '-'}")


def _print_present(m: DiagnosisMetrics):
    print("\n【현재 재무 상태】")
    print("-" * 72)
    print(f"  {'월 소득':<12} {m.monthly_income:>10.0f}만")
    print(f"  {'월 지출':<12} {m.current_monthly_expense:>10.0f}만"
          f"（고정 {m.monthly_fixed_expense:.0f} + 생활 {m.living_expense:.0f} + 이자 {m.monthly_interest:.1f}）")
    print(f"  {'월 잉여':<12} {m.current_monthly_gap:>10.0f}만（저축률 {m.savings_rate * 100:.1f}%）")
    print(f"  {'총자산':<12} {m.total_asset:>10.0f}만")
    print(f"  {'총부채':<12} {m.total_debt:>10.0f}만（연 이자 {m.annual_interest:.0f}만, 소득 대비 {m.interest_to_income}%）")
    print(f"  {'순자산':<12} {m.net_worth:>10.0f}만")
    _print_ratios("자산 구성", m.asset_ratios)
    if m.total_debt > 0:
        mortgage = "양호" if m.mortgage_rate_ok else "높음"
        credit = "양호" if m.credit_rate_ok else "높음"
        print(f"  {'금리':<12} 주담대 {m.mortgage_rate * 100:.2f}%（{mortgage}）/ 신용 {m.credit_rate * 100:.2f}%（{credit}）")


def _print_pensions(pensions: PensionProjection):
    print("\n【연금 예상 수령액（월, 명목）】")
    print("-" * 72)
    print(f"  {'소유':<6} {'상품':<14} {'개시':>6} {'기간':>6} {'적립액':>12} {'월 수령':>10}")
    for p in pensions.products:
        owner = OWNER_LABELS.get(str(p.owner), str(p.owner))
        product = PRODUCT_LABELS.get(p.product, p.product)
        years = f"{p.payout_years}년" if p.payout_years else "-"
        note = ""
        if p.rolled_into:
            note = f" → {PRODUCT_LABELS.get(p.rolled_into, '현금')}"
        elif p.lump_sum:
            note = f" 일시금 {p.lump_sum:.0f}만"
        print(f"  {owner:<6} {product:<14} {p.start_age:>5}세 {years:>6} "
              f"{p.accumulation:>11.0f}만 {p.monthly_payment:>9.1f}만{note}")
    print(f"  합계: 국민 {pensions.national_monthly:.1f} + 퇴직 {pensions.occupational_monthly:.1f}"
          f" + 개인 {pensions.personal_monthly:.1f} = {pensions.total_monthly:.1f}만/월")


def _print_retirement(m: DiagnosisMetrics):
    print(f"\n【{m.effective_retirement_age}세 은퇴 시점】")
    print("-" * 72)
    print(f"  {'연금 소득':<12} {m.pension_income:>10.1f}만/월")
    print(f"  {'예상 생활비':<12} {m.projected_expense:>10.1f}만/월"
          f"（최소 {m.min_living_cost:.0f} / 적정 {m.adequate_living_cost:.0f}）")
    print(f"  {'부족/잉여':<12} {m.coverage_gap:>10.1f}만/월（충당률 {m.coverage_rate * 100:.0f}%）")
    print(f"  {'유동자산':<12} {m.liquid_asset_at_retirement:>10.0f}만")
    print(f"  {'총자산':<12} {m.total_asset_at_retirement:>10.0f}만（부채 {m.debt_at_retirement:.0f}만, 순자산 {m.net_worth_at_retirement:.0f}만）")
    _print_ratios("자산 구성", m.retirement_asset_ratios)
    if m.annual_shortfall > 0:
        print(f"  {'필요 자산':<12} {m.required_asset:>10.0f}만（연 부족 {m.annual_shortfall:.0f}만 × {m.retirement_years}년）")
        print(f"  {'자산 고갈':<12} {m.depletion_age:>9}세（인출 가능 {m.years_of_withdrawal:.1f}년）")
    print(f"  {'총 수요':<12} {m.total_demand:>10.0f}만 / 총 공급 {m.total_supply:.0f}만（{m.supply_ratio:.0f}%）")


def _print_verdict(m: DiagnosisMetrics):
    scores = scores_from_diagnosis(m)
    grade, description = score_grade(scores.overall)
    print("\n【진단 결과】")
    print("-" * 72)
    print(f"  {m.verdict_label}: {m.verdict_message}")
    print(f"  준비 점수 {scores.overall}점（{grade}, {description}）"
          f" 소득 {scores.income:.0f} / 지출 {scores.expense:.0f} / 자산 {scores.asset:.0f}"
          f" / 부채 {scores.debt:.0f} / 연금 {scores.pension:.0f}")


def _print_scenarios(m: DiagnosisMetrics):
    if not m.scenarios:
        return
    print("\n【은퇴 나이별 비교】")
    print("-" * 72)
    print(f"  {'은퇴 나이':<10} {'유동자산':>12} {'연금/월':>10} {'생활비/월':>10} {'고갈 나이':>10} {'지속':>6}")
    for s in m.scenarios:
        mark = "O" if s.sustainable else "X"
        print(f"  {s.retire_age:>8}세 {s.projected_liquid_asset:>11.0f}만 {s.pension_income:>9.1f}만 "
              f"{s.projected_expense:>9.1f}만 {s.depletion_age:>9}세 {mark:>6}")


def _add_report_args(parser):
    parser.add_argument("--no-scenarios", action="store_true", help="은퇴 나이별 비교 생략")


def main(argv: list[str] | None = None):
    """Print a retirement diagnosis of the household file."""
    r, household, args = parse_args("가구 은퇴 진단", _add_report_args, argv)
    try:
        assumptions = build_assumptions(r)
        as_of = resolve_as_of(r)
        position = aggregate_position(household, as_of, assumptions.heuristics)
        metrics = diagnose(position, assumptions, with_scenarios=not args.no_scenarios)
    except ValueError as e:
        print(f"진단할 수 없습니다: {e}", file=sys.stderr)
        raise SystemExit(1)

    _print_header(position, metrics)
    _print_present(metrics)
    _print_pensions(metrics.projection.pensions)
    _print_retirement(metrics)
    _print_verdict(metrics)
    _print_scenarios(metrics)


if __name__ == "__main__":
    main()
