"""CLI entry point for chart generation."""

import sys
from pathlib import Path

from retirement_diag_kr.charts import plot_coverage, plot_trajectory
from retirement_diag_kr.config import build_assumptions, parse_args, resolve_as_of
from retirement_diag_kr.position import aggregate_position
from retirement_diag_kr.scenarios import compare_retirement_ages
from retirement_diag_kr.trajectory import project_trajectory


def _add_chart_args(parser):
    parser.add_argument(
        "--output", type=Path, default=Path("reports/charts"),
        help="출력 디렉터리 (default: reports/charts)",
    )
    parser.add_argument(
        "--name", type=str, default="",
        help="출력 파일명 접미사（예: 40 → trajectory-40.png）",
    )


def main(argv: list[str] | None = None):
    r, household, args = parse_args("은퇴 진단 차트 생성", _add_chart_args, argv)
    try:
        assumptions = build_assumptions(r)
        position = aggregate_position(household, resolve_as_of(r), assumptions.heuristics)
        scenarios = compare_retirement_ages(position, assumptions)
        trajectories = {
            s.retire_age: project_trajectory(position, assumptions, s.retire_age)
            for s in scenarios
        }
    except ValueError as e:
        print(f"진단할 수 없습니다: {e}", file=sys.stderr)
        raise SystemExit(1)

    life = assumptions.life_expectancy or position.life_expectancy
    ages = ", ".join(f"{s.retire_age}세" for s in scenarios)
    print(f"은퇴 나이별 추이（{ages}）...", file=sys.stderr)
    path = plot_trajectory(trajectories, args.output, name=args.name, life_expectancy=life)
    print(f"  → {path}", file=sys.stderr)
    path = plot_coverage(scenarios, args.output, name=args.name)
    print(f"  → {path}", file=sys.stderr)
    print("완료", file=sys.stderr)


if __name__ == "__main__":
    main()
