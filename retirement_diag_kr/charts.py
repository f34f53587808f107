"""Chart generation for retirement diagnosis results."""

import platform
from pathlib import Path

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import matplotlib.ticker as ticker

from retirement_diag_kr.scenarios import RetirementScenario
from retirement_diag_kr.trajectory import TrajectoryPoint

# Scenario color by position in the (−5, ±0, +5) table
SCENARIO_COLORS = ["#d62728", "#1f77b4", "#2ca02c"]
DEFAULT_COLOR = "#7f7f7f"
COLOR_PENSION = "#1f77b4"
COLOR_EXPENSE = "#c0392b"


def _setup_korean_font():
    """Configure matplotlib to use a Korean font."""
    system = platform.system()
    if system == "Darwin":
        font_family = "AppleGothic"
    elif system == "Linux":
        font_family = "Noto Sans CJK KR"
    else:
        font_family = "sans-serif"
    plt.rcParams["font.family"] = font_family
    plt.rcParams["axes.unicode_minus"] = False


def _format_eok_axis(ax: plt.Axes):
    """Add 억원 labels on Y axis (secondary tick labels)."""
    ax.yaxis.set_major_formatter(
        ticker.FuncFormatter(lambda x, _: f"{x:,.0f}")
    )
    ax_right = ax.secondary_yaxis("right")
    ax_right.yaxis.set_major_formatter(
        ticker.FuncFormatter(lambda x, _: f"{x / 10000:.1f}억" if x != 0 else "0")
    )
    ax_right.set_ylabel("")


def _save(fig, output_path: Path, stem: str, name: str) -> Path:
    output_path.mkdir(parents=True, exist_ok=True)
    suffix = f"-{name}" if name else ""
    filepath = output_path / f"{stem}{suffix}.png"
    fig.tight_layout()
    fig.savefig(filepath, dpi=150)
    plt.close(fig)
    return filepath


def plot_trajectory(
    trajectories: dict[int, list[TrajectoryPoint]],
    output_path: Path,
    name: str = "",
    life_expectancy: int | None = None,
) -> Path:
    """Line chart of liquid assets per retirement age.

    Args:
        trajectories: retirement age → project_trajectory() points.
        output_path: directory to save the PNG.
        name: optional suffix for the output filename.
        life_expectancy: draws a vertical marker when given.

    Returns:
        Path to the generated PNG file.
    """
    _setup_korean_font()
    fig, ax = plt.subplots(figsize=(14, 8))

    for i, (retire_age, points) in enumerate(sorted(trajectories.items())):
        color = SCENARIO_COLORS[i] if i < len(SCENARIO_COLORS) else DEFAULT_COLOR
        ax.plot(
            [p.age for p in points], [p.assets for p in points],
            label=f"{retire_age}세 은퇴", color=color, linewidth=2,
        )
        ax.axvline(retire_age, color=color, linewidth=0.8, linestyle=":", alpha=0.6)

    if life_expectancy is not None:
        ax.axvline(life_expectancy, color="#888888", linewidth=1, linestyle="--", alpha=0.6)
        ax.annotate(
            f"기대수명 {life_expectancy}세",
            xy=(life_expectancy, ax.get_ylim()[1] * 0.95),
            fontsize=11, color="#555555", ha="right", va="top",
        )

    ax.set_xlabel("나이")
    ax.set_ylabel("유동자산（만원）")
    ax.set_title("은퇴 나이별 유동자산 추이")
    ax.legend(loc="upper left")
    ax.grid(True, alpha=0.3)
    _format_eok_axis(ax)
    return _save(fig, output_path, "trajectory", name)


def plot_coverage(
    scenarios: tuple[RetirementScenario, ...] | list[RetirementScenario],
    output_path: Path,
    name: str = "",
) -> Path:
    """Grouped bars: projected monthly pension income vs expense per retirement age."""
    _setup_korean_font()
    fig, ax = plt.subplots(figsize=(10, 6))

    labels = [f"{s.retire_age}세" for s in scenarios]
    xs = range(len(scenarios))
    width = 0.38
    ax.bar([x - width / 2 for x in xs], [s.pension_income for s in scenarios],
           width, label="연금 소득", color=COLOR_PENSION)
    ax.bar([x + width / 2 for x in xs], [s.projected_expense for s in scenarios],
           width, label="예상 생활비", color=COLOR_EXPENSE)
    for x, s in zip(xs, scenarios):
        mark = "지속 가능" if s.sustainable else f"{s.depletion_age}세 고갈"
        top = max(s.pension_income, s.projected_expense)
        ax.annotate(mark, xy=(x, top), ha="center", va="bottom", fontsize=11)

    ax.set_xticks(list(xs))
    ax.set_xticklabels(labels)
    ax.set_ylabel("월 금액（만원, 은퇴 시점 명목）")
    ax.set_title("은퇴 나이별 연금 충당 현황")
    ax.legend(loc="upper left")
    ax.grid(True, axis="y", alpha=0.3)
    ax.yaxis.set_major_formatter(ticker.FuncFormatter(lambda x, _: f"{x:,.0f}"))
    return _save(fig, output_path, "coverage", name)
