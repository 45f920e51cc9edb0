"""Formatted ASCII tables for regression, mediation and moderation results.

The layout mirrors the statsmodels summary style: a header panel of
model-level statistics followed by a coefficient panel.  Every
``format_*`` function is pure: it takes a result object and returns
the table as a string.  The ``print_*`` wrappers write it to stdout.
"""

from __future__ import annotations

import math
import textwrap
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ._results import MediationReport, ModerationReport, RegressionResult

WIDTH = 80


def _truncate(name: str, max_len: int) -> str:
    """Truncate *name* to *max_len*, appending ``'...'`` if needed."""
    if len(name) <= max_len:
        return name
    return name[: max_len - 3] + "..."


def _fmt_num(val: object, digits: int = 4) -> str:
    """Format a statistic; ``None`` and NaN display as ``'N/A'``."""
    if val is None:
        return "N/A"
    if isinstance(val, float):
        if math.isnan(val):
            return "N/A"
        return f"{val:.{digits}f}"
    return str(val)


def _wrap(text: str, width: int = WIDTH, indent: int = 2) -> str:
    """Word-wrap *text* to *width*, indenting continuation lines."""
    return textwrap.fill(
        text,
        width=width,
        initial_indent="",
        subsequent_indent=" " * indent,
    )


def _title(lines: list[str], title: str) -> None:
    lines.append("=" * WIDTH)
    for line in textwrap.wrap(title, width=WIDTH - 2):
        lines.append(f"{line:^{WIDTH}}")
    lines.append("=" * WIDTH)


def _pair_row(left_label: str, left_value: object, right_label: str, right_value: object) -> str:
    """One header row: a flush-left pair in 40 columns, a right-aligned pair in 40."""
    lv = _truncate(str(left_value), 22)
    return f"{left_label:<18}{lv:<22}{right_label:>28} {_fmt_num(right_value):>11}"


def _regression_lines(lines: list[str], result: RegressionResult) -> None:
    lines.append(
        _pair_row("Dep. Variable:", result.dependent, "R-squared:", result.r_squared)
    )
    lines.append(
        _pair_row("Solver:", result.solver, "Adj. R-squared:", result.adj_r_squared)
    )
    lines.append(
        _pair_row("No. Observations:", result.n_observations, "Residual Std. Error:", result.sigma)
    )
    lines.append(_pair_row("No. Independent:", result.n_independent, "SSR:", result.ssr))
    lines.append(_pair_row("", "", "SSE:", result.sse))
    lines.append(_pair_row("", "", "SST:", result.sst))
    lines.append("-" * WIDTH)
    lines.append(f"{'Term':<40}{'Coef':>40}")
    lines.append("-" * WIDTH)
    for name, value in result.coefficients.items():
        lines.append(f"{_truncate(name, 40):<40}{_fmt_num(value):>40}")


def format_regression_table(
    result: RegressionResult,
    *,
    title: str = "OLS Regression Results",
) -> str:
    """Render one regression fit as an 80-column table."""
    lines: list[str] = []
    _title(lines, title)
    _regression_lines(lines, result)
    lines.append("=" * WIDTH)
    lines.append("Notes:")
    lines.append(
        "  " + _wrap("Point estimates only; no standard errors or p-values are computed.")
    )
    return "\n".join(lines)


def format_mediation_table(
    report: MediationReport,
    *,
    title: str = "Mediation Analysis Results",
    include_models: bool = True,
) -> str:
    """Render a mediation report: effect summary, then the three fits."""
    lines: list[str] = []
    _title(lines, title)
    lines.append(f"{'Predictor (X):':<18}{_truncate(report.predictor, WIDTH - 18)}")
    lines.append(f"{'Mediator (M):':<18}{_truncate(report.mediator, WIDTH - 18)}")
    lines.append(f"{'Outcome (Y):':<18}{_truncate(report.outcome, WIDTH - 18)}")
    lines.append("-" * WIDTH)
    lines.append(f"{'Effect':<40}{'Estimate':>40}")
    lines.append("-" * WIDTH)
    rows = [
        ("a path (X -> M)", report.a_path),
        ("b path (M -> Y | X)", report.b_path),
        ("Indirect effect (a * b)", report.indirect_effect),
        ("Direct effect (c')", report.direct_effect),
        ("Total effect (c)", report.total_effect),
        ("Direct + indirect (c' + a * b)", report.total_effect_check),
        ("Proportion mediated", report.proportion_mediated),
    ]
    for label, value in rows:
        lines.append(f"{label:<40}{_fmt_num(value):>40}")
    lines.append("-" * WIDTH)
    lines.append(_wrap(report.interpretation))

    if include_models:
        for heading, model in (
            ("Regression 1: M = Intercept + a*X", report.mediator_model),
            ("Regression 2: Y = Intercept + c'*X + b*M", report.outcome_model),
            ("Regression 3: Y = Intercept + c*X (total effect)", report.total_model),
        ):
            lines.append("")
            lines.append(heading)
            lines.append("-" * WIDTH)
            _regression_lines(lines, model)
    lines.append("=" * WIDTH)
    return "\n".join(lines)


def format_moderation_table(
    report: ModerationReport,
    *,
    title: str = "Moderation Analysis Results",
) -> str:
    """Render a moderation report: the interaction fit, then the verdict."""
    lines: list[str] = []
    _title(lines, title)
    lines.append(f"{'Predictor (X):':<18}{_truncate(report.predictor, WIDTH - 18)}")
    lines.append(f"{'Moderator (W):':<18}{_truncate(report.moderator, WIDTH - 18)}")
    lines.append(f"{'Outcome (Y):':<18}{_truncate(report.outcome, WIDTH - 18)}")
    centred = " (mean-centred X, W)" if report.centered else ""
    lines.append(f"Model: Y = Intercept + b1*X + b2*W + b3*(X*W){centred}")
    lines.append("-" * WIDTH)
    _regression_lines(lines, report.model)
    lines.append("-" * WIDTH)
    lines.append(
        f"{'Interaction (' + _truncate(report.interaction_name, 24) + '):':<40}"
        f"{_fmt_num(report.interaction_coef):>40}"
    )
    lines.append(f"{'Threshold:':<40}{report.threshold:>40g}")
    lines.append(f"{'Verdict:':<40}{report.verdict:>40}")
    lines.append("=" * WIDTH)
    lines.append(_wrap(report.interpretation))
    return "\n".join(lines)


def print_regression_table(result: RegressionResult, **kwargs: str) -> None:
    """Print :func:`format_regression_table` output."""
    print(format_regression_table(result, **kwargs))


def print_mediation_table(report: MediationReport, **kwargs: object) -> None:
    """Print :func:`format_mediation_table` output."""
    print(format_mediation_table(report, **kwargs))  # type: ignore[arg-type]


def print_moderation_table(report: ModerationReport, **kwargs: str) -> None:
    """Print :func:`format_moderation_table` output."""
    print(format_moderation_table(report, **kwargs))
