"""Markdown rendering of the coverage comment."""

from __future__ import annotations

import math

from covmon_core.metrics import CategoryMetric, Metric

# Fixed: the comment colour is not tied to the configurable terminal thresholds.
_PASSING_AVERAGE = 50

_BADGE_URL = "https://img.shields.io/static/v1?label=coverage&message={percent}%25&color={color}"


def comment_marker(context: str) -> str:
    """First line of every comment this bot writes for the given context.

    The reconciler recognizes its own comments by prefix match on this string,
    so two contexts never touch each other's comments.
    """
    return f"<!-- coverage: {context} -->"


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def badge_color(metric: Metric) -> str:
    return "green" if metric.average_rate > _PASSING_AVERAGE else "red"


def badge_url(metric: Metric) -> str:
    return _BADGE_URL.format(percent=_round_half_up(metric.average_rate), color=badge_color(metric))


def format_category(category: CategoryMetric) -> str:
    return f"{category.rate:.2f}% ( {category.covered} / {category.total} )"


def render_comment(metric: Metric, context: str) -> str:
    celebrate = " 🎉" if metric.average_rate > _PASSING_AVERAGE else ""
    lines = [
        comment_marker(context),
        f"## {context}{celebrate}",
        f"|  Totals | ![Coverage]({badge_url(metric)}) |",
        "| :-- | --: |",
        f"| Statements: | {format_category(metric.statements)} |",
        f"| Methods: | {format_category(metric.methods)} |",
        f"| Lines: | {format_category(metric.lines)} |",
        f"| Branches: | {format_category(metric.branches)} |",
    ]
    return "\n".join(lines) + "\n"
