"""Per-category coverage rates and the aggregate average."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from covmon_core.report import RawCounts

logger = logging.getLogger(__name__)

CATEGORIES = ("statements", "lines", "methods", "branches")


def calc_rate(covered: int, total: int) -> float:
    """Percentage of covered elements rounded to two decimals; 0 when total is 0."""
    if not total:
        return 0.0
    rate = round(covered / total * 100, 2)
    # covered > total is bad data, not a reason to fail the run.
    return min(max(rate, 0.0), 100.0)


@dataclass(frozen=True)
class CategoryMetric:
    total: int
    covered: int

    @property
    def rate(self) -> float:
        return calc_rate(self.covered, self.total)


@dataclass(frozen=True)
class Metric:
    """Coverage of one report across the four categories."""

    statements: CategoryMetric
    lines: CategoryMetric
    methods: CategoryMetric
    branches: CategoryMetric

    @property
    def average_rate(self) -> float:
        return sum(self.category(name).rate for name in CATEGORIES) / len(CATEGORIES)

    def category(self, name: str) -> CategoryMetric:
        if name not in CATEGORIES:
            raise KeyError(f"Unknown coverage category: {name!r}")
        return getattr(self, name)


def _category(covered: int, total: int, label: str) -> CategoryMetric:
    if covered > total:
        logger.warning("Report lists more covered %s (%d) than total (%d); rate clamped.", label, covered, total)
    return CategoryMetric(total=total, covered=covered)


def compute_metric(raw: RawCounts) -> Metric:
    """Derive a Metric from raw report counts.

    Clover's naming does not line up with ours: "elements" are what we call
    statements and Clover "statements" are lines.
    """
    return Metric(
        statements=_category(raw.covered_elements, raw.elements, "statements"),
        lines=_category(raw.covered_statements, raw.statements, "lines"),
        methods=_category(raw.covered_methods, raw.methods, "methods"),
        branches=_category(raw.covered_conditionals, raw.conditionals, "branches"),
    )
