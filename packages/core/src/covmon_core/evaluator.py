"""Regression decision: compare current coverage against the baseline."""

from __future__ import annotations

from dataclasses import dataclass, field

from covmon_core.metrics import Metric

# Evaluation order and the label used for each category in descriptions.
_DECREASE_ORDER = (
    ("branches", "Branches"),
    ("lines", "Lines"),
    ("methods", "Methods"),
    ("statements", "Statements"),
)


@dataclass(frozen=True)
class Decrease:
    category: str
    delta: float


@dataclass(frozen=True)
class ComparisonResult:
    succeeded: bool
    description: str
    decreases: tuple[Decrease, ...] = field(default_factory=tuple)


def _pct(value: float) -> str:
    return f"{value:.2f}%"


def find_decreases(current: Metric, baseline: Metric) -> list[Decrease]:
    """Categories whose rate strictly dropped, each compared with its own baseline rate."""
    decreases = []
    for name, _ in _DECREASE_ORDER:
        before = baseline.category(name).rate
        after = current.category(name).rate
        if before > after:
            decreases.append(Decrease(category=name, delta=round(before - after, 2)))
    return decreases


def success_description(current: Metric) -> str:
    return (
        f"Success: \nLine Coverage - {_pct(current.lines.rate)},"
        f"\nStatement Coverage - {_pct(current.statements.rate)},"
        f"\nMethods Coverage - {_pct(current.methods.rate)},"
        f"\nBranches Coverage - {_pct(current.branches.rate)}"
    )


def failure_description(decreases: list[Decrease]) -> str:
    labels = dict(_DECREASE_ORDER)
    lines = ["Failure: "]
    for d in decreases:
        lines.append(f"{labels[d.category]} decrease - {_pct(d.delta)}")
    return "\n".join(lines)


def evaluate(current: Metric, baseline: Metric | None) -> ComparisonResult:
    """Decide success or failure for this run.

    Without a baseline the run always succeeds. With one, any strict decrease
    in a category fails the run; equal rates are not a regression and the
    average rate plays no part in the decision.
    """
    if baseline is None:
        return ComparisonResult(succeeded=True, description=success_description(current))

    decreases = find_decreases(current, baseline)
    if decreases:
        return ComparisonResult(
            succeeded=False,
            description=failure_description(decreases),
            decreases=tuple(decreases),
        )
    return ComparisonResult(succeeded=True, description=success_description(current))
