"""Idempotent reconciliation of the bot's coverage comment on a pull request.

A run moves through three steps:

    list_marked_comments()  → the bot's existing comments, oldest first
    plan_reconciliation()   → which ids to delete, and update vs insert
    apply_plan()            → the mutations, deletions first

Deletions are issued one by one and each completes before the update or
insert, which keeps the window with zero or two visible coverage comments as
short as the API allows. Concurrent runs on the same PR are not coordinated.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field

from covmon_core.gh.pull_request import create_comment, delete_comment, get_issue_comments, update_comment

logger = logging.getLogger(__name__)


class ReconciliationStrategy(str, enum.Enum):
    REPLACE = "replace"
    UPDATE = "update"
    INSERT = "insert"


def parse_strategy(value: str | None) -> ReconciliationStrategy:
    """Map a configured comment_mode to a strategy; anything unknown means replace."""
    try:
        return ReconciliationStrategy((value or "").strip().lower())
    except ValueError:
        if value:
            logger.warning("Unknown comment_mode %r; using 'replace'.", value)
        return ReconciliationStrategy.REPLACE


@dataclass(frozen=True)
class BotComment:
    id: int
    body: str
    created_order: int


@dataclass(frozen=True)
class ReconciliationPlan:
    delete_ids: tuple[int, ...] = field(default_factory=tuple)
    update_id: int | None = None
    insert: bool = False


def list_marked_comments(comments, marker: str) -> list[BotComment]:
    """Keep the comments whose body starts with the marker, in listing order."""
    marked = []
    for order, comment in enumerate(comments):
        body = comment.body or ""
        if body.startswith(marker):
            marked.append(BotComment(id=comment.id, body=body, created_order=order))
    return marked


def plan_reconciliation(marked: list[BotComment], strategy: ReconciliationStrategy) -> ReconciliationPlan:
    if strategy is ReconciliationStrategy.INSERT:
        return ReconciliationPlan(insert=True)

    if strategy is ReconciliationStrategy.UPDATE and marked:
        target = max(marked, key=lambda c: c.created_order)
        return ReconciliationPlan(
            delete_ids=tuple(c.id for c in marked if c.id != target.id),
            update_id=target.id,
        )

    # REPLACE, or UPDATE with nothing to update.
    return ReconciliationPlan(delete_ids=tuple(c.id for c in marked), insert=True)


def apply_plan(pr, plan: ReconciliationPlan, body: str) -> None:
    """Execute a plan against a PyGithub pull request."""
    for comment_id in plan.delete_ids:
        delete_comment(pr, comment_id)
        logger.debug("Deleted superseded coverage comment %s", comment_id)

    if plan.update_id is not None:
        update_comment(pr, plan.update_id, body)
        logger.debug("Updated coverage comment %s", plan.update_id)
    elif plan.insert:
        create_comment(pr, body)
        logger.debug("Created coverage comment")


def reconcile_comment(pr, body: str, marker: str, strategy: ReconciliationStrategy) -> ReconciliationPlan:
    """List, plan and apply in one go. Returns the plan that was applied."""
    marked = list_marked_comments(get_issue_comments(pr), marker)
    plan = plan_reconciliation(marked, strategy)
    logger.debug(
        "Comment plan (%s): %d existing, delete=%s, update=%s, insert=%s",
        strategy.value,
        len(marked),
        list(plan.delete_ids),
        plan.update_id,
        plan.insert,
    )
    apply_plan(pr, plan, body)
    return plan
