"""Commit status payload built from a ComparisonResult."""

from __future__ import annotations

from dataclasses import asdict, dataclass

from covmon_core.evaluator import ComparisonResult
from covmon_core.gh.pull_request import create_commit_status

# GitHub rejects commit status descriptions longer than this.
MAX_DESCRIPTION_LENGTH = 140


@dataclass(frozen=True)
class StatusPayload:
    state: str  # "success" | "failure"
    description: str
    target_url: str
    context: str

    def as_dict(self) -> dict:
        return asdict(self)


def build_status(result: ComparisonResult, target_url: str, context: str) -> StatusPayload:
    return StatusPayload(
        state="success" if result.succeeded else "failure",
        description=result.description,
        target_url=target_url,
        context=context,
    )


def publish_status(repo, sha: str, payload: StatusPayload):
    description = payload.description
    if len(description) > MAX_DESCRIPTION_LENGTH:
        description = description[: MAX_DESCRIPTION_LENGTH - 3] + "..."
    return create_commit_status(
        repo,
        sha,
        state=payload.state,
        target_url=payload.target_url,
        description=description,
        context=payload.context,
    )
