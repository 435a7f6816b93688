"""Pull request context extracted from the GitHub Actions event payload."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path

from covmon_core.errors import UnsupportedEventError

_UNSUPPORTED = "covmon supports only pull_request events"


@dataclass(frozen=True)
class PullRequestContext:
    number: int
    html_url: str
    head_sha: str
    repo_name: str | None = None

    @classmethod
    def from_payload(cls, payload: dict | None, repo_name: str | None = None) -> PullRequestContext:
        """Validate the fields we need; any one missing means this is not a PR run."""
        payload = payload if isinstance(payload, dict) else {}
        pull_request = payload.get("pull_request")
        if not isinstance(pull_request, dict):
            raise UnsupportedEventError(f"{_UNSUPPORTED} (no pull_request in event payload).")

        head = pull_request.get("head")
        number = pull_request.get("number")
        html_url = pull_request.get("html_url")
        head_sha = head.get("sha") if isinstance(head, dict) else None

        missing = [
            name
            for name, value in (
                ("pull_request.number", number),
                ("pull_request.html_url", html_url),
                ("pull_request.head.sha", head_sha),
            )
            if not value
        ]
        if missing:
            raise UnsupportedEventError(f"{_UNSUPPORTED} (missing {', '.join(missing)}).")

        try:
            number = int(number)
        except (TypeError, ValueError):
            raise UnsupportedEventError(f"{_UNSUPPORTED} (pull_request.number {number!r} is not an integer).")

        if repo_name is None:
            repository = payload.get("repository")
            if isinstance(repository, dict):
                repo_name = repository.get("full_name")

        return cls(number=number, html_url=html_url, head_sha=head_sha, repo_name=repo_name)


def load_event(path: str | None = None) -> PullRequestContext:
    """Read the event JSON that GitHub Actions points to with GITHUB_EVENT_PATH."""
    event_path = path or os.environ.get("GITHUB_EVENT_PATH")
    if not event_path:
        raise UnsupportedEventError(f"{_UNSUPPORTED} (GITHUB_EVENT_PATH is not set).")
    try:
        payload = json.loads(Path(event_path).read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise UnsupportedEventError(f"Event payload not found: {event_path}")
    except json.JSONDecodeError as e:
        raise UnsupportedEventError(f"Event payload {event_path} is not valid JSON: {e}")
    return PullRequestContext.from_payload(payload, repo_name=os.environ.get("GITHUB_REPOSITORY") or None)
