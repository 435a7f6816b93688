"""Coverage monitor orchestration for a single pull request run."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from github import GithubException
from rich.console import Console

from covmon_core.baseline import BaselineSource, resolve_baseline
from covmon_core.errors import CollaboratorError
from covmon_core.evaluator import ComparisonResult, evaluate
from covmon_core.event import PullRequestContext
from covmon_core.gh.pull_request import get_pull, get_repo
from covmon_core.metrics import Metric, compute_metric
from covmon_core.reconcile import ReconciliationPlan, parse_strategy, reconcile_comment
from covmon_core.render import comment_marker, render_comment
from covmon_core.report import load_report
from covmon_core.status import StatusPayload, build_status, publish_status

console = Console()
logger = logging.getLogger(__name__)


@dataclass
class MonitorSummary:
    """Everything one run produced. Enough for the CLI to report and pick an exit code."""

    repo: str
    pr_number: int
    head_sha: str
    metric: Metric
    baseline: Metric | None
    result: ComparisonResult
    status: StatusPayload
    body: str
    plan: ReconciliationPlan | None = None
    status_published: bool = False


def print_shadow_output(summary: MonitorSummary) -> None:
    """Print what would be posted to GitHub without posting it."""
    color = "green" if summary.status.state == "success" else "red"
    console.print("\n[bold]Shadow run — nothing posted[/bold]\n")
    console.print(summary.body, markup=False)
    console.print(
        f"Status [bold]{summary.status.context}[/bold]: [{color}]{summary.status.state}[/{color}]",
    )
    console.print(summary.status.description, markup=False)


def run_monitor(
    repo: str,
    event: PullRequestContext,
    config: dict,
    baseline_source: BaselineSource | None = None,
    baseline_name: str | None = None,
    shadow: bool = False,
    repo_obj=None,
) -> MonitorSummary:
    """Run the coverage pipeline for one PR and return a MonitorSummary.

    Report and event problems raise before anything is posted. Any
    GithubException from the comment, status or Gist calls, and any OSError
    while reading the baseline, is re-raised as CollaboratorError; there are
    no retries.
    """
    metric = compute_metric(load_report(config["clover_file"]))

    try:
        baseline = None
        if baseline_source is not None and baseline_name:
            baseline = resolve_baseline(baseline_source, baseline_name)
    except (GithubException, OSError) as e:
        raise CollaboratorError(f"Could not fetch baseline report {baseline_name}: {e}")

    result = evaluate(metric, baseline)
    status = build_status(result, target_url=event.html_url, context=config["status_context"])
    body = render_comment(metric, config["comment_context"])

    summary = MonitorSummary(
        repo=repo,
        pr_number=event.number,
        head_sha=event.head_sha,
        metric=metric,
        baseline=baseline,
        result=result,
        status=status,
        body=body,
    )

    if shadow:
        print_shadow_output(summary)
        return summary

    if not config.get("comment") and not config.get("check"):
        console.print("[yellow]Both comment and check are disabled. Nothing to publish.[/yellow]")
        return summary

    try:
        this_repo = repo_obj if repo_obj is not None else get_repo(repo, token=config["github_token"])

        if config.get("comment"):
            this_pr = get_pull(this_repo, event.number)
            summary.plan = reconcile_comment(
                this_pr,
                body,
                marker=comment_marker(config["comment_context"]),
                strategy=parse_strategy(config.get("comment_mode")),
            )
            console.print(f"[green]Coverage comment published on #{event.number}.[/green]")

        if config.get("check"):
            publish_status(this_repo, event.head_sha, status)
            summary.status_published = True
            console.print(f"[green]Status '{status.context}' set to {status.state}.[/green]")
    except GithubException as e:
        raise CollaboratorError(f"GitHub API call failed for {repo}#{event.number}: {e}")

    return summary
