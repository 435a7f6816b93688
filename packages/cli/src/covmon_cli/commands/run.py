"""run command — publish the coverage comment and status for a pull request."""

from __future__ import annotations

import click
from rich.console import Console

from covmon_cli.commands.show import metric_table
from covmon_core.errors import CovmonError
from covmon_core.event import load_event
from covmon_core.monitor import run_monitor

console = Console()


@click.command("run")
@click.option(
    "--event",
    "event_path",
    default=None,
    envvar="GITHUB_EVENT_PATH",
    help="Path to the GitHub event payload (defaults to $GITHUB_EVENT_PATH).",
)
@click.option("--repo", default=None, help="GitHub repository in owner/name format. Defaults to the event's repo.")
@click.option("--clover-file", default=None, help="Coverage report for this PR. Overrides config file.")
@click.option("--original-clover-file", default=None, help="Baseline report to compare against. Overrides config file.")
@click.option(
    "--comment-mode",
    type=click.Choice(["replace", "update", "insert"]),
    default=None,
    help="How earlier coverage comments are treated. Overrides config file.",
)
@click.option(
    "--shadow",
    "-s",
    is_flag=True,
    help="Dry-run mode: print the comment and status without posting to GitHub.",
)
@click.pass_context
def run_cmd(
    ctx,
    event_path: str | None,
    repo: str | None,
    clover_file: str | None,
    original_clover_file: str | None,
    comment_mode: str | None,
    shadow: bool,
):
    """Evaluate a PR's coverage and report it on GitHub.

    Reads the Clover report, compares it with the baseline report, then posts
    a coverage comment and a commit status. Exits with status 1 when any
    coverage category decreased.

    \b
    Required environment variables:
      GITHUB_TOKEN         GitHub token (or use gh CLI)
      GITHUB_EVENT_PATH    Set by GitHub Actions (or pass --event)
    """
    from covmon_core.config import load_config, validate_config
    from covmon_cli.cli import _build_store

    config = load_config(
        ctx.obj["config_path"],
        cli_overrides={
            "clover_file": clover_file,
            "original_clover_file": original_clover_file,
            "comment_mode": comment_mode,
        },
    )
    config["github_token"] = ctx.obj["config"].get("github_token")

    try:
        validate_config(config)
        event = load_event(event_path)
    except CovmonError as e:
        raise click.ClickException(str(e))

    repo = repo or event.repo_name
    if not repo:
        raise click.UsageError("Repository unknown. Pass --repo or set GITHUB_REPOSITORY.")
    if not shadow and not config.get("github_token"):
        raise click.UsageError(
            "No GitHub token found. Set GITHUB_TOKEN or run `gh auth login` first.\n"
            "Create a token at https://github.com/settings/tokens"
        )

    store = _build_store(config)
    try:
        summary = run_monitor(
            repo=repo,
            event=event,
            config=config,
            baseline_source=store,
            baseline_name=store.key_for(config["original_clover_file"]),
            shadow=shadow,
        )
    except CovmonError as e:
        raise click.ClickException(str(e))
    finally:
        store.close()

    console.print(metric_table(summary.metric, config, summary.baseline))
    if summary.baseline is None:
        console.print("[dim]No baseline report; regression check skipped.[/dim]")

    if not summary.result.succeeded:
        console.print(f"[red]{summary.result.description}[/red]")
        ctx.exit(1)
