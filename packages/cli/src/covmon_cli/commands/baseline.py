"""baseline command group — manage the stored baseline report."""

from __future__ import annotations

import click
from rich.console import Console

console = Console()


@click.group("baseline")
def baseline_cmd():
    """Manage the baseline report that pull requests are compared against."""


@baseline_cmd.command("upload")
@click.argument("report", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def upload_cmd(ctx, report: str):
    """Store REPORT as the new baseline.

    The report is validated first; a malformed report is never stored. The
    destination is the configured store under the name derived from
    original_clover_file.
    """
    from github import GithubException

    from covmon_core.errors import MalformedReportError
    from covmon_core.report import parse_report, read_report_text
    from covmon_cli.cli import _build_store

    config = ctx.obj["config"]
    target = config.get("original_clover_file")
    if not target:
        raise click.UsageError("original_clover_file is not configured.")

    text = read_report_text(report)
    try:
        parse_report(text)
    except MalformedReportError as e:
        raise click.ClickException(f"Refusing to store malformed report: {e}")

    store = _build_store(config)
    name = store.key_for(target)
    try:
        store.save(name, text)
    except GithubException as e:
        raise click.ClickException(f"Could not store baseline {name}: {e}")
    finally:
        store.close()

    console.print(f"[green]Baseline stored as {name}.[/green]")
