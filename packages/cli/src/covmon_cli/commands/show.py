"""show command — print coverage metrics for a local report."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table

console = Console()

_ROWS = (
    ("Statements", "statements"),
    ("Methods", "methods"),
    ("Lines", "lines"),
    ("Branches", "branches"),
)


def rate_style(rate: float, config: dict) -> str:
    """Terminal colour for a rate using the configured alert/warning thresholds."""
    if rate >= config["threshold_alert"]:
        return "green"
    if rate >= config["threshold_warning"]:
        return "yellow"
    return "red"


def metric_table(metric, config: dict, baseline=None) -> Table:
    table = Table(title="Coverage", show_header=True, header_style="bold cyan")
    table.add_column("Category", style="bold")
    table.add_column("Covered", justify="right")
    table.add_column("Total", justify="right")
    table.add_column("Rate", justify="right")
    if baseline is not None:
        table.add_column("Baseline", justify="right")

    for label, name in _ROWS:
        category = metric.category(name)
        style = rate_style(category.rate, config)
        row = [label, str(category.covered), str(category.total), f"[{style}]{category.rate:.2f}%[/{style}]"]
        if baseline is not None:
            row.append(f"{baseline.category(name).rate:.2f}%")
        table.add_row(*row)

    style = rate_style(metric.average_rate, config)
    average = ["Average", "", "", f"[{style}]{metric.average_rate:.2f}%[/{style}]"]
    if baseline is not None:
        average.append(f"{baseline.average_rate:.2f}%")
    table.add_row(*average)
    return table


@click.command("show")
@click.argument("report", type=click.Path(dir_okay=False))
@click.option("--baseline", "baseline_path", default=None, help="Baseline report to compare against.")
@click.option("--markdown", is_flag=True, help="Also print the comment that would be posted.")
@click.pass_context
def show_cmd(ctx, report: str, baseline_path: str | None, markdown: bool):
    """Print coverage metrics for REPORT without touching GitHub."""
    from covmon_core.baseline import resolve_baseline
    from covmon_core.errors import MalformedReportError
    from covmon_core.evaluator import evaluate
    from covmon_core.metrics import compute_metric
    from covmon_core.render import render_comment
    from covmon_core.report import load_report
    from covmon_store.local import LocalStore

    config = ctx.obj["config"]

    try:
        metric = compute_metric(load_report(report))
    except MalformedReportError as e:
        raise click.ClickException(str(e))

    baseline = resolve_baseline(LocalStore(), baseline_path) if baseline_path else None
    if baseline_path and baseline is None:
        console.print(f"[yellow]Baseline {baseline_path} unavailable; no comparison performed.[/yellow]")

    console.print(metric_table(metric, config, baseline))

    result = evaluate(metric, baseline)
    color = "green" if result.succeeded else "red"
    console.print(f"[{color}]{result.description}[/{color}]")

    if markdown:
        console.print()
        console.print(render_comment(metric, config["comment_context"]), markup=False)
