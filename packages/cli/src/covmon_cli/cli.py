"""CLI entry point for covmon.

Commands:
  run       — evaluate a PR's coverage report, post the comment and status
  show      — print metrics for a local report, optionally against a baseline
  baseline  — manage the stored baseline report
"""

from __future__ import annotations

import importlib.metadata
import logging

import click
from rich.console import Console

from covmon_cli.commands.baseline import baseline_cmd
from covmon_cli.commands.run import run_cmd
from covmon_cli.commands.show import show_cmd

console = Console()


def _build_store(config: dict):
    """Instantiate the configured baseline store.

    Store selection:
      baseline_store: gist  → GistStore  (requires gist_id and github_token)
      (default)             → LocalStore (original_clover_file read from disk)
    """
    from covmon_store.local import LocalStore

    store_type = config.get("baseline_store", "local")

    if store_type == "gist":
        from covmon_store.gist import GistStore

        gist_id = config.get("gist_id")
        token = config.get("github_token")
        if not gist_id or not token:
            raise click.UsageError("baseline_store 'gist' requires gist_id and a GitHub token.")
        return GistStore(gist_id=gist_id, token=token)

    return LocalStore()


@click.group()
@click.version_option(
    version=importlib.metadata.version("covmon"),
    prog_name="covmon",
)
@click.option(
    "--config",
    "config_path",
    default=".covmon.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="COVMON_CONFIG",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, config_path: str, verbose: bool):
    """Coverage report bot for GitHub pull requests."""
    from covmon_core.config import load_config, resolve_github_token
    from covmon_core.errors import ConfigError

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    ctx.ensure_object(dict)

    try:
        config = load_config(config_path)
    except ConfigError as e:
        raise click.ClickException(str(e))

    config["github_token"] = resolve_github_token()

    ctx.obj["config"] = config
    ctx.obj["config_path"] = config_path


main.add_command(run_cmd)
main.add_command(show_cmd)
main.add_command(baseline_cmd)
