"""CLI entry point for triagebot."""

from __future__ import annotations

import sys
from functools import partial
from pathlib import Path
from typing import Any

import click

from triagebot.config import ConfigError, find_config, get_token, load_config
from triagebot.display import FORMATS, make_show
from triagebot.github import GitHubClient, GitHubError
from triagebot.logging import setup_logging
from triagebot.orchestrator import BatchFailedError, Orchestrator, RunHooks
from triagebot.planner import plan_actions
from triagebot.pr_info import derive_state
from triagebot.reconciler import BoardReconciler, ReconcilerError
from triagebot.selection import SelectionError, build_selection


@click.group()
@click.version_option(package_name="triagebot")
def main() -> None:
    """triagebot - triage open pull requests on a GitHub project board."""
    pass


@main.command()
@click.argument("prs", nargs=-1)
@click.option("-d", "--dry", is_flag=True, help="Don't execute actions")
@click.option(
    "--cleanup/--no-cleanup",
    default=True,
    show_default=True,
    help="Clean up board columns when done",
)
@click.option(
    "-f",
    "--format",
    "fmt",
    type=click.Choice(FORMATS),
    default=None,
    help="Format for information display (default: repr)",
)
@click.option("--show-raw", is_flag=True, help="Display raw query result")
@click.option("--show-basic", is_flag=True, help="Display basic PR info")
@click.option("--show-extended", is_flag=True, help="Display extended info")
@click.option("--show-actions", is_flag=True, help="Display actions")
@click.option(
    "--show-mutations/--hide-mutations",
    default=None,
    help="Display mutations (default: on in dry runs)",
)
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    help="Path to triagebot.yaml (auto-detected if not specified)",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
def run(
    prs: tuple[str, ...],
    dry: bool,
    cleanup: bool,
    fmt: str | None,
    show_raw: bool,
    show_basic: bool,
    show_extended: bool,
    show_actions: bool,
    show_mutations: bool | None,
    config_path: Path | None,
    verbose: bool,
) -> None:
    """Run over the given PRs, or all open PRs if none are given.

    Each PR is either a number or an N-M number range.
    """
    try:
        selection = build_selection(prs)
    except SelectionError as e:
        raise click.BadParameter(str(e), param_hint="PRS") from e

    setup_logging(level="DEBUG" if verbose else None)

    try:
        if config_path is None:
            config_path = find_config()
        config = load_config(config_path)
        token = get_token()
    except ConfigError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)

    show = make_show(fmt)

    def hook(enabled: bool | None, name: str) -> Any:
        return partial(show, name) if enabled else None

    hooks = RunHooks(
        show_raw=hook(show_raw, "Raw Query Result"),
        show_state=hook(show_basic, "Basic PR Info"),
        show_extended=hook(show_extended, "Extended Info"),
        show_actions=hook(show_actions, "Actions"),
        show_mutations=hook(dry if show_mutations is None else show_mutations, "Mutations"),
    )

    with GitHubClient(
        repo=config.repo,
        project_number=config.project_number,
        token=token,
        base_url=config.graphql_url,
    ) as client:
        orchestrator = Orchestrator(
            client,
            derive=partial(derive_state, rules=config.rules),
            plan=partial(plan_actions, archive_column=config.board.archive_column),
            reconciler=BoardReconciler(
                client,
                archive_column=config.board.archive_column,
                archive_keep=config.board.archive_keep,
            ),
            hooks=hooks,
        )
        try:
            orchestrator.run(selection, dry_run=dry, cleanup=cleanup)
        except BatchFailedError:
            # Every failure has already been reported
            sys.exit(1)
        except (ReconcilerError, GitHubError) as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(1)
