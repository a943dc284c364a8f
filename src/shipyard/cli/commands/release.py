"""Run the release pipeline."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer
from rich.markup import escape
from rich.table import Table

from shipyard.cli.common import console, exit_error, styled_status
from shipyard.config import ShipyardError, load_config
from shipyard.context import new_context
from shipyard.git import GitClient
from shipyard.logging import SUCCESS_LEVEL, get_logger
from shipyard.pipeline import PipelineRunner, StageError
from shipyard.stages import default_stages

if TYPE_CHECKING:
    from shipyard.pipeline import StageResult

logger = get_logger(__name__)


def _render_results(results: list[StageResult]) -> None:
    table = Table(title="Release pipeline")
    table.add_column("Stage", style="cyan")
    table.add_column("Status", justify="center")
    table.add_column("Duration", justify="right")
    table.add_column("Detail", style="dim")
    for result in results:
        table.add_row(
            result.name,
            styled_status(result.status.value),
            f"{result.duration:.2f}s",
            escape(result.reason or ""),
        )
    console.print(table)


def release(
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Configuration file (default: .shipyard.yml in the working directory).",
        ),
    ] = None,
    version: Annotated[
        str,
        typer.Option(
            "--version",
            help="Version being released (default: current tag without the 'v').",
        ),
    ] = "",
    tag: Annotated[
        str,
        typer.Option(
            "--tag",
            help="Tag being released (default: tag pointing at HEAD).",
        ),
    ] = "",
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            help="Apply defaults and validate without producing or uploading anything.",
        ),
    ] = False,
) -> None:
    """Build the source archive and publish artifacts.

    Exit codes: 0 (released, possibly with skipped stages), 1 (failure).

    Examples:
        # Release the tag at HEAD
        shipyard release

        # Preview without side effects
        shipyard release --version 1.2.3 --dry-run
    """
    git = GitClient()
    try:
        project = load_config(config)
        ctx = new_context(project, version=version, tag=tag, git=git.info(), dry_run=dry_run)
    except ShipyardError as exc:
        exit_error(str(exc))

    console.print(f"Releasing [bold]{ctx.project_name or 'project'}[/] {ctx.version or '(no version)'}")
    try:
        result = PipelineRunner(default_stages(git)).run(ctx)
    except StageError as exc:
        _render_results(exc.results)
        exit_error(str(exc))

    _render_results(result.results)
    logger.log(
        SUCCESS_LEVEL,
        "Release finished",
        extra={"context": {"project": ctx.project_name, "version": ctx.version, "dry_run": dry_run}},
    )
    console.print("[green]Release complete[/]" if not dry_run else "[yellow]Dry run complete[/]")
