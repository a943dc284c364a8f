"""Validate the project configuration without releasing."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer
from rich.markup import escape
from rich.table import Table

from shipyard.cli.common import console, exit_error, styled_status
from shipyard.config import ShipyardError, load_config
from shipyard.context import new_context
from shipyard.http.upload import check_config
from shipyard.pipeline import apply_defaults
from shipyard.stages import artifactory, default_stages, upload
from shipyard.template import TemplateEngine

if TYPE_CHECKING:
    from shipyard.config.models import UploadConfig
    from shipyard.context import ReleaseContext


def _check_target(ctx: ReleaseContext, engine: TemplateEngine, target: UploadConfig, kind: str) -> tuple[str, str]:
    """Return ``(status, detail)`` for one upload target."""
    try:
        if engine.resolve_bool(target.skip):
            return "skipped", "skip evaluates to true"
        check_config(ctx, target, kind)
    except ShipyardError as exc:
        return "error", str(exc)
    return "ok", ""


def check(
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Configuration file (default: .shipyard.yml in the working directory).",
        ),
    ] = None,
) -> None:
    """Check the configuration and every upload target.

    Examples:
        # Check the configuration found in the working directory
        shipyard check

        # Check an explicit file
        shipyard check --config release.yml
    """
    try:
        project = load_config(config)
        ctx = new_context(project)
        apply_defaults(default_stages(), ctx)
    except ShipyardError as exc:
        exit_error(str(exc))

    engine = TemplateEngine(ctx)
    table = Table(title=f"Upload targets ({project.project_name or 'unnamed project'})")
    table.add_column("Kind", style="cyan")
    table.add_column("Name")
    table.add_column("Mode", justify="center")
    table.add_column("Method", justify="center")
    table.add_column("Status", justify="center")
    table.add_column("Detail", style="dim")

    failures = 0
    targets = [(upload.KIND, t) for t in project.uploads] + [(artifactory.KIND, t) for t in project.artifactories]
    for kind, target in targets:
        status, detail = _check_target(ctx, engine, target, kind)
        if status == "error":
            failures += 1
        table.add_row(kind, target.name or "-", target.mode, target.method, styled_status(status), escape(detail))

    source = project.source
    if source.enabled:
        console.print(f"Source archive: [green]enabled[/] ({source.format}, {escape(source.name_template)})")
    else:
        console.print("Source archive: [dim]disabled[/]")

    if targets:
        console.print(table)
    else:
        console.print("[yellow]No upload targets configured.[/]")

    if failures:
        exit_error(f"{failures} target(s) misconfigured")
    console.print("[green]Configuration OK[/]")
