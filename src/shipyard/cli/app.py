"""Entry point of the shipyard CLI."""

from __future__ import annotations

from typing import Annotated

import typer

from shipyard import meta
from shipyard.cli.commands import check, release
from shipyard.cli.common import console
from shipyard.logging import init_logging

app = typer.Typer(
    name=meta.__app_name__,
    help=meta.__description__,
    no_args_is_help=True,
    add_completion=False,
)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"{meta.__app_name__} {meta.__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show the version and exit.",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging."),
    ] = False,
    log_preset: Annotated[
        str | None,
        typer.Option("--log-preset", help="Logging preset: dev, prod or debug."),
    ] = None,
) -> None:
    """Release automation for source archives and HTTP publishing."""
    init_logging(preset=log_preset or ("debug" if verbose else None))


app.command("check")(check)
app.command("release")(release)


if __name__ == "__main__":
    app()
