"""Main CLI application for DevOps Metrics."""

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from devops_metrics import __version__
from devops_metrics.cli import db as db_cmd
from devops_metrics.cli import sync as sync_cmd
from devops_metrics.config import get_settings
from devops_metrics.logging import setup_logging

app = typer.Typer(
    name="devmetrics",
    help="Incremental GitHub PR activity sync for DevOps metrics.",
    add_completion=False,
)
console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"devmetrics version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable debug logging.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress non-error output (WARNING level).",
        ),
    ] = False,
    log_file: Annotated[
        Path | None,
        typer.Option(
            "--log-file",
            help="Also write a rotating DEBUG log here (overrides LOGGING__LOG_FILE).",
        ),
    ] = None,
) -> None:
    """DevOps Metrics - sync GitHub PR activity for lead time and size metrics."""
    settings = get_settings()
    log_config = settings.logging

    if log_file is None and log_config.log_file:
        log_file = Path(log_config.log_file)

    setup_logging(
        level=settings.log_level,
        verbose=verbose,
        quiet=quiet,
        log_file=log_file,
        rotation=log_config.rotation,
        retention=log_config.retention,
        serialize=log_config.serialize,
    )


app.add_typer(sync_cmd.app, name="sync")
app.add_typer(db_cmd.app, name="db")


if __name__ == "__main__":
    app()
