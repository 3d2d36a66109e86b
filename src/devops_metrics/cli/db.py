"""Database commands for DevOps Metrics."""

import typer

from devops_metrics.db import create_tables

from .common import console, run_async_command

app = typer.Typer(help="Manage the local database")


@app.command("init")
def db_init() -> None:
    """Create all tables (for fresh installs; use Alembic to upgrade)."""
    run_async_command(create_tables(), error_prefix="Database init failed")
    console.print("[green]Database initialized.[/green]")
