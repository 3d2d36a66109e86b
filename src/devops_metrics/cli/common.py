"""Common CLI option factories and helpers.

This module centralizes reusable CLI options and provides:
- `run_async_command`: Unified async execution with error handling and
  engine disposal for CLI commands
- Repository argument/validation helpers shared by the sync commands
"""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from enum import Enum
from typing import Annotated, TypeVar

import typer
from rich.console import Console

from devops_metrics.config import get_settings
from devops_metrics.db import dispose_engine
from devops_metrics.logging import get_logger
from devops_metrics.schemas import parse_repo_string

# Shared console instance for CLI output
console = Console()
logger = get_logger(__name__)

T = TypeVar("T")


class OutputFormat(str, Enum):
    """How a command reports its result."""

    TEXT = "text"
    JSON = "json"


async def _disposing_engine(coro: Coroutine[object, object, T]) -> T:
    try:
        return await coro
    finally:
        await dispose_engine()


def run_async_command(
    coro: Coroutine[object, object, T],
    *,
    error_prefix: str = "Error",
) -> T:
    """Execute async code from synchronous CLI command with unified error handling.

    Uses asyncio.run() for clean event loop management. The database engine
    is disposed before the loop closes, whether the command succeeds or
    fails. Exceptions are logged, printed, and turned into exit code 1.

    Args:
        coro: Async coroutine to execute
        error_prefix: Prefix for error messages (default: "Error")

    Returns:
        Result from the coroutine

    Raises:
        typer.Exit: Re-raised from deliberate exits, or raised with code 1 on error
    """
    try:
        return asyncio.run(_disposing_engine(coro))
    except typer.Exit:
        raise
    except Exception as e:
        logger.opt(exception=e).error("{}: {}", error_prefix, e)
        console.print(f"[red]{error_prefix}:[/red] {e}")
        raise typer.Exit(1) from None


OutputFormatOption = Annotated[
    OutputFormat,
    typer.Option(
        "--format",
        "-f",
        help="Output format",
    ),
]
"""Output format option type for CLI commands.

Usage:
    def command(output_format: OutputFormatOption = OutputFormat.TEXT):
"""

# -----------------------------------------------------------------------------
# Repository Argument Factories
# -----------------------------------------------------------------------------

OptionalRepoArgument = Annotated[
    str | None,
    typer.Argument(
        help="Repository in owner/name format. Defaults to "
        "DEFAULT_REPO_OWNER/DEFAULT_REPO_NAME from settings.",
        show_default=False,
    ),
]
"""Optional positional repository argument.

Usage:
    def sync_run(repo: OptionalRepoArgument = None) -> None:
"""


# -----------------------------------------------------------------------------
# Validation Helpers
# -----------------------------------------------------------------------------


def validate_repo(repo: str) -> tuple[str, str]:
    """Parse and validate a single repository string.

    Args:
        repo: Repository string in owner/name format

    Returns:
        Tuple of (owner, name)

    Raises:
        typer.Exit(1): If format is invalid
    """
    try:
        return parse_repo_string(repo)
    except ValueError:
        console.print("[red]Error:[/red] Repository must be in owner/name format")
        raise typer.Exit(1) from None


def resolve_repo(repo: str | None) -> tuple[str, str]:
    """Use the given repository, else the configured default.

    Raises:
        typer.Exit(1): If neither is available or the format is invalid
    """
    if repo is None:
        repo = get_settings().default_repository
        if repo is None:
            console.print(
                "[red]Error:[/red] No repository given and "
                "DEFAULT_REPO_OWNER/DEFAULT_REPO_NAME are not set"
            )
            raise typer.Exit(1)
    return validate_repo(repo)


def require_github_token() -> None:
    """Exit before any remote call when no GitHub token is configured.

    Raises:
        typer.Exit(1): If GITHUB_TOKEN is empty
    """
    if not get_settings().github_token:
        console.print("[red]Error:[/red] GITHUB_TOKEN is not set")
        raise typer.Exit(1)
