"""Sync commands for DevOps Metrics."""

import json
from typing import Annotated, Any

import typer
from rich.table import Table

from devops_metrics.db import RepositoryRepository, get_session
from devops_metrics.github import (
    GitHubClient,
    PullRequestSizeBackfill,
    RepositorySyncService,
)
from devops_metrics.schemas import RepositoryRead

from .common import (
    OptionalRepoArgument,
    OutputFormat,
    OutputFormatOption,
    console,
    require_github_token,
    resolve_repo,
    run_async_command,
)

app = typer.Typer(help="Sync PR activity from GitHub")


def _print_backfill(result: dict[str, Any]) -> None:
    console.print("[bold]Size Backfill Complete[/bold]")
    console.print()
    console.print(f"  [green]Updated:[/green]      {result.get('updated', 0)}")
    console.print(f"  [dim]Unavailable:[/dim]  {result.get('unavailable', 0)}")
    failed = result.get("failed_pull_requests", [])
    if failed:
        console.print(f"  [red]Failed:[/red]       {len(failed)}")
        console.print(f"  Failed PRs: {', '.join(f'#{n}' for n in failed)}")
    console.print(f"  Candidates: {result.get('candidates', 0)}")


@app.command("run")
def sync_run(
    repo: OptionalRepoArgument = None,
    sizes: Annotated[
        bool,
        typer.Option("--sizes", help="Also backfill diff sizes after the sync"),
    ] = False,
    output_format: OutputFormatOption = OutputFormat.TEXT,
) -> None:
    """Run an incremental sync pass for a repository.

    Fetches PRs updated since the last successful sync, then their reviews
    and comments, and advances the watermark.

    Examples:
        devmetrics sync run octo-org/service
        devmetrics sync run --sizes --format json
        devmetrics -v sync run octo-org/service  # Debug logging
    """
    owner, name = resolve_repo(repo)
    require_github_token()

    async def _sync() -> dict[str, Any]:
        async with GitHubClient() as client:
            async with get_session() as session:
                service = RepositorySyncService(session, client)
                result = (await service.sync(owner, name)).to_dict()

                if sizes:
                    backfill = PullRequestSizeBackfill(session, client)
                    result["sizes"] = (await backfill.run_for(owner, name)).to_dict()
                return result

    if output_format == OutputFormat.TEXT:
        console.print(f"[dim]Syncing PR activity from {owner}/{name}...[/dim]")
        console.print()

    result = run_async_command(_sync(), error_prefix="Sync failed")

    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps(result))
        return

    console.print("[bold]Sync Complete[/bold]")
    console.print()
    console.print(f"  [green]PRs synced:[/green]       {result['pull_requests_synced']}")
    console.print(f"  [blue]PRs reviewed:[/blue]     {result['reviewed_pull_requests']}")
    console.print(f"  Reviews:          {result['reviews_synced']}")
    console.print(f"  Review comments:  {result['review_comments_synced']}")
    console.print(f"  Issue comments:   {result['issue_comments_synced']}")

    failed = result["failed_pull_requests"]
    if failed:
        console.print(f"  [red]Failed:[/red]           {len(failed)}")

    console.print()
    console.print(f"  Pages fetched: {result['pages_fetched']}")
    console.print(f"  Previous watermark: {result['previous_watermark']}")
    console.print(f"  New watermark:      {result['new_watermark']}")

    if failed:
        console.print()
        console.print("[bold]Failed PRs[/bold] (retried next run):")
        console.print(f"  {', '.join(f'#{n}' for n in failed)}")

    if "sizes" in result:
        console.print()
        _print_backfill(result["sizes"])


@app.command("sizes")
def sync_sizes(
    repo: OptionalRepoArgument = None,
    output_format: OutputFormatOption = OutputFormat.TEXT,
) -> None:
    """Backfill additions/deletions/size for PRs that lack them.

    Examples:
        devmetrics sync sizes octo-org/service
    """
    owner, name = resolve_repo(repo)
    require_github_token()

    async def _backfill() -> dict[str, Any]:
        async with GitHubClient() as client:
            async with get_session() as session:
                backfill = PullRequestSizeBackfill(session, client)
                return (await backfill.run_for(owner, name)).to_dict()

    result = run_async_command(_backfill(), error_prefix="Size backfill failed")

    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps(result))
        return

    _print_backfill(result)


@app.command("status")
def sync_status(
    output_format: OutputFormatOption = OutputFormat.TEXT,
) -> None:
    """Show synced repositories and their watermarks."""

    async def _status() -> list[dict[str, Any]]:
        async with get_session() as session:
            repositories = RepositoryRead.from_orm_list(
                await RepositoryRepository(session).list_ordered()
            )
            return [
                {
                    "repository": r.full_name,
                    "github_id": r.github_id,
                    "last_sync": r.last_sync.isoformat() if r.last_sync else None,
                }
                for r in repositories
            ]

    rows = run_async_command(_status(), error_prefix="Status failed")

    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps(rows))
        return

    if not rows:
        console.print("[yellow]No repositories synced yet.[/yellow]")
        return

    table = Table(title="Synced Repositories")
    table.add_column("Repository", style="cyan")
    table.add_column("Last sync (UTC)")
    for row in rows:
        table.add_row(row["repository"], row["last_sync"] or "[dim]never[/dim]")
    console.print(table)
