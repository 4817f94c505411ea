"""snapvc log / global-log / find / show -- inspect commit history."""

from __future__ import annotations

import click

from snapvc.cli.formatting import format_commit_detail, format_hashes, format_log


@click.command()
@click.option("-n", "--limit", default=None, type=int, help="Maximum number of commits to show.")
@click.pass_context
def log(ctx: click.Context, limit: int | None) -> None:
    """Show commit history from head backward."""
    from snapvc.cli import _repo_session

    with _repo_session(ctx) as (repo, console):
        format_log(repo.log(limit=limit), console)


@click.command("global-log")
@click.pass_context
def global_log(ctx: click.Context) -> None:
    """Show every commit ever made, in any order of branches."""
    from snapvc.cli import _repo_session

    with _repo_session(ctx) as (repo, console):
        format_log(repo.global_log(), console)


@click.command()
@click.argument("message")
@click.pass_context
def find(ctx: click.Context, message: str) -> None:
    """Print the ids of all commits with exactly MESSAGE."""
    from snapvc.cli import _repo_session

    with _repo_session(ctx) as (repo, console):
        format_hashes(repo.find(message), console)


@click.command()
@click.argument("commit_id")
@click.pass_context
def show(ctx: click.Context, commit_id: str) -> None:
    """Show the stored contents of COMMIT_ID."""
    from snapvc.cli import _repo_session

    with _repo_session(ctx) as (repo, console):
        format_commit_detail(repo.show(commit_id), console)
