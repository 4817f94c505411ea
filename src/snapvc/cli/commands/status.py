"""snapvc status -- show branches, staging area and working directory."""

from __future__ import annotations

import click

from snapvc.cli.formatting import format_status


@click.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show branches, staged and removed files, and unstaged changes."""
    from snapvc.cli import _repo_session

    with _repo_session(ctx) as (repo, console):
        format_status(repo.status(), console)
