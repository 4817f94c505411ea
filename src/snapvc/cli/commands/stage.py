"""snapvc add / rm -- stage additions and removals."""

from __future__ import annotations

import click
from rich.markup import escape


@click.command()
@click.argument("file_name")
@click.pass_context
def add(ctx: click.Context, file_name: str) -> None:
    """Stage FILE_NAME for addition."""
    from snapvc.cli import _repo_session

    with _repo_session(ctx) as (repo, console):
        if repo.add(file_name) is None:
            console.print(f"[dim]{escape(file_name)} is unchanged; nothing staged.[/dim]")


@click.command()
@click.argument("file_name")
@click.pass_context
def rm(ctx: click.Context, file_name: str) -> None:
    """Unstage FILE_NAME, or stage its removal if it is tracked."""
    from snapvc.cli import _repo_session

    with _repo_session(ctx) as (repo, _console):
        repo.rm(file_name)
