"""snapvc commit -- record the staged changes."""

from __future__ import annotations

import click
from rich.markup import escape


@click.command()
@click.argument("message", required=False, default="")
@click.pass_context
def commit(ctx: click.Context, message: str) -> None:
    """Commit the staged changes with MESSAGE."""
    from snapvc.cli import _repo_session

    with _repo_session(ctx) as (repo, console):
        info = repo.commit(message)
        console.print(
            f"Committed [yellow]{info.short_hash}[/yellow] on [green]{escape(info.branch)}[/green]: "
            f"{escape(info.message)}"
        )
