"""snapvc switch -- check out a branch."""

from __future__ import annotations

import click


@click.command()
@click.argument("name")
@click.pass_context
def switch(ctx: click.Context, name: str) -> None:
    """Switch to branch NAME, rewriting the working directory."""
    from snapvc.cli import _repo_session

    with _repo_session(ctx) as (repo, console):
        tip = repo.switch(name)
        console.print(f"Switched to branch [green]{name}[/green] ([yellow]{tip[:8]}[/yellow])")
