"""snapvc branch / rm-branch -- create and delete branch pointers."""

from __future__ import annotations

import click


@click.command()
@click.argument("name")
@click.pass_context
def branch(ctx: click.Context, name: str) -> None:
    """Create branch NAME at the current head (does not switch)."""
    from snapvc.cli import _repo_session

    with _repo_session(ctx) as (repo, console):
        head = repo.branch(name)
        console.print(f"Created branch [green]{name}[/green] at [yellow]{head[:8]}[/yellow]")


@click.command("rm-branch")
@click.argument("name")
@click.pass_context
def rm_branch(ctx: click.Context, name: str) -> None:
    """Delete branch NAME. Its commits are kept."""
    from snapvc.cli import _repo_session

    with _repo_session(ctx) as (repo, console):
        repo.rm_branch(name)
        console.print(f"Deleted branch [green]{name}[/green]")
