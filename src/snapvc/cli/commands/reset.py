"""snapvc reset -- move the current branch to a commit."""

from __future__ import annotations

import click


@click.command()
@click.argument("commit_id")
@click.pass_context
def reset(ctx: click.Context, commit_id: str) -> None:
    """Reset the current branch to COMMIT_ID and check it out.

    COMMIT_ID can be a full hash or a unique prefix (min 6 chars).
    The previous head is kept as ORIG_HEAD.
    """
    from snapvc.cli import _repo_session

    with _repo_session(ctx) as (repo, console):
        resolved = repo.reset(commit_id)
        console.print(f"HEAD is now at [yellow]{resolved[:8]}[/yellow]")
