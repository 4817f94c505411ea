"""snapvc restore -- bring a file back from head or a given commit."""

from __future__ import annotations

import click


@click.command()
@click.argument("operands", nargs=-1, required=True)
@click.pass_context
def restore(ctx: click.Context, operands: tuple[str, ...]) -> None:
    """Restore a file from head or from a commit.

    \b
    snapvc restore -- FILE
    snapvc restore COMMIT -- FILE
    """
    from snapvc.cli import _repo_session

    if len(operands) == 1:
        commit_id, file_name = None, operands[0]
    elif len(operands) == 2:
        commit_id, file_name = operands
    else:
        raise click.UsageError("Expected [COMMIT] -- FILE.")

    with _repo_session(ctx) as (repo, _console):
        repo.restore(file_name, commit_id)
