"""snapvc init -- create a repository in the root directory."""

from __future__ import annotations

import click

from snapvc.cli.formatting import format_error, get_console


@click.command()
@click.pass_context
def init(ctx: click.Context) -> None:
    """Create a new repository with an initial commit on the default branch."""
    from snapvc.exceptions import SnapError
    from snapvc.repo import Repository

    console = get_console()
    try:
        repo = Repository.init(ctx.obj["root"])
        try:
            console.print(
                f"Initialized empty repository on branch [green]{repo.current_branch}[/green] "
                f"([yellow]{repo.head[:8]}[/yellow])"
            )
        finally:
            repo.close()
    except SnapError as e:
        format_error(str(e), console)
        raise SystemExit(e.exit_code) from None
    except Exception as e:
        format_error(str(e), console)
        raise SystemExit(1) from None
