"""snapvc CLI -- terminal interface for snapshot version control.

This module is NEVER imported from snapvc/__init__.py.
It is only loaded via the ``snapvc`` entry point defined in pyproject.toml.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING

import click

from snapvc.cli.formatting import format_error, get_console

if TYPE_CHECKING:
    from collections.abc import Iterator

    from rich.console import Console

    from snapvc.repo import Repository


@click.group()
@click.option(
    "--root",
    default=".",
    envvar="SNAPVC_ROOT",
    type=click.Path(file_okay=False),
    help="Repository root directory.",
)
@click.option("-v", "--verbose", is_flag=True, help="Log debug output to stderr.")
@click.pass_context
def cli(ctx: click.Context, root: str, verbose: bool) -> None:
    """snapvc: snapshot-based version control for a working directory."""
    ctx.ensure_object(dict)
    ctx.obj["root"] = root
    if verbose:
        _configure_logging()


def _configure_logging() -> None:
    from rich.console import Console
    from rich.logging import RichHandler

    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def _get_repo(ctx: click.Context) -> Repository:
    """Open the Repository under the --root directory."""
    from snapvc.repo import Repository

    return Repository.open(ctx.obj["root"])


@contextmanager
def _repo_session(ctx: click.Context) -> Iterator[tuple[Repository, Console]]:
    """Context manager that opens a Repository, yields (repo, console), and handles cleanup.

    Ensures the repository is closed on exit and formats exceptions as CLI
    errors. A SnapError exits with the code of its error family; anything
    else exits 1.
    """
    from snapvc.exceptions import SnapError

    console = get_console()
    try:
        repo = _get_repo(ctx)
        try:
            yield repo, console
        finally:
            repo.close()
    except SystemExit:
        raise
    except SnapError as e:
        format_error(str(e), console)
        raise SystemExit(e.exit_code) from None
    except Exception as e:
        format_error(str(e), console)
        raise SystemExit(1) from None


# Register subcommands after cli group is defined
from snapvc.cli.commands.init import init  # noqa: E402
from snapvc.cli.commands.stage import add, rm  # noqa: E402
from snapvc.cli.commands.commit import commit  # noqa: E402
from snapvc.cli.commands.log import find, global_log, log, show  # noqa: E402
from snapvc.cli.commands.status import status  # noqa: E402
from snapvc.cli.commands.restore import restore  # noqa: E402
from snapvc.cli.commands.branch import branch, rm_branch  # noqa: E402
from snapvc.cli.commands.switch import switch  # noqa: E402
from snapvc.cli.commands.reset import reset  # noqa: E402

cli.add_command(init)
cli.add_command(add)
cli.add_command(commit)
cli.add_command(rm)
cli.add_command(log)
cli.add_command(global_log)
cli.add_command(find)
cli.add_command(show)
cli.add_command(status)
cli.add_command(restore)
cli.add_command(branch)
cli.add_command(rm_branch)
cli.add_command(switch)
cli.add_command(reset)
