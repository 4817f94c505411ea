"""Rich formatting helpers for the snapvc CLI.

Provides functions that format SDK data structures for terminal display.
Rich auto-detects TTY and degrades gracefully when piped (no ANSI codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.table import Table

if TYPE_CHECKING:
    from snapvc.models.commit import CommitInfo
    from snapvc.operations.history import StatusInfo

DATE_FORMAT = "%a %b %d %H:%M:%S %Y %z"


def get_console() -> Console:
    """Create a Rich Console that auto-detects TTY for graceful pipe degradation."""
    return Console(stderr=False)


def format_log(entries: list[CommitInfo], console: Console) -> None:
    """Display commits as ``===`` / ``commit <hash>`` / ``Date:`` / message blocks."""
    for entry in entries:
        console.print("===")
        console.print(f"[yellow]commit {entry.commit_hash}[/yellow]")
        console.print(f"Date: {entry.created_at.strftime(DATE_FORMAT)}", highlight=False)
        console.print(escape(entry.message), highlight=False)
        console.print()


def format_hashes(hashes: list[str], console: Console) -> None:
    """One commit hash per line."""
    for commit_hash in hashes:
        console.print(commit_hash, highlight=False)


def format_status(info: StatusInfo, console: Console) -> None:
    """Display the five status sections."""
    console.print("[bold]=== Branches ===[/bold]")
    for branch in info.branches:
        marker = "*" if branch.is_current else ""
        console.print(f"{marker}{escape(branch.name)}", highlight=False)
    console.print()

    sections = (
        ("Staged Files", info.staged),
        ("Removed Files", info.removed),
        ("Modifications Not Staged For Commit", info.modified),
        ("Untracked Files", info.untracked),
    )
    for title, names in sections:
        console.print(f"[bold]=== {title} ===[/bold]")
        for name in names:
            console.print(escape(name), highlight=False)
        console.print()


def format_commit_detail(info: CommitInfo, console: Console) -> None:
    """Display one commit with its tracked files and working-directory snapshot."""
    console.print(f"[yellow]commit {info.commit_hash}[/yellow]")
    console.print(f"  Branch:  [green]{escape(info.branch)}[/green]")
    console.print(f"  Date:    {info.created_at.strftime(DATE_FORMAT)}", highlight=False)
    console.print(f"  Parent:  {info.parent_hash or '-'}", highlight=False)
    console.print(f"  Message: {escape(info.message)}", highlight=False)

    for title, entries in (("Tracked", info.files), ("Snapshot", info.snapshot)):
        if not entries:
            continue
        console.print()
        table = Table(title=title, show_header=True, header_style="bold", box=None, pad_edge=False)
        table.add_column("File")
        table.add_column("Blob", style="yellow")
        for name, c_hash in sorted(entries.items()):
            table.add_row(escape(name), c_hash[:12])
        console.print(table)


def format_error(message: str, console: Console) -> None:
    """Display an error message."""
    console.print(f"[red]Error:[/red] {escape(message)}", highlight=False)
