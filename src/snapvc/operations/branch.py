"""Branch CRUD operations for snapvc.

Create, delete, list, and validate branches. A branch is a single
commit-hash pointer; history is shared through parent links, so
creating a branch never copies commits.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Callable

from snapvc.exceptions import (
    BranchExistsError,
    BranchNotFoundError,
    CurrentBranchDeletionError,
    InvalidBranchNameError,
    SnapError,
)
from snapvc.models.branch import BranchInfo

if TYPE_CHECKING:
    from snapvc.storage.repositories import RefRepository

logger = logging.getLogger(__name__)

# Whitespace and the characters git reserves for revision syntax.
_FORBIDDEN_CHARS = re.compile(r"[\s~^:?*\[\\]")

_NAME_RULES: tuple[tuple[Callable[[str], bool], str], ...] = (
    (lambda n: not n, "must not be empty"),
    (lambda n: ".." in n, "must not contain '..'"),
    (lambda n: n.startswith(".") or n.endswith("."), "must not start or end with '.'"),
    (lambda n: n.endswith(".lock"), "must not end with '.lock'"),
    (lambda n: bool(_FORBIDDEN_CHARS.search(n)), "must not contain whitespace or any of ~ ^ : ? * [ \\"),
    (lambda n: n.startswith("/") or n.endswith("/") or "//" in n, "has an empty path component"),
)


def validate_branch_name(name: str) -> None:
    """Check *name* against git-style ref naming rules.

    Raises:
        InvalidBranchNameError: On the first rule the name breaks.
    """
    for broken, reason in _NAME_RULES:
        if broken(name):
            raise InvalidBranchNameError(name, f"branch name {reason}")


def create_branch(name: str, ref_repo: RefRepository) -> str:
    """Create a new branch pointing at the current head.

    Does not switch to it.

    Returns:
        The commit hash the new branch points to.

    Raises:
        BranchExistsError: If branch name already exists.
        InvalidBranchNameError: If branch name is invalid.
    """
    validate_branch_name(name)

    if ref_repo.get_branch(name) is not None:
        raise BranchExistsError(name)

    head = ref_repo.get_head()
    if head is None:
        raise SnapError("Cannot create branch: no commits exist")

    ref_repo.set_branch(name, head)
    logger.info("created branch %s at %s", name, head[:8])
    return head


def delete_branch(name: str, ref_repo: RefRepository) -> None:
    """Delete a branch pointer.

    Commits reachable only from the deleted branch stay in the store.

    Raises:
        BranchNotFoundError: If branch doesn't exist.
        CurrentBranchDeletionError: If trying to delete the current branch.
    """
    if ref_repo.get_branch(name) is None:
        raise BranchNotFoundError(name)

    if ref_repo.get_current_branch() == name:
        raise CurrentBranchDeletionError(name)

    ref_repo.delete_branch(name)
    logger.info("deleted branch %s", name)


def list_branches(ref_repo: RefRepository) -> list[BranchInfo]:
    """List all branches, sorted by name, with the current one flagged."""
    current = ref_repo.get_current_branch()
    branches: list[BranchInfo] = []
    for name in ref_repo.list_branches():
        commit_hash = ref_repo.get_branch(name)
        if commit_hash is not None:
            branches.append(
                BranchInfo(name=name, commit_hash=commit_hash, is_current=(name == current))
            )
    return branches
