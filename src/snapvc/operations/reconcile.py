"""Working-directory reconciliation for snapvc -- restore, switch, reset.

Every destructive operation here first runs the untracked-file safety
check, which only reads. The working directory and the store are
touched only after the check has passed, so a refused operation leaves
both unchanged.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from snapvc.engine.hashing import content_hash as compute_content_hash
from snapvc.exceptions import (
    AlreadyOnBranchError,
    BranchNotFoundError,
    CommitNotFoundError,
    FileNotInCommitError,
    SnapError,
    UntrackedFileError,
)
from snapvc.operations.navigation import resolve_commit

if TYPE_CHECKING:
    from snapvc.engine.commit import CommitEngine
    from snapvc.models.commit import CommitInfo
    from snapvc.storage.repositories import CommitRepository, RefRepository, StagingRepository
    from snapvc.worktree import WorkingTree

logger = logging.getLogger(__name__)

ORIG_HEAD = "ORIG_HEAD"


def _load(engine: CommitEngine, commit_hash: str | None) -> CommitInfo:
    if commit_hash is None:
        raise SnapError("Repository has no commits")
    info = engine.get(commit_hash)
    if info is None:
        raise CommitNotFoundError(commit_hash)
    return info


def find_untracked(
    head: CommitInfo,
    commit_repo: CommitRepository,
    worktree: WorkingTree,
) -> list[str]:
    """Names of working-directory files that would be lost by a checkout.

    A file is safe when its contents equal head's tracked blob for that
    name, or any blob some commit ever recorded under that name.
    """
    offenders: list[str] = []
    for name in worktree.list_files():
        c_hash = compute_content_hash(worktree.read(name))
        if head.files.get(name) == c_hash:
            continue
        if commit_repo.has_file_version(name, c_hash):
            continue
        offenders.append(name)
    return offenders


def check_untracked(
    head: CommitInfo,
    commit_repo: CommitRepository,
    staging_repo: StagingRepository,
    worktree: WorkingTree,
) -> None:
    """Refuse a destructive operation that would clobber unsaved work.

    Raises:
        UntrackedFileError: If any working-directory file fails the check
            or the staging area is not empty.
    """
    staged = [row.file_name for row in staging_repo.list()]
    offenders = staged + find_untracked(head, commit_repo, worktree)
    if offenders:
        logger.warning("untracked files in the way: %s", ", ".join(sorted(set(offenders))))
        raise UntrackedFileError(sorted(set(offenders)))


def apply_commit(target: CommitInfo, engine: CommitEngine, worktree: WorkingTree) -> None:
    """Rewrite the working directory to match *target*.

    Every tracked file is written; every file that is neither tracked by
    nor present in the snapshot of *target* is deleted.

    All blob contents are loaded before the first write, so a store error
    leaves the directory untouched. Each write replaces its file whole,
    but an OS error on a later file (a directory in the way, a full disk)
    does not undo the files already written.
    """
    pending = {
        name: engine.read_blob(c_hash)
        for name, c_hash in sorted(target.files.items())
        if not (worktree.exists(name) and compute_content_hash(worktree.read(name)) == c_hash)
    }
    for name, data in pending.items():
        worktree.write(name, data)

    keep = set(target.files) | set(target.snapshot)
    for name in worktree.list_files():
        if name not in keep:
            worktree.delete(name)
    logger.debug("working directory now matches %s", target.short_hash)


def restore_file(
    file_name: str,
    ref_repo: RefRepository,
    engine: CommitEngine,
    worktree: WorkingTree,
) -> None:
    """Overwrite *file_name* with its version in the head commit.

    Raises:
        FileNotInCommitError: If head does not track the file.
    """
    head = _load(engine, ref_repo.get_head())
    if file_name not in head.files:
        raise FileNotInCommitError(file_name, latest=True)
    worktree.write(file_name, engine.read_blob(head.files[file_name]))
    logger.debug("restored %s from head %s", file_name, head.short_hash)


def restore_from_commit(
    commit_id: str,
    file_name: str,
    commit_repo: CommitRepository,
    engine: CommitEngine,
    worktree: WorkingTree,
    *,
    min_prefix_length: int = 6,
) -> str:
    """Overwrite or create *file_name* with its version in *commit_id*.

    Returns:
        The resolved full commit hash.

    Raises:
        CommitNotFoundError: If the id matches no commit.
        AmbiguousPrefixError: If the abbreviated id matches several commits.
        FileNotInCommitError: If the commit does not track the file.
    """
    resolved = resolve_commit(commit_id, commit_repo, min_prefix_length=min_prefix_length)
    commit = _load(engine, resolved)
    if file_name not in commit.files:
        raise FileNotInCommitError(file_name)
    worktree.write(file_name, engine.read_blob(commit.files[file_name]))
    logger.debug("restored %s from %s", file_name, commit.short_hash)
    return resolved


def switch_branch(
    name: str,
    ref_repo: RefRepository,
    commit_repo: CommitRepository,
    staging_repo: StagingRepository,
    engine: CommitEngine,
    worktree: WorkingTree,
) -> str:
    """Check out branch *name*.

    Returns:
        The commit hash at the tip of the target branch.

    Raises:
        BranchNotFoundError: If the branch does not exist.
        AlreadyOnBranchError: If it is the current branch.
        UntrackedFileError: If the safety check fails.
    """
    tip = ref_repo.get_branch(name)
    if tip is None:
        raise BranchNotFoundError(name)
    if ref_repo.get_current_branch() == name:
        raise AlreadyOnBranchError(name)

    head = _load(engine, ref_repo.get_head())
    check_untracked(head, commit_repo, staging_repo, worktree)

    target = _load(engine, tip)
    apply_commit(target, engine, worktree)
    ref_repo.attach_head(name)
    staging_repo.clear()
    logger.info("switched to branch %s (%s)", name, target.short_hash)
    return tip


def reset(
    commit_id: str,
    ref_repo: RefRepository,
    commit_repo: CommitRepository,
    staging_repo: StagingRepository,
    engine: CommitEngine,
    worktree: WorkingTree,
    *,
    min_prefix_length: int = 6,
) -> str:
    """Move the current branch to *commit_id* and check it out.

    Stores the previous head as ORIG_HEAD. Any stored commit is a valid
    target, whether or not it is an ancestor of head.

    Returns:
        The resolved target commit hash (new head).

    Raises:
        CommitNotFoundError: If the id matches no commit.
        AmbiguousPrefixError: If the abbreviated id matches several commits.
        UntrackedFileError: If the safety check fails.
    """
    resolved = resolve_commit(commit_id, commit_repo, min_prefix_length=min_prefix_length)
    branch = ref_repo.get_current_branch()
    if branch is None:
        raise SnapError("Repository has no current branch")

    head = _load(engine, ref_repo.get_head())
    check_untracked(head, commit_repo, staging_repo, worktree)

    target = _load(engine, resolved)
    apply_commit(target, engine, worktree)
    ref_repo.set_ref(ORIG_HEAD, head.commit_hash)
    ref_repo.set_branch(branch, resolved)
    staging_repo.clear()
    logger.info("reset %s to %s", branch, target.short_hash)
    return resolved
