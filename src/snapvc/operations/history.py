"""History operations: log, global log, find, status."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from snapvc.engine.commit import CommitEngine
from snapvc.engine.hashing import content_hash as compute_content_hash
from snapvc.exceptions import MessageNotFoundError
from snapvc.models.staging import StageKind
from snapvc.operations.branch import list_branches

if TYPE_CHECKING:
    from snapvc.models.branch import BranchInfo
    from snapvc.models.commit import CommitInfo
    from snapvc.storage.repositories import CommitRepository, RefRepository, StagingRepository
    from snapvc.worktree import WorkingTree


@dataclass(frozen=True)
class StatusInfo:
    """Repository status returned by Repository.status().

    Attributes:
        head_hash: Current head commit hash.
        branch_name: Current branch name.
        branches: Every branch, sorted, current one flagged.
        staged: Names staged for addition.
        removed: Names staged for removal.
        modified: Tracked or staged files changed in the working directory
            but not staged, as ``"name (modified)"`` or ``"name (deleted)"``.
        untracked: Working-directory files neither staged nor tracked.
    """

    head_hash: str | None
    branch_name: str | None
    branches: list[BranchInfo] = field(default_factory=list)
    staged: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)
    modified: list[str] = field(default_factory=list)
    untracked: list[str] = field(default_factory=list)

    @property
    def is_clean(self) -> bool:
        return not (self.staged or self.removed or self.modified or self.untracked)

    def __str__(self) -> str:
        head = self.head_hash[:8] if self.head_hash else "None"
        return (
            f"{self.branch_name} @ {head} | {len(self.staged)} staged, "
            f"{len(self.removed)} removed, {len(self.modified)} modified, "
            f"{len(self.untracked)} untracked"
        )


def log(
    head_hash: str | None,
    commit_repo: CommitRepository,
    *,
    limit: int | None = None,
) -> list[CommitInfo]:
    """Walk first-parent history from head, newest first."""
    if head_hash is None:
        return []
    rows = commit_repo.get_ancestors(head_hash, limit=limit)
    return [CommitEngine.row_to_info(row) for row in rows]


def global_log(commit_repo: CommitRepository) -> list[CommitInfo]:
    """Every commit ever created, newest first."""
    return [CommitEngine.row_to_info(row) for row in commit_repo.get_all()]


def find(message: str, commit_repo: CommitRepository) -> list[str]:
    """Hashes of every commit whose message equals *message*.

    Raises:
        MessageNotFoundError: If no commit has that message.
    """
    hashes = [row.commit_hash for row in commit_repo.get_by_message(message)]
    if not hashes:
        raise MessageNotFoundError(message)
    return hashes


def status(
    ref_repo: RefRepository,
    staging_repo: StagingRepository,
    engine: CommitEngine,
    worktree: WorkingTree,
) -> StatusInfo:
    """Compute branch, staging, and working-directory status."""
    head_hash = ref_repo.get_head()
    head = engine.get(head_hash) if head_hash else None
    tracked = dict(head.files) if head is not None else {}

    adds = {row.file_name: row.content_hash for row in staging_repo.list(StageKind.ADD)}
    removals = {row.file_name for row in staging_repo.list(StageKind.REMOVE)}

    present = {
        name: compute_content_hash(worktree.read(name)) for name in worktree.list_files()
    }

    modified: list[str] = []
    for name in sorted(set(tracked) | set(adds)):
        if name in removals:
            continue
        expected = adds.get(name, tracked.get(name))
        if name not in present:
            modified.append(f"{name} (deleted)")
        elif present[name] != expected:
            modified.append(f"{name} (modified)")

    untracked = sorted(
        name
        for name in present
        if (name not in adds and name not in tracked) or name in removals
    )

    return StatusInfo(
        head_hash=head_hash,
        branch_name=ref_repo.get_current_branch(),
        branches=list_branches(ref_repo),
        staged=sorted(adds),
        removed=sorted(removals),
        modified=modified,
        untracked=untracked,
    )
