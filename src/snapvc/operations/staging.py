"""Staging area operations for snapvc.

Stage additions, stage removals, and clear the staging area.
Composes storage primitives (staging repo, known-file registry) and the
commit engine's blob store into user-facing actions.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from snapvc.exceptions import FileNotFoundInWorkdirError, NoReasonToRemoveError
from snapvc.models.staging import StageKind, StagedFile

if TYPE_CHECKING:
    from snapvc.engine.commit import CommitEngine
    from snapvc.storage.repositories import KnownFileRepository, StagingRepository
    from snapvc.worktree import WorkingTree

logger = logging.getLogger(__name__)


def _head_files(engine: CommitEngine, head_hash: str | None) -> dict[str, str]:
    if head_hash is None:
        return {}
    head = engine.get(head_hash)
    return dict(head.files) if head is not None else {}


def stage_file(
    file_name: str,
    head_hash: str | None,
    engine: CommitEngine,
    staging_repo: StagingRepository,
    known_repo: KnownFileRepository,
    worktree: WorkingTree,
) -> StagedFile | None:
    """Stage the current contents of *file_name* for the next commit.

    A file missing from the working directory can still be added when
    it has a pending removal: the removed contents are written back and
    the addition proceeds. An addition identical to head's tracked blob
    is pruned, so re-staging unchanged content is a no-op.

    Returns:
        The pending addition, or None if it was pruned.

    Raises:
        FileNotFoundInWorkdirError: If the file is absent and not pending removal.
    """
    pending = staging_repo.get(file_name)

    if not worktree.exists(file_name):
        if pending is None or pending.kind != StageKind.REMOVE:
            raise FileNotFoundInWorkdirError(file_name)
        logger.debug("recovering %s from pending removal", file_name)
        worktree.write(file_name, engine.read_blob(pending.content_hash))

    c_hash = engine.store_blob(worktree.read(file_name))
    known_repo.add(file_name)

    if _head_files(engine, head_hash).get(file_name) == c_hash:
        # Matches the committed version: nothing to stage, and any
        # pending removal of the same name is cancelled.
        staging_repo.delete(file_name)
        logger.debug("%s unchanged from head; staging pruned", file_name)
        return None

    staging_repo.put(file_name, StageKind.ADD, c_hash)
    logger.debug("staged %s for addition (%s)", file_name, c_hash[:8])
    return StagedFile(file_name=file_name, kind=StageKind.ADD, content_hash=c_hash)


def remove_file(
    file_name: str,
    head_hash: str | None,
    engine: CommitEngine,
    staging_repo: StagingRepository,
    worktree: WorkingTree,
) -> StagedFile | None:
    """Unstage *file_name*, or stage its removal if head tracks it.

    - Tracked by head: any pending addition is dropped, a pending removal
      is recorded and the file is deleted from the working directory.
    - Only staged for addition: the staging entry is discarded and the
      working directory is left alone.

    Returns:
        The pending removal, or None if the file was only unstaged.

    Raises:
        NoReasonToRemoveError: If the file is neither staged nor tracked.
    """
    head_files = _head_files(engine, head_hash)

    if file_name in head_files:
        if worktree.exists(file_name):
            c_hash = engine.store_blob(worktree.read(file_name))
        else:
            c_hash = head_files[file_name]
        staging_repo.put(file_name, StageKind.REMOVE, c_hash)
        worktree.delete(file_name)
        logger.debug("staged %s for removal", file_name)
        return StagedFile(file_name=file_name, kind=StageKind.REMOVE, content_hash=c_hash)

    pending = staging_repo.get(file_name)
    if pending is not None and pending.kind == StageKind.ADD:
        staging_repo.delete(file_name)
        logger.debug("unstaged %s", file_name)
        return None

    raise NoReasonToRemoveError(file_name)


def staged_changes(staging_repo: StagingRepository) -> tuple[dict[str, str], list[str]]:
    """Return (additions name -> hash, removal names) of the staging area."""
    adds = {row.file_name: row.content_hash for row in staging_repo.list(StageKind.ADD)}
    removals = [row.file_name for row in staging_repo.list(StageKind.REMOVE)]
    return adds, removals


def clear_staging(staging_repo: StagingRepository) -> None:
    """Drop every pending addition and removal."""
    staging_repo.clear()
