"""Commit engine for snapvc.

Orchestrates commit creation: blob deduplication, tree inheritance from
the parent commit, identity hashing, and branch pointer updates.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Callable, Iterable, Mapping

from snapvc.engine.hashing import content_hash as compute_content_hash
from snapvc.exceptions import (
    BlobNotFoundError,
    EmptyCommitMessageError,
    NothingToCommitError,
    SnapError,
)
from snapvc.models.commit import CommitDraft, CommitInfo
from snapvc.storage.schema import SNAPSHOT, TRACKED, BlobRow, CommitFileRow, CommitRow

if TYPE_CHECKING:
    from snapvc.storage.repositories import (
        BlobRepository,
        CommitRepository,
        RefRepository,
    )
    from snapvc.worktree import WorkingTree

logger = logging.getLogger(__name__)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    """SQLite drops tzinfo; stored timestamps are always UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class CommitEngine:
    """Orchestrates commit creation with validation and storage.

    The commit engine is the primary write path for snapvc. It enforces:
    - Content-addressable blob storage (dedup via hash)
    - Immutable commit DAG (parent pointers, hash sealed once)
    - Tree inheritance: unchanged files share blob hashes across commits
    """

    def __init__(
        self,
        commit_repo: CommitRepository,
        blob_repo: BlobRepository,
        ref_repo: RefRepository,
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._commit_repo = commit_repo
        self._blob_repo = blob_repo
        self._ref_repo = ref_repo
        self._clock = clock or _utcnow

    # ------------------------------------------------------------------
    # Blobs
    # ------------------------------------------------------------------

    def store_blob(self, data: bytes) -> str:
        """Store file contents once and return their hash."""
        c_hash = compute_content_hash(data)
        self._blob_repo.save_if_absent(
            BlobRow(
                content_hash=c_hash,
                data=data,
                byte_size=len(data),
                created_at=self._clock(),
            )
        )
        return c_hash

    def read_blob(self, content_hash: str) -> bytes:
        blob = self._blob_repo.get(content_hash)
        if blob is None:
            raise BlobNotFoundError(content_hash)
        return blob.data

    def snapshot(self, worktree: WorkingTree) -> dict[str, str]:
        """Record every working-directory file as a blob; name -> hash."""
        return {name: self.store_blob(worktree.read(name)) for name in worktree.list_files()}

    # ------------------------------------------------------------------
    # Commits
    # ------------------------------------------------------------------

    def create_initial_commit(
        self,
        message: str,
        branch: str,
        snapshot: Mapping[str, str],
    ) -> CommitInfo:
        """Create the root commit.

        The root commit has no parent, no tracked files, and a timestamp
        pinned to the Unix epoch. It always succeeds.
        """
        draft = CommitDraft(
            message=message,
            branch=branch,
            created_at=EPOCH,
            snapshot=dict(snapshot),
        )
        info = draft.seal()
        self._save(info)
        self._ref_repo.set_branch(branch, info.commit_hash)
        self._ref_repo.attach_head(branch)
        logger.info("created root commit %s on %s", info.short_hash, branch)
        return info

    def create_commit(
        self,
        message: str,
        staged_adds: Mapping[str, str],
        staged_removals: Iterable[str],
        snapshot: Mapping[str, str],
    ) -> CommitInfo:
        """Create a new commit on the current branch.

        Args:
            message: Commit message (must not be blank).
            staged_adds: File name -> blob hash of each pending addition.
            staged_removals: Names of pending removals.
            snapshot: File name -> blob hash of the working directory.

        Returns:
            CommitInfo with the new commit's data.

        Raises:
            EmptyCommitMessageError: If the message is blank.
            NothingToCommitError: If nothing is staged.
        """
        if not message or not message.strip():
            raise EmptyCommitMessageError()

        removals = set(staged_removals)
        if not staged_adds and not removals:
            raise NothingToCommitError()

        branch = self._ref_repo.get_current_branch()
        parent_hash = self._ref_repo.get_head()
        if branch is None or parent_hash is None:
            raise SnapError("Repository has no current branch")

        parent = self.get(parent_hash)
        files = dict(parent.files) if parent is not None else {}
        files.update(staged_adds)
        for name in removals:
            files.pop(name, None)

        # The timestamp is the last field fixed before sealing.
        draft = CommitDraft(
            message=message,
            branch=branch,
            parent_hash=parent_hash,
            files=files,
            snapshot=dict(snapshot),
            created_at=self._clock(),
        )
        info = draft.seal()
        self._save(info)
        self._ref_repo.set_branch(branch, info.commit_hash)
        logger.info(
            "committed %s on %s (%d added, %d removed)",
            info.short_hash,
            branch,
            len(staged_adds),
            len(removals),
        )
        return info

    def get(self, commit_hash: str) -> CommitInfo | None:
        row = self._commit_repo.get(commit_hash)
        if row is None:
            return None
        return self.row_to_info(row)

    def _save(self, info: CommitInfo) -> None:
        entries = [
            CommitFileRow(
                commit_hash=info.commit_hash,
                kind=TRACKED,
                file_name=name,
                content_hash=c_hash,
            )
            for name, c_hash in sorted(info.files.items())
        ]
        entries.extend(
            CommitFileRow(
                commit_hash=info.commit_hash,
                kind=SNAPSHOT,
                file_name=name,
                content_hash=c_hash,
            )
            for name, c_hash in sorted(info.snapshot.items())
        )
        row = CommitRow(
            commit_hash=info.commit_hash,
            parent_hash=info.parent_hash,
            message=info.message,
            branch=info.branch,
            created_at=info.created_at,
            sequence=self._commit_repo.next_sequence(),
            entries=entries,
        )
        self._commit_repo.save(row)

    @staticmethod
    def row_to_info(row: CommitRow) -> CommitInfo:
        """Convert a CommitRow to the SDK-facing CommitInfo."""
        files = {e.file_name: e.content_hash for e in row.entries if e.kind == TRACKED}
        snapshot = {e.file_name: e.content_hash for e in row.entries if e.kind == SNAPSHOT}
        return CommitInfo(
            commit_hash=row.commit_hash,
            parent_hash=row.parent_hash,
            message=row.message,
            branch=row.branch,
            created_at=_as_utc(row.created_at),
            files=files,
            snapshot=snapshot,
        )
