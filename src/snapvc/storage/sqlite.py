"""SQLAlchemy-backed repositories for a snapvc store.

The repositories share the Session they are constructed with and only
flush; committing or rolling back is the caller's job.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Sequence

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from snapvc.models.staging import StageKind
from snapvc.storage.repositories import (
    BlobRepository,
    CommitRepository,
    KnownFileRepository,
    RefRepository,
    StagingRepository,
)
from snapvc.storage.schema import (
    BlobRow,
    CommitFileRow,
    CommitRow,
    KnownFileRow,
    RefRow,
    StagingRow,
)

HEAD = "HEAD"
BRANCH_PREFIX = "refs/heads/"


class SqliteBlobRepository(BlobRepository):
    """Blob store keyed by content hash; identical contents are stored once."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, content_hash: str) -> BlobRow | None:
        stmt = select(BlobRow).where(BlobRow.content_hash == content_hash)
        return self._session.execute(stmt).scalar_one_or_none()

    def save_if_absent(self, blob: BlobRow) -> None:
        """Insert *blob* unless a blob with that hash already exists."""
        existing = self.get(blob.content_hash)
        if existing is None:
            self._session.add(blob)
            self._session.flush()


class SqliteCommitRepository(CommitRepository):
    """Commit rows plus the tree entries loaded with them."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, commit_hash: str) -> CommitRow | None:
        stmt = select(CommitRow).where(CommitRow.commit_hash == commit_hash)
        return self._session.execute(stmt).scalar_one_or_none()

    def save(self, commit: CommitRow) -> None:
        self._session.add(commit)
        self._session.flush()

    def next_sequence(self) -> int:
        current = self._session.execute(select(func.max(CommitRow.sequence))).scalar()
        return (current or 0) + 1

    def get_ancestors(self, commit_hash: str, limit: int | None = None) -> Sequence[CommitRow]:
        """First-parent chain from *commit_hash* back to the root commit.

        Loads all commits once and follows parent links in memory.
        """
        all_commits = self._session.execute(select(CommitRow)).scalars().all()
        commits_by_hash: dict[str, CommitRow] = {c.commit_hash: c for c in all_commits}

        ancestors: list[CommitRow] = []
        current_hash: str | None = commit_hash
        while current_hash is not None:
            if limit is not None and len(ancestors) >= limit:
                break
            commit = commits_by_hash.get(current_hash)
            if commit is None:
                break
            ancestors.append(commit)
            current_hash = commit.parent_hash
        return ancestors

    def get_by_prefix(self, prefix: str) -> CommitRow | None:
        from snapvc.exceptions import AmbiguousPrefixError

        stmt = select(CommitRow).where(CommitRow.commit_hash.startswith(prefix, autoescape=True))
        results = list(self._session.execute(stmt).scalars().all())

        if len(results) == 0:
            return None
        if len(results) == 1:
            return results[0]
        raise AmbiguousPrefixError(prefix, sorted(r.commit_hash for r in results))

    def get_all(self) -> Sequence[CommitRow]:
        stmt = select(CommitRow).order_by(CommitRow.sequence.desc())
        return list(self._session.execute(stmt).scalars().all())

    def get_by_message(self, message: str) -> Sequence[CommitRow]:
        stmt = (
            select(CommitRow)
            .where(CommitRow.message == message)
            .order_by(CommitRow.sequence.desc())
        )
        return list(self._session.execute(stmt).scalars().all())

    def has_file_version(self, file_name: str, content_hash: str) -> bool:
        stmt = (
            select(CommitFileRow)
            .where(
                CommitFileRow.file_name == file_name,
                CommitFileRow.content_hash == content_hash,
            )
            .limit(1)
        )
        return self._session.execute(stmt).first() is not None


class SqliteRefRepository(RefRepository):
    """Branch refs, HEAD, and other named pointers.

    HEAD is stored as ref_name="HEAD" with a symbolic_target such as
    "refs/heads/main"; the branch ref stores the actual commit hash.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def _get_ref_row(self, ref_name: str) -> RefRow | None:
        stmt = select(RefRow).where(RefRow.ref_name == ref_name)
        return self._session.execute(stmt).scalar_one_or_none()

    def get_head(self) -> str | None:
        """Get the HEAD commit hash, resolving the symbolic ref."""
        head_ref = self._get_ref_row(HEAD)
        if head_ref is None:
            return None
        if head_ref.symbolic_target:
            branch_ref = self._get_ref_row(head_ref.symbolic_target)
            return branch_ref.commit_hash if branch_ref else None
        return head_ref.commit_hash

    def get_current_branch(self) -> str | None:
        head_ref = self._get_ref_row(HEAD)
        if head_ref is None or not head_ref.symbolic_target:
            return None
        return head_ref.symbolic_target.removeprefix(BRANCH_PREFIX)

    def attach_head(self, branch_name: str) -> None:
        ref_name = f"{BRANCH_PREFIX}{branch_name}"
        head_ref = self._get_ref_row(HEAD)
        if head_ref is None:
            self._session.add(
                RefRow(ref_name=HEAD, commit_hash=None, symbolic_target=ref_name)
            )
        else:
            head_ref.symbolic_target = ref_name
            head_ref.commit_hash = None
        self._session.flush()

    def get_branch(self, branch_name: str) -> str | None:
        ref = self._get_ref_row(f"{BRANCH_PREFIX}{branch_name}")
        return ref.commit_hash if ref else None

    def set_branch(self, branch_name: str, commit_hash: str) -> None:
        self.set_ref(f"{BRANCH_PREFIX}{branch_name}", commit_hash)

    def delete_branch(self, branch_name: str) -> None:
        ref = self._get_ref_row(f"{BRANCH_PREFIX}{branch_name}")
        if ref is not None:
            self._session.delete(ref)
            self._session.flush()

    def list_branches(self) -> list[str]:
        stmt = (
            select(RefRow)
            .where(RefRow.ref_name.startswith(BRANCH_PREFIX))
            .order_by(RefRow.ref_name)
        )
        refs = self._session.execute(stmt).scalars().all()
        return [ref.ref_name[len(BRANCH_PREFIX):] for ref in refs]

    def get_ref(self, ref_name: str) -> str | None:
        ref = self._get_ref_row(ref_name)
        return ref.commit_hash if ref else None

    def set_ref(self, ref_name: str, commit_hash: str) -> None:
        ref = self._get_ref_row(ref_name)
        if ref is None:
            self._session.add(RefRow(ref_name=ref_name, commit_hash=commit_hash))
        else:
            ref.commit_hash = commit_hash
        self._session.flush()


class SqliteStagingRepository(StagingRepository):
    """SQLite implementation of the staging area."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, file_name: str) -> StagingRow | None:
        stmt = select(StagingRow).where(StagingRow.file_name == file_name)
        return self._session.execute(stmt).scalar_one_or_none()

    def put(self, file_name: str, kind: StageKind, content_hash: str) -> None:
        row = self.get(file_name)
        if row is None:
            self._session.add(
                StagingRow(file_name=file_name, kind=kind, content_hash=content_hash)
            )
        else:
            row.kind = kind
            row.content_hash = content_hash
        self._session.flush()

    def delete(self, file_name: str) -> bool:
        row = self.get(file_name)
        if row is None:
            return False
        self._session.delete(row)
        self._session.flush()
        return True

    def list(self, kind: StageKind | None = None) -> Sequence[StagingRow]:
        stmt = select(StagingRow).order_by(StagingRow.file_name)
        if kind is not None:
            stmt = stmt.where(StagingRow.kind == kind)
        return self._session.execute(stmt).scalars().all()

    def clear(self) -> None:
        self._session.execute(delete(StagingRow))
        self._session.flush()


class SqliteKnownFileRepository(KnownFileRepository):
    """SQLite implementation of the known-file registry."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def add(self, file_name: str) -> None:
        if self.contains(file_name):
            return
        self._session.add(
            KnownFileRow(file_name=file_name, first_staged_at=datetime.now(timezone.utc))
        )
        self._session.flush()

    def contains(self, file_name: str) -> bool:
        stmt = select(KnownFileRow).where(KnownFileRow.file_name == file_name)
        return self._session.execute(stmt).scalar_one_or_none() is not None

    def list_all(self) -> list[str]:
        stmt = select(KnownFileRow.file_name).order_by(KnownFileRow.file_name)
        return list(self._session.execute(stmt).scalars().all())
