"""Abstract repository interfaces for snapvc storage.

Defines ABC interfaces for all database operations. No SQLAlchemy
imports here -- pure abstract contracts.

Concrete implementations are in sqlite.py.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from snapvc.models.staging import StageKind
    from snapvc.storage.schema import BlobRow, CommitRow, StagingRow


class BlobRepository(ABC):
    """Abstract interface for blob storage operations."""

    @abstractmethod
    def get(self, content_hash: str) -> BlobRow | None:
        """Get a blob by its content hash. Returns None if not found."""
        ...

    @abstractmethod
    def save_if_absent(self, blob: BlobRow) -> None:
        """Store a blob only if its content_hash is not already present.

        Content-addressable: same content = same hash = stored once.
        """
        ...


class CommitRepository(ABC):
    """Abstract interface for commit storage operations."""

    @abstractmethod
    def get(self, commit_hash: str) -> CommitRow | None:
        """Get a commit by its hash. Returns None if not found."""
        ...

    @abstractmethod
    def save(self, commit: CommitRow) -> None:
        """Save a commit (and its tree entries) to storage."""
        ...

    @abstractmethod
    def next_sequence(self) -> int:
        """Sequence number to assign to the next commit."""
        ...

    @abstractmethod
    def get_ancestors(self, commit_hash: str, limit: int | None = None) -> Sequence[CommitRow]:
        """Get ancestor chain from commit to root (inclusive).

        Returns commits in reverse chronological order (newest first).
        """
        ...

    @abstractmethod
    def get_by_prefix(self, prefix: str) -> CommitRow | None:
        """Find commit by hash prefix.

        Raises AmbiguousPrefixError if multiple matches.
        Returns None if no match.
        """
        ...

    @abstractmethod
    def get_all(self) -> Sequence[CommitRow]:
        """Get every commit ever created, newest first."""
        ...

    @abstractmethod
    def get_by_message(self, message: str) -> Sequence[CommitRow]:
        """Get all commits whose message equals *message*, newest first."""
        ...

    @abstractmethod
    def has_file_version(self, file_name: str, content_hash: str) -> bool:
        """Whether any commit recorded *file_name* with this content."""
        ...


class RefRepository(ABC):
    """Abstract interface for ref (branch/HEAD pointer) operations."""

    @abstractmethod
    def get_head(self) -> str | None:
        """Get the HEAD commit hash. Returns None if no HEAD."""
        ...

    @abstractmethod
    def get_current_branch(self) -> str | None:
        """Get the branch HEAD is attached to."""
        ...

    @abstractmethod
    def attach_head(self, branch_name: str) -> None:
        """Attach HEAD to a branch (symbolic ref: HEAD -> refs/heads/{branch_name})."""
        ...

    @abstractmethod
    def get_branch(self, branch_name: str) -> str | None:
        """Get the commit hash for a named branch. Returns None if not found."""
        ...

    @abstractmethod
    def set_branch(self, branch_name: str, commit_hash: str) -> None:
        """Set or update a named branch to point at a commit."""
        ...

    @abstractmethod
    def delete_branch(self, branch_name: str) -> None:
        """Delete a branch ref."""
        ...

    @abstractmethod
    def list_branches(self) -> list[str]:
        """List all branch names, sorted."""
        ...

    @abstractmethod
    def get_ref(self, ref_name: str) -> str | None:
        """Get the commit hash for a named ref. Returns None if not found."""
        ...

    @abstractmethod
    def set_ref(self, ref_name: str, commit_hash: str) -> None:
        """Set or update a direct ref (e.g. ORIG_HEAD)."""
        ...


class StagingRepository(ABC):
    """Abstract interface for the staging area."""

    @abstractmethod
    def get(self, file_name: str) -> StagingRow | None:
        """Get the staged entry for a file name. Returns None if not staged."""
        ...

    @abstractmethod
    def put(self, file_name: str, kind: StageKind, content_hash: str) -> None:
        """Insert or replace the staged entry for a file name."""
        ...

    @abstractmethod
    def delete(self, file_name: str) -> bool:
        """Drop the staged entry. Returns True if one existed."""
        ...

    @abstractmethod
    def list(self, kind: StageKind | None = None) -> Sequence[StagingRow]:
        """List staged entries (optionally of one kind), sorted by name."""
        ...

    @abstractmethod
    def clear(self) -> None:
        """Drop every staged entry."""
        ...


class KnownFileRepository(ABC):
    """Abstract interface for the registry of every file name ever staged.

    Bookkeeping only: the safety check and status work from commit tree
    entries, not from this registry. It is exposed through
    Repository.known_files().
    """

    @abstractmethod
    def add(self, file_name: str) -> None:
        """Register a file name (idempotent)."""
        ...

    @abstractmethod
    def contains(self, file_name: str) -> bool:
        """Whether the name has ever been staged."""
        ...

    @abstractmethod
    def list_all(self) -> list[str]:
        """All registered names, sorted."""
        ...
