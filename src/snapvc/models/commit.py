"""Commit domain model for snapvc.

CommitInfo is the SDK-facing, immutable commit returned by every query.
CommitDraft collects a commit's fields before its identity is known;
sealing the draft computes the hash exactly once and yields a CommitInfo.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from snapvc.engine.hashing import commit_hash as compute_commit_hash


class CommitInfo(BaseModel):
    """SDK-facing commit information model.

    Not an ORM model -- used for data transfer only. Frozen: a commit
    never changes once its hash exists.
    """

    model_config = ConfigDict(frozen=True)

    commit_hash: str
    parent_hash: Optional[str] = None
    message: str
    branch: str
    created_at: datetime
    files: Mapping[str, str] = Field(default_factory=dict, validate_default=True)
    snapshot: Mapping[str, str] = Field(default_factory=dict, validate_default=True)

    @field_validator("files", "snapshot", mode="after")
    @classmethod
    def _read_only(cls, v: Mapping[str, str]) -> Mapping[str, str]:
        return MappingProxyType(dict(v))

    @property
    def short_hash(self) -> str:
        return self.commit_hash[:8]

    def tracks(self, file_name: str) -> bool:
        """Whether *file_name* is a tracked file of this commit."""
        return file_name in self.files

    def __str__(self) -> str:
        msg = self.message
        if len(msg) > 60:
            msg = msg[:57] + "..."
        return f"{self.short_hash} {msg}"

    def __repr__(self) -> str:
        return f"CommitInfo({self.short_hash} {self.message!r} files={len(self.files)})"


class CommitAlreadySealedError(RuntimeError):
    """Raised when a draft is sealed a second time."""


@dataclass
class CommitDraft:
    """Mutable builder for a commit whose hash is not yet assigned.

    Every field, including ``created_at``, must be final before
    :meth:`seal` is called. After sealing, the draft refuses further
    sealing so a hash can never be recomputed from changed fields.
    """

    message: str
    branch: str
    created_at: datetime
    parent_hash: str | None = None
    files: dict[str, str] = field(default_factory=dict)
    snapshot: dict[str, str] = field(default_factory=dict)
    _sealed: bool = field(default=False, init=False, repr=False)

    @property
    def sealed(self) -> bool:
        return self._sealed

    def seal(self) -> CommitInfo:
        """Compute the identity hash and freeze the commit."""
        if self._sealed:
            raise CommitAlreadySealedError("commit draft has already been sealed")
        self._sealed = True
        files = dict(self.files)
        snapshot = dict(self.snapshot)
        digest = compute_commit_hash(
            message=self.message,
            timestamp_iso=self.created_at.isoformat(),
            branch=self.branch,
            parent_hash=self.parent_hash,
            files=files,
            snapshot=snapshot,
        )
        return CommitInfo(
            commit_hash=digest,
            parent_hash=self.parent_hash,
            message=self.message,
            branch=self.branch,
            created_at=self.created_at,
            files=files,
            snapshot=snapshot,
        )
