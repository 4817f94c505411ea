"""SQLAlchemy ORM schema for snapvc.

Defines all database tables: blobs, commits, commit_files, refs, staging,
known_files, _snapvc_meta.

IMPORTANT: StageKind is imported from the domain models -- it is NOT
redefined here. The ORM uses the same Python enum.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import (
    DateTime,
    ForeignKey,
    Index,
    Integer,
    LargeBinary,
    String,
    Text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from snapvc.models.staging import StageKind

TRACKED = "tracked"
SNAPSHOT = "snapshot"


class Base(DeclarativeBase):
    """Base class for all snapvc ORM models."""

    pass


class BlobRow(Base):
    """Content-addressable file contents. Keyed by SHA-256 of the bytes."""

    __tablename__ = "blobs"

    content_hash: Mapped[str] = mapped_column(String(64), primary_key=True)
    data: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)
    byte_size: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)


class CommitRow(Base):
    """A commit in the history DAG."""

    __tablename__ = "commits"

    commit_hash: Mapped[str] = mapped_column(String(64), primary_key=True)
    parent_hash: Mapped[Optional[str]] = mapped_column(
        String(64),
        ForeignKey("commits.commit_hash"),
        nullable=True,
    )
    message: Mapped[str] = mapped_column(Text, nullable=False)
    branch: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    # Global creation order; created_at is not unique (the root commit is at epoch).
    sequence: Mapped[int] = mapped_column(Integer, nullable=False, unique=True)

    entries: Mapped[list["CommitFileRow"]] = relationship(
        "CommitFileRow",
        lazy="selectin",
        order_by="CommitFileRow.file_name",
    )
    parent: Mapped[Optional["CommitRow"]] = relationship(
        "CommitRow",
        remote_side="CommitRow.commit_hash",
        foreign_keys=[parent_hash],
    )

    __table_args__ = (
        Index("ix_commits_message", "message"),
    )


class CommitFileRow(Base):
    """One tree entry of a commit.

    kind="tracked" rows are the commit's tracked files; kind="snapshot"
    rows record every working-directory file present at commit time.
    Unchanged files share the same content_hash across commits.
    """

    __tablename__ = "commit_files"

    commit_hash: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("commits.commit_hash"),
        primary_key=True,
    )
    kind: Mapped[str] = mapped_column(String(10), primary_key=True)
    file_name: Mapped[str] = mapped_column(String(255), primary_key=True)
    content_hash: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("blobs.content_hash"),
        nullable=False,
    )

    __table_args__ = (
        Index("ix_commit_files_name_content", "file_name", "content_hash"),
    )


class RefRow(Base):
    """Mutable named pointer to a commit (branch, HEAD, ORIG_HEAD)."""

    __tablename__ = "refs"

    ref_name: Mapped[str] = mapped_column(String(255), primary_key=True)
    commit_hash: Mapped[Optional[str]] = mapped_column(
        String(64),
        ForeignKey("commits.commit_hash"),
        nullable=True,
    )
    symbolic_target: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)


class StagingRow(Base):
    """A pending addition or removal for the next commit."""

    __tablename__ = "staging"

    file_name: Mapped[str] = mapped_column(String(255), primary_key=True)
    kind: Mapped[StageKind] = mapped_column(nullable=False)
    content_hash: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("blobs.content_hash"),
        nullable=False,
    )


class KnownFileRow(Base):
    """Registry of every file name ever staged."""

    __tablename__ = "known_files"

    file_name: Mapped[str] = mapped_column(String(255), primary_key=True)
    first_staged_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)


class SnapMetaRow(Base):
    """Key-value metadata for the snapvc database itself (e.g., schema version)."""

    __tablename__ = "_snapvc_meta"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
