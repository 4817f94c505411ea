"""Shared test fixtures for snapvc.

Provides in-memory SQLite engine, session, repository fixtures, an
in-memory working tree, and a deterministic clock.
"""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.orm import Session, sessionmaker

from snapvc.engine.commit import CommitEngine
from snapvc.storage.engine import create_snap_engine, init_db
from snapvc.storage.sqlite import (
    SqliteBlobRepository,
    SqliteCommitRepository,
    SqliteKnownFileRepository,
    SqliteRefRepository,
    SqliteStagingRepository,
)
from snapvc.worktree import MemoryWorkingTree


class TickingClock:
    """Clock that advances one second per call, starting at a fixed instant."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self.now += timedelta(seconds=1)
        return self.now


@pytest.fixture
def engine():
    """In-memory SQLite engine with all tables created."""
    eng = create_snap_engine(":memory:")
    init_db(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session(engine):
    """Session with automatic rollback after each test."""
    SessionLocal = sessionmaker(bind=engine, expire_on_commit=False)
    sess = SessionLocal()
    yield sess
    sess.rollback()
    sess.close()


@pytest.fixture
def clock() -> TickingClock:
    return TickingClock()


@pytest.fixture
def blob_repo(session: Session) -> SqliteBlobRepository:
    return SqliteBlobRepository(session)


@pytest.fixture
def commit_repo(session: Session) -> SqliteCommitRepository:
    return SqliteCommitRepository(session)


@pytest.fixture
def ref_repo(session: Session) -> SqliteRefRepository:
    return SqliteRefRepository(session)


@pytest.fixture
def staging_repo(session: Session) -> SqliteStagingRepository:
    return SqliteStagingRepository(session)


@pytest.fixture
def known_repo(session: Session) -> SqliteKnownFileRepository:
    return SqliteKnownFileRepository(session)


@pytest.fixture
def commit_engine(commit_repo, blob_repo, ref_repo, clock) -> CommitEngine:
    return CommitEngine(commit_repo, blob_repo, ref_repo, clock=clock)


@pytest.fixture
def worktree() -> MemoryWorkingTree:
    return MemoryWorkingTree()


@pytest.fixture
def initialized(commit_engine: CommitEngine, worktree: MemoryWorkingTree):
    """Root commit on main over an empty working tree."""
    return commit_engine.create_initial_commit("initial commit", "main", {})


# ------------------------------------------------------------------
# Shared test helpers
# ------------------------------------------------------------------

def make_repo(files: dict[str, bytes] | None = None, **kwargs) -> "Repository":
    """Create an in-memory Repository with a ticking clock."""
    from snapvc import Repository

    kwargs.setdefault("clock", TickingClock())
    return Repository.in_memory(MemoryWorkingTree(files), **kwargs)


def commit_files(repo: "Repository", message: str, files: dict[str, bytes]) -> str:
    """Write, stage and commit files; return the new commit hash."""
    for name, data in files.items():
        repo.worktree.write(name, data)
        repo.add(name)
    return repo.commit(message).commit_hash
