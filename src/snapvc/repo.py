"""Repository -- the public SDK entry point for snapvc.

Ties together storage, the commit engine, and the working tree into a
clean, user-facing API. Users interact with ``Repository.init()``,
``Repository.open()``, ``repo.add()``, ``repo.commit()``, etc.

Every public method runs as one store transaction: it is committed when
the method returns and rolled back when it raises.

Not thread-safe, and not safe for concurrent processes on the same
repository. One command runs at a time.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Callable

from snapvc.engine.commit import CommitEngine
from snapvc.exceptions import (
    CommitNotFoundError,
    FileNotInCommitError,
    NotARepositoryError,
    RepositoryExistsError,
)
from snapvc.models.config import RepoConfig
from snapvc.operations import branch as branch_ops
from snapvc.operations import history as history_ops
from snapvc.operations import reconcile as reconcile_ops
from snapvc.operations import staging as staging_ops
from snapvc.operations.navigation import resolve_commit
from snapvc.storage.engine import create_session_factory, create_snap_engine, init_db
from snapvc.storage.sqlite import (
    SqliteBlobRepository,
    SqliteCommitRepository,
    SqliteKnownFileRepository,
    SqliteRefRepository,
    SqliteStagingRepository,
)
from snapvc.worktree import DiskWorkingTree, MemoryWorkingTree

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy import Engine
    from sqlalchemy.orm import Session

    from snapvc.models.branch import BranchInfo
    from snapvc.models.commit import CommitInfo
    from snapvc.models.staging import StagedFile
    from snapvc.operations.history import StatusInfo
    from snapvc.worktree import WorkingTree

logger = logging.getLogger(__name__)


class Repository:
    """Primary entry point for snapvc -- snapshot version control of a directory.

    Create a repository via :meth:`Repository.init`, open an existing one
    via :meth:`Repository.open`, or build a throwaway one with
    :meth:`Repository.in_memory` (testing).

    Example::

        with Repository.init("project") as repo:
            repo.add("notes.txt")
            repo.commit("add notes")
            for entry in repo.log():
                print(entry)
    """

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def __init__(
        self,
        *,
        engine: Engine | None,
        session: Session,
        worktree: WorkingTree,
        config: RepoConfig,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._engine = engine
        self._session = session
        self._worktree = worktree
        self._config = config
        self._commit_repo = SqliteCommitRepository(session)
        self._blob_repo = SqliteBlobRepository(session)
        self._ref_repo = SqliteRefRepository(session)
        self._staging_repo = SqliteStagingRepository(session)
        self._known_repo = SqliteKnownFileRepository(session)
        self._commit_engine = CommitEngine(
            self._commit_repo,
            self._blob_repo,
            self._ref_repo,
            clock=clock,
        )
        self._closed = False

    @classmethod
    def init(
        cls,
        root: str | Path = ".",
        *,
        config: RepoConfig | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> Repository:
        """Create a repository in *root* with its root commit.

        Raises:
            RepositoryExistsError: If *root* already holds a repository.
        """
        config = config or RepoConfig()
        control = config.control_path(root)
        if control.exists():
            raise RepositoryExistsError(str(root))
        control.mkdir(parents=True)

        engine = create_snap_engine(str(config.db_path(root)))
        init_db(engine)
        session = create_session_factory(engine)()
        repo = cls(
            engine=engine,
            session=session,
            worktree=DiskWorkingTree(root),
            config=config,
            clock=clock,
        )
        repo._create_root_commit()
        logger.info("initialized repository in %s", control)
        return repo

    @classmethod
    def open(
        cls,
        root: str | Path = ".",
        *,
        config: RepoConfig | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> Repository:
        """Open the existing repository in *root*.

        Raises:
            NotARepositoryError: If *root* holds no repository.
        """
        config = config or RepoConfig()
        db_path = config.db_path(root)
        if not db_path.is_file():
            raise NotARepositoryError(str(root))

        engine = create_snap_engine(str(db_path))
        init_db(engine)
        session = create_session_factory(engine)()
        return cls(
            engine=engine,
            session=session,
            worktree=DiskWorkingTree(root),
            config=config,
            clock=clock,
        )

    @classmethod
    def in_memory(
        cls,
        worktree: WorkingTree | None = None,
        *,
        config: RepoConfig | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> Repository:
        """Create a repository that never touches the file system.

        The store is an in-memory SQLite database and the working tree
        defaults to an empty :class:`MemoryWorkingTree`.
        """
        engine = create_snap_engine(":memory:")
        init_db(engine)
        session = create_session_factory(engine)()
        repo = cls(
            engine=engine,
            session=session,
            worktree=worktree if worktree is not None else MemoryWorkingTree(),
            config=config or RepoConfig(),
            clock=clock,
        )
        repo._create_root_commit()
        return repo

    @classmethod
    def from_components(
        cls,
        *,
        session: Session,
        worktree: WorkingTree,
        engine: Engine | None = None,
        config: RepoConfig | None = None,
        clock: Callable[[], datetime] | None = None,
        initialize: bool = False,
    ) -> Repository:
        """Create a ``Repository`` from pre-built components.

        Skips engine/session creation. Useful for testing and DI. With
        ``initialize=True`` the root commit is created as well.
        """
        repo = cls(
            engine=engine,
            session=session,
            worktree=worktree,
            config=config or RepoConfig(),
            clock=clock,
        )
        if initialize:
            repo._create_root_commit()
        return repo

    def _create_root_commit(self) -> CommitInfo:
        with self._transaction():
            snapshot = self._commit_engine.snapshot(self._worktree)
            return self._commit_engine.create_initial_commit(
                self._config.initial_message,
                self._config.default_branch,
                snapshot,
            )

    @contextmanager
    def _transaction(self) -> Iterator[None]:
        """Commit the session on success, roll it back on any error."""
        try:
            yield
        except BaseException:
            self._session.rollback()
            raise
        else:
            self._session.commit()

    # ------------------------------------------------------------------
    # Public properties
    # ------------------------------------------------------------------

    @property
    def config(self) -> RepoConfig:
        """The repository configuration."""
        return self._config

    @property
    def worktree(self) -> WorkingTree:
        """The working tree this repository reconciles."""
        return self._worktree

    @property
    def head(self) -> str | None:
        """Current head commit hash."""
        return self._ref_repo.get_head()

    @property
    def current_branch(self) -> str | None:
        """The current branch name."""
        return self._ref_repo.get_current_branch()

    # ------------------------------------------------------------------
    # Staging and committing
    # ------------------------------------------------------------------

    def add(self, file_name: str) -> StagedFile | None:
        """Stage *file_name* for addition.

        Returns:
            The pending addition, or None if the content matches head
            and the staging entry was pruned.

        Raises:
            FileNotFoundInWorkdirError: If the file does not exist.
        """
        with self._transaction():
            return staging_ops.stage_file(
                file_name,
                self.head,
                self._commit_engine,
                self._staging_repo,
                self._known_repo,
                self._worktree,
            )

    def rm(self, file_name: str) -> StagedFile | None:
        """Unstage *file_name*, or stage its removal if head tracks it.

        Raises:
            NoReasonToRemoveError: If the file is neither staged nor tracked.
        """
        with self._transaction():
            return staging_ops.remove_file(
                file_name,
                self.head,
                self._commit_engine,
                self._staging_repo,
                self._worktree,
            )

    def commit(self, message: str) -> CommitInfo:
        """Commit the staged changes.

        Files staged for removal are deleted from the working directory
        once the commit has been created.

        Raises:
            EmptyCommitMessageError: If the message is blank.
            NothingToCommitError: If nothing is staged.
        """
        with self._transaction():
            adds, removals = staging_ops.staged_changes(self._staging_repo)
            snapshot = {
                name: self._commit_engine.store_blob(self._worktree.read(name))
                for name in self._worktree.list_files()
                if name not in removals
            }
            info = self._commit_engine.create_commit(message, adds, removals, snapshot)
            for name in removals:
                self._worktree.delete(name)
            staging_ops.clear_staging(self._staging_repo)
            return info

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def log(self, limit: int | None = None) -> list[CommitInfo]:
        """Walk commit history from head backward (newest first)."""
        return history_ops.log(self.head, self._commit_repo, limit=limit)

    def global_log(self) -> list[CommitInfo]:
        """Every commit ever made, newest first, across all branches."""
        return history_ops.global_log(self._commit_repo)

    def find(self, message: str) -> list[str]:
        """Hashes of every commit with exactly this message.

        Raises:
            MessageNotFoundError: If none matches.
        """
        return history_ops.find(message, self._commit_repo)

    def status(self) -> StatusInfo:
        """Branches, staged and removed files, unstaged modifications, untracked files."""
        return history_ops.status(
            self._ref_repo, self._staging_repo, self._commit_engine, self._worktree
        )

    def resolve_commit(self, commit_id: str) -> str:
        """Resolve a full or abbreviated commit id to a full hash.

        Raises:
            CommitNotFoundError: If no commit matches.
            AmbiguousPrefixError: If the prefix matches several commits.
        """
        return resolve_commit(
            commit_id,
            self._commit_repo,
            min_prefix_length=self._config.min_prefix_length,
        )

    def show(self, commit_id: str) -> CommitInfo:
        """Full details of one commit."""
        resolved = self.resolve_commit(commit_id)
        info = self._commit_engine.get(resolved)
        if info is None:
            raise CommitNotFoundError(commit_id)
        return info

    def read_file(self, commit_id: str, file_name: str) -> bytes:
        """Contents of *file_name* as tracked by *commit_id*."""
        info = self.show(commit_id)
        if file_name not in info.files:
            raise FileNotInCommitError(file_name)
        return self._commit_engine.read_blob(info.files[file_name])

    # ------------------------------------------------------------------
    # Working-directory reconciliation
    # ------------------------------------------------------------------

    def restore(self, file_name: str, commit_id: str | None = None) -> None:
        """Overwrite *file_name* from head, or from *commit_id* if given.

        Raises:
            FileNotInCommitError: If the commit does not track the file.
            CommitNotFoundError: If *commit_id* matches no commit.
        """
        with self._transaction():
            if commit_id is None:
                reconcile_ops.restore_file(
                    file_name, self._ref_repo, self._commit_engine, self._worktree
                )
            else:
                reconcile_ops.restore_from_commit(
                    commit_id,
                    file_name,
                    self._commit_repo,
                    self._commit_engine,
                    self._worktree,
                    min_prefix_length=self._config.min_prefix_length,
                )

    def switch(self, name: str) -> str:
        """Switch to branch *name*, rewriting the working directory.

        Returns:
            The commit hash at the tip of the branch.

        Raises:
            BranchNotFoundError: If the branch does not exist.
            AlreadyOnBranchError: If it is already checked out.
            UntrackedFileError: If unsaved work is in the way.
        """
        with self._transaction():
            return reconcile_ops.switch_branch(
                name,
                self._ref_repo,
                self._commit_repo,
                self._staging_repo,
                self._commit_engine,
                self._worktree,
            )

    def reset(self, commit_id: str) -> str:
        """Move the current branch to *commit_id* and check it out.

        Returns:
            The resolved commit hash (new head).

        Raises:
            CommitNotFoundError: If the id matches no commit.
            UntrackedFileError: If unsaved work is in the way.
        """
        with self._transaction():
            return reconcile_ops.reset(
                commit_id,
                self._ref_repo,
                self._commit_repo,
                self._staging_repo,
                self._commit_engine,
                self._worktree,
                min_prefix_length=self._config.min_prefix_length,
            )

    # ------------------------------------------------------------------
    # Branches
    # ------------------------------------------------------------------

    def branch(self, name: str) -> str:
        """Create branch *name* at head without switching to it.

        Raises:
            BranchExistsError: If the branch already exists.
            InvalidBranchNameError: If the name is invalid.
        """
        with self._transaction():
            return branch_ops.create_branch(name, self._ref_repo)

    def rm_branch(self, name: str) -> None:
        """Delete branch *name*. Its commits stay in the store.

        Raises:
            BranchNotFoundError: If the branch does not exist.
            CurrentBranchDeletionError: If it is the current branch.
        """
        with self._transaction():
            branch_ops.delete_branch(name, self._ref_repo)

    def list_branches(self) -> list[BranchInfo]:
        """All branches, sorted, with ``is_current`` set for the active one."""
        return branch_ops.list_branches(self._ref_repo)

    def known_files(self) -> list[str]:
        """Every file name ever staged with add, sorted.

        Names stay registered after rm, reset, or branch deletion.
        """
        return self._known_repo.list_all()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Close the session and dispose the engine."""
        if self._closed:
            return
        self._closed = True
        self._session.close()
        if self._engine is not None:
            self._engine.dispose()

    def __enter__(self) -> Repository:
        return self

    def __exit__(self, exc_type: type | None, exc_val: BaseException | None, exc_tb: object) -> None:
        self.close()

    def __repr__(self) -> str:
        if self._closed:
            return "Repository(closed=True)"
        return f"Repository(worktree={self._worktree!r}, branch={self.current_branch!r})"
