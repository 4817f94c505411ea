"""snapvc: snapshot-based local version control for a working directory.

Tracks successive states of a flat directory as immutable commits, with a
staging area, named branches, and safe reconciliation of the live files.
"""

from snapvc._version import __version__

# Core entry point
from snapvc.repo import Repository

# Models
from snapvc.models.branch import BranchInfo
from snapvc.models.commit import CommitDraft, CommitInfo
from snapvc.models.config import RepoConfig
from snapvc.models.staging import StagedFile, StageKind

# Working trees
from snapvc.worktree import DiskWorkingTree, MemoryWorkingTree, WorkingTree

# Operations data models
from snapvc.operations.history import StatusInfo

# Exceptions
from snapvc.exceptions import (
    SnapError,
    UserInputError,
    NotFoundError,
    ConflictError,
    NoOpError,
    NotARepositoryError,
    EmptyCommitMessageError,
    InvalidBranchNameError,
    PrefixTooShortError,
    FileNotFoundInWorkdirError,
    CommitNotFoundError,
    FileNotInCommitError,
    BranchNotFoundError,
    BlobNotFoundError,
    MessageNotFoundError,
    UntrackedFileError,
    AmbiguousPrefixError,
    RepositoryExistsError,
    NothingToCommitError,
    NoReasonToRemoveError,
    BranchExistsError,
    AlreadyOnBranchError,
    CurrentBranchDeletionError,
)

__all__ = [
    "__version__",
    "Repository",
    # Models
    "BranchInfo",
    "CommitDraft",
    "CommitInfo",
    "RepoConfig",
    "StagedFile",
    "StageKind",
    "StatusInfo",
    # Working trees
    "WorkingTree",
    "DiskWorkingTree",
    "MemoryWorkingTree",
    # Exceptions
    "SnapError",
    "UserInputError",
    "NotFoundError",
    "ConflictError",
    "NoOpError",
    "NotARepositoryError",
    "EmptyCommitMessageError",
    "InvalidBranchNameError",
    "PrefixTooShortError",
    "FileNotFoundInWorkdirError",
    "CommitNotFoundError",
    "FileNotInCommitError",
    "BranchNotFoundError",
    "BlobNotFoundError",
    "MessageNotFoundError",
    "UntrackedFileError",
    "AmbiguousPrefixError",
    "RepositoryExistsError",
    "NothingToCommitError",
    "NoReasonToRemoveError",
    "BranchExistsError",
    "AlreadyOnBranchError",
    "CurrentBranchDeletionError",
]
