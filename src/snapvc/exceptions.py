"""snapvc exception hierarchy.

All snapvc-specific exceptions inherit from SnapError. Four taxonomy
bases (UserInputError, NotFoundError, ConflictError, NoOpError) group the
concrete errors; each base carries the exit code the CLI uses for it.
"""


class SnapError(Exception):
    """Base exception for all snapvc errors."""

    exit_code: int = 1


class UserInputError(SnapError):
    """Bad operands or a request that can never succeed as written."""

    exit_code = 2


class NotFoundError(SnapError):
    """An unknown file, commit, or branch was referenced."""

    exit_code = 3


class ConflictError(SnapError):
    """The working directory or staging area blocks the operation.

    Raised before any mutation takes place.
    """

    exit_code = 4


class NoOpError(SnapError):
    """The request would not change anything."""

    exit_code = 5


# ---------------------------------------------------------------------------
# User input
# ---------------------------------------------------------------------------


class NotARepositoryError(UserInputError):
    """Raised when a command runs outside an initialized repository."""

    def __init__(self, root: str) -> None:
        self.root = root
        super().__init__("Not in an initialized snapvc directory.")


class EmptyCommitMessageError(UserInputError):
    """Raised when a commit is attempted with a blank message."""

    def __init__(self) -> None:
        super().__init__("Please enter a commit message.")


class InvalidBranchNameError(UserInputError):
    """Raised when a branch name violates naming rules."""

    def __init__(self, name: str, reason: str) -> None:
        self.name = name
        self.reason = reason
        super().__init__(f"Invalid branch name '{name}': {reason}")


class PrefixTooShortError(UserInputError):
    """Raised when an abbreviated commit id is below the minimum length."""

    def __init__(self, prefix: str, min_length: int) -> None:
        self.prefix = prefix
        self.min_length = min_length
        super().__init__(
            f"Commit id '{prefix}' is too short (at least {min_length} characters)."
        )


# ---------------------------------------------------------------------------
# Not found
# ---------------------------------------------------------------------------


class FileNotFoundInWorkdirError(NotFoundError):
    """Raised when a file is missing from the working directory."""

    def __init__(self, file_name: str) -> None:
        self.file_name = file_name
        super().__init__("File does not exist.")


class CommitNotFoundError(NotFoundError):
    """Raised when a commit hash lookup fails."""

    def __init__(self, commit_id: str) -> None:
        self.commit_id = commit_id
        super().__init__("No commit with that id exists.")


class FileNotInCommitError(NotFoundError):
    """Raised when a file is not tracked by the commit being restored from."""

    def __init__(self, file_name: str, *, latest: bool = False) -> None:
        self.file_name = file_name
        self.latest = latest
        where = "the latest commit" if latest else "that commit"
        super().__init__(f"File does not exist in {where}.")


class BranchNotFoundError(NotFoundError):
    """Raised when a branch lookup fails."""

    def __init__(self, branch_name: str) -> None:
        self.branch_name = branch_name
        super().__init__("No such branch exists.")


class BlobNotFoundError(NotFoundError):
    """Raised when a blob hash lookup fails."""

    def __init__(self, content_hash: str) -> None:
        self.content_hash = content_hash
        super().__init__(f"Blob not found: {content_hash}")


class MessageNotFoundError(NotFoundError):
    """Raised when find() matches no commit message."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__("Found no commit with that message.")


# ---------------------------------------------------------------------------
# Conflicts
# ---------------------------------------------------------------------------


class UntrackedFileError(ConflictError):
    """Raised when a destructive checkout would clobber unsaved work."""

    def __init__(self, file_names: list[str] | None = None) -> None:
        self.file_names = file_names or []
        super().__init__(
            "There is an untracked file in the way; "
            "delete it, or add and commit it first."
        )


class AmbiguousPrefixError(ConflictError):
    """Raised when a commit hash prefix matches multiple commits."""

    def __init__(self, prefix: str, candidates: list[str]) -> None:
        self.prefix = prefix
        self.candidates = candidates
        candidate_str = ", ".join(c[:12] + "..." for c in candidates[:5])
        super().__init__(
            f"Ambiguous commit id '{prefix}'. Matches: {candidate_str}"
        )


# ---------------------------------------------------------------------------
# No-ops
# ---------------------------------------------------------------------------


class RepositoryExistsError(NoOpError):
    """Raised when init runs inside an existing repository."""

    def __init__(self, root: str) -> None:
        self.root = root
        super().__init__(
            "A snapvc version-control system already exists in the current directory."
        )


class NothingToCommitError(NoOpError):
    """Raised when a commit has no staged additions or removals."""

    def __init__(self) -> None:
        super().__init__("No changes added to the commit.")


class NoReasonToRemoveError(NoOpError):
    """Raised when rm targets a file that is neither staged nor tracked."""

    def __init__(self, file_name: str) -> None:
        self.file_name = file_name
        super().__init__("No reason to remove the file.")


class BranchExistsError(NoOpError):
    """Raised when trying to create a branch that already exists."""

    def __init__(self, branch_name: str) -> None:
        self.branch_name = branch_name
        super().__init__("A branch with that name already exists.")


class AlreadyOnBranchError(NoOpError):
    """Raised when switching to the branch that is already checked out."""

    def __init__(self, branch_name: str) -> None:
        self.branch_name = branch_name
        super().__init__("No need to switch to the current branch.")


class CurrentBranchDeletionError(NoOpError):
    """Raised when trying to delete the checked-out branch."""

    def __init__(self, branch_name: str) -> None:
        self.branch_name = branch_name
        super().__init__("Cannot remove the current branch.")
