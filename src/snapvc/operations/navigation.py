"""Commit-id resolution for snapvc.

Turns a full commit hash or an abbreviation into the full hash of a
stored commit.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from snapvc.exceptions import CommitNotFoundError, PrefixTooShortError

if TYPE_CHECKING:
    from snapvc.storage.repositories import CommitRepository

FULL_HASH_LENGTH = 64
_HEX_ID = re.compile(r"[0-9a-f]+")


def resolve_commit(
    commit_id: str,
    commit_repo: CommitRepository,
    *,
    min_prefix_length: int = 6,
) -> str:
    """Resolve a commit id to a full commit hash.

    Resolution order:
    1. Full commit hash (exact match)
    2. Hash prefix of at least *min_prefix_length* characters, which
       must match exactly one stored commit

    Args:
        commit_id: A commit hash or hash prefix.
        commit_repo: Commit repository for hash lookups.
        min_prefix_length: Shortest abbreviation accepted.

    Returns:
        The full commit hash.

    Raises:
        CommitNotFoundError: If no commit matches.
        AmbiguousPrefixError: If a prefix matches multiple commits.
        PrefixTooShortError: If the abbreviation is too short.
    """
    commit_id = commit_id.strip().lower()
    if not _HEX_ID.fullmatch(commit_id):
        raise CommitNotFoundError(commit_id)

    if len(commit_id) == FULL_HASH_LENGTH:
        row = commit_repo.get(commit_id)
        if row is None:
            raise CommitNotFoundError(commit_id)
        return row.commit_hash

    if len(commit_id) < min_prefix_length:
        raise PrefixTooShortError(commit_id, min_prefix_length)

    row = commit_repo.get_by_prefix(commit_id)
    if row is None:
        raise CommitNotFoundError(commit_id)
    return row.commit_hash
