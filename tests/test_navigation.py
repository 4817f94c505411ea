"""Tests for commit-id resolution."""

from __future__ import annotations

import pytest

from snapvc.exceptions import AmbiguousPrefixError, CommitNotFoundError, PrefixTooShortError
from snapvc.models.config import RepoConfig
from snapvc.operations.navigation import resolve_commit
from tests.conftest import commit_files, make_repo


class TestResolveCommit:
    def test_full_hash(self, commit_repo, initialized) -> None:
        assert resolve_commit(initialized.commit_hash, commit_repo) == initialized.commit_hash

    def test_full_hash_is_case_insensitive(self, commit_repo, initialized) -> None:
        resolved = resolve_commit(initialized.commit_hash.upper(), commit_repo)
        assert resolved == initialized.commit_hash

    def test_unknown_full_hash(self, commit_repo, initialized) -> None:
        with pytest.raises(CommitNotFoundError, match="No commit with that id exists"):
            resolve_commit("0" * 64, commit_repo)

    def test_unique_prefix(self, commit_repo, initialized) -> None:
        prefix = initialized.commit_hash[:8]
        assert resolve_commit(prefix, commit_repo) == initialized.commit_hash

    def test_prefix_with_whitespace(self, commit_repo, initialized) -> None:
        prefix = f"  {initialized.commit_hash[:10]} "
        assert resolve_commit(prefix, commit_repo) == initialized.commit_hash

    def test_unknown_prefix(self, commit_repo, initialized) -> None:
        missing = "0" * 8 if not initialized.commit_hash.startswith("0" * 8) else "f" * 8
        with pytest.raises(CommitNotFoundError):
            resolve_commit(missing, commit_repo)

    def test_prefix_too_short(self, commit_repo, initialized) -> None:
        with pytest.raises(PrefixTooShortError):
            resolve_commit(initialized.commit_hash[:5], commit_repo)

    @pytest.mark.parametrize("commit_id", ["______", "%%%%%%", "abc_ef", "ghijkl"])
    def test_non_hex_id_matches_nothing(self, commit_repo, initialized, commit_id: str) -> None:
        with pytest.raises(CommitNotFoundError, match="No commit with that id exists"):
            resolve_commit(commit_id, commit_repo)

    def test_configurable_minimum(self, commit_repo, initialized) -> None:
        prefix = initialized.commit_hash[:3]
        assert resolve_commit(prefix, commit_repo, min_prefix_length=3) == initialized.commit_hash


class TestAmbiguousPrefix:
    def test_ambiguous_prefix_rejected(self) -> None:
        """Seventeen commits must share a first hex digit somewhere."""
        repo = make_repo(config=RepoConfig(min_prefix_length=1))
        by_digit: dict[str, str] = {}
        shared = None
        for i in range(17):
            c_hash = commit_files(repo, f"c{i}", {"f.txt": str(i).encode()})
            if c_hash[0] in by_digit:
                shared = c_hash[0]
                break
            by_digit[c_hash[0]] = c_hash
        assert shared is not None

        with pytest.raises(AmbiguousPrefixError, match="Ambiguous commit id") as exc_info:
            repo.resolve_commit(shared)
        assert len(exc_info.value.candidates) >= 2
        repo.close()


class TestWildcardIds:
    def test_underscores_do_not_select_root(self) -> None:
        repo = make_repo()
        with pytest.raises(CommitNotFoundError):
            repo.show("______")
        repo.close()

    def test_percent_signs_are_not_ambiguous(self) -> None:
        repo = make_repo()
        commit_files(repo, "add f", {"f.txt": b"hello"})
        repo.worktree.write("f.txt", b"local")
        with pytest.raises(CommitNotFoundError):
            repo.restore("f.txt", "%%%%%%")
        assert repo.worktree.read("f.txt") == b"local"
        repo.close()

    def test_wildcard_reset_leaves_branch(self) -> None:
        repo = make_repo()
        head = commit_files(repo, "add f", {"f.txt": b"hello"})
        with pytest.raises(CommitNotFoundError):
            repo.reset("______")
        assert repo.head == head
        repo.close()
