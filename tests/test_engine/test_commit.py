"""Tests for CommitEngine and the CommitDraft sealing step."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from snapvc.engine.commit import EPOCH, CommitEngine
from snapvc.engine.hashing import content_hash
from snapvc.exceptions import BlobNotFoundError, EmptyCommitMessageError, NothingToCommitError
from snapvc.models.commit import CommitAlreadySealedError, CommitDraft


class TestCommitDraft:
    def _draft(self, **overrides) -> CommitDraft:
        fields = dict(
            message="msg",
            branch="main",
            created_at=datetime(2024, 5, 1, tzinfo=timezone.utc),
            files={"a.txt": "1" * 64},
        )
        fields.update(overrides)
        return CommitDraft(**fields)

    def test_identical_drafts_share_identity(self) -> None:
        assert self._draft().seal().commit_hash == self._draft().seal().commit_hash

    def test_seal_twice_refused(self) -> None:
        draft = self._draft()
        draft.seal()
        assert draft.sealed
        with pytest.raises(CommitAlreadySealedError):
            draft.seal()

    def test_mutation_after_seal_does_not_touch_commit(self) -> None:
        draft = self._draft()
        info = draft.seal()
        draft.files["b.txt"] = "2" * 64
        assert "b.txt" not in info.files

    def test_sealed_commit_is_frozen(self) -> None:
        info = self._draft().seal()
        with pytest.raises(ValidationError):
            info.message = "changed"  # type: ignore[misc]

    def test_sealed_trees_are_read_only(self) -> None:
        info = self._draft(snapshot={"a.txt": "1" * 64}).seal()
        with pytest.raises(TypeError):
            info.files["b.txt"] = "2" * 64  # type: ignore[index]
        with pytest.raises(TypeError):
            info.snapshot["b.txt"] = "2" * 64  # type: ignore[index]
        assert info.files == {"a.txt": "1" * 64}


class TestBlobs:
    def test_store_and_read(self, commit_engine: CommitEngine) -> None:
        c_hash = commit_engine.store_blob(b"hello")
        assert c_hash == content_hash(b"hello")
        assert commit_engine.read_blob(c_hash) == b"hello"

    def test_store_deduplicates(self, commit_engine: CommitEngine, blob_repo) -> None:
        first = commit_engine.store_blob(b"same")
        second = commit_engine.store_blob(b"same")
        assert first == second
        assert blob_repo.get(first).byte_size == 4

    def test_missing_blob(self, commit_engine: CommitEngine) -> None:
        with pytest.raises(BlobNotFoundError):
            commit_engine.read_blob("0" * 64)

    def test_snapshot_records_every_file(self, commit_engine: CommitEngine, worktree) -> None:
        worktree.write("a.txt", b"A")
        worktree.write("b.txt", b"B")
        snap = commit_engine.snapshot(worktree)
        assert snap == {"a.txt": content_hash(b"A"), "b.txt": content_hash(b"B")}


class TestInitialCommit:
    def test_root_commit(self, commit_engine: CommitEngine, ref_repo, initialized) -> None:
        assert initialized.parent_hash is None
        assert initialized.files == {}
        assert initialized.created_at == EPOCH
        assert ref_repo.get_current_branch() == "main"
        assert ref_repo.get_head() == initialized.commit_hash

    def test_root_commit_is_deterministic(self, commit_engine: CommitEngine) -> None:
        """Two empty repositories share the same root commit id."""
        expected = CommitDraft(message="initial commit", branch="main", created_at=EPOCH).seal()
        info = commit_engine.create_initial_commit("initial commit", "main", {})
        assert info.commit_hash == expected.commit_hash


class TestCreateCommit:
    def test_inherits_parent_files(self, commit_engine: CommitEngine, initialized) -> None:
        a = commit_engine.store_blob(b"A")
        b = commit_engine.store_blob(b"B")
        first = commit_engine.create_commit("one", {"a.txt": a}, [], {"a.txt": a})
        second = commit_engine.create_commit("two", {"b.txt": b}, [], {"a.txt": a, "b.txt": b})
        assert first.parent_hash == initialized.commit_hash
        assert second.parent_hash == first.commit_hash
        assert second.files == {"a.txt": a, "b.txt": b}

    def test_removal_drops_file(self, commit_engine: CommitEngine, initialized) -> None:
        a = commit_engine.store_blob(b"A")
        commit_engine.create_commit("one", {"a.txt": a}, [], {"a.txt": a})
        info = commit_engine.create_commit("two", {}, ["a.txt"], {})
        assert info.files == {}

    def test_advances_branch(self, commit_engine: CommitEngine, ref_repo, initialized) -> None:
        a = commit_engine.store_blob(b"A")
        info = commit_engine.create_commit("one", {"a.txt": a}, [], {})
        assert ref_repo.get_branch("main") == info.commit_hash
        assert info.branch == "main"

    def test_round_trip_through_store(self, commit_engine: CommitEngine, initialized) -> None:
        a = commit_engine.store_blob(b"A")
        info = commit_engine.create_commit("one", {"a.txt": a}, [], {"a.txt": a, "x": a})
        loaded = commit_engine.get(info.commit_hash)
        assert loaded == info

    @pytest.mark.parametrize("message", ["", "   "])
    def test_blank_message(self, commit_engine: CommitEngine, initialized, message: str) -> None:
        a = commit_engine.store_blob(b"A")
        with pytest.raises(EmptyCommitMessageError, match="Please enter a commit message"):
            commit_engine.create_commit(message, {"a.txt": a}, [], {})

    def test_nothing_staged(self, commit_engine: CommitEngine, initialized) -> None:
        with pytest.raises(NothingToCommitError, match="No changes added"):
            commit_engine.create_commit("msg", {}, [], {})

    def test_get_unknown(self, commit_engine: CommitEngine) -> None:
        assert commit_engine.get("f" * 64) is None
