"""Tests for staging operations: add, rm, staged changes."""

from __future__ import annotations

import pytest

from snapvc.engine.hashing import content_hash
from snapvc.exceptions import FileNotFoundInWorkdirError, NoReasonToRemoveError
from snapvc.models.staging import StageKind
from snapvc.operations.staging import clear_staging, remove_file, stage_file, staged_changes


@pytest.fixture
def ops(commit_engine, staging_repo, known_repo, worktree, ref_repo, initialized):
    """Bound stage/remove helpers plus a committer for head updates."""

    class Ops:
        def add(self, name):
            return stage_file(
                name, ref_repo.get_head(), commit_engine, staging_repo, known_repo, worktree
            )

        def rm(self, name):
            return remove_file(name, ref_repo.get_head(), commit_engine, staging_repo, worktree)

        def commit(self, message):
            adds, removals = staged_changes(staging_repo)
            info = commit_engine.create_commit(
                message, adds, removals, commit_engine.snapshot(worktree)
            )
            clear_staging(staging_repo)
            return info

    return Ops()


class TestStageFile:
    def test_stage_new_file(self, ops, worktree, staging_repo, known_repo) -> None:
        worktree.write("f.txt", b"hello")
        staged = ops.add("f.txt")
        assert staged.kind == StageKind.ADD
        assert staged.content_hash == content_hash(b"hello")
        assert staging_repo.get("f.txt").kind == StageKind.ADD
        assert known_repo.contains("f.txt")

    def test_missing_file(self, ops) -> None:
        with pytest.raises(FileNotFoundInWorkdirError, match="File does not exist"):
            ops.add("nope.txt")

    def test_restage_replaces_content(self, ops, worktree, staging_repo) -> None:
        worktree.write("f.txt", b"v1")
        ops.add("f.txt")
        worktree.write("f.txt", b"v2")
        ops.add("f.txt")
        assert staging_repo.get("f.txt").content_hash == content_hash(b"v2")

    def test_unchanged_from_head_is_pruned(self, ops, worktree, staging_repo) -> None:
        worktree.write("f.txt", b"hello")
        ops.add("f.txt")
        ops.commit("add f")
        assert ops.add("f.txt") is None
        assert list(staging_repo.list()) == []

    def test_revert_to_head_unstages(self, ops, worktree, staging_repo) -> None:
        worktree.write("f.txt", b"hello")
        ops.add("f.txt")
        ops.commit("add f")
        worktree.write("f.txt", b"changed")
        ops.add("f.txt")
        worktree.write("f.txt", b"hello")
        assert ops.add("f.txt") is None
        assert staging_repo.get("f.txt") is None

    def test_add_after_rm_recovers_file(self, ops, worktree, staging_repo) -> None:
        worktree.write("f.txt", b"hello")
        ops.add("f.txt")
        ops.commit("add f")
        ops.rm("f.txt")
        assert not worktree.exists("f.txt")

        assert ops.add("f.txt") is None
        assert worktree.read("f.txt") == b"hello"
        assert staging_repo.get("f.txt") is None


class TestRemoveFile:
    def test_unstage_pending_addition(self, ops, worktree, staging_repo) -> None:
        worktree.write("f.txt", b"hello")
        ops.add("f.txt")
        assert ops.rm("f.txt") is None
        assert staging_repo.get("f.txt") is None
        assert worktree.exists("f.txt")

    def test_remove_tracked_file(self, ops, worktree, staging_repo) -> None:
        worktree.write("f.txt", b"hello")
        ops.add("f.txt")
        ops.commit("add f")
        removal = ops.rm("f.txt")
        assert removal.kind == StageKind.REMOVE
        assert staging_repo.get("f.txt").kind == StageKind.REMOVE
        assert not worktree.exists("f.txt")

    def test_remove_tracked_file_already_deleted(self, ops, worktree, staging_repo) -> None:
        worktree.write("f.txt", b"hello")
        ops.add("f.txt")
        ops.commit("add f")
        worktree.delete("f.txt")
        removal = ops.rm("f.txt")
        assert removal.content_hash == content_hash(b"hello")

    def test_remove_drops_pending_addition_of_tracked_file(self, ops, worktree, staging_repo) -> None:
        worktree.write("f.txt", b"hello")
        ops.add("f.txt")
        ops.commit("add f")
        worktree.write("f.txt", b"edited")
        ops.add("f.txt")
        ops.rm("f.txt")
        assert staging_repo.get("f.txt").kind == StageKind.REMOVE

    def test_no_reason_to_remove(self, ops, worktree) -> None:
        worktree.write("loose.txt", b"x")
        with pytest.raises(NoReasonToRemoveError, match="No reason to remove the file"):
            ops.rm("loose.txt")
        assert worktree.exists("loose.txt")

    def test_commit_of_removal_untracks(self, ops, worktree) -> None:
        worktree.write("f.txt", b"hello")
        ops.add("f.txt")
        ops.commit("add f")
        ops.rm("f.txt")
        info = ops.commit("drop f")
        assert "f.txt" not in info.files


class TestStagedChanges:
    def test_split_by_kind(self, ops, worktree, staging_repo) -> None:
        worktree.write("a.txt", b"A")
        worktree.write("b.txt", b"B")
        ops.add("a.txt")
        ops.add("b.txt")
        ops.commit("both")
        worktree.write("c.txt", b"C")
        ops.add("c.txt")
        ops.rm("a.txt")
        adds, removals = staged_changes(staging_repo)
        assert adds == {"c.txt": content_hash(b"C")}
        assert removals == ["a.txt"]
