"""Tests for deterministic hashing utilities.

Tests canonical JSON serialization, content hashing, and commit hashing.
Includes property-based tests via Hypothesis.
"""

from __future__ import annotations

import hashlib
import json

from hypothesis import given
from hypothesis import strategies as st

from snapvc.engine.hashing import canonical_json, commit_hash, content_hash

file_names = st.text(
    min_size=1,
    max_size=20,
    alphabet=st.characters(whitelist_categories=("L", "N")),
)
file_maps = st.dictionaries(file_names, st.text(alphabet="0123456789abcdef", min_size=64, max_size=64))


class TestCanonicalJson:
    """Tests for canonical_json serialization."""

    def test_sorted_keys(self) -> None:
        data = {"z": 1, "a": 2, "m": 3}
        result = json.loads(canonical_json(data))
        assert list(result.keys()) == ["a", "m", "z"]

    def test_compact_separators(self) -> None:
        assert canonical_json({"a": 1, "b": 2}) == b'{"a":1,"b":2}'

    def test_non_ascii_preserved(self) -> None:
        """ensure_ascii=False keeps the raw UTF-8 bytes."""
        assert "héllo".encode("utf-8") in canonical_json({"text": "héllo"})

    def test_returns_bytes(self) -> None:
        assert isinstance(canonical_json({"a": 1}), bytes)


class TestContentHash:
    """Tests for content_hash on raw file bytes."""

    def test_matches_sha256(self) -> None:
        assert content_hash(b"hello") == hashlib.sha256(b"hello").hexdigest()

    def test_hex_length(self) -> None:
        assert len(content_hash(b"")) == 64

    def test_different_content_differs(self) -> None:
        assert content_hash(b"hello") != content_hash(b"bye")

    @given(st.binary())
    def test_deterministic(self, data: bytes) -> None:
        assert content_hash(data) == content_hash(bytes(data))


class TestCommitHash:
    """Tests for commit_hash over the frozen commit fields."""

    BASE = dict(
        message="add f",
        timestamp_iso="2024-01-01T12:00:00+00:00",
        branch="main",
        parent_hash=None,
        files={"f.txt": "a" * 64},
        snapshot={"f.txt": "a" * 64},
    )

    def test_same_fields_same_hash(self) -> None:
        assert commit_hash(**self.BASE) == commit_hash(**self.BASE)

    def test_message_changes_hash(self) -> None:
        other = {**self.BASE, "message": "other"}
        assert commit_hash(**self.BASE) != commit_hash(**other)

    def test_timestamp_changes_hash(self) -> None:
        other = {**self.BASE, "timestamp_iso": "2024-01-01T12:00:01+00:00"}
        assert commit_hash(**self.BASE) != commit_hash(**other)

    def test_parent_changes_hash(self) -> None:
        other = {**self.BASE, "parent_hash": "b" * 64}
        assert commit_hash(**self.BASE) != commit_hash(**other)

    def test_tracked_and_snapshot_are_distinct_fields(self) -> None:
        """Moving an entry from tracked to snapshot-only changes identity."""
        other = {**self.BASE, "files": {}}
        assert commit_hash(**self.BASE) != commit_hash(**other)

    @given(files=file_maps, snapshot=file_maps)
    def test_insertion_order_irrelevant(self, files: dict, snapshot: dict) -> None:
        reversed_files = dict(reversed(list(files.items())))
        reversed_snapshot = dict(reversed(list(snapshot.items())))
        base = {**self.BASE, "files": files, "snapshot": snapshot}
        flipped = {**self.BASE, "files": reversed_files, "snapshot": reversed_snapshot}
        assert commit_hash(**base) == commit_hash(**flipped)
