"""Deterministic hashing utilities for snapvc.

Provides canonical JSON serialization and SHA-256 hashing for blobs
and commits. All hashing is deterministic: same input always produces
same output, regardless of dict key ordering.
"""

from __future__ import annotations

import hashlib
import json
from typing import Any, Mapping


def canonical_json(data: Any) -> bytes:
    """Serialize data to canonical JSON bytes.

    Uses sorted keys, compact separators, and UTF-8 encoding
    to ensure deterministic output.

    Args:
        data: Any JSON-serializable Python object (dict, list, str, int, etc.).

    Returns:
        UTF-8 encoded bytes of the canonical JSON string.
    """
    return json.dumps(
        data,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    ).encode("utf-8")


def content_hash(data: bytes) -> str:
    """Compute SHA-256 hash of raw file contents.

    Args:
        data: File contents.

    Returns:
        Hex digest of SHA-256 hash.
    """
    return hashlib.sha256(data).hexdigest()


def commit_hash(
    message: str,
    timestamp_iso: str,
    branch: str,
    parent_hash: str | None,
    files: Mapping[str, str],
    snapshot: Mapping[str, str],
) -> str:
    """Compute SHA-256 hash of structured commit data.

    The commit hash is computed from a canonical JSON dict containing
    every identity-relevant field. File mappings are emitted as sorted
    ``[name, content_hash]`` pairs so insertion order never matters.

    Args:
        message: Commit message.
        timestamp_iso: ISO 8601 timestamp string.
        branch: Label of the branch the commit was made on.
        parent_hash: Hash of parent commit, or None for root.
        files: Tracked file name -> blob hash.
        snapshot: Working-directory file name -> blob hash at commit time.

    Returns:
        Hex digest of SHA-256 hash.
    """
    data: dict[str, Any] = {
        "message": message,
        "timestamp_iso": timestamp_iso,
        "branch": branch,
        "parent_hash": parent_hash,
        "files": sorted([name, h] for name, h in files.items()),
        "snapshot": sorted([name, h] for name, h in snapshot.items()),
    }
    return hashlib.sha256(canonical_json(data)).hexdigest()
