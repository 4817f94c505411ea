"""Staging area domain model for snapvc."""

from __future__ import annotations

import enum

from pydantic import BaseModel


class StageKind(str, enum.Enum):
    """Kind of pending change held in the staging area."""

    ADD = "add"
    REMOVE = "remove"

    def __repr__(self) -> str:
        return self.value

    def __str__(self) -> str:
        return self.value


class StagedFile(BaseModel):
    """A pending addition or removal, keyed by file name."""

    file_name: str
    kind: StageKind
    content_hash: str
