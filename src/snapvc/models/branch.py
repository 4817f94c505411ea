"""Branch domain model for snapvc.

BranchInfo is the SDK-facing model returned when listing branches.
"""

from __future__ import annotations

from pydantic import BaseModel


class BranchInfo(BaseModel):
    """SDK-facing branch information model.

    Returned by Repository.list_branches() and status().
    """

    name: str
    commit_hash: str
    is_current: bool = False
