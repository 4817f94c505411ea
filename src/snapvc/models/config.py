"""Configuration models for snapvc.

RepoConfig holds per-repository settings.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field


class RepoConfig(BaseModel):
    """Per-repository configuration."""

    control_dir: str = ".snapvc"
    db_name: str = "snapvc.db"
    default_branch: str = "main"
    initial_message: str = "initial commit"
    min_prefix_length: int = Field(default=6, ge=1)

    def control_path(self, root: str | Path) -> Path:
        """Path of the control directory under *root*."""
        return Path(root) / self.control_dir

    def db_path(self, root: str | Path) -> Path:
        """Path of the SQLite database under *root*."""
        return self.control_path(root) / self.db_name
