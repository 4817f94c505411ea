"""Working-directory access for snapvc.

WorkingTree is the pluggable interface every operation uses to read and
rewrite the live directory. DiskWorkingTree maps it onto the plain files
of a real directory; MemoryWorkingTree keeps files in a dict so the whole
engine can run without touching the file system.

Only plain files directly under the root are visible. Sub-directories
(the control directory included) are ignored.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class WorkingTree(Protocol):
    """Protocol for the flat working directory."""

    def list_files(self) -> list[str]:
        """Sorted names of every plain file in the directory."""
        ...

    def exists(self, name: str) -> bool:
        """Whether a plain file named *name* exists."""
        ...

    def read(self, name: str) -> bytes:
        """Whole-file contents. Raises FileNotFoundError if absent."""
        ...

    def write(self, name: str, data: bytes) -> None:
        """Create or replace the file with *data*."""
        ...

    def delete(self, name: str) -> bool:
        """Delete the file. Returns True if it existed."""
        ...


class DiskWorkingTree:
    """WorkingTree backed by a real directory."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def _path(self, name: str) -> Path:
        if not name or "/" in name or "\\" in name or name in (".", ".."):
            raise ValueError(f"Not a plain file name: {name!r}")
        return self.root / name

    def list_files(self) -> list[str]:
        if not self.root.is_dir():
            return []
        return sorted(p.name for p in self.root.iterdir() if p.is_file())

    def exists(self, name: str) -> bool:
        return self._path(name).is_file()

    def read(self, name: str) -> bytes:
        path = self._path(name)
        if not path.is_file():
            raise FileNotFoundError(str(path))
        return path.read_bytes()

    def write(self, name: str, data: bytes) -> None:
        """Write through a temp file in the same directory, then replace.

        A failed write leaves the previous file (or nothing) in place,
        never a truncated one.
        """
        path = self._path(name)
        logger.debug("writing %s (%d bytes)", name, len(data))
        fd, tmp_name = tempfile.mkstemp(dir=self.root, prefix=".snapvc-", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as tmp:
                tmp.write(data)
            os.chmod(tmp_name, path.stat().st_mode & 0o777 if path.is_file() else 0o644)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def delete(self, name: str) -> bool:
        path = self._path(name)
        if not path.is_file():
            return False
        logger.debug("deleting %s", name)
        path.unlink()
        return True

    def __repr__(self) -> str:
        return f"DiskWorkingTree({str(self.root)!r})"


class MemoryWorkingTree:
    """WorkingTree held entirely in memory. Used for tests and dry runs."""

    def __init__(self, files: dict[str, bytes] | None = None) -> None:
        self._files: dict[str, bytes] = dict(files or {})

    def list_files(self) -> list[str]:
        return sorted(self._files)

    def exists(self, name: str) -> bool:
        return name in self._files

    def read(self, name: str) -> bytes:
        try:
            return self._files[name]
        except KeyError:
            raise FileNotFoundError(name) from None

    def write(self, name: str, data: bytes) -> None:
        self._files[name] = bytes(data)

    def delete(self, name: str) -> bool:
        return self._files.pop(name, None) is not None

    def as_dict(self) -> dict[str, bytes]:
        """Copy of every file, for assertions."""
        return dict(self._files)

    def __repr__(self) -> str:
        return f"MemoryWorkingTree({len(self._files)} files)"
