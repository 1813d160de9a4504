"""
Thin filesystem seam used by the candidate scanner and the janitor.
"""

import os
from pathlib import Path
from typing import List, Protocol


class Filesystem(Protocol):
    """The file operations the subtitle pipeline needs."""

    def list_dir(self, directory: Path) -> List[str]:
        ...

    def read_text(self, path: Path) -> str:
        ...

    def delete(self, path: Path) -> None:
        ...

    def realpath(self, path: Path) -> Path:
        ...


class LocalFilesystem:
    """Filesystem backed by the real disk."""

    def list_dir(self, directory: Path) -> List[str]:
        return os.listdir(directory)

    def read_text(self, path: Path) -> str:
        with open(path, "r", encoding="utf-8") as f:
            return f.read()

    def delete(self, path: Path) -> None:
        os.unlink(path)

    def realpath(self, path: Path) -> Path:
        # strict: a missing directory is an error, not a guess
        return Path(path).resolve(strict=True)
