"""
Configuration for pytest tests.
"""

import os
from pathlib import Path
from typing import Dict, List

import pytest

os.environ.setdefault("ENVIRONMENT", "development")

from youtube2txt.models.schemas import ExtractorSettings, InvocationHandle


SAMPLE_VTT = """WEBVTT
Kind: captions
Language: en

00:00:00.000 --> 00:00:02.000
Hello <c>world</c>

00:00:02.500 --> 00:00:04.000
Line 1
Line 2
"""


class FakeFilesystem:
    """In-memory filesystem keyed by directory, for scanner and janitor tests."""

    def __init__(self, files: Dict[str, str] = None, root: Path = Path("/app")):
        self.root = root
        self.files = dict(files or {})
        self.deleted: List[str] = []
        self.fail_delete = set()
        self.fail_read = set()
        self.links: Dict[Path, Path] = {}

    def list_dir(self, directory: Path) -> List[str]:
        return list(self.files)

    def read_text(self, path: Path) -> str:
        name = Path(path).name
        if name in self.fail_read:
            raise UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte")
        if name not in self.files:
            raise FileNotFoundError(name)
        return self.files[name]

    def delete(self, path: Path) -> None:
        name = Path(path).name
        if name in self.fail_delete:
            raise PermissionError(name)
        if name not in self.files:
            raise FileNotFoundError(name)
        del self.files[name]
        self.deleted.append(name)

    def realpath(self, path: Path) -> Path:
        return self.links.get(Path(path), Path(path))


@pytest.fixture
def settings(tmp_path):
    """Extractor settings rooted in a temporary directory."""
    return ExtractorSettings(
        ytdlp_path="/usr/local/bin/yt-dlp",
        root_dir=tmp_path,
        work_dir=tmp_path,
        user_agent="Mozilla/5.0 (test)",
        timeout_seconds=5,
        metadata_timeout=5,
    )


@pytest.fixture
def handle(tmp_path):
    """A handle with a fixed, well-formed prefix."""
    return InvocationHandle(
        video_id="dQw4w9WgXcQ",
        directory=tmp_path,
        prefix="temp_dQw4w9WgXcQ_1700000000000_abc123",
    )


@pytest.fixture
def sample_vtt():
    """Return a small WebVTT document with two cues."""
    return SAMPLE_VTT


@pytest.fixture
def make_fs():
    """Factory for in-memory filesystems."""
    return FakeFilesystem
