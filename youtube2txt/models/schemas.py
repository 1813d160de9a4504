"""
Data models for the youtube2txt application.
"""
import re
import secrets
import string
import time
from pathlib import Path
from typing import Optional, List, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator

HANDLE_PREFIX_PATTERN = re.compile(r"^temp_[A-Za-z0-9_-]{11}_[0-9]+_[a-z0-9]{6}$")
HANDLE_SUFFIX_ALPHABET = string.ascii_lowercase + string.digits
HANDLE_SUFFIX_LENGTH = 6


class CaptionTrack(BaseModel):
    """One caption track advertised on the watch page."""
    code: str
    name: Optional[str] = None
    is_auto: bool = False

    model_config = ConfigDict(frozen=True)


class VideoMetadata(BaseModel):
    """Title and caption information resolved from the watch page."""
    title: str
    caption_language: Optional[str] = None
    caption_tracks: List[CaptionTrack] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class LanguageOption(BaseModel):
    """A selectable transcript language."""
    code: str
    name: str
    is_auto: bool = False


class SubtitleCue(BaseModel):
    """One timed text unit of a parsed transcript."""
    text: str
    start: Optional[Union[float, str]] = None
    end: Optional[str] = None
    duration: Optional[float] = None


class SubtitleCandidate(BaseModel):
    """A parsed subtitle file and its score."""
    file_name: str
    cues: List[SubtitleCue]
    text_length: int


class InvocationHandle(BaseModel):
    """Token that owns every temporary file of one yt-dlp invocation."""
    video_id: str
    directory: Path
    prefix: str

    model_config = ConfigDict(frozen=True)

    @classmethod
    def create(cls, video_id: str, directory: Path) -> "InvocationHandle":
        """Create a handle whose prefix is unique across concurrent requests."""
        suffix = "".join(secrets.choice(HANDLE_SUFFIX_ALPHABET) for _ in range(HANDLE_SUFFIX_LENGTH))
        millis = int(time.time() * 1000)
        return cls(
            video_id=video_id,
            directory=Path(directory),
            prefix=f"temp_{video_id}_{millis}_{suffix}",
        )

    @property
    def base_path(self) -> Path:
        """Output template handed to yt-dlp; it appends ``.<lang>.<ext>``."""
        return self.directory / self.prefix

    def has_expected_shape(self) -> bool:
        return HANDLE_PREFIX_PATTERN.match(self.prefix) is not None

    def owns(self, file_name: str) -> bool:
        return file_name.startswith(self.prefix)


class ExtractorSettings(BaseModel):
    """Runtime configuration resolved once at startup."""
    ytdlp_path: Optional[str] = None
    root_dir: Path
    work_dir: Path
    cookies_path: Optional[Path] = None
    js_runtime: Optional[str] = None
    timeout_seconds: float = 120.0
    metadata_timeout: float = 30.0
    user_agent: str
    default_languages: str = "en,en-US,en-GB"
    subtitle_format: str = "vtt"

    model_config = ConfigDict(frozen=True)

    @field_validator("default_languages")
    def validate_default_languages(cls, v):
        if not re.match(r"^[a-zA-Z0-9,-]+$", v):
            raise ValueError("default_languages must be a comma separated list of codes")
        return v
