"""
Transcript pipeline: metadata, language choice, yt-dlp, candidate selection, cleanup.
"""

import asyncio
from pathlib import Path
from typing import Dict, Any, List, Optional

import httpx

from youtube2txt.config import config
from youtube2txt.core.candidates import select_transcript
from youtube2txt.core.extractor import SubtitleExtractor, resolve_ytdlp_path
from youtube2txt.core.janitor import cleanup
from youtube2txt.core.languages import build_language_options, resolve_language_preference
from youtube2txt.core.metadata import fetch_video_metadata
from youtube2txt.models.schemas import (
    ExtractorSettings,
    InvocationHandle,
    LanguageOption,
    SubtitleCue,
)
from youtube2txt.utils.error_handling import ConfigurationError, InvalidRequestError, log_diagnostic_info
from youtube2txt.utils.filesystem import Filesystem, LocalFilesystem
from youtube2txt.utils.helpers import is_valid_lang, is_valid_video_id
from youtube2txt.utils.logger import logging


def build_extractor_settings(cfg=config) -> ExtractorSettings:
    """
    Resolve the runtime settings once; the result is shared by every request.

    Raises:
        ConfigurationError: the work directory lies outside the application
            root, where cleanup would refuse to delete anything
    """
    root_dir = Path(cfg.BASE_DIR)
    work_dir = Path(cfg.WORK_DIR)
    try:
        work_dir.resolve().relative_to(root_dir.resolve())
    except ValueError:
        logging.error(f"WORK_DIR {work_dir} is outside the application root {root_dir}")
        raise ConfigurationError(f"WORK_DIR must be inside {root_dir}, got {work_dir}")

    return ExtractorSettings(
        ytdlp_path=resolve_ytdlp_path(cfg.YTDLP_PATH, root_dir),
        root_dir=root_dir,
        work_dir=work_dir,
        cookies_path=Path(cfg.YTDLP_COOKIES).resolve() if cfg.YTDLP_COOKIES else None,
        js_runtime=cfg.YTDLP_JS_RUNTIMES or None,
        timeout_seconds=cfg.EXTRACTION_TIMEOUT,
        metadata_timeout=cfg.METADATA_TIMEOUT,
        user_agent=cfg.USER_AGENT,
        default_languages=cfg.DEFAULT_SUBTITLE_LANGUAGES,
        subtitle_format=cfg.SUBTITLE_FORMAT,
    )


def validate_request(video_id: Optional[str], lang: Optional[str] = None) -> None:
    """
    Reject malformed input before any work is done.

    Raises:
        InvalidRequestError: missing or malformed video id or language
    """
    if not video_id:
        raise InvalidRequestError("Missing videoId")
    if not is_valid_video_id(video_id):
        raise InvalidRequestError("Invalid videoId format")
    if lang and not is_valid_lang(lang):
        raise InvalidRequestError("Invalid lang format")


class TranscriptService:
    """Fetches transcripts and language lists for YouTube videos."""

    def __init__(
        self,
        settings: ExtractorSettings,
        fs: Optional[Filesystem] = None,
        extractor: Optional[SubtitleExtractor] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.settings = settings
        self.fs = fs or LocalFilesystem()
        self.extractor = extractor or SubtitleExtractor(settings)
        self.http_client = http_client

    async def get_transcript(self, video_id: str, lang: Optional[str] = None) -> Dict[str, Any]:
        """
        Fetch the transcript of a video.

        Args:
            video_id: 11 character YouTube video id
            lang: Optional language override ("auto" means none)

        Returns:
            ``{"title": str, "segments": [SubtitleCue, ...]}``
        """
        lang = (lang or "").strip() or None
        validate_request(video_id, lang)
        logging.info(f"Fetching transcript for: {video_id}")

        metadata = await fetch_video_metadata(video_id, self.settings, self.http_client)
        language = resolve_language_preference(lang, metadata, self.settings.default_languages)
        if language != lang and metadata.caption_language:
            logging.info(f"Auto-selected subtitle language: {language}")

        segments = await self.extract_segments(video_id, language)
        return {"title": metadata.title, "segments": segments}

    async def extract_segments(self, video_id: str, language: str) -> List[SubtitleCue]:
        """
        Run yt-dlp under a fresh InvocationHandle and parse the best output.

        Temporary files are removed whether extraction succeeds, fails or is cancelled.
        """
        handle = InvocationHandle.create(video_id, self.settings.work_dir)
        try:
            await self.extractor.run(handle, language)
            selected = await asyncio.to_thread(select_transcript, self.fs, handle)
            log_diagnostic_info({
                "video_id": video_id,
                "language": language,
                "file": selected.file_name,
                "cues": len(selected.cues),
            })
            return selected.cues
        finally:
            await asyncio.to_thread(cleanup, self.fs, handle, self.settings.root_dir)

    async def get_languages(self, video_id: str) -> Dict[str, Any]:
        """
        List the caption languages of a video without running yt-dlp.

        Returns:
            ``{"default_lang": str, "languages": [LanguageOption, ...]}``
        """
        validate_request(video_id)
        metadata = await fetch_video_metadata(video_id, self.settings, self.http_client)
        languages: List[LanguageOption] = build_language_options(metadata.caption_tracks)
        return {
            "default_lang": metadata.caption_language or "",
            "languages": languages,
        }
