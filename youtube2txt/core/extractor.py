"""
Drive yt-dlp to write subtitle files for one invocation.
"""

import asyncio
import os
import shutil
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from youtube2txt.models.schemas import ExtractorSettings, InvocationHandle
from youtube2txt.utils.error_handling import (
    ExtractionError,
    ExtractorUnavailableError,
    extraction_failure,
)
from youtube2txt.utils.logger import logging

WATCH_URL = "https://www.youtube.com/watch?v={video_id}"
YTDLP_BASENAME = "yt-dlp.exe" if sys.platform == "win32" else "yt-dlp"


def resolve_ytdlp_path(configured: Optional[str], root_dir: Path) -> Optional[str]:
    """
    Locate the yt-dlp executable.

    Order: the configured path, a binary next to the application, then PATH.
    """
    if configured and os.path.exists(configured):
        logging.info(f"Using yt-dlp from YTDLP_PATH: {configured}")
        return configured
    if configured:
        logging.warning(f"YTDLP_PATH does not exist: {configured}")

    local = Path(root_dir) / YTDLP_BASENAME
    if local.exists():
        logging.info(f"Using yt-dlp next to the application: {local}")
        return str(local)

    on_path = shutil.which("yt-dlp")
    if on_path:
        logging.info(f"Using yt-dlp from PATH: {on_path}")
        return on_path

    logging.error("yt-dlp executable not found; transcript requests will fail")
    return None


class SubtitleExtractor:
    """Runs yt-dlp with an output template owned by an InvocationHandle."""

    def __init__(self, settings: ExtractorSettings):
        """
        Initialize the extractor.

        Args:
            settings: Startup configuration holding the resolved yt-dlp path
        """
        self.settings = settings

    def build_args(self, handle: InvocationHandle, language: str) -> List[str]:
        """
        Build the yt-dlp argument list.

        Args:
            handle: Invocation whose prefix names every output file
            language: yt-dlp ``--sub-lang`` value, possibly a comma list

        Returns:
            Arguments, without the executable
        """
        args = [
            "--skip-download",
            "--write-subs",
            "--write-auto-subs",
            "--sub-lang", language,
            "--sub-format", self.settings.subtitle_format,
        ]
        if self.settings.js_runtime:
            args += ["--js-runtimes", self.settings.js_runtime]

        cookies = self.settings.cookies_path
        if cookies:
            if cookies.exists():
                args += ["--cookies", str(cookies)]
            else:
                logging.warning(f"YTDLP_COOKIES file not found: {cookies}")

        args += ["--output", str(handle.base_path), WATCH_URL.format(video_id=handle.video_id)]
        return args

    async def _execute(self, args: List[str]) -> Tuple[int, str, str]:
        try:
            process = await asyncio.create_subprocess_exec(
                self.settings.ytdlp_path,
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            logging.error(f"Could not start yt-dlp at {self.settings.ytdlp_path}: {str(e)}")
            raise ExtractorUnavailableError("yt-dlp is not available.") from e

        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(), timeout=self.settings.timeout_seconds
            )
        except asyncio.TimeoutError as e:
            await self._kill(process)
            raise ExtractionError("Subtitle download timed out.") from e
        except asyncio.CancelledError:
            await self._kill(process)
            raise

        return (
            process.returncode,
            stdout.decode("utf-8", errors="replace"),
            stderr.decode("utf-8", errors="replace"),
        )

    @staticmethod
    async def _kill(process: asyncio.subprocess.Process) -> None:
        if process.returncode is not None:
            return
        try:
            process.kill()
        except ProcessLookupError:
            return
        await process.wait()

    async def run(self, handle: InvocationHandle, language: str) -> None:
        """
        Write subtitle files named ``<prefix>.<lang>.vtt`` into the handle's directory.

        Raises:
            ExtractorUnavailableError: yt-dlp could not be resolved or started
            ExtractionError: yt-dlp exited non-zero or timed out
        """
        if not self.settings.ytdlp_path:
            raise ExtractorUnavailableError("yt-dlp is not available.")

        args = self.build_args(handle, language)
        logging.info(f"Running yt-dlp for {handle.video_id} with languages {language}")
        logging.debug(f"yt-dlp args: {args}")

        returncode, _, stderr = await self._execute(args)
        if returncode != 0:
            logging.error(f"[yt-dlp] Error: {stderr}")
            raise extraction_failure(stderr)
