"""
Centralized error handling for the application.
"""

from typing import Dict, Any
import json

from youtube2txt.config import config
from youtube2txt.utils.helpers import truncate_text
from youtube2txt.utils.logger import logging

TOOL_ERROR_LIMIT = 200


class ConfigurationError(Exception):
    """Settings that would leave the service unable to work safely."""


class TranscriptError(Exception):
    """Base error for failures that are reported back to the caller."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidRequestError(TranscriptError):
    """Malformed video id or language string."""

    status_code = 400


class ExtractorUnavailableError(TranscriptError):
    """The yt-dlp executable could not be resolved or started."""


class ExtractionError(TranscriptError):
    """yt-dlp exited with a failure or timed out."""


class NoTranscriptFoundError(TranscriptError):
    """yt-dlp succeeded but wrote no subtitle files."""


class NoReadableTranscriptError(TranscriptError):
    """Subtitle files were written but none of them could be parsed."""


def summarize_tool_error(stderr: str, limit: int = TOOL_ERROR_LIMIT) -> str:
    """
    Reduce a tool's diagnostic output to a short, user-facing message.

    The first line following the ``ERROR:`` convention is preferred; otherwise
    the whole output is used.

    Args:
        stderr: Raw diagnostic output of the process
        limit: Maximum number of characters to keep

    Returns:
        The truncated detail, or an empty string when there is none
    """
    lines = [line.strip() for line in (stderr or "").splitlines()]
    error_line = next((line for line in lines if line.startswith("ERROR:")), None)
    if error_line is not None:
        detail = error_line[len("ERROR:"):].strip()
    else:
        detail = (stderr or "").strip()
    return detail[:limit]


def extraction_failure(stderr: str) -> ExtractionError:
    """Build the error raised when yt-dlp exits with a non-zero code."""
    detail = summarize_tool_error(stderr)
    message = "Subtitle download failed."
    if detail:
        message = f"{message} {detail}"
    return ExtractionError(message)


def log_diagnostic_info(context: Dict[str, Any]):
    """
    Log diagnostic information for debugging.

    Args:
        context: Dictionary of diagnostic information
    """
    if not config.DEBUG:
        return

    try:
        logging.info(f"Diagnostic info: {truncate_text(json.dumps(context, default=str), 2000)}")
    except (TypeError, ValueError) as e:
        logging.error(f"Error logging diagnostic info: {str(e)}")
