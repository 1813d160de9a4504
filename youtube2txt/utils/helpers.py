"""
Helper utility functions for the youtube2txt application.
"""

import json
import re
from typing import Any, Dict, List, Optional

VIDEO_ID_PATTERN = re.compile(r"^[a-zA-Z0-9_-]{11}$")
LANG_PATTERN = re.compile(r"^[a-zA-Z0-9,-]+$")


def is_valid_video_id(video_id: Optional[str]) -> bool:
    """Check that a video id is exactly 11 characters of [A-Za-z0-9_-]."""
    return bool(video_id) and VIDEO_ID_PATTERN.match(video_id) is not None


def is_valid_lang(lang: Optional[str]) -> bool:
    """Check that a language specifier only holds letters, digits, commas and hyphens."""
    return bool(lang) and LANG_PATTERN.match(lang) is not None


def extract_video_id(url: str) -> Optional[str]:
    """Extract the video ID from a YouTube URL or a bare ID."""
    url = (url or "").strip()
    if is_valid_video_id(url):
        return url

    # YouTube URL patterns
    patterns = [
        r"(?:v=|\/)([0-9A-Za-z_-]{11}).*",
        r"(?:embed\/)([0-9A-Za-z_-]{11})",
        r"(?:watch\?v=)([0-9A-Za-z_-]{11})",
    ]

    for pattern in patterns:
        match = re.search(pattern, url)
        if match:
            return match.group(1)

    return None


def save_json(data: Any, filepath: str, pretty: bool = True) -> None:
    """
    Save data to a JSON file.

    Args:
        data: Data to save
        filepath: Path to save the file
        pretty: Whether to format the JSON for readability
    """
    with open(filepath, 'w', encoding='utf-8') as f:
        if pretty:
            json.dump(data, f, indent=2, ensure_ascii=False)
        else:
            json.dump(data, f, ensure_ascii=False)


def segments_to_text(segments: List[Dict[str, Any]]) -> str:
    """Join transcript segments into one line per cue."""
    return "\n".join(segment["text"] for segment in segments if segment.get("text"))


def truncate_text(text: str, max_length: int = 100, suffix: str = "...") -> str:
    """
    Truncate text to a maximum length.

    Args:
        text: Text to truncate
        max_length: Maximum length
        suffix: Suffix to add if truncated

    Returns:
        Truncated text
    """
    if len(text) <= max_length:
        return text
    return text[:max_length - len(suffix)] + suffix
