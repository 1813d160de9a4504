"""
Watch page metadata: title and caption tracks from ytInitialPlayerResponse.
"""

import json
import re
from typing import Any, Dict, List, Optional

import httpx

from youtube2txt.core.languages import pick_caption_language
from youtube2txt.core.subtitle_parser import decode_html_entities
from youtube2txt.models.schemas import CaptionTrack, ExtractorSettings, VideoMetadata
from youtube2txt.utils.logger import logging

WATCH_URL = "https://www.youtube.com/watch?v={video_id}"
PLAYER_RESPONSE_MARKER = "ytInitialPlayerResponse"
FALLBACK_TITLE = "YouTube Video"

HTML_TITLE = re.compile(r"<title>(.*?)</title>", re.IGNORECASE | re.DOTALL)
YOUTUBE_SUFFIX = re.compile(r"\s*-\s*YouTube\s*$", re.IGNORECASE)


def fallback_metadata() -> VideoMetadata:
    return VideoMetadata(title=FALLBACK_TITLE)


def extract_player_response(html: str) -> Optional[Dict[str, Any]]:
    """
    Cut the player response object out of the watch page and parse it.

    The object is delimited by scanning for its balanced closing brace while
    tracking string literals, so braces inside strings (and escaped quotes)
    do not end it early.
    """
    marker_index = html.find(PLAYER_RESPONSE_MARKER)
    if marker_index == -1:
        return None
    brace_start = html.find("{", marker_index)
    if brace_start == -1:
        return None

    depth = 0
    in_string = False
    escaping = False
    for i in range(brace_start, len(html)):
        char = html[i]
        if in_string:
            if escaping:
                escaping = False
            elif char == "\\":
                escaping = True
            elif char == '"':
                in_string = False
            continue

        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                try:
                    parsed = json.loads(html[brace_start:i + 1])
                except ValueError:
                    return None
                return parsed if isinstance(parsed, dict) else None
    return None


def _dig(data: Any, *keys: str) -> Any:
    for key in keys:
        if not isinstance(data, dict):
            return None
        data = data.get(key)
    return data


def get_preferred_title(player_response: Optional[Dict[str, Any]], html: str) -> Optional[str]:
    """Pick the best available title and strip the " - YouTube" suffix."""
    html_match = HTML_TITLE.search(html or "")
    candidates = [
        _dig(player_response, "videoDetails", "title"),
        _dig(player_response, "microformat", "playerMicroformatRenderer", "title", "simpleText"),
        decode_html_entities(html_match.group(1)) if html_match else None,
    ]
    for candidate in candidates:
        if isinstance(candidate, str) and candidate.strip():
            return YOUTUBE_SUFFIX.sub("", candidate.strip())
    return None


def get_raw_caption_tracks(player_response: Optional[Dict[str, Any]]) -> List[Dict[str, Any]]:
    tracks = _dig(player_response, "captions", "playerCaptionsTracklistRenderer", "captionTracks")
    return tracks if isinstance(tracks, list) else []


def extract_caption_name(name: Optional[Dict[str, Any]]) -> Optional[str]:
    if not isinstance(name, dict):
        return None
    if isinstance(name.get("simpleText"), str):
        return name["simpleText"].strip()
    if isinstance(name.get("runs"), list):
        texts = [run.get("text") for run in name["runs"] if isinstance(run, dict)]
        return "".join(text for text in texts if isinstance(text, str)).strip()
    return None


def extract_caption_tracks(raw_tracks: List[Dict[str, Any]]) -> List[CaptionTrack]:
    """Tracks without a string language code are dropped."""
    return [
        CaptionTrack(
            code=track["languageCode"],
            name=extract_caption_name(track.get("name")),
            is_auto=track.get("kind") == "asr",
        )
        for track in raw_tracks
        if isinstance(track, dict) and isinstance(track.get("languageCode"), str) and track["languageCode"]
    ]


def parse_watch_page(html: str) -> VideoMetadata:
    """Build VideoMetadata from a watch page body."""
    player_response = extract_player_response(html)
    raw_tracks = get_raw_caption_tracks(player_response)
    return VideoMetadata(
        title=get_preferred_title(player_response, html) or FALLBACK_TITLE,
        caption_language=pick_caption_language(player_response, raw_tracks),
        caption_tracks=extract_caption_tracks(raw_tracks),
    )


async def fetch_video_metadata(
    video_id: str,
    settings: ExtractorSettings,
    client: Optional[httpx.AsyncClient] = None,
) -> VideoMetadata:
    """
    Fetch the watch page and resolve its metadata.

    Metadata only enriches the response, so every failure (network error,
    timeout, non-2xx status, malformed player response) yields the fallback
    instead of raising.
    """
    url = WATCH_URL.format(video_id=video_id)
    headers = {"User-Agent": settings.user_agent}

    try:
        if client is None:
            async with httpx.AsyncClient(
                timeout=httpx.Timeout(settings.metadata_timeout),
                follow_redirects=True,
            ) as own_client:
                response = await own_client.get(url, headers=headers)
        else:
            response = await client.get(url, headers=headers, timeout=settings.metadata_timeout)
    except httpx.TimeoutException:
        logging.warning(f"Metadata request timed out for video {video_id}")
        return fallback_metadata()
    except httpx.HTTPError as e:
        logging.warning(f"Metadata request failed for video {video_id}: {str(e)}")
        return fallback_metadata()

    if not response.is_success:
        logging.warning(f"Metadata request for video {video_id} returned status {response.status_code}")
        return fallback_metadata()

    try:
        metadata = parse_watch_page(response.text)
    except (AttributeError, TypeError, ValueError) as e:
        logging.warning(f"Could not parse watch page for video {video_id}: {str(e)}")
        return fallback_metadata()
    logging.debug(
        f"Resolved metadata for {video_id}: title={metadata.title!r}, "
        f"caption_language={metadata.caption_language}, tracks={len(metadata.caption_tracks)}"
    )
    return metadata
