"""
Caption language selection.
"""

from typing import Any, Dict, List, Optional

from youtube2txt.models.schemas import CaptionTrack, LanguageOption, VideoMetadata

AUTO_LANGUAGE = "auto"
DEFAULT_AUDIO_TRACK_TYPE = "AUDIO_TRACK_TYPE_DEFAULT"


def _is_auto(track: Dict[str, Any]) -> bool:
    return track.get("kind") == "asr"


def _language_code(track: Dict[str, Any]) -> Optional[str]:
    code = track.get("languageCode")
    return code if isinstance(code, str) and code else None


def _lookup(data: Any, *keys: str) -> Any:
    for key in keys:
        if not isinstance(data, dict):
            return None
        data = data.get(key)
    return data


def _default_audio_track(player_response: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    audio_tracks = _lookup(player_response, "captions", "playerCaptionsTracklistRenderer", "audioTracks")
    if not isinstance(audio_tracks, list):
        return None
    audio_tracks = [track for track in audio_tracks if isinstance(track, dict)]
    for track in audio_tracks:
        if track.get("audioTrackType") == DEFAULT_AUDIO_TRACK_TYPE:
            return track
    return audio_tracks[0] if audio_tracks else None


def pick_caption_language(
    player_response: Optional[Dict[str, Any]],
    caption_tracks: List[Dict[str, Any]],
) -> Optional[str]:
    """
    Choose the caption language shown by default.

    Precedence:
        1. tracks referenced by the default (or first) audio track, manual first,
           then the first referenced track
        2. the first manual track
        3. the first track of any kind

    Returns:
        A language code, or None when the video has no caption tracks
    """
    raw_tracks = caption_tracks if isinstance(caption_tracks, list) else []
    tracks = [track for track in raw_tracks if isinstance(track, dict)]
    if not tracks:
        return None

    # Indices point into the raw list, malformed entries included.
    def track_at(index: Any) -> Optional[Dict[str, Any]]:
        if isinstance(index, int) and 0 <= index < len(raw_tracks) and isinstance(raw_tracks[index], dict):
            return raw_tracks[index]
        return None

    audio_track = _default_audio_track(player_response)
    indices = audio_track.get("captionTrackIndices") if audio_track else None
    if isinstance(indices, list):
        referenced = [track for track in (track_at(index) for index in indices) if track is not None]
        for track in referenced:
            if not _is_auto(track):
                return _language_code(track)
        first = track_at(indices[0]) if indices else None
        if first is not None:
            return _language_code(first)

    for track in tracks:
        if not _is_auto(track):
            return _language_code(track)
    return _language_code(tracks[0])


def resolve_language_preference(
    explicit: Optional[str],
    metadata: VideoMetadata,
    default_languages: str,
) -> str:
    """
    Language specifier handed to yt-dlp.

    An explicit request is used verbatim; "auto" or an empty value defers to
    the metadata heuristic and finally to the default list of codes.
    """
    explicit = (explicit or "").strip()
    if explicit and explicit.lower() != AUTO_LANGUAGE:
        return explicit
    return metadata.caption_language or default_languages


def build_language_options(caption_tracks: List[CaptionTrack]) -> List[LanguageOption]:
    """Deduplicate tracks by code, keeping the manual track, and sort by name."""
    by_code: Dict[str, LanguageOption] = {}
    for track in caption_tracks:
        if not track.code:
            continue
        existing = by_code.get(track.code)
        if existing is None:
            by_code[track.code] = LanguageOption(
                code=track.code,
                name=track.name or track.code,
                is_auto=track.is_auto,
            )
        elif existing.is_auto and not track.is_auto:
            existing.is_auto = False
            if track.name:
                existing.name = track.name

    return sorted(by_code.values(), key=lambda option: (option.name.casefold(), option.code))
