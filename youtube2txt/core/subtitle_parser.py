"""
Parsers that turn raw subtitle markup into clean transcript cues.

Three inputs are understood:

- WebVTT, as written by yt-dlp with ``--sub-format vtt``
- timed-text XML (``<text start=".." dur="..">``) from the caption track URL
- JSON transcripts, either a flat list of ``{start, duration, text}`` or the
  ``{"events": [...]}`` shape with millisecond offsets and text segments
"""

import json
import re
from typing import Any, List, Optional, Union

from youtube2txt.models.schemas import SubtitleCue

HTML_ENTITIES = {
    "amp": "&",
    "quot": '"',
    "#39": "'",
    "#x27": "'",
    "lt": "<",
    "gt": ">",
}
MAX_ENTITY_LENGTH = 10

VTT_TIMING = re.compile(r"(\d{2}:\d{2}:\d{2}\.\d{3})\s-->\s(\d{2}:\d{2}:\d{2}\.\d{3})")
TIMESTAMP_TAG = re.compile(r"^(\d{1,2}:)?\d{2}:\d{2}\.\d{3}$")
XML_TEXT = re.compile(r'<text start="([\d.]+)" dur="([\d.]+)".*?>(.*?)</text>', re.DOTALL)


def decode_html_entities(text: Optional[str]) -> str:
    """
    Decode the small set of entities YouTube emits in caption text.

    Unknown entities and ampersands without a nearby ``;`` are kept as-is.
    """
    if not text or "&" not in text:
        return text or ""

    result = []
    i = 0
    while i < len(text):
        char = text[i]
        if char != "&":
            result.append(char)
            i += 1
            continue
        semi = text.find(";", i + 1)
        if semi == -1 or semi - i > MAX_ENTITY_LENGTH:
            result.append(char)
            i += 1
            continue
        replacement = HTML_ENTITIES.get(text[i + 1:semi])
        if replacement is None:
            result.append(char)
            i += 1
            continue
        result.append(replacement)
        i = semi + 1
    return "".join(result)


def sanitize_transcript_text(text: Optional[str]) -> str:
    """
    Decode entities, then strip inline markup from a cue's text.

    A ``<...>`` span is dropped when it is a timestamp tag or when it looks
    like a tag (``<`` followed by a letter, ``/`` or ``!``). Any other ``<``
    is literal text.
    """
    if not text:
        return ""

    decoded = decode_html_entities(text)
    result = []
    i = 0
    while i < len(decoded):
        char = decoded[i]
        if char != "<":
            result.append(char)
            i += 1
            continue
        close = decoded.find(">", i + 1)
        if close == -1:
            result.append(char)
            i += 1
            continue
        if TIMESTAMP_TAG.match(decoded[i + 1:close]):
            i = close + 1
            continue
        following = decoded[i + 1]
        if not (following.isalpha() or following in "/!"):
            result.append(char)
            i += 1
            continue
        i = close + 1
    return "".join(result).strip()


def parse_vtt(vtt_text: str) -> List[SubtitleCue]:
    """
    Parse WebVTT content into cues.

    Multi-line cue text is joined with single spaces; cues left empty after
    sanitizing are dropped.
    """
    cues = []
    current = None

    for raw_line in vtt_text.splitlines():
        line = raw_line.strip()
        if not line:
            # a blank line closes the cue
            if current is not None:
                cues.append(current)
                current = None
            continue
        if line.startswith("WEBVTT") and current is None and not cues:
            continue

        match = VTT_TIMING.search(line)
        if match:
            if current is not None:
                cues.append(current)
            current = {"start": match.group(1), "end": match.group(2), "lines": []}
        elif current is not None:
            current["lines"].append(line)

    if current is not None:
        cues.append(current)

    parsed = []
    for cue in cues:
        text = sanitize_transcript_text(" ".join(cue["lines"]))
        if text:
            parsed.append(SubtitleCue(text=text, start=cue["start"], end=cue["end"]))
    return parsed


def parse_transcript_xml(xml: str) -> List[SubtitleCue]:
    """Parse timed-text XML; elements that do not match are skipped."""
    cues = []
    for start, duration, text in XML_TEXT.findall(xml or ""):
        try:
            timing = (float(start), float(duration))
        except ValueError:
            continue
        cues.append(SubtitleCue(start=timing[0], duration=timing[1], text=decode_html_entities(text)))
    return cues


def _timing(value: Any) -> Optional[Union[float, str]]:
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        return None
    return value


def _seconds(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        return None
    try:
        return float(value)
    except ValueError:
        return None


def _milliseconds(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    return value / 1000


def parse_json_transcript(text: str) -> Optional[List[SubtitleCue]]:
    """
    Parse a JSON transcript.

    Returns:
        The cues, or None when the content is not one of the known JSON shapes
    """
    try:
        data = json.loads(text)
    except (TypeError, ValueError):
        return None

    if isinstance(data, list):
        return [
            SubtitleCue(
                start=_timing(item.get("start")),
                duration=_seconds(item.get("duration")),
                text=item["text"] if isinstance(item.get("text"), str) else "",
            )
            for item in data
            if isinstance(item, dict)
        ]

    if isinstance(data, dict) and "events" in data:
        events = data.get("events")
        cues = []
        for event in events if isinstance(events, list) else []:
            if not isinstance(event, dict):
                continue
            segments = event.get("segs")
            texts = [
                segment.get("utf8") for segment in (segments if isinstance(segments, list) else [])
                if isinstance(segment, dict)
            ]
            event_text = "".join(text for text in texts if isinstance(text, str))
            if not event_text:
                continue
            cues.append(
                SubtitleCue(
                    start=_milliseconds(event.get("tStartMs")),
                    duration=_milliseconds(event.get("dDurationMs")),
                    text=event_text,
                )
            )
        return cues

    return None


def parse_subtitles(text: str) -> List[SubtitleCue]:
    """Detect the subtitle format and parse it."""
    if not text:
        return []

    stripped = text.strip()
    if stripped.startswith("WEBVTT") or "-->" in text:
        return parse_vtt(text)
    if stripped.startswith("<") and "<text " in text:
        return parse_transcript_xml(text)

    parsed = parse_json_transcript(text)
    if parsed is not None:
        return parsed

    return parse_vtt(text)
