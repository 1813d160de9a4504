"""
Tests for the watch page metadata resolver.
"""

import asyncio
import json
from unittest.mock import patch

import httpx
import pytest

from youtube2txt.core.metadata import (
    FALLBACK_TITLE,
    extract_caption_tracks,
    extract_player_response,
    fetch_video_metadata,
    get_preferred_title,
    parse_watch_page,
)
from youtube2txt.models.schemas import CaptionTrack


def make_player_response(title="Test Video", tracks=None, audio_tracks=None):
    """Build a minimal ytInitialPlayerResponse."""
    renderer = {"captionTracks": tracks or []}
    if audio_tracks is not None:
        renderer["audioTracks"] = audio_tracks
    return {
        "videoDetails": {"title": title},
        "captions": {"playerCaptionsTracklistRenderer": renderer},
    }


def make_watch_page(player_response, html_title="Page Title - YouTube"):
    """Embed a player response in a watch page the way YouTube does."""
    return (
        f"<html><head><title>{html_title}</title></head><body>"
        f"<script>var ytInitialPlayerResponse = {json.dumps(player_response)};"
        f"var meta = {{\"other\": 1}};</script></body></html>"
    )


@pytest.fixture
def english_tracks():
    """Raw caption tracks: auto English, manual German."""
    return [
        {"languageCode": "en", "kind": "asr", "name": {"simpleText": "English (auto-generated)"}},
        {"languageCode": "de", "name": {"runs": [{"text": "Deutsch"}]}},
    ]


def test_extract_player_response_handles_braces_inside_strings():
    """Braces and escaped quotes inside strings do not end the object."""
    payload = {"videoDetails": {"title": 'Curly } { "quoted" \\ title'}, "n": [1, {"a": "}"}]}
    html = make_watch_page(payload)

    assert extract_player_response(html) == payload


def test_extract_player_response_missing_or_broken():
    """No marker, no brace, unbalanced or invalid JSON all return None."""
    assert extract_player_response("<html>nothing here</html>") is None
    assert extract_player_response("ytInitialPlayerResponse = null;") is None
    assert extract_player_response('ytInitialPlayerResponse = {"a": {"b": 1}') is None
    assert extract_player_response("ytInitialPlayerResponse = {bad: json};") is None


def test_get_preferred_title_order():
    """videoDetails wins, then microformat, then the HTML title."""
    microformat = {"microformat": {"playerMicroformatRenderer": {"title": {"simpleText": "Micro - YouTube"}}}}
    html = "<title>Html &amp; Title - YouTube</title>"

    assert get_preferred_title({"videoDetails": {"title": "  Details  "}, **microformat}, html) == "Details"
    assert get_preferred_title({"videoDetails": {"title": "  "}, **microformat}, html) == "Micro"
    assert get_preferred_title(None, html) == "Html & Title"
    assert get_preferred_title(None, "<html></html>") is None


def test_extract_caption_tracks(english_tracks):
    """Names come from simpleText or joined runs; tracks without code are dropped."""
    raw = english_tracks + [{"kind": "asr"}]

    assert extract_caption_tracks(raw) == [
        CaptionTrack(code="en", name="English (auto-generated)", is_auto=True),
        CaptionTrack(code="de", name="Deutsch", is_auto=False),
    ]


def test_parse_watch_page(english_tracks):
    """Title, tracks and default language are resolved together."""
    html = make_watch_page(make_player_response("My Video - YouTube", english_tracks))

    metadata = parse_watch_page(html)

    assert metadata.title == "My Video"
    assert metadata.caption_language == "de"
    assert [track.code for track in metadata.caption_tracks] == ["en", "de"]


def test_parse_watch_page_without_player_response():
    """Without structured data the HTML title is used and no tracks exist."""
    metadata = parse_watch_page("<html><title>Only Title - YouTube</title></html>")

    assert metadata.title == "Only Title"
    assert metadata.caption_language is None
    assert metadata.caption_tracks == []


def _client(handler):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def test_fetch_video_metadata_success(settings, english_tracks):
    """The watch page is requested with a browser user agent."""
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["ua"] = request.headers.get("User-Agent")
        return httpx.Response(200, text=make_watch_page(make_player_response("Fetched", english_tracks)))

    async def run():
        async with _client(handler) as client:
            return await fetch_video_metadata("dQw4w9WgXcQ", settings, client)

    metadata = asyncio.run(run())

    assert seen["url"] == "https://www.youtube.com/watch?v=dQw4w9WgXcQ"
    assert seen["ua"] == settings.user_agent
    assert metadata.title == "Fetched"
    assert metadata.caption_language == "de"


@pytest.mark.parametrize("handler", [
    lambda request: httpx.Response(404, text="not found"),
    lambda request: httpx.Response(503),
])
def test_fetch_video_metadata_non_2xx_falls_back(settings, handler):
    """Non-2xx responses give the fallback metadata."""
    async def run():
        async with _client(handler) as client:
            return await fetch_video_metadata("dQw4w9WgXcQ", settings, client)

    metadata = asyncio.run(run())

    assert metadata.title == FALLBACK_TITLE
    assert metadata.caption_language is None
    assert metadata.caption_tracks == []


@pytest.mark.parametrize("error", [
    httpx.ReadTimeout("timed out"),
    httpx.ConnectError("refused"),
])
def test_fetch_video_metadata_network_errors_fall_back(settings, error):
    """Timeouts and connection errors never raise."""
    def handler(request):
        raise error

    async def run():
        async with _client(handler) as client:
            return await fetch_video_metadata("dQw4w9WgXcQ", settings, client)

    metadata = asyncio.run(run())

    assert metadata.title == FALLBACK_TITLE
    assert metadata.caption_tracks == []


def _fetch_page(settings, page):
    def handler(request):
        return httpx.Response(200, text=page)

    async def run():
        async with _client(handler) as client:
            return await fetch_video_metadata("dQw4w9WgXcQ", settings, client)

    return asyncio.run(run())


@pytest.mark.parametrize("player_response,language,codes", [
    (make_player_response(tracks=["en"]), None, []),
    (make_player_response(tracks=[{"languageCode": 5}]), None, []),
    (make_player_response(tracks=[None, {"languageCode": "fr"}]), "fr", ["fr"]),
    (make_player_response(tracks=[{"languageCode": "en", "name": {"runs": ["x", {"text": "English"}]}}]),
     "en", ["en"]),
    (make_player_response(tracks=[{"languageCode": "en"}], audio_tracks="broken"), "en", ["en"]),
    (make_player_response(tracks=["junk", {"languageCode": "es", "kind": "asr"}, {"languageCode": "it"}],
                          audio_tracks=[7, {"captionTrackIndices": [0, 1]}]), "it", ["es", "it"]),
    ({"videoDetails": {"title": "Test Video"}, "captions": []}, None, []),
    ({"videoDetails": {"title": "Test Video"}, "captions": {"playerCaptionsTracklistRenderer": "x"}}, None, []),
])
def test_fetch_video_metadata_tolerates_malformed_player_response(settings, player_response, language, codes):
    """Unexpected shapes inside the player response are skipped, never raised."""
    metadata = _fetch_page(settings, make_watch_page(player_response))

    assert metadata.title == "Test Video"
    assert metadata.caption_language == language
    assert [track.code for track in metadata.caption_tracks] == codes


def test_fetch_video_metadata_parse_failure_falls_back(settings):
    """A failure while reading the page still yields the fallback."""
    with patch("youtube2txt.core.metadata.parse_watch_page", side_effect=ValueError("boom")):
        metadata = _fetch_page(settings, make_watch_page(make_player_response()))

    assert metadata.title == FALLBACK_TITLE
    assert metadata.caption_tracks == []
