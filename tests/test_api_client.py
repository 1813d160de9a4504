"""
Tests for the synchronous API client.
"""

from unittest.mock import patch, MagicMock

import pytest

from youtube2txt.client.api_client import ApiClient, ApiError


def make_response(status_code=200, payload=None, reason="OK"):
    response = MagicMock()
    response.status_code = status_code
    response.reason = reason
    response.json.return_value = payload or {}
    return response


@patch("youtube2txt.client.api_client.requests.get")
def test_get_transcript(mock_get):
    """Query parameters use the API's names."""
    mock_get.return_value = make_response(payload={"title": "T", "segments": [{"text": "hi"}]})

    result = ApiClient("http://localhost:3000").get_transcript("dQw4w9WgXcQ", lang="en")

    assert result["segments"] == [{"text": "hi"}]
    args, kwargs = mock_get.call_args
    assert args[0] == "http://localhost:3000/transcript"
    assert kwargs["params"] == {"videoId": "dQw4w9WgXcQ", "lang": "en"}


@patch("youtube2txt.client.api_client.requests.get")
def test_get_languages(mock_get):
    mock_get.return_value = make_response(payload={"defaultLang": "en", "languages": []})

    result = ApiClient("http://localhost:3000").get_languages("dQw4w9WgXcQ")

    assert result["defaultLang"] == "en"
    assert mock_get.call_args.kwargs["params"] == {"videoId": "dQw4w9WgXcQ"}


@patch("youtube2txt.client.api_client.requests.get")
def test_error_response_raises(mock_get):
    """Error bodies are surfaced as ApiError."""
    mock_get.return_value = make_response(500, {"error": "No transcript found."}, "Internal Server Error")

    with pytest.raises(ApiError) as exc_info:
        ApiClient("http://localhost:3000").get_transcript("dQw4w9WgXcQ")

    assert exc_info.value.status_code == 500
    assert exc_info.value.message == "No transcript found."
