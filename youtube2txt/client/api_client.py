"""
API client for communicating with the youtube2txt backend.
"""

import requests
from typing import Dict, Any, Optional
from urllib.parse import urljoin
from youtube2txt.config import config


class ApiError(Exception):
    """Error response returned by the API."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class ApiClient:
    """Client for interacting with the youtube2txt API."""

    def __init__(self, base_url: str = config.PUBLIC_URL, timeout: float = 180.0):
        """
        Initialize the API client.

        Args:
            base_url: Base URL of the API
            timeout: Request timeout in seconds; extraction can take a while
        """
        self.base_url = base_url
        self.timeout = timeout

    def _url(self, endpoint: str) -> str:
        """Get the full URL for an endpoint."""
        return urljoin(self.base_url, endpoint)

    def _get(self, endpoint: str, params: Dict[str, Any]) -> Dict[str, Any]:
        response = requests.get(self._url(endpoint), params=params, timeout=self.timeout)
        if response.status_code >= 400:
            try:
                message = response.json().get("error", response.reason)
            except ValueError:
                message = response.reason
            raise ApiError(response.status_code, message)
        return response.json()

    def get_transcript(self, video_id: str, lang: Optional[str] = None) -> Dict[str, Any]:
        """
        Request a video transcript.

        Args:
            video_id: YouTube video ID
            lang: Optional caption language code(s)

        Returns:
            Dictionary with title and text segments
        """
        params = {"videoId": video_id}
        if lang:
            params["lang"] = lang
        return self._get("/transcript", params)

    def get_languages(self, video_id: str) -> Dict[str, Any]:
        """
        Get the caption languages available for a video.

        Args:
            video_id: YouTube video ID

        Returns:
            Dictionary with defaultLang and languages
        """
        return self._get("/languages", {"videoId": video_id})

    def health(self) -> Dict[str, Any]:
        """Check API health."""
        response = requests.get(self._url("/health"), timeout=self.timeout)
        response.raise_for_status()
        return response.json()
