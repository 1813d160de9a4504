"""
youtube2txt Application.

This application fetches the caption track of a YouTube video with yt-dlp
and returns it as clean plain text segments.
"""

from youtube2txt.config import config

__version__ = config.APP_VERSION
