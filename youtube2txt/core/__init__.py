"""
Core functionality for the youtube2txt application.

This package contains modules for resolving video metadata, choosing a
caption language, running yt-dlp, parsing subtitle files and cleaning up
their temporary copies.
"""
