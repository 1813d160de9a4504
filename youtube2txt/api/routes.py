"""
API routes for the youtube2txt application.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, Request

from youtube2txt.api.schemas import (
    ErrorResponse,
    LanguageOptionResponse,
    LanguagesResponse,
    TranscriptResponse,
    TranscriptSegment,
)
from youtube2txt.core.transcript_service import TranscriptService
from youtube2txt.utils.logger import logging

router = APIRouter(tags=["transcripts"])

ERROR_RESPONSES = {400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}


def get_transcript_service(request: Request) -> TranscriptService:
    """The service built at startup and shared by every request."""
    return request.app.state.transcript_service


@router.get("/transcript", response_model=TranscriptResponse, responses=ERROR_RESPONSES)
async def get_transcript(
    video_id: Optional[str] = Query(None, alias="videoId", description="YouTube video ID"),
    lang: Optional[str] = Query(None, description="Caption language code(s), comma separated"),
    service: TranscriptService = Depends(get_transcript_service),
):
    """
    Fetch the transcript of a YouTube video.

    - Without ``lang`` (or with ``lang=auto``) the default caption language is chosen
    - Errors are returned as ``{"error": message}``
    """
    result = await service.get_transcript(video_id, lang)
    logging.info(f"Returning {len(result['segments'])} segments for {video_id}")
    return TranscriptResponse(
        title=result["title"],
        segments=[TranscriptSegment(text=cue.text) for cue in result["segments"]],
    )


@router.get("/languages", response_model=LanguagesResponse, responses=ERROR_RESPONSES)
async def get_languages(
    video_id: Optional[str] = Query(None, alias="videoId", description="YouTube video ID"),
    service: TranscriptService = Depends(get_transcript_service),
):
    """List the caption languages of a video; no subtitles are downloaded."""
    result = await service.get_languages(video_id)
    return LanguagesResponse(
        default_lang=result["default_lang"],
        languages=[
            LanguageOptionResponse(code=option.code, name=option.name, is_auto=option.is_auto)
            for option in result["languages"]
        ],
    )
