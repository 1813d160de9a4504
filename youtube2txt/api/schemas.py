from pydantic import BaseModel, ConfigDict, Field
from typing import List


class TranscriptSegment(BaseModel):
    """One line of transcript text."""
    text: str


class TranscriptResponse(BaseModel):
    """Model for transcript responses."""
    title: str
    segments: List[TranscriptSegment] = []


class LanguageOptionResponse(BaseModel):
    """A caption language the caller can request."""
    code: str
    name: str
    is_auto: bool = Field(False, alias="isAuto")

    model_config = ConfigDict(populate_by_name=True)


class LanguagesResponse(BaseModel):
    """Model for language list responses."""
    default_lang: str = Field("", alias="defaultLang")
    languages: List[LanguageOptionResponse] = []

    model_config = ConfigDict(populate_by_name=True)


class ErrorResponse(BaseModel):
    """Model for error responses."""
    error: str
