"""
Transcription Module - Clean Architecture Implementation

Single responsibility: YouTube URL → raw transcript text and video metadata
The backend does the download and speech recognition; this module only owns the contract.
"""

from typing import Optional

import httpx
import structlog
from pydantic import BaseModel, Field, ValidationError, field_validator

from config import ServiceConfig, config
from core.api import ServiceError, request_json

# Configure structured logger
logger = structlog.get_logger(__name__)


class TranscribeResponse(BaseModel):
    """Validated transcription endpoint payload"""

    transcript: str = Field(default="", description="Raw transcript text")
    title: Optional[str] = Field(None, description="Video title reported by the backend")
    duration: Optional[float] = Field(None, description="Video duration in seconds")

    @field_validator('transcript', mode='before')
    @classmethod
    def coerce_missing_transcript(cls, v):
        return "" if v is None else v

    @field_validator('title', mode='before')
    @classmethod
    def coerce_blank_title(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class TranscriptionError(ServiceError):
    """Custom exception for transcription failures"""
    pass


async def fetch_transcript(
    client: httpx.AsyncClient,
    url: str,
    service_config: Optional[ServiceConfig] = None
) -> TranscribeResponse:
    """Ask the backend to transcribe the video at ``url``"""

    service_config = service_config or config.service

    logger.info("Requesting transcription", url=url)

    data = await request_json(
        client,
        "GET",
        service_config.transcribe_path,
        TranscriptionError,
        "fetch transcript",
        params={"url": url}
    )

    try:
        result = TranscribeResponse(**data)
    except ValidationError as e:
        logger.error("Transcription payload failed validation", error=str(e))
        raise TranscriptionError(f"Failed to fetch transcript: malformed response ({e.error_count()} errors)") from e

    logger.info("Transcript received",
               char_count=len(result.transcript),
               has_title=result.title is not None,
               duration_seconds=result.duration)

    return result
