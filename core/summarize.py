"""
Summarization Module - Clean Architecture Implementation

Single responsibility: raw transcript text → abstractive summary
"""

from typing import Optional

import httpx
import structlog
from pydantic import BaseModel, Field, ValidationError, field_validator

from config import ServiceConfig, SummaryConfig, config
from core.api import ServiceError, request_json

# Configure structured logger
logger = structlog.get_logger(__name__)

SUMMARY_PLACEHOLDER = "No summary generated."


class SummarizeResponse(BaseModel):
    """Validated summarization endpoint payload"""

    summary: Optional[str] = Field(None, description="Generated summary text")

    @field_validator('summary', mode='before')
    @classmethod
    def coerce_empty_summary(cls, v):
        if isinstance(v, str) and not v:
            return None
        return v

    @property
    def summary_or_placeholder(self) -> str:
        return self.summary or SUMMARY_PLACEHOLDER


class SummarizationError(ServiceError):
    """Custom exception for summarization failures"""
    pass


def build_summary_form(text: str, summary_config: SummaryConfig) -> dict:
    """Form fields for the summarization request"""
    return {
        "text": text,
        "manual": "true" if summary_config.manual else "false",
        "model_choice": str(summary_config.model_choice),
    }


async def fetch_summary(
    client: httpx.AsyncClient,
    text: str,
    summary_config: Optional[SummaryConfig] = None,
    service_config: Optional[ServiceConfig] = None
) -> SummarizeResponse:
    """Summarize the full raw transcript ``text``"""

    summary_config = summary_config or config.summary
    service_config = service_config or config.service

    logger.info("Requesting summary",
               char_count=len(text),
               manual=summary_config.manual,
               model_choice=summary_config.model_choice)

    data = await request_json(
        client,
        "POST",
        service_config.summarize_path,
        SummarizationError,
        "summarize transcript",
        data=build_summary_form(text, summary_config)
    )

    try:
        result = SummarizeResponse(**data)
    except ValidationError as e:
        logger.error("Summary payload failed validation", error=str(e))
        raise SummarizationError("Failed to summarize transcript: malformed response") from e

    if result.summary is None:
        logger.warning("Backend returned no summary, using placeholder")
    else:
        logger.info("Summary received", char_count=len(result.summary))

    return result
