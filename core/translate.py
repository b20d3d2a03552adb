"""
Translation Module - Clean Architecture Implementation

Single responsibility: current transcript + target language → translation text
Runs on demand, independently of the main pipeline and its progress indicator.
"""

import itertools
from typing import Optional

import httpx
import structlog
from pydantic import BaseModel, Field, ValidationError

from config import ServiceConfig, config
from core.api import ServiceError, request_json
from core.languages import Language
from core.segments import join_segments
from core.session import SessionState

# Configure structured logger
logger = structlog.get_logger(__name__)


class TranslateResponse(BaseModel):
    """Validated translation endpoint payload"""

    translation: str = Field(description="Translated text")


class TranslationError(ServiceError):
    """Custom exception for translation failures"""
    pass


async def fetch_translation(
    client: httpx.AsyncClient,
    text: str,
    language: Language,
    service_config: Optional[ServiceConfig] = None
) -> str:
    """Translate ``text`` into ``language``"""

    service_config = service_config or config.service

    logger.info("Requesting translation", target=language.code, char_count=len(text))

    data = await request_json(
        client,
        "POST",
        service_config.translate_path,
        TranslationError,
        "translate transcript",
        data={"text": text, "dest": language.code}
    )

    try:
        result = TranslateResponse(**data)
    except ValidationError as e:
        logger.error("Translation payload failed validation", error=str(e))
        raise TranslationError("Translation request failed: response has no translation") from e

    logger.info("Translation received", target=language.code, char_count=len(result.translation))
    return result.translation


class TranslationFlow:
    """Re-triggerable translation of the session's current transcript.

    Every request is tagged with a generation number. A response is committed
    only if no newer request was issued meanwhile and the result set it was
    computed from is still the session's current one; otherwise it is
    discarded so a slow, superseded response never overwrites a newer one.
    """

    def __init__(
        self,
        session: SessionState,
        client: httpx.AsyncClient,
        service_config: Optional[ServiceConfig] = None
    ):
        self.session = session
        self.client = client
        self.service_config = service_config or config.service
        self._generations = itertools.count(1)
        self._latest_generation = 0

    @property
    def latest_generation(self) -> int:
        return self._latest_generation

    async def select_language(self, language: Language) -> Optional[str]:
        """Record the selection and issue exactly one translation request for it"""
        self.session.select_language(language)
        return await self.translate(language)

    async def translate(self, language: Language) -> Optional[str]:
        """Translate the current transcript into ``language``.

        Returns the committed translation, or ``None`` when there is no result
        set yet or the response was superseded.

        Raises:
            TranslationError: the request failed; the existing translation is kept.
        """
        source = self.session.result
        if source is None:
            logger.info("Translation skipped, no transcript available yet", target=language.code)
            return None

        generation = next(self._generations)
        self._latest_generation = generation
        text = join_segments(source.transcription)

        logger.debug("Translation request issued", target=language.code, generation=generation)

        try:
            translation = await fetch_translation(self.client, text, language, self.service_config)
        except TranslationError as e:
            logger.error("Translation failed",
                        target=language.code,
                        generation=generation,
                        error=str(e))
            raise

        if generation != self._latest_generation:
            logger.info("Discarding superseded translation",
                       target=language.code,
                       generation=generation,
                       latest_generation=self._latest_generation)
            return None

        # Only a new pipeline run can swap the result set while the latest request is in flight
        if self.session.result is not source:
            logger.info("Discarding translation for a replaced transcript", target=language.code)
            return None

        self.session.replace_translation(translation)
        logger.info("Translation committed", target=language.code, generation=generation)
        return translation
