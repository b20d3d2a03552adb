"""
Pipeline Orchestrator - Clean Architecture Implementation

Drives one run: URL → transcript → segments → summary → committed result set.
Progress is published to the session at fixed checkpoints so observers can
show what is in flight during the long network waits.
"""

import asyncio
import re
from enum import Enum
from typing import Awaitable, Dict, Optional, Set, Tuple, Type, TypeVar

import httpx
import structlog

from config import ServiceConfig, SummaryConfig, config
from core.api import ServiceError, TranscriptorError
from core.segments import build_segments, display_duration
from core.session import ResultSet, SessionState
from core.summarize import SummarizationError, fetch_summary
from core.transcribe import TranscriptionError, fetch_transcript

# Configure structured logger
logger = structlog.get_logger(__name__)

YOUTUBE_URL_PATTERN = re.compile(r'^(https?://)?(www\.)?(youtube\.com|youtu\.be)/.+')
DEFAULT_VIDEO_TITLE = "Transcribed Video"

T = TypeVar("T")


class InvalidInputError(TranscriptorError):
    """The submitted URL is not a YouTube URL; rejected before any network call"""
    pass


class PipelineStateError(TranscriptorError):
    """An illegal run state transition was attempted"""
    pass


class RunStage(Enum):
    """Named states of a single pipeline run"""
    IDLE = "idle"
    TRANSCRIBING = "transcribing"
    SEGMENTING = "segmenting"
    SUMMARIZING = "summarizing"
    ASSEMBLING = "assembling"


# (progress percentage, step label) published when a stage is entered
CHECKPOINTS: Dict[RunStage, Tuple[int, str]] = {
    RunStage.TRANSCRIBING: (10, "Sending video URL to server..."),
    RunStage.SEGMENTING: (40, "Formatting transcript..."),
    RunStage.SUMMARIZING: (70, "Generating summary..."),
    RunStage.ASSEMBLING: (90, "Finishing up..."),
}

TRANSITIONS: Dict[RunStage, Set[RunStage]] = {
    RunStage.IDLE: {RunStage.TRANSCRIBING},
    RunStage.TRANSCRIBING: {RunStage.SEGMENTING, RunStage.IDLE},
    RunStage.SEGMENTING: {RunStage.SUMMARIZING},
    RunStage.SUMMARIZING: {RunStage.ASSEMBLING, RunStage.IDLE},
    RunStage.ASSEMBLING: {RunStage.IDLE},
}

# Stages from which a run may abort back to idle
FAILABLE_STAGES = {RunStage.TRANSCRIBING, RunStage.SUMMARIZING}


def is_valid_youtube_url(url: str) -> bool:
    """Permissive YouTube URL shape check (scheme and www. optional)"""
    return bool(url) and YOUTUBE_URL_PATTERN.match(url) is not None


class PipelineRun:
    """State machine for one run, writing checkpoints into the session.

    Independent of any event loop: each method is a synchronous transition.
    """

    def __init__(self, session: SessionState):
        self.session = session
        self.stage = RunStage.IDLE

    def _transition(self, target: RunStage) -> None:
        if target not in TRANSITIONS[self.stage]:
            raise PipelineStateError(f"Illegal transition {self.stage.value} -> {target.value}")
        logger.debug("Run stage transition", source=self.stage.value, target=target.value)
        self.stage = target

    def start(self) -> None:
        if self.session.is_processing:
            raise PipelineStateError("A pipeline run is already in progress")
        self._transition(RunStage.TRANSCRIBING)
        progress, label = CHECKPOINTS[RunStage.TRANSCRIBING]
        self.session.begin_processing(label, progress)

    def advance(self, target: RunStage) -> None:
        if target not in CHECKPOINTS:
            raise PipelineStateError(f"Cannot advance to {target.value}")
        self._transition(target)
        progress, label = CHECKPOINTS[target]
        self.session.update_processing(label, progress)

    def complete(self, result: ResultSet) -> None:
        self._transition(RunStage.IDLE)
        self.session.commit_result(result)
        self.session.finish_processing()

    def fail(self) -> None:
        if self.stage not in FAILABLE_STAGES:
            raise PipelineStateError(f"Run cannot fail from {self.stage.value}")
        self._transition(RunStage.IDLE)
        self.session.reset_processing()

    def abort(self) -> None:
        """Force the run back to idle from whatever stage it reached"""
        logger.debug("Run aborted", source=self.stage.value)
        self.stage = RunStage.IDLE
        self.session.reset_processing()


class PipelineOrchestrator:
    """Runs transcribe → segment → summarize → assemble against the backend"""

    def __init__(
        self,
        session: SessionState,
        client: httpx.AsyncClient,
        summary_config: Optional[SummaryConfig] = None,
        service_config: Optional[ServiceConfig] = None
    ):
        self.session = session
        self.client = client
        self.summary_config = summary_config or config.summary
        self.service_config = service_config or config.service

    async def run(self, url: str) -> Optional[ResultSet]:
        """Execute one pipeline run for ``url``.

        Returns the committed result set, or ``None`` when ignored because a
        run is already active.

        Raises:
            InvalidInputError: URL rejected before any network activity.
            TranscriptionError: Stage 1 failed; progress reset to idle.
            SummarizationError: Stage 2 failed; progress reset to idle.

        Any other exception raised once the run has started also resets
        progress to idle before propagating.
        """
        if self.session.is_processing:
            logger.warning("Pipeline run ignored, another run is in progress", url=url)
            return None

        if not is_valid_youtube_url(url):
            logger.warning("Rejected invalid YouTube URL", url=url)
            raise InvalidInputError("Please enter a valid YouTube URL")

        run = PipelineRun(self.session)
        try:
            return await self._execute(run, url)
        except BaseException as e:
            if run.stage is not RunStage.IDLE or self.session.is_processing:
                logger.error("Pipeline run aborted",
                            stage=run.stage.value,
                            error_type=type(e).__name__,
                            error=str(e))
                run.abort()
            raise

    async def _execute(self, run: PipelineRun, url: str) -> ResultSet:
        run.start()

        logger.info("Starting pipeline run", url=url)

        # Stage 1: Transcribe
        transcript = await self._call_stage(
            run,
            fetch_transcript(self.client, url, self.service_config),
            TranscriptionError,
            "fetch transcript"
        )

        run.advance(RunStage.SEGMENTING)
        raw_text = transcript.transcript
        segments = build_segments(raw_text)
        logger.info("Transcript segmented", segment_count=len(segments))

        # Stage 2: Summarize (on the raw text, not the segmented form)
        run.advance(RunStage.SUMMARIZING)
        summary = await self._call_stage(
            run,
            fetch_summary(self.client, raw_text, self.summary_config, self.service_config),
            SummarizationError,
            "summarize transcript"
        )

        run.advance(RunStage.ASSEMBLING)
        result = ResultSet(
            video_title=transcript.title or DEFAULT_VIDEO_TITLE,
            video_duration=display_duration(transcript.duration),
            transcription=segments,
            summary=summary.summary_or_placeholder,
            translation=raw_text
        )
        run.complete(result)

        logger.info("Pipeline run completed",
                   title=result.video_title,
                   duration=result.video_duration,
                   segment_count=len(result.transcription))

        return result

    async def _call_stage(
        self,
        run: PipelineRun,
        call: Awaitable[T],
        error_cls: Type[ServiceError],
        action: str
    ) -> T:
        """Await a stage's network call; any failure resets the run to idle"""
        stage = run.stage
        try:
            return await call
        except error_cls as e:
            logger.error("Pipeline aborted", stage=stage.value, error=str(e))
            run.fail()
            raise
        except asyncio.CancelledError:
            logger.warning("Pipeline run cancelled", stage=stage.value)
            run.fail()
            raise
        except Exception as e:
            logger.error("Unexpected error during pipeline stage", stage=stage.value, error=str(e))
            run.fail()
            raise error_cls(f"Failed to {action}: {e}") from e
