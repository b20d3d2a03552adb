"""
Session State Module

Single source of truth for one user session: the submitted URL, the active
result view, the selected translation language, pipeline progress and the last
successful result set. The orchestrator and the translation flow are the only
writers, and each writes through the accessors below.
"""

from enum import Enum
from typing import Callable, List, Optional, Tuple

import structlog
from pydantic import BaseModel, ConfigDict, Field

from core.languages import DEFAULT_LANGUAGE, Language
from core.segments import Segment

# Configure structured logger
logger = structlog.get_logger(__name__)


class View(Enum):
    """Result views offered to the user"""
    TRANSCRIPTION = "transcription"
    SUMMARY = "summary"
    TRANSLATION = "translation"


class ProcessingState(BaseModel):
    """Pipeline execution status shown by the progress indicator"""

    model_config = ConfigDict(frozen=True)

    is_processing: bool = Field(default=False, description="A pipeline run is active")
    current_step: str = Field(default="", description="Human-readable label of the active stage")
    progress: int = Field(default=0, description="Progress percentage", ge=0, le=100)


IDLE_STATE = ProcessingState()


class ResultSet(BaseModel):
    """Outcome of a successful pipeline run"""

    model_config = ConfigDict(frozen=True)

    video_title: str = Field(description="Video title or generic fallback")
    video_duration: str = Field(description="Formatted M:SS duration or 'Unknown'")
    transcription: Tuple[Segment, ...] = Field(description="Ordered transcript segments")
    summary: str = Field(description="Summary text or placeholder")
    translation: str = Field(description="Latest translation, initially the raw transcript")

    def with_translation(self, translation: str) -> "ResultSet":
        """Copy of this result with only the translation replaced"""
        return self.model_copy(update={"translation": translation})


Listener = Callable[["SessionState"], None]


class SessionState:
    """Observable container for everything a session shows"""

    def __init__(self, selected_language: Language = DEFAULT_LANGUAGE):
        self.url: str = ""
        self.active_view: View = View.TRANSCRIPTION
        self.selected_language: Language = selected_language
        self.processing: ProcessingState = IDLE_STATE
        self.result: Optional[ResultSet] = None
        self._listeners: List[Listener] = []

    # Observers

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` to be called after every change; returns an unsubscribe function"""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    # User input

    def set_url(self, url: str) -> None:
        self.url = url.strip()
        self._notify()

    def set_view(self, view: View) -> None:
        self.active_view = view
        self._notify()

    def select_language(self, language: Language) -> None:
        if not isinstance(language, Language):
            raise TypeError(f"Expected a Language, got {type(language).__name__}")
        self.selected_language = language
        self._notify()

    # Orchestrator writes

    @property
    def is_processing(self) -> bool:
        return self.processing.is_processing

    def begin_processing(self, current_step: str, progress: int) -> None:
        """Start a run: progress restarts from the first checkpoint"""
        self.processing = ProcessingState(is_processing=True, current_step=current_step, progress=progress)
        self._notify()

    def update_processing(self, current_step: str, progress: int) -> None:
        if progress < self.processing.progress:
            raise ValueError(
                f"Progress cannot move backwards ({self.processing.progress} -> {progress})"
            )
        self.processing = ProcessingState(is_processing=True, current_step=current_step, progress=progress)
        self._notify()

    def finish_processing(self) -> None:
        self.processing = ProcessingState(is_processing=False, current_step="", progress=100)
        self._notify()

    def reset_processing(self) -> None:
        self.processing = IDLE_STATE
        self._notify()

    def commit_result(self, result: ResultSet) -> None:
        """Replace the previous result set wholesale"""
        self.result = result
        logger.debug("Result set committed",
                    title=result.video_title,
                    segment_count=len(result.transcription))
        self._notify()

    # Translation flow writes

    def replace_translation(self, translation: str) -> ResultSet:
        if self.result is None:
            raise ValueError("No result set to attach a translation to")
        self.result = self.result.with_translation(translation)
        self._notify()
        return self.result
