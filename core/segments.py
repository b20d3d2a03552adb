"""
Transcript Segment Module

Single responsibility: raw transcript text → ordered timestamped segments.
Everything here is pure and deterministic; no I/O, no logging side effects.
"""

import math
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

SENTENCE_DELIMITER = ". "
SECONDS_PER_SEGMENT = 15
UNKNOWN_DURATION = "Unknown"


class Segment(BaseModel):
    """One timestamped, sentence-level unit of a transcript"""

    model_config = ConfigDict(frozen=True)

    timestamp: str = Field(description="Display timestamp derived from segment position")
    text: str = Field(description="Sentence text, always ending with a period")

    @field_validator('text')
    @classmethod
    def validate_text(cls, v):
        if not v.strip():
            raise ValueError("Segment text must not be blank")
        return v


def format_timestamp(index: int) -> str:
    """Display timestamp for the segment at ``index``.

    The seconds component is ``index * 15`` zero-padded to two digits and is
    never carried into minutes, so index 4 renders as ``00:60``. It is a
    position marker, not a real time axis.
    """
    if index < 0:
        raise ValueError("Segment index must be non-negative")
    return f"00:{index * SECONDS_PER_SEGMENT:02d}"


def split_sentences(text: str) -> List[str]:
    """Split raw transcript text into non-blank sentence fragments"""
    return [fragment for fragment in (text or "").split(SENTENCE_DELIMITER) if fragment.strip()]


def build_segments(text: str) -> List[Segment]:
    """Turn raw transcript text into ordered segments.

    Fragments keep their original whitespace; only a trailing period is
    added when the fragment does not already end with one.
    """
    segments = []
    for index, sentence in enumerate(split_sentences(text)):
        if not sentence.endswith('.'):
            sentence += '.'
        segments.append(Segment(timestamp=format_timestamp(index), text=sentence))
    return segments


def join_segments(segments: List[Segment]) -> str:
    """Rejoin segment texts with single spaces (translation source text)"""
    return " ".join(segment.text for segment in segments)


def format_duration(seconds: Union[int, float]) -> str:
    """Format a seconds count as M:SS, e.g. 125 → '2:05'"""
    total = int(math.floor(seconds))
    if total < 0:
        raise ValueError("Duration must be non-negative")
    minutes, remaining = divmod(total, 60)
    return f"{minutes}:{remaining:02d}"


def display_duration(seconds: Optional[Union[int, float]]) -> str:
    """Duration for display; missing, zero, negative or non-finite durations render as 'Unknown'"""
    if not seconds or not math.isfinite(seconds) or seconds < 0:
        return UNKNOWN_DURATION
    return format_duration(seconds)
