"""
Export Module

Plain-text renderings of a result set, written under fixed file names.
"""

from pathlib import Path
from typing import Dict, Iterable, Union

import structlog

from core.api import TranscriptorError
from core.segments import Segment
from core.session import ResultSet, View

# Configure structured logger
logger = structlog.get_logger(__name__)

EXPORT_FILENAMES: Dict[View, str] = {
    View.TRANSCRIPTION: "transcription.txt",
    View.SUMMARY: "summary.txt",
    View.TRANSLATION: "translation.txt",
}


class ExportError(TranscriptorError):
    """Writing an export file failed"""
    pass


def format_transcription_for_download(segments: Iterable[Segment]) -> str:
    """Render segments as '[timestamp] text' blocks separated by blank lines"""
    return "\n\n".join(f"[{segment.timestamp}] {segment.text}" for segment in segments)


def render_view(result: ResultSet, view: View) -> str:
    """Text content offered for download for one view"""
    if view is View.TRANSCRIPTION:
        return format_transcription_for_download(result.transcription)
    if view is View.SUMMARY:
        return result.summary
    return result.translation


def export_view(result: ResultSet, view: View, output_dir: Union[str, Path]) -> Path:
    """Write one view to its fixed file name inside ``output_dir``"""
    output_path = Path(output_dir) / EXPORT_FILENAMES[view]

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, 'w', encoding='utf-8') as f:
            f.write(render_view(result, view))
    except OSError as e:
        logger.error("Failed to write export file", filepath=str(output_path), error=str(e))
        raise ExportError(f"Failed to save {output_path.name}: {e}") from e

    logger.info("Export file saved",
               view=view.value,
               filepath=str(output_path),
               size_kb=output_path.stat().st_size / 1024)
    return output_path


def export_results(result: ResultSet, output_dir: Union[str, Path]) -> Dict[View, Path]:
    """Write transcription, summary and translation files"""
    return {view: export_view(result, view, output_dir) for view in View}
