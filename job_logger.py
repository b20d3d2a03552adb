#!/usr/bin/env python3
"""
Job Logger for YouTube Transcriptor
Tracks metrics for each run including stage timing, content sizes, status and errors
"""
import csv
import fcntl
import json
import os
import time
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

import structlog

from core.session import ResultSet

logger = structlog.get_logger(__name__)

CSV_HEADERS = [
    'job_id', 'job_start_time', 'job_end_time', 'job_status',
    'video_url', 'video_title', 'video_duration',
    'total_processing_seconds', 'pipeline_duration_seconds',
    'translation_duration_seconds',
    'segment_count', 'transcript_word_count', 'transcript_character_count',
    'summary_word_count', 'summary_character_count',
    'translation_language', 'translation_character_count',
    'error_message'
]


class JobLogger:
    """Run tracking for the transcription pipeline"""

    def __init__(self, job_id: Optional[str] = None, csv_file: Optional[str] = "job_summary.csv",
                 log_dir: str = "job_logs"):
        """Initialize job logger with unique job ID; ``csv_file=None`` disables the ledger"""
        self.job_id = job_id or self._generate_job_id()
        self.csv_file = Path(csv_file) if csv_file else None
        self.log_dir = Path(log_dir)

        self.metrics: Dict[str, Any] = {
            # Job identification
            'job_id': self.job_id,
            'job_start_time': datetime.now().isoformat(),
            'job_end_time': None,
            'job_status': 'started',

            # Video information
            'video_url': None,
            'video_title': None,
            'video_duration': None,

            # Stage timings
            'pipeline_start_time': None,
            'pipeline_end_time': None,
            'pipeline_duration_seconds': None,
            'translation_start_time': None,
            'translation_end_time': None,
            'translation_duration_seconds': None,
            'total_processing_seconds': None,

            # Content metrics
            'segment_count': None,
            'transcript_word_count': None,
            'transcript_character_count': None,
            'summary_word_count': None,
            'summary_character_count': None,
            'translation_language': None,
            'translation_character_count': None,

            # Status and errors
            'errors': [],
        }

        # Timing helpers
        self._timers: Dict[str, float] = {}

    def _generate_job_id(self) -> str:
        """Generate unique job ID"""
        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        unique_id = str(uuid.uuid4())[:8]
        return f"{timestamp}_{unique_id}"

    def set_url(self, url: str):
        self.metrics['video_url'] = url

    def start_timer(self, operation: str):
        """Start timing an operation"""
        self._timers[operation] = time.time()
        start_key = f"{operation}_start_time"
        if start_key in self.metrics:
            self.metrics[start_key] = datetime.now().isoformat()

    def end_timer(self, operation: str) -> Optional[float]:
        """End timing an operation and record its duration"""
        if operation not in self._timers:
            return None

        duration = time.time() - self._timers.pop(operation)
        duration_key = f"{operation}_duration_seconds"
        end_key = f"{operation}_end_time"

        if duration_key in self.metrics:
            self.metrics[duration_key] = round(duration, 2)
        if end_key in self.metrics:
            self.metrics[end_key] = datetime.now().isoformat()
        return duration

    def set_result_metrics(self, result: ResultSet, raw_transcript: Optional[str] = None):
        """Record title, duration and content sizes from a committed result"""
        transcript = raw_transcript if raw_transcript is not None else " ".join(
            segment.text for segment in result.transcription
        )
        self.metrics['video_title'] = result.video_title
        self.metrics['video_duration'] = result.video_duration
        self.metrics['segment_count'] = len(result.transcription)
        self.metrics['transcript_character_count'] = len(transcript)
        self.metrics['transcript_word_count'] = len(transcript.split())
        self.metrics['summary_character_count'] = len(result.summary)
        self.metrics['summary_word_count'] = len(result.summary.split())

    def set_translation_metrics(self, language_code: str, translation: str):
        self.metrics['translation_language'] = language_code
        self.metrics['translation_character_count'] = len(translation)

    def add_error(self, error: str, fatal: bool = True):
        """Add error to log"""
        self.metrics['errors'].append({
            'timestamp': datetime.now().isoformat(),
            'error': str(error),
            'fatal': fatal
        })

        if fatal:
            self.metrics['job_status'] = 'failed'

    def finalize(self, status: str = 'success'):
        """Finalize job, compute total time and append the CSV row"""
        self.metrics['job_end_time'] = datetime.now().isoformat()
        self.metrics['job_status'] = status

        start = datetime.fromisoformat(self.metrics['job_start_time'])
        end = datetime.fromisoformat(self.metrics['job_end_time'])
        self.metrics['total_processing_seconds'] = round((end - start).total_seconds(), 2)

        if self.csv_file is not None:
            self.append_to_csv()

        # Optionally save JSON for debugging (keep minimal)
        if os.getenv('YTT_SAVE_JOB_JSON', 'false').lower() == 'true':
            self.save()

    def _csv_row(self) -> Dict[str, Any]:
        row_data = {}
        for header in CSV_HEADERS:
            value = self.metrics.get(header, '')
            if header in ('job_start_time', 'job_end_time') and value:
                row_data[header] = datetime.fromisoformat(value).strftime('%Y-%m-%d %H:%M:%S')
            elif header.endswith('_seconds'):
                row_data[header] = f"{value:.2f}" if value is not None else ''
            elif header == 'error_message':
                errors = self.metrics['errors']
                row_data[header] = errors[-1]['error'] if errors else ''
            else:
                row_data[header] = '' if value is None else value
        return row_data

    def append_to_csv(self):
        """Append job data to master CSV file"""
        csv_exists = self.csv_file.exists()
        if self.csv_file.parent != Path('.'):
            self.csv_file.parent.mkdir(parents=True, exist_ok=True)

        # Use file locking to prevent corruption during concurrent writes
        with open(self.csv_file, 'a', newline='', encoding='utf-8') as csvfile:
            fcntl.flock(csvfile.fileno(), fcntl.LOCK_EX)
            try:
                writer = csv.DictWriter(csvfile, fieldnames=CSV_HEADERS)

                # Write headers if file is new
                if not csv_exists or os.path.getsize(self.csv_file) == 0:
                    writer.writeheader()

                writer.writerow(self._csv_row())
            finally:
                fcntl.flock(csvfile.fileno(), fcntl.LOCK_UN)

        logger.info("Job saved to CSV",
                   job_id=self.job_id,
                   csv_file=str(self.csv_file),
                   status=self.metrics['job_status'])

    def save(self) -> Path:
        """Save metrics to JSON file (debug only)"""
        self.log_dir.mkdir(parents=True, exist_ok=True)
        filepath = self.log_dir / f"{self.job_id}.json"

        with open(filepath, 'w', encoding='utf-8') as f:
            json.dump(self.metrics, f, indent=2, ensure_ascii=False)

        return filepath

    def get_summary(self) -> Dict[str, Any]:
        """Get a summary of key metrics"""
        return {
            'job_id': self.metrics['job_id'],
            'video_title': self.metrics['video_title'],
            'duration': self.metrics['video_duration'],
            'segments': self.metrics['segment_count'],
            'total_time': self.metrics['total_processing_seconds'],
            'status': self.metrics['job_status'],
        }
