#!/usr/bin/env python3
"""
YouTube Transcriptor - Command Line Orchestrator

Main entry point: wires configuration, logging, session state and the backend
client together and runs URL → Transcript → Summary (→ Translation) → Exports.
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

import httpx
import structlog
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from config import AppConfig, config
from core.api import ServiceError, create_http_client
from core.export import ExportError, export_results
from core.languages import Language
from core.pipeline import InvalidInputError, PipelineOrchestrator
from core.session import ResultSet, SessionState
from core.translate import TranslationError, TranslationFlow
from job_logger import JobLogger

logger = structlog.get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INVALID_INPUT = 2


def configure_logging(debug: bool = False):
    """Configure structured logging to stderr"""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(message)s",
        stream=sys.stderr,
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S"),
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


class ProgressPrinter:
    """Prints pipeline checkpoints as the session state changes"""

    def __init__(self):
        self.last_step = None

    def __call__(self, session: SessionState):
        state = session.processing
        if state.is_processing and state.current_step != self.last_step:
            self.last_step = state.current_step
            print(f"[{state.progress:>3d}%] {state.current_step}")
        elif not state.is_processing and self.last_step is not None:
            self.last_step = None
            if state.progress == 100:
                print("[100%] ✅ Done")

    @staticmethod
    def show_result(result: ResultSet):
        """Show final run summary"""
        print(f"\n{'='*60}")
        print(f"🎉 Processing Complete!")
        print(f"{'='*60}")
        print(f"📹 Video: {result.video_title}")
        print(f"⏱️  Duration: {result.video_duration}")
        print(f"📝 Segments: {len(result.transcription)}")
        print(f"\n✨ Summary:\n{result.summary}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Transcribe, summarize and translate a YouTube video.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument("url", help="YouTube video URL")
    parser.add_argument(
        "-l", "--language",
        default=None,
        choices=Language.codes(),
        help="Also translate the transcript into this language"
    )
    parser.add_argument(
        "-o", "--output-dir",
        default=None,
        help="Directory for transcription.txt, summary.txt and translation.txt (default from config)"
    )
    parser.add_argument(
        "--no-export",
        action="store_true",
        help="Do not write export files"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )
    return parser


async def run_cli(
    args: argparse.Namespace,
    client: Optional[httpx.AsyncClient] = None,
    app_config: Optional[AppConfig] = None
) -> int:
    """Run one full session for ``args.url`` and return the process exit code"""

    app_config = app_config or config
    session = SessionState(Language.from_code(app_config.default_language))
    session.set_url(args.url)

    printer = ProgressPrinter()
    unsubscribe = session.subscribe(printer)

    job = JobLogger(csv_file=app_config.jobs_csv or None)
    job.set_url(session.url)

    owns_client = client is None
    if owns_client:
        client = create_http_client(app_config.service)

    print(f"🎬 YouTube Transcriptor")
    print(f"📋 Job ID: {job.job_id}")
    print(f"🔗 URL: {session.url}")
    print("="*60)

    try:
        orchestrator = PipelineOrchestrator(session, client, app_config.summary, app_config.service)

        job.start_timer('pipeline')
        try:
            result = await orchestrator.run(session.url)
        except InvalidInputError as e:
            print(f"❌ Error: {e}")
            return EXIT_INVALID_INPUT
        except ServiceError as e:
            job.end_timer('pipeline')
            job.add_error(str(e))
            job.finalize('failed')
            print(f"\n❌ {e}")
            return EXIT_FAILURE
        job.end_timer('pipeline')

        # The translation view still holds the raw transcript at this point
        job.set_result_metrics(result, raw_transcript=result.translation)
        ProgressPrinter.show_result(result)

        exit_code = EXIT_OK
        status = 'success'

        if args.language:
            language = Language.from_code(args.language)
            flow = TranslationFlow(session, client, app_config.service)
            print(f"\n🌐 Translating to {language.label}...")
            job.start_timer('translation')
            try:
                translation = await flow.select_language(language)
            except TranslationError as e:
                job.add_error(str(e), fatal=False)
                print(f"❌ Translation failed: {e}")
                exit_code = EXIT_FAILURE
                status = 'translation_failed'
            else:
                if translation is not None:
                    job.set_translation_metrics(language.code, translation)
                    print(f"✅ Translation complete: {len(translation):,} characters")
            finally:
                job.end_timer('translation')

        if not args.no_export:
            output_dir = args.output_dir or app_config.output_dir
            try:
                paths = export_results(session.result, output_dir)
            except ExportError as e:
                job.add_error(str(e))
                job.finalize('failed')
                print(f"❌ {e}")
                return EXIT_FAILURE
            for path in paths.values():
                print(f"📄 Saved: {path}")

        job.finalize(status)
        return exit_code

    finally:
        unsubscribe()
        if owns_client:
            await client.aclose()


def main(argv: Optional[List[str]] = None):
    """Main entry point with argument parsing"""

    args = build_parser().parse_args(argv)
    configure_logging(debug=args.debug or config.debug)

    if config.debug:
        print(f"🔧 Debug mode enabled")
        print(f"🌍 Backend: {config.service.base_url}")
        print()

    try:
        exit_code = asyncio.run(run_cli(args))
    except KeyboardInterrupt:
        logger.warning("Process interrupted by user")
        exit_code = EXIT_FAILURE

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
