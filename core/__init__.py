"""
Core business logic modules for YouTube Transcriptor

This package contains the core functionality modules:
- languages.py: supported translation targets
- segments.py: raw transcript text → timestamped segments
- api.py: shared HTTP client and error mapping
- transcribe.py: YouTube URL → raw transcript
- summarize.py: raw transcript → summary
- translate.py: transcript → translation (on demand)
- session.py: session state observed by the front end
- pipeline.py: orchestrates transcribe → segment → summarize → assemble
- export.py: plain-text downloads
"""
