"""Pytest configuration and fixtures for the YouTube Transcriptor tests."""

import asyncio
from typing import Any, Callable, Dict, List, Optional, Union
from urllib.parse import parse_qs

import httpx
import pytest

from config import ServiceConfig, SummaryConfig
from core.session import SessionState

BASE_URL = "http://backend.test"
VIDEO_URL = "https://www.youtube.com/watch?v=dQw4w9WgXcQ"
RAW_TRANSCRIPT = "Hello world. This is a test. Final sentence"

Reply = Union[httpx.Response, Callable[[httpx.Request], Any]]


class FakeBackend:
    """In-memory stand-in for the transcription backend.

    Each endpoint gets a reply (a response, or a callable producing one,
    possibly async). Every request is recorded for later assertions.
    """

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.replies: Dict[str, Reply] = {
            "/transcribe_test": httpx.Response(200, json={
                "transcript": RAW_TRANSCRIPT,
                "title": "Never Gonna Give You Up",
                "duration": 213,
            }),
            "/summarize/": httpx.Response(200, json={"summary": "A song about commitment."}),
            "/translate/": httpx.Response(200, json={"translation": "Bonjour le monde."}),
        }

    def on(self, path: str, reply: Reply):
        self.replies[path] = reply

    def calls(self, path: str) -> List[httpx.Request]:
        return [request for request in self.requests if request.url.path == path]

    async def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        reply = self.replies.get(request.url.path)
        if reply is None:
            return httpx.Response(404, json={"detail": "Not Found"})
        if callable(reply):
            reply = reply(request)
            if asyncio.iscoroutine(reply):
                reply = await reply
        return reply

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=BASE_URL, transport=self.transport)


def form_fields(request: httpx.Request) -> Dict[str, str]:
    """Decode a form-encoded request body into single values"""
    parsed = parse_qs(request.content.decode("utf-8"), keep_blank_values=True)
    return {key: values[0] for key, values in parsed.items()}


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def service_config():
    return ServiceConfig(base_url=BASE_URL)


@pytest.fixture
def summary_config():
    return SummaryConfig()


@pytest.fixture
def session():
    return SessionState()


@pytest.fixture
def recorded_states(session):
    """Every distinct ProcessingState the session publishes, in order"""
    states = []

    def record(s):
        if not states or states[-1] != s.processing:
            states.append(s.processing)

    session.subscribe(record)
    return states


def run(coro):
    """Drive a coroutine to completion from a synchronous test"""
    return asyncio.run(coro)


def make_result(session: SessionState, raw: Optional[str] = None):
    """Commit a minimal result set directly, bypassing the pipeline"""
    from core.segments import build_segments
    from core.session import ResultSet

    raw = RAW_TRANSCRIPT if raw is None else raw
    result = ResultSet(
        video_title="Some Video",
        video_duration="3:33",
        transcription=build_segments(raw),
        summary="A summary.",
        translation=raw,
    )
    session.commit_result(result)
    return result
