"""Tests for the shared backend request helper and the per-stage clients."""

import httpx
import pytest

from conftest import BASE_URL, VIDEO_URL, run
from config import ServiceConfig, SummaryConfig
from core.api import ServiceError, create_http_client, request_json
from core.summarize import SUMMARY_PLACEHOLDER, SummarizationError, build_summary_form, fetch_summary
from core.transcribe import TranscriptionError, fetch_transcript


class StageError(ServiceError):
    pass


def call(backend, method="GET", path="/thing", **kwargs):
    async def scenario():
        async with backend.client() as client:
            return await request_json(client, method, path, StageError, "load thing", **kwargs)
    return run(scenario())


class TestRequestJson:
    """Error mapping in request_json."""

    def test_returns_decoded_object(self, backend):
        backend.on("/thing", httpx.Response(200, json={"ok": True}))

        assert call(backend) == {"ok": True}

    def test_timeout(self, backend):
        def slow(request):
            raise httpx.ReadTimeout("read timed out", request=request)

        backend.on("/thing", slow)

        with pytest.raises(StageError, match="request timed out") as exc_info:
            call(backend)
        assert exc_info.value.status_code is None

    def test_connection_error(self, backend):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        backend.on("/thing", refuse)

        with pytest.raises(StageError, match="connection refused"):
            call(backend)

    def test_error_status(self, backend):
        backend.on("/thing", httpx.Response(500, text="boom"))

        with pytest.raises(StageError, match=r"HTTP 500") as exc_info:
            call(backend)
        assert exc_info.value.status_code == 500

    def test_invalid_json(self, backend):
        backend.on("/thing", httpx.Response(200, text="<html>not json</html>"))

        with pytest.raises(StageError, match="invalid JSON"):
            call(backend)

    def test_non_object_payload(self, backend):
        backend.on("/thing", httpx.Response(200, json=["a", "b"]))

        with pytest.raises(StageError, match="unexpected response payload"):
            call(backend)


class TestHttpClient:
    """Client construction from configuration."""

    def test_client_uses_configured_base_url_and_timeouts(self):
        cfg = ServiceConfig(base_url="http://example.test/", timeout=60, connect_timeout=5)

        async def scenario():
            async with create_http_client(cfg) as client:
                return client.base_url, client.timeout

        base_url, timeout = run(scenario())

        assert str(base_url).rstrip("/") == "http://example.test"
        assert timeout.read == 60
        assert timeout.connect == 5

    def test_client_accepts_custom_transport(self, backend):
        cfg = ServiceConfig(base_url=BASE_URL)

        async def scenario():
            async with create_http_client(cfg, transport=backend.transport) as client:
                return await fetch_transcript(client, VIDEO_URL, cfg)

        assert run(scenario()).title == "Never Gonna Give You Up"


class TestStageClients:
    """Payload validation for transcription and summarization."""

    def test_blank_title_treated_as_missing(self, backend, service_config):
        backend.on("/transcribe_test", httpx.Response(200, json={"transcript": "x", "title": "  "}))

        async def scenario():
            async with backend.client() as client:
                return await fetch_transcript(client, VIDEO_URL, service_config)

        assert run(scenario()).title is None

    def test_malformed_transcript_payload(self, backend, service_config):
        backend.on("/transcribe_test", httpx.Response(200, json={"transcript": "x", "duration": "long"}))

        async def scenario():
            async with backend.client() as client:
                return await fetch_transcript(client, VIDEO_URL, service_config)

        with pytest.raises(TranscriptionError, match="malformed response"):
            run(scenario())

    def test_empty_summary_uses_placeholder(self, backend, service_config):
        backend.on("/summarize/", httpx.Response(200, json={"summary": ""}))

        async def scenario():
            async with backend.client() as client:
                return await fetch_summary(client, "text", SummaryConfig(), service_config)

        assert run(scenario()).summary_or_placeholder == SUMMARY_PLACEHOLDER

    def test_summary_error_status(self, backend, service_config):
        backend.on("/summarize/", httpx.Response(422))

        async def scenario():
            async with backend.client() as client:
                return await fetch_summary(client, "text", SummaryConfig(), service_config)

        with pytest.raises(SummarizationError) as exc_info:
            run(scenario())
        assert exc_info.value.status_code == 422

    def test_summary_form_flags(self):
        form = build_summary_form("Some text", SummaryConfig(manual=False, model_choice=0))

        assert form == {"text": "Some text", "manual": "false", "model_choice": "0"}
