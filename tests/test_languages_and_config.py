"""Tests for the language catalogue and configuration validation."""

import subprocess
import sys
from pathlib import Path

import pytest
from pydantic import ValidationError

from config import AppConfig, ServiceConfig, SummaryConfig
from core.languages import DEFAULT_LANGUAGE, Language
from core.session import SessionState


class TestLanguageCatalogue:
    """The catalogue is closed and keyed by code."""

    def test_catalogue_size_and_codes_are_unique(self):
        codes = Language.codes()

        assert len(codes) == 24
        assert len(set(codes)) == len(codes)

    def test_default_is_spanish(self):
        assert DEFAULT_LANGUAGE is Language.SPANISH
        assert SessionState().selected_language is Language.SPANISH

    @pytest.mark.parametrize("code,expected", [
        ("fr", Language.FRENCH),
        ("ZH", Language.CHINESE),
        (" no ", Language.NORWEGIAN),
    ])
    def test_from_code(self, code, expected):
        assert Language.from_code(code) is expected

    @pytest.mark.parametrize("code", ["xx", "", "english", None])
    def test_unknown_code_rejected(self, code):
        with pytest.raises(ValueError):
            Language.from_code(code)

    def test_label(self):
        assert Language.FRENCH.label == "🇫🇷 French"
        assert Language.FRENCH.display_name == "French"

    def test_session_rejects_raw_codes(self):
        with pytest.raises(TypeError):
            SessionState().select_language("fr")


class TestConfiguration:
    """pydantic-settings validation of the configuration tree."""

    def test_defaults(self):
        cfg = AppConfig()

        assert cfg.service.summarize_path == "/summarize/"
        assert cfg.summary.manual is True
        assert cfg.summary.model_choice == 1
        assert cfg.default_language == "es"

    def test_base_url_trailing_slash_removed(self):
        assert ServiceConfig(base_url="https://example.com/").base_url == "https://example.com"

    def test_base_url_requires_scheme(self):
        with pytest.raises(ValidationError):
            ServiceConfig(base_url="example.com")

    def test_timeout_bounds(self):
        with pytest.raises(ValidationError):
            ServiceConfig(timeout=1)

    def test_model_choice_restricted(self):
        with pytest.raises(ValidationError):
            SummaryConfig(model_choice=2)

    def test_default_language_validated(self):
        assert AppConfig(default_language="FR").default_language == "fr"
        with pytest.raises(ValidationError):
            AppConfig(default_language="klingon")

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("YTT_SERVICE_BASE_URL", "http://localhost:8000")
        monkeypatch.setenv("YTT_SUMMARY_MANUAL", "false")

        assert ServiceConfig().base_url == "http://localhost:8000"
        assert SummaryConfig().manual is False


def test_validators_import_without_deprecation_warnings():
    """Model modules load cleanly when pydantic deprecations are errors"""
    code = (
        "import warnings\n"
        "from pydantic.warnings import PydanticDeprecatedSince20\n"
        "warnings.simplefilter('error', PydanticDeprecatedSince20)\n"
        "import config, core.segments, core.summarize, core.transcribe\n"
    )
    completed = subprocess.run(
        [sys.executable, "-c", code],
        cwd=Path(__file__).resolve().parent.parent,
        capture_output=True,
        text=True,
    )

    assert completed.returncode == 0, completed.stderr
