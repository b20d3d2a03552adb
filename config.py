"""
Configuration management for YouTube Transcriptor

Using pydantic-settings for type-safe configuration with environment variable support.
All settings can be overridden via environment variables with the YTT_ prefix.
"""

from typing import Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.languages import DEFAULT_LANGUAGE, Language


class ServiceConfig(BaseSettings):
    """Configuration for the remote transcription backend"""

    model_config = SettingsConfigDict(
        env_prefix='YTT_SERVICE_',
        env_file='.env',
        env_file_encoding='utf-8',
        extra='ignore'
    )

    base_url: str = Field(
        default="https://transcriptor-backend-3-dc5w.onrender.com",
        description="Base URL of the transcription/summarization/translation backend"
    )

    transcribe_path: str = Field(
        default="/transcribe_test",
        description="Transcription endpoint (GET, url as query parameter)"
    )

    summarize_path: str = Field(
        default="/summarize/",
        description="Summarization endpoint (POST, form encoded)"
    )

    translate_path: str = Field(
        default="/translate/",
        description="Translation endpoint (POST, form encoded)"
    )

    # The hosted backend cold-starts; transcription of long videos is slow
    timeout: float = Field(
        default=300,
        description="Per-request timeout in seconds",
        ge=5,
        le=1800
    )

    connect_timeout: float = Field(
        default=10,
        description="Connection timeout in seconds",
        ge=1,
        le=120
    )

    @field_validator('base_url')
    @classmethod
    def validate_base_url(cls, v):
        if not v.startswith(('http://', 'https://')):
            raise ValueError("Service base URL must start with http:// or https://")
        return v.rstrip('/')


class SummaryConfig(BaseSettings):
    """Fixed mode flags sent with every summarization request"""

    model_config = SettingsConfigDict(
        env_prefix='YTT_SUMMARY_',
        env_file='.env',
        env_file_encoding='utf-8',
        extra='ignore'
    )

    manual: bool = Field(
        default=True,
        description="Include the extractive pass (false = abstractive only)"
    )

    model_choice: int = Field(
        default=1,
        description="Summarization model: 0 = BART, 1 = T5"
    )

    @field_validator('model_choice')
    @classmethod
    def validate_model_choice(cls, v):
        valid_choices = [0, 1]
        if v not in valid_choices:
            raise ValueError(f"Model choice must be one of {valid_choices}")
        return v


class AppConfig(BaseSettings):
    """Main application configuration"""

    model_config = SettingsConfigDict(
        env_prefix='YTT_',
        env_file='.env',
        env_file_encoding='utf-8',
        extra='ignore'  # Ignore unknown environment variables
    )

    # Sub-configurations
    service: ServiceConfig = Field(default_factory=ServiceConfig)
    summary: SummaryConfig = Field(default_factory=SummaryConfig)

    # Global settings
    debug: bool = Field(
        default=False,
        description="Enable debug logging"
    )

    default_language: str = Field(
        default=DEFAULT_LANGUAGE.code,
        description="Initially selected translation language code"
    )

    output_dir: str = Field(
        default="output",
        description="Directory for transcription/summary/translation exports"
    )

    jobs_csv: Optional[str] = Field(
        default="job_summary.csv",
        description="CSV run ledger path (empty to disable)"
    )

    @field_validator('default_language')
    @classmethod
    def validate_default_language(cls, v):
        # Raises ValueError for codes outside the catalogue
        return Language.from_code(v).code


# Global configuration instance
config = AppConfig()
