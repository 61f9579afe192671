"""Configuration settings for media fetcher."""

import logging
import re
import sys
from functools import lru_cache
from pathlib import Path
from typing import Literal

import structlog
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_PLACEHOLDER = re.compile(r"^your_[a-z0-9_]*_here$", re.IGNORECASE)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Speech-to-text provider selection
    stt_provider: Literal["groq", "gemini"] = "groq"

    # Groq API
    groq_api_key: str = ""
    groq_whisper_model: str = "whisper-large-v3-turbo"

    # Gemini API
    gemini_api_key: str = ""
    gemini_model: str = "gemini-3-flash-preview"

    # Extraction tool
    ytdlp_binary: str = "yt-dlp"
    subtitle_language: str = "en"

    # Output
    output_dir: Path = Path("downloads")
    public_base_url: str = "http://localhost:3001"
    downloads_route: str = "/downloads"
    link_mode: Literal["download", "direct"] = "download"
    unique_file_stems: bool = False

    # Artifact delivery webhook
    webhook_url: str = ""
    webhook_timeout: float = 60.0
    delivery_origin: str = "media-downloader-app"

    # Server
    host: str = "0.0.0.0"
    port: int = 3001
    log_level: str = "INFO"

    @field_validator("groq_api_key", "gemini_api_key", "webhook_url", mode="before")
    @classmethod
    def _drop_placeholder(cls, value: object) -> object:
        """Treat `.env.example` style placeholders as unset."""
        if isinstance(value, str):
            value = value.strip()
            if _PLACEHOLDER.match(value):
                return ""
        return value

    @property
    def output_directory(self) -> Path:
        """Get absolute output directory path."""
        return self.output_dir.resolve()

    @property
    def stt_api_key(self) -> str:
        """API key of the selected speech-to-text provider."""
        if self.stt_provider == "gemini":
            return self.gemini_api_key
        return self.groq_api_key

    @property
    def speech_to_text_configured(self) -> bool:
        return bool(self.stt_api_key)

    @property
    def webhook_configured(self) -> bool:
        return bool(self.webhook_url)

    def public_url(self, filename: str) -> str:
        """Absolute URL under which an artifact in the output directory is served."""
        base = self.public_base_url.rstrip("/")
        route = "/" + self.downloads_route.strip("/")
        return f"{base}{route}/{filename}"


@lru_cache
def get_settings() -> Settings:
    """Settings loaded from the environment, cached for the process."""
    return Settings()


def configure_structlog(level: str = "INFO") -> None:
    """Initialize structlog with readable console output."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        stream=sys.stdout,
        force=True,
        format="%(message)s",
    )

    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="%H:%M:%S"),
            structlog.stdlib.add_log_level,
            structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty(), pad_event=20),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
