"""Shared test configuration and fixtures for all tests."""

from pathlib import Path

import pytest

from media_fetcher.config import Settings
from media_fetcher.exceptions import DeliveryError, DownloadError, SpeechToTextError
from media_fetcher.interfaces import FormatDescriptor, FormatQuality, MediaInfo

SAMPLE_URL = "https://www.youtube.com/watch?v=abc123"


class FakeExtractor:
    """In-memory MediaExtractor recording every call."""

    def __init__(self, info: MediaInfo, subtitles: dict[bool, str] | None = None):
        self.info = info
        # Keyed by the `auto` flag; a missing key means no subtitles of that kind
        self.subtitles = subtitles or {}
        self.audio_error: Exception | None = None
        self.calls: list[tuple] = []

    def get_info(self, url):
        self.calls.append(("info", url))
        return self.info

    def download_video(self, url, output_path):
        self.calls.append(("video", url))
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(b"video-bytes")
        return output_path

    def download_audio(self, url, output_path):
        self.calls.append(("audio", url))
        if self.audio_error is not None:
            raise self.audio_error
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(b"audio-bytes")
        return output_path

    def download_subtitles(self, url, output_template, auto):
        self.calls.append(("subtitles", auto))
        content = self.subtitles.get(auto)
        if content is not None:
            path = output_template.parent / f"{output_template.stem}.en.vtt"
            path.write_text(content, encoding="utf-8")


class FakeTranscriber:
    """SpeechToText returning canned text or raising a canned error."""

    def __init__(self, text: str = "Hello from the transcriber", configured: bool = True):
        self.text = text
        self.is_configured = configured
        self.error: Exception | None = None
        self.calls: list[Path] = []

    def transcribe(self, audio_path):
        self.calls.append(audio_path)
        if self.error is not None:
            raise self.error
        return self.text


class FakeDelivery:
    """ArtifactDelivery recording delivered files."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.delivered: list[tuple[Path, dict]] = []

    def deliver(self, file_path, metadata):
        if self.fail:
            raise DeliveryError("Webhook request failed with status 500")
        self.delivered.append((file_path, metadata))
        return {"status": "ok"}


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings isolated from the environment and any local .env file."""
    return Settings(
        _env_file=None,
        output_dir=tmp_path / "downloads",
        public_base_url="http://testserver",
        groq_api_key="",
        gemini_api_key="",
        webhook_url="",
        link_mode="download",
        unique_file_stems=False,
    )


@pytest.fixture
def sample_formats() -> tuple[FormatDescriptor, ...]:
    return (
        FormatDescriptor("140", False, True, FormatQuality.BEST, "https://cdn.example/140.m4a", "m4a"),
        FormatDescriptor("249", False, True, FormatQuality.OTHER, "https://cdn.example/249.webm", "webm"),
        FormatDescriptor("137", True, False, FormatQuality.BEST, "https://cdn.example/137.mp4", "mp4"),
        FormatDescriptor("18", True, True, FormatQuality.BEST, "https://cdn.example/18.mp4", "mp4"),
        FormatDescriptor("22", True, True, FormatQuality.OTHER, "https://cdn.example/22.mp4", "mp4"),
    )


@pytest.fixture
def media_info(sample_formats) -> MediaInfo:
    return MediaInfo(
        title="My Video! #1",
        duration_seconds=212.0,
        webpage_url=SAMPLE_URL,
        thumbnail_url="https://i.ytimg.com/vi/abc123/hqdefault.jpg",
        formats=sample_formats,
    )


@pytest.fixture
def sample_vtt_content() -> str:
    """Sample VTT content for testing."""
    return """WEBVTT
Kind: captions
Language: en

1
00:00:00.000 --> 00:00:05.000
<v John>Hello everyone, let's start.

2
00:00:05.000 --> 00:00:10.500 align:start position:0%
Thanks John &amp; welcome.

3
00:00:10.500 --> 00:00:15.000
<00:00:11.000><c>Great</c><00:00:12.000><c> to be here</c>
"""


@pytest.fixture
def extractor(media_info) -> FakeExtractor:
    return FakeExtractor(media_info)


@pytest.fixture
def transcriber() -> FakeTranscriber:
    return FakeTranscriber()


@pytest.fixture
def unconfigured_transcriber() -> FakeTranscriber:
    transcriber = FakeTranscriber(configured=False)
    transcriber.error = SpeechToTextError("should not be called")
    return transcriber


@pytest.fixture
def audio_failure() -> DownloadError:
    return DownloadError("Failed to extract audio: HTTP Error 403")
