"""Data model and Protocols for dependency injection and testing."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Protocol


class MediaType(str, Enum):
    """Output type requested by the caller."""

    VIDEO = "video"
    AUDIO = "audio"
    TEXT = "text"


class ArtifactKind(str, Enum):
    VIDEO = "video"
    AUDIO = "audio"
    DOCUMENT = "document"


class FormatQuality(str, Enum):
    BEST = "best"
    OTHER = "other"


@dataclass(frozen=True)
class FormatDescriptor:
    """One available encoding of the source media."""

    format_id: str
    has_video: bool
    has_audio: bool
    quality: FormatQuality
    download_url: str
    ext: str | None = None


@dataclass(frozen=True)
class MediaInfo:
    """Media metadata resolved for a source URL."""

    title: str
    duration_seconds: float
    webpage_url: str
    thumbnail_url: str | None = None
    formats: tuple[FormatDescriptor, ...] = ()

    @property
    def duration_display(self) -> str:
        """Duration as shown to users, e.g. "212"."""
        if float(self.duration_seconds).is_integer():
            return str(int(self.duration_seconds))
        return str(self.duration_seconds)


@dataclass(frozen=True)
class TranscriptCue:
    """One timed caption unit."""

    start_seconds: float
    end_seconds: float
    text: str = ""

    def __post_init__(self):
        if self.end_seconds < self.start_seconds:
            raise ValueError(
                f"Cue ends before it starts: {self.start_seconds} > {self.end_seconds}"
            )


class MediaExtractor(Protocol):
    """Protocol for the external media extraction tool."""

    def get_info(self, url: str) -> MediaInfo:
        """Get media metadata without downloading."""
        ...

    def download_video(self, url: str, output_path: Path) -> Path:
        """Download best combined video+audio to output_path."""
        ...

    def download_audio(self, url: str, output_path: Path) -> Path:
        """Extract best audio as mp3 to output_path."""
        ...

    def download_subtitles(self, url: str, output_template: Path, auto: bool) -> None:
        """Write vtt subtitles next to output_template, manual or auto-generated."""
        ...


class SpeechToText(Protocol):
    """Protocol for speech-to-text services."""

    @property
    def is_configured(self) -> bool: ...

    def transcribe(self, audio_path: Path) -> str:
        """Transcribe an audio file and return plain text."""
        ...


class ArtifactDelivery(Protocol):
    """Protocol for shipping a finished artifact to remote storage."""

    def deliver(self, file_path: Path, metadata: dict[str, Any]) -> Any:
        ...
