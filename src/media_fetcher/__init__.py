"""Media Fetcher - download video, audio or transcripts from media URLs."""

__version__ = "0.1.0"

from .interfaces import (
    ArtifactKind,
    FormatDescriptor,
    MediaExtractor,
    MediaInfo,
    MediaType,
    SpeechToText,
    TranscriptCue,
)
from .service import MediaProcessingService, ProcessingResult

__all__ = [
    "ArtifactKind",
    "FormatDescriptor",
    "MediaExtractor",
    "MediaInfo",
    "MediaType",
    "SpeechToText",
    "TranscriptCue",
    "MediaProcessingService",
    "ProcessingResult",
]
