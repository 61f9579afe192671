"""Transcript module: caption parsing, document rendering, speech-to-text."""

from .captions import format_time, parse_captions, write_caption_file
from .document import read_transcript_document, render_transcript, write_transcript_document
from .pipeline import ExtractionState, TextExtractionPipeline, TextExtractionResult
from .provider import SpeechToTextProvider, get_provider

__all__ = [
    "format_time",
    "parse_captions",
    "write_caption_file",
    "read_transcript_document",
    "render_transcript",
    "write_transcript_document",
    "ExtractionState",
    "TextExtractionPipeline",
    "TextExtractionResult",
    "SpeechToTextProvider",
    "get_provider",
]
