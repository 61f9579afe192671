"""Text extraction with a speech-to-text first, subtitles second fallback chain.

The chain is a small state machine:

    TRANSCRIBE -> MANUAL_SUBTITLES -> AUTO_SUBTITLES -> FAILED

Each state either produces cues (success, remaining states are skipped) or
yields nothing / a recoverable error, in which case the transition table
decides the next state. Reaching FAILED raises TranscriptionUnavailableError.
"""

import tempfile
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable

import structlog

from ..exceptions import (
    DownloadError,
    MissingCredentialError,
    SpeechToTextError,
    TranscriptionUnavailableError,
)
from ..ingestion.subtitles import find_subtitle_files
from ..interfaces import MediaExtractor, MediaInfo, SpeechToText, TranscriptCue
from ..storage.media import (
    ensure_output_dir,
    get_caption_path,
    get_document_path,
    get_text_path,
)
from .captions import (
    cues_to_text,
    parse_captions,
    strip_control_chars,
    write_caption_file,
)
from .document import write_transcript_document

logger = structlog.get_logger(__name__)


class ExtractionState(str, Enum):
    TRANSCRIBE = "transcribe"
    MANUAL_SUBTITLES = "manual_subtitles"
    AUTO_SUBTITLES = "auto_subtitles"
    FAILED = "failed"


TRANSITIONS: dict[ExtractionState, ExtractionState] = {
    ExtractionState.TRANSCRIBE: ExtractionState.MANUAL_SUBTITLES,
    ExtractionState.MANUAL_SUBTITLES: ExtractionState.AUTO_SUBTITLES,
    ExtractionState.AUTO_SUBTITLES: ExtractionState.FAILED,
}

# Errors that move the chain to its next state instead of aborting it.
# MissingCredentialError is a SpeechToTextError.
RECOVERABLE_ERRORS = (SpeechToTextError, DownloadError)

UNAVAILABLE_MESSAGE = (
    "No subtitles found and speech-to-text transcription failed. "
    "Please set a speech-to-text API key (GROQ_API_KEY or GEMINI_API_KEY) "
    "in the .env file or use a video with subtitles."
)


@dataclass(frozen=True)
class StageOutput:
    """Cues produced by one stage, with the files it persisted."""

    cues: tuple[TranscriptCue, ...]
    text_path: Path
    caption_path: Path


@dataclass(frozen=True)
class TextExtractionResult:
    """Result of a successful text extraction."""

    document_path: Path
    text_path: Path
    caption_path: Path
    cues: tuple[TranscriptCue, ...]
    source: ExtractionState


class TextExtractionPipeline:
    """Runs the text extraction fallback chain for one media item."""

    def __init__(
        self,
        extractor: MediaExtractor,
        transcriber: SpeechToText,
        output_dir: Path,
    ):
        self.extractor = extractor
        self.transcriber = transcriber
        self.output_dir = output_dir
        self._handlers: dict[
            ExtractionState, Callable[[str, MediaInfo, str], StageOutput | None]
        ] = {
            ExtractionState.TRANSCRIBE: self.attempt_transcription,
            ExtractionState.MANUAL_SUBTITLES: self.attempt_manual_subtitles,
            ExtractionState.AUTO_SUBTITLES: self.attempt_auto_subtitles,
        }

    def run(self, url: str, info: MediaInfo, stem: str) -> TextExtractionResult:
        """Extract a transcript and render it to `<stem>.docx`.

        Raises:
            TranscriptionUnavailableError: If every stage came up empty
            CaptionParseError: If a downloaded caption file has no cues
        """
        ensure_output_dir(self.output_dir)
        state = ExtractionState.TRANSCRIBE

        while state is not ExtractionState.FAILED:
            output = self.run_stage(state, url, info, stem)
            if output is not None:
                return self._finish(output, info, stem, state)
            state = TRANSITIONS[state]

        logger.error("All text extraction methods failed", url=url)
        raise TranscriptionUnavailableError(UNAVAILABLE_MESSAGE)

    def run_stage(
        self, state: ExtractionState, url: str, info: MediaInfo, stem: str
    ) -> StageOutput | None:
        """Run a single stage; recoverable errors count as no output."""
        logger.info("Text extraction stage", stage=state.value, url=url)
        try:
            return self._handlers[state](url, info, stem)
        except RECOVERABLE_ERRORS as e:
            logger.warning("Text extraction stage failed", stage=state.value, error=str(e))
            return None

    def attempt_transcription(self, url: str, info: MediaInfo, stem: str) -> StageOutput:
        """Download audio to a temporary file and run speech-to-text on it."""
        if not self.transcriber.is_configured:
            raise MissingCredentialError("Speech-to-text API key is not configured")

        with tempfile.TemporaryDirectory(prefix="media-fetcher-") as tmp:
            audio_path = self.extractor.download_audio(url, Path(tmp) / f"{stem}.mp3")
            transcription = strip_control_chars(self.transcriber.transcribe(audio_path))

        # Plain transcripts carry no timing; one cue spans the whole media
        cue = TranscriptCue(0.0, info.duration_seconds, transcription)

        text_path = get_text_path(self.output_dir, stem)
        text_path.write_text(transcription, encoding="utf-8")
        caption_path = write_caption_file([cue], get_caption_path(self.output_dir, stem))

        return StageOutput(cues=(cue,), text_path=text_path, caption_path=caption_path)

    def attempt_manual_subtitles(self, url: str, info: MediaInfo, stem: str) -> StageOutput | None:
        return self._attempt_subtitles(url, stem, auto=False)

    def attempt_auto_subtitles(self, url: str, info: MediaInfo, stem: str) -> StageOutput | None:
        return self._attempt_subtitles(url, stem, auto=True)

    def _attempt_subtitles(self, url: str, stem: str, auto: bool) -> StageOutput | None:
        kind = "auto" if auto else "manual"

        # A scratch directory keeps leftovers of earlier runs out of the listing
        with tempfile.TemporaryDirectory(prefix="media-fetcher-subs-") as tmp:
            scratch = Path(tmp)
            self.extractor.download_subtitles(url, scratch / f"{stem}.vtt", auto=auto)

            subtitle_files = find_subtitle_files(scratch, stem)
            logger.info(
                "Subtitle lookup finished",
                kind=kind,
                files=[path.name for path in subtitle_files],
            )
            if not subtitle_files:
                return None

            content = subtitle_files[0].read_text(encoding="utf-8", errors="replace")

        cues = parse_captions(content)

        caption_path = get_caption_path(self.output_dir, stem)
        caption_path.write_text(content, encoding="utf-8")
        text_path = get_text_path(self.output_dir, stem)
        text_path.write_text(cues_to_text(cues), encoding="utf-8")

        return StageOutput(cues=tuple(cues), text_path=text_path, caption_path=caption_path)

    def _finish(
        self, output: StageOutput, info: MediaInfo, stem: str, state: ExtractionState
    ) -> TextExtractionResult:
        document_path = write_transcript_document(
            output.cues, info.title, get_document_path(self.output_dir, stem)
        )
        logger.info("Text extraction succeeded", source=state.value, cues=len(output.cues))
        return TextExtractionResult(
            document_path=document_path,
            text_path=output.text_path,
            caption_path=output.caption_path,
            cues=output.cues,
            source=state,
        )
