"""Media Processing Service - Core business logic."""

from dataclasses import dataclass
from pathlib import Path
from typing import Callable

import structlog

from .config import Settings
from .delivery.webhook import WebhookDelivery
from .exceptions import DeliveryError, InvalidMediaTypeError
from .ingestion.downloader import YtDlpExtractor
from .ingestion.formats import select_format
from .interfaces import (
    ArtifactDelivery,
    ArtifactKind,
    MediaExtractor,
    MediaInfo,
    MediaType,
    SpeechToText,
)
from .storage.media import (
    build_file_stem,
    ensure_output_dir,
    get_audio_path,
    get_video_path,
)
from .transcript.pipeline import ExtractionState, TextExtractionPipeline
from .transcript.provider import get_provider

logger = structlog.get_logger(__name__)

VIDEO_MESSAGE = "Video downloaded successfully. Click to download."
AUDIO_MESSAGE = "Audio extracted successfully. Click to download."
TRANSCRIBED_MESSAGE = "Audio transcribed successfully. Click to download the document."
SUBTITLES_MESSAGE = "Subtitles converted successfully. Click to download the document."
DIRECT_VIDEO_MESSAGE = "Video processed successfully. Click to download."
DIRECT_AUDIO_MESSAGE = "Audio processed successfully. Click to download."


@dataclass(frozen=True)
class ProcessingResult:
    """Result of processing one media request."""

    output_artifact_path: str
    artifact_kind: ArtifactKind
    human_message: str
    media_info: MediaInfo
    file_url: str
    extraction_source: ExtractionState | None = None
    delivered: bool = False


def parse_media_type(value: MediaType | str) -> MediaType:
    """Validate a requested output type."""
    if isinstance(value, MediaType):
        return value
    try:
        return MediaType(value)
    except ValueError:
        raise InvalidMediaTypeError(value) from None


class MediaProcessingService:
    """Service layer turning (url, type) into a downloadable artifact."""

    def __init__(
        self,
        settings: Settings,
        extractor: MediaExtractor | None = None,
        transcriber: SpeechToText | None = None,
        delivery: ArtifactDelivery | None = None,
    ):
        self.settings = settings
        self.extractor = extractor or YtDlpExtractor(
            binary=settings.ytdlp_binary,
            subtitle_language=settings.subtitle_language,
        )
        self.transcriber = transcriber or get_provider(settings)
        if delivery is None and settings.webhook_configured:
            delivery = WebhookDelivery(
                settings.webhook_url,
                origin=settings.delivery_origin,
                timeout=settings.webhook_timeout,
            )
        self.delivery = delivery

    @property
    def output_dir(self) -> Path:
        return self.settings.output_directory

    def process(
        self,
        url: str,
        media_type: MediaType | str,
        on_progress: Callable[[str], None] | None = None,
    ) -> ProcessingResult:
        """
        Full media processing pipeline.

        Args:
            url: Source media URL
            media_type: "video", "audio" or "text"
            on_progress: Optional callback for progress updates

        Returns:
            ProcessingResult describing the produced artifact

        Raises:
            InvalidMediaTypeError: For an unknown type, before any I/O
            MediaFetcherError: Any other failure, with a user-facing message
        """

        def progress(msg: str) -> None:
            if on_progress:
                on_progress(msg)

        media_type = parse_media_type(media_type)
        log = logger.bind(url=url, media_type=media_type.value)

        # Step 1: Resolve metadata
        progress("Getting media info...")
        info = self.extractor.get_info(url)
        stem = build_file_stem(
            info.title,
            url,
            media_type.value,
            unique=self.settings.unique_file_stems,
        )
        log.info("Processing media", title=info.title, stem=stem)

        # Step 2: Produce the artifact
        if media_type is MediaType.TEXT:
            return self._process_text(url, info, stem, progress)

        if self.settings.link_mode == "direct":
            return self._link_direct(info, media_type)

        ensure_output_dir(self.output_dir)
        if media_type is MediaType.VIDEO:
            progress("Downloading video...")
            path = self.extractor.download_video(url, get_video_path(self.output_dir, stem))
            return self._result(path, ArtifactKind.VIDEO, VIDEO_MESSAGE, info)

        progress("Extracting audio...")
        path = self.extractor.download_audio(url, get_audio_path(self.output_dir, stem))
        return self._result(path, ArtifactKind.AUDIO, AUDIO_MESSAGE, info)

    def _process_text(
        self,
        url: str,
        info: MediaInfo,
        stem: str,
        progress: Callable[[str], None],
    ) -> ProcessingResult:
        progress("Extracting text...")
        pipeline = TextExtractionPipeline(self.extractor, self.transcriber, self.output_dir)
        extraction = pipeline.run(url, info, stem)

        delivered = False
        if self.delivery is not None:
            progress("Delivering document...")
            delivered = self._deliver(extraction.document_path, info, url)

        message = (
            TRANSCRIBED_MESSAGE
            if extraction.source is ExtractionState.TRANSCRIBE
            else SUBTITLES_MESSAGE
        )
        return self._result(
            extraction.document_path,
            ArtifactKind.DOCUMENT,
            message,
            info,
            extraction_source=extraction.source,
            delivered=delivered,
        )

    def _link_direct(self, info: MediaInfo, media_type: MediaType) -> ProcessingResult:
        """Hand out the source's own URL for the best matching encoding."""
        want_video = media_type is MediaType.VIDEO
        fmt = select_format(info.formats, want_video=want_video)
        logger.info("Selected format", format_id=fmt.format_id, ext=fmt.ext)
        return ProcessingResult(
            output_artifact_path=fmt.download_url,
            artifact_kind=ArtifactKind.VIDEO if want_video else ArtifactKind.AUDIO,
            human_message=DIRECT_VIDEO_MESSAGE if want_video else DIRECT_AUDIO_MESSAGE,
            media_info=info,
            file_url=fmt.download_url,
        )

    def _deliver(self, path: Path, info: MediaInfo, url: str) -> bool:
        """Ship the document to the webhook; failures never fail the request."""
        metadata = {
            "title": info.title,
            "duration": info.duration_seconds,
            "source": url,
        }
        try:
            self.delivery.deliver(path, metadata)
        except DeliveryError as e:
            logger.warning("Artifact delivery failed", path=str(path), error=str(e))
            return False
        logger.info("Artifact delivered", file=path.name)
        return True

    def _result(
        self,
        path: Path,
        kind: ArtifactKind,
        message: str,
        info: MediaInfo,
        **extra,
    ) -> ProcessingResult:
        return ProcessingResult(
            output_artifact_path=str(path.resolve()),
            artifact_kind=kind,
            human_message=message,
            media_info=info,
            file_url=self.settings.public_url(path.name),
            **extra,
        )
