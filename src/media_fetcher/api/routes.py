"""FastAPI routes for the media fetcher API."""

from pathlib import Path
from typing import Callable

import structlog
from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from media_fetcher import __version__
from media_fetcher.api.schemas import (
    DeliverRequest,
    DeliverResponse,
    ErrorResponse,
    MediaInfoResponse,
    ProcessMediaRequest,
    ProcessMediaResponse,
)

from ..config import Settings, get_settings
from ..delivery.webhook import send_file_to_webhook
from ..exceptions import DeliveryError, MediaFetcherError
from ..service import MediaProcessingService, ProcessingResult
from ..storage.media import ensure_output_dir

logger = structlog.get_logger(__name__)

router = APIRouter()


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(message=message).model_dump(by_alias=True),
    )


def to_response(result: ProcessingResult) -> ProcessMediaResponse:
    return ProcessMediaResponse(
        message=result.human_message,
        file_url=result.file_url,
        media_info=MediaInfoResponse(
            title=result.media_info.title,
            duration=result.media_info.duration_display,
            thumbnail=result.media_info.thumbnail_url,
        ),
    )


@router.get("/api")
def root():
    """API root endpoint."""
    return {"message": "Media Fetcher API", "version": __version__}


@router.post("/api/process-media", response_model=ProcessMediaResponse)
def process_media(payload: ProcessMediaRequest, request: Request):
    """
    Download or transcribe a media URL.

    Runs the whole pipeline synchronously; FastAPI executes plain `def`
    endpoints on its threadpool so requests do not block each other.
    """
    if not payload.url or not payload.type:
        return _error(400, "Missing required fields")

    service: MediaProcessingService = request.app.state.service_factory()

    try:
        result = service.process(payload.url, payload.type)
    except MediaFetcherError as e:
        logger.warning("Processing media failed", url=payload.url, error=str(e))
        return _error(400, str(e))
    except Exception as e:
        logger.exception("Unexpected error processing media", url=payload.url)
        return _error(500, str(e) or "Failed to process media")

    return to_response(result)


@router.post("/api/webhook/google-drive", response_model=DeliverResponse)
def deliver_file(payload: DeliverRequest, request: Request):
    """Send an already produced artifact to the storage webhook."""
    settings: Settings = request.app.state.settings

    if not payload.file_path:
        return _error(400, "Missing file path")

    if not settings.webhook_configured:
        return _error(400, "Webhook URL not configured")

    output_dir = settings.output_directory
    full_path = (output_dir / Path(payload.file_path).name).resolve()
    if not full_path.is_file():
        return _error(404, "File not found")

    try:
        result = send_file_to_webhook(
            full_path,
            settings.webhook_url,
            payload.metadata,
            origin=settings.delivery_origin,
            timeout=settings.webhook_timeout,
        )
    except DeliveryError as e:
        logger.error("Webhook delivery failed", file=full_path.name, error=str(e))
        return _error(500, str(e))

    return DeliverResponse(message="File sent to webhook successfully", result=result)


def create_app(
    settings: Settings | None = None,
    service_factory: Callable[[], MediaProcessingService] | None = None,
) -> FastAPI:
    """Build the API application.

    Args:
        settings: Settings to use; read from the environment when omitted
        service_factory: Builds a service per request (tests inject fakes here)
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Media Fetcher API",
        description="Download video, audio or transcripts from media URLs",
        version=__version__,
    )
    app.state.settings = settings
    app.state.service_factory = service_factory or (lambda: MediaProcessingService(settings))

    app.include_router(router)
    app.mount(
        "/" + settings.downloads_route.strip("/"),
        StaticFiles(directory=ensure_output_dir(settings.output_directory)),
        name="downloads",
    )
    return app
