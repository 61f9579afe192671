"""Artifact delivery to a remote storage webhook (e.g. a Google Apps Script)."""

import base64
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import requests
import structlog

from ..exceptions import DeliveryError

logger = structlog.get_logger(__name__)


def build_payload(file_path: Path, metadata: dict[str, Any] | None, origin: str) -> dict[str, Any]:
    """JSON body for the webhook: file content base64-encoded plus metadata."""
    return {
        "fileName": file_path.name,
        "fileExtension": file_path.suffix.lstrip("."),
        "fileContent": base64.b64encode(file_path.read_bytes()).decode("ascii"),
        "metadata": {
            **(metadata or {}),
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "origin": origin,
        },
    }


def send_file_to_webhook(
    file_path: Path,
    webhook_url: str,
    metadata: dict[str, Any] | None = None,
    origin: str = "media-downloader-app",
    timeout: float = 60.0,
) -> Any:
    """
    Send a file to the storage webhook.

    Args:
        file_path: Artifact to send
        webhook_url: Endpoint accepting the JSON payload
        metadata: Extra fields such as title, duration, source
        origin: Tag identifying this application
        timeout: HTTP timeout in seconds

    Returns:
        The webhook's JSON response (or its text if it is not JSON)

    Raises:
        DeliveryError: On a missing URL, unreadable file, transport error
            or non-2xx response
    """
    if not webhook_url:
        raise DeliveryError("Webhook URL is required")

    try:
        payload = build_payload(Path(file_path), metadata, origin)
    except OSError as e:
        raise DeliveryError(f"Failed to read {file_path}: {e}") from e

    try:
        response = requests.post(webhook_url, json=payload, timeout=timeout)
    except requests.RequestException as e:
        raise DeliveryError(f"Failed to send file to webhook: {e}") from e

    if not 200 <= response.status_code < 300:
        raise DeliveryError(f"Webhook request failed with status {response.status_code}")

    logger.info("File sent to webhook", file=payload["fileName"])
    try:
        return response.json()
    except ValueError:
        return response.text


class WebhookDelivery:
    """ArtifactDelivery posting files to a configured webhook."""

    def __init__(self, webhook_url: str, origin: str = "media-downloader-app", timeout: float = 60.0):
        self.webhook_url = webhook_url
        self.origin = origin
        self.timeout = timeout

    def deliver(self, file_path: Path, metadata: dict[str, Any]) -> Any:
        return send_file_to_webhook(
            file_path,
            self.webhook_url,
            metadata,
            origin=self.origin,
            timeout=self.timeout,
        )
