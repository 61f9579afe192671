"""Local artifact file management."""

import hashlib
import re
from datetime import datetime
from pathlib import Path

# Sentence punctuation closing a word ("Hello, world!") is dropped rather than
# turned into an underscore.
_TRAILING_PUNCTUATION = re.compile(r"[!?.,;:]+(?=\s|$)")
_NON_ALNUM = re.compile(r"[^a-z0-9]", re.IGNORECASE)

ARTIFACT_EXTENSIONS = (".mp4", ".mp3", ".txt", ".vtt", ".docx")


def sanitize_title(title: str) -> str:
    """Derive a filesystem-safe, lower-case key from a media title.

    >>> sanitize_title("My Video! #1")
    'my_video__1'
    """
    stripped = _TRAILING_PUNCTUATION.sub("", title.strip())
    return _NON_ALNUM.sub("_", stripped).lower()


def build_file_stem(
    title: str,
    url: str,
    media_type: str,
    resolved_at: datetime | None = None,
    unique: bool = False,
) -> str:
    """Filename stem shared by every artifact of one request."""
    stem = sanitize_title(title)
    if not unique:
        return stem

    resolved_at = resolved_at or datetime.now()
    key = f"{url}|{media_type}|{resolved_at.isoformat()}"
    return f"{stem}_{hashlib.sha256(key.encode()).hexdigest()[:10]}"


def ensure_output_dir(output_dir: Path) -> Path:
    """Create and return the output directory."""
    output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir


def get_artifact_path(output_dir: Path, stem: str, extension: str) -> Path:
    """Get path to an artifact, e.g. `<output_dir>/<stem>.mp4`."""
    if not extension.startswith("."):
        extension = f".{extension}"
    return output_dir / f"{stem}{extension}"


def get_video_path(output_dir: Path, stem: str) -> Path:
    return get_artifact_path(output_dir, stem, ".mp4")


def get_audio_path(output_dir: Path, stem: str) -> Path:
    return get_artifact_path(output_dir, stem, ".mp3")


def get_text_path(output_dir: Path, stem: str) -> Path:
    return get_artifact_path(output_dir, stem, ".txt")


def get_caption_path(output_dir: Path, stem: str) -> Path:
    return get_artifact_path(output_dir, stem, ".vtt")


def get_document_path(output_dir: Path, stem: str) -> Path:
    return get_artifact_path(output_dir, stem, ".docx")


def list_artifacts(output_dir: Path, stem: str) -> list[Path]:
    """List existing artifacts for a stem."""
    return [
        path
        for path in (get_artifact_path(output_dir, stem, ext) for ext in ARTIFACT_EXTENSIONS)
        if path.exists()
    ]
