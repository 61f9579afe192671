"""Media metadata and downloads using yt-dlp."""

import json
import subprocess
from pathlib import Path
from typing import Any

import structlog

from ..exceptions import DownloadError, MetadataFetchError
from ..interfaces import FormatDescriptor, FormatQuality, MediaInfo
from ..storage.media import sanitize_title

logger = structlog.get_logger(__name__)

VIDEO_FORMAT = "bestvideo[ext=mp4]+bestaudio[ext=m4a]/best[ext=mp4]/best"
AUDIO_FORMAT = "mp3"


def _describe(error: Exception) -> str:
    """Short human-readable reason for a failed yt-dlp invocation."""
    if isinstance(error, subprocess.CalledProcessError):
        stderr = (error.stderr or "").strip()
        if stderr:
            return stderr.splitlines()[-1]
        return f"yt-dlp exited with status {error.returncode}"
    return str(error)


def _output_template(output_path: Path) -> Path:
    """yt-dlp output template writing `<stem>.<ext>` next to output_path."""
    return output_path.parent / f"{output_path.stem}.%(ext)s"


def _run(args: list[str]) -> subprocess.CompletedProcess:
    return subprocess.run(args, capture_output=True, text=True, check=True)


def parse_format(data: dict[str, Any], chosen_ids: set[str]) -> FormatDescriptor:
    """Map one yt-dlp format entry to a FormatDescriptor."""
    format_id = str(data.get("format_id", ""))
    is_best = data.get("quality") == "best" or format_id in chosen_ids
    return FormatDescriptor(
        format_id=format_id,
        has_video=data.get("vcodec") not in (None, "none"),
        has_audio=data.get("acodec") not in (None, "none"),
        quality=FormatQuality.BEST if is_best else FormatQuality.OTHER,
        download_url=data.get("url", ""),
        ext=data.get("ext"),
    )


def parse_media_info(data: dict[str, Any], url: str) -> MediaInfo:
    """Build MediaInfo from yt-dlp's JSON metadata."""
    title = data.get("title")
    if not isinstance(title, str) or not sanitize_title(title):
        raise MetadataFetchError(f"Failed to get video info: no usable title for {url}")

    try:
        duration = max(float(data.get("duration") or 0), 0.0)
    except (TypeError, ValueError):
        duration = 0.0

    # yt-dlp reports the formats it would pick as e.g. "137+140"
    chosen_ids = {fid for fid in str(data.get("format_id") or "").split("+") if fid}
    formats = tuple(
        parse_format(f, chosen_ids)
        for f in data.get("formats") or []
        if isinstance(f, dict) and f.get("url")
    )

    return MediaInfo(
        title=title,
        duration_seconds=duration,
        webpage_url=data.get("webpage_url") or url,
        thumbnail_url=data.get("thumbnail"),
        formats=formats,
    )


def get_media_info(url: str, binary: str = "yt-dlp") -> MediaInfo:
    """Get media metadata without downloading."""
    logger.info("Fetching media info", url=url)
    try:
        result = _run([binary, "--dump-json", "--no-download", "--no-playlist", url])
    except (subprocess.CalledProcessError, OSError) as e:
        logger.error("Media info query failed", url=url, error=_describe(e))
        raise MetadataFetchError(f"Failed to get video info: {_describe(e)}") from e

    lines = result.stdout.strip().splitlines()
    if not lines:
        raise MetadataFetchError(f"Failed to get video info: empty response for {url}")

    try:
        data = json.loads(lines[0])
    except json.JSONDecodeError as e:
        raise MetadataFetchError(f"Failed to get video info: unparseable response ({e})") from e

    if not isinstance(data, dict):
        raise MetadataFetchError("Failed to get video info: unexpected response shape")

    info = parse_media_info(data, url)
    logger.info(
        "Media info resolved",
        title=info.title,
        duration=info.duration_seconds,
        formats=len(info.formats),
    )
    return info


def download_video(url: str, output_path: Path, binary: str = "yt-dlp") -> Path:
    """Download best combined video+audio as mp4."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    logger.info("Downloading video", url=url, path=str(output_path))
    try:
        _run(
            [
                binary,
                url,
                "-f", VIDEO_FORMAT,
                "--merge-output-format", "mp4",
                "--remux-video", "mp4",
                "--no-playlist",
                "-o", str(_output_template(output_path)),
            ]
        )
    except (subprocess.CalledProcessError, OSError) as e:
        raise DownloadError(f"Failed to download video: {_describe(e)}") from e

    if not output_path.exists():
        raise DownloadError(f"Failed to download video: {output_path.name} was not created")
    return output_path


def download_audio(url: str, output_path: Path, binary: str = "yt-dlp") -> Path:
    """Extract best audio as mp3."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    logger.info("Extracting audio", url=url, path=str(output_path))
    try:
        _run(
            [
                binary,
                url,
                "-f", "bestaudio/best",
                "-x", "--audio-format", AUDIO_FORMAT,
                "--no-playlist",
                "-o", str(_output_template(output_path)),
            ]
        )
    except (subprocess.CalledProcessError, OSError) as e:
        raise DownloadError(f"Failed to extract audio: {_describe(e)}") from e

    if not output_path.exists():
        raise DownloadError(f"Failed to extract audio: {output_path.name} was not created")
    return output_path


def download_subtitles(
    url: str,
    output_template: Path,
    auto: bool = False,
    language: str = "en",
    binary: str = "yt-dlp",
) -> None:
    """Write vtt subtitles for url next to output_template.

    yt-dlp names the files itself (`<stem>.<lang>.vtt`); use
    `find_subtitle_files` to pick them up afterwards.
    """
    output_template.parent.mkdir(parents=True, exist_ok=True)
    kind = "auto" if auto else "manual"
    logger.info("Requesting subtitles", url=url, kind=kind, language=language)
    try:
        _run(
            [
                binary,
                url,
                "--write-auto-subs" if auto else "--write-subs",
                "--skip-download",
                "--sub-format", "vtt",
                "--sub-langs", language,
                "--no-playlist",
                "-o", str(_output_template(output_template)),
            ]
        )
    except (subprocess.CalledProcessError, OSError) as e:
        raise DownloadError(f"Failed to download {kind} subtitles: {_describe(e)}") from e


class YtDlpExtractor:
    """MediaExtractor backed by the yt-dlp executable."""

    def __init__(self, binary: str = "yt-dlp", subtitle_language: str = "en"):
        self.binary = binary
        self.subtitle_language = subtitle_language

    def get_info(self, url: str) -> MediaInfo:
        return get_media_info(url, binary=self.binary)

    def download_video(self, url: str, output_path: Path) -> Path:
        return download_video(url, output_path, binary=self.binary)

    def download_audio(self, url: str, output_path: Path) -> Path:
        return download_audio(url, output_path, binary=self.binary)

    def download_subtitles(self, url: str, output_template: Path, auto: bool) -> None:
        download_subtitles(
            url,
            output_template,
            auto=auto,
            language=self.subtitle_language,
            binary=self.binary,
        )
