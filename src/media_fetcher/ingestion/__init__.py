"""Ingestion module for media metadata, format selection and downloads."""

from .downloader import (
    YtDlpExtractor,
    download_audio,
    download_subtitles,
    download_video,
    get_media_info,
)
from .formats import select_format
from .subtitles import find_subtitle_files

__all__ = [
    "YtDlpExtractor",
    "download_audio",
    "download_subtitles",
    "download_video",
    "get_media_info",
    "select_format",
    "find_subtitle_files",
]
