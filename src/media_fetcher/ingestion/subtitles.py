"""Discovery of subtitle files written by the extraction tool."""

from pathlib import Path


def find_subtitle_files(directory: Path, stem: str, suffix: str = ".vtt") -> list[Path]:
    """List caption files the extraction tool wrote for a stem.

    yt-dlp names subtitle files `<stem>.<lang>.vtt`; anything starting with
    the stem and ending in the caption suffix counts. Sorted by name so the
    first entry is stable across runs.
    """
    if not directory.is_dir():
        return []
    return sorted(
        path
        for path in directory.iterdir()
        if path.is_file() and path.name.startswith(stem) and path.name.endswith(suffix)
    )
