"""WebVTT caption parsing and writing."""

import html
import re
from collections.abc import Iterable
from pathlib import Path

import structlog

from ..exceptions import CaptionParseError
from ..interfaces import TranscriptCue

logger = structlog.get_logger(__name__)

_TIMESTAMP = r"(?:\d{2,}:)?\d{2}:\d{2}[.,]\d{3}"
TIMING_PATTERN = re.compile(rf"^({_TIMESTAMP})\s+-->\s+({_TIMESTAMP})(?:\s+.*)?$")
TAG_PATTERN = re.compile(r"<[^>]*>")
# Characters outside the XML 1.0 range; python-docx refuses to store them
XML_INVALID_PATTERN = re.compile("[^\t\n\r\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")
BLANK_LINES_PATTERN = re.compile(r"\n\s*\n+")


def parse_timestamp(value: str) -> float:
    """Convert `HH:MM:SS.mmm` (or `MM:SS.mmm`) to seconds."""
    parts = value.replace(",", ".").split(":")
    seconds = float(parts[-1])
    minutes = int(parts[-2])
    hours = int(parts[-3]) if len(parts) > 2 else 0
    return hours * 3600 + minutes * 60 + seconds


def format_time(seconds: float) -> str:
    """Format seconds as `HH:MM:SS`, truncated to whole seconds."""
    total = max(int(seconds), 0)
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def format_vtt_timestamp(seconds: float) -> str:
    """Format seconds as a VTT timestamp (`HH:MM:SS.mmm`)."""
    total_ms = max(round(seconds * 1000), 0)
    total_seconds, millis = divmod(total_ms, 1000)
    hours, remainder = divmod(total_seconds, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}.{millis:03d}"


def strip_control_chars(text: str) -> str:
    """Drop characters that cannot be stored in an XML document."""
    return XML_INVALID_PATTERN.sub("", text)


def _clean_line(line: str) -> str:
    # Auto-generated captions carry word timing tags like <00:00:01.280><c> word</c>
    return strip_control_chars(html.unescape(TAG_PATTERN.sub("", line))).strip()


def _cue_payload(text: str) -> str:
    """Cue text safe to embed in a VTT block: no blank lines, no timing arrows."""
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = BLANK_LINES_PATTERN.sub("\n", text.strip())
    return text.replace("-->", "->")


def parse_captions(content: str) -> list[TranscriptCue]:
    """Parse a WebVTT document into cues, in document order.

    Lines before a timing line (the WEBVTT header, NOTE/STYLE blocks, cue
    identifiers) are dropped; lines after it up to the next blank line form
    the cue text.
    """
    lines = content.lstrip("\ufeff").replace("\r\n", "\n").replace("\r", "\n").split("\n")

    cues: list[TranscriptCue] = []
    timing: tuple[float, float] | None = None
    text_lines: list[str] = []

    def flush() -> None:
        if timing is None:
            return
        start, end = timing
        try:
            cues.append(TranscriptCue(start, end, "\n".join(text_lines)))
        except ValueError as e:
            logger.warning("Skipping malformed cue", error=str(e))

    for raw in lines:
        line = raw.strip()
        if not line:
            flush()
            timing, text_lines = None, []
            continue

        match = TIMING_PATTERN.match(line)
        if match:
            flush()
            timing = (parse_timestamp(match.group(1)), parse_timestamp(match.group(2)))
            text_lines = []
            continue

        if timing is None:
            continue

        cleaned = _clean_line(line)
        if cleaned:
            text_lines.append(cleaned)

    flush()

    if not cues:
        raise CaptionParseError("No cues found in caption document")
    return cues


def read_caption_file(path: Path) -> list[TranscriptCue]:
    """Parse a caption file from disk."""
    return parse_captions(path.read_text(encoding="utf-8", errors="replace"))


def render_captions(cues: Iterable[TranscriptCue]) -> str:
    """Render cues as a WebVTT document."""
    blocks = ["WEBVTT"]
    for index, cue in enumerate(cues, start=1):
        timing = f"{format_vtt_timestamp(cue.start_seconds)} --> {format_vtt_timestamp(cue.end_seconds)}"
        blocks.append(f"{index}\n{timing}\n{_cue_payload(cue.text)}".rstrip("\n"))
    return "\n\n".join(blocks) + "\n"


def write_caption_file(cues: Iterable[TranscriptCue], path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_captions(cues), encoding="utf-8")
    return path


def cues_to_text(cues: Iterable[TranscriptCue]) -> str:
    """Plain transcript text, one line per non-empty cue."""
    return "\n".join(cue.text for cue in cues if cue.text)
