"""Transcript document (.docx) rendering using python-docx."""

import io
import re
from collections.abc import Iterable
from pathlib import Path

import structlog
from docx import Document
from docx.shared import Pt

from ..interfaces import TranscriptCue
from .captions import format_time, parse_timestamp, strip_control_chars

logger = structlog.get_logger(__name__)

HEADING = "Transcript"
HEADING_SIZE = Pt(14)
TIMESTAMP_SIZE = Pt(10)
BODY_SIZE = Pt(12)

CUE_PARAGRAPH = re.compile(r"^\[(\d{2,}:\d{2}:\d{2}) - (\d{2,}:\d{2}:\d{2})\] ?(.*)$", re.DOTALL)


def build_transcript_document(cues: Iterable[TranscriptCue], title: str):
    """Build a document: bold heading, blank line, one paragraph per cue."""
    document = Document()
    document.core_properties.title = strip_control_chars(title)

    heading = document.add_paragraph().add_run(HEADING)
    heading.bold = True
    heading.font.size = HEADING_SIZE

    document.add_paragraph("")

    for cue in cues:
        paragraph = document.add_paragraph()
        stamp = paragraph.add_run(
            f"[{format_time(cue.start_seconds)} - {format_time(cue.end_seconds)}] "
        )
        stamp.bold = True
        stamp.font.size = TIMESTAMP_SIZE

        body = paragraph.add_run(strip_control_chars(cue.text))
        body.font.size = BODY_SIZE

    return document


def render_transcript(cues: Iterable[TranscriptCue], title: str) -> bytes:
    """Render cues to .docx bytes."""
    buffer = io.BytesIO()
    build_transcript_document(cues, title).save(buffer)
    return buffer.getvalue()


def write_transcript_document(cues: Iterable[TranscriptCue], title: str, path: Path) -> Path:
    cues = list(cues)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(render_transcript(cues, title))
    logger.info("Transcript document written", path=str(path), cues=len(cues))
    return path


def read_transcript_document(source: Path | bytes) -> list[TranscriptCue]:
    """Recover cues from a rendered transcript, to whole-second precision."""
    stream = io.BytesIO(source) if isinstance(source, bytes) else str(source)
    document = Document(stream)

    cues = []
    for paragraph in document.paragraphs:
        match = CUE_PARAGRAPH.match(paragraph.text)
        if match:
            cues.append(
                TranscriptCue(
                    start_seconds=parse_timestamp(f"{match.group(1)}.000"),
                    end_seconds=parse_timestamp(f"{match.group(2)}.000"),
                    text=match.group(3),
                )
            )
    return cues
