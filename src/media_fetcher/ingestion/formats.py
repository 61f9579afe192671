"""Encoding selection for direct download links."""

from collections.abc import Iterable

from ..exceptions import NoSuitableFormatError
from ..interfaces import FormatDescriptor, FormatQuality


def matches_media_type(fmt: FormatDescriptor, want_video: bool) -> bool:
    """Codec-presence predicate: video needs both streams, audio needs audio only."""
    if want_video:
        return fmt.has_video and fmt.has_audio
    return not fmt.has_video and fmt.has_audio


def select_format(formats: Iterable[FormatDescriptor], want_video: bool) -> FormatDescriptor:
    """Pick the encoding marked best among those matching the requested type.

    Never guesses: when candidates exist but none is marked best, the choice
    is ambiguous and NoSuitableFormatError is raised like for no candidates.
    """
    kind = "video" if want_video else "audio"
    candidates = [f for f in formats if matches_media_type(f, want_video)]
    if not candidates:
        raise NoSuitableFormatError(f"No suitable {kind} format found")

    for fmt in candidates:
        if fmt.quality == FormatQuality.BEST:
            return fmt

    raise NoSuitableFormatError(
        f"No suitable {kind} format found: {len(candidates)} candidates, none marked best"
    )
