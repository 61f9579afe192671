"""Tests for encoding selection."""

import pytest

from media_fetcher.exceptions import NoSuitableFormatError
from media_fetcher.interfaces import FormatDescriptor, FormatQuality
from media_fetcher.ingestion.formats import matches_media_type, select_format


def _fmt(format_id, has_video, has_audio, best=False):
    quality = FormatQuality.BEST if best else FormatQuality.OTHER
    return FormatDescriptor(format_id, has_video, has_audio, quality, f"https://cdn/{format_id}")


class TestMatchesMediaType:
    @pytest.mark.parametrize(
        "has_video, has_audio, want_video, expected",
        [
            (True, True, True, True),
            (True, False, True, False),
            (False, True, True, False),
            (False, True, False, True),
            (True, True, False, False),
            (False, False, False, False),
        ],
    )
    def test_predicate(self, has_video, has_audio, want_video, expected):
        assert matches_media_type(_fmt("x", has_video, has_audio), want_video) is expected


class TestSelectFormat:
    def test_picks_best_combined_video(self, sample_formats):
        assert select_format(sample_formats, want_video=True).format_id == "18"

    def test_picks_best_audio_only(self, sample_formats):
        assert select_format(sample_formats, want_video=False).format_id == "140"

    def test_no_candidates(self):
        with pytest.raises(NoSuitableFormatError, match="No suitable audio format found"):
            select_format([_fmt("137", True, False, best=True)], want_video=False)

    def test_empty_format_list(self):
        with pytest.raises(NoSuitableFormatError):
            select_format([], want_video=True)

    def test_candidates_but_none_marked_best(self):
        """Ambiguous choice fails instead of guessing."""
        formats = [_fmt("18", True, True), _fmt("22", True, True)]
        with pytest.raises(NoSuitableFormatError, match="2 candidates, none marked best"):
            select_format(formats, want_video=True)

    def test_first_best_wins(self):
        formats = [_fmt("a", True, True, best=True), _fmt("b", True, True, best=True)]
        assert select_format(formats, want_video=True).format_id == "a"
