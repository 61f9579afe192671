"""Tests for WebVTT caption parsing and writing."""

import pytest

from media_fetcher.exceptions import CaptionParseError
from media_fetcher.interfaces import TranscriptCue
from media_fetcher.transcript.captions import (
    cues_to_text,
    format_time,
    format_vtt_timestamp,
    parse_captions,
    parse_timestamp,
    read_caption_file,
    render_captions,
    write_caption_file,
)


class TestFormatTime:
    @pytest.mark.parametrize(
        "seconds, expected",
        [
            (3661, "01:01:01"),
            (59, "00:00:59"),
            (59.9, "00:00:59"),
            (0, "00:00:00"),
            (-3, "00:00:00"),
            (36000, "10:00:00"),
        ],
    )
    def test_format_time(self, seconds, expected):
        assert format_time(seconds) == expected

    def test_vtt_timestamp_keeps_milliseconds(self):
        assert format_vtt_timestamp(3.5) == "00:00:03.500"
        assert format_vtt_timestamp(3661.042) == "01:01:01.042"

    def test_parse_timestamp_variants(self):
        assert parse_timestamp("00:00:01.000") == 1.0
        assert parse_timestamp("01:02.500") == 62.5
        assert parse_timestamp("01:00:00,250") == 3600.25


class TestParseCaptions:
    def test_single_cue(self):
        """The smallest useful document yields exactly one cue."""
        cues = parse_captions("WEBVTT\n\n00:00:01.000 --> 00:00:03.500\nHello world\n")
        assert cues == [TranscriptCue(1.0, 3.5, "Hello world")]

    def test_indexed_single_cue(self):
        cues = parse_captions("WEBVTT\n\n1\n00:00:00.000 --> 00:00:02.000\nHello world\n")
        assert cues == [TranscriptCue(0.0, 2.0, "Hello world")]

    def test_control_characters_are_dropped(self):
        cues = parse_captions("WEBVTT\n\n00:00:01.000 --> 00:00:02.000\nbad\x0bchar\x00\n")
        assert cues == [TranscriptCue(1.0, 2.0, "badchar")]

    def test_sample_document(self, sample_vtt_content):
        cues = parse_captions(sample_vtt_content)

        assert len(cues) == 3
        assert cues[0].text == "Hello everyone, let's start."
        assert cues[1].text == "Thanks John & welcome."
        assert cues[1].end_seconds == 10.5
        assert cues[2].text == "Great to be here"
        assert [c.start_seconds for c in cues] == [0.0, 5.0, 10.5]

    def test_multiline_cue_text(self):
        cues = parse_captions("WEBVTT\n\n00:00:01.000 --> 00:00:02.000\nfirst line\nsecond line\n")
        assert cues[0].text == "first line\nsecond line"

    def test_byte_order_mark_and_crlf(self):
        content = "\ufeffWEBVTT\r\n\r\n00:01.000 --> 00:02.000\r\nHi\r\n"
        assert parse_captions(content) == [TranscriptCue(1.0, 2.0, "Hi")]

    def test_note_blocks_are_ignored(self):
        content = "WEBVTT\n\nNOTE written by hand\n\n00:00:01.000 --> 00:00:02.000\nHi\n"
        assert parse_captions(content) == [TranscriptCue(1.0, 2.0, "Hi")]

    def test_cue_without_text(self):
        cues = parse_captions("WEBVTT\n\n00:00:01.000 --> 00:00:02.000\n\n")
        assert cues == [TranscriptCue(1.0, 2.0, "")]

    def test_malformed_cue_is_skipped(self):
        content = (
            "WEBVTT\n\n"
            "00:00:05.000 --> 00:00:01.000\nbackwards\n\n"
            "00:00:06.000 --> 00:00:07.000\nforwards\n"
        )
        assert parse_captions(content) == [TranscriptCue(6.0, 7.0, "forwards")]

    @pytest.mark.parametrize("content", ["", "WEBVTT", "WEBVTT\n\nNOTE nothing here\n"])
    def test_no_cues_raises(self, content):
        with pytest.raises(CaptionParseError, match="No cues found"):
            parse_captions(content)


class TestWriteCaptions:
    def test_render_format(self):
        rendered = render_captions([TranscriptCue(0.0, 212.0, "Hello")])
        assert rendered == "WEBVTT\n\n1\n00:00:00.000 --> 00:03:32.000\nHello\n"

    def test_write_then_read(self, tmp_path):
        cues = [TranscriptCue(0.0, 1.25, "one"), TranscriptCue(1.25, 4.0, "two")]
        path = write_caption_file(cues, tmp_path / "nested" / "talk.vtt")

        assert path.exists()
        assert read_caption_file(path) == cues

    def test_paragraphs_stay_in_one_cue(self, tmp_path):
        path = write_caption_file(
            [TranscriptCue(0.0, 212.0, "First paragraph.\n\n\nSecond paragraph.")],
            tmp_path / "talk.vtt",
        )

        assert read_caption_file(path) == [
            TranscriptCue(0.0, 212.0, "First paragraph.\nSecond paragraph.")
        ]

    def test_timing_arrow_in_text_is_escaped(self):
        rendered = render_captions([TranscriptCue(0.0, 5.0, "00:00:01.000 --> 00:00:02.000")])

        assert parse_captions(rendered) == [TranscriptCue(0.0, 5.0, "00:00:01.000 -> 00:00:02.000")]

    def test_cues_to_text_skips_empty_cues(self):
        cues = [TranscriptCue(0, 1, "one"), TranscriptCue(1, 2, ""), TranscriptCue(2, 3, "three")]
        assert cues_to_text(cues) == "one\nthree"
