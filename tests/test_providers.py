"""Tests for speech-to-text providers, with the API clients mocked."""

from unittest.mock import Mock

import pytest

from media_fetcher.exceptions import MissingCredentialError, SpeechToTextError
from media_fetcher.transcript.gemini import GeminiTranscriber
from media_fetcher.transcript.groq import GroqTranscriber
from media_fetcher.transcript.provider import get_provider


@pytest.fixture
def audio_file(tmp_path):
    path = tmp_path / "talk.mp3"
    path.write_bytes(b"ID3fake-mp3")
    return path


class TestGetProvider:
    def test_groq_by_default(self, settings):
        provider = get_provider(settings.model_copy(update={"groq_api_key": "gsk"}))

        assert isinstance(provider, GroqTranscriber)
        assert provider.is_configured
        assert provider.model == "whisper-large-v3-turbo"

    def test_gemini(self, settings):
        provider = get_provider(settings.model_copy(update={"stt_provider": "gemini"}))

        assert isinstance(provider, GeminiTranscriber)
        assert not provider.is_configured


class TestGroqTranscriber:
    def test_transcribe(self, audio_file):
        transcriber = GroqTranscriber(api_key="gsk")
        transcriber._client = Mock()
        transcriber._client.audio.transcriptions.create.return_value = Mock(text="  Hello world \n")

        assert transcriber.transcribe(audio_file) == "Hello world"
        kwargs = transcriber._client.audio.transcriptions.create.call_args.kwargs
        assert kwargs["model"] == "whisper-large-v3-turbo"
        assert kwargs["file"][0] == "talk.mp3"

    def test_missing_key(self, audio_file):
        with pytest.raises(MissingCredentialError, match="GROQ_API_KEY"):
            GroqTranscriber(api_key="").transcribe(audio_file)

    def test_empty_transcript(self, audio_file):
        transcriber = GroqTranscriber(api_key="gsk")
        transcriber._client = Mock()
        transcriber._client.audio.transcriptions.create.return_value = Mock(text="")

        with pytest.raises(SpeechToTextError, match="empty transcript"):
            transcriber.transcribe(audio_file)

    def test_unreadable_file(self, tmp_path):
        transcriber = GroqTranscriber(api_key="gsk")
        transcriber._client = Mock()

        with pytest.raises(SpeechToTextError):
            transcriber.transcribe(tmp_path / "missing.mp3")


class TestGeminiTranscriber:
    def test_inline_audio(self, audio_file):
        transcriber = GeminiTranscriber(api_key="key")
        transcriber._client = Mock()
        transcriber._client.models.generate_content.return_value = Mock(text="Hello there")

        assert transcriber.transcribe(audio_file) == "Hello there"
        transcriber._client.files.upload.assert_not_called()
        kwargs = transcriber._client.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "gemini-3-flash-preview"

    def test_missing_key(self, audio_file):
        with pytest.raises(MissingCredentialError, match="GEMINI_API_KEY"):
            GeminiTranscriber(api_key="").transcribe(audio_file)

    def test_empty_response(self, audio_file):
        transcriber = GeminiTranscriber(api_key="key")
        transcriber._client = Mock()
        transcriber._client.models.generate_content.return_value = Mock(text=None)

        with pytest.raises(SpeechToTextError):
            transcriber.transcribe(audio_file)
