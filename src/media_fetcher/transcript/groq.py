"""Groq Whisper speech-to-text provider."""

from pathlib import Path

import structlog
from groq import Groq, GroqError

from ..exceptions import MissingCredentialError, SpeechToTextError
from .provider import SpeechToTextProvider

logger = structlog.get_logger(__name__)


class GroqTranscriber(SpeechToTextProvider):
    """Transcribes audio with Whisper models hosted on Groq."""

    name = "groq"

    def __init__(self, api_key: str, model: str = "whisper-large-v3-turbo"):
        super().__init__(api_key, model)
        self._client: Groq | None = None

    @property
    def client(self) -> Groq:
        if self._client is None:
            self._client = Groq(api_key=self.api_key)
        return self._client

    def transcribe(self, audio_path: Path) -> str:
        if not self.is_configured:
            raise MissingCredentialError(
                "Groq API key is not set. Please add GROQ_API_KEY to the .env file."
            )

        logger.info("Transcribing audio", provider=self.name, model=self.model, path=str(audio_path))
        try:
            with open(audio_path, "rb") as f:
                transcription = self.client.audio.transcriptions.create(
                    file=(audio_path.name, f),
                    model=self.model,
                )
        except (GroqError, OSError) as e:
            raise SpeechToTextError(f"Failed to transcribe audio: {e}") from e

        text = (getattr(transcription, "text", None) or "").strip()
        if not text:
            raise SpeechToTextError("Failed to transcribe audio: empty transcript")

        logger.info("Transcription completed", provider=self.name, characters=len(text))
        return text
