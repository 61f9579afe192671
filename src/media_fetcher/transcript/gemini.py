"""Gemini speech-to-text provider."""

from pathlib import Path

import structlog
from google import genai
from google.genai import errors, types

from ..exceptions import MissingCredentialError, SpeechToTextError
from .provider import SpeechToTextProvider

logger = structlog.get_logger(__name__)

PROMPT = """Transcribe this audio.

Return ONLY the spoken words as plain text, no timestamps, no commentary."""

SYSTEM_INSTRUCTION = "You are a precise audio transcription assistant."

# Larger files go through the Files API instead of inline bytes
MAX_INLINE_SIZE = 15 * 1024 * 1024


class GeminiTranscriber(SpeechToTextProvider):
    """Transcribes audio with a Gemini multimodal model."""

    name = "gemini"

    def __init__(self, api_key: str, model: str = "gemini-3-flash-preview"):
        super().__init__(api_key, model)
        self._client: genai.Client | None = None

    @property
    def client(self) -> genai.Client:
        if self._client is None:
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    def transcribe(self, audio_path: Path) -> str:
        if not self.is_configured:
            raise MissingCredentialError(
                "Gemini API key is not set. Please add GEMINI_API_KEY to the .env file."
            )

        logger.info("Transcribing audio", provider=self.name, model=self.model, path=str(audio_path))
        config = types.GenerateContentConfig(system_instruction=SYSTEM_INSTRUCTION)

        try:
            if audio_path.stat().st_size < MAX_INLINE_SIZE:
                mime_type = "audio/mpeg" if audio_path.suffix.lower() == ".mp3" else "audio/wav"
                audio = types.Part.from_bytes(data=audio_path.read_bytes(), mime_type=mime_type)
            else:
                audio = self.client.files.upload(file=str(audio_path))

            response = self.client.models.generate_content(
                model=self.model,
                contents=[audio, PROMPT],
                config=config,
            )
        except (errors.APIError, OSError) as e:
            raise SpeechToTextError(f"Failed to transcribe audio: {e}") from e

        text = (response.text or "").strip()
        if not text:
            raise SpeechToTextError("Failed to transcribe audio: empty transcript")

        logger.info("Transcription completed", provider=self.name, characters=len(text))
        return text
