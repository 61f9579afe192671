"""Speech-to-text provider abstraction layer."""

from abc import ABC, abstractmethod
from pathlib import Path

from ..config import Settings


class SpeechToTextProvider(ABC):
    """Abstract base class for speech-to-text providers."""

    name: str = ""

    def __init__(self, api_key: str, model: str):
        self.api_key = api_key
        self.model = model

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    @abstractmethod
    def transcribe(self, audio_path: Path) -> str:
        """Transcribe an audio file and return the plain transcript text.

        Raises:
            MissingCredentialError: If no API key is configured
            SpeechToTextError: If the service fails or returns nothing
        """
        pass


def get_provider(settings: Settings) -> SpeechToTextProvider:
    """Create the speech-to-text provider selected in settings."""
    if settings.stt_provider == "gemini":
        from .gemini import GeminiTranscriber

        return GeminiTranscriber(api_key=settings.gemini_api_key, model=settings.gemini_model)

    from .groq import GroqTranscriber

    return GroqTranscriber(api_key=settings.groq_api_key, model=settings.groq_whisper_model)
