"""Base TTS provider interface."""

from abc import ABC, abstractmethod

from pydantic import BaseModel

# Average speaking rate used to estimate audio length
WORDS_PER_MINUTE = 150


def estimate_duration(text: str) -> float:
    """
    Estimated spoken duration of ``text`` in seconds.

    Audio is never decoded to measure its length; transcript timing is
    derived from this same estimate.
    """
    return len(text.split()) / WORDS_PER_MINUTE * 60


class SynthesisResult(BaseModel):
    """Encoded audio (MP3) plus its estimated duration."""

    audio: bytes
    duration_seconds: float
    provider: str = ""


class TTSProvider(ABC):
    """Abstract base class for TTS providers."""

    @abstractmethod
    async def synthesize(self, text: str, voice_style: str) -> SynthesisResult:
        """
        Generate audio for ``text`` in the given voice style.

        Args:
            text: Script to narrate
            voice_style: Requested style; unknown values use the default voice

        Returns:
            Audio bytes and estimated duration
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name."""
        pass

    async def close(self) -> None:
        """Release network resources."""
