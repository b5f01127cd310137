"""
ElevenLabs TTS Provider.

ElevenLabs is the fallback provider:
- Natural emotional delivery
- Turbo model available on the free tier
- Used only when Google Cloud TTS is unconfigured or fails

Input is capped at 5000 characters and sent in one request; longer
scripts are truncated, not chunked.
"""

from typing import Optional
import structlog

from elevenlabs import AsyncElevenLabs, VoiceSettings

from .base import SynthesisResult, TTSProvider, estimate_duration
from .voices import elevenlabs_voice, resolve_voice_style

logger = structlog.get_logger()


class ElevenLabsTTS(TTSProvider):
    """ElevenLabs TTS provider, single request per script."""

    def __init__(
        self,
        api_key: str,
        model: str = "eleven_turbo_v2",
        max_chars: int = 5000,
        stability: float = 0.5,
        similarity_boost: float = 0.75,
        client: Optional[AsyncElevenLabs] = None,
    ):
        self.model = model
        self.max_chars = max_chars
        self.client = client or AsyncElevenLabs(api_key=api_key)

        self.voice_settings = VoiceSettings(
            stability=stability,
            similarity_boost=similarity_boost,
        )

    @property
    def name(self) -> str:
        return "elevenlabs"

    async def synthesize(self, text: str, voice_style: str) -> SynthesisResult:
        voice_id = elevenlabs_voice(voice_style)
        logger.info(f"ElevenLabs: {resolve_voice_style(voice_style)}")

        if len(text) > self.max_chars:
            logger.warning(f"Text truncated from {len(text)} to {self.max_chars} chars for ElevenLabs")

        audio = await self._generate(text[:self.max_chars], voice_id)
        logger.info(f"ElevenLabs complete: {len(audio)} bytes")

        # Estimated from the full script, like the primary provider
        return SynthesisResult(
            audio=audio,
            duration_seconds=estimate_duration(text),
            provider=self.name,
        )

    async def _generate(self, text: str, voice_id: str) -> bytes:
        """Generate audio for a text segment."""
        audio_stream = self.client.text_to_speech.convert(
            voice_id=voice_id,
            text=text,
            model_id=self.model,
            voice_settings=self.voice_settings,
        )

        # Collect all chunks
        audio_bytes = b""
        async for chunk in audio_stream:
            audio_bytes += chunk

        return audio_bytes
