"""
Speech synthesis with provider fallback.

Order:
    primary configured   -> primary, then fallback if configured
    primary unconfigured -> fallback
    neither              -> ConfigurationError
"""

from typing import Optional

import structlog

from ..errors import ConfigurationError, SynthesisError
from ..fallback import FallbackExhausted, Strategy, run_chain
from ..settings import TTSSettings
from .base import SynthesisResult, TTSProvider
from .elevenlabs_tts import ElevenLabsTTS
from .google_tts import GoogleCloudTTS

logger = structlog.get_logger()


class SpeechSynthesizer:
    """
    Converts a script to audio through an ordered provider chain.

    Usage:
        synthesizer = SpeechSynthesizer.from_settings(settings.tts)
        result = await synthesizer.synthesize(script, "narrator")
    """

    def __init__(
        self,
        primary: Optional[TTSProvider] = None,
        fallback: Optional[TTSProvider] = None,
    ):
        self.primary = primary
        self.fallback = fallback

    @classmethod
    def from_settings(cls, settings: TTSSettings) -> "SpeechSynthesizer":
        primary = None
        fallback = None

        if settings.google_api_key:
            primary = GoogleCloudTTS(
                api_key=settings.google_api_key.get_secret_value(),
                chunk_max_bytes=settings.chunk_max_bytes,
                speaking_rate=settings.speaking_rate,
                timeout=settings.request_timeout,
            )
        if settings.elevenlabs_api_key:
            fallback = ElevenLabsTTS(
                api_key=settings.elevenlabs_api_key.get_secret_value(),
                model=settings.elevenlabs_model,
                max_chars=settings.elevenlabs_max_chars,
            )
        return cls(primary=primary, fallback=fallback)

    async def synthesize(self, text: str, voice_style: str = "narrator") -> SynthesisResult:
        logger.info(
            f"TTS: voice={voice_style}, {len(text)} chars, {len(text.split())} words"
        )

        providers = [p for p in (self.primary, self.fallback) if p is not None]
        if not providers:
            raise ConfigurationError(
                "No TTS service configured. Set TTS_GOOGLE_API_KEY or TTS_ELEVENLABS_API_KEY"
            )
        if self.primary is None:
            logger.warning(f"Using {self.fallback.name} (primary TTS not configured)")

        strategies = [
            Strategy(name=p.name, attempt=lambda p=p: p.synthesize(text, voice_style))
            for p in providers
        ]

        try:
            return (await run_chain(strategies, chain="tts")).value
        except FallbackExhausted as e:
            first = e.failures[0]
            if len(e.failures) == 1:
                if isinstance(first.exception, SynthesisError):
                    raise first.exception
                raise SynthesisError(f"{first.name} TTS failed: {first.error}") from first.exception
            raise SynthesisError(
                f"Both TTS services failed. {first.name}: {first.error}",
                {"failures": {f.name: f.error for f in e.failures}},
            ) from first.exception

    async def close(self) -> None:
        for provider in (self.primary, self.fallback):
            if provider is not None:
                await provider.close()
