"""
Google Cloud Text-to-Speech provider.

Google Cloud TTS is the primary provider:
- Journey, Studio and Neural2 voices
- Free tier of 1M characters/month
- Hard limit of 5000 bytes of input per request, so long scripts are
  split into chunks that are synthesized concurrently

MP3 is a stream of independent frames, so chunk audio can be joined by
plain byte concatenation.
"""

import asyncio
import base64
from typing import Optional

import httpx
import structlog

from ..errors import SynthesisError
from .base import SynthesisResult, TTSProvider, estimate_duration
from .chunking import split_text_into_chunks
from .voices import GoogleVoice, google_voice

logger = structlog.get_logger()

GOOGLE_TTS_URL = "https://texttospeech.googleapis.com/v1/text:synthesize"

# Google's limit is 5000 bytes; stay under it
DEFAULT_CHUNK_BYTES = 4500


class GoogleCloudTTS(TTSProvider):
    """
    Google Cloud TTS over the REST API.

    Every chunk of a script is requested at once; the audio is joined in
    chunk order, whatever order the responses arrive in.
    """

    def __init__(
        self,
        api_key: str,
        chunk_max_bytes: int = DEFAULT_CHUNK_BYTES,
        speaking_rate: float = 0.95,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 60.0,
    ):
        self.api_key = api_key
        self.chunk_max_bytes = chunk_max_bytes
        self.speaking_rate = speaking_rate
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=timeout)

    @property
    def name(self) -> str:
        return "google"

    async def synthesize(self, text: str, voice_style: str) -> SynthesisResult:
        voice = google_voice(voice_style)
        logger.info(f"Google TTS: {voice.description}")

        chunks = split_text_into_chunks(text, self.chunk_max_bytes)
        logger.info(f"Text split into {len(chunks)} chunks, generating in parallel")

        audio_parts = await asyncio.gather(
            *(self._synthesize_chunk(chunk, voice) for chunk in chunks)
        )
        audio = b"".join(audio_parts)

        duration = estimate_duration(text)
        logger.info(f"Google TTS complete: {len(audio)} bytes, ~{round(duration / 60)} min")

        return SynthesisResult(audio=audio, duration_seconds=duration, provider=self.name)

    async def _synthesize_chunk(self, text: str, voice: GoogleVoice) -> bytes:
        """Generate MP3 audio for one chunk."""
        payload = {
            "input": {"text": text},
            "voice": {
                "languageCode": voice.language_code,
                "name": voice.name,
            },
            "audioConfig": {
                "audioEncoding": "MP3",
                "speakingRate": self.speaking_rate,
                "pitch": 0,
            },
        }

        try:
            response = await self.client.post(
                GOOGLE_TTS_URL,
                params={"key": self.api_key},
                json=payload,
            )
        except httpx.HTTPError as e:
            raise SynthesisError(f"Google TTS request failed: {e}") from e

        if not response.is_success:
            raise SynthesisError(f"Google TTS error: {response.status_code} {response.text}")

        audio_content = response.json().get("audioContent")
        if not audio_content:
            raise SynthesisError("Google TTS error: no audio content in response")

        return base64.b64decode(audio_content)

    async def close(self) -> None:
        if self._owns_client:
            await self.client.aclose()
