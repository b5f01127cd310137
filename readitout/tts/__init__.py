"""Text-to-Speech providers for podcast audio generation."""

from .base import SynthesisResult, TTSProvider, estimate_duration
from .chunking import split_text_into_chunks
from .elevenlabs_tts import ElevenLabsTTS
from .google_tts import GoogleCloudTTS
from .synthesizer import SpeechSynthesizer
from .voices import VOICE_STYLES, resolve_voice_style, voice_options

__all__ = [
    "ElevenLabsTTS",
    "GoogleCloudTTS",
    "SpeechSynthesizer",
    "SynthesisResult",
    "TTSProvider",
    "VOICE_STYLES",
    "estimate_duration",
    "resolve_voice_style",
    "split_text_into_chunks",
    "voice_options",
]
