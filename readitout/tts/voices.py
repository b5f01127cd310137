"""
Voice style presets.

A requested style goes through the alias table to a canonical key, then to
a provider-specific voice. Unknown styles are not an error: they resolve to
``narrator``.
"""

from pydantic import BaseModel

DEFAULT_VOICE_STYLE = "narrator"


class GoogleVoice(BaseModel):
    name: str
    language_code: str
    description: str


GOOGLE_VOICES: dict[str, GoogleVoice] = {
    "narrator": GoogleVoice(
        name="en-US-Journey-D",
        language_code="en-US",
        description="Natural Narrator - Warm, engaging male voice",
    ),
    "storyteller": GoogleVoice(
        name="en-US-Journey-F",
        language_code="en-US",
        description="Storyteller - Expressive female voice",
    ),
    "professional": GoogleVoice(
        name="en-US-Studio-M",
        language_code="en-US",
        description="Professional - Clear, authoritative male",
    ),
    "podcast_host": GoogleVoice(
        name="en-US-Studio-O",
        language_code="en-US",
        description="Podcast Host - Friendly, conversational",
    ),
    "calm": GoogleVoice(
        name="en-US-Neural2-A",
        language_code="en-US",
        description="Calm & Relaxed - Soothing female voice",
    ),
    "confident": GoogleVoice(
        name="en-US-Neural2-D",
        language_code="en-US",
        description="Confident - Strong male voice",
    ),
    "friendly": GoogleVoice(
        name="en-US-Neural2-F",
        language_code="en-US",
        description="Friendly - Warm female voice",
    ),
    "deep": GoogleVoice(
        name="en-US-Neural2-J",
        language_code="en-US",
        description="Deep Voice - Rich, deep male voice",
    ),
}

ELEVENLABS_VOICES: dict[str, str] = {
    "narrator": "21m00Tcm4TlvDq8ikWAM",
    "storyteller": "EXAVITQu4vr4xnSDxMaL",
    "professional": "VR6AewLTigWG4xSOukaG",
    "podcast_host": "TxGEqnHWrfWFTfGW9XjX",
    "calm": "pNInz6obpgDQGcFmaJgB",
    "confident": "yoZ06aMxZJJ28mfd3POQ",
    "friendly": "jBpfuIE2acCO8z3wKNLl",
    "deep": "ErXwobaYiN019PkySvjV",
}

# Legacy style names from earlier releases, plus canonical keys mapping to themselves
VOICE_STYLE_ALIASES: dict[str, str] = {
    "news_anchor": "professional",
    "calm_female": "calm",
    "deep_narrator": "deep",
    "casual_podcast": "podcast_host",
    "energetic": "storyteller",
    **{key: key for key in GOOGLE_VOICES},
}

VOICE_STYLES = list(VOICE_STYLE_ALIASES)


def resolve_voice_style(style: str | None) -> str:
    """Canonical voice key for any requested style."""
    return VOICE_STYLE_ALIASES.get(style or "", DEFAULT_VOICE_STYLE)


def google_voice(style: str | None) -> GoogleVoice:
    return GOOGLE_VOICES[resolve_voice_style(style)]


def elevenlabs_voice(style: str | None) -> str:
    return ELEVENLABS_VOICES[resolve_voice_style(style)]


def voice_options() -> list[dict[str, str]]:
    """Canonical styles with descriptions, for clients."""
    return [{"id": key, "name": voice.description} for key, voice in GOOGLE_VOICES.items()]
