"""Tests for chunking, voice resolution, TTS providers and provider fallback."""

import asyncio
import base64
import json
from types import SimpleNamespace

import httpx
import pytest

from readitout.errors import ConfigurationError, SynthesisError
from readitout.settings import TTSSettings
from readitout.tts import ElevenLabsTTS, GoogleCloudTTS, SpeechSynthesizer, estimate_duration
from readitout.tts.chunking import byte_length, split_text_into_chunks
from readitout.tts.voices import elevenlabs_voice, google_voice, resolve_voice_style, voice_options

from .conftest import FakeTTS, mock_client


# Chunking

def test_chunks_preserve_every_word_in_order():
    text = " ".join(f"Sentence {i} has a handful of words in it." for i in range(200))
    chunks = split_text_into_chunks(text, 300)

    assert len(chunks) > 1
    assert all(byte_length(c) <= 300 for c in chunks)
    assert " ".join(chunks).split() == text.split()


def test_short_text_is_one_chunk():
    assert split_text_into_chunks("Just one sentence.", 4500) == ["Just one sentence."]


def test_oversized_sentence_after_other_text_is_split_by_words():
    long_sentence = " ".join(["word"] * 100)
    text = f"Short one. {long_sentence}"
    chunks = split_text_into_chunks(text, 60)

    assert chunks[0] == "Short one."
    assert all(byte_length(c) <= 60 for c in chunks)
    assert " ".join(chunks).split() == text.split()


def test_chunk_limit_counts_bytes_not_characters():
    text = "Café crème brûlée. " * 20
    chunks = split_text_into_chunks(text.strip(), 50)

    assert all(byte_length(c) <= 50 for c in chunks)
    assert " ".join(chunks).split() == text.split()


# Voices

@pytest.mark.parametrize("requested,canonical", [
    ("narrator", "narrator"),
    ("news_anchor", "professional"),
    ("calm_female", "calm"),
    ("deep_narrator", "deep"),
    ("casual_podcast", "podcast_host"),
    ("energetic", "storyteller"),
    ("robot", "narrator"),
    (None, "narrator"),
])
def test_resolve_voice_style(requested, canonical):
    assert resolve_voice_style(requested) == canonical


def test_provider_voices():
    assert google_voice("news_anchor").name == "en-US-Studio-M"
    assert google_voice("unknown").name == "en-US-Journey-D"
    assert elevenlabs_voice("narrator") == "21m00Tcm4TlvDq8ikWAM"
    assert len(voice_options()) == 8


def test_estimate_duration_uses_150_wpm():
    assert estimate_duration(" ".join(["w"] * 150)) == pytest.approx(60.0)
    assert estimate_duration("") == 0


# Google Cloud TTS

@pytest.mark.asyncio
async def test_google_chunks_joined_in_order():
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        requests.append((request.url.params["key"], body))
        audio = f"[{body['input']['text']}]".encode()
        return httpx.Response(200, json={"audioContent": base64.b64encode(audio).decode()})

    text = " ".join(f"This is sentence number {i}." for i in range(10))

    async with mock_client(handler) as client:
        tts = GoogleCloudTTS("secret", chunk_max_bytes=60, client=client)
        result = await tts.synthesize(text, "news_anchor")

    chunks = split_text_into_chunks(text, 60)
    assert result.audio == b"".join(f"[{c}]".encode() for c in chunks)
    assert result.provider == "google"
    assert result.duration_seconds == pytest.approx(estimate_duration(text))

    assert len(requests) == len(chunks)
    key, body = requests[0]
    assert key == "secret"
    assert body["voice"] == {"languageCode": "en-US", "name": "en-US-Studio-M"}
    assert body["audioConfig"]["audioEncoding"] == "MP3"
    assert body["audioConfig"]["speakingRate"] == 0.95


@pytest.mark.asyncio
async def test_google_chunks_requested_concurrently_joined_by_index():
    text = " ".join(f"This is sentence number {i}." for i in range(6))
    chunks = split_text_into_chunks(text, 60)
    order = {chunk: i for i, chunk in enumerate(chunks)}
    started, finished, in_flight = [], [], []

    async def handler(request: httpx.Request) -> httpx.Response:
        chunk = json.loads(request.content)["input"]["text"]
        index = order[chunk]
        started.append(index)
        # Early chunks answer last
        await asyncio.sleep(0.05 * (len(chunks) - index))
        if not finished:
            in_flight.append(len(started))
        finished.append(index)
        audio = f"[{index}]".encode()
        return httpx.Response(200, json={"audioContent": base64.b64encode(audio).decode()})

    async with mock_client(handler) as client:
        result = await GoogleCloudTTS("k", chunk_max_bytes=60, client=client).synthesize(text, "narrator")

    assert len(chunks) > 2
    assert in_flight == [len(chunks)]
    assert finished == sorted(finished, reverse=True)
    assert finished[0] == len(chunks) - 1
    assert result.audio == b"".join(f"[{i}]".encode() for i in range(len(chunks)))


@pytest.mark.asyncio
async def test_google_error_response_raises():
    async with mock_client(lambda r: httpx.Response(403, text="API key invalid")) as client:
        tts = GoogleCloudTTS("bad", client=client)
        with pytest.raises(SynthesisError) as exc_info:
            await tts.synthesize("Hello there.", "narrator")

    assert "403" in exc_info.value.message


@pytest.mark.asyncio
async def test_google_missing_audio_raises():
    async with mock_client(lambda r: httpx.Response(200, json={})) as client:
        with pytest.raises(SynthesisError):
            await GoogleCloudTTS("k", client=client).synthesize("Hello there.", "narrator")


# ElevenLabs

class FakeTextToSpeech:
    def __init__(self):
        self.calls = []

    def convert(self, **kwargs):
        self.calls.append(kwargs)

        async def stream():
            yield b"abc"
            yield b"def"

        return stream()


@pytest.mark.asyncio
async def test_elevenlabs_truncates_input_but_estimates_full_text():
    fake = FakeTextToSpeech()
    tts = ElevenLabsTTS("k", max_chars=20, client=SimpleNamespace(text_to_speech=fake))
    text = "This script is longer than twenty characters."

    result = await tts.synthesize(text, "calm_female")

    assert result.audio == b"abcdef"
    assert result.provider == "elevenlabs"
    assert result.duration_seconds == pytest.approx(estimate_duration(text))

    call = fake.calls[0]
    assert call["text"] == text[:20]
    assert call["voice_id"] == "pNInz6obpgDQGcFmaJgB"
    assert call["model_id"] == "eleven_turbo_v2"


# Provider fallback

@pytest.mark.asyncio
async def test_primary_used_when_it_succeeds():
    primary, fallback = FakeTTS("google"), FakeTTS("elevenlabs")

    result = await SpeechSynthesizer(primary, fallback).synthesize("Hello there.", "narrator")

    assert result.provider == "google"
    assert fallback.calls == []


@pytest.mark.asyncio
async def test_fallback_used_when_primary_fails():
    primary = FakeTTS("google", error=SynthesisError("quota exceeded"))
    fallback = FakeTTS("elevenlabs")

    result = await SpeechSynthesizer(primary, fallback).synthesize("Hello there.", "calm")

    assert result.provider == "elevenlabs"
    assert primary.calls == [("Hello there.", "calm")]
    assert fallback.calls == [("Hello there.", "calm")]


@pytest.mark.asyncio
async def test_fallback_alone_when_primary_unconfigured():
    fallback = FakeTTS("elevenlabs")

    result = await SpeechSynthesizer(None, fallback).synthesize("Hello there.", "narrator")

    assert result.provider == "elevenlabs"


@pytest.mark.asyncio
async def test_both_providers_failing():
    primary = FakeTTS("google", error=SynthesisError("quota exceeded"))
    fallback = FakeTTS("elevenlabs", error=RuntimeError("voice missing"))

    with pytest.raises(SynthesisError) as exc_info:
        await SpeechSynthesizer(primary, fallback).synthesize("Hello there.", "narrator")

    assert exc_info.value.message.startswith("Both TTS services failed. google: quota exceeded")


@pytest.mark.asyncio
async def test_single_provider_failure_is_reraised():
    primary = FakeTTS("google", error=SynthesisError("quota exceeded"))

    with pytest.raises(SynthesisError, match="quota exceeded"):
        await SpeechSynthesizer(primary).synthesize("Hello there.", "narrator")


@pytest.mark.asyncio
async def test_no_provider_configured():
    settings = TTSSettings(_env_file=None, google_api_key=None, elevenlabs_api_key=None)
    synthesizer = SpeechSynthesizer.from_settings(settings)

    with pytest.raises(ConfigurationError):
        await synthesizer.synthesize("Hello there.", "narrator")
