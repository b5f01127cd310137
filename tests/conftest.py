"""Shared fixtures: in-memory store, local blobs, fake TTS, mocked HTTP."""

from typing import Callable, Optional

import httpx
import pytest

from readitout.extractors import ContentExtractor
from readitout.pipeline import PodcastPipeline, PodcastService
from readitout.processors.summarizer import Summarizer
from readitout.settings import LLMSettings, TwitterSettings
from readitout.storage import InMemoryPodcastStore, LocalBlobStorage
from readitout.tts import SpeechSynthesizer, SynthesisResult, TTSProvider, estimate_duration

EXAMPLE_TEXT = "My Title\nThis is a story. It has two sentences."


class FakeTTS(TTSProvider):
    """Provider returning fixed bytes, or raising ``error`` when set."""

    def __init__(self, name: str = "fake", error: Optional[Exception] = None):
        self._name = name
        self.error = error
        self.calls: list[tuple[str, str]] = []

    @property
    def name(self) -> str:
        return self._name

    async def synthesize(self, text: str, voice_style: str) -> SynthesisResult:
        self.calls.append((text, voice_style))
        if self.error is not None:
            raise self.error
        return SynthesisResult(
            audio=b"ID3-fake-audio",
            duration_seconds=estimate_duration(text),
            provider=self.name,
        )


def mock_client(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def offline_handler(request: httpx.Request) -> httpx.Response:
    return httpx.Response(503, json={"error": "offline"})


@pytest.fixture
def twitter_settings() -> TwitterSettings:
    return TwitterSettings(_env_file=None, rapidapi_key=None)


@pytest.fixture
def store() -> InMemoryPodcastStore:
    return InMemoryPodcastStore()


@pytest.fixture
def blobs(tmp_path) -> LocalBlobStorage:
    return LocalBlobStorage(tmp_path / "audio", "http://test/audio")


@pytest.fixture
def tts() -> FakeTTS:
    return FakeTTS()


@pytest.fixture
async def extractor(twitter_settings):
    client = mock_client(offline_handler)
    yield ContentExtractor(twitter_settings, client=client)
    await client.aclose()


@pytest.fixture
def summarizer() -> Summarizer:
    return Summarizer(LLMSettings(_env_file=None, api_key=None))


@pytest.fixture
def pipeline(store, blobs, extractor, summarizer, tts) -> PodcastPipeline:
    return PodcastPipeline(
        store=store,
        blobs=blobs,
        extractor=extractor,
        summarizer=summarizer,
        synthesizer=SpeechSynthesizer(primary=tts),
    )


@pytest.fixture
def service(store, blobs, pipeline) -> PodcastService:
    return PodcastService(store, blobs, pipeline)
