"""Tests for the podcast pipeline orchestrator."""

import pytest

from readitout.errors import SynthesisError
from readitout.pipeline import PipelineError, PodcastPipeline
from readitout.storage import InMemoryPodcastStore
from readitout.storage.models import DurationType, Podcast, PodcastStatus
from readitout.tts import SpeechSynthesizer

from .conftest import EXAMPLE_TEXT, FakeTTS


class RecordingStore(InMemoryPodcastStore):
    """Records every status written through ``update_podcast``."""

    def __init__(self):
        super().__init__()
        self.statuses: list[PodcastStatus] = []

    async def update_podcast(self, podcast_id, **changes):
        if "status" in changes:
            self.statuses.append(changes["status"])
        return await super().update_podcast(podcast_id, **changes)


async def create_pending(store, **overrides) -> Podcast:
    data = {"source_text": EXAMPLE_TEXT, "duration_type": DurationType.FULL}
    data.update(overrides)
    return await store.create_podcast(Podcast(**data))


@pytest.mark.asyncio
async def test_end_to_end_text_podcast(pipeline, store, tts):
    podcast = await create_pending(store)

    result = await pipeline.run(podcast.id)

    assert result.status is PodcastStatus.COMPLETED
    assert result.title == "My Title"
    assert result.script == "This is a story. It has two sentences."
    assert result.audio_duration_seconds == pytest.approx(3.2)
    assert result.audio_url.startswith("http://test/audio/podcasts/")
    assert result.completed_at is not None
    assert result.error_message is None
    assert tts.calls == [("This is a story. It has two sentences.", "narrator")]

    segments = await store.get_transcript_segments(podcast.id)
    assert [s.text for s in segments] == ["This is a story.", "It has two sentences."]
    assert segments[0].start_time == 0
    assert segments[0].end_time == pytest.approx(1.6)
    assert segments[1].start_time == segments[0].end_time
    assert segments[1].end_time == result.audio_duration_seconds


@pytest.mark.asyncio
async def test_status_sequence_never_regresses(blobs, extractor, summarizer):
    store = RecordingStore()
    pipeline = PodcastPipeline(store, blobs, extractor, summarizer, SpeechSynthesizer(FakeTTS()))
    podcast = await create_pending(store)

    await pipeline.run(podcast.id)

    assert store.statuses == [
        PodcastStatus.EXTRACTING,
        PodcastStatus.PROCESSING,
        PodcastStatus.GENERATING_AUDIO,
        PodcastStatus.UPLOADING,
        PodcastStatus.COMPLETED,
    ]
    orders = [s.order for s in store.statuses]
    assert orders == sorted(orders)


@pytest.mark.asyncio
async def test_synthesis_failure_marks_podcast_failed(blobs, extractor, summarizer):
    store = RecordingStore()
    synthesizer = SpeechSynthesizer(FakeTTS("google", error=SynthesisError("quota exceeded")))
    pipeline = PodcastPipeline(store, blobs, extractor, summarizer, synthesizer)
    podcast = await create_pending(store)

    result = await pipeline.run(podcast.id)

    assert result.status is PodcastStatus.FAILED
    assert result.error_message == "quota exceeded"
    # Nothing written before the failure is rolled back
    assert result.title == "My Title"
    assert result.audio_url is None
    assert store.statuses[-2:] == [PodcastStatus.GENERATING_AUDIO, PodcastStatus.FAILED]
    assert await store.get_transcript_segments(podcast.id) == []


@pytest.mark.asyncio
async def test_fetch_failure_marks_podcast_failed(pipeline, store):
    podcast = await store.create_podcast(Podcast(source_url="https://example.com/post"))

    result = await pipeline.run(podcast.id)

    assert result.status is PodcastStatus.FAILED
    assert "503" in result.error_message
    assert result.title == "Processing..."


@pytest.mark.asyncio
async def test_unexpected_provider_error_is_wrapped(blobs, extractor, summarizer, store):
    synthesizer = SpeechSynthesizer(FakeTTS("google", error=RuntimeError()))
    pipeline = PodcastPipeline(store, blobs, extractor, summarizer, synthesizer)
    podcast = await create_pending(store)

    result = await pipeline.run(podcast.id)

    assert result.status is PodcastStatus.FAILED
    assert result.error_message == "google TTS failed: RuntimeError"


@pytest.mark.asyncio
async def test_summarized_script_is_narrated(pipeline, store, tts):
    body = " ".join(f"Sentence number {i} is here." for i in range(100))
    podcast = await create_pending(store, source_text=f"Long Read\n{body}", duration_type=DurationType.TWO_MIN)

    result = await pipeline.run(podcast.id)

    assert result.status is PodcastStatus.COMPLETED
    assert len(result.script.split()) <= 300
    assert tts.calls[0][0] == result.script


@pytest.mark.asyncio
async def test_only_pending_podcasts_run(pipeline, store):
    podcast = await create_pending(store)
    await pipeline.run(podcast.id)

    with pytest.raises(PipelineError):
        await pipeline.run(podcast.id)

    with pytest.raises(PipelineError):
        await pipeline.run("missing")
