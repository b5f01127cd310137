"""Tests for the podcast stores (in-memory and SQLite) and blob storage."""

from datetime import datetime, timedelta, timezone

import pytest

from readitout.processors.transcript import build_transcript
from readitout.storage import InMemoryPodcastStore, LocalBlobStorage, SqlitePodcastStore, init_database
from readitout.storage.database import PodcastDatabase
from readitout.storage.models import DurationType, Podcast, PodcastStatus


@pytest.fixture(params=["memory", "sqlite"])
async def any_store(request, tmp_path):
    if request.param == "memory":
        store = InMemoryPodcastStore()
    else:
        store = SqlitePodcastStore(await init_database(tmp_path / "test.db"))
    yield store
    await store.close()


def make_podcast(**overrides) -> Podcast:
    data = {"source_text": "Some text to narrate.", "duration_type": DurationType.TWO_MIN}
    data.update(overrides)
    return Podcast(**data)


@pytest.mark.asyncio
async def test_sqlite_podcasts_survive_reopen(tmp_path):
    db_path = tmp_path / "nested" / "podcasts.db"
    podcast = make_podcast()

    async with PodcastDatabase(db_path) as db:
        await SqlitePodcastStore(db).create_podcast(podcast)

    with pytest.raises(RuntimeError):
        db.connection

    store = SqlitePodcastStore(await PodcastDatabase.open(db_path))
    try:
        assert (await store.get_podcast(podcast.id)).id == podcast.id
    finally:
        await store.close()


@pytest.mark.asyncio
async def test_create_and_get_round_trip(any_store):
    podcast = make_podcast(voice_style="calm")
    await any_store.create_podcast(podcast)

    fetched = await any_store.get_podcast(podcast.id)

    assert fetched.model_dump() == podcast.model_dump()
    assert fetched.status is PodcastStatus.PENDING
    assert fetched.duration_type is DurationType.TWO_MIN


@pytest.mark.asyncio
async def test_get_missing_returns_none(any_store):
    assert await any_store.get_podcast("missing") is None
    assert await any_store.get_podcast_by_slug("nosuchslug") is None


@pytest.mark.asyncio
async def test_update_applies_changes_and_bumps_updated_at(any_store):
    podcast = await any_store.create_podcast(make_podcast())

    updated = await any_store.update_podcast(
        podcast.id,
        status=PodcastStatus.EXTRACTING,
        title="Real Title",
        audio_duration_seconds=3.2,
    )

    assert updated.title == "Real Title"
    assert updated.status is PodcastStatus.EXTRACTING
    assert updated.updated_at >= podcast.updated_at

    fetched = await any_store.get_podcast(podcast.id)
    assert fetched.title == "Real Title"
    assert fetched.audio_duration_seconds == 3.2
    assert fetched.created_at == podcast.created_at


@pytest.mark.asyncio
async def test_update_missing_returns_none(any_store):
    assert await any_store.update_podcast("missing", title="x") is None


@pytest.mark.asyncio
async def test_share_slug_is_immutable(any_store):
    podcast = await any_store.create_podcast(make_podcast())

    with pytest.raises(ValueError):
        await any_store.update_podcast(podcast.id, share_slug="changed000")


@pytest.mark.asyncio
async def test_get_by_slug_ignores_visibility(any_store):
    podcast = await any_store.create_podcast(make_podcast())

    fetched = await any_store.get_podcast_by_slug(podcast.share_slug)

    assert fetched.id == podcast.id
    assert fetched.is_public is False


@pytest.mark.asyncio
async def test_list_newest_first_for_owner(any_store):
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    older = await any_store.create_podcast(make_podcast(created_at=base))
    newer = await any_store.create_podcast(make_podcast(created_at=base + timedelta(seconds=1)))
    await any_store.create_podcast(make_podcast(user_id="someone-else"))

    podcasts = await any_store.list_podcasts("local")

    assert [p.id for p in podcasts] == [newer.id, older.id]


@pytest.mark.asyncio
async def test_list_ties_broken_by_insertion_order(any_store):
    created_at = datetime(2024, 1, 1, tzinfo=timezone.utc)
    first = await any_store.create_podcast(make_podcast(created_at=created_at))
    second = await any_store.create_podcast(make_podcast(created_at=created_at))

    podcasts = await any_store.list_podcasts("local")

    assert [p.id for p in podcasts] == [second.id, first.id]


@pytest.mark.asyncio
async def test_segments_ordered_and_deleted_with_podcast(any_store):
    podcast = await any_store.create_podcast(make_podcast())
    timings = build_transcript("One. Two. Three.", 3.0)
    await any_store.create_transcript_batch(podcast.id, list(reversed(timings)))

    segments = await any_store.get_transcript_segments(podcast.id)

    assert [s.sentence_index for s in segments] == [0, 1, 2]
    assert [s.text for s in segments] == ["One.", "Two.", "Three."]
    assert segments[-1].end_time == 3.0

    assert await any_store.delete_podcast(podcast.id) is True
    assert await any_store.get_podcast(podcast.id) is None
    assert await any_store.get_transcript_segments(podcast.id) == []
    assert await any_store.delete_podcast(podcast.id) is False


@pytest.mark.asyncio
async def test_memory_store_returns_snapshots(store):
    podcast = await store.create_podcast(make_podcast())

    fetched = await store.get_podcast(podcast.id)
    fetched.title = "Mutated locally"

    assert (await store.get_podcast(podcast.id)).title == "Processing..."


# Blob storage

@pytest.mark.asyncio
async def test_upload_and_delete_audio(tmp_path):
    blobs = LocalBlobStorage(tmp_path / "audio", "http://localhost:8000/audio/")

    url = await blobs.upload_audio(b"ID3data", "pod-1")

    assert url.startswith("http://localhost:8000/audio/podcasts/pod-1/")
    assert url.endswith(".mp3")
    stored = tmp_path / "audio" / "podcasts" / "pod-1" / url.rsplit("/", 1)[1]
    assert stored.read_bytes() == b"ID3data"

    await blobs.delete_audio("pod-1")
    assert not (tmp_path / "audio" / "podcasts" / "pod-1").exists()

    # Deleting again is a no-op
    await blobs.delete_audio("pod-1")


@pytest.mark.asyncio
@pytest.mark.parametrize("bad_id", ["", "..", "a/b", "..\\x"])
async def test_blob_rejects_path_like_ids(tmp_path, bad_id):
    blobs = LocalBlobStorage(tmp_path, "http://test")

    with pytest.raises(ValueError):
        await blobs.upload_audio(b"x", bad_id)
