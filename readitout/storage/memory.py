"""
In-memory podcast store.

Data lives for the lifetime of the process only. Useful for development,
tests, and single-instance deployments that do not need durability.
"""

import asyncio
import itertools
from typing import Any, Optional, Sequence

from ..processors.transcript import SegmentTiming
from .base import PodcastStore, apply_changes, to_segments
from .models import Podcast, TranscriptSegment


class InMemoryPodcastStore(PodcastStore):
    """Dict-backed store guarded by an asyncio lock."""

    def __init__(self):
        self._podcasts: dict[str, Podcast] = {}
        self._segments: dict[str, list[TranscriptSegment]] = {}
        # Insertion order breaks ties between identical created_at values
        self._sequence: dict[str, int] = {}
        self._counter = itertools.count()
        self._lock = asyncio.Lock()

    async def create_podcast(self, podcast: Podcast) -> Podcast:
        async with self._lock:
            if podcast.id in self._podcasts:
                raise ValueError(f"Podcast {podcast.id} already exists")
            self._podcasts[podcast.id] = podcast.model_copy(deep=True)
            self._sequence[podcast.id] = next(self._counter)
            return podcast.model_copy(deep=True)

    async def get_podcast(self, podcast_id: str) -> Optional[Podcast]:
        async with self._lock:
            podcast = self._podcasts.get(podcast_id)
            return podcast.model_copy(deep=True) if podcast else None

    async def get_podcast_by_slug(self, share_slug: str) -> Optional[Podcast]:
        async with self._lock:
            for podcast in self._podcasts.values():
                if podcast.share_slug == share_slug:
                    return podcast.model_copy(deep=True)
            return None

    async def list_podcasts(self, user_id: str) -> list[Podcast]:
        async with self._lock:
            podcasts = [p for p in self._podcasts.values() if p.user_id == user_id]
            podcasts.sort(key=lambda p: (p.created_at, self._sequence[p.id]), reverse=True)
            return [p.model_copy(deep=True) for p in podcasts]

    async def update_podcast(self, podcast_id: str, **changes: Any) -> Optional[Podcast]:
        async with self._lock:
            current = self._podcasts.get(podcast_id)
            if current is None:
                return None
            updated = apply_changes(current, changes)
            self._podcasts[podcast_id] = updated
            return updated.model_copy(deep=True)

    async def delete_podcast(self, podcast_id: str) -> bool:
        async with self._lock:
            if self._podcasts.pop(podcast_id, None) is None:
                return False
            self._sequence.pop(podcast_id, None)
            self._segments.pop(podcast_id, None)
            return True

    async def create_transcript_batch(
        self,
        podcast_id: str,
        segments: Sequence[SegmentTiming],
    ) -> list[TranscriptSegment]:
        created = to_segments(podcast_id, segments)
        async with self._lock:
            self._segments.setdefault(podcast_id, []).extend(created)
        return [s.model_copy() for s in created]

    async def get_transcript_segments(self, podcast_id: str) -> list[TranscriptSegment]:
        async with self._lock:
            segments = sorted(self._segments.get(podcast_id, []), key=lambda s: s.sentence_index)
            return [s.model_copy() for s in segments]
