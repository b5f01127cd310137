"""Store interface for podcasts and transcript segments."""

from abc import ABC, abstractmethod
from typing import Any, Optional, Sequence

from ..processors.transcript import SegmentTiming
from .models import Podcast, TranscriptSegment, utcnow


class PodcastStore(ABC):
    """
    Persists podcast records and their transcript segments.

    Updates are full-record replacements keyed by podcast id; the last
    writer wins. Implementations must return snapshots that later writes
    do not mutate.
    """

    @abstractmethod
    async def create_podcast(self, podcast: Podcast) -> Podcast:
        pass

    @abstractmethod
    async def get_podcast(self, podcast_id: str) -> Optional[Podcast]:
        pass

    @abstractmethod
    async def get_podcast_by_slug(self, share_slug: str) -> Optional[Podcast]:
        """Lookup by share slug, regardless of visibility."""
        pass

    @abstractmethod
    async def list_podcasts(self, user_id: str) -> list[Podcast]:
        """Podcasts of one owner, newest created first."""
        pass

    @abstractmethod
    async def update_podcast(self, podcast_id: str, **changes: Any) -> Optional[Podcast]:
        """Apply ``changes``, bump ``updated_at``; None if the podcast is gone."""
        pass

    @abstractmethod
    async def delete_podcast(self, podcast_id: str) -> bool:
        """Delete a podcast and its transcript segments."""
        pass

    @abstractmethod
    async def create_transcript_batch(
        self,
        podcast_id: str,
        segments: Sequence[SegmentTiming],
    ) -> list[TranscriptSegment]:
        pass

    @abstractmethod
    async def get_transcript_segments(self, podcast_id: str) -> list[TranscriptSegment]:
        """Segments ordered by ``sentence_index``."""
        pass

    async def close(self) -> None:
        """Release resources held by the store."""


def apply_changes(podcast: Podcast, changes: dict[str, Any]) -> Podcast:
    """Validated copy of ``podcast`` with ``changes`` and a fresh ``updated_at``."""
    if "id" in changes or "share_slug" in changes:
        raise ValueError("id and share_slug are immutable")
    data = podcast.model_dump()
    data.update(changes)
    data["updated_at"] = utcnow()
    return Podcast.model_validate(data)


def to_segments(podcast_id: str, segments: Sequence[SegmentTiming]) -> list[TranscriptSegment]:
    return [
        TranscriptSegment(
            podcast_id=podcast_id,
            sentence_index=seg.sentence_index,
            text=seg.text,
            start_time=seg.start_time,
            end_time=seg.end_time,
        )
        for seg in segments
    ]
