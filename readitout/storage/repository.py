"""
Repository pattern for podcast storage operations on SQLite.
"""

import asyncio
from datetime import datetime
from typing import Any, Optional, Sequence
import structlog

from ..processors.transcript import SegmentTiming
from .base import PodcastStore, apply_changes, to_segments
from .database import PodcastDatabase
from .models import Podcast, TranscriptSegment

logger = structlog.get_logger()

PODCAST_COLUMNS = (
    "id", "user_id", "title", "source_url", "source_text",
    "voice_style", "duration_type", "script", "audio_url", "audio_duration_seconds",
    "status", "error_message", "is_public", "share_slug",
    "created_at", "updated_at", "completed_at",
)


class SqlitePodcastStore(PodcastStore):
    """Durable store backed by ``PodcastDatabase``."""

    def __init__(self, db: PodcastDatabase):
        self.db = db
        # Serializes read-modify-write updates on the shared connection
        self._write_lock = asyncio.Lock()

    async def create_podcast(self, podcast: Podcast) -> Podcast:
        placeholders = ", ".join("?" for _ in PODCAST_COLUMNS)
        sql = f"INSERT INTO podcasts ({', '.join(PODCAST_COLUMNS)}) VALUES ({placeholders})"
        async with self._write_lock:
            await self.db.connection.execute(sql, self._podcast_to_row(podcast))
            await self.db.connection.commit()
        return podcast.model_copy(deep=True)

    async def get_podcast(self, podcast_id: str) -> Optional[Podcast]:
        sql = "SELECT * FROM podcasts WHERE id = ?"
        async with self.db.connection.execute(sql, (podcast_id,)) as cursor:
            row = await cursor.fetchone()
            if row:
                return self._row_to_podcast(dict(row))
        return None

    async def get_podcast_by_slug(self, share_slug: str) -> Optional[Podcast]:
        sql = "SELECT * FROM podcasts WHERE share_slug = ?"
        async with self.db.connection.execute(sql, (share_slug,)) as cursor:
            row = await cursor.fetchone()
            if row:
                return self._row_to_podcast(dict(row))
        return None

    async def list_podcasts(self, user_id: str) -> list[Podcast]:
        sql = """
        SELECT * FROM podcasts
        WHERE user_id = ?
        ORDER BY created_at DESC, rowid DESC
        """
        podcasts = []
        async with self.db.connection.execute(sql, (user_id,)) as cursor:
            async for row in cursor:
                podcasts.append(self._row_to_podcast(dict(row)))
        return podcasts

    async def update_podcast(self, podcast_id: str, **changes: Any) -> Optional[Podcast]:
        """Write the whole record back, as one statement."""
        async with self._write_lock:
            current = await self.get_podcast(podcast_id)
            if current is None:
                return None
            updated = apply_changes(current, changes)

            columns = [c for c in PODCAST_COLUMNS if c != "id"]
            assignments = ", ".join(f"{c} = ?" for c in columns)
            row = dict(zip(PODCAST_COLUMNS, self._podcast_to_row(updated)))
            await self.db.connection.execute(
                f"UPDATE podcasts SET {assignments} WHERE id = ?",
                [row[c] for c in columns] + [podcast_id],
            )
            await self.db.connection.commit()
            return updated

    async def delete_podcast(self, podcast_id: str) -> bool:
        async with self._write_lock:
            cursor = await self.db.connection.execute(
                "DELETE FROM podcasts WHERE id = ?", (podcast_id,)
            )
            await self.db.connection.commit()
            return cursor.rowcount > 0

    async def create_transcript_batch(
        self,
        podcast_id: str,
        segments: Sequence[SegmentTiming],
    ) -> list[TranscriptSegment]:
        created = to_segments(podcast_id, segments)
        sql = """
        INSERT INTO transcript_segments (id, podcast_id, sentence_index, text, start_time, end_time)
        VALUES (?, ?, ?, ?, ?, ?)
        """
        async with self._write_lock:
            await self.db.connection.executemany(sql, [
                (s.id, s.podcast_id, s.sentence_index, s.text, s.start_time, s.end_time)
                for s in created
            ])
            await self.db.connection.commit()
        return created

    async def get_transcript_segments(self, podcast_id: str) -> list[TranscriptSegment]:
        sql = """
        SELECT * FROM transcript_segments
        WHERE podcast_id = ?
        ORDER BY sentence_index
        """
        segments = []
        async with self.db.connection.execute(sql, (podcast_id,)) as cursor:
            async for row in cursor:
                segments.append(TranscriptSegment(**dict(row)))
        return segments

    async def close(self) -> None:
        await self.db.close()

    def _podcast_to_row(self, podcast: Podcast) -> tuple:
        data = podcast.model_dump()
        for field in ("created_at", "updated_at", "completed_at"):
            if data[field] is not None:
                # Fixed-width timestamps keep ORDER BY created_at correct
                data[field] = data[field].isoformat(timespec="microseconds")
        data["status"] = podcast.status.value
        data["duration_type"] = podcast.duration_type.value
        return tuple(data[c] for c in PODCAST_COLUMNS)

    def _row_to_podcast(self, row: dict) -> Podcast:
        """Convert database row to Podcast model."""
        for field in ("created_at", "updated_at", "completed_at"):
            if row.get(field):
                row[field] = datetime.fromisoformat(row[field])
        row["is_public"] = bool(row.get("is_public"))
        return Podcast(**row)
