"""
SQLite database for podcast records and transcript segments.

A single file is enough for a single-instance deployment and survives
restarts, unlike the in-memory store.
"""

import aiosqlite
from pathlib import Path
from typing import Optional
import structlog

logger = structlog.get_logger()

# SQL Schema
SCHEMA = """
-- Podcasts table: one row per request, updated after every pipeline stage
CREATE TABLE IF NOT EXISTS podcasts (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    title TEXT NOT NULL,

    -- Input (exactly one is set)
    source_url TEXT,
    source_text TEXT,

    -- Parameters
    voice_style TEXT NOT NULL,
    duration_type TEXT NOT NULL,

    -- Results
    script TEXT,
    audio_url TEXT,
    audio_duration_seconds REAL,

    status TEXT NOT NULL DEFAULT 'pending',
    error_message TEXT,

    -- Sharing
    is_public BOOLEAN NOT NULL DEFAULT FALSE,
    share_slug TEXT UNIQUE NOT NULL,

    created_at TIMESTAMP NOT NULL,
    updated_at TIMESTAMP NOT NULL,
    completed_at TIMESTAMP,

    CONSTRAINT one_source CHECK ((source_url IS NULL) != (source_text IS NULL))
);

-- Transcript segments: written once, in bulk, after synthesis
CREATE TABLE IF NOT EXISTS transcript_segments (
    id TEXT PRIMARY KEY,
    podcast_id TEXT NOT NULL REFERENCES podcasts(id) ON DELETE CASCADE,
    sentence_index INTEGER NOT NULL,
    text TEXT NOT NULL,
    start_time REAL NOT NULL,
    end_time REAL NOT NULL,

    UNIQUE (podcast_id, sentence_index)
);

-- Indexes for performance
CREATE INDEX IF NOT EXISTS idx_podcasts_user_created ON podcasts(user_id, created_at DESC);
CREATE INDEX IF NOT EXISTS idx_podcasts_status ON podcasts(status);
CREATE INDEX IF NOT EXISTS idx_segments_podcast ON transcript_segments(podcast_id, sentence_index);
"""


PRAGMAS = (
    "PRAGMA foreign_keys = ON",  # segment cascade
    "PRAGMA journal_mode = WAL",  # status polls read while the pipeline writes
)


class PodcastDatabase:
    """
    One aiosqlite connection with the podcast schema applied.

    Open with ``await PodcastDatabase.open(path)`` or ``async with``.
    """

    def __init__(self, db_path: Path | str):
        self.db_path = Path(db_path)
        self._conn: Optional[aiosqlite.Connection] = None

    @classmethod
    async def open(cls, db_path: Path | str) -> "PodcastDatabase":
        db = cls(db_path)
        await db._open()
        return db

    async def _open(self) -> None:
        if self._conn is not None:
            return
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = await aiosqlite.connect(self.db_path)
        conn.row_factory = aiosqlite.Row
        for pragma in PRAGMAS:
            await conn.execute(pragma)
        await conn.executescript(SCHEMA)
        await conn.commit()
        self._conn = conn
        logger.info(f"Podcast database ready at {self.db_path}")

    @property
    def connection(self) -> aiosqlite.Connection:
        if self._conn is None:
            raise RuntimeError(f"Podcast database {self.db_path} is not open")
        return self._conn

    async def close(self) -> None:
        conn, self._conn = self._conn, None
        if conn is not None:
            await conn.close()

    async def __aenter__(self) -> "PodcastDatabase":
        await self._open()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()


async def init_database(db_path: Path | str = "data/readitout.db") -> PodcastDatabase:
    """Open the database at ``db_path``, creating file and tables as needed."""
    return await PodcastDatabase.open(db_path)
