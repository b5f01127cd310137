"""Storage layer for podcasts, transcripts, and audio files."""

from ..settings import StorageSettings
from .base import PodcastStore
from .blob import BlobStorage, LocalBlobStorage
from .database import PodcastDatabase, init_database
from .memory import InMemoryPodcastStore
from .models import DurationType, Podcast, PodcastStatus, Transcript, TranscriptSegment
from .repository import SqlitePodcastStore


async def create_store(settings: StorageSettings) -> PodcastStore:
    """Build the store backend selected in configuration."""
    if settings.backend == "sqlite":
        db = await init_database(settings.db_path)
        return SqlitePodcastStore(db)
    return InMemoryPodcastStore()


def create_blob_storage(settings: StorageSettings) -> BlobStorage:
    return LocalBlobStorage(settings.audio_dir, settings.public_base_url)


__all__ = [
    "BlobStorage",
    "DurationType",
    "InMemoryPodcastStore",
    "LocalBlobStorage",
    "Podcast",
    "PodcastDatabase",
    "PodcastStatus",
    "PodcastStore",
    "SqlitePodcastStore",
    "Transcript",
    "TranscriptSegment",
    "create_blob_storage",
    "create_store",
    "init_database",
]
