"""
Audio blob storage.

Audio files are written under ``podcasts/<podcast_id>/<uuid>.mp3`` so that
deleting a podcast removes everything under its prefix.
"""

import shutil
import uuid
from abc import ABC, abstractmethod
from pathlib import Path

import structlog

logger = structlog.get_logger()


class BlobStorage(ABC):
    """Stores audio artifacts and hands out public URLs."""

    @abstractmethod
    async def upload_audio(self, audio: bytes, podcast_id: str) -> str:
        """Store ``audio`` and return its public URL."""
        pass

    @abstractmethod
    async def delete_audio(self, podcast_id: str) -> None:
        """Remove every file stored for ``podcast_id``."""
        pass


class LocalBlobStorage(BlobStorage):
    """
    Filesystem-backed storage.

    ``root`` is served by the HTTP API at ``public_base_url``.
    """

    def __init__(self, root: Path | str, public_base_url: str):
        self.root = Path(root)
        self.public_base_url = public_base_url.rstrip("/")
        self.root.mkdir(parents=True, exist_ok=True)

    def _podcast_dir(self, podcast_id: str) -> Path:
        # Podcast ids are uuids; reject anything that could escape the root
        if not podcast_id or "/" in podcast_id or "\\" in podcast_id or podcast_id in (".", ".."):
            raise ValueError(f"Invalid podcast id: {podcast_id!r}")
        return self.root / "podcasts" / podcast_id

    async def upload_audio(self, audio: bytes, podcast_id: str) -> str:
        filename = f"{uuid.uuid4()}.mp3"
        output_path = self._podcast_dir(podcast_id) / filename

        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "wb") as f:
            f.write(audio)

        url = f"{self.public_base_url}/podcasts/{podcast_id}/{filename}"
        logger.info(f"Audio saved to {output_path} ({len(audio) / 1024:.1f} KB)")
        return url

    async def delete_audio(self, podcast_id: str) -> None:
        directory = self._podcast_dir(podcast_id)
        if directory.exists():
            shutil.rmtree(directory)
            logger.info(f"Deleted audio files for podcast: {podcast_id}")
