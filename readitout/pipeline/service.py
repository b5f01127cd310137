"""
Podcast service: the operations exposed to API and CLI clients.

Creating a podcast returns the ``pending`` record immediately; generation
runs as a background task (or inline with ``wait=True``). Callers learn
about failures only by reading the podcast's status.
"""

import asyncio
from typing import Optional

import structlog
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from ..errors import InvalidInputError, NotFoundError, TranscriptNotReadyError
from ..extractors import ContentExtractor
from ..processors.summarizer import Summarizer
from ..settings import Settings
from ..storage import create_blob_storage, create_store
from ..storage.base import PodcastStore
from ..storage.blob import BlobStorage
from ..storage.models import DurationType, Podcast, PodcastStatus, Transcript
from ..tts import SpeechSynthesizer
from ..tts.voices import DEFAULT_VOICE_STYLE, VOICE_STYLE_ALIASES
from .orchestrator import PodcastPipeline

logger = structlog.get_logger()


class CreatePodcastRequest(BaseModel):
    """Input for a new podcast. Exactly one source is required."""

    source_url: Optional[str] = None
    source_text: Optional[str] = None
    voice_style: str = Field(default=DEFAULT_VOICE_STYLE)
    duration_type: DurationType = Field(default=DurationType.FIVE_MIN)

    @field_validator("source_url", "source_text", mode="before")
    @classmethod
    def blank_is_missing(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("voice_style", mode="before")
    @classmethod
    def known_voice_style(cls, value):
        # Unknown styles silently fall back to the default voice
        if isinstance(value, str) and value in VOICE_STYLE_ALIASES:
            return value
        return DEFAULT_VOICE_STYLE

    @field_validator("duration_type", mode="before")
    @classmethod
    def default_duration(cls, value):
        return DurationType.FIVE_MIN if value is None else value

    @model_validator(mode="after")
    def exactly_one_source(self) -> "CreatePodcastRequest":
        if (self.source_url is None) == (self.source_text is None):
            raise ValueError("Exactly one of source_url or source_text is required")
        return self


def parse_create_request(data: dict) -> CreatePodcastRequest:
    """Validate raw request fields, raising ``InvalidInputError``."""
    try:
        return CreatePodcastRequest.model_validate(data)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(loc) for loc in first.get("loc", ())) or None
        message = first.get("msg", "Invalid request").removeprefix("Value error, ")
        raise InvalidInputError(message, field=field) from e


class PodcastService:
    """
    Create, read, share and delete podcasts.

    Usage:
        service = await PodcastService.from_settings(settings)
        podcast = await service.create_podcast(request)
        ...
        await service.close()
    """

    def __init__(
        self,
        store: PodcastStore,
        blobs: BlobStorage,
        pipeline: PodcastPipeline,
        default_user_id: str = "local",
    ):
        self.store = store
        self.blobs = blobs
        self.pipeline = pipeline
        self.default_user_id = default_user_id
        self._tasks: dict[str, asyncio.Task] = {}

    @classmethod
    async def from_settings(cls, settings: Settings) -> "PodcastService":
        store = await create_store(settings.storage)
        blobs = create_blob_storage(settings.storage)
        pipeline = PodcastPipeline(
            store=store,
            blobs=blobs,
            extractor=ContentExtractor(settings.twitter),
            summarizer=Summarizer(settings.llm),
            synthesizer=SpeechSynthesizer.from_settings(settings.tts),
        )
        return cls(store, blobs, pipeline, default_user_id=settings.default_user_id)

    async def create_podcast(
        self,
        request: CreatePodcastRequest,
        user_id: Optional[str] = None,
        wait: bool = False,
    ) -> Podcast:
        """Store a new pending podcast and start generating it."""
        if (request.source_url is None) == (request.source_text is None):
            raise InvalidInputError("Exactly one of source_url or source_text is required")

        podcast = await self.store.create_podcast(
            Podcast(
                user_id=user_id or self.default_user_id,
                source_url=request.source_url,
                source_text=request.source_text,
                voice_style=request.voice_style,
                duration_type=request.duration_type,
            )
        )
        logger.info(f"Created podcast {podcast.id}", duration_type=podcast.duration_type.value)

        if wait:
            await self.pipeline.run(podcast.id)
        else:
            task = asyncio.create_task(self.pipeline.run(podcast.id), name=f"podcast-{podcast.id}")
            self._tasks[podcast.id] = task
            task.add_done_callback(self._on_task_done)

        return podcast

    def _on_task_done(self, task: asyncio.Task) -> None:
        podcast_id = task.get_name().removeprefix("podcast-")
        self._tasks.pop(podcast_id, None)
        if task.cancelled():
            logger.warning(f"Podcast {podcast_id} generation cancelled")
            return
        error = task.exception()
        if error is not None:
            logger.error(f"Podcast {podcast_id} generation crashed: {error}", exc_info=error)

    async def wait_for(self, podcast_id: str, timeout: Optional[float] = None) -> Podcast:
        """
        Wait for a background run to finish and return the podcast.

        A timeout stops waiting but does not cancel the run.
        """
        task = self._tasks.get(podcast_id)
        if task is not None:
            done, _ = await asyncio.wait([task], timeout=timeout)
            if not done:
                logger.warning(f"Podcast {podcast_id} still running after {timeout}s")
        return await self.get_podcast(podcast_id)

    async def get_podcast(self, podcast_id: str) -> Podcast:
        podcast = await self.store.get_podcast(podcast_id)
        if podcast is None:
            raise NotFoundError("Podcast not found", {"podcast_id": podcast_id})
        return podcast

    async def list_podcasts(self, user_id: Optional[str] = None) -> list[Podcast]:
        return await self.store.list_podcasts(user_id or self.default_user_id)

    async def delete_podcast(self, podcast_id: str) -> None:
        """Delete the podcast, its transcript, and its audio files."""
        await self.get_podcast(podcast_id)

        try:
            await self.blobs.delete_audio(podcast_id)
        except Exception as e:
            logger.error(f"Failed to delete audio for podcast {podcast_id}: {e}")

        await self.store.delete_podcast(podcast_id)
        logger.info(f"Deleted podcast {podcast_id}")

    async def toggle_public(self, podcast_id: str) -> Podcast:
        """Flip public visibility; the share slug never changes."""
        podcast = await self.get_podcast(podcast_id)
        updated = await self.store.update_podcast(podcast_id, is_public=not podcast.is_public)
        if updated is None:
            raise NotFoundError("Podcast not found", {"podcast_id": podcast_id})
        return updated

    async def get_transcript(self, podcast_id: str) -> Transcript:
        podcast = await self.get_podcast(podcast_id)
        if podcast.status is not PodcastStatus.COMPLETED:
            raise TranscriptNotReadyError(
                "Transcript not available until podcast is completed",
                {"podcast_id": podcast_id, "status": podcast.status.value},
            )
        segments = await self.store.get_transcript_segments(podcast_id)
        return Transcript(podcast_id=podcast_id, segments=segments)

    async def get_public_podcast(self, share_slug: str) -> Podcast:
        """Podcast for a share link; hidden again once made private."""
        podcast = await self.store.get_podcast_by_slug(share_slug)
        if podcast is None or not podcast.is_public:
            raise NotFoundError("Podcast not found or not public", {"share_slug": share_slug})
        return podcast

    async def get_public_transcript(self, share_slug: str) -> Transcript:
        podcast = await self.get_public_podcast(share_slug)
        segments = await self.store.get_transcript_segments(podcast.id)
        return Transcript(podcast_id=podcast.id, segments=segments)

    async def close(self) -> None:
        """Wait for running generations, then release resources."""
        if self._tasks:
            await asyncio.gather(*self._tasks.values(), return_exceptions=True)
        await self.pipeline.synthesizer.close()
        await self.store.close()
