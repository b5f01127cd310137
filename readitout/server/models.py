"""Response models for the HTTP API."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from ..storage.models import DurationType, Podcast, PodcastStatus


class PodcastListResponse(BaseModel):
    podcasts: list[Podcast] = Field(..., description="Podcasts, newest first")


class PublicPodcastResponse(BaseModel):
    """What a share link reveals: no owner and no raw input."""

    id: str
    title: str
    source_url: Optional[str] = None
    voice_style: str
    duration_type: DurationType
    audio_url: Optional[str] = None
    audio_duration_seconds: Optional[float] = None
    status: PodcastStatus
    share_slug: str
    created_at: datetime
    completed_at: Optional[datetime] = None

    @classmethod
    def from_podcast(cls, podcast: Podcast) -> "PublicPodcastResponse":
        return cls.model_validate(podcast.model_dump(include=set(cls.model_fields)))


class VoiceOption(BaseModel):
    id: str
    name: str


class VoicesResponse(BaseModel):
    voices: list[VoiceOption]
    durations: list[str]


class HealthResponse(BaseModel):
    status: str
    timestamp: str
    version: str
