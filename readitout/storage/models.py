"""Data models for podcasts and their transcripts."""

import secrets
import string
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, computed_field

SHARE_SLUG_ALPHABET = string.ascii_lowercase + string.digits
SHARE_SLUG_LENGTH = 10


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())


def generate_share_slug(length: int = SHARE_SLUG_LENGTH) -> str:
    """Random lowercase alphanumeric token for public links."""
    return "".join(secrets.choice(SHARE_SLUG_ALPHABET) for _ in range(length))


class PodcastStatus(str, Enum):
    """Pipeline state, in run order. FAILED is reachable from any non-terminal state."""

    PENDING = "pending"
    EXTRACTING = "extracting"
    PROCESSING = "processing"
    GENERATING_AUDIO = "generating_audio"
    UPLOADING = "uploading"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (PodcastStatus.COMPLETED, PodcastStatus.FAILED)

    @property
    def order(self) -> int:
        """Position in the run sequence; FAILED sorts after everything."""
        return _STATUS_ORDER.index(self)

    def can_transition_to(self, target: "PodcastStatus") -> bool:
        if self.is_terminal:
            return False
        if target is PodcastStatus.FAILED:
            return True
        return target.order == self.order + 1


_STATUS_ORDER = list(PodcastStatus)


class DurationType(str, Enum):
    """Target spoken length bucket."""

    TWO_MIN = "2min"
    FIVE_MIN = "5min"
    TEN_MIN = "10min"
    FULL = "full"


class Podcast(BaseModel):
    """One request to turn a source into a podcast, and its audit trail."""

    id: str = Field(default_factory=new_id)
    user_id: str = Field(default="local")
    title: str = Field(default="Processing...")

    # Input (exactly one)
    source_url: Optional[str] = None
    source_text: Optional[str] = None

    # Parameters
    voice_style: str = Field(default="narrator")
    duration_type: DurationType = Field(default=DurationType.FIVE_MIN)

    # Results
    script: Optional[str] = None
    audio_url: Optional[str] = None
    audio_duration_seconds: Optional[float] = None

    status: PodcastStatus = Field(default=PodcastStatus.PENDING)
    error_message: Optional[str] = None

    # Sharing
    is_public: bool = Field(default=False)
    share_slug: str = Field(default_factory=generate_share_slug)

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    completed_at: Optional[datetime] = None


class TranscriptSegment(BaseModel):
    """One spoken sentence with estimated timing (seconds)."""

    id: str = Field(default_factory=new_id)
    podcast_id: str
    sentence_index: int = Field(..., ge=0)
    text: str
    start_time: float = Field(..., ge=0)
    end_time: float = Field(..., ge=0)


class Transcript(BaseModel):
    """Ordered segments of a podcast."""

    podcast_id: str
    segments: list[TranscriptSegment] = Field(default_factory=list)

    @computed_field
    @property
    def total_duration(self) -> float:
        return max((s.end_time for s in self.segments), default=0.0)
