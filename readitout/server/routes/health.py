"""Liveness and client option endpoints."""

from datetime import datetime, timezone

from fastapi import APIRouter

from ... import __version__
from ...storage.models import DurationType
from ...tts.voices import voice_options
from ..models import HealthResponse, VoiceOption, VoicesResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    return HealthResponse(
        status="alive",
        timestamp=datetime.now(timezone.utc).isoformat(),
        version=__version__,
    )


@router.get("/api/voices", response_model=VoicesResponse)
async def list_voices() -> VoicesResponse:
    """Canonical voice styles and duration options."""
    return VoicesResponse(
        voices=[VoiceOption(**option) for option in voice_options()],
        durations=[d.value for d in DurationType],
    )
