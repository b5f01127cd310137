"""Share-link endpoints; only public podcasts are visible."""

from fastapi import APIRouter, Depends

from ...pipeline.service import PodcastService
from ...storage.models import Transcript
from ..dependencies import get_service
from ..models import PublicPodcastResponse

router = APIRouter()


@router.get("/api/public/{share_slug}", response_model=PublicPodcastResponse)
async def get_public_podcast(
    share_slug: str, service: PodcastService = Depends(get_service)
) -> PublicPodcastResponse:
    podcast = await service.get_public_podcast(share_slug)
    return PublicPodcastResponse.from_podcast(podcast)


@router.get("/api/public/{share_slug}/transcript", response_model=Transcript)
async def get_public_transcript(
    share_slug: str, service: PodcastService = Depends(get_service)
) -> Transcript:
    return await service.get_public_transcript(share_slug)
