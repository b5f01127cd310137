"""Podcast endpoints: create, read, list, share, delete."""

from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Query, Response, status

from ...pipeline.service import PodcastService, parse_create_request
from ...storage.models import Podcast, Transcript
from ..dependencies import get_service
from ..models import PodcastListResponse

router = APIRouter()


@router.post("/api/podcasts", response_model=Podcast, status_code=status.HTTP_201_CREATED)
async def create_podcast(
    payload: dict[str, Any] = Body(...),
    service: PodcastService = Depends(get_service),
) -> Podcast:
    """
    Start generating a podcast from ``source_url`` or ``source_text``.

    Returns the pending record; poll ``GET /api/podcasts/{id}`` for progress.
    """
    request = parse_create_request(payload)
    return await service.create_podcast(request)


@router.get("/api/podcasts", response_model=PodcastListResponse)
async def list_podcasts(
    user_id: Optional[str] = Query(None, description="Owner; defaults to the local user"),
    service: PodcastService = Depends(get_service),
) -> PodcastListResponse:
    podcasts = await service.list_podcasts(user_id)
    return PodcastListResponse(podcasts=podcasts)


@router.get("/api/podcasts/{podcast_id}", response_model=Podcast)
async def get_podcast(podcast_id: str, service: PodcastService = Depends(get_service)) -> Podcast:
    return await service.get_podcast(podcast_id)


@router.patch("/api/podcasts/{podcast_id}", response_model=Podcast)
async def toggle_public(podcast_id: str, service: PodcastService = Depends(get_service)) -> Podcast:
    """Flip public visibility of a podcast."""
    return await service.toggle_public(podcast_id)


@router.delete("/api/podcasts/{podcast_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_podcast(podcast_id: str, service: PodcastService = Depends(get_service)) -> Response:
    await service.delete_podcast(podcast_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/api/podcasts/{podcast_id}/transcript", response_model=Transcript)
async def get_transcript(
    podcast_id: str, service: PodcastService = Depends(get_service)
) -> Transcript:
    return await service.get_transcript(podcast_id)
