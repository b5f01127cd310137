"""Request dependencies."""

from fastapi import Request

from ..pipeline.service import PodcastService


def get_service(request: Request) -> PodcastService:
    return request.app.state.service
