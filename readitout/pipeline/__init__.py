"""Pipeline orchestration and the podcast service."""

from .orchestrator import PipelineError, PodcastPipeline
from .service import CreatePodcastRequest, PodcastService, parse_create_request

__all__ = [
    "CreatePodcastRequest",
    "PipelineError",
    "PodcastPipeline",
    "PodcastService",
    "parse_create_request",
]
