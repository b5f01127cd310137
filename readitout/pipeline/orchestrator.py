"""
Main pipeline orchestrator for the content-to-podcast workflow.

One run per podcast, strictly sequential:

    pending → extracting → processing → generating_audio → uploading → completed
                  │             │               │              │
                  └─────────────┴───────┬───────┴──────────────┘
                                        ▼
                                      failed

Every status change is written to the store straight away, so pollers can
watch a run in flight. Any exception ends the run as ``failed`` with the
exception message; nothing already written (uploaded audio, title) is
rolled back.
"""

from typing import Any, Optional

import structlog

from ..extractors import ContentExtractor
from ..processors.summarizer import Summarizer
from ..processors.transcript import build_transcript
from ..storage.base import PodcastStore
from ..storage.blob import BlobStorage
from ..storage.models import Podcast, PodcastStatus, utcnow
from ..tts import SpeechSynthesizer

logger = structlog.get_logger()


class PipelineError(Exception):
    """Raised when a run is started or advanced out of order."""


class PodcastPipeline:
    """
    Runs the extract → summarize → synthesize → upload → transcript stages.

    Usage:
        pipeline = PodcastPipeline(store, blobs, extractor, summarizer, synthesizer)
        podcast = await pipeline.run(podcast_id)
    """

    def __init__(
        self,
        store: PodcastStore,
        blobs: BlobStorage,
        extractor: ContentExtractor,
        summarizer: Summarizer,
        synthesizer: SpeechSynthesizer,
    ):
        self.store = store
        self.blobs = blobs
        self.extractor = extractor
        self.summarizer = summarizer
        self.synthesizer = synthesizer

    async def run(self, podcast_id: str) -> Optional[Podcast]:
        """
        Run the pipeline for a pending podcast.

        Never raises for stage failures: the outcome is recorded on the
        podcast and the final record is returned.
        """
        podcast = await self.store.get_podcast(podcast_id)
        if podcast is None:
            raise PipelineError(f"Podcast {podcast_id} not found")
        if podcast.status is not PodcastStatus.PENDING:
            raise PipelineError(f"Podcast {podcast_id} is {podcast.status.value}, not pending")

        log = logger.bind(podcast_id=podcast_id)
        log.info(f"Starting podcast generation ({podcast.duration_type.value})")

        try:
            return await self._run_stages(podcast, log)
        except Exception as e:
            message = str(e) or type(e).__name__
            log.error(f"Podcast failed: {message}", exc_info=True)
            return await self.store.update_podcast(
                podcast_id,
                status=PodcastStatus.FAILED,
                error_message=message,
            )

    async def _run_stages(self, podcast: Podcast, log) -> Optional[Podcast]:
        current = podcast.status

        async def advance(status: PodcastStatus, **changes: Any) -> None:
            nonlocal current
            if not current.can_transition_to(status):
                raise PipelineError(f"Invalid transition {current.value} -> {status.value}")
            updated = await self.store.update_podcast(podcast.id, status=status, **changes)
            if updated is None:
                raise PipelineError(f"Podcast {podcast.id} was deleted during generation")
            current = status

        # 1. Extract content
        await advance(PodcastStatus.EXTRACTING)
        extracted = await self.extractor.extract(podcast.source_url, podcast.source_text)
        await advance(PodcastStatus.PROCESSING, title=extracted.title)
        log.info(f"Extracted: {extracted.title!r} ({extracted.word_count} words)")

        # 2. Summarize for the requested duration
        summary = await self.summarizer.summarize(
            extracted.content,
            extracted.title,
            podcast.duration_type.value,
            extracted.author,
        )
        script = summary.summary
        if not script.strip():
            raise ValueError("No content to narrate")
        log.info(f"Final content: {summary.word_count} words (~{round(summary.word_count / 150)} min)")

        # 3. Generate audio
        await advance(PodcastStatus.GENERATING_AUDIO)
        audio = await self.synthesizer.synthesize(script, podcast.voice_style)

        # 4. Upload
        await advance(PodcastStatus.UPLOADING)
        audio_url = await self.blobs.upload_audio(audio.audio, podcast.id)

        # 5. Transcript segments
        segments = build_transcript(script, audio.duration_seconds)
        if not segments:
            raise ValueError("Script produced no transcript sentences")
        await self.store.create_transcript_batch(podcast.id, segments)

        # 6. Done
        await advance(
            PodcastStatus.COMPLETED,
            audio_url=audio_url,
            audio_duration_seconds=audio.duration_seconds,
            script=script,
            completed_at=utcnow(),
        )
        log.info(f"Podcast completed ({round(audio.duration_seconds / 60)} min, {len(segments)} segments)")

        return await self.store.get_podcast(podcast.id)
