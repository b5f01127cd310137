"""
Sentence-level transcript timing.

Timing is estimated, not measured: the total audio duration is split
evenly across sentences. Sentence length is ignored.
"""

import re

from pydantic import BaseModel

MAX_SEGMENTS = 100

SENTENCE_SPLIT_RE = re.compile(r"(?<=[.!?])\s+")


class SegmentTiming(BaseModel):
    """One sentence with its estimated start and end (seconds)."""

    sentence_index: int
    text: str
    start_time: float
    end_time: float


def split_sentences(script: str) -> list[str]:
    sentences = (s.strip() for s in SENTENCE_SPLIT_RE.split(script))
    return [s for s in sentences if s]


def build_transcript(script: str, total_duration: float) -> list[SegmentTiming]:
    """
    Split ``script`` into at most 100 sentences and time them uniformly.

    Sentences past the cap are still in the audio but get no segment; the
    kept sentences share the whole duration, so the last segment always
    ends at ``total_duration``.
    """
    sentences = split_sentences(script)[:MAX_SEGMENTS]
    if not sentences:
        return []

    time_per_sentence = total_duration / len(sentences)
    last = len(sentences) - 1

    return [
        SegmentTiming(
            sentence_index=i,
            text=text,
            start_time=i * time_per_sentence,
            end_time=total_duration if i == last else (i + 1) * time_per_sentence,
        )
        for i, text in enumerate(sentences)
    ]
