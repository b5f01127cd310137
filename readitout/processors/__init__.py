"""Text processors: duration-targeted summaries and transcript timing."""

from .summarizer import DURATION_WORD_TARGETS, Summarizer, SummaryResult, truncate_to_word_count
from .transcript import SegmentTiming, build_transcript, split_sentences

__all__ = [
    "DURATION_WORD_TARGETS",
    "SegmentTiming",
    "Summarizer",
    "SummaryResult",
    "build_transcript",
    "split_sentences",
    "truncate_to_word_count",
]
