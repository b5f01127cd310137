"""
Duration-targeted summarization using LLMs.

Condenses extracted content into a read-aloud script that fits a podcast
length bucket. Uses OpenAI (or OpenRouter, which is OpenAI-compatible) with
a fast model, and degrades to deterministic truncation whenever the model
is unavailable or returns nothing.
"""

import math
from typing import Optional

import structlog
from openai import AsyncOpenAI
from pydantic import BaseModel

from ..fallback import Strategy, run_chain
from ..settings import LLMSettings
from ..storage.models import DurationType

logger = structlog.get_logger()

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"

# Target word counts at ~150 words per minute; 0 means no summarization
DURATION_WORD_TARGETS: dict[str, int] = {
    DurationType.TWO_MIN.value: 300,
    DurationType.FIVE_MIN.value: 750,
    DurationType.TEN_MIN.value: 1500,
    DurationType.FULL.value: 0,
}

# Content within this factor of the target is left alone
SUMMARY_SLACK = 1.2


class SummaryResult(BaseModel):
    """Final narration text and its word count."""

    summary: str
    word_count: int


SYSTEM_PROMPT = """You are a podcast script writer. Create a {target_words}-word summary that:
- Captures main thesis and key points
- Flows naturally when read aloud
- Uses conversational language
Write directly as if reading to a listener."""


def count_words(text: str) -> int:
    return len(text.split())


def truncate_to_word_count(content: str, target_words: int) -> str:
    """
    Cut content to ``target_words`` words, preferring a sentence boundary.

    Pure and deterministic: the same input always yields the same output.
    The cut snaps back to the last ``.``, ``?`` or ``!`` when that boundary
    sits past ``0.7 * target_words`` characters; otherwise the hard word
    cutoff gets an ellipsis.
    """
    words = content.split()
    if len(words) <= target_words:
        return content

    target_content = " ".join(words[:target_words])
    last_sentence_end = max(
        target_content.rfind("."),
        target_content.rfind("?"),
        target_content.rfind("!"),
    )

    if last_sentence_end > target_words * 0.7:
        return target_content[:last_sentence_end + 1]

    return target_content + "..."


class Summarizer:
    """
    Reduces content to the word budget of a duration bucket.

    Usage:
        summarizer = Summarizer(settings.llm)
        result = await summarizer.summarize(content, title, "5min", author)
    """

    def __init__(self, settings: Optional[LLMSettings] = None, client: Optional[AsyncOpenAI] = None):
        self.settings = settings or LLMSettings()
        self.client = client or self._build_client()

    def _build_client(self) -> Optional[AsyncOpenAI]:
        if not self.settings.api_key:
            return None

        api_key = self.settings.api_key.get_secret_value()
        if self.settings.provider == "openrouter":
            return AsyncOpenAI(
                api_key=api_key,
                base_url=self.settings.base_url or OPENROUTER_BASE_URL,
            )
        if self.settings.base_url:
            return AsyncOpenAI(api_key=api_key, base_url=self.settings.base_url)
        return AsyncOpenAI(api_key=api_key)

    async def summarize(
        self,
        content: str,
        title: str,
        duration_type: str,
        author: Optional[str] = None,
    ) -> SummaryResult:
        target_words = DURATION_WORD_TARGETS[DurationType(duration_type).value]

        if target_words == 0:
            logger.info("Full duration requested, skipping summarization")
            return SummaryResult(summary=content, word_count=count_words(content))

        original_words = count_words(content)
        if original_words <= target_words * SUMMARY_SLACK:
            logger.info(f"Content already short ({original_words} words)")
            return SummaryResult(summary=content, word_count=original_words)

        strategies: list[Strategy[str]] = []
        if self.client is not None:
            strategies.append(
                Strategy(
                    name=self.settings.model,
                    attempt=lambda: self._call_llm(content, title, target_words, author),
                    accept=lambda s: bool(s),
                )
            )
        else:
            logger.warning("LLM API key not configured, using truncation")

        strategies.append(
            Strategy(
                name="truncation",
                attempt=lambda: self._truncate(content, target_words),
            )
        )

        logger.info(f"Summarizing {original_words} -> ~{target_words} words")
        result = await run_chain(strategies, chain="summarizer")
        summary = result.value

        logger.info(f"Summary: {count_words(summary)} words via {result.strategy}")
        return SummaryResult(summary=summary, word_count=count_words(summary))

    async def _truncate(self, content: str, target_words: int) -> str:
        return truncate_to_word_count(content, target_words)

    async def _call_llm(
        self,
        content: str,
        title: str,
        target_words: int,
        author: Optional[str],
    ) -> str:
        """Call the chat completions API; returns the stripped text."""
        byline = f"By: {author}\n" if author else ""
        user_prompt = (
            f"Title: {title}\n{byline}"
            f"Create a {target_words}-word podcast script:\n\n"
            f"{content[:self.settings.max_input_chars]}"
        )

        response = await self.client.chat.completions.create(
            model=self.settings.model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT.format(target_words=target_words)},
                {"role": "user", "content": user_prompt},
            ],
            temperature=self.settings.temperature,
            max_tokens=math.ceil(target_words * 1.3),
        )

        if not response.choices:
            return ""
        return (response.choices[0].message.content or "").strip()
