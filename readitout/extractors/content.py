"""
Content extractor.

Turns a URL or raw pasted text into a normalized ``ExtractedContent``.
Twitter/X URLs are routed to ``TwitterExtractor``; everything else goes
through the regex-based article extraction in ``html``.
"""

import re
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import httpx
import structlog

from ..errors import FetchError, InvalidInputError
from ..settings import TwitterSettings
from . import html as html_utils
from .models import ExtractedContent
from .twitter import TwitterExtractor, is_twitter_url

logger = structlog.get_logger()

MAX_TEXT_TITLE_LINE = 100
MAX_DERIVED_TITLE = 80
MAX_MAIN_PARAGRAPHS = 50
MIN_ARTICLE_CHARS = 100

_SENTENCE_END_RE = re.compile(r"[.!?]")


def extract_from_text(text: str) -> ExtractedContent:
    """
    Split pasted text into title and body.

    A short first line becomes the title; otherwise the title is derived
    from the first sentence and the whole text is narrated.
    """
    lines = text.strip().split("\n")
    first_line = lines[0].strip()

    if len(first_line) <= MAX_TEXT_TITLE_LINE and len(lines) > 1:
        title = first_line
        content = "\n".join(lines[1:]).strip()
    else:
        first_sentence = _SENTENCE_END_RE.split(text)[0]
        title = first_sentence[:MAX_DERIVED_TITLE]
        if len(first_sentence) > MAX_DERIVED_TITLE:
            title += "..."
        content = text

    return ExtractedContent(title=title, content=content, source="text")


def extract_from_html(page: str) -> ExtractedContent:
    """Article title, author and main body paragraphs from a web page."""
    title = html_utils.extract_title(page)
    author, author_bio = html_utils.extract_author_info(page)
    logger.info(f"Author detected: {author or 'Unknown'}")

    clean_html = html_utils.strip_non_content(page)
    paragraphs = html_utils.extract_paragraphs(clean_html)

    start = html_utils.find_main_content_start(paragraphs)
    logger.debug(f"Main content starts at paragraph {start}")
    main_paragraphs = paragraphs[start:start + MAX_MAIN_PARAGRAPHS]

    intro = html_utils.generate_intro(title, author, author_bio)
    content = intro + "\n\n".join(main_paragraphs)

    if len(content) < MIN_ARTICLE_CHARS:
        logger.info("Paragraph extraction too short, falling back to plain text")
        return ExtractedContent(
            title=title,
            content=html_utils.strip_all_tags(clean_html),
            author=author,
            source="web",
        )

    logger.info(f"Extracted: {title} ({len(content)} chars, author: {author or 'unknown'})")
    return ExtractedContent(
        title=title,
        content=content,
        author=author,
        author_bio=author_bio,
        source="web",
    )


class ContentExtractor:
    """
    Extracts narratable content from URLs or raw text.

    Usage:
        extractor = ContentExtractor()
        content = await extractor.extract(url="https://example.com/post")
        content = await extractor.extract(text="My Title\\nBody text...")
    """

    def __init__(
        self,
        settings: Optional[TwitterSettings] = None,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 20.0,
    ):
        self.settings = settings or TwitterSettings()
        self._client = client
        self.timeout = timeout

    @asynccontextmanager
    async def _http(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._client is not None:
            yield self._client
            return
        async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True) as client:
            yield client

    async def extract(self, url: Optional[str] = None, text: Optional[str] = None) -> ExtractedContent:
        if url:
            return await self.extract_from_url(url)
        if text:
            return extract_from_text(text)
        raise InvalidInputError("Either url or text must be provided")

    async def extract_from_url(self, url: str) -> ExtractedContent:
        async with self._http() as client:
            if is_twitter_url(url):
                logger.info("Detected Twitter/X URL")
                twitter = TwitterExtractor(client, self.settings)
                return (await twitter.fetch(url)).to_extracted()

            logger.info(f"Fetching URL: {url}")
            try:
                response = await client.get(url, headers={"User-Agent": html_utils.BROWSER_USER_AGENT})
            except httpx.HTTPError as e:
                raise FetchError(f"Failed to fetch URL: {e}", {"url": url}) from e

            if not response.is_success:
                raise FetchError(
                    f"Failed to fetch URL: {response.status_code}",
                    {"url": url, "status_code": response.status_code},
                )

            return extract_from_html(response.text)
