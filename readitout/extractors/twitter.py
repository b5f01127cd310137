"""
Twitter/X content extraction.

Tweets, threads and long-form X Articles are fetched through public
third-party endpoints, since X's own API is not usable without paid access.
Three methods are tried in strict order:

1. FXTwitter API (no key needed, handles X Articles)
2. RapidAPI thread endpoint (only when a key is configured)
3. Twitter oEmbed (simple tweets only)

If all of them fail the extractor still returns successfully, with a
placeholder asking the user to paste the text, so the pipeline continues.
"""

import re
from typing import Optional
from urllib.parse import urlparse

import httpx
import structlog

from ..errors import InvalidInputError
from ..fallback import FallbackExhausted, Strategy, run_chain
from ..settings import TwitterSettings
from .html import decode_entities
from .models import TweetRef, TwitterContent

logger = structlog.get_logger()

TWITTER_HOSTS = {"twitter.com", "www.twitter.com", "x.com", "www.x.com"}

FXTWITTER_API = "https://api.fxtwitter.com"
OEMBED_API = "https://publish.twitter.com/oembed"
API_USER_AGENT = "ReadItOutAI/1.0"

# Minimum extracted length for a method's result to count
MIN_API_CONTENT_CHARS = 50
MIN_OEMBED_CONTENT_CHARS = 30

# Combined thread length above which we treat it as an article
ARTICLE_MIN_CHARS = 1000

_TCO_LINK_RE = re.compile(r"https?://t\.co/\w+")
_PIC_LINK_RE = re.compile(r"pic\.twitter\.com/\w+")
_OEMBED_PARAGRAPH_RE = re.compile(r"<p[^>]*>[\s\S]*?</p>", re.IGNORECASE)
_TAG_RE = re.compile(r"<[^>]+>")
_WHITESPACE_RE = re.compile(r"\s+")


def is_twitter_url(url: str) -> bool:
    try:
        hostname = urlparse(url).hostname
    except ValueError:
        return False
    return hostname in TWITTER_HOSTS


def extract_tweet_id(url: str) -> Optional[str]:
    """The path segment after ``status``, if any."""
    parts = urlparse(url).path.split("/")
    if "status" in parts:
        index = parts.index("status")
        if index + 1 < len(parts) and parts[index + 1]:
            return parts[index + 1]
    return None


def extract_username(url: str) -> Optional[str]:
    """The leading path segment, unless the URL starts at ``/status``."""
    parts = [p for p in urlparse(url).path.split("/") if p]
    if parts and parts[0] != "status":
        return parts[0]
    return None


def parse_tweet_url(url: str) -> TweetRef:
    tweet_id = extract_tweet_id(url)
    if not tweet_id:
        raise InvalidInputError("Invalid Twitter URL: Could not extract tweet ID", field="source_url")
    return TweetRef(url=url, tweet_id=tweet_id, username=extract_username(url) or "Unknown")


def clean_tweet_text(text: str) -> str:
    """Drop t.co links and collapse whitespace."""
    text = _TCO_LINK_RE.sub("", text)
    return _WHITESPACE_RE.sub(" ", text).strip()


def placeholder_content(ref: TweetRef) -> TwitterContent:
    return TwitterContent(
        title=f"Content from @{ref.username}",
        content=(
            "Unable to automatically extract content from this Twitter/X URL. "
            "Twitter's anti-scraping measures are blocking access.\n\n"
            "Please copy and paste the tweet/article text directly into the text input instead.\n\n"
            f"URL: {ref.url}"
        ),
        author=ref.username,
        type="tweet",
    )


class TwitterExtractor:
    """
    Extracts tweets, threads and X Articles.

    Usage:
        async with httpx.AsyncClient() as client:
            extractor = TwitterExtractor(client, settings)
            content = await extractor.fetch("https://x.com/user/status/123")
    """

    def __init__(self, client: httpx.AsyncClient, settings: Optional[TwitterSettings] = None):
        self.client = client
        self.settings = settings or TwitterSettings()

    @property
    def rapidapi_key(self) -> Optional[str]:
        key = self.settings.rapidapi_key
        return key.get_secret_value() if key else None

    def strategies(self, ref: TweetRef) -> list[Strategy[TwitterContent]]:
        """The extraction methods to try for this tweet, in order."""
        strategies = [
            Strategy(
                name="fxtwitter",
                attempt=lambda: self.fetch_via_fxtwitter(ref),
                accept=lambda r: len(r.content) > MIN_API_CONTENT_CHARS,
            )
        ]

        if self.rapidapi_key:
            strategies.append(
                Strategy(
                    name="rapidapi",
                    attempt=lambda: self.fetch_via_rapidapi(ref),
                    accept=lambda r: len(r.content) > MIN_API_CONTENT_CHARS,
                )
            )

        strategies.append(
            Strategy(
                name="oembed",
                attempt=lambda: self.fetch_via_oembed(ref),
                accept=lambda r: len(r.content) > MIN_OEMBED_CONTENT_CHARS,
            )
        )
        return strategies

    async def fetch(self, url: str) -> TwitterContent:
        """Fetch content for a tweet URL, never failing once the URL parses."""
        ref = parse_tweet_url(url)
        logger.info(f"Fetching Twitter content: {ref.tweet_id} by @{ref.username}")

        try:
            result = await run_chain(self.strategies(ref), chain="twitter")
        except FallbackExhausted as e:
            logger.warning(f"All Twitter extraction methods failed for {url}", failures=str(e))
            return placeholder_content(ref)

        logger.info(
            f"Twitter extraction via {result.strategy}: {len(result.value.content)} chars",
            type=result.value.type,
        )
        return result.value

    async def _get_json(self, url: str, **kwargs) -> dict:
        response = await self.client.get(url, timeout=self.settings.request_timeout, **kwargs)
        response.raise_for_status()
        return response.json()

    async def fetch_via_fxtwitter(self, ref: TweetRef) -> TwitterContent:
        """FXTwitter returns both regular tweets and long-form article blocks."""
        data = await self._get_json(
            f"{FXTWITTER_API}/{ref.username}/status/{ref.tweet_id}",
            headers={"User-Agent": API_USER_AGENT},
        )

        tweet = data.get("tweet")
        if not tweet:
            raise ValueError("No tweet data in response")

        article = tweet.get("article") or {}
        blocks = (article.get("content") or {}).get("blocks")

        if blocks:
            title = article.get("title") or f"Article by @{ref.username}"
            # Image placeholders come through as blank blocks
            paragraphs = [b["text"] for b in blocks if (b.get("text") or "").strip()]
            content = "\n\n".join(paragraphs)
            content_type = "article"
            logger.info(f"Found X Article: {title!r} with {len(paragraphs)} paragraphs")
        else:
            title = f"Tweet by @{ref.username}"
            content = tweet.get("text") or ""
            content_type = "tweet"

            quote = tweet.get("quote")
            if quote:
                quoted_author = (quote.get("author") or {}).get("screen_name") or "unknown"
                content += f"\n\n[Quoted from @{quoted_author}]: {quote.get('text') or ''}"

        author = (tweet.get("author") or {}).get("screen_name") or ref.username

        return TwitterContent(
            title=title,
            content=clean_tweet_text(content),
            author=author,
            type=content_type,
        )

    async def fetch_via_rapidapi(self, ref: TweetRef) -> TwitterContent:
        """Thread endpoint; concatenates every tweet in the thread."""
        data = await self._get_json(
            f"https://{self.settings.rapidapi_host}/thread.php",
            params={"id": ref.tweet_id},
            headers={
                "X-RapidAPI-Key": self.rapidapi_key or "",
                "X-RapidAPI-Host": self.settings.rapidapi_host,
            },
        )

        tweets = data.get("thread") or data.get("tweets") or [data]
        texts = []
        for tweet in tweets:
            if tweet.get("text"):
                text = clean_tweet_text(tweet["text"])
                if text:
                    texts.append(text)

            note = (tweet.get("note_tweet") or {}).get("text")
            if note:
                texts.append(note)

        content = "\n\n".join(texts)
        is_article = len(content) > ARTICLE_MIN_CHARS

        if is_article:
            content_type = "article"
        elif len(texts) > 1:
            content_type = "thread"
        else:
            content_type = "tweet"

        return TwitterContent(
            title=f"Article by @{ref.username}" if is_article else f"Thread by @{ref.username}",
            content=content or "Could not extract content",
            author=ref.username,
            type=content_type,
        )

    async def fetch_via_oembed(self, ref: TweetRef) -> TwitterContent:
        """Embed HTML only carries the text of a single tweet."""
        data = await self._get_json(OEMBED_API, params={"url": ref.url, "omit_script": "true"})

        html = data.get("html") or ""
        paragraphs = [_TAG_RE.sub("", p).strip() for p in _OEMBED_PARAGRAPH_RE.findall(html)]
        content = "\n\n".join(p for p in paragraphs if p)

        content = decode_entities(content.replace("&mdash;", "—"))
        content = _PIC_LINK_RE.sub("", content).strip()

        author = data.get("author_name") or ref.username

        return TwitterContent(
            title=f"Tweet by @{author}",
            content=content or f"Tweet by @{author}",
            author=author,
            type="tweet",
        )
