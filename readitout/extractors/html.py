"""
Regex helpers for best-effort article extraction from raw HTML.

Pages are noisy and inconsistent, so nothing here parses a DOM. Each helper
is a layered, lossy pass: structured paragraph extraction first, then the
caller falls back to stripping every tag from the document.
"""

import re
from typing import Optional

BROWSER_USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"

MIN_PARAGRAPH_CHARS = 30
MAX_TITLE_CHARS = 100
PLAIN_TEXT_LIMIT = 5000

_TITLE_RE = re.compile(r"<title[^>]*>([^<]+)</title>", re.IGNORECASE)
_TITLE_SUFFIX_RE = re.compile(r"\s*[|\-–—]\s*")
_PARAGRAPH_RE = re.compile(r"<p[^>]*>([\s\S]*?)</p>", re.IGNORECASE)
_TAG_RE = re.compile(r"<[^>]+>")
_WHITESPACE_RE = re.compile(r"\s+")

_NON_CONTENT_BLOCKS = [
    re.compile(rf"<{tag}[^>]*>[\s\S]*?</{tag}>", re.IGNORECASE)
    for tag in ("script", "style", "nav", "header", "footer", "aside", "form")
]

# Order matters: first match wins
AUTHOR_PATTERNS = [
    # <meta name="author" content="...">
    re.compile(r"""<meta\s+name=["']author["']\s+content=["']([^"']+)["']""", re.IGNORECASE),
    # <span class="author">...</span> or similar
    re.compile(r"""<(?:span|div|a)[^>]*class=["'][^"']*author[^"']*["'][^>]*>([^<]+)<""", re.IGNORECASE),
    # "By Author Name"
    re.compile(r"\bBy\s+([A-Z][a-z]+(?:\s+[A-Z][a-z]+){1,3})\b"),
    # rel="author"
    re.compile(r"""<a[^>]*rel=["']author["'][^>]*>([^<]+)<""", re.IGNORECASE),
]

_BIO_CLASS_RE = re.compile(
    r"""<(?:p|div|span)[^>]*class=["'][^"']*(?:bio|about|description)[^"']*["'][^>]*>([^<]{30,200})""",
    re.IGNORECASE,
)

# Paragraphs that are sidebar or byline metadata, not article text
METADATA_PATTERNS = [
    re.compile(p, re.IGNORECASE)
    for p in (
        r"^is\s+a\s+",
        r"^edited\s+by",
        r"^\d+,?\d*\s+words?$",
        r"^save$",
        r"^share$",
        r"^history\s+of",
        r"^syndicate",
        r"^listen\s+to",
        r"^subscribe",
        r"^follow\s+us",
        r"^posted\s+on",
        r"^published",
        r"^tags?:",
        r"^categories?:",
        r"^related",
        r"^more\s+from",
        r"^sign\s+up",
    )
]

_ENTITIES = [
    ("&nbsp;", " "),
    ("&amp;", "&"),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&#39;", "'"),
]


def extract_title(html: str) -> str:
    """Page title without the trailing site name, capped at 100 chars."""
    match = _TITLE_RE.search(html)
    title = match.group(1).strip() if match else "Untitled Article"
    return _TITLE_SUFFIX_RE.split(title)[0].strip()[:MAX_TITLE_CHARS]


def extract_author_info(html: str) -> tuple[Optional[str], Optional[str]]:
    """Return ``(author, author_bio)``; either may be None."""
    author = None
    for pattern in AUTHOR_PATTERNS:
        match = pattern.search(html)
        if match and match.group(1).strip():
            author = match.group(1).strip()
            break

    if not author:
        return None, None

    bio_patterns = [
        re.compile(rf"{re.escape(author)}[^.]*is\s+(?:a|an)\s+([^.]+\.)", re.IGNORECASE),
        _BIO_CLASS_RE,
    ]
    for pattern in bio_patterns:
        match = pattern.search(html)
        if match and match.group(1).strip():
            return author, match.group(1).strip()

    return author, None


def strip_non_content(html: str) -> str:
    """Remove script, style, nav, header, footer, aside and form blocks."""
    for pattern in _NON_CONTENT_BLOCKS:
        html = pattern.sub("", html)
    return html


def decode_entities(text: str) -> str:
    for entity, char in _ENTITIES:
        text = text.replace(entity, char)
    return text


def extract_paragraphs(html: str) -> list[str]:
    """Text of every ``<p>`` block longer than 30 chars, in document order."""
    paragraphs = []
    for raw in _PARAGRAPH_RE.findall(html):
        text = decode_entities(_TAG_RE.sub("", raw))
        text = _WHITESPACE_RE.sub(" ", text).strip()
        if len(text) > MIN_PARAGRAPH_CHARS:
            paragraphs.append(text)
    return paragraphs


def is_metadata(paragraph: str) -> bool:
    return any(pattern.search(paragraph) for pattern in METADATA_PATTERNS)


def find_main_content_start(paragraphs: list[str]) -> int:
    """
    Index of the first paragraph that reads like article text.

    Bylines, share widgets and "related" blurbs usually come first on a
    page; returns 0 when nothing qualifies.
    """
    for i, p in enumerate(paragraphs):
        if len(p) < 80:
            continue
        if is_metadata(p):
            continue
        if p[0].isupper() and p[0].isascii() and " " in p and len(p) > 100:
            return i
    return 0


def generate_intro(title: str, author: Optional[str], author_bio: Optional[str] = None) -> str:
    """One-paragraph spoken introduction naming the author, or ''."""
    if not author:
        return ""

    intro = "This article"
    if title and "|" not in title and len(title) < 80:
        intro = f'"{title}"'

    intro += f" is written by {author}"

    if author_bio:
        clean_bio = re.sub(r"^is\s+", "", author_bio, flags=re.IGNORECASE)
        clean_bio = re.sub(r"\.$", "", clean_bio).strip()
        intro += f", who is {clean_bio}"

    return intro + ".\n\n"


def strip_all_tags(html: str, limit: int = PLAIN_TEXT_LIMIT) -> str:
    """Last resort: every tag removed, whitespace collapsed, truncated."""
    text = _TAG_RE.sub(" ", html)
    return _WHITESPACE_RE.sub(" ", text).strip()[:limit]
