"""Content extraction from web pages, Twitter/X, and pasted text."""

from .content import ContentExtractor, extract_from_html, extract_from_text
from .models import ExtractedContent, TwitterContent
from .twitter import TwitterExtractor, is_twitter_url

__all__ = [
    "ContentExtractor",
    "ExtractedContent",
    "TwitterContent",
    "TwitterExtractor",
    "extract_from_html",
    "extract_from_text",
    "is_twitter_url",
]
