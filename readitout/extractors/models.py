"""Data models for content extraction."""

from typing import Literal, Optional
from pydantic import BaseModel, Field


class ExtractedContent(BaseModel):
    """Normalized result of extracting a URL or raw text."""

    title: str = Field(..., description="Title used for the podcast")
    content: str = Field(..., description="Clean text to narrate")
    author: Optional[str] = Field(None, description="Author name or handle, if detected")
    author_bio: Optional[str] = Field(None, description="Short author bio, if detected")
    source: Literal["twitter", "web", "text"] = Field(default="text")

    @property
    def word_count(self) -> int:
        return len(self.content.split())


class TweetRef(BaseModel):
    """Identifies a tweet from its URL."""

    url: str
    tweet_id: str
    username: str = Field(default="Unknown")


class TwitterContent(BaseModel):
    """Content extracted from a tweet, thread, or X Article."""

    title: str
    content: str
    author: str
    type: Literal["tweet", "thread", "article"] = Field(default="tweet")

    def to_extracted(self) -> ExtractedContent:
        return ExtractedContent(
            title=self.title,
            content=self.content,
            author=self.author,
            source="twitter",
        )
