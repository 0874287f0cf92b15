"""
Data models for the Daily Insights application.
"""

from typing import TypedDict

# Key layout in the KV store
ARTICLE_PREFIX = "article:"
LATEST_KEY = "latest-key"


class StoredArticle(TypedDict):
    """Type definition for a persisted article."""

    key: str  # article:<YYYY-MM-DD>
    title: str
    bodyHtml: str
    date: str  # YYYY-MM-DD (UTC)
    topic: str


class ArchiveItem(TypedDict):
    """Metadata shown in the archive listing and the recent section."""

    date: str
    title: str
    topic: str


def article_key(date: str) -> str:
    """Returns the KV key for the article of a given day."""
    return f"{ARTICLE_PREFIX}{date}"
