"""
Article storage on top of a key-value store.

This module provides the ArticleStore class which serializes articles as JSON under
`article:<date>` keys and maintains the `latest-key` pointer to the newest one.
"""

import json
import logging
from typing import List, Optional, cast

from daily_insights.models import (
    ARTICLE_PREFIX,
    LATEST_KEY,
    ArchiveItem,
    StoredArticle,
    article_key,
)
from daily_insights.services.kv import KVStore

logger = logging.getLogger(__name__)

_REQUIRED_FIELDS = ("key", "title", "bodyHtml", "date", "topic")


class ArticleStore:
    """Reads and writes StoredArticle records. No caching: every call hits the store."""

    def __init__(self, kv: KVStore):
        self.kv = kv

    def _decode(self, key: str, raw: Optional[str]) -> Optional[StoredArticle]:
        """Parses a stored record, returning None when it is unusable."""
        if not raw:
            return None
        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, ValueError) as e:
            logger.warning("Malformed article record at %s: %s", key, e)
            return None

        if not isinstance(data, dict) or not all(
            isinstance(data.get(field), str) for field in _REQUIRED_FIELDS
        ):
            logger.warning("Incomplete article record at %s.", key)
            return None
        return cast(StoredArticle, {field: data[field] for field in _REQUIRED_FIELDS})

    async def get(self, key: str) -> Optional[StoredArticle]:
        """Fetches the article stored under key."""
        return self._decode(key, await self.kv.get(key))

    async def exists(self, key: str) -> bool:
        """Checks whether anything is stored under key."""
        return bool(await self.kv.get(key))

    async def get_latest_key(self) -> Optional[str]:
        """Returns the key of the most recently written article."""
        latest = await self.kv.get(LATEST_KEY)
        return latest or None

    async def put(self, article: StoredArticle) -> None:
        """Writes the article, then points latest-key at it."""
        key = article_key(article["date"])
        await self.kv.put(key, json.dumps(article))
        # Not transactional: if this write is lost latest-key keeps the previous article
        await self.kv.put(LATEST_KEY, key)
        logger.info("Saved article %s.", key)

    async def list_recent(self, limit: int) -> List[ArchiveItem]:
        """Returns up to limit archive entries, newest first."""
        items: List[ArchiveItem] = []
        for key in await self.kv.list(ARTICLE_PREFIX):
            stored = await self.get(key)
            if stored:
                items.append(
                    ArchiveItem(
                        date=stored["date"], title=stored["title"], topic=stored["topic"]
                    )
                )

        # ISO dates sort correctly as strings
        items.sort(key=lambda item: item["date"], reverse=True)
        return items[: max(limit, 0)]
