"""
Daily article generation.

Picks the topic for the current UTC day, asks the text model for an HTML article,
cleans the output and stores it. At most one article is written per day.
"""

import datetime
import logging
from typing import Dict, List, Optional, Sequence

from daily_insights.config import Settings
from daily_insights.models import StoredArticle, article_key
from daily_insights.postprocess import (
    derive_title,
    remove_title_from_body,
    sanitize_generated_html,
)
from daily_insights.services.db import ArticleStore
from daily_insights.services.llm import TextModel

logger = logging.getLogger(__name__)

MILLIS_PER_DAY = 24 * 60 * 60 * 1000

_SYSTEM_PROMPT = """
You are a journalist writing for a curious general audience.
Audience: general consumers interested in technology, business, and the world around them.
Tone: clear, friendly, and accessible; avoid jargon and explain terms simply.
Style: storytelling with concrete examples, short paragraphs, and no bullet points.
Perspective: neutral and informative (not investment or legal advice).
"""

_USER_PROMPT = """
Write an approximately 1,200-word article for a general audience on:
"{topic}".

Structure:
- A 2–3 paragraph introduction.
- 3–5 subsections with <h2> headings that cover:
  - the current landscape
  - key risks and opportunities
  - practical frameworks or decision heuristics
- A closing section that synthesizes implications and recommendations in paragraph form (no bullets).

Output:
- Valid HTML fragment using ONLY <h2> and <p> tags.
- Do NOT include <h1>, <ul>, <ol>, <li>, or any bullet points or asterisks.
- Do NOT repeat the title inside the body; the page will render the main title separately.
- Do NOT include <html>, <head>, or <body> tags.
"""


def utc_today(now: datetime.datetime) -> str:
    """Formats the UTC calendar day of now as YYYY-MM-DD."""
    if now.tzinfo is None:
        now = now.replace(tzinfo=datetime.timezone.utc)
    return now.astimezone(datetime.timezone.utc).strftime("%Y-%m-%d")


def pick_topic_for_today(now: datetime.datetime, topics: Sequence[str]) -> str:
    """Maps the UTC day of now onto the topic table, cycling in order."""
    if not topics:
        raise ValueError("Topic table is empty.")
    if now.tzinfo is None:
        now = now.replace(tzinfo=datetime.timezone.utc)
    day_index = int(now.timestamp() * 1000) // MILLIS_PER_DAY
    return topics[day_index % len(topics)]


def build_messages(topic: str) -> List[Dict[str, str]]:
    """Returns the chat messages asking for an article on topic."""
    return [
        {"role": "system", "content": _SYSTEM_PROMPT},
        {"role": "user", "content": _USER_PROMPT.format(topic=topic)},
    ]


class DailyGenerator:
    """Writes the article of the day if it does not exist yet."""

    def __init__(
        self,
        settings: Settings,
        store: Optional[ArticleStore],
        model: Optional[TextModel],
    ):
        self.settings = settings
        self.store = store
        self.model = model

    @property
    def available(self) -> bool:
        """True when both the store and the model are configured."""
        return bool(self.store and self.model and self.settings.topics)

    async def generate_daily_article(
        self, now: Optional[datetime.datetime] = None
    ) -> Optional[StoredArticle]:
        """Generates and stores today's article. Returns None when skipped."""
        if not self.available:
            logger.info("Storage or model not configured. Skipping generation.")
            return None

        if now is None:
            now = datetime.datetime.now(datetime.timezone.utc)
        today = utc_today(now)
        key = article_key(today)

        # Best-effort guard; concurrent runs can both pass it
        if await self.store.exists(key):
            logger.info("Article %s already exists. Nothing to do.", key)
            return None

        topic = pick_topic_for_today(now, self.settings.topics)
        logger.info("--- Generating %s on '%s' ---", key, topic)

        result = await self.model.run(
            self.settings.model,
            {"messages": build_messages(topic), "max_tokens": self.settings.max_tokens},
        )
        raw = str(result.get("response") or "")

        body = sanitize_generated_html(raw)
        title = derive_title(body, today)
        article = StoredArticle(
            key=key,
            title=title,
            bodyHtml=remove_title_from_body(body, title),
            date=today,
            topic=topic,
        )

        await self.store.put(article)
        return article
