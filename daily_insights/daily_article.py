"""
Daily Insights Generator
Scheduled entry point: writes today's article to the KV store if it is missing.
Run once a day by the platform scheduler (Cloud Scheduler, cron, CI).
"""

import asyncio
import logging
from typing import Optional

from daily_insights.config import load_settings
from daily_insights.generator import DailyGenerator
from daily_insights.models import StoredArticle
from daily_insights.services.db import ArticleStore
from daily_insights.services.kv import open_kv_store
from daily_insights.services.llm import open_text_model

logger = logging.getLogger(__name__)


class DailyScheduler:
    """Owns the background generation task started by each trigger."""

    def __init__(self, generator: DailyGenerator):
        self.generator = generator
        self.task: Optional["asyncio.Task[Optional[StoredArticle]]"] = None

    def trigger(self) -> "asyncio.Task[Optional[StoredArticle]]":
        """Starts generation in the background and returns its handle."""
        self.task = asyncio.create_task(self.generator.generate_daily_article())
        return self.task

    async def wait(self) -> Optional[StoredArticle]:
        """Waits for the running task and logs its outcome. Errors are not re-raised."""
        if self.task is None:
            return None
        try:
            article = await self.task
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Daily generation failed: %s", e, exc_info=True)
            return None

        if article:
            logger.info("Generated '%s' (%s).", article["title"], article["key"])
        else:
            logger.info("No new article generated.")
        return article

    async def run(self) -> Optional[StoredArticle]:
        """Triggers generation and keeps the loop alive until it finishes."""
        self.trigger()
        return await self.wait()


def main():
    """Main execution entry point."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    settings = load_settings()
    kv = open_kv_store(settings)
    model = open_text_model(settings.gemini_api_key)
    store = ArticleStore(kv) if kv is not None else None

    scheduler = DailyScheduler(DailyGenerator(settings, store, model))
    asyncio.run(scheduler.run())


if __name__ == "__main__":
    main()
