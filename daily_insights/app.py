"""
HTTP routes for Daily Insights.

- GET /                   -> latest article (generated on demand if none exists)
- GET /archive            -> JSON list of article metadata
- GET /article/YYYY-MM-DD -> specific article
Any other path is treated like "/".
"""

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse, Response

from daily_insights.config import Settings
from daily_insights.generator import DailyGenerator
from daily_insights.models import article_key
from daily_insights.services.db import ArticleStore
from daily_insights.services.kv import KVStore
from daily_insights.services.llm import TextModel
from daily_insights.services.renderer import Renderer, render_archive_json

logger = logging.getLogger(__name__)

STORAGE_MISSING = (
    "Storage is not configured yet (the article KV store is missing). "
    "Set GCP_PROJECT_ID for Firestore or KV_BACKEND=memory for local runs."
)
NOT_GENERATED = (
    "No article generated yet. "
    "The first daily article will appear after the next scheduled run."
)
NOT_FOUND = "Article not found for that date."
ARTICLE_MISSING = "Article missing."

JSON_MEDIA_TYPE = "application/json; charset=utf-8"


def create_app(
    settings: Settings,
    kv: Optional[KVStore],
    model: Optional[TextModel],
) -> FastAPI:
    """Builds the FastAPI application around the given collaborators."""
    store = ArticleStore(kv) if kv is not None else None
    generator = DailyGenerator(settings, store, model)
    renderer = Renderer(settings.site_title, settings.home_url, settings.recent_limit)

    app = FastAPI(
        title=settings.site_title, docs_url=None, redoc_url=None, openapi_url=None
    )
    app.state.settings = settings
    app.state.store = store
    app.state.generator = generator

    async def render_article_by_key(store: ArticleStore, key: str) -> Response:
        stored = await store.get(key)
        if not stored:
            logger.error("latest-key points at unreadable record %s.", key)
            return PlainTextResponse(ARTICLE_MISSING, status_code=500)

        # One extra so the current article can be dropped from the list
        recent = await store.list_recent(settings.recent_limit + 1)
        return HTMLResponse(renderer.render_article_page(stored, recent))

    @app.get("/archive")
    async def list_archive() -> Response:
        if store is None:
            return JSONResponse({"error": STORAGE_MISSING}, status_code=500)
        items = await store.list_recent(settings.archive_limit)
        return Response(render_archive_json(items), media_type=JSON_MEDIA_TYPE)

    # Everything after /article/ is the date, including an empty or slashed suffix
    @app.get("/article/{date:path}")
    async def render_article_by_date(date: str) -> Response:
        if store is None:
            return PlainTextResponse(STORAGE_MISSING, status_code=500)
        key = article_key(date)
        if not date or not await store.get(key):
            return PlainTextResponse(NOT_FOUND, status_code=404)
        return await render_article_by_key(store, key)

    @app.get("/{path:path}")
    async def render_latest_article(path: str) -> Response:
        if store is None:
            return PlainTextResponse(STORAGE_MISSING, status_code=500)

        latest_key = await store.get_latest_key()
        if not latest_key and generator.available:
            logger.info("No article yet for /%s. Generating one now.", path)
            await generator.generate_daily_article()
            latest_key = await store.get_latest_key()

        if not latest_key:
            return PlainTextResponse(NOT_GENERATED, status_code=503)
        return await render_article_by_key(store, latest_key)

    return app
