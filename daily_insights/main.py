"""
ASGI entry point: `uvicorn daily_insights.main:app`.
"""

import logging
import os

import uvicorn

from daily_insights.app import create_app
from daily_insights.config import load_settings
from daily_insights.services.kv import open_kv_store
from daily_insights.services.llm import open_text_model

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

settings = load_settings()
app = create_app(
    settings,
    open_kv_store(settings),
    open_text_model(settings.gemini_api_key),
)


def serve():
    """Runs the web server on $PORT (default 8080)."""
    uvicorn.run(app, host="0.0.0.0", port=int(os.environ.get("PORT", 8080)))


if __name__ == "__main__":
    serve()
