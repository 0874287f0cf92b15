"""
Configuration loading for Daily Insights.

Static site settings and the topic table live in config.json next to this
module; secrets and deployment choices come from environment variables.
"""

import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: Dict[str, Any] = {
    "site_title": "Daily Insights",
    "home_url": "",
    "model": "gemini-2.0-flash",
    "max_tokens": 1800,
    "archive_limit": 50,
    "recent_limit": 5,
    "kv_collection": "articles",
    "topics": [],
}


def load_config(config_filename: str = "config.json") -> Dict[str, Any]:
    """Loads configuration from a JSON file."""
    # Build absolute path relative to this module
    base_dir = os.path.dirname(os.path.abspath(__file__))
    config_path = os.path.join(base_dir, config_filename)

    config = dict(DEFAULT_CONFIG)
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config.update(json.load(f))
    except FileNotFoundError:
        logger.warning("Config file not found at %s. Using defaults.", config_path)
    return config


@dataclass(frozen=True)
class Settings:
    """Read-only runtime settings injected into the app and the generator."""

    site_title: str
    home_url: str
    model: str
    max_tokens: int
    archive_limit: int
    recent_limit: int
    topics: Tuple[str, ...]
    kv_backend: str
    kv_collection: str
    gcp_project_id: Optional[str] = None
    gemini_api_key: Optional[str] = None


def load_settings(
    config: Optional[Dict[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    """Combines config.json with environment variables."""
    if config is None:
        config = load_config()
    if environ is None:
        environ = os.environ

    topics = tuple(config.get("topics") or ())
    if not topics:
        logger.warning("No topics configured. Generation will be disabled.")

    return Settings(
        site_title=str(config["site_title"]),
        home_url=str(config.get("home_url", "")),
        model=str(config["model"]),
        max_tokens=int(config["max_tokens"]),
        archive_limit=int(config["archive_limit"]),
        recent_limit=int(config["recent_limit"]),
        topics=topics,
        kv_backend=environ.get("KV_BACKEND", "firestore").lower(),
        kv_collection=environ.get("KV_COLLECTION", str(config["kv_collection"])),
        gcp_project_id=environ.get("GCP_PROJECT_ID"),
        gemini_api_key=environ.get("GEMINI_KEY"),
    )
