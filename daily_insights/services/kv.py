"""
Key-value store backends.

The article store only needs get, put and prefix listing of string values.
Production deployments keep one Firestore document per key; the in-memory
backend is used for local development and tests.
"""

import logging
from typing import Dict, List, Optional, Protocol

from google.cloud import firestore  # type: ignore

from daily_insights.config import Settings

logger = logging.getLogger(__name__)

# Upper bound for Firestore prefix range queries
_PREFIX_END = "\uf8ff"


class KVStore(Protocol):
    """Async string key-value store with prefix listing."""

    async def get(self, key: str) -> Optional[str]:
        """Returns the value stored under key, or None."""

    async def put(self, key: str, value: str) -> None:
        """Stores value under key, replacing any previous value."""

    async def list(self, prefix: str) -> List[str]:
        """Returns the names of all keys starting with prefix."""


class InMemoryKVStore:
    """Dict-backed store. Contents are lost when the process exits."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    async def put(self, key: str, value: str) -> None:
        self.data[key] = value

    async def list(self, prefix: str) -> List[str]:
        return sorted(k for k in self.data if k.startswith(prefix))


class FirestoreKVStore:
    """Stores each key as a Firestore document with `key` and `value` fields."""

    def __init__(self, project_id: Optional[str], collection: str = "articles"):
        self.collection_name = collection
        if not project_id:
            logger.warning("GCP_PROJECT_ID not set. Article storage disabled.")
            self.db = None
            return

        try:
            self.db = firestore.AsyncClient(project=project_id)
            self.collection = self.db.collection(collection)
            logger.info("Connected to Firestore collection '%s'.", collection)
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.warning("Firestore connection failed: %s", e)
            self.db = None

    @property
    def available(self) -> bool:
        """True when a Firestore client could be created."""
        return self.db is not None

    async def get(self, key: str) -> Optional[str]:
        snap = await self.collection.document(key).get()
        if not snap.exists:
            return None
        value = (snap.to_dict() or {}).get("value")
        return value if isinstance(value, str) else None

    async def put(self, key: str, value: str) -> None:
        await self.collection.document(key).set(
            {
                "key": key,
                "value": value,
                "updated_at": firestore.SERVER_TIMESTAMP,
            }
        )

    async def list(self, prefix: str) -> List[str]:
        query = (
            self.collection.where(filter=firestore.FieldFilter("key", ">=", prefix))
            .where(filter=firestore.FieldFilter("key", "<", prefix + _PREFIX_END))
            .select(["key"])
        )
        keys = []
        async for snap in query.stream():
            keys.append(snap.id)
        return keys


def open_kv_store(settings: Settings) -> Optional[KVStore]:
    """Creates the configured store, or None when storage is not configured."""
    if settings.kv_backend == "memory":
        logger.info("Using in-memory article storage.")
        return InMemoryKVStore()

    if settings.kv_backend != "firestore":
        logger.warning("Unknown KV_BACKEND '%s'. Storage disabled.", settings.kv_backend)
        return None

    store = FirestoreKVStore(settings.gcp_project_id, settings.kv_collection)
    return store if store.available else None
