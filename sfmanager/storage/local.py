"""
Local storage implementations for development and tests.

These work without any external services.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sfmanager.storage.base import MetadataStorage, StorageProvider


# =============================================================================
# In-Memory Metadata Storage
# =============================================================================


class InMemoryMetadataStorage(MetadataStorage):
    """In-memory document storage. Queries preserve insertion order."""

    def __init__(self):
        self._data: dict[str, dict[str, dict[str, Any]]] = {}

    async def save(self, collection: str, id: str, data: dict[str, Any]) -> None:
        self._data.setdefault(collection, {})[id] = {
            **data,
            "_id": id,
            "_updated_at": datetime.now(timezone.utc).isoformat(),
        }

    async def get(self, collection: str, id: str) -> dict[str, Any] | None:
        doc = self._data.get(collection, {}).get(id)
        return dict(doc) if doc is not None else None

    async def delete(self, collection: str, id: str) -> bool:
        if id in self._data.get(collection, {}):
            del self._data[collection][id]
            return True
        return False

    async def query(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
        limit: int | None = 100,
        offset: int = 0,
    ) -> list[dict[str, Any]]:
        results = list(self._data.get(collection, {}).values())

        if filters:
            results = [
                doc for doc in results
                if all(doc.get(key) == value for key, value in filters.items())
            ]

        end = None if limit is None else offset + limit
        return [dict(doc) for doc in results[offset:end]]


# =============================================================================
# Factory
# =============================================================================


def create_local_storage() -> StorageProvider:
    """Create a StorageProvider with local implementations."""
    return StorageProvider(metadata=InMemoryMetadataStorage())
