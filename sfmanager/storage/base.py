"""
Storage abstraction layer.

All persistence goes through these interfaces so the relational backend
(MySQL in production) can be swapped for an in-memory store in development
and tests without touching the auth pipeline.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel


# =============================================================================
# Storage Interfaces
# =============================================================================


class MetadataStorage(ABC):
    """
    Storage for structured records (users, startups, roles, memberships).

    Production Implementation: MySQL
    Local Implementation: in-memory
    """

    @abstractmethod
    async def save(self, collection: str, id: str, data: dict[str, Any]) -> None:
        """Save a document to a collection."""
        pass

    @abstractmethod
    async def get(self, collection: str, id: str) -> dict[str, Any] | None:
        """Get a document by ID."""
        pass

    @abstractmethod
    async def delete(self, collection: str, id: str) -> bool:
        """Delete a document."""
        pass

    @abstractmethod
    async def query(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
        limit: int | None = 100,
        offset: int = 0,
    ) -> list[dict[str, Any]]:
        """
        Query documents with optional equality filters, in insertion order.

        ``limit=None`` returns every match.
        """
        pass


# =============================================================================
# Storage Provider (dependency injection container)
# =============================================================================


class StorageProvider(BaseModel):
    """
    Container for storage backends.

    Built once at app startup and placed on ``app.state.storage``.
    Components receive the backend they need through their constructors.
    """

    model_config = {"arbitrary_types_allowed": True}

    metadata: MetadataStorage


# =============================================================================
# Collection Names (for MetadataStorage)
# =============================================================================


class Collections:
    """Standard collection/table names."""

    USERS = "users"
    STARTUPS = "startups"
    ROLES = "roles"
    USER_ROLES = "user_roles"
