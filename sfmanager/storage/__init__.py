"""
Storage abstractions.

Integration Points:
- MetadataStorage → MySQL (users, startups, roles, user roles)
"""

from sfmanager.storage.base import (
    MetadataStorage,
    StorageProvider,
    Collections,
)
from sfmanager.storage.local import InMemoryMetadataStorage, create_local_storage

__all__ = [
    "MetadataStorage",
    "StorageProvider",
    "Collections",
    "InMemoryMetadataStorage",
    "create_local_storage",
]
