"""Entity storage backends."""

from groupaccess.infrastructure.storage.base import EntityStorage
from groupaccess.infrastructure.storage.memory_entity_storage import InMemoryEntityStorage

__all__ = ["EntityStorage", "InMemoryEntityStorage"]
