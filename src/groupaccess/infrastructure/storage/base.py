"""Base abstraction for entity storage.

Entities live in the host platform; the group access core only loads them
by type and ID.
"""

from abc import ABC, abstractmethod

from groupaccess.domain.entities.group import ContentEntity


class EntityStorage(ABC):
    """Abstract base class for entity storage backends."""

    @abstractmethod
    async def load(self, entity_type: str, entity_id: str) -> ContentEntity | None:
        """Load an entity, or return None if it does not exist."""
        ...
