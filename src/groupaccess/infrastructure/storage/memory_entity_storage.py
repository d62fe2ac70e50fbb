"""In-process entity storage."""

from groupaccess.domain.entities.group import ContentEntity
from groupaccess.infrastructure.storage.base import EntityStorage


class InMemoryEntityStorage(EntityStorage):
    """Entity storage backed by a dictionary.

    Used when the host platform hands entities to the process directly,
    and in tests.
    """

    def __init__(self, entities: list[ContentEntity] | None = None) -> None:
        self._entities: dict[tuple[str, str], ContentEntity] = {}
        for entity in entities or []:
            self.add(entity)

    def add(self, entity: ContentEntity) -> ContentEntity:
        if entity.is_new():
            raise ValueError("Only saved entities can be stored")
        self._entities[(entity.entity_type, entity.id)] = entity
        return entity

    def remove(self, entity_type: str, entity_id: str) -> None:
        self._entities.pop((entity_type, str(entity_id)), None)

    async def load(self, entity_type: str, entity_id: str) -> ContentEntity | None:
        return self._entities.get((entity_type, str(entity_id)))
