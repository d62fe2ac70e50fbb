"""Content entities as seen by the group access core.

Entity storage lives outside this package; the core only needs to know an
entity's type, bundle, ID and owner.
"""

from dataclasses import dataclass

from groupaccess.domain.exceptions import InvalidArgumentError


@dataclass(frozen=True)
class GroupDescriptor:
    """An entity type and bundle pair that can be registered as a group."""

    entity_type: str
    bundle: str

    def __post_init__(self) -> None:
        if not self.entity_type:
            raise InvalidArgumentError("Entity type is required")
        if not self.bundle:
            raise InvalidArgumentError("Bundle is required")

    def __str__(self) -> str:
        return f"{self.entity_type}:{self.bundle}"


@dataclass
class ContentEntity:
    """A content entity that may be a group, group content, or both.

    Attributes:
        entity_type: Entity type ID (e.g., 'node').
        bundle: Bundle ID (e.g., 'article').
        id: Entity ID, or None if the entity has not been saved yet.
        owner_id: ID of the user owning the entity, if any.
    """

    entity_type: str
    bundle: str
    id: str | None = None
    owner_id: str | None = None

    def __post_init__(self) -> None:
        if not self.entity_type:
            raise ValueError("Entity type is required")
        if not self.bundle:
            raise ValueError("Bundle is required")
        if self.id is not None:
            self.id = str(self.id)
        if self.owner_id is not None:
            self.owner_id = str(self.owner_id)

    def is_new(self) -> bool:
        return self.id is None
