"""Audience field entity.

An audience field is the reference through which group content points at
its groups.
"""

from dataclasses import dataclass, field

DEFAULT_AUDIENCE_FIELD = "group_audience"

CARDINALITY_UNLIMITED = -1


@dataclass
class AudienceField:
    """Declares that a group content bundle references groups.

    Attributes:
        entity_type: Entity type of the group content.
        bundle: Bundle of the group content.
        field_name: Name of the reference field.
        target_type: Entity type of the referenced groups.
        target_bundles: Referenced group bundles; empty means every bundle
            of target_type.
        cardinality: Maximum number of referenced groups, or
            CARDINALITY_UNLIMITED.
    """

    entity_type: str
    bundle: str
    target_type: str
    field_name: str = DEFAULT_AUDIENCE_FIELD
    target_bundles: list[str] = field(default_factory=list)
    cardinality: int = CARDINALITY_UNLIMITED

    def __post_init__(self) -> None:
        if not self.entity_type or not self.bundle:
            raise ValueError("Entity type and bundle are required")
        if not self.target_type:
            raise ValueError("Target type is required")
        if self.cardinality == 0 or self.cardinality < CARDINALITY_UNLIMITED:
            raise ValueError("Cardinality must be positive or unlimited")

    def targets(self, group_type: str, group_bundle: str) -> bool:
        """Whether the field can reference groups of the given type and bundle."""
        if self.target_type != group_type:
            return False
        return not self.target_bundles or group_bundle in self.target_bundles
