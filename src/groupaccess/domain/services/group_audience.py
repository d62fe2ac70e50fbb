"""Group audience service.

Group content is affiliated with groups through audience fields. This
service manages the fields, checks their cardinality, finds the field to
use for a given group, and records which groups an entity belongs to.
"""

from groupaccess.core.logging import get_logger
from groupaccess.domain.entities.audience import (
    CARDINALITY_UNLIMITED,
    DEFAULT_AUDIENCE_FIELD,
    AudienceField,
)
from groupaccess.domain.entities.group import ContentEntity
from groupaccess.domain.exceptions import AudienceFieldError
from groupaccess.infrastructure.persistence.repositories.audience_repository import (
    AudienceRepository,
)
from groupaccess.infrastructure.storage.base import EntityStorage

logger = get_logger(__name__)


class GroupAudienceService:
    """Manages audience fields and group references.

    Args:
        repository: Audience field and reference storage.
        entity_storage: Optional storage used to load referenced groups.
            Without it, groups are rebuilt from the reference rows and have
            no owner.
    """

    def __init__(
        self,
        repository: AudienceRepository,
        entity_storage: EntityStorage | None = None,
    ) -> None:
        self.repository = repository
        self.entity_storage = entity_storage

    async def add_audience_field(
        self,
        entity_type: str,
        bundle: str,
        target_type: str,
        target_bundles: list[str] | None = None,
        field_name: str = DEFAULT_AUDIENCE_FIELD,
        cardinality: int = CARDINALITY_UNLIMITED,
    ) -> AudienceField:
        """Make a bundle group content by adding an audience field to it.

        Raises:
            AudienceFieldError: If the bundle already has a field with that name.
        """
        existing = await self.get_audience_fields(entity_type, bundle)
        if field_name in existing:
            raise AudienceFieldError(
                f"{bundle} {entity_type} already has an audience field named {field_name}."
            )

        audience_field = AudienceField(
            entity_type=entity_type,
            bundle=bundle,
            field_name=field_name,
            target_type=target_type,
            target_bundles=list(target_bundles or []),
            cardinality=cardinality,
        )
        await self.repository.add_field(audience_field)
        logger.info(
            "Audience field added",
            entity_type=entity_type,
            bundle=bundle,
            field_name=field_name,
            target_type=target_type,
            target_bundles=audience_field.target_bundles,
        )
        return audience_field

    async def remove_audience_field(
        self,
        entity_type: str,
        bundle: str,
        field_name: str = DEFAULT_AUDIENCE_FIELD,
    ) -> bool:
        removed = await self.repository.remove_field(entity_type, bundle, field_name)
        if removed:
            logger.info(
                "Audience field removed",
                entity_type=entity_type,
                bundle=bundle,
                field_name=field_name,
            )
        return removed

    async def get_audience_fields(self, entity_type: str, bundle: str) -> dict[str, AudienceField]:
        """Get the audience fields of a bundle, keyed by field name."""
        fields = await self.repository.get_fields(entity_type, bundle)
        return {audience_field.field_name: audience_field for audience_field in fields}

    async def is_group_content(self, entity_type: str, bundle: str) -> bool:
        return bool(await self.repository.get_fields(entity_type, bundle))

    async def get_group_content_bundles(
        self, group_type: str, group_bundle: str
    ) -> dict[str, list[str]]:
        """Get the group content bundles that can reference a group bundle.

        Returns:
            Bundle IDs keyed by entity type.
        """
        bundles: dict[str, list[str]] = {}
        for audience_field in await self.repository.get_all_fields():
            if not audience_field.targets(group_type, group_bundle):
                continue
            entity_bundles = bundles.setdefault(audience_field.entity_type, [])
            if audience_field.bundle not in entity_bundles:
                entity_bundles.append(audience_field.bundle)
        return bundles

    async def check_field_cardinality(self, entity: ContentEntity, field_name: str) -> bool:
        """Whether another group can still be referenced through a field.

        Raises:
            AudienceFieldError: If the entity bundle has no such audience field.
        """
        fields = await self.get_audience_fields(entity.entity_type, entity.bundle)
        audience_field = fields.get(field_name)
        if audience_field is None:
            raise AudienceFieldError(
                f"No audience field with the name {field_name} found for "
                f"{entity.bundle} {entity.entity_type} entity."
            )

        if audience_field.cardinality == CARDINALITY_UNLIMITED or entity.is_new():
            return True

        count = await self.repository.count_references(
            entity.entity_type, entity.id, field_name
        )
        return count < audience_field.cardinality

    async def get_matching_field(
        self, entity: ContentEntity, group_type: str, group_bundle: str
    ) -> str | None:
        """Get the first audience field that can reference the given group.

        Returns:
            The field name, or None if no field matches or every matching
            field is full.
        """
        fields = await self.get_audience_fields(entity.entity_type, entity.bundle)
        for field_name, audience_field in fields.items():
            if not audience_field.targets(group_type, group_bundle):
                continue
            if not await self.check_field_cardinality(entity, field_name):
                continue
            return field_name
        return None

    async def add_to_group(
        self,
        entity: ContentEntity,
        group: ContentEntity,
        field_name: str | None = None,
    ) -> str:
        """Affiliate a group content entity with a group.

        Returns:
            The audience field the reference was stored in.

        Raises:
            AudienceFieldError: If either entity is unsaved, or no audience
                field can reference the group.
        """
        if entity.is_new() or group.is_new():
            raise AudienceFieldError("Only saved entities can be affiliated with groups.")

        if field_name is None:
            field_name = await self.get_matching_field(
                entity, group.entity_type, group.bundle
            )
            if field_name is None:
                raise AudienceFieldError(
                    f"{entity.bundle} {entity.entity_type} has no audience field "
                    f"that can reference {group.bundle} {group.entity_type} groups."
                )
        elif not await self.check_field_cardinality(entity, field_name):
            raise AudienceFieldError(f"The {field_name} field has reached its maximum values.")

        await self.repository.add_reference(
            entity_type=entity.entity_type,
            entity_id=entity.id,
            field_name=field_name,
            group_type=group.entity_type,
            group_bundle=group.bundle,
            group_id=group.id,
        )
        logger.debug(
            "Entity added to group",
            entity=f"{entity.entity_type}:{entity.id}",
            group=f"{group.entity_type}:{group.id}",
            field_name=field_name,
        )
        return field_name

    async def remove_from_group(self, entity: ContentEntity, group: ContentEntity) -> None:
        await self.repository.remove_reference(
            entity.entity_type, entity.id, group.entity_type, group.id
        )

    async def get_entity_groups(self, entity: ContentEntity) -> list[ContentEntity]:
        """Get the groups an entity is affiliated with.

        References to groups the entity storage cannot load are skipped.
        """
        if entity.is_new():
            return []

        groups: list[ContentEntity] = []
        seen: set[tuple[str, str]] = set()
        for reference in await self.repository.get_references(entity.entity_type, entity.id):
            key = (reference.group_type, reference.group_id)
            if key in seen:
                continue
            seen.add(key)

            if self.entity_storage is None:
                groups.append(
                    ContentEntity(
                        entity_type=reference.group_type,
                        bundle=reference.group_bundle,
                        id=reference.group_id,
                    )
                )
                continue

            group = await self.entity_storage.load(reference.group_type, reference.group_id)
            if group is None:
                logger.warning(
                    "Referenced group not found",
                    group_type=reference.group_type,
                    group_id=reference.group_id,
                )
                continue
            groups.append(group)

        return groups
