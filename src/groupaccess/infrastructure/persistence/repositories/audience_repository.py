"""Repository for audience fields and group references."""

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from groupaccess.domain.entities.audience import AudienceField
from groupaccess.infrastructure.persistence.models import (
    AudienceFieldModel,
    GroupReferenceModel,
)


class AudienceRepository:
    """Repository for audience field and group reference operations."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def add_field(self, audience_field: AudienceField) -> AudienceField:
        self.session.add(
            AudienceFieldModel(
                entity_type=audience_field.entity_type,
                bundle=audience_field.bundle,
                field_name=audience_field.field_name,
                target_type=audience_field.target_type,
                target_bundles=list(audience_field.target_bundles),
                cardinality=audience_field.cardinality,
            )
        )
        await self.session.flush()
        return audience_field

    async def remove_field(self, entity_type: str, bundle: str, field_name: str) -> bool:
        """Delete an audience field and every reference made through it.

        Returns:
            True if the field existed.
        """
        result = await self.session.execute(
            delete(AudienceFieldModel).where(
                (AudienceFieldModel.entity_type == entity_type)
                & (AudienceFieldModel.bundle == bundle)
                & (AudienceFieldModel.field_name == field_name)
            )
        )
        # References do not record the content bundle; keep them while
        # another bundle of the entity type still has a field of that name.
        remaining = await self.session.execute(
            select(func.count())
            .select_from(AudienceFieldModel)
            .where(
                (AudienceFieldModel.entity_type == entity_type)
                & (AudienceFieldModel.field_name == field_name)
            )
        )
        if remaining.scalar_one() == 0:
            await self.session.execute(
                delete(GroupReferenceModel).where(
                    (GroupReferenceModel.entity_type == entity_type)
                    & (GroupReferenceModel.field_name == field_name)
                )
            )
        await self.session.flush()
        return result.rowcount > 0

    async def get_fields(self, entity_type: str, bundle: str) -> list[AudienceField]:
        result = await self.session.execute(
            select(AudienceFieldModel)
            .where(
                (AudienceFieldModel.entity_type == entity_type)
                & (AudienceFieldModel.bundle == bundle)
            )
            .order_by(AudienceFieldModel.id)
        )
        return [self._to_entity(model) for model in result.scalars().all()]

    async def get_all_fields(self) -> list[AudienceField]:
        result = await self.session.execute(
            select(AudienceFieldModel).order_by(AudienceFieldModel.id)
        )
        return [self._to_entity(model) for model in result.scalars().all()]

    async def add_reference(
        self,
        entity_type: str,
        entity_id: str,
        field_name: str,
        group_type: str,
        group_bundle: str,
        group_id: str,
    ) -> None:
        self.session.add(
            GroupReferenceModel(
                entity_type=entity_type,
                entity_id=entity_id,
                field_name=field_name,
                group_type=group_type,
                group_bundle=group_bundle,
                group_id=group_id,
            )
        )
        await self.session.flush()

    async def remove_reference(
        self,
        entity_type: str,
        entity_id: str,
        group_type: str,
        group_id: str,
    ) -> None:
        await self.session.execute(
            delete(GroupReferenceModel).where(
                (GroupReferenceModel.entity_type == entity_type)
                & (GroupReferenceModel.entity_id == entity_id)
                & (GroupReferenceModel.group_type == group_type)
                & (GroupReferenceModel.group_id == group_id)
            )
        )
        await self.session.flush()

    async def count_references(self, entity_type: str, entity_id: str, field_name: str) -> int:
        result = await self.session.execute(
            select(func.count())
            .select_from(GroupReferenceModel)
            .where(
                (GroupReferenceModel.entity_type == entity_type)
                & (GroupReferenceModel.entity_id == entity_id)
                & (GroupReferenceModel.field_name == field_name)
            )
        )
        return result.scalar_one()

    async def get_references(self, entity_type: str, entity_id: str) -> list[GroupReferenceModel]:
        result = await self.session.execute(
            select(GroupReferenceModel)
            .where(
                (GroupReferenceModel.entity_type == entity_type)
                & (GroupReferenceModel.entity_id == entity_id)
            )
            .order_by(GroupReferenceModel.id)
        )
        return list(result.scalars().all())

    @staticmethod
    def _to_entity(model: AudienceFieldModel) -> AudienceField:
        return AudienceField(
            entity_type=model.entity_type,
            bundle=model.bundle,
            field_name=model.field_name,
            target_type=model.target_type,
            target_bundles=list(model.target_bundles or ()),
            cardinality=model.cardinality,
        )
