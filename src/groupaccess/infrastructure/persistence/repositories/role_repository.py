"""Role repository for database operations.

Translates between GroupRoleModel rows and Role entities. Lifecycle rules
(scoped IDs, deletion guards) live in RoleService; this repository only
reads and writes rows.
"""

from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from groupaccess.domain.entities.role import Role
from groupaccess.domain.exceptions import InvalidArgumentError, RoleValidationError
from groupaccess.infrastructure.persistence.models import GroupRoleModel

QUERYABLE_PROPERTIES = (
    "id",
    "name",
    "label",
    "group_type",
    "group_bundle",
    "group_id",
    "role_type",
)


class RoleRepository:
    """Repository for group role database operations."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def load(self, role_id: str) -> Role | None:
        """Get a role by its scoped ID."""
        model = await self.session.get(GroupRoleModel, role_id)
        return self._to_entity(model) if model else None

    async def load_by_properties(self, **criteria: Any) -> list[Role]:
        """Get all roles matching every given property.

        Args:
            **criteria: Property values to match. A list value matches any
                of its items.

        Raises:
            InvalidArgumentError: If a property cannot be queried.
        """
        query = select(GroupRoleModel)
        for prop, value in criteria.items():
            if prop not in QUERYABLE_PROPERTIES:
                raise InvalidArgumentError(f"Cannot load roles by '{prop}'.")
            column = getattr(GroupRoleModel, prop)
            if isinstance(value, (list, tuple, set, frozenset)):
                query = query.where(column.in_(list(value)))
            else:
                query = query.where(column == value)

        result = await self.session.execute(
            query.order_by(GroupRoleModel.weight, GroupRoleModel.id)
        )
        return [self._to_entity(model) for model in result.scalars().all()]

    async def save(self, role: Role, stored_id: str) -> None:
        """Insert or update the row of a role.

        Args:
            role: Role to write.
            stored_id: ID to store the role under.

        Raises:
            RoleValidationError: If a new role collides with an existing ID.
        """
        model = await self.session.get(GroupRoleModel, stored_id)
        if role.is_new():
            if model is not None:
                raise RoleValidationError(f"A role with ID '{stored_id}' already exists.")
            model = GroupRoleModel(id=stored_id, name=role.name)
            self.session.add(model)

        elif model is None:
            raise RoleValidationError(f"Role '{stored_id}' no longer exists.")

        model.label = role.label
        model.group_type = role.group_type
        model.group_bundle = role.group_bundle
        model.group_id = role.group_id or ""
        model.role_type = role.role_type
        model.permissions = sorted(role.permissions)
        model.weight = role.weight
        await self.session.flush()

    async def delete(self, role_id: str) -> None:
        await self.session.execute(
            delete(GroupRoleModel).where(GroupRoleModel.id == role_id)
        )
        await self.session.flush()

    @staticmethod
    def _to_entity(model: GroupRoleModel) -> Role:
        return Role.from_storage(
            name=model.name,
            id=model.id,
            label=model.label,
            group_type=model.group_type,
            group_bundle=model.group_bundle,
            group_id=model.group_id or "",
            permissions=set(model.permissions or ()),
            role_type=model.role_type,
            weight=model.weight,
        )
