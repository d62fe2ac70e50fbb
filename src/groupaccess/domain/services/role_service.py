"""Role lifecycle service.

Saving and deleting roles goes through this service so the scope and
deletion rules hold for every caller. Field-level rules are enforced by
the Role entity itself.
"""

from typing import TYPE_CHECKING, Any

from groupaccess.core.hooks import HookEvent, HookRegistry
from groupaccess.core.logging import get_logger
from groupaccess.domain.entities.role import (
    DEFAULT_ROLE_NAMES,
    REQUIRED_ROLE_NAMES,
    Role,
)
from groupaccess.domain.exceptions import (
    InvalidArgumentError,
    RoleRequiredError,
    RoleValidationError,
)
from groupaccess.infrastructure.persistence.repositories.role_repository import (
    RoleRepository,
)

if TYPE_CHECKING:
    from groupaccess.domain.services.group_registry import GroupRegistry

logger = get_logger(__name__)


class RoleService:
    """Creates, saves, loads and deletes group roles.

    Args:
        repository: Role storage.
        hook_registry: Registry used to collect contributed default roles.
        group_registry: Registry consulted before deleting a required role.
            Usually bound later through bind_group_registry().
    """

    def __init__(
        self,
        repository: RoleRepository,
        hook_registry: HookRegistry | None = None,
        group_registry: "GroupRegistry | None" = None,
    ) -> None:
        self.repository = repository
        self.hook_registry = hook_registry
        self.group_registry = group_registry

    def bind_group_registry(self, group_registry: "GroupRegistry") -> None:
        self.group_registry = group_registry

    def create(self, **properties: Any) -> Role:
        """Create a new, unsaved role."""
        return Role.create(**properties)

    async def load(self, role_id: str) -> Role | None:
        return await self.repository.load(role_id)

    async def load_by_properties(self, **criteria: Any) -> list[Role]:
        return await self.repository.load_by_properties(**criteria)

    async def save(self, role: Role) -> Role:
        """Save a role.

        On first save the role ID is prefixed with the role scope. The role
        object is only marked as saved once the row was written, so a
        failed save leaves it untouched.

        Raises:
            RoleValidationError: If the role has no ID, group type or bundle,
                if the scoped ID is already taken, or if the ID of a saved
                role was changed.
        """
        if not role.id:
            raise RoleValidationError("The role ID can not be empty.")
        if not role.is_new() and role.id != role.stored_id:
            raise RoleValidationError(
                f"The ID of the saved role '{role.stored_id}' cannot be changed "
                f"to '{role.id}'."
            )
        role.validate_scope()

        stored_id = role.scoped_id()
        is_new = role.is_new()
        await self.repository.save(role, stored_id)
        role.mark_saved(stored_id)

        logger.info(
            "Role created" if is_new else "Role updated",
            role_id=role.id,
            group_type=role.group_type,
            group_bundle=role.group_bundle,
        )
        return role

    async def delete(self, role: Role) -> None:
        """Delete a saved role.

        Raises:
            RoleRequiredError: If the role is one of the required roles and
                its group type and bundle are still registered as a group.
        """
        if role.is_new():
            return

        if role.is_required() or role.name in REQUIRED_ROLE_NAMES:
            if self.group_registry is None:
                raise RuntimeError("No group registry bound to the role service.")
            if self.group_registry.is_group(role.group_type, role.group_bundle):
                raise RoleRequiredError(
                    f"The role {role.label or role.name} is a required role and "
                    "cannot be deleted while its group is registered."
                )

        await self.repository.delete(role.stored_id)
        logger.info(
            "Role deleted",
            role_id=role.stored_id,
            group_type=role.group_type,
            group_bundle=role.group_bundle,
        )

    async def get_default_roles(self) -> dict[str, dict[str, Any]]:
        """Get the roles every group receives when it is registered.

        The well-known roles are always present. Extensions may add roles
        through the on_group_default_roles hook by adding entries to
        data["roles"], keyed by role name, with at least a 'label'.

        Returns:
            Role properties keyed by role name.

        Raises:
            InvalidArgumentError: If a contributed role has no name or label.
        """
        roles = {name: Role.default_properties(name) for name in DEFAULT_ROLE_NAMES}
        if self.hook_registry is None:
            return roles

        result = await self.hook_registry.trigger(
            event=HookEvent.ON_GROUP_DEFAULT_ROLES,
            data={"roles": {}},
        )
        contributed = (result.data or {}).get("roles") or {}

        for name, properties in contributed.items():
            if not name:
                raise InvalidArgumentError("Default roles need a name.")
            if not isinstance(properties, dict) or not properties.get("label"):
                raise InvalidArgumentError(f"Default role {name} needs a label.")
            if name in roles:
                logger.warning("Ignoring contribution for a reserved role", role_name=name)
                continue
            roles[name] = {
                "label": properties["label"],
                "role_type": Role.role_type_for(name),
                "permissions": list(properties.get("permissions", [])),
            }

        return roles
