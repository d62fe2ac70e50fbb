"""Group registry.

Tracks which entity type and bundle pairs are groups. The group map is
stored in the settings store as

    {"groups": {"node": ["club", "team"], "taxonomy_term": ["forum"]}}

and mirrored in memory. Registering a group provisions its default roles;
removing it deletes every role scoped to it.

Mutations persist the group map first, then reload the in-memory snapshot,
then create or delete roles. The two steps are not atomic: if the role
step fails, the map change stays persisted and RoleProvisioningError is
raised so the mismatch can be repaired by hand.
"""

from groupaccess.core.config import Settings, get_settings
from groupaccess.core.hooks import HookEvent, HookRegistry
from groupaccess.core.logging import LoggingContext, get_logger
from groupaccess.domain.entities.group import GroupDescriptor
from groupaccess.domain.entities.role import Role
from groupaccess.domain.exceptions import (
    GroupAlreadyRegisteredError,
    RoleProvisioningError,
)
from groupaccess.domain.services.permission_catalog import PermissionCatalog
from groupaccess.domain.services.role_service import RoleService
from groupaccess.infrastructure.persistence.repositories.settings_repository import (
    SettingsRepository,
)

logger = get_logger(__name__)


class GroupRegistry:
    """Registry of the entity type and bundle pairs that are groups.

    Call refresh() (or build the registry with GroupRegistry.load()) before
    the first lookup; lookups read the in-memory snapshot only.
    """

    def __init__(
        self,
        settings_repository: SettingsRepository,
        role_service: RoleService,
        catalog: PermissionCatalog,
        hook_registry: HookRegistry | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.settings_repository = settings_repository
        self.role_service = role_service
        self.catalog = catalog
        self.hook_registry = hook_registry
        self.settings = settings or get_settings()
        self._groups: dict[str, list[str]] = {}

        role_service.bind_group_registry(self)

    @classmethod
    async def load(
        cls,
        settings_repository: SettingsRepository,
        role_service: RoleService,
        catalog: PermissionCatalog,
        hook_registry: HookRegistry | None = None,
        settings: Settings | None = None,
    ) -> "GroupRegistry":
        """Build a registry and load its snapshot."""
        registry = cls(settings_repository, role_service, catalog, hook_registry, settings)
        await registry.refresh()
        return registry

    async def refresh(self) -> None:
        """Reload the group map snapshot from the settings store."""
        config = await self.settings_repository.get(self.settings.settings_config_key)
        groups = config.get(self.settings.groups_config_key, {}) or {}
        self._groups = {
            entity_type: list(dict.fromkeys(bundles))
            for entity_type, bundles in groups.items()
            if bundles
        }

    def is_group(self, entity_type: str, bundle: str) -> bool:
        return bundle in self._groups.get(entity_type, [])

    def get_groups_for_entity_type(self, entity_type: str) -> list[str]:
        """Get the group bundles of an entity type, or [] if it has none."""
        return list(self._groups.get(entity_type, []))

    def get_all_group_bundles(self, entity_type: str | None = None) -> dict[str, list[str]]:
        """Get the group map.

        Args:
            entity_type: Limit the map to this entity type. If it has no
                group bundles the whole map is returned.
        """
        if entity_type and entity_type in self._groups:
            return {entity_type: list(self._groups[entity_type])}
        return {key: list(bundles) for key, bundles in self._groups.items()}

    async def add_group(self, entity_type: str, bundle: str) -> None:
        """Register an entity type and bundle as a group.

        Raises:
            InvalidArgumentError: If the entity type or bundle is empty.
            GroupAlreadyRegisteredError: If the pair is already a group.
            RoleProvisioningError: If the group was registered but its
                default roles could not be created.
        """
        group = GroupDescriptor(entity_type, bundle)
        config = await self.settings_repository.get_editable(self.settings.settings_config_key)
        groups = config.get(self.settings.groups_config_key, {}) or {}
        bundles = groups.setdefault(entity_type, [])
        if bundle in bundles:
            raise GroupAlreadyRegisteredError(f"{group} is already a group.")

        bundles.append(bundle)
        config.set(self.settings.groups_config_key, groups)
        await config.save()
        await self.refresh()

        try:
            with LoggingContext(group=str(group)):
                await self.provision_default_roles(entity_type, bundle)
        except Exception as e:
            logger.error(
                "Role provisioning failed",
                action="add",
                entity_type=entity_type,
                bundle=bundle,
                error=str(e),
            )
            raise RoleProvisioningError(
                f"Group {group} was registered but its default "
                f"roles could not be created: {e}",
                entity_type=entity_type,
                bundle=bundle,
            ) from e

        logger.info("Group added", entity_type=entity_type, bundle=bundle)
        await self._trigger(HookEvent.ON_GROUP_AFTER_ADD, entity_type, bundle)

    async def remove_group(self, entity_type: str, bundle: str) -> None:
        """Remove an entity type and bundle from the groups.

        Does nothing if the pair is not a group.

        Raises:
            RoleProvisioningError: If the group was removed but its roles
                could not be deleted.
        """
        group = GroupDescriptor(entity_type, bundle)
        config = await self.settings_repository.get_editable(self.settings.settings_config_key)
        groups = config.get(self.settings.groups_config_key, {}) or {}
        bundles = groups.get(entity_type, [])
        if bundle not in bundles:
            return None

        bundles.remove(bundle)
        if not bundles:
            del groups[entity_type]
        config.set(self.settings.groups_config_key, groups)
        await config.save()
        # The snapshot must no longer list the group, or the required roles
        # cannot be deleted below.
        await self.refresh()

        try:
            with LoggingContext(group=str(group)):
                removed = await self.deprovision_roles(entity_type, bundle)
        except Exception as e:
            logger.error(
                "Role provisioning failed",
                action="remove",
                entity_type=entity_type,
                bundle=bundle,
                error=str(e),
            )
            raise RoleProvisioningError(
                f"Group {group} was removed but its roles could "
                f"not be deleted: {e}",
                entity_type=entity_type,
                bundle=bundle,
            ) from e

        logger.info(
            "Group removed", entity_type=entity_type, bundle=bundle, roles_deleted=removed
        )
        await self._trigger(HookEvent.ON_GROUP_AFTER_REMOVE, entity_type, bundle)
        return None

    async def provision_default_roles(self, entity_type: str, bundle: str) -> list[Role]:
        """Create the default roles of a group that do not exist yet.

        A default role exists when a bundle-wide role with the same group
        type, bundle, role type and name is stored. Running this twice
        creates nothing the second time.

        Returns:
            The roles that were created.
        """
        created: list[Role] = []
        default_roles = await self.role_service.get_default_roles()

        for role_name, properties in default_roles.items():
            role_type = Role.role_type_for(role_name)
            existing = await self.role_service.load_by_properties(
                group_type=entity_type,
                group_bundle=bundle,
                group_id="",
                role_type=role_type,
                name=role_name,
            )
            if existing:
                continue

            permissions = set(
                await self.catalog.filter_by_default_role(entity_type, bundle, role_name)
            )
            permissions.update(properties.get("permissions", []))

            role = self.role_service.create(
                id=role_name,
                label=properties["label"],
                group_type=entity_type,
                group_bundle=bundle,
                role_type=role_type,
                permissions=permissions,
            )
            await self.role_service.save(role)
            created.append(role)

        return created

    async def deprovision_roles(self, entity_type: str, bundle: str) -> int:
        """Delete every role of a group, for every group instance.

        Returns:
            The number of deleted roles.
        """
        roles = await self.role_service.load_by_properties(
            group_type=entity_type, group_bundle=bundle
        )
        for role in roles:
            await self.role_service.delete(role)
        return len(roles)

    async def _trigger(self, event: str, entity_type: str, bundle: str) -> None:
        if self.hook_registry is None:
            return
        await self.hook_registry.trigger(
            event=event,
            data={"entity_type": entity_type, "bundle": bundle},
            filters={"group_type": entity_type, "group_bundle": bundle},
        )
