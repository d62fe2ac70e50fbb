"""Permission catalog.

Produces the permissions available to the roles of a group type and bundle:
- generic group permissions, available to every group type;
- create/update/delete permissions for every group content bundle that
  can reference the group bundle;
- permissions contributed by extensions through the
  on_group_permissions hook.

Contributions are merged in hook order. A later contribution replaces an
earlier descriptor with the same name, but contributions cannot remove a
built-in permission.
"""

from groupaccess.core.hooks import HookEvent, HookRegistry
from groupaccess.core.logging import get_logger
from groupaccess.domain.entities.permission import (
    GroupContentOperationPermission,
    PermissionDescriptor,
)
from groupaccess.domain.entities.role import ADMINISTRATOR, ANONYMOUS, AUTHENTICATED
from groupaccess.domain.services.group_audience import GroupAudienceService

logger = get_logger(__name__)

ADMINISTER_GROUP_PERMISSION = "administer group"

GENERIC_PERMISSIONS: tuple[PermissionDescriptor, ...] = (
    PermissionDescriptor(
        name="subscribe",
        title="Subscribe to group",
        description="Allow non-members to request membership to a group (approval required).",
        default_roles=frozenset({ANONYMOUS}),
    ),
    PermissionDescriptor(
        name="subscribe without approval",
        title="Subscribe to group (no approval required)",
        description="Allow non-members to join a group without an approval from group administrators.",
        is_restricted=True,
    ),
    PermissionDescriptor(
        name="unsubscribe",
        title="Unsubscribe from group",
        description="Allow members to unsubscribe themselves from a group, removing their membership.",
        default_roles=frozenset({AUTHENTICATED}),
    ),
    PermissionDescriptor(
        name="add user",
        title="Add user",
        description="Add new users to the group.",
        default_roles=frozenset({ADMINISTRATOR}),
    ),
    PermissionDescriptor(
        name=ADMINISTER_GROUP_PERMISSION,
        title="Administer group",
        description="Manage group members and content in the group.",
        is_restricted=True,
        default_roles=frozenset({ADMINISTRATOR}),
    ),
    PermissionDescriptor(
        name="approve and deny subscription",
        title="Approve and deny subscription",
        description="Users may allow or deny another user's subscription request.",
        default_roles=frozenset({ADMINISTRATOR}),
    ),
    PermissionDescriptor(
        name="manage members",
        title="Manage members",
        description="Users may remove group members and alter member status and roles.",
        is_restricted=True,
        default_roles=frozenset({ADMINISTRATOR}),
    ),
    PermissionDescriptor(
        name="manage permissions",
        title="Manage permissions",
        description="Users may view the group permissions page and change permissions.",
        is_restricted=True,
        default_roles=frozenset({ADMINISTRATOR}),
    ),
    PermissionDescriptor(
        name="manage roles",
        title="Manage roles",
        description="Users may view group roles and add or remove them.",
        is_restricted=True,
        default_roles=frozenset({ADMINISTRATOR}),
    ),
    PermissionDescriptor(
        name="update group",
        title="Edit group",
        description="Edit the group. Note: This permission controls only node entity type groups.",
        default_roles=frozenset({ADMINISTRATOR}),
    ),
)

# operation, ownership, title, default roles
_CONTENT_OPERATIONS = (
    ("create", None, "Create new content", frozenset({AUTHENTICATED, ADMINISTRATOR})),
    ("update", "own", "Edit own content", frozenset({AUTHENTICATED, ADMINISTRATOR})),
    ("update", "any", "Edit any content", frozenset({ADMINISTRATOR})),
    ("delete", "own", "Delete own content", frozenset({AUTHENTICATED, ADMINISTRATOR})),
    ("delete", "any", "Delete any content", frozenset({ADMINISTRATOR})),
)


def get_group_content_operation_permissions(
    entity_type: str, bundle: str
) -> list[GroupContentOperationPermission]:
    """Build the create/update/delete permissions of a group content bundle.

    Names follow '{operation} [own|any] {bundle} {entity_type}', e.g.
    'update own article node'.
    """
    permissions = []
    for operation, ownership, title, default_roles in _CONTENT_OPERATIONS:
        prefix = f"{operation} {ownership}" if ownership else operation
        permissions.append(
            GroupContentOperationPermission(
                name=f"{prefix} {bundle} {entity_type}",
                title=f"{bundle}: {title}",
                applies_to_owner_only=ownership == "own",
                default_roles=default_roles,
                entity_type=entity_type,
                bundle=bundle,
                operation=operation,
            )
        )
    return permissions


class PermissionCatalog:
    """Collects the permissions available to a group type and bundle."""

    def __init__(
        self,
        hook_registry: HookRegistry,
        audience: GroupAudienceService | None = None,
    ) -> None:
        self.hook_registry = hook_registry
        self.audience = audience

    async def get_builtin_permissions(
        self, group_type: str, group_bundle: str
    ) -> dict[str, PermissionDescriptor]:
        """Get the generic and group content permissions, keyed by name."""
        permissions = {permission.name: permission for permission in GENERIC_PERMISSIONS}

        if self.audience is not None:
            content_bundles = await self.audience.get_group_content_bundles(
                group_type, group_bundle
            )
            for entity_type, bundles in content_bundles.items():
                for bundle in bundles:
                    for permission in get_group_content_operation_permissions(
                        entity_type, bundle
                    ):
                        permissions[permission.name] = permission

        return permissions

    async def get_permissions(
        self, group_type: str, group_bundle: str
    ) -> dict[str, PermissionDescriptor]:
        """Get every permission available to a group type and bundle.

        Returns:
            Permission descriptors keyed by permission name.
        """
        permissions = await self.get_builtin_permissions(group_type, group_bundle)

        result = await self.hook_registry.trigger(
            event=HookEvent.ON_GROUP_PERMISSIONS,
            data={
                "group_type": group_type,
                "group_bundle": group_bundle,
                "permissions": [],
            },
            filters={"group_type": group_type, "group_bundle": group_bundle},
        )

        contributed = (result.data or {}).get("permissions") or []
        for permission in contributed:
            if not isinstance(permission, PermissionDescriptor):
                logger.warning(
                    "Ignoring invalid permission contribution",
                    group_type=group_type,
                    group_bundle=group_bundle,
                    contribution=repr(permission),
                )
                continue
            permissions[permission.name] = permission

        return permissions

    async def get_permission_names(self, group_type: str, group_bundle: str) -> list[str]:
        return sorted(await self.get_permissions(group_type, group_bundle))

    async def filter_by_default_role(
        self, group_type: str, group_bundle: str, role_name: str
    ) -> dict[str, PermissionDescriptor]:
        """Get the permissions a role receives when it is provisioned."""
        permissions = await self.get_permissions(group_type, group_bundle)
        return {
            name: permission
            for name, permission in permissions.items()
            if role_name in permission.default_roles
        }
