"""Group access resolver.

Decides whether a user may perform an operation in a group. A decision
is one of three values: ALLOW, DENY, or NEUTRAL when the entity is not a
group at all and the resolver has no opinion.

Resolution order for user_access():
1. Not a registered group: NEUTRAL.
2. Superuser: ALLOW.
3. Platform-wide 'administer group' permission: ALLOW (unless ignore_admin).
4. Group owner, when group_manager_full_access is enabled: ALLOW.
5. Permissions of the user's group roles, cached per group and user.
6. Permissions after on_user_access_alter hooks, cached per operation.
7. Group-level 'administer group' permission: ALLOW (unless ignore_admin).
8. Operation among the permissions: ALLOW, otherwise DENY.
"""

from enum import Enum

from groupaccess.core.config import Settings, get_settings
from groupaccess.core.hooks import HookEvent, HookRegistry
from groupaccess.core.logging import get_logger
from groupaccess.domain.entities.account import Account
from groupaccess.domain.entities.group import ContentEntity
from groupaccess.domain.entities.hook_context import HookContext
from groupaccess.domain.entities.role import ANONYMOUS, AUTHENTICATED, Role
from groupaccess.domain.services.access_cache import AccessCache
from groupaccess.domain.services.group_audience import GroupAudienceService
from groupaccess.domain.services.group_registry import GroupRegistry
from groupaccess.domain.services.permission_catalog import ADMINISTER_GROUP_PERMISSION
from groupaccess.infrastructure.auth.identity import IdentityProvider
from groupaccess.infrastructure.persistence.repositories.membership_repository import (
    MembershipRepository,
)
from groupaccess.infrastructure.persistence.repositories.role_repository import (
    RoleRepository,
)

logger = get_logger(__name__)


class AccessResult(str, Enum):
    """Outcome of an access check."""

    ALLOW = "allow"
    DENY = "deny"
    NEUTRAL = "neutral"

    def is_allowed(self) -> bool:
        return self is AccessResult.ALLOW

    def is_forbidden(self) -> bool:
        return self is AccessResult.DENY

    def is_neutral(self) -> bool:
        return self is AccessResult.NEUTRAL


class AccessResolver:
    """Resolves group-scoped access for users.

    The resolver caches role permissions for its whole lifetime. Call
    reset() after changing roles, memberships or groups underneath a
    long-lived resolver.
    """

    def __init__(
        self,
        group_registry: GroupRegistry,
        role_repository: RoleRepository,
        membership_repository: MembershipRepository,
        identity_provider: IdentityProvider,
        hook_registry: HookRegistry | None = None,
        audience: GroupAudienceService | None = None,
        cache: AccessCache | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.group_registry = group_registry
        self.role_repository = role_repository
        self.membership_repository = membership_repository
        self.identity_provider = identity_provider
        self.hook_registry = hook_registry
        self.audience = audience
        self.cache = cache or AccessCache()
        self.settings = settings or get_settings()

    async def user_access(
        self,
        group: ContentEntity | None,
        operation: str,
        user: Account | None = None,
        skip_alter: bool = False,
        ignore_admin: bool = False,
    ) -> AccessResult:
        """Check whether a user may perform an operation in a group.

        Args:
            group: The group entity.
            operation: Permission name to check (e.g., 'update group').
            user: The user to check. Defaults to the current user.
            skip_alter: Use the role permissions without running the
                on_user_access_alter hooks.
            ignore_admin: Do not let 'administer group' grant access.

        Returns:
            NEUTRAL if the entity is not a group, otherwise ALLOW or DENY.
        """
        if group is None or not self.group_registry.is_group(group.entity_type, group.bundle):
            return AccessResult.NEUTRAL

        if user is None:
            user = self.identity_provider.current_user()

        if self.identity_provider.is_superuser(user):
            return AccessResult.ALLOW

        if not ignore_admin and self.identity_provider.has_permission(
            user, ADMINISTER_GROUP_PERMISSION
        ):
            return AccessResult.ALLOW

        if (
            self.settings.group_manager_full_access
            and user.is_authenticated()
            and group.owner_id is not None
            and group.owner_id == user.id
        ):
            return AccessResult.ALLOW

        permissions = await self.get_permissions(group, user)
        if not skip_alter:
            permissions = await self._alter_permissions(group, user, operation, permissions)

        if not ignore_admin and ADMINISTER_GROUP_PERMISSION in permissions:
            return AccessResult.ALLOW

        if operation in permissions:
            return AccessResult.ALLOW
        return AccessResult.DENY

    async def user_access_entity(
        self,
        operation: str,
        entity: ContentEntity | None,
        user: Account | None = None,
    ) -> AccessResult:
        """Check access to an entity that is a group, group content, or both.

        A group is checked directly. Group content is allowed if any of its
        groups allows the operation and denied if none does. Entities that
        are neither get NEUTRAL.
        """
        if entity is None or entity.is_new():
            return AccessResult.NEUTRAL

        result = AccessResult.NEUTRAL

        if self.group_registry.is_group(entity.entity_type, entity.bundle):
            access = await self.user_access(entity, operation, user)
            if access is AccessResult.ALLOW:
                return access
            # The entity may also be group content; keep checking.
            result = AccessResult.DENY

        if self.audience is not None and await self.audience.is_group_content(
            entity.entity_type, entity.bundle
        ):
            groups = await self.audience.get_entity_groups(entity)
            for group in groups:
                if await self.user_access(group, operation, user) is AccessResult.ALLOW:
                    return AccessResult.ALLOW
            if groups:
                return AccessResult.DENY

        return result

    async def get_permissions(self, group: ContentEntity, user: Account) -> frozenset[str]:
        """Get the permissions the user's roles grant in a group."""
        key = self.cache.make_key(group.entity_type, group.bundle, group.id or "", user.id)
        cached = self.cache.get_pre_alter(key)
        if cached is not None:
            logger.debug(
                "Permission cache hit",
                group_type=group.entity_type,
                group_id=group.id,
                user_id=user.id,
            )
            return cached

        permissions: set[str] = set()
        for role in await self._load_user_roles(group, user):
            permissions.update(role.permissions)

        self.cache.set_pre_alter(key, permissions)
        return frozenset(permissions)

    async def get_user_role_names(self, group: ContentEntity, user: Account) -> list[str]:
        """Get the names of the roles a user holds in a group.

        Users without an active membership hold the non-member role; active
        members hold the member role plus the roles of their membership.
        """
        if user.is_anonymous() or group.id is None:
            return [ANONYMOUS]

        membership = await self.membership_repository.get(user.id, group.entity_type, group.id)
        if membership is None or not membership.is_active():
            return [ANONYMOUS]

        return list(dict.fromkeys([AUTHENTICATED, *membership.roles]))

    def reset(self) -> None:
        """Clear every cached permission."""
        self.cache.reset()
        logger.debug("Permission cache reset")

    async def _load_user_roles(self, group: ContentEntity, user: Account) -> list[Role]:
        names = await self.get_user_role_names(group, user)

        roles: list[Role] = []
        if group.id:
            roles = await self.role_repository.load_by_properties(
                group_type=group.entity_type,
                group_bundle=group.bundle,
                group_id=group.id,
                name=names,
            )

        found = {role.name for role in roles}
        remaining = [name for name in names if name not in found]
        if remaining:
            roles.extend(
                await self.role_repository.load_by_properties(
                    group_type=group.entity_type,
                    group_bundle=group.bundle,
                    group_id="",
                    name=remaining,
                )
            )
        return roles

    async def _alter_permissions(
        self,
        group: ContentEntity,
        user: Account,
        operation: str,
        permissions: frozenset[str],
    ) -> frozenset[str]:
        key = self.cache.make_key(group.entity_type, group.bundle, group.id or "", user.id)
        cached = self.cache.get_post_alter(key, operation)
        if cached is not None:
            return cached

        if self.hook_registry is None:
            altered = set(permissions)
        else:
            result = await self.hook_registry.trigger(
                event=HookEvent.ON_USER_ACCESS_ALTER,
                data={"permissions": set(permissions), "operation": operation, "group": group},
                context=HookContext(user=user),
                filters={"group_type": group.entity_type, "group_bundle": group.bundle},
            )
            altered = set((result.data or {}).get("permissions") or ())

        self.cache.set_post_alter(key, operation, altered)
        return frozenset(altered)
