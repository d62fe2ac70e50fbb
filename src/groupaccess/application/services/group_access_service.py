"""Group access service.

Wires the registry, role service, permission catalog, audience service and
access resolver around a single database session.
"""

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from groupaccess.core.config import Settings, get_settings
from groupaccess.core.hooks import HookRegistry
from groupaccess.domain.services.access_cache import AccessCache
from groupaccess.domain.services.access_resolver import AccessResolver
from groupaccess.domain.services.group_audience import GroupAudienceService
from groupaccess.domain.services.group_registry import GroupRegistry
from groupaccess.domain.services.permission_catalog import PermissionCatalog
from groupaccess.domain.services.role_service import RoleService
from groupaccess.infrastructure.auth.identity import IdentityProvider, SessionIdentityProvider
from groupaccess.infrastructure.persistence.repositories import (
    AudienceRepository,
    MembershipRepository,
    RoleRepository,
    SettingsRepository,
)
from groupaccess.infrastructure.storage.base import EntityStorage


@dataclass
class GroupAccessService:
    """The group access services bound to one session.

    The session is never committed here; callers commit once their unit
    of work is complete.
    """

    session: AsyncSession
    hook_registry: HookRegistry
    registry: GroupRegistry
    roles: RoleService
    catalog: PermissionCatalog
    audience: GroupAudienceService
    resolver: AccessResolver
    memberships: MembershipRepository

    @classmethod
    async def create(
        cls,
        session: AsyncSession,
        hook_registry: HookRegistry | None = None,
        identity_provider: IdentityProvider | None = None,
        entity_storage: EntityStorage | None = None,
        cache: AccessCache | None = None,
        settings: Settings | None = None,
    ) -> "GroupAccessService":
        """Build the services and load the group map."""
        settings = settings or get_settings()
        hook_registry = hook_registry or HookRegistry()

        role_repository = RoleRepository(session)
        membership_repository = MembershipRepository(session)
        audience = GroupAudienceService(AudienceRepository(session), entity_storage)
        catalog = PermissionCatalog(hook_registry, audience)
        roles = RoleService(role_repository, hook_registry)
        registry = await GroupRegistry.load(
            SettingsRepository(session), roles, catalog, hook_registry, settings
        )
        resolver = AccessResolver(
            group_registry=registry,
            role_repository=role_repository,
            membership_repository=membership_repository,
            identity_provider=identity_provider
            or SessionIdentityProvider(settings.superuser_id),
            hook_registry=hook_registry,
            audience=audience,
            cache=cache,
            settings=settings,
        )

        return cls(
            session=session,
            hook_registry=hook_registry,
            registry=registry,
            roles=roles,
            catalog=catalog,
            audience=audience,
            resolver=resolver,
            memberships=membership_repository,
        )
