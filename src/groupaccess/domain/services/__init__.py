"""Domain services for GroupAccess.

Services hold the group registry, role lifecycle, permission catalog and
access resolution logic.
"""

from groupaccess.domain.services.access_cache import AccessCache
from groupaccess.domain.services.access_resolver import AccessResolver, AccessResult
from groupaccess.domain.services.group_audience import GroupAudienceService
from groupaccess.domain.services.group_registry import GroupRegistry
from groupaccess.domain.services.permission_catalog import (
    ADMINISTER_GROUP_PERMISSION,
    GENERIC_PERMISSIONS,
    PermissionCatalog,
    get_group_content_operation_permissions,
)
from groupaccess.domain.services.role_service import RoleService

__all__ = [
    "ADMINISTER_GROUP_PERMISSION",
    "AccessCache",
    "AccessResolver",
    "AccessResult",
    "GENERIC_PERMISSIONS",
    "GroupAudienceService",
    "GroupRegistry",
    "PermissionCatalog",
    "RoleService",
    "get_group_content_operation_permissions",
]
