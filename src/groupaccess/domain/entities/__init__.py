"""Domain entities for GroupAccess.

Entities are plain dataclasses with validation; they have no dependencies
on infrastructure.
"""

from groupaccess.domain.entities.account import Account, anonymous_account
from groupaccess.domain.entities.audience import (
    CARDINALITY_UNLIMITED,
    DEFAULT_AUDIENCE_FIELD,
    AudienceField,
)
from groupaccess.domain.entities.group import ContentEntity, GroupDescriptor
from groupaccess.domain.entities.hook_context import HookContext, HookResult
from groupaccess.domain.entities.membership import Membership, MembershipState
from groupaccess.domain.entities.permission import (
    GroupContentOperationPermission,
    PermissionDescriptor,
)
from groupaccess.domain.entities.role import (
    ADMINISTRATOR,
    ANONYMOUS,
    AUTHENTICATED,
    DEFAULT_ROLE_NAMES,
    REQUIRED_ROLE_NAMES,
    Role,
    RoleType,
)

__all__ = [
    "ADMINISTRATOR",
    "ANONYMOUS",
    "AUTHENTICATED",
    "Account",
    "AudienceField",
    "CARDINALITY_UNLIMITED",
    "ContentEntity",
    "DEFAULT_AUDIENCE_FIELD",
    "DEFAULT_ROLE_NAMES",
    "GroupContentOperationPermission",
    "GroupDescriptor",
    "HookContext",
    "HookResult",
    "Membership",
    "MembershipState",
    "PermissionDescriptor",
    "REQUIRED_ROLE_NAMES",
    "Role",
    "RoleType",
    "anonymous_account",
]
