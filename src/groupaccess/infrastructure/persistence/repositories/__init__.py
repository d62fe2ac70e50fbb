"""Repositories for GroupAccess persistence."""

from groupaccess.infrastructure.persistence.repositories.audience_repository import (
    AudienceRepository,
)
from groupaccess.infrastructure.persistence.repositories.membership_repository import (
    MembershipRepository,
)
from groupaccess.infrastructure.persistence.repositories.role_repository import (
    RoleRepository,
)
from groupaccess.infrastructure.persistence.repositories.settings_repository import (
    Config,
    EditableConfig,
    SettingsRepository,
)

__all__ = [
    "AudienceRepository",
    "Config",
    "EditableConfig",
    "MembershipRepository",
    "RoleRepository",
    "SettingsRepository",
]
