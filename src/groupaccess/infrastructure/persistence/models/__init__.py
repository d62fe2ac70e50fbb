"""SQLAlchemy models for GroupAccess tables.

All models inherit from the Base class defined in database.py.
"""

from groupaccess.infrastructure.persistence.models.audience import (
    AudienceFieldModel,
    GroupReferenceModel,
)
from groupaccess.infrastructure.persistence.models.membership import MembershipModel
from groupaccess.infrastructure.persistence.models.role import GroupRoleModel
from groupaccess.infrastructure.persistence.models.settings import SettingsModel

__all__ = [
    "AudienceFieldModel",
    "GroupReferenceModel",
    "GroupRoleModel",
    "MembershipModel",
    "SettingsModel",
]
