"""Group role entity.

A role is a named bundle of permissions scoped to a group type and bundle,
and optionally to a single group instance. Two reserved roles,
'non-member' and 'member', are required: once saved, their identity and
scope cannot change, and they cannot be deleted while their group type is
registered.
"""

from copy import deepcopy
from dataclasses import dataclass, field, fields
from typing import Any

from groupaccess.domain.exceptions import (
    InvalidArgumentError,
    RoleImmutableError,
    RoleValidationError,
)


class RoleType:
    """Role types."""

    REQUIRED = "required"
    STANDARD = "standard"

    ALL = (REQUIRED, STANDARD)


# Reserved role names.
ANONYMOUS = "non-member"
AUTHENTICATED = "member"
ADMINISTRATOR = "administrator"

DEFAULT_ROLE_NAMES = (ANONYMOUS, AUTHENTICATED, ADMINISTRATOR)
REQUIRED_ROLE_NAMES = (ANONYMOUS, AUTHENTICATED)

# Fields of a required role that are frozen after its first save.
LOCKED_FIELDS = frozenset({"id", "role_type", "group_type", "group_bundle"})

_DEFAULT_PROPERTIES: dict[str, dict[str, Any]] = {
    ANONYMOUS: {
        "role_type": RoleType.REQUIRED,
        "label": "Non-member",
        "permissions": ["subscribe"],
    },
    AUTHENTICATED: {
        "role_type": RoleType.REQUIRED,
        "label": "Member",
        "permissions": ["unsubscribe"],
    },
    ADMINISTRATOR: {
        "role_type": RoleType.STANDARD,
        "label": "Administrator",
        "permissions": [
            "add user",
            "administer group",
            "approve and deny subscription",
            "manage members",
            "manage permissions",
            "manage roles",
            "update group",
        ],
    },
}


@dataclass
class Role:
    """Group role entity.

    Every assignment, whether through set() or plain attribute access,
    passes through the same guard, so a locked field of an existing
    required role cannot be changed by any caller.

    Attributes:
        id: Role ID. The bare role name until first save, then the scoped
            ID '{group_type}-{group_bundle}[-{group_id}]-{name}'.
        label: Human readable label.
        group_type: Entity type of the group this role belongs to.
        group_bundle: Bundle of the group this role belongs to.
        group_id: Group instance ID, or '' for every group of the bundle.
        permissions: Names of the permissions granted by this role.
        role_type: RoleType.REQUIRED or RoleType.STANDARD.
        weight: Sort weight.
    """

    id: str
    label: str = ""
    group_type: str = ""
    group_bundle: str = ""
    group_id: str = ""
    permissions: set[str] = field(default_factory=set)
    role_type: str = RoleType.STANDARD
    weight: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "_is_new", True)
        object.__setattr__(self, "_name", self.id)
        object.__setattr__(self, "_stored_id", None)
        self.permissions = set(self.permissions or ())
        if self.group_id is None:
            self.group_id = ""

    def __setattr__(self, name: str, value: Any) -> None:
        # Fields are assigned one by one from __init__, before _is_new exists.
        if name in LOCKED_FIELDS and not self.__dict__.get("_is_new", True):
            if self.__dict__.get("role_type") != RoleType.STANDARD:
                raise RoleImmutableError(
                    f"The {name} of the default roles 'non-member' and 'member' "
                    "cannot be changed."
                )
        if name == "role_type" and value not in RoleType.ALL:
            raise InvalidArgumentError(f"'{value}' is not a valid role type.")
        super().__setattr__(name, value)

    @classmethod
    def create(cls, **properties: Any) -> "Role":
        """Create a new, unsaved role.

        Raises:
            InvalidArgumentError: If an unknown property is given.
        """
        unknown = set(properties) - set(ROLE_FIELDS)
        if unknown:
            raise InvalidArgumentError(
                f"Unknown role properties: {', '.join(sorted(unknown))}"
            )
        properties.setdefault("id", "")
        return cls(**properties)

    @classmethod
    def from_storage(cls, name: str, **values: Any) -> "Role":
        """Rebuild a saved role from its stored values."""
        role = cls(**values)
        object.__setattr__(role, "_is_new", False)
        object.__setattr__(role, "_name", name)
        object.__setattr__(role, "_stored_id", role.id)
        return role

    @property
    def name(self) -> str:
        """The role name without its scope prefix."""
        return self._name if not self._is_new else self.id

    @property
    def stored_id(self) -> str | None:
        """The ID the role is stored under, or None for a new role."""
        return self._stored_id

    def is_new(self) -> bool:
        """Whether the role has not been saved yet."""
        return self._is_new

    def is_mutable(self) -> bool:
        """Whether the role is a standard role."""
        return self.role_type == RoleType.STANDARD

    def is_required(self) -> bool:
        return self.role_type == RoleType.REQUIRED

    def get(self, field_name: str) -> Any:
        if field_name not in ROLE_FIELDS:
            raise InvalidArgumentError(f"'{field_name}' is not a role field.")
        return getattr(self, field_name)

    def set(self, field_name: str, value: Any) -> "Role":
        """Set a field value.

        Raises:
            InvalidArgumentError: If the field does not exist.
            RoleImmutableError: If the field is locked on this role.
        """
        if field_name not in ROLE_FIELDS:
            raise InvalidArgumentError(f"'{field_name}' is not a role field.")
        if field_name == "permissions":
            value = set(value)
        setattr(self, field_name, value)
        return self

    def has_permission(self, permission: str) -> bool:
        return permission in self.permissions

    def grant_permission(self, permission: str) -> "Role":
        self.permissions.add(permission)
        return self

    def revoke_permission(self, permission: str) -> "Role":
        self.permissions.discard(permission)
        return self

    def validate_scope(self) -> None:
        """Check that the role is scoped to a group type and bundle.

        Raises:
            RoleValidationError: If group_type or group_bundle is empty.
        """
        if not self.group_type:
            raise RoleValidationError("The group type can not be empty.")
        if not self.group_bundle:
            raise RoleValidationError("The group bundle can not be empty.")

    def scoped_id(self) -> str:
        """Compute the ID this role is stored under.

        Saved roles keep their ID; new roles are prefixed with their scope
        so the same name can exist for several group types.
        """
        if not self._is_new:
            return self.id
        prefix = f"{self.group_type}-{self.group_bundle}-"
        if self.group_id:
            prefix += f"{self.group_id}-"
        return prefix + self.id

    def mark_saved(self, stored_id: str) -> None:
        """Record that the role was stored under stored_id."""
        if self._is_new:
            object.__setattr__(self, "_name", self.id)
            object.__setattr__(self, "id", stored_id)
            object.__setattr__(self, "_stored_id", stored_id)
            object.__setattr__(self, "_is_new", False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "label": self.label,
            "group_type": self.group_type,
            "group_bundle": self.group_bundle,
            "group_id": self.group_id,
            "permissions": sorted(self.permissions),
            "role_type": self.role_type,
            "weight": self.weight,
        }

    @staticmethod
    def default_properties(role_name: str) -> dict[str, Any]:
        """Return the default properties of one of the well-known roles.

        Args:
            role_name: 'non-member', 'member' or 'administrator'.

        Raises:
            InvalidArgumentError: For any other role name.
        """
        if role_name not in _DEFAULT_PROPERTIES:
            raise InvalidArgumentError(f"{role_name} is not a default role name.")
        return deepcopy(_DEFAULT_PROPERTIES[role_name])

    @staticmethod
    def role_type_for(role_name: str) -> str:
        """Map a role name to its role type.

        The 'non-member' and 'member' roles are required, all others are
        standard roles.
        """
        if role_name in REQUIRED_ROLE_NAMES:
            return RoleType.REQUIRED
        return RoleType.STANDARD


ROLE_FIELDS = tuple(f.name for f in fields(Role))
