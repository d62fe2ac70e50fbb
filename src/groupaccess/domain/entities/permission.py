"""Group permission descriptors.

Descriptors are produced by the permission catalog and by extensions. They
are never persisted: roles store permission names only.
"""

from dataclasses import dataclass, field


@dataclass
class PermissionDescriptor:
    """A permission that can be granted to group roles.

    Attributes:
        name: Machine name checked by the access resolver (e.g., 'subscribe').
        title: Human readable title.
        description: Optional longer description.
        applies_to_owner_only: Whether the permission only covers content
            owned by the user.
        is_restricted: Whether granting the permission has security
            implications.
        default_roles: Names of the roles that receive this permission when
            they are provisioned.
    """

    name: str
    title: str = ""
    description: str = ""
    applies_to_owner_only: bool = False
    is_restricted: bool = False
    default_roles: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Permission name is required")
        self.default_roles = frozenset(self.default_roles)
        if not self.title:
            self.title = self.name[:1].upper() + self.name[1:]


@dataclass
class GroupContentOperationPermission(PermissionDescriptor):
    """A permission to perform an operation on one group content bundle.

    Attributes:
        entity_type: Entity type of the group content.
        bundle: Bundle of the group content.
        operation: 'create', 'update' or 'delete'.
    """

    entity_type: str = ""
    bundle: str = ""
    operation: str = ""
