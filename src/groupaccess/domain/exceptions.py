"""Domain exceptions raised by the group access core."""


class GroupAccessError(Exception):
    """Base class for all group access errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class RoleValidationError(GroupAccessError):
    """Raised when a role is saved without its group type or bundle."""


class RoleImmutableError(GroupAccessError):
    """Raised when a locked field of an existing required role is changed."""


class RoleRequiredError(GroupAccessError):
    """Raised when a required role is deleted while its group is registered."""


class GroupAlreadyRegisteredError(GroupAccessError):
    """Raised when an entity type and bundle are registered as a group twice."""


class InvalidArgumentError(GroupAccessError, ValueError):
    """Raised for unknown role names, role types or role fields."""


class RoleProvisioningError(GroupAccessError):
    """Raised when roles could not be created or deleted after the group map was saved.

    The group map change has been persisted when this is raised, so the
    registry and the role storage are out of sync until an operator fixes
    them.
    """

    def __init__(self, message: str, entity_type: str, bundle: str) -> None:
        self.entity_type = entity_type
        self.bundle = bundle
        super().__init__(message)


class AudienceFieldError(GroupAccessError):
    """Raised when an audience field is missing or misconfigured."""
