"""Hook event definitions.

IMPORTANT: Adding new events is allowed (non-breaking), but
           removing or renaming events is a breaking change.
"""


class HookEvent:
    """Hook event names.

    Collect events gather contributions from extensions, alter events let
    extensions modify a value computed by the core, and after events are
    notifications once a mutation completed.
    """

    # Collect: data = {"group_type", "group_bundle", "permissions": list[PermissionDescriptor]}
    ON_GROUP_PERMISSIONS = "on_group_permissions"

    # Collect: data = {"roles": dict[str, dict]} keyed by role name
    ON_GROUP_DEFAULT_ROLES = "on_group_default_roles"

    # Alter: data = {"permissions": set[str], "operation", "group"}
    ON_USER_ACCESS_ALTER = "on_user_access_alter"

    # Notifications: data = {"entity_type", "bundle"}
    ON_GROUP_AFTER_ADD = "on_group_after_add"
    ON_GROUP_AFTER_REMOVE = "on_group_after_remove"


def get_all_events() -> list[str]:
    """Get a list of all hook event names."""
    return [
        value
        for name, value in vars(HookEvent).items()
        if name.startswith("ON_") and isinstance(value, str)
    ]
