"""Hook system core module.

Extensions contribute permissions and default roles, and adjust access
decisions, by registering hooks.

IMPORTANT: This is a STABLE API CONTRACT. The public interfaces in
           this module should not have breaking changes.

Example usage:
    from groupaccess.core.hooks import HookDecorator, HookRegistry

    registry = HookRegistry()
    hooks = HookDecorator(registry)

    @hooks.on_group_permissions("node", "club")
    async def club_permissions(event, data, context):
        data["permissions"].append(
            PermissionDescriptor(name="organise events", title="Organise events")
        )
        return data
"""

from groupaccess.core.hooks.hook_decorator import HookDecorator
from groupaccess.core.hooks.hook_events import HookEvent, get_all_events
from groupaccess.core.hooks.hook_registry import HookRegistry, RegisteredHook

__all__ = [
    "HookDecorator",
    "HookEvent",
    "HookRegistry",
    "RegisteredHook",
    "get_all_events",
]
