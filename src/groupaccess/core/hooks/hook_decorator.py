"""Decorators for registering group access hooks.

Each decorator maps its group type and bundle arguments to hook filters,
so `@hooks.on_group_permissions("node", "club")` only fires for node:club.
"""

from typing import Any, Callable, Optional, TypeVar

from groupaccess.core.hooks.hook_events import HookEvent
from groupaccess.core.hooks.hook_registry import HookRegistry

F = TypeVar("F", bound=Callable[..., Any])


class HookDecorator:
    """Decorator front end of a HookRegistry.

    Example:
        hooks = HookDecorator(registry)

        @hooks.on_user_access_alter("node", "club")
        async def grant_update_to_editors(event, data, context):
            if context.user and "editor" in context.user.permissions:
                data["permissions"].add("update group")
            return data
    """

    def __init__(self, registry: HookRegistry) -> None:
        self._registry = registry

    @property
    def registry(self) -> HookRegistry:
        return self._registry

    def on_group_permissions(
        self,
        group_type: Optional[str] = None,
        group_bundle: Optional[str] = None,
        priority: int = 0,
    ) -> Callable[[F], F]:
        """Register a permission contributor.

        The callback appends PermissionDescriptor objects to
        data["permissions"] for the group type and bundle being queried.
        """
        return self._create_decorator(
            event=HookEvent.ON_GROUP_PERMISSIONS,
            group_type=group_type,
            group_bundle=group_bundle,
            priority=priority,
        )

    def on_group_default_roles(self, priority: int = 0) -> Callable[[F], F]:
        """Register a default role contributor."""
        return self._create_decorator(
            event=HookEvent.ON_GROUP_DEFAULT_ROLES,
            group_type=None,
            group_bundle=None,
            priority=priority,
        )

    def on_user_access_alter(
        self,
        group_type: Optional[str] = None,
        group_bundle: Optional[str] = None,
        priority: int = 0,
    ) -> Callable[[F], F]:
        """Register an access adjuster.

        The callback receives a copy of the user's permission set for a
        group in data["permissions"] and may add or remove names.
        """
        return self._create_decorator(
            event=HookEvent.ON_USER_ACCESS_ALTER,
            group_type=group_type,
            group_bundle=group_bundle,
            priority=priority,
        )

    def on_group_after_add(
        self,
        group_type: Optional[str] = None,
        priority: int = 0,
    ) -> Callable[[F], F]:
        """Register a hook for after a bundle was registered as a group."""
        return self._create_decorator(
            event=HookEvent.ON_GROUP_AFTER_ADD,
            group_type=group_type,
            group_bundle=None,
            priority=priority,
        )

    def on_group_after_remove(
        self,
        group_type: Optional[str] = None,
        priority: int = 0,
    ) -> Callable[[F], F]:
        """Register a hook for after a bundle stopped being a group."""
        return self._create_decorator(
            event=HookEvent.ON_GROUP_AFTER_REMOVE,
            group_type=group_type,
            group_bundle=None,
            priority=priority,
        )

    def register(
        self,
        event: str,
        callback: Callable,
        filters: Optional[dict[str, Any]] = None,
        priority: int = 0,
        stop_on_error: bool = False,
    ) -> str:
        """Register a hook directly (non-decorator style)."""
        return self._registry.register(
            event=event,
            callback=callback,
            filters=filters,
            priority=priority,
            stop_on_error=stop_on_error,
        )

    def unregister(self, hook_id: str) -> bool:
        """Unregister a hook by ID."""
        return self._registry.unregister(hook_id)

    def _create_decorator(
        self,
        event: str,
        group_type: Optional[str],
        group_bundle: Optional[str],
        priority: int,
    ) -> Callable[[F], F]:
        def decorator(func: F) -> F:
            filters = {}
            if group_type:
                filters["group_type"] = group_type
            if group_bundle:
                filters["group_bundle"] = group_bundle

            self._registry.register(
                event=event,
                callback=func,
                filters=filters,
                priority=priority,
            )
            return func

        return decorator
