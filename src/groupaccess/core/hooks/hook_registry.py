"""Hook registry.

Keeps the hooks registered per event and runs them when an event is
triggered. Hooks run by descending priority, then in registration order.
A hook only runs when every one of its filters matches the trigger's
filters, so a hook filtered on ``group_type="node"`` never sees
``taxonomy_term`` groups.

IMPORTANT: This is a STABLE API. Extensions depend on register(),
           unregister() and the callback signature.
"""

import inspect
import itertools
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from groupaccess.core.logging import get_logger
from groupaccess.domain.entities.hook_context import HookContext, HookResult

logger = get_logger(__name__)


@dataclass
class RegisteredHook:
    """A hook as stored by the registry.

    Attributes:
        id: Handle returned by register().
        event: Event name.
        callback: ``callback(event, data, context)``, sync or async.
        filters: Tag filters, e.g. {"group_type": "node"}.
        priority: Higher runs earlier.
        stop_on_error: Abort the remaining hooks when this one raises.
        registration_order: Tie-breaker between equal priorities.
    """

    id: str
    event: str
    callback: Callable
    filters: dict[str, Any] = field(default_factory=dict)
    priority: int = 0
    stop_on_error: bool = False
    registration_order: int = 0

    def sort_key(self) -> tuple[int, int]:
        return (-self.priority, self.registration_order)

    def matches(self, filters: Optional[dict[str, Any]]) -> bool:
        # Unfiltered triggers only reach unfiltered hooks
        if not filters:
            return not self.filters
        return all(
            filters.get(key) is not None and filters[key] == value
            for key, value in self.filters.items()
        )


class HookRegistry:
    """Registration and execution of hooks.

    Example:
        registry = HookRegistry()

        def add_moderate(event, data, context):
            data["permissions"].append(PermissionDescriptor(name="moderate"))

        hook_id = registry.register(
            HookEvent.ON_GROUP_PERMISSIONS,
            add_moderate,
            filters={"group_type": "node"},
        )
        await registry.trigger(
            HookEvent.ON_GROUP_PERMISSIONS,
            data={"group_type": "node", "group_bundle": "club", "permissions": []},
            filters={"group_type": "node", "group_bundle": "club"},
        )
    """

    def __init__(self) -> None:
        self._by_event: dict[str, list[RegisteredHook]] = {}
        self._by_id: dict[str, RegisteredHook] = {}
        self._counter = itertools.count(1)

    def register(
        self,
        event: str,
        callback: Callable,
        filters: Optional[dict[str, Any]] = None,
        priority: int = 0,
        stop_on_error: bool = False,
    ) -> str:
        """Register a callback for an event.

        The callback receives ``(event, data, context)``. Returning a dict
        replaces the data handed to the next hook; returning None keeps the
        (possibly mutated) data.

        Returns:
            The hook ID, for unregister().
        """
        hook = RegisteredHook(
            id=f"hook_{uuid.uuid4().hex[:12]}",
            event=event,
            callback=callback,
            filters=dict(filters or {}),
            priority=priority,
            stop_on_error=stop_on_error,
            registration_order=next(self._counter),
        )
        hooks = self._by_event.setdefault(event, [])
        hooks.append(hook)
        hooks.sort(key=RegisteredHook.sort_key)
        self._by_id[hook.id] = hook

        logger.debug(
            "Hook registered",
            hook_id=hook.id,
            hook_event=event,
            priority=priority,
            filters=hook.filters,
        )
        return hook.id

    def unregister(self, hook_id: str) -> bool:
        """Remove a hook.

        Returns:
            False when the hook is unknown.
        """
        hook = self._by_id.get(hook_id)
        if hook is None:
            logger.warning("Hook not found for unregister", hook_id=hook_id)
            return False
        self._remove(hook)
        logger.debug("Hook unregistered", hook_id=hook_id, hook_event=hook.event)
        return True

    async def trigger(
        self,
        event: str,
        data: Optional[dict[str, Any]] = None,
        context: Optional[HookContext] = None,
        filters: Optional[dict[str, Any]] = None,
    ) -> HookResult:
        """Run the matching hooks of an event in order.

        A failing hook is logged and recorded in ``HookResult.errors``; the
        chain continues unless the hook was registered with stop_on_error.
        """
        result = HookResult(success=True, data=data)
        hooks = [hook for hook in self._by_event.get(event, []) if hook.matches(filters)]
        if not hooks:
            return result

        logger.debug("Triggering hooks", hook_event=event, hook_count=len(hooks))

        for hook in hooks:
            try:
                returned = hook.callback(event, result.data, context)
                if inspect.isawaitable(returned):
                    returned = await returned
            except Exception as e:
                logger.error(
                    "Hook execution failed",
                    hook_id=hook.id,
                    hook_event=event,
                    error=str(e),
                    stop_on_error=hook.stop_on_error,
                )
                result.errors.append(f"Hook {hook.id} failed: {e}")
                if hook.stop_on_error:
                    result.success = False
                    return result
                continue

            if isinstance(returned, dict):
                result.data = returned

        return result

    def get_hooks_for_event(self, event: str) -> list[RegisteredHook]:
        """Hooks of an event in execution order."""
        return list(self._by_event.get(event, []))

    def get_hook_by_id(self, hook_id: str) -> Optional[RegisteredHook]:
        return self._by_id.get(hook_id)

    def clear(self) -> int:
        """Remove every hook.

        Returns:
            The number of hooks removed.
        """
        removed = list(self._by_id.values())
        for hook in removed:
            self._remove(hook)
        logger.debug("Hooks cleared", count=len(removed))
        return len(removed)

    def _remove(self, hook: RegisteredHook) -> None:
        remaining = [h for h in self._by_event.get(hook.event, []) if h.id != hook.id]
        if remaining:
            self._by_event[hook.event] = remaining
        else:
            self._by_event.pop(hook.event, None)
        del self._by_id[hook.id]
