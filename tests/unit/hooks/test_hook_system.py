"""Unit tests for the hook system infrastructure.

Tests cover:
- Hook registration and unregistration
- Priority ordering
- Tag-based filtering
- Error handling
- The decorator API
"""

import pytest

from groupaccess.core.hooks import (
    HookDecorator,
    HookEvent,
    HookRegistry,
    get_all_events,
)
from groupaccess.domain.entities.hook_context import HookContext, HookResult


class TestHookRegistry:
    """Tests for the HookRegistry class."""

    def test_register_returns_unique_id(self) -> None:
        """Test that register() returns a unique hook ID."""
        registry = HookRegistry()

        async def my_hook(event, data, context):
            return data

        hook_ids = [
            registry.register(HookEvent.ON_GROUP_PERMISSIONS, my_hook) for _ in range(10)
        ]

        assert all(hook_id.startswith("hook_") for hook_id in hook_ids)
        assert len(set(hook_ids)) == 10

    def test_register_with_filters(self) -> None:
        """Test that hooks can be registered with filters."""
        registry = HookRegistry()

        hook_id = registry.register(
            event=HookEvent.ON_GROUP_PERMISSIONS,
            callback=lambda event, data, context: data,
            filters={"group_type": "node"},
        )

        hook = registry.get_hook_by_id(hook_id)
        assert hook is not None
        assert hook.filters == {"group_type": "node"}

    def test_unregister(self) -> None:
        """Test that unregister() removes the hook."""
        registry = HookRegistry()
        hook_id = registry.register(HookEvent.ON_GROUP_AFTER_ADD, lambda e, d, c: None)

        assert registry.unregister(hook_id) is True
        assert registry.get_hook_by_id(hook_id) is None
        assert registry.get_hooks_for_event(HookEvent.ON_GROUP_AFTER_ADD) == []
        assert registry.unregister(hook_id) is False

    def test_clear_removes_every_hook(self) -> None:
        registry = HookRegistry()
        hook_id = registry.register(HookEvent.ON_GROUP_AFTER_ADD, lambda e, d, c: None)
        registry.register(HookEvent.ON_GROUP_AFTER_REMOVE, lambda e, d, c: None)

        assert registry.clear() == 2
        assert registry.get_hook_by_id(hook_id) is None
        assert registry.get_hooks_for_event(HookEvent.ON_GROUP_AFTER_ADD) == []

    @pytest.mark.asyncio
    async def test_trigger_without_hooks(self) -> None:
        """Test that triggering an event with no hooks returns the data."""
        registry = HookRegistry()

        result = await registry.trigger(HookEvent.ON_GROUP_DEFAULT_ROLES, {"roles": {}})

        assert isinstance(result, HookResult)
        assert result.success
        assert result.data == {"roles": {}}


class TestHookOrdering:
    """Tests for priority and registration order."""

    @pytest.mark.asyncio
    async def test_priority_then_registration_order(self) -> None:
        registry = HookRegistry()
        calls = []

        def make_hook(label):
            def hook(event, data, context):
                calls.append(label)

            return hook

        registry.register(HookEvent.ON_GROUP_AFTER_ADD, make_hook("low"), priority=-1)
        registry.register(HookEvent.ON_GROUP_AFTER_ADD, make_hook("first"))
        registry.register(HookEvent.ON_GROUP_AFTER_ADD, make_hook("high"), priority=10)
        registry.register(HookEvent.ON_GROUP_AFTER_ADD, make_hook("second"))

        await registry.trigger(HookEvent.ON_GROUP_AFTER_ADD, {})

        assert calls == ["high", "first", "second", "low"]

    @pytest.mark.asyncio
    async def test_returned_data_feeds_next_hook(self) -> None:
        registry = HookRegistry()

        async def replace(event, data, context):
            return {"permissions": data["permissions"] | {"update group"}}

        def mutate(event, data, context):
            data["permissions"].add("manage members")

        registry.register(HookEvent.ON_USER_ACCESS_ALTER, replace, priority=1)
        registry.register(HookEvent.ON_USER_ACCESS_ALTER, mutate)

        result = await registry.trigger(
            HookEvent.ON_USER_ACCESS_ALTER, {"permissions": {"subscribe"}}
        )

        assert result.data == {
            "permissions": {"subscribe", "update group", "manage members"}
        }

    @pytest.mark.asyncio
    async def test_context_is_passed_through(self) -> None:
        registry = HookRegistry()
        seen = []
        registry.register(
            HookEvent.ON_USER_ACCESS_ALTER, lambda e, d, context: seen.append(context)
        )
        context = HookContext()

        await registry.trigger(HookEvent.ON_USER_ACCESS_ALTER, {}, context=context)

        assert seen == [context]
        assert context.request_id.startswith("hk_")


class TestHookFiltering:
    """Tests for tag-based filtering."""

    @pytest.mark.asyncio
    async def test_filters_must_all_match(self) -> None:
        registry = HookRegistry()
        calls = []
        registry.register(
            HookEvent.ON_GROUP_PERMISSIONS,
            lambda e, d, c: calls.append("node"),
            filters={"group_type": "node"},
        )
        registry.register(
            HookEvent.ON_GROUP_PERMISSIONS,
            lambda e, d, c: calls.append("club"),
            filters={"group_type": "node", "group_bundle": "club"},
        )
        registry.register(HookEvent.ON_GROUP_PERMISSIONS, lambda e, d, c: calls.append("all"))

        await registry.trigger(
            HookEvent.ON_GROUP_PERMISSIONS,
            {},
            filters={"group_type": "node", "group_bundle": "team"},
        )

        assert calls == ["node", "all"]

    @pytest.mark.asyncio
    async def test_unfiltered_trigger_runs_unfiltered_hooks_only(self) -> None:
        registry = HookRegistry()
        calls = []
        registry.register(
            HookEvent.ON_GROUP_DEFAULT_ROLES,
            lambda e, d, c: calls.append("node"),
            filters={"group_type": "node"},
        )
        registry.register(HookEvent.ON_GROUP_DEFAULT_ROLES, lambda e, d, c: calls.append("all"))

        await registry.trigger(HookEvent.ON_GROUP_DEFAULT_ROLES, {})

        assert calls == ["all"]


class TestHookErrors:
    """Tests for error handling in the hook chain."""

    @pytest.mark.asyncio
    async def test_failing_hook_is_skipped(self) -> None:
        registry = HookRegistry()
        calls = []

        def broken(event, data, context):
            raise ValueError("broken extension")

        registry.register(HookEvent.ON_GROUP_AFTER_ADD, broken, priority=1)
        registry.register(HookEvent.ON_GROUP_AFTER_ADD, lambda e, d, c: calls.append("ran"))

        result = await registry.trigger(HookEvent.ON_GROUP_AFTER_ADD, {})

        assert result.success
        assert len(result.errors) == 1
        assert "broken extension" in result.errors[0]
        assert calls == ["ran"]

    @pytest.mark.asyncio
    async def test_stop_on_error_aborts_chain(self) -> None:
        registry = HookRegistry()
        calls = []

        async def broken(event, data, context):
            raise ValueError("broken extension")

        registry.register(
            HookEvent.ON_GROUP_AFTER_ADD, broken, priority=1, stop_on_error=True
        )
        registry.register(HookEvent.ON_GROUP_AFTER_ADD, lambda e, d, c: calls.append("ran"))

        result = await registry.trigger(HookEvent.ON_GROUP_AFTER_ADD, {})

        assert not result.success
        assert calls == []


class TestHookDecorator:
    """Tests for the decorator API."""

    def test_decorators_register_filters(self) -> None:
        registry = HookRegistry()
        hooks = HookDecorator(registry)

        @hooks.on_group_permissions("node", "club", priority=5)
        def club_permissions(event, data, context):
            return data

        @hooks.on_group_after_remove("node")
        def cleanup(event, data, context):
            return None

        [permissions_hook] = registry.get_hooks_for_event(HookEvent.ON_GROUP_PERMISSIONS)
        [remove_hook] = registry.get_hooks_for_event(HookEvent.ON_GROUP_AFTER_REMOVE)

        assert hooks.registry is registry
        assert permissions_hook.callback is club_permissions
        assert permissions_hook.filters == {"group_type": "node", "group_bundle": "club"}
        assert permissions_hook.priority == 5
        assert remove_hook.filters == {"group_type": "node"}

    def test_default_roles_decorator_is_unfiltered(self) -> None:
        registry = HookRegistry()
        hooks = HookDecorator(registry)

        @hooks.on_group_default_roles()
        def roles(event, data, context):
            return data

        [hook] = registry.get_hooks_for_event(HookEvent.ON_GROUP_DEFAULT_ROLES)
        assert hook.filters == {}

    def test_register_and_unregister(self) -> None:
        hooks = HookDecorator(HookRegistry())

        hook_id = hooks.register(HookEvent.ON_GROUP_AFTER_ADD, lambda e, d, c: None)

        assert hooks.unregister(hook_id) is True


def test_get_all_events() -> None:
    assert set(get_all_events()) == {
        HookEvent.ON_GROUP_PERMISSIONS,
        HookEvent.ON_GROUP_DEFAULT_ROLES,
        HookEvent.ON_USER_ACCESS_ALTER,
        HookEvent.ON_GROUP_AFTER_ADD,
        HookEvent.ON_GROUP_AFTER_REMOVE,
    }
