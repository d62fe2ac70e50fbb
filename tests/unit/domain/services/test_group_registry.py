"""Unit tests for GroupRegistry."""

from unittest.mock import AsyncMock

import pytest

from groupaccess.core.hooks import HookDecorator
from groupaccess.domain.entities.role import RoleType
from groupaccess.domain.exceptions import (
    GroupAlreadyRegisteredError,
    InvalidArgumentError,
    RoleProvisioningError,
    RoleRequiredError,
)
from groupaccess.domain.services import GroupRegistry
from groupaccess.infrastructure.persistence.repositories import SettingsRepository


async def _roles(group_access, entity_type="node", bundle="club"):
    return await group_access.roles.load_by_properties(
        group_type=entity_type, group_bundle=bundle
    )


class TestLookups:
    @pytest.mark.asyncio
    async def test_empty_registry(self, group_access):
        registry = group_access.registry

        assert not registry.is_group("node", "club")
        assert registry.get_groups_for_entity_type("node") == []
        assert registry.get_all_group_bundles() == {}

    @pytest.mark.asyncio
    async def test_registered_pairs(self, group_access):
        registry = group_access.registry
        await registry.add_group("node", "club")
        await registry.add_group("node", "team")
        await registry.add_group("taxonomy_term", "forum")

        assert registry.is_group("node", "club")
        assert registry.is_group("taxonomy_term", "forum")
        assert not registry.is_group("node", "article")
        assert not registry.is_group("taxonomy_term", "club")
        assert registry.get_groups_for_entity_type("node") == ["club", "team"]
        assert registry.get_all_group_bundles("node") == {"node": ["club", "team"]}
        assert registry.get_all_group_bundles() == {
            "node": ["club", "team"],
            "taxonomy_term": ["forum"],
        }

    @pytest.mark.asyncio
    async def test_unknown_entity_type_returns_whole_map(self, group_access):
        await group_access.registry.add_group("node", "club")

        assert group_access.registry.get_all_group_bundles("user") == {"node": ["club"]}

    @pytest.mark.asyncio
    async def test_returned_collections_are_copies(self, group_access):
        registry = group_access.registry
        await registry.add_group("node", "club")

        registry.get_groups_for_entity_type("node").append("team")
        registry.get_all_group_bundles()["node"].append("team")

        assert not registry.is_group("node", "team")


class TestAddGroup:
    @pytest.mark.asyncio
    async def test_group_map_is_persisted(self, group_access, db_session, settings):
        await group_access.registry.add_group("node", "club")

        config = await SettingsRepository(db_session).get(settings.settings_config_key)

        assert config.get(settings.groups_config_key) == {"node": ["club"]}

    @pytest.mark.asyncio
    async def test_snapshot_survives_reload(self, group_access, db_session, settings):
        await group_access.registry.add_group("node", "club")

        registry = await GroupRegistry.load(
            SettingsRepository(db_session),
            group_access.roles,
            group_access.catalog,
            settings=settings,
        )

        assert registry.is_group("node", "club")

    @pytest.mark.asyncio
    async def test_default_roles_are_provisioned(self, group_access):
        await group_access.registry.add_group("node", "club")

        roles = {role.name: role for role in await _roles(group_access)}

        assert set(roles) == {"non-member", "member", "administrator"}
        assert roles["non-member"].id == "node-club-non-member"
        assert roles["non-member"].role_type == RoleType.REQUIRED
        assert roles["member"].role_type == RoleType.REQUIRED
        assert roles["administrator"].role_type == RoleType.STANDARD
        assert roles["non-member"].permissions == {"subscribe"}
        assert roles["member"].permissions == {"unsubscribe"}
        assert roles["administrator"].permissions == {
            "add user",
            "administer group",
            "approve and deny subscription",
            "manage members",
            "manage permissions",
            "manage roles",
            "update group",
        }

    @pytest.mark.asyncio
    async def test_already_registered(self, group_access):
        await group_access.registry.add_group("node", "club")

        with pytest.raises(GroupAlreadyRegisteredError):
            await group_access.registry.add_group("node", "club")

        assert group_access.registry.get_all_group_bundles() == {"node": ["club"]}
        assert len(await _roles(group_access)) == 3

    @pytest.mark.parametrize("entity_type,bundle", [("", "club"), ("node", "")])
    @pytest.mark.asyncio
    async def test_empty_type_or_bundle_fails(self, group_access, entity_type, bundle):
        with pytest.raises(InvalidArgumentError):
            await group_access.registry.add_group(entity_type, bundle)

        assert group_access.registry.get_all_group_bundles() == {}

    @pytest.mark.asyncio
    async def test_after_add_hook(self, group_access, hook_registry):
        hooks = HookDecorator(hook_registry)
        calls = []

        @hooks.on_group_after_add("node")
        def record(event, data, context):
            calls.append((data["entity_type"], data["bundle"]))

        await group_access.registry.add_group("node", "club")
        await group_access.registry.add_group("taxonomy_term", "forum")

        assert calls == [("node", "club")]

    @pytest.mark.asyncio
    async def test_contributed_default_roles_are_provisioned(self, group_access, hook_registry):
        hooks = HookDecorator(hook_registry)

        @hooks.on_group_default_roles()
        def add_editor(event, data, context):
            data["roles"]["editor"] = {"label": "Editor", "permissions": ["update group"]}

        await group_access.registry.add_group("node", "club")

        editor = await group_access.roles.load("node-club-editor")
        assert editor is not None
        assert editor.permissions == {"update group"}

    @pytest.mark.asyncio
    async def test_provisioning_failure_keeps_group_registered(self, group_access):
        group_access.roles.save = AsyncMock(side_effect=RuntimeError("storage offline"))

        with pytest.raises(RoleProvisioningError) as exc_info:
            await group_access.registry.add_group("node", "club")

        assert exc_info.value.entity_type == "node"
        assert exc_info.value.bundle == "club"
        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert group_access.registry.is_group("node", "club")


class TestProvisionDefaultRoles:
    @pytest.mark.asyncio
    async def test_is_idempotent(self, group_access):
        registry = group_access.registry
        await registry.add_group("node", "club")

        created = await registry.provision_default_roles("node", "club")

        assert created == []
        assert len(await _roles(group_access)) == 3

    @pytest.mark.asyncio
    async def test_recreates_missing_roles_only(self, group_access):
        registry = group_access.registry
        await registry.add_group("node", "club")
        await group_access.roles.delete(await group_access.roles.load("node-club-administrator"))

        created = await registry.provision_default_roles("node", "club")

        assert [role.id for role in created] == ["node-club-administrator"]
        assert len(await _roles(group_access)) == 3

    @pytest.mark.asyncio
    async def test_group_instance_roles_do_not_count(self, group_access):
        await group_access.roles.save(
            group_access.roles.create(
                id="member",
                group_type="node",
                group_bundle="club",
                group_id="1",
                role_type=RoleType.REQUIRED,
            )
        )

        created = await group_access.registry.provision_default_roles("node", "club")

        assert {role.id for role in created} == {
            "node-club-non-member",
            "node-club-member",
            "node-club-administrator",
        }


class TestRemoveGroup:
    @pytest.mark.asyncio
    async def test_removes_group_and_roles(self, group_access):
        registry = group_access.registry
        await registry.add_group("node", "club")
        await group_access.roles.save(
            group_access.roles.create(
                id="editor", group_type="node", group_bundle="club", group_id="7"
            )
        )

        assert await registry.remove_group("node", "club") is None

        assert not registry.is_group("node", "club")
        assert await _roles(group_access) == []

    @pytest.mark.asyncio
    async def test_empty_entity_type_is_dropped(self, group_access, db_session, settings):
        registry = group_access.registry
        await registry.add_group("node", "club")
        await registry.add_group("node", "team")

        await registry.remove_group("node", "club")
        assert registry.get_all_group_bundles() == {"node": ["team"]}

        await registry.remove_group("node", "team")
        config = await SettingsRepository(db_session).get(settings.settings_config_key)
        assert config.get(settings.groups_config_key) == {}
        assert registry.get_all_group_bundles() == {}

    @pytest.mark.asyncio
    async def test_other_groups_keep_their_roles(self, group_access):
        registry = group_access.registry
        await registry.add_group("node", "club")
        await registry.add_group("node", "team")

        await registry.remove_group("node", "club")

        assert len(await _roles(group_access, bundle="team")) == 3

    @pytest.mark.asyncio
    async def test_unregistered_group_is_a_no_op(self, group_access, hook_registry):
        hooks = HookDecorator(hook_registry)
        calls = []

        @hooks.on_group_after_remove()
        def record(event, data, context):
            calls.append(data)

        assert await group_access.registry.remove_group("node", "club") is None
        assert calls == []

    @pytest.mark.asyncio
    async def test_required_roles_deletable_after_removal(self, group_access):
        registry = group_access.registry
        await registry.add_group("node", "club")
        member = await group_access.roles.load("node-club-member")

        with pytest.raises(RoleRequiredError):
            await group_access.roles.delete(member)

        await registry.remove_group("node", "club")
        assert await group_access.roles.load("node-club-member") is None

    @pytest.mark.asyncio
    async def test_after_remove_hook(self, group_access, hook_registry):
        hooks = HookDecorator(hook_registry)
        calls = []

        @hooks.on_group_after_remove("node")
        def record(event, data, context):
            calls.append((data["entity_type"], data["bundle"]))

        await group_access.registry.add_group("node", "club")
        await group_access.registry.remove_group("node", "club")

        assert calls == [("node", "club")]

    @pytest.mark.asyncio
    async def test_deprovisioning_failure(self, group_access):
        registry = group_access.registry
        await registry.add_group("node", "club")
        group_access.roles.delete = AsyncMock(side_effect=RuntimeError("storage offline"))

        with pytest.raises(RoleProvisioningError):
            await registry.remove_group("node", "club")

        assert not registry.is_group("node", "club")
