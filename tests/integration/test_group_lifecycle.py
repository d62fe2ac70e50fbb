"""End-to-end tests of registering, using and removing a group bundle."""

import pytest

from groupaccess.domain.entities import Account, ContentEntity, Membership
from groupaccess.domain.exceptions import RoleRequiredError
from groupaccess.domain.services import AccessResult

CONTENT_PERMISSIONS = {
    "create article node",
    "update own article node",
    "update any article node",
    "delete own article node",
    "delete any article node",
}


@pytest.mark.integration
class TestGroupLifecycle:
    @pytest.mark.asyncio
    async def test_register_use_and_remove(self, group_access):
        registry = group_access.registry
        club = ContentEntity("node", "club", id="1")
        member = Account(id="10")

        await registry.add_group("node", "club")
        roles = await group_access.roles.load_by_properties(
            group_type="node", group_bundle="club"
        )
        assert {role.name for role in roles} == {"non-member", "member", "administrator"}

        await group_access.memberships.create(Membership(member.id, "node", "club", "1"))
        assert await group_access.resolver.user_access(club, "unsubscribe", member) == (
            AccessResult.ALLOW
        )
        assert await group_access.resolver.user_access(club, "manage roles", member) == (
            AccessResult.DENY
        )

        await registry.remove_group("node", "club")
        group_access.resolver.reset()

        assert not registry.is_group("node", "club")
        assert await group_access.roles.load_by_properties(
            group_type="node", group_bundle="club"
        ) == []
        assert await group_access.resolver.user_access(club, "unsubscribe", member) == (
            AccessResult.NEUTRAL
        )

    @pytest.mark.asyncio
    async def test_group_content_permissions_follow_audience_fields(self, group_access):
        await group_access.registry.add_group("node", "club")
        before = set(await group_access.catalog.get_permission_names("node", "club"))

        await group_access.audience.add_audience_field("node", "article", target_type="node")
        with_content = set(await group_access.catalog.get_permission_names("node", "club"))

        await group_access.audience.remove_audience_field("node", "article")
        after = set(await group_access.catalog.get_permission_names("node", "club"))

        assert with_content - before == CONTENT_PERMISSIONS
        assert after == before

    @pytest.mark.asyncio
    async def test_content_permissions_are_provisioned_for_new_groups(self, group_access):
        await group_access.audience.add_audience_field("node", "article", target_type="node")

        await group_access.registry.add_group("node", "club")

        member = await group_access.roles.load("node-club-member")
        administrator = await group_access.roles.load("node-club-administrator")
        assert "create article node" in member.permissions
        assert "update any article node" not in member.permissions
        assert CONTENT_PERMISSIONS <= administrator.permissions

    @pytest.mark.asyncio
    async def test_required_roles_are_protected_while_registered(self, group_access):
        registry = group_access.registry
        await registry.add_group("node", "club")
        non_member = await group_access.roles.load("node-club-non-member")

        with pytest.raises(RoleRequiredError):
            await group_access.roles.delete(non_member)

        await registry.remove_group("node", "club")
        await registry.add_group("node", "club")

        assert await group_access.roles.load("node-club-non-member") is not None
