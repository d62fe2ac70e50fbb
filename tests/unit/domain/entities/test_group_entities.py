"""Unit tests for group, account, membership, audience and permission entities."""

import pytest

from groupaccess.domain.entities import (
    CARDINALITY_UNLIMITED,
    Account,
    AudienceField,
    ContentEntity,
    GroupContentOperationPermission,
    GroupDescriptor,
    Membership,
    MembershipState,
    PermissionDescriptor,
    anonymous_account,
)
from groupaccess.domain.exceptions import InvalidArgumentError


class TestContentEntity:
    def test_ids_are_strings(self) -> None:
        entity = ContentEntity("node", "club", id=7, owner_id=3)

        assert entity.id == "7"
        assert entity.owner_id == "3"
        assert not entity.is_new()

    def test_unsaved_entity_is_new(self) -> None:
        assert ContentEntity("node", "club").is_new()

    def test_requires_type_and_bundle(self) -> None:
        with pytest.raises(ValueError):
            ContentEntity("", "club")
        with pytest.raises(ValueError):
            ContentEntity("node", "")


class TestGroupDescriptor:
    def test_str(self) -> None:
        assert str(GroupDescriptor("node", "club")) == "node:club"

    def test_requires_type_and_bundle(self) -> None:
        with pytest.raises(InvalidArgumentError):
            GroupDescriptor("", "club")
        with pytest.raises(InvalidArgumentError):
            GroupDescriptor("node", "")


class TestAccount:
    def test_anonymous_account(self) -> None:
        account = anonymous_account()

        assert account.is_anonymous()
        assert not account.is_authenticated()

    def test_authenticated_account(self) -> None:
        account = Account(id=5, permissions=["administer group"])

        assert account.id == "5"
        assert account.is_authenticated()
        assert account.permissions == frozenset({"administer group"})


class TestMembership:
    def test_defaults_to_active(self) -> None:
        membership = Membership("5", "node", "club", "1")

        assert membership.is_active()
        assert membership.roles == []

    @pytest.mark.parametrize("state", [MembershipState.PENDING, MembershipState.BLOCKED])
    def test_inactive_states(self, state: str) -> None:
        assert not Membership("5", "node", "club", "1", state=state).is_active()

    def test_rejects_unknown_state(self) -> None:
        with pytest.raises(ValueError):
            Membership("5", "node", "club", "1", state="banned")


class TestAudienceField:
    def test_targets_every_bundle_without_target_bundles(self) -> None:
        audience_field = AudienceField("node", "article", target_type="node")

        assert audience_field.targets("node", "club")
        assert audience_field.targets("node", "team")
        assert not audience_field.targets("taxonomy_term", "club")

    def test_targets_listed_bundles_only(self) -> None:
        audience_field = AudienceField(
            "node", "article", target_type="node", target_bundles=["club"]
        )

        assert audience_field.targets("node", "club")
        assert not audience_field.targets("node", "team")

    def test_defaults(self) -> None:
        audience_field = AudienceField("node", "article", target_type="node")

        assert audience_field.field_name == "group_audience"
        assert audience_field.cardinality == CARDINALITY_UNLIMITED

    @pytest.mark.parametrize("cardinality", [0, -2])
    def test_rejects_invalid_cardinality(self, cardinality: int) -> None:
        with pytest.raises(ValueError):
            AudienceField("node", "article", target_type="node", cardinality=cardinality)


class TestPermissionDescriptor:
    def test_title_defaults_to_name(self) -> None:
        permission = PermissionDescriptor(name="subscribe")

        assert permission.title == "Subscribe"
        assert permission.default_roles == frozenset()

    def test_name_is_required(self) -> None:
        with pytest.raises(ValueError):
            PermissionDescriptor(name="")

    def test_default_roles_are_frozen(self) -> None:
        permission = PermissionDescriptor(name="subscribe", default_roles={"non-member"})

        assert isinstance(permission.default_roles, frozenset)

    def test_group_content_permission_is_a_descriptor(self) -> None:
        permission = GroupContentOperationPermission(
            name="update own article node",
            applies_to_owner_only=True,
            entity_type="node",
            bundle="article",
            operation="update",
        )

        assert isinstance(permission, PermissionDescriptor)
        assert permission.operation == "update"
