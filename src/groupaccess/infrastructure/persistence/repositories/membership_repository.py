"""Repository for group membership database operations."""

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from groupaccess.domain.entities.membership import Membership
from groupaccess.infrastructure.persistence.models import MembershipModel


class MembershipRepository:
    """Repository for group membership database operations."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(self, membership: Membership) -> Membership:
        """Store a new membership.

        Returns:
            The membership with its database ID set.
        """
        model = MembershipModel(
            user_id=membership.user_id,
            group_type=membership.group_type,
            group_bundle=membership.group_bundle,
            group_id=membership.group_id,
            state=membership.state,
            roles=list(dict.fromkeys(membership.roles)),
            created_at=membership.created_at,
        )
        self.session.add(model)
        await self.session.flush()
        membership.id = model.id
        return membership

    async def get(self, user_id: str, group_type: str, group_id: str) -> Membership | None:
        """Get the membership of a user in a group."""
        model = await self._get_model(user_id, group_type, group_id)
        return self._to_entity(model) if model else None

    async def update(self, membership: Membership) -> Membership:
        """Write the state and roles of an existing membership."""
        model = await self._get_model(
            membership.user_id, membership.group_type, membership.group_id
        )
        if model is None:
            raise LookupError(
                f"User {membership.user_id} is not a member of "
                f"{membership.group_type}:{membership.group_id}"
            )
        model.state = membership.state
        model.roles = list(dict.fromkeys(membership.roles))
        await self.session.flush()
        return membership

    async def delete(self, user_id: str, group_type: str, group_id: str) -> None:
        await self.session.execute(
            delete(MembershipModel).where(
                (MembershipModel.user_id == user_id)
                & (MembershipModel.group_type == group_type)
                & (MembershipModel.group_id == group_id)
            )
        )
        await self.session.flush()

    async def list_for_group(self, group_type: str, group_id: str) -> list[Membership]:
        result = await self.session.execute(
            select(MembershipModel)
            .where(
                (MembershipModel.group_type == group_type)
                & (MembershipModel.group_id == group_id)
            )
            .order_by(MembershipModel.id)
        )
        return [self._to_entity(model) for model in result.scalars().all()]

    async def _get_model(
        self, user_id: str, group_type: str, group_id: str
    ) -> MembershipModel | None:
        result = await self.session.execute(
            select(MembershipModel).where(
                (MembershipModel.user_id == user_id)
                & (MembershipModel.group_type == group_type)
                & (MembershipModel.group_id == group_id)
            )
        )
        return result.scalar_one_or_none()

    @staticmethod
    def _to_entity(model: MembershipModel) -> Membership:
        return Membership(
            id=model.id,
            user_id=model.user_id,
            group_type=model.group_type,
            group_bundle=model.group_bundle,
            group_id=model.group_id,
            state=model.state,
            roles=list(model.roles or ()),
            created_at=model.created_at,
        )
