"""SQLAlchemy model for the group_memberships table."""

from datetime import datetime

from sqlalchemy import DateTime, Integer, String, UniqueConstraint, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import JSON

from groupaccess.infrastructure.persistence.database import Base


class MembershipModel(Base):
    """SQLAlchemy model for the group_memberships table.

    Attributes:
        id: Auto-incrementing primary key.
        user_id: ID of the member.
        group_type: Entity type of the group.
        group_bundle: Bundle of the group.
        group_id: ID of the group entity.
        state: 'active', 'pending' or 'blocked'.
        roles: Names of the extra roles held in the group.
        created_at: Timestamp when the membership was created.
    """

    __tablename__ = "group_memberships"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )
    user_id: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        index=True,
    )
    group_type: Mapped[str] = mapped_column(String(64), nullable=False)
    group_bundle: Mapped[str] = mapped_column(String(64), nullable=False)
    group_id: Mapped[str] = mapped_column(String(64), nullable=False)
    state: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="active",
    )
    roles: Mapped[list] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"),
        nullable=False,
        default=list,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    __table_args__ = (
        UniqueConstraint(
            "user_id", "group_type", "group_id", name="uq_group_memberships_user_group"
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<Membership(user_id={self.user_id}, "
            f"group={self.group_type}:{self.group_id}, state={self.state})>"
        )
