"""SQLAlchemy model for the group_roles table."""

from sqlalchemy import Index, Integer, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import JSON

from groupaccess.infrastructure.persistence.database import Base


class GroupRoleModel(Base):
    """SQLAlchemy model for the group_roles table.

    Attributes:
        id: Scoped role ID ('{group_type}-{group_bundle}[-{group_id}]-{name}').
        name: Role name without the scope prefix.
        label: Human readable label.
        group_type: Entity type of the group.
        group_bundle: Bundle of the group.
        group_id: Group instance ID, '' for bundle-wide roles.
        role_type: 'required' or 'standard'.
        permissions: List of permission names.
        weight: Sort weight.
    """

    __tablename__ = "group_roles"

    id: Mapped[str] = mapped_column(
        String(255),
        primary_key=True,
        comment="Scoped role ID",
    )
    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="Role name without the scope prefix",
    )
    label: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        default="",
    )
    group_type: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        comment="Entity type of the group",
    )
    group_bundle: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        comment="Bundle of the group",
    )
    group_id: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        default="",
        comment="Group instance ID, empty for bundle-wide roles",
    )
    role_type: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="standard",
    )
    permissions: Mapped[list] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"),
        nullable=False,
        default=list,
    )
    weight: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )

    __table_args__ = (
        Index("ix_group_roles_scope", "group_type", "group_bundle", "group_id"),
    )

    def __repr__(self) -> str:
        return f"<GroupRole(id={self.id}, role_type={self.role_type})>"
