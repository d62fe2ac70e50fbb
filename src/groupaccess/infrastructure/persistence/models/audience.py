"""SQLAlchemy models for audience fields and group references."""

from sqlalchemy import Index, Integer, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import JSON

from groupaccess.infrastructure.persistence.database import Base


class AudienceFieldModel(Base):
    """SQLAlchemy model for the audience_fields table.

    Attributes:
        id: Auto-incrementing primary key.
        entity_type: Entity type of the group content.
        bundle: Bundle of the group content.
        field_name: Name of the reference field.
        target_type: Entity type of the referenced groups.
        target_bundles: Referenced group bundles, empty for all.
        cardinality: Maximum number of references, -1 for unlimited.
    """

    __tablename__ = "audience_fields"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    entity_type: Mapped[str] = mapped_column(String(64), nullable=False)
    bundle: Mapped[str] = mapped_column(String(64), nullable=False)
    field_name: Mapped[str] = mapped_column(String(64), nullable=False)
    target_type: Mapped[str] = mapped_column(String(64), nullable=False)
    target_bundles: Mapped[list] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"),
        nullable=False,
        default=list,
    )
    cardinality: Mapped[int] = mapped_column(Integer, nullable=False, default=-1)

    __table_args__ = (
        UniqueConstraint(
            "entity_type", "bundle", "field_name", name="uq_audience_fields_field"
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<AudienceField({self.entity_type}:{self.bundle}.{self.field_name} "
            f"-> {self.target_type})>"
        )


class GroupReferenceModel(Base):
    """SQLAlchemy model for the group_references table.

    One row per group referenced by a group content entity.
    """

    __tablename__ = "group_references"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    entity_type: Mapped[str] = mapped_column(String(64), nullable=False)
    entity_id: Mapped[str] = mapped_column(String(64), nullable=False)
    field_name: Mapped[str] = mapped_column(String(64), nullable=False)
    group_type: Mapped[str] = mapped_column(String(64), nullable=False)
    group_bundle: Mapped[str] = mapped_column(String(64), nullable=False)
    group_id: Mapped[str] = mapped_column(String(64), nullable=False)

    __table_args__ = (
        UniqueConstraint(
            "entity_type",
            "entity_id",
            "field_name",
            "group_type",
            "group_id",
            name="uq_group_references_reference",
        ),
        Index("ix_group_references_entity", "entity_type", "entity_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<GroupReference({self.entity_type}:{self.entity_id} "
            f"-> {self.group_type}:{self.group_id})>"
        )
