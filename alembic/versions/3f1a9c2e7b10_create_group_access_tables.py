"""create_group_access_tables

Revision ID: 3f1a9c2e7b10
Revises:
Create Date: 2026-10-19 10:12:41.208114

"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3f1a9c2e7b10"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "settings",
        sa.Column("key", sa.String(length=255), nullable=False, comment="Settings object name"),
        sa.Column("data", sa.JSON(), nullable=False, comment="Settings values"),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("(CURRENT_TIMESTAMP)"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("key"),
    )

    op.create_table(
        "group_roles",
        sa.Column("id", sa.String(length=255), nullable=False, comment="Scoped role ID"),
        sa.Column(
            "name",
            sa.String(length=100),
            nullable=False,
            comment="Role name without the scope prefix",
        ),
        sa.Column("label", sa.String(length=255), nullable=False),
        sa.Column(
            "group_type", sa.String(length=64), nullable=False, comment="Entity type of the group"
        ),
        sa.Column(
            "group_bundle", sa.String(length=64), nullable=False, comment="Bundle of the group"
        ),
        sa.Column(
            "group_id",
            sa.String(length=64),
            nullable=False,
            comment="Group instance ID, empty for bundle-wide roles",
        ),
        sa.Column("role_type", sa.String(length=20), nullable=False),
        sa.Column("permissions", sa.JSON(), nullable=False),
        sa.Column("weight", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_group_roles_scope",
        "group_roles",
        ["group_type", "group_bundle", "group_id"],
        unique=False,
    )

    op.create_table(
        "group_memberships",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("group_type", sa.String(length=64), nullable=False),
        sa.Column("group_bundle", sa.String(length=64), nullable=False),
        sa.Column("group_id", sa.String(length=64), nullable=False),
        sa.Column("state", sa.String(length=20), nullable=False),
        sa.Column("roles", sa.JSON(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("(CURRENT_TIMESTAMP)"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "user_id", "group_type", "group_id", name="uq_group_memberships_user_group"
        ),
    )
    op.create_index(
        op.f("ix_group_memberships_user_id"), "group_memberships", ["user_id"], unique=False
    )

    op.create_table(
        "audience_fields",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("entity_type", sa.String(length=64), nullable=False),
        sa.Column("bundle", sa.String(length=64), nullable=False),
        sa.Column("field_name", sa.String(length=64), nullable=False),
        sa.Column("target_type", sa.String(length=64), nullable=False),
        sa.Column("target_bundles", sa.JSON(), nullable=False),
        sa.Column("cardinality", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "entity_type", "bundle", "field_name", name="uq_audience_fields_field"
        ),
    )

    op.create_table(
        "group_references",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("entity_type", sa.String(length=64), nullable=False),
        sa.Column("entity_id", sa.String(length=64), nullable=False),
        sa.Column("field_name", sa.String(length=64), nullable=False),
        sa.Column("group_type", sa.String(length=64), nullable=False),
        sa.Column("group_bundle", sa.String(length=64), nullable=False),
        sa.Column("group_id", sa.String(length=64), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "entity_type",
            "entity_id",
            "field_name",
            "group_type",
            "group_id",
            name="uq_group_references_reference",
        ),
    )
    op.create_index(
        "ix_group_references_entity",
        "group_references",
        ["entity_type", "entity_id"],
        unique=False,
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_group_references_entity", table_name="group_references")
    op.drop_table("group_references")
    op.drop_table("audience_fields")
    op.drop_index(op.f("ix_group_memberships_user_id"), table_name="group_memberships")
    op.drop_table("group_memberships")
    op.drop_index("ix_group_roles_scope", table_name="group_roles")
    op.drop_table("group_roles")
    op.drop_table("settings")
