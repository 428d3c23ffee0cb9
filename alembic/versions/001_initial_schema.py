"""Initial schema - roles, permissions, memberships, delegations, accesses.

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB

from accessgraph.config import get_settings

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def _member_columns() -> list[sa.Column]:
    return [
        sa.Column("member_type", sa.String(255), nullable=False),
        sa.Column("member_id", sa.String(255), nullable=False),
        sa.Column("context", JSONB(), nullable=True),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    tables = get_settings().engine_config().table_names

    op.create_table(
        tables.permissions,
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("slug", sa.String(255), nullable=False),
        sa.Column("description", sa.String(255), nullable=True),
        *_timestamps(),
    )
    op.create_index(f"ix_{tables.permissions}_slug", tables.permissions, ["slug"], unique=True)

    op.create_table(
        tables.roles,
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column(
            "parent_id",
            sa.UUID(),
            sa.ForeignKey(f"{tables.roles}.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("slug", sa.String(32), nullable=False),
        sa.Column("description", sa.String(255), nullable=True),
        *_timestamps(),
    )
    op.create_index(f"ix_{tables.roles}_slug", tables.roles, ["slug"], unique=True)
    op.create_index(f"ix_{tables.roles}_parent_id", tables.roles, ["parent_id"])

    op.create_table(
        tables.role_members,
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column(
            "role_id",
            sa.UUID(),
            sa.ForeignKey(f"{tables.roles}.id", ondelete="CASCADE"),
            nullable=False,
        ),
        *_member_columns(),
        *_timestamps(),
    )
    op.create_index(
        f"ix_{tables.role_members}_member",
        tables.role_members,
        ["member_type", "member_id", "role_id"],
    )

    op.create_table(
        tables.permission_members,
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column(
            "permission_id",
            sa.UUID(),
            sa.ForeignKey(f"{tables.permissions}.id", ondelete="CASCADE"),
            nullable=False,
        ),
        *_member_columns(),
        *_timestamps(),
    )
    op.create_index(
        f"ix_{tables.permission_members}_member",
        tables.permission_members,
        ["member_type", "member_id", "permission_id"],
    )

    op.create_table(
        tables.accesses,
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("entity_type", sa.String(255), nullable=False),
        sa.Column("entity_id", sa.String(255), nullable=False),
        sa.Column("resource_type", sa.String(255), nullable=False),
        sa.Column("resource_id", sa.String(255), nullable=False),
        sa.Column("context", JSONB(), nullable=True),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index(
        f"ix_{tables.accesses}_entity_resource",
        tables.accesses,
        ["entity_type", "entity_id", "resource_type", "resource_id"],
        unique=True,
    )
    op.create_index(
        f"ix_{tables.accesses}_resource",
        tables.accesses,
        ["resource_type", "resource_id"],
    )


def downgrade() -> None:
    tables = get_settings().engine_config().table_names

    op.drop_table(tables.accesses)
    op.drop_table(tables.permission_members)
    op.drop_table(tables.role_members)
    op.drop_table(tables.roles)
    op.drop_table(tables.permissions)
