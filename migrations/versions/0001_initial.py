"""initial link manager schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-18 00:00:00.000000
"""

from alembic import op
import sqlalchemy as sa


revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def _principal_table(name: str, owner_column: str, owner_table: str, unique_name: str) -> None:
    op.create_table(
        name,
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            owner_column,
            sa.String(length=36),
            sa.ForeignKey(f"{owner_table}.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("kind", sa.String(length=16), nullable=False),
        sa.Column("value", sa.String(length=255), nullable=False),
        sa.UniqueConstraint(owner_column, "kind", "value", name=unique_name),
    )


def upgrade() -> None:
    op.create_table(
        "categories",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("name", sa.String(length=75), nullable=False),
        sa.Column("translations", sa.JSON(), nullable=False),
        sa.Column("acl_owner", sa.String(length=255), nullable=True),
        sa.Column("matches_guest", sa.Boolean(), nullable=False, server_default=sa.text("0")),
        sa.Column("public_marker", sa.String(length=16), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("modified_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("public_marker", name="uq_categories_public_marker"),
    )
    op.create_index("ix_categories_acl_owner", "categories", ["acl_owner"])
    op.create_index("ix_categories_matches_guest", "categories", ["matches_guest"])

    _principal_table("category_principals", "category_id", "categories", "uq_category_principal")
    op.create_index("ix_category_principals_category_id", "category_principals", ["category_id"])
    op.create_index("ix_category_principals_kind_value", "category_principals", ["kind", "value"])

    op.create_table(
        "links",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("href", sa.String(length=2048), nullable=False),
        sa.Column("blank", sa.Boolean(), nullable=False, server_default=sa.text("0")),
        sa.Column("display_text", sa.Boolean(), nullable=False, server_default=sa.text("1")),
        sa.Column("text", sa.String(length=75), nullable=False),
        sa.Column("text_translations", sa.JSON(), nullable=False),
        sa.Column("description", sa.String(length=255), nullable=True),
        sa.Column("description_translations", sa.JSON(), nullable=False),
        sa.Column("acl_owner", sa.String(length=255), nullable=True),
        sa.Column("matches_guest", sa.Boolean(), nullable=False, server_default=sa.text("0")),
        sa.Column("card_image", sa.String(length=1024), nullable=True),
        sa.Column("menu_image", sa.String(length=1024), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("modified_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_links_acl_owner", "links", ["acl_owner"])
    op.create_index("ix_links_matches_guest", "links", ["matches_guest"])

    _principal_table("link_principals", "link_id", "links", "uq_link_principal")
    op.create_index("ix_link_principals_link_id", "link_principals", ["link_id"])
    op.create_index("ix_link_principals_kind_value", "link_principals", ["kind", "value"])

    op.create_table(
        "link_categories",
        sa.Column(
            "link_id",
            sa.String(length=36),
            sa.ForeignKey("links.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("category_id", sa.String(length=36), primary_key=True),
    )
    op.create_index("ix_link_categories_category_id", "link_categories", ["category_id"])

    op.create_table(
        "groups",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("version", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_by", sa.String(length=255), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("modified_at", sa.DateTime(), nullable=False),
        sa.Column("source", sa.String(length=16), nullable=False, server_default="INTERNAL"),
        sa.Column("name", sa.String(length=75), nullable=False),
        sa.Column("description", sa.String(length=255), nullable=True),
        sa.UniqueConstraint("created_by", "name", name="uq_groups_creator_name"),
    )
    op.create_index("ix_groups_created_by", "groups", ["created_by"])
    op.create_index("ix_groups_modified_at", "groups", ["modified_at"])
    op.create_index("ix_groups_name", "groups", ["name"])

    _principal_table("group_principals", "group_id", "groups", "uq_group_principal")
    op.create_index("ix_group_principals_group_id", "group_principals", ["group_id"])
    op.create_index("ix_group_principals_kind_value", "group_principals", ["kind", "value"])


def downgrade() -> None:
    op.drop_table("group_principals")
    op.drop_table("groups")
    op.drop_table("link_categories")
    op.drop_table("link_principals")
    op.drop_table("links")
    op.drop_table("category_principals")
    op.drop_table("categories")
