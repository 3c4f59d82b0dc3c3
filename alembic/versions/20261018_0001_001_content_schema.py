"""Content store schema: users, subscriptions and dashboard trees.

Revision ID: 001_content_schema
Revises: 
Create Date: 2026-10-18

For databases already created by the dashboard editor, run:
alembic stamp 001_content_schema
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001_content_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create user, subscription and dashboard tables."""

    # ==========================================================================
    # USERS & SUBSCRIPTIONS
    # ==========================================================================

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("username", sa.String(length=255), nullable=False),
        sa.Column("is_analyst", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
        sa.UniqueConstraint("username", name="uq_users_username"),
    )
    op.create_index("idx_users_username", "users", ["username"])

    op.create_table(
        "subscriptions",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("subscriber_id", sa.Integer(), nullable=False),
        sa.Column("subscribed_to_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(
            ["subscriber_id"], ["users.id"],
            name="fk_subscriptions_subscriber_id_users", ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["subscribed_to_id"], ["users.id"],
            name="fk_subscriptions_subscribed_to_id_users", ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_subscriptions"),
        sa.UniqueConstraint("subscriber_id", "subscribed_to_id", name="uq_subscription_pair"),
    )
    op.create_index("idx_subscriptions_subscriber", "subscriptions", ["subscriber_id"])

    # ==========================================================================
    # DASHBOARD TREE
    # ==========================================================================

    op.create_table(
        "stock_refs",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_stock_refs"),
        sa.UniqueConstraint("name", name="uq_stock_refs_name"),
    )

    op.create_table(
        "dashboards",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(
            ["id"], ["users.id"], name="fk_dashboards_id_users", ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id", name="pk_dashboards"),
    )

    op.create_table(
        "stocks",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("dashboard_id", sa.Integer(), nullable=False),
        sa.Column("stock_ref_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(
            ["dashboard_id"], ["dashboards.id"],
            name="fk_stocks_dashboard_id_dashboards", ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["stock_ref_id"], ["stock_refs.id"], name="fk_stocks_stock_ref_id_stock_refs"
        ),
        sa.PrimaryKeyConstraint("id", name="pk_stocks"),
        sa.UniqueConstraint("dashboard_id", "stock_ref_id", name="uq_stock_dashboard_ref"),
    )
    op.create_index("idx_stocks_dashboard", "stocks", ["dashboard_id"])

    op.create_table(
        "categories",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("stock_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(
            ["stock_id"], ["stocks.id"],
            name="fk_categories_stock_id_stocks", ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_categories"),
    )
    op.create_index("idx_categories_stock", "categories", ["stock_id"])

    op.create_table(
        "module_entities",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("category_id", sa.Integer(), nullable=False),
        sa.Column("content", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column(
            "post_date", sa.DateTime(timezone=True),
            server_default=sa.text("now()"), nullable=False,
        ),
        sa.Column(
            "updated_date", sa.DateTime(timezone=True),
            server_default=sa.text("now()"), nullable=False,
        ),
        sa.CheckConstraint(
            "updated_date >= post_date", name="ck_module_entities_updated_after_post"
        ),
        sa.ForeignKeyConstraint(
            ["category_id"], ["categories.id"],
            name="fk_module_entities_category_id_categories", ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_module_entities"),
    )
    op.create_index("idx_module_entities_category", "module_entities", ["category_id"])
    op.create_index("idx_module_entities_post_date", "module_entities", ["post_date"])

    op.create_table(
        "dashboard_layouts",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("category_id", sa.Integer(), nullable=False),
        sa.Column("layout", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.ForeignKeyConstraint(
            ["category_id"], ["categories.id"],
            name="fk_dashboard_layouts_category_id_categories", ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_dashboard_layouts"),
    )
    op.create_index("idx_dashboard_layouts_category", "dashboard_layouts", ["category_id"])


def downgrade() -> None:
    """Drop all content tables."""
    op.drop_table("dashboard_layouts")
    op.drop_table("module_entities")
    op.drop_table("categories")
    op.drop_table("stocks")
    op.drop_table("dashboards")
    op.drop_table("stock_refs")
    op.drop_table("subscriptions")
    op.drop_table("users")
