"""Flat feed_cards view over the dashboard tree.

Revision ID: 002_feed_cards_view
Revises: 001_content_schema
Create Date: 2026-10-18

One row per module with its owner's username, stock name and category.
"""
from typing import Sequence, Union

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "002_feed_cards_view"
down_revision: Union[str, None] = "001_content_schema"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the feed_cards view."""
    op.execute(
        """
        CREATE VIEW feed_cards AS
        SELECT
            m.id AS module_id,
            u.username AS analyst_username,
            s.name AS stock_name,
            c.name AS category_name,
            c.id AS category_id,
            m.content AS content,
            m.post_date AS post_date,
            m.updated_date AS updated_date
        FROM module_entities m
        JOIN categories c ON c.id = m.category_id
        JOIN stocks s ON s.id = c.stock_id
        JOIN dashboards d ON d.id = s.dashboard_id
        JOIN users u ON u.id = d.id
        """
    )


def downgrade() -> None:
    """Drop the feed_cards view."""
    op.execute("DROP VIEW IF EXISTS feed_cards")
