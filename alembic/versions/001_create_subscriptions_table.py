"""Create subscriptions table

Revision ID: 001
Revises: None
Create Date: 2025-07-01 00:00:00.000000+00:00

What:  Creates the `subscriptions` table and the (user_id, service_name)
       index used by the summary endpoint.
How:   Generic SQLAlchemy types; UUID maps to native UUID on PostgreSQL.

Rollback: downgrade() drops the table (all subscription data is lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the subscriptions table. Column docs live in subsapi/models/subscription.py."""
    op.create_table(
        "subscriptions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column(
            "service_name",
            sa.String(100),
            nullable=False,
            comment="Name of the subscribed service, e.g. 'Yandex Plus'",
        ),
        sa.Column(
            "price",
            sa.Integer(),
            nullable=False,
            comment="Monthly charge in whole currency units",
        ),
        sa.Column("user_id", sa.Uuid(), nullable=False, comment="Owning user"),
        sa.Column(
            "start_date",
            sa.Date(),
            nullable=False,
            comment="First month the subscription is active (first of month)",
        ),
        sa.Column(
            "end_date",
            sa.Date(),
            nullable=True,
            comment="Last month the subscription is active; NULL while ongoing",
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("price > 0", name="ck_subscriptions_price_positive"),
    )

    op.create_index(
        "idx_subscriptions_user_service",
        "subscriptions",
        ["user_id", "service_name"],
    )


def downgrade() -> None:
    """Drop the subscriptions table (destructive)."""
    op.drop_index("idx_subscriptions_user_service", table_name="subscriptions")
    op.drop_table("subscriptions")
