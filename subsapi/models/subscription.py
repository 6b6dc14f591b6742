"""
SubsAPI: Subscription SQLAlchemy Model
========================================

What:  ORM model representing the `subscriptions` table.
How:   Inherits from the shared DeclarativeBase; Alembic reads it for migrations.
Who:   Used by SubscriptionService for CRUD and by the summary accessor.

Table Design:
    - Integer primary key, exposed to clients as `id`
    - user_id: UUID of the owning user (no users table; ids come from upstream)
    - start_date / end_date: DATE columns holding the first day of a month.
      end_date NULL means the subscription is still running.
    - price: whole currency units per month, strictly positive

    Composite index (user_id, service_name):
        Backs the summary accessor "all subscriptions of user U to service S".
"""

import uuid
from datetime import date
from typing import Optional

from sqlalchemy import CheckConstraint, Date, Index, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from subsapi.database import Base


class Subscription(Base):
    """
    One recurring subscription of a user to a service.

    Query Patterns:
        - Summary accessor: WHERE user_id = :u AND service_name = :s
          ORDER BY start_date, id  → idx_subscriptions_user_service
        - Get by id: primary key lookup
        - List: optional user_id / service_name filters, LIMIT/OFFSET
    """

    __tablename__ = "subscriptions"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    service_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="Name of the subscribed service, e.g. 'Yandex Plus'",
    )

    price: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Monthly charge in whole currency units",
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        nullable=False,
        comment="Owning user",
    )

    start_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
        comment="First month the subscription is active (first of month)",
    )

    end_date: Mapped[Optional[date]] = mapped_column(
        Date,
        nullable=True,
        default=None,
        comment="Last month the subscription is active; NULL while ongoing",
    )

    __table_args__ = (
        CheckConstraint("price > 0", name="ck_subscriptions_price_positive"),
        Index("idx_subscriptions_user_service", "user_id", "service_name"),
    )

    def __repr__(self) -> str:
        return (
            f"<Subscription(id={self.id}, service_name='{self.service_name}', "
            f"user_id={self.user_id}, start_date={self.start_date}, end_date={self.end_date})>"
        )
