"""
SubsAPI: Subscription Service (Business Logic)
================================================

What:  CRUD for subscriptions plus the per-user, per-service cost summary.
How:   Validates request values (month-year dates, date ordering, names),
       talks to the database through the AsyncSession it is handed, and
       delegates the summary arithmetic to the overlap engine.
Who:   Called by the route handlers in routes/subscriptions.py.

Summary Flow (GET /api/v1/subscriptions/summary):
    ┌──────────┐    ┌─────────────┐    ┌──────────────┐    ┌───────────────┐
    │  Query   │───▶│  Validate   │───▶│  Accessor    │───▶│ compute_      │
    │  params  │    │  window     │    │  (DB fetch)  │    │ summary       │
    └──────────┘    └─────────────┘    └──────────────┘    └───────────────┘

    from omitted → date.min (no lower bound)
    to omitted   → today

Error Handling Strategy:
    Business-rule failures raise ValidationError / NotFoundError. Anything
    else raised while talking to the database is logged and wrapped in
    DatabaseError so that no driver detail reaches the client.
"""

import logging
import uuid
from datetime import date
from typing import List, Optional

from sqlalchemy import asc, desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from subsapi.exceptions import DatabaseError, NotFoundError, ValidationError
from subsapi.models.subscription import Subscription
from subsapi.month_year import parse_month_year
from subsapi.schemas.subscription import (
    SORT_OPTIONS,
    SubscriptionCreate,
    SubscriptionListResponse,
    SubscriptionResponse,
    SubscriptionSummaryResponse,
    SubscriptionUpdate,
)
from subsapi.services.overlap import compute_summary

logger = logging.getLogger(__name__)


def _parse_date(value: str, field: str) -> date:
    try:
        return parse_month_year(value)
    except ValueError:
        raise ValidationError(
            message=f"invalid {field} format, expected MM-YYYY",
            field=field,
            context={"value": value},
        )


def _check_service_name(name: str) -> str:
    stripped = name.strip()
    if not stripped:
        raise ValidationError(message="service_name must be provided", field="service_name")
    return stripped


def _check_order(start: date, end: Optional[date]) -> None:
    if end is not None and end < start:
        raise ValidationError(
            message="end_date must not be before start_date",
            field="end_date",
        )


class SubscriptionService:
    """
    Business logic layer for subscription operations.

    Stateless: the database session is passed into every call, so a single
    module-level instance serves all requests.
    """

    async def create_subscription(
        self, db: AsyncSession, payload: SubscriptionCreate
    ) -> SubscriptionResponse:
        """
        Validate and insert a new subscription.

        Raises:
            ValidationError: blank service name, malformed dates, end before start
            DatabaseError: insert failed
        """
        service_name = _check_service_name(payload.service_name)
        start_date = _parse_date(payload.start_date, "start_date")
        end_date = None
        if payload.end_date:
            end_date = _parse_date(payload.end_date, "end_date")
        _check_order(start_date, end_date)

        subscription = Subscription(
            service_name=service_name,
            price=payload.price,
            user_id=payload.user_id,
            start_date=start_date,
            end_date=end_date,
        )
        try:
            db.add(subscription)
            await db.flush()  # assigns the primary key; commit happens in get_db_session
        except Exception as e:
            logger.error("Database error creating subscription: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not create the subscription. Please try again.",
                context={"error_type": type(e).__name__},
            )

        logger.info(
            "Subscription %s created: user_id=%s service_name=%s",
            subscription.id,
            subscription.user_id,
            subscription.service_name,
        )
        return SubscriptionResponse.from_model(subscription)

    async def _load(self, db: AsyncSession, subscription_id: int) -> Subscription:
        try:
            result = await db.execute(
                select(Subscription).where(Subscription.id == subscription_id)
            )
            subscription = result.scalar_one_or_none()
        except Exception as e:
            logger.error("Database error fetching subscription %s: %s", subscription_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the subscription. Please try again.",
                context={"subscription_id": subscription_id},
            )

        if subscription is None:
            raise NotFoundError(resource="subscription", resource_id=str(subscription_id))
        return subscription

    async def get_subscription(
        self, db: AsyncSession, subscription_id: int
    ) -> SubscriptionResponse:
        """
        Retrieve a single subscription by id.

        Raises:
            NotFoundError: no subscription with this id (→ 404)
            DatabaseError: query failed (→ 500)
        """
        subscription = await self._load(db, subscription_id)
        return SubscriptionResponse.from_model(subscription)

    async def list_subscriptions(
        self,
        db: AsyncSession,
        user_id: Optional[uuid.UUID] = None,
        service_name: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
        sort: str = "id_asc",
    ) -> SubscriptionListResponse:
        """
        List subscriptions with optional filters and offset pagination.

        Args:
            user_id: Only this user's subscriptions
            service_name: Only subscriptions to this service (exact match)
            limit: Page size (1-100, enforced by the route)
            offset: Rows to skip
            sort: One of SORT_OPTIONS
        """
        if sort not in SORT_OPTIONS:
            raise ValidationError(
                message=f"Invalid sort '{sort}'. Must be one of: {', '.join(SORT_OPTIONS)}",
                field="sort",
            )

        filters = []
        if user_id is not None:
            filters.append(Subscription.user_id == user_id)
        if service_name:
            filters.append(Subscription.service_name == service_name)

        query = select(Subscription).where(*filters)
        if sort == "start_date_asc":
            query = query.order_by(asc(Subscription.start_date), asc(Subscription.id))
        elif sort == "start_date_desc":
            query = query.order_by(desc(Subscription.start_date), desc(Subscription.id))
        else:
            query = query.order_by(asc(Subscription.id))
        query = query.limit(limit).offset(offset)

        try:
            result = await db.execute(query)
            subscriptions = list(result.scalars().all())

            count_result = await db.execute(
                select(func.count(Subscription.id)).where(*filters)
            )
            total_count = count_result.scalar() or 0
        except Exception as e:
            logger.error("Database error listing subscriptions: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve subscriptions. Please try again.",
                context={"error_type": type(e).__name__},
            )

        return SubscriptionListResponse(
            subscriptions=[SubscriptionResponse.from_model(s) for s in subscriptions],
            total_count=total_count,
            limit=limit,
            offset=offset,
            has_more=offset + len(subscriptions) < total_count,
        )

    async def update_subscription(
        self, db: AsyncSession, subscription_id: int, payload: SubscriptionUpdate
    ) -> SubscriptionResponse:
        """
        Apply a partial update.

        Date ordering is checked against the resulting record, so moving
        start_date past an existing end_date is rejected even if end_date
        itself was not part of the request.

        Raises:
            NotFoundError: unknown id
            ValidationError: blank service name, malformed dates, end before start
            DatabaseError: query or flush failed
        """
        subscription = await self._load(db, subscription_id)

        service_name = subscription.service_name
        if payload.service_name is not None:
            service_name = _check_service_name(payload.service_name)

        start_date = subscription.start_date
        if payload.start_date is not None:
            start_date = _parse_date(payload.start_date, "start_date")

        end_date = subscription.end_date
        if payload.end_date is not None:
            end_date = _parse_date(payload.end_date, "end_date") if payload.end_date else None

        _check_order(start_date, end_date)

        subscription.service_name = service_name
        subscription.start_date = start_date
        subscription.end_date = end_date
        if payload.price is not None:
            subscription.price = payload.price

        try:
            await db.flush()
        except Exception as e:
            logger.error("Database error updating subscription %s: %s", subscription_id, str(e))
            raise DatabaseError(
                message="Could not update the subscription. Please try again.",
                context={"subscription_id": subscription_id},
            )

        logger.info("Subscription %s updated", subscription_id)
        return SubscriptionResponse.from_model(subscription)

    async def delete_subscription(self, db: AsyncSession, subscription_id: int) -> None:
        """
        Delete a subscription.

        Raises:
            NotFoundError: unknown id
            DatabaseError: delete failed
        """
        subscription = await self._load(db, subscription_id)
        try:
            await db.delete(subscription)
            await db.flush()
        except Exception as e:
            logger.error("Database error deleting subscription %s: %s", subscription_id, str(e))
            raise DatabaseError(
                message="Could not delete the subscription. Please try again.",
                context={"subscription_id": subscription_id},
            )
        logger.info("Subscription %s deleted", subscription_id)

    async def find_subscriptions(
        self, db: AsyncSession, user_id: uuid.UUID, service_name: str
    ) -> List[Subscription]:
        """
        All subscriptions of one user to one service, oldest first.

        The order (start_date, then id) is the processing order of the
        overlap engine and decides which price a shared month is billed at.
        """
        try:
            result = await db.execute(
                select(Subscription)
                .where(
                    Subscription.user_id == user_id,
                    Subscription.service_name == service_name,
                )
                .order_by(asc(Subscription.start_date), asc(Subscription.id))
            )
            return list(result.scalars().all())
        except Exception as e:
            logger.error(
                "Database error finding subscriptions for user %s / %s: %s",
                user_id,
                service_name,
                str(e),
            )
            raise DatabaseError(
                message="Could not retrieve subscriptions. Please try again.",
                context={"user_id": str(user_id), "service_name": service_name},
            )

    async def get_summary(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        service_name: str,
        from_: Optional[str] = None,
        to: Optional[str] = None,
        today: Optional[date] = None,
    ) -> SubscriptionSummaryResponse:
        """
        Cost and distinct-month count of one user's subscriptions to a service.

        Args:
            user_id: Owning user
            service_name: Service to summarize
            from_: Window start (MM-YYYY); None/"" means no lower bound
            to: Window end (MM-YYYY, inclusive); None/"" means today
            today: Override for "now" (tests)

        Raises:
            ValidationError: blank service name, malformed dates, window
                             ending before it starts
            DatabaseError: accessor query failed
        """
        service_name = _check_service_name(service_name)

        period_start = _parse_date(from_, "from") if from_ else date.min
        if to:
            period_end = _parse_date(to, "to")
            if period_end < period_start:
                raise ValidationError(
                    message="'to' must not be before 'from'",
                    field="to",
                    context={"from": from_, "to": to},
                )
        else:
            period_end = today or date.today()
            if period_end < period_start:
                # Window starts in the future: nothing can be active yet
                return SubscriptionSummaryResponse(unit_price=0, total_amount=0, total_months=0)

        subscriptions = await self.find_subscriptions(db, user_id, service_name)
        summary = compute_summary(subscriptions, period_start, period_end)

        logger.info(
            "subscription metrics: user_id=%s service_name=%s total_months=%d total_cost=%d",
            user_id,
            service_name,
            summary.unique_months,
            summary.total_cost,
        )

        return SubscriptionSummaryResponse(
            unit_price=summary.unit_price,
            total_amount=summary.total_cost,
            total_months=summary.unique_months,
        )


subscription_service = SubscriptionService()
