"""
SubsAPI: Subscription Route Handlers
======================================

What:  CRUD endpoints for subscriptions plus the cost summary endpoint.
How:   Extracts path/query/body values, delegates to SubscriptionService,
       sets response headers. Errors propagate to the global handlers.

Route Inventory (prefix /api/v1):
    POST   /subscriptions             create
    GET    /subscriptions             list (filters + offset pagination)
    GET    /subscriptions/summary     total cost + distinct months
    GET    /subscriptions/{id}        detail
    PUT    /subscriptions/{id}        partial update
    DELETE /subscriptions/{id}        delete

    /summary is registered before /{id} so that it is not captured as an id.
"""

import logging
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from subsapi.config import settings
from subsapi.database import get_db_session
from subsapi.schemas.subscription import (
    ErrorResponse,
    SubscriptionCreate,
    SubscriptionListResponse,
    SubscriptionResponse,
    SubscriptionSummaryResponse,
    SubscriptionUpdate,
)
from subsapi.services.subscription_service import subscription_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/subscriptions", tags=["Subscriptions"])


@router.post(
    "",
    status_code=201,
    response_model=SubscriptionResponse,
    responses={
        201: {"description": "Subscription created", "model": SubscriptionResponse},
        400: {"description": "Invalid dates or service name", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Create a subscription",
)
async def create_subscription(
    payload: SubscriptionCreate,
    db: AsyncSession = Depends(get_db_session),
) -> SubscriptionResponse:
    """Create a subscription for a user. Dates use MM-YYYY; omit end_date for an ongoing one."""
    return await subscription_service.create_subscription(db=db, payload=payload)


@router.get(
    "",
    response_model=SubscriptionListResponse,
    responses={
        200: {"description": "Page of subscriptions", "model": SubscriptionListResponse},
        400: {"description": "Invalid sort option", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="List subscriptions",
)
async def list_subscriptions(
    response: Response,
    user_id: Optional[uuid.UUID] = Query(default=None, description="Filter by user"),
    service_name: Optional[str] = Query(default=None, description="Filter by service name"),
    limit: Optional[int] = Query(default=None, ge=1, le=100, description="Page size (max 100)"),
    offset: int = Query(default=0, ge=0, description="Rows to skip"),
    sort: str = Query(
        default="id_asc",
        description="Sort order: 'id_asc', 'start_date_asc' or 'start_date_desc'",
    ),
    db: AsyncSession = Depends(get_db_session),
) -> SubscriptionListResponse:
    """
    List subscriptions, optionally filtered by user and service.

    The total number of matching rows is also returned in the X-Total-Count
    header.
    """
    result = await subscription_service.list_subscriptions(
        db=db,
        user_id=user_id,
        service_name=service_name,
        limit=limit or settings.default_page_size,
        offset=offset,
        sort=sort,
    )
    response.headers["X-Total-Count"] = str(result.total_count)
    return result


@router.get(
    "/summary",
    response_model=SubscriptionSummaryResponse,
    responses={
        200: {"description": "Summary for the window", "model": SubscriptionSummaryResponse},
        400: {"description": "Invalid window", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Total cost and active months of a user's subscriptions to a service",
    description=(
        "Counts the distinct calendar months in which any of the user's subscriptions "
        "to the service was active inside [from, to], and the cost of those months. "
        "A month covered by several subscriptions is counted and billed once, at the "
        "price of the earliest-starting subscription covering it."
    ),
)
async def get_subscription_summary(
    user_id: uuid.UUID = Query(..., description="User UUID"),
    service_name: str = Query(..., description="Service name"),
    from_: Optional[str] = Query(
        default=None,
        alias="from",
        description="Window start (MM-YYYY). Omit for no lower bound.",
    ),
    to: Optional[str] = Query(
        default=None,
        description="Window end, inclusive (MM-YYYY). Omit for the current date.",
    ),
    db: AsyncSession = Depends(get_db_session),
) -> SubscriptionSummaryResponse:
    return await subscription_service.get_summary(
        db=db,
        user_id=user_id,
        service_name=service_name,
        from_=from_,
        to=to,
    )


@router.get(
    "/{subscription_id}",
    response_model=SubscriptionResponse,
    responses={
        200: {"description": "Subscription details", "model": SubscriptionResponse},
        404: {"description": "Subscription not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Get a subscription by ID",
)
async def get_subscription(
    subscription_id: int = Path(..., ge=1, description="Subscription ID"),
    db: AsyncSession = Depends(get_db_session),
) -> SubscriptionResponse:
    return await subscription_service.get_subscription(db=db, subscription_id=subscription_id)


@router.put(
    "/{subscription_id}",
    response_model=SubscriptionResponse,
    responses={
        200: {"description": "Updated subscription", "model": SubscriptionResponse},
        400: {"description": "Invalid dates or service name", "model": ErrorResponse},
        404: {"description": "Subscription not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Update a subscription",
)
async def update_subscription(
    payload: SubscriptionUpdate,
    subscription_id: int = Path(..., ge=1, description="Subscription ID"),
    db: AsyncSession = Depends(get_db_session),
) -> SubscriptionResponse:
    """Partial update: only the fields present in the body change. end_date "" clears it."""
    return await subscription_service.update_subscription(
        db=db, subscription_id=subscription_id, payload=payload
    )


@router.delete(
    "/{subscription_id}",
    status_code=204,
    responses={
        204: {"description": "Subscription deleted"},
        404: {"description": "Subscription not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Delete a subscription",
)
async def delete_subscription(
    subscription_id: int = Path(..., ge=1, description="Subscription ID"),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await subscription_service.delete_subscription(db=db, subscription_id=subscription_id)
    return Response(status_code=204)
