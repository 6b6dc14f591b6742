"""
SubsAPI: Pydantic Request/Response Schemas
============================================

What:  Pydantic models defining the HTTP contract of the subscription API.
How:   FastAPI validates request bodies against the request models, serializes
       the response models, and generates the OpenAPI document from both.

Dates:
    Every date crossing the HTTP boundary is a "MM-YYYY" string. Request
    models keep them as strings; SubscriptionService parses them so that a
    malformed date becomes a 400 with a field name instead of a generic 422.

Schemas are separate from the SQLAlchemy model: the API never exposes
storage-level date values, only the month-year text form.
"""

import uuid
from typing import List, Optional

from pydantic import BaseModel, Field

from subsapi.models.subscription import Subscription
from subsapi.month_year import format_month_year

SORT_OPTIONS = ("id_asc", "start_date_asc", "start_date_desc")


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class SubscriptionCreate(BaseModel):
    """Body of POST /api/v1/subscriptions."""

    service_name: str = Field(min_length=1, max_length=100, examples=["Yandex Plus"])
    price: int = Field(gt=0, description="Monthly price in whole currency units", examples=[400])
    user_id: uuid.UUID = Field(examples=["60601fee-2bf1-4721-ae6f-7636e79a0cba"])
    start_date: str = Field(description="First active month (MM-YYYY)", examples=["07-2025"])
    end_date: Optional[str] = Field(
        default=None,
        description="Last active month (MM-YYYY); omit for an ongoing subscription",
        examples=["12-2025"],
    )


class SubscriptionUpdate(BaseModel):
    """
    Body of PUT /api/v1/subscriptions/{id}.

    Partial update: omitted (null) fields are left unchanged. An empty string
    for end_date clears it, turning the subscription back into an ongoing one.
    """

    service_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    price: Optional[int] = Field(default=None, gt=0)
    start_date: Optional[str] = Field(default=None, description="MM-YYYY")
    end_date: Optional[str] = Field(
        default=None,
        description="MM-YYYY, or \"\" to mark the subscription as ongoing",
    )


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class SubscriptionResponse(BaseModel):
    """One subscription as returned by every single-item endpoint."""

    id: int = Field(description="Subscription identifier")
    service_name: str
    price: int
    user_id: uuid.UUID
    start_date: str = Field(description="First active month (MM-YYYY)")
    end_date: Optional[str] = Field(
        default=None,
        description="Last active month (MM-YYYY); null while ongoing",
    )

    @classmethod
    def from_model(cls, subscription: Subscription) -> "SubscriptionResponse":
        return cls(
            id=subscription.id,
            service_name=subscription.service_name,
            price=subscription.price,
            user_id=subscription.user_id,
            start_date=format_month_year(subscription.start_date),
            end_date=format_month_year(subscription.end_date),
        )


class SubscriptionListResponse(BaseModel):
    """
    Offset-paginated list wrapper for GET /api/v1/subscriptions.

    total_count counts every row matching the filters, not just this page.
    """

    subscriptions: List[SubscriptionResponse]
    total_count: int = Field(description="Rows matching the filters")
    limit: int
    offset: int
    has_more: bool = Field(description="Whether another page exists after this one")


class SubscriptionSummaryResponse(BaseModel):
    """
    Result of GET /api/v1/subscriptions/summary.

    Example:
        {"unit_price": 400, "total_amount": 1200, "total_months": 3}
    """

    unit_price: int = Field(
        description="Price of the first subscription that contributed a month (0 if none)"
    )
    total_amount: int = Field(description="Total cost over the distinct active months")
    total_months: int = Field(description="Distinct calendar months with an active subscription")


class ErrorResponse(BaseModel):
    """
    Standardized error body for all API errors.

    Example:
        {
            "error": "validation_error",
            "message": "invalid start_date format, expected MM-YYYY",
            "details": {"field": "start_date"},
            "request_id": "3f2a9c1b"
        }
    """

    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
