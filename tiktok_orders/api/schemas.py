"""API schemas for the order dashboard.

Pydantic models for JSON responses.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from tiktok_orders.domain.models import OrderStats


class ErrorResponse(BaseModel):
    """Standard error response."""

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: list[Any] = Field(default_factory=list)
    request_id: str | None = Field(default=None)


class OrderRowSchema(BaseModel):
    """One order row with its display values."""

    id: int
    order_id: str
    order_status: str
    update_time: str
    order_sync: bool
    created_date: str
    status_label: str = Field(..., description="Humanized status")
    updated_display: str = Field(..., description="Localized update time")
    selected: bool = False
    can_sync: bool = Field(..., description="Whether the sync action is enabled")


class PaginationSchema(BaseModel):
    """Pagination state of the table."""

    page: int = Field(..., description="Current page number (1-based)")
    page_size: int
    page_count: int
    filtered_count: int = Field(..., description="Rows after filtering")
    can_previous: bool
    can_next: bool


class OrdersPageResponse(BaseModel):
    """One page of the order table."""

    rows: list[OrderRowSchema]
    stats: OrderStats
    pagination: PaginationSchema
    selected_count: int
    visible_columns: list[str]
    loading: bool
    loaded: bool
    error: str | None = None
    fetched_at: datetime | None = None


class OrderGroupSchema(BaseModel):
    """Orders sharing one update date."""

    date: str
    orders: list[OrderRowSchema]


class SyncResponse(BaseModel):
    """Result of a manual sync."""

    success: bool
    order_id: str
    status: str
    message: str
    refetched: bool
    backend_response: dict[str, Any] = Field(default_factory=dict)


class RefreshResponse(BaseModel):
    """Result of a manual refresh."""

    success: bool
    stats: OrderStats
    error: str | None = None
