"""Order API endpoints.

JSON surface of the order table:
- GET /orders - one filtered, sorted page of orders
- GET /orders/stats - aggregate counts
- GET /orders/by-date - filtered orders grouped by update date
- POST /orders/refresh - refetch from the backend
- POST /orders/{order_id}/sync - manual sync of one order
"""

from typing import Annotated
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import RedirectResponse

from tiktok_orders.api.schemas import (
    ErrorResponse,
    OrderGroupSchema,
    OrderRowSchema,
    OrdersPageResponse,
    PaginationSchema,
    RefreshResponse,
    SyncResponse,
)
from tiktok_orders.application.order_store import OrderStore
from tiktok_orders.application.sync_service import OrderSyncService, SyncStatus
from tiktok_orders.application.table_view import TableState, build_table_view
from tiktok_orders.domain.formatting import (
    format_update_time,
    group_by_date,
    humanize_status,
)
from tiktok_orders.domain.models import Order, OrderStats
from tiktok_orders.infrastructure.config import Settings

router = APIRouter(prefix="/orders", tags=["Orders"])


# ============================================================================
# Dependencies
# ============================================================================


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> OrderStore:
    return request.app.state.order_store


def get_sync_service(request: Request) -> OrderSyncService:
    return request.app.state.sync_service


def get_table_state(
    request: Request,
    settings: Annotated[Settings, Depends(get_settings)],
) -> TableState:
    """Parse table view state from the query string."""
    return TableState.from_query(
        request.query_params.multi_items(), default_page_size=settings.page_size
    )


# ============================================================================
# Converters
# ============================================================================


def order_to_row(
    order: Order,
    state: TableState,
    sync_service: OrderSyncService,
    tz: str,
) -> OrderRowSchema:
    """Convert an Order into a display row."""
    return OrderRowSchema(
        id=order.id,
        order_id=order.order_id,
        order_status=order.order_status,
        update_time=order.update_time,
        order_sync=order.order_sync,
        created_date=order.created_date,
        status_label=humanize_status(order.order_status),
        updated_display=format_update_time(order, tz),
        selected=state.is_selected(order),
        can_sync=sync_service.can_sync(order.order_id),
    )


def _safe_redirect_target(target: str) -> str | None:
    """Only allow local absolute paths as redirect targets."""
    if target.startswith("/") and not target.startswith("//"):
        return target
    return None


# ============================================================================
# Endpoints
# ============================================================================


@router.get("", response_model=OrdersPageResponse)
async def list_orders(
    store: Annotated[OrderStore, Depends(get_store)],
    sync_service: Annotated[OrderSyncService, Depends(get_sync_service)],
    settings: Annotated[Settings, Depends(get_settings)],
    state: Annotated[TableState, Depends(get_table_state)],
) -> OrdersPageResponse:
    """Get one page of the order table.

    Query parameters: ``order_id`` (substring), ``status``, ``sync``,
    ``sort`` (``column:asc|desc``, comma separated), ``page`` (1-based),
    ``page_size``, ``selected`` and ``hide``.
    """
    view = build_table_view(store.orders, state)
    return OrdersPageResponse(
        rows=[
            order_to_row(order, state, sync_service, settings.display_timezone)
            for order in view.rows
        ],
        stats=store.stats,
        pagination=PaginationSchema(
            page=view.page_index + 1,
            page_size=view.page_size,
            page_count=view.page_count,
            filtered_count=view.filtered_count,
            can_previous=view.can_previous,
            can_next=view.can_next,
        ),
        selected_count=view.selected_count,
        visible_columns=[c.value for c in view.visible_columns],
        loading=store.loading,
        loaded=store.loaded,
        error=store.last_error,
        fetched_at=store.last_fetched_at,
    )


@router.get("/stats", response_model=OrderStats)
async def get_stats(
    store: Annotated[OrderStore, Depends(get_store)],
) -> OrderStats:
    """Get aggregate counts over the current order collection."""
    return store.stats


@router.get("/by-date", response_model=list[OrderGroupSchema])
async def list_orders_by_date(
    store: Annotated[OrderStore, Depends(get_store)],
    sync_service: Annotated[OrderSyncService, Depends(get_sync_service)],
    settings: Annotated[Settings, Depends(get_settings)],
    state: Annotated[TableState, Depends(get_table_state)],
) -> list[OrderGroupSchema]:
    """Get filtered, sorted orders grouped by update date (not paginated)."""
    ordered = state.sort([o for o in store.orders if state.matches(o)])
    groups = group_by_date(ordered, settings.display_timezone)
    return [
        OrderGroupSchema(
            date=label,
            orders=[
                order_to_row(o, state, sync_service, settings.display_timezone)
                for o in orders
            ],
        )
        for label, orders in groups.items()
    ]


@router.post(
    "/refresh",
    response_model=RefreshResponse,
    responses={502: {"model": ErrorResponse, "description": "Backend unavailable"}},
)
async def refresh_orders(
    store: Annotated[OrderStore, Depends(get_store)],
) -> RefreshResponse:
    """Refetch the order list from the backend.

    On failure the previous orders stay in place.
    """
    if not await store.refresh():
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail={
                "error_code": "FETCH_FAILED",
                "message": store.last_error or "Failed to fetch orders",
            },
        )
    return RefreshResponse(success=True, stats=store.stats)


@router.post(
    "/{order_id}/sync",
    response_model=SyncResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid order id"},
        502: {"model": ErrorResponse, "description": "Backend sync failed"},
    },
)
async def sync_order(
    order_id: str,
    sync_service: Annotated[OrderSyncService, Depends(get_sync_service)],
    next_url: Annotated[str | None, Query(alias="next")] = None,
):
    """Trigger a manual sync for one order.

    With ``next`` set (HTML forms), answers with a 303 redirect back to
    the dashboard and a ``notice`` message instead of JSON.
    """
    result = await sync_service.sync(order_id)

    target = _safe_redirect_target(next_url) if next_url else None
    if target is not None:
        separator = "&" if "?" in target else "?"
        return RedirectResponse(
            url=f"{target}{separator}{urlencode({'notice': result.message})}",
            status_code=status.HTTP_303_SEE_OTHER,
        )

    if result.status is SyncStatus.INVALID:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error_code": "INVALID_ORDER_ID", "message": result.message},
        )
    if result.status is SyncStatus.FAILED:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail={"error_code": "SYNC_FAILED", "message": result.message},
        )
    return SyncResponse(**result.to_dict())
