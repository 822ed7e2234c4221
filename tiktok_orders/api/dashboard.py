"""HTML order dashboard.

Server-rendered view of the order table. All view state (filters, sort,
page, selection, hidden columns) travels in the query string, so every
link renders a fresh ``TableState``.
"""

import html
from typing import Annotated
from urllib.parse import quote, urlencode

from fastapi import APIRouter, Depends, Query
from fastapi.responses import HTMLResponse

from tiktok_orders.api.orders import (
    get_settings,
    get_store,
    get_sync_service,
    get_table_state,
)
from tiktok_orders.application.order_store import OrderStore
from tiktok_orders.application.sync_service import OrderSyncService
from tiktok_orders.application.table_view import (
    DISPLAY_COLUMNS,
    Column,
    TableState,
    TableView,
    build_table_view,
)
from tiktok_orders.domain.formatting import (
    format_update_time,
    humanize_status,
    status_tone,
    sync_badge,
)
from tiktok_orders.domain.models import Order, OrderStats, OrderStatus
from tiktok_orders.infrastructure.config import Settings

router = APIRouter(tags=["Dashboard"])

COLUMN_HEADERS = {
    Column.ORDER_ID: "ORDER ID",
    Column.ORDER_STATUS: "STATUS",
    Column.UPDATE_TIME: "UPDATED",
    Column.ORDER_SYNC: "SYNC STATUS",
}


def _escape(value: object) -> str:
    return html.escape(str(value))


def _href(state: TableState) -> str:
    query = state.to_query()
    if not query:
        return "/"
    return "/?" + urlencode(query)


def _render_stats(stats: OrderStats) -> str:
    metrics = [
        ("Total Orders", stats.total),
        ("Awaiting Collection", stats.awaiting_collection),
        ("Completed", stats.completed),
        ("Cancelled", stats.cancelled),
        ("In Transit", stats.in_transit),
        ("Synced", stats.synced),
    ]
    metric_html = "".join(
        f"<div class='metric'><span class='label'>{_escape(label)}</span>"
        f"<span class='value'>{_escape(value)}</span></div>"
        for label, value in metrics
    )
    return f"<section class='summary'>{metric_html}</section>"


def _render_toolbar(state: TableState, view: TableView) -> str:
    statuses = [s.value for s in OrderStatus]
    if state.status_filter and state.status_filter not in statuses:
        statuses.append(state.status_filter)
    status_options = "".join(
        f"<option value='{_escape(s)}'{' selected' if state.status_filter == s else ''}>"
        f"{_escape(humanize_status(s))}</option>"
        for s in statuses
    )
    sync_value = "" if state.sync_filter is None else str(state.sync_filter).lower()
    sync_options = "".join(
        f"<option value='{value}'{' selected' if sync_value == value else ''}>{label}</option>"
        for value, label in (("", "Any sync"), ("true", "Synced"), ("false", "Not synced"))
    )
    # Hidden inputs keep sort, selection and hidden columns across a filter submit.
    hidden_inputs = "".join(
        f"<input type='hidden' name='{_escape(k)}' value='{_escape(v)}' />"
        for k, v in state.to_query()
        if k in ("sort", "page_size", "selected", "hide")
    )

    prev_button = _page_button("Previous", state.previous_page(), view.can_previous)
    next_button = _page_button("Next", state.next_page(view.page_count), view.can_next)

    return f"""
    <div class="toolbar">
        <form method="get" action="/" class="filters">
            <input type="text" name="order_id" placeholder="Filter orders by ID..."
                   value="{_escape(state.order_id_filter or '')}" />
            <select name="status"><option value="">All statuses</option>{status_options}</select>
            <select name="sync">{sync_options}</select>
            {hidden_inputs}
            <button type="submit">Apply</button>
        </form>
        <div class="pager">{prev_button}{next_button}</div>
    </div>
    """


def _page_button(label: str, target: TableState, enabled: bool) -> str:
    if not enabled:
        return f"<button type='button' disabled>{label}</button>"
    return f"<a class='button' href='{_escape(_href(target))}'>{label}</a>"


def _render_header(state: TableState, columns: tuple[Column, ...]) -> str:
    cells = ["<th></th>"]
    for column in columns:
        direction = state.sort_direction(column)
        arrow = {"asc": " ↑", "desc": " ↓"}.get(direction or "", " ↕")
        href = _escape(_href(state.toggle_sort(column)))
        cells.append(
            f"<th><a href='{href}'>{_escape(COLUMN_HEADERS[column])}{arrow}</a></th>"
        )
    cells.append("<th>ACTIONS</th>")
    return "<tr>" + "".join(cells) + "</tr>"


def _render_cell(order: Order, column: Column, tz: str) -> str:
    if column is Column.ORDER_ID:
        return f"<td class='order-id'>{_escape(order.order_id)}</td>"
    if column is Column.ORDER_STATUS:
        return (
            f"<td><span class='status {status_tone(order.order_status)}'>"
            f"{_escape(humanize_status(order.order_status))}</span></td>"
        )
    if column is Column.UPDATE_TIME:
        return f"<td>{_escape(format_update_time(order, tz))}</td>"
    return f"<td>{sync_badge(order)}</td>"


def _render_row(
    order: Order,
    state: TableState,
    view: TableView,
    sync_service: OrderSyncService,
    tz: str,
) -> str:
    selected = state.is_selected(order)
    select_href = _escape(_href(state.toggle_selection(order.order_id)))
    checkbox = f"<a class='select' href='{select_href}'>{'☑' if selected else '☐'}</a>"
    cells = "".join(_render_cell(order, column, tz) for column in view.visible_columns)

    next_url = _escape(urlencode({"next": _href(state)}))
    disabled = "" if sync_service.can_sync(order.order_id) else " disabled"
    action = (
        f"<form method='post' action='/orders/{_escape(quote(order.order_id, safe=''))}/sync?{next_url}'>"
        f"<button type='submit'{disabled}>Sync</button></form>"
    )
    state_attr = " data-state='selected'" if selected else ""
    return f"<tr{state_attr}><td>{checkbox}</td>{cells}<td>{action}</td></tr>"


def _render_table(
    state: TableState,
    view: TableView,
    sync_service: OrderSyncService,
    tz: str,
) -> str:
    header = _render_header(state, view.visible_columns)
    if view.rows:
        body = "".join(
            _render_row(order, state, view, sync_service, tz) for order in view.rows
        )
    else:
        colspan = len(view.visible_columns) + 2
        body = f"<tr><td colspan='{colspan}' class='empty'>No results.</td></tr>"

    column_toggles = "".join(
        f"<a class='column-toggle{' off' if column in state.hidden_columns else ''}' "
        f"href='{_escape(_href(state.toggle_column(column)))}'>{_escape(COLUMN_HEADERS[column])}</a>"
        for column in DISPLAY_COLUMNS
    )

    return f"""
    <div class="columns">{column_toggles}</div>
    <table class="orders">
        <thead>{header}</thead>
        <tbody>{body}</tbody>
    </table>
    <div class="footer">
        <div>{view.selected_count} of {view.filtered_count} row(s) selected.</div>
        <div>Page {view.page_index + 1} of {view.page_count}</div>
    </div>
    """


def render_dashboard(
    store: OrderStore,
    state: TableState,
    sync_service: OrderSyncService,
    tz: str = "Asia/Jakarta",
    notice: str | None = None,
) -> str:
    """Return the dashboard HTML for the store's current snapshot."""
    if store.loading and not store.loaded:
        content = "<div class='spinner' role='status'>Loading orders...</div>"
    else:
        view = build_table_view(store.orders, state)
        content = (
            _render_stats(store.stats)
            + _render_toolbar(state, view)
            + _render_table(state, view, sync_service, tz)
        )

    banners = ""
    if store.last_error:
        banners += (
            f"<div class='banner error' role='alert'>"
            f"Failed to refresh orders: {_escape(store.last_error)}</div>"
        )
    if notice:
        banners += f"<div class='banner notice'>{_escape(notice)}</div>"

    return f"""<!DOCTYPE html>
<html lang="id">
<head>
    <meta charset="utf-8" />
    <title>TikTok Orders</title>
    <style>
        body {{ font-family: system-ui, sans-serif; margin: 2rem; color: #111; }}
        .summary {{ display: grid; grid-template-columns: repeat(6, 1fr); gap: 1rem; margin-bottom: 1.5rem; }}
        .metric {{ border: 1px solid #ddd; border-radius: 0.5rem; padding: 1rem; }}
        .metric .label {{ display: block; font-size: 0.8rem; color: #555; }}
        .metric .value {{ font-size: 1.5rem; font-weight: 700; }}
        .toolbar, .footer {{ display: flex; justify-content: space-between; padding: 0.75rem 0; }}
        table.orders {{ width: 100%; border-collapse: collapse; }}
        table.orders th, table.orders td {{ border-bottom: 1px solid #eee; padding: 0.5rem; text-align: left; }}
        tr[data-state='selected'] {{ background: #f3f4f6; }}
        .status {{ padding: 0.1rem 0.5rem; border-radius: 999px; font-size: 0.75rem; }}
        .status.green {{ background: #dcfce7; color: #166534; }}
        .status.red {{ background: #fee2e2; color: #991b1b; }}
        .status.yellow {{ background: #fef9c3; color: #854d0e; }}
        .column-toggle.off {{ text-decoration: line-through; color: #999; }}
        .banner.error {{ background: #fee2e2; padding: 0.75rem; margin-bottom: 1rem; }}
        .banner.notice {{ background: #e0f2fe; padding: 0.75rem; margin-bottom: 1rem; }}
        .empty {{ text-align: center; height: 6rem; }}
    </style>
</head>
<body>
    <h2>TikTok Orders</h2>
    <p>Overview of your TikTok orders and their status.</p>
    {banners}
    {content}
</body>
</html>
"""


@router.get("/", response_class=HTMLResponse)
async def dashboard(
    store: Annotated[OrderStore, Depends(get_store)],
    sync_service: Annotated[OrderSyncService, Depends(get_sync_service)],
    settings: Annotated[Settings, Depends(get_settings)],
    state: Annotated[TableState, Depends(get_table_state)],
    notice: Annotated[str | None, Query()] = None,
) -> HTMLResponse:
    """Render the order dashboard."""
    return HTMLResponse(
        render_dashboard(
            store,
            state,
            sync_service,
            tz=settings.display_timezone,
            notice=notice,
        )
    )
