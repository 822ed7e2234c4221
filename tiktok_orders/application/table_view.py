"""Order table view.

Client-side table pipeline over a fetched order collection:
filter -> sort -> paginate, plus row selection and column visibility.

``TableState`` is an immutable value; every state change returns a new
instance. ``build_table_view`` is pure and never touches the orders.
"""

import math
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Self

from tiktok_orders.domain.models import Order

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


class Column(str, Enum):
    """Order table columns."""

    ID = "id"
    ORDER_ID = "order_id"
    ORDER_STATUS = "order_status"
    UPDATE_TIME = "update_time"
    ORDER_SYNC = "order_sync"
    CREATED_DATE = "created_date"


# Columns shown by the dashboard, in display order.
DISPLAY_COLUMNS: tuple[Column, ...] = (
    Column.ORDER_ID,
    Column.ORDER_STATUS,
    Column.UPDATE_TIME,
    Column.ORDER_SYNC,
)

FILTERABLE_COLUMNS = frozenset(
    {Column.ORDER_ID, Column.ORDER_STATUS, Column.ORDER_SYNC}
)

_SORT_KEYS: dict[Column, Callable[[Order], Any]] = {
    Column.ID: lambda order: order.id,
    Column.ORDER_ID: lambda order: order.order_id,
    Column.ORDER_STATUS: lambda order: order.order_status,
    Column.UPDATE_TIME: lambda order: order.update_timestamp,
    Column.ORDER_SYNC: lambda order: order.order_sync,
    Column.CREATED_DATE: lambda order: order.created_date,
}

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class SortSpec:
    """One sort key."""

    column: Column
    descending: bool = False

    def __str__(self) -> str:
        return f"{self.column.value}:{'desc' if self.descending else 'asc'}"


def _parse_bool(value: str) -> bool | None:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    return None


def _split(value: str | None) -> list[str]:
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def _parse_column(value: str) -> Column | None:
    try:
        return Column(value)
    except ValueError:
        return None


@dataclass(frozen=True)
class TableState:
    """Transient view state for the order table.

    Filters combine with AND. Sorting is stable; earlier specs take
    precedence. Selection is keyed by ``order_id`` so it survives
    re-sorting, re-filtering and paging.
    """

    order_id_filter: str | None = None
    status_filter: str | None = None
    sync_filter: bool | None = None
    sorting: tuple[SortSpec, ...] = ()
    page_index: int = 0
    page_size: int = DEFAULT_PAGE_SIZE
    selected: frozenset[str] = field(default_factory=frozenset)
    hidden_columns: frozenset[Column] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if self.page_size < 1:
            raise ValueError("page_size must be at least 1")
        if self.page_index < 0:
            raise ValueError("page_index must not be negative")

    # =========================================================================
    # Filtering
    # =========================================================================

    def set_filter(self, column: Column, value: str | bool | None) -> Self:
        """Set or clear (``None`` / empty string) the filter for a column.

        Changing a filter returns to the first page.
        """
        if column not in FILTERABLE_COLUMNS:
            raise ValueError(f"Column '{column.value}' cannot be filtered")

        if value == "":
            value = None

        if column is Column.ORDER_ID:
            return replace(self, order_id_filter=value, page_index=0)
        if column is Column.ORDER_STATUS:
            return replace(self, status_filter=value, page_index=0)
        if isinstance(value, str):
            value = _parse_bool(value)
        return replace(self, sync_filter=value, page_index=0)

    def clear_filters(self) -> Self:
        return replace(
            self,
            order_id_filter=None,
            status_filter=None,
            sync_filter=None,
            page_index=0,
        )

    def matches(self, order: Order) -> bool:
        """Whether an order passes every active filter."""
        if self.order_id_filter and (
            self.order_id_filter.lower() not in order.order_id.lower()
        ):
            return False
        if self.status_filter and order.order_status != self.status_filter:
            return False
        if self.sync_filter is not None and order.order_sync != self.sync_filter:
            return False
        return True

    # =========================================================================
    # Sorting
    # =========================================================================

    def sort_direction(self, column: Column) -> str | None:
        """``"asc"``, ``"desc"`` or ``None`` for a column."""
        for spec in self.sorting:
            if spec.column is column:
                return "desc" if spec.descending else "asc"
        return None

    def toggle_sort(self, column: Column, multi: bool = False) -> Self:
        """Cycle a column through ascending -> descending -> unsorted.

        Args:
            column: Column to toggle.
            multi: Keep the other sort keys instead of replacing them.
        """
        current = next((s for s in self.sorting if s.column is column), None)
        if current is None:
            new_spec: SortSpec | None = SortSpec(column)
        elif not current.descending:
            new_spec = SortSpec(column, descending=True)
        else:
            new_spec = None

        if not multi:
            sorting = (new_spec,) if new_spec else ()
        elif current is None:
            sorting = self.sorting + (new_spec,)
        else:
            sorting = tuple(
                new_spec if s.column is column else s
                for s in self.sorting
                if s.column is not column or new_spec is not None
            )
        return replace(self, sorting=sorting)

    def sort(self, orders: Sequence[Order]) -> list[Order]:
        """Stable multi-key sort."""
        rows = list(orders)
        # Python's sort is stable, so apply the least significant key first.
        for spec in reversed(self.sorting):
            rows.sort(key=_SORT_KEYS[spec.column], reverse=spec.descending)
        return rows

    # =========================================================================
    # Pagination
    # =========================================================================

    def go_to_page(self, page_index: int) -> Self:
        return replace(self, page_index=max(page_index, 0))

    def next_page(self, page_count: int) -> Self:
        """Advance one page; stays on the last page."""
        if self.page_index + 1 >= page_count:
            return self
        return replace(self, page_index=self.page_index + 1)

    def previous_page(self) -> Self:
        """Go back one page; stays on the first page."""
        if self.page_index == 0:
            return self
        return replace(self, page_index=self.page_index - 1)

    def with_page_size(self, page_size: int) -> Self:
        return replace(self, page_size=page_size, page_index=0)

    # =========================================================================
    # Selection and visibility
    # =========================================================================

    def is_selected(self, order: Order) -> bool:
        return order.order_id in self.selected

    def toggle_selection(self, order_id: str) -> Self:
        if order_id in self.selected:
            return replace(self, selected=self.selected - {order_id})
        return replace(self, selected=self.selected | {order_id})

    def select_all(self, orders: Sequence[Order]) -> Self:
        return replace(
            self, selected=self.selected | {o.order_id for o in orders}
        )

    def clear_selection(self) -> Self:
        return replace(self, selected=frozenset())

    def toggle_column(self, column: Column) -> Self:
        if column in self.hidden_columns:
            return replace(self, hidden_columns=self.hidden_columns - {column})
        return replace(self, hidden_columns=self.hidden_columns | {column})

    @property
    def visible_columns(self) -> tuple[Column, ...]:
        return tuple(c for c in DISPLAY_COLUMNS if c not in self.hidden_columns)

    # =========================================================================
    # Query string
    # =========================================================================

    @classmethod
    def from_query(
        cls,
        params: Mapping[str, str] | Iterable[tuple[str, str]],
        default_page_size: int = DEFAULT_PAGE_SIZE,
    ) -> Self:
        """Build state from dashboard query parameters.

        Unknown columns and malformed numbers are ignored rather than
        rejected, so a hand-edited URL still renders.

        Recognized keys: ``order_id``, ``status``, ``sync``, ``sort``
        (``col:asc,col:desc``), ``page`` (1-based), ``page_size``,
        ``hide`` (comma separated) and ``selected`` (repeated, one order
        code per parameter).

        Args:
            params: A mapping, or key/value pairs when ``selected`` repeats.
            default_page_size: Page size when none is given.
        """
        pairs = params.items() if isinstance(params, Mapping) else params
        values: dict[str, str] = {}
        selected: set[str] = set()
        for key, value in pairs:
            if key == "selected":
                if value:
                    selected.add(value)
            else:
                values[key] = value

        sorting: list[SortSpec] = []
        seen: set[Column] = set()
        for part in _split(values.get("sort")):
            name, _, direction = part.partition(":")
            column = _parse_column(name)
            if column is None or column in seen:
                continue
            seen.add(column)
            sorting.append(SortSpec(column, descending=direction == "desc"))

        page_size = default_page_size
        raw_size = values.get("page_size", "")
        if raw_size.isdigit() and int(raw_size) >= 1:
            page_size = min(int(raw_size), MAX_PAGE_SIZE)

        page_index = 0
        raw_page = values.get("page", "")
        if raw_page.isdigit() and int(raw_page) >= 1:
            page_index = int(raw_page) - 1

        hidden = {
            column
            for column in map(_parse_column, _split(values.get("hide")))
            if column is not None
        }

        return cls(
            order_id_filter=values.get("order_id") or None,
            status_filter=values.get("status") or None,
            sync_filter=_parse_bool(values.get("sync") or ""),
            sorting=tuple(sorting),
            page_index=page_index,
            page_size=page_size,
            selected=frozenset(selected),
            hidden_columns=frozenset(hidden),
        )

    def to_query(self) -> list[tuple[str, str]]:
        """Inverse of ``from_query`` as key/value pairs; omits defaults."""
        query: list[tuple[str, str]] = []
        if self.order_id_filter:
            query.append(("order_id", self.order_id_filter))
        if self.status_filter:
            query.append(("status", self.status_filter))
        if self.sync_filter is not None:
            query.append(("sync", "true" if self.sync_filter else "false"))
        if self.sorting:
            query.append(("sort", ",".join(str(s) for s in self.sorting)))
        if self.page_index:
            query.append(("page", str(self.page_index + 1)))
        if self.page_size != DEFAULT_PAGE_SIZE:
            query.append(("page_size", str(self.page_size)))
        if self.selected:
            query.extend(("selected", order_id) for order_id in sorted(self.selected))
        if self.hidden_columns:
            query.append(("hide", ",".join(sorted(c.value for c in self.hidden_columns))))
        return query


@dataclass(frozen=True)
class TableView:
    """One rendered page of the order table."""

    rows: tuple[Order, ...]
    filtered_count: int
    selected_count: int
    page_index: int
    page_count: int
    page_size: int
    visible_columns: tuple[Column, ...]

    @property
    def can_previous(self) -> bool:
        return self.page_index > 0

    @property
    def can_next(self) -> bool:
        return self.page_index + 1 < self.page_count


def page_count(row_count: int, page_size: int) -> int:
    """Number of pages needed for ``row_count`` rows."""
    return math.ceil(row_count / page_size)


def build_table_view(orders: Sequence[Order], state: TableState) -> TableView:
    """Apply filters, sorting and pagination to an order collection.

    The requested page index is clamped to the available pages.
    """
    filtered = [order for order in orders if state.matches(order)]
    ordered = state.sort(filtered)

    pages = page_count(len(ordered), state.page_size)
    page_index = min(state.page_index, max(pages - 1, 0))
    start = page_index * state.page_size

    return TableView(
        rows=tuple(ordered[start:start + state.page_size]),
        filtered_count=len(ordered),
        selected_count=sum(1 for order in ordered if state.is_selected(order)),
        page_index=page_index,
        page_count=pages,
        page_size=state.page_size,
        visible_columns=state.visible_columns,
    )
