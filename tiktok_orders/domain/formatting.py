"""Display helpers for orders.

Pure functions used by the dashboard. None of them modify the order.
"""

from collections.abc import Iterable
from datetime import datetime, tzinfo
from zoneinfo import ZoneInfo

from tiktok_orders.domain.models import Order, OrderStatus

_DAY_NAMES = ("Senin", "Selasa", "Rabu", "Kamis", "Jumat", "Sabtu", "Minggu")
_MONTH_NAMES = (
    "Januari",
    "Februari",
    "Maret",
    "April",
    "Mei",
    "Juni",
    "Juli",
    "Agustus",
    "September",
    "Oktober",
    "November",
    "Desember",
)


def _localize(order: Order, tz: tzinfo | str) -> datetime:
    zone = ZoneInfo(tz) if isinstance(tz, str) else tz
    return order.updated_at.astimezone(zone)


def format_update_time(order: Order, tz: tzinfo | str = "Asia/Jakarta") -> str:
    """Format the update time the way id-ID locales do.

    Example: ``14/11/2023, 05.13.20``.
    """
    return _localize(order, tz).strftime("%d/%m/%Y, %H.%M.%S")


def format_long_date(order: Order, tz: tzinfo | str = "Asia/Jakarta") -> str:
    """Long date label, e.g. ``Selasa, 14 November 2023``."""
    local = _localize(order, tz)
    return (
        f"{_DAY_NAMES[local.weekday()]}, {local.day} "
        f"{_MONTH_NAMES[local.month - 1]} {local.year}"
    )


def humanize_status(status: str) -> str:
    """Replace underscores with spaces: ``AWAITING_COLLECTION`` -> ``AWAITING COLLECTION``."""
    return status.replace("_", " ")


def status_tone(status: str) -> str:
    """Badge colour for a status."""
    if status == OrderStatus.COMPLETED.value:
        return "green"
    if status == OrderStatus.CANCELLED.value:
        return "red"
    return "yellow"


def sync_badge(order: Order) -> str:
    return "✅" if order.order_sync else "❌"


def group_by_date(
    orders: Iterable[Order],
    tz: tzinfo | str = "Asia/Jakarta",
) -> dict[str, list[Order]]:
    """Group orders under their long update-date label.

    Groups keep the order in which their first member appears.
    """
    groups: dict[str, list[Order]] = {}
    for order in orders:
        groups.setdefault(format_long_date(order, tz), []).append(order)
    return groups
