"""Seller dashboard — performance summary for professional accounts.

``fetch_performance`` loads the raw payload from the storefront API and
``summarize_performance`` turns it into the figures the dashboard shows.
The summary is a pure function of the payload and the reference date.

Every amount in the payload is converted with the payload's declared
``amount_unit``; a payload without one is rejected rather than guessed.
"""

from collections import defaultdict
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal

import structlog

from shared.http import ApiClient, ApiError
from shared.money import ZERO, coerce_decimal, to_major_units

logger = structlog.get_logger(__name__)

PERFORMANCE_PATH = "/performance.php"
TOP_PRODUCTS_LIMIT = 5

ORDER_ID_FIELDS = ("Id_commande", "id_commande", "id")
ORDER_DATE_FIELDS = ("date", "commande_date", "date_commande", "Date_commande")
ORDER_TOTAL_FIELDS = ("total", "commande_total")


class DashboardError(Exception):
    """The performance endpoint did not return a usable payload."""


@dataclass(frozen=True)
class OrderPoint:
    id: str | None
    day: date
    total: Decimal


@dataclass(frozen=True)
class DailyRevenue:
    day: date
    total: Decimal


@dataclass(frozen=True)
class TopProduct:
    id_product: str | None
    name: str
    revenue: Decimal
    orders: int
    qty_sold: int


@dataclass(frozen=True)
class PerformanceSummary:
    total_products: int
    online_products: int
    out_of_stock: int
    orders_count_month: int
    revenue_month: Decimal
    average_basket_month: Decimal
    series: list[DailyRevenue] = field(default_factory=list)
    top_products: list[TopProduct] = field(default_factory=list)
    lifetime_orders: int = 0
    lifetime_items_sold: int = 0
    lifetime_revenue: Decimal = ZERO


def _first(raw: Mapping, fields):
    for name in fields:
        value = raw.get(name)
        if value is not None and value != "":
            return value
    return None


def _parse_day(value) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.fromisoformat(str(value).strip()).date()
    except ValueError:
        return None


def _as_list(value) -> list:
    return value if isinstance(value, list) else []


def _int(value) -> int:
    return int(coerce_decimal(value))


def _orders(payload: Mapping, unit) -> list[OrderPoint]:
    points = []
    for raw in _as_list(payload.get("orders")):
        if not isinstance(raw, Mapping):
            continue
        day = _parse_day(_first(raw, ORDER_DATE_FIELDS))
        if day is None:
            continue
        order_id = _first(raw, ORDER_ID_FIELDS)
        points.append(
            OrderPoint(
                id=str(order_id) if order_id is not None else None,
                day=day,
                total=to_major_units(_first(raw, ORDER_TOTAL_FIELDS), unit, field="total"),
            )
        )
    return sorted(points, key=lambda point: point.day)


def _top_products(payload: Mapping, unit) -> list[TopProduct]:
    products = []
    for raw in _as_list(payload.get("by_product")):
        if not isinstance(raw, Mapping):
            continue
        id_product = raw.get("id_product")
        products.append(
            TopProduct(
                id_product=str(id_product) if id_product is not None else None,
                name=raw.get("name") or f"Product #{id_product}",
                revenue=to_major_units(raw.get("revenue"), unit, field="revenue"),
                orders=_int(raw.get("orders_count") or raw.get("orders")),
                qty_sold=_int(raw.get("qty_sold")),
            )
        )
    products.sort(key=lambda product: product.revenue, reverse=True)
    return products[:TOP_PRODUCTS_LIMIT]


def summarize_performance(payload: Mapping, today: date | None = None) -> PerformanceSummary:
    """Dashboard figures for the month containing ``today``."""
    today = today or date.today()
    unit = payload.get("amount_unit")

    products = [p for p in _as_list(payload.get("products")) if isinstance(p, Mapping)]
    out_of_stock = sum(1 for p in products if coerce_decimal(p.get("stock")) <= 0)

    orders = _orders(payload, unit)
    month_orders = [o for o in orders if o.day.year == today.year and o.day.month == today.month]
    revenue_month = sum((o.total for o in month_orders), ZERO)
    average_basket = revenue_month / len(month_orders) if month_orders else ZERO

    by_day = defaultdict(lambda: ZERO)
    for order in orders:
        by_day[order.day] += order.total

    totals = payload.get("totals")
    if not isinstance(totals, Mapping):
        totals = {}

    return PerformanceSummary(
        total_products=len(products),
        online_products=max(0, len(products) - out_of_stock),
        out_of_stock=out_of_stock,
        orders_count_month=len(month_orders),
        revenue_month=revenue_month,
        average_basket_month=average_basket,
        series=[DailyRevenue(day=day, total=total) for day, total in sorted(by_day.items())],
        top_products=_top_products(payload, unit),
        lifetime_orders=_int(totals.get("orders_count")),
        lifetime_items_sold=_int(totals.get("items_sold")),
        lifetime_revenue=to_major_units(totals.get("revenue"), unit, field="revenue") if totals else ZERO,
    )


def fetch_performance(client: ApiClient, user_id) -> dict:
    """Load the seller's raw performance payload."""
    if not user_id:
        raise DashboardError("Unknown user")

    try:
        data = client.get(PERFORMANCE_PATH, params={"user_id": user_id})
    except ApiError as exc:
        message = exc.data.get("error") if isinstance(exc.data, dict) else None
        logger.warning("Performance request failed", user_id=str(user_id), status=exc.status)
        raise DashboardError(message or f"API error ({exc.status})") from exc

    if not isinstance(data, dict):
        raise DashboardError("Performance endpoint returned a non-JSON response")
    if data.get("ok") is not True:
        raise DashboardError(data.get("error") or "Performance endpoint reported a failure")

    return data
