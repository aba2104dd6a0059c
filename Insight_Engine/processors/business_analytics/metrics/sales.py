"""
Sales Analytics — Revenue, customer-mix, status and delivery series.

Every function is one group_and_reduce call with an explicit sort contract:

    revenue_by_month          key asc (chronological 'YYYY-MM')
    revenue_by_region         value desc
    orders_by_customer_type   first-seen order
    orders_by_status          first-seen order
    top_products              value desc, top N
    delivery_time_by_month    key asc, average

Orders whose date does not parse are left out of the monthly series only.
"""

from __future__ import annotations

import logging
from typing import Sequence

from Insight_Engine.config import AnalyticsSettings, settings as default_settings

from ..core.aggregation import average_by, count_by, sum_by
from ..core.cleaning import month_key
from ..core.results import computation
from ..core.schemas import OrderRecord

logger = logging.getLogger(__name__)

UNKNOWN = "Unknown"


def _order_month(order: OrderRecord) -> str | None:
    key = month_key(order.date)
    if key is None:
        logger.debug("Order %s skipped from monthly series: bad date %r", order.order_id, order.date)
    return key


@computation(fallback=list)
def revenue_by_month(orders: Sequence[OrderRecord]) -> list[dict]:
    """[{"period": "2023-01", "revenue": 1000.0, "orders": 1, "is_forecast": False}, ...]"""
    rows = sum_by(orders, _order_month, lambda o: o.total_sale, sort_by="key")
    return [
        {"period": r["key"], "revenue": r["value"], "orders": r["count"], "is_forecast": False}
        for r in rows
    ]


@computation(fallback=list)
def revenue_by_region(orders: Sequence[OrderRecord]) -> list[dict]:
    """[{"key": "North", "value": 52000.0, "count": 12}, ...] highest revenue first."""
    return sum_by(
        orders,
        lambda o: o.region or UNKNOWN,
        lambda o: o.total_sale,
        sort_by="value",
        descending=True,
    )


@computation(fallback=list)
def orders_by_customer_type(orders: Sequence[OrderRecord]) -> list[dict]:
    """New vs. Returning (etc.) order counts."""
    return count_by(orders, lambda o: o.customer_type or UNKNOWN)


@computation(fallback=list)
def orders_by_status(orders: Sequence[OrderRecord]) -> list[dict]:
    """Order counts per status."""
    return count_by(orders, lambda o: o.status or UNKNOWN)


@computation(fallback=list)
def top_products(
    orders: Sequence[OrderRecord],
    cfg: AnalyticsSettings = default_settings,
) -> list[dict]:
    """Products generating the most revenue, truncated to TOP_PRODUCTS."""
    return sum_by(
        orders,
        lambda o: o.product or UNKNOWN,
        lambda o: o.total_sale,
        sort_by="value",
        descending=True,
        limit=cfg.TOP_PRODUCTS,
    )


@computation(fallback=list)
def delivery_time_by_month(orders: Sequence[OrderRecord]) -> list[dict]:
    """[{"period": "2023-01", "avg_delivery_days": 4.5, "orders": 10}, ...]"""
    rows = average_by(
        orders, _order_month, lambda o: o.delivery_time_days, sort_by="key"
    )
    return [
        {"period": r["key"], "avg_delivery_days": r["value"], "orders": r["count"]}
        for r in rows
    ]
