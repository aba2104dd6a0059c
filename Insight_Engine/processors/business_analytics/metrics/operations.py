"""
Operational Efficiency — Delivery performance by region.
"""

from __future__ import annotations

from typing import Sequence

from ..core.aggregation import average_by
from ..core.results import computation
from ..core.schemas import OrderRecord


@computation(fallback=list)
def calculate_delivery_performance(orders: Sequence[OrderRecord]) -> list[dict]:
    """
    Average delivery days per region, slowest region first.

    Returns:
        [{"region": "East", "avg_delivery_days": 6.2, "order_count": 41}, ...]
    """
    rows = average_by(
        orders,
        lambda o: o.region or "Unknown",
        lambda o: o.delivery_time_days,
        sort_by="value",
        descending=True,
    )
    return [
        {"region": r["key"], "avg_delivery_days": r["value"], "order_count": r["count"]}
        for r in rows
    ]
