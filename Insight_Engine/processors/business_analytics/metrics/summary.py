"""
Summary Statistics — Headline cards for the dashboard.

Single pass over the orders; no persisted counters. Empty input gives an
all-zero summary, never an error.
"""

from __future__ import annotations

from typing import Sequence

from Insight_Engine.config import MATERIALS

from ..core.results import computation
from ..core.schemas import MaterialPriceRecord, OrderRecord


def _empty_summary() -> dict:
    return {
        "total_orders": 0,
        "total_revenue": 0.0,
        "avg_material_cost": 0.0,
        "total_customers": 0,
        "avg_order_value": 0.0,
        "unique_products": 0,
        "returning_customer_orders": 0,
        "avg_material_price": 0.0,
    }


@computation(fallback=_empty_summary)
def calculate_summary_stats(
    orders: Sequence[OrderRecord],
    material_prices: Sequence[MaterialPriceRecord] = (),
) -> dict:
    """
    Compute the four headline figures plus their sub-captions.

    Returns:
        {
          "total_orders": 1200,
          "total_revenue": 18250000.0,
          "avg_material_cost": 4120.5,
          "total_customers": 310,
          "avg_order_value": 15208.3,
          "unique_products": 14,
          "returning_customer_orders": 640,
          "avg_material_price": 188.2      # mean of the daily six-material average
        }
    """
    total_orders = 0
    total_revenue = 0.0
    total_material_cost = 0.0
    customers: set[str] = set()
    products: set[str] = set()
    returning = 0

    for order in orders:
        total_orders += 1
        total_revenue += order.total_sale
        total_material_cost += order.raw_materials_cost
        customers.add(order.customer_id)
        products.add(order.product)
        if order.customer_type == "Returning":
            returning += 1

    daily_averages = [
        sum(row.prices().values()) / len(MATERIALS) for row in material_prices
    ]

    return {
        "total_orders": total_orders,
        "total_revenue": total_revenue,
        "avg_material_cost": total_material_cost / total_orders if total_orders else 0.0,
        "total_customers": len(customers),
        "avg_order_value": total_revenue / total_orders if total_orders else 0.0,
        "unique_products": len(products),
        "returning_customer_orders": returning,
        "avg_material_price": (
            sum(daily_averages) / len(daily_averages) if daily_averages else 0.0
        ),
    }
