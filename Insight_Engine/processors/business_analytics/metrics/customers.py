"""
Customer Churn Risk — Heuristic warning flags per customer.

Flags (any one makes a customer "at risk"):
    DECLINING_VALUE   second-half average sale < CHURN_VALUE_RATIO x first-half
                      average, halves split at floor(n / 2); needs >= 2 orders
    LOW_SATISFACTION  more than LOW_REVIEW_SHARE of orders scored <= LOW_REVIEW_SCORE
    HAS_RETURNS       at least one return requested
"""

from __future__ import annotations

from enum import Enum
from typing import Sequence

from Insight_Engine.config import AnalyticsSettings, settings as default_settings

from ..core.aggregation import group_and_reduce
from ..core.cleaning import sort_timestamp
from ..core.results import computation
from ..core.schemas import OrderRecord


class ChurnRiskFlag(str, Enum):
    DECLINING_VALUE = "Declining order value"
    LOW_SATISFACTION = "Low satisfaction ratings"
    HAS_RETURNS = "Has requested returns"


def _collect(acc: list, order: OrderRecord) -> list:
    acc.append(order)
    return acc


def _mean_sale(orders: Sequence[OrderRecord]) -> float:
    return sum(o.total_sale for o in orders) / len(orders) if orders else 0.0


def risk_flags(
    orders: Sequence[OrderRecord],
    cfg: AnalyticsSettings = default_settings,
) -> list[ChurnRiskFlag]:
    """Flags for one customer's orders (already sorted oldest first)."""
    flags: list[ChurnRiskFlag] = []

    if len(orders) >= 2:
        half = len(orders) // 2
        first_avg = _mean_sale(orders[:half])
        second_avg = _mean_sale(orders[half:])
        if second_avg < first_avg * cfg.CHURN_VALUE_RATIO:
            flags.append(ChurnRiskFlag.DECLINING_VALUE)

    low_reviews = sum(1 for o in orders if o.review_score <= cfg.LOW_REVIEW_SCORE)
    if low_reviews > 0 and low_reviews / len(orders) > cfg.LOW_REVIEW_SHARE:
        flags.append(ChurnRiskFlag.LOW_SATISFACTION)

    if any(o.return_requested for o in orders):
        flags.append(ChurnRiskFlag.HAS_RETURNS)

    return flags


@computation(fallback=list)
def calculate_churn_risk(
    orders: Sequence[OrderRecord],
    cfg: AnalyticsSettings = default_settings,
) -> list[dict]:
    """
    Customers with at least one risk flag, in first-seen order.

    Returns:
        [
          {
            "customer_id": "C-104",
            "customer_name": "Asha Builders",
            "risk_factors": ["Declining order value", "Has requested returns"],
            "order_count": 6,
            "last_order_date": "2023-11-02"
          },
          ...
        ]
    """
    by_customer = group_and_reduce(
        orders,
        lambda o: o.customer_id,
        _collect,
        initial=list,
    )

    at_risk: list[dict] = []
    for group in by_customer:
        history = sorted(group["value"], key=lambda o: sort_timestamp(o.date))
        flags = risk_flags(history, cfg)
        if not flags:
            continue
        at_risk.append({
            "customer_id": group["key"],
            "customer_name": history[0].customer_name,
            "risk_factors": [f.value for f in flags],
            "order_count": len(history),
            "last_order_date": history[-1].date,
        })
    return at_risk
