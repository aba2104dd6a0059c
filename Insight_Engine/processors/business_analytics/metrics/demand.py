"""
Demand Forecast — Monthly ordered quantity, projected with compounding growth.

Pipeline:
    orders -> monthly quantity (sum, chronological)
           -> project_forward(MULTIPLICATIVE, window 6, horizon 6)
           -> projected quantities rounded to whole units

No orders at all -> the 12-month sample series, flagged as fallback.
"""

from __future__ import annotations

import copy
from typing import Sequence

from Insight_Engine.config import AnalyticsSettings, settings as default_settings

from ..core.aggregation import sum_by
from ..core.cleaning import month_key, round_half_up
from ..core.forecast import ForecastMode, project_forward
from ..core.results import ComputationResult, computation
from ..core.samples import SAMPLE_DEMAND_DATA
from ..core.schemas import OrderRecord


def _sample_demand() -> list[dict]:
    return copy.deepcopy(SAMPLE_DEMAND_DATA)


@computation(fallback=_sample_demand)
def forecast_demand(
    orders: Sequence[OrderRecord],
    cfg: AnalyticsSettings = default_settings,
) -> ComputationResult:
    """
    Historical monthly quantities followed by the projected months.

    Returns (as ComputationResult.data):
        [
          {"period": "2023-01", "quantity": 1200, "is_forecast": False},
          ...
          {"period": "2023-07", "quantity": 1331, "is_forecast": True},
        ]
    """
    if len(orders) == 0:
        return ComputationResult.sample(
            _sample_demand(), "No order data loaded. Showing sample demand."
        )

    monthly = sum_by(orders, lambda o: month_key(o.date), lambda o: o.quantity, sort_by="key")
    history = [
        {"period": r["key"], "quantity": int(r["value"]), "is_forecast": False}
        for r in monthly
    ]

    extended = project_forward(
        history,
        value_fields=("quantity",),
        window_size=cfg.DEMAND_WINDOW,
        horizon=cfg.DEMAND_HORIZON,
        mode=ForecastMode.MULTIPLICATIVE,
        min_points=cfg.DEMAND_MIN_POINTS,
    )

    for point in extended:
        if point["is_forecast"]:
            point["quantity"] = round_half_up(point["quantity"])

    if len(extended) == len(history):
        return ComputationResult.insufficient(extended, "Insufficient data for prediction.")
    return ComputationResult.success(extended)


@computation(fallback=dict)
def demand_insights(series: Sequence[dict]) -> ComputationResult:
    """
    Summarise a demand series (output of forecast_demand).

    Returns:
        {
          "direction": "increase",
          "current_demand": 1600,
          "future_demand": 1910,
          "growth_pct": 19.4,
          "interpretation": "Predicted increase in demand over the next 6 months.",
          "planning": "Consider increasing production capacity ..."
        }
    """
    history = [p for p in series if not p.get("is_forecast")]
    forecast = [p for p in series if p.get("is_forecast")]

    if not forecast:
        return ComputationResult.insufficient(
            {
                "interpretation": "Insufficient data for prediction.",
                "planning": "Upload more order data to receive production planning recommendations.",
            },
            "Insufficient data for prediction.",
        )

    current = history[-1]["quantity"] if history else 0
    future = forecast[-1]["quantity"]
    growth_pct = (future - current) / current * 100 if current > 0 else 0.0
    direction = "increase" if future > current else "decrease"

    if direction == "increase":
        planning = "Consider increasing production capacity to meet rising demand in the coming months."
    else:
        planning = "Plan for reduced production volumes in the coming months to avoid excess inventory."

    return ComputationResult.success({
        "direction": direction,
        "current_demand": current,
        "future_demand": future,
        "growth_pct": growth_pct,
        "horizon_months": len(forecast),
        "interpretation": (
            f"Predicted {direction} in demand over the next {len(forecast)} months."
        ),
        "planning": planning,
    })
