"""
Material Purchase Timing — "Best time to buy" from local price minima.

For each material, every strict local minimum of its chronological price
series is a candidate purchase date; its saving is the series mean minus
the minimum price. Candidates across all materials are ranked by saving.
"""

from __future__ import annotations

from typing import Sequence

from Insight_Engine.config import MATERIALS, AnalyticsSettings, settings as default_settings

from ..core.cleaning import sort_timestamp
from ..core.results import ComputationResult, computation
from ..core.schemas import MaterialPriceRecord
from ..core.volatility import local_minima


def _empty_recommendations() -> dict:
    return {"recommendations": [], "savings_by_material": [], "top": None}


@computation(fallback=_empty_recommendations)
def calculate_purchase_recommendations(
    prices: Sequence[MaterialPriceRecord],
    cfg: AnalyticsSettings = default_settings,
) -> ComputationResult:
    """
    Rank local-minimum purchase opportunities.

    Requires PURCHASE_MIN_OBSERVATIONS price rows overall and
    PURCHASE_MIN_POINTS per material.

    Returns (as ComputationResult.data):
        {
          "recommendations": [
            {"material": "Cement", "date": "2023-04-01", "price": 280.0, "saving": 21.5},
            ...                                   # saving desc
          ],
          "savings_by_material": [
            {"material": "Cement", "total_saving": 43.0, "opportunities": 2}, ...
          ],                                      # top TOP_SAVINGS
          "top": {...first recommendation...} | None,
          "timing_advice": "Based on historical data, Cement shows ...",
          "bulk_advice":   "Consider bulk purchases of Cement when prices drop below 280.00 ..."
        }
    """
    if len(prices) < cfg.PURCHASE_MIN_OBSERVATIONS:
        return ComputationResult.insufficient(
            _empty_recommendations(),
            "Insufficient price data to make purchase recommendations.",
        )

    ordered = sorted(prices, key=lambda p: sort_timestamp(p.date))
    dates = [p.date for p in ordered]

    recommendations: list[dict] = []
    for material in MATERIALS:
        series = [p.price_of(material) for p in ordered]
        if len(series) < cfg.PURCHASE_MIN_POINTS:
            continue
        for minimum in local_minima(series, labels=dates):
            recommendations.append({
                "material": material,
                "date": minimum["label"],
                "price": minimum["value"],
                "saving": minimum["saving"],
            })

    recommendations.sort(key=lambda r: r["saving"], reverse=True)

    totals: dict[str, dict] = {}
    for rec in recommendations:
        entry = totals.setdefault(
            rec["material"], {"material": rec["material"], "total_saving": 0.0, "opportunities": 0}
        )
        entry["total_saving"] += rec["saving"]
        entry["opportunities"] += 1
    savings = sorted(totals.values(), key=lambda t: t["total_saving"], reverse=True)

    if not recommendations:
        return ComputationResult.success(
            _empty_recommendations(), "No local price minima found."
        )

    top = recommendations[0]
    return ComputationResult.success({
        "recommendations": recommendations,
        "savings_by_material": savings[: cfg.TOP_SAVINGS],
        "top": top,
        "timing_advice": (
            f"Based on historical data, {top['material']} shows the highest potential "
            f"savings when purchased at the right time."
        ),
        "bulk_advice": (
            f"Consider bulk purchases of {top['material']} when prices drop below "
            f"{top['price']:.2f} to maximize cost savings."
        ),
    })
