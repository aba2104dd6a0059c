"""
Material Cost Trends — Price series, fluctuations, forecast and insights.

Pipeline:
    price records -> chronologically sorted trend rows (sample rows if empty)
                  -> percent fluctuations between consecutive rows
                  -> ADDITIVE forecast over the trailing 12 rows (needs >= 10)
                  -> narrative insights (trend, extremes, volatility, outlook)

Separately, raw-materials cost per order is attributed to products by
splitting it evenly across the materials the order lists.
"""

from __future__ import annotations

import copy
import logging
import math
from typing import Sequence

import pandas as pd

from Insight_Engine.config import MATERIALS, AnalyticsSettings, settings as default_settings

from ..core.cleaning import DAY_FORMAT, sort_timestamp
from ..core.forecast import ForecastMode, project_forward
from ..core.results import ComputationError, ComputationResult, ErrorKind, computation
from ..core.samples import SAMPLE_MATERIAL_DATA
from ..core.schemas import MaterialPriceRecord, OrderRecord
from ..core.volatility import percent_deltas, volatility_ranking

logger = logging.getLogger(__name__)


def _sample_trends() -> list[dict]:
    return copy.deepcopy(SAMPLE_MATERIAL_DATA)


# ------------------------------------------------------------------
# Trend series
# ------------------------------------------------------------------

@computation(fallback=_sample_trends)
def material_price_trends(prices: Sequence[MaterialPriceRecord]) -> ComputationResult:
    """
    One row per price record, oldest first.

    Rows whose date does not parse keep their relative order at the end.

    Returns (as ComputationResult.data):
        [{"period": "2023-01-01", "Cement": 290.0, "Sand": 60.0, ...}, ...]
    """
    if len(prices) == 0:
        return ComputationResult.sample(
            _sample_trends(), "No material price data loaded. Showing sample prices."
        )

    df = pd.DataFrame([{"period": p.date, **p.prices()} for p in prices])
    # Row-wise parse: a column mixing UTC offsets and plain dates still sorts
    df["_ts"] = df["period"].map(sort_timestamp)
    unparsed = int((df["_ts"] == math.inf).sum())
    if unparsed:
        logger.warning("%d material price rows have unparseable dates", unparsed)

    df = df.sort_values("_ts", kind="stable").drop(columns="_ts")
    rows = [
        {"period": row["period"], **{m: float(row[m]) for m in MATERIALS}}
        for row in df.to_dict(orient="records")
    ]
    result = ComputationResult.success(rows)
    if unparsed:
        result.error = ComputationError(
            kind=ErrorKind.MALFORMED_FIELD,
            detail=f"{unparsed} rows have unparseable dates and are listed last",
        )
    return result


@computation(fallback=list)
def cost_fluctuations(trends: Sequence[dict]) -> list[dict]:
    """Month-over-month percent change for every material."""
    return percent_deltas(trends, MATERIALS)


# ------------------------------------------------------------------
# Forecast
# ------------------------------------------------------------------

@computation(fallback=list)
def forecast_material_prices(
    trends: Sequence[dict],
    cfg: AnalyticsSettings = default_settings,
) -> ComputationResult:
    """
    Trailing PRICE_WINDOW rows followed by PRICE_HORIZON projected rows.

    Each material moves by its own mean absolute monthly delta; projected
    prices never go below zero. Fewer than PRICE_MIN_POINTS rows -> the
    trend rows come back unchanged with an insufficient-data flag.
    """
    if len(trends) < cfg.PRICE_MIN_POINTS:
        return ComputationResult.insufficient(
            list(trends), "Insufficient data for predictions"
        )

    history = [{**row, "is_forecast": False} for row in trends[-cfg.PRICE_WINDOW:]]
    extended = project_forward(
        history,
        value_fields=MATERIALS,
        window_size=cfg.PRICE_WINDOW,
        horizon=cfg.PRICE_HORIZON,
        mode=ForecastMode.ADDITIVE,
        min_points=cfg.PRICE_MIN_POINTS,
        period_format=DAY_FORMAT,
    )

    if len(extended) == len(history):
        return ComputationResult.insufficient(extended, "Insufficient data for predictions")
    return ComputationResult.success(extended)


# ------------------------------------------------------------------
# Cost attribution
# ------------------------------------------------------------------

@computation(fallback=list)
def material_cost_breakdown(
    orders: Sequence[OrderRecord],
    cfg: AnalyticsSettings = default_settings,
) -> list[dict]:
    """
    Raw-materials cost per product, split evenly over each order's material list.

    Unknown material names still count toward the split but receive no
    share; an order with an empty list contributes nothing.

    Returns:
        [{"product": "M25 Concrete", "Cement": 9000.0, ..., "total": 21000.0,
          "top_material": "Cement"}, ...]      # top TOP_BREAKDOWN by total
    """
    per_product: dict[str, dict[str, float]] = {}

    for order in orders:
        costs = per_product.setdefault(order.product or "Unknown", {m: 0.0 for m in MATERIALS})
        listed = order.materials
        if not listed:
            continue
        share = order.raw_materials_cost / len(listed)
        for material in listed:
            if material in costs:
                costs[material] += share

    rows: list[dict] = []
    for product, costs in per_product.items():
        total = sum(costs.values())
        top = max(costs, key=costs.get) if total > 0 else None
        rows.append({"product": product, **costs, "total": total, "top_material": top})

    rows.sort(key=lambda r: r["total"], reverse=True)
    return rows[: cfg.TOP_BREAKDOWN]


# ------------------------------------------------------------------
# Insights
# ------------------------------------------------------------------

def _empty_insights() -> dict:
    return {
        "trend": None,
        "trend_summary": "Insufficient data for trend analysis",
        "highest_price": None,
        "lowest_price": None,
        "most_volatile": None,
        "most_stable": None,
        "volatility": [],
        "outlook": None,
        "prediction": "More data needed for accurate predictions",
    }


@computation(fallback=_empty_insights)
def material_insights(
    trends: Sequence[dict],
    forecast: Sequence[dict] = (),
    cfg: AnalyticsSettings = default_settings,
) -> ComputationResult:
    """
    Narrative summary of the price trends.

    Returns (as ComputationResult.data):
        {
          "trend": "upward" | "downward" | "stable",
          "avg_trend_pct": 18.9,
          "trend_pct": {"Cement": 18.97, ...},
          "trend_summary": "Material prices are trending upward",
          "highest_price": {"material": "Admixture", "price": 495.0},
          "lowest_price":  {"material": "Water", "price": 15.0},
          "volatility":    [{"key": "Water", "value": 7.9, "count": 11}, ...],
          "most_volatile": {"material": "Water", "std_dev_pct": 7.9},
          "most_stable":   {"material": "Admixture", "std_dev_pct": 0.05},
          "outlook": "moderate_rise" | ... | None,
          "outlook_pct": 7.2,
          "prediction": "Moderate price increases expected in the next 6 months"
        }
    """
    if len(trends) < 2:
        return ComputationResult.insufficient(
            _empty_insights(), "Insufficient data for trend analysis"
        )

    threshold = cfg.TREND_THRESHOLD_PCT
    first, last = trends[0], trends[-1]

    # Overall first -> last change, only where both ends are non-zero
    trend_pct: dict[str, float] = {}
    for m in MATERIALS:
        start, end = first.get(m, 0.0), last.get(m, 0.0)
        if start and end:
            trend_pct[m] = (end - start) / start * 100
    avg_trend = sum(trend_pct.values()) / len(trend_pct) if trend_pct else 0.0

    if avg_trend > threshold:
        trend, summary = "upward", "Material prices are trending upward"
    elif avg_trend < -threshold:
        trend, summary = "downward", "Material prices are trending downward"
    else:
        trend, summary = "stable", "Material prices are relatively stable"

    latest = {m: float(last.get(m, 0.0)) for m in MATERIALS}
    highest = max(latest, key=latest.get)
    lowest = min(latest, key=latest.get)

    volatility = volatility_ranking(trends, MATERIALS)
    most_volatile = volatility[0]
    most_stable = min(volatility, key=lambda r: r["value"])

    outlook, outlook_pct, prediction = _price_outlook(forecast, cfg)

    return ComputationResult.success({
        "trend": trend,
        "avg_trend_pct": avg_trend,
        "trend_pct": trend_pct,
        "trend_summary": summary,
        "highest_price": {"material": highest, "price": latest[highest]},
        "lowest_price": {"material": lowest, "price": latest[lowest]},
        "volatility": volatility,
        "most_volatile": {"material": most_volatile["key"], "std_dev_pct": most_volatile["value"]},
        "most_stable": {"material": most_stable["key"], "std_dev_pct": most_stable["value"]},
        "outlook": outlook,
        "outlook_pct": outlook_pct,
        "prediction": prediction,
    })


def _price_outlook(
    forecast: Sequence[dict],
    cfg: AnalyticsSettings,
) -> tuple[str | None, float | None, str]:
    """Classify the first -> last projected change averaged over materials."""
    projected = [p for p in forecast if p.get("is_forecast")]
    if not projected:
        return None, None, "Insufficient data for predictions"

    start, end = projected[0], projected[-1]
    changes = [
        (end[m] - start[m]) / start[m] * 100
        for m in MATERIALS
        if start.get(m, 0.0) > 0
    ]
    avg = sum(changes) / len(changes) if changes else 0.0
    months = len(projected)

    if avg > cfg.OUTLOOK_SIGNIFICANT_PCT:
        return "significant_rise", avg, f"Prices expected to rise significantly in the next {months} months"
    if avg > cfg.TREND_THRESHOLD_PCT:
        return "moderate_rise", avg, f"Moderate price increases expected in the next {months} months"
    if avg < -cfg.TREND_THRESHOLD_PCT:
        return "decrease", avg, f"Price decreases expected in the next {months} months"
    return "stable", avg, f"Prices expected to remain stable in the next {months} months"
