"""
Pricing & Profitability — Price-band margins and per-product profit.

Profit per order is simplified to:
    total sale - raw materials cost - shipping cost - tax

Price bands are fixed-width buckets of total sale (BAND_WIDTH, default 5000).
The margin proxy divides the band's average profit by
``band_floor + BAND_MIDPOINT_OFFSET`` (a stand-in for a typical sale in the
band), not by the true average sale.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np
import pandas as pd

from Insight_Engine.config import AnalyticsSettings, settings as default_settings

from ..core.results import ComputationResult, computation
from ..core.schemas import OrderRecord


def _orders_frame(orders: Sequence[OrderRecord]) -> pd.DataFrame:
    """Flatten the fields profitability needs into a DataFrame."""
    return pd.DataFrame(
        {
            "product": [o.product or "Unknown" for o in orders],
            "total_sale": [o.total_sale for o in orders],
            "profit": [o.profit for o in orders],
        },
        columns=["product", "total_sale", "profit"],
    )


def _empty_bands() -> dict:
    return {"bands": [], "ranked": [], "best_band": None}


@computation(fallback=_empty_bands)
def calculate_price_band_metrics(
    orders: Sequence[OrderRecord],
    cfg: AnalyticsSettings = default_settings,
) -> ComputationResult:
    """
    Average profit and margin proxy per price band.

    Returns (as ComputationResult.data):
        {
          "bands": [                     # ascending by band_floor
            {"band_floor": 0.0, "band_ceiling": 5000.0, "order_count": 40,
             "avg_profit": 1210.5, "profit_margin": 0.484},
            ...
          ],
          "ranked":    [...top TOP_BANDS by profit_margin desc...],
          "best_band": {...} | None,
          "recommendation": "Consider adjusting ..."
        }
    """
    if len(orders) == 0:
        return ComputationResult.insufficient(
            _empty_bands(), "Insufficient data for pricing analysis."
        )

    df = _orders_frame(orders)
    width = cfg.BAND_WIDTH
    df["band_floor"] = np.floor(df["total_sale"] / width) * width

    grouped = (
        df.groupby("band_floor", sort=True)["profit"]
        .agg(["size", "sum"])
        .rename(columns={"size": "order_count", "sum": "total_profit"})
    )

    bands: list[dict] = []
    for band_floor, row in grouped.iterrows():
        count = int(row["order_count"])
        avg_profit = float(row["total_profit"]) / count if count else 0.0
        denominator = float(band_floor) + cfg.BAND_MIDPOINT_OFFSET
        bands.append({
            "band_floor": float(band_floor),
            "band_ceiling": float(band_floor) + width,
            "order_count": count,
            "avg_profit": avg_profit,
            "profit_margin": avg_profit / denominator if denominator else 0.0,
        })

    ranked = sorted(bands, key=lambda b: b["profit_margin"], reverse=True)
    best = ranked[0]

    return ComputationResult.success({
        "bands": bands,
        "ranked": ranked[: cfg.TOP_BANDS],
        "best_band": best,
        "recommendation": (
            f"Consider adjusting your product pricing to target the "
            f"{best['band_floor']:,.0f}-{best['band_ceiling']:,.0f} range "
            f"for maximum profitability."
        ),
    })


@computation(fallback=list)
def calculate_product_profitability(orders: Sequence[OrderRecord]) -> list[dict]:
    """
    Profit per product, highest total profit first.

    Returns:
        [
          {"product": "M25 Concrete", "total_profit": 91000.0, "total_sales": 240000.0,
           "profit_margin": 0.379, "avg_profit": 3033.3, "order_count": 30},
          ...
        ]
    """
    if len(orders) == 0:
        return []

    df = _orders_frame(orders)
    grouped = df.groupby("product", sort=False).agg(
        total_sales=("total_sale", "sum"),
        total_profit=("profit", "sum"),
        order_count=("profit", "size"),
    )

    rows: list[dict] = []
    for product, row in grouped.iterrows():
        total_sales = float(row["total_sales"])
        total_profit = float(row["total_profit"])
        count = int(row["order_count"])
        rows.append({
            "product": product,
            "total_profit": total_profit,
            "total_sales": total_sales,
            "profit_margin": total_profit / total_sales if total_sales else 0.0,
            "avg_profit": total_profit / count if count else 0.0,
            "order_count": count,
        })

    rows.sort(key=lambda r: r["total_profit"], reverse=True)
    return rows
