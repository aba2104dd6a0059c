"""
Dashboard Analyzer — The single entry point for business intelligence.

Orchestrates all metric modules against a DataStore and returns a
consolidated "Dashboard Snapshot" dictionary that any downstream consumer
(Streamlit page, CLI, export) can use directly.

Order-derived and price-derived sections are memoized separately on the
identity of their source tuple: replacing the price data does not rerun
the order metrics, and vice versa.
"""

from __future__ import annotations

import logging
from typing import Sequence

from Insight_Engine.config import AnalyticsSettings, settings as default_settings
from Insight_Engine.state import DataStore, memoize_on_identity

from .core.results import ResultStatus
from .core.schemas import MaterialPriceRecord, OrderRecord
from .metrics.customers import calculate_churn_risk
from .metrics.demand import demand_insights, forecast_demand
from .metrics.materials import (
    cost_fluctuations,
    forecast_material_prices,
    material_cost_breakdown,
    material_insights,
    material_price_trends,
)
from .metrics.operations import calculate_delivery_performance
from .metrics.pricing import calculate_price_band_metrics, calculate_product_profitability
from .metrics.purchasing import calculate_purchase_recommendations
from .metrics.sales import (
    delivery_time_by_month,
    orders_by_customer_type,
    orders_by_status,
    revenue_by_month,
    revenue_by_region,
    top_products,
)
from .metrics.summary import calculate_summary_stats

logger = logging.getLogger(__name__)

SAMPLE_DERIVED_MESSAGE = "Based on sample prices. Upload material price data for real figures."


class DashboardAnalyzer:
    """
    Takes a DataStore and produces structured dashboard intelligence.

    Usage:
        analyzer = DashboardAnalyzer()
        snapshot = analyzer.analyze(store)
        snapshot["demand"]["forecast"].data   # -> period series
    """

    def __init__(self, cfg: AnalyticsSettings = default_settings):
        self.cfg = cfg
        self._orders_sections = memoize_on_identity(self._analyze_orders)
        self._price_sections = memoize_on_identity(self._analyze_prices)
        self._summary = memoize_on_identity(self._summarize)

    def analyze(self, store: DataStore) -> dict:
        """
        Run all available metric calculations and return a Dashboard Snapshot.

        Returns:
            {
              "meta":       {"total_orders": 1200, "total_price_rows": 365},
              "summary":    ComputationResult,
              "sales":      {"revenue_by_month": ComputationResult, ...},
              "demand":     {"forecast": ..., "insights": ...},
              "pricing":    {"price_bands": ..., "product_profitability": ...},
              "customers":  {"churn_risk": ...},
              "operations": {"delivery_by_region": ...},
              "materials":  {"trends": ..., "fluctuations": ..., "forecast": ...,
                             "cost_breakdown": ..., "insights": ...},
              "purchasing": {"recommendations": ...},
            }
        """
        snapshot: dict = {
            "meta": {
                "total_orders": len(store.orders),
                "total_price_rows": len(store.material_prices),
            },
            "summary": self._summary(store),
        }
        order_sections = dict(self._orders_sections(store.orders))
        price_sections = dict(self._price_sections(store.material_prices))

        # Cost attribution reads orders but belongs to the materials view
        cost_breakdown = order_sections.pop("cost_breakdown")
        price_sections["materials"] = {
            **price_sections["materials"],
            "cost_breakdown": cost_breakdown,
        }

        snapshot.update(order_sections)
        snapshot.update(price_sections)
        return snapshot

    # ------------------------------------------------------------------
    # Sections
    # ------------------------------------------------------------------

    def _summarize(self, store: DataStore):
        return calculate_summary_stats(store.orders, store.material_prices)

    def _analyze_orders(self, orders: Sequence[OrderRecord]) -> dict:
        logger.info("Recomputing order metrics (%d orders)", len(orders))
        cfg = self.cfg
        demand = forecast_demand(orders, cfg)
        return {
            "sales": {
                "revenue_by_month": revenue_by_month(orders),
                "revenue_by_region": revenue_by_region(orders),
                "orders_by_customer_type": orders_by_customer_type(orders),
                "orders_by_status": orders_by_status(orders),
                "top_products": top_products(orders, cfg),
                "delivery_time_by_month": delivery_time_by_month(orders),
            },
            "demand": {
                "forecast": demand,
                "insights": demand_insights(demand.data or []),
            },
            "pricing": {
                "price_bands": calculate_price_band_metrics(orders, cfg),
                "product_profitability": calculate_product_profitability(orders),
            },
            "customers": {
                "churn_risk": calculate_churn_risk(orders, cfg),
            },
            "operations": {
                "delivery_by_region": calculate_delivery_performance(orders),
            },
            "cost_breakdown": material_cost_breakdown(orders, cfg),
        }

    def _analyze_prices(self, prices: Sequence[MaterialPriceRecord]) -> dict:
        logger.info("Recomputing material price metrics (%d rows)", len(prices))
        cfg = self.cfg
        trends = material_price_trends(prices)
        trend_rows = trends.data or []
        forecast = forecast_material_prices(trend_rows, cfg)
        derived = {
            "fluctuations": cost_fluctuations(trend_rows),
            "forecast": forecast,
            "insights": material_insights(trend_rows, forecast.data or [], cfg),
        }
        if trends.status in (ResultStatus.FALLBACK, ResultStatus.ERROR):
            # Derived from the sample series, so they are placeholders too
            derived = {
                name: result.derived_from_sample(SAMPLE_DERIVED_MESSAGE)
                for name, result in derived.items()
            }
        return {
            "materials": {"trends": trends, **derived},
            "purchasing": {
                "recommendations": calculate_purchase_recommendations(prices, cfg),
            },
        }


def snapshot_to_dict(snapshot: dict) -> dict:
    """JSON-ready copy of a snapshot (ComputationResults dumped, enums as values)."""
    def _convert(value):
        if hasattr(value, "model_dump"):
            return value.model_dump(mode="json")
        if isinstance(value, dict):
            return {k: _convert(v) for k, v in value.items()}
        if isinstance(value, list):
            return [_convert(v) for v in value]
        return value

    return _convert(snapshot)
