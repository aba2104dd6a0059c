"""
Tests — Metric modules against small hand-checked datasets.

Fixtures (quarterly_orders, price_history, cfg) live in conftest.py.
"""

import pytest

from Insight_Engine.processors.business_analytics.factories import make_order, make_price
from Insight_Engine.processors.business_analytics.core.cleaning import to_number
from Insight_Engine.processors.business_analytics.core.results import (
    ErrorKind,
    ResultStatus,
    computation,
)
from Insight_Engine.processors.business_analytics.core.samples import (
    SAMPLE_DEMAND_DATA,
    SAMPLE_MATERIAL_DATA,
)
from Insight_Engine.processors.business_analytics.metrics.customers import (
    ChurnRiskFlag,
    calculate_churn_risk,
    risk_flags,
)
from Insight_Engine.processors.business_analytics.metrics.demand import (
    demand_insights,
    forecast_demand,
)
from Insight_Engine.processors.business_analytics.metrics.materials import (
    cost_fluctuations,
    forecast_material_prices,
    material_cost_breakdown,
    material_insights,
    material_price_trends,
)
from Insight_Engine.processors.business_analytics.metrics.operations import (
    calculate_delivery_performance,
)
from Insight_Engine.processors.business_analytics.metrics.pricing import (
    calculate_price_band_metrics,
    calculate_product_profitability,
)
from Insight_Engine.processors.business_analytics.metrics.purchasing import (
    calculate_purchase_recommendations,
)
from Insight_Engine.processors.business_analytics.metrics.sales import (
    delivery_time_by_month,
    orders_by_customer_type,
    orders_by_status,
    revenue_by_month,
    revenue_by_region,
    top_products,
)
from Insight_Engine.processors.business_analytics.metrics.summary import calculate_summary_stats


# ---------------------------------------------------------------------------
# Summary & sales
# ---------------------------------------------------------------------------

def test_summary_totals(quarterly_orders, price_history):
    result = calculate_summary_stats(quarterly_orders, price_history)
    assert result.ok
    s = result.data
    assert s["total_orders"] == 3
    assert s["total_revenue"] == pytest.approx(10700.0)
    assert s["total_customers"] == 2
    assert s["unique_products"] == 2
    assert s["returning_customer_orders"] == 2
    assert s["avg_material_cost"] == pytest.approx(3200.0 / 3)
    assert s["avg_order_value"] == pytest.approx(10700.0 / 3)
    assert s["avg_material_price"] > 0


def test_empty_orders_give_zeroed_summary():
    result = calculate_summary_stats(())
    assert result.ok
    assert all(value == 0 for value in result.data.values())


def test_monthly_revenue_sums_to_total_revenue(quarterly_orders):
    months = revenue_by_month(quarterly_orders).data
    total = calculate_summary_stats(quarterly_orders).data["total_revenue"]
    assert [m["period"] for m in months] == ["2023-01", "2023-02", "2023-03"]
    assert sum(m["revenue"] for m in months) == pytest.approx(total)


def test_orders_with_bad_dates_are_left_out_of_monthly_series():
    orders = [make_order(date="2023-01-02"), make_order(date="someday")]
    months = revenue_by_month(orders).data
    assert months == [{"period": "2023-01", "revenue": 1000.0, "orders": 1, "is_forecast": False}]


def test_region_and_product_rankings(quarterly_orders, cfg):
    regions = revenue_by_region(quarterly_orders).data
    assert regions[0]["key"] == "North"
    assert regions[0]["value"] == pytest.approx(8200.0)

    products = top_products(quarterly_orders, cfg).data
    assert [p["key"] for p in products] == ["M25 Concrete", "M30 Concrete"]

    types = {r["key"]: r["count"] for r in orders_by_customer_type(quarterly_orders).data}
    assert types == {"New": 1, "Returning": 2}


def test_status_counts_and_monthly_delivery_time(quarterly_orders):
    orders = quarterly_orders + (make_order(status="Cancelled"), make_order(status=""))
    statuses = {r["key"]: r["count"] for r in orders_by_status(orders).data}
    assert statuses == {"Delivered": 4, "Cancelled": 1, "Unknown": 1}

    months = delivery_time_by_month(quarterly_orders).data
    assert [m["period"] for m in months] == ["2023-01", "2023-02", "2023-03"]
    assert [m["avg_delivery_days"] for m in months] == [3.0, 3.0, 6.0]
    assert [m["orders"] for m in months] == [1, 1, 1]


# ---------------------------------------------------------------------------
# Demand
# ---------------------------------------------------------------------------

def test_demand_forecast_compounds_monthly_quantity(quarterly_orders, cfg):
    result = forecast_demand(quarterly_orders, cfg)
    assert result.status == ResultStatus.OK

    history = [p for p in result.data if not p["is_forecast"]]
    forecast = [p for p in result.data if p["is_forecast"]]
    assert [p["quantity"] for p in history] == [1000, 1100, 1210]
    assert len(forecast) == cfg.DEMAND_HORIZON
    assert forecast[0] == {"period": "2023-04", "quantity": 1331, "is_forecast": True}
    assert all(isinstance(p["quantity"], int) for p in forecast)


def test_demand_falls_back_to_sample_without_orders(cfg):
    result = forecast_demand((), cfg)
    assert result.status == ResultStatus.FALLBACK
    assert result.needs_more_data
    assert result.data == SAMPLE_DEMAND_DATA

    result.data[0]["quantity"] = -1
    assert SAMPLE_DEMAND_DATA[0]["quantity"] != -1


def test_demand_needs_three_months(cfg):
    orders = [make_order(date="2023-01-01"), make_order(date="2023-02-01")]
    result = forecast_demand(orders, cfg)
    assert result.status == ResultStatus.INSUFFICIENT_DATA
    assert len(result.data) == 2


def test_demand_insights_direction(quarterly_orders, cfg):
    series = forecast_demand(quarterly_orders, cfg).data
    insight = demand_insights(series).data
    assert insight["direction"] == "increase"
    assert insight["current_demand"] == 1210
    assert insight["future_demand"] > 1210
    assert insight["horizon_months"] == 6

    no_forecast = demand_insights([{"period": "2023-01", "quantity": 5, "is_forecast": False}])
    assert no_forecast.needs_more_data


# ---------------------------------------------------------------------------
# Pricing
# ---------------------------------------------------------------------------

def test_price_bands_and_margin_proxy(quarterly_orders, cfg):
    result = calculate_price_band_metrics(quarterly_orders, cfg)
    bands = result.data["bands"]

    assert [b["band_floor"] for b in bands] == [0.0, 5000.0]
    assert bands[0]["order_count"] == 2
    assert bands[0]["avg_profit"] == pytest.approx(1150.0)
    assert bands[0]["profit_margin"] == pytest.approx(1150.0 / 2500.0)
    assert bands[1]["profit_margin"] == pytest.approx(5200.0 / 7500.0)
    assert result.data["best_band"]["band_floor"] == 5000.0


def test_price_bands_need_orders(cfg):
    assert calculate_price_band_metrics((), cfg).status == ResultStatus.INSUFFICIENT_DATA


def test_product_profitability_sorted_by_profit(quarterly_orders):
    rows = calculate_product_profitability(quarterly_orders).data
    assert rows[0]["product"] == "M25 Concrete"
    assert rows[0]["total_profit"] == pytest.approx(5900.0)
    assert rows[0]["profit_margin"] == pytest.approx(5900.0 / 8200.0)
    assert rows[1]["order_count"] == 1


# ---------------------------------------------------------------------------
# Customers & operations
# ---------------------------------------------------------------------------

def test_churn_flags_returns_only_for_repeat_customer(quarterly_orders, cfg):
    at_risk = calculate_churn_risk(quarterly_orders, cfg).data
    assert len(at_risk) == 1
    entry = at_risk[0]
    assert entry["customer_id"] == "C-1"
    assert entry["risk_factors"] == [ChurnRiskFlag.HAS_RETURNS.value]
    assert entry["order_count"] == 2
    assert entry["last_order_date"] == "2023-03-20"


def test_declining_value_never_fires_for_single_order(cfg):
    flags = risk_flags([make_order(total_sale=1.0)], cfg)
    assert ChurnRiskFlag.DECLINING_VALUE not in flags


def test_declining_value_and_low_reviews(cfg):
    orders = [
        make_order(customer_id="C-9", date="2023-04-01", total_sale=1000, review_score=5),
        make_order(customer_id="C-9", date="2023-01-01", total_sale=5000, review_score=1),
        make_order(customer_id="C-9", date="2023-03-01", total_sale=1000, review_score=5),
        make_order(customer_id="C-9", date="2023-02-01", total_sale=5000, review_score=1),
    ]
    at_risk = calculate_churn_risk(orders, cfg).data
    assert at_risk[0]["risk_factors"] == [
        ChurnRiskFlag.DECLINING_VALUE.value,
        ChurnRiskFlag.LOW_SATISFACTION.value,
    ]
    assert at_risk[0]["last_order_date"] == "2023-04-01"


def test_low_satisfaction_needs_more_than_the_review_share(cfg):
    def history(low):
        return [
            make_order(customer_id="C-7", date=f"2023-{month:02d}-01", total_sale=1000,
                       review_score=1 if month <= low else 5)
            for month in range(1, 11)
        ]

    # 3 of 10 equals the share exactly and does not flag
    assert risk_flags(history(3), cfg) == []
    assert risk_flags(history(4), cfg) == [ChurnRiskFlag.LOW_SATISFACTION]


def test_delivery_slowest_region_first(quarterly_orders):
    rows = calculate_delivery_performance(quarterly_orders).data
    assert rows[0] == {"region": "North", "avg_delivery_days": 4.5, "order_count": 2}
    assert rows[1]["region"] == "South"


# ---------------------------------------------------------------------------
# Materials & purchasing
# ---------------------------------------------------------------------------

def test_trends_sorted_chronologically(price_history):
    rows = material_price_trends(price_history).data
    assert rows[0]["period"] == "2023-01-01"
    assert rows[-1]["period"] == "2023-12-01"
    assert rows[0]["Cement"] == 300.0


def test_unparseable_price_dates_sort_last_and_are_reported():
    prices = [
        make_price("sometime", cement=1),
        make_price("2023-02-01", cement=2),
        make_price("2023-01-01", cement=3),
    ]
    result = material_price_trends(prices)
    assert result.ok
    assert [r["period"] for r in result.data] == ["2023-01-01", "2023-02-01", "sometime"]
    assert result.error.kind == ErrorKind.MALFORMED_FIELD


def test_trends_sort_mixed_offset_and_plain_dates():
    prices = [
        make_price("2023-03-01T00:00:00+05:30", cement=330),
        make_price("2023-02-01", cement=320),
        make_price("2023-01-01", cement=310),
    ]
    result = material_price_trends(prices)
    assert result.ok
    assert result.error is None
    assert [r["period"] for r in result.data] == ["2023-01-01", "2023-02-01", "2023-03-01T00:00:00+05:30"]
    assert [r["Cement"] for r in result.data] == [310.0, 320.0, 330.0]


def test_trends_fall_back_to_sample_without_prices():
    result = material_price_trends(())
    assert result.status == ResultStatus.FALLBACK
    assert result.data == SAMPLE_MATERIAL_DATA


def test_fluctuations_one_row_per_pair(price_history):
    trends = material_price_trends(price_history).data
    deltas = cost_fluctuations(trends).data
    assert len(deltas) == 11
    assert deltas[0]["Gravel"] == 0.0


def test_price_forecast_is_additive_and_non_negative(price_history, cfg):
    trends = material_price_trends(price_history).data
    result = forecast_material_prices(trends, cfg)
    assert result.ok

    projected = [r for r in result.data if r["is_forecast"]]
    assert len(result.data) == cfg.PRICE_WINDOW + cfg.PRICE_HORIZON
    assert projected[0]["period"] == "2024-01-01"
    assert projected[0]["Cement"] == pytest.approx(330.0 + 30.0 / 11)
    assert projected[0]["Gravel"] == pytest.approx(45.0)
    assert all(r[m] >= 0 for r in projected for m in ("Cement", "Fly Ash"))


def test_price_forecast_needs_ten_rows(price_history, cfg):
    trends = material_price_trends(price_history[:9]).data
    result = forecast_material_prices(trends, cfg)
    assert result.status == ResultStatus.INSUFFICIENT_DATA
    assert result.data == trends


def test_cost_breakdown_splits_evenly(quarterly_orders, cfg):
    orders = quarterly_orders + (
        make_order(product="M30 Concrete", raw_materials_cost=100, raw_materials_used="Cement, Steel"),
    )
    rows = material_cost_breakdown(orders, cfg).data
    by_product = {r["product"]: r for r in rows}

    m25 = by_product["M25 Concrete"]
    assert m25["Cement"] == pytest.approx(1150.0)
    assert m25["Sand"] == pytest.approx(1150.0)
    assert m25["total"] == pytest.approx(2300.0)

    m30 = by_product["M30 Concrete"]
    # "Steel" takes a share of the split but is not a tracked material
    assert m30["Cement"] == pytest.approx(350.0)
    assert m30["total"] == pytest.approx(950.0)
    assert m30["top_material"] == "Cement"
    assert rows[0]["product"] == "M25 Concrete"


def test_cost_breakdown_labels_blank_product_unknown(cfg):
    orders = [make_order(product="", raw_materials_cost=100, raw_materials_used="Cement")]
    rows = material_cost_breakdown(orders, cfg).data
    assert [r["product"] for r in rows] == ["Unknown"]
    assert rows[0]["Cement"] == pytest.approx(100.0)


def test_material_insights(price_history, cfg):
    trends = material_price_trends(price_history).data
    forecast = forecast_material_prices(trends, cfg).data
    insight = material_insights(trends, forecast, cfg).data

    assert insight["trend"] == "stable"
    assert insight["highest_price"]["material"] == "Admixture"
    assert insight["lowest_price"]["material"] == "Water"
    assert insight["most_stable"]["std_dev_pct"] == 0.0
    assert insight["outlook"] in ("stable", "moderate_rise", "significant_rise", "decrease")


def test_material_insights_need_two_rows(cfg):
    result = material_insights(SAMPLE_MATERIAL_DATA[:1], (), cfg)
    assert result.needs_more_data
    assert result.data["trend"] is None


def test_purchase_recommendations_rank_cement_dips(price_history, cfg):
    result = calculate_purchase_recommendations(price_history, cfg)
    assert result.ok
    recs = result.data["recommendations"]

    assert recs[0] == {"material": "Cement", "date": "2023-04-01", "price": 280.0, "saving": 22.5}
    assert [r["price"] for r in recs if r["material"] == "Cement"] == [280.0, 285.0, 290.0]
    assert all(r["saving"] > 0 for r in recs)

    savings = result.data["savings_by_material"]
    assert savings[0]["material"] == "Cement"
    assert savings[0]["total_saving"] == pytest.approx(52.5)
    assert savings[0]["opportunities"] == 3
    assert "Cement" in result.data["bulk_advice"]


def test_purchase_recommendations_need_ten_observations(price_history, cfg):
    result = calculate_purchase_recommendations(price_history[:9], cfg)
    assert result.status == ResultStatus.INSUFFICIENT_DATA
    assert result.data["recommendations"] == []


def test_flat_prices_have_no_opportunities(cfg):
    prices = [make_price(f"2023-01-{d:02d}", cement=300) for d in range(1, 13)]
    result = calculate_purchase_recommendations(prices, cfg)
    assert result.ok
    assert result.data["top"] is None


# ---------------------------------------------------------------------------
# Computation boundary
# ---------------------------------------------------------------------------

def test_computation_turns_exceptions_into_error_results():
    @computation(fallback=list)
    def exploding_metric(orders):
        raise KeyError("Total Sale")

    result = exploding_metric(())
    assert result.status == ResultStatus.ERROR
    assert result.data == []
    assert result.error.kind == ErrorKind.INTERNAL
    assert result.message == "Error processing exploding metric"


def test_computation_wraps_bare_data():
    @computation(fallback=dict)
    def plain(x):
        return {"x": x}

    result = plain(2)
    assert result.ok
    assert result.data == {"x": 2}


def test_out_of_range_numbers_become_zero():
    assert to_number(10**400) == 0.0
    assert to_number(float("inf")) == 0.0
    assert to_number(5) == 5.0
    assert make_order(total_sale=10**400).total_sale == 0.0
