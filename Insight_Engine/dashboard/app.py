"""
Insight Engine — Business Analytics Dashboard.

Pure UI layer. All business logic comes from the engine:
    - CsvIngestor        -> parses + cleans the uploaded CSVs into records
    - DataStore          -> immutable session state (orders, material prices)
    - DashboardAnalyzer  -> produces the Dashboard Snapshot dict

Usage:
    streamlit run Insight_Engine/dashboard/app.py
"""

import logging
import os
import sys

# Load .env before the settings object reads os.environ (INSIGHT_* overrides)
from dotenv import load_dotenv
load_dotenv()

import pandas as pd
import streamlit as st

# ---------------------------------------------------------------------------
# Path setup
# ---------------------------------------------------------------------------
_PROJECT_ROOT = os.path.dirname(
    os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
)
if _PROJECT_ROOT not in sys.path:
    sys.path.insert(0, _PROJECT_ROOT)

from Insight_Engine.config import CURRENCY_SYMBOL, MATERIALS, settings
from Insight_Engine.processors.business_analytics.analyzer import DashboardAnalyzer
from Insight_Engine.processors.business_analytics.core.results import ComputationResult, ResultStatus
from Insight_Engine.processors.business_analytics.csv_ingestor import (
    CsvIngestor,
    IngestionError,
    export_csv,
)
from Insight_Engine.state import DataStore

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# ---------------------------------------------------------------------------
# Page config
# ---------------------------------------------------------------------------
st.set_page_config(
    page_title="Insight Engine",
    page_icon="\U0001f3d7",
    layout="wide",
    initial_sidebar_state="expanded",
)

if "store" not in st.session_state:
    st.session_state["store"] = DataStore()
if "analyzer" not in st.session_state:
    st.session_state["analyzer"] = DashboardAnalyzer(settings)


def _money(value: float) -> str:
    return f"{CURRENCY_SYMBOL}{value:,.2f}"


def _show_status(result: ComputationResult) -> bool:
    """Render the result's notice. Returns False when there is nothing to draw."""
    if result.status == ResultStatus.ERROR:
        st.error(result.message or "Error processing data")
        return bool(result.data)
    if result.needs_more_data and result.message:
        st.info(result.message)
    return bool(result.data)


def _series_frame(rows: list[dict], index: str = "period") -> pd.DataFrame:
    return pd.DataFrame(rows).set_index(index)


# ---------------------------------------------------------------------------
# Sidebar: Data Upload
# ---------------------------------------------------------------------------
with st.sidebar:
    st.title("Insight Engine")
    st.caption("Construction Materials Analytics")
    st.divider()

    store: DataStore = st.session_state["store"]
    ingestor = CsvIngestor()

    # --- Orders ---
    st.subheader("Orders")
    orders_file = st.file_uploader("Upload orders CSV", type=["csv"], key="orders_upload")
    if orders_file is not None and st.button("Load Orders", type="primary", use_container_width=True):
        try:
            with st.spinner("Parsing orders..."):
                records = ingestor.ingest_orders(orders_file)
            st.session_state["store"] = store.set_orders(records)
            st.success(f"Loaded {len(records):,} orders")
            st.rerun()
        except IngestionError as exc:
            st.error(str(exc))

    if store.has_orders:
        st.caption(f"{len(store.orders):,} orders loaded")
        st.download_button(
            "Export Orders CSV",
            data=export_csv(store.orders).encode("utf-8"),
            file_name="orders_export.csv",
            mime="text/csv",
            use_container_width=True,
        )
        if st.button("Clear Orders", use_container_width=True):
            st.session_state["store"] = store.clear_orders()
            st.rerun()

    st.divider()

    # --- Material prices ---
    st.subheader("Material Prices")
    prices_file = st.file_uploader("Upload material prices CSV", type=["csv"], key="prices_upload")
    if prices_file is not None and st.button("Load Prices", type="primary", use_container_width=True):
        try:
            with st.spinner("Parsing material prices..."):
                records = ingestor.ingest_material_prices(prices_file)
            st.session_state["store"] = store.set_material_prices(records)
            st.success(f"Loaded {len(records):,} price rows")
            st.rerun()
        except IngestionError as exc:
            st.error(str(exc))

    if store.has_material_prices:
        st.caption(f"{len(store.material_prices):,} price rows loaded")
        st.download_button(
            "Export Material Prices CSV",
            data=export_csv(store.material_prices).encode("utf-8"),
            file_name="material_prices_export.csv",
            mime="text/csv",
            use_container_width=True,
        )
        if st.button("Clear Material Prices", use_container_width=True):
            st.session_state["store"] = store.clear_material_prices()
            st.rerun()

    if store.has_orders or store.has_material_prices:
        st.divider()
        if st.button("Clear All Data", use_container_width=True):
            st.session_state["store"] = store.clear()
            st.rerun()

# ===================================================================
# Dashboard Snapshot
# ===================================================================
store = st.session_state["store"]
snapshot: dict = st.session_state["analyzer"].analyze(store)

st.header("Business Overview")
if not store.has_orders:
    st.info("Upload an orders CSV in the sidebar to replace the sample charts with your data.")

summary = snapshot["summary"].data
col1, col2, col3, col4 = st.columns(4)
col1.metric("Total Revenue", _money(summary["total_revenue"]))
col2.metric("Total Orders", f"{summary['total_orders']:,}")
col3.metric("Customers", f"{summary['total_customers']:,}")
col4.metric("Avg Material Cost", _money(summary["avg_material_cost"]))

col5, col6, col7, col8 = st.columns(4)
col5.metric("Avg Order Value", _money(summary["avg_order_value"]))
col6.metric("Products", f"{summary['unique_products']:,}")
col7.metric("Returning-Customer Orders", f"{summary['returning_customer_orders']:,}")
col8.metric("Avg Material Price", _money(summary["avg_material_price"]))

st.divider()

tab_sales, tab_materials, tab_insights = st.tabs(
    ["Sales & Demand", "Material Trends", "Insights"]
)

# --- Tab 1: Sales & Demand ---
with tab_sales:
    sales = snapshot["sales"]

    st.subheader("Monthly Revenue")
    revenue = sales["revenue_by_month"]
    if _show_status(revenue):
        st.line_chart(_series_frame(revenue.data)[["revenue"]])

    st.subheader("Demand Forecast")
    demand = snapshot["demand"]["forecast"]
    if _show_status(demand):
        demand_df = pd.DataFrame(demand.data)
        demand_df["Historical"] = demand_df["quantity"].where(~demand_df["is_forecast"])
        demand_df["Forecast"] = demand_df["quantity"].where(demand_df["is_forecast"])
        st.line_chart(demand_df.set_index("period")[["Historical", "Forecast"]])

    col_region, col_type = st.columns(2)
    with col_region:
        st.subheader("Revenue by Region")
        region = sales["revenue_by_region"]
        if _show_status(region):
            st.bar_chart(
                pd.DataFrame(region.data).rename(columns={"key": "Region", "value": "Revenue"})
                .set_index("Region")[["Revenue"]]
            )
    with col_type:
        st.subheader("Orders by Customer Type")
        ctype = sales["orders_by_customer_type"]
        if _show_status(ctype):
            st.bar_chart(
                pd.DataFrame(ctype.data).rename(columns={"key": "Customer Type", "count": "Orders"})
                .set_index("Customer Type")[["Orders"]]
            )

    st.subheader("Top Products")
    products = sales["top_products"]
    if _show_status(products):
        st.dataframe(
            pd.DataFrame(products.data).rename(
                columns={"key": "Product", "value": "Revenue", "count": "Orders"}
            ),
            use_container_width=True,
            hide_index=True,
        )

    st.subheader("Price Band Profitability")
    bands = snapshot["pricing"]["price_bands"]
    if _show_status(bands):
        band_rows = bands.data["bands"]
        if band_rows:
            band_df = pd.DataFrame(band_rows)
            band_df["Band"] = band_df.apply(
                lambda r: f"{_money(r['band_floor'])} - {_money(r['band_ceiling'])}", axis=1
            )
            st.bar_chart(band_df.set_index("Band")[["profit_margin"]])
        if bands.data.get("recommendation"):
            st.info(bands.data["recommendation"])

    st.subheader("Product Profitability")
    profit = snapshot["pricing"]["product_profitability"]
    if _show_status(profit):
        st.dataframe(pd.DataFrame(profit.data), use_container_width=True, hide_index=True)

    col_delivery, col_status = st.columns(2)
    with col_delivery:
        st.subheader("Delivery Time by Region")
        delivery = snapshot["operations"]["delivery_by_region"]
        if _show_status(delivery):
            st.bar_chart(_series_frame(delivery.data, "region")[["avg_delivery_days"]])
    with col_status:
        st.subheader("Orders by Status")
        status = sales["orders_by_status"]
        if _show_status(status):
            st.bar_chart(
                pd.DataFrame(status.data).rename(columns={"key": "Status", "count": "Orders"})
                .set_index("Status")[["Orders"]]
            )

    st.subheader("Delivery Time Trend")
    delivery_trend = sales["delivery_time_by_month"]
    if _show_status(delivery_trend):
        st.line_chart(_series_frame(delivery_trend.data)[["avg_delivery_days"]])

# --- Tab 2: Material Trends ---
with tab_materials:
    materials = snapshot["materials"]

    st.subheader("Material Price Trends")
    trends = materials["trends"]
    if _show_status(trends):
        st.line_chart(_series_frame(trends.data)[list(MATERIALS)])

    st.subheader("Price Fluctuations (% change)")
    fluctuations = materials["fluctuations"]
    if _show_status(fluctuations):
        st.bar_chart(_series_frame(fluctuations.data)[list(MATERIALS)])

    st.subheader("Price Forecast")
    price_forecast = materials["forecast"]
    if _show_status(price_forecast) and price_forecast.ok:
        st.line_chart(_series_frame(price_forecast.data)[list(MATERIALS)])
        st.caption("The last rows are projected from the average monthly change.")

    st.subheader("Raw Material Cost by Product")
    breakdown = materials["cost_breakdown"]
    if _show_status(breakdown):
        breakdown_df = _series_frame(breakdown.data, "product")
        st.bar_chart(breakdown_df[list(MATERIALS)])
        st.dataframe(breakdown_df, use_container_width=True)

    st.subheader("Purchase Timing")
    purchasing = snapshot["purchasing"]["recommendations"]
    if _show_status(purchasing):
        recs = purchasing.data["recommendations"]
        if recs:
            st.dataframe(pd.DataFrame(recs), use_container_width=True, hide_index=True)
            st.area_chart(
                pd.DataFrame(purchasing.data["savings_by_material"])
                .set_index("material")[["total_saving"]]
            )
        elif purchasing.ok and purchasing.message:
            st.info(purchasing.message)

# --- Tab 3: Insights ---
with tab_insights:
    col_demand, col_prices = st.columns(2)

    with col_demand:
        st.subheader("Demand Outlook")
        dinsight = snapshot["demand"]["insights"]
        if _show_status(dinsight) and dinsight.ok:
            d = dinsight.data
            st.metric(
                "Projected Demand",
                f"{d['future_demand']:,}",
                delta=f"{d['growth_pct']:+.1f}%",
            )
            st.markdown(f"**{d['interpretation']}**")
            st.write(d["planning"])
        elif dinsight.data:
            st.write(dinsight.data.get("planning", ""))

    with col_prices:
        st.subheader("Material Price Outlook")
        minsight = snapshot["materials"]["insights"]
        if _show_status(minsight) and minsight.ok:
            m = minsight.data
            st.metric("Average Price Trend", f"{m['avg_trend_pct']:+.1f}%")
            st.markdown(f"**{m['trend_summary']}**")
            st.write(
                f"Highest price: {m['highest_price']['material']} "
                f"({_money(m['highest_price']['price'])}). "
                f"Lowest price: {m['lowest_price']['material']} "
                f"({_money(m['lowest_price']['price'])})."
            )
            st.write(
                f"Most volatile: {m['most_volatile']['material']} "
                f"({m['most_volatile']['std_dev_pct']:.1f}%). "
                f"Most stable: {m['most_stable']['material']} "
                f"({m['most_stable']['std_dev_pct']:.1f}%)."
            )
            st.info(m["prediction"])

    st.divider()
    st.subheader("Purchase Advice")
    purchasing = snapshot["purchasing"]["recommendations"]
    if purchasing.ok and purchasing.data.get("top"):
        st.write(purchasing.data["timing_advice"])
        st.write(purchasing.data["bulk_advice"])
    else:
        st.info(purchasing.message or "Insufficient price data to make purchase recommendations.")

    st.divider()
    st.subheader("Customers at Risk")
    churn = snapshot["customers"]["churn_risk"]
    if _show_status(churn):
        churn_df = pd.DataFrame(churn.data)
        churn_df["risk_factors"] = churn_df["risk_factors"].apply(", ".join)
        st.dataframe(churn_df, use_container_width=True, hide_index=True)
    elif churn.ok:
        st.caption("No customers currently flagged.")
