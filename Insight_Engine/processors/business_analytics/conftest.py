"""Shared fixtures for the business analytics tests."""

import pytest

from Insight_Engine.config import AnalyticsSettings
from Insight_Engine.processors.business_analytics.core.schemas import MaterialPriceRecord, OrderRecord
from Insight_Engine.processors.business_analytics.factories import make_order, make_price


@pytest.fixture
def cfg() -> AnalyticsSettings:
    return AnalyticsSettings()


@pytest.fixture
def quarterly_orders() -> tuple[OrderRecord, ...]:
    """Three customers across Jan to Mar 2023."""
    return (
        make_order(order_id="O-1", customer_id="C-1", date="2023-01-05", total_sale=1000, quantity=1000,
                   region="North", raw_materials_cost=300, raw_materials_used="Cement, Sand"),
        make_order(order_id="O-2", customer_id="C-2", customer_name="Vikram Infra", date="2023-02-10",
                   total_sale=2500, quantity=1100, region="South", customer_type="Returning",
                   product="M30 Concrete", raw_materials_cost=900, raw_materials_used="Cement, Gravel, Water"),
        make_order(order_id="O-3", customer_id="C-1", date="2023-03-20", total_sale=7200, quantity=1210,
                   region="North", customer_type="Returning", return_requested="Yes",
                   delivery_time_days=6, raw_materials_cost=2000, raw_materials_used="Cement, Sand"),
    )


@pytest.fixture
def price_history() -> tuple[MaterialPriceRecord, ...]:
    """Twelve monthly price rows, deliberately out of order."""
    cement = [300, 290, 305, 280, 295, 310, 300, 285, 300, 315, 320, 330]
    rows = [
        make_price(
            f"2023-{month:02d}-01",
            cement=price,
            sand=60 + month,
            gravel=45,
            fly_ash=120 - month,
            water=15,
            admixture=490 + month % 3,
        )
        for month, price in zip(range(1, 13), cement)
    ]
    return tuple(reversed(rows))
