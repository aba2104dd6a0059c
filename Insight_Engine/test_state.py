"""
Tests — DataStore immutability and identity memoization.
"""

import pytest
from pydantic import ValidationError

from Insight_Engine.processors.business_analytics.factories import make_order, make_price
from Insight_Engine.state import DataStore, memoize_on_identity


def test_setters_return_new_stores():
    empty = DataStore()
    orders = [make_order(), make_order(order_id="O-2")]

    loaded = empty.set_orders(orders)
    assert loaded is not empty
    assert empty.orders == ()
    assert isinstance(loaded.orders, tuple)
    assert len(loaded.orders) == 2
    assert loaded.has_orders and not loaded.has_material_prices

    priced = loaded.set_material_prices([make_price("2023-01-01", cement=300)])
    assert priced.orders is loaded.orders
    assert priced.has_material_prices


def test_clear_resets_both_datasets():
    store = DataStore().set_orders([make_order()]).set_material_prices([make_price("2023-01-01")])
    assert store.clear_orders().has_material_prices
    assert not store.clear_material_prices().has_material_prices

    cleared = store.clear()
    assert cleared.orders == () and cleared.material_prices == ()


def test_store_is_frozen():
    store = DataStore()
    with pytest.raises(ValidationError):
        store.orders = (make_order(),)


def test_memoize_on_identity_reuses_until_reference_changes():
    calls = []

    @memoize_on_identity
    def total(records, factor=1):
        calls.append(1)
        return sum(records) * factor

    data = (1, 2, 3)
    assert total(data) == 6
    assert total(data) == 6
    assert len(calls) == 1

    # Equal but distinct tuple -> recompute
    assert total(tuple([1, 2, 3])) == 6
    assert len(calls) == 2

    assert total(tuple([1, 2, 3]), factor=2) == 12
    assert len(calls) == 3

    same = tuple([1, 2, 3])
    total(same)
    total.cache_clear()
    total(same)
    assert len(calls) == 5
