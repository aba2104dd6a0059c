"""
Session State — Immutable store of the two datasets.

One writer (the ingestor / upload widget) replaces a dataset wholesale;
many readers (metrics, dashboard) receive the store as a parameter.

    store = DataStore()
    store = store.set_orders(records)          # new store, old one untouched
    store = store.clear()

Derived computations are memoized on the *identity* of their source tuple,
so a metric reruns only when its dataset reference actually changes.
"""

from __future__ import annotations

import functools
import logging
from typing import Any, Callable, Iterable

from pydantic import BaseModel, ConfigDict

from Insight_Engine.processors.business_analytics.core.schemas import (
    MaterialPriceRecord,
    OrderRecord,
)

logger = logging.getLogger(__name__)


class DataStore(BaseModel):
    """Immutable snapshot of the session's orders and material prices."""

    model_config = ConfigDict(frozen=True)

    orders: tuple[OrderRecord, ...] = ()
    material_prices: tuple[MaterialPriceRecord, ...] = ()

    def set_orders(self, orders: Iterable[OrderRecord]) -> "DataStore":
        records = tuple(orders)
        logger.info("Orders replaced: %d records", len(records))
        return self.model_copy(update={"orders": records})

    def set_material_prices(self, prices: Iterable[MaterialPriceRecord]) -> "DataStore":
        records = tuple(prices)
        logger.info("Material prices replaced: %d records", len(records))
        return self.model_copy(update={"material_prices": records})

    def clear_orders(self) -> "DataStore":
        return self.model_copy(update={"orders": ()})

    def clear_material_prices(self) -> "DataStore":
        return self.model_copy(update={"material_prices": ()})

    def clear(self) -> "DataStore":
        logger.info("Session cleared")
        return DataStore()

    @property
    def has_orders(self) -> bool:
        return len(self.orders) > 0

    @property
    def has_material_prices(self) -> bool:
        return len(self.material_prices) > 0


_MISSING = object()


def memoize_on_identity(func: Callable[..., Any]) -> Callable[..., Any]:
    """
    Cache the last result of ``func(source, *args, **kwargs)``.

    The first argument is compared by identity (``is``); the remaining
    arguments by equality. A new source reference always recomputes.
    """
    cache: dict[str, Any] = {"source": _MISSING, "rest": None, "result": None}

    @functools.wraps(func)
    def wrapper(source, *args, **kwargs):
        rest = (args, kwargs)
        if cache["source"] is source and cache["rest"] == rest:
            return cache["result"]
        result = func(source, *args, **kwargs)
        # Holding the source keeps its id from being reused by a new object
        cache.update(source=source, rest=rest, result=result)
        return result

    def cache_clear() -> None:
        cache.update(source=_MISSING, rest=None, result=None)

    wrapper.cache_clear = cache_clear
    return wrapper
