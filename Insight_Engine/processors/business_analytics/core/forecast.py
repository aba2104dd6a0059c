"""
Forecast — Trailing-window extrapolation for period series.

Two modes, kept deliberately separate:

    MULTIPLICATIVE  mean fractional growth, compounded:  last * (1 + rate) ** i
                    Used for single-metric quantity series (demand).
    ADDITIVE        mean absolute delta per dimension:   max(0, last + delta * i)
                    Used for the multi-material price series.

Unifying them would change the numbers the dashboard has always shown.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Sequence

from .cleaning import MONTH_FORMAT, add_months, parse_date, to_number

logger = logging.getLogger(__name__)


class ForecastMode(str, Enum):
    MULTIPLICATIVE = "multiplicative"
    ADDITIVE = "additive"


def growth_rate(values: Sequence[float]) -> float:
    """
    Mean period-over-period fractional growth.

    Pairs with a non-positive previous value are skipped; the mean is taken
    over the valid pairs only. No valid pair -> 0.0.
    """
    total = 0.0
    valid = 0
    for prev, curr in zip(values, values[1:]):
        if prev > 0:
            total += (curr - prev) / prev
            valid += 1
    return total / valid if valid else 0.0


def mean_delta(values: Sequence[float]) -> float:
    """Mean absolute change between consecutive values (0.0 below two points)."""
    if len(values) < 2:
        return 0.0
    return sum(curr - prev for prev, curr in zip(values, values[1:])) / (len(values) - 1)


def project_forward(
    series: Sequence[dict],
    value_fields: Sequence[str] = ("value",),
    window_size: int = 6,
    horizon: int = 6,
    mode: ForecastMode = ForecastMode.MULTIPLICATIVE,
    min_points: int = 3,
    period_field: str = "period",
    period_format: str = MONTH_FORMAT,
) -> list[dict]:
    """
    Extend *series* with ``horizon`` projected points.

    Args:
        series:        Chronologically sorted points, each a dict holding
                       ``period_field`` and every name in ``value_fields``.
        value_fields:  Dimensions to project.
        window_size:   Trailing points used to estimate growth / delta.
        horizon:       Number of future months to emit.
        mode:          ForecastMode.MULTIPLICATIVE or ForecastMode.ADDITIVE.
        min_points:    Below this many window points the input is returned as-is.
        period_field:  Key holding the period label.
        period_format: strftime format of the projected period labels.

    Returns:
        The input points followed by the projections. Projected points carry
        ``"is_forecast": True``. On any date problem only the input comes back.
    """
    history = list(series)
    window = history[-window_size:] if window_size > 0 else []

    if len(window) < min_points:
        return history

    last_key = window[-1].get(period_field)
    if parse_date(last_key) is None:
        logger.warning("Forecast skipped: last period %r is not a date", last_key)
        return history

    mode = ForecastMode(mode)
    columns = {
        field: [to_number(p.get(field)) for p in window] for field in value_fields
    }
    if mode == ForecastMode.MULTIPLICATIVE:
        steps = {field: growth_rate(vals) for field, vals in columns.items()}
    else:
        steps = {field: mean_delta(vals) for field, vals in columns.items()}

    projections: list[dict] = []
    try:
        for i in range(1, horizon + 1):
            point: dict = {
                period_field: add_months(last_key, i, period_format),
                "is_forecast": True,
            }
            for field, step in steps.items():
                last_value = columns[field][-1]
                if mode == ForecastMode.MULTIPLICATIVE:
                    point[field] = last_value * (1 + step) ** i
                else:
                    point[field] = max(0.0, last_value + step * i)
            projections.append(point)
    except (OverflowError, ValueError) as exc:
        logger.warning("Forecast skipped: %s", exc)
        return history

    return history + projections
