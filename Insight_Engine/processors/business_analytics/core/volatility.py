"""
Volatility & Trend — Percent changes, dispersion, and local price minima.

Pure functions over plain lists; NumPy only for the standard deviation.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from .cleaning import to_number


def percent_change(prev: float, curr: float) -> float:
    """(curr - prev) / prev * 100, or 0 when prev is not positive."""
    return (curr - prev) / prev * 100 if prev > 0 else 0.0


def percent_deltas(
    series: Sequence[dict],
    fields: Sequence[str],
    period_field: str = "period",
) -> list[dict]:
    """
    Period-over-period percent change for every field.

    One output row per consecutive pair, labelled with the later period:
        [{"period": "2023-02-01", "Cement": 1.72, "Sand": 3.33, ...}, ...]
    """
    rows: list[dict] = []
    for prev, curr in zip(series, series[1:]):
        row = {period_field: curr.get(period_field)}
        for field in fields:
            row[field] = percent_change(to_number(prev.get(field)), to_number(curr.get(field)))
        rows.append(row)
    return rows


def standard_deviation(values: Sequence[float]) -> float:
    """Population standard deviation (ddof=0). Empty input -> 0.0."""
    if len(values) == 0:
        return 0.0
    return float(np.std(np.asarray(values, dtype=float)))


def volatility_ranking(
    series: Sequence[dict],
    fields: Sequence[str],
) -> list[dict]:
    """
    Rank fields from most to least volatile.

    Volatility is the population std-dev of the percent changes, using only
    pairs whose previous value is positive.

    Returns:
        [{"key": "Sand", "value": 2.41, "count": 11}, ...]   # most volatile first
    """
    ranking: list[dict] = []
    for field in fields:
        values = [to_number(p.get(field)) for p in series]
        changes = [
            (curr - prev) / prev * 100
            for prev, curr in zip(values, values[1:])
            if prev > 0
        ]
        ranking.append({
            "key": field,
            "value": standard_deviation(changes),
            "count": len(changes),
        })
    ranking.sort(key=lambda r: r["value"], reverse=True)
    return ranking


def minima_indices(values: Sequence[float]) -> list[int]:
    """Indexes i (1 <= i <= n-2) lower than both neighbours, in series order."""
    return [
        i for i in range(1, len(values) - 1)
        if values[i] < values[i - 1] and values[i] < values[i + 1]
    ]


def local_minima(
    values: Sequence[float],
    labels: Sequence | None = None,
) -> list[dict]:
    """
    Strict local minima of a numeric series, ranked by saving vs. the mean.

    A point i (1 <= i <= n-2) qualifies when it is lower than both
    neighbours. ``saving = mean(values) - values[i]``; only positive savings
    are kept.

    Returns:
        [{"index": 3, "label": "2023-04-01", "value": 70.0, "saving": 18.0}, ...]
    """
    if len(values) < 3:
        return []

    mean = sum(values) / len(values)
    minima: list[dict] = []
    for i in minima_indices(values):
        saving = mean - values[i]
        if saving > 0:
            minima.append({
                "index": i,
                "label": labels[i] if labels is not None else i,
                "value": values[i],
                "saving": saving,
            })

    minima.sort(key=lambda m: m["saving"], reverse=True)
    return minima
