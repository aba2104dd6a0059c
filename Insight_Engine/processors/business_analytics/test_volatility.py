"""
Tests — Percent deltas, standard deviation and local price minima.
"""

import pytest

from Insight_Engine.processors.business_analytics.core.volatility import (
    local_minima,
    minima_indices,
    percent_change,
    percent_deltas,
    standard_deviation,
    volatility_ranking,
)


def test_minima_detection_uses_strict_neighbours():
    assert minima_indices([100, 90, 95, 70, 85]) == [1, 3]
    # Ties are not minima
    assert minima_indices([100, 90, 90, 95]) == []


def test_local_minima_keep_only_positive_savings():
    values = [100, 90, 95, 70, 85]
    minima = local_minima(values, labels=["d0", "d1", "d2", "d3", "d4"])

    # Mean is 88: index 1 (90) is a minimum but sits above the mean
    assert [m["index"] for m in minima] == [3]
    assert minima[0]["label"] == "d3"
    assert minima[0]["saving"] == pytest.approx(18.0)


def test_local_minima_indices_within_bounds_and_sorted():
    values = [50, 10, 60, 20, 70, 5, 80, 30, 90]
    minima = local_minima(values)
    assert minima
    assert all(1 <= m["index"] <= len(values) - 2 for m in minima)
    assert all(m["saving"] > 0 for m in minima)
    savings = [m["saving"] for m in minima]
    assert savings == sorted(savings, reverse=True)


def test_short_series_has_no_minima():
    assert local_minima([5, 1]) == []


def test_constant_series_has_zero_deltas():
    series = [{"period": f"2023-0{m}", "Cement": 300.0, "Sand": 60.0} for m in range(1, 6)]
    deltas = percent_deltas(series, ["Cement", "Sand"])
    assert len(deltas) == 4
    assert all(row["Cement"] == 0.0 and row["Sand"] == 0.0 for row in deltas)
    assert deltas[0]["period"] == "2023-02"


def test_percent_change_guards_non_positive_previous():
    assert percent_change(0, 50) == 0.0
    assert percent_change(200, 250) == pytest.approx(25.0)


def test_standard_deviation_is_population():
    assert standard_deviation([2, 4, 4, 4, 5, 5, 7, 9]) == pytest.approx(2.0)
    assert standard_deviation([]) == 0.0


def test_volatility_ranking_orders_most_volatile_first():
    series = [
        {"Cement": 100, "Water": 10},
        {"Cement": 101, "Water": 20},
        {"Cement": 100, "Water": 10},
        {"Cement": 101, "Water": 20},
    ]
    ranking = volatility_ranking(series, ["Cement", "Water"])
    assert [r["key"] for r in ranking] == ["Water", "Cement"]
    assert ranking[0]["count"] == 3
