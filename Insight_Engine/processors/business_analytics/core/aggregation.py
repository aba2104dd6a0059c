"""
Aggregation — Generic group-by / reduce over record sequences.

Every grouped series in the dashboard (revenue by month, orders by status,
delivery time by region, ...) is one call to group_and_reduce with a key
extractor and an accumulator. Groups keep first-seen order unless the caller
asks for an explicit sort.
"""

from __future__ import annotations

import copy
from typing import Any, Callable, Iterable, Optional


def _initial_value(initial: Any) -> Any:
    if callable(initial):
        return initial()
    # Mutable seeds (dicts, lists) must not be shared between groups
    return copy.deepcopy(initial)


def group_and_reduce(
    records: Iterable[Any],
    key_fn: Callable[[Any], Optional[str]],
    reduce_fn: Callable[[Any, Any], Any],
    initial: Any = 0.0,
    sort_by: str | None = None,
    descending: bool = False,
    limit: int | None = None,
) -> list[dict]:
    """
    Group *records* by ``key_fn`` and fold each group with ``reduce_fn``.

    Args:
        records:    Any finite iterable, possibly empty.
        key_fn:     record -> group key. Returning None drops the record.
        reduce_fn:  (accumulator, record) -> new accumulator.
        initial:    Seed accumulator, or a zero-arg factory for one.
        sort_by:    None (first-seen order), "key" (lexical) or "value".
        descending: Sort direction when sort_by is given.
        limit:      Keep only the first N groups after sorting.

    Returns:
        [{"key": ..., "value": ..., "count": n}, ...]
    """
    groups: dict[str, dict] = {}

    for record in records:
        key = key_fn(record)
        if key is None:
            continue
        entry = groups.get(key)
        if entry is None:
            entry = {"key": key, "value": _initial_value(initial), "count": 0}
            groups[key] = entry
        entry["value"] = reduce_fn(entry["value"], record)
        entry["count"] += 1

    return _order_rows(list(groups.values()), sort_by, descending, limit)


def sum_by(
    records: Iterable[Any],
    key_fn: Callable[[Any], Optional[str]],
    value_fn: Callable[[Any], float],
    **sort_kwargs,
) -> list[dict]:
    """Sum ``value_fn`` per group."""
    return group_and_reduce(
        records, key_fn, lambda acc, r: acc + value_fn(r), 0.0, **sort_kwargs
    )


def count_by(
    records: Iterable[Any],
    key_fn: Callable[[Any], Optional[str]],
    **sort_kwargs,
) -> list[dict]:
    """Count records per group."""
    return group_and_reduce(records, key_fn, lambda acc, _r: acc + 1, 0, **sort_kwargs)


def average_by(
    records: Iterable[Any],
    key_fn: Callable[[Any], Optional[str]],
    value_fn: Callable[[Any], float],
    sort_by: str | None = None,
    descending: bool = False,
    limit: int | None = None,
) -> list[dict]:
    """
    Average ``value_fn`` per group. A zero-count group averages to 0.

    Sorting happens on the average, not on the running sum.
    """
    totals = group_and_reduce(records, key_fn, lambda acc, r: acc + value_fn(r), 0.0)
    rows = [
        {
            "key": row["key"],
            "value": row["value"] / row["count"] if row["count"] else 0.0,
            "count": row["count"],
        }
        for row in totals
    ]
    return _order_rows(rows, sort_by, descending, limit)


# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------

def _order_rows(
    rows: list[dict],
    sort_by: str | None,
    descending: bool,
    limit: int | None,
) -> list[dict]:
    """Apply the caller's explicit sort contract, then top-N truncation."""
    if sort_by in ("key", "value"):
        rows.sort(key=lambda r: r[sort_by], reverse=descending)
    elif sort_by is not None:
        raise ValueError(f"sort_by must be 'key', 'value' or None, got {sort_by!r}")

    if limit is not None:
        rows = rows[:limit]
    return rows
