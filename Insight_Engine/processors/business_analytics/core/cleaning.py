"""
Cleaning — Numeric coercion and date helpers shared by every metric.

Rules:
    - A numeric field that fails to parse becomes 0 (never NaN, never raised).
    - A date field that fails to parse becomes None; callers drop the point.

All pure Pandas logic.
"""

from __future__ import annotations

import math
from datetime import datetime

import pandas as pd


# Columns the orders CSV exports as numbers (possibly with ₹ / commas)
ORDER_NUMERIC_COLUMNS = [
    "Total Sale", "Quantity", "Shipping Cost", "Tax",
    "Delivery Time (days)", "Review Score", "Raw Materials Cost (INR)",
]

MONTH_FORMAT = "%Y-%m"
DAY_FORMAT = "%Y-%m-%d"


def to_number(value) -> float:
    """
    Coerce a single value to float with a zero fallback.

    Strips currency symbols and thousands separators first, so
    "₹1,200" and "$1,200" both become 1200.0.
    """
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return 0.0
        return number if math.isfinite(number) else 0.0

    text = str(value).strip().replace(",", "").lstrip("₹$")
    try:
        number = float(text)
    except ValueError:
        return 0.0
    return number if math.isfinite(number) else 0.0


def clean_numeric(df: pd.DataFrame, columns: list[str] | None = None) -> pd.DataFrame:
    """
    Strip '₹', '$' and ',' from the given columns, convert to numeric, fill errors with 0.

    Args:
        df:      Input DataFrame (not mutated).
        columns: Column names to clean. Defaults to ORDER_NUMERIC_COLUMNS.

    Returns:
        A new DataFrame with cleaned numeric columns.
    """
    out = df.copy()
    targets = columns if columns is not None else ORDER_NUMERIC_COLUMNS

    for col in targets:
        if col in out.columns:
            out[col] = pd.to_numeric(
                out[col].astype(str).str.replace(r"[₹\$,\s]", "", regex=True),
                errors="coerce",
            ).fillna(0)
    return out


def parse_date(value) -> datetime | None:
    """Parse an ISO-like date string. Returns None instead of raising."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    try:
        parsed = pd.to_datetime(value, errors="coerce")
    except (TypeError, ValueError, OverflowError):
        return None
    if pd.isna(parsed):
        return None
    return parsed.to_pydatetime()


def month_key(value) -> str | None:
    """'2023-01-15' -> '2023-01'. None when the date does not parse."""
    parsed = parse_date(value)
    return parsed.strftime(MONTH_FORMAT) if parsed is not None else None


def add_months(key: str, months: int, fmt: str = MONTH_FORMAT) -> str | None:
    """
    Advance a period key by a number of calendar months.

    Example:
        add_months('2023-11', 2)                  -> '2024-01'
        add_months('2023-01-31', 1, DAY_FORMAT)   -> '2023-02-28'
    """
    parsed = parse_date(key)
    if parsed is None:
        return None
    shifted = pd.Timestamp(parsed) + pd.DateOffset(months=months)
    return shifted.strftime(fmt)


def sort_timestamp(value) -> float:
    """Sort key for chronological ordering; unparseable dates sort last."""
    parsed = parse_date(value)
    return parsed.timestamp() if parsed is not None else math.inf


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(math.floor(abs(value) + 0.5)) * (1 if value >= 0 else -1)
