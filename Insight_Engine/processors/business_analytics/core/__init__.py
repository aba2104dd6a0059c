"""
Core utilities for the business analytics processor.

Modules:
    cleaning     — Zero-fallback numeric coercion, date / month helpers
    schemas      — OrderRecord and MaterialPriceRecord
    results      — ComputationResult contract + @computation boundary
    aggregation  — group_and_reduce and its sum / count / average helpers
    forecast     — Multiplicative and additive trailing-window projection
    volatility   — Percent deltas, std-dev, local minima
    samples      — Placeholder series for empty datasets
"""
