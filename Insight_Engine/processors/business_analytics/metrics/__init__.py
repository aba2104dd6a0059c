"""
Metrics — Pure-function business-logic modules for the business analytics processor.

Each function returns a ComputationResult. No UI, no side effects.

Modules:
    summary     — Headline totals (revenue, orders, customers, material cost)
    sales       — Monthly / regional revenue, customer mix, status, top products
    demand      — Monthly quantity with multiplicative forecast
    pricing     — Price-band margins and per-product profit
    materials   — Price trends, fluctuations, additive forecast, cost breakdown
    purchasing  — Local-minima purchase timing
    customers   — Churn-risk flags
    operations  — Delivery time by region
"""
