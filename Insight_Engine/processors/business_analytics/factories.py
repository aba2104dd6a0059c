"""
Record factories for tests and ad-hoc sessions.

    make_order(total_sale=2500, date="2023-02-10")
    make_price("2023-01-01", cement=300, sand=60)
"""

from .core.schemas import MaterialPriceRecord, OrderRecord


def make_order(**fields) -> OrderRecord:
    """OrderRecord with sensible defaults; override any field by its snake_case name."""
    base = {
        "order_id": "O-1",
        "customer_id": "C-1",
        "customer_name": "Asha Builders",
        "product": "M25 Concrete",
        "region": "North",
        "total_sale": 1000.0,
        "quantity": 10,
        "date": "2023-01-15",
        "status": "Delivered",
        "customer_type": "New",
        "review_score": 4.0,
        "delivery_time_days": 3,
    }
    base.update(fields)
    return OrderRecord(**base)


def make_price(date: str, **prices) -> MaterialPriceRecord:
    """MaterialPriceRecord for one date; unspecified materials default to 0."""
    return MaterialPriceRecord(date=date, **prices)
