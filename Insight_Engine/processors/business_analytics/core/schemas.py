"""
Pydantic schemas for the two source datasets.

Both records accept either the CSV header names ("Total Sale") or the
snake_case field names (total_sale). Numeric fields never fail validation:
anything that does not parse as a number becomes 0.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from Insight_Engine.config import MATERIALS, settings

from .cleaning import to_number


class OrderRecord(BaseModel):
    """One parsed row of the orders export."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    order_id: str = Field("", alias="Order ID")
    customer_id: str = Field("", alias="Customer ID")
    customer_name: str = Field("", alias="Customer Name")
    product: str = Field("", alias="Product")
    category: str = Field("", alias="Category")
    size: str = Field("", alias="Size")
    location: str = Field("", alias="Location")
    region: str = Field("", alias="Region")
    total_sale: float = Field(0.0, alias="Total Sale")
    quantity: int = Field(0, alias="Quantity")
    payment_method: str = Field("", alias="Payment Method")
    date: str = Field("", alias="Date")
    status: str = Field("", alias="Status")
    customer_type: str = Field("", alias="Customer Type")
    order_source: str = Field("", alias="Order Source")
    discount_applied: str = Field("", alias="Discount Applied")
    shipping_cost: float = Field(0.0, alias="Shipping Cost")
    tax: float = Field(0.0, alias="Tax")
    delivery_time_days: float = Field(0.0, alias="Delivery Time (days)")
    employee_assigned: str = Field("", alias="Employee Assigned")
    return_requested: bool = Field(False, alias="Return Requested")
    review_score: float = Field(0.0, alias="Review Score")
    feedback: str = Field("", alias="Feedback")
    raw_materials_used: str = Field("", alias="Raw Materials Used")
    raw_materials_cost: float = Field(0.0, alias="Raw Materials Cost (INR)")

    @field_validator(
        "total_sale", "shipping_cost", "tax", "delivery_time_days",
        "review_score", "raw_materials_cost",
        mode="before",
    )
    @classmethod
    def coerce_number(cls, v: Any) -> float:
        return to_number(v)

    @field_validator("quantity", mode="before")
    @classmethod
    def coerce_quantity(cls, v: Any) -> int:
        return int(to_number(v))

    @field_validator("return_requested", mode="before")
    @classmethod
    def coerce_flag(cls, v: Any) -> bool:
        """'Yes' / 'true' / 1 -> True, anything else -> False."""
        if isinstance(v, bool):
            return v
        return str(v).strip().lower() in settings.RETURN_YES_VALUES

    @field_validator(
        "order_id", "customer_id", "customer_name", "product", "category",
        "size", "location", "region", "payment_method", "date", "status",
        "customer_type", "order_source", "discount_applied",
        "employee_assigned", "feedback", "raw_materials_used",
        mode="before",
    )
    @classmethod
    def coerce_text(cls, v: Any) -> str:
        if v is None:
            return ""
        # pandas hands missing cells over as NaN floats
        if isinstance(v, float) and v != v:
            return ""
        return str(v).strip()

    @property
    def profit(self) -> float:
        """Simplified profit: sale minus materials, shipping and tax."""
        return self.total_sale - self.raw_materials_cost - self.shipping_cost - self.tax

    @property
    def materials(self) -> list[str]:
        """Parsed 'Raw Materials Used' list (empty when blank)."""
        if not self.raw_materials_used:
            return []
        return [m.strip() for m in self.raw_materials_used.split(",")]


class MaterialPriceRecord(BaseModel):
    """One day of raw-material prices."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    date: str = Field("", alias="Date")
    cement: float = Field(0.0, alias="Cement")
    sand: float = Field(0.0, alias="Sand")
    gravel: float = Field(0.0, alias="Gravel")
    fly_ash: float = Field(0.0, alias="Fly Ash")
    water: float = Field(0.0, alias="Water")
    admixture: float = Field(0.0, alias="Admixture")

    @field_validator("cement", "sand", "gravel", "fly_ash", "water", "admixture", mode="before")
    @classmethod
    def coerce_price(cls, v: Any) -> float:
        return to_number(v)

    @field_validator("date", mode="before")
    @classmethod
    def coerce_date(cls, v: Any) -> str:
        if v is None or (isinstance(v, float) and v != v):
            return ""
        return str(v).strip()

    def price_of(self, material: str) -> float:
        """Look up a price by display name ('Fly Ash') -> 0.0 for unknown names."""
        return float(getattr(self, _MATERIAL_FIELDS.get(material, ""), 0.0) or 0.0)

    def prices(self) -> dict[str, float]:
        """{display name: price} in MATERIALS order."""
        return {m: self.price_of(m) for m in MATERIALS}


_MATERIAL_FIELDS = {
    "Cement": "cement",
    "Sand": "sand",
    "Gravel": "gravel",
    "Fly Ash": "fly_ash",
    "Water": "water",
    "Admixture": "admixture",
}
