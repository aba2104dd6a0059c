"""
Configuration — domain constants and analytics policy.

Every threshold the metric modules use lives in AnalyticsSettings so a
policy change never touches algorithm code. Values can be overridden from
the environment (prefix INSIGHT_) or a local .env file:

    INSIGHT_BAND_WIDTH=10000
    INSIGHT_DEMAND_HORIZON=3
"""

from pydantic_settings import BaseSettings, SettingsConfigDict

# --- DOMAIN ---
MATERIALS = ("Cement", "Sand", "Gravel", "Fly Ash", "Water", "Admixture")
CURRENCY_SYMBOL = "₹"


class AnalyticsSettings(BaseSettings):
    """Analytics policy loaded from environment variables."""

    # Price-band profitability
    BAND_WIDTH: float = 5000.0
    BAND_MIDPOINT_OFFSET: float = 2500.0
    TOP_BANDS: int = 3

    # Demand forecast (multiplicative)
    DEMAND_WINDOW: int = 6
    DEMAND_HORIZON: int = 6
    DEMAND_MIN_POINTS: int = 3

    # Material price forecast (additive)
    PRICE_WINDOW: int = 12
    PRICE_HORIZON: int = 6
    PRICE_MIN_POINTS: int = 10

    # Churn heuristics
    CHURN_VALUE_RATIO: float = 0.8
    LOW_REVIEW_SCORE: float = 2.0
    LOW_REVIEW_SHARE: float = 0.3
    RETURN_YES_VALUES: list[str] = ["yes", "y", "true", "1"]

    # Purchase timing
    PURCHASE_MIN_OBSERVATIONS: int = 10
    PURCHASE_MIN_POINTS: int = 3
    TOP_SAVINGS: int = 3

    # Rankings
    TOP_PRODUCTS: int = 5
    TOP_BREAKDOWN: int = 5

    # Narrative thresholds (percent)
    TREND_THRESHOLD_PCT: float = 5.0
    OUTLOOK_SIGNIFICANT_PCT: float = 10.0

    # Logging
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="INSIGHT_",
        env_file=".env",
        extra="ignore",
        case_sensitive=True,
    )


# Create settings instance
settings = AnalyticsSettings()
