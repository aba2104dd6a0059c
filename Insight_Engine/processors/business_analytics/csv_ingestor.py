"""
CSV Ingestor — Orders and material-price exports -> typed, immutable records.

Numeric columns are coerced with a zero fallback (no row is ever rejected
for a bad number). Structural problems (unreadable or empty file) raise
IngestionError for the upload widget to display.

Usage:
    ingestor = CsvIngestor()
    orders = ingestor.ingest_orders("data/orders.csv")
    prices = ingestor.ingest_material_prices(uploaded_file)
"""

from __future__ import annotations

import logging
import os
from typing import BinaryIO, Iterable, Union

import pandas as pd
from pydantic import BaseModel

from Insight_Engine.config import MATERIALS

from .core.cleaning import ORDER_NUMERIC_COLUMNS, clean_numeric
from .core.schemas import MaterialPriceRecord, OrderRecord

logger = logging.getLogger(__name__)

CsvSource = Union[str, BinaryIO]

REQUIRED_ORDER_COLUMNS = ["Customer ID", "Total Sale", "Date"]
REQUIRED_PRICE_COLUMNS = ["Date"]


class IngestionError(ValueError):
    """A source file could not be read or holds no rows."""


class CsvIngestor:
    """
    Reads the two dashboard exports, cleans numeric columns, and builds
    OrderRecord / MaterialPriceRecord tuples.
    """

    def __init__(self):
        self._file_info: list[dict] = []

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def ingest_orders(self, src: CsvSource) -> tuple[OrderRecord, ...]:
        """Parse an orders CSV into OrderRecords."""
        df = self._read(src, "orders", REQUIRED_ORDER_COLUMNS)
        cleaned = clean_numeric(df, ORDER_NUMERIC_COLUMNS)
        records = tuple(
            OrderRecord.model_validate(row) for row in cleaned.to_dict(orient="records")
        )
        logger.info("Ingested %d orders", len(records))
        return records

    def ingest_material_prices(self, src: CsvSource) -> tuple[MaterialPriceRecord, ...]:
        """Parse a material-price CSV into MaterialPriceRecords."""
        df = self._read(src, "materials", REQUIRED_PRICE_COLUMNS)
        cleaned = clean_numeric(df, list(MATERIALS))
        records = tuple(
            MaterialPriceRecord.model_validate(row) for row in cleaned.to_dict(orient="records")
        )
        logger.info("Ingested %d material price rows", len(records))
        return records

    @property
    def file_info(self) -> list[dict]:
        return self._file_info

    # ------------------------------------------------------------------
    # Internal: Read
    # ------------------------------------------------------------------

    def _read(self, src: CsvSource, label: str, required: list[str]) -> pd.DataFrame:
        """
        Read *src* (path or file-like object) as text columns.

        Missing required columns only log a warning: the records fall back
        to their defaults for those fields.
        """
        fname = os.path.basename(src) if isinstance(src, str) else getattr(src, "name", f"{label}.csv")

        try:
            df = pd.read_csv(src, dtype=str, keep_default_na=False, skipinitialspace=True)
        except pd.errors.EmptyDataError as exc:
            raise IngestionError(f"The {label} file appears to be empty") from exc
        except (OSError, UnicodeDecodeError, pd.errors.ParserError) as exc:
            raise IngestionError(f"Error parsing the {label} file: {exc}") from exc

        if df.empty:
            raise IngestionError(f"The {label} file appears to be empty")

        df.columns = [str(c).strip() for c in df.columns]
        missing = [c for c in required if c not in df.columns]
        if missing:
            logger.warning("%s: missing columns %s, defaulting them", fname, missing)

        self._file_info.append({
            "filename": fname,
            "dataset": label,
            "rows": len(df),
            "columns": len(df.columns),
        })
        return df


def export_csv(records: Iterable[BaseModel]) -> str:
    """
    Render records back to CSV text using the source column headers.

    Returns "" for an empty sequence.
    """
    rows = [r.model_dump(by_alias=True) for r in records]
    if not rows:
        return ""
    df = pd.DataFrame(rows)
    if "Return Requested" in df.columns:
        df["Return Requested"] = df["Return Requested"].map({True: "Yes", False: "No"})
    return df.to_csv(index=False)
