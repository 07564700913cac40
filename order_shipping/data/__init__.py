"""
Order Shipping Data

Reference data and loaders for rate cards and line items.

Structure:
    - reference/: Static reference data (rate card)
    - loaders in this module turn CSV files or LineItem sequences into
      DataFrames with the line schema below
"""

from pathlib import Path
from typing import Iterable

import polars as pl

from ..models import TRUE_STRINGS, LineItem, PricingConfig
from ..surcharges.base import to_utc_date
from .reference import KG_RATE, FRAGILE_FEE, SUNDAY_RATE


REFERENCE_DIR = Path(__file__).parent / "reference"

RATE_CARD_COLUMNS = ["kg_rate", "fragile_fee", "sunday_rate"]

LINE_SCHEMA = {
    "qty": pl.Int64,
    "weight_kg": pl.Float64,
    "fragile": pl.Boolean,
    "order_date": pl.Date,
}


# =============================================================================
# RATE CARD
# =============================================================================

def load_rate_card(path: Path | str | None = None) -> PricingConfig:
    """
    Load a rate card CSV into a PricingConfig.

    Args:
        path: CSV with columns kg_rate, fragile_fee, sunday_rate and exactly
              one row. Defaults to reference/rate_card.csv.

    Returns:
        PricingConfig built from the single row

    Raises:
        ValueError: If columns are missing, the row count is not 1, or a
                    rate is negative
    """
    path = Path(path) if path is not None else REFERENCE_DIR / "rate_card.csv"
    df = pl.read_csv(path)

    missing = [c for c in RATE_CARD_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Rate card {path} is missing columns: {', '.join(missing)}")
    if len(df) != 1:
        raise ValueError(f"Rate card {path} must have exactly one row, found {len(df)}")

    row = df.select(
        [pl.col(c).cast(pl.Float64) for c in RATE_CARD_COLUMNS]
    ).row(0, named=True)
    return PricingConfig(**row)


# =============================================================================
# LINE ITEMS
# =============================================================================

def line_items_frame(items: Iterable[LineItem | dict]) -> pl.DataFrame:
    """
    Convert line items into a DataFrame with LINE_SCHEMA.

    Mappings are accepted and go through LineItem.from_dict. Order dates are
    reduced to their UTC calendar date. Missing qty stays null so that
    validation can report it.
    """
    qty, weight_kg, fragile, order_date = [], [], [], []

    for item in items:
        if not isinstance(item, LineItem):
            item = LineItem.from_dict(item)
        qty.append(item.qty)
        weight_kg.append(float(item.weight_kg) if item.weight_kg is not None else None)
        fragile.append(bool(item.fragile))
        order_date.append(to_utc_date(item.order_date))

    return pl.DataFrame(
        {
            "qty": qty,
            "weight_kg": weight_kg,
            "fragile": fragile,
            "order_date": order_date,
        },
        schema=LINE_SCHEMA,
    )


def load_line_items(path: Path | str) -> pl.DataFrame:
    """
    Load line items from CSV.

    Expected columns: qty (required), weight_kg, fragile, order_date.
    Missing optional columns are left out; calculate_costs fills defaults.
    Empty cells become nulls. order_date accepts anything
    datetime.fromisoformat understands and is reduced to its UTC date.

    Returns:
        DataFrame with the present columns cast to LINE_SCHEMA dtypes
    """
    df = pl.read_csv(path, infer_schema_length=0)

    casts = []
    if "qty" in df.columns:
        casts.append(pl.col("qty").cast(pl.Int64))
    if "weight_kg" in df.columns:
        casts.append(pl.col("weight_kg").cast(pl.Float64))
    if "fragile" in df.columns:
        casts.append(
            pl.col("fragile")
            .str.strip_chars()
            .str.to_lowercase()
            .is_in(TRUE_STRINGS)
            .fill_null(False)
            .alias("fragile")
        )
    if "order_date" in df.columns:
        casts.append(
            pl.col("order_date")
            .map_elements(to_utc_date, return_dtype=pl.Date)
            .alias("order_date")
        )

    return df.with_columns(casts) if casts else df


__all__ = [
    # Loaders
    "load_rate_card",
    "load_line_items",
    "line_items_frame",
    "REFERENCE_DIR",
    "LINE_SCHEMA",
    # Reference rate card
    "KG_RATE",
    "FRAGILE_FEE",
    "SUNDAY_RATE",
]
