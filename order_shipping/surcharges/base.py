"""
Surcharge Base Class

Shared base class and calendar helpers for order surcharges.
"""

from abc import ABC
from datetime import date, datetime, timezone

import polars as pl


SUNDAY_WEEKDAY = 6  # datetime.weekday()
ISO_SUNDAY = 7      # Expr.dt.weekday() is ISO, Monday = 1

LINE = "line"
ORDER = "order"


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def to_utc_date(value) -> date | None:
    """
    Reduce an order date to its calendar date in UTC.

    CONVENTION
    ----------
        date             - used as-is
        naive datetime   - treated as UTC
        aware datetime   - converted to UTC first
        str              - parsed with datetime.fromisoformat, then as above

    Args:
        value: date, datetime, ISO-8601 string or None

    Returns:
        The UTC calendar date, or None when no date is given
    """
    if value is None:
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    if isinstance(value, date):
        return value
    raise TypeError(f"order_date must be a date, datetime or ISO string, got {type(value).__name__}")


def is_sunday(value) -> bool:
    """True if the order date falls on a Sunday (UTC)."""
    day = to_utc_date(value)
    return day is not None and day.weekday() == SUNDAY_WEEKDAY


def on_sunday(date_col: str, dtype: pl.DataType) -> pl.Expr:
    """
    Polars expression for "date column falls on a Sunday (UTC)".

    Follows the same convention as to_utc_date. Nulls evaluate to False.

    Args:
        date_col: Column name containing the order date
        dtype: Schema dtype of that column

    Returns:
        Boolean polars expression
    """
    if dtype == pl.Null:
        # all-null column, keeps the column length
        return pl.col(date_col).is_not_null()

    col = pl.col(date_col)
    if isinstance(dtype, pl.Datetime):
        if dtype.time_zone is not None:
            col = col.dt.convert_time_zone("UTC")
    elif dtype != pl.Date:
        raise TypeError(f"{date_col} must be a Date or Datetime column, got {dtype}")

    return (col.dt.weekday() == ISO_SUNDAY).fill_null(False)


# =============================================================================
# BASE CLASS
# =============================================================================

class Surcharge(ABC):
    """
    Base class for all surcharges.

    Attributes:
        IDENTITY
            name        - Short code (e.g., "FRAGILE", "SUNDAY")

        PRICING
            rate_field  - PricingConfig attribute holding the fee
            scope       - "line": charged on every line that triggers
                          "order": charged at most once per order

        DEPENDENCIES
            depends_on  - Supplemented column the surcharge requires
    """

    # -------------------------------------------------------------------------
    # IDENTITY
    # -------------------------------------------------------------------------
    name: str

    # -------------------------------------------------------------------------
    # PRICING
    # -------------------------------------------------------------------------
    rate_field: str
    scope: str = LINE

    # -------------------------------------------------------------------------
    # DEPENDENCIES
    # -------------------------------------------------------------------------
    depends_on: str | None = None

    # -------------------------------------------------------------------------
    # METHODS
    # -------------------------------------------------------------------------

    @classmethod
    def flag_col(cls) -> str:
        return f"surcharge_{cls.name.lower()}"

    @classmethod
    def cost_col(cls) -> str:
        return f"cost_{cls.name.lower()}"

    @classmethod
    def cost(cls, pricing) -> float:
        """Fee taken from the caller's rate card."""
        return float(getattr(pricing, cls.rate_field))

    @classmethod
    def conditions(cls) -> pl.Expr:
        """
        Polars expression for when this surcharge triggers.

        Default applies to every chargeable line.
        """
        return pl.col("is_chargeable")
