"""
Order Shipping Cost Calculator

Turns an order's line items into a single shipping charge:

    weight      qty * weight_kg * kg_rate for every chargeable line
    FRAGILE     fragile_fee once per chargeable fragile line
    SUNDAY      sunday_rate once per order with a Sunday-dated chargeable line

A chargeable line has qty > 0. Lines with qty = 0 are placeholders and never
add to the total. Any line with a missing qty or a negative qty/weight_kg
(or NaN) voids the whole order (see order_shipping.errors).

Two entry points share these rules:

    compute_shipping_cost(items, pricing)
        Sequence of LineItem (or dicts) in, rounded total out. Validation
        and pricing share one pass over the lines.

    calculate_costs(df, pricing) / calculate_order(df, pricing)
        DataFrame in, DataFrame (or OrderCost) out. Vectorised with polars
        for large baskets.

INPUT COLUMNS (DataFrame)
-------------------------
    qty           - Units on the line (required)
    weight_kg     - Per-unit weight (optional, null = 0)
    fragile       - Fragile flag (optional, null = False)
    order_date    - Date or Datetime, Sunday test in UTC (optional)

OUTPUT COLUMNS ADDED
--------------------
    supplement_lines() adds:
        - is_chargeable, is_sunday

    calculate() adds:
        - cost_weight
        - surcharge_* flags (fragile, sunday)
        - cost_* amounts for line surcharges (fragile)
        - cost_line, calculator_version

USAGE
-----
    from order_shipping.calculate_costs import compute_shipping_cost
    total = compute_shipping_cost(items, PricingConfig(kg_rate=2))
"""

from datetime import date
from typing import Sequence

import polars as pl

from .errors import MissingQuantity, NegativeValue
from .models import LineItem, OrderCost, PricingConfig, as_flag
from .surcharges import (
    FRAGILE,
    SUNDAY,
    LINE_SURCHARGES,
    ORDER_SURCHARGES,
    SUNDAY_WEEKDAY,
    on_sunday,
    to_utc_date,
)
from .version import VERSION


# =============================================================================
# SEQUENCE API
# =============================================================================

def compute_shipping_cost(
    items: Sequence[LineItem | dict],
    pricing: PricingConfig
) -> float:
    """
    Calculate the shipping cost of one order.

    Validation and pricing share a single pass over the lines. Any invalid
    line raises before a total is produced, so a partial total never
    escapes. Order dates are resolved on every line that carries one,
    including qty = 0 lines.

    Args:
        items: Line items in order sequence (LineItem or dicts)
        pricing: Rate card for this call

    Returns:
        Total rounded to two decimals. An empty order costs 0.

    Raises:
        MissingQuantity: A line has no qty
        NegativeValue: A line has a qty or weight_kg that is not >= 0
                       (negative or NaN)
        ValueError, TypeError: A line has an unreadable order_date
    """
    weighted_kg = 0.0
    fragile_lines = 0
    has_sunday = False

    for index, line in enumerate(items):
        if isinstance(line, dict):
            qty = line.get("qty")
            weight = line.get("weight_kg", line.get("weightKg"))
            fragile = as_flag(line.get("fragile", False))
            order_date = line.get("order_date", line.get("orderDate"))
        else:
            qty = line.qty
            weight = line.weight_kg
            fragile = line.fragile
            order_date = line.order_date

        if qty is None:
            raise MissingQuantity(index)
        if not qty >= 0:
            raise NegativeValue(index, "qty")
        if weight is not None and not weight >= 0:
            raise NegativeValue(index, "weight_kg")
        day = None if order_date is None else _order_day(index, order_date)

        if not qty:
            continue

        if weight:
            weighted_kg += qty * weight
        if fragile:
            fragile_lines += 1
        if day is not None and day.weekday() == SUNDAY_WEEKDAY:
            has_sunday = True

    total = weighted_kg * pricing.kg_rate + fragile_lines * FRAGILE.cost(pricing)
    if has_sunday:
        total += SUNDAY.cost(pricing)

    return round(total, 2)


def _order_day(index: int, value) -> date:
    """UTC calendar date of a line's order_date, naming the line on failure."""
    try:
        return to_utc_date(value)
    except (TypeError, ValueError) as e:
        raise type(e)(f"line {index}: invalid order_date {value!r}") from e


# =============================================================================
# MAIN ENTRY POINT (DataFrame)
# =============================================================================

def calculate_costs(df: pl.DataFrame, pricing: PricingConfig) -> pl.DataFrame:
    """
    Calculate line-level shipping costs for a line item DataFrame.

    Takes raw line items and returns the same DataFrame with all calculation
    columns appended. The order-scoped SUNDAY surcharge is only flagged here;
    use calculate_order for the order total.

    Args:
        df: Line item DataFrame (see module docstring)
        pricing: Rate card for this call

    Returns:
        DataFrame with supplemented data, surcharge flags, and costs
    """
    validate_lines(df)
    df = supplement_lines(df)
    df = calculate(df, pricing)
    return df


def calculate_order(df: pl.DataFrame, pricing: PricingConfig) -> OrderCost:
    """
    Calculate the order-level cost breakdown.

    Args:
        df: Line item DataFrame (see module docstring)
        pricing: Rate card for this call

    Returns:
        OrderCost with weight, fragile and Sunday components and the
        total rounded to two decimals
    """
    lines = calculate_costs(df, pricing)

    summary = lines.select([
        pl.len().alias("line_count"),
        pl.col("is_chargeable").sum().alias("chargeable_lines"),
        pl.col(FRAGILE.flag_col()).sum().alias("fragile_lines"),
        pl.col("cost_weight").sum().alias("cost_weight"),
        pl.col(FRAGILE.cost_col()).sum().alias("cost_fragile"),
        pl.col("cost_line").sum().alias("cost_lines"),
        pl.col(SUNDAY.flag_col()).any().alias("sunday_surcharge"),
    ]).row(0, named=True)

    sunday_surcharge = bool(summary["sunday_surcharge"])
    cost_sunday = SUNDAY.cost(pricing) if sunday_surcharge else 0.0

    return OrderCost(
        line_count=summary["line_count"],
        chargeable_lines=summary["chargeable_lines"] or 0,
        fragile_lines=summary["fragile_lines"] or 0,
        sunday_surcharge=sunday_surcharge,
        cost_weight=round(summary["cost_weight"] or 0.0, 2),
        cost_fragile=round(summary["cost_fragile"] or 0.0, 2),
        cost_sunday=round(cost_sunday, 2),
        cost_total=round((summary["cost_lines"] or 0.0) + cost_sunday, 2),
        calculator_version=VERSION,
    )


# =============================================================================
# VALIDATE LINES
# =============================================================================

def validate_lines(df: pl.DataFrame) -> None:
    """
    Validate a line item DataFrame before anything is priced.

    Same rules and ordering as compute_shipping_cost: the first offending
    row wins; within a row, missing qty beats negative qty beats negative
    weight_kg. NaN counts as negative.

    Raises:
        MissingQuantity: qty column absent (non-empty frame) or null
        NegativeValue: qty or weight_kg below zero or NaN
    """
    if len(df) == 0:
        return
    if "qty" not in df.columns:
        raise MissingQuantity(0)

    checks = [
        pl.col("qty").is_null().arg_true().first().alias("missing_qty"),
        _is_negative("qty").arg_true().first().alias("negative_qty"),
    ]
    if "weight_kg" in df.columns:
        checks.append(
            _is_negative("weight_kg").arg_true().first().alias("negative_weight_kg")
        )

    first = df.select(checks).row(0, named=True)

    # (row, rank within row, error)
    failures = []
    if first["missing_qty"] is not None:
        failures.append((first["missing_qty"], 0, MissingQuantity(first["missing_qty"])))
    if first["negative_qty"] is not None:
        failures.append((first["negative_qty"], 1, NegativeValue(first["negative_qty"], "qty")))
    if first.get("negative_weight_kg") is not None:
        row = first["negative_weight_kg"]
        failures.append((row, 2, NegativeValue(row, "weight_kg")))

    if failures:
        raise min(failures, key=lambda f: (f[0], f[1]))[2]


def _is_negative(column: str) -> pl.Expr:
    value = pl.col(column).cast(pl.Float64)
    return ((value < 0) | value.is_nan()).fill_null(False)


# =============================================================================
# SUPPLEMENT LINES
# =============================================================================

def supplement_lines(df: pl.DataFrame) -> pl.DataFrame:
    """
    Fill defaults for optional columns and add line classification.

    Args:
        df: Validated line item DataFrame

    Returns:
        DataFrame with weight_kg, fragile present and added columns:
            - is_chargeable (qty > 0)
            - is_sunday (order_date on a Sunday in UTC)
    """
    if "qty" not in df.columns:
        # only reachable for empty frames
        df = df.with_columns(pl.Series("qty", [], dtype=pl.Int64))

    df = _fill_defaults(df)

    if "order_date" in df.columns:
        sunday = on_sunday("order_date", df.schema["order_date"])
    else:
        sunday = pl.lit(False)

    return df.with_columns([
        (pl.col("qty") > 0).fill_null(False).alias("is_chargeable"),
        sunday.alias("is_sunday"),
    ])


def _fill_defaults(df: pl.DataFrame) -> pl.DataFrame:
    """Missing weight_kg counts as 0, missing fragile as False."""
    if "weight_kg" in df.columns:
        weight = pl.col("weight_kg").cast(pl.Float64).fill_null(0.0)
    else:
        weight = pl.lit(0.0, dtype=pl.Float64)

    if "fragile" in df.columns:
        fragile = pl.col("fragile").cast(pl.Boolean).fill_null(False)
    else:
        fragile = pl.lit(False)

    return df.with_columns([
        weight.alias("weight_kg"),
        fragile.alias("fragile"),
    ])


# =============================================================================
# CALCULATE COSTS
# =============================================================================

def calculate(df: pl.DataFrame, pricing: PricingConfig) -> pl.DataFrame:
    """
    Calculate line costs for supplemented lines.

    Args:
        df: Supplemented line item DataFrame from supplement_lines
        pricing: Rate card for this call

    Returns:
        DataFrame with weight cost, surcharge flags, costs and line totals

    Processing order:
        1. Weight charge          - chargeable lines only
        2. LINE surcharges        - flag and cost per line
        3. ORDER surcharges       - flag per line, costed once in calculate_order
    """
    df = _calculate_weight(df, pricing)
    df = _apply_line_surcharges(df, LINE_SURCHARGES, pricing)
    df = _flag_order_surcharges(df, ORDER_SURCHARGES)
    df = _calculate_line_total(df)
    df = _stamp_version(df)
    return df


def _calculate_weight(df: pl.DataFrame, pricing: PricingConfig) -> pl.DataFrame:
    """Weight charge = qty * weight_kg * kg_rate on chargeable lines."""
    return df.with_columns(
        pl.when(pl.col("is_chargeable"))
        .then(pl.col("qty") * pl.col("weight_kg") * pl.lit(float(pricing.kg_rate)))
        .otherwise(pl.lit(0.0))
        .alias("cost_weight")
    )


def _apply_line_surcharges(
    df: pl.DataFrame,
    surcharges: list,
    pricing: PricingConfig
) -> pl.DataFrame:
    """Flag and cost each line surcharge independently."""
    for surcharge in surcharges:
        flag_col = surcharge.flag_col()
        df = df.with_columns(surcharge.conditions().fill_null(False).alias(flag_col))
        df = df.with_columns(
            pl.when(pl.col(flag_col))
            .then(pl.lit(surcharge.cost(pricing)))
            .otherwise(pl.lit(0.0))
            .alias(surcharge.cost_col())
        )
    return df


def _flag_order_surcharges(df: pl.DataFrame, surcharges: list) -> pl.DataFrame:
    """Flag lines that trigger order surcharges; cost is applied per order."""
    return df.with_columns([
        s.conditions().fill_null(False).alias(s.flag_col()) for s in surcharges
    ])


def _calculate_line_total(df: pl.DataFrame) -> pl.DataFrame:
    """cost_line = weight charge plus all line surcharge costs."""
    cost_cols = ["cost_weight"] + [s.cost_col() for s in LINE_SURCHARGES]
    return df.with_columns(pl.sum_horizontal(cost_cols).alias("cost_line"))


def _stamp_version(df: pl.DataFrame) -> pl.DataFrame:
    """Stamp calculator version on output."""
    return df.with_columns(pl.lit(VERSION).alias("calculator_version"))


__all__ = [
    "compute_shipping_cost",
    "calculate_costs",
    "calculate_order",
    "validate_lines",
    "supplement_lines",
    "calculate",
]
