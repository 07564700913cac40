"""
Order Surcharges Package

Exports all surcharge classes and processing groups.

Processing Order:
    1. LINE  - charged on every line that triggers
    2. ORDER - flagged per line, charged at most once per order

Usage:
    from order_shipping.surcharges import ALL, LINE_SURCHARGES, ORDER_SURCHARGES
"""

from dataclasses import fields

from ..models import PricingConfig
from .base import (
    Surcharge,
    LINE,
    ORDER,
    SUNDAY_WEEKDAY,
    to_utc_date,
    is_sunday,
    on_sunday,
)
from .fragile import FRAGILE
from .sunday import SUNDAY


ALL: list[type[Surcharge]] = [FRAGILE, SUNDAY]


# =============================================================================
# PROCESSING GROUPS
# =============================================================================

LINE_SURCHARGES = [s for s in ALL if s.scope == LINE]
ORDER_SURCHARGES = [s for s in ALL if s.scope == ORDER]


# =============================================================================
# VALIDATION
# =============================================================================

SUPPLEMENTED_COLUMNS = {"is_chargeable", "is_sunday"}


def validate_surcharges() -> None:
    """
    Validate surcharge configuration integrity.

    Raises ValueError if any configuration issues are found.
    Called at import time to fail fast on configuration errors.
    """
    rate_fields = {f.name for f in fields(PricingConfig)}
    seen = set()
    errors = []

    for s in ALL:
        if s.name in seen:
            errors.append(f"{s.name}: duplicate surcharge name")
        seen.add(s.name)

        if s.scope not in (LINE, ORDER):
            errors.append(f"{s.name}: unknown scope '{s.scope}'")

        if s.rate_field not in rate_fields:
            errors.append(f"{s.name}: rate_field '{s.rate_field}' not found in PricingConfig")

        if s.depends_on is not None and s.depends_on not in SUPPLEMENTED_COLUMNS:
            errors.append(f"{s.name}: depends_on '{s.depends_on}' is not a supplemented column")

    if errors:
        raise ValueError("Surcharge configuration errors:\n  " + "\n  ".join(errors))


# Run validation at import time
validate_surcharges()

__all__ = [
    # Base
    "Surcharge",
    "LINE",
    "ORDER",
    "SUNDAY_WEEKDAY",
    "to_utc_date",
    "is_sunday",
    "on_sunday",
    # Surcharge classes
    "FRAGILE",
    "SUNDAY",
    # Lists
    "ALL",
    "LINE_SURCHARGES",
    "ORDER_SURCHARGES",
    # Validation
    "validate_surcharges",
]
