"""
Fragile Handling Surcharge (FRAGILE)

Covers the extra packing for breakable items. Charged once per fragile line,
never scaled by quantity.
"""

import polars as pl
from .base import Surcharge, LINE


class FRAGILE(Surcharge):
    """
    Fragile Handling Surcharge

    Triggers on every chargeable line flagged fragile.
    Full fragile_fee per line, independent of qty.
    """

    name = "FRAGILE"
    rate_field = "fragile_fee"
    scope = LINE

    @classmethod
    def conditions(cls) -> pl.Expr:
        return pl.col("fragile") & pl.col("is_chargeable")
