"""
Sunday Surcharge (SUNDAY)

Fixed fee for orders dated on a Sunday. Charged at most once per order, no
matter how many lines carry a Sunday date.
"""

import polars as pl
from .base import Surcharge, ORDER


class SUNDAY(Surcharge):
    """
    Sunday Surcharge (order level)

    Triggers when any chargeable line is dated on a Sunday (UTC).
    Lines with qty = 0 never trigger it, even when Sunday-dated.
    """

    name = "SUNDAY"
    rate_field = "sunday_rate"
    scope = ORDER
    depends_on = "is_sunday"

    @classmethod
    def conditions(cls) -> pl.Expr:
        return pl.col("is_sunday") & pl.col("is_chargeable")
