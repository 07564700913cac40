"""Static reference data (rate card)."""

from .rates import KG_RATE, FRAGILE_FEE, SUNDAY_RATE

__all__ = ["KG_RATE", "FRAGILE_FEE", "SUNDAY_RATE"]
