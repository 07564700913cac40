"""
Reference Rate Card

Mirrors reference/rate_card.csv. Rates are in the order currency unit.
Last updated: 2025-07-21
"""

KG_RATE = 2.00        # per kg, per unit
FRAGILE_FEE = 5.00    # once per fragile line
SUNDAY_RATE = 10.00   # once per Sunday-dated order
